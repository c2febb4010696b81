# commands.py
"""Queue of device instructions per greenhouse.

A command is ``pending`` (executed=0) until a device acknowledges it,
then ``executed`` (executed=1) for good. Every device polling the same
greenhouse sees the same pending set.
"""
from flask import current_app

from auth import is_owner_or_role
from errors import Forbidden


class CommandQueue:

    def __init__(self, store):
        self.store = store

    def enqueue(self, greenhouse_id, device, action, requester):
        greenhouse = self.store.get_greenhouse(greenhouse_id)
        if not is_owner_or_role(greenhouse, requester):
            raise Forbidden("Forbidden")
        command = self.store.add_command(greenhouse.id, device, action)
        current_app.logger.info("Queued command %s %s:%s for greenhouse %s",
                                command.id, device, action, greenhouse.id)
        return command

    def list_pending(self, greenhouse_id):
        """Pending commands, oldest first."""
        return self.store.pending_commands(greenhouse_id)

    def acknowledge(self, command_id):
        # Unknown ids and already executed commands are not errors.
        updated = self.store.mark_executed(command_id)
        current_app.logger.info("Acknowledged command %s (%d row(s))", command_id, updated)
        return updated

# store.py
"""Database access for the greenhouse app.

One GreenhouseStore is created per application and handed to the views
and to the command queue; nothing else talks to ``db.session`` directly.
Every call is its own statement (or commit), there is no transaction
spanning several calls.
"""
import functools

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import StorageError, ValidationError
from models import (
    db, User, Plant, Greenhouse, SensorReading, Issue, ControlCommand,
    READING_FIELDS,
)


def storage_op(func):
    """Roll back and raise StorageError when SQLAlchemy fails."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.exception("Store operation %s failed", func.__name__)
            raise StorageError(str(e)) from e
    return wrapper


class GreenhouseStore:

    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    # ---- users ----

    @storage_op
    def create_user(self, username, password_hash, role):
        try:
            return self._save(User(username=username, password=password_hash, role=role))
        except IntegrityError as e:
            self.session.rollback()
            raise ValidationError("Username already exists") from e

    @storage_op
    def get_user(self, user_id):
        return self.session.get(User, user_id)

    @storage_op
    def find_user(self, username):
        return User.query.filter_by(username=username).first()

    # ---- plants / greenhouses ----

    @storage_op
    def list_plants(self):
        return Plant.query.order_by(Plant.id).all()

    @storage_op
    def get_plant(self, plant_id):
        return self.session.get(Plant, plant_id)

    @storage_op
    def add_greenhouse(self, name, owner_id, plant_id=None):
        return self._save(Greenhouse(name=name, owner_id=owner_id, plant_id=plant_id))

    @storage_op
    def get_greenhouse(self, greenhouse_id):
        return self.session.get(Greenhouse, greenhouse_id)

    @storage_op
    def greenhouses_for(self, owner_id):
        return Greenhouse.query.filter_by(owner_id=owner_id).order_by(Greenhouse.id).all()

    # ---- sensor readings ----

    @storage_op
    def add_reading(self, greenhouse_id, values):
        fields = {name: values.get(name) for name in READING_FIELDS}
        return self._save(SensorReading(greenhouse_id=greenhouse_id, **fields))

    @storage_op
    def recent_readings(self, greenhouse_id, limit=20):
        return (SensorReading.query
                .filter_by(greenhouse_id=greenhouse_id)
                .order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
                .limit(limit)
                .all())

    # ---- control commands ----

    @storage_op
    def add_command(self, greenhouse_id, device, action):
        return self._save(ControlCommand(
            greenhouse_id=greenhouse_id, device=device, action=action, executed=0))

    @storage_op
    def pending_commands(self, greenhouse_id):
        return (ControlCommand.query
                .filter_by(greenhouse_id=greenhouse_id, executed=0)
                .order_by(ControlCommand.timestamp.asc(), ControlCommand.id.asc())
                .all())

    @storage_op
    def mark_executed(self, command_id):
        count = (ControlCommand.query
                 .filter_by(id=command_id)
                 .update({"executed": 1}, synchronize_session=False))
        self.session.commit()
        return count

    # ---- issues ----

    @storage_op
    def add_issue(self, greenhouse_id, description):
        return self._save(Issue(greenhouse_id=greenhouse_id, description=description, resolved=0))

    @storage_op
    def unresolved_issues(self):
        return Issue.query.filter_by(resolved=0).order_by(Issue.id).all()

    @storage_op
    def resolve_issue(self, issue_id):
        count = Issue.query.filter_by(id=issue_id).update({"resolved": 1}, synchronize_session=False)
        self.session.commit()
        return count


def get_store():
    return current_app.extensions["greenhouse_store"]

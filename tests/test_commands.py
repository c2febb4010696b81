import pytest
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from commands import CommandQueue
from errors import Forbidden, StorageError
from models import ControlCommand
from store import GreenhouseStore


@pytest.fixture()
def owners(store):
    alice = store.create_user("alice", generate_password_hash("pw"), "farmer")
    bob = store.create_user("bob", generate_password_hash("pw"), "farmer")
    gh = store.add_greenhouse("GH1", alice.id)
    return alice, bob, gh


def test_enqueue_by_owner_is_pending(store, owners):
    alice, _, gh = owners
    queue = CommandQueue(store)

    cmd = queue.enqueue(gh.id, "pump", "on", alice)

    assert cmd.executed == 0
    assert [c.id for c in queue.list_pending(gh.id)] == [cmd.id]


def test_enqueue_by_non_owner_is_forbidden(store, owners):
    _, bob, gh = owners
    queue = CommandQueue(store)

    with pytest.raises(Forbidden):
        queue.enqueue(gh.id, "pump", "on", bob)
    assert ControlCommand.query.count() == 0


def test_enqueue_unknown_greenhouse_is_forbidden(store, owners):
    alice, _, _ = owners
    with pytest.raises(Forbidden):
        CommandQueue(store).enqueue(999, "fan", "off", alice)


def test_technician_cannot_enqueue_for_someone_else(store, owners):
    _, _, gh = owners
    tech = store.create_user("tess", generate_password_hash("pw"), "technician")
    with pytest.raises(Forbidden):
        CommandQueue(store).enqueue(gh.id, "fan", "off", tech)


def test_list_pending_is_oldest_first(store, owners):
    alice, _, gh = owners
    queue = CommandQueue(store)
    ids = [queue.enqueue(gh.id, "valve", str(n), alice).id for n in range(4)]

    pending = queue.list_pending(gh.id)

    assert [c.id for c in pending] == ids
    stamps = [c.timestamp for c in pending]
    assert stamps == sorted(stamps)


def test_list_pending_is_scoped_to_greenhouse(store, owners):
    alice, _, gh = owners
    other = store.add_greenhouse("GH2", alice.id)
    queue = CommandQueue(store)
    queue.enqueue(gh.id, "pump", "on", alice)
    queue.enqueue(other.id, "fan", "on", alice)

    assert [c.device for c in queue.list_pending(other.id)] == ["fan"]


def test_acknowledged_command_leaves_pending_set(store, owners):
    alice, _, gh = owners
    queue = CommandQueue(store)
    first = queue.enqueue(gh.id, "pump", "on", alice)
    second = queue.enqueue(gh.id, "pump", "off", alice)

    queue.acknowledge(first.id)

    assert [c.id for c in queue.list_pending(gh.id)] == [second.id]


def test_acknowledge_is_idempotent(store, owners):
    alice, _, gh = owners
    queue = CommandQueue(store)
    cmd = queue.enqueue(gh.id, "pump", "on", alice)

    assert queue.acknowledge(cmd.id) == 1
    assert queue.acknowledge(cmd.id) == 1
    assert store.session.get(ControlCommand, cmd.id).executed == 1
    assert queue.list_pending(gh.id) == []


def test_acknowledge_unknown_command_is_noop(store):
    assert CommandQueue(store).acknowledge(12345) == 0


def test_enqueue_write_failure_raises_storage_error(store, owners, monkeypatch):
    alice, _, gh = owners
    queue = CommandQueue(store)

    def failing_save(self, obj):
        self.session.add(obj)
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(GreenhouseStore, "_save", failing_save)
    with pytest.raises(StorageError):
        queue.enqueue(gh.id, "pump", "on", alice)
    assert not store.session.new

    monkeypatch.undo()
    cmd = queue.enqueue(gh.id, "pump", "on", alice)
    assert [c.id for c in queue.list_pending(gh.id)] == [cmd.id]
    assert ControlCommand.query.count() == 1

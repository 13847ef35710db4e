"""
Tests for the PID sentinel stores.
"""
import threading

import pytest

from aios_supervisor.state import FileStateStore, MemoryStateStore, SupervisorState


@pytest.fixture
def store(tmp_path):
    return FileStateStore(tmp_path / "run" / "aios-daemon.pid")


def test_missing_sentinel_loads_as_none(store):
    assert store.load() is None


def test_save_writes_bare_pid(store):
    store.save(SupervisorState(process_id=31337))

    assert store.pid_file.read_text() == "31337"
    assert store.load() == SupervisorState(process_id=31337)
    assert not store.pid_file.with_name("aios-daemon.pid.tmp").exists()


def test_save_overwrites_previous_record(store):
    store.save(SupervisorState(process_id=1))
    store.save(SupervisorState(process_id=2))

    assert store.load().process_id == 2


def test_pid_written_by_shell_redirect_is_accepted(store):
    store.pid_file.parent.mkdir(parents=True)
    store.pid_file.write_text("4242\n")

    assert store.load().process_id == 4242


@pytest.mark.parametrize("content", ["", "not-a-pid", "-5", "0"])
def test_garbage_sentinel_loads_without_pid(store, content):
    store.pid_file.parent.mkdir(parents=True)
    store.pid_file.write_text(content)

    assert store.load() == SupervisorState(process_id=None)


def test_binary_sentinel_loads_without_pid(store):
    store.pid_file.parent.mkdir(parents=True)
    store.pid_file.write_bytes(b"\xff\xfe12")

    assert store.load() == SupervisorState(process_id=None)


def test_save_refuses_empty_state(store):
    with pytest.raises(ValueError):
        store.save(SupervisorState())


def test_clear_is_idempotent(store):
    store.save(SupervisorState(process_id=7))
    store.clear()
    store.clear()

    assert store.load() is None
    assert store.location.endswith("aios-daemon.pid")


def test_file_lock_serializes_holders(store):
    order = []
    entered = threading.Event()
    release = threading.Event()

    def holder():
        with store.lock():
            order.append("first-in")
            entered.set()
            release.wait(5)
            order.append("first-out")

    def waiter():
        with store.lock():
            order.append("second-in")

    t1 = threading.Thread(target=holder)
    t1.start()
    entered.wait(5)
    t2 = threading.Thread(target=waiter)
    t2.start()
    t2.join(0.2)
    release.set()
    t1.join()
    t2.join()

    assert order == ["first-in", "first-out", "second-in"]
    assert store.lock_file.exists()


def test_memory_store_roundtrip():
    store = MemoryStateStore()
    store.save(SupervisorState(process_id=5))

    assert store.load().process_id == 5
    store.clear()
    assert store.load() is None

import pytest

from compact_sheet.config import SheetSettings
from compact_sheet.errors import CommitRejected
from compact_sheet.models.actor import ActorData
from compact_sheet.scheduling import DelayedTasks, Scheduler
from compact_sheet.services.lock_registry import LockRegistry


# Manual clock standing in for the event loop's timers
class FakeHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler(Scheduler):
    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback):
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [
                h for h in self.handles
                if not h.cancelled and not h.fired and h.when <= target + 1e-9
            ]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = max(self.now, handle.when)
            handle.fired = True
            handle.callback()
        self.now = target


class RecordingCommit:
    def __init__(self, reject=False):
        self.calls = []
        self.reject = reject

    async def __call__(self, path, value):
        self.calls.append((path, value))
        if self.reject:
            raise CommitRejected(path, value, "actor is read-only")


class RecordingView:
    def __init__(self):
        self.renders = 0
        self.closes = 0

    def render(self):
        self.renders += 1

    def close(self):
        self.closes += 1


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def tasks(scheduler):
    return DelayedTasks(scheduler)


@pytest.fixture
def commit():
    return RecordingCommit()


@pytest.fixture
def rejecting_commit():
    return RecordingCommit(reject=True)


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def registry():
    return LockRegistry()


@pytest.fixture
def settings():
    return SheetSettings()


@pytest.fixture
def actor_record():
    return {
        "_id": "actor-1",
        "name": "Elara",
        "limited": False,
        "abilities": {"int": {"mod": 4}, "wis": {"mod": 2}},
        "attributes": {"prof": 3, "spellcasting": "int", "spelldc": 15},
        "bonuses": {
            "msak": {"attack": ""},
            "rsak": {"attack": ""},
            "spell": {"dc": ""},
        },
        "details": {"level": 5},
        "spells": {
            "pact": {"max": 0, "value": 0},
            "spell1": {"max": 4, "value": 2},
            "spell2": {"max": 3, "value": 3},
            "spell3": {"max": 2, "value": 0},
            "spell4": {"max": 0, "value": 0},
        },
        # Host fields the sheet never reads
        "currency": {"gp": 12},
        "skills": {"arc": {"value": 1}},
    }


@pytest.fixture
def actor(actor_record):
    return ActorData.model_validate(actor_record)

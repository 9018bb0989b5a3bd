import pytest

from starbind import EventCodec, EventRouter, PatchBatch


class RecordingSink:
    """Collects every update a page sends."""

    def __init__(self):
        self.updates = []

    def __call__(self, update):
        self.updates.append(update)

    @property
    def last(self):
        return self.updates[-1]


class Recorder:
    """Update callback for a bare BindingManager."""

    def __init__(self):
        self.batches = []

    def __call__(self, batch: PatchBatch):
        self.batches.append(batch)


@pytest.fixture
def codec():
    return EventCodec()


@pytest.fixture
def router(codec):
    return EventRouter(codec)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def recorder():
    return Recorder()

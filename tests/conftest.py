import pytest

from filter_logging.config import StreamLoggingConfig, set_default_config


class RecordingSink:
    """Sink that records every log call, optionally into a shared event list"""

    def __init__(self, events=None):
        self.calls = []
        self.events = events if events is not None else []

    def log(self, level, msg, *args):
        self.calls.append((level, msg, args))
        self.events.append(("log", msg, args))


@pytest.fixture(autouse=True)
def default_config():
    set_default_config(StreamLoggingConfig())
    yield
    set_default_config(StreamLoggingConfig())


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_sink():
    return RecordingSink


@pytest.fixture
def events():
    return []


@pytest.fixture
def shared_sink(events):
    return RecordingSink(events)


@pytest.fixture
def is_even():
    return lambda n: n % 2 == 0

import pytest

from avatar_capture.rig import RecordingSink

from tests.helpers import CountingRigSource, FakeClock, make_session


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def rig_source():
    return CountingRigSource()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def five_frame_session():
    return make_session([0.0, 0.1, 0.2, 0.3, 0.4])

import pytest

from avatar_capture.errors import SinkRejected
from avatar_capture.playback import dispatch_frame, frame_channels
from avatar_capture.rig import RecordingSink

from tests.helpers import make_frame


class FailingSink(RecordingSink):
    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def push(self, channel, value, timestamp):
        if channel == self.fail_on:
            raise RuntimeError("smoothing buffer full")
        super().push(channel, value, timestamp)


def test_dispatch_order_and_timestamp(sink):
    frame = make_frame(0.5, value=2.0)
    pushed = dispatch_frame(frame, sink)

    channels = sink.channels()
    assert pushed == len(sink.records) == 10 + 16 + 16 + 5
    assert channels[0] == "pose.neckRotation"
    assert channels[9] == "pose.leftHandPosition"
    assert channels[10] == "rightHand.wristRotation"
    assert channels[26] == "leftHand.wristRotation"
    assert channels[42:] == ["face.mouthOpen", "face.leftEyeIris", "face.rightEyeIris",
                             "face.leftEyeOpen", "face.rightEyeOpen"]
    assert {timestamp for _, _, timestamp in sink.records} == {0.5}
    assert sink.latest["pose.neckRotation"] == (2.0, 2.0, 2.0)


def test_leg_rotations_only_when_enabled(sink):
    frame = make_frame(0.0, legs=True)

    dispatch_frame(frame, sink)
    assert "pose.rightUpperLegRotation" not in sink.channels()

    sink.clear()
    dispatch_frame(frame, sink, use_leg_rotation=True)
    channels = sink.channels()
    assert channels[10:14] == ["pose.rightUpperLegRotation", "pose.rightLowerLegRotation",
                               "pose.leftUpperLegRotation", "pose.leftLowerLegRotation"]


def test_leg_setting_without_leg_data_pushes_nothing_extra(sink):
    assert dispatch_frame(make_frame(0.0), sink, use_leg_rotation=True) == 47


def test_sink_failure_aborts_remaining_fields():
    sink = FailingSink(fail_on="leftHand.wristRotation")
    with pytest.raises(SinkRejected) as excinfo:
        dispatch_frame(make_frame(1.5), sink)

    assert excinfo.value.channel == "leftHand.wristRotation"
    assert excinfo.value.timestamp == 1.5
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert len(sink.records) == 26
    assert not any(channel.startswith("face.") for channel in sink.channels())


def test_frame_channels_matches_dispatch(sink):
    frame = make_frame(0.0)
    dispatch_frame(frame, sink)
    assert [channel for channel, _ in frame_channels(frame)] == sink.channels()

"""
avatar_capture - Motion capture record/playback engine for avatar rigs.

This package samples live pose, hand and face values from a rig at a fixed
rate, stores them as timestamped sessions in JSON files and replays those
sessions into a rig with variable speed, pause/resume and seeking.

Main classes:
    - CaptureController: Fixed-rate capture from a RigSource
    - PlaybackScheduler: Time-synchronized replay into a RigSink
    - AvatarRecorder: Command surface tying capture, persistence and playback
    - Session: Immutable captured frame sequence

Example usage:
    from avatar_capture import AvatarRecorder, RecorderConfig, run

    recorder = AvatarRecorder(source, sink, RecorderConfig(capture_rate=30))

    # Record
    recorder.start_capture()
    run(recorder, frequency=60, should_continue=lambda: not done())
    recorder.stop_capture()
    path = recorder.save_capture()

    # Play back at double speed
    recorder.load(path)
    recorder.set_speed(2.0)
    recorder.play()
    run(recorder, frequency=60)
"""

from .capture import CaptureController
from .config import RecorderConfig, load_config
from .errors import (
    AlreadyCapturing,
    AvatarCaptureError,
    EmptyCapture,
    InconsistentFrameCount,
    InvalidSpeed,
    MalformedDocument,
    NoSessionLoaded,
    SessionIOError,
    SinkRejected,
)
from .frames import AvatarFrame, FaceFrame, HandFrame, PoseFrame, Session
from .playback import PlaybackScheduler, PlaybackState, dispatch_frame
from .recorder import AvatarRecorder, run
from .rig import BoneQuaternionSource, QuaternionSink, RecordingSink, RigSink, RigSource
from .session import deserialize, load_session, save_session, serialize

__version__ = "0.1.0"
__all__ = [
    "AlreadyCapturing",
    "AvatarCaptureError",
    "AvatarFrame",
    "AvatarRecorder",
    "BoneQuaternionSource",
    "CaptureController",
    "EmptyCapture",
    "FaceFrame",
    "HandFrame",
    "InconsistentFrameCount",
    "InvalidSpeed",
    "MalformedDocument",
    "NoSessionLoaded",
    "PlaybackScheduler",
    "PlaybackState",
    "PoseFrame",
    "QuaternionSink",
    "RecorderConfig",
    "RecordingSink",
    "RigSink",
    "RigSource",
    "Session",
    "SessionIOError",
    "SinkRejected",
    "deserialize",
    "dispatch_frame",
    "load_config",
    "load_session",
    "run",
    "save_session",
    "serialize",
]

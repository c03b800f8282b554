"""
Rig endpoints consumed by capture and playback.

    - RigSource: live values read during capture
    - RigSink: named-field writer used during playback
    - RecordingSink: in-memory sink
    - QuaternionSink: converts rotation channels to (w, x, y, z) quaternions
    - BoneQuaternionSource: rig source fed with streamed quaternions
"""

from .rig_interfaces import (
    ROTATION_CHANNELS,
    BoneQuaternionSource,
    QuaternionSink,
    RecordingSink,
    RigSink,
    RigSource,
)

__all__ = [
    "ROTATION_CHANNELS",
    "BoneQuaternionSource",
    "QuaternionSink",
    "RecordingSink",
    "RigSink",
    "RigSource",
]

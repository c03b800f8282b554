"""
Rig Source / Rig Sink interfaces and adapters.

The capture controller reads live values from a RigSource; the frame
dispatcher writes recorded values into a RigSink. Both are keyed by the
wire field names of the frame model ("neckRotation", "wristRotation",
"mouthOpen", ...).
"""

import threading
from typing import Any, Dict, List, Mapping, Protocol, Tuple, runtime_checkable

import numpy as np

from ..frames import FRAME_PARTS, value_fields
from ..utils.rotation_utils import euler_degrees_to_quat, quat_normalize, quat_to_euler_degrees


@runtime_checkable
class RigSource(Protocol):
    """Read access to the current rig values, one mapping per frame part."""

    def pose_values(self) -> Mapping[str, Any]: ...

    def right_hand_values(self) -> Mapping[str, Any]: ...

    def left_hand_values(self) -> Mapping[str, Any]: ...

    def face_values(self) -> Mapping[str, Any]: ...


@runtime_checkable
class RigSink(Protocol):
    """Write access to the downstream smoothing/animation layer."""

    def push(self, channel: str, value: Any, timestamp: float) -> None: ...


def _rotation_channels():
    channels = set()
    for part_key, _, part_cls in FRAME_PARTS:
        for f in value_fields(part_cls):
            if f.metadata["rotation"]:
                channels.add(f"{part_key}.{f.metadata['key']}")
    return frozenset(channels)


ROTATION_CHANNELS = _rotation_channels()


class RecordingSink:
    """
    Rig sink that keeps every pushed value in memory.

    Useful for tests and for inspecting what playback would apply.

    Example usage:
        sink = RecordingSink()
        dispatch_frame(frame, sink)
        for channel, value, timestamp in sink.records:
            print(channel, value, timestamp)
    """

    def __init__(self):
        self.records: List[Tuple[str, Any, float]] = []
        self.latest: Dict[str, Any] = {}

    def push(self, channel, value, timestamp):
        self.records.append((channel, value, timestamp))
        self.latest[channel] = value

    def channels(self):
        """Channel names in the order they were first pushed."""
        return list(dict.fromkeys(channel for channel, _, _ in self.records))

    def clear(self):
        self.records.clear()
        self.latest.clear()


class QuaternionSink:
    """
    Sink adapter converting rotation channels from Euler degrees to quaternions.

    Recorded rotations are Euler angles; rig smoothing layers usually
    accumulate quaternions. Non-rotation channels pass through unchanged.
    """

    def __init__(self, sink: RigSink):
        self.sink = sink

    def push(self, channel, value, timestamp):
        if channel in ROTATION_CHANNELS:
            value = tuple(float(c) for c in euler_degrees_to_quat(value))
        self.sink.push(channel, value, timestamp)


class BoneQuaternionSource:
    """
    Rig source fed from a live tracking stream.

    The tracking side calls update() with the latest values whenever it has
    them (rotations as (w, x, y, z) quaternions, positions and scalars as
    plain values); capture reads them as rig values, converting rotations
    to Euler degrees. update() may be called from a receiver thread.

    Example usage:
        source = BoneQuaternionSource()
        source.update("pose", {"neckRotation": (1, 0, 0, 0), ...})
        controller = CaptureController(source)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values = {part_key: {} for part_key, _, _ in FRAME_PARTS}
        self._rotation_keys = {
            part_key: {f.metadata["key"] for f in value_fields(part_cls) if f.metadata["rotation"]}
            for part_key, _, part_cls in FRAME_PARTS
        }

    def update(self, part, values: Mapping[str, Any]):
        """
        Store the latest values for one frame part.

        Args:
            part: "pose", "rightHand", "leftHand" or "face"
            values: Mapping of wire field name to value
        """
        if part not in self._values:
            raise ValueError(f"Unknown frame part: {part}. "
                             f"Supported: {list(self._values.keys())}")
        converted = {}
        for key, value in values.items():
            if key in self._rotation_keys[part]:
                converted[key] = quat_normalize(value)
            else:
                converted[key] = np.asarray(value, dtype=np.float64)
        with self._lock:
            self._values[part].update(converted)

    def _read(self, part):
        with self._lock:
            current = dict(self._values[part])
        result = {}
        for key, value in current.items():
            if key in self._rotation_keys[part]:
                result[key] = quat_to_euler_degrees(value)
            else:
                result[key] = value
        return result

    def pose_values(self):
        return self._read("pose")

    def right_hand_values(self):
        return self._read("rightHand")

    def left_hand_values(self):
        return self._read("leftHand")

    def face_values(self):
        return self._read("face")

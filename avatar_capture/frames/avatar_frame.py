"""
Frame data model for captured avatar motion.

A captured frame is one timestamped snapshot of the upper-body pose, both
hands and the face. Every value is stored as a plain tuple of floats (or a
float for scalars) so frames compare by value and can be shared freely.

Each dataclass field carries its wire name ("key") and shape ("kind") in
its metadata. The serializer and the frame dispatcher both walk the fields
in declaration order, which is the fixed field order of a frame.
"""

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

# Value kinds
SCALAR = "scalar"
VECTOR2 = "vector2"
VECTOR3 = "vector3"

KIND_SIZES = {VECTOR2: 2, VECTOR3: 3}
KIND_AXES = {VECTOR2: ("x", "y"), VECTOR3: ("x", "y", "z")}

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]


def _value_field(key, kind, rotation=False, optional=False):
    metadata = {"key": key, "kind": kind, "rotation": rotation, "optional": optional}
    if optional:
        return field(default=None, metadata=metadata)
    return field(metadata=metadata)


def _coerce(value, kind, key):
    """Convert a scalar or vector value (list, tuple, ndarray) to its canonical form."""
    if kind == SCALAR:
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be a number, got {value!r}") from None
        if not math.isfinite(value):
            raise ValueError(f"{key} must be finite, got {value}")
        return value
    size = KIND_SIZES[kind]
    try:
        values = tuple(float(v) for v in value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a {size}-component vector, got {value!r}") from None
    if len(values) != size:
        raise ValueError(f"{key} must have {size} components, got {len(values)}")
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"{key} must be finite, got {values}")
    return values


@dataclass(frozen=True)
class ValueFields:
    """Shared behaviour for the timestamped frame parts."""

    timestamp: float

    def __post_init__(self):
        timestamp = float(self.timestamp)
        if not math.isfinite(timestamp):
            raise ValueError(f"timestamp must be finite, got {timestamp}")
        object.__setattr__(self, "timestamp", timestamp)
        for f in value_fields(type(self)):
            value = getattr(self, f.name)
            if value is None:
                if not f.metadata["optional"]:
                    raise ValueError(f"{f.metadata['key']} is required")
                continue
            object.__setattr__(self, f.name, _coerce(value, f.metadata["kind"], f.metadata["key"]))

    @classmethod
    def from_values(cls, timestamp, values: Mapping, include_optional=True):
        """
        Build a frame part from a mapping keyed by wire field names.

        Args:
            timestamp: Frame timestamp in seconds
            values: Mapping of wire name (e.g. "neckRotation") to value
            include_optional: Read optional fields when present in values

        Returns:
            Instance of cls

        Raises:
            ValueError: If a required field is missing or has the wrong shape
        """
        kwargs = {}
        for f in value_fields(cls):
            key = f.metadata["key"]
            if f.metadata["optional"]:
                if include_optional and values.get(key) is not None:
                    kwargs[f.name] = values[key]
                continue
            if key not in values:
                raise ValueError(f"{cls.__name__} is missing {key}")
            kwargs[f.name] = values[key]
        return cls(timestamp=timestamp, **kwargs)

    def items(self):
        """Yield (wire_name, value) pairs in field order, skipping absent optional values."""
        for f in value_fields(type(self)):
            value = getattr(self, f.name)
            if value is not None:
                yield f.metadata["key"], value


def value_fields(cls):
    """Return the value-carrying dataclass fields of a frame part, in order."""
    return [f for f in dataclasses.fields(cls) if "key" in f.metadata]


@dataclass(frozen=True)
class PoseFrame(ValueFields):
    """Torso orientation, arm positions and optional leg rotations."""

    neck_rotation: Vector3 = _value_field("neckRotation", VECTOR3, rotation=True)
    chest_rotation: Vector3 = _value_field("chestRotation", VECTOR3, rotation=True)
    hips_rotation: Vector3 = _value_field("hipsRotation", VECTOR3, rotation=True)
    hips_position: Vector3 = _value_field("hipsPosition", VECTOR3)
    right_shoulder_position: Vector3 = _value_field("rightShoulderPosition", VECTOR3)
    right_elbow_position: Vector3 = _value_field("rightElbowPosition", VECTOR3)
    right_hand_position: Vector3 = _value_field("rightHandPosition", VECTOR3)
    left_shoulder_position: Vector3 = _value_field("leftShoulderPosition", VECTOR3)
    left_elbow_position: Vector3 = _value_field("leftElbowPosition", VECTOR3)
    left_hand_position: Vector3 = _value_field("leftHandPosition", VECTOR3)
    right_upper_leg_rotation: Optional[Vector3] = _value_field(
        "rightUpperLegRotation", VECTOR3, rotation=True, optional=True)
    right_lower_leg_rotation: Optional[Vector3] = _value_field(
        "rightLowerLegRotation", VECTOR3, rotation=True, optional=True)
    left_upper_leg_rotation: Optional[Vector3] = _value_field(
        "leftUpperLegRotation", VECTOR3, rotation=True, optional=True)
    left_lower_leg_rotation: Optional[Vector3] = _value_field(
        "leftLowerLegRotation", VECTOR3, rotation=True, optional=True)

    def __post_init__(self):
        super().__post_init__()
        legs = [self.right_upper_leg_rotation, self.right_lower_leg_rotation,
                self.left_upper_leg_rotation, self.left_lower_leg_rotation]
        present = sum(leg is not None for leg in legs)
        if present not in (0, len(legs)):
            raise ValueError("Leg rotations must be all present or all absent")

    @property
    def has_legs(self) -> bool:
        return self.right_upper_leg_rotation is not None


@dataclass(frozen=True)
class HandFrame(ValueFields):
    """Wrist rotation plus pip/dip/tip rotations for the five digits."""

    wrist_rotation: Vector3 = _value_field("wristRotation", VECTOR3, rotation=True)
    index_pip_rotation: Vector3 = _value_field("indexPipRotation", VECTOR3, rotation=True)
    index_dip_rotation: Vector3 = _value_field("indexDipRotation", VECTOR3, rotation=True)
    index_tip_rotation: Vector3 = _value_field("indexTipRotation", VECTOR3, rotation=True)
    middle_pip_rotation: Vector3 = _value_field("middlePipRotation", VECTOR3, rotation=True)
    middle_dip_rotation: Vector3 = _value_field("middleDipRotation", VECTOR3, rotation=True)
    middle_tip_rotation: Vector3 = _value_field("middleTipRotation", VECTOR3, rotation=True)
    ring_pip_rotation: Vector3 = _value_field("ringPipRotation", VECTOR3, rotation=True)
    ring_dip_rotation: Vector3 = _value_field("ringDipRotation", VECTOR3, rotation=True)
    ring_tip_rotation: Vector3 = _value_field("ringTipRotation", VECTOR3, rotation=True)
    pinky_pip_rotation: Vector3 = _value_field("pinkyPipRotation", VECTOR3, rotation=True)
    pinky_dip_rotation: Vector3 = _value_field("pinkyDipRotation", VECTOR3, rotation=True)
    pinky_tip_rotation: Vector3 = _value_field("pinkyTipRotation", VECTOR3, rotation=True)
    thumb_pip_rotation: Vector3 = _value_field("thumbPipRotation", VECTOR3, rotation=True)
    thumb_dip_rotation: Vector3 = _value_field("thumbDipRotation", VECTOR3, rotation=True)
    thumb_tip_rotation: Vector3 = _value_field("thumbTipRotation", VECTOR3, rotation=True)


@dataclass(frozen=True)
class FaceFrame(ValueFields):
    """Mouth openness, iris positions and eye openness."""

    mouth_open: float = _value_field("mouthOpen", SCALAR)
    left_eye_iris: Vector2 = _value_field("leftEyeIris", VECTOR2)
    right_eye_iris: Vector2 = _value_field("rightEyeIris", VECTOR2)
    left_eye_open: float = _value_field("leftEyeOpen", SCALAR)
    right_eye_open: float = _value_field("rightEyeOpen", SCALAR)


# Wire name and attribute of each part of an AvatarFrame, in dispatch order
FRAME_PARTS = (
    ("pose", "pose", PoseFrame),
    ("rightHand", "right_hand", HandFrame),
    ("leftHand", "left_hand", HandFrame),
    ("face", "face", FaceFrame),
)


@dataclass(frozen=True)
class AvatarFrame:
    """One pose, two hands and one face captured at the same moment."""

    pose: PoseFrame
    right_hand: HandFrame
    left_hand: HandFrame
    face: FaceFrame

    @property
    def timestamp(self) -> float:
        return self.pose.timestamp

    def parts(self):
        """Yield (wire_name, part) pairs in dispatch order."""
        for key, attr, _ in FRAME_PARTS:
            yield key, getattr(self, attr)


@dataclass(frozen=True)
class Session:
    """
    An ordered, immutable sequence of captured frames plus metadata.

    frame_count and total_duration are derived from frames so they always
    agree with the sequence.
    """

    capture_date: str
    capture_start_time: float
    frames: Tuple[AvatarFrame, ...] = ()

    def __post_init__(self):
        frames = tuple(self.frames)
        object.__setattr__(self, "frames", frames)
        capture_start_time = float(self.capture_start_time)
        if not math.isfinite(capture_start_time):
            raise ValueError(f"capture_start_time must be finite, got {capture_start_time}")
        object.__setattr__(self, "capture_start_time", capture_start_time)
        for i in range(1, len(frames)):
            if frames[i].timestamp < frames[i - 1].timestamp:
                raise ValueError(
                    f"Frame {i} timestamp {frames[i].timestamp} is earlier than "
                    f"frame {i - 1} timestamp {frames[i - 1].timestamp}")

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def total_duration(self) -> float:
        return self.frames[-1].timestamp if self.frames else 0.0

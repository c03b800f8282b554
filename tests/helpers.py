"""Shared fakes and frame builders for the avatar_capture tests."""

import numpy as np
from scipy.spatial.transform import Rotation as R

from avatar_capture.frames import AvatarFrame, FaceFrame, HandFrame, PoseFrame, Session, value_fields
HAND_KEYS = [f.metadata["key"] for f in value_fields(HandFrame)]
LEG_KEYS = ["rightUpperLegRotation", "rightLowerLegRotation",
            "leftUpperLegRotation", "leftLowerLegRotation"]


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


class CountingRigSource:
    """Rig source whose values encode how many times it has been read."""

    def __init__(self, with_legs=True):
        self.reads = 0
        self.with_legs = with_legs

    def pose_values(self):
        self.reads += 1
        n = float(self.reads)
        values = {
            "neckRotation": (n, 0.0, 0.0),
            "chestRotation": (0.0, n, 0.0),
            "hipsRotation": (0.0, 0.0, n),
            "hipsPosition": (0.0, 1.0, 0.0),
            "rightShoulderPosition": (0.2, 1.5, 0.0),
            "rightElbowPosition": (0.45, 1.5, 0.0),
            "rightHandPosition": (0.6, 1.5, n / 100),
            "leftShoulderPosition": (-0.2, 1.5, 0.0),
            "leftElbowPosition": (-0.45, 1.5, 0.0),
            "leftHandPosition": (-0.6, 1.5, 0.0),
        }
        if self.with_legs:
            values.update({key: (10.0, 0.0, 0.0) for key in LEG_KEYS})
        return values

    def right_hand_values(self):
        return {key: (float(self.reads), 0.0, 0.0) for key in HAND_KEYS}

    def left_hand_values(self):
        return {key: (0.0, float(self.reads), 0.0) for key in HAND_KEYS}

    def face_values(self):
        return {
            "mouthOpen": 0.5,
            "leftEyeIris": (0.1, -0.1),
            "rightEyeIris": (0.1, -0.1),
            "leftEyeOpen": 1.0,
            "rightEyeOpen": 0.9,
        }


def make_frame(timestamp, value=0.0, legs=False):
    """Build an AvatarFrame whose vectors are all (value, value, value)."""
    source = CountingRigSource(with_legs=legs)
    pose_values = source.pose_values()
    pose_values = {key: (value, value, value) for key in pose_values}
    hand_values = {key: (value, value, value) for key in HAND_KEYS}
    return AvatarFrame(
        pose=PoseFrame.from_values(timestamp, pose_values),
        right_hand=HandFrame.from_values(timestamp, hand_values),
        left_hand=HandFrame.from_values(timestamp, hand_values),
        face=FaceFrame.from_values(timestamp, {
            "mouthOpen": value,
            "leftEyeIris": (value, value),
            "rightEyeIris": (value, value),
            "leftEyeOpen": 1.0,
            "rightEyeOpen": 1.0,
        }),
    )


def make_session(timestamps, legs=False):
    frames = tuple(make_frame(t, value=float(i), legs=legs) for i, t in enumerate(timestamps))
    return Session(capture_date="2025-07-17 18:40:50", capture_start_time=3.25, frames=frames)


def quat_angle_between(q1, q2):
    """Angle in degrees of the rotation taking q1 to q2 (w, x, y, z)."""
    r1 = R.from_quat(np.asarray(q1, dtype=np.float64), scalar_first=True)
    r2 = R.from_quat(np.asarray(q2, dtype=np.float64), scalar_first=True)
    return float(np.degrees((r1.inv() * r2).magnitude()))

"""
Frame data model: timestamped pose, hand and face snapshots and the
immutable Session that groups them.

Example usage:
    from avatar_capture.frames import AvatarFrame, Session

    session = Session(capture_date="2025-07-17 18:40:50",
                      capture_start_time=12.5,
                      frames=captured_frames)
    print(f"{session.frame_count} frames over {session.total_duration:.2f}s")
"""

from .avatar_frame import (
    FRAME_PARTS,
    KIND_AXES,
    SCALAR,
    VECTOR2,
    VECTOR3,
    AvatarFrame,
    FaceFrame,
    HandFrame,
    PoseFrame,
    Session,
    value_fields,
)

__all__ = [
    "FRAME_PARTS",
    "KIND_AXES",
    "SCALAR",
    "VECTOR2",
    "VECTOR3",
    "AvatarFrame",
    "FaceFrame",
    "HandFrame",
    "PoseFrame",
    "Session",
    "value_fields",
]

"""
Session persistence - JSON encoding and timestamped session files.

Example usage:
    from avatar_capture.session import save_session, load_session

    path = save_session(session, "captureAvatar", "avatar_capture")
    restored = load_session(path)
    assert restored == session
"""

from .session_serializer import (
    deserialize,
    dumps,
    load_session,
    loads,
    save_session,
    serialize,
    session_file_name,
)

__all__ = [
    "deserialize",
    "dumps",
    "load_session",
    "loads",
    "save_session",
    "serialize",
    "session_file_name",
]

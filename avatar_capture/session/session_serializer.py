"""
Session serializer - JSON documents for captured sessions.

Document format (field names and nesting are the on-disk contract shared
with previously captured files):
    {
        "captureDate": "2025-07-17 18:40:50",
        "captureStartTime": 12.5,
        "totalDuration": 4.97,
        "frameCount": 150,
        "frames": [
            {
                "pose": {"timestamp": 0.033, "neckRotation": {"x": 0.0, "y": 0.0, "z": 0.0}, ...},
                "rightHand": {"timestamp": 0.033, "wristRotation": {...}, ...},
                "leftHand": {...},
                "face": {"timestamp": 0.033, "mouthOpen": 0.2, "leftEyeIris": {"x": 0.0, "y": 0.0}, ...}
            },
            ...
        ]
    }
"""

import json
import logging
import math
import pathlib
from datetime import datetime

from ..errors import InconsistentFrameCount, MalformedDocument, SessionIOError
from ..frames import FRAME_PARTS, KIND_AXES, SCALAR, AvatarFrame, Session, value_fields

logger = logging.getLogger(__name__)

# Timestamp suffix of saved session files
FILE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
SESSION_SUFFIX = ".json"

# Declared vs. derived totalDuration tolerance (older files store 32-bit floats)
DURATION_TOLERANCE = 1e-4


def _encode_value(value, kind):
    if kind == SCALAR:
        return value
    return dict(zip(KIND_AXES[kind], value))


def _encode_part(part):
    encoded = {"timestamp": part.timestamp}
    kinds = {f.metadata["key"]: f.metadata["kind"] for f in value_fields(type(part))}
    for key, value in part.items():
        encoded[key] = _encode_value(value, kinds[key])
    return encoded


def serialize(session):
    """
    Encode a session as a JSON-compatible document.

    Args:
        session: Session to encode

    Returns:
        Dict with keys in fixed order: captureDate, captureStartTime,
        totalDuration, frameCount, frames
    """
    frames = []
    for frame in session.frames:
        frames.append({key: _encode_part(part) for key, part in frame.parts()})
    return {
        "captureDate": session.capture_date,
        "captureStartTime": session.capture_start_time,
        "totalDuration": session.total_duration,
        "frameCount": session.frame_count,
        "frames": frames,
    }


def _require(mapping, key, where):
    if not isinstance(mapping, dict):
        raise MalformedDocument(f"{where} must be an object, got {type(mapping).__name__}")
    if key not in mapping:
        raise MalformedDocument(f"{where} is missing '{key}'")
    return mapping[key]


def _number(value, where):
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedDocument(f"{where} must be a finite number, got {value!r}")
    return float(value)


def _decode_value(raw, kind, where):
    if kind == SCALAR:
        return _number(raw, where)
    return tuple(_number(_require(raw, axis, where), f"{where}.{axis}") for axis in KIND_AXES[kind])


def _decode_part(raw, part_cls, where):
    kwargs = {"timestamp": _number(_require(raw, "timestamp", where), f"{where}.timestamp")}
    for f in value_fields(part_cls):
        key = f.metadata["key"]
        if f.metadata["optional"] and raw.get(key) is None:
            continue
        value = _require(raw, key, where)
        kwargs[f.name] = _decode_value(value, f.metadata["kind"], f"{where}.{key}")
    try:
        return part_cls(**kwargs)
    except ValueError as e:
        raise MalformedDocument(f"{where}: {e}") from e


def _decode_frame(raw, index):
    where = f"frames[{index}]"
    parts = {}
    for key, attr, part_cls in FRAME_PARTS:
        parts[attr] = _decode_part(_require(raw, key, where), part_cls, f"{where}.{key}")
    return AvatarFrame(**parts)


def deserialize(document, strict=True):
    """
    Decode a session document.

    Args:
        document: Dict as produced by serialize() or json.load()
        strict: Raise InconsistentFrameCount when frameCount does not match
            the frame list; when False, trust the frame list and log a warning

    Returns:
        Session

    Raises:
        MalformedDocument: If a required field is missing or has the wrong shape
        InconsistentFrameCount: If frameCount is wrong and strict is True
    """
    capture_date = _require(document, "captureDate", "document")
    if not isinstance(capture_date, str):
        raise MalformedDocument(f"captureDate must be a string, got {capture_date!r}")
    capture_start_time = _number(_require(document, "captureStartTime", "document"), "captureStartTime")
    total_duration = _number(_require(document, "totalDuration", "document"), "totalDuration")
    frame_count = _require(document, "frameCount", "document")
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise MalformedDocument(f"frameCount must be an integer, got {frame_count!r}")
    raw_frames = _require(document, "frames", "document")
    if not isinstance(raw_frames, list):
        raise MalformedDocument(f"frames must be a list, got {type(raw_frames).__name__}")

    frames = [_decode_frame(raw, i) for i, raw in enumerate(raw_frames)]

    if frame_count != len(frames):
        if strict:
            raise InconsistentFrameCount(frame_count, len(frames))
        logger.warning("Document declares %d frames but holds %d; using the frame list",
                       frame_count, len(frames))

    try:
        session = Session(capture_date=capture_date, capture_start_time=capture_start_time,
                          frames=tuple(frames))
    except ValueError as e:
        raise MalformedDocument(str(e)) from e

    if abs(session.total_duration - total_duration) > DURATION_TOLERANCE:
        logger.warning("Document declares totalDuration %.3fs but the last frame is at %.3fs",
                       total_duration, session.total_duration)
    return session


def dumps(session) -> str:
    """Encode a session as pretty-printed JSON text."""
    return json.dumps(serialize(session), indent=4)


def loads(text, strict=True):
    """Decode a session from JSON text."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Invalid JSON: {e}") from e
    return deserialize(document, strict=strict)


def session_file_name(base_name, when=None):
    """
    Build the file name of a saved session: <base_name>_<YYYYmmdd_HHMMSS>.json

    Args:
        base_name: Base file name
        when: Capture time (default: now)
    """
    when = when or datetime.now()
    return f"{base_name}_{when.strftime(FILE_TIMESTAMP_FORMAT)}{SESSION_SUFFIX}"


def save_session(session, directory, base_name, when=None):
    """
    Write a session to a new file in directory.

    Never overwrites: if the timestamped name is taken, a numeric suffix is
    appended (<base>_<stamp>_1.json, ...).

    Args:
        session: Session to save
        directory: Target directory, created if missing
        base_name: Base file name
        when: Time used for the file name (default: now)

    Returns:
        pathlib.Path of the written file

    Raises:
        SessionIOError: If the directory or file cannot be written
    """
    directory = pathlib.Path(directory)
    text = dumps(session)
    try:
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created folder: %s", directory)
    except OSError as e:
        raise SessionIOError("create directory for", directory, e) from e

    name = session_file_name(base_name, when)
    path = directory / name
    attempt = 0
    while True:
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write(text)
            break
        except FileExistsError:
            attempt += 1
            path = directory / f"{name[:-len(SESSION_SUFFIX)]}_{attempt}{SESSION_SUFFIX}"
        except OSError as e:
            raise SessionIOError("write", path, e) from e

    logger.info("Saved %d frames over %.2f seconds to %s",
                session.frame_count, session.total_duration, path)
    return path


def load_session(path, strict=True):
    """
    Read a session file.

    Args:
        path: Session file path
        strict: See deserialize()

    Returns:
        Session

    Raises:
        SessionIOError: If the file cannot be read
        MalformedDocument: If the file is not a valid session document,
            including text that is not UTF-8
    """
    path = pathlib.Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SessionIOError("read", path, e) from e
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"{path} is not valid UTF-8 text: {e}") from e
    session = loads(text, strict=strict)
    logger.info("Loaded %s: %d frames, %.2fs", path.name, session.frame_count, session.total_duration)
    return session

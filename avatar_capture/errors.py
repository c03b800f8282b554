"""
Exceptions raised by the capture, session and playback components.

Every error derives from AvatarCaptureError so callers can catch the whole
family. None of them is fatal: the component that raised keeps its last
well-defined state.
"""


class AvatarCaptureError(Exception):
    """Base class for all avatar_capture errors."""


class AlreadyCapturing(AvatarCaptureError):
    """start() was called while a capture is already active."""


class EmptyCapture(AvatarCaptureError):
    """A capture with zero frames cannot be turned into a session."""


class NoSessionLoaded(AvatarCaptureError):
    """A playback command needs a session but none is loaded."""


class MalformedDocument(AvatarCaptureError):
    """A session document is missing fields or has fields of the wrong shape."""


class InconsistentFrameCount(MalformedDocument):
    """The declared frameCount does not match the number of decoded frames."""

    def __init__(self, declared, actual):
        super().__init__(f"frameCount is {declared} but the document holds {actual} frames")
        self.declared = declared
        self.actual = actual


class SinkRejected(AvatarCaptureError):
    """The rig sink raised while a frame field was being pushed."""

    def __init__(self, channel, timestamp):
        super().__init__(f"Rig sink rejected {channel} at t={timestamp:.3f}s")
        self.channel = channel
        self.timestamp = timestamp


class InvalidSpeed(AvatarCaptureError, ValueError):
    """A playback speed of zero, below zero, or not a finite number."""


class SessionIOError(AvatarCaptureError, OSError):
    """Reading or writing a session file failed."""

    def __init__(self, action, path, cause):
        super().__init__(f"Failed to {action} session file {path}: {cause}")
        self.action = action
        self.path = path
        self.cause = cause

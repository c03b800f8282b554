"""
Recorder - driver-facing command surface for capture and playback.

Example usage:
    from avatar_capture.recorder import AvatarRecorder, run

    recorder = AvatarRecorder(source, sink)
    recorder.load("captureAvatar/avatar_capture_20250717_184050.json")
    recorder.play()
    run(recorder, frequency=60)
"""

from .avatar_recorder import AvatarRecorder, run

__all__ = ["AvatarRecorder", "run"]

"""
Playback - time-synchronized replay of captured sessions into a rig sink.

Example usage:
    from avatar_capture.playback import PlaybackScheduler, PlaybackState

    scheduler = PlaybackScheduler(sink)
    scheduler.load(session)
    scheduler.play()
    while scheduler.state is PlaybackState.PLAYING:
        scheduler.advance()
"""

from .frame_dispatcher import LEG_ROTATION_KEYS, dispatch_frame, frame_channels
from .playback_scheduler import PlaybackScheduler, PlaybackState

__all__ = [
    "LEG_ROTATION_KEYS",
    "PlaybackScheduler",
    "PlaybackState",
    "dispatch_frame",
    "frame_channels",
]

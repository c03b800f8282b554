"""
PlaybackScheduler - Time-synchronized replay of a captured Session.

The scheduler is a tick-driven state machine. Each advance() maps wall-clock
time, scaled by the playback speed, onto the recorded timeline and
dispatches every frame that has become due since the previous tick.
"""

import bisect
import enum
import logging
import math
import time

from ..config import RecorderConfig
from ..errors import InvalidSpeed, NoSessionLoaded
from .frame_dispatcher import dispatch_frame

logger = logging.getLogger(__name__)

# Absorbs float error from re-anchoring the reference time
TIMELINE_EPSILON = 1e-9


class PlaybackState(enum.Enum):
    IDLE = "idle"            # no session loaded
    READY = "ready"          # session loaded, not playing
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"  # reached the last frame


class PlaybackScheduler:
    """
    Replays a Session into a RigSink with variable speed, pause and seek.

    State machine:
        IDLE --load--> READY --play--> PLAYING <--pause/play--> PAUSED
        PLAYING --(last frame dispatched)--> COMPLETED
        READY/PLAYING/PAUSED/COMPLETED --stop--> READY (index 0)

    Timeline:
        target_elapsed = (now - reference_start) * speed

    Every frame whose timestamp is <= target_elapsed is dispatched exactly
    once and in order, even when a slow tick makes several frames due at
    once. Pausing and speed changes re-anchor reference_start so the
    timeline never jumps.

    Example usage:
        scheduler = PlaybackScheduler(sink)
        scheduler.load(session)
        scheduler.play()

        while scheduler.state is PlaybackState.PLAYING:
            scheduler.advance()
    """

    def __init__(self, sink, config: RecorderConfig = None, clock=time.monotonic):
        """
        Initialize the scheduler.

        Args:
            sink: RigSink receiving dispatched frame fields
            config: Recorder configuration (speed policy, use_leg_rotation)
            clock: Callable returning the current time in seconds
        """
        self.sink = sink
        self.config = config or RecorderConfig()
        self.clock = clock
        self.session = None
        self.state = PlaybackState.IDLE
        self.index = 0
        self.speed = self.config.playback_speed
        self.reference_start = 0.0
        self._timestamps = []
        self._paused_elapsed = 0.0

    @property
    def frame_count(self) -> int:
        return len(self._timestamps)

    @property
    def progress(self) -> float:
        """Fraction of frames dispatched, 0 for an empty or missing session."""
        if not self._timestamps:
            return 0.0
        return self.index / len(self._timestamps)

    def target_elapsed(self, now=None):
        """Position on the recorded timeline, in seconds."""
        if self.state is PlaybackState.PLAYING:
            now = self.clock() if now is None else now
            return (now - self.reference_start) * self.speed
        if self.state is PlaybackState.PAUSED:
            return self._paused_elapsed
        if self.state is PlaybackState.COMPLETED:
            return self.session.total_duration
        return self._frame_elapsed(self.index) if self.index > 0 else 0.0

    def load(self, session):
        """Replace the loaded session and reset to READY at frame 0."""
        self.session = session
        self._timestamps = [frame.timestamp for frame in session.frames]
        self.index = 0
        self._paused_elapsed = 0.0
        self.state = PlaybackState.READY
        logger.info("Loaded session from %s: %d frames, %.2fs",
                    session.capture_date, session.frame_count, session.total_duration)

    def play(self, now=None):
        """
        Start or resume playback.

        From READY playback starts at the current index (0 unless seek() moved
        it), from COMPLETED it restarts at 0, from PAUSED it resumes so the
        current frame is the next one due. Calling play() while PLAYING does
        nothing.

        Raises:
            NoSessionLoaded: If no session is loaded
        """
        if self.session is None:
            raise NoSessionLoaded("No capture data loaded; load a session first")
        if self.state is PlaybackState.PLAYING:
            return
        now = self.clock() if now is None else now

        if self.state is PlaybackState.PAUSED:
            self._anchor(now, self._frame_elapsed(self.index))
            self.state = PlaybackState.PLAYING
            logger.info("Playback resumed at frame %d", self.index)
            return

        if self.state is PlaybackState.COMPLETED:
            self.index = 0
        if not self._timestamps:
            self.state = PlaybackState.COMPLETED
            logger.info("Playback completed: session has no frames")
            return

        self._anchor(now, self._frame_elapsed(self.index) if self.index > 0 else 0.0)
        self.state = PlaybackState.PLAYING
        logger.info("Starting playback of %d frames at %.1fx", self.frame_count, self.speed)

    def pause(self, now=None):
        """Freeze playback at the current frame. Only effective while PLAYING."""
        if self.state is not PlaybackState.PLAYING:
            logger.debug("pause() ignored in state %s", self.state.value)
            return
        self._paused_elapsed = self.target_elapsed(now)
        self.state = PlaybackState.PAUSED
        logger.info("Playback paused at frame %d", self.index)

    def toggle(self, now=None):
        """Play when stopped, pause when playing, resume when paused."""
        if self.state is PlaybackState.PLAYING:
            self.pause(now)
        else:
            self.play(now)

    def stop(self):
        """Halt playback and rewind to frame 0. Repeated calls have no further effect."""
        if self.state is PlaybackState.IDLE:
            return
        was_active = self.state in (PlaybackState.PLAYING, PlaybackState.PAUSED)
        self.index = 0
        self._paused_elapsed = 0.0
        self.state = PlaybackState.READY
        if was_active:
            logger.info("Playback stopped")

    def advance(self, now=None):
        """
        Dispatch every frame that has become due.

        Args:
            now: Current time in seconds (default: clock())

        Returns:
            Number of frames dispatched during this call

        Raises:
            SinkRejected: If the sink fails; the failing frame stays current
        """
        if self.state is not PlaybackState.PLAYING:
            return 0
        target = self.target_elapsed(now)
        frames = self.session.frames
        dispatched = 0
        while self.index < len(frames) and frames[self.index].timestamp <= target + TIMELINE_EPSILON:
            dispatch_frame(frames[self.index], self.sink,
                           use_leg_rotation=self.config.use_leg_rotation)
            self.index += 1
            dispatched += 1

        if self.index >= len(frames):
            self.state = PlaybackState.COMPLETED
            logger.info("Playback completed")
        return dispatched

    def set_speed(self, factor, now=None):
        """
        Set the playback speed, clamped to [min_speed, max_speed].

        While playing, the timeline position is kept continuous across the
        change.

        Returns:
            The speed actually applied

        Raises:
            InvalidSpeed: If factor is not a finite number above zero
        """
        try:
            factor = float(factor)
        except (TypeError, ValueError):
            raise InvalidSpeed(f"Playback speed must be a number, got {factor!r}") from None
        if not math.isfinite(factor) or factor <= 0:
            raise InvalidSpeed(f"Playback speed must be a positive number, got {factor}")

        factor = min(max(factor, self.config.min_speed), self.config.max_speed)
        if self.state is PlaybackState.PLAYING:
            now = self.clock() if now is None else now
            elapsed = self.target_elapsed(now)
            self.speed = factor
            self._anchor(now, elapsed)
        else:
            self.speed = factor
        logger.info("Playback speed: %.1fx", self.speed)
        return self.speed

    def increase_speed(self, now=None):
        return self.set_speed(round(self.speed + self.config.speed_step, 6), now)

    def decrease_speed(self, now=None):
        # Stepping below zero would be rejected rather than clamped
        return self.set_speed(max(round(self.speed - self.config.speed_step, 6),
                                  self.config.min_speed), now)

    def seek(self, index, now=None):
        """
        Move to a frame index.

        The target frame becomes the next frame to dispatch. Seeking to or
        past the end completes playback; seeking a COMPLETED session back
        into range returns it to READY.

        Args:
            index: Frame index, clamped to [0, frame_count]
            now: Current time in seconds (default: clock())

        Raises:
            NoSessionLoaded: If no session is loaded
        """
        if self.session is None:
            raise NoSessionLoaded("No capture data loaded; load a session first")
        index = min(max(int(index), 0), len(self._timestamps))
        self.index = index

        if index >= len(self._timestamps):
            self.state = PlaybackState.COMPLETED
            logger.info("Seeked to end; playback completed")
            return

        elapsed = self._frame_elapsed(index)
        if self.state is PlaybackState.PLAYING:
            self._anchor(self.clock() if now is None else now, elapsed)
        elif self.state is PlaybackState.PAUSED:
            self._paused_elapsed = elapsed
        elif self.state is PlaybackState.COMPLETED:
            self.state = PlaybackState.READY
        logger.info("Seeked to frame %d (t=%.3fs)", index, elapsed)

    def seek_time(self, seconds, now=None):
        """Seek to the first frame whose timestamp is >= seconds."""
        if self.session is None:
            raise NoSessionLoaded("No capture data loaded; load a session first")
        self.seek(bisect.bisect_left(self._timestamps, seconds), now)

    def status_line(self) -> str:
        """One-line human-readable playback status."""
        if self.session is None:
            return "No capture data loaded"
        total = self.frame_count
        if self.state is PlaybackState.PLAYING:
            return (f"PLAYING... Frame {self.index}/{total} "
                    f"({self.progress * 100:.1f}%) Speed: {self.speed:.1f}x")
        if self.state is PlaybackState.PAUSED:
            return f"PAUSED - Frame {self.index}/{total}"
        if self.state is PlaybackState.COMPLETED:
            return f"COMPLETED - {total} frames ({self.session.total_duration:.2f}s)"
        return f"Ready to play {total} frames ({self.session.total_duration:.2f}s)"

    def _frame_elapsed(self, index):
        """Timeline position implied by a frame; the end of the session past the last frame."""
        if index < len(self._timestamps):
            return self._timestamps[index]
        return self._timestamps[-1] if self._timestamps else 0.0

    def _anchor(self, now, elapsed):
        """Place reference_start so that target_elapsed(now) == elapsed."""
        self.reference_start = now - elapsed / self.speed

"""
AvatarRecorder - Command surface for capture and playback of one avatar.

Wires a CaptureController and a PlaybackScheduler to the same rig and
exposes the driver commands (start/stop/save capture, load, play, pause,
stop, speed). Capture and playback are never active at the same time.
"""

import logging
import pathlib
import time

from loop_rate_limiters import RateLimiter

from ..capture import CaptureController
from ..config import RecorderConfig
from ..playback import PlaybackScheduler, PlaybackState
from ..session import load_session, save_session

logger = logging.getLogger(__name__)


class AvatarRecorder:
    """
    Records a rig to session files and plays session files back into it.

    Example usage:
        recorder = AvatarRecorder(source, sink, RecorderConfig(capture_dir="captures"))

        recorder.start_capture()
        ...                      # call recorder.tick() once per update
        recorder.stop_capture()
        path = recorder.save_capture()

        recorder.load(path)
        recorder.play()
        run(recorder, frequency=60, should_continue=recorder.is_playing)
    """

    def __init__(self, source, sink, config: RecorderConfig = None, clock=time.monotonic):
        """
        Initialize the recorder.

        Args:
            source: RigSource read during capture (may be None for playback only)
            sink: RigSink written during playback (may be None for capture only)
            config: Recorder configuration
            clock: Callable returning the current time in seconds
        """
        self.config = config or RecorderConfig()
        self.clock = clock
        self.capture = CaptureController(source, self.config, clock=clock)
        self.playback = PlaybackScheduler(sink, self.config, clock=clock)
        self.last_saved_path = None

    # Capture commands

    def start_capture(self, now=None):
        """Stop any playback and begin a new capture."""
        if self.playback.state in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            self.playback.stop()
        self.capture.start(now)

    def stop_capture(self, now=None):
        self.capture.stop(now)

    def toggle_capture(self, now=None):
        """Start capturing when idle, stop when capturing."""
        if self.capture.is_capturing:
            self.stop_capture(now)
        else:
            self.start_capture(now)

    def save_capture(self, directory=None, base_name=None):
        """
        Finalize the captured frames and write them to a new session file.

        Args:
            directory: Target directory (default: config.capture_dir)
            base_name: File base name (default: config.file_name)

        Returns:
            pathlib.Path of the saved file

        Raises:
            EmptyCapture: If nothing was captured
            SessionIOError: If the file cannot be written; the captured
                frames are kept so the save can be retried
        """
        session = self.capture.finalize(clear=False)
        directory = pathlib.Path(directory or self.config.capture_dir)
        path = save_session(session, directory, base_name or self.config.file_name)
        self.capture.discard()
        self.last_saved_path = path
        return path

    # Playback commands

    def load(self, path):
        """
        Load a session file for playback.

        On failure the previously loaded session, if any, stays loaded.

        Raises:
            SessionIOError: If the file cannot be read
            MalformedDocument: If the file is not a valid session
        """
        session = load_session(path, strict=self.config.strict_frame_count)
        self.load_session(session)
        return session

    def load_session(self, session):
        """Load an in-memory session for playback, stopping any capture."""
        if self.capture.is_capturing:
            self.capture.stop()
        self.playback.load(session)

    def play(self, now=None):
        if self.capture.is_capturing:
            self.capture.stop(now)
        self.playback.play(now)

    def pause(self, now=None):
        self.playback.pause(now)

    def toggle_play(self, now=None):
        """Play, pause or resume depending on the playback state."""
        if self.capture.is_capturing:
            self.capture.stop(now)
        self.playback.toggle(now)

    def stop(self):
        self.playback.stop()

    def set_speed(self, factor, now=None):
        return self.playback.set_speed(factor, now)

    def seek(self, index, now=None):
        self.playback.seek(index, now)

    # Driver

    def is_capturing(self) -> bool:
        return self.capture.is_capturing

    def is_playing(self) -> bool:
        return self.playback.state is PlaybackState.PLAYING

    def tick(self, now=None):
        """
        Advance whichever of capture or playback is active.

        Returns:
            Number of frames captured or dispatched during this tick
        """
        now = self.clock() if now is None else now
        if self.capture.is_capturing:
            return 1 if self.capture.update(now) is not None else 0
        return self.playback.advance(now)

    def status_line(self) -> str:
        if self.capture.is_capturing:
            return f"RECORDING... ({self.capture.frame_count} frames)"
        if self.playback.session is None:
            return f"Idle ({self.capture.frame_count} frames captured)"
        return self.playback.status_line()


def run(recorder, frequency=60.0, should_continue=None, on_tick=None):
    """
    Drive recorder.tick() at a fixed rate.

    Args:
        recorder: AvatarRecorder to drive
        frequency: Tick rate in Hz
        should_continue: Callable returning False to end the loop
            (default: while capturing or playing)
        on_tick: Optional callable invoked with the recorder after each tick

    Returns:
        Number of ticks performed
    """
    if should_continue is None:
        def should_continue():
            return recorder.is_capturing() or recorder.is_playing()

    rate_limiter = RateLimiter(frequency=frequency, warn=False)
    ticks = 0
    while should_continue():
        recorder.tick()
        ticks += 1
        if on_tick is not None:
            on_tick(recorder)
        rate_limiter.sleep()
    logger.debug("Driver loop finished after %d ticks", ticks)
    return ticks

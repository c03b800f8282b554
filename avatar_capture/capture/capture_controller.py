"""
CaptureController - Fixed-rate frame capture from a live rig.

The controller is advanced by an external update loop running at an
arbitrary, possibly jittery rate. It downsamples that loop to the target
capture rate and owns the frame buffer until the capture is finalized into
a Session.
"""

import logging
import math
import time
from datetime import datetime

from ..config import RecorderConfig
from ..errors import AlreadyCapturing, EmptyCapture
from ..frames import AvatarFrame, FaceFrame, HandFrame, PoseFrame, Session

logger = logging.getLogger(__name__)

# Label format of Session.capture_date
CAPTURE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Tolerance for elapsed times landing exactly on an interval boundary
BOUNDARY_EPSILON = 1e-9


class CaptureController:
    """
    Samples AvatarFrames from a RigSource at a fixed rate.

    Interval boundaries lie on a fixed grid k / capture_rate from the start
    of the capture. A tick that crosses one or more boundaries captures a
    single frame stamped with the tick's elapsed time; missed intervals are
    not backfilled.

    Example usage:
        controller = CaptureController(source, RecorderConfig(capture_rate=30))
        controller.start()

        while running:
            controller.update()

        controller.stop()
        session = controller.finalize()
    """

    def __init__(self, source, config: RecorderConfig = None, clock=time.monotonic):
        """
        Initialize the controller.

        Args:
            source: RigSource providing the current rig values
            config: Recorder configuration (capture_rate, use_leg_rotation)
            clock: Callable returning the current time in seconds
        """
        self.source = source
        self.config = config or RecorderConfig()
        self.clock = clock
        self.frames = []
        self.capturing = False
        self.start_time = 0.0
        self.last_capture_time = 0.0
        self._next_boundary = 0

    @property
    def is_capturing(self) -> bool:
        return self.capturing

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def duration(self) -> float:
        """Timestamp of the last captured frame, 0 when nothing was captured."""
        return self.frames[-1].timestamp if self.frames else 0.0

    def start(self, now=None):
        """
        Begin a new capture, discarding any unsaved frames.

        Raises:
            AlreadyCapturing: If a capture is already active
        """
        if self.capturing:
            raise AlreadyCapturing("Capture already in progress; stop it before starting a new one")
        self.start_time = self.clock() if now is None else now
        self.last_capture_time = 0.0
        self._next_boundary = 1
        self.frames = []
        self.capturing = True
        logger.info("Started capture at %.1f fps", self.config.capture_rate)

    def tick(self, elapsed):
        """
        Capture one frame if an interval boundary was crossed.

        Args:
            elapsed: Seconds since start()

        Returns:
            The captured AvatarFrame, or None if no frame was due

        Raises:
            ValueError: If the rig source reports a missing, malformed or
                non-finite value; nothing is captured and the frame stays due
        """
        if not self.capturing:
            return None

        interval = self.config.frame_interval
        if elapsed + BOUNDARY_EPSILON < self._next_boundary * interval:
            return None

        frame = self._sample(elapsed)
        self.frames.append(frame)
        self.last_capture_time = elapsed
        self._next_boundary = math.floor((elapsed + BOUNDARY_EPSILON) / interval) + 1
        logger.debug("Captured frame %d at t=%.3fs", len(self.frames) - 1, elapsed)
        return frame

    def update(self, now=None):
        """Tick with the elapsed time derived from the clock."""
        if not self.capturing:
            return None
        now = self.clock() if now is None else now
        return self.tick(now - self.start_time)

    def stop(self, now=None):
        """Stop capturing; the captured frames are kept for finalize()."""
        if not self.capturing:
            return
        self.capturing = False
        now = self.clock() if now is None else now
        logger.info("Stopped capture: %d frames over %.2f seconds",
                    len(self.frames), now - self.start_time)

    def finalize(self, capture_date=None, clear=True):
        """
        Turn the captured frames into a Session and clear the buffer.

        Args:
            capture_date: Date label (default: current local time)
            clear: Empty the buffer once the session is built

        Returns:
            Session

        Raises:
            EmptyCapture: If no frames were captured
        """
        if self.capturing:
            self.stop()
        if not self.frames:
            raise EmptyCapture("No frames captured; record some movement first")
        if capture_date is None:
            capture_date = datetime.now().strftime(CAPTURE_DATE_FORMAT)
        session = Session(
            capture_date=capture_date,
            capture_start_time=self.start_time,
            frames=tuple(self.frames),
        )
        if clear:
            self.frames = []
        logger.info("Finalized session: %d frames, %.2fs",
                    session.frame_count, session.total_duration)
        return session

    def discard(self):
        """Drop captured frames without building a session."""
        self.frames = []

    def _sample(self, timestamp):
        """Read one full AvatarFrame from the rig source."""
        pose = PoseFrame.from_values(timestamp, self.source.pose_values(),
                                     include_optional=self.config.use_leg_rotation)
        right_hand = HandFrame.from_values(timestamp, self.source.right_hand_values())
        left_hand = HandFrame.from_values(timestamp, self.source.left_hand_values())
        face = FaceFrame.from_values(timestamp, self.source.face_values())
        return AvatarFrame(pose=pose, right_hand=right_hand, left_hand=left_hand, face=face)

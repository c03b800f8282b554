"""
Recorder configuration.

Defaults mirror the recording and playback settings of the capture rig.
Overrides can be loaded from a JSON file:

    {
        "capture_rate": 60,
        "capture_dir": "/data/captures",
        "use_leg_rotation": true
    }
"""

import dataclasses
import json
import math
import pathlib
from dataclasses import dataclass


DEFAULT_CAPTURE_RATE = 30.0
DEFAULT_FILE_NAME = "avatar_capture"
DEFAULT_CAPTURE_DIR = "captureAvatar"

# Speed policy: +/- steps of 0.1 within [0.1, 3.0]
DEFAULT_MIN_SPEED = 0.1
DEFAULT_MAX_SPEED = 3.0
DEFAULT_SPEED_STEP = 0.1


@dataclass(frozen=True)
class RecorderConfig:
    """
    Settings shared by capture, session persistence and playback.

    Attributes:
        capture_rate: Target capture rate in frames per second
        file_name: Base name of saved session files
        capture_dir: Directory saved sessions are written to
        playback_speed: Initial playback speed factor
        min_speed: Lower bound for the playback speed
        max_speed: Upper bound for the playback speed
        speed_step: Increment used by increase_speed()/decrease_speed()
        use_leg_rotation: Capture and apply the four leg-segment rotations
        strict_frame_count: Reject documents whose frameCount is wrong
            instead of trusting the decoded frame list
    """

    capture_rate: float = DEFAULT_CAPTURE_RATE
    file_name: str = DEFAULT_FILE_NAME
    capture_dir: str = DEFAULT_CAPTURE_DIR
    playback_speed: float = 1.0
    min_speed: float = DEFAULT_MIN_SPEED
    max_speed: float = DEFAULT_MAX_SPEED
    speed_step: float = DEFAULT_SPEED_STEP
    use_leg_rotation: bool = False
    strict_frame_count: bool = True

    def __post_init__(self):
        if not math.isfinite(self.capture_rate) or self.capture_rate <= 0:
            raise ValueError(f"capture_rate must be positive, got {self.capture_rate}")
        if not 0 < self.min_speed <= self.max_speed:
            raise ValueError(f"Invalid speed range [{self.min_speed}, {self.max_speed}]")
        if self.speed_step <= 0:
            raise ValueError(f"speed_step must be positive, got {self.speed_step}")
        if not self.min_speed <= self.playback_speed <= self.max_speed:
            raise ValueError(f"playback_speed {self.playback_speed} is outside "
                             f"[{self.min_speed}, {self.max_speed}]")
        if not self.file_name:
            raise ValueError("file_name must not be empty")

    @property
    def frame_interval(self) -> float:
        """Seconds between two captured frames."""
        return 1.0 / self.capture_rate

    def replace(self, **changes):
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


def load_config(path, base=None):
    """
    Load a RecorderConfig from a JSON file of overrides.

    Args:
        path: JSON file path
        base: Config the overrides apply to (default: RecorderConfig())

    Returns:
        RecorderConfig

    Raises:
        ValueError: If the file holds unknown keys or invalid values
    """
    base = base or RecorderConfig()
    with open(pathlib.Path(path)) as f:
        overrides = json.load(f)
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    known = {field.name for field in dataclasses.fields(RecorderConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {unknown}. "
                         f"Supported: {sorted(known)}")
    return base.replace(**overrides)

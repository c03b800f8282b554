"""
Frame dispatcher - pushes one recorded frame into a rig sink.
"""

import logging

from ..errors import SinkRejected

logger = logging.getLogger(__name__)

LEG_ROTATION_KEYS = frozenset({
    "rightUpperLegRotation",
    "rightLowerLegRotation",
    "leftUpperLegRotation",
    "leftLowerLegRotation",
})


def frame_channels(frame, use_leg_rotation=False):
    """
    Yield (channel, value) pairs of a frame in dispatch order.

    Order: pose, right hand, left hand, face; within each part the field
    order of the frame model. Channels are "<part>.<field>", e.g.
    "pose.neckRotation" or "face.mouthOpen".

    Args:
        frame: AvatarFrame
        use_leg_rotation: Include the four leg rotations when the frame has them
    """
    for part_key, part in frame.parts():
        for key, value in part.items():
            if not use_leg_rotation and key in LEG_ROTATION_KEYS:
                continue
            yield f"{part_key}.{key}", value


def dispatch_frame(frame, sink, use_leg_rotation=False):
    """
    Push every field of a frame into the sink, tagged with the frame timestamp.

    No retries and no buffering: the first sink failure aborts the rest of
    the frame, so the sink may have received a prefix of the fields.

    Args:
        frame: AvatarFrame to apply
        sink: RigSink receiving push(channel, value, timestamp)
        use_leg_rotation: Apply leg rotations

    Returns:
        Number of fields pushed

    Raises:
        SinkRejected: If the sink raised; the original error is chained
    """
    timestamp = frame.timestamp
    pushed = 0
    for channel, value in frame_channels(frame, use_leg_rotation):
        try:
            sink.push(channel, value, timestamp)
        except SinkRejected:
            raise
        except Exception as e:
            raise SinkRejected(channel, timestamp) from e
        pushed += 1
    logger.debug("Dispatched %d fields at t=%.3fs", pushed, timestamp)
    return pushed

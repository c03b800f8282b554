"""
Capture - fixed-rate sampling of live rig values into a Session.

Example usage:
    from avatar_capture.capture import CaptureController

    controller = CaptureController(source)
    controller.start()
    while recording:
        controller.update()
    session = controller.finalize()
"""

from .capture_controller import CAPTURE_DATE_FORMAT, CaptureController

__all__ = ["CAPTURE_DATE_FORMAT", "CaptureController"]

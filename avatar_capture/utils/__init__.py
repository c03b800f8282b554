"""
Utility functions for rig value processing.

This module provides:
    - rotation_utils: Quaternion <-> rig Euler angle conversion
"""

from .rotation_utils import (
    euler_degrees_to_quat,
    quat_normalize,
    quat_to_euler_degrees,
)

__all__ = [
    "euler_degrees_to_quat",
    "quat_normalize",
    "quat_to_euler_degrees",
]

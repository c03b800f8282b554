"""
Rotation conversion utilities for captured rig values.

All quaternions are in (w, x, y, z) format unless otherwise specified.
Euler angles are in degrees and follow the rig convention: a rotation of
z degrees around Z, then x degrees around X, then y degrees around Y, all
about the fixed axes. Captured angles are reported in [0, 360).
"""

import numpy as np
from scipy.spatial.transform import Rotation as R


# scipy extrinsic sequence matching the rig convention (lowercase = fixed axes)
EULER_SEQUENCE = "zxy"


def quat_normalize(q):
    """
    Normalize quaternion (w, x, y, z format).

    Args:
        q: Quaternion (w, x, y, z)

    Returns:
        Normalized quaternion, identity if q is degenerate
    """
    q = np.asarray(q, dtype=np.float64)
    norm = np.sqrt(np.sum(q * q))
    if norm < 1e-8:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return q / norm


def quat_to_euler_degrees(q):
    """
    Convert a quaternion to rig Euler angles.

    Args:
        q: Quaternion (w, x, y, z)

    Returns:
        Euler angles (x, y, z) in degrees, each in [0, 360)
    """
    zxy = R.from_quat(quat_normalize(q), scalar_first=True).as_euler(EULER_SEQUENCE, degrees=True)
    euler = np.array([zxy[1], zxy[2], zxy[0]])
    euler = np.mod(euler, 360.0)
    # mod can round tiny negative angles up to exactly 360
    euler[euler >= 360.0] = 0.0
    return euler


def euler_degrees_to_quat(e):
    """
    Convert rig Euler angles to a quaternion.

    Args:
        e: Euler angles (x, y, z) in degrees

    Returns:
        Quaternion (w, x, y, z)
    """
    x, y, z = float(e[0]), float(e[1]), float(e[2])
    return R.from_euler(EULER_SEQUENCE, [z, x, y], degrees=True).as_quat(scalar_first=True)

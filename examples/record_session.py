#!/usr/bin/env python3
"""
Example: Record avatar motion to a session file.

This script drives a CaptureController from a synthetic rig (a slow head
turn, a waving right arm and a blinking face) fed through a
BoneQuaternionSource, then saves the captured session as JSON.

The data flow:
1. The synthetic tracker publishes quaternions/positions to the source
2. AvatarRecorder.tick() downsamples the update loop to the capture rate
3. save_capture() writes <file_name>_<YYYYmmdd_HHMMSS>.json

Usage:
    python record_session.py --duration 5 --capture_rate 30
    python record_session.py --config recorder.json --legs
"""

import argparse
import logging
import math
import os
import sys
import time

import numpy as np
from scipy.spatial.transform import Rotation as R

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from avatar_capture import AvatarRecorder, BoneQuaternionSource, RecorderConfig, load_config, run
from avatar_capture.frames import HandFrame, value_fields

IDENTITY = (1.0, 0.0, 0.0, 0.0)
HAND_ROTATIONS = [f.metadata["key"] for f in value_fields(HandFrame)]
LEG_ROTATIONS = ["rightUpperLegRotation", "rightLowerLegRotation",
                 "leftUpperLegRotation", "leftLowerLegRotation"]


def publish_synthetic_rig(source, t):
    """Publish one update of a synthetic tracker at time t (seconds)."""
    head_turn = R.from_euler("y", 30.0 * math.sin(t), degrees=True).as_quat(scalar_first=True)
    wave = 0.2 * math.sin(4.0 * t)
    source.update("pose", {
        "neckRotation": head_turn,
        "chestRotation": IDENTITY,
        "hipsRotation": IDENTITY,
        "hipsPosition": (0.0, 1.0, 0.0),
        "rightShoulderPosition": (0.2, 1.5, 0.0),
        "rightElbowPosition": (0.45, 1.5, 0.0),
        "rightHandPosition": (0.6, 1.7 + wave, 0.0),
        "leftShoulderPosition": (-0.2, 1.5, 0.0),
        "leftElbowPosition": (-0.3, 1.25, 0.0),
        "leftHandPosition": (-0.3, 1.0, 0.0),
        **{name: IDENTITY for name in LEG_ROTATIONS},
    })
    curl = R.from_euler("z", 45.0 * (1 + math.sin(2.0 * t)), degrees=True).as_quat(scalar_first=True)
    source.update("rightHand", {name: curl for name in HAND_ROTATIONS})
    source.update("leftHand", {name: IDENTITY for name in HAND_ROTATIONS})
    blink = 0.0 if (t % 3.0) < 0.15 else 1.0
    source.update("face", {
        "mouthOpen": max(0.0, math.sin(3.0 * t)),
        "leftEyeIris": np.array([0.1 * math.sin(t), 0.0]),
        "rightEyeIris": np.array([0.1 * math.sin(t), 0.0]),
        "leftEyeOpen": blink,
        "rightEyeOpen": blink,
    })


def main():
    parser = argparse.ArgumentParser(description="Record synthetic avatar motion to a session file")

    parser.add_argument(
        "--duration",
        type=float,
        default=5.0,
        help="Recording length in seconds (default: 5.0)",
    )

    parser.add_argument(
        "--capture_rate",
        type=float,
        default=None,
        help="Capture rate in frames per second (default: from config, 30)",
    )

    parser.add_argument(
        "--update_rate",
        type=float,
        default=90.0,
        help="Rate of the simulated tracker update loop in Hz (default: 90)",
    )

    parser.add_argument(
        "--output_dir",
        type=str,
        default=None,
        help="Directory for the session file (default: from config)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with RecorderConfig overrides",
    )

    parser.add_argument(
        "--legs",
        action="store_true",
        default=False,
        help="Capture leg rotations",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log every captured frame",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(message)s",
    )

    config = load_config(args.config) if args.config else RecorderConfig()
    overrides = {}
    if args.capture_rate is not None:
        overrides["capture_rate"] = args.capture_rate
    if args.output_dir is not None:
        overrides["capture_dir"] = args.output_dir
    if args.legs:
        overrides["use_leg_rotation"] = True
    config = config.replace(**overrides)

    source = BoneQuaternionSource()
    recorder = AvatarRecorder(source, sink=None, config=config)

    t0 = time.monotonic()
    publish_synthetic_rig(source, 0.0)

    def keep_recording():
        elapsed = time.monotonic() - t0
        publish_synthetic_rig(source, elapsed)
        return elapsed < args.duration

    print(f"[Main] Recording {args.duration:.1f}s at {config.capture_rate:.1f} fps...")
    print("[Main] Press Ctrl+C to stop early")

    recorder.start_capture()
    try:
        run(recorder, frequency=args.update_rate, should_continue=keep_recording)
    except KeyboardInterrupt:
        print("\n[Main] Stopping...")
    finally:
        recorder.stop_capture()

    path = recorder.save_capture()
    print(f"[Main] Saved session to {path}")
    print("[Main] Done")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Example: Play a recorded session back into a rig sink.

This script loads a session file, replays it at the requested speed and
prints the applied values. Rotations are converted to (w, x, y, z)
quaternions on the way to the sink, as a smoothing layer would consume them.

Usage:
    python play_session.py captureAvatar/avatar_capture_20250717_184050.json
    python play_session.py session.json --speed 2.0 --verbose
    python play_session.py session.json --start 1.5
"""

import argparse
import logging
import os
import sys

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from avatar_capture import AvatarRecorder, QuaternionSink, RecorderConfig, load_config, run


class PrintingSink:
    """Prints a few channels of every dispatched frame."""

    def __init__(self, channels, verbose=False):
        self.channels = set(channels)
        self.verbose = verbose

    def push(self, channel, value, timestamp):
        if self.verbose or channel in self.channels:
            if isinstance(value, tuple):
                formatted = ", ".join(f"{v:7.3f}" for v in value)
                print(f"  t={timestamp:6.3f}s {channel:32s} ({formatted})")
            else:
                print(f"  t={timestamp:6.3f}s {channel:32s} {value:7.3f}")


def main():
    parser = argparse.ArgumentParser(description="Play a recorded avatar session")

    parser.add_argument(
        "session",
        type=str,
        help="Session JSON file to play",
    )

    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Playback speed factor, clamped to the configured range (default: 1.0)",
    )

    parser.add_argument(
        "--start",
        type=float,
        default=0.0,
        help="Start playback at this session time in seconds (default: 0)",
    )

    parser.add_argument(
        "--tick_rate",
        type=float,
        default=60.0,
        help="Playback update rate in Hz (default: 60)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with RecorderConfig overrides",
    )

    parser.add_argument(
        "--lenient",
        action="store_true",
        default=False,
        help="Accept files whose frameCount does not match their frames",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print every dispatched channel",
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")

    config = load_config(args.config) if args.config else RecorderConfig()
    if args.lenient:
        config = config.replace(strict_frame_count=False)

    sink = QuaternionSink(PrintingSink(
        channels=["pose.neckRotation", "pose.rightHandPosition", "face.mouthOpen"],
        verbose=args.verbose,
    ))
    recorder = AvatarRecorder(source=None, sink=sink, config=config)

    session = recorder.load(args.session)
    print(f"[Main] Loaded: {session.capture_date} | {session.frame_count} frames")

    recorder.set_speed(args.speed)
    if args.start > 0:
        recorder.playback.seek_time(args.start)
    recorder.play()

    last_status = [None]

    def print_status(rec):
        status = rec.status_line()
        if status != last_status[0] and (rec.playback.index % 30 == 0 or not rec.is_playing()):
            print(f"[Main] {status}")
            last_status[0] = status

    print("[Main] Press Ctrl+C to stop")
    try:
        run(recorder, frequency=args.tick_rate, on_tick=print_status)
    except KeyboardInterrupt:
        print("\n[Main] Stopping...")
    finally:
        recorder.stop()
        print("[Main] Done")


if __name__ == "__main__":
    main()

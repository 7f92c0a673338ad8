# src/main.py
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from loguru import logger

from config import Config
from player import Player
from video_io import VideoSource

HELP = """Traffic Sign Retroreflectivity Scorer

Hot keys:
\tESC                     - quit the program
\tP                       - pause the player
\tleft/right arrow        - move backward/forward
\tdrag a box when pausing - select region of interest
"""


def _display_scale(value: str) -> float:
    scale = float(value)
    if not 0.0 < scale <= 1.0:
        raise argparse.ArgumentTypeError("display scale must be in (0, 1]")
    return scale


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Estimate traffic sign retro-scores from a video")
    p.add_argument("video", help="Path to video file")
    p.add_argument("--display-scale", type=_display_scale, default=0.5,
                   help="Downscale applied to large frames on screen (default 0.5)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def format_duration(seconds: float) -> str:
    secs = int(seconds)
    return f"{secs // 3600}:{(secs // 60) % 60:02d}:{secs % 60:02d}"


def print_video_info(source: VideoSource) -> None:
    w, h = source.frame_size
    print("Video length:", format_duration(source.duration_seconds()))
    print(f"Original resolution: {w} x {h}")
    print("Frame rate:", source.fps)
    print()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    print(HELP)

    cfg = Config(video_path=args.video, display_scale=args.display_scale)
    print("Input file name:", cfg.video_path)

    try:
        player = Player(cfg)
    except RuntimeError as e:
        logger.error("Fail to open the file: {}", e)
        return 1

    print("File opened")
    print_video_info(player.playback)
    try:
        player.run()
    finally:
        player.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

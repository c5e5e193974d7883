"""Command-line entry point for vidinfo."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from .core import ExtractionError, VideoInfo, YouTubeClient
from .utils import Config, log_error, setup_logging
from .version import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vidinfo",
        description="Show metadata and stream formats of a YouTube video.",
    )
    parser.add_argument("video", help="Watch/embed/youtu.be URL or bare video id")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--download", type=int, metavar="ITAG", help="Download the format with this itag")
    parser.add_argument("-o", "--output", type=Path, help="Output file for --download")
    parser.add_argument("--config", type=Path, help="Settings file (default: ~/vidinfo_settings.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def info_to_dict(info: VideoInfo) -> dict:
    data = asdict(info)
    data["published"] = info.published.isoformat() if info.published else None
    data["duration"] = int(info.duration.total_seconds()) if info.duration is not None else None
    data["formats"] = [asdict(f) for f in info.formats]
    return data


def print_summary(info: VideoInfo):
    print(f"{info.id}: {info.title or '(untitled)'}")
    if info.uploader:
        print(f"  Uploader:  {info.uploader}")
    if info.published:
        print(f"  Published: {info.published.isoformat()}")
    if info.duration is not None:
        print(f"  Duration:  {info.duration}")
    for label, value in (("Artist", info.artist), ("Song", info.song),
                         ("Album", info.album), ("Writers", info.writers)):
        if value:
            print(f"  {label}: {value}")
    print(f"  Formats ({len(info.formats)}):")
    for fmt in info.formats:
        kind = "adaptive" if fmt.adaptive else "muxed"
        detail = fmt.quality_label or fmt.quality or ""
        codecs = ", ".join(c for c in (fmt.video_codec, fmt.audio_codec) if c)
        cipher = " [ciphered]" if fmt.is_ciphered else ""
        print(f"    {fmt.itag:>4}  {kind:<8} {fmt.mime_type:<11} {detail:<8} {codecs}{cipher}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    client = YouTubeClient(Config(args.config))
    try:
        info = client.get_video_info(args.video)

        if args.json:
            print(json.dumps(info_to_dict(info), indent=2))
        else:
            print_summary(info)

        if args.download is not None:
            fmt = info.formats.by_itag(args.download)
            if fmt is None:
                logger.error(f"No format with itag {args.download}")
                return 1
            output = args.output or Path(f"{info.id}_{fmt.itag}.{fmt.container or 'bin'}")
            written = client.download(info, fmt, output)
            logger.info(f"Saved {written} bytes to {output}")
    except ExtractionError as e:
        logger.error(f"{type(e).__name__}: {e}")
        log_error(f"Extraction of {args.video} failed", e)
        return 1
    finally:
        client.transport.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .commands import detect as cmd_detect
from .commands import embed as cmd_embed
from .commands import scan as cmd_scan
from .config import load_settings

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synthetic-watermark",
        description="Embed and detect synthetic-origin markers in PNG and MP3 files",
    )
    parser.add_argument("--config", type=Path, help="Path to synthetic-watermark.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    embed_parser = subparsers.add_parser("embed", help="Write a marker into a PNG or MP3 file")
    embed_parser.add_argument("file", type=Path)
    embed_parser.add_argument("--out", type=Path, help="Write here instead of replacing the input")
    embed_parser.add_argument(
        "--format",
        dest="fmt",
        default=None,
        help="Container format (png, image/png, mp3); defaults to the file suffix",
    )
    embed_parser.add_argument("--platform", default=None)
    embed_parser.add_argument("--source", default=None)
    embed_parser.add_argument("--model", default=None, help="Generative model name (PNG only)")
    embed_parser.add_argument("--user-id-hash", default=None)
    embed_parser.add_argument(
        "--timestamp", type=int, default=None, help="Epoch milliseconds; defaults to now"
    )

    detect_parser = subparsers.add_parser("detect", help="Print the marker carried by a file")
    detect_parser.add_argument("file", type=Path)
    detect_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )

    scan_parser = subparsers.add_parser(
        "scan", help="Report which files under the given roots carry a marker"
    )
    scan_parser.add_argument(
        "roots", nargs="*", type=Path, help="Directories or files; defaults to scan.roots"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    settings = load_settings(args.config)

    match args.command:
        case "embed":
            report = cmd_embed.run(
                args.file,
                defaults=settings.defaults,
                out=args.out,
                fmt=args.fmt,
                platform=args.platform,
                source=args.source,
                model=args.model,
                user_id_hash=args.user_id_hash,
                timestamp=args.timestamp,
            )
            print(report.line)
            if not report.ok:
                raise SystemExit(1)
        case "detect":
            if not cmd_detect.run(args.file, json_output=args.json):
                raise SystemExit(1)
        case "scan":
            roots = [root.expanduser().resolve() for root in args.roots]
            report = cmd_scan.run(settings.scan, roots)
            for line in report.lines:
                print(line)
            print(report.summary())
        case _:
            parser.error("Unknown command")


if __name__ == "__main__":
    main()

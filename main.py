#!/usr/bin/env python3
"""
Root entry: outline text (file, --raw or stdin) -> mind map PNG.
Supports --base64 (print PNG to stdout), --list-themes and --xmind export.
"""
from __future__ import annotations

import argparse
import base64
import io
import logging
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from mindmapgen.config import load_env
from mindmapgen.errors import MindmapError
from mindmapgen.export import build_xmind
from mindmapgen.layout import LayoutMode
from mindmapgen.parser import parse_outline
from mindmapgen.service import MindmapService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _read_input(args: argparse.Namespace) -> str | None:
    """Outline text from --raw, --input or piped stdin; None when there is none."""
    if args.raw is not None:
        return args.raw
    if args.input is not None:
        path = Path(args.input)
        if not path.is_file():
            logger.error("Input file not found: %s", path)
            return None
        return path.read_text(encoding="utf-8")
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Render an indented outline or Mermaid-style mindmap block to a PNG mind map."
    )
    parser.add_argument(
        "-i", "--input",
        metavar="FILE",
        default=None,
        help="Read the outline from FILE (UTF-8). Reads stdin when neither --input nor --raw is given",
    )
    parser.add_argument(
        "--raw",
        metavar="TEXT",
        default=None,
        help="Outline text passed directly on the command line",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="PATH",
        default="output.png",
        help="Output PNG path (default: output.png)",
    )
    parser.add_argument(
        "-b", "--base64",
        action="store_true",
        help="Print the PNG as base64 to stdout instead of writing --output",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help="Theme id (see --list-themes); unknown ids fall back to the default theme",
    )
    parser.add_argument(
        "--layout",
        choices=[m.value for m in LayoutMode],
        default=LayoutMode.RIGHT.value,
        help="Which side(s) of the root the branches grow on (default: right)",
    )
    parser.add_argument(
        "--list-themes",
        action="store_true",
        help="List available theme ids and exit",
    )
    parser.add_argument(
        "--xmind",
        metavar="PATH",
        default=None,
        help="Also export the outline structure to an .xmind mind map at PATH",
    )
    args = parser.parse_args(argv)

    load_env()
    service = MindmapService()

    if args.list_themes:
        for theme_id in service.list_themes():
            theme = service.get_theme(theme_id)
            print(f"{theme_id}\t{theme.name}")
        return 0

    text = _read_input(args)
    if text is None:
        logger.error("No input: pass --input FILE, --raw TEXT or pipe an outline on stdin.")
        return 1

    try:
        if args.base64:
            buf = io.BytesIO()
            service.render_text(text, buf, args.theme, args.layout)
            print(base64.b64encode(buf.getvalue()).decode("ascii"))
        else:
            out_path = Path(args.output)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            # encoded fully before the file is opened, so a failed render leaves no file
            buf = io.BytesIO()
            service.render_text(text, buf, args.theme, args.layout)
            out_path.write_bytes(buf.getvalue())
            logger.info("Wrote %s", out_path)
        if args.xmind:
            build_xmind(parse_outline(text), args.xmind)
    except (MindmapError, OSError, ImportError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

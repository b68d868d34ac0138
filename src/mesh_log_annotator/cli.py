from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from mesh_log_annotator.core.annotation import annotate
from mesh_log_annotator.core.log_store import load_mesh_logs
from mesh_log_annotator.core.models import MessageType
from mesh_log_annotator.core.node_id import parse_node_id
from mesh_log_annotator.core.records import annotate_mesh_log
from mesh_log_annotator.core.rendering import ANSI_ANNOTATION, highlight_annotations, render_mesh_log


def _parse_types(s: str) -> list[str]:
    known = {t.value.lower(): t.value for t in MessageType}
    out = [known.get(part.strip().lower(), part.strip()) for part in s.split(",") if part.strip()]
    if not out:
        raise argparse.ArgumentTypeError("At least one message type must be provided")
    return out


def _node_id_arg(s: str) -> int:
    try:
        return parse_node_id(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Annotate node ids in mesh debug logs with their !hex form.")
    p.add_argument("log_path", nargs="?", help="Stored mesh log (JSON lines, optionally .gz)")
    p.add_argument(
        "--types",
        type=_parse_types,
        default=None,
        help="Comma-separated message types (e.g., Packet,NodeInfo). Default: all",
    )
    p.add_argument("--limit", type=int, default=None, help="Max records to print (default: no cap)")
    p.add_argument("--oldest-first", action="store_true", help="Print oldest records first")
    p.add_argument("--color", dest="color", action="store_true", help="Highlight annotations")
    p.add_argument("--no-color", dest="color", action="store_false", help="Plain output")
    p.set_defaults(color=None)

    # Ad-hoc mode
    p.add_argument("--text", default=None, help="Annotate this text instead of a log file")
    p.add_argument(
        "--node-id",
        dest="node_ids",
        action="append",
        type=_node_id_arg,
        default=[],
        help="Node id to annotate in --text (repeatable; !hex, 0xhex or decimal)",
    )
    return p


def main(argv: Sequence[str] | None = None) -> None:
    p = _build_parser()
    args = p.parse_args(argv)

    color = sys.stdout.isatty() if args.color is None else args.color
    highlight = ANSI_ANNOTATION if color else None

    if args.text is not None:
        if args.log_path is not None:
            p.error("--text cannot be combined with log_path")
        text = annotate(args.text, args.node_ids)
        if highlight is not None:
            text = highlight_annotations(text, start_marker=highlight[0], end_marker=highlight[1])
        print(text)
        return

    if args.log_path is None:
        p.error("log_path is required unless --text is given")

    try:
        logs = asyncio.run(
            load_mesh_logs(
                args.log_path,
                message_types=args.types,
                limit=args.limit,
                newest_first=not args.oldest_first,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    for log in logs:
        print(render_mesh_log(annotate_mesh_log(log), highlight=highlight))
        print()

    print(f"Rendered {len(logs)} records.")


if __name__ == "__main__":
    main()

# SPDX-License-Identifier: MIT
"""Command-line interface for VRML Fixer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vrml_fixer.config import PRESETS, PipelineConfig
from vrml_fixer.errors import VrmlError
from vrml_fixer.fixes import PruneRules
from vrml_fixer.logging_config import setup_logging
from vrml_fixer.pipeline import process_file
from vrml_fixer.scene import GroupingNode, Node, Shape, iter_child_nodes
from vrml_fixer.writer import VrmlWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simplify a VRML97 or X3D scene and write it back as VRML97"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Input scene (.x3d is read as X3D, anything else as VRML97)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("output.wrl"),
        help="Output VRML97 file (default: %(default)s)",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="unify",
        help="Transformations to run (default: %(default)s)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=0,
        help="Spaces per nesting level in the output (default: %(default)s)",
    )
    parser.add_argument(
        "--exclude-id",
        type=int,
        action="append",
        default=[],
        metavar="ID",
        help="Node id of a shape to drop while pruning (repeatable)",
    )
    parser.add_argument(
        "--keep-group-id",
        type=int,
        default=None,
        metavar="ID",
        help="Drop every Group except this one and its ancestors",
    )
    parser.add_argument(
        "--keep-line-sets",
        action="store_true",
        help="Don't prune shapes whose geometry is an IndexedLineSet",
    )
    parser.add_argument(
        "--respect-winding",
        action="store_true",
        help="Only treat faces as duplicates when their vertex order matches",
    )
    parser.add_argument(
        "--report-sizes",
        type=int,
        default=0,
        metavar="N",
        help="Log the N shapes taking the most output space",
    )
    parser.add_argument(
        "--report-groups",
        action="store_true",
        help="Log the grouping node tree with the output space each node takes",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log messages to this file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser


def report_sizes(writer: VrmlWriter, count: int) -> None:
    """Log the ``count`` largest shapes in the written output."""
    shapes = [(length, node) for node, length in writer.node_lengths.items() if isinstance(node, Shape)]
    shapes.sort(key=lambda item: item[0], reverse=True)
    for length, node in shapes[:count]:
        node_id = writer.node_ids.get(node)
        label = f"#{node_id}" if node_id is not None else "(new)"
        logger.info("Shape %s%s: %d characters", label, f" {node.name}" if node.name else "", length)


def report_group_lengths(
    writer: VrmlWriter,
    node: Node,
    depth: int = 0,
    seen: set[Node] | None = None,
) -> None:
    """Log the grouping nodes below ``node`` as an indented tree with their output lengths.

    Shared nodes are listed once, where they were written in full.
    """
    if seen is None:
        seen = set()
    for child in iter_child_nodes(node):
        if child in seen:
            continue
        seen.add(child)
        if isinstance(child, GroupingNode):
            node_id = writer.node_ids.get(child)
            label = f"#{node_id}" if node_id is not None else "(new)"
            logger.info(
                "%s[%s] %s: %d characters",
                "  " * depth,
                label,
                child.type_name,
                writer.node_lengths.get(child, 0),
            )
        report_group_lengths(writer, child, depth + 1, seen)


def main(argv: list[str] | None = None) -> int:
    """Rewrite a VRML97/X3D scene with the selected preset."""
    args = build_parser().parse_args(argv)
    setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        str(args.log_file) if args.log_file else None,
    )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        rules = PruneRules(
            excluded_ids=frozenset(args.exclude_id),
            prune_line_sets=not args.keep_line_sets,
            keep_group_id=args.keep_group_id,
        )
        config = PipelineConfig.from_preset(
            args.preset,
            prune_rules=rules,
            ignore_winding=not args.respect_winding,
            indent=args.indent,
        )
        if not config.prune_junk and (args.exclude_id or args.keep_group_id is not None or args.keep_line_sets):
            logger.warning("The %s preset doesn't prune junk; pruning options are ignored", args.preset)
        writer = process_file(args.input, args.output, config)
    except (VrmlError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.report_sizes > 0:
        report_sizes(writer, args.report_sizes)
    if args.report_groups:
        report_group_lengths(writer, writer.scene.root)
    return 0


if __name__ == "__main__":
    sys.exit(main())

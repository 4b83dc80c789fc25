#!/usr/bin/env python3
"""
SchemaLayout CLI

Command-line interface for automatic entity-relationship diagram layout.

Usage:
    schemalayout layout <schema.json> [options]
    schemalayout report <schema.json>
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def configure_logging(verbose: bool = False):
    """Send log records to stderr; stdout carries the position map."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
        datefmt='%H:%M:%S',
    )


def load_schema_from_path(schema_arg: str):
    """
    Load a schema, reporting problems instead of raising.

    Returns:
        Schema or None
    """
    from .schema.loader import SchemaFormatError, load_schema

    try:
        return load_schema(schema_arg)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
    except SchemaFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
    return None


def cmd_layout(args) -> int:
    """Compute (or reuse) table positions and emit them as JSON."""
    from .layout.config import LayoutConfig, load_layout_config
    from .layout.events import LoggingObserver
    from .layout.pipeline import calculate_table_positions
    from .schema.layout_file import (
        SavedLayout,
        get_layout_file_path,
        parse_layout_file,
        write_layout_file,
    )

    schema = load_schema_from_path(args.schema)
    if schema is None:
        return 1

    config = LayoutConfig()
    if args.config:
        try:
            config = load_layout_config(args.config)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    layout_path = get_layout_file_path(Path(args.schema))
    saved: Optional[SavedLayout] = None
    if not args.relayout:
        saved = parse_layout_file(layout_path)
        if saved is not None:
            print(f"Using saved layout: {layout_path}", file=sys.stderr)

    positions = calculate_table_positions(
        schema,
        config=config,
        saved_layout=saved,
        snap=not args.no_snap,
        seed=args.seed,
        observers=[LoggingObserver()],
        show_navigation=args.show_navigation,
        include_inherited=args.include_inherited,
    )

    if args.save and saved is None:
        layout = SavedLayout(document=schema.name)
        layout.update_from_positions(positions)
        if not write_layout_file(layout, layout_path):
            print(f"Error: could not write {layout_path}", file=sys.stderr)
            return 1
        print(f"Saved layout to: {layout_path}", file=sys.stderr)

    payload = {name: {"x": x, "y": y} for name, (x, y) in positions.items()}
    text = json.dumps(payload, indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(payload)} positions to: {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def cmd_report(args) -> int:
    """Print connectivity and footprint statistics for a schema."""
    from .layout.initial import classify_connectivity
    from .layout.pipeline import build_layout_graph

    schema = load_schema_from_path(args.schema)
    if schema is None:
        return 1

    nodes, edges = build_layout_graph(
        schema,
        show_navigation=args.show_navigation,
        include_inherited=args.include_inherited,
    )
    connected, unconnected = classify_connectivity([n.name for n in nodes], edges)

    print(f"Schema: {schema.name}")
    print(f"  Entities: {len(nodes)}")
    print(f"  Relationships: {len(edges)}")
    print(f"  Connected: {len(connected)}")
    print(f"  Unconnected: {len(unconnected)}")
    if unconnected:
        print(f"    {', '.join(unconnected)}")

    print("\nEstimated table sizes:")
    for node in nodes:
        print(f"  {node.name}: {node.width:.0f} x {node.height:.0f}")

    if edges:
        print("\nRelationships:")
        for edge in edges:
            print(f"  {edge.source} -> {edge.target}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SchemaLayout - automatic ER diagram layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemalayout layout blog.json
  schemalayout layout blog.json --seed 7 -o positions.json
  schemalayout layout blog.yaml --relayout --save
  schemalayout report blog.json
        """,
    )

    parser.add_argument('--version', action='version', version='schemalayout 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    layout_parser = subparsers.add_parser('layout', help='Compute table positions')
    layout_parser.add_argument('schema', help='Path to schema file (.json, .yaml, .yml)')
    layout_parser.add_argument('-o', '--output', help='Write positions JSON to this file')
    layout_parser.add_argument('--config', help='YAML file with layout parameter overrides')
    layout_parser.add_argument('--seed', type=int, help='Seed for reproducible initial placement')
    layout_parser.add_argument('--no-snap', action='store_true',
                               help='Do not snap saved positions to the 50px grid')
    layout_parser.add_argument('--relayout', action='store_true',
                               help='Ignore any saved layout and recompute')
    layout_parser.add_argument('--save', action='store_true',
                               help='Save computed positions next to the schema')
    layout_parser.add_argument('--show-navigation', action='store_true',
                               help='Count navigation properties when sizing tables')
    layout_parser.add_argument('--include-inherited', action='store_true',
                               help='Count inherited properties when sizing tables')
    layout_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    report_parser = subparsers.add_parser('report', help='Show schema connectivity report')
    report_parser.add_argument('schema', help='Path to schema file (.json, .yaml, .yml)')
    report_parser.add_argument('--show-navigation', action='store_true',
                               help='Count navigation properties when sizing tables')
    report_parser.add_argument('--include-inherited', action='store_true',
                               help='Count inherited properties when sizing tables')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(getattr(args, 'verbose', False))

    commands = {
        'layout': cmd_layout,
        'report': cmd_report,
    }
    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())

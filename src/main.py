"""
1) Load people and relationships from a GEDCOM file or a SQLite database.
2) Optionally store the imported records in SQLite.
3) Build the pedigree chart layout around a root person.
4) Print the chart size, node positions by generation, and any diagnostics.
"""

import argparse
import logging
from pathlib import Path
import sqlite3

from database import create_database, load_data, store_data
from layout import build_pedigree_layout
from models import LayoutConfig, LayoutResult, Person, Relationship
from parsing import load_gedcom


# ============================================================================
# Input
# ============================================================================


def load_input(path: Path) -> tuple[list[Person], list[Relationship]]:
    """Load records from a .ged file or a database written by store_data."""
    if path.suffix.lower() == ".ged":
        return load_gedcom(path)

    conn = sqlite3.connect(path)
    try:
        return load_data(conn)
    finally:
        conn.close()


def save_database(db_path: Path, people: list[Person], relationships: list[Relationship]):
    # Delete existing database to ensure fresh start
    if db_path.exists():
        db_path.unlink()
        print(f"Deleted existing database: {db_path}")

    conn = create_database(db_path)
    try:
        store_data(conn, people, relationships)
    finally:
        conn.close()


# ============================================================================
# Output
# ============================================================================


def print_layout(layout: LayoutResult):
    print(f"Chart size: {layout.width:.0f} x {layout.height:.0f}")
    print(
        f"  {len(layout.nodes)} nodes, {len(layout.links)} links, "
        f"{len(layout.junctions)} union junctions, {len(layout.families)} families"
    )

    generation = None
    for node in layout.nodes:
        if node.generation != generation:
            generation = node.generation
            print(f"Generation {generation}:")
        marker = "*" if node.is_highlighted else " "
        print(
            f"  {marker} {node.id:<12} {node.person.display_name or '(unnamed)':<32} "
            f"lane {node.lane:<3} x={node.x:.0f} y={node.y:.0f}"
        )

    if layout.diagnostics:
        print(f"Found {len(layout.diagnostics)} diagnostics:")
        for d in layout.diagnostics[:10]:  # Show first 10 diagnostics
            print(f"    - [{d.code}] {d.message}")
        if len(layout.diagnostics) > 10:
            print(f"    ... and {len(layout.diagnostics) - 10} more")
    else:
        print("No data issues found")


# ============================================================================
# Main
# ============================================================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lay out a pedigree chart around one person.")
    parser.add_argument("input", type=Path, help="GEDCOM (.ged) file or SQLite database")
    parser.add_argument("--root", help="Root person id (defaults to the first person)")
    parser.add_argument("--db", type=Path, help="Save the imported records to this database")
    parser.add_argument("--node-width", type=float, default=LayoutConfig.node_width)
    parser.add_argument("--node-height", type=float, default=LayoutConfig.node_height)
    parser.add_argument("--padding", type=float, default=LayoutConfig.padding)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Loading records: {args.input}")
    people, relationships = load_input(args.input)
    print(f"  Found {len(people)} people and {len(relationships)} relationships")
    if not people:
        print("Nothing to lay out")
        return 1

    if args.db:
        print(f"Storing records in SQLite: {args.db}")
        save_database(args.db, people, relationships)

    root_id = args.root or people[0].id
    config = LayoutConfig(
        node_width=args.node_width,
        node_height=args.node_height,
        padding=args.padding,
    )

    print(f"Building layout around {root_id}...")
    layout = build_pedigree_layout(people, relationships, root_id, config)
    print_layout(layout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

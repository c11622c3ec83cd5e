"""Relationship validation for pedigree chart input."""

import networkx as nx

from graph import build_graph, parent_child_graph
from models import Diagnostic, Person, Relationship


def validate_relationships(
    people: list[Person], relationships: list[Relationship]
) -> list[Diagnostic]:
    """
    Validate the raw relationship list for:
    - References to people that are not in the input
    - Relationships between a person and themselves
    - Relationship records that repeat an earlier one
    - Cycles in parent-child relationships

    Returns a list of diagnostics. Nothing here is fatal.
    """
    diagnostics: list[Diagnostic] = []
    known = {p.id for p in people}

    seen: set[tuple] = set()
    for rel in relationships:
        missing = [pid for pid in (rel.person_id1, rel.person_id2) if pid not in known]
        if missing:
            diagnostics.append(
                Diagnostic(
                    "unknown_person",
                    f"Relationship {rel.id} references unknown people: {', '.join(missing)}",
                    tuple(missing),
                )
            )
            continue

        if rel.person_id1 == rel.person_id2:
            diagnostics.append(
                Diagnostic(
                    "self_relationship",
                    f"Relationship {rel.id} links {rel.person_id1} to themselves",
                    (rel.person_id1,),
                )
            )
            continue

        # Couple and sibling edges are undirected
        if rel.type == "parent_child":
            key = (rel.type, rel.person_id1, rel.person_id2)
        else:
            key = (rel.type, *sorted([rel.person_id1, rel.person_id2]))
        if key in seen:
            diagnostics.append(
                Diagnostic(
                    "duplicate_relationship",
                    f"Relationship {rel.id} repeats an earlier {rel.type} record",
                    (rel.person_id1, rel.person_id2),
                )
            )
        seen.add(key)

    G = build_graph(people, usable_relationships(people, relationships))
    try:
        cycle = nx.find_cycle(parent_child_graph(G), orientation="original")
        cycle_nodes = tuple(edge[0] for edge in cycle)
        diagnostics.append(
            Diagnostic(
                "parent_child_cycle",
                f"Cycle detected in parent-child relationships: {list(cycle_nodes)}",
                cycle_nodes,
            )
        )
    except nx.NetworkXNoCycle:
        pass

    return diagnostics


def usable_relationships(
    people: list[Person], relationships: list[Relationship]
) -> list[Relationship]:
    """Drop relationships the layout cannot use: unknown endpoints and self links."""
    known = {p.id for p in people}
    return [
        rel
        for rel in relationships
        if rel.person_id1 in known
        and rel.person_id2 in known
        and rel.person_id1 != rel.person_id2
    ]

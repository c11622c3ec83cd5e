"""Relationship indexing and NetworkX graph building."""

from dataclasses import dataclass, field

import networkx as nx

from models import COUPLE_TYPES, PARENT_CHILD, Person, Relationship


@dataclass
class RelationshipIndex:
    parents_by_child: dict[str, list[str]] = field(default_factory=dict)
    children_by_parent: dict[str, list[str]] = field(default_factory=dict)
    spouses_by_person: dict[str, list[str]] = field(default_factory=dict)

    def parents_of(self, person_id: str) -> list[str]:
        return self.parents_by_child.get(person_id, [])

    def children_of(self, person_id: str) -> list[str]:
        return self.children_by_parent.get(person_id, [])

    def spouses_of(self, person_id: str) -> list[str]:
        return self.spouses_by_person.get(person_id, [])

    def spouse_pairs(self) -> list[tuple[str, str]]:
        """Return every spouse/partner pair once, as sorted tuples in sorted order."""
        pairs: set[tuple[str, str]] = set()
        for person_id, spouses in self.spouses_by_person.items():
            for spouse_id in spouses:
                a, b = sorted([person_id, spouse_id])
                pairs.add((a, b))
        return sorted(pairs)

    def parent_edges(self) -> list[tuple[str, str]]:
        """Return distinct (parent, child) edges sorted by parent then child."""
        edges = {
            (parent_id, child_id)
            for child_id, parents in self.parents_by_child.items()
            for parent_id in parents
        }
        return sorted(edges)


def index_relationships(relationships: list[Relationship]) -> RelationshipIndex:
    """
    Build adjacency maps from the raw relationship list.

    Duplicate and inconsistent edges are kept as recorded; sibling edges are skipped.
    """
    index = RelationshipIndex()

    for rel in relationships:
        if rel.type == PARENT_CHILD:
            index.parents_by_child.setdefault(rel.person_id2, []).append(rel.person_id1)
            index.children_by_parent.setdefault(rel.person_id1, []).append(rel.person_id2)
        elif rel.type in COUPLE_TYPES:
            index.spouses_by_person.setdefault(rel.person_id1, []).append(rel.person_id2)
            index.spouses_by_person.setdefault(rel.person_id2, []).append(rel.person_id1)

    return index


def resolve_parent_child(index: RelationshipIndex, rel: Relationship) -> tuple[str, str, bool]:
    """
    Resolve the (parent, child) direction of a parent_child relationship.

    Returns:
        (parent_id, child_id, consistent). The raw order is always returned;
        consistent is False when the index does not record person_id1 as a
        parent of person_id2, or also records the pair the other way round.
    """
    consistent = rel.person_id1 in index.parents_of(
        rel.person_id2
    ) and rel.person_id2 not in index.parents_of(rel.person_id1)
    return rel.person_id1, rel.person_id2, consistent


def build_graph(people: list[Person], relationships: list[Relationship]) -> nx.MultiDiGraph:
    """Build a NetworkX multigraph with one node per person and one edge per relationship."""
    G = nx.MultiDiGraph()

    for person in people:
        G.add_node(person.id, person_name=person.display_name)

    # Edges may reference people missing from the input; those nodes get no attributes
    for rel in relationships:
        G.add_edge(
            rel.person_id1,
            rel.person_id2,
            key=rel.id,
            relationship_type=rel.type,
        )

    return G


def parent_child_graph(G: nx.MultiDiGraph) -> nx.DiGraph:
    """Collapse the relationship graph to its parent -> child edges."""
    parent_edges = [
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == PARENT_CHILD
    ]
    return nx.DiGraph(parent_edges)

from collections import defaultdict

import pytest

from layout import build_pedigree_layout
from models import LayoutConfig, Person, Relationship, TooManyParentsError


def _people(*ids: str) -> list[Person]:
    return [Person(id=pid, given_names=pid, surnames="Tester") for pid in ids]


def _rel(rel_type: str, p1: str, p2: str) -> Relationship:
    return Relationship(id=f"{rel_type}-{p1}-{p2}", type=rel_type, person_id1=p1, person_id2=p2)


def _family_tree() -> tuple[list[Person], list[Relationship]]:
    # Graph:
    #   GF + GM            MF + MM
    #   |     \              |
    #   F + M  Aunt ~ AP     M
    #   |    \
    #   R + S  Sib
    #   |
    #   K                         U (unrelated)
    people = _people("GF", "GM", "MF", "MM", "F", "M", "Aunt", "AP", "R", "S", "Sib", "K", "U")
    relationships = [
        _rel("spouse", "GF", "GM"),
        _rel("spouse", "MF", "MM"),
        _rel("parent_child", "GF", "F"),
        _rel("parent_child", "GM", "F"),
        _rel("parent_child", "GF", "Aunt"),
        _rel("parent_child", "GM", "Aunt"),
        _rel("partner", "Aunt", "AP"),
        _rel("parent_child", "MF", "M"),
        _rel("parent_child", "MM", "M"),
        _rel("spouse", "F", "M"),
        _rel("parent_child", "F", "R"),
        _rel("parent_child", "M", "R"),
        _rel("parent_child", "F", "Sib"),
        _rel("parent_child", "M", "Sib"),
        _rel("sibling", "R", "Sib"),
        _rel("spouse", "R", "S"),
        _rel("parent_child", "R", "K"),
        _rel("parent_child", "S", "K"),
    ]
    return people, relationships


def _generations(layout) -> dict[str, int]:
    return {node.id: node.generation for node in layout.nodes}


def test_root_without_relationships_is_a_single_node() -> None:
    config = LayoutConfig()
    layout = build_pedigree_layout(_people("R", "X"), [], "R", config)

    assert [node.id for node in layout.nodes] == ["R"]
    assert layout.links == []
    assert layout.width == config.node_width + 2 * config.padding
    assert layout.height == config.node_height + 2 * config.padding
    assert (layout.nodes[0].x, layout.nodes[0].y) == (config.padding, config.padding)
    assert layout.nodes[0].is_highlighted


def test_three_generation_chain() -> None:
    layout = build_pedigree_layout(
        _people("A", "B", "C"),
        [_rel("parent_child", "A", "B"), _rel("parent_child", "B", "C")],
        "B",
    )

    assert _generations(layout) == {"A": 0, "B": 1, "C": 2}
    assert [(l.source.id, l.target.id, l.type) for l in layout.links] == [
        ("A", "B", "parent"),
        ("B", "C", "parent"),
    ]
    assert all(link.is_highlighted for link in layout.links)
    # Each parent ends up level with its only child
    assert len({node.y for node in layout.nodes}) == 1


def test_two_parent_family_has_one_junction() -> None:
    relationships = [
        _rel("spouse", "P1", "P2"),
        _rel("parent_child", "P1", "C1"),
        _rel("parent_child", "P2", "C1"),
        _rel("parent_child", "P1", "C2"),
        _rel("parent_child", "P2", "C2"),
    ]
    layout = build_pedigree_layout(_people("P1", "P2", "C1", "C2"), relationships, "C1")

    assert _generations(layout) == {"P1": 0, "P2": 0, "C1": 1, "C2": 1}
    assert len(layout.junctions) == 1
    junction = layout.junctions[0]
    assert junction.family_id == "couple-P1-P2"
    assert [node.id for node in junction.children] == ["C1", "C2"]
    assert junction.is_highlighted

    spouse_links = [link for link in layout.links if link.type == "spouse"]
    assert [(l.source.id, l.target.id) for l in spouse_links] == [("P1", "P2")]
    assert layout.family_by_child == {"C1": "couple-P1-P2", "C2": "couple-P1-P2"}


def test_unrelated_person_is_excluded() -> None:
    layout = build_pedigree_layout(_people("A", "B"), [], "A")

    assert "B" not in layout.node_by_id
    assert len(layout.nodes) == 1


def test_sibling_edges_do_not_connect() -> None:
    layout = build_pedigree_layout(_people("A", "B"), [_rel("sibling", "A", "B")], "A")

    assert [node.id for node in layout.nodes] == ["A"]
    assert layout.links == []


def test_missing_root_gives_empty_layout_with_diagnostic() -> None:
    config = LayoutConfig()
    layout = build_pedigree_layout(_people("A"), [], "nobody", config)

    assert layout.nodes == []
    assert layout.width == 2 * config.padding
    assert [d.code for d in layout.diagnostics] == ["root_not_found"]


def test_more_than_two_parents_is_rejected() -> None:
    relationships = [_rel("parent_child", p, "C") for p in ("P1", "P2", "P3")]

    with pytest.raises(TooManyParentsError):
        build_pedigree_layout(_people("P1", "P2", "P3", "C"), relationships, "C")


def test_bad_records_are_reported_not_raised() -> None:
    relationships = [
        _rel("parent_child", "A", "B"),
        _rel("parent_child", "A", "B"),
        _rel("spouse", "A", "ghost"),
    ]
    layout = build_pedigree_layout(_people("A", "B"), relationships, "A")

    codes = [d.code for d in layout.diagnostics]
    assert "duplicate_relationship" in codes
    assert "unknown_person" in codes
    assert [(l.source.id, l.target.id) for l in layout.links] == [("A", "B")]


def test_parents_precede_children() -> None:
    people, relationships = _family_tree()
    layout = build_pedigree_layout(people, relationships, "R")
    gens = _generations(layout)

    for rel in relationships:
        if rel.type == "parent_child":
            assert gens[rel.person_id1] < gens[rel.person_id2]


def test_couples_share_a_generation() -> None:
    people, relationships = _family_tree()
    layout = build_pedigree_layout(people, relationships, "R")
    gens = _generations(layout)

    for rel in relationships:
        if rel.type in ("spouse", "partner"):
            assert gens[rel.person_id1] == gens[rel.person_id2]
    assert gens == {
        "GF": 0, "GM": 0, "MF": 0, "MM": 0,
        "F": 1, "M": 1, "Aunt": 1, "AP": 1,
        "R": 2, "S": 2, "Sib": 2,
        "K": 3,
    }


def test_no_overlap_within_a_generation() -> None:
    people, relationships = _family_tree()
    config = LayoutConfig()
    layout = build_pedigree_layout(people, relationships, "R", config)

    columns = defaultdict(list)
    for node in layout.nodes:
        columns[node.generation].append(node.y)
    for ys in columns.values():
        ys.sort()
        for upper, lower in zip(ys, ys[1:]):
            assert lower >= upper + config.node_height + config.row_gap - 1e-9


def test_layout_is_deterministic() -> None:
    people, relationships = _family_tree()

    def snapshot():
        layout = build_pedigree_layout(people, relationships, "R")
        nodes = [(n.id, n.generation, n.lane, n.x, n.y) for n in layout.nodes]
        links = [(l.source.id, l.target.id, l.type, l.is_highlighted) for l in layout.links]
        return nodes, links, layout.width, layout.height

    assert snapshot() == snapshot()


def test_lanes_are_contiguous() -> None:
    people, relationships = _family_tree()
    layout = build_pedigree_layout(people, relationships, "R")

    node_lanes = {node.lane for node in layout.nodes}
    assert node_lanes == set(range(max(node_lanes) + 1))
    family_lanes = {fam.lane for fam in layout.families.values()}
    assert family_lanes <= node_lanes


def test_step_parent_leaves_no_empty_lane() -> None:
    # P02's spouse P03 is not P00's parent; P00 has a child of their own
    relationships = [
        _rel("parent_child", "P02", "P00"),
        _rel("parent_child", "P00", "P01"),
        _rel("spouse", "P02", "P03"),
    ]
    layout = build_pedigree_layout(_people("P00", "P01", "P02", "P03"), relationships, "P00")

    lanes = {node.id: node.lane for node in layout.nodes}
    assert lanes == {"P02": 0, "P03": 0, "P00": 1, "P01": 1}
    assert {fam.lane for fam in layout.families.values()} == {0, 1}


def test_parent_child_recorded_both_ways_is_reported() -> None:
    relationships = [_rel("parent_child", "A", "B"), _rel("parent_child", "B", "A")]
    layout = build_pedigree_layout(_people("A", "B"), relationships, "A")

    codes = [d.code for d in layout.diagnostics]
    assert "link_direction_fallback" in codes
    assert "parent_child_cycle" in codes
    # The recorded order is kept; the edge against generation order is dropped
    assert [(l.source.id, l.target.id) for l in layout.links] == [("A", "B")]


def test_three_parents_outside_the_chart_do_not_abort() -> None:
    relationships = [_rel("parent_child", "A", "B")]
    relationships += [_rel("parent_child", p, "X") for p in ("Q1", "Q2", "Q3")]
    layout = build_pedigree_layout(_people("A", "B", "Q1", "Q2", "Q3", "X"), relationships, "A")

    assert [node.id for node in layout.nodes] == ["A", "B"]


def test_unconnected_person_is_left_out_of_bigger_tree() -> None:
    people, relationships = _family_tree()
    layout = build_pedigree_layout(people, relationships, "R")

    assert "U" not in layout.node_by_id
    assert len(layout.nodes) == len(people) - 1


def test_coordinates_start_at_padding() -> None:
    people, relationships = _family_tree()
    config = LayoutConfig()
    layout = build_pedigree_layout(people, relationships, "R", config)

    assert min(node.x for node in layout.nodes) == config.padding
    assert min(node.y for node in layout.nodes) == pytest.approx(config.padding)
    for node in layout.nodes:
        assert node.x == config.padding + node.generation * config.column_width
        assert node.y + config.node_height <= layout.height - config.padding + 1e-9

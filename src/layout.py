"""Pedigree chart layout: people and relationships in, positioned nodes and links out."""

import logging

from families import build_families
from generations import assign_generations
from graph import index_relationships
from lanes import assign_lanes, compact_node_lanes, lane_family_for
from links import build_junctions, build_links, normalize_bounds
from models import ChartNode, Diagnostic, LayoutConfig, LayoutResult, Person, Relationship
from positioning import position_nodes
from validation import usable_relationships, validate_relationships

logger = logging.getLogger(__name__)


def build_pedigree_layout(
    people: list[Person],
    relationships: list[Relationship],
    root_person_id: str,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """
    Lay out everyone connected to root_person_id as a left-to-right family tree chart.

    The layout is recomputed from scratch on every call and depends only on
    the arguments. People with no parent, child, spouse or partner path to
    the root are left out. Data problems are reported in
    LayoutResult.diagnostics rather than raised.

    Args:
        people: Person records
        relationships: Relationship records between those people
        root_person_id: The person the chart is built around
        config: Node sizes and spacing (defaults to LayoutConfig())

    Returns:
        The positioned nodes, links, union junctions and chart size

    Raises:
        TooManyParentsError: if a child has more than two distinct recorded parents
    """
    config = config or LayoutConfig()
    diagnostics: list[Diagnostic] = validate_relationships(people, relationships)
    for diagnostic in diagnostics:
        logger.warning("%s: %s", diagnostic.code, diagnostic.message)

    people_by_id = {person.id: person for person in people}
    if root_person_id not in people_by_id:
        diagnostic = Diagnostic(
            "root_not_found",
            f"Root person {root_person_id} is not in the people list",
            (root_person_id,),
        )
        logger.warning("%s: %s", diagnostic.code, diagnostic.message)
        diagnostics.append(diagnostic)
        width, height = normalize_bounds([], [], config)
        return LayoutResult(
            nodes=[],
            links=[],
            width=width,
            height=height,
            families={},
            family_by_child={},
            node_by_id={},
            diagnostics=diagnostics,
        )

    usable = usable_relationships(people, relationships)
    index = index_relationships(usable)
    generations = assign_generations(index, root_person_id)
    family_index = build_families(index, reachable=set(generations))
    lanes = assign_lanes(
        index,
        family_index,
        root_person_id,
        set(generations),
        search_width=config.lane_search_width,
    )

    nodes: list[ChartNode] = []
    for person_id in sorted(generations, key=lambda pid: (generations[pid], pid)):
        family_id = lane_family_for(family_index, person_id)
        nodes.append(
            ChartNode(
                id=person_id,
                person=people_by_id[person_id],
                generation=generations[person_id],
                family_id=family_id,
                lane=lanes[family_id] if family_id else 0,
                is_highlighted=person_id == root_person_id,
            )
        )
    node_by_id = {node.id: node for node in nodes}
    compact_node_lanes(nodes, [family_index.families[fid] for fid in sorted(lanes)])
    logger.debug(
        "Placing %d people in %d generations and %d lanes",
        len(nodes),
        len({node.generation for node in nodes}),
        len({node.lane for node in nodes}),
    )

    position_nodes(nodes, index, family_index, config)

    links = build_links(usable, index, family_index, node_by_id, root_person_id, diagnostics)
    junctions = build_junctions(links, family_index, node_by_id, config)
    width, height = normalize_bounds(nodes, junctions, config)

    families = {fid: family_index.families[fid] for fid in sorted(lanes)}
    family_by_child = {
        pid: fid
        for pid, fid in sorted(family_index.family_as_child.items())
        if pid in node_by_id and fid in families
    }

    return LayoutResult(
        nodes=nodes,
        links=links,
        width=width,
        height=height,
        families=families,
        family_by_child=family_by_child,
        node_by_id=node_by_id,
        junctions=junctions,
        diagnostics=diagnostics,
    )

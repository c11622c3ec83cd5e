"""Chart link building and coordinate normalization."""

import logging

from families import FamilyIndex
from graph import RelationshipIndex, resolve_parent_child
from models import (
    COUPLE_TYPES,
    PARENT_CHILD,
    ChartLink,
    ChartNode,
    Diagnostic,
    LayoutConfig,
    Relationship,
    UnionJunction,
)

logger = logging.getLogger(__name__)


def build_links(
    relationships: list[Relationship],
    index: RelationshipIndex,
    family_index: FamilyIndex,
    node_by_id: dict[str, ChartNode],
    root_id: str,
    diagnostics: list[Diagnostic],
) -> list[ChartLink]:
    """
    Derive parent and spouse links between placed nodes.

    Parent links are deduplicated by (parent, child) and dropped when the
    parent does not sit in an earlier generation than the child. Spouse and
    partner links are deduplicated by sorted pair, so a couple recorded more
    than once still gets a single link rather than one per record. Problems
    are appended to diagnostics.
    """
    links: list[ChartLink] = []
    seen_parent_edges: set[tuple[str, str]] = set()
    seen_couples: set[tuple[str, str]] = set()

    for rel in relationships:
        if rel.type == PARENT_CHILD:
            parent_id, child_id, consistent = resolve_parent_child(index, rel)
            if not consistent:
                _report(
                    diagnostics,
                    Diagnostic(
                        "link_direction_fallback",
                        f"Relationship {rel.id} disagrees with the parent index; "
                        f"using recorded order {parent_id} -> {child_id}",
                        (parent_id, child_id),
                    ),
                )
            if (parent_id, child_id) in seen_parent_edges:
                continue
            seen_parent_edges.add((parent_id, child_id))

            source = node_by_id.get(parent_id)
            target = node_by_id.get(child_id)
            if not source or not target:
                continue

            if source.generation >= target.generation:
                _report(
                    diagnostics,
                    Diagnostic(
                        "link_dropped",
                        f"Dropped parent link {parent_id} -> {child_id}: generation "
                        f"{source.generation} does not precede {target.generation}",
                        (parent_id, child_id),
                    ),
                )
                continue

            links.append(
                ChartLink(
                    source=source,
                    target=target,
                    type="parent",
                    is_highlighted=root_id in (parent_id, child_id),
                    family_id=family_index.family_as_child.get(child_id),
                )
            )

        elif rel.type in COUPLE_TYPES:
            a, b = sorted([rel.person_id1, rel.person_id2])
            if (a, b) in seen_couples:
                continue
            seen_couples.add((a, b))

            source = node_by_id.get(rel.person_id1)
            target = node_by_id.get(rel.person_id2)
            if not source or not target:
                continue

            links.append(
                ChartLink(
                    source=source,
                    target=target,
                    type="spouse",
                    is_highlighted=root_id in (rel.person_id1, rel.person_id2),
                )
            )

    return links


def build_junctions(
    links: list[ChartLink],
    family_index: FamilyIndex,
    node_by_id: dict[str, ChartNode],
    config: LayoutConfig,
) -> list[UnionJunction]:
    """
    Merge the parent links of each family into one union junction.

    The junction sits at the mean centre y of the family's parents, in the
    gutter right of the leftmost parent, and feeds each linked child once.
    """
    links_by_family: dict[str, list[ChartLink]] = {}
    for link in links:
        if link.type == "parent" and link.family_id:
            links_by_family.setdefault(link.family_id, []).append(link)

    junctions: list[UnionJunction] = []
    for family_id in sorted(links_by_family):
        family_links = links_by_family[family_id]
        fam = family_index.families[family_id]
        parents = [node_by_id[pid] for pid in fam.parents if pid in node_by_id]
        if not parents:
            continue

        children: dict[str, ChartNode] = {}
        for link in family_links:
            children.setdefault(link.target.id, link.target)

        leftmost = min(parents, key=lambda n: (n.x, n.id))
        junctions.append(
            UnionJunction(
                family_id=family_id,
                x=leftmost.x + config.node_width + config.horizontal_gap / 2,
                y=sum(p.y + config.node_height / 2 for p in parents) / len(parents),
                parents=parents,
                children=list(children.values()),
                is_highlighted=any(link.is_highlighted for link in family_links),
            )
        )

    return junctions


def normalize_bounds(
    nodes: list[ChartNode], junctions: list[UnionJunction], config: LayoutConfig
) -> tuple[float, float]:
    """
    Translate everything into a padded, non-negative space.

    Returns:
        (width, height) of the chart including padding on every side
    """
    padding = config.padding
    if not nodes:
        return 2 * padding, 2 * padding

    min_x = min(node.x for node in nodes)
    max_x = max(node.x + config.node_width for node in nodes)
    min_y = min(node.y for node in nodes)
    max_y = max(node.y + config.node_height for node in nodes)

    dx = padding - min_x
    dy = padding - min_y
    for node in nodes:
        node.x += dx
        node.y += dy
    for junction in junctions:
        junction.x += dx
        junction.y += dy

    return max_x - min_x + 2 * padding, max_y - min_y + 2 * padding


def _report(diagnostics: list[Diagnostic], diagnostic: Diagnostic) -> None:
    logger.warning("%s: %s", diagnostic.code, diagnostic.message)
    diagnostics.append(diagnostic)

"""Lineage lane assignment over family units.

A lane is a vertical band that keeps a lineage and its in-laws together. Lanes
are handed out by a breadth-first walk over families starting at the root's
birth family, each new family asking for a lane as close as possible to the
lane of the family it was reached from.
"""

import logging
from bisect import bisect_left, bisect_right
from collections import deque

from families import FamilyIndex
from graph import RelationshipIndex
from models import ChartNode, FamilyUnit

logger = logging.getLogger(__name__)


class LaneAllocator:
    def __init__(self, search_width: int = 49):
        self.search_width = search_width
        self.used: set[int] = set()

    def allocate_near(self, preferred: int) -> int:
        """Take the free lane closest to preferred, or preferred itself if none is free."""
        if preferred not in self.used:
            self.used.add(preferred)
            return preferred

        for distance in range(1, self.search_width + 1):
            for candidate in (preferred + distance, preferred - distance):
                if candidate not in self.used:
                    self.used.add(candidate)
                    return candidate

        logger.debug("No free lane within %d of %d; sharing it", self.search_width, preferred)
        return preferred


def assign_lanes(
    index: RelationshipIndex,
    family_index: FamilyIndex,
    root_id: str,
    placed: set[str],
    search_width: int = 49,
) -> dict[str, int]:
    """
    Assign a contiguous lane id to every family with placed members.

    Args:
        index: Relationship adjacency maps (for spouses of family members)
        family_index: Families and their reverse indices
        root_id: The root person
        placed: People that appear in the chart
        search_width: How far either side of the preferred lane to probe

    Returns:
        family id -> lane, with lanes numbered 0..N-1. The lane is also
        stored on each FamilyUnit.
    """
    families = {
        fid: fam
        for fid, fam in family_index.families.items()
        if any(pid in placed for pid in (*fam.parents, *fam.children))
    }
    allocator = LaneAllocator(search_width)
    lanes: dict[str, int] = {}
    queue: deque[FamilyUnit] = deque()

    def pull(fam: FamilyUnit | None, near: int) -> None:
        if fam is None or fam.id not in families or fam.id in lanes:
            return
        lanes[fam.id] = allocator.allocate_near(near)
        queue.append(fam)

    seed = family_index.birth_family(root_id)
    if seed is not None:
        pull(seed, 0)
    else:
        # No recorded parents: start from the root's own families instead
        for fam in family_index.parent_families(root_id):
            pull(fam, 0)

    while queue:
        fam = queue.popleft()
        lane = lanes[fam.id]

        for child_id in fam.children:
            for child_family in family_index.parent_families(child_id):
                pull(child_family, lane)

        for person_id in (*fam.parents, *fam.children):
            pull(family_index.birth_family(person_id), lane)
            for spouse_id in sorted(set(index.spouses_of(person_id))):
                pull(family_index.birth_family(spouse_id), lane)

    for fid in sorted(families):
        if fid not in lanes:
            lanes[fid] = allocator.allocate_near(0)

    # Compact to 0..N-1 keeping relative order
    compact = {lane: i for i, lane in enumerate(sorted(set(lanes.values())))}
    for fid in lanes:
        lanes[fid] = compact[lanes[fid]]
        families[fid].lane = lanes[fid]

    return lanes


def compact_node_lanes(nodes: list[ChartNode], families: list[FamilyUnit]) -> None:
    """
    Renumber lanes to 0..N-1 over the lanes nodes actually sit in.

    A family whose lane holds no node takes the closest occupied lane below
    it, so no empty band is left between lineages.
    """
    occupied = sorted({node.lane for node in nodes})
    if not occupied:
        return
    for node in nodes:
        node.lane = bisect_left(occupied, node.lane)
    for fam in families:
        if fam.lane is not None:
            fam.lane = max(0, bisect_right(occupied, fam.lane) - 1)


def lane_family_for(family_index: FamilyIndex, person_id: str) -> str | None:
    """
    Pick the family whose lane a person is drawn in.

    People who head a family sit in the lowest-laned of their own families so
    partners share a lane; everyone else sits in their birth family's lane.
    """
    own = [fam for fam in family_index.parent_families(person_id) if fam.lane is not None]
    if own:
        return min(own, key=lambda fam: (fam.lane, fam.id)).id
    birth = family_index.birth_family(person_id)
    if birth is not None and birth.lane is not None:
        return birth.id
    return None

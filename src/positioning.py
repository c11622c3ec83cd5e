"""Node positioning: block stacking, anchor refinement and collision packing."""

from dataclasses import dataclass, field

from families import FamilyIndex
from graph import RelationshipIndex
from models import ChartNode, LayoutConfig


@dataclass
class Block:
    nodes: list[ChartNode]
    anchor: float | None = None
    family_key: str = ""
    name: str = ""
    key: str = field(init=False)

    def __post_init__(self):
        self.key = "-".join(node.id for node in self.nodes)

    @property
    def lane(self) -> int:
        return self.nodes[0].lane

    def sort_key(self) -> tuple:
        return (
            self.anchor is None,
            self.anchor if self.anchor is not None else 0.0,
            self.lane,
            self.family_key,
            self.name,
            self.key,
        )


def build_blocks(lane_nodes: list[ChartNode], index: RelationshipIndex) -> list[Block]:
    """Pair spouses sharing a lane into couple blocks; everyone else is a solo block."""
    by_id = {node.id: node for node in lane_nodes}
    used: set[str] = set()
    blocks: list[Block] = []

    for node in sorted(lane_nodes, key=lambda n: n.id):
        if node.id in used:
            continue
        spouses = sorted(
            sid for sid in set(index.spouses_of(node.id)) if sid in by_id and sid not in used
        )
        members = [node]
        if spouses and spouses[0] != node.id:
            members = sorted([node, by_id[spouses[0]]], key=lambda n: n.id)
        used.update(member.id for member in members)
        blocks.append(Block(nodes=members))

    return blocks


def family_anchor(
    child_ids: list[str], node_by_id: dict[str, ChartNode], positioned: set[str]
) -> float | None:
    """Mean y of a family's positioned children."""
    ys = [node_by_id[cid].y for cid in child_ids if cid in positioned]
    return sum(ys) / len(ys) if ys else None


def place_initial(
    nodes: list[ChartNode],
    index: RelationshipIndex,
    family_index: FamilyIndex,
    config: LayoutConfig,
) -> None:
    """
    Stack blocks inside their lane band, deepest generation first.

    Blocks are ordered by the anchor of their already-placed children (blocks
    without one go last), then lane, family key, name and member ids.
    """
    node_by_id = {node.id: node for node in nodes}
    positioned: set[str] = set()

    for generation in sorted({node.generation for node in nodes}, reverse=True):
        gen_nodes = [node for node in nodes if node.generation == generation]

        for lane in sorted({node.lane for node in gen_nodes}):
            lane_nodes = [node for node in gen_nodes if node.lane == lane]
            blocks = build_blocks(lane_nodes, index)

            for block in blocks:
                anchors = []
                family_ids = []
                for member in block.nodes:
                    for fam in family_index.parent_families(member.id):
                        family_ids.append(fam.id)
                        anchor = family_anchor(fam.children, node_by_id, positioned)
                        if anchor is not None:
                            anchors.append(anchor)
                if not family_ids and block.nodes[0].family_id:
                    family_ids.append(block.nodes[0].family_id)
                block.anchor = sum(anchors) / len(anchors) if anchors else None
                block.family_key = min(family_ids) if family_ids else ""
                block.name = block.nodes[0].person.display_name

            blocks.sort(key=Block.sort_key)

            top = lane * config.lane_height
            for block in blocks:
                for member in block.nodes:
                    member.y = top
                    top += config.row_height
                    positioned.add(member.id)


def refine_anchors(
    nodes: list[ChartNode], family_index: FamilyIndex, config: LayoutConfig
) -> None:
    """
    Pull parents toward the mean y of their children.

    Runs config.anchor_iterations times. Shifts are clamped to
    config.max_anchor_shift; a couple moves by its midpoint and is then
    spread apart again if the partners end up closer than one row.
    """
    node_by_id = {node.id: node for node in nodes}
    placed = set(node_by_id)
    families = [
        fam
        for fam in family_index.families.values()
        if any(cid in placed for cid in fam.children)
        and any(pid in placed for pid in fam.parents)
    ]
    # Deepest families first so shifts can travel up in one iteration
    families.sort(
        key=lambda fam: (
            -max(node_by_id[cid].generation for cid in fam.children if cid in placed),
            fam.id,
        )
    )

    limit = config.max_anchor_shift
    for _ in range(config.anchor_iterations):
        for fam in families:
            anchor = family_anchor(fam.children, node_by_id, placed)
            parents = [node_by_id[pid] for pid in fam.parents if pid in placed]

            if len(parents) == 1:
                parent = parents[0]
                parent.y += max(-limit, min(limit, anchor - parent.y))
                continue

            first, second = sorted(parents, key=lambda n: (n.y, n.id))
            midpoint = (first.y + second.y) / 2
            shift = max(-limit, min(limit, anchor - midpoint))
            first.y += shift
            second.y += shift

            if second.y - first.y < config.row_height:
                midpoint += shift
                first.y = midpoint - config.row_height / 2
                second.y = midpoint + config.row_height / 2


def pack_generations(nodes: list[ChartNode], config: LayoutConfig) -> None:
    """Push nodes down so no two nodes of one generation overlap."""
    for generation in sorted({node.generation for node in nodes}):
        column = sorted(
            (node for node in nodes if node.generation == generation),
            key=lambda n: (n.y, n.id),
        )
        for prev, node in zip(column, column[1:]):
            min_y = prev.y + config.row_height
            if node.y < min_y:
                node.y = min_y


def position_nodes(
    nodes: list[ChartNode],
    index: RelationshipIndex,
    family_index: FamilyIndex,
    config: LayoutConfig,
) -> None:
    """Assign x from the generation column and y from the three placement passes."""
    for node in nodes:
        node.x = node.generation * config.column_width

    place_initial(nodes, index, family_index, config)
    refine_anchors(nodes, family_index, config)
    pack_generations(nodes, config)

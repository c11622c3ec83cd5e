"""Data classes for pedigree chart inputs and layout results."""

from dataclasses import dataclass, field

PARENT_CHILD = "parent_child"
SPOUSE = "spouse"
PARTNER = "partner"
SIBLING = "sibling"
HALF_SIBLING = "half_sibling"

RELATIONSHIP_TYPES = (PARENT_CHILD, SPOUSE, SIBLING, HALF_SIBLING, PARTNER)
COUPLE_TYPES = (SPOUSE, PARTNER)


@dataclass(frozen=True)
class Person:
    id: str
    given_names: str | None = None
    surnames: str | None = None
    is_living: bool = True
    profile_photo: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.surnames or ''} {self.given_names or ''}".strip()


@dataclass(frozen=True)
class Relationship:
    id: str
    type: str  # parent_child, spouse, sibling, half_sibling, partner
    person_id1: str  # the parent for parent_child
    person_id2: str  # the child for parent_child
    status: str | None = None


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 180
    node_height: float = 80
    horizontal_gap: float = 100
    row_gap: float = 18
    lane_height: float = 600
    padding: float = 100
    anchor_iterations: int = 3
    max_anchor_shift: float = 240
    lane_search_width: int = 49

    @property
    def row_height(self) -> float:
        return self.node_height + self.row_gap

    @property
    def column_width(self) -> float:
        return self.node_width + self.horizontal_gap


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    person_ids: tuple[str, ...] = ()


@dataclass
class FamilyUnit:
    id: str
    parents: tuple[str, ...]  # sorted, one or two people
    children: list[str] = field(default_factory=list)
    lane: int | None = None


@dataclass
class ChartNode:
    id: str
    person: Person
    generation: int
    family_id: str | None = None  # the family whose lane this node sits in
    lane: int = 0
    x: float = 0.0
    y: float = 0.0
    is_highlighted: bool = False


@dataclass
class ChartLink:
    source: ChartNode
    target: ChartNode
    type: str  # "parent" | "spouse"
    is_highlighted: bool = False
    family_id: str | None = None


@dataclass
class UnionJunction:
    family_id: str
    x: float
    y: float
    parents: list[ChartNode] = field(default_factory=list)
    children: list[ChartNode] = field(default_factory=list)
    is_highlighted: bool = False


@dataclass
class LayoutResult:
    nodes: list[ChartNode]
    links: list[ChartLink]
    width: float
    height: float
    families: dict[str, FamilyUnit]
    family_by_child: dict[str, str]
    node_by_id: dict[str, ChartNode]
    junctions: list[UnionJunction] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


class LayoutInputError(ValueError):
    """Raised when relationship data cannot be laid out unambiguously."""


class TooManyParentsError(LayoutInputError):
    def __init__(self, child_id: str, parent_ids: list[str]):
        self.child_id = child_id
        self.parent_ids = parent_ids
        super().__init__(
            f"Person {child_id} has {len(parent_ids)} recorded parents: {', '.join(parent_ids)}"
        )

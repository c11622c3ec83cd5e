"""Family unit building from the relationship index."""

from dataclasses import dataclass, field

from graph import RelationshipIndex
from models import FamilyUnit, TooManyParentsError


@dataclass
class FamilyIndex:
    families: dict[str, FamilyUnit] = field(default_factory=dict)
    family_as_child: dict[str, str] = field(default_factory=dict)
    families_as_parent: dict[str, list[str]] = field(default_factory=dict)

    def birth_family(self, person_id: str) -> FamilyUnit | None:
        family_id = self.family_as_child.get(person_id)
        return self.families.get(family_id) if family_id else None

    def parent_families(self, person_id: str) -> list[FamilyUnit]:
        return [self.families[fid] for fid in self.families_as_parent.get(person_id, [])]


def family_key(parent_ids: list[str]) -> str:
    """Return the stable key for a set of one or two parents."""
    parents = sorted(set(parent_ids))
    if len(parents) == 1:
        return f"single-{parents[0]}"
    return f"couple-{parents[0]}-{parents[1]}"


def build_families(index: RelationshipIndex, reachable: set[str] | None = None) -> FamilyIndex:
    """
    Group people into family units.

    Children are grouped by their recorded parent set, then every spouse or
    partner pair without a shared child becomes a childless couple family so
    the pair still sits together.

    Args:
        index: Relationship adjacency maps
        reachable: People that will be drawn. Children outside it with more
            than two parents are skipped instead of rejected. None checks everyone.

    Raises:
        TooManyParentsError: if a reachable child has more than two distinct parents.
    """
    out = FamilyIndex()

    for child_id in sorted(index.parents_by_child):
        # Repeated records of the same parent collapse into one
        parents = sorted(set(index.parents_by_child[child_id]))
        if not parents:
            continue
        if len(parents) > 2:
            if reachable is not None and child_id not in reachable:
                continue
            raise TooManyParentsError(child_id, parents)

        fam_id = family_key(parents)
        if fam_id not in out.families:
            out.families[fam_id] = FamilyUnit(id=fam_id, parents=tuple(parents))
        out.families[fam_id].children.append(child_id)
        out.family_as_child[child_id] = fam_id

    for a, b in index.spouse_pairs():
        if a == b or family_key([a, b]) in out.families:
            continue
        fam_id = f"spouse-{a}-{b}"
        out.families[fam_id] = FamilyUnit(id=fam_id, parents=(a, b))

    for fam_id in sorted(out.families):
        for parent_id in out.families[fam_id].parents:
            out.families_as_parent.setdefault(parent_id, []).append(fam_id)

    return out

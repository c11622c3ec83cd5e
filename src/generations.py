"""Generation assignment by breadth-first traversal from the root person."""

from collections import deque

from graph import RelationshipIndex


def assign_generations(index: RelationshipIndex, root_id: str) -> dict[str, int]:
    """
    Assign an integer generation to every person reachable from root_id.

    Parents get generation - 1, children generation + 1 and spouses the same
    generation. Each person keeps the generation from their first visit.
    Neighbours are visited in sorted id order. The result is shifted so the
    smallest generation is 0, then corrected by align_couples and
    enforce_parent_precedence, each applied once.

    Args:
        index: Relationship adjacency maps
        root_id: The person the traversal starts from

    Returns:
        person id -> generation for every reachable person, root included
    """
    generations: dict[str, int] = {root_id: 0}
    queue = deque([root_id])

    while queue:
        current_id = queue.popleft()
        generation = generations[current_id]

        steps = (
            (index.parents_of(current_id), generation - 1),
            (index.children_of(current_id), generation + 1),
            (index.spouses_of(current_id), generation),
        )
        for neighbours, neighbour_generation in steps:
            for person_id in sorted(set(neighbours)):
                if person_id in generations:
                    continue
                generations[person_id] = neighbour_generation
                queue.append(person_id)

    min_gen = min(generations.values())
    generations = {pid: gen - min_gen for pid, gen in generations.items()}

    align_couples(index, generations)
    enforce_parent_precedence(index, generations)
    return generations


def align_couples(index: RelationshipIndex, generations: dict[str, int]) -> None:
    """Move both partners of a misaligned couple to the smaller generation.

    Descendants of a moved partner are not moved with them.
    """
    for a, b in index.spouse_pairs():
        if a not in generations or b not in generations:
            continue
        if generations[a] != generations[b]:
            target = min(generations[a], generations[b])
            generations[a] = target
            generations[b] = target


def enforce_parent_precedence(index: RelationshipIndex, generations: dict[str, int]) -> None:
    """Push a child one generation past a parent that does not precede it.

    Edges are checked once, in order of the parent's generation at the start
    of the pass. The push does not cascade to the child's own descendants.
    """
    edges = [
        (parent_id, child_id)
        for parent_id, child_id in index.parent_edges()
        if parent_id in generations and child_id in generations
    ]
    edges.sort(key=lambda edge: (generations[edge[0]], edge[0], edge[1]))

    for parent_id, child_id in edges:
        if generations[parent_id] >= generations[child_id]:
            generations[child_id] = generations[parent_id] + 1

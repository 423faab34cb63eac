"""Breadth-first route finding over the grid world."""

from collections import deque

from frontline_backend.game.world import Cell, GridWorld


def find_path(
    world: GridWorld,
    start: Cell | None,
    goal: Cell | None,
    max_length: int = 16,
) -> list[Cell] | None:
    """
    Return the shortest route from start to goal.

    The route excludes start and includes goal, so its length is the number
    of steps. Returns [] when start is goal and None when either cell is
    missing or no route of at most max_length steps exists.
    """
    if start is None or goal is None:
        return None
    if start.id == goal.id:
        return []

    came_from: dict[int, Cell | None] = {start.id: None}
    queue = deque([(start, 0)])
    while queue:
        current, depth = queue.popleft()
        if depth >= max_length:
            continue
        for nb in world.neighbors(current):
            if nb.id in came_from:
                continue
            came_from[nb.id] = current
            if nb.id == goal.id:
                return _walk_back(came_from, nb)
            queue.append((nb, depth + 1))
    return None


def _walk_back(came_from: dict[int, Cell | None], goal: Cell) -> list[Cell]:
    path = []
    node: Cell | None = goal
    while node is not None and came_from[node.id] is not None:
        path.append(node)
        node = came_from[node.id]
    path.reverse()
    return path

"""
Required-node routing.

Finds the cheapest start -> goal route that visits every required node at least
once, in whatever order is cheapest. Works on the reduced "waypoint" graph
(start, goal and the required nodes) using a subset dynamic program:

    dp[mask][i] = cheapest walk from start that has visited exactly the
                  required nodes in `mask` and currently stands on required i

Transitions add one unvisited required node at a time using the pairwise
shortest distance between waypoints. The final answer adds the distance from
the last required node to the goal. O(k^2 * 2^k) for k required nodes.
"""

import logging
from typing import List, Optional, Tuple

from graph_arena.exceptions import UnreachableGoalError
from graph_arena.models import GraphModel, OptimalPath
from graph_arena.scoring import path_weight
from graph_arena.solver import INF, ShortestPathSolver, WaypointTable

logger = logging.getLogger(__name__)


class RequiredNodeRouter:
    """Computes the optimal route through all required nodes of a graph."""

    def __init__(self, solver: Optional[ShortestPathSolver] = None):
        self.solver = solver or ShortestPathSolver()

    def route(self, graph: GraphModel) -> OptimalPath:
        """
        Compute the minimum-weight start -> goal path through every required node.

        Raises:
            UnreachableGoalError: If no finite-weight route exists
        """
        start = graph.start_node_id
        goal = graph.goal_node_id
        required = list(graph.effective_required_node_ids)
        strategy = self.solver.strategy_for(graph)

        table = self.solver.waypoint_table(graph, [start, *required, goal])

        if not required:
            weight = table.distance(start, goal)
            if weight == INF:
                raise UnreachableGoalError(
                    f"Goal '{goal}' cannot be reached from start '{start}'",
                    start_node_id=start, goal_node_id=goal,
                )
            path = table.path(start, goal)
            return OptimalPath(path=path, total_weight=path_weight(graph, path), strategy=strategy)

        self._check_waypoints_reachable(table, start, goal, required)

        order, weight = self._best_order(table, start, goal, required)
        logger.debug(f"Best waypoint order {order} with weight {weight}")

        # Summed from the final walk the same way the scorer sums a submission
        path = self._stitch(table, [start, *order, goal])
        return OptimalPath(
            path=path,
            total_weight=path_weight(graph, path),
            waypoint_order=order,
            strategy=strategy,
        )

    def _check_waypoints_reachable(self, table: WaypointTable, start: str, goal: str, required: List[str]) -> None:
        """Fail early, naming the culprits, when a required node is cut off from start or goal."""
        unreachable = [r for r in required if table.distance(start, r) == INF]
        dead_ends = [r for r in required if table.distance(r, goal) == INF]
        if unreachable or dead_ends:
            raise UnreachableGoalError(
                "No route visits every required node: "
                f"unreachable from start {unreachable}, cannot reach goal {dead_ends}",
                unreachable_node_ids=unreachable, dead_end_node_ids=dead_ends,
            )

    def _best_order(self, table: WaypointTable, start: str, goal: str, required: List[str]) -> Tuple[List[str], float]:
        k = len(required)
        full = (1 << k) - 1
        cost = [[INF] * k for _ in range(1 << k)]
        parent: List[List[Optional[int]]] = [[None] * k for _ in range(1 << k)]

        for i, node_id in enumerate(required):
            cost[1 << i][i] = table.distance(start, node_id)

        # Masks grow monotonically, so increasing numeric order is a valid DP order
        for mask in range(1, full + 1):
            for last in range(k):
                current = cost[mask][last]
                if current == INF or not mask & (1 << last):
                    continue
                for nxt in range(k):
                    if mask & (1 << nxt):
                        continue
                    step = table.distance(required[last], required[nxt])
                    if step == INF:
                        continue
                    new_mask = mask | (1 << nxt)
                    if current + step < cost[new_mask][nxt]:
                        cost[new_mask][nxt] = current + step
                        parent[new_mask][nxt] = last

        best_weight = INF
        best_last = None
        for last in range(k):
            total = cost[full][last] + table.distance(required[last], goal)
            if total < best_weight:
                best_weight = total
                best_last = last

        if best_last is None:
            raise UnreachableGoalError(
                f"No single route from '{start}' to '{goal}' can visit all of {required}",
                start_node_id=start, goal_node_id=goal, required_node_ids=required,
            )

        order = []
        mask, last = full, best_last
        while last is not None:
            order.append(required[last])
            mask, last = mask & ~(1 << last), parent[mask][last]
        order.reverse()
        return order, best_weight

    def _stitch(self, table: WaypointTable, waypoints: List[str]) -> List[str]:
        """Join the shortest path of each leg, dropping the node shared between legs."""
        path = [waypoints[0]]
        for a, b in zip(waypoints, waypoints[1:]):
            path.extend(table.path(a, b)[1:])
        return path

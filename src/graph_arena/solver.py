"""
Shortest path solving over directed graphs with non-negative weights.

Two interchangeable strategies:
- Dijkstra (single source, binary heap) for large graphs
- Floyd-Warshall (all pairs, next-hop table) for small graphs, where the
  required-node router needs every pairwise distance anyway

Both work on index adjacency lists, `adjacency[u] = [(v, weight), ...]`, so they
can run on a GraphModel or on any raw index graph. Ties between equal-weight
routes go to the lower node id when a `rank` (GraphModel.id_rank) is given, and
to the lower index otherwise. GraphModel adjacency carries exact weights, so the
two strategies return identical distances.
"""

import heapq
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from graph_arena.config import EngineSettings, settings as default_settings
from graph_arena.exceptions import InvalidWeightError
from graph_arena.models import GraphModel

logger = logging.getLogger(__name__)

INF = math.inf

Adjacency = Sequence[Sequence[Tuple[int, float]]]


@dataclass
class ShortestPaths:
    """Distances and predecessor pointers from a single source."""
    source: int
    distances: List[float]
    predecessors: List[Optional[int]]

    def path_to(self, target: int) -> Optional[List[int]]:
        """Index path from the source to target, or None if target is unreachable."""
        if self.distances[target] == INF:
            return None
        path = [target]
        while path[-1] != self.source:
            path.append(self.predecessors[path[-1]])
        path.reverse()
        return path


@dataclass
class AllPairsTable:
    """Distance between every ordered pair plus the first hop of each shortest path."""
    distances: List[List[float]]
    next_hop: List[List[Optional[int]]]

    def row(self, source: int) -> List[float]:
        return self.distances[source]

    def path(self, source: int, target: int) -> Optional[List[int]]:
        """Index path from source to target, or None if target is unreachable."""
        if self.next_hop[source][target] is None:
            return None
        path = [source]
        current = source
        while current != target:
            current = self.next_hop[current][target]
            path.append(current)
        return path


@dataclass
class WaypointTable:
    """Pairwise distances and node-id paths between a handful of waypoints."""
    waypoint_ids: List[str]
    distances: Dict[Tuple[str, str], float]
    paths: Dict[Tuple[str, str], List[str]]

    def distance(self, source_id: str, target_id: str) -> float:
        return self.distances[(source_id, target_id)]

    def path(self, source_id: str, target_id: str) -> Optional[List[str]]:
        return self.paths.get((source_id, target_id))


def _check_weights(adjacency: Adjacency) -> None:
    for u, neighbours in enumerate(adjacency):
        for v, weight in neighbours:
            if weight < 0:
                raise InvalidWeightError(
                    f"Negative weight {weight} on edge {u}->{v}; shortest paths need non-negative weights",
                    source_index=u, target_index=v, weight=weight,
                )


def dijkstra(adjacency: Adjacency, source: int, rank: Optional[Sequence[int]] = None) -> ShortestPaths:
    """
    Single-source shortest paths with a binary heap.

    Heap entries are (distance, rank, node_index), so equal distances settle the
    lower-ranked node first. Predecessors only change on strict improvement,
    which keeps the result deterministic for a given edge order.

    Raises:
        InvalidWeightError: If any edge weight is negative
    """
    _check_weights(adjacency)

    n = len(adjacency)
    distances = [INF] * n
    predecessors: List[Optional[int]] = [None] * n
    settled = [False] * n

    if rank is None:
        rank = range(n)

    distances[source] = 0
    heap = [(0, rank[source], source)]
    while heap:
        distance, _, u = heapq.heappop(heap)
        if settled[u]:
            continue
        settled[u] = True
        for v, weight in adjacency[u]:
            candidate = distance + weight
            if candidate < distances[v]:
                distances[v] = candidate
                predecessors[v] = u
                heapq.heappush(heap, (candidate, rank[v], v))

    return ShortestPaths(source=source, distances=distances, predecessors=predecessors)


def floyd_warshall(adjacency: Adjacency, rank: Optional[Sequence[int]] = None) -> AllPairsTable:
    """
    All-pairs shortest paths in O(n^3), with a next-hop table for reconstruction.

    Intermediate nodes are tried in rank order and only strict improvements are
    kept, so an equal-weight detour through a higher-ranked node never replaces
    a route found earlier.

    Raises:
        InvalidWeightError: If any edge weight is negative
    """
    _check_weights(adjacency)

    n = len(adjacency)
    distances = [[INF] * n for _ in range(n)]
    next_hop: List[List[Optional[int]]] = [[None] * n for _ in range(n)]

    for i in range(n):
        distances[i][i] = 0
        next_hop[i][i] = i
    for u, neighbours in enumerate(adjacency):
        for v, weight in neighbours:
            if weight < distances[u][v]:
                distances[u][v] = weight
                next_hop[u][v] = v

    intermediates = range(n) if rank is None else sorted(range(n), key=lambda i: rank[i])
    for k in intermediates:
        row_k = distances[k]
        for i in range(n):
            d_ik = distances[i][k]
            if d_ik == INF:
                continue
            row_i = distances[i]
            hops_i = next_hop[i]
            hop_ik = hops_i[k]
            for j in range(n):
                candidate = d_ik + row_k[j]
                if candidate < row_i[j]:
                    row_i[j] = candidate
                    hops_i[j] = hop_ik

    return AllPairsTable(distances=distances, next_hop=next_hop)


class ShortestPathSolver:
    """Picks a strategy by graph size and answers shortest path queries on GraphModels."""

    DIJKSTRA = "dijkstra"
    FLOYD_WARSHALL = "floyd_warshall"

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or default_settings

    def strategy_for(self, graph: GraphModel) -> str:
        if graph.node_count <= self.settings.all_pairs_threshold:
            return self.FLOYD_WARSHALL
        return self.DIJKSTRA

    def all_pairs(self, graph: GraphModel) -> AllPairsTable:
        return floyd_warshall(graph.adjacency, graph.id_rank)

    def distances_from(self, graph: GraphModel, source_id: str) -> Dict[str, float]:
        """Distance from source_id to every node id (inf when unreachable)."""
        result = dijkstra(graph.adjacency, graph.index_of(source_id), graph.id_rank)
        return {graph.node_id_at(i): float(d) for i, d in enumerate(result.distances)}

    def shortest_path(self, graph: GraphModel, source_id: str, target_id: str) -> Tuple[Optional[List[str]], float]:
        """
        Point-to-point shortest path.

        Returns:
            (node id path, total weight), or (None, inf) if target is unreachable
        """
        table = self.waypoint_table(graph, [source_id, target_id])
        return table.path(source_id, target_id), float(table.distance(source_id, target_id))

    def waypoint_table(self, graph: GraphModel, waypoint_ids: Sequence[str]) -> WaypointTable:
        """
        Pairwise distances and paths between waypoints.

        Small graphs read them off the all-pairs table; large graphs run one
        Dijkstra per waypoint.
        """
        ids = list(dict.fromkeys(waypoint_ids))
        indices = [graph.index_of(node_id) for node_id in ids]
        strategy = self.strategy_for(graph)
        logger.debug(f"Solving {len(ids)} waypoints on {graph.node_count} nodes with {strategy}")

        distances: Dict[Tuple[str, str], float] = {}
        paths: Dict[Tuple[str, str], List[str]] = {}

        if strategy == self.FLOYD_WARSHALL:
            table = self.all_pairs(graph)
            for a_id, a in zip(ids, indices):
                for b_id, b in zip(ids, indices):
                    distances[(a_id, b_id)] = table.distances[a][b]
                    index_path = table.path(a, b)
                    if index_path is not None:
                        paths[(a_id, b_id)] = [graph.node_id_at(i) for i in index_path]
        else:
            for a_id, a in zip(ids, indices):
                single = dijkstra(graph.adjacency, a, graph.id_rank)
                for b_id, b in zip(ids, indices):
                    distances[(a_id, b_id)] = single.distances[b]
                    index_path = single.path_to(b)
                    if index_path is not None:
                        paths[(a_id, b_id)] = [graph.node_id_at(i) for i in index_path]

        return WaypointTable(waypoint_ids=ids, distances=distances, paths=paths)

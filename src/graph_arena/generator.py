"""
Random puzzle graph generation.

Algorithm:
1. Create the nodes on a jittered grid (positions are cosmetic).
2. Lay a spanning chain over a random permutation of the nodes, start first and
   goal in the latter half, so a start -> goal walk exists by construction.
3. Sprinkle extra random edges up to the target density.
4. Pick required nodes that are reachable from start and can reach the goal,
   resampling (bounded) until the whole set can be visited in one route.

All randomness comes from a `random.Random(seed)` passed down explicitly, so the
same config always produces the same graph.
"""

import logging
import math
import random
from collections import Counter
from typing import List, Optional, Tuple

from graph_arena.config import EngineSettings, settings as default_settings
from graph_arena.exceptions import GraphGenerationError, UnreachableGoalError
from graph_arena.models import Edge, GeneratorConfig, GraphModel, Node, Position
from graph_arena.router import RequiredNodeRouter
from graph_arena.solver import INF, ShortestPathSolver, dijkstra

logger = logging.getLogger(__name__)


def node_label(index: int) -> str:
    """Spreadsheet-style label: 0 -> A, 25 -> Z, 26 -> AA."""
    label = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


class GraphGenerator:
    """Builds random GraphModels with a guaranteed reachable goal."""

    GRID_SPACING = 100.0
    # Jitter stays under half a cell so nodes never overlap
    MAX_JITTER = 30.0
    # Random edge draws allowed per requested edge before giving up on density
    DRAWS_PER_EDGE = 20

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or default_settings
        self.router = RequiredNodeRouter(ShortestPathSolver(self.settings))

    def generate(self, config: GeneratorConfig) -> GraphModel:
        """
        Generate a graph for the given config.

        Raises:
            GraphGenerationError: If required nodes cannot be placed within the retry budget
        """
        rng = random.Random(config.seed)
        n = config.node_count
        logger.debug(f"Generating graph: {config.model_dump()}")

        nodes = self._make_nodes(n, rng)

        order = list(range(n))
        rng.shuffle(order)
        start = order[0]
        goal = order[rng.randint(max(1, n // 2), n - 1)]

        edges: List[Tuple[int, int, int]] = []
        pair_counts: Counter = Counter()

        def add_edge(u: int, v: int) -> None:
            edges.append((u, v, rng.randint(*config.weight_range)))
            pair_counts[(u, v)] += 1

        for u, v in zip(order, order[1:]):
            add_edge(u, v)

        self._add_random_edges(config, rng, add_edge, pair_counts, len(edges))

        graph = self._build(nodes, edges, start, goal, [])
        if config.required_node_count:
            graph = self._place_required_nodes(graph, nodes, edges, config, rng)

        logger.info(
            f"Generated graph with {graph.node_count} nodes, {len(graph.edges)} edges, "
            f"{len(graph.required_node_ids)} required (seed={config.seed})"
        )
        return graph

    def _make_nodes(self, n: int, rng: random.Random) -> List[Node]:
        columns = math.ceil(math.sqrt(n))
        nodes = []
        for i in range(n):
            row, column = divmod(i, columns)
            position = Position(
                x=round(column * self.GRID_SPACING + rng.uniform(-self.MAX_JITTER, self.MAX_JITTER), 1),
                y=round(row * self.GRID_SPACING + rng.uniform(-self.MAX_JITTER, self.MAX_JITTER), 1),
            )
            nodes.append(Node(id=f"n{i}", label=node_label(i), position=position))
        return nodes

    def _add_random_edges(self, config: GeneratorConfig, rng: random.Random, add_edge, pair_counts: Counter, existing: int) -> None:
        n = config.node_count
        capacity = n * (n - 1) * config.max_edge_multiplicity
        target = min(capacity, max(n - 1, round(config.edge_density * n * (n - 1))))

        added = existing
        max_draws = self.DRAWS_PER_EDGE * max(target, 1)
        for _ in range(max_draws):
            if added >= target:
                break
            u = rng.randrange(n)
            v = rng.randrange(n)
            if u == v or pair_counts[(u, v)] >= config.max_edge_multiplicity:
                continue
            add_edge(u, v)
            added += 1

        if added < target:
            logger.debug(f"Stopped at {added}/{target} edges after {max_draws} draws")

    def _place_required_nodes(
        self,
        graph: GraphModel,
        nodes: List[Node],
        edges: List[Tuple[int, int, int]],
        config: GeneratorConfig,
        rng: random.Random,
    ) -> GraphModel:
        start = graph.index_of(graph.start_node_id)
        goal = graph.index_of(graph.goal_node_id)
        retries = config.max_retries or self.settings.max_retries

        reachable = dijkstra(graph.adjacency, start).distances
        # Distances to the goal, from a single search on the flipped graph
        reaches_goal = dijkstra(graph.reversed_adjacency(), goal).distances
        pool = [i for i in range(graph.node_count) if reachable[i] < INF and i not in (start, goal)]

        chosen: List[int] = []
        failures = 0
        while True:
            if failures >= retries or len(chosen) + len(pool) < config.required_node_count:
                logger.warning(f"Could not place {config.required_node_count} required nodes (seed={config.seed})")
                raise GraphGenerationError(
                    f"Could not place {config.required_node_count} required nodes after {failures} failed attempts",
                    seed=config.seed, required_node_count=config.required_node_count, failures=failures,
                )

            candidate = pool.pop(rng.randrange(len(pool)))
            if reaches_goal[candidate] == INF:
                failures += 1
                logger.debug(f"Candidate n{candidate} cannot reach the goal, resampling")
                continue

            chosen.append(candidate)
            if len(chosen) < config.required_node_count:
                continue

            candidate_graph = self._build(nodes, edges, start, goal, chosen)
            try:
                self.router.route(candidate_graph)
            except UnreachableGoalError:
                failures += 1
                logger.debug(f"Required set {sorted(chosen)} has no joint route, resampling")
                chosen.pop()
                continue
            return candidate_graph

    def _build(self, nodes: List[Node], edges: List[Tuple[int, int, int]], start: int, goal: int, required: List[int]) -> GraphModel:
        return GraphModel(
            nodes=tuple(nodes),
            edges=tuple(
                Edge(id=f"e{k}", source=nodes[u].id, target=nodes[v].id, weight=weight)
                for k, (u, v, weight) in enumerate(edges)
            ),
            start_node_id=nodes[start].id,
            goal_node_id=nodes[goal].id,
            required_node_ids=tuple(nodes[i].id for i in required),
        )


def generate_graph(config: GeneratorConfig, settings: Optional[EngineSettings] = None) -> GraphModel:
    """Generate a random puzzle graph. Same config (including seed) gives the same graph."""
    return GraphGenerator(settings).generate(config)

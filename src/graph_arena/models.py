import math
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from graph_arena.exceptions import MalformedGraphError

# --- Enums ---

class Difficulty(str, Enum):
    """Preset difficulty profiles for generated puzzles."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

# --- Graph Models ---

# Exact edge weight: int when integral, otherwise the Fraction equal to the float.
# Sums of exact weights do not depend on the order they are added in.
ExactWeight = Union[int, Fraction]

def exact_weight(weight: float) -> ExactWeight:
    if float(weight).is_integer():
        return int(weight)
    return Fraction(weight)


class Position(BaseModel):
    """Layout position of a node. Cosmetic only, never read by the algorithms."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(0.0, description="Horizontal coordinate")
    y: float = Field(0.0, description="Vertical coordinate")

class Node(BaseModel):
    """A single node of the puzzle graph."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique node identifier")
    label: str = Field("", description="Label shown to the player")
    position: Position = Field(default_factory=Position, description="Layout position, passed through untouched")

class Edge(BaseModel):
    """A directed, weighted edge. Only traversable from source to target."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique edge identifier")
    source: str = Field(..., description="Id of the node the edge leaves")
    target: str = Field(..., description="Id of the node the edge enters")
    weight: float = Field(..., description="Positive traversal cost")

class GraphModel(BaseModel):
    """
    Immutable directed weighted graph for one round of the game.

    Node ids are mapped to indices once at construction, and the adjacency
    lists used by the solvers are precomputed from the edges. Those lists hold
    exact weights, so every route total is the same whichever way it is summed.
    Structural problems raise MalformedGraphError instead of a pydantic
    ValidationError.
    """
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[Node, ...] = Field(..., description="All nodes; ids must be unique")
    edges: Tuple[Edge, ...] = Field((), description="All edges; endpoints must reference existing nodes")
    start_node_id: str = Field(..., description="Node every route starts from")
    goal_node_id: str = Field(..., description="Node every route must end at")
    required_node_ids: Tuple[str, ...] = Field((), description="Nodes every route must visit, in any order")

    _node_index: Dict[str, int] = PrivateAttr(default_factory=dict)
    _adjacency: Tuple[Tuple[Tuple[int, ExactWeight], ...], ...] = PrivateAttr(default=())
    _id_rank: Tuple[int, ...] = PrivateAttr(default=())
    _outgoing: Dict[str, Tuple[Edge, ...]] = PrivateAttr(default_factory=dict)
    _cheapest: Dict[Tuple[int, int], ExactWeight] = PrivateAttr(default_factory=dict)

    @field_validator("required_node_ids")
    @classmethod
    def normalize_required(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        # Visiting order is irrelevant, so keep a canonical form
        return tuple(sorted(set(v)))

    def model_post_init(self, __context: Any) -> None:
        node_index: Dict[str, int] = {}
        for index, node in enumerate(self.nodes):
            if node.id in node_index:
                raise MalformedGraphError(f"Duplicate node id '{node.id}'", node_id=node.id)
            node_index[node.id] = index

        for role, node_id in (("start", self.start_node_id), ("goal", self.goal_node_id)):
            if node_id not in node_index:
                raise MalformedGraphError(f"The {role} node '{node_id}' is not in the graph", node_id=node_id)
        for node_id in self.required_node_ids:
            if node_id not in node_index:
                raise MalformedGraphError(f"Required node '{node_id}' is not in the graph", node_id=node_id)

        adjacency: List[List[Tuple[int, ExactWeight]]] = [[] for _ in self.nodes]
        outgoing: Dict[str, List[Edge]] = {node.id: [] for node in self.nodes}
        cheapest: Dict[Tuple[int, int], ExactWeight] = {}
        edge_ids = set()
        for edge in self.edges:
            if edge.id in edge_ids:
                raise MalformedGraphError(f"Duplicate edge id '{edge.id}'", edge_id=edge.id)
            edge_ids.add(edge.id)
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_index:
                    raise MalformedGraphError(
                        f"Edge '{edge.id}' references unknown node '{endpoint}'",
                        edge_id=edge.id, node_id=endpoint,
                    )
            if edge.source == edge.target:
                raise MalformedGraphError(f"Edge '{edge.id}' is a self-loop on '{edge.source}'", edge_id=edge.id)
            if not math.isfinite(edge.weight) or edge.weight <= 0:
                raise MalformedGraphError(
                    f"Edge '{edge.id}' has non-positive weight {edge.weight}",
                    edge_id=edge.id, weight=edge.weight,
                )

            u, v = node_index[edge.source], node_index[edge.target]
            weight = exact_weight(edge.weight)
            adjacency[u].append((v, weight))
            outgoing[edge.source].append(edge)
            if (u, v) not in cheapest or weight < cheapest[(u, v)]:
                cheapest[(u, v)] = weight

        self._node_index = node_index
        self._adjacency = tuple(tuple(neighbours) for neighbours in adjacency)
        ranked = sorted(range(len(self.nodes)), key=lambda i: self.nodes[i].id)
        id_rank = [0] * len(self.nodes)
        for rank, index in enumerate(ranked):
            id_rank[index] = rank
        self._id_rank = tuple(id_rank)
        self._outgoing = {node_id: tuple(edges) for node_id, edges in outgoing.items()}
        self._cheapest = cheapest

    @classmethod
    def load(cls, data: Dict[str, Any]) -> "GraphModel":
        """Build a graph from plain data (e.g. a stored puzzle), reporting every problem as MalformedGraphError."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise MalformedGraphError(f"Graph data is malformed: {'; '.join(problems)}", errors=problems) from e

    def to_json(self) -> str:
        """Canonical JSON serialization. Equal graphs serialize to identical strings."""
        return self.model_dump_json()

    # --- Derived queries ---

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def adjacency(self) -> Tuple[Tuple[Tuple[int, ExactWeight], ...], ...]:
        """Outgoing (target_index, exact weight) pairs per node index, in edge order."""
        return self._adjacency

    @property
    def id_rank(self) -> Tuple[int, ...]:
        """Position of each node index when the nodes are sorted by id. Used to break ties."""
        return self._id_rank

    def reversed_adjacency(self) -> List[List[Tuple[int, ExactWeight]]]:
        """Adjacency of the graph with every edge flipped."""
        reverse: List[List[Tuple[int, ExactWeight]]] = [[] for _ in self.nodes]
        for u, neighbours in enumerate(self._adjacency):
            for v, weight in neighbours:
                reverse[v].append((u, weight))
        return reverse

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_index

    def index_of(self, node_id: str) -> int:
        """Index of a node id. Raises KeyError for unknown ids."""
        return self._node_index[node_id]

    def node_id_at(self, index: int) -> str:
        return self.nodes[index].id

    def outgoing(self, node_id: str) -> Tuple[Edge, ...]:
        """Edges leaving the given node."""
        return self._outgoing.get(node_id, ())

    def edge_weight(self, source_id: str, target_id: str) -> Optional[ExactWeight]:
        """Exact weight of the cheapest source->target edge, or None if there is no such edge."""
        u = self._node_index.get(source_id)
        v = self._node_index.get(target_id)
        if u is None or v is None:
            return None
        return self._cheapest.get((u, v))

    @property
    def effective_required_node_ids(self) -> Tuple[str, ...]:
        """Required nodes that actually constrain a route (start and goal are always visited)."""
        return tuple(
            node_id for node_id in self.required_node_ids
            if node_id not in (self.start_node_id, self.goal_node_id)
        )

# --- Generator Configuration ---

DIFFICULTY_PRESETS: Dict[Difficulty, Dict[str, Any]] = {
    Difficulty.EASY: {"node_count": 6, "edge_density": 0.25, "weight_range": (1, 5), "required_node_count": 0},
    Difficulty.MEDIUM: {"node_count": 9, "edge_density": 0.3, "weight_range": (1, 9), "required_node_count": 1},
    Difficulty.HARD: {"node_count": 12, "edge_density": 0.3, "weight_range": (1, 15), "required_node_count": 2},
}

class GeneratorConfig(BaseModel):
    """Settings for one generated puzzle graph."""
    node_count: int = Field(..., ge=2, description="Number of nodes in the graph")
    edge_density: float = Field(0.3, ge=0.0, le=1.0, description="Fraction of the N*(N-1) ordered pairs that get an edge")
    weight_range: Tuple[int, int] = Field((1, 9), description="Inclusive (min, max) edge weight")
    required_node_count: int = Field(0, ge=0, description="How many nodes the route must pass through")
    seed: int = Field(..., description="Seed for the random generator; same seed gives the same graph")
    max_edge_multiplicity: int = Field(1, ge=1, description="How many parallel edges one ordered pair may carry")
    max_retries: Optional[int] = Field(None, ge=1, description="Required node resampling budget (defaults to engine settings)")

    @field_validator("weight_range")
    @classmethod
    def weight_range_must_be_positive(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        low, high = v
        if low < 1 or high < low:
            raise ValueError("weight_range must satisfy 1 <= min <= max")
        return v

    @model_validator(mode="after")
    def required_nodes_must_fit(self) -> "GeneratorConfig":
        if self.required_node_count > self.node_count - 2:
            raise ValueError("required_node_count cannot exceed node_count - 2")
        return self

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty, seed: int) -> "GeneratorConfig":
        """Build a config from one of the preset difficulty profiles."""
        return cls(seed=seed, **DIFFICULTY_PRESETS[Difficulty(difficulty)])

# --- Result Models ---

class OptimalPath(BaseModel):
    """Minimum-weight route from start to goal that visits every required node."""
    path: List[str] = Field(..., description="Node ids from start to goal")
    total_weight: float = Field(..., description="Sum of edge weights along the path")
    waypoint_order: List[str] = Field([], description="Required nodes in the order the route visits them")
    strategy: str = Field(..., description="Shortest path strategy used: 'dijkstra' or 'floyd_warshall'")

class PathCheck(BaseModel):
    """Outcome of validating a submitted path."""
    is_complete: bool = Field(..., description="Whether the path ends at the goal")
    satisfies_required_nodes: bool = Field(..., description="Whether every required node appears in the path")
    missing_required_node_ids: List[str] = Field([], description="Required nodes the path never visits")

class ScoreResult(BaseModel):
    """How a submitted path compares to the optimum."""
    submitted_weight: float = Field(..., description="Total weight of the submitted path")
    optimal_weight: float = Field(..., description="Weight of the best route of the same kind")
    weight_delta: Optional[float] = Field(None, description="submitted - optimal; None while the path is incomplete")
    is_optimal: bool = Field(..., description="Whether the submission matches the optimum")
    satisfies_required_nodes: bool = Field(..., description="Whether every required node was visited")
    is_complete: bool = Field(True, description="Whether the path reached the goal")
    missing_required_node_ids: List[str] = Field([], description="Required nodes the path never visits")

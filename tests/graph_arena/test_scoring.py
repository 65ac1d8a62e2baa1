"""
Tests for path validation and scoring.
"""

import pytest

from graph_arena.exceptions import InvalidPathError
from graph_arena.models import PathCheck
from graph_arena.scoring import path_weight, score_path, validate_path


@pytest.mark.unit
class TestValidatePath:
    """Legal walks, illegal moves and incomplete paths."""

    def test_complete_path(self, example_graph):
        check = validate_path(example_graph, ["A", "B", "D", "F"])
        assert check.is_complete
        assert check.satisfies_required_nodes
        assert check.missing_required_node_ids == []

    def test_incomplete_path_is_not_an_error(self, example_graph):
        check = validate_path(example_graph, ["A", "C"])
        assert not check.is_complete

    def test_start_only(self, example_graph):
        check = validate_path(example_graph, ["A"])
        assert not check.is_complete

    def test_missing_edge_names_the_pair(self, example_graph):
        with pytest.raises(InvalidPathError) as exc_info:
            validate_path(example_graph, ["A", "D"])
        assert exc_info.value.from_node_id == "A"
        assert exc_info.value.to_node_id == "D"
        assert exc_info.value.context["pair"] == ["A", "D"]

    def test_reverse_traversal_is_illegal(self, example_graph):
        with pytest.raises(InvalidPathError) as exc_info:
            validate_path(example_graph, ["A", "C", "A"])
        assert (exc_info.value.from_node_id, exc_info.value.to_node_id) == ("C", "A")

    def test_first_broken_pair_is_reported(self, example_graph):
        with pytest.raises(InvalidPathError) as exc_info:
            validate_path(example_graph, ["A", "B", "F", "A"])
        assert (exc_info.value.from_node_id, exc_info.value.to_node_id) == ("B", "F")

    def test_empty_path(self, example_graph):
        with pytest.raises(InvalidPathError, match="empty"):
            validate_path(example_graph, [])

    def test_wrong_start(self, example_graph):
        with pytest.raises(InvalidPathError, match="start node 'A'"):
            validate_path(example_graph, ["C", "E", "F"])

    def test_unknown_node(self, example_graph):
        with pytest.raises(InvalidPathError, match="Unknown node 'Z'"):
            validate_path(example_graph, ["A", "Z"])

    def test_required_membership_is_order_independent(self):
        from conftest import make_graph

        graph = make_graph(
            [("S", "X", 1), ("X", "Y", 1), ("Y", "X", 1), ("Y", "G", 1)],
            start="S",
            goal="G",
            required=("Y", "X"),
        )
        assert validate_path(graph, ["S", "X", "Y", "G"]).satisfies_required_nodes
        partial = validate_path(graph, ["S", "X"])
        assert not partial.satisfies_required_nodes
        assert partial.missing_required_node_ids == ["Y"]

    def test_input_is_not_modified(self, example_graph):
        path = ["A", "C", "E", "F", ]
        validate_path(example_graph, path)
        assert path == ["A", "C", "E", "F"]


@pytest.mark.unit
class TestScorePath:
    """Weights and deltas."""

    def test_path_weight(self, example_graph):
        assert path_weight(example_graph, ["A", "B", "D", "F"]) == 10
        assert path_weight(example_graph, ["A"]) == 0

    def test_suboptimal_path(self, example_graph):
        path = ["A", "B", "D", "F"]
        result = score_path(example_graph, path, validate_path(example_graph, path), optimal_weight=7)
        assert result.submitted_weight == 10
        assert result.weight_delta == 3
        assert result.is_optimal is False
        assert result.is_complete

    def test_optimal_path(self, example_graph):
        path = ["A", "C", "E", "F"]
        result = score_path(example_graph, path, validate_path(example_graph, path), optimal_weight=7)
        assert result.weight_delta == 0
        assert result.is_optimal is True

    def test_incomplete_path_has_no_delta(self, example_graph):
        check = PathCheck(is_complete=False, satisfies_required_nodes=True)
        result = score_path(example_graph, ["A", "C"], check, optimal_weight=7)
        assert result.submitted_weight == 3
        assert result.weight_delta is None
        assert result.is_optimal is False
        assert result.is_complete is False

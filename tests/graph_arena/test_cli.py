"""
Tests for the graph-arena command line.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from graph_arena.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def invoke(*args):
    return runner.invoke(app, ["--log-level", "WARNING", *args])


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.json"
    result = invoke("generate", "--seed", "5", "--nodes", "7", "--required", "1", "--output", str(path))
    assert result.exit_code == 0
    return path


@pytest.mark.unit
class TestCli:
    """generate, solve and evaluate from the command line."""

    def test_generate_prints_json(self):
        result = invoke("generate", "--seed", "3", "--difficulty", "medium")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["nodes"]) == 9
        assert len(data["required_node_ids"]) == 1

    def test_generate_is_deterministic(self):
        first = invoke("generate", "--seed", "12")
        second = invoke("generate", "--seed", "12")
        assert first.stdout == second.stdout

    def test_generate_failure_exits_nonzero(self):
        # A bare chain cannot place a required node after the goal
        codes = {
            invoke("generate", "--seed", str(seed), "--nodes", "6", "--density", "0", "--required", "4").exit_code
            for seed in range(10)
        }
        assert 1 in codes

    def test_solve(self, graph_file):
        result = invoke("solve", str(graph_file))
        assert result.exit_code == 0
        optimum = json.loads(result.stdout)
        graph = json.loads(graph_file.read_text())
        assert optimum["path"][0] == graph["start_node_id"]
        assert optimum["path"][-1] == graph["goal_node_id"]
        assert set(graph["required_node_ids"]) <= set(optimum["path"])

    def test_evaluate_optimal_route(self, graph_file):
        optimum = json.loads(invoke("solve", str(graph_file)).stdout)
        result = invoke("evaluate", str(graph_file), *optimum["path"])
        assert result.exit_code == 0
        score = json.loads(result.stdout)
        assert score["is_optimal"] is True
        assert score["weight_delta"] == 0

    def test_evaluate_illegal_move(self, graph_file):
        graph = json.loads(graph_file.read_text())
        # Start -> start is never an edge, since self-loops are not allowed
        result = invoke("evaluate", str(graph_file), graph["start_node_id"], graph["start_node_id"])
        assert result.exit_code == 1

    def test_malformed_graph_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"nodes": [{"id": "A"}], "start_node_id": "A", "goal_node_id": "B"}))
        result = invoke("solve", str(bad))
        assert result.exit_code == 1

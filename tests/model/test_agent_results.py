"""Parsing of raw agent payloads into the typed result tree."""

import logging

import pytest

from batchline.model.results import (
    AgentResult,
    FileCoverage,
    Suite,
    TestLeaf,
    is_leaf_mapping,
    parse_coverage,
    parse_node,
    parse_tree,
)


def _leaf(**overrides):
    data = {"passed": 1, "failed": 0, "type": "test"}
    data.update(overrides)
    return data


def test_leaf_requires_all_three_fields() -> None:
    assert is_leaf_mapping({"passed": 1, "failed": 0, "type": "test"})
    assert not is_leaf_mapping({"passed": 1, "failed": 0})
    assert not is_leaf_mapping({"passed": 1, "type": "test"})
    assert not is_leaf_mapping(["passed", "failed", "type"])


def test_parse_node_builds_leaf_with_defaults_from_key() -> None:
    node = parse_node("login", _leaf(failed=1, passed=0, message="boom"))
    assert node == TestLeaf(
        name="login", passed=0, failed=1, type="test", result=None, message="boom"
    )


def test_parse_node_prefers_explicit_names() -> None:
    node = parse_node("k", {"name": "Login suite", "t": _leaf(name="t1")})
    assert isinstance(node, Suite)
    assert node.name == "Login suite"
    assert node.children["t"].name == "t1"


def test_suite_drops_scalars_and_keeps_order() -> None:
    tree = parse_tree(
        "root",
        {"name": "x", "passed": 3, "b": {"t": _leaf()}, "a": {"t": _leaf()}},
    )
    assert list(tree.children) == ["b", "a"]


def test_lists_become_suites_indexed_by_position() -> None:
    node = parse_node("cases", [_leaf(name="first"), "skip me", _leaf(name="third")])
    assert isinstance(node, Suite)
    assert list(node.children) == ["0", "2"]
    assert [leaf.name for leaf in node.children.values()] == ["first", "third"]


def test_scalars_are_not_nodes() -> None:
    assert parse_node("n", 3) is None
    assert parse_node("s", "text") is None


def test_is_failure_uses_result_marker_then_failed_count() -> None:
    assert TestLeaf("a", 0, 1, "test", result="fail").is_failure()
    assert not TestLeaf("a", 0, 1, "test", result="pass").is_failure()
    assert TestLeaf("a", 0, 1, "test").is_failure()
    assert not TestLeaf("a", 1, 0, "test").is_failure()
    assert TestLeaf("a", 0, 1, "test", result="broken").is_failure("broken")


def test_agent_result_from_mapping_excludes_coverage_from_tree() -> None:
    result = AgentResult.from_mapping(
        {
            "name": "login.html",
            "passed": 2,
            "failed": 1,
            "coverage": {"src/app.js": {"calledLines": 3, "coveredLines": 10}},
            "ui": {"login": _leaf(passed=0, failed=1)},
        }
    )
    assert result.name == "login.html"
    assert (result.passed, result.failed) == (2, 1)
    assert result.coverage == {"src/app.js": FileCoverage(3, 10)}
    assert list(result.tree.children) == ["ui"]
    assert result.tree.name == "login.html"


def test_agent_result_keeps_empty_coverage_mapping() -> None:
    assert AgentResult.from_mapping({"name": "a", "coverage": {}}).coverage == {}
    assert AgentResult.from_mapping({"name": "a"}).coverage is None


def test_agent_result_tolerates_bad_counts(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="batchline"):
        result = AgentResult.from_mapping(
            {"name": "x", "passed": "many", "failed": -2}
        )
    assert (result.passed, result.failed) == (0, 0)
    assert "non-numeric passed" in caplog.text
    assert "invalid failed" in caplog.text


def test_agent_result_accepts_integral_floats() -> None:
    result = AgentResult.from_mapping({"name": "x", "passed": 4.0, "failed": 0})
    assert result.passed == 4


def test_parse_coverage_skips_malformed_entries(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="batchline"):
        sample = parse_coverage(
            {
                "good.js": {"calledLines": 2, "coveredLines": 4},
                "bad.js": {"calledLines": "2", "coveredLines": 4},
                "neg.js": {"calledLines": -1, "coveredLines": 4},
                "odd.js": 7,
            }
        )
    assert sample == {"good.js": FileCoverage(2, 4)}
    assert "bad.js" in caplog.text
    assert "odd.js" in caplog.text


def test_file_coverage_validates() -> None:
    with pytest.raises(ValueError):
        FileCoverage(called_lines=-1, covered_lines=0)
    with pytest.raises(TypeError):
        FileCoverage(called_lines=True, covered_lines=0)

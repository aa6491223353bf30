"""Coverage accumulation and its status-line fragment."""

import itertools

import pytest

from batchline.model.batch import BatchState
from batchline.model.results import FileCoverage
from batchline.report.coverage import CoverageAccumulator, format_percent


def _accumulator() -> CoverageAccumulator:
    return CoverageAccumulator(BatchState(total=0, start_time=0.0))


def test_totals_are_flattened_across_files_and_samples() -> None:
    acc = _accumulator()
    acc.add({"a.js": FileCoverage(3, 10), "b.js": FileCoverage(1, 4)})
    acc.add({"a.js": FileCoverage(2, 5)})
    assert acc.state.called_lines == 6
    assert acc.state.covered_lines == 19
    assert len(acc.state.coverage_samples) == 2


def test_merge_order_does_not_matter() -> None:
    samples = [
        {"fileA": FileCoverage(3, 10)},
        {"fileA": FileCoverage(2, 5)},
        {"fileB": FileCoverage(7, 7)},
    ]
    totals = set()
    for order in itertools.permutations(samples):
        acc = _accumulator()
        for sample in order:
            acc.add(sample)
        totals.add((acc.state.called_lines, acc.state.covered_lines))
    assert totals == {(12, 22)}


def test_each_sample_counted_once_across_summaries() -> None:
    acc = _accumulator()
    acc.add({"fileA": FileCoverage(3, 10)})
    acc.add({"fileA": FileCoverage(2, 5)})
    acc.summary()
    acc.summary()
    assert (acc.state.called_lines, acc.state.covered_lines) == (5, 15)


def test_summary_empty_until_a_line_is_called() -> None:
    acc = _accumulator()
    assert acc.summary() == ""
    acc.add({"a.js": FileCoverage(0, 40)})
    assert acc.percent() is None
    assert acc.summary() == ""


def test_percent_is_called_over_covered() -> None:
    acc = _accumulator()
    acc.add({"fileA": FileCoverage(3, 10)})
    acc.add({"fileA": FileCoverage(2, 5)})
    assert acc.percent() == pytest.approx(100 / 3)
    assert acc.summary() == "33% line coverage"


def test_zero_covered_lines_omits_coverage() -> None:
    acc = _accumulator()
    acc.add({"a.js": FileCoverage(4, 0)})
    assert acc.percent() is None
    assert acc.summary() == ""


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, "0"), (49.4, "49"), (50.5, "51"), (99.5, "100"), (150.0, "150")],
)
def test_format_percent_rounds_half_up(value, expected) -> None:
    assert format_percent(value) == expected

"""Tests for golden-conversation regression comparison."""

from grounding_engine.evaluation.regression import compare_to_baseline, summarize_regression


def test_small_drop_within_tolerance():
    result = compare_to_baseline("g1", {"voiceFidelity": 5}, {"voiceFidelity": 4.5})
    assert result.passed is True
    assert result.dimensions["voiceFidelity"].delta == -0.5


def test_larger_drop_fails():
    result = compare_to_baseline(
        "g1", {"voiceFidelity": 5, "metaHandling": 4}, {"voiceFidelity": 4, "metaHandling": 5}
    )
    assert result.passed is False
    assert result.dimensions["voiceFidelity"].passed is False
    assert result.dimensions["metaHandling"].passed is True
    assert result.baseline_total == 9
    assert result.new_total == 9


def test_missing_new_dimension_counts_as_zero():
    result = compare_to_baseline("g1", {"voiceFidelity": 4}, {})
    assert result.dimensions["voiceFidelity"].new == 0
    assert result.passed is False


def test_custom_tolerance():
    result = compare_to_baseline("g1", {"voiceFidelity": 5}, {"voiceFidelity": 4}, tolerance=1.0)
    assert result.passed is True


def test_summary():
    results = [
        compare_to_baseline("g1", {"a": 4}, {"a": 4}),
        compare_to_baseline("g2", {"a": 4}, {"a": 2}),
    ]
    summary = summarize_regression(results)
    assert summary.total_golden == 2
    assert summary.passed == 1
    assert summary.all_passed is False


def test_empty_summary_all_passed():
    summary = summarize_regression([])
    assert summary.total_golden == 0
    assert summary.all_passed is True

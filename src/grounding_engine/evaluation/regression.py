"""Compare re-scored golden conversations with their baseline scores."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from grounding_engine.models.domain import (
    DimensionComparison,
    RegressionComparison,
    RegressionSummary,
)


def compare_to_baseline(
    golden_id: str,
    baseline: Mapping[str, float],
    new: Mapping[str, float],
    tolerance: float = 0.5,
) -> RegressionComparison:
    """A dimension passes when it dropped by no more than ``tolerance``.

    Only the baseline's dimensions are compared; a dimension missing from
    ``new`` counts as 0.
    """
    dimensions: dict[str, DimensionComparison] = {}
    for dim, baseline_value in baseline.items():
        new_value = new.get(dim, 0)
        delta = new_value - baseline_value
        dimensions[dim] = DimensionComparison(
            baseline=baseline_value,
            new=new_value,
            delta=round(delta, 2),
            passed=delta >= -tolerance,
        )
    return RegressionComparison(
        golden_id=golden_id,
        passed=all(c.passed for c in dimensions.values()),
        baseline_total=sum(baseline.values()),
        new_total=sum(new.values()),
        dimensions=dimensions,
    )


def summarize_regression(results: Iterable[RegressionComparison]) -> RegressionSummary:
    results = list(results)
    passed = sum(1 for r in results if r.passed)
    return RegressionSummary(
        total_golden=len(results),
        passed=passed,
        all_passed=passed == len(results),
        results=results,
    )

"""Print a multi-judge review report from a JSON file of judge reports.

The file holds a list of ``{"judge_id", "judge_name", "results": [...]}`` objects.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grounding_engine.config.constants import DIMENSION_LABELS
from grounding_engine.config.settings import Settings
from grounding_engine.evaluation.aggregator import ScoreAggregator, summarize_batch
from grounding_engine.models.schemas import JudgeReportIn


def load_reports(path: Path):
    with open(path) as f:
        return [JudgeReportIn.model_validate(r).to_domain() for r in json.load(f)]


def print_report(reports, aggregator: ScoreAggregator) -> None:
    judges = [r.judge_id for r in reports]
    print(f"{'Dimension':<24}" + "".join(f"{j:>12}" for j in judges) + f"{'Spread':>9}")
    print("-" * (24 + 12 * len(judges) + 9))
    for row in aggregator.heatmap(reports):
        cells = "".join(f"{row.judge_averages[j]:>12.1f}" for j in judges)
        flags = []
        if row.high_variance:
            flags.append("DISAGREE")
        if row.needs_attention:
            flags.append("ATTENTION")
        label = DIMENSION_LABELS.get(row.dimension, row.dimension)
        print(f"{label:<24}{cells}{row.spread:>9.1f}  {' '.join(flags)}")

    print("\nBatches:")
    for report in reports:
        summary = summarize_batch(report)
        print(
            f"  {summary.judge_id}: {summary.scored_count} scored, "
            f"{summary.error_count} errors, average total {summary.average_total}"
        )

    concerns = sorted(aggregator.concerns(reports))
    print(f"\nConcerns ({len(concerns)}):")
    for concern in concerns:
        print(f"  - {concern}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Multi-judge review report")
    parser.add_argument("reports", type=Path, help="JSON file of judge reports")
    parser.add_argument("--dimension", help="Drill into one dimension")
    args = parser.parse_args()

    aggregator = ScoreAggregator(Settings())
    reports = load_reports(args.reports)
    if not reports:
        print("No judge reports found.")
        return

    print_report(reports, aggregator)

    if args.dimension:
        insight = aggregator.insights(reports, args.dimension)
        print(f"\n{DIMENSION_LABELS.get(insight.dimension, insight.dimension)}:")
        for fb in insight.judge_feedback:
            print(f"  {fb.judge_name} ({fb.average}): {fb.feedback or '-'}")
        for low in insight.low_scorers:
            print(f"  low: {low.conv_id} [{low.category}] scored {low.score}")
        for suggestion in insight.suggestions:
            print(f"  suggestion: {suggestion}")


if __name__ == "__main__":
    main()

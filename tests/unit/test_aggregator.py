"""Tests for multi-judge score aggregation."""

from __future__ import annotations

import pytest

from grounding_engine.evaluation.aggregator import (
    ScoreAggregator,
    aggregate_concerns,
    build_heatmap,
    dimension_averages,
    dimension_insights,
    round_score,
    severity_for,
    summarize_batch,
)
from grounding_engine.models.domain import JudgeReport, JudgeResult


def _report(judge_id: str, *score_sets: dict[str, float]) -> JudgeReport:
    return JudgeReport(
        judge_id=judge_id,
        judge_name=judge_id.title(),
        results=[JudgeResult(conv_id=f"c{i}", category="x", scores=s) for i, s in enumerate(score_sets)],
    )


@pytest.mark.parametrize(
    "value,expected",
    [(4.25, 4.3), (4.45, 4.5), (4.35, 4.3), (87 / 20, 4.3), (3.666, 3.7), (2.04, 2.0), (5, 5.0)],
)
def test_round_score_half_up(value, expected):
    assert round_score(value) == expected


def test_dimension_average_ignores_results_missing_it(scores_of):
    without_voice = {k: v for k, v in scores_of(2).items() if k != "voiceFidelity"}
    report = _report("j", {"voiceFidelity": 4}, {"voiceFidelity": 5}, without_voice)
    assert dimension_averages(report)["voiceFidelity"] == 4.5


def test_dimension_averages_skip_unscored_results(judge_reports):
    averages = dimension_averages(judge_reports[1])
    assert averages["voiceFidelity"] == 2.5
    assert averages["worldIntegrity"] == 4.0


def test_unscored_dimension_is_zero():
    report = _report("j", {"voiceFidelity": 4})
    averages = dimension_averages(report)
    assert averages["voiceFidelity"] == 4.0
    assert averages["metaHandling"] == 0.0


def test_empty_report_all_zero():
    assert set(dimension_averages(_report("j")).values()) == {0.0}


@pytest.mark.parametrize(
    "score,label",
    [(5.0, "excellent"), (4.5, "excellent"), (4.4, "good"), (4.0, "good"), (3.5, "fair"),
     (3.0, "weak"), (2.9, "critical"), (0.0, "critical")],
)
def test_severity_ladder(score, label):
    assert severity_for(score) == label


def test_heatmap_rows(judge_reports):
    rows = {row.dimension: row for row in build_heatmap(judge_reports)}
    assert len(rows) == 7

    voice = rows["voiceFidelity"]
    assert voice.judge_averages == {"arlea": 4.5, "gpt": 2.5}
    assert voice.spread == 2.0
    assert voice.high_variance is True
    assert voice.mean == 3.5
    assert voice.needs_attention is True
    assert voice.severities == {"arlea": "excellent", "gpt": "critical"}

    world = rows["worldIntegrity"]
    assert world.high_variance is False
    assert world.needs_attention is False


def test_heatmap_variance_boundary_not_flagged(scores_of):
    high = _report("a", {**scores_of(4), "voiceFidelity": 4.2})
    low = _report("b", {**scores_of(4), "voiceFidelity": 3.2})
    voice = build_heatmap([high, low])[0]
    assert voice.spread == pytest.approx(1.0)
    assert voice.high_variance is False


def test_heatmap_variance_just_over_boundary(scores_of):
    high = _report("a", {**scores_of(4), "voiceFidelity": 4.3})
    low = _report("b", {**scores_of(4), "voiceFidelity": 3.2})
    assert build_heatmap([high, low])[0].high_variance is True


def test_heatmap_single_judge_never_high_variance(scores_of):
    rows = build_heatmap([_report("a", scores_of(1))])
    assert not any(row.high_variance for row in rows)
    assert all(row.needs_attention for row in rows)


def test_concerns_exclude_primary_and_placeholders(judge_reports):
    assert aggregate_concerns(judge_reports, exclude_judge_id="arlea") == {"spoiler risk"}


def test_concerns_without_exclusion(judge_reports):
    assert aggregate_concerns(judge_reports) == {"spoiler risk", "internal only concern"}


def test_dimension_insights(judge_reports):
    insight = dimension_insights(judge_reports, "voiceFidelity")

    feedback = {fb.judge_id: fb for fb in insight.judge_feedback}
    assert feedback["arlea"].average == 4.5
    assert feedback["arlea"].feedback == "Sounds exactly like the book."
    assert feedback["gpt"].feedback == "Drifts into modern slang."

    assert [(s.conv_id, s.score) for s in insight.low_scorers] == [("c1", 3), ("c2", 2)]
    assert insight.suggestions == ["Keep the catchphrases", "Avoid modern slang"]


def test_dimension_insights_caps_suggestions():
    report = JudgeReport(
        judge_id="j",
        judge_name="J",
        results=[
            JudgeResult(conv_id=f"c{i}", category="x", suggestions=[f"idea {i}"]) for i in range(8)
        ],
    )
    insight = dimension_insights([report], "voiceFidelity", max_suggestions=5)
    assert insight.suggestions == [f"idea {i}" for i in range(5)]


def test_summarize_batch(judge_reports):
    summary = summarize_batch(judge_reports[1])
    assert summary.scored_count == 2
    assert summary.error_count == 1
    assert summary.average_total == 26.5


def test_summarize_empty_batch():
    assert summarize_batch(_report("j")).average_total == 0.0


def test_aggregator_defaults_to_primary_judge(settings, judge_reports):
    assert settings.primary_judge_id == "arlea"
    aggregator = ScoreAggregator(settings)
    assert aggregator.concerns(judge_reports) == {"spoiler risk"}
    assert aggregator.concerns(judge_reports, exclude_judge_id="gpt") == {"internal only concern"}


def test_concerns_deduplicated_across_judges():
    reports = [
        JudgeReport(
            judge_id=judge_id,
            judge_name=judge_id,
            results=[JudgeResult(conv_id="c1", category="x", concerns=concerns)],
        )
        for judge_id, concerns in [
            ("arlea", ["primary judge note"]),
            ("gpt", ["spoiler risk", ""]),
            ("gemini", ["List any specific concerns", "spoiler risk"]),
        ]
    ]
    assert aggregate_concerns(reports, exclude_judge_id="arlea") == {"spoiler risk"}


def test_average_ending_in_five_rounds_like_display():
    # 87 / 20 = 4.35, which binary floating point stores just below 4.35
    values = [5] * 13 + [4] + [3] * 6
    report = _report("j", *({"voiceFidelity": v} for v in values))
    assert dimension_averages(report)["voiceFidelity"] == 4.3

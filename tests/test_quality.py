from __future__ import annotations

import pytest

from cablelift_core.models import QualityTrend
from cablelift_core.tracking.quality import (
    RepQualityScorer,
    consistency_score,
    eccentric_control_score,
    quality_trend,
    smoothness_score,
)
from cablelift_core.tracking.running import RunningAverage

from tests.helpers import build_rep_data


@pytest.mark.parametrize(
    ("eccentric_ms", "concentric_ms", "expected"),
    [
        (2000, 1000, 25.0),
        (500, 1000, 6.25),
        (4000, 1000, 12.5),
        (1000, 0, 0.0),
        (0, 1000, 0.0),
    ],
)
def test_eccentric_control(eccentric_ms: int, concentric_ms: int, expected: float) -> None:
    assert eccentric_control_score(eccentric_ms, concentric_ms) == pytest.approx(expected)


def test_smoothness_rewards_steady_velocity() -> None:
    assert smoothness_score([200.0, 201.0, 199.0, 200.0, 200.0]) > 18.0
    assert smoothness_score([50.0, 300.0, 80.0, 350.0, 100.0]) < 10.0
    assert smoothness_score([300.0] * 4) == pytest.approx(20.0)


@pytest.mark.parametrize("velocities", [[], [0.0, 0.0]], ids=["empty", "stationary"])
def test_smoothness_without_signal_is_neutral(velocities) -> None:
    assert smoothness_score(velocities) == 10.0


def test_consistency_penalises_relative_deviation() -> None:
    assert consistency_score(100.0, 100.0, 30.0) == pytest.approx(30.0)
    assert consistency_score(90.0, 100.0, 30.0) == pytest.approx(21.0)
    assert consistency_score(110.0, 100.0, 30.0) == pytest.approx(21.0)
    assert consistency_score(60.0, 100.0, 30.0) == 0.0
    assert consistency_score(60.0, 0.0, 30.0) == 30.0


def test_first_rep_earns_full_rom_and_velocity_points() -> None:
    scorer = RepQualityScorer()

    score = scorer.score_rep(build_rep_data(range_of_motion_mm=10.0, avg_velocity_concentric=40.0))

    assert score.rom_score == 30.0
    assert score.velocity_score == 25.0
    assert score.eccentric_control_score == pytest.approx(25.0)
    assert score.smoothness_score == pytest.approx(20.0)
    assert score.composite == 100


def test_later_reps_compare_against_running_means() -> None:
    scorer = RepQualityScorer()
    scorer.score_rep(build_rep_data(1, range_of_motion_mm=100.0, avg_velocity_concentric=500.0))
    scorer.score_rep(build_rep_data(2, range_of_motion_mm=100.0, avg_velocity_concentric=500.0))

    score = scorer.score_rep(
        build_rep_data(3, range_of_motion_mm=90.0, avg_velocity_concentric=460.0)
    )

    assert score.rom_score == pytest.approx(21.0)
    assert score.velocity_score == pytest.approx(19.0)
    assert score.composite == 85


def test_composite_is_bounded() -> None:
    scorer = RepQualityScorer()
    scorer.score_rep(build_rep_data(1))

    worst = scorer.score_rep(
        build_rep_data(
            2,
            range_of_motion_mm=20.0,
            avg_velocity_concentric=50.0,
            eccentric_duration_ms=0,
            concentric_velocities=(50.0, 300.0, 80.0, 350.0, 100.0),
        )
    )

    assert worst.composite == 0
    for score in scorer.scores:
        assert 0 <= score.composite <= 100


@pytest.mark.parametrize(
    ("composites", "expected"),
    [
        ([], QualityTrend.STABLE),
        ([90], QualityTrend.STABLE),
        ([50, 50, 80, 80], QualityTrend.IMPROVING),
        ([80, 80, 50, 50], QualityTrend.DECLINING),
        ([70, 72, 71, 74], QualityTrend.STABLE),
        ([60, 70, 72], QualityTrend.IMPROVING),
    ],
)
def test_quality_trend(composites, expected) -> None:
    assert quality_trend(composites) is expected


def test_set_summary_reports_best_worst_and_trend() -> None:
    scorer = RepQualityScorer()
    assert scorer.get_set_summary() is None

    scorer.score_rep(build_rep_data(1))
    scorer.score_rep(build_rep_data(2))
    scorer.score_rep(build_rep_data(3, eccentric_duration_ms=500))
    scorer.score_rep(build_rep_data(4, eccentric_duration_ms=500))

    summary = scorer.get_set_summary()

    assert summary is not None
    assert summary.best_score == 100
    assert summary.best_rep_number == 1
    assert summary.worst_rep_number == 3
    assert summary.worst_score == 81
    assert summary.average_score == round((100 + 100 + 81 + 81) / 4)
    assert summary.trend is QualityTrend.DECLINING
    assert [score.rep_number for score in summary.rep_scores] == [1, 2, 3, 4]


def test_reset_matches_fresh_scorer() -> None:
    reps = [
        build_rep_data(1, range_of_motion_mm=100.0),
        build_rep_data(2, range_of_motion_mm=95.0, concentric_velocities=(480.0, 520.0, 500.0)),
        build_rep_data(3, range_of_motion_mm=80.0, eccentric_duration_ms=1200),
    ]
    reused = RepQualityScorer()
    reused.score_rep(build_rep_data(9, range_of_motion_mm=300.0, avg_velocity_concentric=900.0))
    reused.reset()

    assert reused.get_set_summary() is None
    fresh = RepQualityScorer()
    assert [reused.score_rep(rep) for rep in reps] == [fresh.score_rep(rep) for rep in reps]


def test_running_average() -> None:
    average = RunningAverage()
    assert average.average() == 0.0

    for value in (10.0, 20.0, 60.0):
        average.add(value)

    assert average.count == 3
    assert average.average() == pytest.approx(30.0)
    average.reset()
    assert average.count == 0
    assert average.average() == 0.0

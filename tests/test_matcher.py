import numpy as np
import pytest

from audiowatch.matcher import (
    Matcher,
    comparison_frames,
    evaluate,
    pattern_score,
    spectrum_similarity,
)
from audiowatch.models import Frame

from tests.conftest import make_frame, make_pattern


def test_similarity_within_tolerance_is_one() -> None:
    rng = np.random.default_rng(0)
    a = rng.integers(0, 200, size=1024).astype(np.uint8)
    b = a.copy()
    # every compared bin differs by 29, the others by a lot
    b[::5] = a[::5] + 29
    b[1::5] = 255 - a[1::5]
    assert spectrum_similarity(a, b) == pytest.approx(1.0)


def test_similarity_outside_tolerance_is_zero() -> None:
    a = np.full(1024, 10, dtype=np.uint8)
    b = a.copy()
    b[::5] = 40
    assert spectrum_similarity(a, b) == 0.0


def test_similarity_does_not_wrap_uint8() -> None:
    a = np.zeros(1024, dtype=np.uint8)
    b = np.full(1024, 250, dtype=np.uint8)
    assert spectrum_similarity(a, b) == 0.0
    assert spectrum_similarity(b, a) == 0.0


def test_similarity_counts_compared_bins() -> None:
    a = np.zeros(1024, dtype=np.uint8)
    b = a.copy()
    # 205 compared bins (0, 5, ..., 1020); make 41 of them differ
    b[: 41 * 5 : 5] = 100
    assert spectrum_similarity(a, b) == pytest.approx(164 / 205)


def test_similarity_empty_spectrum() -> None:
    assert spectrum_similarity(np.array([], dtype=np.uint8), np.zeros(4, dtype=np.uint8)) == 0.0


def test_comparison_frames_use_every_tenth_frame() -> None:
    frames = [make_frame(i, timestamp=i) for i in range(25)]
    selected = comparison_frames(make_pattern(frames))
    assert [f.timestamp for f in selected] == [0, 10, 20]


def test_trailing_partial_stride_frame_is_compared() -> None:
    live = make_frame(50)
    frames = [make_frame(50) for _ in range(20)] + [make_frame(200)]
    pattern = make_pattern(frames)
    assert len(comparison_frames(pattern)) == 3
    assert pattern_score(live, pattern) == pytest.approx(2 / 3)
    assert evaluate(live, [pattern]) == []


def test_nine_frames_never_match() -> None:
    live = make_frame(50)
    pattern = make_pattern([make_frame(50) for _ in range(9)])
    assert comparison_frames(pattern) == ()
    assert pattern_score(live, pattern) is None
    assert evaluate(live, [pattern]) == []


def test_identical_frame_matches() -> None:
    live = make_frame(50)
    pattern = make_pattern([make_frame(50)] + [make_frame(200) for _ in range(9)])
    assert pattern_score(live, pattern) == pytest.approx(1.0)
    assert evaluate(live, [pattern]) == ["Doorbell"]


def test_quiet_live_frame_does_not_match() -> None:
    live = make_frame(15)
    assert live.level == pytest.approx(15.0)
    pattern = make_pattern([make_frame(15) for _ in range(10)])
    assert pattern_score(live, pattern) == pytest.approx(1.0)
    assert evaluate(live, [pattern]) == []


def test_similarity_is_averaged_over_comparison_frames() -> None:
    live = make_frame(50)
    frames = [make_frame(50) for _ in range(10)] + [make_frame(200) for _ in range(10)]
    pattern = make_pattern(frames)
    assert pattern_score(live, pattern) == pytest.approx(0.5)
    assert evaluate(live, [pattern]) == []


def test_threshold_is_exclusive() -> None:
    live = make_frame(50)
    pattern = make_pattern([make_frame(50) for _ in range(10)])
    assert evaluate(live, [pattern], threshold=1.0) == []


def test_matcher_scores_patterns_independently() -> None:
    live = make_frame(80)
    bell = make_pattern([make_frame(80) for _ in range(10)], name="Bell", pattern_id=1)
    kettle = make_pattern([make_frame(0) for _ in range(10)], name="Kettle", pattern_id=2)
    whistle = make_pattern([make_frame(90) for _ in range(20)], name="Whistle", pattern_id=3)
    assert Matcher().evaluate(live, [bell, kettle, whistle]) == ["Bell", "Whistle"]


def test_matcher_uses_configured_parameters() -> None:
    live = make_frame(60)
    pattern = make_pattern([make_frame(50) for _ in range(2)])
    matcher = Matcher(frame_stride=2, tolerance=5, min_level=10)
    assert matcher.evaluate(live, [pattern]) == []
    matcher.tolerance = 11
    assert matcher.evaluate(live, [pattern]) == ["Doorbell"]


def test_level_is_mean_of_spectrum() -> None:
    frame = Frame.from_spectrum(np.array([0, 10, 20, 30], dtype=np.uint8), 5)
    assert frame.level == pytest.approx(15.0)
    assert frame.timestamp == 5

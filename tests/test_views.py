from audiowatch.debounce import DetectionHistory
from audiowatch.models import Detection
from audiowatch.views import (
    NO_DETECTIONS,
    NO_EMAILS,
    NO_PATTERNS,
    detection_lines,
    email_lines,
    pattern_lines,
)

from tests.conftest import make_frame, make_pattern


def test_empty_states() -> None:
    assert email_lines([]) == [NO_EMAILS]
    assert pattern_lines([]) == [NO_PATTERNS]
    assert detection_lines(DetectionHistory()) == [NO_DETECTIONS]


def test_pattern_lines_show_seconds() -> None:
    pattern = make_pattern([make_frame() for _ in range(32)], name="Bell", pattern_id=5)
    assert pattern_lines([pattern]) == ["Bell  1.6s  (5)"]


def test_detection_lines_latest_ten_newest_first() -> None:
    history = DetectionHistory(Detection(f"s{i}", i, f"10:00:{i:02d}") for i in range(12))
    lines = detection_lines(history)
    assert len(lines) == 10
    assert lines[0] == "10:00:11  s11"
    assert lines[-1] == "10:00:02  s2"


def test_email_lines() -> None:
    assert email_lines(["a@x.it", "b@x.it"]) == ["a@x.it", "b@x.it"]

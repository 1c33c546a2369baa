import logging

import pytest

from audiowatch.debounce import DetectionDebouncer, DetectionHistory
from audiowatch.models import Detection


def test_cooldown_boundaries() -> None:
    debouncer = DetectionDebouncer()
    assert debouncer.try_accept("Bell", now=0) is not None
    assert debouncer.try_accept("Bell", now=4999) is None
    accepted = debouncer.try_accept("Bell", now=5001)
    assert accepted is not None
    assert accepted.timestamp == 5001
    assert len(debouncer.history) == 2


def test_cooldown_elapsed_exactly_is_accepted() -> None:
    debouncer = DetectionDebouncer()
    debouncer.try_accept("Bell", now=0)
    assert debouncer.try_accept("Bell", now=5000) is not None


def test_cooldown_is_global_across_sounds() -> None:
    debouncer = DetectionDebouncer()
    assert debouncer.try_accept("Bell", now=1000) is not None
    assert debouncer.try_accept("Kettle", now=2000) is None
    assert [d.sound for d in debouncer.history] == ["Bell"]


def test_rejection_is_measured_from_last_accepted() -> None:
    debouncer = DetectionDebouncer()
    debouncer.try_accept("Bell", now=0)
    debouncer.try_accept("Bell", now=3000)
    assert debouncer.try_accept("Bell", now=5500) is not None


def test_notifiers_called_once_per_acceptance() -> None:
    received: list[Detection] = []
    debouncer = DetectionDebouncer(notifiers=[received.append])
    debouncer.try_accept("Bell", now=0)
    debouncer.try_accept("Bell", now=10)
    debouncer.try_accept("Bell", now=6000)
    assert [d.timestamp for d in received] == [0, 6000]


def test_failing_notifier_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    received: list[str] = []

    def broken(_detection: Detection) -> None:
        raise RuntimeError("boom")

    debouncer = DetectionDebouncer(notifiers=[broken, lambda d: received.append(d.sound)])
    with caplog.at_level(logging.ERROR):
        assert debouncer.try_accept("Bell", now=0) is not None
    assert received == ["Bell"]
    assert "failed" in caplog.text


def test_detection_fields_use_clock() -> None:
    debouncer = DetectionDebouncer(clock=lambda: 1_700_000_000_000)
    detection = debouncer.try_accept("Bell")
    assert detection is not None
    assert detection.sound == "Bell"
    assert detection.timestamp == 1_700_000_000_000
    assert len(detection.display_time.split(":")) == 3


def test_history_rejects_older_detection() -> None:
    history = DetectionHistory([Detection("Bell", 10, "00:00:00")])
    with pytest.raises(ValueError):
        history.append(Detection("Bell", 9, "00:00:00"))
    history.append(Detection("Bell", 10, "00:00:00"))
    assert len(history) == 2


def test_history_recent_is_newest_first() -> None:
    history = DetectionHistory(Detection(f"s{i}", i, "00:00:00") for i in range(15))
    recent = history.recent()
    assert len(recent) == 10
    assert [d.timestamp for d in recent] == list(range(14, 4, -1))
    assert history.recent(3)[0].sound == "s14"

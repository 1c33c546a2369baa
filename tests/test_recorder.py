import pytest

from audiowatch.errors import AlreadyRecording, EmptyRecording, InvalidName, NotRecording
from audiowatch.recorder import PatternRecorder

from tests.conftest import make_frame


def _recorder(clock_value: int = 1_700_000_000_000) -> PatternRecorder:
    return PatternRecorder(tick_interval_ms=50, clock=lambda: clock_value)


def test_finish_builds_pattern() -> None:
    recorder = _recorder(1234)
    recorder.start()
    frames = [make_frame(i, timestamp=i) for i in range(30)]
    for frame in frames:
        recorder.on_tick(frame)

    pattern = recorder.finish("  Doorbell ")

    assert pattern.id == 1234
    assert pattern.name == "Doorbell"
    assert pattern.frames == tuple(frames)
    assert pattern.duration == 30 * 50
    assert pattern.duration_seconds == pytest.approx(1.5)
    assert not recorder.is_recording


def test_finish_without_frames_fails_for_valid_name() -> None:
    recorder = _recorder()
    recorder.start()
    with pytest.raises(EmptyRecording):
        recorder.finish("Doorbell")
    assert not recorder.is_recording


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_finish_rejects_blank_name(name: str) -> None:
    recorder = _recorder()
    recorder.start()
    recorder.on_tick(make_frame())
    with pytest.raises(InvalidName):
        recorder.finish(name)
    # the buffer is discarded either way
    assert not recorder.is_recording
    assert recorder.frame_count == 0


def test_start_twice_raises() -> None:
    recorder = _recorder()
    recorder.start()
    with pytest.raises(AlreadyRecording):
        recorder.start()


def test_start_clears_previous_buffer() -> None:
    recorder = _recorder()
    recorder.start()
    recorder.on_tick(make_frame())
    recorder.cancel()
    recorder.start()
    assert recorder.frame_count == 0


def test_on_tick_while_idle_raises() -> None:
    with pytest.raises(NotRecording):
        _recorder().on_tick(make_frame())


def test_cancel_discards_frames() -> None:
    recorder = _recorder()
    recorder.start()
    recorder.on_tick(make_frame())
    recorder.cancel()
    assert not recorder.is_recording
    with pytest.raises(EmptyRecording):
        recorder.finish("Doorbell")

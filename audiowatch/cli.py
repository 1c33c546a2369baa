#!/usr/bin/env python3
"""Command line front end for audiowatch."""

from __future__ import annotations

import argparse
import signal
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import get_config_value, load_config
from .constants import RECENT_DETECTIONS
from .debounce import DetectionDebouncer
from .errors import (
    AudioWatchError,
    DuplicateEmail,
    EmptyRecording,
    InvalidEmail,
    InvalidName,
    PermissionDenied,
)
from .logger import get_logger, setup_logging
from .matcher import Matcher
from .notifiers import DesktopNotifier, EmailNotifier
from .persistence import DataFile
from .recorder import PatternRecorder
from .scheduler import DetectorState, Scheduler
from .spectrum import SpectrumSampler
from .store import EmailList, PatternStore
from .views import detection_lines, email_lines, pattern_lines
from .wakelock import WakeLock

log = get_logger(__name__)

# ─── COMPONENTS ────────────────────────────────────────────────────────────────


def build_scheduler(
    config: Dict[str, Any],
    state: DetectorState,
    tray: Optional[object] = None,
) -> Scheduler:
    """Wire sampler, recorder, matcher and debouncer from ``config``."""
    audio = config["audio"]
    matching = config["matching"]
    tick_interval_ms = get_config_value(config, "scheduler.tick_interval_ms")

    sampler = SpectrumSampler(
        audio["device"],
        sample_rate=audio["sample_rate"],
        channels=audio["channels"],
        fft_size=audio["fft_size"],
        smoothing=audio["smoothing"],
        min_db=audio["min_db"],
        max_db=audio["max_db"],
    )
    matcher = Matcher(
        threshold=matching["threshold"],
        min_level=matching["min_level"],
        frame_stride=matching["frame_stride"],
        bin_stride=matching["bin_stride"],
        tolerance=matching["tolerance"],
    )
    debouncer = DetectionDebouncer(
        state.history,
        [DesktopNotifier(tray), EmailNotifier(state.emails)],
        cooldown_ms=get_config_value(config, "detection.cooldown_ms"),
    )
    wake_lock = WakeLock() if get_config_value(config, "scheduler.wake_lock", True) else None
    return Scheduler(
        sampler,
        state=state,
        recorder=PatternRecorder(tick_interval_ms=tick_interval_ms),
        matcher=matcher,
        debouncer=debouncer,
        wake_lock=wake_lock,
        tick_interval_ms=tick_interval_ms,
    )


def _data_file(args: argparse.Namespace, config: Dict[str, Any]) -> DataFile:
    path = args.data_file or get_config_value(config, "storage.data_file")
    return DataFile(Path(path) if path else None)


def _load_state(data_file: DataFile) -> DetectorState:
    saved = data_file.load()
    return DetectorState(store=PatternStore(saved.patterns), emails=EmailList(saved.emails))


def _save_state(data_file: DataFile, state: DetectorState) -> None:
    data_file.save(state.emails.all(), state.store.all())


def _recent_lines(config: Dict[str, Any], state: DetectorState) -> list[str]:
    limit = get_config_value(config, "detection.recent", RECENT_DETECTIONS)
    return ["Recent detections:"] + detection_lines(state.history, limit)


# ─── COMMANDS ──────────────────────────────────────────────────────────────────


def cmd_listen(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    from PySide6 import QtCore, QtWidgets

    state = _load_state(_data_file(args, config))
    if not len(state.store):
        log.warning("No pattern recorded yet; nothing can be detected")

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
    tray = None
    if QtWidgets.QSystemTrayIcon.isSystemTrayAvailable():
        tray = QtWidgets.QSystemTrayIcon(
            app.style().standardIcon(QtWidgets.QStyle.StandardPixmap.SP_MediaVolume)
        )
        tray.show()
    else:
        log.info("No system tray available; notifications go to the log")

    scheduler = build_scheduler(config, state, tray)
    scheduler.soundDetected.connect(
        lambda name: print("\n".join(detection_lines(state.history, 1)), flush=True)
    )

    try:
        scheduler.start_listening()
    except PermissionDenied as e:
        log.error("Microphone permission denied: %s", e)
        return 1

    signal.signal(signal.SIGINT, lambda *_: app.quit())
    # Let the interpreter run periodically so Ctrl+C is noticed.
    timer = QtCore.QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(200)

    print("Listening... (Ctrl+C to stop)", flush=True)
    try:
        app.exec()
    finally:
        scheduler.shutdown()
        if tray is not None:
            tray.hide()
    print("\n".join(_recent_lines(config, state)))
    return 0


def cmd_record(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    data_file = _data_file(args, config)
    state = _load_state(data_file)
    scheduler = build_scheduler(config, state)
    name = args.name
    if name is None:
        name = input("Sound name (e.g. Doorbell, Whistle): ")

    try:
        scheduler.start_recording()
    except PermissionDenied as e:
        log.error("Microphone permission denied: %s", e)
        return 1

    try:
        if args.seconds:
            print(f"Recording for {args.seconds:.1f}s...", flush=True)
            time.sleep(args.seconds)
        else:
            input("Recording... press Enter to stop. ")
    except KeyboardInterrupt:
        scheduler.shutdown()
        print("\nRecording cancelled.")
        return 1

    try:
        pattern = scheduler.finish_recording(name)
    except (EmptyRecording, InvalidName) as e:
        log.error("Invalid recording: %s", e)
        return 1
    finally:
        scheduler.shutdown()

    _save_state(data_file, state)
    print(f"Pattern saved: {pattern.name} ({pattern.duration_seconds:.1f}s)")
    return 0


def cmd_patterns(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    state = _load_state(_data_file(args, config))
    print("\n".join(pattern_lines(state.store)))
    return 0


def cmd_remove_pattern(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    data_file = _data_file(args, config)
    state = _load_state(data_file)
    state.store.remove(args.id)
    _save_state(data_file, state)
    print("\n".join(pattern_lines(state.store)))
    return 0


def cmd_emails(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    state = _load_state(_data_file(args, config))
    print("\n".join(email_lines(state.emails)))
    return 0


def cmd_add_email(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    data_file = _data_file(args, config)
    state = _load_state(data_file)
    try:
        state.emails.add(args.address)
    except (InvalidEmail, DuplicateEmail) as e:
        log.error("%s", e)
        return 1
    _save_state(data_file, state)
    print("\n".join(email_lines(state.emails)))
    return 0


def cmd_remove_email(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    data_file = _data_file(args, config)
    state = _load_state(data_file)
    state.emails.remove(args.address)
    _save_state(data_file, state)
    print("\n".join(email_lines(state.emails)))
    return 0


def cmd_devices(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    import sounddevice as sd

    for idx, dev in enumerate(sd.query_devices()):
        if dev["max_input_channels"] > 0:
            print(f"{idx:3d}  {dev['name']}  ({dev['max_input_channels']} ch)")
    return 0


# ─── MAIN ──────────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audiowatch",
        description="Detect previously recorded sounds in live microphone input.",
    )
    parser.add_argument("--config", type=Path, help="Path to a JSON config file")
    parser.add_argument("--data-file", type=Path, help="Where patterns and emails are saved")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("listen", help="Listen and report matching sounds")
    p.set_defaults(func=cmd_listen)

    p = sub.add_parser("record", help="Record a new sound pattern")
    p.add_argument("--name", help="Pattern name (prompted when omitted)")
    p.add_argument("--seconds", type=float, help="Stop after this many seconds")
    p.set_defaults(func=cmd_record)

    p = sub.add_parser("patterns", help="List recorded patterns")
    p.set_defaults(func=cmd_patterns)

    p = sub.add_parser("remove-pattern", help="Delete a recorded pattern")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_remove_pattern)

    p = sub.add_parser("emails", help="List notification addresses")
    p.set_defaults(func=cmd_emails)

    p = sub.add_parser("add-email", help="Add a notification address")
    p.add_argument("address")
    p.set_defaults(func=cmd_add_email)

    p = sub.add_parser("remove-email", help="Remove a notification address")
    p.add_argument("address")
    p.set_defaults(func=cmd_remove_email)

    p = sub.add_parser("devices", help="List audio input devices")
    p.set_defaults(func=cmd_devices)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except ValueError as e:
        setup_logging(debug=args.debug)
        log.error("Failed to load configuration: %s", e)
        return 1

    log_file = get_config_value(config, "logging.file")
    setup_logging(
        Path(log_file) if log_file else None,
        level=get_config_value(config, "logging.level", "INFO"),
        debug=args.debug,
    )
    try:
        return args.func(args, config)
    except (AudioWatchError, ValueError) as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

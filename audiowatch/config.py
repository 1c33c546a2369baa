"""Configuration loader for audiowatch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .constants import (
    BIN_STRIDE,
    BIN_TOLERANCE,
    DETECTION_COOLDOWN_MS,
    FFT_SIZE,
    FRAME_STRIDE,
    MATCH_THRESHOLD,
    MAX_DECIBELS,
    MIN_DECIBELS,
    MIN_LEVEL,
    RECENT_DETECTIONS,
    SAMPLE_RATE,
    SMOOTHING_TIME_CONSTANT,
    TICK_INTERVAL_MS,
)
from .logger import get_logger

log = get_logger(__name__)


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "audio": {
            "device": None,
            "sample_rate": SAMPLE_RATE,
            "channels": 1,
            "fft_size": FFT_SIZE,
            "smoothing": SMOOTHING_TIME_CONSTANT,
            "min_db": MIN_DECIBELS,
            "max_db": MAX_DECIBELS,
        },
        "matching": {
            "frame_stride": FRAME_STRIDE,
            "bin_stride": BIN_STRIDE,
            "tolerance": BIN_TOLERANCE,
            "threshold": MATCH_THRESHOLD,
            "min_level": MIN_LEVEL,
        },
        "detection": {
            "cooldown_ms": DETECTION_COOLDOWN_MS,
            "recent": RECENT_DETECTIONS,
        },
        "scheduler": {
            "tick_interval_ms": TICK_INTERVAL_MS,
            "wake_lock": True,
        },
        "storage": {
            "data_file": None,
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
    }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate configuration structure and values."""
    defaults = get_default_config()

    for key in defaults.keys():
        if key not in config:
            return False, f"Missing required config section: {key}"
        if not isinstance(config[key], dict):
            return False, f"Config section {key} must be an object"

    audio = config["audio"]
    if not _is_int(audio.get("sample_rate")) or audio["sample_rate"] <= 0:
        return False, "audio.sample_rate must be a positive integer"
    if not _is_int(audio.get("channels")) or audio["channels"] <= 0:
        return False, "audio.channels must be a positive integer"
    fft_size = audio.get("fft_size")
    if not _is_int(fft_size) or fft_size < 32 or fft_size & (fft_size - 1):
        return False, "audio.fft_size must be a power of two no smaller than 32"
    if not _is_number(audio.get("smoothing")) or not 0 <= audio["smoothing"] < 1:
        return False, "audio.smoothing must be in [0, 1)"
    if not _is_number(audio.get("min_db")) or not _is_number(audio.get("max_db")):
        return False, "audio.min_db and audio.max_db must be numbers"
    if audio["min_db"] >= audio["max_db"]:
        return False, "audio.min_db must be below audio.max_db"

    matching = config["matching"]
    for key in ("frame_stride", "bin_stride"):
        if not _is_int(matching.get(key)) or matching[key] < 1:
            return False, f"matching.{key} must be a positive integer"
    if not _is_number(matching.get("tolerance")) or matching["tolerance"] <= 0:
        return False, "matching.tolerance must be positive"
    if not _is_number(matching.get("threshold")) or not 0 <= matching["threshold"] <= 1:
        return False, "matching.threshold must be between 0 and 1"
    if not _is_number(matching.get("min_level")) or matching["min_level"] < 0:
        return False, "matching.min_level must be non-negative"

    detection = config["detection"]
    if not _is_number(detection.get("cooldown_ms")) or detection["cooldown_ms"] < 0:
        return False, "detection.cooldown_ms must be non-negative"
    if not _is_int(detection.get("recent")) or detection["recent"] < 1:
        return False, "detection.recent must be a positive integer"

    tick_interval_ms = config["scheduler"].get("tick_interval_ms")
    if not _is_number(tick_interval_ms) or tick_interval_ms <= 0:
        return False, "scheduler.tick_interval_ms must be positive"

    return True, None


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file, merging with defaults.

    Args:
        config_path: Path to the config file. If None, looks for
            ``audiowatch.json`` in the current directory.

    Returns:
        Merged configuration dictionary.

    Raises:
        ValueError: If the file is not valid JSON or the merged config is
            invalid.
    """
    defaults = get_default_config()

    if config_path is None:
        config_path = Path("audiowatch.json")

    if not config_path.exists():
        log.debug("Config file %s not found, using defaults", config_path)
        return defaults

    try:
        with config_path.open(encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must hold a JSON object")

    merged = _deep_merge(defaults, config)

    is_valid, error_msg = validate_config(merged)
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error_msg}")

    log.info("Loaded configuration from %s", config_path)
    return merged


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested config value using dot notation.

    Example: get_config_value(config, "audio.sample_rate")
    """
    value: Any = config
    for key in path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


__all__ = ["get_default_config", "validate_config", "load_config", "get_config_value"]

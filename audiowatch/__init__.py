"""Audiowatch package."""

from .debounce import DetectionDebouncer, DetectionHistory
from .matcher import Matcher, evaluate, spectrum_similarity
from .models import Detection, Frame, Pattern
from .recorder import PatternRecorder
from .scheduler import DetectorState, Scheduler
from .spectrum import SpectrumSampler
from .store import EmailList, PatternStore

__all__ = [
    "Detection",
    "DetectionDebouncer",
    "DetectionHistory",
    "DetectorState",
    "EmailList",
    "Frame",
    "Matcher",
    "Pattern",
    "PatternRecorder",
    "PatternStore",
    "Scheduler",
    "SpectrumSampler",
    "evaluate",
    "spectrum_similarity",
]

from .communication import ISensorSource
from .service import (
    ISignalProcessor,
    IPostureClassifier,
    IPressureAnalyzer,
    IAlertChecker,
    IPostureModel,
)
from .presentation import IDisplay

__all__ = [
    "ISensorSource",
    "ISignalProcessor",
    "IPostureClassifier",
    "IPressureAnalyzer",
    "IAlertChecker",
    "IPostureModel",
    "IDisplay",
]

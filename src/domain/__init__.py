from .models import (
    PressureSnapshot,
    ProcessedSnapshot,
    PostureFeatures,
    GridPoint,
    MaxPressurePoint,
    Hotspot,
    PressureDistribution,
    SensorSummary,
    RawPrediction,
    Prediction,
    PredictionStatistics,
    PerformanceMetrics,
    AlertMessage,
)
from .enums import PostureLabel, StatusLevel
from .exceptions import InvalidInputError, ModelNotLoadedError

__all__ = [
    "PressureSnapshot",
    "ProcessedSnapshot",
    "PostureFeatures",
    "GridPoint",
    "MaxPressurePoint",
    "Hotspot",
    "PressureDistribution",
    "SensorSummary",
    "RawPrediction",
    "Prediction",
    "PredictionStatistics",
    "PerformanceMetrics",
    "AlertMessage",
    "PostureLabel",
    "StatusLevel",
    "InvalidInputError",
    "ModelNotLoadedError",
]

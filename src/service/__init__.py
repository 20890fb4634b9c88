from .signal_processor import SignalProcessor, normalize
from .feature_extractor import FeatureExtractor
from .posture_detector import HeuristicPostureClassifier
from .pressure_analyzer import PressureDistributionAnalyzer
from .alert_service import RecommendationService, AlertChecker
from .log_manager import PredictionHistory
from .heatmap_converter import HeatmapConverter
from .service_facade import PostureModel

__all__ = [
    "SignalProcessor",
    "normalize",
    "FeatureExtractor",
    "HeuristicPostureClassifier",
    "PressureDistributionAnalyzer",
    "RecommendationService",
    "AlertChecker",
    "PredictionHistory",
    "HeatmapConverter",
    "PostureModel",
]

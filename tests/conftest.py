import numpy as np
import pytest

from service.signal_processor import SignalProcessor
from service.posture_detector import HeuristicPostureClassifier
from service.pressure_analyzer import PressureDistributionAnalyzer
from service.alert_service import RecommendationService, AlertChecker
from service.log_manager import PredictionHistory
from service.service_facade import PostureModel

from mocks.patterns import GOOD_PATTERN


def build_model(classifier, history_size: int = 100) -> PostureModel:
    return PostureModel(
        signal_processor=SignalProcessor(),
        classifier=classifier,
        pressure_analyzer=PressureDistributionAnalyzer(),
        recommender=RecommendationService(),
        history=PredictionHistory(history_size),
        alert_checker=AlertChecker(),
    )


@pytest.fixture
def good_pattern() -> list[float]:
    return list(GOOD_PATTERN)


@pytest.fixture
def deterministic_classifier() -> HeuristicPostureClassifier:
    """노이즈 / 다리 꼬기 분기를 끈 분류기"""
    return HeuristicPostureClassifier(
        rng=np.random.default_rng(42),
        noise_probability=0.0,
        crossed_legs_probability=0.0,
    )


@pytest.fixture
def model(deterministic_classifier) -> PostureModel:
    return build_model(deterministic_classifier)


@pytest.fixture
def noisy_model() -> PostureModel:
    """기본 확률 설정 (시드 고정)"""
    return build_model(HeuristicPostureClassifier(rng=np.random.default_rng(7)))


@pytest.fixture
def model_factory():
    """분류기를 받아 PostureModel 생성"""
    return build_model

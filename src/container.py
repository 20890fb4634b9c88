import logging
from dataclasses import dataclass

import numpy as np

from config.settings import Settings

# 인터페이스
from interfaces.communication import ISensorSource
from interfaces.service import IPostureClassifier
from interfaces.presentation import IDisplay

# 구현체
from communication.mock_sensor_source import MockSensorSource

from service.signal_processor import SignalProcessor
from service.feature_extractor import FeatureExtractor
from service.posture_detector import HeuristicPostureClassifier
from service.detection.posture_detection import TrainedPostureClassifier
from service.pressure_analyzer import PressureDistributionAnalyzer
from service.alert_service import RecommendationService, AlertChecker
from service.log_manager import PredictionHistory
from service.heatmap_converter import HeatmapConverter
from service.service_facade import PostureModel

from presentation.console_display import ConsoleDisplay
from domain.enums import PostureLabel


TEST_MODE_SEED = 0


@dataclass
class Container:
    """의존성 주입 컨테이너"""

    sensor_source: ISensorSource
    posture_model: PostureModel
    display: IDisplay


def create_classifier(settings: Settings, rng: np.random.Generator) -> IPostureClassifier:
    """모델 파일이 있으면 학습 모델, 없으면 휴리스틱 분류기"""
    feature_extractor = FeatureExtractor()

    if TrainedPostureClassifier.is_available(settings.model_dir):
        logging.getLogger("container").info(f"학습 모델 사용: {settings.model_dir}")
        return TrainedPostureClassifier(settings.model_dir, feature_extractor)

    return HeuristicPostureClassifier(
        rng=rng,
        noise_probability=settings.noise_probability,
        crossed_legs_probability=settings.crossed_legs_probability,
        feature_extractor=feature_extractor,
    )


def create_posture_model(settings: Settings, rng: np.random.Generator) -> PostureModel:
    return PostureModel(
        signal_processor=SignalProcessor(settings.smoothing_alpha),
        classifier=create_classifier(settings, rng),
        pressure_analyzer=PressureDistributionAnalyzer(settings.hotspot_threshold),
        recommender=RecommendationService(),
        history=PredictionHistory(settings.history_size),
        alert_checker=AlertChecker(),
    )


def create_container(settings: Settings) -> Container:
    """의존성 구성"""
    seed = settings.random_seed
    if seed is None and settings.test_mode:
        # 테스트 모드는 재현 가능한 실행
        seed = TEST_MODE_SEED
    rng = np.random.default_rng(seed)

    # 센서 입력 (하드웨어 드라이버는 범위 밖이므로 항상 시뮬레이션)
    posture = PostureLabel(settings.simulated_posture) if settings.simulated_posture else None
    sensor_source = MockSensorSource(rng=rng, posture=posture)

    # 서비스 계층
    posture_model = create_posture_model(settings, rng)

    # 표현 계층
    display = ConsoleDisplay(HeatmapConverter())

    return Container(
        sensor_source=sensor_source,
        posture_model=posture_model,
        display=display,
    )

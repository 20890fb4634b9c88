import logging
import time
from datetime import datetime
from typing import Optional, Callable, Sequence

from interfaces.service import (
    ISignalProcessor,
    IPostureClassifier,
    IPressureAnalyzer,
    IAlertChecker,
    IPostureModel,
)
from domain.models import (
    PressureSnapshot,
    Prediction,
    PredictionStatistics,
    PerformanceMetrics,
    SensorSummary,
    AlertMessage,
)
from domain.enums import PostureLabel
from service.alert_service import RecommendationService
from service.log_manager import PredictionHistory


class PostureModel(IPostureModel):
    """서비스 계층 통합 Facade - 스냅샷 한 개를 예측 결과로 변환

    센서 스트림 하나당 인스턴스 하나를 사용한다. 평활화 상태를 공유하므로
    같은 인스턴스에 대한 동시 호출은 호출자가 직렬화해야 한다.
    """

    def __init__(
        self,
        signal_processor: ISignalProcessor,
        classifier: IPostureClassifier,
        pressure_analyzer: IPressureAnalyzer,
        recommender: RecommendationService,
        history: PredictionHistory,
        alert_checker: IAlertChecker,
    ):
        self._signal_processor = signal_processor
        self._classifier = classifier
        self._pressure_analyzer = pressure_analyzer
        self._recommender = recommender
        self._history = history
        self._alert_checker = alert_checker
        self._last_prediction: Optional[Prediction] = None
        self._prediction_callback: Optional[Callable[[Prediction], None]] = None
        self._logger = logging.getLogger("posture_model")

    @property
    def model_version(self) -> str:
        return self._classifier.version

    @property
    def model_status(self) -> str:
        return "mock" if self._classifier.version == "mock" else "loaded"

    @property
    def last_prediction(self) -> Optional[Prediction]:
        return self._last_prediction

    def set_prediction_callback(self, callback: Callable[[Prediction], None]) -> None:
        """예측 갱신 콜백 설정"""
        self._prediction_callback = callback

    def predict(self, snapshot: Sequence[float]) -> Prediction:
        """자세 예측 - 실패 시 unknown 예측 반환"""
        start = time.perf_counter()

        try:
            prediction = self._run_pipeline(snapshot, start)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._logger.error(f"예측 오류: {e}")
            return Prediction.failed(e, elapsed_ms)

        self._last_prediction = prediction
        self._history.record(prediction)

        if self._prediction_callback:
            try:
                self._prediction_callback(prediction)
            except Exception as e:
                self._logger.error(f"예측 콜백 오류: {e}")

        return prediction

    def _run_pipeline(self, snapshot: Sequence[float], start: float) -> Prediction:
        # 입력 검증 (InvalidInputError)
        snapshot = PressureSnapshot.from_values(snapshot)

        # 정규화 + 평활화
        processed = self._signal_processor.process(snapshot)

        try:
            # 자세 분류
            raw_prediction = self._classifier.predict(processed)

            # 압력 분포 분석 (원시 값 기준)
            distribution = self._pressure_analyzer.analyze(processed.raw)
        except Exception:
            # 실패한 예측은 평활화 상태에 반영하지 않음
            self._signal_processor.rollback()
            raise

        sensor_summary = SensorSummary(
            max_pressure=processed.max_pressure,
            avg_pressure=processed.average_pressure,
            center_pressure=raw_prediction.features.center_engagement,
            asymmetry_score=raw_prediction.features.left_right_asymmetry,
            distribution=distribution,
        )

        recommendation = self._recommender.recommend(
            raw_prediction.posture, raw_prediction.confidence
        )

        return Prediction(
            posture=raw_prediction.posture,
            confidence=raw_prediction.confidence,
            probabilities=raw_prediction.probabilities,
            features=raw_prediction.features,
            sensor_summary=sensor_summary,
            recommendation=recommendation,
            inference_time_ms=(time.perf_counter() - start) * 1000,
            model_version=self._classifier.version,
            timestamp=datetime.now(),
        )

    def check_alert(self, prediction: Prediction) -> Optional[AlertMessage]:
        """교정 알림 필요 여부 확인"""
        return self._alert_checker.check(prediction)

    def reset(self) -> None:
        """평활화 상태 및 이력 초기화"""
        self._signal_processor.reset()
        self._history.clear()
        self._last_prediction = None
        self._logger.info("자세 모델 상태 초기화")

    def get_statistics(self) -> Optional[PredictionStatistics]:
        """예측 이력 통계"""
        return self._history.statistics(self.model_status)

    def get_performance_metrics(self) -> Optional[PerformanceMetrics]:
        """성능 지표"""
        return self._history.performance_metrics(self.model_version)

    def export_config(self) -> dict:
        """모델 설정 내보내기"""
        return {
            "inputShape": [25],
            "outputClasses": [label.value for label in PostureLabel.classes()],
            "modelVersion": self.model_version,
            "isLoaded": self.model_status == "loaded",
            "predictionCount": len(self._history),
            "lastPrediction": (
                self._last_prediction.to_dict() if self._last_prediction else None
            ),
        }

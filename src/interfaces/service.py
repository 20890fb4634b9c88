from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from domain.models import (
    PressureSnapshot,
    ProcessedSnapshot,
    PressureDistribution,
    RawPrediction,
    Prediction,
    PredictionStatistics,
    PerformanceMetrics,
    AlertMessage,
)


class ISignalProcessor(ABC):
    """정규화 + 평활화 인터페이스"""

    @abstractmethod
    def process(self, snapshot: PressureSnapshot) -> ProcessedSnapshot:
        """스냅샷 전처리"""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """마지막 전처리의 누적 상태 변경 취소"""
        pass

    @abstractmethod
    def reset(self) -> None:
        """평활화 누적 상태 초기화"""
        pass


class IPostureClassifier(ABC):
    """자세 분류기 인터페이스 (휴리스틱 / 학습 모델)"""

    @property
    @abstractmethod
    def version(self) -> str:
        """모델 버전"""
        pass

    @abstractmethod
    def predict(self, processed: ProcessedSnapshot) -> RawPrediction:
        """전처리된 스냅샷으로부터 자세 분류"""
        pass


class IPressureAnalyzer(ABC):
    """압력 분포 분석 인터페이스"""

    @abstractmethod
    def analyze(self, raw: np.ndarray) -> PressureDistribution:
        """원시 25개 값으로부터 분포 지표 계산"""
        pass


class IAlertChecker(ABC):
    """알림 체크 인터페이스"""

    @abstractmethod
    def check(self, prediction: Prediction) -> Optional[AlertMessage]:
        """교정 알림이 필요하면 알림 메시지 반환"""
        pass


class IPostureModel(ABC):
    """서비스 계층 통합 인터페이스 - 표현 계층에서 사용"""

    @abstractmethod
    def predict(self, snapshot: Sequence[float]) -> Prediction:
        """자세 예측 (예외를 던지지 않음)"""
        pass

    @abstractmethod
    def reset(self) -> None:
        """평활화 상태 및 이력 초기화"""
        pass

    @abstractmethod
    def get_statistics(self) -> Optional[PredictionStatistics]:
        """예측 이력 통계"""
        pass

    @abstractmethod
    def get_performance_metrics(self) -> Optional[PerformanceMetrics]:
        """성능 지표"""
        pass

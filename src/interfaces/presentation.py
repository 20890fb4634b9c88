from abc import ABC, abstractmethod
from typing import Optional

from domain.models import PressureSnapshot, Prediction, PredictionStatistics, AlertMessage


class IDisplay(ABC):
    """화면 출력 인터페이스"""

    @abstractmethod
    def show_prediction(self, snapshot: PressureSnapshot, prediction: Prediction) -> None:
        """예측 결과 표시"""
        pass

    @abstractmethod
    def show_statistics(self, statistics: Optional[PredictionStatistics]) -> None:
        """통계 표시"""
        pass

    @abstractmethod
    def show_alert(self, alert: AlertMessage) -> None:
        """교정 알림 표시"""
        pass

    @abstractmethod
    def show_error(self, error: Exception) -> None:
        """에러 표시"""
        pass

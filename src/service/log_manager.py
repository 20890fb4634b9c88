from collections import Counter, deque
from datetime import datetime
from typing import Optional

from domain.models import Prediction, PredictionStatistics, PerformanceMetrics
from domain.enums import PostureLabel


class PredictionHistory:
    """예측 이력 관리 - 최근 max_size개 보관, 통계는 최근 window개 기준"""

    DEFAULT_MAX_SIZE = 100
    DEFAULT_WINDOW = 50

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE, window: int = DEFAULT_WINDOW):
        self._predictions: deque[Prediction] = deque(maxlen=max_size)
        self._window = min(window, max_size)
        self._first_timestamp: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self._predictions)

    def record(self, prediction: Prediction) -> None:
        """예측 기록"""
        self._predictions.append(prediction)
        # 보관 중인 가장 오래된 예측 기준
        self._first_timestamp = self._predictions[0].timestamp

    def recent(self) -> list[Prediction]:
        return list(self._predictions)[-self._window:]

    @property
    def last(self) -> Optional[Prediction]:
        return self._predictions[-1] if self._predictions else None

    def statistics(self, model_status: str = "mock") -> Optional[PredictionStatistics]:
        """최근 이력 통계 (이력이 없으면 None)"""
        if not self._predictions:
            return None

        recent = self.recent()
        count = len(recent)
        distribution = Counter(p.posture for p in recent)

        return PredictionStatistics(
            total_predictions=len(self._predictions),
            recent_predictions=count,
            average_confidence=sum(p.confidence for p in recent) / count,
            average_inference_time_ms=sum(p.inference_time_ms for p in recent) / count,
            posture_distribution=dict(distribution),
            last_update_time=self._predictions[-1].timestamp,
            model_status=model_status,
            good_posture_percentage=round(
                distribution.get(PostureLabel.GOOD, 0) / count * 100, 1
            ),
        )

    def performance_metrics(self, model_version: str) -> Optional[PerformanceMetrics]:
        stats = self.statistics()
        if stats is None:
            return None

        avg_time = stats.average_inference_time_ms
        throughput = 1000.0 / avg_time if avg_time > 0 else 0.0
        uptime = 0.0
        if self._first_timestamp is not None:
            uptime = (datetime.now() - self._first_timestamp).total_seconds()

        return PerformanceMetrics(
            model_version=model_version,
            average_inference_time_ms=avg_time,
            average_confidence=stats.average_confidence,
            throughput=throughput,
            good_posture_percentage=stats.good_posture_percentage,
            uptime_seconds=uptime,
        )

    def clear(self) -> None:
        """이력 초기화"""
        self._predictions.clear()
        self._first_timestamp = None

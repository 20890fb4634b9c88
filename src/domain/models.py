import numbers
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from datetime import datetime

import numpy as np

from .enums import PostureLabel, StatusLevel
from .exceptions import InvalidInputError


GRID_SIZE = 5
SENSOR_COUNT = GRID_SIZE * GRID_SIZE


@dataclass(frozen=True)
class PressureSnapshot:
    """5x5 압력 센서 한 주기 측정값 (row-major, index = row * 5 + col)"""
    values: tuple
    captured_at: datetime = field(default_factory=datetime.now)

    @staticmethod
    def from_values(
        values: Sequence[float], captured_at: Optional[datetime] = None
    ) -> "PressureSnapshot":
        """원시 측정값 검증 후 스냅샷 생성

        25개 값의 1차원 시퀀스 또는 5x5 중첩 시퀀스를 받는다.

        Raises:
            InvalidInputError: 길이가 25가 아니거나 유한한 숫자가 아닌 값이 있는 경우
        """
        if isinstance(values, PressureSnapshot):
            return values

        if isinstance(values, np.ndarray):
            if values.dtype.kind not in "iuf":
                raise InvalidInputError(
                    f"Invalid sensor data: unsupported dtype {values.dtype}"
                )
            array = values.astype(np.float64)
        else:
            try:
                items = list(values)
            except TypeError as e:
                raise InvalidInputError(
                    f"Invalid sensor data: expected a sequence, got {type(values).__name__}"
                ) from e

            # 5x5 중첩 그리드는 펼쳐서 처리
            if len(items) == GRID_SIZE and all(
                isinstance(row, (list, tuple, np.ndarray)) for row in items
            ):
                items = [v for row in items for v in row]

            for value in items:
                # bool은 numbers.Real의 하위 타입이지만 센서 값이 아님
                if isinstance(value, (bool, np.bool_)) or not isinstance(
                    value, numbers.Real
                ):
                    raise InvalidInputError(
                        f"Invalid sensor data: non-numeric value {value!r}"
                    )
            array = np.asarray(items, dtype=np.float64)

        if array.shape == (GRID_SIZE, GRID_SIZE):
            array = array.reshape(-1)

        if array.ndim != 1 or array.size != SENSOR_COUNT:
            raise InvalidInputError(
                f"Invalid sensor data: expected {SENSOR_COUNT} values, got {array.size}"
            )
        if not np.all(np.isfinite(array)):
            raise InvalidInputError("Invalid sensor data: non-finite value")

        return PressureSnapshot(
            values=tuple(float(v) for v in array),
            captured_at=captured_at or datetime.now(),
        )

    def as_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)

    def grid(self) -> np.ndarray:
        """(5, 5) 형태로 반환"""
        return self.as_array().reshape(GRID_SIZE, GRID_SIZE)


@dataclass
class ProcessedSnapshot:
    """정규화 + 평활화된 스냅샷"""
    raw: np.ndarray
    normalized: np.ndarray
    smoothed: np.ndarray
    max_pressure: float
    min_pressure: float
    average_pressure: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class PostureFeatures:
    """자세 판단용 특징값"""
    left_right_asymmetry: float
    front_back_ratio: float
    center_engagement: float
    overall_activation: float
    left_mean: float
    right_mean: float

    def to_dict(self) -> dict:
        return {
            "leftRightAsymmetry": self.left_right_asymmetry,
            "frontBackRatio": self.front_back_ratio,
            "centerEngagement": self.center_engagement,
            "overallActivation": self.overall_activation,
        }


@dataclass
class GridPoint:
    """그리드 좌표 (x = 열, y = 행)"""
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class MaxPressurePoint:
    x: int
    y: int
    pressure: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "pressure": self.pressure}


@dataclass
class Hotspot:
    """임계값을 넘는 압력 셀"""
    x: int
    y: int
    intensity: float

    def to_dict(self) -> dict:
        return {"position": {"x": self.x, "y": self.y}, "intensity": self.intensity}


@dataclass
class PressureDistribution:
    """원시 스냅샷 기준 압력 분포 지표"""
    center_of_pressure: GridPoint
    total_pressure: float
    max_pressure_point: MaxPressurePoint
    symmetry_score: float
    hotspots: List[Hotspot]
    uniformity: float

    def to_dict(self) -> dict:
        return {
            "centerOfPressure": self.center_of_pressure.to_dict(),
            "totalPressure": self.total_pressure,
            "maxPressurePoint": self.max_pressure_point.to_dict(),
            "symmetryScore": self.symmetry_score,
            "hotspots": [h.to_dict() for h in self.hotspots],
            "uniformity": self.uniformity,
        }


@dataclass
class SensorSummary:
    max_pressure: float
    avg_pressure: float
    center_pressure: float
    asymmetry_score: float
    distribution: PressureDistribution

    def to_dict(self) -> dict:
        return {
            "maxPressure": self.max_pressure,
            "avgPressure": self.avg_pressure,
            "centerPressure": self.center_pressure,
            "asymmetryScore": self.asymmetry_score,
            "pressureDistribution": self.distribution.to_dict(),
        }


@dataclass
class RawPrediction:
    """분류기 출력 (후처리 전)"""
    posture: PostureLabel
    confidence: float
    probabilities: dict  # PostureLabel -> float
    features: PostureFeatures


@dataclass
class Prediction:
    """자세 예측 결과"""
    posture: PostureLabel
    confidence: float
    probabilities: dict = field(default_factory=dict)  # PostureLabel -> float
    features: Optional[PostureFeatures] = None
    sensor_summary: Optional[SensorSummary] = None
    recommendation: str = ""
    inference_time_ms: float = 0.0
    model_version: str = ""
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    # 상태 표시 기준 신뢰도
    WARNING_CONFIDENCE = 0.7

    @staticmethod
    def failed(error: Exception, inference_time_ms: float = 0.0) -> "Prediction":
        """처리 실패 시 반환되는 unknown 예측"""
        return Prediction(
            posture=PostureLabel.UNKNOWN,
            confidence=0.0,
            error=str(error) or type(error).__name__,
            inference_time_ms=inference_time_ms,
        )

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.posture != PostureLabel.UNKNOWN

    @property
    def posture_score(self) -> int:
        """대시보드 자세 점수 (0-100)"""
        return int(round(self.confidence * 100))

    @property
    def status_level(self) -> StatusLevel:
        if self.posture == PostureLabel.GOOD:
            return StatusLevel.GOOD
        if self.confidence > self.WARNING_CONFIDENCE:
            return StatusLevel.WARNING
        return StatusLevel.ALERT

    def to_dict(self) -> dict:
        data = {
            "posture": self.posture.value,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
            "inferenceTime": self.inference_time_ms,
        }
        if self.error is not None:
            data["error"] = self.error
            return data

        data.update(
            {
                "probabilities": {
                    label.value: prob for label, prob in self.probabilities.items()
                },
                "recommendation": self.recommendation,
                "modelVersion": self.model_version,
            }
        )
        if self.features:
            data["features"] = self.features.to_dict()
        if self.sensor_summary:
            data["sensorSummary"] = self.sensor_summary.to_dict()
        return data


@dataclass
class PredictionStatistics:
    """예측 이력 통계"""
    total_predictions: int
    recent_predictions: int
    average_confidence: float
    average_inference_time_ms: float
    posture_distribution: dict  # PostureLabel -> int
    last_update_time: Optional[datetime]
    model_status: str
    good_posture_percentage: float


@dataclass
class PerformanceMetrics:
    model_version: str
    average_inference_time_ms: float
    average_confidence: float
    throughput: float  # predictions / sec
    good_posture_percentage: float
    uptime_seconds: float


@dataclass
class AlertMessage:
    """자세 교정 알림 (햅틱/화면)"""
    posture: PostureLabel
    title: str
    body: str
    priority: str = "normal"
    timestamp: datetime = field(default_factory=datetime.now)

from typing import Optional

import numpy as np

from interfaces.service import ISignalProcessor
from domain.models import PressureSnapshot, ProcessedSnapshot

# 이 크기를 넘는 값은 합산/제곱 중 float64 overflow 가능
SAFE_MAGNITUDE = 1e150
FLOAT_MAX = float(np.finfo(np.float64).max)


def magnitude_scale(values: np.ndarray) -> float:
    """overflow 없이 계산하기 위한 배율 (안전 범위면 1)"""
    peak = float(np.abs(values).max())
    return peak if peak > SAFE_MAGNITUDE else 1.0


def finite_mean(values: np.ndarray) -> float:
    """매우 큰 유한 값에서도 유한한 평균"""
    scale = magnitude_scale(values)
    return float(np.mean(values / scale) * scale)


def finite_sum(values: np.ndarray) -> float:
    """합계 (float64 범위를 넘으면 최대값으로 제한)"""
    scale = magnitude_scale(values)
    total = float(np.sum(values / scale)) * scale
    return float(np.clip(total, -FLOAT_MAX, FLOAT_MAX))


def normalize(values: np.ndarray) -> np.ndarray:
    """정규화 (min -> 0, max -> 1), 균일한 입력은 0으로"""
    values = np.asarray(values, dtype=np.float64)
    # 범위 (max - min)가 overflow 되지 않도록 먼저 축소
    values = values / magnitude_scale(values)
    min_val = values.min()
    max_val = values.max()
    if max_val - min_val == 0:
        return np.zeros_like(values)
    return (values - min_val) / (max_val - min_val)


class SignalProcessor(ISignalProcessor):
    """전처리 구현체 - 정규화 후 지수 이동 평균으로 평활화"""

    DEFAULT_ALPHA = 0.3

    def __init__(self, alpha: float = DEFAULT_ALPHA):
        if not 0 < alpha <= 1:
            raise ValueError("alpha must be in (0, 1]")
        self._alpha = alpha
        self._previous: Optional[np.ndarray] = None
        self._before_last: Optional[np.ndarray] = None

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def has_state(self) -> bool:
        """평활화 누적값 존재 여부"""
        return self._previous is not None

    def process(self, snapshot: PressureSnapshot) -> ProcessedSnapshot:
        """스냅샷 정규화 + 평활화"""
        raw = snapshot.as_array()
        normalized = normalize(raw)
        if not np.all(np.isfinite(normalized)):
            raise ValueError("normalization produced non-finite values")
        smoothed = self._smooth(normalized)

        return ProcessedSnapshot(
            raw=raw,
            normalized=normalized,
            smoothed=smoothed,
            max_pressure=float(raw.max()),
            min_pressure=float(raw.min()),
            average_pressure=finite_mean(raw),
            timestamp=snapshot.captured_at,
        )

    def _smooth(self, normalized: np.ndarray) -> np.ndarray:
        """smoothed = alpha * normalized + (1 - alpha) * previous"""
        self._before_last = self._previous
        if self._previous is None:
            # 첫 입력은 그대로 누적값이 됨
            self._previous = normalized.copy()
            return normalized.copy()

        smoothed = self._alpha * normalized + (1 - self._alpha) * self._previous
        self._previous = smoothed
        return smoothed.copy()

    def rollback(self) -> None:
        """마지막 process 이전의 누적 상태로 되돌림"""
        self._previous = self._before_last

    def reset(self) -> None:
        """평활화 누적 상태 초기화"""
        self._previous = None
        self._before_last = None

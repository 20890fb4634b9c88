import asyncio
import logging
import math
import time
from typing import Callable, Optional

import numpy as np

from interfaces.communication import ISensorSource
from domain.models import PressureSnapshot
from domain.enums import PostureLabel


# 자세별 기준 압력 패턴 (5x5)
POSTURE_PATTERNS: dict[PostureLabel, list[list[float]]] = {
    PostureLabel.GOOD: [
        [0.1, 0.2, 0.3, 0.2, 0.1],
        [0.2, 0.4, 0.6, 0.4, 0.2],
        [0.3, 0.6, 0.8, 0.6, 0.3],
        [0.2, 0.4, 0.6, 0.4, 0.2],
        [0.1, 0.2, 0.3, 0.2, 0.1],
    ],
    PostureLabel.SLOUCHING: [
        [0.1, 0.1, 0.2, 0.1, 0.1],
        [0.2, 0.3, 0.4, 0.3, 0.2],
        [0.1, 0.2, 0.3, 0.2, 0.1],
        [0.3, 0.5, 0.7, 0.5, 0.3],
        [0.2, 0.4, 0.6, 0.4, 0.2],
    ],
    PostureLabel.LEANING_LEFT: [
        [0.2, 0.4, 0.3, 0.1, 0.05],
        [0.4, 0.7, 0.5, 0.2, 0.1],
        [0.5, 0.8, 0.6, 0.3, 0.15],
        [0.3, 0.6, 0.4, 0.2, 0.1],
        [0.2, 0.4, 0.3, 0.1, 0.05],
    ],
    PostureLabel.LEANING_RIGHT: [
        [0.05, 0.1, 0.3, 0.4, 0.2],
        [0.1, 0.2, 0.5, 0.7, 0.4],
        [0.15, 0.3, 0.6, 0.8, 0.5],
        [0.1, 0.2, 0.4, 0.6, 0.3],
        [0.05, 0.1, 0.3, 0.4, 0.2],
    ],
    PostureLabel.CROSSED_LEGS: [
        [0.1, 0.2, 0.2, 0.2, 0.1],
        [0.3, 0.5, 0.4, 0.5, 0.3],
        [0.2, 0.4, 0.6, 0.4, 0.2],
        [0.4, 0.7, 0.3, 0.7, 0.4],
        [0.3, 0.5, 0.2, 0.5, 0.3],
    ],
}


class MockSensorSource(ISensorSource):
    """테스트용 방석 센서 Mock 구현체

    실제 하드웨어 없이 자세별 패턴에 가우시안 노이즈와 느린 시간 변화를
    더한 데이터를 생성한다. 자세를 지정하지 않으면 중앙 / 왼쪽 / 오른쪽으로
    천천히 흔들리는 패턴을 생성한다.
    """

    NOISE_STD = 0.05
    DRIFT_AMPLITUDE = 0.02
    SWAY_NOISE = 0.1

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        posture: Optional[PostureLabel] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._rng = rng if rng is not None else np.random.default_rng()
        self._posture = posture
        self._clock = clock
        self._connected = False
        self._logger = logging.getLogger("mock_sensor_source")

    @property
    def posture(self) -> Optional[PostureLabel]:
        return self._posture

    def set_posture(self, posture: Optional[PostureLabel]) -> None:
        """시뮬레이션 자세 변경 (None이면 흔들림 패턴)"""
        if posture is not None and posture not in POSTURE_PATTERNS:
            raise ValueError(f"No pattern for posture: {posture.value}")
        self._posture = posture
        self._logger.info(f"[TEST MODE] 시뮬레이션 자세: {posture.value if posture else 'sway'}")

    def connect(self) -> None:
        """Mock 연결 (항상 성공)"""
        self._connected = True
        self._logger.info("[TEST MODE] Mock 센서 연결됨")

    def disconnect(self) -> None:
        self._connected = False
        self._logger.info("[TEST MODE] Mock 센서 연결 해제됨")

    def read(self) -> PressureSnapshot:
        """Mock 측정값 생성"""
        if not self._connected:
            raise ConnectionError("Not connected to mock sensor")

        if self._posture is None:
            values = self._generate_sway()
        else:
            values = self._generate_pattern(self._posture)
        return PressureSnapshot.from_values(values)

    async def async_read(self) -> PressureSnapshot:
        return await asyncio.to_thread(self.read)

    def _generate_pattern(self, posture: PostureLabel) -> np.ndarray:
        """기준 패턴 + 가우시안 노이즈 + 시간 변화"""
        pattern = np.asarray(POSTURE_PATTERNS[posture], dtype=np.float64)
        rows, cols = np.indices(pattern.shape)

        t = self._clock()
        drift = np.sin(t * 0.1 + rows + cols) * self.DRIFT_AMPLITUDE
        noise = self._rng.normal(0.0, self.NOISE_STD, pattern.shape)

        return np.clip(pattern + noise + drift, 0.0, 1.0).reshape(-1)

    def _generate_sway(self) -> np.ndarray:
        """좋은 자세 패턴을 기준으로 좌우로 천천히 기울어짐"""
        pattern = np.asarray(POSTURE_PATTERNS[PostureLabel.GOOD], dtype=np.float64)
        cols = np.indices(pattern.shape)[1]

        phase = math.sin(self._clock() / 10 * 0.3)
        if phase > 0.5:
            # 왼쪽으로 기울어짐
            pattern = pattern * (1 + (2 - cols) * 0.2)
        elif phase < -0.5:
            pattern = pattern * (1 + (cols - 2) * 0.2)

        noise = (self._rng.random(pattern.shape) - 0.5) * self.SWAY_NOISE
        return np.clip(pattern + noise, 0.0, 1.0).reshape(-1)

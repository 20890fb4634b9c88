import numpy as np

from interfaces.service import IPressureAnalyzer
from service.signal_processor import magnitude_scale, finite_sum
from domain.models import (
    GRID_SIZE,
    GridPoint,
    MaxPressurePoint,
    Hotspot,
    PressureDistribution,
)


class PressureDistributionAnalyzer(IPressureAnalyzer):
    """압력 분포 분석 구현체 - 원시 값 기준"""

    DEFAULT_HOTSPOT_THRESHOLD = 0.6
    # 좌우 대칭 비교 열 쌍
    SYMMETRY_PAIRS = ((0, 4), (1, 3))

    def __init__(self, hotspot_threshold: float = DEFAULT_HOTSPOT_THRESHOLD):
        self._hotspot_threshold = hotspot_threshold

    def analyze(self, raw: np.ndarray) -> PressureDistribution:
        """압력 중심, 최대 압력점, 대칭성, 핫스팟, 균일도 계산"""
        grid = np.asarray(raw, dtype=np.float64).reshape(GRID_SIZE, GRID_SIZE)
        # 비율 지표는 배율에 무관하므로 매우 큰 값은 축소해서 계산
        scaled = grid / magnitude_scale(grid)

        return PressureDistribution(
            center_of_pressure=self._center_of_pressure(scaled, float(scaled.sum())),
            total_pressure=finite_sum(grid),
            max_pressure_point=self._max_pressure_point(grid),
            symmetry_score=self._symmetry_score(scaled),
            hotspots=self._hotspots(grid),
            uniformity=self._uniformity(scaled.reshape(-1)),
        )

    def _center_of_pressure(self, grid: np.ndarray, total: float) -> GridPoint:
        """압력 가중 중심 (x = 열, y = 행), 총 압력이 없으면 (0, 0)"""
        if total <= 0:
            return GridPoint(x=0.0, y=0.0)

        rows, cols = np.indices(grid.shape)
        return GridPoint(
            x=float((grid * cols).sum() / total),
            y=float((grid * rows).sum() / total),
        )

    def _max_pressure_point(self, grid: np.ndarray) -> MaxPressurePoint:
        row, col = np.unravel_index(int(np.argmax(grid)), grid.shape)
        return MaxPressurePoint(x=int(col), y=int(row), pressure=float(grid[row, col]))

    def _symmetry_score(self, grid: np.ndarray) -> float:
        """1 - 행별 좌우 상대 차이 평균 (비교 가능한 쌍이 없으면 1)"""
        differences = []
        for row in grid:
            for left_col, right_col in self.SYMMETRY_PAIRS:
                left, right = row[left_col], row[right_col]
                avg = (left + right) / 2
                if avg > 0:
                    differences.append(abs(left - right) / avg)

        if not differences:
            return 1.0
        return float(1 - np.mean(differences))

    def _hotspots(self, grid: np.ndarray) -> list[Hotspot]:
        """임계값 초과 셀 (강도 내림차순)"""
        hotspots = [
            Hotspot(x=int(col), y=int(row), intensity=float(grid[row, col]))
            for row, col in zip(*np.nonzero(grid > self._hotspot_threshold))
        ]
        return sorted(hotspots, key=lambda h: h.intensity, reverse=True)

    def _uniformity(self, values: np.ndarray) -> float:
        """max(0, 1 - 표준편차 / 평균)"""
        mean = float(values.mean())
        std = float(values.std())

        if mean <= 0:
            # 평균이 0 이하이면 변동 계수를 정의할 수 없음
            return 1.0 if std == 0 else 0.0
        return max(0.0, 1 - std / mean)

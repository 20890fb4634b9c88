import numpy as np
from scipy.interpolate import RectBivariateSpline


class HeatmapConverter:
    """5x5 압력 그리드를 화면 표시용 Heatmap으로 변환"""

    def upsample(self, origin: np.ndarray, shape: tuple[int, int]) -> np.ndarray:
        """2D 배열을 보간법으로 리사이즈

        Args:
            origin: 원본 2D 배열 (보통 (5, 5))
            shape: 목표 (rows, cols)

        Returns:
            리사이즈된 배열 (원본 값 범위로 클리핑)
        """
        origin = np.asarray(origin, dtype=np.float64)
        if origin.ndim != 2:
            raise ValueError("origin must be a 2D numpy array")

        target_rows, target_cols = int(shape[0]), int(shape[1])
        current_rows, current_cols = origin.shape

        if target_rows <= 0 or target_cols <= 0:
            raise ValueError("target shape must be positive integers")

        # 리사이즈 불필요
        if current_rows == target_rows and current_cols == target_cols:
            return origin.copy()

        # RectBivariateSpline은 각 축에 최소 2개 포인트 필요
        if current_rows >= 2 and current_cols >= 2:
            kx = min(3, current_rows - 1)
            ky = min(3, current_cols - 1)

            # 좌표 그리드 (0~1 정규화)
            y_orig = np.linspace(0, 1, current_rows)
            x_orig = np.linspace(0, 1, current_cols)
            y_new = np.linspace(0, 1, target_rows)
            x_new = np.linspace(0, 1, target_cols)

            spline = RectBivariateSpline(y_orig, x_orig, origin, kx=kx, ky=ky)
            resized = spline(y_new, x_new)
            # 스플라인 오버슈트 제거
            return np.clip(resized, origin.min(), origin.max())

        # 폴백: 차원이 1인 경우
        result = origin

        if current_cols != target_cols:
            if current_cols == 1:
                result = np.repeat(result, target_cols, axis=1)
            else:
                x_old = np.linspace(0, 1, result.shape[1])
                x_new = np.linspace(0, 1, target_cols)
                result = np.vstack([np.interp(x_new, x_old, row) for row in result])

        if result.shape[0] != target_rows:
            if result.shape[0] == 1:
                result = np.repeat(result, target_rows, axis=0)
            else:
                y_old = np.linspace(0, 1, result.shape[0])
                y_new = np.linspace(0, 1, target_rows)
                result = np.vstack(
                    [np.interp(y_new, y_old, result[:, j]) for j in range(result.shape[1])]
                ).T

        return result

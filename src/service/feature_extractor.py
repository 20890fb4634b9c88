import numpy as np

from domain.models import GRID_SIZE, ProcessedSnapshot, PostureFeatures


class FeatureExtractor:
    """평활화된 5x5 값으로부터 자세 특징 추출"""

    # 좌/우 영역 열 (가운데 열 2는 제외)
    LEFT_COLUMNS = (0, 1)
    RIGHT_COLUMNS = (3, 4)
    # 앞 (행 0-1) / 뒤 (행 3-4)
    FRONT_ROWS = (0, 1)
    BACK_ROWS = (3, 4)
    CENTER_INDEX = 12
    EPSILON = 0.001

    def extract(self, processed: ProcessedSnapshot) -> PostureFeatures:
        grid = np.asarray(processed.smoothed, dtype=np.float64).reshape(GRID_SIZE, GRID_SIZE)

        left_mean = float(grid[:, list(self.LEFT_COLUMNS)].mean())
        right_mean = float(grid[:, list(self.RIGHT_COLUMNS)].mean())
        front_mean = float(grid[list(self.FRONT_ROWS), :].mean())
        back_mean = float(grid[list(self.BACK_ROWS), :].mean())

        return PostureFeatures(
            left_right_asymmetry=abs(left_mean - right_mean),
            front_back_ratio=front_mean / (back_mean + self.EPSILON),
            center_engagement=float(processed.smoothed[self.CENTER_INDEX]),
            overall_activation=float(grid.mean()),
            left_mean=left_mean,
            right_mean=right_mean,
        )

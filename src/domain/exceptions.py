class InvalidInputError(ValueError):
    """센서 스냅샷이 25개의 유한한 숫자가 아닐 때"""


class ModelNotLoadedError(RuntimeError):
    """학습된 모델 파일을 불러올 수 없을 때"""

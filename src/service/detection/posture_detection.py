import numpy as np
from joblib import load
from logging import getLogger
from sklearn.preprocessing import MinMaxScaler
from typing import Any, Optional
import os

from interfaces.service import IPostureClassifier
from domain.enums import PostureLabel
from domain.exceptions import ModelNotLoadedError
from domain.models import ProcessedSnapshot, RawPrediction
from service.feature_extractor import FeatureExtractor


SCALER_FILE = "scaler.pkl"
PREDICTOR_FILE = "posture.pkl"


class TrainedPostureClassifier(IPostureClassifier):
    """학습된 ML 모델을 사용한 자세 분류

    scaler.pkl (MinMaxScaler) 과 posture.pkl (predict_proba 지원 분류기)을
    모델 디렉토리에서 로드한다. 입력은 평활화된 25개 값.
    """

    MODEL_VERSION = "1.0.0"

    # 디렉토리별로 한 번만 로드
    _cache: dict[str, tuple[MinMaxScaler, Any]] = {}

    def __init__(self, model_dir: str, feature_extractor: Optional[FeatureExtractor] = None):
        self._model_dir = os.path.abspath(model_dir)
        self._feature_extractor = feature_extractor or FeatureExtractor()
        self._logger = getLogger("trained_classifier")

    @staticmethod
    def is_available(model_dir: str) -> bool:
        """모델 파일 존재 여부"""
        if not model_dir:
            return False
        return os.path.exists(os.path.join(model_dir, SCALER_FILE)) and os.path.exists(
            os.path.join(model_dir, PREDICTOR_FILE)
        )

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    @property
    def version(self) -> str:
        return self.MODEL_VERSION

    def _load_models(self) -> tuple[MinMaxScaler, Any]:
        """모델 파일 로드 (디렉토리별 캐시)"""
        cached = TrainedPostureClassifier._cache.get(self._model_dir)
        if cached:
            return cached

        if not self.is_available(self._model_dir):
            self._logger.error(f"Model files not found: {self._model_dir}")
            raise ModelNotLoadedError(f"Model files not found: {self._model_dir}")

        scaler = load(os.path.join(self._model_dir, SCALER_FILE))
        predictor = load(os.path.join(self._model_dir, PREDICTOR_FILE))
        if not hasattr(predictor, "predict_proba"):
            raise ModelNotLoadedError("Posture model does not support predict_proba")

        TrainedPostureClassifier._cache[self._model_dir] = (scaler, predictor)
        self._logger.info("Posture classification models loaded successfully")
        return scaler, predictor

    def predict(self, processed: ProcessedSnapshot) -> RawPrediction:
        """평활화된 값으로부터 자세 분류"""
        scaler, predictor = self._load_models()

        raw = np.asarray(processed.smoothed, dtype=np.float64).reshape(1, -1)
        scaled = scaler.transform(raw)
        scores = predictor.predict_proba(scaled)[0]

        probabilities = {label: 0.0 for label in PostureLabel.classes()}
        for class_name, score in zip(predictor.classes_, scores):
            label = self._to_label(class_name)
            if label in probabilities:
                probabilities[label] += float(score)

        total = sum(probabilities.values())
        if total <= 0:
            raise ModelNotLoadedError("Posture model returned no known classes")
        probabilities = {label: prob / total for label, prob in probabilities.items()}

        posture = max(probabilities, key=probabilities.get)

        return RawPrediction(
            posture=posture,
            confidence=probabilities[posture],
            probabilities=probabilities,
            features=self._feature_extractor.extract(processed),
        )

    def _to_label(self, class_name: Any) -> Optional[PostureLabel]:
        """모델 클래스 (라벨 문자열 또는 인덱스) -> PostureLabel"""
        if isinstance(class_name, (int, np.integer)):
            classes = PostureLabel.classes()
            index = int(class_name)
            return classes[index] if 0 <= index < len(classes) else None
        try:
            return PostureLabel(str(class_name))
        except ValueError:
            self._logger.warning(f"Unknown posture class: {class_name}")
            return None

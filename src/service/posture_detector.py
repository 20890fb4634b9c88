import logging
from typing import Optional, Protocol

import numpy as np

from interfaces.service import IPostureClassifier
from domain.enums import PostureLabel
from domain.models import ProcessedSnapshot, PostureFeatures, RawPrediction
from service.feature_extractor import FeatureExtractor


class RandomSource(Protocol):
    """[0, 1) 균등 난수 공급원 (numpy.random.Generator 호환)"""

    def random(self) -> float:
        ...


class HeuristicPostureClassifier(IPostureClassifier):
    """규칙 기반 자세 분류 구현체

    학습된 모델이 없을 때 사용하는 분류기. 특징값에 대해 순서대로 규칙을
    평가하고 처음 일치하는 규칙의 자세를 선택한다.
    """

    # 기본 신뢰도 범위 [0.85, 1.0)
    BASE_CONFIDENCE_MIN = 0.85
    BASE_CONFIDENCE_SPAN = 0.15

    ASYMMETRY_THRESHOLD = 0.25
    FRONT_BACK_RATIO_THRESHOLD = 1.5
    CENTER_ENGAGEMENT_THRESHOLD = 0.4

    SLOUCHING_SCALE = 0.8
    CROSSED_LEGS_SCALE = 0.75
    NOISE_SCALE = 0.7

    # 다리 꼬기 판단용 셀 (가운데 열 / 네 모서리)
    EDGE_INDICES = (2, 7, 12, 17, 22)
    CORNER_INDICES = (0, 4, 20, 24)
    EDGE_CORNER_RATIO = 1.5

    NOISE_VARIATIONS = (
        PostureLabel.SLOUCHING,
        PostureLabel.LEANING_LEFT,
        PostureLabel.LEANING_RIGHT,
    )

    DEFAULT_NOISE_PROBABILITY = 0.1
    DEFAULT_CROSSED_LEGS_PROBABILITY = 0.2

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        noise_probability: float = DEFAULT_NOISE_PROBABILITY,
        crossed_legs_probability: float = DEFAULT_CROSSED_LEGS_PROBABILITY,
        feature_extractor: Optional[FeatureExtractor] = None,
    ):
        self._rng = rng if rng is not None else np.random.default_rng()
        self._noise_probability = noise_probability
        self._crossed_legs_probability = crossed_legs_probability
        self._feature_extractor = feature_extractor or FeatureExtractor()
        self._logger = logging.getLogger("heuristic_classifier")

    @property
    def version(self) -> str:
        return "mock"

    def predict(self, processed: ProcessedSnapshot) -> RawPrediction:
        """특징 추출 -> 규칙 판단 -> 확률 분포 생성"""
        features = self._feature_extractor.extract(processed)
        posture, confidence = self._decide(processed.smoothed, features)
        probabilities = self._generate_probabilities(posture, confidence)

        return RawPrediction(
            posture=posture,
            confidence=confidence,
            probabilities=probabilities,
            features=features,
        )

    def _decide(
        self, smoothed: np.ndarray, features: PostureFeatures
    ) -> tuple[PostureLabel, float]:
        confidence = self.BASE_CONFIDENCE_MIN + self._rng.random() * self.BASE_CONFIDENCE_SPAN
        asymmetry = features.left_right_asymmetry

        # 좌우 기울어짐
        if asymmetry > self.ASYMMETRY_THRESHOLD:
            if features.left_mean > features.right_mean:
                posture = PostureLabel.LEANING_LEFT
            else:
                posture = PostureLabel.LEANING_RIGHT
            return posture, confidence * (0.7 + asymmetry * 0.3)

        # 앞으로 쏠림 + 중앙 압력 부족
        if (
            features.front_back_ratio > self.FRONT_BACK_RATIO_THRESHOLD
            and features.center_engagement < self.CENTER_ENGAGEMENT_THRESHOLD
        ):
            return PostureLabel.SLOUCHING, confidence * self.SLOUCHING_SCALE

        if self._detect_crossed_legs(smoothed):
            return PostureLabel.CROSSED_LEGS, confidence * self.CROSSED_LEGS_SCALE

        # 센서 노이즈 모사
        if self._rng.random() < self._noise_probability:
            index = min(
                int(self._rng.random() * len(self.NOISE_VARIATIONS)),
                len(self.NOISE_VARIATIONS) - 1,
            )
            posture = self.NOISE_VARIATIONS[index]
            self._logger.debug(f"노이즈 분기: good -> {posture.value}")
            return posture, confidence * self.NOISE_SCALE

        return PostureLabel.GOOD, confidence

    def _detect_crossed_legs(self, smoothed: np.ndarray) -> bool:
        """가운데 열 압력이 모서리 압력보다 확연히 높으면 다리 꼬기 후보"""
        edge_sum = float(sum(smoothed[i] for i in self.EDGE_INDICES))
        corner_sum = float(sum(smoothed[i] for i in self.CORNER_INDICES))

        if edge_sum <= corner_sum * self.EDGE_CORNER_RATIO:
            return False
        return self._rng.random() < self._crossed_legs_probability

    def _generate_probabilities(
        self, posture: PostureLabel, confidence: float
    ) -> dict[PostureLabel, float]:
        """예측 자세에 신뢰도, 나머지 자세에 남은 확률을 무작위 가중 분배 후 정규화"""
        classes = PostureLabel.classes()
        others = [label for label in classes if label != posture]
        remaining = 1 - confidence

        weights = {posture: confidence}
        for label in others:
            weights[label] = (remaining / len(others)) * (0.5 + self._rng.random() * 0.5)

        total = sum(weights.values())
        return {label: weights[label] / total for label in classes}

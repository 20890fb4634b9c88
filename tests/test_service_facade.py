import math

import numpy as np
import pytest

from domain.enums import PostureLabel
from service.posture_detector import HeuristicPostureClassifier

from mocks.patterns import GOOD_PATTERN, LEFT_HEAVY, RIGHT_HEAVY


def test_canonical_good_prediction(model, good_pattern):
    prediction = model.predict(good_pattern)

    assert prediction.posture == PostureLabel.GOOD
    assert prediction.confidence >= 0.85
    assert prediction.error is None
    assert prediction.recommendation == "Great posture! Keep it up!"
    assert prediction.model_version == "mock"
    assert prediction.inference_time_ms >= 0

    summary = prediction.sensor_summary
    assert summary.max_pressure == pytest.approx(0.8)
    assert summary.center_pressure == pytest.approx(1.0)
    assert summary.distribution.symmetry_score == pytest.approx(1.0)


@pytest.mark.parametrize(
    "values, expected",
    [(LEFT_HEAVY, PostureLabel.LEANING_LEFT), (RIGHT_HEAVY, PostureLabel.LEANING_RIGHT)],
)
def test_leaning_predictions(model, values, expected):
    assert model.predict(values).posture == expected


@pytest.mark.parametrize("length", [24, 26])
def test_wrong_length_returns_unknown(model, length):
    prediction = model.predict([0.5] * length)

    assert prediction.posture == PostureLabel.UNKNOWN
    assert prediction.confidence == 0
    assert "25" in prediction.error


@pytest.mark.parametrize("bad", [math.nan, math.inf, "x", None])
def test_non_finite_returns_unknown(model, bad):
    values = list(GOOD_PATTERN)
    values[0] = bad
    prediction = model.predict(values)
    assert prediction.posture == PostureLabel.UNKNOWN
    assert prediction.error


def test_failed_predictions_are_not_recorded(model, good_pattern):
    model.predict([0.1] * 3)
    assert model.get_statistics() is None

    model.predict(good_pattern)
    assert model.get_statistics().total_predictions == 1


def test_invariants_over_many_predictions(noisy_model):
    rng = np.random.default_rng(11)
    for _ in range(300):
        prediction = noisy_model.predict(rng.random(25))
        probabilities = prediction.probabilities
        assert sum(probabilities.values()) == pytest.approx(1.0, abs=1e-6)
        assert max(probabilities, key=probabilities.get) == prediction.posture


def test_reset_restarts_smoothing(model_factory, good_pattern):
    reference = model_factory(
        HeuristicPostureClassifier(
            rng=np.random.default_rng(0), noise_probability=0.0, crossed_legs_probability=0.0
        )
    )
    model = model_factory(
        HeuristicPostureClassifier(
            rng=np.random.default_rng(0), noise_probability=0.0, crossed_legs_probability=0.0
        )
    )

    model.predict(LEFT_HEAVY)
    model.predict(LEFT_HEAVY)
    smoothed = model.predict(good_pattern)
    # 평활화 영향으로 아직 왼쪽으로 치우침
    assert smoothed.features.left_right_asymmetry > 0

    model.reset()
    assert model.last_prediction is None
    assert model.get_statistics() is None

    after_reset = model.predict(good_pattern)
    fresh = reference.predict(good_pattern)
    assert after_reset.features == fresh.features
    assert after_reset.features.left_right_asymmetry == pytest.approx(0.0, abs=1e-12)


def test_statistics_and_metrics(model, good_pattern):
    for _ in range(3):
        model.predict(good_pattern)
    model.predict(LEFT_HEAVY)

    stats = model.get_statistics()
    assert stats.total_predictions == 4
    assert stats.model_status == "mock"
    assert stats.posture_distribution[PostureLabel.GOOD] >= 1

    metrics = model.get_performance_metrics()
    assert metrics.model_version == "mock"
    assert metrics.average_inference_time_ms >= 0


def test_prediction_callback(model, good_pattern):
    received = []
    model.set_prediction_callback(received.append)

    prediction = model.predict(good_pattern)
    model.predict([1.0])

    assert received == [prediction]
    assert model.last_prediction is prediction


def test_callback_error_does_not_escape(model, good_pattern):
    def broken(_prediction):
        raise RuntimeError("display gone")

    model.set_prediction_callback(broken)
    assert model.predict(good_pattern).posture == PostureLabel.GOOD


def test_check_alert(model):
    prediction = model.predict(LEFT_HEAVY)
    alert = model.check_alert(prediction)
    # asymmetry 1.0 -> confidence >= 0.85
    assert alert is not None
    assert alert.posture == PostureLabel.LEANING_LEFT


def test_export_config(model, good_pattern):
    model.predict(good_pattern)
    config = model.export_config()

    assert config["inputShape"] == [25]
    assert config["outputClasses"][0] == "good"
    assert config["isLoaded"] is False
    assert config["predictionCount"] == 1
    assert config["lastPrediction"]["posture"] == "good"


def test_prediction_to_dict(model, good_pattern):
    data = model.predict(good_pattern).to_dict()
    assert set(data["probabilities"]) == {label.value for label in PostureLabel.classes()}
    assert data["features"]["centerEngagement"] == pytest.approx(1.0)
    distribution = data["sensorSummary"]["pressureDistribution"]
    assert distribution["maxPressurePoint"] == {"x": 2, "y": 2, "pressure": pytest.approx(0.8)}


def test_huge_finite_range_keeps_smoothing_finite(model):
    first = model.predict([-1e308] * 12 + [1e308] * 13)
    assert first.error is None
    assert math.isfinite(first.sensor_summary.avg_pressure)
    assert math.isfinite(first.sensor_summary.distribution.total_pressure)
    assert math.isfinite(first.sensor_summary.distribution.uniformity)

    model.predict(LEFT_HEAVY)
    prediction = model.predict(LEFT_HEAVY)

    assert prediction.posture == PostureLabel.LEANING_LEFT
    features = prediction.features
    assert all(
        math.isfinite(value)
        for value in (
            features.left_right_asymmetry,
            features.front_back_ratio,
            features.center_engagement,
            features.overall_activation,
        )
    )


class FailingOnceClassifier(HeuristicPostureClassifier):
    """두 번째 호출에서만 실패하는 분류기"""

    def __init__(self):
        super().__init__(
            rng=np.random.default_rng(0), noise_probability=0.0, crossed_legs_probability=0.0
        )
        self.calls = 0

    def predict(self, processed):
        self.calls += 1
        if self.calls == 2:
            raise RuntimeError("classifier crashed")
        return super().predict(processed)


def test_failed_classification_does_not_advance_smoothing(model_factory):
    model = model_factory(FailingOnceClassifier())

    model.predict(LEFT_HEAVY)
    failed = model.predict(RIGHT_HEAVY)
    assert failed.posture == PostureLabel.UNKNOWN
    assert "classifier crashed" in failed.error

    # 실패한 RIGHT_HEAVY가 누적되지 않았으면 smoothed == LEFT_HEAVY 정규화 값
    prediction = model.predict(LEFT_HEAVY)
    assert prediction.features.left_right_asymmetry == pytest.approx(1.0)

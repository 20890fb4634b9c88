import asyncio

import numpy as np
from joblib import dump
from sklearn.dummy import DummyClassifier
from sklearn.preprocessing import MinMaxScaler

from config.settings import Settings
from container import create_container, create_classifier
from domain.enums import PostureLabel
from main import Application, parse_args
from service.posture_detector import HeuristicPostureClassifier
from service.detection.posture_detection import TrainedPostureClassifier

from mocks.mock_sensor import MockFixedSensor
from mocks.patterns import GOOD_PATTERN, LEFT_HEAVY


def make_settings(**overrides) -> Settings:
    settings = Settings()
    settings.model_dir = ""
    settings.simulated_posture = ""
    settings.random_seed = 0
    settings.test_mode = False
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def test_heuristic_classifier_without_model_dir():
    classifier = create_classifier(make_settings(), np.random.default_rng(0))
    assert isinstance(classifier, HeuristicPostureClassifier)


def test_trained_classifier_when_artifacts_exist(tmp_path):
    samples = np.random.default_rng(0).random((10, 25))
    labels = ["good"] * 5 + ["slouching"] * 5
    dump(MinMaxScaler().fit(samples), tmp_path / "scaler.pkl")
    dump(DummyClassifier(strategy="prior").fit(samples, labels), tmp_path / "posture.pkl")

    try:
        classifier = create_classifier(
            make_settings(model_dir=str(tmp_path)), np.random.default_rng(0)
        )
        assert isinstance(classifier, TrainedPostureClassifier)

        container = create_container(make_settings(model_dir=str(tmp_path)))
        prediction = container.posture_model.predict(GOOD_PATTERN)
        assert prediction.model_version == "1.0.0"
        assert prediction.posture in (PostureLabel.GOOD, PostureLabel.SLOUCHING)
        assert container.posture_model.export_config()["isLoaded"] is True
    finally:
        TrainedPostureClassifier.clear_cache()


def test_container_uses_simulated_posture():
    container = create_container(make_settings(simulated_posture="crossed_legs"))
    assert container.sensor_source.posture == PostureLabel.CROSSED_LEGS


def test_application_cycle_updates_display():
    app = Application(make_settings(noise_probability=0.0))
    sensor = MockFixedSensor(LEFT_HEAVY)
    sensor.connect()
    app._container.sensor_source = sensor

    asyncio.run(app.run_cycle())

    assert sensor.reads == 1
    prediction = app._container.posture_model.last_prediction
    assert prediction.posture == PostureLabel.LEANING_LEFT
    assert app._container.posture_model.get_statistics().total_predictions == 1


def test_test_mode_fixes_seed():
    first = create_container(make_settings(random_seed=None, test_mode=True))
    second = create_container(make_settings(random_seed=None, test_mode=True))

    a = first.posture_model.predict(GOOD_PATTERN)
    b = second.posture_model.predict(GOOD_PATTERN)
    assert a.confidence == b.confidence
    assert a.probabilities == b.probabilities


def test_parse_args_test_flag(monkeypatch):
    monkeypatch.setattr("sys.argv", ["verta-node", "--test", "--cycles", "3"])
    args = parse_args()
    assert args.test is True
    assert args.cycles == 3

    monkeypatch.setattr("sys.argv", ["verta-node"])
    assert parse_args().test is False

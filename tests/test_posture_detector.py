import numpy as np
import pytest

from domain.models import PressureSnapshot
from domain.enums import PostureLabel
from service.signal_processor import SignalProcessor
from service.posture_detector import HeuristicPostureClassifier

from mocks.mock_random import SequenceRandom
from mocks.patterns import GOOD_PATTERN, LEFT_HEAVY, RIGHT_HEAVY, SLOUCHING_PATTERN


def process(values):
    return SignalProcessor().process(PressureSnapshot.from_values(values))


def assert_distribution(raw):
    assert set(raw.probabilities) == set(PostureLabel.classes())
    assert sum(raw.probabilities.values()) == pytest.approx(1.0, abs=1e-6)
    assert max(raw.probabilities, key=raw.probabilities.get) == raw.posture


def test_leaning_left():
    classifier = HeuristicPostureClassifier(rng=SequenceRandom([0.5]))
    raw = classifier.predict(process(LEFT_HEAVY))

    assert raw.posture == PostureLabel.LEANING_LEFT
    # asymmetry 1.0 -> scale 1.0
    assert raw.confidence == pytest.approx(0.85 + 0.5 * 0.15)
    assert_distribution(raw)


def test_leaning_right():
    classifier = HeuristicPostureClassifier(rng=SequenceRandom([0.0]))
    raw = classifier.predict(process(RIGHT_HEAVY))

    assert raw.posture == PostureLabel.LEANING_RIGHT
    assert raw.confidence == pytest.approx(0.85)
    assert_distribution(raw)


def test_leaning_confidence_scales_with_asymmetry():
    # 왼쪽 두 열 0.8, 오른쪽 두 열 0.4 -> 정규화 후 비대칭 0.4 / 0.8 = 0.5
    values = [0.8, 0.8, 0.0, 0.4, 0.4] * 5
    classifier = HeuristicPostureClassifier(rng=SequenceRandom([0.0]))
    raw = classifier.predict(process(values))

    assert raw.posture == PostureLabel.LEANING_LEFT
    assert raw.features.left_right_asymmetry == pytest.approx(0.5)
    assert raw.confidence == pytest.approx(0.85 * (0.7 + 0.5 * 0.3))


def test_slouching():
    classifier = HeuristicPostureClassifier(rng=SequenceRandom([0.0]))
    raw = classifier.predict(process(SLOUCHING_PATTERN))

    assert raw.posture == PostureLabel.SLOUCHING
    assert raw.confidence == pytest.approx(0.85 * 0.8)
    assert_distribution(raw)


def test_crossed_legs_when_gate_passes():
    # 기본 신뢰도 0.85, 게이트 0.1 < 0.2 통과
    rng = SequenceRandom([0.0, 0.1])
    classifier = HeuristicPostureClassifier(rng=rng, crossed_legs_probability=0.2)
    raw = classifier.predict(process(GOOD_PATTERN))

    assert raw.posture == PostureLabel.CROSSED_LEGS
    assert raw.confidence == pytest.approx(0.85 * 0.75)
    assert_distribution(raw)


def test_crossed_legs_gate_blocks_and_falls_through_to_good():
    # 게이트 실패 (0.9), 노이즈 분기 실패 (0.9)
    rng = SequenceRandom([0.2, 0.9, 0.9])
    classifier = HeuristicPostureClassifier(rng=rng)
    raw = classifier.predict(process(GOOD_PATTERN))

    assert raw.posture == PostureLabel.GOOD
    assert raw.confidence == pytest.approx(0.85 + 0.2 * 0.15)


def test_crossed_legs_requires_edge_pressure():
    # 모서리 압력이 가운데 열보다 높으면 게이트를 뽑지 않음
    values = [
        1.0, 0.2, 0.0, 0.2, 1.0,
        0.2, 0.2, 0.0, 0.2, 0.2,
        0.2, 0.2, 0.5, 0.2, 0.2,
        0.2, 0.2, 0.0, 0.2, 0.2,
        1.0, 0.2, 0.0, 0.2, 1.0,
    ]
    rng = SequenceRandom([0.0, 0.99], default=0.99)
    classifier = HeuristicPostureClassifier(rng=rng, crossed_legs_probability=1.0)
    raw = classifier.predict(process(values))

    assert raw.posture == PostureLabel.GOOD


def test_noise_branch_overrides_good():
    # 기본 신뢰도, 게이트 실패, 노이즈 통과, 변형 선택 (index 1)
    rng = SequenceRandom([0.0, 0.9, 0.05, 0.5])
    classifier = HeuristicPostureClassifier(rng=rng, noise_probability=0.1)
    raw = classifier.predict(process(GOOD_PATTERN))

    assert raw.posture == PostureLabel.LEANING_LEFT
    assert raw.confidence == pytest.approx(0.85 * 0.7)
    assert_distribution(raw)


def test_noise_branch_disabled_with_zero_probability():
    rng = SequenceRandom([0.0], default=0.0)
    classifier = HeuristicPostureClassifier(
        rng=rng, noise_probability=0.0, crossed_legs_probability=0.0
    )
    raw = classifier.predict(process(GOOD_PATTERN))
    assert raw.posture == PostureLabel.GOOD


def test_canonical_good_pattern(deterministic_classifier):
    raw = deterministic_classifier.predict(process(GOOD_PATTERN))

    assert raw.posture == PostureLabel.GOOD
    assert 0.85 <= raw.confidence < 1.0
    assert_distribution(raw)


def test_probability_synthesis_weights():
    # 나머지 4개 클래스 모두 가중치 0.5 -> 균등 분배
    rng = SequenceRandom([0.0], default=0.0)
    classifier = HeuristicPostureClassifier(rng=rng)
    raw = classifier.predict(process(LEFT_HEAVY))

    confidence = 0.85
    other = (1 - confidence) / 4 * 0.5
    total = confidence + other * 4
    assert raw.probabilities[PostureLabel.LEANING_LEFT] == pytest.approx(confidence / total)
    assert raw.probabilities[PostureLabel.GOOD] == pytest.approx(other / total)


def test_random_snapshots_keep_distribution_invariants():
    data_rng = np.random.default_rng(0)
    classifier = HeuristicPostureClassifier(rng=np.random.default_rng(1))
    processor = SignalProcessor()

    for _ in range(200):
        values = data_rng.random(25)
        raw = classifier.predict(processor.process(PressureSnapshot.from_values(values)))
        assert_distribution(raw)
        assert 0 <= raw.confidence <= 1


def test_seeded_classifiers_are_reproducible():
    first = HeuristicPostureClassifier(rng=np.random.default_rng(3))
    second = HeuristicPostureClassifier(rng=np.random.default_rng(3))
    processed = process(GOOD_PATTERN)

    for _ in range(20):
        a = first.predict(processed)
        b = second.predict(processed)
        assert a.posture == b.posture
        assert a.confidence == b.confidence

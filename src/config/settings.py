import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from domain.enums import PostureLabel

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass
class Settings:
    """애플리케이션 설정"""

    # 신호 처리 설정
    smoothing_alpha: float = field(
        default_factory=lambda: float(os.getenv("SMOOTHING_ALPHA", "0.3"))
    )
    hotspot_threshold: float = field(
        default_factory=lambda: float(os.getenv("HOTSPOT_THRESHOLD", "0.6"))
    )

    # 휴리스틱 분류기 확률 설정 (0이면 해당 분기 비활성화)
    noise_probability: float = field(
        default_factory=lambda: float(os.getenv("NOISE_PROBABILITY", "0.1"))
    )
    crossed_legs_probability: float = field(
        default_factory=lambda: float(os.getenv("CROSSED_LEGS_PROBABILITY", "0.2"))
    )

    # 난수 시드 (비어 있으면 OS 엔트로피 사용)
    random_seed: Optional[int] = field(
        default_factory=lambda: _optional_int("RANDOM_SEED")
    )

    # 예측 이력 크기
    history_size: int = field(
        default_factory=lambda: int(os.getenv("HISTORY_SIZE", "100"))
    )

    # 학습된 모델 디렉토리 (scaler.pkl, posture.pkl), 비어 있으면 휴리스틱 사용
    model_dir: str = field(default_factory=lambda: os.getenv("MODEL_DIR", ""))

    # 시뮬레이션 자세 (비어 있으면 좌우로 흔들리는 패턴)
    simulated_posture: str = field(
        default_factory=lambda: os.getenv("SIMULATED_POSTURE", "")
    )

    # 샘플링 간격 (초)
    cycle_interval: float = field(
        default_factory=lambda: float(os.getenv("CYCLE_INTERVAL", "0.1"))
    )

    # 실행할 사이클 수 (0이면 무한)
    max_cycles: int = field(default_factory=lambda: int(os.getenv("MAX_CYCLES", "0")))

    # 테스트 모드 (시드 미지정 시 0으로 고정, 화면에 표시)
    test_mode: bool = field(
        default_factory=lambda: os.getenv("TEST_MODE", "false").lower() in ("1", "true", "yes")
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """환경 변수로부터 설정 로드"""
        return cls()

    def validate(self) -> None:
        """설정 유효성 검사"""
        if not 0 < self.smoothing_alpha <= 1:
            raise ValueError("SMOOTHING_ALPHA must be in (0, 1]")
        if not 0 <= self.noise_probability <= 1:
            raise ValueError("NOISE_PROBABILITY must be in [0, 1]")
        if not 0 <= self.crossed_legs_probability <= 1:
            raise ValueError("CROSSED_LEGS_PROBABILITY must be in [0, 1]")
        if self.history_size <= 0:
            raise ValueError("HISTORY_SIZE must be positive")
        if self.cycle_interval <= 0:
            raise ValueError("CYCLE_INTERVAL must be positive")
        if self.max_cycles < 0:
            raise ValueError("MAX_CYCLES must not be negative")
        if self.simulated_posture:
            valid = {label.value for label in PostureLabel.classes()}
            if self.simulated_posture not in valid:
                raise ValueError(f"SIMULATED_POSTURE must be one of {sorted(valid)}")

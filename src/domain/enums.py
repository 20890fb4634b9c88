from enum import Enum


class PostureLabel(Enum):
    """착석 자세 유형"""
    GOOD = "good"
    SLOUCHING = "slouching"             # 구부정한 자세
    LEANING_LEFT = "leaning_left"       # 왼쪽 기울어짐
    LEANING_RIGHT = "leaning_right"     # 오른쪽 기울어짐
    CROSSED_LEGS = "crossed_legs"       # 다리 꼬기
    UNKNOWN = "unknown"

    @classmethod
    def classes(cls) -> list["PostureLabel"]:
        """분류기 출력 클래스 (모델 출력 순서)"""
        return [
            cls.GOOD,
            cls.SLOUCHING,
            cls.LEANING_LEFT,
            cls.LEANING_RIGHT,
            cls.CROSSED_LEGS,
        ]


class StatusLevel(Enum):
    """대시보드 상태 표시 단계"""
    GOOD = "good"
    WARNING = "warning"
    ALERT = "alert"

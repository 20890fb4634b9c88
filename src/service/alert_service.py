from typing import Optional

from interfaces.service import IAlertChecker
from domain.models import Prediction, AlertMessage
from domain.enums import PostureLabel


class RecommendationService:
    """자세별 권장 문구"""

    RECOMMENDATIONS = {
        PostureLabel.GOOD: "Great posture! Keep it up!",
        PostureLabel.SLOUCHING: "Straighten your back and shoulders. Sit tall!",
        PostureLabel.LEANING_LEFT: "You're leaning left. Center yourself and distribute weight evenly.",
        PostureLabel.LEANING_RIGHT: "You're leaning right. Center yourself and distribute weight evenly.",
        PostureLabel.CROSSED_LEGS: "Try uncrossing your legs for better circulation.",
        PostureLabel.UNKNOWN: "Unable to determine posture. Check sensor connection.",
    }

    LOW_CONFIDENCE_THRESHOLD = 0.7
    LOW_CONFIDENCE_NOTE = " (Low confidence - please adjust cushion position)"

    def recommend(self, posture: PostureLabel, confidence: float) -> str:
        recommendation = self.RECOMMENDATIONS.get(
            posture, self.RECOMMENDATIONS[PostureLabel.UNKNOWN]
        )
        if confidence < self.LOW_CONFIDENCE_THRESHOLD:
            recommendation += self.LOW_CONFIDENCE_NOTE
        return recommendation


class AlertChecker(IAlertChecker):
    """알림 체크 구현체 - 확신도 높은 나쁜 자세에 햅틱 알림"""

    ALERT_CONFIDENCE_THRESHOLD = 0.8

    ALERT_MESSAGES = {
        PostureLabel.SLOUCHING: "Straighten your back!",
        PostureLabel.LEANING_LEFT: "Center yourself!",
        PostureLabel.LEANING_RIGHT: "Center yourself!",
        PostureLabel.CROSSED_LEGS: "Uncross your legs!",
    }

    def check(self, prediction: Prediction) -> Optional[AlertMessage]:
        """교정 알림이 필요하면 알림 메시지 반환"""
        if not prediction.is_valid or prediction.posture == PostureLabel.GOOD:
            return None
        if prediction.confidence <= self.ALERT_CONFIDENCE_THRESHOLD:
            return None

        return AlertMessage(
            posture=prediction.posture,
            title="Posture reminder",
            body=self.ALERT_MESSAGES.get(prediction.posture, "Posture reminder"),
            priority="high",
        )

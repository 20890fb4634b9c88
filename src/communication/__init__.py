from .mock_sensor_source import MockSensorSource, POSTURE_PATTERNS

__all__ = [
    "MockSensorSource",
    "POSTURE_PATTERNS",
]

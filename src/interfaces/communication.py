from abc import ABC, abstractmethod

from domain.models import PressureSnapshot


class ISensorSource(ABC):
    """방석 압력 센서 입력 인터페이스"""

    @abstractmethod
    def connect(self) -> None:
        """센서 연결"""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """센서 연결 해제"""
        pass

    @abstractmethod
    def read(self) -> PressureSnapshot:
        """한 주기 측정값 읽기 (블로킹)

        Returns:
            PressureSnapshot: 5x5 그리드 25개 값
        """
        pass

    @abstractmethod
    async def async_read(self) -> PressureSnapshot:
        """한 주기 측정값 읽기 (비동기)"""
        pass

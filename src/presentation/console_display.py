from typing import Optional
from collections import deque

import numpy as np
from rich.console import Console, Group
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.layout import Layout
from rich.live import Live

from interfaces.presentation import IDisplay
from domain.models import PressureSnapshot, Prediction, PredictionStatistics, AlertMessage
from domain.enums import PostureLabel, StatusLevel
from service.heatmap_converter import HeatmapConverter


class ConsoleDisplay(IDisplay):
    """TUI 기반 콘솔 출력 구현체 (rich.live 사용)"""

    POSTURE_NAMES = {
        PostureLabel.GOOD: "Excellent",
        PostureLabel.SLOUCHING: "Slouching",
        PostureLabel.LEANING_LEFT: "Leaning Left",
        PostureLabel.LEANING_RIGHT: "Leaning Right",
        PostureLabel.CROSSED_LEGS: "Crossed Legs",
        PostureLabel.UNKNOWN: "Unknown",
    }

    STATUS_STYLES = {
        StatusLevel.GOOD: "bold green",
        StatusLevel.WARNING: "bold yellow",
        StatusLevel.ALERT: "bold red",
    }

    MAX_LOG_LINES = 8
    HEATMAP_SHAPE = (10, 10)
    # 낮은 압력 -> 높은 압력
    HEAT_COLORS = ["grey23", "blue", "cyan", "green", "yellow", "dark_orange", "red"]

    def __init__(self, heatmap_converter: Optional[HeatmapConverter] = None):
        self._console = Console()
        self._live: Optional[Live] = None
        self._heatmap_converter = heatmap_converter or HeatmapConverter()
        self._last_snapshot: Optional[PressureSnapshot] = None
        self._last_prediction: Optional[Prediction] = None
        self._last_statistics: Optional[PredictionStatistics] = None
        self._last_alert: Optional[AlertMessage] = None
        self._last_error: Optional[Exception] = None
        self._log_messages: deque = deque(maxlen=self.MAX_LOG_LINES)
        self._test_mode: bool = False

    def start_live(self) -> None:
        """Live 디스플레이 시작"""
        self._live = Live(
            self._build_layout(),
            console=self._console,
            refresh_per_second=4,
            screen=True,
        )
        self._live.start()

    def stop_live(self) -> None:
        """Live 디스플레이 종료"""
        if self._live:
            self._live.stop()
            self._live = None

    def add_log(self, message: str, style: str = "") -> None:
        """로그 메시지 추가"""
        self._log_messages.append((message, style))
        self._refresh()

    def _refresh(self) -> None:
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """전체 레이아웃 구성"""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=self.MAX_LOG_LINES + 2),
        )
        layout["body"].split_row(
            Layout(name="left"),
            Layout(name="right"),
        )

        header_text = Text()
        if self._test_mode:
            header_text.append("[TEST MODE] ", style="bold yellow on red")
        header_text.append("VertA Smart Cushion Monitor", style="bold white")

        layout["header"].update(
            Panel(header_text, border_style="red" if self._test_mode else "blue")
        )
        layout["left"].update(self._build_left_panel())
        layout["right"].update(self._build_right_panel())
        layout["footer"].update(self._build_log_panel())

        return layout

    def render_heatmap(self, snapshot: PressureSnapshot) -> Text:
        """5x5 스냅샷을 보간한 컬러 블록"""
        grid = snapshot.grid()
        heatmap = self._heatmap_converter.upsample(grid, self.HEATMAP_SHAPE)

        low, high = float(grid.min()), float(grid.max())
        span = high - low
        levels = np.zeros_like(heatmap) if span == 0 else (heatmap - low) / span

        text = Text()
        for row in levels:
            for value in row:
                index = min(int(value * len(self.HEAT_COLORS)), len(self.HEAT_COLORS) - 1)
                text.append("██", style=self.HEAT_COLORS[index])
            text.append("\n")
        return text

    def _build_left_panel(self) -> Panel:
        """왼쪽 패널 (압력 히트맵 + 분포 지표)"""
        elements = []

        if self._last_snapshot is not None:
            elements.append(
                Panel(self.render_heatmap(self._last_snapshot), title="압력 분포", border_style="cyan")
            )
        else:
            elements.append(Panel("[dim]대기 중...[/dim]", title="압력 분포", border_style="dim"))

        prediction = self._last_prediction
        if prediction and prediction.sensor_summary:
            distribution = prediction.sensor_summary.distribution
            metric_table = Table(title="분포 지표", expand=True)
            metric_table.add_column("항목", style="cyan")
            metric_table.add_column("값", justify="right")

            cop = distribution.center_of_pressure
            peak = distribution.max_pressure_point
            metric_table.add_row("압력 중심", f"({cop.x:.2f}, {cop.y:.2f})")
            metric_table.add_row("최대 압력점", f"({peak.x}, {peak.y}) {peak.pressure:.2f}")
            metric_table.add_row("대칭성", f"{distribution.symmetry_score:.2f}")
            metric_table.add_row("균일도", f"{distribution.uniformity:.2f}")
            metric_table.add_row("핫스팟", str(len(distribution.hotspots)))
            elements.append(metric_table)

        if self._last_error:
            elements.append(
                Panel(
                    f"[bold red]{type(self._last_error).__name__}[/bold red]\n{self._last_error}",
                    title="오류",
                    border_style="red",
                )
            )

        return Panel(Group(*elements), title="센서", border_style="blue")

    def _build_right_panel(self) -> Panel:
        """오른쪽 패널 (현재 자세 + 확률 + 통계)"""
        elements = []
        prediction = self._last_prediction

        if prediction:
            style = self.STATUS_STYLES.get(prediction.status_level, "bold cyan")
            posture_text = Text()
            posture_text.append(self.POSTURE_NAMES.get(prediction.posture, "Unknown"), style=style)
            posture_text.append(f"  score {prediction.posture_score}\n")
            posture_text.append(prediction.recommendation or "", style="italic")
            if prediction.error:
                posture_text.append(f"\n{prediction.error}", style="red")
            elements.append(Panel(posture_text, title="현재 자세", border_style="cyan"))

            prob_table = Table(title="클래스 확률", expand=True)
            prob_table.add_column("자세", style="cyan")
            prob_table.add_column("확률", justify="right")
            for label in PostureLabel.classes():
                prob = prediction.probabilities.get(label, 0.0)
                row_style = "bold" if label == prediction.posture else ""
                prob_table.add_row(label.value, f"{prob * 100:5.1f}%", style=row_style)
            elements.append(prob_table)
        else:
            elements.append(Panel("[dim]대기 중...[/dim]", title="현재 자세", border_style="dim"))

        if self._last_alert:
            alert_text = Text()
            alert_text.append(f"{self._last_alert.body}\n", style="bold yellow")
            alert_text.append(self._last_alert.timestamp.strftime("%H:%M:%S"), style="dim")
            elements.append(Panel(alert_text, title=self._last_alert.title, border_style="yellow"))

        stats_table = Table(title="통계", expand=True)
        stats_table.add_column("항목", style="yellow")
        stats_table.add_column("값", justify="right")
        stats = self._last_statistics
        if stats:
            stats_table.add_row("예측 수", str(stats.total_predictions))
            stats_table.add_row("평균 신뢰도", f"{stats.average_confidence:.2f}")
            stats_table.add_row("평균 추론 시간", f"{stats.average_inference_time_ms:.2f} ms")
            stats_table.add_row("좋은 자세 비율", f"{stats.good_posture_percentage:.1f}%")
            stats_table.add_row("모델", stats.model_status)
        else:
            stats_table.add_row("-", "[dim]없음[/dim]")
        elements.append(stats_table)

        return Panel(Group(*elements), title="모니터링", border_style="blue")

    def _build_log_panel(self) -> Panel:
        log_text = Text()
        for msg, style in self._log_messages:
            log_text.append(f"{msg}\n", style=style)

        if not self._log_messages:
            log_text.append("로그가 없습니다", style="dim")

        return Panel(log_text, title="로그", border_style="dim")

    def show_prediction(self, snapshot: PressureSnapshot, prediction: Prediction) -> None:
        """예측 결과 표시"""
        self._last_snapshot = snapshot
        self._last_prediction = prediction
        self._last_error = None
        self._refresh()

    def show_statistics(self, statistics: Optional[PredictionStatistics]) -> None:
        self._last_statistics = statistics
        self._refresh()

    def show_alert(self, alert: AlertMessage) -> None:
        """교정 알림 표시"""
        self._last_alert = alert
        self.add_log(f"[알림] {alert.posture.value}: {alert.body}", "yellow")

    def show_error(self, error: Exception) -> None:
        """에러 표시"""
        self._last_error = error
        self.add_log(f"[오류] {type(error).__name__}: {error}", "red")

    def set_test_mode(self, enabled: bool) -> None:
        """테스트 모드 설정"""
        self._test_mode = enabled
        self._refresh()

import argparse
import asyncio
import signal
import sys
import logging

from config.settings import Settings
from container import create_container
from domain.enums import PostureLabel


class TUILogHandler(logging.Handler):
    """TUI에 로그를 표시하는 핸들러"""

    def __init__(self, display):
        super().__init__()
        self._display = display

    def emit(self, record):
        try:
            msg = self.format(record)
            style = ""
            if record.levelno >= logging.ERROR:
                style = "red"
            elif record.levelno >= logging.WARNING:
                style = "yellow"
            elif record.levelno >= logging.INFO:
                style = "green"
            self._display.add_log(msg, style)
        except Exception:
            self.handleError(record)


class Application:
    """메인 애플리케이션"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._container = create_container(settings)
        self._running = False
        self._stopped = False
        self._cycles = 0
        self._logger = logging.getLogger("application")

    def _setup_logging(self) -> None:
        """TUI용 로깅 설정"""
        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        tui_handler = TUILogHandler(self._container.display)
        tui_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
        )
        root_logger.addHandler(tui_handler)
        root_logger.setLevel(logging.INFO)

    async def run_cycle(self) -> None:
        """센서 읽기 -> 예측 -> 화면/알림 갱신"""
        container = self._container
        snapshot = await container.sensor_source.async_read()

        prediction = container.posture_model.predict(snapshot)
        container.display.show_prediction(snapshot, prediction)

        if prediction.error:
            self._logger.warning(f"예측 실패: {prediction.error}")
            return

        alert = container.posture_model.check_alert(prediction)
        if alert:
            container.display.show_alert(alert)

        container.display.show_statistics(container.posture_model.get_statistics())

    async def start(self) -> None:
        """애플리케이션 시작"""
        self._running = True

        self._container.display.start_live()
        self._setup_logging()

        try:
            if self._settings.test_mode:
                self._container.display.set_test_mode(True)

            self._container.sensor_source.connect()
            self._logger.info(f"모델 버전: {self._container.posture_model.model_version}")
            self._logger.info("모니터링 시작")

            while self._running:
                try:
                    await self.run_cycle()
                except Exception as e:
                    self._container.display.show_error(e)
                    self._logger.error(f"사이클 오류: {e}")

                self._cycles += 1
                if self._settings.max_cycles and self._cycles >= self._settings.max_cycles:
                    self._running = False
                    break

                await asyncio.sleep(self._settings.cycle_interval)

        except Exception as e:
            self._logger.error(f"애플리케이션 오류: {e}")
            self._container.display.show_error(e)
            raise
        finally:
            self._container.display.stop_live()

    async def stop(self) -> None:
        """애플리케이션 종료"""
        if self._stopped:
            return
        self._logger.info("애플리케이션 종료 중...")
        self._running = False
        self._stopped = True

        try:
            self._container.sensor_source.disconnect()
        except Exception as e:
            self._logger.error(f"센서 연결 해제 오류: {e}")

        stats = self._container.posture_model.get_statistics()
        if stats:
            self._logger.info(
                f"예측 {stats.total_predictions}회, "
                f"좋은 자세 비율 {stats.good_posture_percentage:.1f}%"
            )


def parse_args() -> argparse.Namespace:
    """CLI 인자 파싱"""
    parser = argparse.ArgumentParser(
        description="VertA 스마트 방석 자세 모니터",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--test", "-t",
        action="store_true",
        help="테스트 모드로 실행 (시드 고정, 화면에 TEST MODE 표시)",
    )
    parser.add_argument(
        "--posture", "-p",
        choices=[label.value for label in PostureLabel.classes()],
        help="시뮬레이션 자세 고정 (미지정 시 좌우 흔들림 패턴)",
    )
    parser.add_argument(
        "--cycles", "-n",
        type=int,
        help="실행할 사이클 수 (0이면 무한)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        help="난수 시드 (재현 가능한 실행)",
    )
    parser.add_argument(
        "--model-dir", "-m",
        help="학습된 모델 디렉토리 (scaler.pkl, posture.pkl)",
    )
    return parser.parse_args()


def main() -> None:
    """메인 진입점"""
    args = parse_args()

    settings = Settings.from_env()

    if args.test:
        settings.test_mode = True
    if args.posture:
        settings.simulated_posture = args.posture
    if args.cycles is not None:
        settings.max_cycles = args.cycles
    if args.seed is not None:
        settings.random_seed = args.seed
    if args.model_dir:
        settings.model_dir = args.model_dir

    try:
        settings.validate()
    except ValueError as e:
        print(f"설정 오류: {e}")
        sys.exit(1)

    app = Application(settings)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler():
        loop.create_task(app.stop())

    try:
        loop.add_signal_handler(signal.SIGINT, signal_handler)
        loop.add_signal_handler(signal.SIGTERM, signal_handler)
    except NotImplementedError:
        # Windows에서는 add_signal_handler가 지원되지 않음
        pass

    try:
        loop.run_until_complete(app.start())
        # 사이클 제한으로 끝난 경우에도 정리
        loop.run_until_complete(app.stop())
    except KeyboardInterrupt:
        loop.run_until_complete(app.stop())
    finally:
        loop.close()


if __name__ == "__main__":
    main()

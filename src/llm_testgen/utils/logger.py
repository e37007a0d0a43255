"""
Logging Utility Module

애플리케이션 전체에서 사용할 로깅 설정 및 유틸리티
"""
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console


# 전역 콘솔 객체 (로그는 stderr로 출력)
console = Console(stderr=True)

# 로거 이름
LOGGER_NAME = "llm_testgen"


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    use_rich: bool = True
) -> logging.Logger:
    """
    로거 설정

    Args:
        log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: 로그 파일 경로 (선택사항)
        use_rich: Rich 핸들러 사용 여부

    Returns:
        설정된 로거 객체
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # 기존 핸들러 제거
    logger.handlers.clear()

    if use_rich:
        rich_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False
        )
        rich_handler.setLevel(level)
        logger.addHandler(rich_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # 파일 핸들러 (선택사항)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # 파일에는 모든 로그 저장
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    로거 인스턴스 가져오기

    Args:
        name: 하위 로거 이름 (선택사항). 패키지 모듈 이름(__name__)도 그대로 받는다.

    Returns:
        로거 객체
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class LogContext:
    """로깅 컨텍스트 관리자"""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        """
        로깅 컨텍스트 초기화

        Args:
            operation: 작업 이름
            logger: 사용할 로거 (선택사항)
        """
        self.operation = operation
        self.logger = logger or get_logger()
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_time = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(
                f"Completed {self.operation} in {elapsed_time:.2f} seconds"
            )
        else:
            self.logger.error(
                f"Failed {self.operation} after {elapsed_time:.2f} seconds: {exc_val}"
            )

        return False  # 예외를 다시 발생시킴

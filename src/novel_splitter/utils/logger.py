"""전역 로깅 설정 모듈

모든 모듈에서 `from novel_splitter.utils.logger import get_logger` 로 사용.
핸들러 설치는 CLI 시작 시 `setup_logging()` 한 번만 호출한다.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

# 기본 로그 디렉토리
LOG_DIR = Path("data/logs")

# 로그 포맷
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    level: str = "DEBUG",
    console_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None
) -> Path:
    """전역 로깅 설정

    Args:
        level: 파일 로그 레벨 (DEBUG/INFO/WARNING/ERROR)
        console_level: 콘솔 로그 레벨 (기본 INFO)
        log_dir: 로그 디렉토리 (기본 data/logs)

    Returns:
        날짜별 로그 파일 경로
    """
    directory = Path(log_dir) if log_dir else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"{datetime.now().strftime('%Y-%m-%d')}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 최소 레벨은 DEBUG

    # 기존 핸들러 제거
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # 파일 핸들러 (DEBUG 레벨까지 전부 기록)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, level.upper()))
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root_logger.addHandler(file_handler)

    # 콘솔 핸들러 (INFO 이상만 표시)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.info(f"Logging initialized: file={log_file}, level={level}")
    return log_file


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """로거 인스턴스 반환

    Args:
        name: 로거 이름 (보통 __name__ 사용)

    Returns:
        logging.Logger 인스턴스

    Example:
        >>> from novel_splitter.utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("디버그 메시지")
    """
    return logging.getLogger(name or __name__)

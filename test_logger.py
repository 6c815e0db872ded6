"""로거 테스트

setup_logging 핸들러 구성과 날짜별 로그 파일 기록 검증
"""

import logging
import pytest
from novel_splitter.utils.logger import get_logger, setup_logging


@pytest.fixture
def root_logger():
    logger = logging.getLogger()
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_setup_logging_writes_file(tmp_path, root_logger):
    log_file = setup_logging("DEBUG", "WARNING", tmp_path / "logs")

    assert log_file.parent == tmp_path / "logs"
    assert log_file.suffix == ".log"

    logger = get_logger("novel_splitter.test")
    logger.debug("디버그 메시지 (파일에만 기록)")
    for handler in root_logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "디버그 메시지" in content
    assert "novel_splitter.test" in content


def test_setup_logging_replaces_handlers(tmp_path, root_logger):
    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)

    assert len(root_logger.handlers) == 2
    levels = sorted(handler.level for handler in root_logger.handlers)
    assert levels == [logging.DEBUG, logging.INFO]


def test_get_logger_name():
    assert get_logger("novel_splitter.stages").name == "novel_splitter.stages"

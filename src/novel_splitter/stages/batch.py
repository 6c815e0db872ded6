"""배치 처리

여러 소설 파일을 순서대로 읽고 분할한다 (병렬 처리 없음).
기본 정책은 첫 번째 실패에서 배치 전체를 중단하는 것이며,
stop_on_error=False 이면 실패 파일을 건너뛰고 기록한다.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union
from novel_splitter.config.loader import Config
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.patterns import resolve_pattern
from novel_splitter.stages.splitter import Splitter
from novel_splitter.utils.errors import BatchError, PatternError, SplitterError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class BatchResult:
    """파일 하나의 분할 결과"""
    file_name: str
    chapters: List[Chapter]

    @property
    def word_count(self) -> int:
        return sum(ch.word_count for ch in self.chapters)


@dataclass
class BatchReport:
    """배치 전체 결과"""
    results: List[BatchResult] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    pattern_error: Optional[PatternError] = None

    @property
    def total(self) -> int:
        return len(self.results) + len(self.failed)


class BatchRunner:
    """배치 처리기"""

    def __init__(self, config: Config):
        """
        Args:
            config: 전체 설정 (분할 옵션 + 배치 정책)
        """
        self.config = config
        processing = config.processing
        self.pattern, self.pattern_error = resolve_pattern(processing.rule_type, processing.custom_rule)
        self.splitter = Splitter(processing.preamble_title, processing.scan_mode)

    def run(
        self,
        paths: Sequence[Union[str, Path]],
        on_progress: Optional[ProgressCallback] = None
    ) -> BatchReport:
        """배치 실행

        Args:
            paths: 소설 파일 경로 목록 (이 순서대로 처리)
            on_progress: (완료 수, 전체 수) 콜백, 파일 하나 끝날 때마다 호출

        Returns:
            BatchReport

        Raises:
            BatchError: stop_on_error 일 때 첫 번째 실패 파일
        """
        report = BatchReport(pattern_error=self.pattern_error)
        total = len(paths)
        encoding = self.config.processing.encoding

        logger.info("=" * 50)
        logger.info(f"Batch: {total} files (stop_on_error={self.config.batch.stop_on_error})")
        logger.info("=" * 50)

        for i, path in enumerate(paths):
            path = Path(path)
            logger.info(f"[{i + 1}/{total}] {path.name}")

            try:
                chapters = self.splitter.split_file(path, self.pattern, encoding)
            except SplitterError as e:
                if self.config.batch.stop_on_error:
                    logger.error(f"❌ Batch aborted at {path.name}: {e.message}")
                    raise BatchError(
                        f"Batch aborted at {path.name}: {e.message}",
                        file_name=path.name,
                        details=e.details
                    ) from e
                logger.warning(f"   ⚠️  Skipped {path.name}: {e.message}")
                report.failed.append(path.name)
            else:
                report.results.append(BatchResult(path.name, chapters))

            if on_progress:
                on_progress(i + 1, total)

        logger.info(f"✅ Batch complete: {len(report.results)} success, {len(report.failed)} failed")
        return report

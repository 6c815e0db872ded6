"""챕터 내보내기 (Markdown / 텍스트 / ZIP)

단일 챕터 파일, 전체 합본 문서, 챕터별 파일을 담은 ZIP 아카이브를 만든다.
챕터 시퀀스는 읽기만 한다.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union
from novel_splitter.stages.archive import build_archive
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.merger import SECTION_SEPARATOR, render_section
from novel_splitter.utils.errors import PackagingError
from novel_splitter.utils.text_cleaner import sanitize_filename
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

ZIP_MEDIA_TYPE = "application/zip"
DEFAULT_ARCHIVE_NAME = "小说章节.zip"
DEFAULT_COMBINED_NAME = "完整小说"


class OutputFormat(str, Enum):
    """텍스트 출력 형식"""
    MD = "md"
    TXT = "txt"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def media_type(self) -> str:
        if self is OutputFormat.MD:
            return "text/markdown;charset=utf-8"
        return "text/plain;charset=utf-8"


@dataclass(frozen=True)
class OutputFile:
    """다운로드 가능한 산출물 하나"""
    name: str
    data: bytes
    media_type: str


def chapter_file_name(chapter: Chapter, fmt: Union[OutputFormat, str] = OutputFormat.MD) -> str:
    """챕터 파일명 (금지 문자 치환 + 확장자)"""
    return sanitize_filename(chapter.title) + OutputFormat(fmt).extension


def export_chapter(chapter: Chapter, fmt: Union[OutputFormat, str] = OutputFormat.MD) -> OutputFile:
    """단일 챕터 → 파일 하나"""
    fmt = OutputFormat(fmt)
    return OutputFile(
        name=chapter_file_name(chapter, fmt),
        data=chapter.content.encode("utf-8"),
        media_type=fmt.media_type
    )


def export_archive(
    chapters: Sequence[Chapter],
    fmt: Union[OutputFormat, str] = OutputFormat.MD,
    archive_name: str = DEFAULT_ARCHIVE_NAME
) -> OutputFile:
    """챕터별 파일을 ZIP 하나로

    같은 이름으로 정리되는 제목이 있으면 나중 챕터가 이긴다.

    Raises:
        PackagingError: 챕터 없음 또는 아카이브 생성 실패
    """
    if not chapters:
        raise PackagingError("No chapters to export")

    fmt = OutputFormat(fmt)
    entries = OrderedDict()
    for chapter in chapters:
        name = chapter_file_name(chapter, fmt)
        if name in entries:
            logger.warning(f"⚠️  Duplicate archive entry '{name}', keeping the later chapter")
        entries[name] = chapter.content.encode("utf-8")

    data = build_archive(entries)
    logger.info(f"✅ Archive created: {archive_name} ({len(entries)} files)")
    return OutputFile(name=archive_name, data=data, media_type=ZIP_MEDIA_TYPE)


def render_combined(chapters: Sequence[Chapter]) -> str:
    """'# 제목\\n\\n본문' 을 구분선으로 이어붙인 합본 텍스트"""
    return SECTION_SEPARATOR.join(render_section(ch) for ch in chapters)


def export_combined(
    chapters: Sequence[Chapter],
    fmt: Union[OutputFormat, str] = OutputFormat.MD,
    base_name: str = DEFAULT_COMBINED_NAME
) -> OutputFile:
    """전체 챕터 → 합본 문서 하나

    Raises:
        PackagingError: 챕터 없음
    """
    if not chapters:
        raise PackagingError("No chapters to export")

    fmt = OutputFormat(fmt)
    return OutputFile(
        name=base_name + fmt.extension,
        data=render_combined(chapters).encode("utf-8"),
        media_type=fmt.media_type
    )

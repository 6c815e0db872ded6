"""EPUB 검사

EbookLib 으로 EPUB 을 다시 읽어 제목, 식별자, 목차, spine 을 요약한다.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union
from ebooklib import epub
from novel_splitter.utils.errors import InputError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EpubSummary:
    """EPUB 요약"""
    title: str
    identifier: str
    language: str
    chapter_titles: List[str] = field(default_factory=list)
    spine_ids: List[str] = field(default_factory=list)


def _first_metadata(book: epub.EpubBook, name: str) -> str:
    values = book.get_metadata("DC", name)
    return values[0][0] if values else ""


def _flatten_toc(toc) -> List[str]:
    titles = []
    for entry in toc:
        if isinstance(entry, tuple):
            section, children = entry
            titles.append(section.title)
            titles.extend(_flatten_toc(children))
        else:
            titles.append(entry.title)
    return titles


def inspect_epub(path: Union[str, Path]) -> EpubSummary:
    """EPUB 파일 요약

    Raises:
        InputError: 파일 없음 또는 EPUB 파싱 실패
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": False})
    except Exception as e:
        logger.error(f"Failed to read EPUB: {e}")
        raise InputError(f"Not a readable EPUB: {path.name}", details=str(e)) from e

    summary = EpubSummary(
        title=_first_metadata(book, "title"),
        identifier=_first_metadata(book, "identifier"),
        language=_first_metadata(book, "language"),
        chapter_titles=_flatten_toc(book.toc),
        spine_ids=[item[0] if isinstance(item, tuple) else item for item in book.spine]
    )
    logger.debug(f"Inspected {path.name}: {len(summary.chapter_titles)} toc entries")
    return summary

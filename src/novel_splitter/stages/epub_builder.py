"""EPUB 생성

챕터 시퀀스 → EPUB 2 (OEBPS 구조), EbookLib 으로 작성.
mimetype 은 EbookLib 이 첫 번째 항목으로, 압축 없이 기록한다.
"""

import io
import random
import uuid
from typing import Optional, Sequence
from ebooklib import epub
from novel_splitter.config.loader import EPUBConfig
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.epub_templates import chapter_file_name, create_chapter_body, xml_safe
from novel_splitter.stages.exporter import OutputFile
from novel_splitter.utils.errors import PackagingError
from novel_splitter.utils.text_cleaner import strip_extension
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

EPUB_MIMETYPE = "application/epub+zip"

WRITE_OPTIONS = {
    "play_order": {"enabled": True, "start_from": 1},
    "raise_exceptions": True,
}


def new_identifier(rng: Optional[random.Random] = None) -> str:
    """버전 4 UUID 문자열 (8-4-4-4-12)

    Args:
        rng: 재현 가능한 테스트용 난수 생성기 (없으면 uuid4)
    """
    if rng is None:
        return str(uuid.uuid4())
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


class EPUBGenerator:
    """EPUB 생성기"""

    def __init__(self, config: Optional[EPUBConfig] = None, rng: Optional[random.Random] = None):
        """
        Args:
            config: 언어/제작자 메타데이터 (기본값 EPUBConfig())
            rng: 식별자 생성용 난수 생성기
        """
        self.config = config or EPUBConfig()
        self.rng = rng

    def build(self, novel_name: str, chapters: Sequence[Chapter]) -> OutputFile:
        """EPUB 생성

        Args:
            novel_name: 원본 파일명 (예: "斗破苍穹.txt")
            chapters: 챕터 시퀀스 (변경하지 않음)

        Returns:
            "<책 제목>.epub" OutputFile

        Raises:
            PackagingError: 챕터 없음 또는 EPUB 작성 실패
        """
        if not chapters:
            raise PackagingError("No chapters to put into the EPUB", hint="Split the novel first")

        book_title = strip_extension(novel_name)

        book = epub.EpubBook()
        book.FOLDER_NAME = "OEBPS"
        book.EPUB_VERSION = 2
        self._set_metadata(book, book_title)

        items = [self._create_chapter(book, i, chapter) for i, chapter in enumerate(chapters, start=1)]

        book.toc = items
        book.add_item(epub.EpubNcx())
        book.spine = items

        buffer = io.BytesIO()
        try:
            epub.write_epub(buffer, book, WRITE_OPTIONS)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to write EPUB: {e}")
            raise PackagingError(f"Failed to write EPUB: {book_title}", details=str(e)) from e

        logger.info(f"✅ EPUB created: {book_title}.epub ({len(items)} chapters)")
        return OutputFile(name=f"{book_title}.epub", data=buffer.getvalue(), media_type=EPUB_MIMETYPE)

    def _set_metadata(self, book: epub.EpubBook, book_title: str) -> None:
        book.set_identifier(f"urn:uuid:{new_identifier(self.rng)}")
        book.set_title(xml_safe(book_title))
        book.set_language(self.config.language)
        book.add_author(self.config.creator)

    def _create_chapter(self, book: epub.EpubBook, index: int, chapter: Chapter) -> epub.EpubHtml:
        item = epub.EpubHtml(
            uid=f"chapter_{index}",
            file_name=chapter_file_name(index),
            title=xml_safe(chapter.title),
            lang=self.config.language
        )
        item.content = create_chapter_body(chapter.title, chapter.content)
        book.add_item(item)
        return item


def build_epub(
    novel_name: str,
    chapters: Sequence[Chapter],
    config: Optional[EPUBConfig] = None,
    rng: Optional[random.Random] = None
) -> OutputFile:
    """EPUBGenerator(config, rng).build(...) 단축 함수"""
    return EPUBGenerator(config, rng).build(novel_name, chapters)

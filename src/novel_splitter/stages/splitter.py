"""Splitter for Chapter Text

Regex pattern-based text splitter.
Both scan modes only locate heading boundaries (offset, title); chapters are then
sliced between consecutive boundaries, so joining every chapter's content gives
back the original text exactly.
"""

from enum import Enum
from pathlib import Path
from typing import Iterator, List, NamedTuple, Pattern, Tuple, Union
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.patterns import heading_title
from novel_splitter.stages.reader import read_text
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PREAMBLE_TITLE = "preamble"


class ScanMode(str, Enum):
    """제목 탐색 방식"""
    LINES = "lines"     # 한 줄씩, 줄 시작에서 매칭
    SEARCH = "search"   # 한 줄씩, 줄 안 어디서든 첫 매치


class Boundary(NamedTuple):
    """챕터 시작 위치"""
    offset: int
    title: str


class Splitter:
    """Regex 패턴을 사용하여 텍스트를 챕터 단위로 분할

    첫 제목 앞의 텍스트는 preamble 챕터로 보존된다.
    제목이 하나도 없으면 문서 전체가 preamble 챕터 하나가 된다.
    """

    def __init__(
        self,
        preamble_title: str = DEFAULT_PREAMBLE_TITLE,
        mode: Union[ScanMode, str] = ScanMode.LINES
    ):
        self.preamble_title = preamble_title
        self.mode = ScanMode(mode)

    def split(self, text: str, pattern: Pattern) -> List[Chapter]:
        """텍스트를 챕터 목록으로 분할

        Args:
            text: 소설 전체 텍스트
            pattern: compile_pattern()/resolve_pattern() 결과

        Returns:
            문서 순서대로의 Chapter 리스트
        """
        if not text:
            return []

        if self.mode is ScanMode.SEARCH:
            boundaries = self._search_boundaries(text, pattern)
        else:
            boundaries = self._line_boundaries(text, pattern)

        if not boundaries:
            logger.warning(f"⚠️  No chapter heading matched (pattern={pattern.pattern!r}); whole text kept as '{self.preamble_title}'")

        chapters = self._slice(text, boundaries)
        logger.info(f"   -> {len(chapters)} chapters ({len(boundaries)} headings, mode={self.mode.value})")
        return chapters

    def split_file(self, file_path: Union[str, Path], pattern: Pattern, encoding: str = "utf-8") -> List[Chapter]:
        """파일을 읽어 분할 (읽기 실패 시 InputError)"""
        text = read_text(file_path, encoding)
        return self.split(text, pattern)

    def _lines(self, text: str) -> Iterator[Tuple[int, str]]:
        """(줄 시작 위치, 줄 내용) 순회 (줄 끝 \\r 제외)"""
        offset = 0
        for line in text.split("\n"):
            if offset >= len(text):
                break  # 마지막 줄바꿈 뒤의 빈 조각
            yield offset, line[:-1] if line.endswith("\r") else line
            offset += len(line) + 1

    def _line_boundaries(self, text: str, pattern: Pattern) -> List[Boundary]:
        boundaries = []
        for offset, body in self._lines(text):
            match = pattern.match(body)
            if match:
                boundaries.append(Boundary(offset, heading_title(match)))
        return boundaries

    def _search_boundaries(self, text: str, pattern: Pattern) -> List[Boundary]:
        boundaries = []
        for offset, body in self._lines(text):
            match = pattern.search(body)
            if match is None or match.end() == match.start():
                continue  # 빈 매치는 경계로 쓰지 않음
            boundaries.append(Boundary(offset + match.start(), heading_title(match)))
        return boundaries

    def _slice(self, text: str, boundaries: List[Boundary]) -> List[Chapter]:
        chapters = []

        first_offset = boundaries[0].offset if boundaries else len(text)
        if first_offset > 0:
            chapters.append(Chapter.from_content(self.preamble_title, text[:first_offset]))

        for i, boundary in enumerate(boundaries):
            end = boundaries[i + 1].offset if i + 1 < len(boundaries) else len(text)
            chapters.append(Chapter.from_content(boundary.title, text[boundary.offset:end]))

        return chapters


def split_text(
    text: str,
    pattern: Pattern,
    preamble_title: str = DEFAULT_PREAMBLE_TITLE,
    mode: Union[ScanMode, str] = ScanMode.LINES
) -> List[Chapter]:
    """Splitter(...).split(...) 단축 함수"""
    return Splitter(preamble_title, mode).split(text, pattern)

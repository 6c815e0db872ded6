"""챕터 데이터 구조

소설의 챕터를 나타내는 불변 데이터 클래스
"""

from dataclasses import dataclass
from novel_splitter.utils.text_cleaner import count_words, count_lines


@dataclass(frozen=True)
class Chapter:
    """소설의 한 챕터

    Attributes:
        title: 챕터 제목 (예: "第一章 开端")
        content: 제목 줄을 포함한 챕터 원문
        word_count: 공백이 아닌 글자 수
        line_count: 줄 수 (content.split("\\n") 길이)
    """
    title: str
    content: str
    word_count: int
    line_count: int

    @classmethod
    def from_content(cls, title: str, content: str) -> "Chapter":
        """content 로부터 통계를 계산해 챕터 생성"""
        return cls(
            title=title,
            content=content,
            word_count=count_words(content),
            line_count=count_lines(content)
        )

    def __repr__(self):
        return f"<Chapter {self.title!r} ({self.word_count} chars, {self.line_count} lines)>"

"""텍스트 정리 유틸리티

파일명 정리, 책 제목 추출, 챕터 통계 계산 함수
"""

import re
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

# 파일 시스템 금지 문자: \ / : * ? " < > |
FORBIDDEN_CHARS = re.compile(r'[\\/:*?"<>|]')

WHITESPACE = re.compile(r'\s+')


def sanitize_filename(title: str) -> str:
    """파일명으로 쓸 수 없는 문자를 '_' 로 치환

    Args:
        title: 챕터 제목

    Returns:
        정리된 파일명 (확장자 제외)

    Examples:
        >>> sanitize_filename('第一章 开端: "起"')
        '第一章 开端_ _起_'
    """
    return FORBIDDEN_CHARS.sub('_', title)


def strip_extension(file_name: str, extension: str = ".txt") -> str:
    """파일명 끝의 확장자 제거 (대소문자 무시)

    Examples:
        >>> strip_extension("斗破苍穹.txt")
        '斗破苍穹'
        >>> strip_extension("斗破苍穹.TXT.bak")
        '斗破苍穹.TXT.bak'
    """
    if file_name.lower().endswith(extension.lower()):
        stripped = file_name[:-len(extension)]
        logger.debug(f"Title cleaned: '{file_name}' → '{stripped}'")
        return stripped
    return file_name


def count_words(text: str) -> int:
    """공백이 아닌 글자 수 (중국어 '字数' 기준)"""
    return len(WHITESPACE.sub('', text))


def count_lines(text: str) -> int:
    """'\\n' 으로 나눈 줄 수 (빈 문자열도 1줄)"""
    return text.count('\n') + 1

"""챕터 제목 패턴

그룹 1 = 챕터 표시(예: "第一章"), 그룹 2 = 선택적 챕터 이름.
기본 제공 패턴 3종 + 사용자 정의 패턴.
"""

import re
from enum import Enum
from typing import Optional, Tuple, Pattern
from novel_splitter.utils.errors import PatternError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)


class PatternKind(str, Enum):
    """패턴 종류"""
    DEFAULT = "default"
    NUMBER_ONLY = "number_only"
    CHINESE_ONLY = "chinese_only"
    CUSTOM = "custom"


# 한 줄(줄바꿈 제외)에 대해 줄 시작부터 매칭
BUILTIN_PATTERNS = {
    # 第一章 标题 / 第12章 标题 (표시와 이름 사이 공백 필수)
    PatternKind.DEFAULT: r'^(第[零〇一二三四五六七八九十百千万两\d]+章)(?:\s+)(.*)$',
    # 第12章
    PatternKind.NUMBER_ONLY: r'^(第\d+章)$',
    # 第十二章
    PatternKind.CHINESE_ONLY: r'^(第[一二三四五六七八九十百千万]+章)$',
}

PATTERN_DESCRIPTIONS = {
    PatternKind.DEFAULT: "第X章 + 챕터 이름 (한자 숫자 또는 아라비아 숫자)",
    PatternKind.NUMBER_ONLY: "第N章 만 (아라비아 숫자)",
    PatternKind.CHINESE_ONLY: "第X章 만 (한자 숫자)",
    PatternKind.CUSTOM: "사용자 정의 정규식",
}


def compile_pattern(kind, custom: Optional[str] = None) -> Pattern:
    """패턴 컴파일

    Args:
        kind: PatternKind 또는 그 문자열 값
        custom: kind 가 custom 일 때의 정규식 문자열

    Returns:
        컴파일된 정규식 (re.MULTILINE)

    Raises:
        PatternError: 알 수 없는 종류, 빈 사용자 패턴, 컴파일 실패
    """
    try:
        kind = PatternKind(kind)
    except ValueError:
        raise PatternError(f"Unknown rule type: {kind}") from None

    if kind is PatternKind.CUSTOM:
        source = (custom or "").strip()
        if not source:
            raise PatternError("Custom rule is empty")
    else:
        source = BUILTIN_PATTERNS[kind]

    try:
        return re.compile(source, re.MULTILINE)
    except re.error as e:
        logger.error(f"Invalid custom pattern {source!r}: {e}")
        raise PatternError(f"Invalid Regex Pattern: {e}", details=source) from e


def resolve_pattern(kind, custom: Optional[str] = None) -> Tuple[Pattern, Optional[PatternError]]:
    """패턴 컴파일 + 실패 시 기본 패턴으로 대체

    호출자는 두 번째 값이 None 이 아니면 사용자에게 오류를 보여줘야 한다.

    Returns:
        (사용할 패턴, 발생한 PatternError 또는 None)
    """
    try:
        return compile_pattern(kind, custom), None
    except PatternError as e:
        logger.warning(f"⚠️  Falling back to default pattern: {e.message}")
        return compile_pattern(PatternKind.DEFAULT), e


def heading_title(match) -> str:
    """매치 결과에서 챕터 제목 생성

    그룹 2 가 있고 비어있지 않으면 "표시 이름", 아니면 표시만.
    그룹이 없는 사용자 패턴은 매치 전체를 표시로 사용한다.
    """
    if match.re.groups == 0:
        return match.group(0)

    marker = match.group(1) or ""
    label = match.group(2) if match.re.groups >= 2 else None
    if label:
        label = label.rstrip("\r")
    if label:
        return f"{marker} {label}"
    return marker

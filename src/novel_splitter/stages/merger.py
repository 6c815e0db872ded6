"""챕터 병합

선택한 챕터들을 하나로 합쳐 가장 앞 선택 위치에 넣는다.
원본 시퀀스는 변경하지 않고 새 리스트를 반환한다.
"""

from typing import Iterable, List, Optional, Sequence
from novel_splitter.stages.chapter import Chapter
from novel_splitter.utils.errors import MergeError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

SECTION_SEPARATOR = "\n\n---\n\n"
MERGED_TITLE_FORMAT = "合并章节 ({count}个章节)"


def render_section(chapter: Chapter) -> str:
    """'# 제목' + 빈 줄 + 본문"""
    return f"# {chapter.title}\n\n{chapter.content}"


def merge_chapters(
    chapters: Sequence[Chapter],
    selected: Iterable[int],
    custom_title: Optional[str] = None
) -> List[Chapter]:
    """챕터 병합

    Args:
        chapters: 현재 챕터 시퀀스
        selected: 병합할 0-based 인덱스 (2개 이상, 중복 무시)
        custom_title: 병합 챕터 제목 (비어있으면 "合并章节 (N个章节)")

    Returns:
        병합 결과 새 리스트

    Raises:
        MergeError: 선택 2개 미만 또는 범위 밖 인덱스
    """
    indices = sorted(set(selected))
    if len(indices) < 2:
        raise MergeError(f"At least 2 chapters are required to merge, got {len(indices)}")

    invalid = [i for i in indices if i < 0 or i >= len(chapters)]
    if invalid:
        raise MergeError(f"Chapter index out of range [0, {len(chapters)}): {invalid}")

    picked = [chapters[i] for i in indices]
    title = (custom_title or "").strip() or MERGED_TITLE_FORMAT.format(count=len(picked))

    # 통계는 병합 전 값을 그대로 합산
    merged = Chapter(
        title=title,
        content=SECTION_SEPARATOR.join(render_section(ch) for ch in picked),
        word_count=sum(ch.word_count for ch in picked),
        line_count=sum(ch.line_count for ch in picked)
    )

    selected_set = set(indices)
    result = []
    for i, chapter in enumerate(chapters):
        if i == indices[0]:
            result.append(merged)
        elif i not in selected_set:
            result.append(chapter)

    logger.info(f"✅ Merged {len(picked)} chapters into '{title}' ({len(chapters)} → {len(result)})")
    return result

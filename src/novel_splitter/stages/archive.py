"""ZIP 아카이브 생성

이름 → 바이트 매핑을 받아 하나의 ZIP 바이트열을 만든다.
"""

import io
import zipfile
from typing import Mapping
from novel_splitter.utils.errors import PackagingError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)


def build_archive(entries: Mapping[str, bytes]) -> bytes:
    """ZIP 바이트 생성

    Args:
        entries: 항목 이름 → 내용 (삽입 순서대로 기록)

    Returns:
        ZIP 파일 바이트

    Raises:
        PackagingError: 아카이브 작성 실패
    """
    buffer = io.BytesIO()

    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for name, data in entries.items():
                archive.writestr(name, data)
    except (zipfile.LargeZipFile, OSError, ValueError) as e:
        logger.error(f"Archive generation failed: {e}")
        raise PackagingError("Archive generation failed", details=str(e)) from e

    data = buffer.getvalue()
    logger.debug(f"Archive built: {len(entries)} entries, {len(data)} bytes")
    return data

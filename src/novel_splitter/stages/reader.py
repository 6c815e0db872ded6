"""텍스트 파일 읽기

지정된 인코딩(utf-8 / gbk / gb2312 / ascii) 또는 chardet 자동 감지로 디코딩.
디코딩은 엄격 모드이며, 실패 시 부분 텍스트 없이 InputError 를 던진다.
"""

import codecs
import chardet
from pathlib import Path
from typing import Optional, Union
from novel_splitter.utils.errors import InputError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_ENCODINGS = ("utf-8", "gbk", "gb2312", "ascii")
AUTO = "auto"

# chardet 신뢰도 기준
MIN_CONFIDENCE = 0.7


def normalize_encoding(encoding: str) -> str:
    """인코딩 이름 정규화 (예: 'UTF8' → 'utf-8')

    Raises:
        InputError: 지원하지 않는 인코딩
    """
    name = (encoding or "").strip().lower()
    if name == AUTO:
        return AUTO
    try:
        name = codecs.lookup(name).name
    except LookupError:
        raise InputError(f"Unsupported encoding: {encoding}") from None
    if name not in SUPPORTED_ENCODINGS:
        raise InputError(f"Unsupported encoding: {encoding}")
    return name


def detect_encoding(raw: bytes, fallback: str = "utf-8", sample_size: int = 10000) -> str:
    """chardet 으로 인코딩 추정 (지원 목록 밖이거나 신뢰도가 낮으면 fallback)"""
    result = chardet.detect(raw[:sample_size])
    guess = result.get("encoding")
    confidence = result.get("confidence") or 0

    if guess and confidence > MIN_CONFIDENCE:
        try:
            name = codecs.lookup(guess).name
        except LookupError:
            name = None
        if name == "utf-8-sig":
            name = "utf-8"
        if name in SUPPORTED_ENCODINGS:
            logger.debug(f"Encoding detected: {name} ({confidence:.2f})")
            return name

    logger.debug(f"Low confidence or unsupported encoding: {guess} ({confidence:.2f}), using {fallback}")
    return fallback


def decode_bytes(raw: bytes, encoding: str = "utf-8", fallback: str = "utf-8") -> str:
    """바이트 → 텍스트

    Args:
        raw: 파일 바이트
        encoding: 인코딩 이름 또는 'auto'
        fallback: auto 감지 실패 시 사용할 인코딩

    Raises:
        InputError: 지원하지 않는 인코딩 또는 디코딩 실패
    """
    name = normalize_encoding(encoding)
    if name == AUTO:
        name = detect_encoding(raw, fallback=normalize_encoding(fallback))

    try:
        return raw.decode(name)
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode as {name}: {e}")
        raise InputError(
            f"Cannot decode file as {name}",
            details=str(e)
        ) from e


def read_text(file_path: Union[str, Path], encoding: str = "utf-8", fallback: Optional[str] = None) -> str:
    """텍스트 파일 읽기

    Args:
        file_path: 파일 경로
        encoding: 인코딩 이름 또는 'auto'
        fallback: auto 감지 실패 시 사용할 인코딩 (기본 utf-8)

    Returns:
        디코딩된 텍스트 (줄바꿈 변환 없음)

    Raises:
        InputError: 파일 없음, 읽기 실패, 디코딩 실패
    """
    path = Path(file_path)
    if not path.is_file():
        raise InputError(f"File not found: {file_path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read file: {e}")
        raise InputError(f"Failed to read file: {file_path}", details=str(e)) from e

    text = decode_bytes(raw, encoding, fallback or "utf-8")
    logger.debug(f"Read {len(raw)} bytes from {path.name} ({encoding})")
    return text

"""예외 정의

모든 예외는 SplitterError 를 상속하며, CLI 는 exit_code 로 종료 코드를 결정한다.
"""

from typing import Optional


class SplitterError(Exception):
    """novel_splitter 예외의 최상위 클래스"""

    exit_code: int = 1
    default_hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.details = details
        self.hint = hint or self.default_hint
        super().__init__(message)


class InputError(SplitterError):
    """파일을 읽을 수 없거나 인코딩이 맞지 않음"""

    exit_code = 10
    default_hint = "Check the file path and try another --encoding (utf-8, gbk, gb2312, ascii, auto)"


class PatternError(SplitterError):
    """사용자 정의 정규식 컴파일 실패"""

    exit_code = 20
    default_hint = "Fix the custom rule; the default pattern is used meanwhile"


class MergeError(SplitterError):
    """챕터 병합 전제조건 위반"""

    exit_code = 30
    default_hint = "Select at least two distinct, valid chapter indices"


class PackagingError(SplitterError):
    """아카이브/EPUB 생성 실패"""

    exit_code = 40


class BatchError(SplitterError):
    """배치 처리 중단 (첫 번째 실패 파일)"""

    exit_code = 50
    default_hint = "Use --keep-going to skip failing files"

    def __init__(self, message: str, file_name: str, details: Optional[str] = None):
        self.file_name = file_name
        super().__init__(message, details=details)


class ConfigError(SplitterError):
    """설정 파일 파싱 실패 또는 잘못된 설정 값"""

    exit_code = 60
    default_hint = "Check config.yml (see config/config.yml for the expected keys and values)"

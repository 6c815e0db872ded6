"""설정 파일 로더 (YAML)

config.yml 을 읽어서 Python 객체로 변환.
설정 객체는 전역 상태가 아니라 Splitter/Exporter/BatchRunner 에 명시적으로 전달한다.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Union
from dataclasses import dataclass, field
from novel_splitter.stages.exporter import OutputFormat
from novel_splitter.stages.splitter import ScanMode
from novel_splitter.utils.errors import ConfigError
from novel_splitter.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yml"


@dataclass
class PathsConfig:
    """경로 설정"""
    output_folder: str = "data/output"
    logs: str = "data/logs"


@dataclass
class ProcessingConfig:
    """분할 옵션"""
    encoding: str = "utf-8"
    rule_type: str = "default"
    custom_rule: str = ""
    scan_mode: str = "lines"
    preamble_title: str = "preamble"
    output_format: str = "md"


@dataclass
class BatchConfig:
    """배치 처리 옵션"""
    stop_on_error: bool = True


@dataclass
class EPUBConfig:
    """EPUB 생성 옵션"""
    language: str = "zh-CN"
    creator: str = "小说章节分割工具生成"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    file_level: str = "DEBUG"
    console_level: str = "INFO"


@dataclass
class Config:
    """전체 설정"""
    paths: PathsConfig = field(default_factory=PathsConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    epub: EPUBConfig = field(default_factory=EPUBConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config() -> Config:
    """기본값으로 채운 Config 반환"""
    return Config()


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{key}' must be a mapping")
    return section


def _check_choice(section: str, key: str, value: str, choices) -> None:
    allowed = [choice.value for choice in choices]
    if value not in allowed:
        raise ConfigError(
            f"Invalid {section}.{key}: {value!r}",
            details=f"Expected one of: {', '.join(allowed)}"
        )


def config_from_dict(data: Dict[str, Any]) -> Config:
    """dict → Config (누락된 키는 기본값)

    Raises:
        ConfigError: 알 수 없는 키, 잘못된 섹션 타입, 허용되지 않는 값
    """
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        config = Config(
            paths=PathsConfig(**_section(data, "paths")),
            processing=ProcessingConfig(**_section(data, "processing")),
            batch=BatchConfig(**_section(data, "batch")),
            epub=EPUBConfig(**_section(data, "epub")),
            logging=LoggingConfig(**_section(data, "logging"))
        )
    except TypeError as e:
        raise ConfigError(f"Invalid config: {e}") from e

    _check_choice("processing", "scan_mode", config.processing.scan_mode, ScanMode)
    _check_choice("processing", "output_format", config.processing.output_format, OutputFormat)
    return config


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Config:
    """config.yml 로드

    Args:
        config_path: 설정 파일 경로

    Returns:
        Config 객체 (파일이 없으면 기본값)

    Raises:
        ConfigError: YAML 파싱 에러 또는 설정 구조/값 오류
    """
    path = Path(config_path)
    if not path.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return default_config()

    logger.debug(f"Loading config from: {config_path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse config: {e}")
        raise ConfigError(f"Cannot parse config file: {config_path}", details=str(e)) from e

    config = config_from_dict(data)
    logger.info(f"✅ Config loaded: rule={config.processing.rule_type}, encoding={config.processing.encoding}")
    return config

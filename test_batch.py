"""배치 처리 테스트

순차 처리, 진행 콜백, 실패 정책(중단 / 건너뛰기), 패턴 오류 대체 검증
"""

import pytest
from novel_splitter.config.loader import default_config
from novel_splitter.stages.batch import BatchRunner
from novel_splitter.stages.patterns import BUILTIN_PATTERNS, PatternKind
from novel_splitter.utils.errors import BatchError


def _write(folder, name, text, encoding="utf-8"):
    path = folder / name
    path.write_bytes(text.encode(encoding))
    return path


@pytest.fixture
def novels(tmp_path):
    return [
        _write(tmp_path, "甲.txt", "前言\n第一章 开端\n内容A\n第二章 发展\n内容B\n"),
        _write(tmp_path, "乙.txt", "第一章 只有一章\n内容\n"),
    ]


def test_batch_processes_files_in_order(novels):
    progress = []
    report = BatchRunner(default_config()).run(novels, on_progress=lambda done, total: progress.append((done, total)))

    assert [r.file_name for r in report.results] == ["甲.txt", "乙.txt"]
    assert [len(r.chapters) for r in report.results] == [3, 1]
    assert report.failed == []
    assert report.total == 2
    assert progress == [(1, 2), (2, 2)]
    assert report.results[1].word_count == sum(ch.word_count for ch in report.results[1].chapters)

    print("✅ Batch test passed!")


def test_batch_stops_on_first_error(novels, tmp_path):
    """기본 정책: 첫 실패에서 BatchError"""
    bad = _write(tmp_path, "丙.txt", "第一章 坏\n", encoding="gbk")
    progress = []

    with pytest.raises(BatchError) as exc_info:
        BatchRunner(default_config()).run(
            [novels[0], bad, novels[1]],
            on_progress=lambda done, total: progress.append(done)
        )

    assert exc_info.value.file_name == "丙.txt"
    assert exc_info.value.exit_code == 50
    assert progress == [1]


def test_batch_keep_going_records_failures(novels, tmp_path):
    config = default_config()
    config.batch.stop_on_error = False
    missing = tmp_path / "missing.txt"

    report = BatchRunner(config).run([novels[0], missing, novels[1]])

    assert [r.file_name for r in report.results] == ["甲.txt", "乙.txt"]
    assert report.failed == ["missing.txt"]
    assert report.total == 3


def test_batch_invalid_custom_rule_uses_default(novels):
    config = default_config()
    config.processing.rule_type = "custom"
    config.processing.custom_rule = "(第"

    runner = BatchRunner(config)
    report = runner.run(novels)

    assert runner.pattern.pattern == BUILTIN_PATTERNS[PatternKind.DEFAULT]
    assert report.pattern_error is runner.pattern_error
    assert report.pattern_error is not None
    assert len(report.results[0].chapters) == 3


def test_empty_batch():
    report = BatchRunner(default_config()).run([])

    assert report.total == 0

"""CLI 인터페이스

Typer 기반 명령줄 인터페이스, Rich 기반 출력
"""

import typer
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
from novel_splitter.config.loader import Config, load_config, DEFAULT_CONFIG_PATH
from novel_splitter.stages.batch import BatchRunner
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.epub_builder import build_epub
from novel_splitter.stages.epub_inspector import inspect_epub
from novel_splitter.stages.exporter import (
    OutputFile, OutputFormat, export_archive, export_chapter, export_combined
)
from novel_splitter.stages.merger import merge_chapters
from novel_splitter.stages.patterns import BUILTIN_PATTERNS, PATTERN_DESCRIPTIONS, PatternKind, resolve_pattern
from novel_splitter.stages.splitter import ScanMode, Splitter
from novel_splitter.utils.errors import MergeError, SplitterError
from novel_splitter.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()
app = typer.Typer(help="Novel Splitter - 소설 챕터 분할 / EPUB 생성 도구")


@app.callback()
def main(
    ctx: typer.Context,
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="설정 파일 경로")
):
    """설정 로드 + 로깅 초기화"""
    try:
        config = load_config(config_path)
    except SplitterError as e:
        _fail(e)
    setup_logging(config.logging.file_level, config.logging.console_level, config.paths.logs)
    ctx.obj = config


def _fail(error: SplitterError) -> None:
    """오류 출력 후 종료"""
    message = f"[bold red]{escape(error.message)}[/bold red]"
    if error.details:
        message += f"\n{escape(error.details)}"
    if error.hint:
        message += f"\n[yellow]💡 {escape(error.hint)}[/yellow]"
    console.print(Panel.fit(message, title="❌ Error", style="red"))
    raise typer.Exit(code=error.exit_code)


def _apply_overrides(
    config: Config,
    encoding: Optional[str] = None,
    rule: Optional[PatternKind] = None,
    custom_rule: Optional[str] = None,
    mode: Optional[ScanMode] = None
) -> None:
    processing = config.processing
    if encoding:
        processing.encoding = encoding
    if custom_rule:
        processing.custom_rule = custom_rule
        processing.rule_type = PatternKind.CUSTOM.value
    if rule:
        processing.rule_type = rule.value
    if mode:
        processing.scan_mode = mode.value


def _split(config: Config, file: Path) -> List[Chapter]:
    """설정대로 파일 분할 (패턴 오류는 경고 후 기본 패턴 사용)"""
    processing = config.processing
    pattern, pattern_error = resolve_pattern(processing.rule_type, processing.custom_rule)
    if pattern_error:
        console.print(f"[yellow]⚠️  {escape(pattern_error.message)} → 기본 패턴 사용[/yellow]")

    splitter = Splitter(processing.preamble_title, processing.scan_mode)
    return splitter.split_file(file, pattern, processing.encoding)


def _write(output: OutputFile, folder: str) -> Path:
    """산출물을 출력 폴더에 저장"""
    out_dir = Path(folder)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / output.name
    path.write_bytes(output.data)
    logger.info(f"Saved {path} ({output.media_type}, {len(output.data)} bytes)")
    return path


def _chapter_table(chapters: List[Chapter], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("챕터", style="cyan")
    table.add_column("글자 수", style="green", justify="right")
    table.add_column("줄 수", style="yellow", justify="right")
    for i, chapter in enumerate(chapters, start=1):
        table.add_row(str(i), escape(chapter.title), str(chapter.word_count), str(chapter.line_count))
    return table


def _parse_selection(select: str) -> List[int]:
    """'2,3' (1-based) → [1, 2]"""
    try:
        return [int(part) - 1 for part in select.split(",") if part.strip()]
    except ValueError:
        raise MergeError(f"Invalid selection: {select}", hint="Use comma separated numbers, e.g. 2,3") from None


ENCODING_OPTION = typer.Option(None, "--encoding", "-e", help="utf-8 / gbk / gb2312 / ascii / auto")
RULE_OPTION = typer.Option(None, "--rule", "-r", help="default / number_only / chinese_only / custom")
CUSTOM_RULE_OPTION = typer.Option(None, "--custom-rule", help="사용자 정의 정규식 (그룹1=챕터 표시, 그룹2=챕터 이름)")
MODE_OPTION = typer.Option(None, "--mode", "-m", help="lines / search")


@app.command()
def split(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="소설 TXT 파일"),
    encoding: Optional[str] = ENCODING_OPTION,
    rule: Optional[PatternKind] = RULE_OPTION,
    custom_rule: Optional[str] = CUSTOM_RULE_OPTION,
    mode: Optional[ScanMode] = MODE_OPTION
):
    """챕터 분할 결과 확인"""
    config = ctx.obj
    _apply_overrides(config, encoding, rule, custom_rule, mode)
    try:
        chapters = _split(config, file)
    except SplitterError as e:
        _fail(e)

    console.print(_chapter_table(chapters, f"{file.name} 분할 결과"))
    total = sum(ch.word_count for ch in chapters)
    console.print(f"✅ {len(chapters)}개 챕터, 총 {total:,}자")


@app.command()
def export(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="소설 TXT 파일"),
    output_format: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="md / txt"),
    combined: bool = typer.Option(False, "--combined", help="전체 합본 문서 하나로"),
    archive: bool = typer.Option(False, "--archive", help="챕터별 파일을 ZIP 으로"),
    chapter: Optional[int] = typer.Option(None, "--chapter", help="이 챕터 하나만 (1-based)"),
    encoding: Optional[str] = ENCODING_OPTION,
    rule: Optional[PatternKind] = RULE_OPTION,
    custom_rule: Optional[str] = CUSTOM_RULE_OPTION,
    mode: Optional[ScanMode] = MODE_OPTION
):
    """챕터 내보내기 (기본: 챕터별 개별 파일)"""
    config = ctx.obj
    _apply_overrides(config, encoding, rule, custom_rule, mode)
    fmt = OutputFormat(output_format or config.processing.output_format)
    folder = config.paths.output_folder

    try:
        chapters = _split(config, file)
        if chapter is not None:
            if not 1 <= chapter <= len(chapters):
                console.print(f"[red]❌ 챕터 번호 범위 밖: {chapter} (1~{len(chapters)})[/red]")
                raise typer.Exit(code=2)
            outputs = [export_chapter(chapters[chapter - 1], fmt)]
        elif combined:
            outputs = [export_combined(chapters, fmt)]
        elif archive:
            outputs = [export_archive(chapters, fmt)]
        else:
            outputs = [export_chapter(ch, fmt) for ch in chapters]
    except SplitterError as e:
        _fail(e)

    for output in outputs:
        _write(output, folder)
    console.print(f"\n✅ {len(outputs)}개 파일 저장: [green]{folder}[/green]")


@app.command()
def epub(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="소설 TXT 파일"),
    encoding: Optional[str] = ENCODING_OPTION,
    rule: Optional[PatternKind] = RULE_OPTION,
    custom_rule: Optional[str] = CUSTOM_RULE_OPTION,
    mode: Optional[ScanMode] = MODE_OPTION
):
    """EPUB 생성"""
    console.print(Panel.fit("📖 EPUB 생성", style="bold blue"))
    config = ctx.obj
    _apply_overrides(config, encoding, rule, custom_rule, mode)

    try:
        chapters = _split(config, file)
        output = build_epub(file.name, chapters, config.epub)
    except SplitterError as e:
        _fail(e)

    path = _write(output, config.paths.output_folder)
    console.print(f"\n✅ EPUB 생성 완료: [green]{path}[/green] ({len(chapters)}개 챕터)")


@app.command()
def merge(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="소설 TXT 파일"),
    select: str = typer.Option(..., "--select", "-s", help="병합할 챕터 번호 (1-based, 예: 2,3)"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="병합 챕터 제목"),
    output_format: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="md / txt"),
    encoding: Optional[str] = ENCODING_OPTION,
    rule: Optional[PatternKind] = RULE_OPTION,
    custom_rule: Optional[str] = CUSTOM_RULE_OPTION,
    mode: Optional[ScanMode] = MODE_OPTION
):
    """챕터 병합 후 합본 문서 저장"""
    config = ctx.obj
    _apply_overrides(config, encoding, rule, custom_rule, mode)
    fmt = OutputFormat(output_format or config.processing.output_format)

    try:
        chapters = _split(config, file)
        merged = merge_chapters(chapters, _parse_selection(select), title)
        output = export_combined(merged, fmt)
    except SplitterError as e:
        _fail(e)

    console.print(_chapter_table(merged, "병합 결과"))
    path = _write(output, config.paths.output_folder)
    console.print(f"\n✅ 병합 완료, 현재 {len(merged)}개 챕터: [green]{path}[/green]")


@app.command()
def batch(
    ctx: typer.Context,
    files: List[Path] = typer.Argument(..., help="소설 TXT 파일들"),
    keep_going: bool = typer.Option(False, "--keep-going", help="실패한 파일은 건너뛰기"),
    encoding: Optional[str] = ENCODING_OPTION,
    rule: Optional[PatternKind] = RULE_OPTION,
    custom_rule: Optional[str] = CUSTOM_RULE_OPTION,
    mode: Optional[ScanMode] = MODE_OPTION
):
    """여러 파일 순차 분할"""
    console.print(Panel.fit("🚀 배치 분할", style="bold magenta"))
    config = ctx.obj
    _apply_overrides(config, encoding, rule, custom_rule, mode)
    if keep_going:
        config.batch.stop_on_error = False

    runner = BatchRunner(config)
    if runner.pattern_error:
        console.print(f"[yellow]⚠️  {escape(runner.pattern_error.message)} → 기본 패턴 사용[/yellow]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console
    ) as progress:
        task = progress.add_task("[cyan]분할 중...", total=len(files))
        try:
            report = runner.run(files, on_progress=lambda done, total: progress.update(task, completed=done))
        except SplitterError as e:
            progress.stop()
            _fail(e)

    table = Table(title="배치 분할 결과")
    table.add_column("파일", style="cyan")
    table.add_column("챕터", style="green", justify="right")
    table.add_column("글자 수", style="yellow", justify="right")
    for result in report.results:
        table.add_row(escape(result.file_name), str(len(result.chapters)), f"{result.word_count:,}")
    for name in report.failed:
        table.add_row(escape(name), "[red]실패[/red]", "-")
    console.print(table)
    console.print(f"✅ {len(report.results)}/{report.total} 파일 처리 완료")


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="EPUB 파일")
):
    """EPUB 구조 확인"""
    try:
        summary = inspect_epub(file)
    except SplitterError as e:
        _fail(e)

    table = Table(title=summary.title or file.name)
    table.add_column("항목", style="cyan")
    table.add_column("값", style="green")
    table.add_row("식별자", summary.identifier)
    table.add_row("언어", summary.language)
    table.add_row("챕터 수", str(len(summary.spine_ids)))
    console.print(table)

    for i, title in enumerate(summary.chapter_titles, start=1):
        console.print(f"  {i:>3}. {escape(title)}")


@app.command()
def patterns():
    """기본 제공 챕터 패턴 목록"""
    table = Table(title="챕터 패턴")
    table.add_column("rule", style="cyan")
    table.add_column("설명", style="green")
    table.add_column("정규식", style="yellow")
    for kind in PatternKind:
        table.add_row(kind.value, PATTERN_DESCRIPTIONS[kind], BUILTIN_PATTERNS.get(kind, "--custom-rule"))
    console.print(table)


if __name__ == "__main__":
    app()

"""
LLM Test Generator CLI Interface

소스 트리의 최상위 함수마다 LLM 으로 테스트 케이스를 생성하는 도구의 명령줄 인터페이스
"""
import os
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table
from dotenv import load_dotenv

from llm_testgen.core.walker import iter_source_files
from llm_testgen.core.test_writer import read_existing_tests
from llm_testgen.languages import PROFILES, SourceParseError
from llm_testgen.main import TestGenerator, TestGenerationResult
from llm_testgen.utils.config import Config
from llm_testgen.utils.logger import setup_logger

# Rich console for pretty output
console = Console()

# 환경 변수 로드
load_dotenv()


def _mask(value: str) -> str:
    """API 키는 일부만 표시"""
    return value[:8] + "..." + value[-4:] if len(value) > 12 else "***"


def _apply_overrides(
    config: Config,
    languages: Tuple[str, ...],
    model: Optional[str],
    max_lines: Optional[int]
) -> None:
    """명령줄 옵션으로 설정 덮어쓰기"""
    if languages:
        config.app.languages = list(languages)
    if model:
        config.openai.model = model
        if config.azure_openai.enabled:
            config.azure_openai.deployment_name = model
    if max_lines is not None:
        config.app.max_function_lines = max_lines


def _report_config_errors(errors) -> None:
    for error in errors:
        console.print(f"[red]✗[/red] {error}")


def _print_summary(result: TestGenerationResult, dry_run: bool) -> None:
    table = Table(title="Dry run" if dry_run else "Test generation summary")
    table.add_column("항목", style="cyan")
    table.add_column("값", style="yellow")

    table.add_row("Files processed", str(len(result.files_processed)))
    if dry_run:
        table.add_row("Tests to generate", str(len(result.pending_tests)))
    else:
        table.add_row("Tests generated", str(len(result.generated_tests)))
    table.add_row("Existing tests skipped", str(len(result.skipped_tests)))
    table.add_row("Errors", str(len(result.errors)))
    table.add_row("Elapsed", f"{result.execution_time or 0:.2f}s")
    console.print(table)

    if dry_run:
        for label in result.pending_tests:
            console.print(f"  • {label}")
    for output_file in result.output_files:
        console.print(f"[green]✓[/green] {output_file}")


@click.group()
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default=None,
    help='Set the logging level (default: LOG_LEVEL or INFO)'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False),
    help='Also write logs to this file'
)
@click.option(
    '--config',
    type=click.Path(exists=True, dir_okay=False),
    help='Path to JSON configuration file'
)
@click.pass_context
def cli(ctx, log_level, log_file, config):
    """LLM Test Generator - 함수별 테스트 코드 자동 생성 도구"""
    ctx.ensure_object(dict)

    # 로깅 설정 (설정 로드 중의 메시지도 출력되도록 먼저)
    initial_level = log_level or os.getenv('LOG_LEVEL', 'INFO')
    setup_logger(initial_level, log_file=log_file)

    ctx.obj['config'] = Config(config_file=config) if config else Config()

    # 설정 파일의 log_level 은 로드 후에 반영
    file_level = ctx.obj['config'].app.log_level
    if not log_level and file_level.upper() != initial_level.upper():
        setup_logger(file_level, log_file=log_file)


@cli.command()
@click.argument('path', default='.', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--language', '-l', 'languages',
    multiple=True,
    type=click.Choice(sorted(PROFILES), case_sensitive=False),
    help='Language(s) to scan (default: TESTGEN_LANGUAGES or go)'
)
@click.option('--model', help='Chat model (or Azure deployment) to use')
@click.option('--max-lines', type=int, help='Skip functions longer than this many lines')
@click.option('--dry-run', is_flag=True, help='List the functions that would be sent, without calling the API')
@click.pass_context
def generate(ctx, path, languages, model, max_lines, dry_run):
    """PATH 아래 소스 파일의 함수마다 테스트 케이스 생성"""
    config: Config = ctx.obj['config']
    _apply_overrides(config, languages, model, max_lines)

    errors = config.validate(require_credentials=not dry_run)
    if errors:
        _report_config_errors(errors)
        ctx.exit(1)

    generator = TestGenerator(config)
    result = generator.generate(path, dry_run=dry_run)
    _print_summary(result, dry_run)

    if not result.success:
        ctx.exit(1)


@cli.command('list-functions')
@click.argument('path', default='.', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--language', '-l', 'languages',
    multiple=True,
    type=click.Choice(sorted(PROFILES), case_sensitive=False),
    help='Language(s) to scan (default: TESTGEN_LANGUAGES or go)'
)
@click.pass_context
def list_functions(ctx, path, languages):
    """API 호출 없이 추출된 함수 목록 표시"""
    config: Config = ctx.obj['config']
    _apply_overrides(config, languages, None, None)

    errors = config.validate(require_credentials=False)
    if errors:
        _report_config_errors(errors)
        ctx.exit(1)

    generator = TestGenerator(config)

    table = Table(title=f"Functions under {path}")
    table.add_column("File", style="cyan")
    table.add_column("Package", style="magenta")
    table.add_column("Function", style="green")
    table.add_column("Lines", justify="right")
    table.add_column("Test exists", justify="center")

    failed = False
    for source_path, profile in iter_source_files(path, generator.profiles):
        try:
            source_file = generator.load_source_file(source_path, profile)
        except (SourceParseError, OSError, UnicodeDecodeError) as e:
            console.print(f"[red]✗[/red] {e}")
            failed = True
            continue

        existing = read_existing_tests(profile.test_file_path(source_path))
        display_path = source_path.relative_to(path) if path.is_dir() else source_path
        for function in source_file.functions:
            exists = profile.test_exists(function.name, existing)
            table.add_row(
                str(display_path),
                source_file.package_name,
                function.name,
                str(function.line_count),
                "[green]✓[/green]" if exists else "-"
            )

    console.print(table)
    if failed:
        ctx.exit(1)


@cli.command('check-config')
@click.pass_context
def check_config(ctx):
    """환경 설정 확인"""
    config: Config = ctx.obj['config']
    console.print("\n[bold]환경 설정 확인[/bold]")

    variables = [
        'OPENAI_API_KEY',
        'GPT_MODEL',
        'OPENAI_BASE_URL',
        'AZURE_OPENAI_ENDPOINT',
        'AZURE_OPENAI_API_KEY',
        'AZURE_OPENAI_DEPLOYMENT_NAME',
        'AZURE_OPENAI_API_VERSION',
        'TESTGEN_LANGUAGES',
        'MAX_FUNCTION_LINES',
        'REQUEST_TIMEOUT',
        'TEMPERATURE',
        'LOG_LEVEL',
    ]

    table = Table(title="환경 변수 상태")
    table.add_column("변수명", style="cyan")
    table.add_column("상태", style="green")
    table.add_column("값", style="yellow")

    for var in variables:
        value = os.getenv(var)
        if value:
            display_value = _mask(value) if 'KEY' in var else value
            status = "[green]✓[/green]"
        else:
            display_value = "미설정"
            status = "[dim]-[/dim]"
        table.add_row(var, status, display_value)

    console.print(table)
    console.print(f"Model: [bold]{config.model_name}[/bold]")

    errors = config.validate()
    if errors:
        _report_config_errors(errors)
        console.print("   .env 파일을 확인하거나 환경 변수를 설정해주세요.")
        ctx.exit(1)

    console.print("\n[green]✓[/green] 모든 설정이 올바릅니다.")


def main():
    """메인 엔트리포인트"""
    cli()


if __name__ == "__main__":
    main()

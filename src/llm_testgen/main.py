"""
Main Integration Logic - 전체 워크플로우 통합

소스 탐색 → 함수 추출 → LLM 요청 → 응답 정리 → 테스트 파일 기록의 파이프라인을
파일 단위로 실행합니다.
"""
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from llm_testgen.core.llm_client import CompletionClient, CompletionError
from llm_testgen.core.source_models import SourceFile, TestCase
from llm_testgen.core.test_writer import read_existing_tests, write_test_file
from llm_testgen.core.walker import iter_source_files
from llm_testgen.languages import LanguageProfile, SourceParseError, get_profiles
from llm_testgen.utils.config import Config
from llm_testgen.utils.logger import get_logger, LogContext

logger = get_logger(__name__)


class TestGenerationResult:
    """테스트 생성 결과"""
    __test__ = False

    def __init__(self):
        self.files_processed: List[str] = []
        self.generated_tests: List[str] = []
        self.skipped_tests: List[str] = []
        self.pending_tests: List[str] = []
        self.output_files: List[str] = []
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.execution_time: Optional[float] = None

    def add_error(self, error: str):
        """오류 추가"""
        self.errors.append(error)
        logger.error(error)

    def add_warning(self, warning: str):
        """경고 추가"""
        self.warnings.append(warning)
        logger.warning(warning)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def to_summary_dict(self) -> Dict[str, Any]:
        """요약 딕셔너리 변환"""
        return {
            "total_files_processed": len(self.files_processed),
            "total_tests_generated": len(self.generated_tests),
            "total_tests_skipped": len(self.skipped_tests),
            "total_tests_pending": len(self.pending_tests),
            "output_files": self.output_files,
            "execution_time_seconds": self.execution_time,
            "errors": self.errors,
            "warnings": self.warnings,
            "success": self.success
        }


class TestGenerator:
    """LLM 테스트 생성기 메인 클래스"""
    __test__ = False

    def __init__(
        self,
        config: Config,
        client: Optional[CompletionClient] = None,
        profiles: Optional[Sequence[LanguageProfile]] = None
    ):
        """
        초기화

        Args:
            config: 애플리케이션 설정
            client: LLM 클라이언트 (기본값: 첫 요청 시 설정으로 생성)
            profiles: 사용할 언어 프로파일 (기본값: config.app.languages)
        """
        self.config = config
        self.profiles = list(profiles) if profiles else get_profiles(config.app.languages)
        self._client = client

    @property
    def client(self) -> CompletionClient:
        # dry-run 에서는 API 키 없이도 동작하도록 지연 생성
        if self._client is None:
            self._client = CompletionClient(self.config)
        return self._client

    def load_source_file(self, path: Path, profile: LanguageProfile) -> SourceFile:
        """
        소스 파일을 읽어 테스트 대상 함수 목록을 구성

        entry point 함수와 max_function_lines 를 넘는 함수는 제외합니다.

        Raises:
            SourceParseError: 파싱 실패
            OSError: 읽기 실패
        """
        source = path.read_text(encoding="utf-8")
        source_file = SourceFile(
            path=str(path),
            language=profile.name,
            package_name=profile.package_name(path, source)
        )

        max_lines = self.config.app.max_function_lines
        for function in profile.extract_functions(path, source):
            if profile.is_entry_point(function.name):
                logger.info(f"Skipping {function.name} function")
                source_file.skipped_functions.append(function.name)
                continue
            if function.line_count > max_lines:
                logger.warning(
                    f"Function {function.name} is longer than {max_lines} lines. "
                    "It is recommended to make it shorter for better software engineering practices."
                )
                source_file.skipped_functions.append(function.name)
                continue
            source_file.functions.append(function)

        return source_file

    def generate(self, target_path: Union[str, Path] = ".", dry_run: bool = False) -> TestGenerationResult:
        """
        target_path 아래 모든 대상 파일에 대해 테스트 생성

        Args:
            target_path: 탐색할 디렉터리 또는 파일
            dry_run: True 면 LLM 요청과 파일 기록 없이 대상 함수만 수집

        Returns:
            테스트 생성 결과
        """
        start_time = datetime.now()
        result = TestGenerationResult()

        with LogContext(f"Generating test cases under {target_path}", logger):
            try:
                for path, profile in iter_source_files(target_path, self.profiles):
                    self.generate_for_file(path, profile, result, dry_run=dry_run)
            except FileNotFoundError as e:
                result.add_error(str(e))
            finally:
                result.execution_time = (datetime.now() - start_time).total_seconds()

        return result

    def generate_for_file(
        self,
        path: Path,
        profile: LanguageProfile,
        result: TestGenerationResult,
        dry_run: bool = False
    ) -> Optional[Path]:
        """파일 하나에 대한 테스트 생성. 파일 단위 오류는 기록 후 건너뜀"""
        logger.info(f"Generating test cases for {path}")

        try:
            source_file = self.load_source_file(path, profile)
        except SourceParseError as e:
            result.add_error(f"Error parsing file: {e}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Error reading file {path}: {e}")
            return None

        result.files_processed.append(str(path))

        test_file = profile.test_file_path(path)
        try:
            existing_content = read_existing_tests(test_file)
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Error reading test file {test_file}: {e}")
            return None

        test_cases: List[TestCase] = []
        for function in source_file.functions:
            label = f"{path}::{function.name}"

            if profile.test_exists(function.name, existing_content):
                logger.info(f"Skipping existing test case for function {function.name}")
                result.skipped_tests.append(label)
                continue

            if dry_run:
                result.pending_tests.append(label)
                continue

            try:
                test_case = self.client.generate_test_case(source_file.package_name, function, profile)
            except CompletionError as e:
                result.add_error(f"Error generating test case for function {function.name}: {e}")
                continue

            logger.info(f"Generated test case for function {function.name}")
            logger.debug(f"Test case code:\n{test_case.code}")
            logger.debug(f"Test case import content: {test_case.imports}")
            test_cases.append(test_case)
            result.generated_tests.append(label)

        if dry_run:
            return None

        try:
            written = write_test_file(path, source_file.package_name, test_cases, profile)
        except OSError as e:
            result.add_error(f"Error creating test file: {e}")
            return None

        if written:
            result.output_files.append(str(written))
        return written

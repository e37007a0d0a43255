"""
Language Profile Base Module

언어별 규칙(대상 파일 선별, 함수 추출, 테스트 파일 이름, 응답 정리, 테스트 파일 렌더링)을
하나로 묶는 프로파일 인터페이스입니다.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from llm_testgen.core.source_models import SourceFunction


class SourceParseError(ValueError):
    """소스 파일을 파싱할 수 없을 때 발생"""

    def __init__(self, path: str, message: str, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = f"{path}:{line}" if line else path
        super().__init__(f"{location}: {message}")


class LanguageProfile(ABC):
    """언어 프로파일 기본 클래스"""

    name: str = ""
    extensions: Tuple[str, ...] = ()
    fence_languages: Tuple[str, ...] = ()
    comment_prefix: str = "//"
    block_separator: str = "\n\n"
    prompt_template: str = ""
    entry_points: Tuple[str, ...] = ("main",)

    def is_source_file(self, path: Path) -> bool:
        """테스트 생성 대상 소스 파일인지 확인"""
        return path.suffix in self.extensions and not self.is_test_file(path)

    @abstractmethod
    def is_test_file(self, path: Path) -> bool:
        """테스트 파일인지 확인"""

    @abstractmethod
    def test_file_path(self, source_path: Path) -> Path:
        """소스 파일에 대응하는 테스트 파일 경로"""

    @abstractmethod
    def package_name(self, source_path: Path, source: str) -> str:
        """프롬프트에 넣을 패키지(모듈) 이름"""

    @abstractmethod
    def extract_functions(self, source_path: Path, source: str) -> List[SourceFunction]:
        """최상위 함수 선언 추출 (메서드 제외, entry point 포함)"""

    @abstractmethod
    def test_name(self, function_name: str) -> str:
        """함수 이름에 대응하는 테스트 함수 이름"""

    @abstractmethod
    def test_exists(self, function_name: str, existing_content: str) -> bool:
        """기존 테스트 파일에 해당 함수의 테스트가 이미 있는지 확인"""

    @abstractmethod
    def split_imports(self, code: str) -> Tuple[str, Optional[List[str]]]:
        """정리된 응답 코드에서 import 선언 분리"""

    @abstractmethod
    def render_header(self, package_name: str, imports: List[str]) -> str:
        """새 테스트 파일의 머리말(package/import) 생성"""

    @abstractmethod
    def merge_imports(self, existing_content: str, imports: List[str]) -> str:
        """기존 테스트 파일 내용에 새 import를 병합"""

    def is_entry_point(self, function_name: str) -> bool:
        return function_name in self.entry_points

    @staticmethod
    def slice_lines(lines: List[str], start_line: int, end_line: int) -> str:
        """1부터 시작하는 포함 범위의 줄을 그대로 잘라 반환"""
        return "\n".join(lines[start_line - 1:end_line])

"""
Python Language Profile

표준 ast 모듈로 모듈 최상위 함수를 찾고, pytest 규칙(test_<module>.py)으로 테스트 파일을 만듭니다.
"""
import ast
import re
from pathlib import Path
from typing import List, Optional, Tuple

from llm_testgen.core.response_sanitizer import PYTHON_IMPORT_PATTERN, split_python_imports
from llm_testgen.core.source_models import SourceFunction
from llm_testgen.languages.base import LanguageProfile, SourceParseError
from llm_testgen.utils.logger import get_logger

logger = get_logger(__name__)


class PythonProfile(LanguageProfile):
    """Python 언어 프로파일 (pytest)"""

    name = "python"
    extensions = (".py",)
    fence_languages = ("python", "py")
    comment_prefix = "#"
    block_separator = "\n\n\n"
    prompt_template = "python_test_generation"
    entry_points = ("main",)

    def is_test_file(self, path: Path) -> bool:
        return (
            path.name.startswith("test_")
            or path.name.endswith("_test.py")
            or path.name == "conftest.py"
        )

    def test_file_path(self, source_path: Path) -> Path:
        return source_path.parent / f"test_{source_path.stem}.py"

    def package_name(self, source_path: Path, source: str) -> str:
        """__init__.py 가 있는 상위 디렉터리를 따라 올라가며 모듈의 import 경로를 구성"""
        parts = [] if source_path.stem == "__init__" else [source_path.stem]
        directory = source_path.resolve().parent
        while (directory / "__init__.py").exists():
            parts.insert(0, directory.name)
            if directory.parent == directory:
                break
            directory = directory.parent
        return ".".join(parts) or source_path.stem

    def extract_functions(self, source_path: Path, source: str) -> List[SourceFunction]:
        try:
            tree = ast.parse(source, filename=str(source_path))
        except SyntaxError as e:
            raise SourceParseError(str(source_path), e.msg, e.lineno) from e

        lines = source.split("\n")
        functions = []
        for node in tree.body:
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            start_line = min([node.lineno] + [d.lineno for d in node.decorator_list])
            functions.append(SourceFunction(
                name=node.name,
                code=self.slice_lines(lines, start_line, node.end_lineno),
                start_line=start_line,
                end_line=node.end_lineno
            ))
        logger.debug(f"{source_path}: found {len(functions)} top-level functions")
        return functions

    def test_name(self, function_name: str) -> str:
        return f"test_{function_name}"

    def test_exists(self, function_name: str, existing_content: str) -> bool:
        pattern = rf"^\s*(?:async\s+)?def\s+{re.escape(self.test_name(function_name))}\s*\("
        return re.search(pattern, existing_content, re.MULTILINE) is not None

    def split_imports(self, code: str) -> Tuple[str, Optional[List[str]]]:
        return split_python_imports(code)

    def render_header(self, package_name: str, imports: List[str]) -> str:
        statements = ["import pytest"] + [imp for imp in imports if imp != "import pytest"]
        return "\n".join(statements) + "\n\n\n"

    def merge_imports(self, existing_content: str, imports: List[str]) -> str:
        present = {line.strip() for line in existing_content.split("\n")}
        missing = [imp for imp in imports if imp not in present]
        if not missing:
            return existing_content

        statements = "\n".join(missing)
        matches = list(PYTHON_IMPORT_PATTERN.finditer(existing_content))
        if not matches:
            return f"{statements}\n\n{existing_content}"
        end = matches[-1].end()
        return f"{existing_content[:end]}\n{statements}{existing_content[end:]}"

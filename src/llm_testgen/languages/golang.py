"""
Go Language Profile

Go 소스에서 최상위 함수 선언을 찾아내는 간단한 스캐너와 Go 테스트 파일 규칙.

스캐너는 주석, 문자열, rune, raw string 을 건너뛰면서 괄호 깊이만 추적합니다.
타입 검사나 완전한 구문 분석은 하지 않습니다.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple

from llm_testgen.core.response_sanitizer import split_go_imports
from llm_testgen.core.source_models import SourceFunction
from llm_testgen.languages.base import LanguageProfile, SourceParseError
from llm_testgen.utils.logger import get_logger

logger = get_logger(__name__)

OPENERS = "([{"
CLOSERS = ")]}"
TYPE_LITERAL_KEYWORDS = ("struct", "interface")

# [alias] "path" ; alias 는 식별자, '_' 또는 '.'
GO_IMPORT_SPEC_PATTERN = re.compile(r'^(?:(\w+|\.)\s+)?("[^"\n]*"|`[^`\n]*`)')
GO_IMPORT_KEYWORD_PATTERN = re.compile(r'^import\b\s*(.*)$')
GO_TOP_LEVEL_DECLARATION = re.compile(r'^(func|type|var|const)\b')


def import_path(spec: str) -> str:
    """import spec 에서 따옴표를 포함한 경로만 반환"""
    match = GO_IMPORT_SPEC_PATTERN.match(spec.strip())
    return match.group(2) if match else spec.strip()


def existing_import_paths(content: str) -> Set[str]:
    """
    Go 파일의 import 선언에 이미 있는 경로 목록

    주석, 별칭, dot/blank import 가 섞인 블록도 줄 단위로 읽습니다.
    첫 최상위 선언 이후는 보지 않습니다.
    """
    paths: Set[str] = set()
    in_block = False

    for raw_line in content.splitlines():
        line = raw_line.split("//", 1)[0].strip()

        if in_block:
            if line.startswith(")"):
                in_block = False
                continue
            match = GO_IMPORT_SPEC_PATTERN.match(line)
            if match:
                paths.add(match.group(2))
            continue

        if GO_TOP_LEVEL_DECLARATION.match(raw_line):
            break

        keyword = GO_IMPORT_KEYWORD_PATTERN.match(line)
        if not keyword:
            continue
        rest = keyword.group(1).strip()
        if rest.startswith("("):
            rest = rest[1:].strip()
            in_block = not rest.endswith(")")
            rest = rest.rstrip(")").strip()
        match = GO_IMPORT_SPEC_PATTERN.match(rest)
        if match:
            paths.add(match.group(2))

    return paths


def _new_imports(imports: List[str], present: Set[str]) -> List[str]:
    """present 에 없는 경로의 import 만 순서대로 (같은 경로는 한 번만)"""
    seen = set(present)
    result = []
    for imp in imports:
        path = import_path(imp)
        if path not in seen:
            seen.add(path)
            result.append(imp)
    return result


@dataclass
class Token:
    kind: str  # 'ident', 'punct', 'string', 'newline'
    value: str
    line: int


def tokenize(source: str, path: str = "<source>") -> List[Token]:
    """
    Go 소스를 함수 경계 탐색에 필요한 만큼만 토큰화합니다.

    Raises:
        SourceParseError: 문자열/주석이 닫히지 않은 경우
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    n = len(source)

    while i < n:
        c = source[i]

        if c == "\n":
            tokens.append(Token("newline", c, line))
            line += 1
            i += 1
        elif c in " \t\r\f\v\ufeff":
            i += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end < 0 else end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end < 0:
                raise SourceParseError(path, "comment not terminated", line)
            newlines = source.count("\n", i, end)
            if newlines:
                # 줄바꿈을 포함한 블록 주석은 줄바꿈처럼 동작
                tokens.append(Token("newline", "\n", line))
                line += newlines
            i = end + 2
        elif c in "\"'":
            start_line = line
            j = i + 1
            while j < n and source[j] != c:
                if source[j] == "\\":
                    j += 1
                elif source[j] == "\n":
                    break
                j += 1
            if j >= n or source[j] != c:
                kind = "string literal" if c == '"' else "rune literal"
                raise SourceParseError(path, f"{kind} not terminated", start_line)
            tokens.append(Token("string", source[i:j + 1], start_line))
            i = j + 1
        elif c == "`":
            end = source.find("`", i + 1)
            if end < 0:
                raise SourceParseError(path, "raw string literal not terminated", line)
            tokens.append(Token("string", source[i:end + 1], line))
            line += source.count("\n", i, end)
            i = end + 1
        elif c.isalnum() or c == "_":
            j = i + 1
            while j < n and (source[j].isalnum() or source[j] == "_"):
                j += 1
            tokens.append(Token("ident", source[i:j], line))
            i = j
        else:
            tokens.append(Token("punct", c, line))
            i += 1

    return tokens


def _next_significant(tokens: List[Token], index: int) -> int:
    """index 이후 첫 번째 newline 이 아닌 토큰 위치 (없으면 len(tokens))"""
    while index < len(tokens) and tokens[index].kind == "newline":
        index += 1
    return index


def _matching_close(tokens: List[Token], index: int, path: str) -> int:
    """tokens[index] 의 여는 괄호에 대응하는 닫는 괄호 위치"""
    depth = 0
    for k in range(index, len(tokens)):
        token = tokens[k]
        if token.kind != "punct":
            continue
        if token.value in OPENERS:
            depth += 1
        elif token.value in CLOSERS:
            depth -= 1
            if depth == 0:
                return k
    raise SourceParseError(path, "unbalanced brackets", tokens[index].line)


class GoFunctionScanner:
    """토큰 목록에서 package 이름과 최상위 함수 선언을 찾는 스캐너"""

    def __init__(self, source: str, path: str = "<source>"):
        self.path = path
        self.tokens = tokenize(source, path)

    def package_name(self) -> str:
        index = _next_significant(self.tokens, 0)
        if index >= len(self.tokens) or self.tokens[index].value != "package":
            raise SourceParseError(self.path, "expected 'package' clause")
        name_index = _next_significant(self.tokens, index + 1)
        if name_index >= len(self.tokens) or self.tokens[name_index].kind != "ident":
            raise SourceParseError(self.path, "expected package name", self.tokens[index].line)
        return self.tokens[name_index].value

    def declarations(self) -> List[Tuple[str, int, int]]:
        """
        최상위 함수 선언의 (이름, 시작 줄, 끝 줄) 목록.

        receiver 가 있는 메서드와 본문이 없는 선언은 포함하지 않습니다.
        """
        tokens = self.tokens
        found: List[Tuple[str, int, int]] = []
        depth = 0
        i = 0

        while i < len(tokens):
            token = tokens[i]

            if token.kind == "punct" and token.value in OPENERS:
                depth += 1
            elif token.kind == "punct" and token.value in CLOSERS:
                depth -= 1
                if depth < 0:
                    raise SourceParseError(self.path, f"unexpected '{token.value}'", token.line)
            elif depth == 0 and token.kind == "ident" and token.value == "func":
                name_index = _next_significant(tokens, i + 1)
                if name_index < len(tokens) and tokens[name_index].kind == "ident":
                    end_index, span = self._function_span(name_index)
                    if span is not None:
                        found.append((tokens[name_index].value, token.line, span))
                    i = end_index + 1
                    continue

            i += 1

        if depth != 0:
            raise SourceParseError(self.path, "unexpected end of file")
        return found

    def _function_span(self, name_index: int) -> Tuple[int, Optional[int]]:
        """
        함수 이름 다음부터 본문 끝까지 탐색.

        Returns:
            (마지막으로 소비한 토큰 위치, 본문 닫는 괄호의 줄 또는 본문이 없으면 None)
        """
        tokens = self.tokens
        depth = 0
        k = name_index + 1
        previous: Optional[Token] = None

        while k < len(tokens):
            token = tokens[k]

            if token.kind == "newline":
                if depth == 0:
                    return k, None
            elif token.kind == "punct" and token.value == "{":
                close = _matching_close(tokens, k, self.path)
                is_type_literal = depth > 0 or (
                    previous is not None and previous.value in TYPE_LITERAL_KEYWORDS
                )
                if not is_type_literal:
                    return close, tokens[close].line
                k = close
            elif token.kind == "punct" and token.value in "([":
                depth += 1
            elif token.kind == "punct" and token.value in ")]":
                depth -= 1

            if token.kind != "newline":
                previous = token
            k += 1

        raise SourceParseError(self.path, "unexpected end of file", tokens[name_index].line)


class GoProfile(LanguageProfile):
    """Go 언어 프로파일 (표준 testing 패키지)"""

    name = "go"
    extensions = (".go",)
    fence_languages = ("go", "golang")
    comment_prefix = "//"
    block_separator = "\n\n"
    prompt_template = "go_test_generation"
    entry_points = ("main", "init")

    def is_test_file(self, path: Path) -> bool:
        return path.name.endswith("_test.go")

    def test_file_path(self, source_path: Path) -> Path:
        return source_path.parent / f"{source_path.stem}_test.go"

    def package_name(self, source_path: Path, source: str) -> str:
        return GoFunctionScanner(source, str(source_path)).package_name()

    def extract_functions(self, source_path: Path, source: str) -> List[SourceFunction]:
        scanner = GoFunctionScanner(source, str(source_path))
        lines = source.split("\n")
        functions = []
        for name, start_line, end_line in scanner.declarations():
            functions.append(SourceFunction(
                name=name,
                code=self.slice_lines(lines, start_line, end_line),
                start_line=start_line,
                end_line=end_line
            ))
        logger.debug(f"{source_path}: found {len(functions)} top-level functions")
        return functions

    def test_name(self, function_name: str) -> str:
        return f"Test{function_name[:1].upper()}{function_name[1:]}"

    def test_exists(self, function_name: str, existing_content: str) -> bool:
        return f"func {self.test_name(function_name)}(t *testing.T)" in existing_content

    def split_imports(self, code: str) -> Tuple[str, Optional[List[str]]]:
        return split_go_imports(code)

    def render_header(self, package_name: str, imports: List[str]) -> str:
        specs = "".join(f"\t{imp}\n" for imp in _new_imports(imports, {'"testing"'}))
        return f'package {package_name}\n\nimport (\n\t"testing"\n{specs})\n\n'

    def merge_imports(self, existing_content: str, imports: List[str]) -> str:
        missing = _new_imports(imports, existing_import_paths(existing_content))
        if not missing:
            return existing_content

        specs = "".join(f"\t{imp}\n" for imp in missing)

        block = re.search(r'^import\s*\(', existing_content, re.MULTILINE)
        if block:
            close = re.compile(r'^\s*\)', re.MULTILINE).search(existing_content, block.end())
            if close:
                return existing_content[:close.start()] + specs + existing_content[close.start():]

        package_clause = re.search(r'^package\s+\w+[^\n]*', existing_content, re.MULTILINE)
        new_block = f"import (\n{specs})"
        if package_clause:
            end = package_clause.end()
            return f"{existing_content[:end]}\n\n{new_block}{existing_content[end:]}"
        return f"{new_block}\n\n{existing_content}"

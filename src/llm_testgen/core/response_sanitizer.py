"""
Response Sanitizer Module - LLM 응답 정리

LLM이 돌려준 자유 형식 텍스트에서 코드 블록을 꺼내고,
패키지 선언을 제거하고, import 선언을 코드 본문과 분리합니다.

정규식 기반의 단순한 정리 도구이며 문법 파서가 아닙니다.
"""
import re
from typing import Iterable, List, Optional, Tuple

from llm_testgen.utils.logger import get_logger

logger = get_logger(__name__)

# Go: 파일 맨 앞의 package 절 (re.M 없이 사용 -> 문자열 시작에서만 매치)
GO_PACKAGE_PATTERN = re.compile(r'^package\s+[a-zA-Z_][a-zA-Z0-9_]*\s*\n')

# Go: 한 줄 import(별칭 포함) 또는 괄호 import 블록
GO_IMPORT_PATTERN = re.compile(
    r'^import(?:\s+\w+)?\s*'
    r'(?:(?:\(\n(?:(\s*(?:\w+ )?"[^"]+"\s*\n))+\s*\))|(?:"[^"]+"))',
    re.MULTILINE
)

# Python: 최상위(0열) import 문. 괄호로 감싼 여러 줄 from-import 포함
PYTHON_IMPORT_PATTERN = re.compile(
    r'^(?:from[ \t]+[\w.]+[ \t]+import[ \t]*\([^)]*\)'
    r'|from[ \t]+[\w.]+[ \t]+import[ \t]+[^\n]+'
    r'|import[ \t]+[^\n]+)[ \t]*$',
    re.MULTILINE
)


def extract_code_block(raw_code: str, fence_languages: Iterable[str] = ()) -> str:
    """
    응답의 첫 번째 fenced 코드 블록 본문을 반환합니다.

    Args:
        raw_code: LLM 응답 원문
        fence_languages: 허용할 블록 언어 태그 (예: ("go",)). 태그 없는 블록은 항상 허용

    Returns:
        첫 코드 블록의 본문. 블록이 없으면 응답 원문 그대로
    """
    tags = "|".join(re.escape(tag) for tag in fence_languages)
    tag_group = f"(?:{tags})?" if tags else ""
    pattern = re.compile(rf"```{tag_group}\n(.*?)\n```", re.DOTALL)

    match = pattern.search(raw_code)
    if match is None:
        logger.debug("No fenced code block found, using raw response")
        return raw_code
    return match.group(1)


def strip_package_clause(code: str) -> str:
    """코드 맨 앞의 Go package 선언을 제거"""
    return GO_PACKAGE_PATTERN.sub("", code, count=1)


def find_import_block(code: str) -> str:
    """첫 번째 Go import 선언 원문을 반환 (없으면 빈 문자열)"""
    match = GO_IMPORT_PATTERN.search(code)
    return match.group(0) if match else ""


def extract_imports(import_block: str) -> List[str]:
    """
    Go import 선언에서 import spec 목록을 추출합니다.

    한 줄 선언(`import "fmt"`, `import f "fmt"`)은 `import` 뒤의 내용을,
    여러 줄 블록은 `import (` 와 `)` 를 제외한 비어있지 않은 각 줄을 반환합니다.
    """
    imports: List[str] = []

    if import_block == "":
        return imports

    line_count = import_block.count("\n") + 1

    if line_count == 1:
        imports.append(import_block.removeprefix("import").strip())
        return imports

    for line in import_block.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("import"):
            continue
        if line == ")":
            continue
        imports.append(line)

    return imports


def split_go_imports(code: str) -> Tuple[str, Optional[List[str]]]:
    """Go 코드에서 package 절을 지우고 첫 import 선언을 분리"""
    code = strip_package_clause(code)

    import_content: Optional[List[str]] = None
    import_block = find_import_block(code)
    if import_block:
        code = code.replace(import_block, "", 1).strip()
        import_content = extract_imports(import_block)

    return code.strip(), import_content


def _normalize_python_import(statement: str) -> str:
    """여러 줄/괄호/주석이 섞인 import 문을 한 줄로 정규화"""
    # 주석 안의 괄호는 import 구문이 아님
    statement = "\n".join(line.split("#", 1)[0] for line in statement.split("\n"))

    if "(" in statement:
        head, _, rest = statement.partition("(")
        body = rest.rsplit(")", 1)[0]
        names = [name.strip() for name in body.replace("\n", ",").split(",") if name.strip()]
        return f"{head.strip()} {', '.join(names)}"

    return " ".join(statement.split())


def split_python_imports(code: str) -> Tuple[str, Optional[List[str]]]:
    """Python 코드에서 최상위 import 문을 모두 분리"""
    imports: List[str] = []
    for match in PYTHON_IMPORT_PATTERN.finditer(code):
        statement = _normalize_python_import(match.group(0))
        if statement not in imports:
            imports.append(statement)

    if not imports:
        return code.strip(), None

    code = PYTHON_IMPORT_PATTERN.sub("", code)
    code = re.sub(r"\n{4,}", "\n\n\n", code)
    return code.strip(), imports


def sanitize_code(raw_code: str, profile) -> Tuple[str, Optional[List[str]]]:
    """
    LLM 응답을 (코드 본문, import 목록)으로 정리합니다.

    Args:
        raw_code: LLM 응답 원문
        profile: 언어 프로파일 (fence_languages, split_imports 제공)

    Returns:
        (정리된 코드, import 목록 또는 None)
    """
    raw_code = raw_code.replace("\r\n", "\n")
    code = extract_code_block(raw_code, profile.fence_languages)
    return profile.split_imports(code)

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SourceFunction:
    name: str
    code: str
    start_line: int  # 1부터 시작, 포함
    end_line: int    # 포함

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass
class TestCase:
    __test__ = False  # pytest 수집 대상 아님

    name: str
    code: str
    imports: Optional[List[str]] = None


@dataclass
class SourceFile:
    path: str
    language: str
    package_name: str
    functions: List[SourceFunction] = field(default_factory=list)
    skipped_functions: List[str] = field(default_factory=list)

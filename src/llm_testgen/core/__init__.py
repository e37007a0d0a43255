"""
Core modules for LLM Test Generator
"""

from .source_models import SourceFunction, SourceFile, TestCase
from .response_sanitizer import sanitize_code, extract_code_block, extract_imports, find_import_block

__all__ = [
    "SourceFunction",
    "SourceFile",
    "TestCase",
    "sanitize_code",
    "extract_code_block",
    "extract_imports",
    "find_import_block",
]

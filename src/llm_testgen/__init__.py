"""
LLM Test Generator

소스 트리의 최상위 함수마다 LLM 으로 테스트 케이스를 생성해 테스트 파일에 병합하는 도구
"""

__version__ = "0.1.0"

# Core modules - pipeline stages
from .core.source_models import SourceFunction, SourceFile, TestCase
from .core.response_sanitizer import sanitize_code
from .core.walker import iter_source_files
from .core.test_writer import write_test_file
from .core.llm_client import CompletionClient, CompletionError

# Language profiles
from .languages import LanguageProfile, GoProfile, PythonProfile, SourceParseError, get_profile

# Orchestration
from .main import TestGenerator, TestGenerationResult

# Utility modules - Configuration and logging
from .utils.config import Config
from .utils.logger import get_logger, setup_logger, LogContext
from .utils.prompt_loader import PromptLoader

__all__ = [
    # Pipeline stages
    "SourceFunction",
    "SourceFile",
    "TestCase",
    "sanitize_code",
    "iter_source_files",
    "write_test_file",
    "CompletionClient",
    "CompletionError",

    # Language profiles
    "LanguageProfile",
    "GoProfile",
    "PythonProfile",
    "SourceParseError",
    "get_profile",

    # Orchestration
    "TestGenerator",
    "TestGenerationResult",

    # Configuration and utilities
    "Config",
    "get_logger",
    "setup_logger",
    "LogContext",
    "PromptLoader",

    # Convenience functions
    "create_test_generator",
]


def create_test_generator(config_path: str = None) -> TestGenerator:
    """
    테스트 생성기를 생성합니다.

    Args:
        config_path: 설정 파일 경로 (기본값: None, 환경변수 사용)

    Returns:
        TestGenerator 인스턴스
    """
    return TestGenerator(Config(config_file=config_path))


# Module metadata
__title__ = "LLM Test Generator"
__description__ = "함수별 테스트 코드 자동 생성 도우미"

"""
Utility modules for LLM Test Generator
"""

from .config import Config
from .logger import get_logger, setup_logger, LogContext
from .prompt_loader import PromptLoader

__all__ = [
    "Config",
    "get_logger",
    "setup_logger",
    "LogContext",
    "PromptLoader",
]

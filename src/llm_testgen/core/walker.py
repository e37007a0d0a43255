"""
Source Tree Walker Module

대상 경로 아래를 재귀적으로 돌며 언어 프로파일이 받아들이는 소스 파일을 찾습니다.
"""
import os
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple, Union

from llm_testgen.languages.base import LanguageProfile
from llm_testgen.utils.logger import get_logger

logger = get_logger(__name__)

EXCLUDED_DIRECTORIES = {"vendor", "node_modules", "__pycache__", "testdata"}


def _is_excluded_directory(name: str) -> bool:
    return name.startswith(".") or name in EXCLUDED_DIRECTORIES


def match_profile(path: Path, profiles: Sequence[LanguageProfile]) -> Optional[LanguageProfile]:
    """파일을 처리할 프로파일 (없으면 None)"""
    for profile in profiles:
        if profile.is_source_file(path):
            return profile
    return None


def iter_source_files(
    root: Union[str, Path],
    profiles: Sequence[LanguageProfile]
) -> Iterator[Tuple[Path, LanguageProfile]]:
    """
    root 아래의 대상 소스 파일을 정렬된 순서로 반환

    Args:
        root: 탐색할 디렉터리 또는 단일 파일
        profiles: 사용할 언어 프로파일 목록

    Yields:
        (파일 경로, 해당 프로파일)

    Raises:
        FileNotFoundError: root 가 존재하지 않는 경우
    """
    root_path = Path(root)
    if not root_path.exists():
        raise FileNotFoundError(f"Path not found: {root}")

    if root_path.is_file():
        profile = match_profile(root_path, profiles)
        if profile:
            yield root_path, profile
        else:
            logger.info(f"Skipping {root_path}: not an eligible source file")
        return

    def on_error(error: OSError):
        logger.warning(f"Error walking the path {error.filename}: {error.strerror}")

    for directory, dirnames, filenames in os.walk(root_path, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if not _is_excluded_directory(d))
        for filename in sorted(filenames):
            path = Path(directory) / filename
            profile = match_profile(path, profiles)
            if profile:
                yield path, profile

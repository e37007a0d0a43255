"""
Language profiles for LLM Test Generator
"""
from typing import Dict, Iterable, List, Type

from .base import LanguageProfile, SourceParseError
from .golang import GoProfile
from .python import PythonProfile

PROFILES: Dict[str, Type[LanguageProfile]] = {
    GoProfile.name: GoProfile,
    PythonProfile.name: PythonProfile,
}


def get_profile(name: str) -> LanguageProfile:
    """이름으로 언어 프로파일 인스턴스 생성"""
    try:
        return PROFILES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unsupported language: {name} (supported: {', '.join(sorted(PROFILES))})"
        ) from None


def get_profiles(names: Iterable[str]) -> List[LanguageProfile]:
    """이름 목록으로 프로파일 목록 생성 (중복 제거, 순서 유지)"""
    profiles: List[LanguageProfile] = []
    for name in dict.fromkeys(n.lower() for n in names):
        profiles.append(get_profile(name))
    return profiles


__all__ = [
    "LanguageProfile",
    "SourceParseError",
    "GoProfile",
    "PythonProfile",
    "PROFILES",
    "get_profile",
    "get_profiles",
]

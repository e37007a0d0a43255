"""
Configuration Management Module

환경 변수 및 설정 파일(JSON)을 관리하는 모듈
"""
import os
import json
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from llm_testgen.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"
SUPPORTED_LANGUAGES = ("go", "python")


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class OpenAIConfig:
    """OpenAI (또는 호환 엔드포인트) 설정"""
    api_key: Optional[str]
    model: str
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    request_timeout: int = 60

    @classmethod
    def from_env(cls) -> 'OpenAIConfig':
        """환경 변수에서 설정 로드"""
        model = os.getenv('GPT_MODEL')
        if not model:
            logger.info(f"GPT_MODEL not set, using {DEFAULT_MODEL} by default")
            model = DEFAULT_MODEL
        return cls(
            api_key=os.getenv('OPENAI_API_KEY'),
            model=model,
            base_url=os.getenv('OPENAI_BASE_URL') or None,
            temperature=_optional_float(os.getenv('TEMPERATURE')),
            request_timeout=int(os.getenv('REQUEST_TIMEOUT', '60'))
        )


@dataclass
class AzureOpenAIConfig:
    """Azure OpenAI 서비스 설정 (endpoint가 있으면 Azure를 사용)"""
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    deployment_name: Optional[str] = None
    api_version: str = DEFAULT_AZURE_API_VERSION

    @classmethod
    def from_env(cls) -> 'AzureOpenAIConfig':
        """환경 변수에서 설정 로드"""
        return cls(
            endpoint=os.getenv('AZURE_OPENAI_ENDPOINT') or None,
            api_key=os.getenv('AZURE_OPENAI_API_KEY') or None,
            deployment_name=os.getenv('AZURE_OPENAI_DEPLOYMENT_NAME') or None,
            api_version=os.getenv('AZURE_OPENAI_API_VERSION', DEFAULT_AZURE_API_VERSION)
        )

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)


@dataclass
class AppConfig:
    """애플리케이션 동작 설정"""
    max_function_lines: int = 100
    languages: List[str] = field(default_factory=lambda: ["go"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """환경 변수에서 설정 로드"""
        languages = os.getenv('TESTGEN_LANGUAGES', 'go')
        return cls(
            max_function_lines=int(os.getenv('MAX_FUNCTION_LINES', '100')),
            languages=[lang.strip().lower() for lang in languages.split(',') if lang.strip()],
            log_level=os.getenv('LOG_LEVEL', 'INFO')
        )


class Config:
    """통합 설정 관리 클래스"""

    def __init__(self, config_file: Optional[str] = None):
        """
        설정 초기화

        Args:
            config_file: 설정 파일 경로 (선택사항)
        """
        self.openai = OpenAIConfig.from_env()
        self.azure_openai = AzureOpenAIConfig.from_env()
        self.app = AppConfig.from_env()

        # 설정 파일이 있으면 오버라이드
        if config_file:
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str):
        """설정 파일에서 설정 로드"""
        config_path = Path(config_file)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self._update_from_dict(data)
        logger.debug(f"Configuration loaded from {config_path}")

    def _update_from_dict(self, data: Dict[str, Any]):
        """딕셔너리에서 설정 업데이트 (알 수 없는 키는 무시)"""
        for section_name in ('openai', 'azure_openai', 'app'):
            section = getattr(self, section_name)
            for key, value in data.get(section_name, {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    logger.warning(f"Unknown configuration key ignored: {section_name}.{key}")

    @property
    def model_name(self) -> str:
        """실제 요청에 사용할 모델(또는 Azure 배포) 이름"""
        if self.azure_openai.enabled and self.azure_openai.deployment_name:
            return self.azure_openai.deployment_name
        return self.openai.model

    def validate(self, require_credentials: bool = True) -> List[str]:
        """
        설정 유효성 검증

        Args:
            require_credentials: API 키/배포 설정까지 검사할지 여부 (dry-run 에서는 False)

        Returns:
            오류 메시지 목록 (비어있으면 유효)
        """
        errors = []

        if require_credentials:
            if self.azure_openai.enabled:
                if not self.azure_openai.api_key:
                    errors.append("Azure OpenAI API key is not configured (AZURE_OPENAI_API_KEY)")
                if not self.azure_openai.deployment_name:
                    errors.append("Azure OpenAI deployment is not configured (AZURE_OPENAI_DEPLOYMENT_NAME)")
            elif not self.openai.api_key:
                errors.append("Please set OPENAI_API_KEY environment variable")

        if self.app.max_function_lines <= 0:
            errors.append("MAX_FUNCTION_LINES must be a positive integer")
        if self.openai.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be a positive integer")

        unknown = [lang for lang in self.app.languages if lang not in SUPPORTED_LANGUAGES]
        if unknown:
            errors.append(f"Unsupported language(s): {', '.join(unknown)}")
        if not self.app.languages:
            errors.append("At least one language must be enabled")

        return errors

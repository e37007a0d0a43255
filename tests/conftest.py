"""
공용 테스트 픽스처
"""
import pytest

from llm_testgen.utils.config import Config

CONFIG_ENV_VARS = [
    "OPENAI_API_KEY",
    "GPT_MODEL",
    "OPENAI_BASE_URL",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
    "AZURE_OPENAI_API_VERSION",
    "TEMPERATURE",
    "REQUEST_TIMEOUT",
    "MAX_FUNCTION_LINES",
    "TESTGEN_LANGUAGES",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """설정 관련 환경 변수를 모두 제거"""
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def config(clean_env):
    """OpenAI 키만 설정된 기본 설정"""
    clean_env.setenv("OPENAI_API_KEY", "sk-test-key-0123456789")
    return Config()

"""
Completion Client Module - LLM 테스트 생성 요청

함수 하나당 한 번의 chat completion 요청을 보내고, 응답을 정리해 TestCase 로 돌려줍니다.
재시도, 배치, 속도 제한 처리는 하지 않습니다.
"""
from typing import Any, Dict, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import AzureChatOpenAI, ChatOpenAI

from llm_testgen.core.response_sanitizer import sanitize_code
from llm_testgen.core.source_models import SourceFunction, TestCase
from llm_testgen.languages.base import LanguageProfile
from llm_testgen.utils.config import Config
from llm_testgen.utils.logger import get_logger
from llm_testgen.utils.prompt_loader import PromptLoader

logger = get_logger(__name__)


class CompletionError(RuntimeError):
    """LLM 요청이 실패했거나 응답이 비어있을 때 발생"""


def _response_text(response: Any) -> str:
    """AIMessage.content (str 또는 content block 목록)를 문자열로 변환"""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content or "")


class CompletionClient:
    """LLM 기반 테스트 케이스 생성 클라이언트"""

    def __init__(
        self,
        config: Config,
        llm: Optional[Any] = None,
        prompt_loader: Optional[PromptLoader] = None
    ):
        """
        CompletionClient 초기화

        Args:
            config: 애플리케이션 설정
            llm: 사용할 chat model (테스트용 주입, 기본값은 설정에서 생성)
            prompt_loader: 프롬프트 로더 (기본값: 패키지 내장 prompts)
        """
        self.config = config
        self.prompt_loader = prompt_loader or PromptLoader()
        self.llm = llm if llm is not None else self._initialize_llm()

    def _initialize_llm(self):
        """
        설정에 따라 chat model 을 생성합니다.

        AZURE_OPENAI_ENDPOINT 가 있으면 AzureChatOpenAI, 아니면 ChatOpenAI 를 사용합니다.
        temperature/base_url 은 설정된 경우에만 전달해 서비스 기본값을 따릅니다.
        """
        options: Dict[str, Any] = {"timeout": self.config.openai.request_timeout}
        if self.config.openai.temperature is not None:
            options["temperature"] = self.config.openai.temperature

        azure = self.config.azure_openai
        if azure.enabled:
            llm = AzureChatOpenAI(
                azure_endpoint=azure.endpoint,
                api_key=azure.api_key,
                azure_deployment=azure.deployment_name,
                api_version=azure.api_version,
                **options
            )
            logger.info(f"Azure OpenAI chat model initialized (deployment: {azure.deployment_name})")
            return llm

        if self.config.openai.base_url:
            options["base_url"] = self.config.openai.base_url
        llm = ChatOpenAI(
            model=self.config.openai.model,
            api_key=self.config.openai.api_key,
            **options
        )
        logger.info(f"OpenAI chat model initialized (model: {self.config.openai.model})")
        return llm

    def build_messages(
        self,
        package_name: str,
        function: SourceFunction,
        profile: LanguageProfile
    ) -> List[BaseMessage]:
        """프롬프트 템플릿으로 요청 메시지 구성 (system 프롬프트가 비어있으면 user 메시지 하나)"""
        system_prompt, human_prompt = self.prompt_loader.get_prompt(
            profile.prompt_template,
            function_name=function.name,
            package_name=package_name,
            function_code=function.code
        )

        messages: List[BaseMessage] = []
        if system_prompt.strip():
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=human_prompt))
        return messages

    def request_test_case(
        self,
        package_name: str,
        function: SourceFunction,
        profile: LanguageProfile
    ) -> str:
        """
        함수 하나에 대한 테스트 코드를 요청하고 응답 원문을 반환

        Raises:
            CompletionError: 요청 실패 또는 빈 응답
        """
        messages = self.build_messages(package_name, function, profile)
        logger.debug(f"Requesting test case for {function.name} ({len(messages[-1].content)} chars prompt)")

        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            raise CompletionError(f"Completion request failed for {function.name}: {e}") from e

        text = _response_text(response)
        if not text.strip():
            raise CompletionError(f"Empty completion response for {function.name}")

        logger.debug(f"Received {len(text)} chars for {function.name}")
        return text

    def generate_test_case(
        self,
        package_name: str,
        function: SourceFunction,
        profile: LanguageProfile
    ) -> TestCase:
        """테스트 코드를 요청하고 응답을 정리해 TestCase 로 반환"""
        response = self.request_test_case(package_name, function, profile)
        code, imports = sanitize_code(response, profile)
        return TestCase(name=function.name, code=code, imports=imports)

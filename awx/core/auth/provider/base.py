# awx/core/auth/provider/base.py
"""
인증 Flow 베이스 클래스

각 Flow는 프로파일 하나(체인의 한 링크)를 CredentialSet으로 해석합니다.
외부 호출은 _call()을 통해 재시도/에러 매핑이 일관되게 적용됩니다.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from awx.core.exceptions import AuthFailedError

from ..retry import DEFAULT_RETRY_CONFIG, RetryConfig, call_with_retry, get_error_code
from ..types import CredentialSet, ResolutionContext

if TYPE_CHECKING:
    from ..config import AWSProfile
    from .client import AwsGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseFlow(ABC):
    """인증 Flow 추상 클래스

    Attributes:
        name: Flow 이름 (로깅용)
        gateway: 외부 호출 게이트웨이
        retry_config: 일시적 오류 재시도 설정
    """

    name: str = "base"

    def __init__(
        self,
        gateway: AwsGateway,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.gateway = gateway
        self.retry_config = retry_config
        self._sleep = sleep

    @abstractmethod
    def resolve(
        self,
        profile: AWSProfile,
        ctx: ResolutionContext,
        source: CredentialSet | None = None,
    ) -> CredentialSet:
        """프로파일을 자격증명으로 해석

        Args:
            profile: 해석할 프로파일
            ctx: 해석 컨텍스트
            source: 이전 링크의 자격증명 (AssumeRole 전용)
        """
        pass

    def _call(self, ctx: ResolutionContext, profile: str, operation: str, func: Callable[[], T]) -> T:
        """외부 호출 실행 (일시적 오류 재시도 + 에러 매핑)

        Raises:
            TransientNetworkError: 재시도 소진
            AuthFailedError: 재시도 불가능한 AWS 오류
        """
        try:
            return call_with_retry(
                func,
                profile=profile,
                operation=operation,
                config=self.retry_config,
                sleep=self._sleep,
                on_attempt=ctx.record_call,
            )
        except (ClientError, BotoCoreError) as e:
            code = get_error_code(e)
            logger.debug("[%s] %s 실패: %s", profile, operation, code)
            raise AuthFailedError(profile, operation, code, cause=e) from e

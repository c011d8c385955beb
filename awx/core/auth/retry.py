"""
awx/core/auth/retry.py - 외부 인증 호출 에러 분류 및 재시도 유틸리티

STS/SSO 외부 호출의 에러 분류, 재시도 가능 여부 판단,
지수 백오프 재시도 실행을 제공합니다.

주요 구성 요소:
- RetryConfig: 재시도 설정 (지수 백오프 + 지터, 총 3회)
- get_error_code: 예외에서 에러 코드 추출
- is_transient: 일시적(네트워크/타임아웃/스로틀링) 에러 여부
- call_with_retry: 일시적 에러만 재시도하는 실행기

일시적이지 않은 에러(잘못된 자격증명, 잘못된 ARN, AccessDenied)는 즉시 전파합니다.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import HTTPClientError

from awx.core.exceptions import TransientNetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """재시도 설정

    Attributes:
        max_attempts: 최대 시도 횟수 (첫 시도 포함)
        base_delay: 기본 대기 시간 (초)
        exponential_base: 지수 백오프 밑수
        max_delay: 최대 대기 시간 (초)
        jitter: 지터 사용 여부 (대기 시간에 [0, base_delay] 랜덤 추가)
    """

    max_attempts: int = 3
    base_delay: float = 0.3
    exponential_base: float = 2.3
    max_delay: float = 10.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """재시도 대기 시간 계산

        Args:
            attempt: 실패한 시도 번호 (0부터 시작)

        Returns:
            대기 시간 (초)
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        if self.jitter:
            delay += random.uniform(0, self.base_delay)
        return min(delay, self.max_delay)


# 기본 재시도 설정
DEFAULT_RETRY_CONFIG = RetryConfig()

# 재시도 가능한 AWS 에러 코드
RETRYABLE_ERROR_CODES: set[str] = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "ServiceUnavailable",
    "ServiceUnavailableException",
    "InternalError",
    "InternalFailure",
    "RequestTimeout",
    "RequestTimeoutException",
    "IDPCommunicationError",
}


def get_error_code(error: BaseException) -> str:
    """예외 객체에서 에러 코드 문자열 추출

    ClientError의 경우 response에서 Code를 추출하고,
    그 외에는 예외 클래스명을 반환합니다.
    """
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code
    return error.__class__.__name__


def is_transient(error: BaseException) -> bool:
    """재시도 가능한 일시적 에러인지 확인

    botocore 연결/타임아웃 에러, 표준 네트워크 에러,
    RETRYABLE_ERROR_CODES에 포함된 ClientError 코드인 경우 True.
    """
    if isinstance(error, (BotoConnectionError, HTTPClientError, ConnectionError, TimeoutError)):
        return True

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code", "") in RETRYABLE_ERROR_CODES

    return False


def call_with_retry(
    func: Callable[[], T],
    *,
    profile: str,
    operation: str,
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    sleep: Callable[[float], None] = time.sleep,
    on_attempt: Callable[[str], int] | None = None,
) -> T:
    """일시적 에러에 한해 지수 백오프로 재시도하며 func 실행

    Args:
        func: 인자 없는 외부 호출
        profile: 로깅/에러용 프로파일 이름
        operation: 작업 이름 (예: "sts:AssumeRole")
        config: 재시도 설정
        sleep: 대기 함수 (테스트에서 교체)
        on_attempt: 시도마다 호출되는 카운터 콜백 (ResolutionContext.record_call)

    Returns:
        func 반환값

    Raises:
        TransientNetworkError: 일시적 에러로 모든 시도가 실패한 경우
        Exception: 일시적이지 않은 에러는 그대로 전파
    """
    last_error: Exception | None = None

    for attempt in range(config.max_attempts):
        if on_attempt is not None:
            on_attempt(operation)
        try:
            return func()
        except Exception as e:
            if not is_transient(e):
                raise
            last_error = e
            if attempt + 1 >= config.max_attempts:
                break
            delay = config.get_delay(attempt)
            logger.debug(
                "[%s] %s 시도 %d 실패 (%s), %.2f초 후 재시도...",
                profile,
                operation,
                attempt + 1,
                get_error_code(e),
                delay,
            )
            sleep(delay)

    logger.debug("[%s] %s 재시도 %d회 소진", profile, operation, config.max_attempts)
    raise TransientNetworkError(profile, operation, config.max_attempts, cause=last_error) from last_error

# awx/core/auth/provider/mfa.py
"""
MFA Flow

장기 액세스 키 + mfa_serial 프로파일을 sts:GetSessionToken 으로 임시 자격증명으로 교환합니다.

순서:
1. 비대화형이면 즉시 AuthRequiredError (exit 2)
2. mfa_serial 계정과 자격증명 계정이 다르면 IncompleteProfileError
3. 6자리 코드를 최대 3회 입력받아 교환 (형식 오류도 1회로 계산)
4. 모두 실패하면 MfaExhaustedError (exit 3)

MFA 코드는 로그, 에러 메시지, 캐시 어디에도 남기지 않습니다.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, cast

from awx.core.exceptions import (
    AuthFailedError,
    AuthRequiredError,
    IncompleteProfileError,
    MfaExhaustedError,
)
from awx.i18n import t

from ..types import CredentialSet, Prompter, ResolutionContext
from .base import BaseFlow
from .client import DEFAULT_SESSION_DURATION, extract_account_id
from .static import static_credentials

if TYPE_CHECKING:
    from ..config import AWSProfile

logger = logging.getLogger(__name__)

MFA_MAX_ATTEMPTS = 3
MFA_CODE_LENGTH = 6
_MFA_CODE_PATTERN = re.compile(rf"^\d{{{MFA_CODE_LENGTH}}}$")

OP_SESSION_TOKEN = "sts:GetSessionToken"
OP_IDENTITY = "sts:GetCallerIdentity"


def mfa_remediation_command(profile_name: str) -> str:
    """비대화형 모드에서 안내할 명령 (터미널에서 한 번 대화형으로 실행)"""
    return f"awx --profile {profile_name}"


def prompt_mfa_loop(
    profile_name: str,
    serial_number: str,
    ctx: ResolutionContext,
    exchange: Callable[[str], CredentialSet],
) -> CredentialSet:
    """MFA 코드를 입력받아 exchange로 교환 (최대 MFA_MAX_ATTEMPTS회)

    Args:
        profile_name: 프로파일 이름
        serial_number: MFA 디바이스 ARN/시리얼
        ctx: 해석 컨텍스트 (prompter, 시도 횟수 기록)
        exchange: 코드를 받아 자격증명을 반환하는 호출. 코드가 거부되면 AuthFailedError.

    Raises:
        AuthRequiredError: 비대화형 모드
        MfaExhaustedError: 시도 소진
        UserCancelledError: 입력 취소 (Prompter가 발생)
        TransientNetworkError: 네트워크 재시도 소진 (시도 횟수로 계산하지 않음)
    """
    if not ctx.can_prompt:
        raise AuthRequiredError(profile_name, mfa_remediation_command(profile_name), reason="MFA")
    prompter = cast(Prompter, ctx.prompter)

    for attempt in range(1, MFA_MAX_ATTEMPTS + 1):
        ctx.mfa_attempts[profile_name] = ctx.mfa_attempts.get(profile_name, 0) + 1
        remaining = MFA_MAX_ATTEMPTS - attempt

        code = prompter.secret(
            t(
                "auth.mfa_prompt",
                length=MFA_CODE_LENGTH,
                serial=serial_number,
                attempt=attempt,
                max=MFA_MAX_ATTEMPTS,
            )
        ).strip()

        if not _MFA_CODE_PATTERN.match(code):
            prompter.notify(t("auth.mfa_invalid_format", length=MFA_CODE_LENGTH, remaining=remaining))
            continue

        try:
            credentials = exchange(code)
        except AuthFailedError as e:
            logger.debug("[%s] MFA 시도 %d 실패: %s", profile_name, attempt, e.error_code)
            prompter.notify(t("auth.mfa_attempt_failed", code=e.error_code or "-", remaining=remaining))
            continue

        ctx.mfa_verified.add(serial_number)
        return credentials

    raise MfaExhaustedError(profile_name, MFA_MAX_ATTEMPTS)


class MfaFlow(BaseFlow):
    """정적 키 + MFA (sts:GetSessionToken) Flow"""

    name = "mfa"

    def resolve(
        self,
        profile: AWSProfile,
        ctx: ResolutionContext,
        source: CredentialSet | None = None,
    ) -> CredentialSet:
        serial = profile.mfa_serial
        if not serial:
            raise IncompleteProfileError(profile.name, "mfa_serial")
        if not profile.aws_access_key_id or not profile.aws_secret_access_key:
            raise IncompleteProfileError(profile.name, t("auth.mfa_without_keys"))

        if not ctx.can_prompt:
            raise AuthRequiredError(profile.name, mfa_remediation_command(profile.name), reason="MFA")

        long_term = static_credentials(profile)
        self._verify_account(profile, serial, long_term, ctx)

        def exchange(code: str) -> CredentialSet:
            return self._call(
                ctx,
                profile.name,
                OP_SESSION_TOKEN,
                lambda: self.gateway.get_session_token(long_term, serial, code, DEFAULT_SESSION_DURATION),
            )

        return prompt_mfa_loop(profile.name, serial, ctx, exchange)

    def _verify_account(
        self,
        profile: AWSProfile,
        serial: str,
        credentials: CredentialSet,
        ctx: ResolutionContext,
    ) -> None:
        """MFA 디바이스 계정과 자격증명 계정 일치 여부 확인 (프롬프트 전)"""
        serial_account = extract_account_id(serial)
        if serial_account is None:
            logger.warning(t("auth.mfa_account_unknown", profile=profile.name))
            return

        identity = self._call(
            ctx,
            profile.name,
            OP_IDENTITY,
            lambda: self.gateway.get_caller_identity(credentials=credentials),
        )
        account = identity.get("Account")
        if account and account != serial_account:
            raise IncompleteProfileError(
                profile.name,
                t("auth.mfa_account_mismatch", serial_account=serial_account, account=account),
            )

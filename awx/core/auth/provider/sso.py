# awx/core/auth/provider/sso.py
"""
SSO Flow

1. 캐시된 SSO 토큰으로 sts:GetCallerIdentity 프로브 (일시적 오류는 재시도)
2. 프로브 실패(토큰 없음/만료) 시
   - 비대화형: AuthRequiredError (정확한 로그인 명령 안내, exit 2)
   - 대화형: `aws sso login --profile NAME` 실행 후 다시 프로브
3. botocore 자격증명 체인으로 역할 자격증명 추출
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from awx.core.exceptions import AuthFailedError, AuthRequiredError, UserCancelledError
from awx.i18n import t

from ..types import CredentialSet, Prompter, ResolutionContext
from .base import BaseFlow

if TYPE_CHECKING:
    from ..config import AWSProfile

logger = logging.getLogger(__name__)

OP_PROBE = "sts:GetCallerIdentity"
OP_LOGIN = "sso:Login"
OP_EXTRACT = "sso:GetRoleCredentials"


class SsoFlow(BaseFlow):
    """AWS IAM Identity Center (SSO) Flow"""

    name = "sso"

    def resolve(
        self,
        profile: AWSProfile,
        ctx: ResolutionContext,
        source: CredentialSet | None = None,
    ) -> CredentialSet:
        if not self._probe(profile, ctx):
            self._login(profile, ctx)
            # 로그인 직후 프로브 실패는 인증 실패로 처리
            self._call(
                ctx,
                profile.name,
                OP_PROBE,
                lambda: self.gateway.get_caller_identity(profile_name=profile.name),
            )

        credentials = self._call(
            ctx,
            profile.name,
            OP_EXTRACT,
            lambda: self.gateway.profile_credentials(profile.name),
        )
        if credentials is None:
            raise AuthFailedError(profile.name, OP_EXTRACT)
        return credentials

    def _probe(self, profile: AWSProfile, ctx: ResolutionContext) -> bool:
        """유효한 SSO 세션이 있는지 확인"""
        try:
            self._call(
                ctx,
                profile.name,
                OP_PROBE,
                lambda: self.gateway.get_caller_identity(profile_name=profile.name),
            )
        except AuthFailedError as e:
            logger.debug("[%s] SSO 프로브 실패: %s", profile.name, e.error_code)
            return False
        return True

    def _login(self, profile: AWSProfile, ctx: ResolutionContext) -> None:
        command = " ".join(self.gateway.sso_login_command(profile.name))
        if not ctx.can_prompt:
            raise AuthRequiredError(profile.name, command, reason="SSO")
        prompter = cast(Prompter, ctx.prompter)

        prompter.notify(t("auth.sso_session_expired", profile=profile.name))
        prompter.notify(t("auth.sso_login_running", command=command))
        ctx.record_call(OP_LOGIN)
        try:
            returncode = self.gateway.sso_login(profile.name)
        except KeyboardInterrupt:
            raise UserCancelledError("sso-login") from None

        if returncode != 0:
            raise AuthFailedError(
                profile.name,
                OP_LOGIN,
                hint=t("auth.sso_login_failed", code=returncode),
            )
        prompter.notify(t("auth.sso_login_completed", profile=profile.name))

# awx/core/auth/provider/assume_role.py
"""
AssumeRole Flow

이전 링크의 자격증명으로 sts:AssumeRole 을 호출합니다.
역할 프로파일에 mfa_serial이 있고 이번 호출에서 같은 디바이스를 아직 검증하지 않았다면
MFA 코드를 입력받아 AssumeRole 요청에 포함합니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from awx.core.exceptions import IncompleteProfileError, mask_arn
from awx.i18n import t

from ..types import CredentialSet, ResolutionContext
from .base import BaseFlow
from .client import DEFAULT_SESSION_DURATION
from .mfa import prompt_mfa_loop

if TYPE_CHECKING:
    from ..config import AWSProfile

logger = logging.getLogger(__name__)

OP_ASSUME_ROLE = "sts:AssumeRole"


class AssumeRoleFlow(BaseFlow):
    """역할 전환 Flow (체인의 각 링크마다 1회)"""

    name = "assume_role"

    def resolve(
        self,
        profile: AWSProfile,
        ctx: ResolutionContext,
        source: CredentialSet | None = None,
    ) -> CredentialSet:
        if not profile.role_arn:
            raise IncompleteProfileError(profile.name, "role_arn")
        if source is None:
            raise IncompleteProfileError(profile.name, "source_profile")

        role_arn = profile.role_arn
        session_name = profile.role_session_name or ctx.session_name
        duration = profile.duration_seconds or DEFAULT_SESSION_DURATION
        logger.info(t("auth.assume_role", profile=profile.name, role=mask_arn(role_arn)))

        def assume(serial: str | None = None, code: str | None = None) -> CredentialSet:
            return self._call(
                ctx,
                profile.name,
                OP_ASSUME_ROLE,
                lambda: self.gateway.assume_role(
                    source,
                    role_arn,
                    session_name,
                    duration_seconds=duration,
                    external_id=profile.external_id,
                    serial_number=serial,
                    token_code=code,
                ),
            )

        serial = profile.mfa_serial
        if serial and serial not in ctx.mfa_verified:
            return prompt_mfa_loop(profile.name, serial, ctx, lambda code: assume(serial, code))
        return assume()

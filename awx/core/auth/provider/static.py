# awx/core/auth/provider/static.py
"""
정적 자격증명 Flow

프로파일의 aws_access_key_id / aws_secret_access_key 를 그대로 반환합니다.
외부 호출이 없으며 만료 시간도 없습니다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from awx.core.exceptions import IncompleteProfileError
from awx.i18n import t

from ..types import CredentialSet, ResolutionContext
from .base import BaseFlow

if TYPE_CHECKING:
    from ..config import AWSProfile


def static_credentials(profile: AWSProfile) -> CredentialSet:
    """프로파일의 정적 자격증명 추출

    Raises:
        IncompleteProfileError: 키 ID 또는 시크릿이 없을 때
    """
    if not profile.aws_access_key_id or not profile.aws_secret_access_key:
        raise IncompleteProfileError(profile.name, t("auth.static_missing_keys"))
    return CredentialSet(
        access_key_id=profile.aws_access_key_id,
        secret_access_key=profile.aws_secret_access_key,
        session_token=profile.aws_session_token,
    )


class StaticFlow(BaseFlow):
    """정적 액세스 키 Flow"""

    name = "static"

    def resolve(
        self,
        profile: AWSProfile,
        ctx: ResolutionContext,
        source: CredentialSet | None = None,
    ) -> CredentialSet:
        return static_credentials(profile)

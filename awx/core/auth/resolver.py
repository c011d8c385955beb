# awx/core/auth/resolver.py
"""
Credential Resolver

요청 프로파일을 최종 CredentialSet으로 해석하는 상태 기계입니다.

    Start → Classify → {SsoFlow | MfaFlow | AssumeRoleFlow | StaticFlow} → Resolved | Failed

처리 순서:
1. resolve_chain()으로 base → 요청 프로파일 체인 계산 (순환/누락 검사)
2. 요청 프로파일부터 역순으로 캐시 조회, 가장 가까운 유효 항목에서 재개
3. 캐시 미스면 base 프로파일을 자신의 Flow로 해석 (SSO > MFA > STATIC)
4. 나머지 ASSUME_ROLE 링크를 순서대로 AssumeRole
5. 새로 해석한 링크는 캐시에 저장, 최종 리전 적용

Example:
    resolver = Resolver(parsed.profiles, AwsGateway(), SessionCache.disabled())
    creds = resolver.resolve(ResolutionContext(profile_name="prod", prompter=prompter))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

from awx.core.exceptions import IncompleteProfileError
from awx.i18n import t

from .cache import SessionCache
from .config import AWSProfile, resolve_chain
from .provider.assume_role import AssumeRoleFlow
from .provider.base import BaseFlow
from .provider.client import AwsGateway
from .provider.mfa import MfaFlow
from .provider.sso import SsoFlow
from .provider.static import StaticFlow
from .retry import DEFAULT_RETRY_CONFIG, RetryConfig
from .types import Capability, CredentialSet, ResolutionContext

logger = logging.getLogger(__name__)


class Resolver:
    """프로파일 체인 → CredentialSet 해석기

    Attributes:
        profiles: 프로파일 매핑 (읽기 전용)
        cache: 세션 캐시
    """

    def __init__(
        self,
        profiles: Mapping[str, AWSProfile],
        gateway: AwsGateway,
        cache: SessionCache | None = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.profiles = profiles
        self.cache = cache if cache is not None else SessionCache.disabled()
        self.sso = SsoFlow(gateway, retry_config, sleep)
        self.mfa = MfaFlow(gateway, retry_config, sleep)
        self.assume_role = AssumeRoleFlow(gateway, retry_config, sleep)
        self.static = StaticFlow(gateway, retry_config, sleep)

    def select_flow(self, profile: AWSProfile) -> BaseFlow:
        """프로파일 하나에 적용할 Flow 선택 (ASSUME_ROLE > SSO > MFA > STATIC)

        Raises:
            IncompleteProfileError: 어떤 인증 능력도 없거나 MFA에 키가 없을 때
        """
        tags = profile.capabilities
        if Capability.ASSUME_ROLE in tags:
            return self.assume_role
        if Capability.SSO in tags:
            return self.sso
        if Capability.MFA in tags:
            if Capability.STATIC not in tags:
                raise IncompleteProfileError(profile.name, t("auth.mfa_without_keys"))
            return self.mfa
        if Capability.STATIC in tags:
            return self.static
        raise IncompleteProfileError(profile.name, t("auth.no_auth_method"))

    def resolve(self, ctx: ResolutionContext) -> CredentialSet:
        """요청 프로파일을 자격증명으로 해석

        Raises:
            ProfileError: 프로파일 그래프 결함 (exit 2)
            AuthError: 인증 실패 (AuthRequired 2, MfaExhausted 3, 그 외 1)
            UserCancelledError: 사용자 취소 (exit 4)
        """
        chain = resolve_chain(self.profiles, ctx.profile_name)
        logger.debug("[%s] 체인: %s", ctx.profile_name, " -> ".join(p.name for p in chain))

        start, credentials = self._find_cached(chain)

        for profile in chain[start:]:
            flow = self.select_flow(profile)
            logger.debug("[%s] %s flow", profile.name, flow.name)
            credentials = flow.resolve(profile, ctx, credentials)
            self.cache.put(profile.name, credentials)

        if credentials is None:
            # 빈 체인
            raise IncompleteProfileError(ctx.profile_name, t("auth.no_auth_method"))
        return credentials.with_region(self._final_region(chain[-1], ctx))

    def _find_cached(self, chain: list[AWSProfile]) -> tuple[int, CredentialSet | None]:
        """요청 프로파일부터 역순으로 유효한 캐시 항목 탐색

        Returns:
            (다음에 해석할 링크 인덱스, 캐시된 자격증명 또는 None)
        """
        for index in range(len(chain) - 1, -1, -1):
            entry = self.cache.get_entry(chain[index].name)
            if entry is not None:
                logger.info(
                    t("auth.cache_hit", profile=chain[index].name, remaining=entry.remaining_seconds() or "-")
                )
                return index + 1, entry.credentials
        return 0, None

    @staticmethod
    def _final_region(profile: AWSProfile, ctx: ResolutionContext) -> str | None:
        """리전 우선순위: --region > 환경 변수 > 프로파일 region"""
        return ctx.region_override or ctx.env_region or profile.region

# awx/core/auth/__init__.py
"""
AWS 인증 엔진 (awx/core/auth)

프로파일 이름 하나를 받아 aws CLI에 주입할 자격증명을 해석합니다.

구성:
- config/: Profile Store (~/.aws/config, ~/.aws/credentials 파싱, 체인 해석)
- provider/: 인증 Flow (SSO, MFA, AssumeRole, Static) 와 STS 게이트웨이
- cache/: 세션 캐시 (keyring 또는 암호화 파일, opt-in)
- retry.py: 일시적 오류 재시도
- resolver.py: Flow 선택 및 체인 해석 상태 기계

사용 예시:
    from awx.core.auth import (
        AwsGateway, Resolver, ResolutionContext, SessionCache, load_config,
    )

    parsed = load_config()
    resolver = Resolver(parsed.profiles, AwsGateway(), SessionCache.disabled())
    creds = resolver.resolve(ResolutionContext(profile_name="prod", prompter=prompter))

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    실제 사용 시점에만 하위 모듈이 로드되어 CLI 시작 시간을 최적화합니다.
"""

__all__ = [
    # Types
    "Capability",
    "CredentialSet",
    "Prompter",
    "ResolutionContext",
    # Config
    "Loader",
    "AWSProfile",
    "AWSSession",
    "ParsedConfig",
    "load_config",
    "list_profiles",
    "classify",
    "profile_badges",
    "resolve_chain",
    "resolve_profile_name",
    # Cache
    "SessionCache",
    "CacheEntry",
    # Providers
    "AwsGateway",
    "SsoFlow",
    "MfaFlow",
    "AssumeRoleFlow",
    "StaticFlow",
    # Retry
    "RetryConfig",
    "call_with_retry",
    # Resolver
    "Resolver",
]

# Lazy import 매핑 테이블
_IMPORT_MAPPING = {
    # Types
    "Capability": (".types", "Capability"),
    "CredentialSet": (".types", "CredentialSet"),
    "Prompter": (".types", "Prompter"),
    "ResolutionContext": (".types", "ResolutionContext"),
    # Config
    "Loader": (".config", "Loader"),
    "AWSProfile": (".config", "AWSProfile"),
    "AWSSession": (".config", "AWSSession"),
    "ParsedConfig": (".config", "ParsedConfig"),
    "load_config": (".config", "load_config"),
    "list_profiles": (".config", "list_profiles"),
    "classify": (".config", "classify"),
    "profile_badges": (".config", "profile_badges"),
    "resolve_chain": (".config", "resolve_chain"),
    "resolve_profile_name": (".config", "resolve_profile_name"),
    # Cache
    "SessionCache": (".cache", "SessionCache"),
    "CacheEntry": (".cache", "CacheEntry"),
    # Providers
    "AwsGateway": (".provider", "AwsGateway"),
    "SsoFlow": (".provider", "SsoFlow"),
    "MfaFlow": (".provider", "MfaFlow"),
    "AssumeRoleFlow": (".provider", "AssumeRoleFlow"),
    "StaticFlow": (".provider", "StaticFlow"),
    # Retry
    "RetryConfig": (".retry", "RetryConfig"),
    "call_with_retry": (".retry", "call_with_retry"),
    # Resolver
    "Resolver": (".resolver", "Resolver"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드

    CLI 시작 시간 최적화를 위해 무거운 의존성(boto3, cryptography 등)을
    실제 필요한 시점에만 로드합니다.
    """
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

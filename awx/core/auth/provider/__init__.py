# awx/core/auth/provider/__init__.py
"""
인증 Flow 구현 모듈

이 모듈은 프로파일 체인의 각 링크를 자격증명으로 해석하는 Flow 클래스들을 제공합니다.

Flow 목록:
- SsoFlow: AWS IAM Identity Center 세션 (필요 시 aws sso login)
- MfaFlow: 정적 키 + MFA 코드 (sts:GetSessionToken)
- AssumeRoleFlow: 역할 전환 (sts:AssumeRole, 선택적 MFA)
- StaticFlow: 정적 액세스 키

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Base
    "BaseFlow",
    "AwsGateway",
    # Flows
    "SsoFlow",
    "MfaFlow",
    "AssumeRoleFlow",
    "StaticFlow",
    # Helpers
    "prompt_mfa_loop",
    "static_credentials",
    "extract_account_id",
    "MFA_MAX_ATTEMPTS",
]

_IMPORT_MAPPING = {
    "BaseFlow": (".base", "BaseFlow"),
    "AwsGateway": (".client", "AwsGateway"),
    "SsoFlow": (".sso", "SsoFlow"),
    "MfaFlow": (".mfa", "MfaFlow"),
    "AssumeRoleFlow": (".assume_role", "AssumeRoleFlow"),
    "StaticFlow": (".static", "StaticFlow"),
    "prompt_mfa_loop": (".mfa", "prompt_mfa_loop"),
    "static_credentials": (".static", "static_credentials"),
    "extract_account_id": (".client", "extract_account_id"),
    "MFA_MAX_ATTEMPTS": (".mfa", "MFA_MAX_ATTEMPTS"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

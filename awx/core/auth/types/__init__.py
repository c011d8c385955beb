# awx/core/auth/types/__init__.py
"""
인증 엔진 타입 모듈

Capability, CredentialSet, Prompter, ResolutionContext와
인증 관련 예외(awx.core.exceptions 재노출)를 제공합니다.
"""

from awx.core.exceptions import (
    AuthError,
    AuthFailedError,
    AuthRequiredError,
    CacheCorruptionError,
    CircularReferenceError,
    ConfigError,
    IncompleteProfileError,
    MfaExhaustedError,
    MissingSourceProfileError,
    ProfileNotFoundError,
    TransientNetworkError,
    UserCancelledError,
)

from .types import (
    Capability,
    CredentialSet,
    Prompter,
    ResolutionContext,
    utc_now,
)

__all__ = [
    # Types
    "Capability",
    "CredentialSet",
    "Prompter",
    "ResolutionContext",
    "utc_now",
    # Errors
    "AuthError",
    "AuthFailedError",
    "AuthRequiredError",
    "CacheCorruptionError",
    "CircularReferenceError",
    "ConfigError",
    "IncompleteProfileError",
    "MfaExhaustedError",
    "MissingSourceProfileError",
    "ProfileNotFoundError",
    "TransientNetworkError",
    "UserCancelledError",
]

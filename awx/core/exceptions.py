"""
awx/core/exceptions.py - 통합 예외 계층 구조

awx 전체에서 사용되는 예외 클래스들을 정의합니다.
모든 치명적 예외는 고정된 종료 코드(exit_code)와 사람이 읽을 수 있는
조치 안내(hint)를 가지며, CLI는 AwxError 하나만 잡아서 처리합니다.

예외 계층 구조:
    AwxError (베이스, exit 1)
    ├── ConfigError (설정 파일 읽기/파싱 실패, exit 1)
    ├── ProfileError (프로파일 그래프 결함, exit 2)
    │   ├── ProfileNotFoundError
    │   ├── MissingSourceProfileError
    │   ├── CircularReferenceError
    │   └── IncompleteProfileError
    ├── AuthError (인증 실패, exit 1)
    │   ├── AuthRequiredError (비대화형 모드에서 대화형 인증 필요, exit 2)
    │   ├── MfaExhaustedError (MFA 재시도 소진, exit 3)
    │   ├── AuthFailedError
    │   └── TransientNetworkError (재시도 소진 후에만 노출)
    ├── UserCancelledError (인증 중 사용자 취소, exit 4)
    ├── ExecutableNotFoundError (래핑 대상 실행 파일 없음, exit 127)
    └── CacheCorruptionError (캐시 손상 - 내부에서 복구, 사용자에게 노출 안 됨)

Note:
    메시지에는 프로파일 이름, 마스킹된 ARN 같은 식별자만 포함합니다.
    MFA 코드, 시크릿 키, 세션 토큰은 절대 포함하지 않습니다.

Usage:
    from awx.core.exceptions import AuthRequiredError

    raise AuthRequiredError(
        profile="prod",
        command="aws sso login --profile prod",
    )
"""

from __future__ import annotations

import re
from typing import Any

from awx.i18n import get_text

# =============================================================================
# 종료 코드
# =============================================================================

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_AUTH_REQUIRED = 2
EXIT_MFA_EXHAUSTED = 3
EXIT_CANCELLED = 4
EXIT_NOT_FOUND = 127

_ARN_ACCOUNT_PATTERN = re.compile(r"^(arn:[^:]*:[^:]*:[^:]*:)(\d{12})(:.*)$")


def mask_arn(arn: str | None) -> str:
    """ARN의 계정 ID를 마스킹

    Args:
        arn: IAM ARN (예: arn:aws:iam::123456789012:role/Admin)

    Returns:
        계정 ID의 마지막 4자리만 남긴 ARN (예: arn:aws:iam::********9012:role/Admin)
    """
    if not arn:
        return ""
    match = _ARN_ACCOUNT_PATTERN.match(arn)
    if not match:
        return arn
    prefix, account, suffix = match.groups()
    return f"{prefix}{'*' * 8}{account[-4:]}{suffix}"


# =============================================================================
# 베이스 예외
# =============================================================================


class AwxError(Exception):
    """awx 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용, 사용자에게는 노출하지 않음)
        hint: 사용자 조치 안내 (옵션)
        exit_code: 프로세스 종료 코드
    """

    exit_code: int = EXIT_ERROR

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        hint: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.hint = hint

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "hint": self.hint,
            "exit_code": self.exit_code,
        }


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(AwxError):
    """설정 파일을 읽을 수 없거나 형식이 잘못된 경우"""

    def __init__(self, path: str, reason: str, cause: Exception | None = None):
        message = get_text(
            f"설정 파일 오류 [{path}]: {reason}",
            f"Configuration error [{path}]: {reason}",
        )
        super().__init__(message, cause)
        self.path = path
        self.reason = reason


# =============================================================================
# 프로파일 그래프 관련 예외
# =============================================================================


class ProfileError(AwxError):
    """프로파일 참조 관련 예외의 베이스"""

    exit_code = EXIT_AUTH_REQUIRED

    def __init__(self, profile: str, message: str, hint: str | None = None):
        super().__init__(message, hint=hint)
        self.profile = profile


class ProfileNotFoundError(ProfileError):
    """요청한 프로파일이 설정에 없는 경우"""

    def __init__(self, profile: str):
        super().__init__(
            profile,
            get_text(
                f"프로파일을 찾을 수 없습니다: {profile}",
                f"Profile not found: {profile}",
            ),
            hint=get_text(
                "awx --config 로 사용 가능한 프로파일을 확인하세요",
                "Run 'awx --config' to list available profiles",
            ),
        )


class MissingSourceProfileError(ProfileError):
    """source_profile이 없거나 존재하지 않는 프로파일을 참조하는 경우"""

    def __init__(self, profile: str, source_profile: str | None):
        if source_profile:
            message = get_text(
                f"프로파일 '{profile}'의 source_profile '{source_profile}'을(를) 찾을 수 없습니다",
                f"Profile '{profile}' references unknown source_profile '{source_profile}'",
            )
        else:
            message = get_text(
                f"프로파일 '{profile}'에 role_arn은 있지만 source_profile이 없습니다",
                f"Profile '{profile}' has role_arn but no source_profile",
            )
        super().__init__(profile, message)
        self.source_profile = source_profile


class CircularReferenceError(ProfileError):
    """source_profile 참조에 순환이 있는 경우

    Attributes:
        chain: 순환이 감지될 때까지 방문한 프로파일 이름 목록
    """

    def __init__(self, profile: str, chain: list[str]):
        path = " -> ".join(chain)
        super().__init__(
            profile,
            get_text(
                f"source_profile 순환 참조가 감지되었습니다: {path}",
                f"Circular source_profile reference detected: {path}",
            ),
        )
        self.chain = chain


class IncompleteProfileError(ProfileError):
    """인증에 필요한 속성이 프로파일에 없는 경우"""

    def __init__(self, profile: str, reason: str):
        super().__init__(
            profile,
            get_text(
                f"프로파일 '{profile}' 설정이 불완전합니다: {reason}",
                f"Profile '{profile}' is incomplete: {reason}",
            ),
        )
        self.reason = reason


# =============================================================================
# 인증 관련 예외
# =============================================================================


class AuthError(AwxError):
    """인증 관련 기본 에러 클래스"""

    def __init__(
        self,
        profile: str,
        message: str,
        cause: Exception | None = None,
        hint: str | None = None,
    ):
        super().__init__(message, cause, hint)
        self.profile = profile


class AuthRequiredError(AuthError):
    """대화형 인증이 필요하지만 비대화형 모드인 경우

    Attributes:
        command: 사용자가 직접 실행해야 하는 정확한 명령어
    """

    exit_code = EXIT_AUTH_REQUIRED

    def __init__(self, profile: str, command: str, reason: str = "SSO"):
        super().__init__(
            profile,
            get_text(
                f'프로파일 "{profile}"에 {reason} 인증이 필요합니다. 실행: {command}',
                f'{reason} login required for profile "{profile}". Run: {command}',
            ),
            hint=command,
        )
        self.command = command
        self.reason = reason


class MfaExhaustedError(AuthError):
    """MFA 코드 입력 재시도를 모두 소진한 경우"""

    exit_code = EXIT_MFA_EXHAUSTED

    def __init__(self, profile: str, attempts: int):
        super().__init__(
            profile,
            get_text(
                f"프로파일 '{profile}': MFA 인증 {attempts}회 모두 실패했습니다",
                f"Profile '{profile}': MFA failed after {attempts} attempts",
            ),
        )
        self.attempts = attempts


class AuthFailedError(AuthError):
    """외부 인증 호출이 재시도 불가능한 이유로 실패한 경우

    원인 예외의 원문은 메시지에 포함하지 않고 에러 코드만 노출합니다.
    """

    def __init__(
        self,
        profile: str,
        operation: str,
        error_code: str | None = None,
        cause: Exception | None = None,
        hint: str | None = None,
    ):
        detail = f" ({error_code})" if error_code else ""
        super().__init__(
            profile,
            get_text(
                f"프로파일 '{profile}' 인증 실패 [{operation}]{detail}",
                f"Authentication failed for profile '{profile}' [{operation}]{detail}",
            ),
            cause,
            hint,
        )
        self.operation = operation
        self.error_code = error_code


class TransientNetworkError(AuthError):
    """네트워크/타임아웃 오류가 재시도 후에도 해소되지 않은 경우"""

    def __init__(self, profile: str, operation: str, attempts: int, cause: Exception | None = None):
        super().__init__(
            profile,
            get_text(
                f"프로파일 '{profile}' [{operation}] 네트워크 오류 ({attempts}회 시도)",
                f"Network error for profile '{profile}' [{operation}] after {attempts} attempts",
            ),
            cause,
            hint=get_text(
                "네트워크 연결을 확인한 뒤 다시 시도하세요",
                "Check your network connection and try again",
            ),
        )
        self.operation = operation
        self.attempts = attempts


# =============================================================================
# 실행/취소 관련 예외
# =============================================================================


class UserCancelledError(AwxError):
    """인증 진행 중 사용자가 취소한 경우 (자식 프로세스는 실행되지 않음)"""

    exit_code = EXIT_CANCELLED

    def __init__(self, step: str = "auth"):
        super().__init__(get_text("사용자가 취소했습니다", "Cancelled by user"))
        self.step = step


class ExecutableNotFoundError(AwxError):
    """래핑 대상 실행 파일을 PATH에서 찾을 수 없는 경우"""

    exit_code = EXIT_NOT_FOUND

    def __init__(self, executable: str):
        super().__init__(
            get_text(
                f"실행 파일을 찾을 수 없습니다: {executable}",
                f"Executable not found: {executable}",
            ),
            hint=get_text(
                "AWS CLI v2를 설치하고 PATH에 'aws'가 있는지 확인하세요",
                "Install AWS CLI v2 and make sure 'aws' is on PATH",
            ),
        )
        self.executable = executable


class CacheCorruptionError(AwxError):
    """캐시 항목을 복호화/파싱할 수 없는 경우

    SessionCache 내부에서만 발생하고 처리됩니다. 항목은 삭제되고
    캐시 미스로 취급되어 정상 재인증이 진행됩니다.
    """

    def __init__(self, profile: str, cause: Exception | None = None):
        super().__init__(
            get_text(
                f"프로파일 '{profile}'의 캐시 항목이 손상되어 삭제합니다",
                f"Discarding corrupted cache entry for profile '{profile}'",
            ),
            cause,
        )
        self.profile = profile

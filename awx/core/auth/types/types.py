# awx/core/auth/types/types.py
"""
awx/core/auth/types/types.py - 인증 엔진의 핵심 타입 정의

이 모듈은 인증 시스템 전체에서 사용되는 기본 타입들을 정의합니다.

포함 항목:
    - Capability: 프로파일이 제공하는 인증 능력 태그 (SSO, ASSUME_ROLE, MFA, STATIC)
    - CredentialSet: 해석된 자격증명 (불변 값 객체)
    - Prompter: 대화형 입력 능력 추상 클래스 (ABC)
    - ResolutionContext: 호출 1회 동안만 유지되는 해석 컨텍스트
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Capability Enum
# =============================================================================


class Capability(Enum):
    """프로파일의 인증 능력 태그

    하나의 프로파일은 여러 태그를 동시에 가질 수 있습니다.
    태그는 프로파일에 존재하는 속성만으로 결정됩니다.

    - SSO: sso_start_url / sso_region / sso_session 중 하나라도 존재
    - ASSUME_ROLE: role_arn 존재
    - MFA: mfa_serial 존재
    - STATIC: aws_access_key_id와 aws_secret_access_key 모두 존재
    """

    SSO = "SSO"
    ASSUME_ROLE = "ROLE"
    MFA = "MFA"
    STATIC = "STATIC"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Credential Set
# =============================================================================


def utc_now() -> datetime:
    """현재 UTC 시각 (테스트에서 패치 가능하도록 분리)"""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CredentialSet:
    """해석된 AWS 자격증명

    정적 자격증명은 expiration이 None이며 만료되지 않습니다.
    임시 자격증명(SSO, STS 발급)은 항상 expiration을 가집니다.

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰 (임시 자격증명만)
        expiration: 만료 시각 (UTC, None이면 만료 없음)
        region: 최종 적용 리전 (옵션)
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None
    region: str | None = None

    def __post_init__(self):
        if self.expiration is not None and self.expiration.tzinfo is None:
            # naive datetime은 UTC로 간주
            object.__setattr__(self, "expiration", self.expiration.replace(tzinfo=timezone.utc))

    @property
    def is_temporary(self) -> bool:
        """세션 토큰이 있는 임시 자격증명 여부"""
        return self.session_token is not None

    def is_valid(self, now: datetime | None = None) -> bool:
        """자격증명이 아직 유효한지 확인

        만료 시각은 엄격하게 비교합니다 (expiration > now 일 때만 유효).
        clock skew 버퍼는 두지 않습니다.

        Args:
            now: 기준 시각 (None이면 현재 UTC)

        Returns:
            True if 유효
        """
        if self.expiration is None:
            return True
        if now is None:
            now = utc_now()
        return self.expiration > now

    def with_region(self, region: str | None) -> CredentialSet:
        """리전만 바꾼 새 CredentialSet 반환"""
        return replace(self, region=region)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (캐시 저장용, 리전은 호출마다 다시 계산하므로 제외)"""
        return {
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
            "SessionToken": self.session_token,
            "Expiration": self.expiration.isoformat() if self.expiration else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialSet:
        """딕셔너리에서 생성 (캐시 로드용)

        Raises:
            KeyError: 필수 키 누락 시
            ValueError: 만료 시각 형식 오류 시
        """
        expiration_raw = data.get("Expiration")
        expiration = datetime.fromisoformat(expiration_raw) if expiration_raw else None
        access_key_id = data["AccessKeyId"]
        secret_access_key = data["SecretAccessKey"]
        if not access_key_id or not secret_access_key:
            raise ValueError("empty credential fields")
        return cls(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=data.get("SessionToken"),
            expiration=expiration,
        )

    @classmethod
    def from_sts_response(cls, credentials: dict[str, Any]) -> CredentialSet:
        """STS 응답의 Credentials 블록에서 생성

        boto3는 Expiration을 datetime으로, CLI JSON은 ISO 문자열로 반환합니다.
        """
        expiration = credentials.get("Expiration")
        if isinstance(expiration, str):
            expiration = datetime.fromisoformat(expiration.replace("Z", "+00:00"))
        return cls(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials.get("SessionToken"),
            expiration=expiration,
        )


# =============================================================================
# Prompter Interface (Abstract Base Class)
# =============================================================================


class Prompter(ABC):
    """대화형 입력 능력

    모든 인증 Flow는 터미널 상태를 직접 조회하지 않고
    ResolutionContext에 주입된 Prompter만 사용합니다.
    사용자가 입력을 취소하면 구현체는 UserCancelledError를 발생시켜야 합니다.
    """

    @abstractmethod
    def secret(self, message: str) -> str:
        """에코 없이 값을 입력받습니다 (MFA 코드, 패스프레이즈)."""
        pass

    @abstractmethod
    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        """(표시 문자열, 값) 목록에서 하나를 선택받아 값을 반환합니다."""
        pass

    @abstractmethod
    def notify(self, message: str) -> None:
        """사용자에게 안내 메시지를 출력합니다."""
        pass


# =============================================================================
# Resolution Context
# =============================================================================


@dataclass
class ResolutionContext:
    """호출 1회 동안만 유지되는 해석 컨텍스트 (영속화하지 않음)

    Attributes:
        profile_name: 요청된 프로파일 이름
        interactive: 대화형 입력 허용 여부
        prompter: 대화형 입력 능력 (비대화형이면 None 가능)
        region_override: 명령 수준 --region 값
        env_region: 환경 변수 리전 (AWS_REGION / AWS_DEFAULT_REGION)
        session_name: AssumeRole 세션 이름 (호출마다 고유)
        mfa_attempts: 프로파일별 MFA 시도 횟수
        mfa_verified: 이번 호출에서 이미 코드 검증을 마친 MFA 디바이스 ARN
        external_calls: 외부 호출 시도 횟수 (작업명 기준)
    """

    profile_name: str
    interactive: bool = True
    prompter: Prompter | None = None
    region_override: str | None = None
    env_region: str | None = None
    session_name: str = field(default_factory=lambda: f"awx-{int(utc_now().timestamp())}")
    mfa_attempts: dict[str, int] = field(default_factory=dict)
    mfa_verified: set[str] = field(default_factory=set)
    external_calls: dict[str, int] = field(default_factory=dict)

    @property
    def can_prompt(self) -> bool:
        """프롬프트 가능 여부"""
        return self.interactive and self.prompter is not None

    def record_call(self, operation: str) -> int:
        """외부 호출 시도 횟수 기록 후 누적 값 반환"""
        self.external_calls[operation] = self.external_calls.get(operation, 0) + 1
        return self.external_calls[operation]

# awx/core/auth/config/loader.py
"""
AWS 설정 파일 로더 (Profile Store)

~/.aws/config 와 ~/.aws/credentials 를 파싱하여 이름별 프로파일 매핑을 만들고,
각 프로파일이 제공하는 인증 능력(Capability)을 분류합니다.

- 파일이 없으면 빈 설정으로 취급합니다.
- 파일을 읽을 수 없거나 INI 문법이 깨졌으면 ConfigError (치명적).
- 개별 프로파일 값이 잘못된 경우 해당 프로파일만 경고 후 건너뜁니다.

로드된 매핑은 프로세스 수명 동안 읽기 전용으로 사용됩니다.
"""

from __future__ import annotations

import configparser
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from awx.core.exceptions import (
    CircularReferenceError,
    ConfigError,
    MissingSourceProfileError,
    ProfileNotFoundError,
)
from awx.i18n import get_text

from ..types import Capability

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "default"

_PROFILE_PREFIX = "profile "
_SSO_SESSION_PREFIX = "sso-session "
_ARN_PATTERN = re.compile(r"^arn:[a-z0-9-]+:[a-z0-9-]+:[a-z0-9-]*:\d{12}:.+$")

# config 파일에서 읽는 키 (credentials 파일 키는 아래 _CREDENTIAL_KEYS)
_CONFIG_KEYS = (
    "region",
    "sso_start_url",
    "sso_region",
    "sso_session",
    "sso_account_id",
    "sso_role_name",
    "role_arn",
    "source_profile",
    "external_id",
    "role_session_name",
    "mfa_serial",
)
_CREDENTIAL_KEYS = (
    "aws_access_key_id",
    "aws_secret_access_key",
    "aws_session_token",
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class AWSSession:
    """[sso-session NAME] 섹션

    Attributes:
        name: 세션 이름
        start_url: SSO 시작 URL
        region: SSO 리전
    """

    name: str
    start_url: str
    region: str

    def __post_init__(self):
        if not self.start_url:
            raise ValueError(f"sso-session '{self.name}': sso_start_url 누락")
        if not self.region:
            raise ValueError(f"sso-session '{self.name}': sso_region 누락")


@dataclass
class AWSProfile:
    """AWS 프로파일 (모든 속성은 옵션)

    Attributes:
        name: 프로파일 이름 (고유)
        region: 기본 리전
        sso_*: SSO 관련 설정
        role_arn / source_profile / external_id / duration_seconds / role_session_name:
            AssumeRole 관련 설정
        mfa_serial: MFA 디바이스 ARN
        aws_access_key_id / aws_secret_access_key / aws_session_token: 정적 자격증명
    """

    name: str
    region: str | None = None
    sso_start_url: str | None = None
    sso_region: str | None = None
    sso_session: str | None = None
    sso_account_id: str | None = None
    sso_role_name: str | None = None
    role_arn: str | None = None
    source_profile: str | None = None
    external_id: str | None = None
    duration_seconds: int | None = None
    role_session_name: str | None = None
    mfa_serial: str | None = None
    aws_access_key_id: str | None = field(default=None, repr=False)
    aws_secret_access_key: str | None = field(default=None, repr=False)
    aws_session_token: str | None = field(default=None, repr=False)

    def __post_init__(self):
        """값 유효성 검사

        Raises:
            ValueError: role_arn 형식 오류 또는 duration_seconds 범위 오류
        """
        if self.role_arn is not None and not _ARN_PATTERN.match(self.role_arn):
            raise ValueError(f"role_arn 형식이 올바르지 않습니다 (profile={self.name})")
        if self.duration_seconds is not None and self.duration_seconds <= 0:
            raise ValueError(f"duration_seconds는 양수여야 합니다 (profile={self.name})")

    @property
    def capabilities(self) -> frozenset[Capability]:
        """프로파일의 인증 능력 태그"""
        return classify(self)


@dataclass
class ParsedConfig:
    """파싱된 설정 전체

    Attributes:
        sessions: {이름: AWSSession}
        profiles: {이름: AWSProfile}
        default_profile: 'default' 프로파일이 있으면 그 이름
        config_path / credentials_path: 읽은 파일 경로
    """

    sessions: dict[str, AWSSession] = field(default_factory=dict)
    profiles: dict[str, AWSProfile] = field(default_factory=dict)
    default_profile: str | None = None
    config_path: str | None = None
    credentials_path: str | None = None


# =============================================================================
# Classification / Graph
# =============================================================================


def classify(profile: AWSProfile) -> frozenset[Capability]:
    """존재하는 속성만으로 Capability 태그 집합을 계산 (순수 함수)"""
    tags: set[Capability] = set()
    if profile.sso_start_url or profile.sso_region or profile.sso_session:
        tags.add(Capability.SSO)
    if profile.role_arn:
        tags.add(Capability.ASSUME_ROLE)
    if profile.mfa_serial:
        tags.add(Capability.MFA)
    if profile.aws_access_key_id and profile.aws_secret_access_key:
        tags.add(Capability.STATIC)
    return frozenset(tags)


def profile_badges(profile: AWSProfile) -> list[str]:
    """--config 출력용 배지 목록 (default, SSO, ROLE, MFA, STATIC 순)"""
    tags = classify(profile)
    badges = []
    if profile.name == DEFAULT_PROFILE_NAME:
        badges.append("default")
    for tag in (Capability.SSO, Capability.ASSUME_ROLE, Capability.MFA, Capability.STATIC):
        if tag in tags:
            badges.append(tag.value)
    return badges


def resolve_chain(profiles: Mapping[str, AWSProfile], name: str) -> list[AWSProfile]:
    """source_profile 참조를 따라 base → 요청 프로파일 순서의 목록을 반환

    visited 집합을 사용하는 반복 탐색이므로 순환이 있어도 무한 루프에 빠지지 않습니다.

    Args:
        profiles: 프로파일 매핑
        name: 요청 프로파일 이름

    Returns:
        [base, ..., requested] 프로파일 목록

    Raises:
        ProfileNotFoundError: 요청 프로파일이 없을 때
        MissingSourceProfileError: 참조된 source_profile이 없을 때
        CircularReferenceError: 순환 참조가 있을 때
    """
    if name not in profiles:
        raise ProfileNotFoundError(name)

    chain: list[AWSProfile] = []
    visited: set[str] = set()
    current = name
    referrer: str | None = None

    while True:
        if current in visited:
            raise CircularReferenceError(name, [p.name for p in chain] + [current])
        visited.add(current)

        profile = profiles.get(current)
        if profile is None:
            raise MissingSourceProfileError(referrer or name, current)
        chain.append(profile)

        if Capability.ASSUME_ROLE not in classify(profile):
            break
        if not profile.source_profile:
            raise MissingSourceProfileError(profile.name, None)

        referrer = profile.name
        current = profile.source_profile

    chain.reverse()
    return chain


def resolve_profile_name(explicit: str | None, environ: Mapping[str, str] | None = None) -> str:
    """사용할 프로파일 이름 결정

    우선순위: 명시적 요청 > AWS_PROFILE > AWS_DEFAULT_PROFILE > "default"
    """
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    return env.get("AWS_PROFILE") or env.get("AWS_DEFAULT_PROFILE") or DEFAULT_PROFILE_NAME


# =============================================================================
# Loader
# =============================================================================


class Loader:
    """AWS 설정 파일 로더

    Example:
        loader = Loader()
        parsed = loader.load()
        for name, profile in parsed.profiles.items():
            print(name, sorted(t.value for t in profile.capabilities))
    """

    def __init__(
        self,
        config_path: str | None = None,
        credentials_path: str | None = None,
    ):
        """Loader 초기화

        Args:
            config_path: config 파일 경로 (기본: $AWS_CONFIG_FILE 또는 ~/.aws/config)
            credentials_path: credentials 파일 경로
                (기본: $AWS_SHARED_CREDENTIALS_FILE 또는 ~/.aws/credentials)
        """
        home = Path.home()
        if config_path is None:
            config_path = os.environ.get("AWS_CONFIG_FILE")
        if credentials_path is None:
            credentials_path = os.environ.get("AWS_SHARED_CREDENTIALS_FILE")

        self.config_path = Path(config_path).expanduser() if config_path else home / ".aws" / "config"
        self.credentials_path = (
            Path(credentials_path).expanduser() if credentials_path else home / ".aws" / "credentials"
        )
        self._config: ParsedConfig | None = None

    def load(self) -> ParsedConfig:
        """설정 파일을 읽어 ParsedConfig 반환

        Raises:
            ConfigError: 파일을 읽을 수 없거나 INI 형식이 잘못된 경우
        """
        config_sections = self._read_ini(self.config_path)
        credential_sections = self._read_ini(self.credentials_path)

        sessions = self._parse_sessions(config_sections)
        raw_profiles: dict[str, dict[str, str]] = {}

        for section, values in config_sections.items():
            if section.startswith(_SSO_SESSION_PREFIX):
                continue
            if section.startswith(_PROFILE_PREFIX):
                name = section[len(_PROFILE_PREFIX) :].strip()
            else:
                name = section.strip()
            if not name:
                continue
            target = raw_profiles.setdefault(name, {})
            target.update({k: v for k, v in values.items() if k in _CONFIG_KEYS or k == "duration_seconds"})

        # credentials 파일 값이 config 값보다 우선
        for section, values in credential_sections.items():
            name = section.strip()
            if not name:
                continue
            target = raw_profiles.setdefault(name, {})
            target.update({k: v for k, v in values.items() if k in _CREDENTIAL_KEYS or k == "region"})

        profiles: dict[str, AWSProfile] = {}
        for name, values in raw_profiles.items():
            profile = self._build_profile(name, values, sessions)
            if profile is not None:
                profiles[name] = profile

        self._config = ParsedConfig(
            sessions=sessions,
            profiles=profiles,
            default_profile=DEFAULT_PROFILE_NAME if DEFAULT_PROFILE_NAME in profiles else None,
            config_path=str(self.config_path),
            credentials_path=str(self.credentials_path),
        )
        logger.debug("프로파일 %d개, SSO 세션 %d개 로드", len(profiles), len(sessions))
        return self._config

    @property
    def config(self) -> ParsedConfig:
        """로드된 설정 (아직 로드 전이면 로드)"""
        if self._config is None:
            return self.load()
        return self._config

    def list_profiles(self) -> list[str]:
        """프로파일 이름 목록 (정렬)"""
        return sorted(self.config.profiles)

    # -------------------------------------------------------------------------
    # 내부 구현
    # -------------------------------------------------------------------------

    @staticmethod
    def _read_ini(path: Path) -> dict[str, dict[str, str]]:
        """INI 파일을 {section: {key: value}} 로 읽기 (파일이 없으면 빈 dict)"""
        if not path.exists():
            return {}

        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            default_section="__awx_no_default__",
        )
        try:
            with open(path, encoding="utf-8") as f:
                parser.read_file(f, source=str(path))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(str(path), get_text("파일을 읽을 수 없습니다", "cannot read file"), cause=e) from e
        except configparser.Error as e:
            raise ConfigError(str(path), get_text("INI 형식이 올바르지 않습니다", "invalid INI format"), cause=e) from e

        return {section: dict(parser.items(section)) for section in parser.sections()}

    @staticmethod
    def _parse_sessions(sections: dict[str, dict[str, str]]) -> dict[str, AWSSession]:
        sessions: dict[str, AWSSession] = {}
        for section, values in sections.items():
            if not section.startswith(_SSO_SESSION_PREFIX):
                continue
            name = section[len(_SSO_SESSION_PREFIX) :].strip()
            try:
                sessions[name] = AWSSession(
                    name=name,
                    start_url=values.get("sso_start_url", ""),
                    region=values.get("sso_region", ""),
                )
            except ValueError as e:
                logger.warning("잘못된 sso-session을 건너뜁니다: %s", e)
        return sessions

    @staticmethod
    def _build_profile(
        name: str,
        values: dict[str, str],
        sessions: dict[str, AWSSession],
    ) -> AWSProfile | None:
        """원시 값으로 AWSProfile 생성 (잘못된 프로파일은 경고 후 None)"""
        known = {f.name for f in fields(AWSProfile)}
        kwargs: dict[str, object] = {k: v for k, v in values.items() if k in known and v != ""}

        try:
            if "duration_seconds" in kwargs:
                kwargs["duration_seconds"] = int(str(kwargs["duration_seconds"]))

            session_name = kwargs.get("sso_session")
            if isinstance(session_name, str) and session_name in sessions:
                session = sessions[session_name]
                kwargs.setdefault("sso_start_url", session.start_url)
                kwargs.setdefault("sso_region", session.region)

            return AWSProfile(name=name, **kwargs)  # type: ignore[arg-type]
        except ValueError as e:
            logger.warning("잘못된 프로파일 '%s'을(를) 건너뜁니다: %s", name, e)
            return None


# =============================================================================
# 모듈 레벨 편의 함수
# =============================================================================


def load_config(
    config_path: str | None = None,
    credentials_path: str | None = None,
) -> ParsedConfig:
    """설정 파일 로드 편의 함수"""
    return Loader(config_path, credentials_path).load()


def list_profiles(
    config_path: str | None = None,
    credentials_path: str | None = None,
) -> list[str]:
    """프로파일 이름 목록 편의 함수"""
    return Loader(config_path, credentials_path).list_profiles()

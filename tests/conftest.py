"""
tests/conftest.py - pytest 공통 픽스처

테스트마다 AWS/awx 환경 변수를 격리하고, 임시 AWS 설정 파일과
가짜 Prompter, Mock 게이트웨이를 제공합니다.

Usage:
    def test_something(aws_files, fake_prompter, mock_gateway):
        aws_files.config("[profile prod]\\nregion = us-east-1\\n")
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from awx.core.auth.provider.client import AwsGateway
from awx.core.auth.types import CredentialSet, Prompter
from awx.core.exceptions import UserCancelledError
from awx.i18n import set_lang

# =============================================================================
# 환경 설정
# =============================================================================

_ISOLATED_ENV_VARS = (
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWX_NO_INTERACTIVE",
    "AWX_CACHE",
    "AWX_CACHE_STATIC",
    "AWX_CACHE_PASSPHRASE",
    "AWX_CACHE_DIR",
    "AWX_CONNECT_TIMEOUT",
    "AWX_READ_TIMEOUT",
    "AWX_AWS_BINARY",
    "AWX_LANG",
)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """테스트 환경 격리 (실제 ~/.aws 와 환경 변수를 읽지 않도록)"""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    aws_dir = tmp_path / ".aws"
    monkeypatch.setenv("AWS_CONFIG_FILE", str(aws_dir / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(aws_dir / "credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    monkeypatch.setenv("AWX_CACHE_DIR", str(tmp_path / "awx-cache"))
    set_lang("ko")

    yield

    set_lang("ko")


# =============================================================================
# AWS 설정 파일
# =============================================================================


@dataclass
class AwsFiles:
    """임시 ~/.aws/config, ~/.aws/credentials 작성 헬퍼"""

    config_path: Path
    credentials_path: Path

    def config(self, text: str) -> Path:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(text, encoding="utf-8")
        return self.config_path

    def credentials(self, text: str) -> Path:
        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        self.credentials_path.write_text(text, encoding="utf-8")
        return self.credentials_path


@pytest.fixture
def aws_files(tmp_path) -> AwsFiles:
    """setup_test_environment가 가리키는 경로에 설정 파일 작성"""
    aws_dir = tmp_path / ".aws"
    return AwsFiles(config_path=aws_dir / "config", credentials_path=aws_dir / "credentials")


# =============================================================================
# Prompter / Gateway
# =============================================================================


@dataclass
class FakePrompter(Prompter):
    """미리 정한 입력을 순서대로 반환하는 Prompter

    secrets 값이 None이면 사용자가 취소한 것으로 처리합니다.
    """

    secrets: list[str | None] = field(default_factory=list)
    selection: str | None = None
    prompts: list[str] = field(default_factory=list)
    notifications: list[str] = field(default_factory=list)

    def secret(self, message: str) -> str:
        self.prompts.append(message)
        if not self.secrets:
            raise AssertionError(f"unexpected prompt: {message}")
        value = self.secrets.pop(0)
        if value is None:
            raise UserCancelledError("prompt")
        return value

    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        self.prompts.append(message)
        if self.selection is None:
            return choices[0][1]
        return self.selection

    def notify(self, message: str) -> None:
        self.notifications.append(message)


@pytest.fixture
def fake_prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def mock_gateway() -> MagicMock:
    """AwsGateway Mock (sso_login_command는 실제 명령 형식 반환)"""
    gateway = MagicMock(spec=AwsGateway)
    gateway.sso_login_command.side_effect = lambda name: ["aws", "sso", "login", "--profile", name]
    return gateway


# =============================================================================
# 자격증명 헬퍼
# =============================================================================


def make_credentials(
    prefix: str = "ASIA",
    minutes: int | None = 60,
    session_token: str | None = "token",
    region: str | None = None,
) -> CredentialSet:
    """테스트용 CredentialSet 생성 (minutes=None이면 만료 없음)"""
    expiration = None
    if minutes is not None:
        expiration = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return CredentialSet(
        access_key_id=f"{prefix}TESTKEY",
        secret_access_key=f"{prefix}-secret",
        session_token=session_token,
        expiration=expiration,
        region=region,
    )


@pytest.fixture
def creds_factory():
    """make_credentials 픽스처 버전"""
    return make_credentials

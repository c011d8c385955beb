# tests/test_core_config.py
"""
awx/core/config.py, awx/core/exceptions.py, awx/i18n 단위 테스트
"""

from pathlib import Path

import pytest

from awx.core.config import Settings, get_version
from awx.core.exceptions import (
    EXIT_AUTH_REQUIRED,
    EXIT_CANCELLED,
    EXIT_ERROR,
    EXIT_MFA_EXHAUSTED,
    EXIT_NOT_FOUND,
    AuthFailedError,
    AuthRequiredError,
    ExecutableNotFoundError,
    IncompleteProfileError,
    MfaExhaustedError,
    ProfileNotFoundError,
    TransientNetworkError,
    UserCancelledError,
    mask_arn,
)
from awx.i18n import get_text, normalize_lang, set_lang, t


class TestSettings:
    """Settings.from_env 테스트"""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.interactive is True
        assert settings.cache_enabled is False
        assert settings.cache_static is True
        assert settings.cache_passphrase is None
        assert settings.connect_timeout == 5.0
        assert settings.aws_binary == "aws"
        assert settings.cache_dir == Path.home() / ".awx" / "cache"

    def test_from_env_values(self, tmp_path):
        settings = Settings.from_env(
            {
                "AWX_NO_INTERACTIVE": "1",
                "AWX_CACHE": "yes",
                "AWX_CACHE_STATIC": "0",
                "AWX_CACHE_PASSPHRASE": "hunter2",
                "AWX_CACHE_DIR": str(tmp_path),
                "AWX_CONNECT_TIMEOUT": "2.5",
                "AWX_READ_TIMEOUT": "-1",
                "AWX_AWS_BINARY": "aws2",
                "AWX_LANG": "EN",
            }
        )

        assert settings.interactive is False
        assert settings.cache_enabled is True
        assert settings.cache_static is False
        assert settings.cache_dir == tmp_path
        assert settings.connect_timeout == 2.5
        assert settings.read_timeout == 10.0  # 양수가 아니면 기본값
        assert settings.aws_binary == "aws2"
        assert settings.lang == "en"

    def test_repr_masks_passphrase(self):
        settings = Settings(cache_passphrase="hunter2")
        assert "hunter2" not in repr(settings)

    def test_version(self):
        assert get_version() == "0.3.0"


class TestExceptions:
    """예외 종료 코드와 메시지 테스트"""

    def test_exit_codes(self):
        assert ProfileNotFoundError("x").exit_code == EXIT_AUTH_REQUIRED
        assert IncompleteProfileError("x", "r").exit_code == EXIT_AUTH_REQUIRED
        assert AuthRequiredError("x", "aws sso login --profile x").exit_code == EXIT_AUTH_REQUIRED
        assert MfaExhaustedError("x", 3).exit_code == EXIT_MFA_EXHAUSTED
        assert AuthFailedError("x", "sts:AssumeRole").exit_code == EXIT_ERROR
        assert TransientNetworkError("x", "sts:AssumeRole", 3).exit_code == EXIT_ERROR
        assert UserCancelledError().exit_code == EXIT_CANCELLED
        assert ExecutableNotFoundError("aws").exit_code == EXIT_NOT_FOUND

    def test_auth_required_message_has_command(self):
        error = AuthRequiredError("prod", "aws sso login --profile prod")

        assert "aws sso login --profile prod" in str(error)
        assert error.command == "aws sso login --profile prod"

    def test_english_messages(self):
        set_lang("en")
        error = AuthRequiredError("prod", "aws sso login --profile prod")
        assert str(error) == 'SSO login required for profile "prod". Run: aws sso login --profile prod'

    def test_mask_arn(self):
        assert mask_arn("arn:aws:iam::123456789012:role/Admin") == "arn:aws:iam::********9012:role/Admin"
        assert mask_arn("not-an-arn") == "not-an-arn"
        assert mask_arn(None) == ""

    def test_to_dict(self):
        data = MfaExhaustedError("prod", 3).to_dict()
        assert data["error_type"] == "MfaExhaustedError"
        assert data["exit_code"] == EXIT_MFA_EXHAUSTED


class TestI18n:
    """메시지 번역 테스트"""

    def test_default_korean(self):
        assert t("cli.no_command") == "실행할 AWS 명령이 없습니다. 예: awx s3 ls"

    def test_english_and_format(self):
        set_lang("en")
        assert t("cache.cleared", count=2, target="all") == "Cleared 2 cache entries (all)"

    def test_unknown_key_and_lang(self):
        set_lang("fr")
        assert t("does.not.exist") == "does.not.exist"
        assert get_text("가", "a") == "가"

    @pytest.mark.parametrize(
        "raw,expected",
        [("en_US.UTF-8", "en"), ("EN", "en"), ("ko-KR", "ko"), ("", "ko"), (None, "ko"), ("fr", "ko")],
    )
    def test_normalize_lang(self, raw, expected):
        assert normalize_lang(raw) == expected

    def test_missing_format_argument_returns_template(self):
        assert "{target}" in t("cache.cleared", count=1)

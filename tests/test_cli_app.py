# tests/test_cli_app.py
"""
awx/cli/app.py 단위 테스트

CliRunner로 옵션 라우팅, 종료 코드, 안내 메시지를 검증합니다.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError
from click.testing import CliRunner

from awx.cli.app import VERSION, cli, clear_cache, select_profile_name, show_profiles
from awx.core.auth.cache import EncryptedFileStore
from awx.core.auth.config import AWSProfile
from awx.core.auth.provider import AwsGateway
from awx.core.config import Settings

SSO_CONFIG = "[profile prod]\nsso_session = corp\nsso_account_id = 111122223333\nsso_role_name = Admin\n"
STATIC_CONFIG = "[profile dev]\nregion = eu-west-1\n"
STATIC_CREDENTIALS = "[dev]\naws_access_key_id = AKIADEV\naws_secret_access_key = dev-secret\n"


@pytest.fixture
def runner():
    """Click CliRunner fixture"""
    return CliRunner()


@pytest.fixture
def no_keyring():
    """실제 시스템 keyring을 건드리지 않도록 사용 불가 백엔드로 교체"""
    fake = MagicMock()
    fake.get_keyring.return_value = MagicMock(priority=0)
    with patch("awx.core.auth.cache.cache.keyring", fake):
        yield fake


# =============================================================================
# 기본 옵션
# =============================================================================


class TestCliOptions:
    """옵션 라우팅 테스트"""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert VERSION in result.output

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "--profile" in result.output
        assert "--clear-cache" in result.output

    def test_config_lists_profiles(self, runner, aws_files):
        aws_files.config(SSO_CONFIG + STATIC_CONFIG)
        aws_files.credentials(STATIC_CREDENTIALS)

        result = runner.invoke(cli, ["--config"])

        assert result.exit_code == 0
        assert "prod" in result.output
        assert "[SSO]" in result.output
        assert "[STATIC]" in result.output

    def test_help_follows_awx_lang(self, runner):
        """AWX_LANG=en이면 옵션 도움말도 영어"""
        result = runner.invoke(cli, ["--help"], env={"AWX_LANG": "en"})

        assert result.exit_code == 0
        assert "AWS profile to use" in result.output
        assert "사용할 AWS 프로파일" not in result.output

    def test_help_defaults_to_korean(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert "사용할 AWS 프로파일" in result.output
        assert "cli.opt_profile" not in result.output

    def test_config_table_goes_to_stdout(self, aws_files, capsys):
        aws_files.config(SSO_CONFIG + STATIC_CONFIG)
        aws_files.credentials(STATIC_CREDENTIALS)

        assert show_profiles() == 0

        captured = capsys.readouterr()
        assert "prod" in captured.out
        assert "[SSO]" in captured.out
        assert "prod" not in captured.err

    def test_config_without_profiles(self, runner):
        result = runner.invoke(cli, ["--config"])

        assert result.exit_code == 0

    @pytest.mark.parametrize("args,target", [(["--clear-cache"], "all"), (["--clear-cache", "prod"], "prod")])
    def test_clear_cache_routing(self, runner, args, target):
        with patch("awx.cli.app.clear_cache", return_value=0) as mock_clear:
            result = runner.invoke(cli, args)

        assert result.exit_code == 0
        assert mock_clear.call_args.args[1] == target

    def test_aws_args_passed_through(self, runner):
        with patch("awx.cli.app.run", return_value=0) as mock_run:
            result = runner.invoke(cli, ["-p", "prod", "ec2", "describe-vpcs", "--region", "us-west-2", "-v"])

        assert result.exit_code == 0
        settings, profile, aws_args = mock_run.call_args.args
        assert profile == "prod"
        assert aws_args == ["ec2", "describe-vpcs", "--region", "us-west-2", "-v"]
        # CliRunner stdin은 터미널이 아니므로 비대화형
        assert settings.interactive is False

    def test_child_exit_code_mirrored(self, runner):
        with patch("awx.cli.app.run", return_value=42):
            result = runner.invoke(cli, ["s3", "ls"])

        assert result.exit_code == 42

    def test_keyboard_interrupt_exit_4(self, runner):
        with patch("awx.cli.app.run", side_effect=KeyboardInterrupt):
            result = runner.invoke(cli, ["s3", "ls"])

        assert result.exit_code == 4


# =============================================================================
# 실행 흐름
# =============================================================================


class TestRun:
    """run() 통합 흐름 테스트 (설정 파일 + Mock STS)"""

    def test_unknown_profile_exit_2(self, runner, aws_files):
        aws_files.config(STATIC_CONFIG)

        result = runner.invoke(cli, ["-n", "-p", "ghost"])

        assert result.exit_code == 2
        assert "ghost" in result.output

    def test_static_without_command(self, runner, aws_files):
        aws_files.config(STATIC_CONFIG)
        aws_files.credentials(STATIC_CREDENTIALS)

        result = runner.invoke(cli, ["-p", "dev"])

        assert result.exit_code == 0
        assert "awx s3 ls" in result.output

    def test_sso_non_interactive_exit_2(self, runner, aws_files):
        aws_files.config(SSO_CONFIG)
        expired = ClientError({"Error": {"Code": "UnauthorizedSSOTokenError", "Message": "x"}}, "GetCallerIdentity")

        with (
            patch("awx.core.launcher.launcher.shutil.which", return_value="/usr/bin/aws"),
            patch.object(AwsGateway, "get_caller_identity", side_effect=expired),
            patch.object(AwsGateway, "sso_login") as mock_login,
        ):
            result = runner.invoke(cli, ["-n", "-p", "prod", "s3", "ls"])

        assert result.exit_code == 2
        assert "aws sso login --profile prod" in result.output
        mock_login.assert_not_called()

    def test_executable_not_found_exit_127(self, runner, aws_files):
        aws_files.config(STATIC_CONFIG)
        aws_files.credentials(STATIC_CREDENTIALS)

        result = runner.invoke(cli, ["-p", "dev", "s3", "ls"], env={"AWX_AWS_BINARY": "awx-test-no-such-binary"})

        assert result.exit_code == 127

    def test_runs_child_with_credentials(self, runner, aws_files, tmp_path):
        aws_files.config(STATIC_CONFIG)
        aws_files.credentials(STATIC_CREDENTIALS)
        script = tmp_path / "child.py"
        script.write_text(
            "import os, sys\n"
            "ok = os.environ['AWS_ACCESS_KEY_ID'] == 'AKIADEV' and os.environ['AWS_REGION'] == 'eu-west-1'\n"
            "sys.exit(7 if ok else 1)\n"
        )

        result = runner.invoke(cli, ["-p", "dev", str(script)], env={"AWX_AWS_BINARY": sys.executable})

        assert result.exit_code == 7


# =============================================================================
# 헬퍼 함수
# =============================================================================


class TestSelectProfileName:
    """select_profile_name 테스트"""

    @pytest.fixture
    def profiles(self):
        return {
            "prod": AWSProfile(name="prod", sso_session="corp"),
            "default": AWSProfile(name="default", aws_access_key_id="A", aws_secret_access_key="S"),
        }

    def test_explicit(self, profiles, fake_prompter):
        assert select_profile_name("prod", profiles, {}, fake_prompter) == "prod"
        assert fake_prompter.prompts == []

    def test_env_profile_skips_prompt(self, profiles, fake_prompter):
        assert select_profile_name(None, profiles, {"AWS_PROFILE": "prod"}, fake_prompter) == "prod"
        assert fake_prompter.prompts == []

    def test_non_interactive_default(self, profiles):
        assert select_profile_name(None, profiles, {}, None) == "default"

    def test_interactive_selection(self, profiles, fake_prompter):
        fake_prompter.selection = "prod"

        assert select_profile_name(None, profiles, {}, fake_prompter) == "prod"
        assert len(fake_prompter.prompts) == 1

    def test_default_listed_first(self, profiles, fake_prompter):
        """selection이 없으면 FakePrompter는 첫 항목을 고름"""
        assert select_profile_name(None, profiles, {}, fake_prompter) == "default"


class TestClearCache:
    """clear_cache 테스트"""

    def test_clear_all_files(self, tmp_path, no_keyring):
        store = EncryptedFileStore(tmp_path, lambda: "pw", iterations=1_000)
        store.save("a", {"version": 1})
        store.save("b", {"version": 1})

        assert clear_cache(Settings(cache_dir=tmp_path), "all") == 0
        assert store.profiles() == []

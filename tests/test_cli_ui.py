# tests/test_cli_ui.py
"""
awx/cli/ui, awx/cli/prompts 단위 테스트

콘솔 출력 헬퍼와 questionary Prompter 테스트.
"""

import importlib
import logging
from unittest.mock import patch

import pytest
from rich.console import Console
from rich.logging import RichHandler

from awx.cli.prompts import QuestionaryPrompter
from awx.core.exceptions import UserCancelledError

# =============================================================================
# Console 유틸리티 테스트
# =============================================================================


class TestConsoleUtilities:
    """콘솔 유틸리티 테스트"""

    def test_console_writes_to_stderr(self):
        from awx.cli.ui.console import get_console

        console = get_console()
        assert isinstance(console, Console)
        assert console.stderr is True

    def test_bracketed_text_not_swallowed(self):
        """[prod] 같은 텍스트가 Rich 마크업으로 해석되지 않음"""
        console_module = importlib.import_module("awx.cli.ui.console")

        recorder = Console(record=True, width=120)
        with patch.object(console_module, "console", recorder):
            console_module.print_info("profile [prod] ready")
            console_module.print_table("t", ["name"], [("[SSO]",)])

        text = recorder.export_text()
        assert "profile [prod] ready" in text
        assert "[SSO]" in text

    def test_setup_logging_installs_single_handler(self):
        from awx.cli.ui import setup_logging

        setup_logging(verbose=True)
        setup_logging(verbose=False)

        logger = logging.getLogger("awx")
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING


# =============================================================================
# QuestionaryPrompter 테스트
# =============================================================================


class TestQuestionaryPrompter:
    """questionary 기반 Prompter 테스트"""

    def test_secret(self):
        with patch("awx.cli.prompts.questionary.password") as mock_password:
            mock_password.return_value.unsafe_ask.return_value = "123456"
            assert QuestionaryPrompter().secret("MFA") == "123456"

    @pytest.mark.parametrize("outcome", [None, KeyboardInterrupt])
    def test_secret_cancelled(self, outcome):
        with patch("awx.cli.prompts.questionary.password") as mock_password:
            if outcome is None:
                mock_password.return_value.unsafe_ask.return_value = None
            else:
                mock_password.return_value.unsafe_ask.side_effect = outcome

            with pytest.raises(UserCancelledError) as exc_info:
                QuestionaryPrompter().secret("MFA")

        assert exc_info.value.exit_code == 4

    def test_select_returns_value(self):
        with patch("awx.cli.prompts.questionary.select") as mock_select:
            mock_select.return_value.unsafe_ask.return_value = "prod"

            assert QuestionaryPrompter().select("pick", [("prod [SSO]", "prod")]) == "prod"

        choices = mock_select.call_args.kwargs["choices"]
        assert [c.value for c in choices] == ["prod"]

    def test_select_cancelled(self):
        with patch("awx.cli.prompts.questionary.select") as mock_select:
            mock_select.return_value.unsafe_ask.side_effect = KeyboardInterrupt

            with pytest.raises(UserCancelledError):
                QuestionaryPrompter().select("pick", [("a", "a")])

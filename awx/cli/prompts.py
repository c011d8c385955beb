"""
awx/cli/prompts.py - questionary 기반 Prompter 구현

인증 Flow가 사용하는 대화형 입력(MFA 코드, 패스프레이즈, 프로파일 선택)을 제공합니다.
Ctrl-C 또는 ESC로 입력을 취소하면 UserCancelledError(exit 4)로 변환합니다.
"""

from __future__ import annotations

import questionary

from awx.core.auth.types import Prompter
from awx.core.exceptions import UserCancelledError

from .ui import print_info


class QuestionaryPrompter(Prompter):
    """터미널 Prompter"""

    def secret(self, message: str) -> str:
        try:
            value = questionary.password(message).unsafe_ask()
        except KeyboardInterrupt:
            raise UserCancelledError("prompt") from None
        if value is None:
            raise UserCancelledError("prompt")
        return str(value)

    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        options = [questionary.Choice(title=title, value=value) for title, value in choices]
        try:
            value = questionary.select(message, choices=options).unsafe_ask()
        except KeyboardInterrupt:
            raise UserCancelledError("select") from None
        if value is None:
            raise UserCancelledError("select")
        return str(value)

    def notify(self, message: str) -> None:
        print_info(message)

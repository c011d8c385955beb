"""
awx/i18n/messages - 메시지 카탈로그

네임스페이스별 딕셔너리를 "네임스페이스.키" 평면 매핑으로 합칩니다.

    MESSAGES["auth.mfa_prompt"] == {"ko": "...", "en": "..."}
"""

from __future__ import annotations

from typing import TypedDict

from .auth import AUTH_MESSAGES
from .cache import CACHE_MESSAGES
from .cli_commands import CLI_MESSAGES


class MessageDict(TypedDict):
    ko: str
    en: str


def _namespaced(namespace: str, messages: dict[str, MessageDict]) -> dict[str, MessageDict]:
    return {f"{namespace}.{key}": value for key, value in messages.items()}


MESSAGES: dict[str, MessageDict] = {
    **_namespaced("auth", AUTH_MESSAGES),
    **_namespaced("cache", CACHE_MESSAGES),
    **_namespaced("cli", CLI_MESSAGES),
}

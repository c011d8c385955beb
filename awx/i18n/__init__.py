"""
awx/i18n - 메시지 다국어 지원 (ko 기본, en 선택)

CLI 출력과 코어 엔진의 에러 메시지를 같은 카탈로그에서 가져옵니다.
언어는 AWX_LANG 환경 변수(또는 set_lang)로 정하며 ContextVar에 보관합니다.

메시지 키는 "네임스페이스.키" 형식입니다 (cli, auth, cache).

Usage:
    from awx.i18n import set_lang, t

    t("auth.sso_login_running", command="aws sso login --profile prod")

    set_lang("en_US.UTF-8")  # → "en"
    t("cli.no_command")
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

logger = logging.getLogger(__name__)

SUPPORTED_LANGS = ("ko", "en")
DEFAULT_LANG = "ko"

_current_lang: ContextVar[str] = ContextVar("awx_lang", default=DEFAULT_LANG)


def normalize_lang(lang: str | None) -> str:
    """언어 코드 정규화 ("en_US.UTF-8", "EN" → "en", 알 수 없으면 ko)"""
    if not lang:
        return DEFAULT_LANG
    code = lang.strip().lower().replace("-", "_").split(".", 1)[0].split("_", 1)[0]
    return code if code in SUPPORTED_LANGS else DEFAULT_LANG


def get_lang() -> str:
    return _current_lang.get()


def set_lang(lang: str | None) -> None:
    """현재 언어 설정 (지원하지 않는 값은 ko)"""
    _current_lang.set(normalize_lang(lang))


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """메시지 키를 현재 언어로 변환

    Args:
        key: "auth.mfa_prompt" 형식의 키
        lang: 언어 강제 지정 (없으면 현재 언어)
        **kwargs: 포맷 인자

    Returns:
        변환된 문자열. 키가 없으면 키 자체, 포맷 인자가 모자라면 포맷 전 원문.
    """
    from awx.i18n.messages import MESSAGES

    entry = MESSAGES.get(key)
    if entry is None:
        return key

    text = entry.get(normalize_lang(lang) if lang else get_lang()) or entry[DEFAULT_LANG]
    if not kwargs:
        return text
    try:
        return text.format(**kwargs)
    except (KeyError, IndexError, ValueError) as e:
        logger.debug("메시지 포맷 실패 (%s): %s", key, e)
        return text


def get_text(ko: str, en: str, lang: str | None = None) -> str:
    """카탈로그 키 없이 인라인 번역 (예외 메시지용)"""
    current = normalize_lang(lang) if lang else get_lang()
    return en if current == "en" else ko


__all__ = [
    "t",
    "get_text",
    "get_lang",
    "set_lang",
    "normalize_lang",
    "SUPPORTED_LANGS",
    "DEFAULT_LANG",
]

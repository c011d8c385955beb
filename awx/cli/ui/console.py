"""
awx/cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력을 위한 함수들.
래핑한 aws 명령의 stdout을 오염시키지 않도록 모든 출력은 stderr로 보냅니다.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# botocore 노이즈 로그 제한
_NOISY_LOGGERS = (
    "botocore",
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "boto3",
    "urllib3",
)


def get_console(stderr: bool = True) -> Console:
    """Rich Console 생성 (기본은 stderr)

    NO_COLOR 환경 변수가 있으면 색상을 끕니다. Windows 콘솔은 이모지 변환을 하지 않습니다.
    """
    return Console(
        stderr=stderr,
        color_system=None if os.environ.get("NO_COLOR") else "auto",
        highlight=False,
        soft_wrap=True,
        emoji=platform.system() != "Windows",
    )


console = get_console()
# 파이프로 넘길 결과물 (--config 목록) 전용
stdout_console = get_console(stderr=False)


def setup_logging(verbose: bool = False) -> None:
    """awx 로거에 RichHandler 설치

    Args:
        verbose: True면 DEBUG, 아니면 WARNING
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger("awx")
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=verbose, rich_tracebacks=verbose)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# 상태 메시지 (심볼 + 색상, 본문은 마크업 이스케이프)
# =============================================================================

_STATUS_STYLES = {
    "success": ("green", "✓"),
    "error": ("red", "✗"),
    "warning": ("yellow", "!"),
    "info": ("blue", "•"),
}


def _print_status(kind: str, message: str) -> None:
    color, symbol = _STATUS_STYLES[kind]
    # 프로필 이름의 [prod] 같은 대괄호가 마크업으로 먹히지 않게 escape
    console.print(f"{symbol} {escape(message)}", style=color)


def print_success(message: str) -> None:
    _print_status("success", message)


def print_error(message: str) -> None:
    _print_status("error", message)


def print_warning(message: str) -> None:
    _print_status("warning", message)


def print_info(message: str) -> None:
    _print_status("info", message)


def print_table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    target: Console | None = None,
) -> None:
    """프로필 목록 같은 단순 표 출력 (셀 값은 이스케이프, target 기본값은 stderr 콘솔)"""
    table = Table(title=title, title_justify="left")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(escape(cell) for cell in row))
    (target or console).print(table)

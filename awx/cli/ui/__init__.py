"""
awx/cli/ui - 콘솔 출력 유틸리티

상태 메시지와 로그는 stderr(console), 파이프 대상 결과물은 stdout(stdout_console)로 출력합니다.
"""

from .console import (
    console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
    setup_logging,
    stdout_console,
)

__all__ = [
    "console",
    "stdout_console",
    "print_error",
    "print_info",
    "print_success",
    "print_table",
    "print_warning",
    "setup_logging",
]

# awx/core/launcher/__init__.py
"""
Process Launcher

해석된 자격증명을 자식 프로세스 환경에만 주입하여 aws CLI를 실행하고,
시그널을 전달하며 종료 코드를 그대로 반영합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "ChildProcess",
    "build_child_env",
    "locate_executable",
    "run_command",
    "exit_status_from_returncode",
]

_IMPORT_MAPPING = {
    "ChildProcess": (".launcher", "ChildProcess"),
    "build_child_env": (".launcher", "build_child_env"),
    "locate_executable": (".launcher", "locate_executable"),
    "run_command": (".launcher", "run_command"),
    "exit_status_from_returncode": (".launcher", "exit_status_from_returncode"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

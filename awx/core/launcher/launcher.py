# awx/core/launcher/launcher.py
"""
자식 프로세스 실행기

- build_child_env: 부모 환경 복사본에 자격증명/리전/프로파일 주입 (os.environ은 변경하지 않음)
- locate_executable: PATH에서 실행 파일 탐색 (없으면 exit 127)
- ChildProcess: 시그널 전달, 대기, 종료 코드 반영 (-N → 128+N)
- run_command: SIGINT/SIGTERM 전달 핸들러를 설치한 상태로 실행 후 원복
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from collections.abc import Mapping, Sequence
from types import FrameType
from typing import Any

from awx.core.exceptions import ExecutableNotFoundError

from ..auth.types import CredentialSet

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)
REGION_ENV_VARS = ("AWS_REGION", "AWS_DEFAULT_REGION")


def _has_flag(args: Sequence[str], flag: str) -> bool:
    """--flag VALUE 또는 --flag=VALUE 형태 포함 여부"""
    return any(arg == flag or arg.startswith(f"{flag}=") for arg in args)


def region_from_args(args: Sequence[str]) -> str | None:
    """래핑 명령 인자에서 --region 값 추출"""
    for index, arg in enumerate(args):
        if arg.startswith("--region="):
            return arg.split("=", 1)[1] or None
        if arg == "--region" and index + 1 < len(args):
            return args[index + 1]
    return None


def build_child_env(
    credentials: CredentialSet,
    args: Sequence[str],
    environ: Mapping[str, str] | None = None,
    profile_name: str | None = None,
) -> dict[str, str]:
    """자식 프로세스 환경 생성

    Args:
        credentials: 해석된 자격증명
        args: 래핑 명령 인자 (--region / --profile 검사용)
        environ: 부모 환경 (None이면 os.environ)
        profile_name: AWS_PROFILE로 전달할 프로파일 이름

    Returns:
        새 환경 딕셔너리
    """
    env = dict(os.environ if environ is None else environ)

    env["AWS_ACCESS_KEY_ID"] = credentials.access_key_id
    env["AWS_SECRET_ACCESS_KEY"] = credentials.secret_access_key
    if credentials.session_token:
        env["AWS_SESSION_TOKEN"] = credentials.session_token
    else:
        # 부모 환경의 오래된 토큰이 정적 키와 섞이지 않도록 제거
        env.pop("AWS_SESSION_TOKEN", None)

    user_region = _has_flag(args, "--region") or any(env.get(name) for name in REGION_ENV_VARS)
    if credentials.region and not user_region:
        for name in REGION_ENV_VARS:
            env[name] = credentials.region

    if profile_name and not _has_flag(args, "--profile"):
        env["AWS_PROFILE"] = profile_name

    return env


def locate_executable(name: str) -> str:
    """PATH에서 실행 파일 경로 탐색

    Raises:
        ExecutableNotFoundError: 찾을 수 없을 때 (exit 127)
    """
    path = shutil.which(name)
    if path is None:
        raise ExecutableNotFoundError(name)
    return path


def exit_status_from_returncode(returncode: int) -> int:
    """Popen.returncode를 셸 규약 종료 코드로 변환 (시그널 N 종료 → 128+N)"""
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


class ChildProcess:
    """실행 중인 자식 프로세스 핸들"""

    def __init__(self, popen: subprocess.Popen[Any]):
        self.popen = popen

    @property
    def pid(self) -> int:
        return self.popen.pid

    def forward_signal(self, signum: int) -> None:
        """자식에게 시그널 전달 (이미 종료되었으면 무시)"""
        if self.popen.poll() is not None:
            return
        try:
            self.popen.send_signal(signum)
        except ProcessLookupError:
            logger.debug("시그널 전달 대상 프로세스가 이미 종료됨 (pid=%s)", self.popen.pid)

    def wait(self) -> int:
        """종료까지 대기 후 반영할 종료 코드 반환"""
        self.popen.wait()
        return self.exit_status

    @property
    def exit_status(self) -> int:
        returncode = self.popen.returncode
        if returncode is None:
            raise RuntimeError("child process is still running")
        return exit_status_from_returncode(returncode)


def spawn(argv: Sequence[str], env: Mapping[str, str]) -> ChildProcess:
    """표준 입출력을 상속한 자식 프로세스 시작

    Raises:
        ExecutableNotFoundError: 실행 파일이 없을 때
    """
    executable = locate_executable(argv[0])
    try:
        popen = subprocess.Popen([executable, *argv[1:]], env=dict(env))
    except FileNotFoundError as e:
        raise ExecutableNotFoundError(argv[0]) from e
    logger.debug("자식 프로세스 시작: pid=%s", popen.pid)
    return ChildProcess(popen)


def run_command(argv: Sequence[str], env: Mapping[str, str]) -> int:
    """명령 실행 후 자식 종료 코드 반환

    실행 중 SIGINT/SIGTERM은 자식에게 전달되고, 종료 후 기존 핸들러가 복원됩니다.

    Raises:
        ExecutableNotFoundError: 실행 파일이 없을 때 (자식 미실행)
    """
    child = spawn(argv, env)

    def _forward(signum: int, frame: FrameType | None) -> None:
        logger.debug("시그널 %s 전달 (pid=%s)", signum, child.pid)
        child.forward_signal(signum)

    previous = {signum: signal.signal(signum, _forward) for signum in FORWARDED_SIGNALS}
    try:
        return child.wait()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)

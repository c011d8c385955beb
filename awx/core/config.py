"""
awx/core/config.py - 실행 설정

환경 변수에서 awx 실행 설정을 읽어 Settings 데이터 클래스로 제공합니다.
CLI 옵션은 Settings.from_env() 결과를 덮어쓰는 방식으로 적용됩니다.

환경 변수:
    AWX_NO_INTERACTIVE: 모든 프롬프트 비활성화 (CI용)
    AWX_CACHE: 세션 캐시 활성화 (기본: 비활성)
    AWX_CACHE_STATIC: 만료 없는 정적 자격증명도 캐시 (기본: 허용)
    AWX_CACHE_PASSPHRASE: 암호화 파일 캐시 패스프레이즈
    AWX_CACHE_DIR: 암호화 파일 캐시 디렉토리 (기본: ~/.awx/cache)
    AWX_CONNECT_TIMEOUT / AWX_READ_TIMEOUT: STS 호출 타임아웃 (초)
    AWX_AWS_BINARY: 래핑 대상 실행 파일 (기본: aws)
    AWX_LANG: 메시지 언어 (ko, en)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

DEFAULT_CONNECT_TIMEOUT = 5.0  # 초
DEFAULT_READ_TIMEOUT = 10.0  # 초
DEFAULT_AWS_BINARY = "aws"


def get_version() -> str:
    """버전 문자열 반환 (awx/version.txt)"""
    version_file = Path(__file__).resolve().parent.parent / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.debug("Failed to read version file: %s", e)
    return "0.0.1"


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    """환경 변수를 bool로 해석 (해석 불가 값은 기본값)"""
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning("환경 변수 %s 값을 해석할 수 없어 기본값(%s)을 사용합니다", name, default)
    return default


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    """환경 변수를 양의 float로 해석"""
    raw = environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("환경 변수 %s 값이 숫자가 아니어서 기본값(%s)을 사용합니다", name, default)
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    """awx 실행 설정

    Attributes:
        interactive: 대화형 프롬프트 허용 여부
        cache_enabled: 세션 캐시 사용 여부 (opt-in)
        cache_static: 만료 없는 자격증명 캐시 허용 여부
        cache_passphrase: 암호화 파일 캐시 패스프레이즈
        cache_dir: 암호화 파일 캐시 디렉토리
        connect_timeout: STS 연결 타임아웃 (초)
        read_timeout: STS 읽기 타임아웃 (초)
        aws_binary: 래핑 대상 실행 파일 이름
        lang: 메시지 언어
    """

    interactive: bool = True
    cache_enabled: bool = False
    cache_static: bool = True
    cache_passphrase: str | None = None
    cache_dir: Path = Path.home() / ".awx" / "cache"
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    aws_binary: str = DEFAULT_AWS_BINARY
    lang: str = "ko"

    def __repr__(self) -> str:
        return (
            f"Settings(interactive={self.interactive}, cache_enabled={self.cache_enabled}, "
            f"cache_static={self.cache_static}, cache_passphrase={'***' if self.cache_passphrase else None}, "
            f"cache_dir={str(self.cache_dir)!r}, connect_timeout={self.connect_timeout}, "
            f"read_timeout={self.read_timeout}, aws_binary={self.aws_binary!r}, lang={self.lang!r})"
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """환경 변수에서 Settings 생성

        Args:
            environ: 환경 변수 매핑 (None이면 os.environ)

        Returns:
            Settings 인스턴스
        """
        env = os.environ if environ is None else environ

        cache_dir_raw = env.get("AWX_CACHE_DIR")
        cache_dir = Path(cache_dir_raw).expanduser() if cache_dir_raw else Path.home() / ".awx" / "cache"

        return cls(
            interactive=not _env_flag(env, "AWX_NO_INTERACTIVE", False),
            cache_enabled=_env_flag(env, "AWX_CACHE", False),
            cache_static=_env_flag(env, "AWX_CACHE_STATIC", True),
            cache_passphrase=env.get("AWX_CACHE_PASSPHRASE") or None,
            cache_dir=cache_dir,
            connect_timeout=_env_float(env, "AWX_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            read_timeout=_env_float(env, "AWX_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            aws_binary=env.get("AWX_AWS_BINARY") or DEFAULT_AWS_BINARY,
            lang=(env.get("AWX_LANG") or "ko").strip().lower(),
        )

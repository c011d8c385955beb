"""
awx/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    awx [OPTIONS] [--] <AWS_ARGS>...

    예시:
    awx s3 ls                       # 기본/환경 변수 프로파일 (대화형이면 선택)
    awx -p prod ec2 describe-vpcs   # 프로파일 지정
    awx -n -p ci sts get-caller-identity   # CI (프롬프트 없음, 인증 필요 시 exit 2)
    awx --config                    # 프로파일 목록과 인증 배지
    awx --clear-cache [NAME|all]    # 세션 캐시 삭제

처리 흐름:
    1. Settings.from_env() + CLI 옵션 → 실행 설정
    2. 프로파일 선택 (명시 > AWS_PROFILE > AWS_DEFAULT_PROFILE > 대화형 선택 > default)
    3. Resolver로 자격증명 해석 (캐시 → Flow)
    4. 자식 환경에만 자격증명 주입 후 aws 실행, 종료 코드 반영

종료 코드:
    0 성공/자식 코드 반영, 1 내부 오류, 2 인증 필요/프로파일 오류,
    3 MFA 소진, 4 사용자 취소, 127 실행 파일 없음, 128+N 시그널 종료
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import replace

import click

from awx.core.config import Settings, get_version
from awx.core.exceptions import EXIT_OK, AuthRequiredError, AwxError, UserCancelledError
from awx.i18n import set_lang, t

from .ui import print_error, print_info, print_success, print_table, setup_logging, stdout_console

logger = logging.getLogger(__name__)

VERSION = get_version()


def _stdin_is_tty() -> bool:
    """표준 입력이 터미널인지 확인 (파이프/CI에서는 프롬프트 불가)"""
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _env_region(environ: Mapping[str, str]) -> str | None:
    return environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or None


def show_profiles(config_path: str | None = None) -> int:
    """--config: 프로파일 목록과 인증 배지 출력 (grep 등으로 넘길 수 있도록 stdout)"""
    from awx.core.auth.config import Loader, profile_badges

    parsed = Loader(config_path).load()
    if not parsed.profiles:
        print_info(t("cli.no_profiles"))
        return EXIT_OK

    rows = []
    for name in sorted(parsed.profiles):
        profile = parsed.profiles[name]
        badges = " ".join(f"[{b}]" for b in profile_badges(profile))
        rows.append((name, badges, profile.region or "-", profile.source_profile or "-"))

    print_table(
        t("cli.profiles_title"),
        [t("cli.col_profile"), t("cli.col_badges"), t("cli.col_region"), t("cli.col_source")],
        rows,
        target=stdout_console,
    )
    return EXIT_OK


def clear_cache(settings: Settings, target: str) -> int:
    """--clear-cache: keyring/암호화 파일 캐시 삭제 (AWX_CACHE 설정과 무관)"""
    from awx.core.auth.cache import SessionCache

    cache = SessionCache.from_settings(replace(settings, cache_enabled=True))
    count = cache.clear(target)
    print_success(t("cache.cleared", count=count, target=target))
    return EXIT_OK


def select_profile_name(
    explicit: str | None,
    profiles: Mapping[str, object],
    environ: Mapping[str, str],
    prompter: object | None,
) -> str:
    """사용할 프로파일 이름 결정

    명시/환경 변수 프로파일이 없고 대화형이면 배지와 함께 선택 목록을 표시합니다.
    """
    from awx.core.auth.config import DEFAULT_PROFILE_NAME, profile_badges, resolve_profile_name

    has_env_profile = bool(environ.get("AWS_PROFILE") or environ.get("AWS_DEFAULT_PROFILE"))
    if explicit or has_env_profile or prompter is None or not profiles:
        return resolve_profile_name(explicit, environ)

    names = sorted(profiles, key=lambda n: (n != DEFAULT_PROFILE_NAME, n))
    choices = []
    for name in names:
        badges = "".join(f"[{b}]" for b in profile_badges(profiles[name]))  # type: ignore[arg-type]
        choices.append((f"{name} {badges}".strip(), name))
    return prompter.select(t("cli.select_profile"), choices)  # type: ignore[attr-defined]


def run(
    settings: Settings,
    profile: str | None,
    aws_args: Sequence[str],
    environ: Mapping[str, str] | None = None,
) -> int:
    """프로파일 해석 후 aws 명령 실행

    Returns:
        종료 코드 (자식 종료 코드 반영)

    Raises:
        AwxError: 인증/설정/실행 오류 (exit_code 포함)
    """
    from awx.core.auth import AwsGateway, Resolver, ResolutionContext, SessionCache, load_config
    from awx.core.launcher import build_child_env, locate_executable, run_command
    from awx.core.launcher.launcher import region_from_args

    from .prompts import QuestionaryPrompter

    env = os.environ if environ is None else environ
    prompter = QuestionaryPrompter() if settings.interactive else None

    # 인증 전에 실행 파일부터 확인 (없으면 exit 127)
    if aws_args:
        locate_executable(settings.aws_binary)

    parsed = load_config()
    profile_name = select_profile_name(profile, parsed.profiles, env, prompter)
    logger.debug("프로파일: %s, 설정: %r", profile_name, settings)

    cache = SessionCache.from_settings(settings, prompter=prompter, interactive=settings.interactive)
    gateway = AwsGateway(
        aws_binary=settings.aws_binary,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )
    resolver = Resolver(parsed.profiles, gateway, cache)

    ctx = ResolutionContext(
        profile_name=profile_name,
        interactive=settings.interactive,
        prompter=prompter,
        region_override=region_from_args(aws_args),
        env_region=_env_region(env),
    )
    credentials = resolver.resolve(ctx)
    logger.debug("[%s] 자격증명 해석 완료: %r", profile_name, credentials)

    if not aws_args:
        print_success(t("cli.credentials_ready", profile=profile_name))
        print_info(t("cli.no_command"))
        return EXIT_OK

    child_env = build_child_env(credentials, aws_args, env, profile_name=profile_name)
    return run_command([settings.aws_binary, *aws_args], child_env)


class _LocalizedOption(click.Option):
    """help에 메시지 키를 받아 도움말 출력 시점의 언어로 변환"""

    def get_help_record(self, ctx: click.Context) -> tuple[str, str] | None:
        key = self.help
        if key:
            self.help = t(key)
        try:
            return super().get_help_record(ctx)
        finally:
            self.help = key


class _AwxCommand(click.Command):
    """인자 파싱(--help 처리 포함) 전에 AWX_LANG 적용"""

    def make_context(self, info_name, args, parent=None, **extra):
        set_lang(Settings.from_env().lang)
        return super().make_context(info_name, args, parent=parent, **extra)


@click.command(
    cls=_AwxCommand,
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    },
)
@click.option("-p", "--profile", "profile", cls=_LocalizedOption, default=None, metavar="NAME", help="cli.opt_profile")
@click.option("-c", "--config", "show_config", cls=_LocalizedOption, is_flag=True, help="cli.opt_config")
@click.option(
    "-n", "--no-interactive", "no_interactive", cls=_LocalizedOption, is_flag=True, help="cli.opt_no_interactive"
)
@click.option(
    "--clear-cache",
    "clear_cache_target",
    is_flag=False,
    flag_value="all",
    default=None,
    metavar="[NAME|all]",
    cls=_LocalizedOption,
    help="cli.opt_clear_cache",
)
@click.option("-v", "--verbose", cls=_LocalizedOption, is_flag=True, help="cli.opt_verbose")
@click.version_option(VERSION, "-V", "--version", prog_name="awx")
@click.argument("aws_args", nargs=-1, type=click.UNPROCESSED)
def cli(
    profile: str | None,
    show_config: bool,
    no_interactive: bool,
    clear_cache_target: str | None,
    verbose: bool,
    aws_args: tuple[str, ...],
) -> None:
    """AWS CLI authentication wrapper.

    Resolves credentials for an AWS profile (SSO, MFA, AssumeRole chains,
    static keys) and runs the aws command with them injected.
    """
    settings = Settings.from_env()
    setup_logging(verbose)

    if no_interactive or not _stdin_is_tty():
        settings = replace(settings, interactive=False)

    try:
        if show_config:
            code = show_profiles()
        elif clear_cache_target is not None:
            code = clear_cache(settings, clear_cache_target)
        else:
            code = run(settings, profile, list(aws_args))
    except AwxError as e:
        print_error(e.message)
        if e.hint and not isinstance(e, AuthRequiredError):
            print_info(e.hint)
        logger.debug("%s", e.__class__.__name__, exc_info=e.cause)
        raise SystemExit(e.exit_code) from None
    except KeyboardInterrupt:
        cancelled = UserCancelledError()
        print_error(cancelled.message)
        raise SystemExit(cancelled.exit_code) from None

    raise SystemExit(code)


def main() -> None:
    """콘솔 스크립트 진입점"""
    cli(prog_name="awx")


if __name__ == "__main__":
    main()

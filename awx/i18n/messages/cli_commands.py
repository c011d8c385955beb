"""
awx/i18n/messages/cli_commands.py - CLI Command Messages

Contains translations for Click CLI options, help text, and profile listing.
"""

from __future__ import annotations

CLI_MESSAGES = {
    # =========================================================================
    # CLI Help Text
    # =========================================================================
    "help_intro": {
        "ko": "AWS CLI 인증 래퍼. 프로파일 자격증명을 해석한 뒤 aws 명령을 실행합니다.",
        "en": "AWS CLI authentication wrapper. Resolves profile credentials, then runs aws.",
    },
    "opt_profile": {
        "ko": "사용할 AWS 프로파일",
        "en": "AWS profile to use",
    },
    "opt_config": {
        "ko": "설정된 프로파일 목록 출력",
        "en": "List configured profiles",
    },
    "opt_no_interactive": {
        "ko": "모든 프롬프트 비활성화 (CI용)",
        "en": "Disable all prompts (for CI)",
    },
    "opt_clear_cache": {
        "ko": "세션 캐시 삭제 (프로파일 이름 또는 all)",
        "en": "Clear session cache (profile name or all)",
    },
    "opt_verbose": {
        "ko": "디버그 로그 출력",
        "en": "Show debug logs",
    },
    # =========================================================================
    # Output
    # =========================================================================
    "no_command": {
        "ko": "실행할 AWS 명령이 없습니다. 예: awx s3 ls",
        "en": "No AWS command specified. Example: awx s3 ls",
    },
    "credentials_ready": {
        "ko": "프로파일 '{profile}' 자격증명 확인 완료",
        "en": "Credentials ready for profile '{profile}'",
    },
    "profiles_title": {
        "ko": "AWS 프로파일",
        "en": "AWS Profiles",
    },
    "col_profile": {
        "ko": "프로파일",
        "en": "Profile",
    },
    "col_badges": {
        "ko": "인증",
        "en": "Auth",
    },
    "col_region": {
        "ko": "리전",
        "en": "Region",
    },
    "col_source": {
        "ko": "소스",
        "en": "Source",
    },
    "select_profile": {
        "ko": "프로파일 선택:",
        "en": "Select a profile:",
    },
    "no_profiles": {
        "ko": "설정된 AWS 프로파일이 없습니다. 'aws configure' 또는 'aws configure sso'를 실행해주세요.",
        "en": "No AWS profiles configured. Run 'aws configure' or 'aws configure sso'.",
    },
    "error_unexpected": {
        "ko": "예상치 못한 오류: {error}",
        "en": "Unexpected error: {error}",
    },
}

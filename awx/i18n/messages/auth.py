"""
awx/i18n/messages/auth.py - Authentication Flow Messages

Contains translations for SSO login, MFA prompts, and role assumption.
"""

from __future__ import annotations

AUTH_MESSAGES = {
    # =========================================================================
    # SSO
    # =========================================================================
    "sso_session_expired": {
        "ko": "[{profile}] SSO 세션이 없거나 만료되었습니다. 로그인을 시작합니다.",
        "en": "[{profile}] SSO session missing or expired. Starting login.",
    },
    "sso_login_running": {
        "ko": "실행 중: {command}",
        "en": "Running: {command}",
    },
    "sso_login_completed": {
        "ko": "[{profile}] SSO 로그인 완료",
        "en": "[{profile}] SSO login completed",
    },
    "sso_login_failed": {
        "ko": "SSO 로그인 명령이 종료 코드 {code}로 실패했습니다",
        "en": "SSO login command failed with exit code {code}",
    },
    # =========================================================================
    # MFA
    # =========================================================================
    "mfa_prompt": {
        "ko": "MFA 코드 입력 ({length}자리, {serial}) [{attempt}/{max}]:",
        "en": "Enter MFA code ({length} digits, {serial}) [{attempt}/{max}]:",
    },
    "mfa_invalid_format": {
        "ko": "MFA 코드는 숫자 {length}자리여야 합니다 (남은 시도: {remaining})",
        "en": "MFA code must be {length} digits (attempts left: {remaining})",
    },
    "mfa_attempt_failed": {
        "ko": "MFA 인증 실패 ({code}), 남은 시도: {remaining}",
        "en": "MFA authentication failed ({code}), attempts left: {remaining}",
    },
    "mfa_account_unknown": {
        "ko": "[{profile}] MFA 디바이스 계정을 확인할 수 없어 검증을 건너뜁니다",
        "en": "[{profile}] Could not determine MFA device account, skipping check",
    },
    "mfa_account_mismatch": {
        "ko": "MFA 디바이스 계정({serial_account})이 자격증명 계정({account})과 다릅니다",
        "en": "MFA device account ({serial_account}) differs from credential account ({account})",
    },
    # =========================================================================
    # AssumeRole / Static
    # =========================================================================
    "assume_role": {
        "ko": "[{profile}] 역할 전환: {role}",
        "en": "[{profile}] Assuming role: {role}",
    },
    "static_missing_keys": {
        "ko": "aws_access_key_id 또는 aws_secret_access_key가 없습니다",
        "en": "aws_access_key_id or aws_secret_access_key is missing",
    },
    "no_auth_method": {
        "ko": "SSO, MFA, 정적 자격증명 중 어느 것도 설정되지 않았습니다",
        "en": "No SSO, MFA, or static credentials are configured",
    },
    "mfa_without_keys": {
        "ko": "mfa_serial은 있지만 장기 자격증명(액세스 키)이 없습니다",
        "en": "mfa_serial is set but no long-term access keys are configured",
    },
    "cache_hit": {
        "ko": "[{profile}] 캐시된 자격증명 사용 (남은 시간 {remaining}초)",
        "en": "[{profile}] Using cached credentials ({remaining}s remaining)",
    },
}

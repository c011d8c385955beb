"""
awx/i18n/messages/cache.py - Session Cache Messages

Contains translations for cache passphrase prompts and cache maintenance.
"""

from __future__ import annotations

CACHE_MESSAGES = {
    "passphrase_prompt": {
        "ko": "캐시 암호화 패스프레이즈:",
        "en": "Cache encryption passphrase:",
    },
    "file_store_disabled": {
        "ko": "패스프레이즈가 없어 암호화 파일 캐시를 사용하지 않습니다 (AWX_CACHE_PASSPHRASE)",
        "en": "No passphrase available, encrypted file cache disabled (AWX_CACHE_PASSPHRASE)",
    },
    "write_failed": {
        "ko": "[{profile}] 캐시 파일 저장 실패: {error}",
        "en": "[{profile}] Failed to write cache file: {error}",
    },
    "cleared": {
        "ko": "캐시 항목 {count}개를 삭제했습니다 ({target})",
        "en": "Cleared {count} cache entries ({target})",
    },
}

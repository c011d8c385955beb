# awx/core/auth/cache/__init__.py
"""
세션 캐시 모듈

해석된 자격증명을 프로파일 단위로 캐시하여 다음 호출에서 재인증을 생략합니다.

캐시 전략:
- KeyringStore: 플랫폼 시크릿 저장소 (우선)
- EncryptedFileStore: AES-GCM 암호화 파일 (~/.awx/cache/, keyring 사용 불가 시)
- MemoryStore: 캐시 비활성 시 기본값 (프로세스 종료와 함께 소멸)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "SessionCache",
    "CacheEntry",
    "CacheStore",
    "MemoryStore",
    "KeyringStore",
    "EncryptedFileStore",
    "StorageLocation",
    "ALL_PROFILES",
    "encrypt_dict",
    "decrypt_dict",
]

_IMPORT_MAPPING = {
    "SessionCache": (".cache", "SessionCache"),
    "CacheEntry": (".cache", "CacheEntry"),
    "CacheStore": (".cache", "CacheStore"),
    "MemoryStore": (".cache", "MemoryStore"),
    "KeyringStore": (".cache", "KeyringStore"),
    "EncryptedFileStore": (".cache", "EncryptedFileStore"),
    "StorageLocation": (".cache", "StorageLocation"),
    "ALL_PROFILES": (".cache", "ALL_PROFILES"),
    "encrypt_dict": (".crypto", "encrypt_dict"),
    "decrypt_dict": (".crypto", "decrypt_dict"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

# tests/test_auth_cache.py
"""
awx/core/auth/cache/cache.py 단위 테스트

저장소별 동작, 만료 검사, 손상 항목 폐기, 캐시 삭제 테스트.
"""

import json
import os
import stat
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from awx.core.auth.cache import (
    CacheEntry,
    EncryptedFileStore,
    KeyringStore,
    MemoryStore,
    SessionCache,
    StorageLocation,
)
from awx.core.config import Settings

ITERATIONS = 1_000  # 테스트 속도용


@pytest.fixture
def file_store(tmp_path):
    return EncryptedFileStore(tmp_path / "cache", lambda: "pw", iterations=ITERATIONS)


class FakeKeyring:
    """keyring 모듈 대체용 메모리 백엔드"""

    def __init__(self, priority: float = 1):
        self.passwords: dict[tuple[str, str], str] = {}
        self.backend = MagicMock(priority=priority)

    def get_keyring(self):
        return self.backend

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        if (service, username) not in self.passwords:
            raise PasswordDeleteError("not found")
        del self.passwords[(service, username)]


@pytest.fixture
def fake_keyring():
    fake = FakeKeyring()
    with patch("awx.core.auth.cache.cache.keyring", fake):
        yield fake


# =============================================================================
# CacheEntry 테스트
# =============================================================================


class TestCacheEntry:
    """CacheEntry 테스트"""

    def test_payload_round_trip(self, creds_factory):
        entry = CacheEntry(profile="prod", credentials=creds_factory(), location=StorageLocation.MEMORY)

        restored = CacheEntry.from_payload(entry.to_payload(), StorageLocation.MEMORY)

        assert restored == entry

    def test_unsupported_version(self, creds_factory):
        payload = CacheEntry("prod", creds_factory(), StorageLocation.MEMORY).to_payload()
        payload["version"] = 99

        with pytest.raises(ValueError):
            CacheEntry.from_payload(payload, StorageLocation.MEMORY)

    def test_remaining_seconds(self, creds_factory):
        creds = creds_factory(minutes=10)
        entry = CacheEntry("prod", creds, StorageLocation.MEMORY)

        assert entry.remaining_seconds(creds.expiration - timedelta(seconds=30)) == 30
        assert entry.remaining_seconds(creds.expiration + timedelta(seconds=30)) == 0
        assert CacheEntry("s", creds_factory(minutes=None, session_token=None), StorageLocation.MEMORY).remaining_seconds() is None


# =============================================================================
# SessionCache 테스트 (메모리)
# =============================================================================


class TestSessionCacheMemory:
    """SessionCache 기본 동작 테스트"""

    def test_put_and_get(self, creds_factory):
        cache = SessionCache([MemoryStore()])
        creds = creds_factory(region="us-west-2")

        entry = cache.put("prod", creds)

        assert entry is not None
        assert entry.location == StorageLocation.MEMORY
        # 리전은 저장하지 않음
        assert cache.get("prod") == creds.with_region(None)

    def test_miss(self):
        assert SessionCache([MemoryStore()]).get("nope") is None

    def test_expired_entry_is_miss_and_removed(self, creds_factory):
        store = MemoryStore()
        cache = SessionCache([store])
        creds = creds_factory(minutes=5)
        cache.put("prod", creds)

        assert cache.get("prod", now=creds.expiration) is None
        assert store.load("prod") is None

    def test_valid_until_expiry(self, creds_factory):
        cache = SessionCache([MemoryStore()])
        creds = creds_factory(minutes=5)
        cache.put("prod", creds)

        assert cache.get("prod", now=creds.expiration - timedelta(seconds=1)) is not None

    def test_corrupt_entry_discarded(self):
        store = MemoryStore()
        store.save("prod", {"version": 1, "profile": "prod", "credentials": {"AccessKeyId": "A"}})
        cache = SessionCache([store])

        assert cache.get("prod") is None
        assert store.profiles() == []

    @pytest.mark.parametrize("credentials", [None, ["AKIA"], "AKIA", 42])
    def test_non_object_credentials_discarded(self, credentials):
        """credentials가 객체가 아니면 캐시 miss로 처리"""
        store = MemoryStore()
        store.save(
            "prod",
            {"version": 1, "profile": "prod", "created_at": "2030-01-01T00:00:00+00:00", "credentials": credentials},
        )

        assert SessionCache([store]).get("prod") is None
        assert store.profiles() == []

    @pytest.mark.parametrize("payload", [["prod"], "prod", 7])
    def test_non_object_payload_discarded(self, payload):
        store = MemoryStore()
        store.save("prod", payload)

        assert SessionCache([store]).get("prod") is None
        assert store.profiles() == []

    def test_profile_mismatch_discarded(self, creds_factory):
        store = MemoryStore()
        store.save("prod", CacheEntry("dev", creds_factory(), StorageLocation.MEMORY).to_payload())

        assert SessionCache([store]).get("prod") is None

    def test_temporary_without_expiry_not_cached(self, creds_factory):
        cache = SessionCache([MemoryStore()])

        assert cache.put("prod", creds_factory(minutes=None)) is None
        assert cache.get("prod") is None

    def test_static_caching_toggle(self, creds_factory):
        static = creds_factory(prefix="AKIA", minutes=None, session_token=None)

        assert SessionCache([MemoryStore()], cache_static=True).put("s", static) is not None
        assert SessionCache([MemoryStore()], cache_static=False).put("s", static) is None

    def test_clear_single_and_all(self, creds_factory):
        cache = SessionCache([MemoryStore()])
        cache.put("a", creds_factory())
        cache.put("b", creds_factory())
        cache.put("c", creds_factory())

        assert cache.clear("a") == 1
        assert cache.clear("a") == 0
        assert cache.clear("all") == 2
        assert cache.get("b") is None

    def test_disabled_is_memory_only(self):
        cache = SessionCache.disabled()

        assert cache.enabled is False
        assert [type(s) for s in cache.stores] == [MemoryStore]

    def test_skips_unavailable_store(self, creds_factory):
        unavailable = MagicMock()
        unavailable.available.return_value = False
        memory = MemoryStore()
        cache = SessionCache([unavailable, memory])

        entry = cache.put("prod", creds_factory())

        assert entry.location == StorageLocation.MEMORY
        unavailable.save.assert_not_called()


# =============================================================================
# EncryptedFileStore 테스트
# =============================================================================


class TestEncryptedFileStore:
    """암호화 파일 저장소 테스트"""

    def test_round_trip_through_session_cache(self, file_store, creds_factory):
        cache = SessionCache([file_store])
        creds = creds_factory()

        entry = cache.put("prod", creds)

        assert entry.location == StorageLocation.ENCRYPTED_FILE
        assert cache.get("prod") == creds

    def test_file_is_encrypted(self, file_store, creds_factory):
        SessionCache([file_store]).put("prod", creds_factory())

        raw = file_store.path_for("prod").read_bytes()
        assert b"ASIATESTKEY" not in raw
        assert b"prod" not in raw

    def test_permissions(self, file_store, creds_factory):
        SessionCache([file_store]).put("prod", creds_factory())

        assert stat.S_IMODE(os.stat(file_store.directory).st_mode) == 0o700
        assert stat.S_IMODE(os.stat(file_store.path_for("prod")).st_mode) == 0o600

    def test_existing_directory_mode_untouched(self, tmp_path, creds_factory):
        """이미 있는 디렉토리(다른 도구와 공유)의 권한은 바꾸지 않음"""
        shared = tmp_path / "shared"
        shared.mkdir()
        os.chmod(shared, 0o755)
        store = EncryptedFileStore(shared, lambda: "pw", iterations=ITERATIONS)

        SessionCache([store]).put("prod", creds_factory())

        assert stat.S_IMODE(os.stat(shared).st_mode) == 0o755
        assert stat.S_IMODE(os.stat(store.path_for("prod")).st_mode) == 0o600

    def test_no_passphrase_disables_writes(self, tmp_path, creds_factory):
        store = EncryptedFileStore(tmp_path / "cache", lambda: None, iterations=ITERATIONS)

        assert SessionCache([store]).put("prod", creds_factory()) is None
        assert not store.path_for("prod").exists()

    def test_passphrase_resolved_once(self, tmp_path, creds_factory):
        provider = MagicMock(return_value="pw")
        store = EncryptedFileStore(tmp_path / "cache", provider, iterations=ITERATIONS)
        cache = SessionCache([store])

        cache.put("a", creds_factory())
        cache.put("b", creds_factory())
        cache.get("a")

        provider.assert_called_once()

    def test_wrong_passphrase_discards_entry(self, tmp_path, creds_factory):
        directory = tmp_path / "cache"
        SessionCache([EncryptedFileStore(directory, lambda: "pw", ITERATIONS)]).put("prod", creds_factory())
        other = EncryptedFileStore(directory, lambda: "other", ITERATIONS)

        assert SessionCache([other]).get("prod") is None
        assert not other.path_for("prod").exists()

    def test_garbage_file_discarded(self, file_store):
        file_store.directory.mkdir(parents=True)
        file_store.path_for("prod").write_bytes(b"not a cache file")

        assert SessionCache([file_store]).get("prod") is None
        assert not file_store.path_for("prod").exists()

    def test_swapped_file_detected(self, file_store, creds_factory):
        """다른 프로파일 파일로 바꿔치기하면 복호화 실패"""
        SessionCache([file_store]).put("dev", creds_factory())
        file_store.path_for("dev").replace(file_store.path_for("prod"))

        assert SessionCache([file_store]).get("prod") is None

    def test_clear_all(self, file_store, creds_factory):
        cache = SessionCache([file_store])
        cache.put("a", creds_factory())
        cache.put("b", creds_factory())

        assert cache.clear("all") == 2
        assert file_store.profiles() == []


# =============================================================================
# KeyringStore 테스트
# =============================================================================


class TestKeyringStore:
    """keyring 저장소 테스트 (keyring 모듈 패치)"""

    def test_preferred_over_file(self, fake_keyring, file_store, creds_factory):
        cache = SessionCache([KeyringStore(), file_store])
        creds = creds_factory()

        entry = cache.put("prod", creds)

        assert entry.location == StorageLocation.KEYRING
        assert not file_store.path_for("prod").exists()
        assert cache.get("prod") == creds
        assert json.loads(fake_keyring.passwords[("awx", KeyringStore.INDEX_KEY)]) == ["prod"]

    def test_unavailable_backend_falls_back(self, fake_keyring, file_store, creds_factory):
        fake_keyring.backend.priority = 0
        cache = SessionCache([KeyringStore(), file_store])

        entry = cache.put("prod", creds_factory())

        assert entry.location == StorageLocation.ENCRYPTED_FILE
        assert fake_keyring.passwords == {}

    def test_save_error_falls_back(self, fake_keyring, file_store, creds_factory):
        fake_keyring.set_password = MagicMock(side_effect=KeyringError("locked"))
        cache = SessionCache([KeyringStore(), file_store])

        entry = cache.put("prod", creds_factory())

        assert entry.location == StorageLocation.ENCRYPTED_FILE

    def test_corrupt_value_discarded(self, fake_keyring):
        fake_keyring.passwords[("awx", "prod")] = "{not json"

        assert SessionCache([KeyringStore()]).get("prod") is None
        assert ("awx", "prod") not in fake_keyring.passwords

    def test_clear_all_uses_index(self, fake_keyring, creds_factory):
        cache = SessionCache([KeyringStore()])
        cache.put("a", creds_factory())
        cache.put("b", creds_factory())

        assert cache.clear("all") == 2
        assert KeyringStore().profiles() == []


# =============================================================================
# from_settings 테스트
# =============================================================================


class TestFromSettings:
    """Settings 기반 생성 테스트"""

    def test_disabled_by_default(self, tmp_path):
        cache = SessionCache.from_settings(Settings(cache_dir=tmp_path))
        assert cache.enabled is False

    def test_enabled_store_order(self, tmp_path):
        cache = SessionCache.from_settings(Settings(cache_enabled=True, cache_dir=tmp_path, cache_static=False))

        assert [type(s) for s in cache.stores] == [KeyringStore, EncryptedFileStore]
        assert cache.cache_static is False

    def test_passphrase_prompted_when_interactive(self, tmp_path, fake_prompter):
        fake_prompter.secrets = ["typed"]
        cache = SessionCache.from_settings(
            Settings(cache_enabled=True, cache_dir=tmp_path), prompter=fake_prompter, interactive=True
        )

        file_store = cache.stores[1]
        assert file_store._get_passphrase() == "typed"
        assert len(fake_prompter.prompts) == 1

    def test_no_passphrase_when_non_interactive(self, tmp_path, fake_prompter):
        cache = SessionCache.from_settings(
            Settings(cache_enabled=True, cache_dir=tmp_path), prompter=fake_prompter, interactive=False
        )

        assert cache.stores[1]._get_passphrase() is None
        assert fake_prompter.prompts == []

    def test_env_passphrase_wins(self, tmp_path, fake_prompter):
        cache = SessionCache.from_settings(
            Settings(cache_enabled=True, cache_dir=tmp_path, cache_passphrase="env"),
            prompter=fake_prompter,
            interactive=True,
        )

        assert cache.stores[1]._get_passphrase() == "env"
        assert fake_prompter.prompts == []

# awx/core/auth/cache/cache.py
"""
세션 캐시 구현

- CacheEntry: 프로파일별 캐시 항목 (자격증명 + 만료 + 저장 위치)
- MemoryStore: 메모리 저장소 (캐시 비활성 시 기본값, 프로세스 종료와 함께 소멸)
- KeyringStore: 플랫폼 시크릿 저장소 (keyring)
- EncryptedFileStore: 프로파일별 암호화 파일 (keyring 사용 불가 시)
- SessionCache: 저장소 우선순위 적용, 만료 검사, 손상 항목 폐기

설계 원칙:
- 캐시는 명시적 opt-in (AWX_CACHE) 일 때만 디스크/keyring에 기록
- 읽을 때마다 만료 검사 (expiration > now 일 때만 hit)
- 손상/복호화 불가 항목은 조용히 삭제하고 미스로 처리
- 패스프레이즈가 없으면 평문 저장 대신 파일 캐시를 비활성화
- 같은 프로파일에 대한 동시 실행은 조정하지 않음 (마지막 기록이 남음)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import keyring
from keyring.errors import KeyringError

from awx.core.exceptions import CacheCorruptionError
from awx.i18n import t

from ..types import CredentialSet, utc_now
from .crypto import DEFAULT_ITERATIONS, decrypt_dict, encrypt_dict

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1
ALL_PROFILES = "all"
KEYRING_SERVICE = "awx"


class StorageLocation(Enum):
    """캐시 항목 저장 위치"""

    KEYRING = "keyring"
    ENCRYPTED_FILE = "encrypted-file"
    MEMORY = "memory"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Cache Entry
# =============================================================================


@dataclass
class CacheEntry:
    """프로파일별 캐시 항목

    Attributes:
        profile: 프로파일 이름 (캐시 키)
        credentials: 캐시된 자격증명
        location: 저장 위치
        created_at: 생성 시간 (UTC)
    """

    profile: str
    credentials: CredentialSet
    location: StorageLocation
    created_at: datetime = field(default_factory=utc_now)

    @property
    def expires_at(self) -> datetime | None:
        """만료 시간 (None이면 만료되지 않음)"""
        return self.credentials.expiration

    def is_expired(self, now: datetime | None = None) -> bool:
        """만료 여부 (expires_at <= now 이면 만료)"""
        return not self.credentials.is_valid(now)

    def remaining_seconds(self, now: datetime | None = None) -> int | None:
        """남은 시간을 초 단위로 반환 (만료 없으면 None)"""
        if self.expires_at is None:
            return None
        remaining = self.expires_at - (now or utc_now())
        return max(0, int(remaining.total_seconds()))

    def to_payload(self) -> dict[str, Any]:
        """저장용 딕셔너리"""
        return {
            "version": CACHE_FORMAT_VERSION,
            "profile": self.profile,
            "created_at": self.created_at.isoformat(),
            "credentials": self.credentials.to_dict(),
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any], location: StorageLocation) -> CacheEntry:
        """저장된 딕셔너리에서 생성

        Raises:
            ValueError / KeyError / TypeError: 형식 오류
        """
        if not isinstance(data, dict) or not isinstance(data.get("credentials"), dict):
            raise ValueError("cache payload is not an object")
        if data.get("version") != CACHE_FORMAT_VERSION:
            raise ValueError(f"unsupported cache version: {data.get('version')!r}")
        return cls(
            profile=data["profile"],
            credentials=CredentialSet.from_dict(data["credentials"]),
            location=location,
            created_at=datetime.fromisoformat(data["created_at"]),
        )


# =============================================================================
# Stores
# =============================================================================


class CacheStore(ABC):
    """캐시 저장소 인터페이스

    load()는 항목이 없으면 None, 항목이 손상되었으면 CacheCorruptionError를 발생시킵니다.
    """

    location: StorageLocation

    @abstractmethod
    def available(self) -> bool:
        """저장소 사용 가능 여부"""
        pass

    @abstractmethod
    def load(self, profile: str) -> dict[str, Any] | None:
        pass

    @abstractmethod
    def save(self, profile: str, payload: dict[str, Any]) -> bool:
        """저장 성공 여부 반환"""
        pass

    @abstractmethod
    def delete(self, profile: str) -> bool:
        pass

    @abstractmethod
    def profiles(self) -> list[str]:
        """저장된 프로파일 이름 목록"""
        pass


class MemoryStore(CacheStore):
    """메모리 저장소 (Thread-safe)"""

    location = StorageLocation.MEMORY

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    def available(self) -> bool:
        return True

    def load(self, profile: str) -> dict[str, Any] | None:
        with self._lock:
            return self._data.get(profile)

    def save(self, profile: str, payload: dict[str, Any]) -> bool:
        with self._lock:
            self._data[profile] = payload
        return True

    def delete(self, profile: str) -> bool:
        with self._lock:
            return self._data.pop(profile, None) is not None

    def profiles(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class KeyringStore(CacheStore):
    """플랫폼 시크릿 저장소 (macOS Keychain, Secret Service 등)

    keyring에는 목록 조회 API가 없으므로 별도 인덱스 항목에 프로파일 이름을 기록합니다.
    """

    location = StorageLocation.KEYRING
    INDEX_KEY = "__awx_index__"

    def __init__(self, service: str = KEYRING_SERVICE):
        self.service = service

    def available(self) -> bool:
        try:
            backend = keyring.get_keyring()
        except KeyringError as e:
            logger.debug("keyring 백엔드 조회 실패: %s", e)
            return False
        # fail/null 백엔드는 priority가 0 이하
        return getattr(backend, "priority", 0) > 0

    def load(self, profile: str) -> dict[str, Any] | None:
        try:
            raw = keyring.get_password(self.service, profile)
        except KeyringError as e:
            logger.debug("keyring 읽기 실패 (%s): %s", profile, e)
            return None
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CacheCorruptionError(profile, cause=e) from e
        if not isinstance(data, dict):
            raise CacheCorruptionError(profile)
        return data

    def save(self, profile: str, payload: dict[str, Any]) -> bool:
        try:
            keyring.set_password(self.service, profile, json.dumps(payload))
            index = set(self.profiles())
            if profile not in index:
                index.add(profile)
                keyring.set_password(self.service, self.INDEX_KEY, json.dumps(sorted(index)))
        except KeyringError as e:
            logger.debug("keyring 저장 실패 (%s): %s", profile, e)
            return False
        return True

    def delete(self, profile: str) -> bool:
        removed = False
        try:
            keyring.delete_password(self.service, profile)
            removed = True
        except KeyringError:
            # PasswordDeleteError: 항목 없음
            pass
        index = [name for name in self.profiles() if name != profile]
        try:
            keyring.set_password(self.service, self.INDEX_KEY, json.dumps(index))
        except KeyringError as e:
            logger.debug("keyring 인덱스 갱신 실패: %s", e)
        return removed

    def profiles(self) -> list[str]:
        try:
            raw = keyring.get_password(self.service, self.INDEX_KEY)
        except KeyringError:
            return []
        if not raw:
            return []
        try:
            names = json.loads(raw)
        except json.JSONDecodeError:
            return []
        return sorted(n for n in names if isinstance(n, str)) if isinstance(names, list) else []


class EncryptedFileStore(CacheStore):
    """프로파일별 암호화 파일 저장소

    파일 위치: {directory}/{sha1(profile)}.bin (디렉토리 0700, 파일 0600)
    프로파일 이름을 AEAD associated data로 묶어 파일 바꿔치기를 감지합니다.
    """

    location = StorageLocation.ENCRYPTED_FILE
    SUFFIX = ".bin"

    def __init__(
        self,
        directory: str | Path,
        passphrase_provider: Callable[[], str | None],
        iterations: int = DEFAULT_ITERATIONS,
    ):
        """EncryptedFileStore 초기화

        Args:
            directory: 캐시 디렉토리
            passphrase_provider: 패스프레이즈를 반환하는 함수 (없으면 None)
            iterations: PBKDF2 반복 횟수
        """
        self.directory = Path(directory)
        self._passphrase_provider = passphrase_provider
        self._passphrase: str | None = None
        self._passphrase_resolved = False
        self.iterations = iterations

    def path_for(self, profile: str) -> Path:
        """프로파일 캐시 파일 경로"""
        digest = hashlib.sha1(profile.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.SUFFIX}"

    def _get_passphrase(self) -> str | None:
        if not self._passphrase_resolved:
            self._passphrase = self._passphrase_provider()
            self._passphrase_resolved = True
            if not self._passphrase:
                logger.info(t("cache.file_store_disabled"))
        return self._passphrase

    def available(self) -> bool:
        return True

    def load(self, profile: str) -> dict[str, Any] | None:
        path = self.path_for(profile)
        if not path.exists():
            return None
        passphrase = self._get_passphrase()
        if not passphrase:
            return None
        try:
            encrypted = path.read_bytes()
        except OSError as e:
            logger.debug("캐시 파일 읽기 실패 (%s): %s", profile, e)
            return None
        try:
            return decrypt_dict(encrypted, passphrase, profile.encode("utf-8"), self.iterations)
        except ValueError as e:
            raise CacheCorruptionError(profile, cause=e) from e

    def _ensure_directory(self) -> None:
        """캐시 디렉토리 생성 (직접 만든 경우에만 0700 적용, 기존 디렉토리 권한은 유지)"""
        if self.directory.is_dir():
            return
        self.directory.mkdir(parents=True, exist_ok=True)
        # mkdir의 mode는 umask 영향을 받음
        os.chmod(self.directory, 0o700)

    def save(self, profile: str, payload: dict[str, Any]) -> bool:
        passphrase = self._get_passphrase()
        if not passphrase:
            return False

        data = encrypt_dict(payload, passphrase, profile.encode("utf-8"), self.iterations)
        path = self.path_for(profile)
        tmp_path = path.with_suffix(".tmp")
        try:
            self._ensure_directory()
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning(t("cache.write_failed", profile=profile, error=e.__class__.__name__))
            tmp_path.unlink(missing_ok=True)
            return False
        return True

    def delete(self, profile: str) -> bool:
        path = self.path_for(profile)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def profiles(self) -> list[str]:
        # 파일명은 해시이므로 이름 대신 해시를 반환 (clear_all 전용)
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{self.SUFFIX}"))

    def clear_all(self) -> int:
        """디렉토리의 모든 캐시 파일 삭제"""
        count = 0
        for digest in self.profiles():
            try:
                (self.directory / f"{digest}{self.SUFFIX}").unlink()
                count += 1
            except FileNotFoundError:
                continue
        return count


# =============================================================================
# Session Cache
# =============================================================================


class SessionCache:
    """세션 캐시

    stores 순서가 우선순위입니다. 읽기는 사용 가능한 저장소를 순서대로 조회하고,
    쓰기는 처음으로 저장에 성공한 저장소 하나에만 기록합니다.

    Example:
        cache = SessionCache.from_settings(settings, prompter=prompter, interactive=True)
        creds = cache.get("prod")
        if creds is None:
            creds = resolve(...)
            cache.put("prod", creds)
    """

    def __init__(self, stores: list[CacheStore], cache_static: bool = True, enabled: bool = True):
        """SessionCache 초기화

        Args:
            stores: 우선순위 순 저장소 목록
            cache_static: 만료 없는 자격증명 저장 허용 여부
            enabled: opt-in 여부 (False면 메모리 전용)
        """
        self.stores = stores
        self.cache_static = cache_static
        self.enabled = enabled

    @classmethod
    def disabled(cls) -> SessionCache:
        """메모리 전용 캐시 (기본값)"""
        return cls([MemoryStore()], enabled=False)

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        prompter: Any = None,
        interactive: bool = False,
    ) -> SessionCache:
        """Settings에서 SessionCache 생성

        Args:
            settings: awx.core.config.Settings
            prompter: 패스프레이즈 입력용 Prompter (옵션)
            interactive: 대화형 모드 여부
        """
        if not settings.cache_enabled:
            return cls.disabled()

        def passphrase_provider() -> str | None:
            if settings.cache_passphrase:
                return settings.cache_passphrase
            if interactive and prompter is not None:
                return prompter.secret(t("cache.passphrase_prompt")) or None
            return None

        stores: list[CacheStore] = [
            KeyringStore(),
            EncryptedFileStore(settings.cache_dir, passphrase_provider),
        ]
        return cls(stores, cache_static=settings.cache_static, enabled=True)

    def get(self, profile: str, now: datetime | None = None) -> CredentialSet | None:
        """유효한 캐시 자격증명 조회 (만료/손상 항목은 삭제 후 None)"""
        entry = self.get_entry(profile, now)
        return entry.credentials if entry else None

    def get_entry(self, profile: str, now: datetime | None = None) -> CacheEntry | None:
        """유효한 CacheEntry 조회"""
        for store in self.stores:
            if not store.available():
                continue
            try:
                payload = store.load(profile)
                if payload is None:
                    continue
                entry = CacheEntry.from_payload(payload, store.location)
                if entry.profile != profile:
                    raise ValueError("profile mismatch")
            except CacheCorruptionError as e:
                logger.info(str(e))
                store.delete(profile)
                continue
            except (KeyError, TypeError, ValueError) as e:
                logger.info(str(CacheCorruptionError(profile, cause=e)))
                store.delete(profile)
                continue

            if entry.is_expired(now):
                logger.debug("[%s] 캐시 만료 (%s)", profile, store.location)
                store.delete(profile)
                continue

            logger.debug("[%s] 캐시 hit (%s, 남은 시간 %s초)", profile, store.location, entry.remaining_seconds(now))
            return entry
        return None

    def put(self, profile: str, credentials: CredentialSet) -> CacheEntry | None:
        """자격증명 저장

        Returns:
            저장된 CacheEntry (저장하지 않았으면 None)
        """
        if credentials.expiration is None:
            if credentials.is_temporary:
                # 만료를 알 수 없는 임시 자격증명은 저장하지 않음
                logger.debug("[%s] 만료 시간을 알 수 없어 캐시하지 않음", profile)
                return None
            if not self.cache_static:
                logger.debug("[%s] 정적 자격증명 캐시 비허용", profile)
                return None

        cached = credentials.with_region(None)
        for store in self.stores:
            if not store.available():
                continue
            entry = CacheEntry(profile=profile, credentials=cached, location=store.location)
            if store.save(profile, entry.to_payload()):
                logger.debug("[%s] 캐시 저장 (%s)", profile, store.location)
                return entry
        return None

    def clear(self, target: str) -> int:
        """캐시 삭제

        Args:
            target: 프로파일 이름 또는 "all"

        Returns:
            삭제된 항목 수
        """
        count = 0
        for store in self.stores:
            if not store.available():
                continue
            if target == ALL_PROFILES:
                if isinstance(store, EncryptedFileStore):
                    count += store.clear_all()
                    continue
                for name in store.profiles():
                    if store.delete(name):
                        count += 1
            elif store.delete(target):
                count += 1
        return count

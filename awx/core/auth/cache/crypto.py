"""
awx/core/auth/cache/crypto.py

패스프레이즈 기반 딕셔너리 암호화 (AES-256-GCM + PBKDF2-HMAC-SHA256).

저장 형식: MAGIC(4) + salt(16) + nonce(12) + ciphertext(GCM tag 포함)
쓰기마다 salt와 nonce를 새로 생성합니다.
"""

from __future__ import annotations

import json
import os
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

MAGIC = b"AWX1"
SALT_SIZE = 16
NONCE_SIZE = 12
KEY_SIZE = 32
DEFAULT_ITERATIONS = 390_000


def derive_key(passphrase: str, salt: bytes, iterations: int = DEFAULT_ITERATIONS) -> bytes:
    """패스프레이즈에서 256비트 키 유도"""
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=iterations,
    ).derive(passphrase.encode("utf-8"))


def encrypt_dict(
    data: dict[str, Any],
    passphrase: str,
    associated_data: bytes | None = None,
    iterations: int = DEFAULT_ITERATIONS,
) -> bytes:
    """딕셔너리를 JSON 직렬화 후 AES-GCM으로 암호화"""
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    key = derive_key(passphrase, salt, iterations)
    ciphertext = AESGCM(key).encrypt(nonce, json.dumps(data).encode("utf-8"), associated_data)
    return MAGIC + salt + nonce + ciphertext


def decrypt_dict(
    encrypted: bytes,
    passphrase: str,
    associated_data: bytes | None = None,
    iterations: int = DEFAULT_ITERATIONS,
) -> dict[str, Any]:
    """encrypt_dict 결과를 복호화

    Raises:
        ValueError: 형식 오류, 잘못된 패스프레이즈, 변조된 데이터
    """
    header_size = len(MAGIC) + SALT_SIZE + NONCE_SIZE
    if len(encrypted) <= header_size or not encrypted.startswith(MAGIC):
        raise ValueError("Decryption failed: unrecognized format")

    offset = len(MAGIC)
    salt = encrypted[offset : offset + SALT_SIZE]
    nonce = encrypted[offset + SALT_SIZE : header_size]
    ciphertext = encrypted[header_size:]

    try:
        key = derive_key(passphrase, salt, iterations)
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, associated_data)
        data = json.loads(plaintext.decode("utf-8"))
    except InvalidTag:
        # 패스프레이즈가 틀렸거나 데이터가 변조된 경우
        raise ValueError("Decryption failed: incorrect passphrase or corrupted data") from None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Decryption failed: {e.__class__.__name__}") from None

    if not isinstance(data, dict):
        raise ValueError("Decryption failed: payload is not an object")
    return data

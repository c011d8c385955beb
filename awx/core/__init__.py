# awx/core/__init__.py
"""
core - awx 인증 엔진 및 실행기

Usage:
    from awx.core.config import Settings
    from awx.core.exceptions import AwxError

    settings = Settings.from_env()
"""

# awx/core/auth/provider/client.py
"""
AWS 외부 호출 게이트웨이

인증 Flow가 사용하는 모든 외부 호출(STS, SSO 로그인)을 한 곳에 모읍니다.
Flow는 이 클래스만 의존하므로 테스트에서는 Mock으로 교체할 수 있습니다.

- STS 호출: boto3 client (짧은 타임아웃, botocore 자체 재시도 비활성화)
  재시도는 awx.core.auth.retry.call_with_retry가 담당합니다.
- SSO 로그인: `aws sso login --profile NAME` 을 상속된 터미널에서 실행
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable
from typing import Any

import boto3
from botocore.config import Config

from awx.core.exceptions import ExecutableNotFoundError

from ..types import CredentialSet

logger = logging.getLogger(__name__)

STS_DEFAULT_REGION = "us-east-1"
DEFAULT_SESSION_DURATION = 3600  # 초

_MFA_ACCOUNT_PATTERN = re.compile(r"^arn:[^:]+:iam::(\d{12}):mfa/.+$")


def extract_account_id(arn: str | None) -> str | None:
    """IAM ARN에서 계정 ID 추출 (ARN이 아니면 None)

    Example:
        extract_account_id("arn:aws:iam::123456789012:mfa/alice")  # "123456789012"
        extract_account_id("GAHT12345678")  # None (하드웨어 토큰 시리얼)
    """
    if not arn:
        return None
    match = _MFA_ACCOUNT_PATTERN.match(arn)
    return match.group(1) if match else None


class AwsGateway:
    """STS / SSO 외부 호출 래퍼

    Attributes:
        aws_binary: 래핑 대상 AWS CLI 실행 파일 이름
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
    """

    def __init__(
        self,
        aws_binary: str = "aws",
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        session_factory: Callable[..., Any] = boto3.Session,
    ):
        self.aws_binary = aws_binary
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # 세션 / 클라이언트
    # -------------------------------------------------------------------------

    def _client_config(self) -> Config:
        return Config(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            retries={"mode": "standard", "total_max_attempts": 1},
        )

    def _session(self, credentials: CredentialSet | None = None, profile_name: str | None = None) -> Any:
        if credentials is not None:
            return self._session_factory(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                aws_session_token=credentials.session_token,
            )
        return self._session_factory(profile_name=profile_name)

    def _sts(self, credentials: CredentialSet | None = None, profile_name: str | None = None) -> Any:
        session = self._session(credentials, profile_name)
        region = getattr(session, "region_name", None) or STS_DEFAULT_REGION
        return session.client("sts", region_name=region, config=self._client_config())

    # -------------------------------------------------------------------------
    # STS
    # -------------------------------------------------------------------------

    def get_caller_identity(
        self,
        credentials: CredentialSet | None = None,
        profile_name: str | None = None,
    ) -> dict[str, Any]:
        """sts:GetCallerIdentity 호출

        credentials가 주어지면 그 자격증명으로, 아니면 profile_name 프로파일로 호출합니다.
        """
        response: dict[str, Any] = self._sts(credentials, profile_name).get_caller_identity()
        return response

    def profile_credentials(self, profile_name: str) -> CredentialSet | None:
        """botocore 자격증명 체인으로 프로파일 자격증명 추출 (SSO 캐시 토큰 포함)"""
        session = self._session(profile_name=profile_name)
        credentials = session.get_credentials()
        if credentials is None:
            return None
        frozen = credentials.get_frozen_credentials()
        return CredentialSet(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            expiration=getattr(credentials, "_expiry_time", None),
        )

    def get_session_token(
        self,
        credentials: CredentialSet,
        serial_number: str,
        token_code: str,
        duration_seconds: int = DEFAULT_SESSION_DURATION,
    ) -> CredentialSet:
        """sts:GetSessionToken (MFA)"""
        response = self._sts(credentials).get_session_token(
            SerialNumber=serial_number,
            TokenCode=token_code,
            DurationSeconds=duration_seconds,
        )
        return CredentialSet.from_sts_response(response["Credentials"])

    def assume_role(
        self,
        credentials: CredentialSet,
        role_arn: str,
        session_name: str,
        duration_seconds: int = DEFAULT_SESSION_DURATION,
        external_id: str | None = None,
        serial_number: str | None = None,
        token_code: str | None = None,
    ) -> CredentialSet:
        """sts:AssumeRole"""
        params: dict[str, Any] = {
            "RoleArn": role_arn,
            "RoleSessionName": session_name,
            "DurationSeconds": duration_seconds,
        }
        if external_id:
            params["ExternalId"] = external_id
        if serial_number and token_code:
            params["SerialNumber"] = serial_number
            params["TokenCode"] = token_code

        response = self._sts(credentials).assume_role(**params)
        return CredentialSet.from_sts_response(response["Credentials"])

    # -------------------------------------------------------------------------
    # SSO 로그인
    # -------------------------------------------------------------------------

    def sso_login_command(self, profile_name: str) -> list[str]:
        return [self.aws_binary, "sso", "login", "--profile", profile_name]

    def sso_login(self, profile_name: str) -> int:
        """`aws sso login --profile NAME` 실행 (브라우저 인증, 터미널 상속)

        Returns:
            로그인 명령 종료 코드

        Raises:
            ExecutableNotFoundError: aws 실행 파일이 PATH에 없을 때
        """
        executable = shutil.which(self.aws_binary)
        if executable is None:
            raise ExecutableNotFoundError(self.aws_binary)

        command = self.sso_login_command(profile_name)
        logger.debug("SSO 로그인 실행: %s", " ".join(command))
        return subprocess.run([executable, *command[1:]], check=False).returncode

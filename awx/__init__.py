# awx/__init__.py
"""
awx - AWS CLI 인증 래퍼

프로파일의 인증 방식(SSO, MFA, AssumeRole 체인, 정적 키)을 해석해
aws CLI 자식 프로세스에 자격증명을 주입합니다.

아키텍처:
    awx/
    ├── core/
    │   ├── auth/       # Profile Store, Credential Resolver, Session Cache
    │   ├── launcher/   # 자식 프로세스 실행 및 시그널 전달
    │   ├── config.py   # 환경 변수 기반 실행 설정
    │   └── exceptions.py   # 통합 예외 계층 (종료 코드)
    ├── cli/            # Click CLI, questionary 프롬프트, rich 출력
    └── i18n/           # ko/en 메시지
"""

from awx.core.config import get_version

__version__ = get_version()

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .config import (
    AUTH_TIMEOUT_SECONDS,
    SUPABASE_ANON_KEY,
    SUPABASE_JWT_AUDIENCE,
    SUPABASE_JWT_SECRET,
    SUPABASE_URL,
)
from .database import get_db
from .domain.tenants.service import TenantResolver
from .errors import UnauthenticatedError

logger = logging.getLogger(__name__)

# auto_error=False: a missing or non-bearer header reaches us as None
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller for the lifetime of one request"""

    id: str
    email: Optional[str] = None
    metadata: dict = field(default_factory=dict)


class CredentialValidator(Protocol):
    async def validate(self, token: Optional[str]) -> Optional[Principal]: ...


def _principal_from_claims(user_id, email, metadata) -> Optional[Principal]:
    if not user_id:
        return None
    return Principal(id=str(user_id), email=email, metadata=dict(metadata or {}))


class JwtCredentialValidator:
    """Verify Supabase-issued HS256 access tokens locally with the project JWT secret"""

    def __init__(self, secret: str, audience: Optional[str] = SUPABASE_JWT_AUDIENCE):
        self.secret = secret
        self.audience = audience

    async def validate(self, token: Optional[str]) -> Optional[Principal]:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as e:
            logger.info(f"Access token rejected: {type(e).__name__}")
            return None
        return _principal_from_claims(
            claims.get("sub"), claims.get("email"), claims.get("user_metadata")
        )


class SupabaseCredentialValidator:
    """Ask the identity provider who owns the token (GET /auth/v1/user)"""

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout: float = AUTH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def validate(self, token: Optional[str]) -> Optional[Principal]:
        if not token:
            return None
        if not self.base_url or not self.api_key:
            logger.error("Supabase auth not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers={"Authorization": f"Bearer {token}", "apikey": self.api_key},
                )
        except httpx.HTTPError as e:
            # Identity service unreachable: fail closed
            logger.error(f"Identity service request failed: {type(e).__name__}: {e}")
            return None

        if response.status_code != 200:
            logger.info(f"Access token rejected by identity service: HTTP {response.status_code}")
            return None

        try:
            user = response.json()
        except ValueError:
            logger.error("Identity service returned a non-JSON body")
            return None
        return _principal_from_claims(user.get("id"), user.get("email"), user.get("user_metadata"))


def build_credential_validator() -> CredentialValidator:
    if SUPABASE_JWT_SECRET:
        return JwtCredentialValidator(SUPABASE_JWT_SECRET)
    return SupabaseCredentialValidator(SUPABASE_URL, SUPABASE_ANON_KEY)


_validator: Optional[CredentialValidator] = None


def get_credential_validator() -> CredentialValidator:
    global _validator
    if _validator is None:
        _validator = build_credential_validator()
    return _validator


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    validator: CredentialValidator = Depends(get_credential_validator),
) -> Principal:
    """Absent and invalid credentials are indistinguishable to the caller"""
    token = credentials.credentials if credentials else None
    principal = await validator.validate(token)
    if principal is None:
        raise UnauthenticatedError()
    return principal


async def get_current_craftsman_id(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> int:
    """Resolved tenant id; every tenant-scoped handler filters on this value"""
    return TenantResolver(db).resolve_or_create(principal)

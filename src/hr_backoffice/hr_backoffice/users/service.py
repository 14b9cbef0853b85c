from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash

from ..common.otp_cache import ExpiringCodeCache
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_OTP_TTL_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError
from .repository import IdentityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    identity_id: int
    name: str
    role: Role

    def as_dict(self) -> dict:
        return {"id": self.identity_id, "name": self.name, "role": self.role.value}


def _six_digit_code() -> str:
    return f"{secrets.randbelow(10**6):06d}"


class AuthService:
    """Use case: authenticate an identity (login), with an optional admin OTP step."""

    def __init__(
        self,
        identities: IdentityRepository,
        *,
        otp_cache: Optional[ExpiringCodeCache] = None,
        otp_required: bool = False,
        otp_ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS,
        code_generator: Callable[[], str] = _six_digit_code,
    ):
        self._identities = identities
        self._otp_cache = otp_cache or ExpiringCodeCache()
        self._otp_required = bool(otp_required)
        self._otp_ttl = int(otp_ttl_seconds)
        self._code_generator = code_generator

    def send_admin_otp(self, mobile: str) -> str:
        """Issue a single-use login code for an admin. Delivery (SMS) is external."""

        mobile = require_non_empty(mobile, "mobile")
        admin = self._identities.get_by_login(mobile)
        if not admin or not admin.is_active or admin.role != Role.ADMIN:
            raise NotFoundError("No active admin with that mobile number")

        code = self._code_generator()
        self._otp_cache.set(str(admin.identity_id), code, self._otp_ttl)
        logger.info("admin otp issued for identity=%s (ttl=%ss)", admin.identity_id, self._otp_ttl)
        return code

    def authenticate(self, login: str, password: str, *, otp: Optional[str] = None) -> SessionUser:
        identity = self._identities.get_by_login((login or "").strip())
        if not identity or not identity.is_active or not identity.password_hash:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(identity.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        if identity.role == Role.ADMIN and self._otp_required:
            if not otp or not self._otp_cache.verify_and_consume(str(identity.identity_id), str(otp).strip()):
                raise AuthenticationError("Invalid or expired OTP")

        logger.info("login ok identity=%s role=%s", identity.identity_id, identity.role.value)
        return SessionUser(identity_id=identity.identity_id, name=identity.name, role=identity.role)

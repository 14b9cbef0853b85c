from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Identity


class IdentityRepository(Protocol):
    """Read-side interface over the identity store.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, identity_id: int) -> Optional[Identity]:
        raise NotImplementedError

    def get_by_login(self, login: str) -> Optional[Identity]:
        """Look up by email, mobile or employee id."""

        raise NotImplementedError

    def list_by_roles(self, roles: Iterable[Role], *, active_only: bool = True) -> Sequence[Identity]:
        raise NotImplementedError

    def list_assigned(self, supervisor_id: int) -> Sequence[Identity]:
        raise NotImplementedError

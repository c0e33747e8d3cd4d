"""Authorization lattice for token mutations.

A caller may act on a token when ANY of these hold:
- it owns the token
- it is the token's approved delegate
- it is an operator of the authorization subject
- it is a custodian

The authorization subject is supplied by the operation. ``transfer`` uses
the caller-supplied ``from`` and ``approve`` uses the delegate, not the
token's real owner. Callers that need the real owner must check it
separately, after authorization.

Custodians are administrators. Only an existing custodian can change the
custodian set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..constants import ZERO_PRINCIPAL
from .errors import Unauthorized
from .tokens import Token

logger = logging.getLogger(__name__)


class AccessControl:
    """Owns the custodian set and the operator grants.

    Thread-safety: NOT thread-safe. The registry serializes all entry points.
    """

    custodians: set[str]
    operators: dict[str, set[str]]  # owner -> operators

    def __init__(
        self,
        custodians: Iterable[str],
        operators: dict[str, set[str]] | None = None,
    ) -> None:
        self.custodians = set(custodians)
        self.operators = {k: set(v) for k, v in (operators or {}).items()}

    # ===== CHECKS =====

    def is_custodian(self, principal: str) -> bool:
        return principal in self.custodians

    def is_operator(self, subject: str, caller: str) -> bool:
        """True if ``caller`` holds blanket authority over ``subject``'s tokens."""
        return caller in self.operators.get(subject, set())

    def is_authorized(self, caller: str, subject: str, token: Token) -> bool:
        return (
            token.owner == caller
            or token.approved == caller
            or self.is_operator(subject, caller)
            or self.is_custodian(caller)
        )

    def authorize(self, caller: str, subject: str, token: Token) -> None:
        """Raise Unauthorized unless ``caller`` may act on ``token`` for ``subject``."""
        if not self.is_authorized(caller, subject, token):
            raise Unauthorized(
                f"{caller} is not authorized for token {token.id}",
                caller=caller,
                subject=subject,
                token_id=token.id,
            )

    def require_custodian(self, caller: str) -> None:
        if not self.is_custodian(caller):
            raise Unauthorized(f"{caller} is not a custodian", caller=caller)

    # ===== MUTATIONS =====

    def set_approval_for_all(self, caller: str, operator: str, is_approved: bool) -> None:
        """Grant or revoke blanket authority from ``caller`` to ``operator``.

        Granting to oneself changes nothing. The sentinel operator revokes
        every grant when ``is_approved`` is False and is ignored when True:
        there is no way to make everyone an operator.
        """
        if operator == caller:
            return
        grants = self.operators.setdefault(caller, set())
        if operator == ZERO_PRINCIPAL:
            if not is_approved:
                grants.clear()
            return
        if is_approved:
            grants.add(operator)
        else:
            grants.discard(operator)

    def set_custodian(self, caller: str, user: str, custodian: bool) -> None:
        """Add or remove ``user`` from the custodian set. Custodians only."""
        self.require_custodian(caller)
        if custodian:
            self.custodians.add(user)
        else:
            self.custodians.discard(user)
        logger.info("custodian %s %s by %s", user, "added" if custodian else "removed", caller)

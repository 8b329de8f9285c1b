"""Caller credential carriers and default-user resolution."""

from __future__ import annotations

from dataclasses import dataclass, field

from packages.banklog_sdk.errors import BankLogAuthError

ENVIRONMENTS = frozenset({"sandbox", "production"})


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Opaque API credentials for one project or organization."""

    id: str
    access_token: str = field(repr=False)
    environment: str = "sandbox"
    workspace_id: str | None = None

    def credential_headers(self) -> dict[str, str]:
        """Return the credential headers attached to every request."""
        headers = {"Access-Id": self.id, "Access-Token": self.access_token}
        if self.workspace_id:
            headers["Access-Workspace"] = self.workspace_id
        return headers


def resolve_user(
    user: AuthContext | None,
    default: AuthContext | None = None,
    *,
    operation: str,
) -> AuthContext:
    """Return the first available credentials or raise ``BankLogAuthError``."""
    resolved = user if user is not None else default
    if resolved is None:
        raise BankLogAuthError(
            message=(
                f"{operation} requires credentials: pass user= or configure "
                "api.user_id and api.access_token"
            ),
            operation=operation,
        )
    if not isinstance(resolved, AuthContext):
        raise BankLogAuthError(
            message=f"{operation} user must be an AuthContext, got {type(resolved).__name__}",
            operation=operation,
        )
    if not all(
        isinstance(value, str) and value.strip() != ""
        for value in (resolved.id, resolved.access_token)
    ):
        raise BankLogAuthError(
            message=f"{operation} credentials must include id and access_token",
            operation=operation,
        )
    if not isinstance(resolved.environment, str) or resolved.environment not in ENVIRONMENTS:
        raise BankLogAuthError(
            message=(
                f"{operation} environment must be one of: "
                f"{', '.join(sorted(ENVIRONMENTS))}"
            ),
            operation=operation,
        )
    return resolved

"""Derivation of personal workspace names from tenant identities."""

from __future__ import annotations

import re

DEFAULT_NAME_PREFIX = "personal-"
NAME_SEPARATOR = "-"

# Identities never contain the separator, so swapping "." for it keeps
# derived names injective.
IDENTITY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._@+]*$")


def is_valid_identity(identity: str) -> bool:
    """Check whether an identity belongs to the tenant identity character set."""
    return bool(IDENTITY_PATTERN.match(identity))


def derive_personal_workspace_name(
    identity: str, prefix: str = DEFAULT_NAME_PREFIX
) -> str:
    """Derive the personal workspace name of a tenant.

    The same name is used for the workspace resource and for its
    subscription entry.

    Example:
        >>> derive_personal_workspace_name("john.doe@example")
        'personal-john-doe@example'
    """
    return f"{prefix}{identity.replace('.', NAME_SEPARATOR)}"

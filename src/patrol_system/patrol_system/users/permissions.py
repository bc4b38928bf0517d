from __future__ import annotations

from typing import Iterable

# Either spelling grants every permission.
CATCH_ALL = frozenset({"all", "*"})


def has_permission(granted: Iterable[str], required: str) -> bool:
    """Check `required` against a role's permission strings.

    Each granted entry is a catch-all ("all" / "*"), a namespace wildcard
    ("reports.*" covers "reports.read" and "reports.export.pdf") or an
    exact permission.
    """
    required = str(getattr(required, "value", required))
    for perm in granted:
        perm = str(perm).strip()
        if not perm:
            continue
        if perm in CATCH_ALL or perm == required:
            return True
        if perm.endswith(".*") and required.startswith(perm[:-1]):
            return True
    return False

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Role:
    role: str
    permissions: tuple[str, ...] = field(default_factory=tuple)
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"Role": self.role, "Permissions": list(self.permissions), "Description": self.description}

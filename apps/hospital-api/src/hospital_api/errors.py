from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int
    fields: dict[str, str] = field(default_factory=dict)

"""Result type for single orchestration steps.

Each candidate page (and the search fallback) produces one ``StepOutcome``.
The resolver folds them in order instead of relying on exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

StepStatus = Literal["found", "empty", "failed"]


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    source: str
    urls: tuple[str, ...] = ()
    reason: str = ""

    @classmethod
    def found(cls, source: str, urls: list[str] | tuple[str, ...]) -> StepOutcome:
        return cls(status="found", source=source, urls=tuple(urls))

    @classmethod
    def empty(cls, source: str) -> StepOutcome:
        return cls(status="empty", source=source)

    @classmethod
    def failed(cls, source: str, reason: str) -> StepOutcome:
        return cls(status="failed", source=source, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == "found" and bool(self.urls)

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class BudgetTracker:
    """Countdown bounding how many URLs a crawl may dispatch."""

    limit: int
    remaining: int = field(init=False)

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError("limit must not be negative")
        self.remaining = self.limit

    def try_consume(self) -> bool:
        """Take one unit of budget, or refuse without consuming when exhausted."""
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True

    @property
    def used(self) -> int:
        return self.limit - self.remaining

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

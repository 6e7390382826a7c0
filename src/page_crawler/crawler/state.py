from __future__ import annotations

from dataclasses import dataclass, field

from ..core.report import CrawlFailure
from .budget import BudgetTracker
from .frontier import Frontier


@dataclass(slots=True)
class CrawlSessionState:
    """Mutable runtime bookkeeping for one crawl run."""

    budget: BudgetTracker
    frontier: Frontier = field(default_factory=Frontier)
    fetched_urls: set[str] = field(default_factory=set)
    dispatch_order: list[str] = field(default_factory=list)
    failures: list[CrawlFailure] = field(default_factory=list)
    dropped_count: int = 0
    in_flight: int = 0
    peak_in_flight: int = 0
    running: bool = False
    completed: bool = False

    def task_started(self, url: str) -> None:
        self.fetched_urls.add(url)
        self.dispatch_order.append(url)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    def task_finished(self) -> None:
        self.in_flight -= 1

    def is_quiescent(self) -> bool:
        return not self.frontier and self.in_flight == 0

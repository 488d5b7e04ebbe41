"""Run report: diagnostics and failure signals of one invocation.

Every decision (skip, rebase, ignore) is recorded as an info line and
logged. Failures are recorded separately; any failure makes the run fail
even though scanning may have continued past it.
"""

import logging
from typing import List


class RunReport:
    """Collects what happened during one dispatch."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logging.getLogger("autobase.report")
        self.messages: List[str] = []
        self.failures: List[str] = []
        self.rebased: List[int] = []

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def info(self, message: str) -> None:
        """Record an informational diagnostic."""
        self.messages.append(message)
        self._log.info("%s", message)

    def fail(self, message: str) -> None:
        """Record a failure; the run exits non-zero but keeps going."""
        self.failures.append(message)
        self._log.error("%s", message)

    def record_rebase(self, pr_number: int) -> None:
        self.rebased.append(pr_number)

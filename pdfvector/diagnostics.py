"""Event counters for tolerated content-stream problems.

Each interpreter owns (or is handed) one :class:`Diagnostics` instance, so
repeated problems are logged once per instance and nothing is remembered
process-wide.
"""

import logging
from collections import Counter

UNKNOWN_OPERATOR = "unknown-operator"
MISSING_OPERANDS = "missing-operands"
INVALID_OPERAND = "invalid-operand"
CMAP_ERROR = "cmap-error"
UNBALANCED_RESTORE = "unbalanced-restore"


class Diagnostics:
    def __init__(self) -> None:
        self.events: Counter[tuple[str, str]] = Counter()

    def __repr__(self) -> str:
        return f"<Diagnostics: {dict(self.totals())!r}>"

    def report(self, event: str, detail: str = "") -> bool:
        """Records one occurrence; True if this (event, detail) is new."""
        key = (event, detail)
        first = key not in self.events
        self.events[key] += 1
        return first

    def warn_once(self, logger: logging.Logger, event: str, msg: str) -> None:
        if self.report(event, msg):
            logger.warning(msg)

    def count(self, event: str, detail: str | None = None) -> int:
        if detail is not None:
            return self.events[(event, detail)]
        return sum(n for (e, _), n in self.events.items() if e == event)

    def totals(self) -> Counter[str]:
        totals: Counter[str] = Counter()
        for (event, _), n in self.events.items():
            totals[event] += n
        return totals

    def clear(self) -> None:
        self.events.clear()

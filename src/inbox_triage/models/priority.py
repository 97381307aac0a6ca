"""Priority tiers assigned to triaged emails."""

from enum import Enum


class Priority(str, Enum):
    """Email priority tier enumeration."""

    SPAM = "spam"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Sort rank: high(3) > medium(2) > low(1) > spam(0)."""
        return _RANKS[self]


_RANKS = {
    Priority.SPAM: 0,
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}

"""Outcome model for user-visible notifications."""

from dataclasses import dataclass

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Outcome:
    """A notification produced by a ledger mutation or export attempt.

    Attributes:
        title: Short headline (e.g., "Monthly Target Set").
        description: Human-readable detail.
        variant: Severity, either 'default' or 'destructive'.
    """

    title: str
    description: str
    variant: str = DEFAULT

    @property
    def is_destructive(self) -> bool:
        return self.variant == DESTRUCTIVE

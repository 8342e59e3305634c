"""Hydration gate guarding the one-time load of persisted ledger state."""

from enum import Enum


class HydrationState(Enum):
    UNINITIALIZED = "uninitialized"
    HYDRATING = "hydrating"
    READY = "ready"


class HydrationError(RuntimeError):
    """Raised on an illegal hydration state transition."""


class HydrationGate:
    """Three-state lifecycle: uninitialized -> hydrating -> ready.

    A failed load resets hydrating to uninitialized; ready is final. Until
    the gate is ready, aggregation reports zeros and nothing is written back
    to storage.
    """

    def __init__(self):
        self.state = HydrationState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state is HydrationState.READY

    def begin(self) -> None:
        """Move from uninitialized to hydrating."""
        self._advance(HydrationState.UNINITIALIZED, HydrationState.HYDRATING)

    def complete(self) -> None:
        """Move from hydrating to ready."""
        self._advance(HydrationState.HYDRATING, HydrationState.READY)

    def reset(self) -> None:
        """Move from hydrating back to uninitialized after a failed load."""
        self._advance(HydrationState.HYDRATING, HydrationState.UNINITIALIZED)

    def _advance(self, expected: HydrationState, target: HydrationState) -> None:
        if self.state is not expected:
            raise HydrationError(
                f"Cannot move to {target.value} from {self.state.value}"
            )
        self.state = target

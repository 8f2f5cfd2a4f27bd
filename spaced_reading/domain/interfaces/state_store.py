"""State store protocol."""

from typing import Protocol, runtime_checkable

from ..entities.app_state import AppState


@runtime_checkable
class StateStore(Protocol):
    """Protocol for application state persistence.

    The whole state is loaded and saved as one document under a single
    storage key. Implementations can use different backends (local file,
    DynamoDB, etc.) but must never let a storage failure escape.
    """

    def load(self) -> AppState:
        """Load the application state.

        Returns:
            AppState: The stored state, or the default state when nothing is
                stored yet or the stored data cannot be read.
        """
        ...

    def save(self, state: AppState) -> None:
        """Save the application state.

        Failures are logged and the save is dropped.

        Args:
            state: The state to persist.
        """
        ...

"""DynamoDB implementation of StateStore."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from ..domain.entities.app_state import AppState, default_state
from ..domain.exceptions import PersistenceError
from ..domain.interfaces.state_store import StateStore
from .local_state_store import DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)


class DynamoDBStateStore(StateStore):
    """DynamoDB implementation of the StateStore protocol.

    The state is kept as a JSON string in a single item whose ``id`` is the
    storage key.
    """

    def __init__(
        self,
        table_name: str,
        storage_key: str = DEFAULT_STORAGE_KEY,
        region_name: str = "us-east-1",
    ):
        """Initialize the DynamoDB state store.

        Args:
            table_name: The name of the DynamoDB table.
            storage_key: Partition key value of the state item.
            region_name: AWS region name (default: us-east-1).
        """
        self.table_name = table_name
        self.storage_key = storage_key
        self.dynamodb = boto3.resource("dynamodb", region_name=region_name)
        self.table = self.dynamodb.Table(table_name)

    def load(self) -> AppState:
        """Load the state item, falling back to the default state."""
        try:
            state = self._get_state()
        except PersistenceError as e:
            logger.error(f"Failed to load state: {e}")
            return default_state()

        if state is None:
            logger.info(f"No state item {self.storage_key} in {self.table_name}, starting fresh")
            return default_state()
        return state

    def save(self, state: AppState) -> None:
        """Write the state item. Failures are logged and dropped."""
        try:
            self.table.put_item(Item=self._state_to_item(state))
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to save state to {self.table_name}: {e}")

    def _get_state(self) -> Optional[AppState]:
        try:
            response = self.table.get_item(Key={"id": self.storage_key})
        except (BotoCoreError, ClientError) as e:
            raise PersistenceError(
                f"Could not read state from {self.table_name}", {"error": str(e)}
            ) from e

        if "Item" not in response:
            return None
        return self._item_to_state(response["Item"])

    def _state_to_item(self, state: AppState) -> Dict[str, Any]:
        """Convert the application state to a DynamoDB item.

        Args:
            state: The application state.

        Returns:
            Dict: The DynamoDB item representation.
        """
        return {
            "id": self.storage_key,
            "state": state.model_dump_json(),
            "updated_at": datetime.now().isoformat(),
        }

    def _item_to_state(self, item: Dict[str, Any]) -> AppState:
        """Convert a DynamoDB item to the application state.

        Raises:
            PersistenceError: If the item has no valid state payload.
        """
        payload = item.get("state")
        if not isinstance(payload, str):
            raise PersistenceError(f"State item {self.storage_key} has no state payload")
        try:
            return AppState.model_validate_json(payload)
        except PydanticValidationError as e:
            raise PersistenceError(
                f"State item {self.storage_key} is malformed",
                {"errors": e.error_count()},
            ) from e

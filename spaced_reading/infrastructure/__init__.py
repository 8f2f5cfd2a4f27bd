"""Infrastructure layer components."""

from .bedrock_book_enricher import BedrockBookEnricher, BedrockEnricherConfig
from .dynamodb_state_store import DynamoDBStateStore
from .local_book_enricher import LocalBookEnricher
from .local_state_store import LocalStateStore

__all__ = [
    "BedrockBookEnricher",
    "BedrockEnricherConfig",
    "DynamoDBStateStore",
    "LocalBookEnricher",
    "LocalStateStore",
]

"""Amazon Bedrock implementation of BookEnricher."""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from ..domain.entities.book_details import BookDetails
from ..domain.exceptions import EnrichmentError
from ..domain.interfaces.book_enricher import BookEnricher

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a bibliographic assistant. Answer with a single JSON object and "
    "nothing else. Keys: title (string), subtitle (string), author (string), "
    "publisher (string), isbn (string), page_count (integer), summary (string), "
    "suggested_categories (array of strings), chapters (array of chapter titles, "
    "actual or estimated). title, author and page_count are required."
)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass
class BedrockEnricherConfig:
    """Configuration for the Bedrock book enricher."""
    region: str = "us-east-1"
    model_id: str = "amazon.nova-lite-v1:0"
    max_tokens: int = 2048
    temperature: float = 0.2
    summary_language: str = "English"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None


class BedrockBookEnricher(BookEnricher):
    """Looks up book metadata with a text model through the Bedrock Converse API."""

    def __init__(self, config: Optional[BedrockEnricherConfig] = None):
        """Initialize the Bedrock book enricher.

        Args:
            config: Optional configuration object. Defaults are used if omitted.
        """
        self.config = config or BedrockEnricherConfig()
        self.client = boto3.client(
            "bedrock-runtime",
            region_name=self.config.region,
            aws_access_key_id=self.config.aws_access_key_id,
            aws_secret_access_key=self.config.aws_secret_access_key,
            aws_session_token=self.config.aws_session_token,
        )

    async def fetch_book_details(self, query: str) -> BookDetails:
        """Ask the model for the closest match to ``query``.

        Raises:
            EnrichmentError: On a blank query, missing credentials, API errors,
                or a response that is not a valid book description.
        """
        query = query.strip()
        if not query:
            raise EnrichmentError("A title is required for the lookup")

        logger.info(f"Looking up book details for {query!r} with {self.config.model_id}")
        try:
            response = await asyncio.to_thread(self._converse, query)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Bedrock lookup failed: {e}")
            raise EnrichmentError(f"Book lookup failed: {e}", query=query) from e

        return self._parse_response(response, query)

    def _build_prompt(self, query: str) -> str:
        return (
            f'I need details for a book matching the query: "{query}".\n'
            "Return a JSON object with the best match found. "
            "If there is no exact match, return the closest one. "
            f"Write the summary in {self.config.summary_language}."
        )

    def _converse(self, query: str) -> Dict[str, Any]:
        return self.client.converse(
            modelId=self.config.model_id,
            system=[{"text": SYSTEM_PROMPT}],
            messages=[{"role": "user", "content": [{"text": self._build_prompt(query)}]}],
            inferenceConfig={
                "maxTokens": self.config.max_tokens,
                "temperature": self.config.temperature,
            },
        )

    def _parse_response(self, response: Dict[str, Any], query: str) -> BookDetails:
        try:
            blocks = response["output"]["message"]["content"]
            text = "".join(block.get("text", "") for block in blocks).strip()
        except (AttributeError, KeyError, TypeError) as e:
            raise EnrichmentError("Unexpected response shape from the model", query=query) from e

        text = _FENCE_RE.sub("", text).strip()
        if not text:
            raise EnrichmentError("The model returned an empty response", query=query)

        try:
            return BookDetails.model_validate(json.loads(text))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning(f"Could not parse book details for {query!r}: {e}")
            raise EnrichmentError("The model returned malformed book details", query=query) from e

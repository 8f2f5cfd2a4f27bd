"""Tests for the book enrichers."""

import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from spaced_reading.domain.entities import BookDetails
from spaced_reading.domain.exceptions import EnrichmentError
from spaced_reading.infrastructure.bedrock_book_enricher import BedrockBookEnricher, BedrockEnricherConfig
from spaced_reading.infrastructure.local_book_enricher import LocalBookEnricher


def _converse_response(text: str) -> dict:
    return {"output": {"message": {"role": "assistant", "content": [{"text": text}]}}}


@pytest.fixture
def mock_bedrock_client():
    """Create a mock Bedrock runtime client."""
    with patch("spaced_reading.infrastructure.bedrock_book_enricher.boto3") as mock_boto3:
        mock_client = MagicMock()
        mock_boto3.client.return_value = mock_client
        yield mock_client


@pytest.fixture
def enricher(mock_bedrock_client):
    return BedrockBookEnricher(BedrockEnricherConfig(region="us-west-2", model_id="test-model"))


class TestBedrockBookEnricher:
    """Test cases for BedrockBookEnricher."""

    def test_config_defaults(self):
        config = BedrockEnricherConfig()

        assert config.region == "us-east-1"
        assert config.model_id == "amazon.nova-lite-v1:0"
        assert config.max_tokens == 2048
        assert config.aws_access_key_id is None

    @pytest.mark.asyncio
    async def test_fetch_book_details_success(self, enricher, mock_bedrock_client):
        payload = {
            "title": "Meditations",
            "author": "Marcus Aurelius",
            "pageCount": 254,
            "summary": "Stoic notes.",
            "suggestedCategories": ["Philosophy"],
            "chapters": ["Book 1", "Book 2"],
        }
        mock_bedrock_client.converse.return_value = _converse_response(json.dumps(payload))

        details = await enricher.fetch_book_details("meditations")

        assert isinstance(details, BookDetails)
        assert details.page_count == 254
        assert details.chapters == ["Book 1", "Book 2"]
        kwargs = mock_bedrock_client.converse.call_args.kwargs
        assert kwargs["modelId"] == "test-model"
        assert "meditations" in kwargs["messages"][0]["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_strips_code_fences(self, enricher, mock_bedrock_client):
        text = '```json\n{"title": "Deep Work", "author": "Cal Newport", "page_count": 296}\n```'
        mock_bedrock_client.converse.return_value = _converse_response(text)

        details = await enricher.fetch_book_details("deep work")

        assert details.title == "Deep Work"

    @pytest.mark.asyncio
    async def test_blank_query(self, enricher, mock_bedrock_client):
        with pytest.raises(EnrichmentError):
            await enricher.fetch_book_details("   ")
        mock_bedrock_client.converse.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_credentials(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.side_effect = NoCredentialsError()

        with pytest.raises(EnrichmentError, match="Book lookup failed"):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_client_error(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "Too many requests"}},
            "Converse",
        )

        with pytest.raises(EnrichmentError) as exc_info:
            await enricher.fetch_book_details("meditations")
        assert exc_info.value.query == "meditations"

    @pytest.mark.asyncio
    async def test_malformed_json(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.return_value = _converse_response("Sorry, I can't help with that.")

        with pytest.raises(EnrichmentError, match="malformed"):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_missing_required_fields(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.return_value = _converse_response('{"title": "Meditations"}')

        with pytest.raises(EnrichmentError):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_empty_response(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.return_value = _converse_response("")

        with pytest.raises(EnrichmentError, match="empty"):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_unexpected_response_shape(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.return_value = {"output": {}}

        with pytest.raises(EnrichmentError, match="Unexpected response"):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_non_dict_content_block(self, enricher, mock_bedrock_client):
        mock_bedrock_client.converse.return_value = {"output": {"message": {"content": ["plain text"]}}}

        with pytest.raises(EnrichmentError, match="Unexpected response"):
            await enricher.fetch_book_details("meditations")


class TestLocalBookEnricher:
    """Test cases for LocalBookEnricher."""

    @pytest.mark.asyncio
    async def test_default_catalog_lookup(self):
        details = await LocalBookEnricher().fetch_book_details("the little")

        assert details.title == "The Little Prince"
        assert details.page_count == 96

    @pytest.mark.asyncio
    async def test_lookup_is_case_insensitive(self):
        details = await LocalBookEnricher().fetch_book_details("DEEP WORK by Cal Newport")

        assert details.author == "Cal Newport"

    @pytest.mark.asyncio
    async def test_custom_catalog(self):
        enricher = LocalBookEnricher(catalog=[BookDetails(title="Dune", author="Frank Herbert", page_count=412)])

        assert (await enricher.fetch_book_details("dune")).page_count == 412
        with pytest.raises(EnrichmentError):
            await enricher.fetch_book_details("meditations")

    @pytest.mark.asyncio
    async def test_no_match(self):
        with pytest.raises(EnrichmentError, match="No book found"):
            await LocalBookEnricher().fetch_book_details("zzz unknown title")

    @pytest.mark.asyncio
    async def test_blank_query(self):
        with pytest.raises(EnrichmentError):
            await LocalBookEnricher().fetch_book_details("")

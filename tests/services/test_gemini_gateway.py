"""
Tests for the Gemini gateway: text and citation extraction, error wrapping.

The google-genai client is always mocked.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from gradpath.services import gemini_gateway
from gradpath.services.exceptions import RecommendationFetchError


class TestGenerateGroundedContent:
    """Tests for generate_grounded_content."""

    @pytest.mark.asyncio
    async def test_returns_text_and_citations(self, mock_gemini_client, make_gemini_response):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response(
            text='{"supervisors": []}',
            citations=[("MIT CSAIL", "https://csail.mit.edu"), ("ETH", "https://ethz.ch")],
            queries=["gnn drug discovery professor"],
        )

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert result.text == '{"supervisors": []}'
        assert [(c.title, c.uri) for c in result.citations] == [
            ("MIT CSAIL", "https://csail.mit.edu"),
            ("ETH", "https://ethz.ch"),
        ]
        assert result.web_search_queries == ["gnn drug discovery professor"]

    @pytest.mark.asyncio
    async def test_search_tool_enabled(self, mock_gemini_client, make_gemini_response):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response("{}")

        await gemini_gateway.generate_grounded_content(
            "prompt", temperature=0.3, system_instruction="role"
        )

        kwargs = mock_gemini_client.aio.models.generate_content.call_args.kwargs
        config = kwargs["config"]
        assert kwargs["contents"] == "prompt"
        assert config.temperature == 0.3
        assert config.system_instruction == "role"
        assert len(config.tools) == 1
        assert config.tools[0].google_search is not None

    @pytest.mark.asyncio
    async def test_search_tool_can_be_disabled(self, mock_gemini_client, make_gemini_response):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response("{}")

        await gemini_gateway.generate_grounded_content("prompt", use_search=False)

        config = mock_gemini_client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.tools is None

    @pytest.mark.asyncio
    async def test_empty_response_gives_empty_text(self, mock_gemini_client, make_gemini_response):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response()

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert result.text == ""
        assert result.citations == []

    @pytest.mark.asyncio
    async def test_no_candidates(self, mock_gemini_client):
        mock_gemini_client.aio.models.generate_content.return_value = SimpleNamespace(
            text=None, candidates=None
        )

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert result.text == ""
        assert result.citations == []

    @pytest.mark.asyncio
    async def test_text_parts_are_joined(self, mock_gemini_client):
        candidate = SimpleNamespace(
            content=SimpleNamespace(parts=[
                SimpleNamespace(text='{"a": '),
                SimpleNamespace(text=None),
                SimpleNamespace(text='1}'),
            ]),
            grounding_metadata=None,
        )
        mock_gemini_client.aio.models.generate_content.return_value = SimpleNamespace(
            text=None, candidates=[candidate]
        )

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert result.text == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_falls_back_to_response_text(self, mock_gemini_client):
        candidate = SimpleNamespace(content=None, grounding_metadata=None)
        mock_gemini_client.aio.models.generate_content.return_value = SimpleNamespace(
            text="fallback", candidates=[candidate]
        )

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert result.text == "fallback"

    @pytest.mark.asyncio
    async def test_citation_without_uri_dropped_and_missing_title_defaulted(
        self, mock_gemini_client, make_gemini_response
    ):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response(
            text="{}",
            citations=[(None, "https://a.edu"), ("No link", None), ("Blank", "")],
        )

        result = await gemini_gateway.generate_grounded_content("prompt")

        assert [(c.title, c.uri) for c in result.citations] == [("Source", "https://a.edu")]

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, mock_gemini_client):
        mock_gemini_client.aio.models.generate_content.side_effect = ConnectionError("offline")

        with pytest.raises(RecommendationFetchError) as exc_info:
            await gemini_gateway.generate_grounded_content("prompt")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert "Failed to fetch recommendations" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_client_raises_fetch_error(self):
        with patch("gradpath.services.gemini_gateway.get_gemini_client", return_value=None):
            with pytest.raises(RecommendationFetchError) as exc_info:
                await gemini_gateway.generate_grounded_content("prompt")

        assert "not configured" in str(exc_info.value)


class TestGenerateText:
    """Tests for the tool-less generate_text call."""

    @pytest.mark.asyncio
    async def test_returns_text_without_tools(self, mock_gemini_client, make_gemini_response):
        mock_gemini_client.aio.models.generate_content.return_value = make_gemini_response(
            "Dear Professor Smith, ..."
        )

        text = await gemini_gateway.generate_text("write an email")

        assert text == "Dear Professor Smith, ..."
        assert mock_gemini_client.aio.models.generate_content.call_args.kwargs["config"] is None

    @pytest.mark.asyncio
    async def test_error_wrapped(self, mock_gemini_client):
        mock_gemini_client.aio.models.generate_content.side_effect = RuntimeError("500")

        with pytest.raises(RecommendationFetchError):
            await gemini_gateway.generate_text("write an email")


class TestClientFactory:
    """Tests for lazy client creation."""

    def test_no_api_key_returns_none(self):
        with patch.object(gemini_gateway, "_gemini_client", None), \
                patch.object(gemini_gateway.settings, "GOOGLE_API_KEY", ""):
            assert gemini_gateway.get_gemini_client() is None

    def test_client_created_once(self):
        with patch.object(gemini_gateway, "_gemini_client", None), \
                patch.object(gemini_gateway.settings, "GOOGLE_API_KEY", "key"), \
                patch("gradpath.services.gemini_gateway.genai.Client") as client_cls:
            first = gemini_gateway.get_gemini_client()
            second = gemini_gateway.get_gemini_client()

        assert first is second
        client_cls.assert_called_once_with(api_key="key")

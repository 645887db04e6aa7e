"""Tests for the Serper search adapter."""

import pytest
from unittest.mock import AsyncMock, MagicMock

import httpx

from lib.serper.client import SERPER_SEARCH_URL, SerperClient, parse_serper_response


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    return response


class TestParseSerperResponse:

    def test_knowledge_graph_description_link(self):
        data = {
            "knowledgeGraph": {
                "title": "Jane Doe",
                "descriptionLink": "https://www.linkedin.com/in/jane-doe",
            },
            "organic": [{"title": "Jane Doe - Acme", "link": "https://linkedin.com/in/janedoe", "position": 1}],
        }
        candidates = parse_serper_response(data)
        assert candidates[0].from_authoritative_source is True
        assert candidates[0].title == "Jane Doe"
        assert candidates[1].url == "https://linkedin.com/in/janedoe"
        assert candidates[1].rank == 1

    def test_knowledge_graph_without_profile_link(self):
        data = {"knowledgeGraph": {"website": "https://acme.com"}, "organic": []}
        assert parse_serper_response(data) == []

    def test_position_defaults_to_index(self):
        data = {"organic": [{"link": "https://a.com"}, {"link": "https://b.com"}]}
        assert [c.rank for c in parse_serper_response(data)] == [1, 2]


class TestSerperClient:

    @pytest.mark.asyncio
    async def test_posts_query(self):
        client = AsyncMock()
        client.post.return_value = _response(payload={"organic": [{"link": "https://a.com"}]})

        candidates = await SerperClient("key", client).query("acme official website")

        assert len(candidates) == 1
        assert client.post.call_args.args[0] == SERPER_SEARCH_URL
        assert client.post.call_args.kwargs["headers"]["X-API-KEY"] == "key"
        assert client.post.call_args.kwargs["json"]["q"] == "acme official website"
        assert client.post.call_args.kwargs["json"]["gl"] == "au"

    @pytest.mark.asyncio
    async def test_http_error_status_gives_empty(self):
        client = AsyncMock()
        client.post.return_value = _response(status_code=403)
        assert await SerperClient("key", client).query("x") == []

    @pytest.mark.asyncio
    async def test_timeout_gives_empty(self):
        client = AsyncMock()
        client.post.side_effect = httpx.ReadTimeout("slow")
        assert await SerperClient("key", client).query("x") == []

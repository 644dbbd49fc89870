"""Tests for config API endpoint."""

import pytest


class TestGetConfig:
    """Tests for GET /api/config."""

    @pytest.mark.asyncio
    async def test__returns_site_settings(self, client) -> None:
        """Return site metadata and feature flags for the client."""
        test_client = await client
        response = await test_client.get("/api/config")

        assert response.status == 200
        data = await response.json()
        assert data["siteName"] == "Test Docs"
        assert data["repoUrl"] == "https://example.com/repo"
        assert data["theme"] == {"default": "system", "options": ["light", "dark"]}
        assert data["searchEnabled"] is True
        assert data["liveReloadEnabled"] is False

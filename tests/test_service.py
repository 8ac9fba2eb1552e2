"""Unit tests for the proxy service."""

import pytest
from unittest.mock import AsyncMock, MagicMock
import httpx

from edge_gateway.proxy.schemas import InboundRequest
from edge_gateway.proxy.routes import load_route_table
from edge_gateway.proxy.service import build_query, check_required_query, handle_proxy_request
from edge_gateway.proxy.exceptions import MissingParameterError


@pytest.fixture
def routes():
    return load_route_table()


@pytest.fixture
def mock_client() -> AsyncMock:
    client = AsyncMock()
    client.request.return_value = httpx.Response(200, json={"success": True})
    return client


class TestRequiredQuery:
    """Tests for required query parameter checks."""
    
    def test_missing_raises(self, routes):
        """Test an absent parameter raises MissingParameterError."""
        with pytest.raises(MissingParameterError) as exc_info:
            check_required_query(routes.get("check_username"), InboundRequest(method="GET"))
        
        assert exc_info.value.name == "username"
        assert exc_info.value.extra == {"available": False}
    
    def test_blank_counts_as_missing(self, routes):
        """Test whitespace-only values are rejected."""
        with pytest.raises(MissingParameterError):
            check_required_query(
                routes.get("check_username"),
                InboundRequest(method="GET", query={"username": "  "}),
            )
    
    def test_repeated_values_accepted(self, routes):
        """Test a repeated parameter with a real value passes."""
        check_required_query(
            routes.get("check_username"),
            InboundRequest(method="GET", query={"username": ["", "ada"]}),
        )
    
    def test_present_passes(self, routes):
        """Test a real value is accepted."""
        check_required_query(
            routes.get("check_username"),
            InboundRequest(method="GET", query={"username": "ada"}),
        )


class TestBuildQuery:
    """Tests for query defaults."""
    
    def test_defaults_applied_on_get(self, routes):
        """Test GET gets defaults, client values win."""
        query = build_query(routes.get("posts"), InboundRequest(method="GET", query={"limit": "5"}))
        
        assert query == {"feedType": "for-you", "limit": "5", "page": "1", "contentType": "all"}
    
    def test_defaults_not_applied_on_post(self, routes):
        """Test defaults only shape reads."""
        query = build_query(routes.get("posts"), InboundRequest(method="POST", body={}))
        
        assert query == {}


class TestHandleProxyRequest:
    """Tests for handle_proxy_request."""
    
    @pytest.mark.asyncio
    async def test_refresh_success_passthrough(self, routes, settings, mock_client):
        """Test the refresh scenario passes the backend payload through."""
        mock_client.request.return_value = httpx.Response(
            200, json={"success": True, "accessToken": "xyz"}
        )
        
        outbound = await handle_proxy_request(
            route=routes.get("auth_refresh"),
            inbound=InboundRequest(method="POST", body={"refreshToken": "abc"}),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.status_code == 200
        assert outbound.body == {"success": True, "accessToken": "xyz"}
        args, kwargs = mock_client.request.call_args
        assert args == ("POST", "http://localhost:5000/api/auth/refresh")
        assert kwargs["json"] == {"refreshToken": "abc"}
    
    @pytest.mark.asyncio
    async def test_refresh_rejects_get(self, routes, settings, mock_client):
        """Test GET on the refresh route never reaches upstream."""
        outbound = await handle_proxy_request(
            route=routes.get("auth_refresh"),
            inbound=InboundRequest(method="GET"),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.status_code == 405
        assert outbound.body == {"success": False, "message": "Method not allowed"}
        assert mock_client.request.await_count == 0
    
    @pytest.mark.asyncio
    async def test_refresh_connection_refused(self, routes, settings, mock_client):
        """Test transport failures become the refresh envelope."""
        mock_client.request.side_effect = httpx.ConnectError("Connection refused")
        
        outbound = await handle_proxy_request(
            route=routes.get("auth_refresh"),
            inbound=InboundRequest(method="POST", body={"refreshToken": "abc"}),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.status_code == 500
        assert outbound.body == {"success": False, "message": "Internal server error"}
    
    @pytest.mark.asyncio
    async def test_username_required(self, routes, settings, mock_client):
        """Test the username check validates before contacting upstream."""
        outbound = await handle_proxy_request(
            route=routes.get("check_username"),
            inbound=InboundRequest(method="GET"),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.status_code == 400
        assert outbound.body == {
            "success": False,
            "message": "Username is required",
            "available": False,
        }
        assert mock_client.request.await_count == 0
    
    @pytest.mark.asyncio
    async def test_username_forwarded_as_query(self, routes, settings, mock_client):
        """Test the username reaches upstream as a query parameter."""
        mock_client.request.return_value = httpx.Response(
            200, json={"success": True, "message": "Username is available", "available": True}
        )
        
        outbound = await handle_proxy_request(
            route=routes.get("check_username"),
            inbound=InboundRequest(method="GET", query={"username": "ada"}),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.body["available"] is True
        args, kwargs = mock_client.request.call_args
        assert args == ("GET", "http://localhost:8000/api/users/check-username")
        assert kwargs["params"] == {"username": "ada"}
        assert "json" not in kwargs
    
    @pytest.mark.asyncio
    async def test_comments_timeout(self, routes, settings, mock_client):
        """Test a comments timeout yields the resource envelope."""
        mock_client.request.side_effect = httpx.ReadTimeout("timed out")
        
        outbound = await handle_proxy_request(
            route=routes.get("comments"),
            inbound=InboundRequest(method="GET"),
            client=mock_client,
            settings=settings,
        )
        
        assert outbound.status_code == 500
        assert outbound.body == {
            "success": False,
            "error": "Failed to process comments request",
            "message": "timed out",
        }
    
    @pytest.mark.asyncio
    async def test_configured_backend_and_timeout(self, routes, settings, mock_client):
        """Test BACKEND_URL and the default timeout are applied."""
        settings.BACKEND_URL = "https://api.example.com"
        settings.UPSTREAM_TIMEOUT_SECONDS = 12.5
        
        await handle_proxy_request(
            route=routes.get("comments"),
            inbound=InboundRequest(method="DELETE"),
            client=mock_client,
            settings=settings,
        )
        
        args, kwargs = mock_client.request.call_args
        assert args == ("DELETE", "https://api.example.com/api/comments")
        assert kwargs["timeout"] == 12.5
    
    @pytest.mark.asyncio
    async def test_injected_logger_gets_bound_context(self, routes, settings, mock_client):
        """Test request context is bound onto the supplied logger."""
        log = MagicMock()
        
        await handle_proxy_request(
            route=routes.get("auth_refresh"),
            inbound=InboundRequest(method="GET", headers={"X-Request-ID": "req-1"}),
            client=mock_client,
            settings=settings,
            log=log,
        )
        
        log.bind.assert_called_once_with(route="auth_refresh", method="GET", request_id="req-1")
        log.bind.return_value.warning.assert_called_once_with(
            "method_rejected", allowed_methods=["POST"]
        )

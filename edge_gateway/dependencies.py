"""FastAPI dependencies shared by the proxy routes."""

import httpx
from fastapi import Request


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the pooled upstream client.
    
    The client lives on ``app.state`` for the lifetime of the process and
    is reused by every proxied request, so upstream connections are kept
    alive between calls.
    
    Args:
        request: The inbound FastAPI request.
        
    Returns:
        The shared httpx.AsyncClient.
    """
    return request.app.state.http_client

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from .config import get_settings
from .exceptions import GatewayError
from .log_config import configure_logging
from .proxy import create_proxy_router, load_route_table
from .proxy.exceptions import InvalidRequestBodyError

settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

logger = structlog.get_logger("edge_gateway")

route_table = load_route_table(settings.ROUTES_CONFIG_PATH)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Shared HTTP client for connection pooling.
    # timeout=None removes the client default so each route's timeout applies.
    app.state.http_client = httpx.AsyncClient(timeout=None)
    logger.info("gateway_started", routes=[route.name for route in route_table.routes])
    
    yield
    
    await app.state.http_client.aclose()
    logger.info("gateway_stopped")

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Global exception handlers
@app.exception_handler(InvalidRequestBodyError)
async def invalid_body_exception_handler(request: Request, exc: InvalidRequestBodyError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": exc.code, "message": exc.message}
    )

@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    logger.error("gateway_error", path=request.url.path, error_code=exc.code, message=exc.message)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.code, "message": exc.message}
    )

@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}

# Include routers
app.include_router(create_proxy_router(route_table))

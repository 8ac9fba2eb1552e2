"""Backend base URL resolution."""

from edge_gateway.config import Settings

from .schemas import BackendTier


def resolve_backend_url(
    settings: Settings,
    tier: BackendTier = BackendTier.development,
) -> str:
    """Return the backend base URL for a request.

    An explicit ``BACKEND_URL`` wins; otherwise the default configured for
    the route's tier is used. Missing configuration is not an error.

    Args:
        settings: Process-wide settings.
        tier: Which default applies when nothing is configured.

    Returns:
        Base URL without a trailing slash.
    """
    configured = (settings.BACKEND_URL or "").strip()
    if configured:
        return configured.rstrip("/")

    if tier == BackendTier.secondary:
        return settings.SECONDARY_BACKEND_DEFAULT_URL.rstrip("/")
    return settings.DEV_BACKEND_DEFAULT_URL.rstrip("/")

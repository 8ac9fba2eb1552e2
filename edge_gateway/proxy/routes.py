"""Static route table loader."""

from pathlib import Path

import structlog
import yaml

from .schemas import RouteTable


DEFAULT_ROUTES_PATH = Path(__file__).parent / "routes.yaml"

logger = structlog.get_logger("edge_gateway.proxy")


def load_route_table(config_path: str | Path | None = None) -> RouteTable:
    """Load proxy route declarations from YAML.

    Args:
        config_path: Optional custom path; defaults to the table shipped
            with the package.

    Returns:
        Parsed RouteTable, or an empty table if the file is missing.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_ROUTES_PATH

    if not config_path.exists():
        logger.warning("route_table_missing", config_path=str(config_path))
        return RouteTable()

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return RouteTable(**data)

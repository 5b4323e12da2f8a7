from __future__ import annotations

from leaguedraw.api.app import main as run_api
from leaguedraw.config import Settings
from leaguedraw.log import setup_logging


def main() -> None:
    """Serve the draw API on ``API_HOST``:``API_PORT`` from the environment."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    print(f"Serving League Draw API on http://{settings.api_host}:{settings.api_port}")
    run_api(settings)


if __name__ == "__main__":
    main()

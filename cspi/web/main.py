"""
Web service launcher.
"""

import uvicorn

from cspi.core.config import ConfigManager
from cspi.core.logging import configure_logging_from_settings


def cspi_web_main() -> None:
    """Start the FastAPI service using the configured host, port and logging."""

    config = ConfigManager().get_config()
    configure_logging_from_settings(config.logging)
    uvicorn.run(
        "cspi.web.app:app",
        host=config.web.host,
        port=config.web.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    cspi_web_main()

from __future__ import annotations

import uvicorn

from apps.detector.main import create_app
from facecam.config import get_service_config
from facecam.logging.logger import get_logger


def main() -> None:
    config = get_service_config()
    logger = get_logger()
    logger.info("Starting FaceCam detector on %s:%s", config.host, config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, reload=False)


if __name__ == "__main__":
    main()

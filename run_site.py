#!/usr/bin/env python
"""
Run the personal website server.
"""
import logging

import uvicorn

from website.config import Config
from website.site_app import create_site_app

logger = logging.getLogger('website')


def main():
    """Run the website server."""
    # Load configuration
    config = Config()

    # Fails fast when the article snapshot cannot be loaded
    app = create_site_app(config=config)

    logger.info(f"Articles snapshot: {config.state_dir}/{config.articles_file}")
    logger.info(f"Listening on http://{config.site_host}:{config.site_port}")

    # Run uvicorn server
    uvicorn.run(
        app,
        host=config.site_host,
        port=config.site_port,
        log_level="info"
    )


if __name__ == "__main__":
    main()

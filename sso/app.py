# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from sso.container import Container
from sso.infrastructure.db import init_db
from sso.shared.logging import logger, setup_logging
from sso.shared.middleware.error_handler import configure_error_handling
from sso.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    setup_logging(container.config.log_level)

    app = Flask(__name__)
    app.extensions["container"] = container

    configure_request_logging(app)
    configure_error_handling(app)
    app.register_blueprint(container.auth_controller.as_blueprint())

    logger.info(f"sso: app created env={container.config.env}")
    return app


def main() -> None:
    container = Container()
    init_db()
    app = create_app(container)
    config = container.config
    logger.info(f"sso: serving on {config.http.host}:{config.http.port}")
    app.run(host=config.http.host, port=config.http.port)


if __name__ == "__main__":
    main()

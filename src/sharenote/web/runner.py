"""Uvicorn runner for the alias store API."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from sharenote.app import App
from sharenote.config import Config
from sharenote.web.server import create_fastapi_app


def build_log_config(debug: bool) -> dict[str, Any]:
    """Copy of the uvicorn logging config with logger names in the format and levels following debug."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s [%(levelname)-8s] %(name)s: "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
    level = "DEBUG" if debug else "INFO"
    for logger_config in log_config["loggers"].values():
        if "level" in logger_config:
            logger_config["level"] = level
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=True,
    )

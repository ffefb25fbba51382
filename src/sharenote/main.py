"""Application entry point for the ShareNote alias store server."""

from sharenote.app import App
from sharenote.config import Config
from sharenote.logging import setup_logging
from sharenote.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

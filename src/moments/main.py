"""Application entry point for the Moments backend server."""

from moments.app import App
from moments.config import Config
from moments.logging import setup_logging
from moments.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

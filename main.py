"""Local launcher for the Siege Pulse API."""

import argparse
import threading
import webbrowser

import uvicorn

from infra.logger import STORAGE_DIR, configure_logging, get_logger


def _open_browser(url: str, delay: float = 1.0) -> None:
    """Open the API docs in the default browser after the server spins up."""
    timer = threading.Timer(delay, lambda: webbrowser.open(url))
    timer.daemon = True
    timer.start()


def main():
    parser = argparse.ArgumentParser(description="Run the Siege Pulse game server.")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for the API (default: 8000)")
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        default=False,
        help="Enable auto-reload for development",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file under storage/logs")
    parser.add_argument("--no-json", dest="json", action="store_false", help="Plain text logs instead of JSON")
    parser.add_argument("--no-browser", action="store_true", help="Do not auto-open the browser")
    args = parser.parse_args()

    # Configure logging once at startup.
    configure_logging(level=args.log_level, json=args.json, log_file=args.log_file)
    log = get_logger(__name__)

    url = f"http://{args.host}:{args.port}"
    if not args.no_browser:
        _open_browser(f"{url}/docs")

    log.info("Starting Siege Pulse at %s (storage: %s)", url, STORAGE_DIR)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Indie Coach entry point.

Serves the coaching API (``POST /api/chat``, ``POST /api/generate-image``)
and the NiceGUI chat page. By default both share one uvicorn server; with
``RUN_MODE=separate`` they run as two processes and the chat page calls the
API over HTTP.

Environment variables are loaded from .env file:
    HOST, PORT: API server address (default 0.0.0.0:8000)
    UI_PORT: chat page port in separate mode (default 8080)
    API_BASE_URL: where the chat page sends requests
    NICEGUI_STORAGE_SECRET: signs the browser storage cookie
    LOG_LEVEL: logging level (default INFO)
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEV_STORAGE_SECRET = "indie-coach-secret"


def _api_address() -> tuple[str, int]:
    return os.getenv("HOST", "0.0.0.0"), int(os.getenv("PORT", "8000"))


def _storage_secret() -> str:
    secret = os.getenv("NICEGUI_STORAGE_SECRET", DEV_STORAGE_SECRET)
    if secret == DEV_STORAGE_SECRET:
        logger.warning("NICEGUI_STORAGE_SECRET not set, using the development secret")
    return secret


def _log_endpoints(api_url: str, ui_url: str) -> None:
    logger.info(f"Chat stream: POST {api_url}/api/chat")
    logger.info(f"Image generation: POST {api_url}/api/generate-image")
    logger.info(f"API docs: {api_url}/docs")
    logger.info(f"Chat UI: {ui_url}/")


def run_integrated() -> None:
    """Serve the API and the chat page from one uvicorn server."""
    import uvicorn
    from nicegui import ui

    host, port = _api_address()
    # The chat page reaches the API on this same server
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")

    from indie_coach.api.app import create_app
    from indie_coach.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(app, title="Indie Coach", favicon="🎵", storage_secret=_storage_secret())

    _log_endpoints(f"http://localhost:{port}", f"http://localhost:{port}")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API and the chat page as two processes.

    The chat page is told the API's URL and the storage secret through its
    environment. Both are stopped as soon as either one exits.
    """
    host, port = _api_address()
    ui_port = os.getenv("UI_PORT", "8080")
    ui_env = {
        **os.environ,
        "API_BASE_URL": os.getenv("API_BASE_URL", f"http://localhost:{port}"),
        "NICEGUI_STORAGE_SECRET": _storage_secret(),
        "UI_PORT": ui_port,
    }

    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "indie_coach.api.app:app",
            "--host",
            host,
            "--port",
            str(port),
        ]
    )
    ui_proc = subprocess.Popen([sys.executable, "-m", "indie_coach.ui.chat_page"], env=ui_env)
    _log_endpoints(f"http://localhost:{port}", f"http://localhost:{ui_port}")

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


def main() -> None:
    """Start Indie Coach in the mode named by RUN_MODE (default integrated)."""
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Indie Coach in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()

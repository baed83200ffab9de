"""Application entry point.

Runs the FastAPI app with the NiceGUI chat page mounted on the same server,
or both as separate processes with RUN_MODE=separate.
Environment variables are loaded from the .env file.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logger = logging.getLogger("pdfchat")


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL and quiet chatty HTTP clients."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def _port() -> int:
    return int(os.getenv("PORT", "8000"))


def run_integrated() -> None:
    """Serve API and UI from one process on PORT (default 8000)."""
    import uvicorn
    from nicegui import ui

    from pdfchat.api.app import create_app
    from pdfchat.api.dependencies import get_chat_store
    from pdfchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    # Create tables before the first request
    get_chat_store()

    app = create_app()
    ui.run_with(
        app,
        title="PDF Chat",
        favicon="📄",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "pdfchat-secret"),
    )

    logger.info(f"Chat UI on http://localhost:{_port()}/, API docs on /docs")

    uvicorn.run(
        app,
        host=_host(),
        port=_port(),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the API (PORT, default 8000) and the UI (port 8080) as two processes.

    Stops both when either exits.
    """
    logger.info(f"Starting API on http://localhost:{_port()}")
    logger.info("Starting UI on http://localhost:8080")

    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "pdfchat.api.app:app",
            "--host",
            _host(),
            "--port",
            str(_port()),
        ]
    )
    ui_proc = subprocess.Popen([sys.executable, "-m", "pdfchat.ui.chat_page"])

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
    """Application entry point."""
    configure_logging()
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting PDF Chat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()

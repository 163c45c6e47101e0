"""
Media Verifier Service.

Entry point for the media verification worker.
"""

from ddtrace import patch_all

from media_verifier.config import load_config
from media_verifier.dependencies import build_worker
from media_verifier.logging import setup_logging

logger = setup_logging()


def main():
    """Starts the worker."""
    patch_all()
    logger.info("Starting media-verifier service")
    worker = build_worker(load_config())
    worker.start()


if __name__ == "__main__":
    main()

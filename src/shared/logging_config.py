import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger. Call once at process start."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

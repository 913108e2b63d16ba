from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    # stderr only, stdout carries the rendered prices
    logging.basicConfig(
        level=level.upper(),
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler()],
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

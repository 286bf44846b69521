"""Logging setup for the roonarr service and CLI."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger for the reconciliation service.

    Log lines carry a full date because the service runs for days and a scan
    happens once per day. ``httpx`` request logging stays at WARNING unless
    ``level`` asks for more. Pass ``force=True`` to reconfigure, e.g. when the
    CLI switches to ``--verbose``.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

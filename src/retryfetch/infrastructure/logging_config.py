"""Logging setup"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging; DEBUG when verbose, INFO otherwise"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=True)
    logging.getLogger("retryfetch").setLevel(level)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)

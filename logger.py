import logging
import os
import sys

LOG_FILE = os.path.expanduser("~/.local/state/kisan_manch/wizard.log")

def setup_logger() -> logging.Logger:
    logger = logging.getLogger("kisan_manch")
    logger.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # Try the per-user state dir; fall back to /tmp if it cannot be created
    try:
        os.makedirs(os.path.dirname(LOG_FILE), exist_ok=True)
        fh = logging.FileHandler(LOG_FILE, encoding="utf-8")
    except OSError:
        fh = logging.FileHandler("/tmp/kisan_manch.log", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logging.WARNING)
    sh.setFormatter(fmt)

    if not logger.handlers:
        logger.addHandler(fh)
        logger.addHandler(sh)
    return logger

log = setup_logger()

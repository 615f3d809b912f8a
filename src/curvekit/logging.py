import logging

"""
Package-wide logger. Handlers are attached once here; callers tune the level on `logger`.
"""

LOG_FORMAT = "%(asctime)s %(levelname)s curvekit: %(message)s"

logger = logging.getLogger("curvekit")
logger.propagate = False
logger.setLevel(logging.INFO)

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT))
logger.addHandler(_handler)

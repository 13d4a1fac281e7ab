import logging
import sys

LEVEL = logging.INFO


def configure_logging(level: str | int = LEVEL) -> None:
    # stdout carries the stdio MCP protocol, so logs go to stderr.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger()
    root.setLevel(level.strip().upper() if isinstance(level, str) else level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)

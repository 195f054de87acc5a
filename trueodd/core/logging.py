import logging, sys

LEVEL = logging.INFO
FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = LEVEL) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    # request lines from httpx are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

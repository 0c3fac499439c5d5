import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once (app factory in tests, CLI scripts); the
    handler is only added the first time.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_judgedex", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._judgedex = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # httpx logs every request at INFO; the client logs what matters itself.
    logging.getLogger("httpx").setLevel(logging.WARNING)

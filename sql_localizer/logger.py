import logging

__all__ = ("configure_logging", "get_logger")

_configured = False


def configure_logging(level: int | str = logging.INFO) -> None:
    """Idempotently install one stream handler on the root logger."""
    global _configured
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    if _configured:
        root.setLevel(level)
        return
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level)
    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "sql_localizer")

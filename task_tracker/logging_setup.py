import logging
import sys
from pathlib import Path
from typing import Optional, Union

_QUIET_LOGGERS = ("pymongo", "motor", "asyncio", "httpx", "httpcore")


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep task_tracker and uvicorn logs; let driver/client libraries through only at WARNING+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_QUIET_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger with a console handler and, when ``log_dir`` is
    given, a file handler that receives everything at DEBUG.

    Call this once, before the app starts serving.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "task_tracker.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh.addFilter(_ThirdPartyNoiseFilter())
        root.addHandler(fh)

    logging.captureWarnings(True)

import os, sys, contextlib, logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "pricetrack"
LOG_DIR  = Path.home() / ".cache" / "pricetrack"
LOG_FILE = LOG_DIR / "pricetrack.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


# -------- logging: truncate at ~1MB, keep single file --------
class OverwriteRotatingFileHandler(RotatingFileHandler):
    """Rotate by deleting and recreating when exceeding maxBytes. No backups kept."""
    def doRollover(self):
        if self.stream:
            self.stream.close()
            self.stream = None
        with contextlib.suppress(FileNotFoundError):
            os.remove(self.baseFilename)
        self.mode = "w"
        self.stream = self._open()


def setup_logging(log_file: Optional[Path] = LOG_FILE, level: int = logging.INFO) -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    log.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(stream_handler)

    if log_file is not None:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = OverwriteRotatingFileHandler(
                str(log_file), maxBytes=1_000_000, backupCount=0, encoding="utf-8"
            )
        except OSError as e:
            log.warning("File logging disabled (%s): %s", log_file, e)
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            log.addHandler(file_handler)
    return log

import logging
import sys


class ContextFormatter(logging.Formatter):
    """Custom formatter that handles optional transform and file fields."""
    def format(self, record):
        if not hasattr(record, 'transform'):
            record.transform = '-'
        if not hasattr(record, 'file'):
            record.file = '-'
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [transform=%(transform)s file=%(file)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level.upper(),
        handlers=[handler],
        force=True,
    )

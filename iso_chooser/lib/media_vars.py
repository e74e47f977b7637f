from __future__ import annotations

import logging
from pathlib import Path

from .image import ImageRecord

logger = logging.getLogger(__name__)


class OutputWriteError(OSError):
    pass


def render_media_vars(record: ImageRecord) -> str:
    """Render the record as /bin/sh-sourceable assignments.

    Values are double quoted verbatim; catalogs do not carry embedded quotes.
    """

    return (
        f'MEDIA_URL="{record.url}"\n'
        f'MEDIA_LABEL="{record.label}"\n'
        f'MEDIA_256SUM="{record.checksum}"\n'
        f'MEDIA_SIZE="{record.size:d}"\n'
    )


def write_media_vars(path: str | Path, record: ImageRecord) -> None:
    p = Path(path)
    logger.debug("selected: %s", record.label)
    try:
        with p.open("w", encoding="utf-8") as f:
            f.write(render_media_vars(record))
    except OSError as e:
        raise OutputWriteError(e.errno, f"failed to write output file [{p}]: {e.strerror or e}") from e
    logger.info("Wrote %s", p)

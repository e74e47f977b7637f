from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from .lib.catalog import load_catalog
from .lib.image import ImageRecord
from .lib.simplestreams import DEFAULT_BASE_URL, IMAGE_FTYPE, select_newest

logger = logging.getLogger(__name__)


def build_choices(
    paths: Sequence[str | Path],
    target_arch: str,
    *,
    image_ftype: str = IMAGE_FTYPE,
    base_url: str = DEFAULT_BASE_URL,
) -> List[ImageRecord]:
    """Resolve one ImageRecord per catalog, in input order.

    The first catalog that fails to parse or select aborts the whole list;
    a partial menu is never produced.
    """

    if not paths:
        raise ValueError("at least one catalog path is required")

    choices: List[ImageRecord] = []
    for path in paths:
        tree = load_catalog(path)
        record = select_newest(tree, target_arch, ftype=image_ftype, base_url=base_url)
        logger.info("Choice %d from %s: %s", len(choices) + 1, path, record.label)
        choices.append(record)
    return choices

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urljoin, urlparse

from .catalog import FieldError, get_integer, get_mapping, get_string
from .image import ImageRecord

logger = logging.getLogger(__name__)

IMAGE_FTYPE = "iso"
DEFAULT_BASE_URL = "https://cdimage.ubuntu.com/"


class SelectionNotFound(LookupError):
    pass


class _Unqualified(Exception):
    """Internal: a product cannot provide an image."""


@dataclass(frozen=True)
class _Candidate:
    product_id: str
    version_key: str
    record: ImageRecord


def humanize_os(os_name: str) -> str:
    """ubuntu-server -> Ubuntu Server"""
    return " ".join(part.capitalize() for part in os_name.replace("_", "-").split("-") if part)


def build_label(product: Mapping[str, Any]) -> str:
    name = humanize_os(get_string(product, "os"))
    try:
        release = get_string(product, "release_title")
    except FieldError:
        release = get_string(product, "version")

    label = f"{name} {release}"
    codename = product.get("release_codename")
    if isinstance(codename, str) and codename:
        label = f"{label} ({codename})"
    return label


def resolve_url(path: str, base_url: str) -> str:
    if urlparse(path).scheme:
        return path
    if not base_url.endswith("/"):
        base_url += "/"
    return urljoin(base_url, path.lstrip("/"))


def newest_version_key(versions: Mapping[Any, Any]) -> Any:
    # Version keys are fixed-width and zero padded (YYYYMMDD[.N]), so string
    # order is chronological order. YAML may load unquoted keys as int or
    # date; they are still compared by their text.
    if not versions:
        raise _Unqualified("no versions")
    return max(versions, key=str)


def find_image_item(version: Mapping[str, Any], ftype: str) -> Optional[Dict[str, Any]]:
    items = get_mapping(version, "items")
    for name in items:
        item = items[name]
        if isinstance(item, dict) and item.get("ftype") == ftype:
            return item
    return None


def _candidate(
    product_id: str,
    product: Any,
    *,
    target_arch: str,
    ftype: str,
    base_url: str,
) -> Optional[_Candidate]:
    """Return the newest image of one product, or None when the arch differs."""

    if get_string(product, "arch") != target_arch:
        return None

    versions = get_mapping(product, "versions")
    key = newest_version_key(versions)
    version = versions[key]
    if not isinstance(version, dict):
        raise _Unqualified(f"version {key} is not a mapping")

    # No fallback to older versions: the newest one either has an image or
    # the product does not qualify.
    item = find_image_item(version, ftype)
    if item is None:
        raise _Unqualified(f"version {key} has no {ftype!r} item")

    size = get_integer(item, "size")
    if size < 0:
        raise _Unqualified(f"version {key}: negative size {size}")

    record = ImageRecord(
        label=build_label(product),
        url=resolve_url(get_string(item, "path"), base_url),
        checksum=get_string(item, "sha256"),
        size=size,
    )
    return _Candidate(product_id=product_id, version_key=str(key), record=record)


def select_newest(
    tree: Mapping[str, Any],
    target_arch: str,
    *,
    ftype: str = IMAGE_FTYPE,
    base_url: str = DEFAULT_BASE_URL,
) -> ImageRecord:
    """Pick the most recent image for target_arch described by a catalog.

    Among qualifying products the greatest newest-version key wins; ties go
    to the first product in document order.
    """

    try:
        products = get_mapping(tree, "products")
    except FieldError as e:
        raise SelectionNotFound(f"catalog has no usable products: {e}") from e

    best: Optional[_Candidate] = None
    rejected: List[str] = []

    for product_id, product in products.items():
        try:
            cand = _candidate(
                product_id,
                product,
                target_arch=target_arch,
                ftype=ftype,
                base_url=base_url,
            )
        except (FieldError, _Unqualified) as e:
            logger.debug("Product %s does not qualify: %s", product_id, e)
            rejected.append(f"{product_id}: {e}")
            continue

        if cand is None:
            continue
        if best is None or cand.version_key > best.version_key:
            best = cand

    if best is None:
        detail = f" ({'; '.join(rejected)})" if rejected else ""
        raise SelectionNotFound(f"no {ftype!r} image for arch {target_arch!r}{detail}")

    logger.debug("Newest %s image: %s version %s", target_arch, best.product_id, best.version_key)
    return best.record

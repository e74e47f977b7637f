from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

logger = logging.getLogger(__name__)

SUPPORTED_FORMAT = "products:1.0"


class CatalogError(ValueError):
    pass


class CatalogParseError(CatalogError):
    """The catalog document is malformed or is not a mapping at the top level."""


class FieldError(CatalogError):
    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class MissingField(FieldError):
    def __init__(self, key: str) -> None:
        super().__init__(key, f"missing field {key!r}")


class TypeMismatch(FieldError):
    def __init__(self, key: str, expected: str, value: Any) -> None:
        super().__init__(
            key, f"field {key!r}: expected {expected}, got {type(value).__name__}"
        )
        self.expected = expected


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def parse_catalog(text: str, *, fmt: str = "json", source: str = "<string>") -> Dict[str, Any]:
    """Parse catalog text into a tree of dicts, lists and scalars.

    No recovery is attempted: malformed input raises CatalogParseError.
    """

    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("PyYAML is required to read YAML catalogs") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CatalogParseError(f"{source}: invalid YAML: {e}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogParseError(f"{source}: invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CatalogParseError(
            f"{source}: catalog must be a mapping/object, got {type(data).__name__}"
        )

    fmt_tag = data.get("format")
    if fmt_tag is not None and fmt_tag != SUPPORTED_FORMAT:
        logger.warning("%s: unexpected catalog format %r (expected %s)", source, fmt_tag, SUPPORTED_FORMAT)

    return data


def load_catalog(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogParseError(f"{p}: cannot read catalog: {e}") from e
    logger.debug("Loaded catalog %s (%d bytes)", p, len(text))
    return parse_catalog(text, fmt=_detect_format(p), source=str(p))


def _lookup(node: Any, key: str) -> Any:
    if not isinstance(node, Mapping) or key not in node:
        raise MissingField(key)
    return node[key]


def get_mapping(node: Any, key: str) -> Dict[str, Any]:
    value = _lookup(node, key)
    if not isinstance(value, dict):
        raise TypeMismatch(key, "mapping", value)
    return value


def get_sequence(node: Any, key: str) -> List[Any]:
    value = _lookup(node, key)
    if not isinstance(value, list):
        raise TypeMismatch(key, "sequence", value)
    return value


def get_string(node: Any, key: str) -> str:
    value = _lookup(node, key)
    if not isinstance(value, str):
        raise TypeMismatch(key, "string", value)
    return value


def get_integer(node: Any, key: str) -> int:
    value = _lookup(node, key)
    # bool is an int subclass; a true/false flag is never a count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatch(key, "integer", value)
    return value

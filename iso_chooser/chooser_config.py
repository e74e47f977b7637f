from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.arch import host_arch, normalize_arch
from .lib.simplestreams import DEFAULT_BASE_URL, IMAGE_FTYPE
from .theme import DEFAULT_TITLE, Theme, theme_from_mapping


@dataclass(frozen=True)
class ChooserConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def target_arch(self) -> str:
        arch = self.raw.get("arch")
        return normalize_arch(str(arch)) if arch else host_arch()

    @property
    def base_url(self) -> str:
        return str(self.raw.get("base_url") or DEFAULT_BASE_URL)

    @property
    def image_ftype(self) -> str:
        return str(self.raw.get("image_ftype") or IMAGE_FTYPE)

    @property
    def title(self) -> str:
        return str(self.raw.get("title") or DEFAULT_TITLE)

    @property
    def theme(self) -> Theme:
        section = self.raw.get("theme") or {}
        if not isinstance(section, dict):
            raise ValueError("theme must be a mapping")
        return theme_from_mapping(section, title=self.title)

    def with_overrides(self, **overrides: Optional[str]) -> "ChooserConfig":
        """Return a copy with command-line values layered over the file values."""
        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return ChooserConfig(raw=raw)


def load_chooser_config(path: Optional[str]) -> ChooserConfig:
    if path is None:
        return ChooserConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("chooser config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the chooser config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return ChooserConfig(raw=raw)

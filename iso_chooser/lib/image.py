from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageRecord:
    """One resolved, display-ready installable image."""

    label: str
    url: str
    checksum: str
    size: int

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise TypeError(f"size must be an int, got {type(self.size).__name__}")
        if self.size < 0:
            raise ValueError(f"size must be non-negative, got {self.size}")

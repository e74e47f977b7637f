from __future__ import annotations

import platform
from typing import Optional


def normalize_arch(machine: str) -> str:
    m = machine.lower()
    return {
        "x86_64": "amd64",
        "amd64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armhf",
        "armv6l": "armhf",
        "ppc64le": "ppc64el",
        "s390x": "s390x",
        "riscv64": "riscv64",
    }.get(m, m)


def host_arch(machine: Optional[str] = None) -> str:
    """Debian-style architecture tag for this host (catalogs use Debian naming)."""
    return normalize_arch(machine if machine is not None else platform.machine())

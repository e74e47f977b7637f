"""Shared fixtures: SimpleStreams-shaped catalogs written to tmp_path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest


def make_item(
    path: str = "kinetic/ubuntu-22.10-live-server-amd64.iso",
    *,
    ftype: str = "iso",
    sha256: str = "abc123",
    size: Any = 1642631168,
) -> Dict[str, Any]:
    return {"ftype": ftype, "path": path, "sha256": sha256, "size": size, "md5": "ffff"}


def make_product(
    versions: Dict[str, Dict[str, Any]],
    *,
    arch: str = "amd64",
    os_name: str = "ubuntu-server",
    release_title: str = "22.10",
    codename: Optional[str] = "Kinetic Kudu",
) -> Dict[str, Any]:
    product: Dict[str, Any] = {
        "arch": arch,
        "os": os_name,
        "release": "kinetic",
        "release_title": release_title,
        "version": release_title,
        "versions": {key: {"items": items, "label": "daily"} for key, items in versions.items()},
    }
    if codename is not None:
        product["release_codename"] = codename
    return product


def make_catalog(products: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "content_id": "com.ubuntu.cdimage.daily:ubuntu-server",
        "datatype": "image-downloads",
        "format": "products:1.0",
        "products": products,
    }


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[..., Path]:
    counter: List[int] = [0]

    def _write(catalog: Dict[str, Any], name: Optional[str] = None) -> Path:
        counter[0] += 1
        p = tmp_path / (name or f"catalog-{counter[0]}.json")
        p.write_text(json.dumps(catalog), encoding="utf-8")
        return p

    return _write


@pytest.fixture
def server_catalog() -> Dict[str, Any]:
    return make_catalog(
        {
            "com.ubuntu.cdimage:ubuntu-server:22.10:amd64": make_product(
                {
                    "20221018": {"iso": make_item("kinetic/old.iso", sha256="old")},
                    "20221020": {
                        "iso": make_item(),
                        "manifest": make_item("kinetic/x.manifest", ftype="manifest"),
                    },
                }
            ),
            "com.ubuntu.cdimage:ubuntu-server:22.10:arm64": make_product(
                {"20221025": {"iso": make_item("kinetic/arm.iso", sha256="arm")}},
                arch="arm64",
            ),
        }
    )

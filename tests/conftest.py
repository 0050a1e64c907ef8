"""Shared fixtures: small node_modules trees written into tmp_path."""
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import pytest

from sass_importer.core.resolution.node_resolver import ResolvedPackage
from sass_importer.exceptions import PackageNotFoundError


def make_package(node_modules: Path, name: str, manifest: Optional[Dict[str, Any]], files: Tuple[str, ...]) -> Path:
    package_dir = node_modules / name
    package_dir.mkdir(parents=True, exist_ok=True)
    if manifest is not None:
        (package_dir / "package.json").write_text(json.dumps({"name": name, **manifest}))
    for rel in files:
        target = package_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"/* {name}/{rel} */\n")
    return package_dir


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with a handful of packages installed."""
    root = tmp_path / "project"
    node_modules = root / "node_modules"
    make_package(
        node_modules, "bootstrap",
        {"main": "dist/js/bootstrap.js", "sass": "scss/bootstrap.scss", "style": "dist/css/bootstrap.css"},
        ("dist/js/bootstrap.js", "dist/css/bootstrap.css", "scss/bootstrap.scss", "scss/_accordion.scss", "scss/mixins/_banner.scss"),
    )
    make_package(
        node_modules, "@hidoo/unit",
        {"main": "src/index.scss"},
        ("src/index.scss", "src/_settings.scss", "src/unit/icon/_core.scss"),
    )
    make_package(
        node_modules, "@scope/pkg",
        {"main": "index.js", "scss": "styles/main.scss"},
        ("index.js", "styles/main.scss", "sub/_widget.scss", "sub/widget.scss"),
    )
    make_package(
        node_modules, "precedence",
        {"main": "index.js"},
        ("index.js", "_both.scss", "both.scss", "file-or-dir.scss", "file-or-dir/index.scss",
         "dir-only/_index.scss", "dir-only/index.scss", "sass-only.sass", "public-dir/index.scss"),
    )
    make_package(node_modules, "no-styles", {"main": "lib/index.js"}, ("lib/index.js",))
    make_package(node_modules, "no-manifest", None, ("index.js", "_theme.scss"))
    return root


class FakeResolver:
    """Resolver double: known requests settle after a per-request delay.

    Unknown requests raise PackageNotFoundError and requests listed in
    `failures` raise the given exception. `settled` records the order
    in which requests actually finished.
    """

    def __init__(
        self,
        table: Mapping[str, Tuple[str, float]],
        manifests: Optional[Mapping[str, Dict[str, Any]]] = None,
        failures: Optional[Mapping[str, BaseException]] = None,
    ):
        self.table = dict(table)
        self.manifests = dict(manifests or {})
        self.failures = dict(failures or {})
        self.requests = []
        self.settled = []

    async def __call__(self, request: str, resolver_options: Mapping[str, Any]) -> ResolvedPackage:
        self.requests.append(request)
        if request in self.failures:
            await asyncio.sleep(0)
            self.settled.append(request)
            raise self.failures[request]
        if request not in self.table:
            await asyncio.sleep(0)
            self.settled.append(request)
            raise PackageNotFoundError(request)
        file_name, delay = self.table[request]
        await asyncio.sleep(delay)
        self.settled.append(request)
        return ResolvedPackage(file=Path(file_name), manifest=self.manifests.get(request))


@pytest.fixture
def fake_resolver_factory():
    return FakeResolver

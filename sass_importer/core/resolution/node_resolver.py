# sass_importer/core/resolution/node_resolver.py
"""
Node-style package resolution (the algorithm behind `require.resolve`).

Given a request such as "bootstrap" or "@scope/pkg/sub/_widget.scss" this
module finds the file on disk by walking up `node_modules` directories from
a base directory, and reports the nearest package manifest (package.json)
for the file it found.

Supported resolver options:
- basedir: directory to resolve from (default: current working directory)
- extensions: suffixes tried when the request has none (default: [".js"])
- paths: extra directories searched after the node_modules walk
- module_directory: directory name(s) to look for (default: "node_modules")
- preserve_symlinks: return paths without resolving symlinks (default: True)
"""
import asyncio
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from sass_importer.exceptions import PackageNotFoundError, ResolverConfigError

log = structlog.get_logger(__name__)

MANIFEST_FILENAME = "package.json"
DEFAULT_MODULE_DIRECTORY = "node_modules"
DEFAULT_EXTENSIONS = (".js",)


@dataclass(frozen=True)
class ResolvedPackage:
    file: Path
    manifest: Optional[Dict[str, Any]] = None
    manifest_path: Optional[Path] = None


@dataclass(frozen=True)
class NodeResolverOptions:
    basedir: Path = field(default_factory=Path.cwd)
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    paths: Tuple[Path, ...] = ()
    module_directories: Tuple[str, ...] = (DEFAULT_MODULE_DIRECTORY,)
    preserve_symlinks: bool = True

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "NodeResolverOptions":
        # validates the opaque resolver options; malformed values are a resolver failure.
        options = options or {}
        if not isinstance(options, Mapping):
            raise ResolverConfigError(f"resolver options must be a mapping, got {type(options).__name__}")

        kwargs: Dict[str, Any] = {}
        basedir = options.get("basedir")
        if basedir is not None:
            if not isinstance(basedir, (str, os.PathLike)):
                raise ResolverConfigError(f"basedir must be a path, got {type(basedir).__name__}")
            kwargs["basedir"] = Path(basedir)

        extensions = options.get("extensions")
        if extensions is not None:
            if not isinstance(extensions, (list, tuple)) or not all(isinstance(e, str) for e in extensions):
                raise ResolverConfigError("extensions must be a list of strings")
            kwargs["extensions"] = tuple(extensions)

        paths = options.get("paths")
        if paths is not None:
            if isinstance(paths, (str, os.PathLike)):
                paths = [paths]
            if not isinstance(paths, (list, tuple)) or not all(isinstance(p, (str, os.PathLike)) for p in paths):
                raise ResolverConfigError("paths must be a path or a list of paths")
            kwargs["paths"] = tuple(Path(p) for p in paths)

        module_directory = options.get("module_directory", options.get("moduleDirectory"))
        if module_directory is not None:
            if isinstance(module_directory, str):
                module_directory = [module_directory]
            if not isinstance(module_directory, (list, tuple)) or not all(isinstance(d, str) and d for d in module_directory):
                raise ResolverConfigError("module_directory must be a non-empty string or list of strings")
            kwargs["module_directories"] = tuple(module_directory)

        preserve = options.get("preserve_symlinks", options.get("preserveSymlinks"))
        if preserve is not None:
            kwargs["preserve_symlinks"] = bool(preserve)

        return cls(**kwargs)


def _is_path_request(request: str) -> bool:
    return request.startswith(("./", "../", "/")) or request in (".", "..") or os.path.isabs(request)


def _read_manifest(manifest_path: Path) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        # an unreadable manifest is skipped, the same way npm tooling does.
        log.warning("package_manifest_unreadable", path=str(manifest_path), error=str(e))
        return None
    return data if isinstance(data, dict) else None


def _find_nearest_manifest(file_path: Path, module_directories: Tuple[str, ...]) -> Tuple[Optional[Dict[str, Any]], Optional[Path]]:
    for directory in file_path.parents:
        candidate = directory / MANIFEST_FILENAME
        if candidate.is_file():
            manifest = _read_manifest(candidate)
            if manifest is not None:
                return manifest, candidate
        if directory.name in module_directories:
            break
    return None, None


def _load_as_file(candidate: Path, extensions: Tuple[str, ...]) -> Optional[Path]:
    if candidate.is_file():
        return candidate
    for ext in extensions:
        with_ext = candidate.parent / f"{candidate.name}{ext}"
        if with_ext.is_file():
            return with_ext
    return None


def _load_as_directory(candidate: Path, extensions: Tuple[str, ...]) -> Optional[Path]:
    if not candidate.is_dir():
        return None
    manifest = _read_manifest(candidate / MANIFEST_FILENAME)
    main = manifest.get("main") if manifest else None
    if isinstance(main, str) and main not in ("", ".", "./"):
        main_path = Path(os.path.normpath(candidate / main))
        found = _load_as_file(main_path, extensions) or _load_as_index(main_path, extensions)
        if found:
            return found
        log.debug("package_main_not_found", package_dir=str(candidate), main=main)
    return _load_as_index(candidate, extensions)


def _load_as_index(directory: Path, extensions: Tuple[str, ...]) -> Optional[Path]:
    return _load_as_file(directory / "index", extensions) if directory.is_dir() else None


def _module_search_dirs(opts: NodeResolverOptions) -> List[Path]:
    # node_modules directories from basedir up to the filesystem root, then extra paths.
    start = Path(os.path.abspath(opts.basedir))
    search_dirs: List[Path] = []
    for directory in [start, *start.parents]:
        if directory.name in opts.module_directories:
            continue
        for module_dir in opts.module_directories:
            search_dirs.append(directory / module_dir)
    search_dirs.extend(p if p.is_absolute() else start / p for p in opts.paths)
    return search_dirs


def _finish(found: Path, opts: NodeResolverOptions) -> ResolvedPackage:
    file_path = Path(os.path.abspath(found))
    if not opts.preserve_symlinks:
        file_path = file_path.resolve()
    manifest, manifest_path = _find_nearest_manifest(file_path, opts.module_directories)
    return ResolvedPackage(file=file_path, manifest=manifest, manifest_path=manifest_path)


def resolve_package_sync(request: str, resolver_options: Optional[Mapping[str, Any]] = None) -> ResolvedPackage:
    """Resolve a package request to a file, blocking on filesystem access.

    Raises:
        ResolverConfigError: the request is not a string or the options are malformed.
        PackageNotFoundError: nothing on disk matches the request.
    """
    if not isinstance(request, str) or request == "":
        raise ResolverConfigError(f"request must be a non-empty string, got {request!r}", request=str(request))
    opts = NodeResolverOptions.from_mapping(resolver_options)

    if _is_path_request(request):
        target = Path(os.path.normpath(opts.basedir / request))
        candidates = [target]
    else:
        candidates = [Path(os.path.normpath(d / request)) for d in _module_search_dirs(opts)]

    for candidate in candidates:
        found = _load_as_file(candidate, opts.extensions) or _load_as_directory(candidate, opts.extensions)
        if found:
            log.debug("package_request_resolved", request=request, file=str(found))
            return _finish(found, opts)

    log.debug("package_request_not_found", request=request, basedir=str(opts.basedir))
    raise PackageNotFoundError(request, basedir=str(opts.basedir))


async def resolve_package(request: str, resolver_options: Optional[Mapping[str, Any]] = None) -> ResolvedPackage:
    # filesystem probing runs in a worker thread so concurrent requests overlap.
    return await asyncio.to_thread(resolve_package_sync, request, resolver_options)

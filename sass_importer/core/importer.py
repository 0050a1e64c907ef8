# sass_importer/core/importer.py
"""
Outward-facing importers.

All three boundary shapes share `resolve_specifier`, which returns a
ResolutionResult. The boundaries only decide how "nothing" is reported, and
a resolver failure is reported exactly like "not found".
"""
import asyncio
import os
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import structlog

from sass_importer.config.settings import ImporterOptions
from sass_importer.core.candidates import find_by_id_with_path_name
from sass_importer.core.entry import find_by_id
from sass_importer.core.resolution.node_resolver import resolve_package
from sass_importer.core.resolution.results import ResolutionResult, Resolver
from sass_importer.core.specifier import CURRENT_DIR_MARKER, parse_specifier

log = structlog.get_logger(__name__)

OptionsLike = Union[ImporterOptions, Mapping[str, Any], None]
DoneCallback = Callable[[Optional[dict]], None]

# libsass passes this as `prev` for sources given as a string.
LIBSASS_STDIN_MARKER = "stdin"


def _containing_dir(containing_file: Optional[str]) -> Optional[Path]:
    if not containing_file or containing_file == LIBSASS_STDIN_MARKER:
        return None
    directory = Path(containing_file).parent
    return directory if directory.is_dir() else None


def _options_for_call(options: ImporterOptions, containing_file: Optional[str]) -> ImporterOptions:
    # an explicit basedir always wins; otherwise resolve next to the file doing the import.
    if "basedir" in options.resolver_options:
        return options
    directory = _containing_dir(containing_file)
    if directory is None:
        return options
    return options.with_resolver_options(basedir=str(directory))


async def resolve_specifier(
    url: Any,
    options: OptionsLike = None,
    containing_file: Optional[str] = None,
    resolver: Resolver = resolve_package,
) -> ResolutionResult:
    """Resolve one import url to a stylesheet file.

    Args:
        url: The url from the `@use`/`@import`/`@forward` rule.
        options: ImporterOptions or a mapping merged over the defaults.
        containing_file: Path of the stylesheet containing the rule, if known.
        resolver: Package resolver coroutine; the Node-style resolver by default.

    Returns:
        ResolutionResult with `file`, `error`, or neither.
    """
    opts = ImporterOptions.from_mapping(options)
    parsed = parse_specifier(url, opts.package_prefix)
    if parsed.id is None:
        log.debug("import_url_not_a_package", url=url)
        return ResolutionResult.empty()

    call_opts = _options_for_call(opts, containing_file)
    if parsed.path_name and parsed.path_name != CURRENT_DIR_MARKER:
        result = await find_by_id_with_path_name(parsed.id, parsed.path_name, call_opts, resolver=resolver)
    else:
        result = await find_by_id(parsed.id, call_opts, resolver=resolver)

    if result.error is not None:
        log.debug("import_url_resolution_error", url=url, error=str(result.error))
    elif result.file is not None:
        log.info("import_url_resolved", url=url, file=str(result.file))
    else:
        log.debug("import_url_not_found", url=url)
    return result


def _as_legacy_result(result: ResolutionResult) -> Optional[dict]:
    if result.error is None and result.file is not None:
        return {"file": str(result.file)}
    return None


def create_importer(options: OptionsLike = None, resolver: Resolver = resolve_package):
    """Factory for a callback-style importer: `importer(url, prev, done)`.

    `done` is called exactly once with `{"file": "/abs/path.scss"}` or None.
    Outside an event loop the call resolves synchronously; inside a running
    loop the lookup is scheduled as a task, which is returned so the caller
    may await it.
    """
    opts = ImporterOptions.from_mapping(options)

    def importer(url: Any, prev: Optional[str], done: DoneCallback) -> Optional["asyncio.Task"]:
        coro = resolve_specifier(url, opts, containing_file=prev, resolver=resolver)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            done(_as_legacy_result(asyncio.run(coro)))
            return None

        def _report(t: "asyncio.Task") -> None:
            if t.cancelled():
                done(None)
            elif t.exception() is not None:
                log.warning("importer_task_failed", url=url, error=str(t.exception()))
                done(None)
            else:
                done(_as_legacy_result(t.result()))

        task = loop.create_task(coro)
        task.add_done_callback(_report)
        return task

    return importer


def _file_url_to_path(containing_url: Any) -> Optional[str]:
    if containing_url is None:
        return None
    if isinstance(containing_url, os.PathLike):
        return os.fspath(containing_url)
    parsed = urlparse(str(containing_url))
    if parsed.scheme == "file":
        return url2pathname(parsed.path)
    return None


class FileImporter:
    """File importer for compilers that expect `find_file_url(url, context)`.

    Returns a `file://` URL for the resolved stylesheet, or None.
    """

    def __init__(self, options: OptionsLike = None, resolver: Resolver = resolve_package):
        self.options = ImporterOptions.from_mapping(options)
        self._resolver = resolver

    async def find_file_url(self, url: Any, containing_url: Any = None) -> Optional[str]:
        prev = _file_url_to_path(containing_url)
        result = await resolve_specifier(url, self.options, containing_file=prev, resolver=self._resolver)
        if result.error is None and result.file is not None:
            return Path(result.file).as_uri()
        return None


def create_file_importer(options: OptionsLike = None, resolver: Resolver = resolve_package) -> FileImporter:
    return FileImporter(options, resolver=resolver)


def create_libsass_importer(options: OptionsLike = None, resolver: Resolver = resolve_package):
    """Importer callable for libsass-python: `sass.compile(..., importers=[(0, importer)])`.

    libsass calls importers synchronously, so each call runs its own event loop.
    """
    opts = ImporterOptions.from_mapping(options)

    def importer(path: str, prev: Optional[str] = None) -> Optional[List[Tuple[str]]]:
        result = asyncio.run(resolve_specifier(path, opts, containing_file=prev, resolver=resolver))
        if result.error is None and result.file is not None:
            return [(str(result.file),)]
        return None

    return importer

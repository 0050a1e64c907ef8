# sass_importer/core/entry.py
import asyncio
from typing import Any, Dict, List, Optional

import structlog

from sass_importer.config.settings import ImporterOptions
from sass_importer.core.resolution.node_resolver import resolve_package
from sass_importer.core.resolution.results import ResolutionResult, Resolver, settle
from sass_importer.core.stylesheets import is_sass_file

log = structlog.get_logger(__name__)


def main_field_requests(package_id: str, manifest: Optional[Dict[str, Any]], main_fields) -> List[Optional[str]]:
    """Build one request per configured manifest field, in field order.

    A field missing from the manifest (or holding anything other than a
    non-empty string) keeps its slot as None so that indexes line up with
    `main_fields` when the results are scanned.
    """
    if not isinstance(manifest, dict):
        return [None for _ in main_fields]
    requests: List[Optional[str]] = []
    for field_name in main_fields:
        value = manifest.get(field_name)
        requests.append(f"{package_id}/{value}" if isinstance(value, str) and value != "" else None)
    return requests


async def _settle_optional(request: Optional[str], options: ImporterOptions, resolver: Resolver) -> ResolutionResult:
    if request is None:
        return ResolutionResult.empty()
    return await settle(request, options.resolver_options, resolver)


async def find_by_id(package_id: str, options: ImporterOptions, resolver: Resolver = resolve_package) -> ResolutionResult:
    # resolves a bare package id to its stylesheet entry point.
    try:
        entry = await settle(package_id, options.resolver_options, resolver)
        if entry.error is not None:
            return ResolutionResult(error=entry.error)

        if is_sass_file(entry.file):
            log.debug("package_entry_is_stylesheet", package=package_id, file=str(entry.file))
            return ResolutionResult(file=entry.file)

        requests = main_field_requests(package_id, entry.manifest, options.main_fields)
        # all field lookups run together; the winner is chosen by field order, not by finish order.
        results = await asyncio.gather(*(_settle_optional(r, options, resolver) for r in requests))
        for field_name, result in zip(options.main_fields, results):
            if result.found and is_sass_file(result.file):
                log.debug("package_entry_from_manifest_field", package=package_id, field=field_name, file=str(result.file))
                return ResolutionResult(file=result.file)

        log.debug("package_has_no_stylesheet_entry", package=package_id, fields=list(options.main_fields))
        return ResolutionResult.empty()
    except Exception as e:
        log.warning("package_entry_resolution_failed", package=package_id, error=str(e), exc_info=True)
        return ResolutionResult(error=e)

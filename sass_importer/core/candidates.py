# sass_importer/core/candidates.py
"""
Candidate file requests for a package sub-path, in stylesheet import precedence:

1. `_<name>`        private partial
2. `<name>/_index`  directory as module, private index
3. `<name>`         plain file
4. `<name>/index`   directory as module, public index

Each template is tried with every configured extension before moving on to
the next template.
"""
import asyncio
from typing import List, Optional, Sequence

import structlog

from sass_importer.config.settings import ImporterOptions
from sass_importer.core.resolution.node_resolver import resolve_package
from sass_importer.core.resolution.results import ResolutionResult, Resolver, settle
from sass_importer.core.stylesheets import is_sass_file, split_path_name

log = structlog.get_logger(__name__)


def candidate_templates(base_name: str) -> List[List[str]]:
    return [
        [f"_{base_name}"],
        [base_name, "_index"],
        [base_name],
        [base_name, "index"],
    ]


def candidate_requests(package_id: str, path_name: str, extensions: Sequence[str]) -> List[str]:
    # ordered request strings: template order first, then extension order.
    dir_name, base_name = split_path_name(path_name)
    requests: List[str] = []
    for template in candidate_templates(base_name):
        parts: List[Optional[str]] = [package_id, dir_name, *template]
        stem = "/".join(p for p in parts if p)
        requests.extend(f"{stem}{ext}" for ext in extensions)
    return requests


async def find_by_id_with_path_name(
    package_id: str,
    path_name: str,
    options: ImporterOptions,
    resolver: Resolver = resolve_package,
) -> ResolutionResult:
    # resolves "<package>/<sub path>" by probing every candidate and keeping the highest-priority hit.
    try:
        requests = candidate_requests(package_id, path_name, options.extensions)
        if not requests:
            log.debug("no_candidate_requests", package=package_id, path_name=path_name)
            return ResolutionResult.empty()

        results = await asyncio.gather(*(settle(r, options.resolver_options, resolver) for r in requests))
        for request, result in zip(requests, results):
            if result.found and is_sass_file(result.file):
                log.debug("candidate_resolved", package=package_id, request=request, file=str(result.file))
                return ResolutionResult(file=result.file)

        log.debug("no_candidate_matched", package=package_id, path_name=path_name, tried=len(requests))
        return ResolutionResult.empty()
    except Exception as e:
        log.warning("candidate_resolution_failed", package=package_id, path_name=path_name, error=str(e), exc_info=True)
        return ResolutionResult(error=e)

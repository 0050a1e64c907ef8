# sass_importer/core/resolution/results.py
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import structlog

from sass_importer.exceptions import ResolutionError

from .node_resolver import ResolvedPackage

log = structlog.get_logger(__name__)

Resolver = Callable[[str, Mapping[str, Any]], Awaitable[ResolvedPackage]]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one lookup: a file, an error, or neither ("not found")."""
    file: Optional[Path] = None
    error: Optional[BaseException] = None
    manifest: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.file is not None and self.error is not None:
            raise ValueError("ResolutionResult cannot carry both a file and an error")

    @property
    def found(self) -> bool:
        return self.file is not None and self.error is None

    @classmethod
    def empty(cls) -> "ResolutionResult":
        return cls()


async def settle(request: str, resolver_options: Mapping[str, Any], resolver: Resolver) -> ResolutionResult:
    # runs one resolver request and turns its outcome into a value; never raises.
    try:
        resolved = await resolver(request, resolver_options)
    except ResolutionError as e:
        log.debug("resolver_request_failed", request=request, code=e.code, error=str(e))
        return ResolutionResult(error=e)
    except Exception as e:
        # one failing lookup must not take down the rest of its batch.
        log.warning("resolver_request_raised", request=request, error_type=type(e).__name__, error=str(e))
        return ResolutionResult(error=e)
    return ResolutionResult(file=resolved.file, manifest=resolved.manifest)

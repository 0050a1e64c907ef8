from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
import structlog

log = structlog.get_logger(__name__)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".scss", ".sass")
DEFAULT_MAIN_FIELDS: Tuple[str, ...] = ("scss", "sass", "main.scss", "main.sass")
DEFAULT_PACKAGE_PREFIX = "~"

# accepts both the camelCase names used by javascript build tool configs and python names.
OPTION_KEY_ALIASES: Dict[str, str] = {
    "extensions": "extensions",
    "mainFields": "main_fields",
    "main_fields": "main_fields",
    "packagePrefix": "package_prefix",
    "package_prefix": "package_prefix",
    "resolverOptions": "resolver_options",
    "resolver_options": "resolver_options",
}


def _as_str_tuple(value: Any, option_name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(v for v in value if isinstance(v, str))
    log.warning("invalid_option_value_using_default", option=option_name, value_type=type(value).__name__)
    return default


@dataclass(frozen=True)
class ImporterOptions:
    # immutable configuration threaded through a single resolution call.
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    main_fields: Tuple[str, ...] = DEFAULT_MAIN_FIELDS
    package_prefix: str = DEFAULT_PACKAGE_PREFIX
    resolver_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # normalize loosely typed input without raising; invalid values disable the feature.
        object.__setattr__(self, "extensions", _as_str_tuple(self.extensions, "extensions", DEFAULT_EXTENSIONS))
        object.__setattr__(self, "main_fields", _as_str_tuple(self.main_fields, "main_fields", DEFAULT_MAIN_FIELDS))
        if not isinstance(self.package_prefix, str):
            log.warning("invalid_package_prefix_disabled", value_type=type(self.package_prefix).__name__)
            object.__setattr__(self, "package_prefix", "")
        resolver_options = self.resolver_options
        if resolver_options is None:
            resolver_options = {}
        elif not isinstance(resolver_options, Mapping):
            log.warning("invalid_resolver_options_ignored", value_type=type(resolver_options).__name__)
            resolver_options = {}
        object.__setattr__(self, "resolver_options", MappingProxyType(dict(resolver_options)))

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "ImporterOptions":
        """Merge user supplied options over the defaults.

        Unknown keys are ignored with a debug log entry so that a shared
        build-tool config can be passed through unchanged.
        """
        if isinstance(options, ImporterOptions):
            return options
        if options is not None and not isinstance(options, Mapping):
            log.warning("invalid_importer_options_ignored", value_type=type(options).__name__)
            options = None
        kwargs: Dict[str, Any] = {}
        for key, value in (options or {}).items():
            attr = OPTION_KEY_ALIASES.get(key)
            if attr is None:
                log.debug("unknown_importer_option_ignored", option=key)
                continue
            kwargs[attr] = value
        return cls(**kwargs)

    def with_resolver_options(self, **overrides: Any) -> "ImporterOptions":
        merged = dict(self.resolver_options)
        merged.update(overrides)
        return ImporterOptions(
            extensions=self.extensions,
            main_fields=self.main_fields,
            package_prefix=self.package_prefix,
            resolver_options=merged,
        )

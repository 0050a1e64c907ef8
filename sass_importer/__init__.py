# sass_importer/__init__.py
"""
Resolve package-style stylesheet imports (`@use "bootstrap"`,
`@import "~@scope/pkg/sub/path"`) to files on disk.
"""
__version__ = "0.1.0"

from sass_importer.config.settings import ImporterOptions
from sass_importer.core.importer import (
    FileImporter,
    create_file_importer,
    create_importer,
    create_libsass_importer,
    resolve_specifier,
)

__all__ = [
    "ImporterOptions",
    "FileImporter",
    "create_file_importer",
    "create_importer",
    "create_libsass_importer",
    "resolve_specifier",
    "__version__",
]

# sass_importer/core/resolution/__init__.py
"""
Package resolution: the Node-style resolver used by default and the result
values shared by the stylesheet resolvers.
"""
from .node_resolver import ResolvedPackage, resolve_package, resolve_package_sync
from .results import ResolutionResult, settle

__all__ = ["ResolvedPackage", "ResolutionResult", "resolve_package", "resolve_package_sync", "settle"]

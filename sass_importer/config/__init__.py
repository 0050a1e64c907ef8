# sass_importer/config/__init__.py
"""Importer settings and TOML configuration loading."""

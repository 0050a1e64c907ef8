# sass_importer/cli/__init__.py
"""Command line interface for sass-importer."""

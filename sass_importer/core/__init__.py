# sass_importer/core/__init__.py
"""
Specifier parsing and stylesheet resolution.

Everything here is stateless: each call builds its own request list and
result values and keeps nothing between calls.
"""

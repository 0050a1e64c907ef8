# sass_importer/main.py
"""Main entry point for the sass-importer CLI application."""

from sass_importer.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="sass-importer")

if __name__ == '__main__':
    entrypoint()

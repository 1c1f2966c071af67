"""Main entry point for running the CLI as a module."""

from ens_index.cli import cli

if __name__ == "__main__":
    cli()

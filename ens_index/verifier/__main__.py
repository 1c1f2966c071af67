"""Main entry point for running the verifier as a module."""

from ens_index.cli import verify

if __name__ == "__main__":
    verify()

"""Main entry point for running the indexer as a module."""

from ens_index.cli import crawl

if __name__ == "__main__":
    crawl()

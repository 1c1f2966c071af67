"""Registry crawler building the content pointer index.

Public API:
- Indexer: Pages the registry and checkpoints the index after every page
- IndexAccumulator: The growing index of one run
- RegistryPager: Cursor-based registry page fetches with rate-limit retry
- run_indexer: Build and run an Indexer from Settings
"""

from ens_index.indexer.crawler import IndexAccumulator, Indexer, run_indexer
from ens_index.indexer.errors import RegistryError, RegistryRateLimited
from ens_index.indexer.registry import RegistryPager

__all__ = [
    "IndexAccumulator",
    "Indexer",
    "RegistryError",
    "RegistryPager",
    "RegistryRateLimited",
    "run_indexer",
]

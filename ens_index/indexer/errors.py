"""Registry error types."""


class RegistryError(Exception):
    """A registry failure that aborts the crawl."""


class RegistryRateLimited(RegistryError):
    """The registry answered HTTP 429; the request should be retried."""

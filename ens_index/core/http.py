"""Shared HTTP request settings."""

from ens_index import __version__


def get_request_headers(api_key: str | None = None) -> dict[str, str]:
    """Get standard headers for registry and gateway requests.

    Args:
        api_key: Optional registry API key sent as a bearer token

    Returns:
        Dict with headers including a descriptive User-Agent
    """
    headers = {"User-Agent": f"ens-content-index/{__version__}"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers

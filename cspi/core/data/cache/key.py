"""Cache key construction."""


def make_cache_key(source_name: str, target_url: str) -> str:
    """Key raw fetch results by logical source name and target URL."""
    return f"{source_name}:{target_url}"

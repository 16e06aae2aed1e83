"""Router configuration.

Routers read RouterConfig once, when constructed. Only ``use_hash_urls``
can change afterwards, through the router property.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(use_hash_urls=False, force_reload=True)
    """

    # Store paths in the URL fragment (``#/page``) instead of the real path.
    # Only the outermost router decides; nested routers inherit it.
    use_hash_urls: bool = True

    # Routing table this router resolves against ("" = default namespace)
    namespace: str = ""

    # Always dispose and recreate the route, even when only params changed
    force_reload: bool = False

"""Azure Route Server desired-state compiler.

This package turns a declarative route server configuration into the provider
requests needed to materialise it:

* validating the input document against what the managed service accepts;
* deriving resource names and tags through a pluggable naming resolver;
* composing public IP, route server, BGP connection and diagnostics requests;
  and
* projecting provider-returned attributes into a result document.

The provider itself is reached through :class:`ProviderGateway`, so the
compiler can be exercised end-to-end against :class:`InMemoryGateway` without
cloud credentials.
"""

from .deployer import RouteServerDeployer  # noqa: F401
from .gateway import InMemoryGateway, ProviderGateway  # noqa: F401
from .naming import ConventionNamingResolver, NamingResolver  # noqa: F401
from .validation import ensure_valid, validate  # noqa: F401

__all__ = [
    "ConventionNamingResolver",
    "InMemoryGateway",
    "NamingResolver",
    "ProviderGateway",
    "RouteServerDeployer",
    "ensure_valid",
    "validate",
]

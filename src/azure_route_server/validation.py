"""Input validation for route server configurations.

Every rule is an independent predicate.  The engine walks the whole rule table
and reports all violations at once instead of stopping at the first one, so a
user can fix an input document in a single pass.

The rules mirror what the managed service accepts today:

* the hosting subnet must be the dedicated ``RouteServerSubnet``;
* only the ``Standard`` route server SKU and ``Standard``/``Static`` public IPs
  are supported;
* at most eight BGP peers may be attached;
* peer ASNs must fit an unsigned 32-bit AS number (0 is reserved);
* peer addresses must be IPv4 dotted quads.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .config import Configuration, PeerConnection
from .exceptions import ConfigurationInvalid

LOG = logging.getLogger(__name__)

MAX_PEER_CONNECTIONS = 8
MIN_PEER_ASN = 1
MAX_PEER_ASN = 4294967295

SUPPORTED_SERVICE_SKU = "Standard"
SUPPORTED_PUBLIC_IP_ALLOCATION = "Static"
SUPPORTED_PUBLIC_IP_SKU = "Standard"

# Suffix match on the full resource id, not a parsed path segment.
ROUTE_SERVER_SUBNET_RE = re.compile(r"RouteServerSubnet\Z")
# Syntactic only: octets are not range checked.
IPV4_DOTTED_QUAD_RE = re.compile(r"[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}")


@dataclass(frozen=True)
class ValidationFailure:
    """A single violated rule, addressed by its dotted field path."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationRule:
    """Configuration-level predicate; ``check`` returns ``True`` when valid."""

    field: str
    check: Callable[[Configuration], bool]
    message: str


@dataclass(frozen=True)
class ConnectionRule:
    """Predicate applied to every entry of ``peer_connections``."""

    attribute: str
    check: Callable[[PeerConnection], bool]
    message: str


def _is_route_server_subnet(subnet_id: str) -> bool:
    return isinstance(subnet_id, str) and ROUTE_SERVER_SUBNET_RE.search(subnet_id) is not None


def _is_valid_asn(asn: int) -> bool:
    if isinstance(asn, bool) or not isinstance(asn, int):
        return False
    return MIN_PEER_ASN <= asn <= MAX_PEER_ASN


def _is_ipv4_dotted_quad(address: str) -> bool:
    return isinstance(address, str) and IPV4_DOTTED_QUAD_RE.fullmatch(address) is not None


CONFIGURATION_RULES: Sequence[ValidationRule] = (
    ValidationRule(
        field="subnet_reference.id",
        check=lambda cfg: _is_route_server_subnet(cfg.subnet_reference.id),
        message="the route server must be deployed into a subnet named 'RouteServerSubnet'",
    ),
    ValidationRule(
        field="service_sku",
        check=lambda cfg: cfg.service_sku == SUPPORTED_SERVICE_SKU,
        message=f"service_sku must be '{SUPPORTED_SERVICE_SKU}'",
    ),
    ValidationRule(
        field="peer_connections",
        check=lambda cfg: len(cfg.peer_connections) <= MAX_PEER_CONNECTIONS,
        message=f"at most {MAX_PEER_CONNECTIONS} BGP peer connections are supported",
    ),
    ValidationRule(
        field="public_ip_allocation_method",
        check=lambda cfg: cfg.public_ip_allocation_method == SUPPORTED_PUBLIC_IP_ALLOCATION,
        message=f"public_ip_allocation_method must be '{SUPPORTED_PUBLIC_IP_ALLOCATION}'",
    ),
    ValidationRule(
        field="public_ip_sku",
        check=lambda cfg: cfg.public_ip_sku == SUPPORTED_PUBLIC_IP_SKU,
        message=f"public_ip_sku must be '{SUPPORTED_PUBLIC_IP_SKU}'",
    ),
)

CONNECTION_RULES: Sequence[ConnectionRule] = (
    ConnectionRule(
        attribute="peer_asn",
        check=lambda conn: _is_valid_asn(conn.peer_asn),
        message=f"peer_asn must be between {MIN_PEER_ASN} and {MAX_PEER_ASN}",
    ),
    ConnectionRule(
        attribute="peer_ip",
        check=lambda conn: _is_ipv4_dotted_quad(conn.peer_ip),
        message="peer_ip must be an IPv4 address in dotted-decimal notation",
    ),
)


def validate(config: Configuration) -> List[ValidationFailure]:
    """Evaluate every rule against ``config``.

    Returns an empty list when the configuration is accepted.
    """

    failures: List[ValidationFailure] = []

    for rule in CONFIGURATION_RULES:
        if not rule.check(config):
            failures.append(ValidationFailure(rule.field, rule.message))

    for key in sorted(config.peer_connections):
        connection = config.peer_connections[key]
        for conn_rule in CONNECTION_RULES:
            if not conn_rule.check(connection):
                failures.append(
                    ValidationFailure(
                        f"peer_connections[{key}].{conn_rule.attribute}",
                        conn_rule.message,
                    )
                )

    for message in config.diagnostics.problems():
        failures.append(ValidationFailure("diagnostics", message))

    for failure in failures:
        LOG.debug("validation failure on %s: %s", failure.field, failure.message)
    return failures


def ensure_valid(config: Configuration) -> Configuration:
    """Return ``config`` unchanged or raise :class:`ConfigurationInvalid`."""

    failures = validate(config)
    if failures:
        LOG.warning("configuration rejected with %d validation failures", len(failures))
        raise ConfigurationInvalid(failures)
    return config

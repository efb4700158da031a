"""Resource creation requests derived from an accepted configuration.

Building requests is a pure transformation: the same configuration and naming
always produce equal request sets.  Requests that depend on a resource which
does not exist yet reference it by name and leave the id unset; the deployer
fills the id in once the provider has returned it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from .config import Configuration
from .naming import ResolvedNaming

PUBLIC_IP_PREFIX = "pip-"
ROUTE_SERVER_PREFIX = "rs-"
BGP_CONNECTION_PREFIX = "bgp-"
DIAGNOSTICS_PREFIX = "diag-"

DEFAULT_LOG_CATEGORY_GROUPS = ("allLogs",)
DEFAULT_METRIC_CATEGORIES = ("AllMetrics",)


@dataclass(frozen=True)
class PublicAddressRequest:
    name: str
    location: str
    resource_group_name: str
    allocation_method: str
    sku: str
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteServiceRequest:
    name: str
    location: str
    resource_group_name: str
    sku: str
    branch_to_branch_enabled: bool
    subnet_id: str
    public_ip_name: str
    tags: Mapping[str, str] = field(default_factory=dict)
    public_ip_id: Optional[str] = None


@dataclass(frozen=True)
class PeerConnectionRequest:
    key: str
    name: str
    peer_asn: int
    peer_ip: str
    route_server_name: str
    route_server_id: Optional[str] = None


@dataclass(frozen=True)
class DiagnosticsRequest:
    name: str
    log_analytics_workspace_id: str
    route_server_name: str
    log_category_groups: Sequence[str] = DEFAULT_LOG_CATEGORY_GROUPS
    metric_categories: Sequence[str] = DEFAULT_METRIC_CATEGORIES
    route_server_id: Optional[str] = None


@dataclass(frozen=True)
class ResourceRequestSet:
    """Every request needed to materialise one route server deployment."""

    public_address: PublicAddressRequest
    route_service: RouteServiceRequest
    peer_connections: Mapping[str, PeerConnectionRequest] = field(default_factory=dict)
    diagnostics: Optional[DiagnosticsRequest] = None

    def __len__(self) -> int:
        return 2 + len(self.peer_connections) + (1 if self.diagnostics else 0)


def merge_tags(base: Mapping[str, str], overlay: Mapping[str, str]) -> Dict[str, str]:
    """Return ``base`` overlaid with ``overlay``; overlay values win."""

    return {**base, **overlay}


def build_requests(config: Configuration, naming: ResolvedNaming) -> ResourceRequestSet:
    """Compose provider requests for an already validated ``config``."""

    suffix = naming.resource_suffix
    tags = merge_tags(naming.tags, config.optional_tags)

    public_address = PublicAddressRequest(
        name=f"{PUBLIC_IP_PREFIX}{suffix}",
        location=config.location,
        resource_group_name=config.resource_group_name,
        allocation_method=config.public_ip_allocation_method,
        sku=config.public_ip_sku,
        tags=tags,
    )

    route_service = RouteServiceRequest(
        name=f"{ROUTE_SERVER_PREFIX}{suffix}",
        location=config.location,
        resource_group_name=config.resource_group_name,
        sku=config.service_sku,
        branch_to_branch_enabled=config.branch_to_branch_enabled,
        subnet_id=config.subnet_reference.id,
        public_ip_name=public_address.name,
        tags=tags,
    )

    # Sorted so the request set is stable regardless of input ordering.
    peer_connections = {
        key: PeerConnectionRequest(
            key=key,
            name=f"{BGP_CONNECTION_PREFIX}{key}",
            peer_asn=config.peer_connections[key].peer_asn,
            peer_ip=config.peer_connections[key].peer_ip,
            route_server_name=route_service.name,
        )
        for key in sorted(config.peer_connections)
    }

    diagnostics = None
    if config.diagnostics.enabled:
        diagnostics = DiagnosticsRequest(
            name=f"{DIAGNOSTICS_PREFIX}{route_service.name}",
            log_analytics_workspace_id=str(config.diagnostics.log_analytics_workspace_id),
            route_server_name=route_service.name,
        )

    return ResourceRequestSet(
        public_address=public_address,
        route_service=route_service,
        peer_connections=peer_connections,
        diagnostics=diagnostics,
    )

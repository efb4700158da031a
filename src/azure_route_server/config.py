"""Configuration data structures for the route server compiler.

These dataclasses describe the declarative input document: who owns the
deployment, where it lives, which subnet hosts the route server and which BGP
peers it talks to.  They are frozen so an accepted configuration cannot change
between validation and request building.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class Identity:
    """Ownership fields fed to the naming resolver.

    Attributes
    ----------
    contact:
        Free-form owner contact, usually an email address.
    environment:
        Deployment stage such as ``dev`` or ``prod``.
    repository:
        Source repository that owns the deployment.
    workload:
        Short workload name used in resource names.
    instance:
        Instance discriminator for side-by-side deployments.
    """

    contact: str
    environment: str
    repository: str
    workload: str
    instance: str = "0"


@dataclass(frozen=True)
class LocationBinding:
    location: str
    resource_group_name: str


@dataclass(frozen=True)
class SubnetReference:
    """Reference to the subnet that will host the route server."""

    id: str


@dataclass(frozen=True)
class PeerConnection:
    """A BGP peer such as a FortiGate NVA."""

    peer_asn: int
    peer_ip: str


@dataclass(frozen=True)
class Diagnostics:
    """Diagnostic setting forwarding route server logs to Log Analytics."""

    enabled: bool = False
    log_analytics_workspace_id: Optional[str] = None

    def problems(self) -> List[str]:
        """Return cross-field violations for this diagnostics block.

        A disabled block is always fine, whatever the workspace id holds.
        """

        if self.enabled and self.log_analytics_workspace_id is None:
            return [
                "log_analytics_workspace_id is required when diagnostics are enabled"
            ]
        return []


@dataclass(frozen=True)
class Configuration:
    """The complete desired state of one route server deployment."""

    identity: Identity
    location_binding: LocationBinding
    subnet_reference: SubnetReference
    branch_to_branch_enabled: bool = False
    service_sku: str = "Standard"
    peer_connections: Mapping[str, PeerConnection] = field(default_factory=dict)
    public_ip_allocation_method: str = "Static"
    public_ip_sku: str = "Standard"
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    optional_tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def location(self) -> str:
        return self.location_binding.location

    @property
    def resource_group_name(self) -> str:
        return self.location_binding.resource_group_name

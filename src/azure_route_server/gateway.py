"""Provider gateway contract and an in-memory implementation.

The gateway is the only component that talks to the cloud provider.  The
compiler hands it one request at a time, in dependency order, and expects
either the generated attributes or a :class:`ProviderError`.

:class:`InMemoryGateway` behaves like the managed service closely enough for
dry runs and unit tests: it generates ARM-style resource ids, assigns stable
public addresses, reports the fixed route server ASN and enforces the SKU
compatibility rules the real service checks server side.
"""

from __future__ import annotations

import hashlib
import ipaddress
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .builder import (
    DiagnosticsRequest,
    PeerConnectionRequest,
    PublicAddressRequest,
    RouteServiceRequest,
)
from .exceptions import ProviderError

LOG = logging.getLogger(__name__)

ROUTE_SERVER_ASN = 65515
DEFAULT_ROUTER_IPS = ("10.0.255.4", "10.0.255.5")
PUBLIC_IP_POOL = ipaddress.ip_network("20.0.0.0/8")


@dataclass(frozen=True)
class PublicAddress:
    id: str
    name: str
    ip_address: str


@dataclass(frozen=True)
class RouteService:
    id: str
    name: str
    asn: int
    router_ips: Tuple[str, ...]


@dataclass(frozen=True)
class PeerConnectionResult:
    id: str
    name: str


class ProviderGateway(ABC):
    """Executes resource requests against the cloud provider."""

    @abstractmethod
    def create_public_address(self, request: PublicAddressRequest) -> PublicAddress:
        """Create (or update) the route server's public IP address."""

    @abstractmethod
    def create_route_service(self, request: RouteServiceRequest) -> RouteService:
        """Create the route server; ``request.public_ip_id`` must be bound."""

    @abstractmethod
    def create_peer_connection(self, request: PeerConnectionRequest) -> PeerConnectionResult:
        """Create one BGP connection; ``request.route_server_id`` must be bound."""

    @abstractmethod
    def bind_diagnostics(self, request: DiagnosticsRequest) -> None:
        """Attach a diagnostic setting to the route server."""


@dataclass
class GatewayState:
    """Resources held by :class:`InMemoryGateway`, keyed by resource id."""

    public_addresses: Dict[str, PublicAddressRequest] = field(default_factory=dict)
    route_services: Dict[str, RouteServiceRequest] = field(default_factory=dict)
    peer_connections: Dict[str, PeerConnectionRequest] = field(default_factory=dict)
    diagnostics: Dict[str, DiagnosticsRequest] = field(default_factory=dict)


class InMemoryGateway(ProviderGateway):
    """Provider simulator that keeps every resource in memory.

    Parameters
    ----------
    subscription_id:
        Subscription used when rendering resource ids.
    router_ips:
        The two virtual router addresses reported for every route server.
    failures:
        Resource name -> :class:`ProviderError` to raise when that resource is
        requested.  Useful to exercise partial failure handling.
    """

    def __init__(
        self,
        subscription_id: str = "00000000-0000-0000-0000-000000000000",
        router_ips: Sequence[str] = DEFAULT_ROUTER_IPS,
        failures: Optional[Mapping[str, ProviderError]] = None,
    ) -> None:
        if len(router_ips) != 2:
            raise ValueError("a route server exposes exactly two router IPs")
        self._subscription_id = subscription_id
        self._router_ips = tuple(router_ips)
        self._failures = dict(failures or {})
        self._state = GatewayState()
        self._lock = Lock()
        self.calls: List[Tuple[str, str]] = []

    @property
    def state(self) -> GatewayState:
        return self._state

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _resource_id(self, resource_group: str, resource_type: str, name: str) -> str:
        return (
            f"/subscriptions/{self._subscription_id}/resourceGroups/{resource_group}"
            f"/providers/Microsoft.Network/{resource_type}/{name}"
        )

    def _address_for(self, name: str) -> str:
        digest = hashlib.sha256(name.encode("utf-8")).digest()
        offset = int.from_bytes(digest[:4], "big") % (PUBLIC_IP_POOL.num_addresses - 2)
        return str(PUBLIC_IP_POOL.network_address + offset + 1)

    def _record(self, operation: str, name: str) -> None:
        with self._lock:
            self.calls.append((operation, name))
        failure = self._failures.get(name)
        if failure is not None:
            LOG.debug("Injected failure for %s %s: %s", operation, name, failure)
            raise failure

    # ------------------------------------------------------------------
    # ProviderGateway implementation
    # ------------------------------------------------------------------
    def create_public_address(self, request: PublicAddressRequest) -> PublicAddress:
        self._record("create_public_address", request.name)
        resource_id = self._resource_id(
            request.resource_group_name, "publicIPAddresses", request.name
        )
        with self._lock:
            self._state.public_addresses[resource_id] = request
        return PublicAddress(
            id=resource_id, name=request.name, ip_address=self._address_for(request.name)
        )

    def create_route_service(self, request: RouteServiceRequest) -> RouteService:
        self._record("create_route_service", request.name)
        with self._lock:
            address = self._state.public_addresses.get(request.public_ip_id or "")
        if address is None:
            raise ProviderError(
                "ResourceNotFound", f"public IP '{request.public_ip_id}' does not exist"
            )
        if address.sku != "Standard" or address.allocation_method != "Static":
            raise ProviderError(
                "PublicIpSkuNotSupported",
                "route servers require a Standard SKU public IP with static allocation",
            )
        if request.sku != "Standard":
            raise ProviderError("SkuNotSupported", f"route server SKU '{request.sku}' is not offered")

        resource_id = self._resource_id(
            request.resource_group_name, "virtualHubs", request.name
        )
        with self._lock:
            self._state.route_services[resource_id] = request
        return RouteService(
            id=resource_id,
            name=request.name,
            asn=ROUTE_SERVER_ASN,
            router_ips=self._router_ips,
        )

    def create_peer_connection(self, request: PeerConnectionRequest) -> PeerConnectionResult:
        self._record("create_peer_connection", request.name)
        route_server_id = request.route_server_id or ""
        with self._lock:
            if route_server_id not in self._state.route_services:
                raise ProviderError(
                    "ResourceNotFound", f"route server '{route_server_id}' does not exist"
                )
            resource_id = f"{route_server_id}/bgpConnections/{request.name}"
            self._state.peer_connections[resource_id] = request
        return PeerConnectionResult(id=resource_id, name=request.name)

    def bind_diagnostics(self, request: DiagnosticsRequest) -> None:
        self._record("bind_diagnostics", request.name)
        route_server_id = request.route_server_id or ""
        with self._lock:
            if route_server_id not in self._state.route_services:
                raise ProviderError(
                    "ResourceNotFound", f"route server '{route_server_id}' does not exist"
                )
            self._state.diagnostics[route_server_id] = request

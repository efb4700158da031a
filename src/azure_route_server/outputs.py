"""Projection of provider results into the externally visible outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .builder import ResourceRequestSet
from .gateway import PeerConnectionResult, PublicAddress, RouteService


@dataclass(frozen=True)
class ConnectionDetail:
    id: str
    name: str
    peer_asn: int
    peer_ip: str


@dataclass(frozen=True)
class ResultDocument:
    """Attributes exposed once a route server has been provisioned.

    ``virtual_router_asn`` is whatever the provider reports; the managed
    service currently always answers 65515.
    """

    id: str
    name: str
    virtual_router_asn: int
    virtual_router_ips: List[str]
    public_ip_address: str
    public_ip_id: str
    tags: Mapping[str, str] = field(default_factory=dict)
    bgp_connections: Mapping[str, ConnectionDetail] = field(default_factory=dict)

    @property
    def bgp_connection_ids(self) -> Dict[str, str]:
        return {key: detail.id for key, detail in self.bgp_connections.items()}

    @property
    def bgp_connection_count(self) -> int:
        return len(self.bgp_connections)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "virtual_router_asn": self.virtual_router_asn,
            "virtual_router_ips": list(self.virtual_router_ips),
            "public_ip_address": self.public_ip_address,
            "public_ip_id": self.public_ip_id,
            "tags": dict(self.tags),
            "bgp_connections": {
                key: {
                    "id": detail.id,
                    "name": detail.name,
                    "peer_asn": detail.peer_asn,
                    "peer_ip": detail.peer_ip,
                }
                for key, detail in self.bgp_connections.items()
            },
            "bgp_connection_ids": self.bgp_connection_ids,
            "bgp_connection_count": self.bgp_connection_count,
        }


def project(
    requests: ResourceRequestSet,
    address: PublicAddress,
    service: RouteService,
    connections: Mapping[str, PeerConnectionResult],
) -> ResultDocument:
    """Build the :class:`ResultDocument` for a provisioned deployment.

    ``connections`` may hold a subset of the requested connections when some
    of them failed; only those are reported.
    """

    details = {}
    for key in sorted(connections):
        request = requests.peer_connections[key]
        result = connections[key]
        details[key] = ConnectionDetail(
            id=result.id,
            name=result.name,
            peer_asn=request.peer_asn,
            peer_ip=request.peer_ip,
        )

    return ResultDocument(
        id=service.id,
        name=service.name,
        virtual_router_asn=service.asn,
        virtual_router_ips=list(service.router_ips),
        public_ip_address=address.ip_address,
        public_ip_id=address.id,
        tags=dict(requests.route_service.tags),
        bgp_connections=details,
    )

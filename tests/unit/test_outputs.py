from azure_route_server.builder import build_requests
from azure_route_server.config import (
    Configuration,
    Identity,
    LocationBinding,
    PeerConnection,
    SubnetReference,
)
from azure_route_server.gateway import PeerConnectionResult, PublicAddress, RouteService
from azure_route_server.naming import ResolvedNaming
from azure_route_server.outputs import project

RS_ID = "/subscriptions/sub-1/resourceGroups/rg-hub/providers/Microsoft.Network/virtualHubs/rs-hub"


def build_request_set():
    config = Configuration(
        identity=Identity(
            contact="netops@example.com",
            environment="prod",
            repository="network-hub",
            workload="hub",
        ),
        location_binding=LocationBinding(location="westeurope", resource_group_name="rg-hub"),
        subnet_reference=SubnetReference(id="/subnets/RouteServerSubnet"),
        peer_connections={
            "fortigate-primary": PeerConnection(peer_asn=65001, peer_ip="10.100.1.4"),
            "fortigate-secondary": PeerConnection(peer_asn=65002, peer_ip="10.100.1.5"),
        },
        optional_tags={"owner": "netops"},
    )
    return build_requests(config, ResolvedNaming("hub", {"workload": "hub"}))


def test_projection_uses_provider_attributes():
    requests = build_request_set()
    address = PublicAddress(id="/pip/pip-hub", name="pip-hub", ip_address="20.1.2.3")
    service = RouteService(id=RS_ID, name="rs-hub", asn=65515, router_ips=("10.0.1.4", "10.0.1.5"))
    connections = {
        "fortigate-primary": PeerConnectionResult(id=f"{RS_ID}/bgpConnections/bgp-fortigate-primary", name="bgp-fortigate-primary"),
        "fortigate-secondary": PeerConnectionResult(id=f"{RS_ID}/bgpConnections/bgp-fortigate-secondary", name="bgp-fortigate-secondary"),
    }

    result = project(requests, address, service, connections)

    assert result.id == RS_ID
    assert result.name == "rs-hub"
    assert result.virtual_router_asn == 65515
    assert result.virtual_router_ips == ["10.0.1.4", "10.0.1.5"]
    assert result.public_ip_address == "20.1.2.3"
    assert result.public_ip_id == "/pip/pip-hub"
    assert result.tags == {"workload": "hub", "owner": "netops"}
    assert result.bgp_connection_count == 2
    assert result.bgp_connections["fortigate-secondary"].peer_asn == 65002
    assert result.bgp_connection_ids["fortigate-primary"].endswith("/bgp-fortigate-primary")


def test_projection_reports_provider_asn():
    requests = build_request_set()
    address = PublicAddress(id="/pip/pip-hub", name="pip-hub", ip_address="20.1.2.3")
    service = RouteService(id=RS_ID, name="rs-hub", asn=65520, router_ips=("10.0.1.4", "10.0.1.5"))

    result = project(requests, address, service, {})

    assert result.virtual_router_asn == 65520
    assert result.bgp_connection_count == 0


def test_result_as_dict():
    requests = build_request_set()
    address = PublicAddress(id="/pip/pip-hub", name="pip-hub", ip_address="20.1.2.3")
    service = RouteService(id=RS_ID, name="rs-hub", asn=65515, router_ips=("10.0.1.4", "10.0.1.5"))
    connections = {
        "fortigate-primary": PeerConnectionResult(id="/c/1", name="bgp-fortigate-primary"),
    }

    data = project(requests, address, service, connections).as_dict()

    assert data["bgp_connections"] == {
        "fortigate-primary": {
            "id": "/c/1",
            "name": "bgp-fortigate-primary",
            "peer_asn": 65001,
            "peer_ip": "10.100.1.4",
        }
    }
    assert data["bgp_connection_ids"] == {"fortigate-primary": "/c/1"}
    assert data["bgp_connection_count"] == 1
    assert data["virtual_router_ips"] == ["10.0.1.4", "10.0.1.5"]

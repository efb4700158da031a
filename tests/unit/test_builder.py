from azure_route_server.builder import build_requests, merge_tags
from azure_route_server.config import (
    Configuration,
    Diagnostics,
    Identity,
    LocationBinding,
    PeerConnection,
    SubnetReference,
)
from azure_route_server.naming import ResolvedNaming

SUBNET_ID = (
    "/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/rg-hub"
    "/providers/Microsoft.Network/virtualNetworks/vnet-hub/subnets/RouteServerSubnet"
)
NAMING = ResolvedNaming(
    resource_suffix="hub-prod-weu-000",
    tags={"environment": "prod", "workload": "hub"},
)


def build_config(**kwargs) -> Configuration:
    return Configuration(
        identity=Identity(
            contact="netops@example.com",
            environment="prod",
            repository="network-hub",
            workload="hub",
        ),
        location_binding=LocationBinding(location="westeurope", resource_group_name="rg-hub"),
        subnet_reference=SubnetReference(id=SUBNET_ID),
        **kwargs,
    )


def test_builder_names_resources_from_suffix():
    requests = build_requests(build_config(), NAMING)

    assert requests.public_address.name == "pip-hub-prod-weu-000"
    assert requests.route_service.name == "rs-hub-prod-weu-000"
    assert requests.route_service.public_ip_name == "pip-hub-prod-weu-000"
    assert requests.route_service.public_ip_id is None
    assert requests.route_service.subnet_id == SUBNET_ID
    assert requests.public_address.allocation_method == "Static"
    assert requests.public_address.sku == "Standard"
    assert requests.peer_connections == {}
    assert requests.diagnostics is None
    assert len(requests) == 2


def test_builder_creates_connection_per_peer():
    config = build_config(
        branch_to_branch_enabled=True,
        peer_connections={
            "fortigate-secondary": PeerConnection(peer_asn=65001, peer_ip="10.100.1.5"),
            "fortigate-primary": PeerConnection(peer_asn=65001, peer_ip="10.100.1.4"),
        },
    )

    requests = build_requests(config, NAMING)

    assert list(requests.peer_connections) == ["fortigate-primary", "fortigate-secondary"]
    primary = requests.peer_connections["fortigate-primary"]
    assert primary.name == "bgp-fortigate-primary"
    assert primary.peer_ip == "10.100.1.4"
    assert primary.route_server_name == "rs-hub-prod-weu-000"
    assert requests.route_service.branch_to_branch_enabled is True


def test_builder_adds_diagnostics_only_when_enabled():
    enabled = build_config(
        diagnostics=Diagnostics(enabled=True, log_analytics_workspace_id="/ws/law-hub")
    )
    disabled = build_config(
        diagnostics=Diagnostics(enabled=False, log_analytics_workspace_id="/ws/law-hub")
    )

    diagnostics = build_requests(enabled, NAMING).diagnostics
    assert diagnostics is not None
    assert diagnostics.name == "diag-rs-hub-prod-weu-000"
    assert diagnostics.log_analytics_workspace_id == "/ws/law-hub"
    assert diagnostics.route_server_name == "rs-hub-prod-weu-000"
    assert build_requests(disabled, NAMING).diagnostics is None


def test_builder_merges_tags_with_optional_overlay():
    config = build_config(optional_tags={"environment": "production", "cost-center": "42"})

    requests = build_requests(config, NAMING)

    expected = {"environment": "production", "workload": "hub", "cost-center": "42"}
    assert requests.public_address.tags == expected
    assert requests.route_service.tags == expected


def test_builder_is_pure():
    config = build_config(
        peer_connections={"nva": PeerConnection(peer_asn=65010, peer_ip="10.1.0.4")},
        diagnostics=Diagnostics(enabled=True, log_analytics_workspace_id="/ws/law-hub"),
    )

    assert build_requests(config, NAMING) == build_requests(config, NAMING)


def test_merge_tags_does_not_mutate_inputs():
    base = {"a": "1"}
    overlay = {"a": "2", "b": "3"}

    merged = merge_tags(base, overlay)

    assert merged == {"a": "2", "b": "3"}
    assert base == {"a": "1"}

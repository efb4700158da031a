import pytest

from azure_route_server.config import Identity
from azure_route_server.exceptions import ResolutionError
from azure_route_server.naming import ConventionNamingResolver


def build_identity(**overrides) -> Identity:
    values = dict(
        contact="netops@example.com",
        environment="Prod",
        repository="network-hub",
        workload="Hub",
    )
    values.update(overrides)
    return Identity(**values)


def test_resolver_builds_suffix_from_identity():
    resolver = ConventionNamingResolver()

    naming = resolver.resolve(build_identity(), "westeurope")

    assert naming.resource_suffix == "hub-prod-weu-000"


def test_resolver_is_deterministic():
    resolver = ConventionNamingResolver()

    first = resolver.resolve(build_identity(instance="2"), "West Europe")
    second = resolver.resolve(build_identity(instance="2"), "westeurope")

    assert first == second
    assert first.resource_suffix.endswith("-002")


def test_resolver_falls_back_to_location_name():
    resolver = ConventionNamingResolver(region_codes={})

    naming = resolver.resolve(build_identity(instance="blue"), "North Europe")

    assert naming.resource_suffix == "hub-prod-northeurope-blue"


def test_resolver_tags():
    naming = ConventionNamingResolver().resolve(build_identity(), "uksouth")

    assert naming.tags == {
        "contact": "netops@example.com",
        "environment": "Prod",
        "repository": "network-hub",
        "workload": "Hub",
    }


@pytest.mark.parametrize(
    "overrides, location",
    [
        ({"workload": ""}, "westeurope"),
        ({"environment": "  "}, "westeurope"),
        ({}, ""),
    ],
)
def test_resolver_rejects_missing_fields(overrides, location):
    resolver = ConventionNamingResolver()

    with pytest.raises(ResolutionError):
        resolver.resolve(build_identity(**overrides), location)

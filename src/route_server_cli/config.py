"""YAML loader for route server input documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from azure_route_server.config import (
    Configuration,
    Diagnostics,
    Identity,
    LocationBinding,
    PeerConnection,
    SubnetReference,
)


def _section(data: Mapping[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        raise ValueError(f"Configuration missing '{name}' section")
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be a mapping")
    return section


def _parse_flag(name: str, value: Any) -> bool:
    # Quoted YAML strings such as 'false' would otherwise coerce to True.
    if not isinstance(value, bool):
        raise ValueError(f"'{name}' must be a boolean, got {value!r}")
    return value


def _parse_instance(value: Any) -> str:
    if value is None:
        return "0"
    return str(value)


def _parse_identity(section: dict) -> Identity:
    return Identity(
        contact=str(section["contact"]),
        environment=str(section["environment"]),
        repository=str(section["repository"]),
        workload=str(section["workload"]),
        instance=_parse_instance(section.get("instance")),
    )


def _parse_peer_asn(key: str, value: Any) -> int:
    # bool is an int subclass; let it through so validation reports it.
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        raise ValueError(f"peer connection '{key}' has non-integer peer_asn {value!r}") from None


def _parse_peer_connections(entries: Any) -> Dict[str, PeerConnection]:
    if entries is None:
        return {}
    if not isinstance(entries, dict):
        raise ValueError("'peer_connections' must be a mapping keyed by connection name")

    connections: Dict[str, PeerConnection] = {}
    for key, entry in entries.items():
        if not isinstance(entry, dict):
            raise ValueError(f"peer connection '{key}' must be a mapping")
        connections[str(key)] = PeerConnection(
            peer_asn=_parse_peer_asn(str(key), entry["peer_asn"]),
            peer_ip=str(entry["peer_ip"]),
        )
    return connections


def _parse_diagnostics(section: Any) -> Diagnostics:
    if section is None:
        return Diagnostics()
    if not isinstance(section, dict):
        raise ValueError("'diagnostics' section must be a mapping")
    workspace_id = section.get("log_analytics_workspace_id")
    return Diagnostics(
        enabled=_parse_flag("diagnostics.enabled", section.get("enabled", False)),
        log_analytics_workspace_id=None if workspace_id is None else str(workspace_id),
    )


def _parse_tags(section: Any) -> Dict[str, str]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError("'optional_tags' must be a mapping")
    return {str(k): str(v) for k, v in section.items()}


def parse_config(data: Mapping[str, Any]) -> Configuration:
    """Build a :class:`Configuration` from an already decoded document."""

    if not isinstance(data, dict):
        raise ValueError("Route server configuration must be a mapping")

    location = _section(data, "location_binding")
    subnet = _section(data, "subnet_reference")

    return Configuration(
        identity=_parse_identity(_section(data, "identity")),
        location_binding=LocationBinding(
            location=str(location["location"]),
            resource_group_name=str(location["resource_group_name"]),
        ),
        subnet_reference=SubnetReference(id=str(subnet["id"])),
        branch_to_branch_enabled=_parse_flag(
            "branch_to_branch_enabled", data.get("branch_to_branch_enabled", False)
        ),
        service_sku=str(data.get("service_sku", "Standard")),
        peer_connections=_parse_peer_connections(data.get("peer_connections")),
        public_ip_allocation_method=str(data.get("public_ip_allocation_method", "Static")),
        public_ip_sku=str(data.get("public_ip_sku", "Standard")),
        diagnostics=_parse_diagnostics(data.get("diagnostics")),
        optional_tags=_parse_tags(data.get("optional_tags")),
    )


def load_config(path: Path) -> Configuration:
    data = yaml.safe_load(path.read_text())
    return parse_config(data)

"""YAML plan rendering for route server request sets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .builder import (
    DiagnosticsRequest,
    PeerConnectionRequest,
    PublicAddressRequest,
    ResourceRequestSet,
    RouteServiceRequest,
)

PLAN_FILENAME = "route-server.plan.yaml"


@dataclass
class RenderResult:
    """Result of a plan rendering operation."""

    plan_text: str
    output_path: Path


class PlanRenderer:
    """Render a :class:`ResourceRequestSet` into a reviewable YAML plan."""

    def __init__(self, output_dir: Path, *, filename: str = PLAN_FILENAME) -> None:
        self._output_dir = output_dir
        self._filename = filename

    def render(self, requests: ResourceRequestSet) -> RenderResult:
        document = {
            "public_ip": self._render_public_address(requests.public_address),
            "route_server": self._render_route_service(requests.route_service),
            "bgp_connections": {
                key: self._render_peer_connection(request)
                for key, request in requests.peer_connections.items()
            },
            "diagnostics": self._render_diagnostics(requests.diagnostics),
        }
        body = yaml.safe_dump(document, sort_keys=False, default_flow_style=False)

        self._output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self._output_dir / self._filename
        output_path.write_text(body)

        return RenderResult(plan_text=body, output_path=output_path)

    def _render_public_address(self, request: PublicAddressRequest) -> Dict[str, Any]:
        return {
            "name": request.name,
            "resource_group_name": request.resource_group_name,
            "location": request.location,
            "allocation_method": request.allocation_method,
            "sku": request.sku,
            "tags": dict(request.tags),
        }

    def _render_route_service(self, request: RouteServiceRequest) -> Dict[str, Any]:
        return {
            "name": request.name,
            "resource_group_name": request.resource_group_name,
            "location": request.location,
            "sku": request.sku,
            "branch_to_branch_traffic_enabled": request.branch_to_branch_enabled,
            "subnet_id": request.subnet_id,
            "public_ip": request.public_ip_name,
            "tags": dict(request.tags),
        }

    def _render_peer_connection(self, request: PeerConnectionRequest) -> Dict[str, Any]:
        return {
            "name": request.name,
            "route_server": request.route_server_name,
            "peer_asn": request.peer_asn,
            "peer_ip": request.peer_ip,
        }

    def _render_diagnostics(
        self, request: Optional[DiagnosticsRequest]
    ) -> Optional[Dict[str, Any]]:
        if request is None:
            return None
        return {
            "name": request.name,
            "target": request.route_server_name,
            "log_analytics_workspace_id": request.log_analytics_workspace_id,
            "log_category_groups": list(request.log_category_groups),
            "metric_categories": list(request.metric_categories),
        }

"""Route server deployment orchestrator.

The deployer ties the compiler stages together: it validates the
configuration, resolves naming once, builds the request set and hands the
requests to the provider gateway in dependency order (public IP, route server,
BGP connections, diagnostics).  Ids returned by the provider are bound into
dependent requests as they become available.

Failures are not rolled back.  A resource created before a failure stays in
place and is picked up again by the next desired-state run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .builder import ResourceRequestSet, build_requests
from .config import Configuration
from .exceptions import PartialProvisioningError, ProviderError
from .gateway import PeerConnectionResult, ProviderGateway, RouteService
from .naming import NamingResolver
from .outputs import ResultDocument, project
from .validation import ValidationFailure, ensure_valid, validate

LOG = logging.getLogger(__name__)


@dataclass
class DeployerState:
    """Mutable runtime state tracked by the deployer."""

    last_plan: Optional[ResourceRequestSet] = None
    last_result: Optional[ResultDocument] = None


class RouteServerDeployer:
    """Compile a :class:`Configuration` and apply it through a gateway."""

    def __init__(
        self,
        naming: NamingResolver,
        gateway: ProviderGateway,
        *,
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._naming = naming
        self._gateway = gateway
        self._max_workers = max_workers
        self._state = DeployerState()

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------
    def validate(self, config: Configuration) -> List[ValidationFailure]:
        return validate(config)

    def plan(self, config: Configuration) -> ResourceRequestSet:
        """Validate ``config`` and build its request set without any I/O."""

        ensure_valid(config)
        naming = self._naming.resolve(config.identity, config.location)
        requests = build_requests(config, naming)
        self._state.last_plan = requests
        LOG.info(
            "Planned route server '%s' with %d requests (%d BGP connections)",
            requests.route_service.name,
            len(requests),
            len(requests.peer_connections),
        )
        return requests

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------
    def deploy(self, config: Configuration) -> ResultDocument:
        requests = self.plan(config)

        address = self._gateway.create_public_address(requests.public_address)
        LOG.info("Created public IP %s (%s)", address.name, address.ip_address)

        service = self._gateway.create_route_service(
            replace(requests.route_service, public_ip_id=address.id)
        )
        LOG.info("Created route server %s (asn=%s)", service.name, service.asn)

        connections, failures = self._create_connections(requests, service)
        result = project(requests, address, service, connections)

        if failures:
            for key, error in sorted(failures.items()):
                LOG.warning("BGP connection '%s' failed: %s", key, error)
            self._state.last_result = result
            raise PartialProvisioningError(failures, result)

        if requests.diagnostics is not None:
            self._gateway.bind_diagnostics(
                replace(requests.diagnostics, route_server_id=service.id)
            )
            LOG.info(
                "Bound diagnostics for %s to workspace %s",
                service.name,
                requests.diagnostics.log_analytics_workspace_id,
            )

        self._state.last_result = result
        return result

    def _create_connections(
        self, requests: ResourceRequestSet, service: RouteService
    ):
        connections: Dict[str, PeerConnectionResult] = {}
        failures: Dict[str, ProviderError] = {}
        if not requests.peer_connections:
            return connections, failures

        bound = {
            key: replace(request, route_server_id=service.id)
            for key, request in requests.peer_connections.items()
        }
        workers = min(self._max_workers, len(bound))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                key: executor.submit(self._gateway.create_peer_connection, request)
                for key, request in bound.items()
            }
            for key, future in futures.items():
                try:
                    connections[key] = future.result()
                except ProviderError as exc:
                    failures[key] = exc
                    continue
                LOG.debug("Created BGP connection %s", connections[key].name)
        return connections, failures

    # ------------------------------------------------------------------
    # Introspection helpers (useful for tests / CLI)
    # ------------------------------------------------------------------
    @property
    def last_plan(self) -> Optional[ResourceRequestSet]:
        return self._state.last_plan

    @property
    def last_result(self) -> Optional[ResultDocument]:
        return self._state.last_result

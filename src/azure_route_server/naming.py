"""Resource naming and base tag resolution.

The naming convention is owned by a separate service in most organisations, so
the compiler only depends on the :class:`NamingResolver` interface.  The
:class:`ConventionNamingResolver` implements a common
``<workload>-<environment>-<region>-<instance>`` scheme and is what the command
line uses when no other resolver is wired in.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .config import Identity
from .exceptions import ResolutionError

LOG = logging.getLogger(__name__)

REGION_SHORT_CODES: Mapping[str, str] = {
    "australiaeast": "aue",
    "brazilsouth": "brs",
    "canadacentral": "cac",
    "centralus": "cus",
    "eastasia": "ea",
    "eastus": "eus",
    "eastus2": "eus2",
    "francecentral": "frc",
    "germanywestcentral": "gwc",
    "japaneast": "jpe",
    "northeurope": "neu",
    "norwayeast": "noe",
    "southeastasia": "sea",
    "swedencentral": "sdc",
    "switzerlandnorth": "szn",
    "uksouth": "uks",
    "ukwest": "ukw",
    "westeurope": "weu",
    "westus": "wus",
    "westus2": "wus2",
    "westus3": "wus3",
}


@dataclass(frozen=True)
class ResolvedNaming:
    """Name suffix and base tags shared by every resource of a deployment."""

    resource_suffix: str
    tags: Mapping[str, str] = field(default_factory=dict)


class NamingResolver(ABC):
    """Interface for naming/tagging conventions."""

    @abstractmethod
    def resolve(self, identity: Identity, location: str) -> ResolvedNaming:
        """Return the naming for ``identity`` deployed to ``location``.

        Implementations raise :class:`ResolutionError` when no name can be
        derived.
        """


class ConventionNamingResolver(NamingResolver):
    """Derive names as ``<workload>-<environment>-<region>-<instance>``.

    Parameters
    ----------
    region_codes:
        Override for the region short-code table.  Regions missing from the
        table fall back to their normalised name.
    instance_width:
        Numeric instances are zero padded to this width (``0`` -> ``000``).
    """

    def __init__(
        self,
        region_codes: Optional[Mapping[str, str]] = None,
        instance_width: int = 3,
    ) -> None:
        self._region_codes = dict(REGION_SHORT_CODES if region_codes is None else region_codes)
        self._instance_width = instance_width

    def _region_code(self, location: str) -> str:
        normalised = location.replace(" ", "").lower()
        if not normalised:
            raise ResolutionError("location must not be empty")
        return self._region_codes.get(normalised, normalised)

    def _instance(self, instance: str) -> str:
        value = str(instance).strip()
        if value.isdigit():
            return value.zfill(self._instance_width)
        return value.lower()

    def resolve(self, identity: Identity, location: str) -> ResolvedNaming:
        workload = (identity.workload or "").strip().lower()
        environment = (identity.environment or "").strip().lower()
        if not workload:
            raise ResolutionError("identity.workload must not be empty")
        if not environment:
            raise ResolutionError("identity.environment must not be empty")

        parts = [workload, environment, self._region_code(location)]
        instance = self._instance(identity.instance)
        if instance:
            parts.append(instance)
        suffix = "-".join(parts)

        tags: Dict[str, str] = {
            "contact": identity.contact,
            "environment": identity.environment,
            "repository": identity.repository,
            "workload": identity.workload,
        }
        LOG.debug("Resolved naming suffix '%s' for location %s", suffix, location)
        return ResolvedNaming(resource_suffix=suffix, tags=tags)

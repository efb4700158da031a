"""Exception hierarchy raised while compiling and applying a route server."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

if TYPE_CHECKING:
    from .outputs import ResultDocument
    from .validation import ValidationFailure


class RouteServerError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationInvalid(RouteServerError):
    """The configuration violates one or more validation rules.

    ``failures`` always holds the complete list so callers can report every
    problem in one go.
    """

    def __init__(self, failures: Sequence["ValidationFailure"]) -> None:
        self.failures = list(failures)
        summary = "; ".join(f"{f.field}: {f.message}" for f in self.failures)
        super().__init__(f"invalid configuration ({len(self.failures)} problems): {summary}")


class ResolutionError(RouteServerError):
    """The naming resolver could not derive a name or tag set."""


class ProviderError(RouteServerError):
    """Structured error returned by the provider gateway."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class PartialProvisioningError(RouteServerError):
    """Some peer connections failed while the rest were provisioned.

    ``result`` describes what exists on the provider side, listing only the
    connections that succeeded.
    """

    def __init__(
        self,
        failures: Mapping[str, ProviderError],
        result: "ResultDocument",
    ) -> None:
        self.failures = dict(failures)
        self.result = result
        keys = ", ".join(sorted(self.failures))
        super().__init__(f"failed to provision peer connections: {keys}")

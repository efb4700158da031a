"""Entry point for the route server command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from azure_route_server.config import Configuration
from azure_route_server.deployer import RouteServerDeployer
from azure_route_server.exceptions import (
    ConfigurationInvalid,
    PartialProvisioningError,
    RouteServerError,
)
from azure_route_server.gateway import InMemoryGateway
from azure_route_server.naming import ConventionNamingResolver
from azure_route_server.plan import PlanRenderer
from azure_route_server.validation import validate

from .config import load_config

LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILED = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-server",
        description="Validate and plan Azure Route Server deployments",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_config(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--config",
            type=Path,
            required=True,
            help="Path to the route server input document (YAML)",
        )

    validate_parser = subparsers.add_parser("validate", help="Report every validation failure")
    add_config(validate_parser)

    plan_parser = subparsers.add_parser("plan", help="Write the provider request plan")
    add_config(plan_parser)
    plan_parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory where route-server.plan.yaml will be written",
    )

    simulate_parser = subparsers.add_parser(
        "simulate", help="Apply against the in-memory provider and print outputs"
    )
    add_config(simulate_parser)
    simulate_parser.add_argument(
        "--subscription-id",
        default="00000000-0000-0000-0000-000000000000",
        help="Subscription id used in generated resource ids",
    )
    return parser


def _run_validate(config_path: Path, config: Configuration) -> int:
    failures = validate(config)
    if failures:
        for failure in failures:
            print(f"{failure.field}: {failure.message}")
        return EXIT_INVALID
    print(f"{config_path}: configuration is valid")
    return EXIT_OK


def _run_plan(config: Configuration, output_dir: Path) -> int:
    deployer = RouteServerDeployer(ConventionNamingResolver(), InMemoryGateway())
    requests = deployer.plan(config)
    result = PlanRenderer(output_dir).render(requests)
    LOG.info("Wrote route server plan to %s", result.output_path)
    return EXIT_OK


def _run_simulate(config: Configuration, subscription_id: str) -> int:
    gateway = InMemoryGateway(subscription_id=subscription_id)
    deployer = RouteServerDeployer(ConventionNamingResolver(), gateway)
    try:
        result = deployer.deploy(config)
    except PartialProvisioningError as exc:
        print(yaml.safe_dump(exc.result.as_dict(), sort_keys=False), end="")
        raise
    print(yaml.safe_dump(result.as_dict(), sort_keys=False), end="")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except KeyError as exc:
        print(f"{args.config}: missing required key {exc}", file=sys.stderr)
        return EXIT_INVALID
    except (ValueError, yaml.YAMLError) as exc:
        print(f"{args.config}: {exc}", file=sys.stderr)
        return EXIT_INVALID

    try:
        if args.command == "validate":
            return _run_validate(args.config, config)
        if args.command == "plan":
            return _run_plan(config, args.output_dir)
        return _run_simulate(config, args.subscription_id)
    except ConfigurationInvalid as exc:
        for failure in exc.failures:
            print(f"{failure.field}: {failure.message}", file=sys.stderr)
        return EXIT_INVALID
    except RouteServerError as exc:
        LOG.error("%s failed: %s", args.command, exc)
        return EXIT_FAILED


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

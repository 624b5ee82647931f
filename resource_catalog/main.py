"""The resource catalog CLI."""

import os
import sys

import click
from crossplane.function import logging

from resource_catalog.config import CatalogConfig
from resource_catalog.filter import AndFilter, FieldFilter, SkipSubresourceFilter
from resource_catalog.k8s_client import K8sClient
from resource_catalog.parser import new_parser
from resource_catalog.resources import Resources


def format_resources(resources: Resources) -> list[str]:
    """Render a catalog as one header line per name and one line per version."""
    lines = []
    for name in resources.sort_keys():
        lines.append(f"→ {name}")
        for version in resources[name]:
            subresources = ",".join(sr.name for sr in version.subresources) or "-"
            lines.append(
                f"→→ {version.api_group_version} kind={version.resource.kind} "
                f"namespaced={str(version.resource.namespaced).lower()} "
                f"verbs={','.join(version.resource.verbs) or '-'} "
                f"subresources={subresources}"
            )
    return lines


@click.command()
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Emit debug logs.",
)
@click.option(
    "--api-group",
    default=None,
    help="Only list resources of this API group.",
)
@click.option(
    "--api-version",
    default=None,
    help="Only list resources of this API version.",
)
@click.option(
    "--kubeconfig",
    default=None,
    help="Path to the kubeconfig file.",
)
@click.option(
    "--context",
    default=None,
    help="Kubeconfig context to use.",
)
@click.option(
    "--skip-status",
    is_flag=True,
    help="Omit */status subresources.",
)
@click.option(
    "--field",
    "fields",
    multiple=True,
    help="Only list resources whose schema has this dotted field path (e.g. spec.replicas). "
    "May be repeated.",
)
def cli(  # noqa: PLR0913  # We only expect callers via the CLI.
    debug: bool,  # noqa:FBT001
    api_group: str | None,
    api_version: str | None,
    kubeconfig: str | None,
    context: str | None,
    skip_status: bool,  # noqa:FBT001
    fields: tuple[str, ...],
) -> None:
    """List the resources served by a Kubernetes API server."""
    log_level_env = os.getenv("LOG_LEVEL", "").upper()
    if log_level_env == "DEBUG" or (not log_level_env and debug):
        level = logging.Level.DEBUG
    else:
        level = logging.Level.INFO
    logging.configure(level=level)
    logger = logging.get_logger()

    try:
        catalog_config = CatalogConfig.from_env()
        if api_group is not None:
            catalog_config.api_group = api_group
        if api_version is not None:
            catalog_config.api_version = api_version
        if kubeconfig:
            catalog_config.kubeconfig = kubeconfig
        if context:
            catalog_config.context = context
        logger.debug(f"Catalog configuration: {catalog_config}")

        with K8sClient.from_config(catalog_config).connection() as k8s_client:
            resources = new_parser(k8s_client, catalog_config).resources()

        resource_filter = AndFilter([FieldFilter(f.split(".")) for f in fields])
        if skip_status:
            resource_filter.filters.append(SkipSubresourceFilter())
        resources = resources.filter(resource_filter)
    except Exception as e:
        logger.error(f"Listing resources failed: {e}")
        click.echo(f"Cannot list resources: {e}", err=True)
        sys.exit(1)

    for line in format_resources(resources):
        click.echo(line)


if __name__ == "__main__":
    cli()

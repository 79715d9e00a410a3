"""
Entry point for the 'vmapi' command-line tool.

    vmapi --url http://vmapi.example.com list --alias cloudapi
    vmapi get 5b4f8d6a-1c2e-4f7a-9b3d-0a1b2c3d4e01
    vmapi ping

Results are printed as JSON. Exit codes: 1 bad configuration or input,
2 transport error or unreadable response, 3 some descriptors could not
be normalized.
"""
from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import UUID

import httpx
import typer
from pydantic import ValidationError

from common.app_setup import print_error, print_json, setup_logging
from common.config import ClientSettings, load_settings
from connectors.vmapi_connector import VmapiConnector, VmapiSession
from vmapi.enums import Brand, State
from vmapi.errors import InvalidDescriptor, InvalidResponse, UnresolvableImage
from vmapi.filters import VmQuery
from vmapi.normalize import normalize

app = typer.Typer(add_completion=False, help="Query the fleet VM API and print normalized machines.")


def open_connector(settings: ClientSettings) -> VmapiConnector:
    return VmapiConnector(VmapiSession.from_settings(settings))


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Settings file (YAML or JSON)"),
    url: Optional[str] = typer.Option(None, help="VM API base URL, overrides the settings file"),
    logfile: Optional[str] = typer.Option(None, help="Log file (default ~/.vmapi/log.txt)"),
):
    setup_logging(app_name="vmapi", logfile=logfile)
    try:
        settings = load_settings(config)
    except (OSError, ValueError) as e:
        print_error(f"Cannot load settings: {e}")
        raise typer.Exit(1)
    if url:
        settings = settings.model_copy(update={"vmapi_url": url})
    ctx.obj = settings


@app.command("list")
def list_vms(
    ctx: typer.Context,
    alias: Optional[str] = typer.Option(None, help="Alias substring"),
    billing_id: Optional[UUID] = typer.Option(None),
    brand: Optional[Brand] = typer.Option(None),
    create_timestamp: Optional[datetime] = typer.Option(None),
    docker: Optional[bool] = typer.Option(None, "--docker/--no-docker"),
    fields: Optional[str] = typer.Option(None, help="Comma separated fields to return"),
    image_uuid: Optional[UUID] = typer.Option(None),
    owner_uuid: Optional[UUID] = typer.Option(None),
    uuid: Optional[UUID] = typer.Option(None),
    ram: Optional[int] = typer.Option(None, help="Memory size in MiB"),
    server_uuid: Optional[UUID] = typer.Option(None),
    state: Optional[State] = typer.Option(None),
    tag_key: Optional[str] = typer.Option(None),
    uuids: Optional[str] = typer.Option(None, help="Comma separated VM uuids"),
    raw: bool = typer.Option(False, "--raw", help="Print the API records instead of normalized machines"),
):
    """List VMs matching the given criteria."""
    try:
        vm_filter = (
            VmQuery()
            .with_alias(alias)
            .with_billing_id(billing_id)
            .with_brand(brand)
            .with_create_timestamp(create_timestamp)
            .with_docker(docker)
            .with_fields(fields)
            .with_image_uuid(image_uuid)
            .with_owner_uuid(owner_uuid)
            .with_uuid(uuid)
            .with_ram(ram)
            .with_server_uuid(server_uuid)
            .with_state(state)
            .with_tag_key(tag_key)
            .with_uuids(uuids)
            .build()
        )
    except ValidationError as e:
        print_error(f"Invalid filter: {e}")
        raise typer.Exit(1)

    connector = open_connector(ctx.obj)
    try:
        if raw:
            print_json(connector.fetch_records(vm_filter))
            return
        batch = connector.list_machines(vm_filter)
    except (httpx.HTTPError, InvalidResponse) as e:
        print_error(f"VM API request failed: {e}")
        raise typer.Exit(2)
    finally:
        connector.session.disconnect()

    print_json([machine.to_payload() for machine in batch.machines])
    for error in batch.failures():
        print_error(str(error))
    if not batch.complete:
        raise typer.Exit(3)


@app.command()
def get(
    ctx: typer.Context,
    vm_uuid: UUID = typer.Argument(..., help="UUID of the VM"),
    owner_uuid: Optional[UUID] = typer.Option(None),
    raw: bool = typer.Option(False, "--raw", help="Print the API record instead of the normalized machine"),
):
    """Show one VM."""
    connector = open_connector(ctx.obj)
    try:
        vm = connector.get_vm(vm_uuid, owner_uuid=owner_uuid)
    except (httpx.HTTPError, InvalidResponse) as e:
        print_error(f"VM API request failed: {e}")
        raise typer.Exit(2)
    except InvalidDescriptor as e:
        print_error(str(e))
        raise typer.Exit(3)
    finally:
        connector.session.disconnect()

    if raw:
        print_json(vm.model_dump(mode="json", exclude_none=True))
        return
    try:
        print_json(normalize(vm).to_payload())
    except UnresolvableImage as e:
        print_error(str(e))
        raise typer.Exit(3)


@app.command()
def ping(ctx: typer.Context):
    """Show the health of the VM API."""
    connector = open_connector(ctx.obj)
    try:
        print_json(connector.status.to_dict())
    except httpx.HTTPError as e:
        print_error(f"VM API is not reachable: {e}")
        raise typer.Exit(2)
    finally:
        connector.session.disconnect()


if __name__ == "__main__":
    app()

"""
mock_vmapi.daemon
-----------------
A mock of the fleet VM API using FastAPI.
It serves VM descriptors from an in-memory store loaded from a YAML
fixture and understands the list filters the client sends.
Intended for local development, testing and demonstration purposes.

The fixture path can be overridden with $VMAPI_FIXTURE.
"""
import json
import logging
import os
import socket
from pathlib import Path
from typing import Any

import typer
import uvicorn
import yaml
from fastapi import FastAPI, HTTPException

from common.app_setup import print_and_log, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE = Path(__file__).with_name("fixtures") / "vms.yaml"


def load_fixture(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load raw descriptors from a YAML (or JSON) list, keyed by uuid."""
    records = yaml.safe_load(Path(path).read_text()) or []
    return {str(record["uuid"]): record for record in records}


# In-memory mock VM store
mock_vms: dict[str, dict[str, Any]] = load_fixture(os.environ.get("VMAPI_FIXTURE", DEFAULT_FIXTURE))

app = FastAPI(title="mock vmapi")


@app.get("/ping")
def ping():
    """Health endpoint, shaped like the real API's."""
    logger.info("Ping requested via /ping endpoint.")
    return {"pingErrors": {}, "pid": os.getpid(), "status": "OK", "healthy": True}


@app.get("/vms")
def list_vms(
    alias: str | None = None,
    billing_id: str | None = None,
    brand: str | None = None,
    create_timestamp: str | None = None,
    docker: bool | None = None,
    fields: str | None = None,
    image_uuid: str | None = None,
    internal_metadata: str | None = None,
    owner_uuid: str | None = None,
    uuid: str | None = None,
    ram: int | None = None,
    server_uuid: str | None = None,
    state: str | None = None,
    tag_key: str | None = None,
    uuids: str | None = None,
) -> list[dict[str, Any]]:
    """List VMs matching every given criterion.
    create_timestamp is accepted and ignored."""
    logger.info(f"Listing VMs. alias={alias!r} brand={brand!r} state={state!r} owner={owner_uuid!r}")
    equals = {
        "billing_id": billing_id,
        "brand": brand,
        "image_uuid": image_uuid,
        "owner_uuid": owner_uuid,
        "uuid": uuid,
        "ram": ram,
        "server_uuid": server_uuid,
        "state": state,
    }
    wanted_uuids = set(uuids.split(",")) if uuids else None
    metadata = _parse_metadata(internal_metadata)

    matched = []
    for vm in mock_vms.values():
        if alias and alias not in (vm.get("alias") or ""):
            continue
        if any(value is not None and _text(vm.get(key)) != _text(value) for key, value in equals.items()):
            continue
        if docker is not None and bool(vm.get("docker", False)) != docker:
            continue
        if tag_key and tag_key not in (vm.get("tags") or {}):
            continue
        if wanted_uuids is not None and str(vm["uuid"]) not in wanted_uuids:
            continue
        if metadata and any((vm.get("internal_metadata") or {}).get(k) != v for k, v in metadata.items()):
            continue
        matched.append(_project(vm, fields))
    logger.debug(f"Matched VMs: {[vm['uuid'] for vm in matched]}")
    return matched


@app.get("/vms/{vm_uuid}")
def get_vm(vm_uuid: str, owner_uuid: str | None = None) -> dict[str, Any]:
    """Retrieve one VM; an owner mismatch looks the same as a missing VM."""
    logger.info(f"Retrieving VM: {vm_uuid}")
    vm = mock_vms.get(vm_uuid)
    if not vm or (owner_uuid is not None and _text(vm.get("owner_uuid")) != owner_uuid):
        logger.warning(f"VM not found: {vm_uuid}")
        raise HTTPException(status_code=404, detail="VM not found")
    return vm


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_metadata(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=422, detail="internal_metadata must be JSON")


def _project(vm: dict[str, Any], fields: str | None) -> dict[str, Any]:
    if not fields or fields == "*":
        return vm
    wanted = set(fields.split(",")) | {"uuid"}
    return {key: value for key, value in vm.items() if key in wanted}


app_cli = typer.Typer()


@app_cli.command()
def run(
    port: int = typer.Option(None, help="Port to run the server on (auto if not set)"),
    fixture: Path = typer.Option(None, help="YAML file with the VM descriptors to serve"),
):
    """Run the mock API using Uvicorn on localhost, reporting the actual port used."""
    setup_logging(app_name="vmapi", daemon=True)
    if fixture is not None:
        mock_vms.clear()
        mock_vms.update(load_fixture(fixture))
    if port is None or port == 0:
        # Bind to port 0 to get a free port, then close and reuse
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(('127.0.0.1', 0))
            port = s.getsockname()[1]
        print_and_log(json.dumps({"event": "port_selected", "port": port}))
    else:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(('127.0.0.1', port))
            except OSError:
                logger.error(f"ERROR: Port {port} is already in use.")
                raise typer.Exit(98)  # 98 = EADDRINUSE
        print_and_log(json.dumps({"event": "port_used", "port": port}))
    config = uvicorn.Config(app, host="127.0.0.1", port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info(f"Starting Uvicorn server on port {port} with {len(mock_vms)} VMs")
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt in main thread")
    logger.info("Server stopped, exiting process")


if __name__ == "__main__":
    app_cli()

import logging
from typing import Any
from uuid import UUID

import httpx
from box import Box

from common.config import ClientSettings
from connectors.fleet_interface import FleetConnector, FleetSessionProtocol
from vmapi.errors import InvalidDescriptor, InvalidResponse
from vmapi.filters import VmFilter
from vmapi.models import Vm
from vmapi.normalize import NormalizationBatch, normalize_batch, parse_vm

logger = logging.getLogger(__name__)


##### Sessions #####
class VmapiSession(FleetSessionProtocol):
    """
    A VM API session.
    Uses REST API, no authentication (the API is only reachable on the admin network).

    Args:
        vmapi_url (str): The base URL of the VM API.
            Must include scheme (http:// or https://) and optionally port.
            Examples: "http://localhost:8080", "http://vmapi.coal.example.com"
        timeout (float): Request timeout in seconds.
        client (httpx.Client): Optional preconfigured client, used instead of building one.
    """
    def __init__(self, vmapi_url: str, timeout: float = 10.0, client: httpx.Client | None = None):
        self.base_URL = vmapi_url.rstrip("/")
        self.timeout = timeout
        self._client = client if client is not None else httpx.Client(base_url=self.base_URL, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: ClientSettings, client: httpx.Client | None = None) -> "VmapiSession":
        return cls(settings.vmapi_url, timeout=settings.timeout, client=client)

    def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request to the VM API.
        raise_for_status() is called on the response.

        Args:
            method (str): The HTTP method (GET, POST, PUT, DELETE).
            endpoint (str): The API endpoint (path) to call.
            **kwargs: Additional arguments to pass to httpx request.
            example: session.request("GET", "/vms", params={"state": "running"})

        Returns:
            httpx.Response: The HTTP response object.
        """
        url = f"{self.base_URL}/{endpoint.lstrip('/')}"
        logger.debug(f"{method} {url} {kwargs.get('params') or ''}")
        response = self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    @property
    def api_type(self) -> str:
        return "vmapi"

    @property
    def is_alive(self) -> bool:
        """Check if the session is alive by pinging the API."""
        try:
            resp = self.request("GET", "/ping")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    def connect(self):
        """Establish the session. VMAPI has no login, so this only checks reachability."""
        if not self.is_alive:
            raise ConnectionError(f"Cannot connect to VM API at {self.base_URL}")

    def disconnect(self):
        self._client.close()


##### Connectors #####

class VmapiConnector(FleetConnector):
    """Fetches VM descriptors from the VM API.
    Transport errors are not retried or wrapped."""

    def __init__(self, session: VmapiSession):
        self.session: VmapiSession = session
        self.request = self.session.request  # "alias" Now self.request(...) is the same as self.session.request(...)

    @property
    def status(self) -> Box:
        r = self.request("GET", "/ping")
        return Box(r.json())

    @property
    def info(self) -> Box:
        """ Returns information about the connector,
            such as type and endpoints, as a Box.
        """
        return Box({
            "type": self.session.api_type,
            "vmapiURL": self.session.base_URL,
            "timeout": self.session.timeout,
        })

    def _json(self, r: httpx.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise InvalidResponse(f"{r.request.method} {r.request.url} did not return JSON: {e}", log=True) from e

    def fetch_records(self, vm_filter: VmFilter | None = None) -> list[dict[str, Any]]:
        """Return the raw /vms records, unvalidated."""
        params = vm_filter.to_query() if vm_filter is not None else {}
        r = self.request("GET", "/vms", params=params)
        records = self._json(r)
        if not isinstance(records, list):
            raise InvalidResponse(f"Expected a list of VMs, got {type(records).__name__}", log=True)
        logger.info(f"Fetched {len(records)} VMs matching {params}")
        return records

    def fetch(self, vm_filter: VmFilter | None = None) -> list[Vm]:
        """Return validated records. Records without a usable uuid are logged and left out."""
        vms = []
        for record in self.fetch_records(vm_filter):
            try:
                vms.append(parse_vm(record))
            except InvalidDescriptor as e:
                logger.warning(f"Skipping record: {e}")
        return vms

    def get_vm(self, vm_uuid: UUID | str, owner_uuid: UUID | str | None = None) -> Vm:
        params = {"owner_uuid": str(owner_uuid)} if owner_uuid is not None else {}
        r = self.request("GET", f"/vms/{vm_uuid}", params=params)
        record = self._json(r)
        if not isinstance(record, dict):
            raise InvalidResponse(f"Expected a VM record, got {type(record).__name__}", log=True)
        return parse_vm(record)

    def list_machines(self, vm_filter: VmFilter | None = None) -> NormalizationBatch:
        return normalize_batch(self.fetch_records(vm_filter))

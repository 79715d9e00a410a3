from typing import Protocol
from uuid import UUID

import httpx
from box import Box

from vmapi.filters import VmFilter
from vmapi.models import Vm
from vmapi.normalize import NormalizationBatch

# Errors raised by the transport. They reach callers unchanged.
TransportError = httpx.HTTPError


class FleetSessionProtocol(Protocol):
    """Interface Protocol for fleet API session objects.
    To be subclassed by actual session implementations.
    """
    @property
    def api_type(self) -> str: ...
    @property
    def is_alive(self) -> bool: ...
    def connect(self): ...
    def disconnect(self): ...


class FleetConnector(Protocol):
    """
       Protocol for a fleet API connector.
       Implementations must accept a FleetSessionProtocol instance upon initialization
       and store it as ``self.session``.
       Nothing here retries or paginates; transport errors propagate as TransportError.
    """

    def __init__(self, session: FleetSessionProtocol) -> None: ...

    @property
    def status(self) -> Box: ...
    "returns the health payload of the API"

    def fetch_records(self, vm_filter: VmFilter) -> list[dict]:
        """Return the raw JSON records matching ``vm_filter``."""
        ...

    def fetch(self, vm_filter: VmFilter) -> list[Vm]:
        """Return the validated descriptors matching ``vm_filter``."""
        ...

    def get_vm(self, vm_uuid: UUID, owner_uuid: UUID | None = None) -> Vm: ...

    def list_machines(self, vm_filter: VmFilter) -> NormalizationBatch:
        """Fetch, then normalize every descriptor independently."""
        ...

    @property
    def info(self) -> Box:
        """
        Returns information about the connector,
          such as type and endpoints, as a Box.
        """
        ...

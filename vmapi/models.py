"""Pydantic models for fleet API records and the canonical machine descriptor."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from .enums import DiskModel, MachineState, MachineType, NicModel, ZfsDataCompression


def _none_if_malformed(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Validate ``value``, degrading to ``None`` instead of failing the record."""
    try:
        return handler(value)
    except ValidationError:
        return None


class Disk(BaseModel):
    """One entry of an HVM disk list. Unknown keys are kept as-is, malformed known ones read as absent."""

    model_config = ConfigDict(frozen=True, extra="allow")

    block_size: int | None = None
    boot: bool | None = None
    compression: ZfsDataCompression | None = None
    image_name: str | None = None
    image_size: int | None = None
    image_uuid: UUID | None = None
    media: str | None = None
    model: str | None = None
    path: str | None = None
    pci_slot: str | None = None
    refreservation: int | None = None
    size: int | None = None
    uuid: UUID | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _optional_or_none(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _none_if_malformed(value, handler)


class Nic(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    interface: str | None = None
    mac: str | None = None
    vlan_id: int | None = None
    nic_tag: str | None = None
    ip: str | None = None
    ips: list[str] | None = None
    netmask: str | None = None
    gateway: str | None = None
    gateways: list[str] | None = None
    primary: bool | None = None
    model: NicModel | None = None
    network_uuid: UUID | None = None
    mtu: int | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _optional_or_none(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _none_if_malformed(value, handler)


class Vm(BaseModel):
    """A VM or zone record exactly as the fleet API reports it.

    Only ``uuid`` is required, and it is the only field whose bad value
    rejects the record. Any other malformed value is read as absent.
    ``brand``, ``state`` and ``zone_state`` stay raw strings so unfamiliar
    vocabulary survives validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    alias: str | None = None
    autoboot: bool | None = None
    billing_id: UUID | None = None
    brand: str | None = None
    cpu_cap: int | None = None
    cpu_shares: int | None = None
    cpu_type: str | None = None  # HVM only
    datasets: list[str] | None = None
    datacenter_name: str | None = None
    disks: list[Disk] | None = None  # HVM only
    create_timestamp: datetime | None = None
    destroyed: datetime | None = None
    delegate_dataset: bool | None = None  # zone only
    dns_domain: str | None = None
    do_not_inventory: bool | None = None
    docker: bool | None = None
    exit_status: int | None = None
    exit_timestamp: datetime | None = None
    flexible_disk_size: int | None = None
    firewall_enabled: bool | None = None
    free_space: int | None = None
    fs_allowed: str | None = None
    hostname: str | None = None
    image_uuid: UUID | None = None
    customer_metadata: dict[str, Any] | None = None
    indestructible_delegated: bool | None = None  # zone only
    indestructible_zoneroot: bool | None = None  # zone only
    last_modified: datetime | None = None
    internal_metadata: dict[str, Any] | None = None
    limit_priv: str | None = None
    maintain_resolvers: bool | None = None
    max_locked_memory: int | None = None
    max_lwps: int | None = None
    max_physical_memory: int | None = None
    max_swap: int | None = None
    mdata_exec_timeout: int | None = None
    nics: list[Nic] | None = None
    owner_uuid: UUID | None = None
    platform_buildstamp: str | None = None
    quota: int | None = None
    ram: int | None = None
    resolvers: list[str] | None = None
    snapshots: list[Any] | None = None
    tags: dict[str, Any] | None = None
    tmpfs: int | None = None
    zfs_data_compression: ZfsDataCompression | None = None
    zfs_io_priority: int | None = None
    zfs_snapshot_limit: int | None = None
    zlog_max_size: int | None = None
    zone_path: str | None = None
    zonedid: int | None = None
    zoneid: int | None = None
    com1: str | None = None
    com2: str | None = None
    zlog_mode: str | None = None
    zlog_name: str | None = None
    vcpus: int | None = None
    disk_driver: DiskModel | None = None
    nic_driver: NicModel | None = None
    server_uuid: UUID | None = None
    state: str | None = None
    zone_state: str | None = None
    uuid: UUID

    @field_validator("*", mode="wrap")
    @classmethod
    def _optional_or_none(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        if info.field_name == "uuid":
            return handler(value)
        return _none_if_malformed(value, handler)


class Machine(BaseModel):
    """Brand-agnostic descriptor built from one ``Vm``."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str | None = None
    type: MachineType
    brand: str | None = Field(default=None, description="Raw brand tag, kept for diagnostics")
    state: MachineState
    memory: int | None = None
    metadata: dict[str, Any] | None = None
    tags: dict[str, Any] | None = None
    created: datetime | None = None
    updated: datetime | None = None
    firewall_enabled: bool | None = None
    compute_node: UUID | None = None
    delegate_dataset: bool = False
    docker: bool = False
    nics: list[Nic] | None = None
    disks: list[Disk] | None = None
    disk: int | None = Field(default=None, description="Primary disk size")
    image: UUID

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready mapping with absent fields left out."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ["Disk", "Machine", "Nic", "Vm"]

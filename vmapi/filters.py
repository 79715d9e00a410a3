"""Selection criteria for listing VMs.

``VmQuery`` accumulates criteria; every ``with_*`` call returns a new query
and leaves the receiver untouched, so partial queries can be shared and
branched. ``build()`` freezes the criteria into a ``VmFilter``.

    >>> flt = VmQuery().with_alias("cloudapi").with_state("running").build()
    >>> flt.to_query()
    {'alias': 'cloudapi', 'state': 'running'}

No validation beyond type coercion happens here; the API decides whether a
criterion makes sense.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from .enums import Brand, State


class _VmCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    alias: str | None = None
    billing_id: UUID | None = None
    brand: Brand | None = None
    create_timestamp: datetime | None = None
    docker: bool | None = None
    fields: tuple[str, ...] | None = None
    image_uuid: UUID | None = None
    internal_metadata: dict[str, Any] | None = None
    owner_uuid: UUID | None = None
    uuid: UUID | None = None
    ram: int | None = None
    server_uuid: UUID | None = None
    state: State | None = None
    tag_key: str | None = None
    uuids: tuple[UUID, ...] | None = None

    @field_validator("fields", "uuids", mode="before")
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        if value is not None and not isinstance(value, (str, bytes)) and len(value) == 0:
            return None
        return value


class VmFilter(_VmCriteria):
    """Finalized, read-only set of list criteria."""

    def to_query(self) -> dict[str, str]:
        """Flat query parameters; unset criteria are left out entirely."""
        payload = self.model_dump(mode="json", exclude_none=True)
        return {name: _query_value(value) for name, value in payload.items()}


class VmQuery(_VmCriteria):
    """Immutable builder for ``VmFilter``."""

    def _with(self, **update: Any) -> VmQuery:
        payload = self.model_dump(mode="python")
        payload.update(update)
        return VmQuery.model_validate(payload)

    def with_alias(self, value: str | None) -> VmQuery:
        return self._with(alias=value)

    def with_billing_id(self, value: UUID | str | None) -> VmQuery:
        return self._with(billing_id=value)

    def with_brand(self, value: Brand | str | None) -> VmQuery:
        return self._with(brand=value)

    def with_create_timestamp(self, value: datetime | str | None) -> VmQuery:
        return self._with(create_timestamp=value)

    def with_docker(self, value: bool | None) -> VmQuery:
        return self._with(docker=value)

    def with_fields(self, value: Iterable[str] | str | None) -> VmQuery:
        return self._with(fields=_as_list(value))

    def with_image_uuid(self, value: UUID | str | None) -> VmQuery:
        return self._with(image_uuid=value)

    def with_internal_metadata(self, value: Mapping[str, Any] | None) -> VmQuery:
        return self._with(internal_metadata=dict(value) if value is not None else None)

    def with_owner_uuid(self, value: UUID | str | None) -> VmQuery:
        return self._with(owner_uuid=value)

    def with_uuid(self, value: UUID | str | None) -> VmQuery:
        return self._with(uuid=value)

    def with_ram(self, value: int | None) -> VmQuery:
        return self._with(ram=value)

    def with_server_uuid(self, value: UUID | str | None) -> VmQuery:
        return self._with(server_uuid=value)

    def with_state(self, value: State | str | None) -> VmQuery:
        return self._with(state=value)

    def with_tag_key(self, value: str | None) -> VmQuery:
        return self._with(tag_key=value)

    def with_uuids(self, value: Iterable[UUID | str] | str | None) -> VmQuery:
        return self._with(uuids=_as_list(value))

    def build(self) -> VmFilter:
        return VmFilter.model_validate(self.model_dump(mode="python"))


# ---------------------------------------------------------------------------
# helpers


def _as_list(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return list(value)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


__all__ = ["VmFilter", "VmQuery"]

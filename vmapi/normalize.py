"""Turn raw fleet API descriptors into canonical machine descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from .classify import classify_brand, classify_state
from .errors import InvalidDescriptor, NormalizationError
from .models import Machine, Vm
from .resolve import DiskLayout, resolve

logger = logging.getLogger(__name__)


def _raw_uuid(raw: Any) -> UUID | None:
    if not isinstance(raw, Mapping):
        return None
    try:
        return UUID(str(raw.get("uuid")))
    except ValueError:
        return None


def parse_vm(raw: Vm | Mapping[str, Any]) -> Vm:
    """Validate one raw record, raising ``InvalidDescriptor`` if it is unusable."""
    if isinstance(raw, Vm):
        return raw
    try:
        return Vm.model_validate(raw)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) or "record" for err in exc.errors())
        raise InvalidDescriptor(_raw_uuid(raw), f"bad {fields}") from exc


def normalize(vm: Vm | Mapping[str, Any]) -> Machine:
    """Build the canonical descriptor for one raw descriptor.

    Pure apart from logging. Raises ``InvalidDescriptor`` when a mapping has
    no valid uuid and ``UnresolvableImage`` when no image can be found;
    brand and state never fail, they fall back to ``unknown``.
    """
    vm = parse_vm(vm)
    resolved = resolve(DiskLayout.from_vm(vm))
    return Machine(
        id=vm.uuid,
        name=vm.alias,
        type=classify_brand(vm.brand),
        brand=vm.brand,
        state=classify_state(vm.state),
        memory=vm.ram,
        metadata=vm.customer_metadata,
        tags=vm.tags,
        created=vm.create_timestamp,
        updated=vm.last_modified,
        firewall_enabled=vm.firewall_enabled,
        compute_node=vm.server_uuid,
        delegate_dataset=vm.delegate_dataset if vm.delegate_dataset is not None else False,
        docker=vm.docker if vm.docker is not None else False,
        nics=vm.nics,
        disks=vm.disks,
        disk=resolved.size,
        image=resolved.image,
    )


@dataclass
class NormalizationBatch:
    """Result of normalizing several descriptors independently.

    Failures are keyed by VM uuid; records without a usable uuid land in
    ``unidentified`` instead.
    """

    machines: list[Machine] = field(default_factory=list)
    errors: dict[UUID, NormalizationError] = field(default_factory=dict)
    unidentified: list[NormalizationError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors and not self.unidentified

    def failures(self) -> list[NormalizationError]:
        return [*self.errors.values(), *self.unidentified]


def normalize_batch(vms: Iterable[Vm | Mapping[str, Any]]) -> NormalizationBatch:
    """Normalize each descriptor on its own; failures do not stop the rest."""
    batch = NormalizationBatch()
    for vm in vms:
        try:
            batch.machines.append(normalize(vm))
        except NormalizationError as exc:
            logger.warning(str(exc))
            if exc.vm_uuid is None:
                batch.unidentified.append(exc)
            else:
                batch.errors[exc.vm_uuid] = exc
    logger.debug(f"Normalized {len(batch.machines)} descriptors, {len(batch.failures())} failed")
    return batch


__all__ = ["NormalizationBatch", "normalize", "normalize_batch", "parse_vm"]

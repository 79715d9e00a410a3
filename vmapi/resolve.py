"""Resolve the primary disk size and image of a descriptor.

HVM records carry a disk list (index 0 is the boot disk holding the image,
index 1 the first data disk); zones carry a flexible disk size and a
top-level image. Both shapes go through the same fallback chain.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from .errors import UnresolvableImage
from .models import Disk, Vm


@dataclass(frozen=True)
class DiskLayout:
    """The disk-related fields of one raw descriptor."""

    vm_uuid: UUID
    flexible_disk_size: int | None = None
    disks: Sequence[Disk] | None = None
    image_uuid: UUID | None = None

    @classmethod
    def from_vm(cls, vm: Vm) -> DiskLayout:
        return cls(
            vm_uuid=vm.uuid,
            flexible_disk_size=vm.flexible_disk_size,
            disks=vm.disks,
            image_uuid=vm.image_uuid,
        )


@dataclass(frozen=True)
class ResolvedDisk:
    size: int | None
    image: UUID


def resolve_disk_size(layout: DiskLayout) -> int | None:
    """Flexible size first, then the first data disk; ``None`` if neither."""
    if layout.flexible_disk_size is not None:
        return layout.flexible_disk_size
    if layout.disks is not None and len(layout.disks) >= 2:
        return layout.disks[1].size
    return None


def resolve_image(layout: DiskLayout) -> UUID:
    """Top-level image first, then the boot disk's image.

    Raises UnresolvableImage when neither is available.
    """
    if layout.image_uuid is not None:
        return layout.image_uuid
    if layout.disks is None:
        raise UnresolvableImage(layout.vm_uuid, "no image_uuid and no disks")
    if not layout.disks:
        raise UnresolvableImage(layout.vm_uuid, "empty disk list")
    image = layout.disks[0].image_uuid
    if image is None:
        raise UnresolvableImage(layout.vm_uuid, "first disk has no image_uuid")
    return image


def resolve(layout: DiskLayout) -> ResolvedDisk:
    return ResolvedDisk(size=resolve_disk_size(layout), image=resolve_image(layout))


__all__ = ["DiskLayout", "ResolvedDisk", "resolve", "resolve_disk_size", "resolve_image"]

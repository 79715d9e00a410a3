"""Client-side model layer for the fleet VM API: filters, records and normalization."""

from .classify import classify_brand, classify_state
from .enums import Brand, MachineState, MachineType, State
from .errors import InvalidDescriptor, InvalidResponse, NormalizationError, UnresolvableImage, VmapiError
from .filters import VmFilter, VmQuery
from .models import Disk, Machine, Nic, Vm
from .normalize import NormalizationBatch, normalize, normalize_batch, parse_vm
from .resolve import DiskLayout, resolve_disk_size, resolve_image

__all__ = [
    "Brand",
    "Disk",
    "DiskLayout",
    "InvalidDescriptor",
    "InvalidResponse",
    "Machine",
    "MachineState",
    "MachineType",
    "Nic",
    "NormalizationBatch",
    "NormalizationError",
    "State",
    "UnresolvableImage",
    "Vm",
    "VmFilter",
    "VmQuery",
    "VmapiError",
    "classify_brand",
    "classify_state",
    "normalize",
    "normalize_batch",
    "parse_vm",
    "resolve_disk_size",
    "resolve_image",
]

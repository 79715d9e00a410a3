"""Exceptions raised by the vmapi model layer."""

from __future__ import annotations

import logging
from uuid import UUID

mylogger = logging.getLogger(__name__)


class VmapiError(Exception):
    """Base exception with a message, optionally written to the log."""

    def __init__(self, message="A VMAPI error occurred", log=False):
        self.message = message
        super().__init__(self.message)
        if log:
            mylogger.error(message)


class NormalizationError(VmapiError):
    """A raw descriptor could not be turned into a canonical one."""

    def __init__(self, vm_uuid: UUID | None, message: str, log=False):
        self.vm_uuid = vm_uuid
        super().__init__(f"Cannot normalize VM {vm_uuid}: {message}", log=log)


class UnresolvableImage(NormalizationError):
    """No image identity could be resolved for a descriptor.

    This is a property of the source record, retrying will not help.
    """

    def __init__(self, vm_uuid: UUID, reason: str, log=False):
        self.reason = reason
        super().__init__(vm_uuid, f"unresolvable image ({reason})", log=log)


class InvalidDescriptor(NormalizationError):
    """A raw descriptor has no usable identity or is not a record at all.

    ``vm_uuid`` is ``None`` when the record carries no valid uuid.
    """

    def __init__(self, vm_uuid: UUID | None, detail: str, log=False):
        self.detail = detail
        super().__init__(vm_uuid, f"invalid descriptor ({detail})", log=log)


class InvalidResponse(VmapiError):
    """The API answered with a body that is not the expected JSON shape."""


__all__ = ["InvalidDescriptor", "InvalidResponse", "NormalizationError", "UnresolvableImage", "VmapiError"]

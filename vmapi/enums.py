"""Provider vocabulary and canonical enumerations.

Raw values use the fleet API's lowercase, hyphenated spelling so they can be
serialized back into queries unchanged.
"""

from enum import Enum


class Brand(str, Enum):
    BHYVE = "bhyve"
    KVM = "kvm"
    LX = "lx"
    JOYENT = "joyent"
    JOYENT_MINIMAL = "joyent-minimal"


class State(str, Enum):
    """The 21 lifecycle states a provider record may report."""

    ACTIVE = "active"
    CONFIGURED = "configured"
    DELETED = "deleted"
    DESTROYED = "destroyed"
    DOWN = "down"
    FAILED = "failed"
    HALT = "halt"
    HALTING = "halting"
    INCOMPLETE = "incomplete"
    INSTALLED = "installed"
    OFF = "off"
    OFFLINE = "offline"
    PROVISIONING = "provisioning"
    READY = "ready"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    STOPPING = "stopping"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"
    UNREACHABLE = "unreachable"


class MachineType(str, Enum):
    VIRTUAL_MACHINE = "virtualmachine"  # hardware-virtualized
    SMART_MACHINE = "smartmachine"  # OS-virtualized zone
    UNKNOWN = "unknown"


class MachineState(str, Enum):
    PROVISIONING = "provisioning"
    READY = "ready"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    OFFLINE = "offline"
    DELETED = "deleted"
    FAILED = "failed"
    UNKNOWN = "unknown"


class ZfsDataCompression(str, Enum):
    GZIP = "gzip"
    GZIP_1 = "gzip-1"
    GZIP_2 = "gzip-2"
    GZIP_3 = "gzip-3"
    GZIP_4 = "gzip-4"
    GZIP_5 = "gzip-5"
    GZIP_6 = "gzip-6"
    GZIP_7 = "gzip-7"
    GZIP_8 = "gzip-8"
    GZIP_9 = "gzip-9"
    ON = "on"
    OFF = "off"
    LZ4 = "lz4"
    LZJB = "lzjb"
    ZLE = "zle"


class NicModel(str, Enum):
    VIRTIO = "virtio"
    E1000 = "e1000"
    RTL8139 = "rtl8139"


class DiskModel(str, Enum):
    VIRTIO = "virtio"
    IDE = "ide"
    SCSI = "scsi"


__all__ = [
    "Brand",
    "DiskModel",
    "MachineState",
    "MachineType",
    "NicModel",
    "State",
    "ZfsDataCompression",
]

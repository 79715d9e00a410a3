"""Map provider brand and lifecycle vocabulary onto canonical values.

Both functions are total: anything they do not recognize, including a
missing value, becomes ``unknown`` so that new provider vocabulary never
stops normalization.
"""

import logging

from .enums import Brand, MachineState, MachineType, State

logger = logging.getLogger(__name__)

_BRAND_TYPES: dict[Brand, MachineType] = {
    Brand.BHYVE: MachineType.VIRTUAL_MACHINE,
    Brand.KVM: MachineType.VIRTUAL_MACHINE,
    Brand.LX: MachineType.SMART_MACHINE,
    Brand.JOYENT: MachineType.SMART_MACHINE,
    Brand.JOYENT_MINIMAL: MachineType.SMART_MACHINE,
}

_MACHINE_STATES: dict[State, MachineState] = {
    State.CONFIGURED: MachineState.PROVISIONING,
    State.INCOMPLETE: MachineState.PROVISIONING,
    State.UNAVAILABLE: MachineState.PROVISIONING,
    State.PROVISIONING: MachineState.PROVISIONING,
    State.READY: MachineState.READY,
    State.RUNNING: MachineState.RUNNING,
    State.HALTING: MachineState.STOPPING,
    State.STOPPING: MachineState.STOPPING,
    State.SHUTTING_DOWN: MachineState.STOPPING,
    State.OFF: MachineState.STOPPED,
    State.DOWN: MachineState.STOPPED,
    State.INSTALLED: MachineState.STOPPED,
    State.STOPPED: MachineState.STOPPED,
    State.UNREACHABLE: MachineState.OFFLINE,
    State.DESTROYED: MachineState.DELETED,
    State.FAILED: MachineState.FAILED,
}


def classify_brand(brand: str | None) -> MachineType:
    """Return the machine type for a raw brand tag."""
    if brand is None:
        return MachineType.UNKNOWN
    try:
        tag = Brand(brand)
    except ValueError:
        logger.debug(f"Unrecognized brand {brand!r}, classified as unknown")
        return MachineType.UNKNOWN
    return _BRAND_TYPES[tag]


def classify_state(state: str | None) -> MachineState:
    """Return the canonical machine state for a raw lifecycle state."""
    if state is None:
        return MachineState.UNKNOWN
    try:
        raw = State(state)
    except ValueError:
        logger.debug(f"Unrecognized state {state!r}, classified as unknown")
        return MachineState.UNKNOWN
    if raw is State.DELETED:
        # only "destroyed" maps to deleted
        logger.warning("Raw state 'deleted' reported by provider, classified as unknown")
    return _MACHINE_STATES.get(raw, MachineState.UNKNOWN)


__all__ = ["classify_brand", "classify_state"]

"""
Module status enum and the single boundary that turns backend wire values into it.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class UnknownModuleStatusError(ValueError):
    """Raised when a wire value does not name any ModuleStatus."""


class ModuleStatus(str, Enum):
    """Status of a module for one exam-taker, as computed by the backend."""
    LOCKED = "Locked"
    WAIT_FOR_MODULE_DURATION_TO_ELAPSE = "WaitForModuleDurationToElapse"
    SCHEDULED = "Scheduled"
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    TIME_ELAPSED = "TimeElapsed"

    @property
    def code(self) -> int:
        return _CODES[self]

    @property
    def display_text(self) -> str:
        return _DISPLAY_TEXT[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def is_interactive(self) -> bool:
        """Whether the module card may be clicked (navigated into)."""
        return self in (ModuleStatus.NOT_STARTED, ModuleStatus.IN_PROGRESS, ModuleStatus.COMPLETED)

    @property
    def counts_as_done(self) -> bool:
        # WaitFor... only gates the next module; the module itself is finished.
        return self in (ModuleStatus.COMPLETED, ModuleStatus.WAIT_FOR_MODULE_DURATION_TO_ELAPSE)


_ORDER = list(ModuleStatus)
_CODES: dict[ModuleStatus, int] = {status: i for i, status in enumerate(_ORDER)}
_BY_CODE: dict[int, ModuleStatus] = {i: status for status, i in _CODES.items()}

_DISPLAY_TEXT: dict[ModuleStatus, str] = {
    ModuleStatus.LOCKED: "Locked",
    ModuleStatus.WAIT_FOR_MODULE_DURATION_TO_ELAPSE: "Waiting for Completion",
    ModuleStatus.SCHEDULED: "Scheduled",
    ModuleStatus.NOT_STARTED: "Not Started",
    ModuleStatus.IN_PROGRESS: "In Progress",
    ModuleStatus.COMPLETED: "Completed",
    ModuleStatus.TIME_ELAPSED: "Time Elapsed",
}

_ICONS: dict[ModuleStatus, str] = {
    ModuleStatus.LOCKED: "/images/icons/lock.svg",
    ModuleStatus.WAIT_FOR_MODULE_DURATION_TO_ELAPSE: "/images/icons/time.svg",
    ModuleStatus.SCHEDULED: "/images/icons/navigation.svg",
    ModuleStatus.NOT_STARTED: "/images/icons/rocket.svg",
    ModuleStatus.IN_PROGRESS: "/images/icons/progress.svg",
    ModuleStatus.COMPLETED: "/images/icons/check.svg",
    ModuleStatus.TIME_ELAPSED: "/images/icons/time.svg",
}


def parse_module_status(raw: Union[ModuleStatus, str, int]) -> ModuleStatus:
    """
    Convert a backend status value into a ModuleStatus.

    Accepts a member, the enum name ("InProgress") or its numeric code (4 or "4").
    Unknown values raise UnknownModuleStatusError instead of being coerced.
    """
    if isinstance(raw, ModuleStatus):
        return raw
    if isinstance(raw, bool):
        raise UnknownModuleStatusError(f"Unknown module status: {raw!r}")
    if isinstance(raw, int):
        try:
            return _BY_CODE[raw]
        except KeyError:
            raise UnknownModuleStatusError(f"Unknown module status code: {raw}") from None
    if isinstance(raw, str):
        value = raw.strip()
        if value.isdigit():
            return parse_module_status(int(value))
        try:
            return ModuleStatus(value)
        except ValueError:
            raise UnknownModuleStatusError(f"Unknown module status: {raw!r}") from None
    raise UnknownModuleStatusError(f"Unsupported module status type: {type(raw).__name__}")

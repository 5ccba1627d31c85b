"""Error type and message construction for device operations."""

from __future__ import annotations

ERR_CONNECT = "failed connecting to"
ERR_READING_MSG = "failed reading msg"
ERR_SEND_COMMAND = "failed send the command"
ERR_MISSING_ARGS = "missing arg(s)"
ERR_UNKNOWN = "unknown error"
MOUNT_TIPS = "you can use [sib mount] command to fix it and retry"


class BridgeError(Exception):
    """Failure of a device operation, tagged with its kind and context."""

    def __init__(self, message: str, kind: str = ERR_UNKNOWN, detail: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.detail = detail


def new_error(kind: str, msg: str = "", cause: BaseException | None = None) -> BridgeError:
    """Build a BridgeError whose text names the kind, the context and the cause."""
    if not msg and cause is None:
        text = f"{kind}, {MOUNT_TIPS}"
    elif not msg:
        text = f"{kind}, {MOUNT_TIPS} : {cause}"
    elif cause is None:
        text = f"{kind} [{msg}], {MOUNT_TIPS}"
    else:
        text = f"{kind} [{msg}], {MOUNT_TIPS}, err : {cause}"
    error = BridgeError(text, kind, msg)
    error.__cause__ = cause
    return error
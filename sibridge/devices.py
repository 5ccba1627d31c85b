"""Device records, device details and remote connection descriptions."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from sibridge.errors import BridgeError
from sibridge.formatting import to_json_text
from sibridge.generation import generation_name

_SEMVER = re.compile(
    r"^v?([0-9]+)(\.[0-9]+)?(\.[0-9]+)?"
    r"(-([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?"
    r"(\+([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?$"
)


def _coerce(value: Any, kind: type) -> tuple[bool, Any]:
    """Return (accepted, converted) for a decoded value and the field's type."""
    if kind is bool:
        return (True, value) if isinstance(value, bool) else (False, None)
    if kind is int:
        if isinstance(value, bool):
            return False, None
        if isinstance(value, int):
            return True, value
        if isinstance(value, float) and value.is_integer():
            return True, int(value)
        return False, None
    if kind is str:
        return (True, value) if isinstance(value, str) else (False, None)
    return False, None


def _assign(target: Any, fields: tuple[tuple[str, str, type], ...], values: Mapping[str, Any]) -> None:
    """Set fields from a mapping, matching keys exactly first, then case-insensitively.

    Values of the wrong type and nulls leave the field untouched.
    """
    exact = {key: (attr, kind) for attr, key, kind in fields}
    folded = {key.lower(): (attr, kind) for attr, key, kind in fields}
    for key, value in values.items():
        spec = exact.get(key) or folded.get(str(key).lower())
        if spec is None or value is None:
            continue
        attr, kind = spec
        ok, converted = _coerce(value, kind)
        if ok:
            setattr(target, attr, converted)


_DETAIL_FIELDS: tuple[tuple[str, str, type], ...] = (
    ("generation_name", "generationName", str),
    ("device_name", "deviceName", str),
    ("device_color", "deviceColor", str),
    ("device_class", "deviceClass", str),
    ("product_version", "productVersion", str),
    ("product_type", "productType", str),
    ("product_name", "productName", str),
    ("password_protected", "passwordProtected", bool),
    ("model_number", "modelNumber", str),
    ("serial_number", "serialNumber", str),
    ("sim_status", "simStatus", str),
    ("phone_number", "phoneNumber", str),
    ("cpu_architecture", "cpuArchitecture", str),
    ("protocol_version", "protocolVersion", str),
    ("region_info", "regionInfo", str),
    ("telephony_capability", "telephonyCapability", bool),
    ("time_zone", "timeZone", str),
    ("unique_device_id", "uniqueDeviceID", str),
    ("wifi_address", "wifiAddress", str),
    ("wireless_board_serial_number", "wirelessBoardSerialNumber", str),
    ("bluetooth_address", "bluetoothAddress", str),
    ("build_version", "buildVersion", str),
)


@dataclass
class DeviceDetail:
    """Lockdown values describing a device."""

    generation_name: str = ""
    device_name: str = ""
    device_color: str = ""
    device_class: str = ""
    product_version: str = ""
    product_type: str = ""
    product_name: str = ""
    password_protected: bool = False
    model_number: str = ""
    serial_number: str = ""
    sim_status: str = ""
    phone_number: str = ""
    cpu_architecture: str = ""
    protocol_version: str = ""
    region_info: str = ""
    telephony_capability: bool = False
    time_zone: str = ""
    unique_device_id: str = ""
    wifi_address: str = ""
    wireless_board_serial_number: str = ""
    bluetooth_address: str = ""
    build_version: str = ""

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> "DeviceDetail":
        """Build from lockdown values such as {'ProductType': ..., 'DeviceName': ...}."""
        detail = cls()
        _assign(detail, _DETAIL_FIELDS, values)
        return detail

    def get_generation_name(self) -> str:
        return generation_name(self.product_type)

    def to_dict(self) -> dict[str, Any]:
        """JSON form; empty strings and false flags are left out."""
        return {key: getattr(self, attr) for attr, key, _ in _DETAIL_FIELDS if getattr(self, attr)}


class DeviceClient(Protocol):
    """What get_detail needs from a connected device."""

    serial_number: str

    def get_value(self, domain: str, key: str) -> Any: ...


def get_detail(device: DeviceClient) -> DeviceDetail:
    """Read all lockdown values of a device into a DeviceDetail."""
    try:
        values = device.get_value("", "")
    except Exception as exc:
        serial = getattr(device, "serial_number", "")
        raise BridgeError(f"get {serial} device detail fail : {exc}") from exc
    detail = DeviceDetail.from_values(values) if isinstance(values, Mapping) else DeviceDetail()
    detail.generation_name = detail.get_generation_name()
    return detail


_DEVICE_FIELDS: tuple[tuple[str, str, type], ...] = (
    ("remote_addr", "remoteAddr", str),
    ("device_id", "deviceId", int),
    ("connection_speed", "connectionSpeed", int),
    ("connection_type", "connectionType", str),
    ("location_id", "locationId", int),
    ("product_id", "productId", int),
    ("serial_number", "serialNumber", str),
    ("status", "status", str),
)


@dataclass
class Device:
    """A device as seen by the multiplexer or a remote connection."""

    remote_addr: str = ""
    device_id: int = 0
    connection_speed: int = 0
    connection_type: str = ""
    location_id: int = 0
    product_id: int = 0
    serial_number: str = ""
    status: str = ""
    device_detail: DeviceDetail = field(default_factory=DeviceDetail)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "Device":
        """Build from multiplexer properties such as {'SerialNumber': ..., 'DeviceID': ...}."""
        device = cls()
        _assign(device, _DEVICE_FIELDS, properties)
        for key, value in properties.items():
            if str(key).lower() == "devicedetail" and isinstance(value, Mapping):
                device.device_detail = DeviceDetail.from_values(value)
        return device

    def get_status(self) -> str:
        return "online" if self.connection_type else "offline"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {key: getattr(self, attr) for attr, key, _ in _DEVICE_FIELDS}
        result["deviceDetail"] = self.device_detail.to_dict()
        return result

    def to_string(self) -> str:
        return f"{self.serial_number} {self.status}"

    def to_json(self) -> str:
        return to_json_text(self.to_dict())

    def to_format(self) -> str:
        return to_json_text(self.to_dict(), indent=True)


@dataclass
class DeviceList:
    """Several devices with text and JSON renderings."""

    devices: list[Device] = field(default_factory=list)

    def _as_dict(self) -> dict[str, Any]:
        return {"deviceList": [d.to_dict() for d in self.devices]}

    def to_string(self) -> str:
        """One line per device: serial, status and remote address."""
        return "\n".join(f"{d.serial_number} {d.status} {d.remote_addr}" for d in self.devices)

    def to_json(self) -> str:
        return to_json_text(self._as_dict())

    def to_format(self) -> str:
        return to_json_text(self._as_dict(), indent=True)


@dataclass
class DevMode(Device):
    """A device together with its developer-mode status."""

    dev_mode_status: str = ""

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.dev_mode_status:
            result["status"] = self.dev_mode_status
        else:
            del result["status"]
        return result

    def can_check(self) -> bool:
        """Whether developer mode can be queried (iOS 16 or later).

        Raises ValueError if the product version is not a valid version.
        """
        version = self.device_detail.product_version
        match = _SEMVER.match(version)
        if match is None:
            raise ValueError(f"Invalid Semantic Version: {version!r}")
        return int(match.group(1)) >= 16


@dataclass
class RemoteInfo:
    """Address of a device reached over the network."""

    host: str | None = None
    port: int | None = None


def parse_remote_info(text: str | bytes) -> dict[str, RemoteInfo]:
    """Parse the saved remote connections: a JSON object of {name: {Host, Port}}.

    Raises ValueError when the text is not such an object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("remote info must be a JSON object")
    result: dict[str, RemoteInfo] = {}
    for name, entry in data.items():
        if entry is None:
            result[name] = RemoteInfo()
            continue
        if not isinstance(entry, dict):
            raise ValueError(f"remote info entry {name!r} must be a JSON object")
        info = RemoteInfo()
        for key, value in entry.items():
            folded = key.lower()
            if folded == "host":
                if value is not None and not isinstance(value, str):
                    raise ValueError(f"remote info entry {name!r}: Host must be a string")
                info.host = value
            elif folded == "port":
                if value is not None:
                    ok, value = _coerce(value, int)
                    if not ok:
                        raise ValueError(f"remote info entry {name!r}: Port must be an integer")
                info.port = value
        result[name] = info
    return result
"""Battery diagnostics of a device."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from sibridge.formatting import to_json_text

# (attribute, JSON key, omitted when empty)
_FIELDS = (
    ("serial", "Serial", True),
    ("current_capacity", "CurrentCapacity", True),
    ("cycle_count", "CycleCount", False),
    ("absolute_capacity", "AbsoluteCapacity", False),
    ("nominal_charge_capacity", "NominalChargeCapacity", False),
    ("design_capacity", "DesignCapacity", False),
    ("voltage", "Voltage", False),
    ("boot_voltage", "BootVoltage", False),
    ("adapter_details_voltage", "AdapterDetailsVoltage", True),
    ("adapter_details_watts", "AdapterDetailsWatts", True),
    ("instant_amperage", "InstantAmperage", False),
    ("temperature", "Temperature", False),
)
_BY_KEY = {key: attr for attr, key, _ in _FIELDS}
_BY_FOLDED_KEY = {key.lower(): attr for attr, key, _ in _FIELDS}


def _show(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


@dataclass
class Battery:
    """Battery readings taken from the device's IORegistry diagnostics."""

    serial: str = ""
    current_capacity: Any = None
    cycle_count: Any = None
    absolute_capacity: Any = None
    nominal_charge_capacity: Any = None
    design_capacity: Any = None
    voltage: Any = None
    boot_voltage: Any = None
    adapter_details_voltage: Any = None
    adapter_details_watts: Any = None
    instant_amperage: Any = None
    temperature: Any = None

    def analyze(self, battery_data: Mapping[str, Any]) -> None:
        """Fill the fields from a diagnostics reply; raises ValueError on bad data."""
        try:
            registry = battery_data["Diagnostics"]["IORegistry"]
            adapter = registry["AdapterDetails"]
        except (KeyError, TypeError) as exc:
            raise ValueError("battery data lacks Diagnostics.IORegistry.AdapterDetails") from exc
        if not isinstance(registry, Mapping) or not isinstance(adapter, Mapping):
            raise ValueError("battery diagnostics sections must be dictionaries")

        self.adapter_details_voltage = adapter.get("Voltage")
        self.adapter_details_watts = adapter.get("Watts")

        for key, value in registry.items():
            attr = _BY_KEY.get(key) or _BY_FOLDED_KEY.get(str(key).lower())
            if attr is None:
                continue
            if attr == "serial":
                if value is None:
                    continue
                if not isinstance(value, str):
                    raise ValueError(f"battery Serial must be a string, got {type(value).__name__}")
            setattr(self, attr, value)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key, omit_empty in _FIELDS:
            value = getattr(self, attr)
            if omit_empty and (value is None or value == "" and attr == "serial"):
                continue
            result[key] = value
        return result

    def to_string(self) -> str:
        return "\n".join(
            [
                f"Serial:{self.serial}",
                f"Temperature:{_show(self.temperature)}",
                f"CycleCount:{_show(self.cycle_count)}",
                f"NominalChargeCapacity:{_show(self.nominal_charge_capacity)}mAh",
                f"DesignCapacity:{_show(self.design_capacity)}mAh",
                f"AbsoluteCapacity:{_show(self.absolute_capacity)}mAh",
                f"CurrentCapacity:{_show(self.current_capacity)}",
                f"Voltage:{_show(self.voltage)}mV",
                f"BootVoltage:{_show(self.boot_voltage)}mV",
                f"InstantAmperage:{_show(self.instant_amperage)}mA",
                f"AdapterDetailsVoltage:{_show(self.adapter_details_voltage)}mV",
                f"AdapterDetailsWatts:{_show(self.adapter_details_watts)}W",
            ]
        )

    def to_json(self) -> str:
        return to_json_text(self.to_dict())

    def to_format(self) -> str:
        return to_json_text(self.to_dict(), indent=True)


@dataclass
class BatteryList:
    """Battery readings keyed by device serial number."""

    devices: dict[str, Battery] = field(default_factory=dict)

    def put(self, key: str, value: Battery) -> None:
        self.devices[key] = value

    def _as_dict(self) -> dict[str, Any]:
        return {key: self.devices[key].to_dict() for key in sorted(self.devices)}

    def to_string(self) -> str:
        return "\n\n".join(battery.to_string() for battery in self.devices.values())

    def to_json(self) -> str:
        if not self.devices:
            return ""
        return to_json_text(self._as_dict())

    def to_format(self) -> str:
        if not self.devices:
            return ""
        return to_json_text(self._as_dict(), indent=True)
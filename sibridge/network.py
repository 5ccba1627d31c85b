"""Network addresses of a device."""

from __future__ import annotations

from dataclasses import dataclass

from sibridge.formatting import to_json_text


@dataclass
class NetworkInfo:
    """MAC, IPv4 and IPv6 addresses of a device."""

    mac: str = ""
    ipv4: str = ""
    ipv6: str = ""

    def _as_dict(self) -> dict[str, str]:
        return {"mac": self.mac, "ipv4": self.ipv4, "ipv6": self.ipv6}

    def to_string(self) -> str:
        return f"{self.mac} {self.ipv4} {self.ipv6}"

    def to_json(self) -> str:
        return to_json_text(self._as_dict())

    def to_format(self) -> str:
        return to_json_text(self._as_dict(), indent=True)
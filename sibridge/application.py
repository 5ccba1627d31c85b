"""Installed application records and their listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from sibridge.formatting import to_json_text


@dataclass
class Application:
    """One installed application as reported by the device."""

    name: str = ""
    bundle_id: str = ""
    version: str = ""
    short_version: str = ""
    icon_base64: str = ""

    @classmethod
    def from_bundle_info(cls, info: Mapping[str, Any]) -> "Application":
        """Build from a dictionary keyed by CFBundle attribute names (case-insensitive)."""
        folded = {str(k).lower(): v for k, v in info.items()}

        def pick(key: str) -> str:
            value = folded.get(key.lower(), "")
            return value if isinstance(value, str) else ""

        return cls(
            name=pick("CFBundleDisplayName"),
            bundle_id=pick("CFBundleIdentifier"),
            version=pick("CFBundleVersion"),
            short_version=pick("CFBundleShortVersionString"),
            icon_base64=pick("IconBase64"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.short_version:
            result["shortVersion"] = self.short_version
        result["version"] = self.version
        result["name"] = self.name
        result["bundleId"] = self.bundle_id
        if self.icon_base64:
            result["iconBase64"] = self.icon_base64
        return result


@dataclass
class AppList:
    """A list of applications with text and JSON renderings."""

    applications: list[Application] = field(default_factory=list)

    def to_string(self) -> str:
        return "\n".join(
            f"{a.name} {a.bundle_id} {a.version} {a.short_version}" for a in self.applications
        )

    def to_json(self) -> str:
        """One compact JSON object per line, one line per application."""
        return "\n".join(to_json_text(a.to_dict()) for a in self.applications)

    def to_format(self) -> str:
        return to_json_text({"appList": [a.to_dict() for a in self.applications]}, indent=True)
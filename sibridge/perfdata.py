"""Raw performance samples as JSON text."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sibridge.formatting import to_json_text

_log = logging.getLogger(__name__)


def _parse_float(text: str) -> float | int:
    value = float(text)
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


@dataclass
class PerfData:
    """One performance sample, kept as the JSON bytes it arrived as."""

    data: bytes = b""

    def to_string(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def to_json(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def to_format(self) -> str:
        """Indented JSON with sorted keys; an empty object if the data is not a JSON object."""
        parsed: Any = {}
        try:
            decoded = json.loads(self.data, parse_float=_parse_float)
        except (ValueError, UnicodeDecodeError) as exc:
            _log.warning("%s", exc)
        else:
            if isinstance(decoded, dict):
                parsed = decoded
            else:
                _log.warning("performance data is not a JSON object")
        return to_json_text(parsed, indent=True, sort_keys=True)
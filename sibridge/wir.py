"""Web Inspector remote-protocol messages, pages and applications."""

from __future__ import annotations

import plistlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class Selector(str, Enum):
    """Selectors of messages sent to and received from the inspector."""

    SEND_REPORT_ID = "_rpc_reportIdentifier:"
    SEND_GET_CONNECT_APP = "_rpc_getConnectedApplications:"
    SEND_FORWARD_GET_LISTING = "_rpc_forwardGetListing:"
    SEND_FORWARD_SOCKET_SETUP = "_rpc_forwardSocketSetup:"
    SEND_FORWARD_SOCKET_DATA = "_rpc_forwardSocketData:"
    SEND_FORWARD_INDICATE_WEBVIEW = "_rpc_forwardIndicateWebView:"
    SEND_FORWARD_DID_CLOSE = "_rpc_forwardDidClose:"
    REQUEST_APPLICATION_LAUNCH = "_rpc_requestApplicationLaunch"
    ON_REPORT_CURRENT_STATE = "_rpc_reportCurrentState:"
    ON_REPORT_SETUP = "_rpc_reportSetup:"
    ON_REPORT_DRIVER_LIST = "_rpc_reportConnectedDriverList:"
    ON_REPORT_CONNECTED_APP_LIST = "_rpc_reportConnectedApplicationList:"
    ON_APP_CONNECTED = "_rpc_applicationConnected:"
    ON_APP_UPDATED = "_rpc_applicationUpdated:"
    ON_APP_SENT_LISTING = "_rpc_applicationSentListing:"
    ON_APP_SENT_DATA = "_rpc_applicationSentData:"
    ON_APP_DISCONNECTED = "_rpc_applicationDisconnected:"


class PageType(str, Enum):
    AUTOMATION = "WIRTypeAutomation"
    ITML = "WIRTypeITML"
    JAVASCRIPT = "WIRTypeJavaScript"
    PAGE = "WIRTypePage"
    SERVICE_WORKER = "WIRTypeServiceWorker"
    WEB = "WIRTypeWeb"
    WEB_PAGE = "WIRTypeWebPage"
    AUTOMATICALLY_PAUSE = "WIRAutomaticallyPause"


class AutomationAvailability(str, Enum):
    NOT_AVAILABLE = "WIRAutomationAvailabilityNotAvailable"
    AVAILABLE = "WIRAutomationAvailabilityAvailable"
    UNKNOWN = "WIRAutomationAvailabilityUnknown"


_ALLOW_INSECURE_MEDIA = "org.webkit.webdriver.webrtc.allow-insecure-media-capture"
_SUPPRESS_ICE_FILTERING = "org.webkit.webdriver.webrtc.suppress-ice-candidate-filtering"


def _checked(value: Any, kind: type, key: str) -> Any:
    if kind is bytes and isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if kind is int and isinstance(value, int) and not isinstance(value, bool):
        return value
    if kind is bool and isinstance(value, bool):
        return value
    if kind is str and isinstance(value, str):
        return value
    raise ValueError(f"plist key {key}: expected {kind.__name__}, got {type(value).__name__}")


def _mapping(value: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"plist key {key}: expected dictionary, got {type(value).__name__}")
    return value


# (attribute, plist key, type, omitted when empty rather than only when unset)
_Spec = tuple[tuple[str, str, type, bool], ...]


def _read(spec: _Spec, values: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for attr, key, kind, _ in spec:
        if key in values and values[key] is not None:
            result[attr] = _checked(values[key], kind, key)
    return result


def _write(obj: Any, spec: _Spec) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for attr, key, kind, omit_empty in spec:
        value = getattr(obj, attr)
        if value is None or (omit_empty or kind is bytes) and not value:
            continue
        result[key] = value.value if isinstance(value, Enum) else value
    return result


@dataclass
class SessionCapabilities:
    """WebRTC capabilities requested for an automation session."""

    allow_insecure_media_capture: bool = False
    suppress_ice_candidate_filtering: bool = False


def _caps_from_plist(values: Mapping[str, Any]) -> SessionCapabilities:
    caps = SessionCapabilities()
    if values.get(_ALLOW_INSECURE_MEDIA) is not None:
        caps.allow_insecure_media_capture = _checked(values[_ALLOW_INSECURE_MEDIA], bool, _ALLOW_INSECURE_MEDIA)
    if values.get(_SUPPRESS_ICE_FILTERING) is not None:
        caps.suppress_ice_candidate_filtering = _checked(
            values[_SUPPRESS_ICE_FILTERING], bool, _SUPPRESS_ICE_FILTERING
        )
    return caps


_PAGE_FIELDS: _Spec = (
    ("page_id", "WIRPageIdentifierKey", int, False),
    ("page_type", "WIRTypeKey", str, True),
    ("url", "WIRURLKey", str, False),
    ("title", "WIRTitleKey", str, False),
    ("automation_is_paired", "WIRAutomationTargetIsPairedKey", bool, False),
    ("automation_name", "WIRAutomationTargetNameKey", str, False),
    ("automation_version", "WIRAutomationTargetVersionKey", str, False),
    ("session_id", "WIRSessionIdentifierKey", str, False),
    ("connection_id", "WIRConnectionIdentifierKey", str, False),
)


@dataclass
class WebInspectorPage:
    """One inspectable page of an application."""

    page_id: int | None = None
    page_type: PageType | str = ""
    url: str | None = None
    title: str | None = None
    automation_is_paired: bool | None = None
    automation_name: str | None = None
    automation_version: str | None = None
    session_id: str | None = None
    connection_id: str | None = None

    def to_plist(self) -> dict[str, Any]:
        return _write(self, _PAGE_FIELDS)


def _page_from_plist(values: Mapping[str, Any]) -> WebInspectorPage:
    return WebInspectorPage(**_read(_PAGE_FIELDS, values))


_ARGUMENT_FIELDS: _Spec = (
    ("message_data", "WIRMessageDataKey", bytes, True),
    ("connection_identifier", "WIRConnectionIdentifierKey", str, False),
    ("page_identifier", "WIRPageIdentifierKey", int, False),
    ("indicate_enabled", "WIRIndicateEnabledKey", bool, False),
    ("session_identifier", "WIRSessionIdentifierKey", str, False),
    ("sender", "WIRSenderKey", str, False),
    ("automatically_pause", "WIRAutomaticallyPause", bool, False),
    ("socket_data", "WIRSocketDataKey", bytes, True),
    ("application_identifier", "WIRApplicationIdentifierKey", str, False),
    ("application_bundle_identifier", "WIRApplicationBundleIdentifierKey", str, False),
    ("application_name", "WIRApplicationNameKey", str, False),
    ("automation_availability", "WIRAutomationAvailabilityKey", str, True),
    ("is_application_active", "WIRIsApplicationActiveKey", int, False),
    ("is_application_proxy", "WIRIsApplicationProxyKey", bool, False),
    ("is_application_ready", "WIRIsApplicationReadyKey", bool, False),
    ("host_application_identifier", "WIRHostApplicationIdentifierKey", str, False),
)
_CAPS_KEY = "WIRSessionCapabilitiesKey"
_APPS_KEY = "WIRApplicationDictionaryKey"
_LISTING_KEY = "WIRListingKey"


@dataclass
class WIRArgument:
    """The argument dictionary of a Web Inspector message; None means absent."""

    message_data: bytes | None = None
    connection_identifier: str | None = None
    page_identifier: int | None = None
    indicate_enabled: bool | None = None
    session_identifier: str | None = None
    sender: str | None = None
    automatically_pause: bool | None = None
    socket_data: bytes | None = None
    session_capabilities: SessionCapabilities | None = None
    application_identifier: str | None = None
    application_bundle_identifier: str | None = None
    application_name: str | None = None
    automation_availability: AutomationAvailability | str = ""
    is_application_active: int | None = None
    is_application_proxy: bool | None = None
    is_application_ready: bool | None = None
    host_application_identifier: str | None = None
    application_dictionary: dict[str, "WIRArgument"] | None = None
    listing: dict[str, WebInspectorPage] | None = None

    def to_plist(self) -> dict[str, Any]:
        """Plist dictionary holding only the keys that are set."""
        result = _write(self, _ARGUMENT_FIELDS)
        if self.session_capabilities is not None:
            result[_CAPS_KEY] = {
                _ALLOW_INSECURE_MEDIA: self.session_capabilities.allow_insecure_media_capture,
                _SUPPRESS_ICE_FILTERING: self.session_capabilities.suppress_ice_candidate_filtering,
            }
        if self.application_dictionary:
            result[_APPS_KEY] = {k: v.to_plist() for k, v in self.application_dictionary.items()}
        if self.listing:
            result[_LISTING_KEY] = {k: v.to_plist() for k, v in self.listing.items()}
        return result


def _argument_from_plist(values: Mapping[str, Any]) -> WIRArgument:
    argument = WIRArgument(**_read(_ARGUMENT_FIELDS, values))
    if values.get(_CAPS_KEY) is not None:
        argument.session_capabilities = _caps_from_plist(_mapping(values[_CAPS_KEY], _CAPS_KEY))
    if values.get(_APPS_KEY) is not None:
        argument.application_dictionary = {
            str(k): _argument_from_plist(_mapping(v, _APPS_KEY))
            for k, v in _mapping(values[_APPS_KEY], _APPS_KEY).items()
        }
    if values.get(_LISTING_KEY) is not None:
        argument.listing = {
            str(k): _page_from_plist(_mapping(v, _LISTING_KEY))
            for k, v in _mapping(values[_LISTING_KEY], _LISTING_KEY).items()
        }
    return argument


@dataclass
class WIRMessage:
    """A decoded message: its selector and its argument."""

    argument: WIRArgument = field(default_factory=WIRArgument)
    selector: Selector | str = ""


def parse_wir_message(raw: Mapping[str, Any] | bytes) -> WIRMessage:
    """Decode a message from a plist dictionary or serialised plist bytes.

    Known selectors become Selector members; others stay plain strings.
    Raises ValueError when the data does not have the message's shape.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = plistlib.loads(bytes(raw))
    message = _mapping(raw, "message")
    selector = message.get("__selector")
    selector = "" if selector is None else _checked(selector, str, "__selector")
    try:
        selector = Selector(selector)
    except ValueError:
        pass
    argument_values = message.get("__argument")
    argument = (
        WIRArgument()
        if argument_values is None
        else _argument_from_plist(_mapping(argument_values, "__argument"))
    )
    return WIRMessage(argument=argument, selector=selector)


@dataclass
class WebInspectorApplication:
    """An application known to the inspector."""

    application_id: str | None = None
    bundle: str | None = None
    pid: int | None = None
    name: str | None = None
    availability: AutomationAvailability | str = ""
    active: int | None = None
    proxy: bool | None = None
    ready: bool | None = None
    host: str | None = None


@dataclass
class UrlItem:
    """A page entry in the DevTools target listing."""

    item_id: str = ""
    port: int = 0
    title: str | None = None
    url: str | None = None
    item_type: str = ""
    description: str = ""
    web_socket_debugger_url: str = ""
    devtools_frontend_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "id": self.item_id,
            "port": self.port,
            "title": self.title,
            "type": self.item_type,
            "url": self.url,
            "webSocketDebuggerUrl": self.web_socket_debugger_url,
            "devtoolsFrontendUrl": self.devtools_frontend_url,
        }


@dataclass
class BundleItem:
    """An application with its inspectable pages."""

    pid: str = ""
    bundle_id: str = ""
    name: str = ""
    pages: list[UrlItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON form; empty values are left out."""
        result: dict[str, Any] = {}
        if self.pid:
            result["pid"] = self.pid
        if self.bundle_id:
            result["bundleId"] = self.bundle_id
        if self.name:
            result["name"] = self.name
        if self.pages:
            result["pages"] = [page.to_dict() for page in self.pages]
        return result
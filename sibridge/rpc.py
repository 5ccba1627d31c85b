"""Web Inspector RPC: sending requests and tracking applications and pages."""

from __future__ import annotations

import logging
import queue
import re
from typing import Any, Mapping, Protocol

from sibridge.errors import BridgeError
from sibridge.wir import (
    AutomationAvailability,
    Selector,
    WebInspectorApplication,
    WebInspectorPage,
    WIRArgument,
    parse_wir_message,
)

_log = logging.getLogger(__name__)
_PID = re.compile(r"[+-]?[0-9]+")


class Inspector(Protocol):
    """The device-side Web Inspector channel."""

    def send_webkit_msg(self, selector: str, argument: Mapping[str, Any]) -> None: ...

    def receive_webkit_msg(self) -> Any: ...


def key_to_pid(key: str) -> int:
    """Process id from an application key such as 'PID:123'; -1 if it is not a number.

    Raises ValueError when the key has no ':' separator.
    """
    parts = key.split(":")
    if len(parts) < 2:
        raise ValueError(f"application key {key!r} has no process id part")
    text = parts[1]
    if not _PID.fullmatch(text):
        _log.warning("invalid process id %r in application key %r", text, key)
        return -1
    return int(text)


def _missing(selector: Selector, key: str) -> BridgeError:
    return BridgeError(f"selector:{selector.value} argumentKey: {key} is nil")


def _availability(value: AutomationAvailability | str) -> AutomationAvailability | str:
    try:
        return AutomationAvailability(value)
    except ValueError:
        return value


class RPCService:
    """Sends inspector requests and keeps the applications and pages it reports."""

    def __init__(self, inspector: Inspector) -> None:
        self.inspector = inspector
        self.state: AutomationAvailability | str = ""
        self.connected_application: dict[str, WebInspectorApplication] = {}
        self.application_pages: dict[str, dict[str, WebInspectorPage]] = {}
        self.wir_event: queue.Queue[bytes] | None = queue.Queue()

    def _send(self, selector: Selector, argument: WIRArgument) -> None:
        self.inspector.send_webkit_msg(selector.value, argument.to_plist())

    def send_report_identifier(self, connection_id: str | None) -> None:
        if connection_id is None:
            raise ValueError("send_report_identifier: connection_id is null")
        self._send(Selector.SEND_REPORT_ID, WIRArgument(connection_identifier=connection_id))

    def send_get_connected_applications(self, connection_id: str | None) -> None:
        if connection_id is None:
            raise ValueError("send_get_connected_applications: connection_id is null")
        self._send(Selector.SEND_GET_CONNECT_APP, WIRArgument(connection_identifier=connection_id))

    def send_forward_get_listing(self, connection_id: str | None, app_id: str | None) -> None:
        if connection_id is None or app_id is None:
            raise ValueError("send_forward_get_listing: params is null")
        self._send(
            Selector.SEND_FORWARD_GET_LISTING,
            WIRArgument(connection_identifier=connection_id, application_identifier=app_id),
        )

    def send_forward_indicate_web_view(
        self, connection_id: str | None, app_id: str | None, page_id: int, is_enabled: bool
    ) -> None:
        if connection_id is None or app_id is None:
            raise ValueError("send_forward_indicate_web_view: params is null")
        self._send(
            Selector.SEND_FORWARD_INDICATE_WEBVIEW,
            WIRArgument(
                connection_identifier=connection_id,
                application_identifier=app_id,
                page_identifier=page_id,
                indicate_enabled=is_enabled,
            ),
        )

    def send_forward_socket_setup(
        self,
        connection_id: str | None,
        app_id: str | None,
        page_id: int,
        sender_id: str | None,
        pause: bool,
    ) -> None:
        if connection_id is None or app_id is None or sender_id is None:
            raise ValueError("send_forward_socket_setup: params is null")
        argument = WIRArgument(
            connection_identifier=connection_id,
            application_identifier=app_id,
            page_identifier=page_id,
            sender=sender_id,
        )
        if not pause:
            argument.automatically_pause = False
        self._send(Selector.SEND_FORWARD_SOCKET_SETUP, argument)

    def send_forward_socket_data(
        self,
        connection_id: str | None,
        app_id: str | None,
        page_id: int,
        sender_id: str | None,
        data: bytes | None,
    ) -> None:
        if connection_id is None or app_id is None or sender_id is None or data is None:
            raise ValueError("send_forward_socket_data: params is null")
        self._send(
            Selector.SEND_FORWARD_SOCKET_DATA,
            WIRArgument(
                connection_identifier=connection_id,
                application_identifier=app_id,
                page_identifier=page_id,
                sender=sender_id,
                socket_data=bytes(data),
            ),
        )

    def send_forward_did_close(
        self, connection_id: str | None, app_id: str | None, page_id: int, sender_id: str | None
    ) -> None:
        if connection_id is None or app_id is None or sender_id is None:
            raise ValueError("send_forward_did_close: params is null")
        self._send(
            Selector.SEND_FORWARD_DID_CLOSE,
            WIRArgument(
                connection_identifier=connection_id,
                application_identifier=app_id,
                page_identifier=page_id,
                sender=sender_id,
            ),
        )

    def receive_and_process(self) -> None:
        """Receive one message from the inspector and apply it.

        Raises BridgeError for an unknown selector or a malformed argument.
        """
        message = parse_wir_message(self.inspector.receive_webkit_msg())
        argument = message.argument
        selector = message.selector
        if selector == Selector.ON_REPORT_CURRENT_STATE:
            self.state = _availability(argument.automation_availability)
        elif selector == Selector.ON_REPORT_CONNECTED_APP_LIST:
            self.receive_report_connected_application_list(argument)
        elif selector == Selector.ON_APP_SENT_LISTING:
            self.receive_application_sent_listing(argument)
        elif selector == Selector.ON_APP_UPDATED:
            self.receive_application_updated(argument)
        elif selector == Selector.ON_APP_CONNECTED:
            self.receive_application_connected(argument)
        elif selector == Selector.ON_APP_SENT_DATA:
            self.receive_application_sent_data(argument)
        elif selector == Selector.ON_APP_DISCONNECTED:
            self.receive_application_disconnected(argument)
        elif selector in (Selector.ON_REPORT_DRIVER_LIST, Selector.ON_REPORT_SETUP):
            pass
        else:
            name = selector.value if isinstance(selector, Selector) else selector
            raise BridgeError("not the selector:" + name)

    def receive_report_current_state(self, arg: WIRArgument) -> AutomationAvailability | str:
        if arg.is_application_ready is None:
            raise _missing(Selector.ON_REPORT_CURRENT_STATE, "WIRIsApplicationReadyKey")
        return _availability(arg.automation_availability)

    def receive_report_connected_application_list(self, arg: WIRArgument) -> None:
        if arg.application_dictionary is None:
            raise _missing(Selector.ON_REPORT_CONNECTED_APP_LIST, "WIRApplicationDictionaryKey")
        for key, info in arg.application_dictionary.items():
            try:
                self.connected_application[key] = self._parse_app(info)
            except (BridgeError, ValueError) as exc:
                _log.warning("%s", exc)

    def receive_application_sent_listing(self, arg: WIRArgument) -> None:
        if arg.listing is None:
            raise _missing(Selector.ON_APP_SENT_LISTING, "WIRListingKey")
        if arg.application_identifier is None:
            raise _missing(Selector.ON_APP_SENT_LISTING, "WIRApplicationIdentifierKey")
        pages = dict(arg.listing)
        if pages:
            self.application_pages[arg.application_identifier] = pages

    def receive_application_connected(self, arg: WIRArgument) -> None:
        app = self._parse_app(arg)
        self.connected_application[app.application_id] = app

    def receive_application_sent_data(self, arg: WIRArgument) -> None:
        if arg.message_data is None:
            raise _missing(Selector.ON_APP_SENT_DATA, "WIRMessageDataKey")
        if self.wir_event is not None:
            self.wir_event.put(arg.message_data)

    def receive_application_updated(self, arg: WIRArgument) -> None:
        app = self._parse_app(arg)
        self.connected_application[app.application_id] = app

    def receive_application_disconnected(self, arg: WIRArgument) -> str | None:
        """Acknowledge a disconnection; known applications are left as they are.

        Returns the identifier of the application that went away, if given.
        """
        return arg.application_identifier

    def _parse_app(self, arg: WIRArgument) -> WebInspectorApplication:
        if arg.application_identifier is None:
            raise BridgeError("parse app is fail")
        return WebInspectorApplication(
            application_id=arg.application_identifier,
            bundle=arg.application_bundle_identifier,
            pid=key_to_pid(arg.application_identifier),
            name=arg.application_name,
            availability=_availability(arg.automation_availability),
            active=arg.is_application_active,
            proxy=arg.is_application_proxy,
            ready=arg.is_application_ready,
            host=arg.host_application_identifier,
        )
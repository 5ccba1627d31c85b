"""Bridging a DevTools connection to a page through the Web Inspector service."""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from typing import Any, Callable, Protocol

from sibridge.errors import BridgeError
from sibridge.rpc import Inspector, RPCService
from sibridge.wir import BundleItem, UrlItem, WebInspectorApplication, WebInspectorPage

_log = logging.getLogger(__name__)
_POLL_INTERVAL = 0.05

_protocol_debug = False


def set_protocol_debug(flag: bool) -> None:
    """Log every protocol message passed between DevTools and the page when flag is true."""
    global _protocol_debug
    _protocol_debug = bool(flag)


class InspectorDevice(Protocol):
    """A device that can open its Web Inspector service."""

    def web_inspector_service(self) -> Inspector: ...


class DevToolsConnection(Protocol):
    """A DevTools websocket: text frames out, frames in; None once the peer has closed."""

    def send(self, data: bytes) -> None: ...

    def receive(self) -> bytes | None: ...


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


class WebkitDebugService:
    """Connects to a device's inspector and relays DevTools traffic for one page."""

    def __init__(
        self,
        device: InspectorDevice | None,
        version: str = "",
        connect_id: str | None = None,
    ) -> None:
        self.device = device
        self.version = version
        self.connect_id = connect_id or _new_id()
        self.inspector: Inspector | None = None
        self.rpc_service: RPCService | None = None
        self.connected_application: dict[str, WebInspectorApplication] = {}
        self.application_pages: dict[str, dict[str, WebInspectorPage]] = {}
        self.sender_id = ""
        self.ws_conn: DevToolsConnection | None = None
        self.application_id: str | None = None
        self.page_id: int | None = None
        self._close_send_ws: threading.Event | None = None
        self._lock = threading.Lock()
        self._reader: threading.Thread | None = None

    def _rpc(self) -> RPCService:
        if self.rpc_service is None:
            raise BridgeError("inspector is not connected")
        return self.rpc_service

    def connect_inspector(self) -> Callable[[], None]:
        """Open the inspector, announce this client and start reading its messages.

        Returns a function that stops the reader and closes the event stream.
        """
        if self.device is None:
            raise BridgeError("device is null")
        inspector = self.device.web_inspector_service()
        self.inspector = inspector
        rpc = RPCService(inspector)
        self.rpc_service = rpc
        self.application_pages = rpc.application_pages
        self.connected_application = rpc.connected_application

        if not rpc.application_pages:
            rpc.send_report_identifier(self.connect_id)

        stop = threading.Event()

        def read() -> None:
            while True:
                if stop.is_set():
                    self.close()
                    return
                try:
                    rpc.receive_and_process()
                except Exception as exc:
                    if isinstance(exc, TimeoutError) or "timeout" in str(exc):
                        continue
                    _log.error("%s", exc)
                    return

        self._reader = threading.Thread(target=read, name="webinspector-reader", daemon=True)
        self._reader.start()
        return stop.set

    def close(self) -> None:
        """Stop delivering page events; waiting receivers return."""
        rpc = self.rpc_service
        if rpc is not None and rpc.wir_event is not None:
            events = rpc.wir_event
            rpc.wir_event = None
            events.put(None)  # type: ignore[arg-type]

    def start_cdp(self, app_id: str | None, page_id: int | None, conn: DevToolsConnection) -> None:
        """Attach a DevTools connection to a page and set up its socket on the device."""
        if page_id is None:
            raise ValueError("start_cdp: page_id is null")
        rpc = self._rpc()
        self.ws_conn = conn
        self.sender_id = _new_id()
        self._close_send_ws = threading.Event()
        self.application_id = app_id
        self.page_id = page_id
        rpc.send_forward_socket_setup(self.connect_id, app_id, page_id, self.sender_id, False)

    def _handle_ws_close(self) -> None:
        _log.info("try close ws")
        self.ws_conn = None
        if self._close_send_ws is not None:
            self._close_send_ws.set()
        if self.page_id is None:
            raise BridgeError("no page is being debugged")
        self._rpc().send_forward_did_close(
            self.connect_id, self.application_id, self.page_id, self.sender_id
        )

    def find_pages_by_id(
        self, page_id: str
    ) -> tuple[WebInspectorApplication | None, WebInspectorPage]:
        """The application and page with this page id; raises BridgeError if none has it."""
        for app_id, pages in self.application_pages.items():
            if page_id in pages:
                return self.connected_application.get(app_id), pages[page_id]
        raise BridgeError("not find page")

    def get_open_pages(self, port: int) -> list[BundleItem]:
        """Request fresh listings and describe every known application with its pages."""
        rpc = self._rpc()
        result: list[BundleItem] = []
        for key, app in list(self.connected_application.items()):
            result.append(
                BundleItem(
                    pid=app.application_id or "",
                    bundle_id=app.bundle or "",
                    name=app.name or "",
                )
            )
            rpc.send_forward_get_listing(self.connect_id, key)

        for app_id, pages in list(self.application_pages.items()):
            items = [
                UrlItem(
                    item_id=page_key,
                    port=port,
                    title=page.title,
                    url=page.url,
                    item_type="page",
                    description="",
                    web_socket_debugger_url=f"ws://localhost:{port}/devtools/page/{page_key}",
                    devtools_frontend_url=(
                        f"/devtools/inspector.html?ws://localhost:{port}/devtools/page/{page_key}"
                    ),
                )
                for page_key, page in pages.items()
            ]
            for bundle in result:
                if bundle.pid == app_id:
                    bundle.pages = items
                    break
        return result

    def send_protocol_command(self, app_id: str | None, page_id: int | None, message: bytes) -> None:
        """Forward one DevTools protocol message to the page."""
        if _protocol_debug:
            _log.info("protocol send command:%s", message.decode("utf-8", errors="replace"))
        if page_id is None:
            raise ValueError("send_protocol_command: page_id is null")
        self._rpc().send_forward_socket_data(
            self.connect_id, app_id, page_id, self.sender_id, message
        )

    def receive_protocol_data(self) -> bytes | None:
        """Wait for one message from the page and pass it to DevTools.

        Returns the message, or None when the event stream is closed.
        Raises BridgeError once the DevTools connection has gone away.
        """
        rpc = self.rpc_service
        events = rpc.wir_event if rpc is not None else None
        if events is None:
            return None
        while True:
            if self._close_send_ws is not None and self._close_send_ws.is_set():
                raise BridgeError("close send protocol")
            try:
                message = events.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                if rpc.wir_event is not events:
                    return None
                continue
            if message is None:
                return None
            if _protocol_debug:
                _log.info("protocol receive command:\n%s", message.decode("utf-8", errors="replace"))
            self._send_to_devtools(message)
            return message

    def _send_to_devtools(self, raw: bytes) -> None:
        conn = self.ws_conn
        if conn is None:
            return
        with self._lock:
            conn.send(raw)

    def receive_message_tool(self) -> None:
        """Read one message from DevTools and forward it to the page.

        Raises ConnectionError when DevTools closed the connection and
        BridgeError for an empty message.
        """
        conn = self.ws_conn
        if conn is None:
            raise BridgeError("no devtools connection")
        try:
            message = conn.receive()
        except Exception as exc:
            _log.info("Error during message reading: %s", exc)
            raise
        if message is None:
            self._handle_ws_close()
            raise ConnectionError("devtools connection closed")
        if len(message) == 0:
            raise BridgeError("message is null")
        self.send_protocol_command(self.application_id, self.page_id, message)
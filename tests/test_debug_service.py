import logging
import queue
import time

import pytest

from sibridge.debug_service import WebkitDebugService, set_protocol_debug
from sibridge.errors import BridgeError
from sibridge.wir import WebInspectorPage, WIRArgument


class FakeInspector:
    def __init__(self):
        self.sent = []
        self.incoming = queue.Queue()

    def send_webkit_msg(self, selector, argument):
        self.sent.append((selector, argument))

    def receive_webkit_msg(self):
        try:
            return self.incoming.get(timeout=0.02)
        except queue.Empty:
            raise TimeoutError("timeout") from None


class FakeDevice:
    def __init__(self):
        self.inspector = FakeInspector()

    def web_inspector_service(self):
        return self.inspector


class FakeConn:
    def __init__(self, incoming=()):
        self.sent = []
        self.incoming = list(incoming)

    def send(self, data):
        self.sent.append(data)

    def receive(self):
        return self.incoming.pop(0)


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def connected():
    device = FakeDevice()
    service = WebkitDebugService(device, "16.0")
    cancel = service.connect_inspector()
    yield service, device.inspector
    cancel()


def add_app_with_page(service):
    rpc = service.rpc_service
    rpc.receive_application_connected(
        WIRArgument(
            application_identifier="PID:42",
            application_bundle_identifier="com.example.app",
            application_name="Example",
        )
    )
    rpc.receive_application_sent_listing(
        WIRArgument(
            application_identifier="PID:42",
            listing={"1": WebInspectorPage(page_id=1, title="Home", url="https://example.com/")},
        )
    )


def test_connect_without_device_fails():
    with pytest.raises(BridgeError, match="device is null"):
        WebkitDebugService(None).connect_inspector()


def test_connect_reports_identifier(connected):
    service, inspector = connected
    assert inspector.sent[0] == (
        "_rpc_reportIdentifier:",
        {"WIRConnectionIdentifierKey": service.connect_id},
    )
    assert service.connect_id == service.connect_id.upper()
    assert len(service.connect_id) == 36


def test_reader_processes_incoming_messages(connected):
    service, inspector = connected
    inspector.incoming.put(
        {
            "__selector": "_rpc_applicationConnected:",
            "__argument": {
                "WIRApplicationIdentifierKey": "PID:77",
                "WIRApplicationNameKey": "Reader",
            },
        }
    )
    assert wait_for(lambda: "PID:77" in service.connected_application)
    app = service.connected_application["PID:77"]
    assert app.pid == 77
    assert app.name == "Reader"


def test_cancel_closes_event_stream():
    service = WebkitDebugService(FakeDevice())
    cancel = service.connect_inspector()
    cancel()
    assert wait_for(lambda: service.rpc_service.wir_event is None)
    assert service.receive_protocol_data() is None


def test_start_cdp_sets_up_socket(connected):
    service, inspector = connected
    service.start_cdp("PID:42", 1, FakeConn())
    selector, argument = inspector.sent[-1]
    assert selector == "_rpc_forwardSocketSetup:"
    assert argument == {
        "WIRConnectionIdentifierKey": service.connect_id,
        "WIRPageIdentifierKey": 1,
        "WIRSenderKey": service.sender_id,
        "WIRAutomaticallyPause": False,
        "WIRApplicationIdentifierKey": "PID:42",
    }
    assert service.sender_id == service.sender_id.upper()
    assert service.sender_id != service.connect_id


def test_find_pages_by_id(connected):
    service, _ = connected
    add_app_with_page(service)
    application, page = service.find_pages_by_id("1")
    assert application.application_id == "PID:42"
    assert page.title == "Home"
    with pytest.raises(BridgeError, match="not find page"):
        service.find_pages_by_id("99")


def test_get_open_pages(connected):
    service, inspector = connected
    add_app_with_page(service)
    bundles = service.get_open_pages(9222)
    assert len(bundles) == 1
    bundle = bundles[0]
    assert (bundle.pid, bundle.bundle_id, bundle.name) == ("PID:42", "com.example.app", "Example")
    page = bundle.pages[0]
    assert page.item_id == "1"
    assert page.port == 9222
    assert page.item_type == "page"
    assert page.title == "Home"
    assert page.url == "https://example.com/"
    assert page.web_socket_debugger_url == "ws://localhost:9222/devtools/page/1"
    assert page.devtools_frontend_url == (
        "/devtools/inspector.html?ws://localhost:9222/devtools/page/1"
    )
    assert (
        "_rpc_forwardGetListing:",
        {"WIRConnectionIdentifierKey": service.connect_id, "WIRApplicationIdentifierKey": "PID:42"},
    ) in inspector.sent


def test_receive_protocol_data_forwards_to_devtools(connected):
    service, _ = connected
    conn = FakeConn()
    service.start_cdp("PID:42", 1, conn)
    service.rpc_service.receive_application_sent_data(WIRArgument(message_data=b'{"id":1}'))
    assert service.receive_protocol_data() == b'{"id":1}'
    assert conn.sent == [b'{"id":1}']


def test_receive_message_tool_forwards_to_page(connected):
    service, inspector = connected
    message = b'{"id":15,"method":"Log.enable","params":{}}'
    service.start_cdp("PID:42", 1, FakeConn([message]))
    service.receive_message_tool()
    selector, argument = inspector.sent[-1]
    assert selector == "_rpc_forwardSocketData:"
    assert argument["WIRSocketDataKey"] == message
    assert argument["WIRSenderKey"] == service.sender_id


def test_empty_devtools_message_is_rejected(connected):
    service, _ = connected
    service.start_cdp("PID:42", 1, FakeConn([b""]))
    with pytest.raises(BridgeError, match="message is null"):
        service.receive_message_tool()


def test_devtools_close_stops_session(connected):
    service, inspector = connected
    service.start_cdp("PID:42", 1, FakeConn([None]))
    with pytest.raises(ConnectionError):
        service.receive_message_tool()
    assert service.ws_conn is None
    assert inspector.sent[-1][0] == "_rpc_forwardDidClose:"
    with pytest.raises(BridgeError, match="close send protocol"):
        service.receive_protocol_data()


def test_protocol_debug_logs_commands(connected, caplog):
    service, _ = connected
    service.start_cdp("PID:42", 1, FakeConn())
    set_protocol_debug(True)
    try:
        with caplog.at_level(logging.INFO, logger="sibridge.debug_service"):
            service.send_protocol_command("PID:42", 1, b"hello")
    finally:
        set_protocol_debug(False)
    assert any("protocol send command:hello" in r.getMessage() for r in caplog.records)


def test_operations_need_connection():
    service = WebkitDebugService(FakeDevice())
    with pytest.raises(BridgeError, match="not connected"):
        service.get_open_pages(9222)
import plistlib

import pytest

from sibridge.errors import BridgeError
from sibridge.rpc import RPCService, key_to_pid
from sibridge.wir import AutomationAvailability, WIRArgument


class FakeInspector:
    def __init__(self, incoming=None):
        self.sent = []
        self.incoming = list(incoming or [])

    def send_webkit_msg(self, selector, argument):
        self.sent.append((selector, argument))

    def receive_webkit_msg(self):
        return self.incoming.pop(0)


def make_service(*incoming):
    inspector = FakeInspector(incoming)
    return RPCService(inspector), inspector


def msg(selector, **argument):
    return {"__selector": selector, "__argument": argument}


def test_key_to_pid_parses_number():
    assert key_to_pid("PID:321") == 321


def test_key_to_pid_non_numeric_is_minus_one():
    assert key_to_pid("PID:abc") == -1


def test_key_to_pid_without_separator_raises():
    with pytest.raises(ValueError):
        key_to_pid("nocolon")


def test_send_report_identifier():
    service, inspector = make_service()
    service.send_report_identifier("CONN")
    assert inspector.sent == [("_rpc_reportIdentifier:", {"WIRConnectionIdentifierKey": "CONN"})]


def test_send_get_connected_applications():
    service, inspector = make_service()
    service.send_get_connected_applications("CONN")
    assert inspector.sent[0][0] == "_rpc_getConnectedApplications:"
    assert inspector.sent[0][1] == {"WIRConnectionIdentifierKey": "CONN"}


def test_send_forward_get_listing():
    service, inspector = make_service()
    service.send_forward_get_listing("CONN", "PID:1")
    selector, argument = inspector.sent[0]
    assert selector == "_rpc_forwardGetListing:"
    assert argument == {"WIRConnectionIdentifierKey": "CONN", "WIRApplicationIdentifierKey": "PID:1"}


def test_send_forward_indicate_web_view():
    service, inspector = make_service()
    service.send_forward_indicate_web_view("CONN", "PID:1", 4, True)
    selector, argument = inspector.sent[0]
    assert selector == "_rpc_forwardIndicateWebView:"
    assert argument["WIRPageIdentifierKey"] == 4
    assert argument["WIRIndicateEnabledKey"] is True


def test_socket_setup_without_pause_sends_false_flag():
    service, inspector = make_service()
    service.send_forward_socket_setup("CONN", "PID:1", 2, "SENDER", False)
    selector, argument = inspector.sent[0]
    assert selector == "_rpc_forwardSocketSetup:"
    assert argument["WIRAutomaticallyPause"] is False
    assert argument["WIRSenderKey"] == "SENDER"


def test_socket_setup_with_pause_omits_flag():
    service, inspector = make_service()
    service.send_forward_socket_setup("CONN", "PID:1", 2, "SENDER", True)
    assert "WIRAutomaticallyPause" not in inspector.sent[0][1]


def test_send_forward_socket_data_carries_bytes():
    service, inspector = make_service()
    service.send_forward_socket_data("CONN", "PID:1", 2, "SENDER", b'{"id":1}')
    selector, argument = inspector.sent[0]
    assert selector == "_rpc_forwardSocketData:"
    assert argument["WIRSocketDataKey"] == b'{"id":1}'


def test_send_forward_did_close():
    service, inspector = make_service()
    service.send_forward_did_close("CONN", "PID:1", 2, "SENDER")
    assert inspector.sent[0][0] == "_rpc_forwardDidClose:"


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.send_report_identifier(None),
        lambda s: s.send_get_connected_applications(None),
        lambda s: s.send_forward_get_listing("CONN", None),
        lambda s: s.send_forward_indicate_web_view(None, "PID:1", 1, True),
        lambda s: s.send_forward_socket_setup("CONN", "PID:1", 1, None, False),
        lambda s: s.send_forward_socket_data("CONN", "PID:1", 1, "SENDER", None),
        lambda s: s.send_forward_did_close("CONN", None, 1, "SENDER"),
    ],
)
def test_null_params_raise_and_send_nothing(call):
    service, inspector = make_service()
    with pytest.raises(ValueError):
        call(service)
    assert inspector.sent == []


def test_report_current_state_sets_state():
    service, _ = make_service(
        msg("_rpc_reportCurrentState:", WIRAutomationAvailabilityKey="WIRAutomationAvailabilityAvailable")
    )
    service.receive_and_process()
    assert service.state == AutomationAvailability.AVAILABLE


def test_connected_application_list_from_plist_bytes():
    raw = plistlib.dumps(
        msg(
            "_rpc_reportConnectedApplicationList:",
            WIRApplicationDictionaryKey={
                "PID:77": {
                    "WIRApplicationIdentifierKey": "PID:77",
                    "WIRApplicationBundleIdentifierKey": "com.example.app",
                    "WIRApplicationNameKey": "Example",
                },
                "broken": {"WIRApplicationNameKey": "NoId"},
            },
        ),
        fmt=plistlib.FMT_BINARY,
    )
    service, _ = make_service(raw)
    service.receive_and_process()
    assert list(service.connected_application) == ["PID:77"]
    app = service.connected_application["PID:77"]
    assert app.pid == 77
    assert app.bundle == "com.example.app"
    assert app.name == "Example"


def test_application_connected_and_updated():
    service, _ = make_service(
        msg("_rpc_applicationConnected:", WIRApplicationIdentifierKey="PID:5", WIRApplicationNameKey="One"),
        msg("_rpc_applicationUpdated:", WIRApplicationIdentifierKey="PID:5", WIRApplicationNameKey="Two"),
    )
    service.receive_and_process()
    assert service.connected_application["PID:5"].name == "One"
    service.receive_and_process()
    assert service.connected_application["PID:5"].name == "Two"
    assert len(service.connected_application) == 1


def test_application_connected_without_id_raises():
    service, _ = make_service(msg("_rpc_applicationConnected:", WIRApplicationNameKey="One"))
    with pytest.raises(BridgeError, match="parse app is fail"):
        service.receive_and_process()


def test_sent_listing_stores_each_page():
    service, _ = make_service(
        msg(
            "_rpc_applicationSentListing:",
            WIRApplicationIdentifierKey="PID:5",
            WIRListingKey={
                "1": {"WIRPageIdentifierKey": 1, "WIRTitleKey": "First"},
                "2": {"WIRPageIdentifierKey": 2, "WIRTitleKey": "Second"},
            },
        )
    )
    service.receive_and_process()
    pages = service.application_pages["PID:5"]
    assert pages["1"].title == "First"
    assert pages["2"].title == "Second"
    assert pages["2"].page_id == 2


def test_empty_listing_is_not_stored():
    service, _ = make_service()
    service.receive_application_sent_listing(WIRArgument(application_identifier="PID:5", listing={}))
    assert service.application_pages == {}


def test_listing_without_app_id_raises():
    service, _ = make_service()
    with pytest.raises(BridgeError, match="WIRApplicationIdentifierKey"):
        service.receive_application_sent_listing(WIRArgument(listing={}))


def test_sent_data_goes_to_event_queue():
    service, _ = make_service(msg("_rpc_applicationSentData:", WIRMessageDataKey=b"payload"))
    service.receive_and_process()
    assert service.wir_event.get_nowait() == b"payload"


def test_sent_data_without_data_raises():
    service, _ = make_service()
    with pytest.raises(BridgeError, match="WIRMessageDataKey"):
        service.receive_application_sent_data(WIRArgument())


def test_ignored_selectors_change_nothing():
    service, _ = make_service(
        msg("_rpc_reportSetup:"),
        msg("_rpc_reportConnectedDriverList:"),
        msg("_rpc_applicationDisconnected:", WIRApplicationIdentifierKey="PID:5"),
    )
    for _ in range(3):
        service.receive_and_process()
    assert service.connected_application == {}
    assert service.application_pages == {}


def test_unknown_selector_raises():
    service, _ = make_service(msg("_rpc_somethingElse:"))
    with pytest.raises(BridgeError, match="not the selector:_rpc_somethingElse:"):
        service.receive_and_process()


def test_report_current_state_requires_ready_key():
    service, _ = make_service()
    with pytest.raises(BridgeError, match="WIRIsApplicationReadyKey"):
        service.receive_report_current_state(WIRArgument())
    result = service.receive_report_current_state(
        WIRArgument(is_application_ready=True, automation_availability="WIRAutomationAvailabilityNotAvailable")
    )
    assert result == AutomationAvailability.NOT_AVAILABLE
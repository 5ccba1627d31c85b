# sibridge

Building blocks for tools that talk to iOS devices. The package covers:

- result models that render as plain text, compact JSON or indented JSON;
- the WebKit remote inspector message model and RPC handling;
- a service that relays DevTools traffic to an inspectable page;
- helpers for developer disk images, device versions and saved remote devices.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### Errors and output

- `sibridge.errors` provides `BridgeError` and `new_error(kind, msg, cause)`.
  - `new_error` builds the standard message text. That text includes the hint
    to mount the developer disk image.
  - The error kinds are the constants `ERR_CONNECT`, `ERR_READING_MSG`,
    `ERR_SEND_COMMAND`, `ERR_MISSING_ARGS` and `ERR_UNKNOWN`.
- `sibridge.formatting` provides the `ResultData` protocol,
  `format_result(data, is_format, is_json)` and `to_json_text(obj, indent, sort_keys)`.
  - `format_result` returns `to_format()` if `is_format` is set, otherwise
    `to_json()` if `is_json` is set, otherwise `to_string()`.
  - `to_json_text` writes compact or tab-indented JSON with HTML-safe escaping.
- `sibridge.logs` provides logging setup.
  - `init_logger(level)` sends the `sibridge` logger to stderr. Each line has
    the form `[level]: YYYY-MM-DD HH:MM:SS - message`.
  - `set_log_level(level)` takes one of panic, fatal, error, warn, info, debug
    or trace. Any other name means info.
  - `StdLogWriter` is a file-like sink. It strips a leading `YYYY/MM/DD HH:MM:SS`
    timestamp and the trailing newline from each write, then logs the text at
    info level with the prefix `[gousb]`.

### Result models

All of these have `to_string()`, `to_json()` and `to_format()`.

- `sibridge.application` provides `Application` and `AppList`.
  - `Application.from_bundle_info` builds an application from a dictionary
    keyed by `CFBundle*` attribute names.
- `sibridge.battery` provides `Battery` and `BatteryList`.
  - `Battery.analyze(data)` reads a diagnostics reply of the form
    `Diagnostics.IORegistry`. It raises `ValueError` if the reply does not
    have that form.
- `sibridge.network` provides `NetworkInfo`.
- `sibridge.perfdata` provides `PerfData`, which holds one performance sample
  as raw JSON bytes.
- `sibridge.devices` provides `Device`, `DeviceList`, `DeviceDetail`, `DevMode`
  and `RemoteInfo`, plus two functions.
  - `get_detail(device)` reads all lockdown values from any object that has
    `get_value(domain, key)`.
  - `parse_remote_info(text)` reads the saved remote-device JSON.
  - `DevMode.can_check()` tells whether the product version is 16 or later.
- `sibridge.generation` provides `generation_name(product_type)`. It returns
  the marketing name for a product type, for example `"iPhone12,1"` gives
  `"iPhone 11"`. Unknown product types give `""`.

### Web Inspector

- `sibridge.wir` holds the message model.
  - Enums: `Selector`, `PageType` and `AutomationAvailability`.
  - `WIRArgument` and `WebInspectorPage`, each with `to_plist()`.
  - `parse_wir_message(raw)` accepts a plist dictionary or plist bytes.
  - `WebInspectorApplication`.
  - The DevTools listing items `UrlItem` and `BundleItem`, each with `to_dict()`.
- `sibridge.rpc` provides `RPCService`, built over an inspector object that
  has `send_webkit_msg(selector, argument)` and `receive_webkit_msg()`.
  - It sends the `_rpc_*` requests.
  - `receive_and_process()` applies incoming messages to
    `connected_application` and `application_pages`.
  - Page data is queued on `wir_event`.
  - `key_to_pid(key)` takes the process id out of a key such as `PID:123`.
- `sibridge.debug_service` provides `WebkitDebugService`.
  - It opens the inspector of a device object that has `web_inspector_service()`.
  - `get_open_pages(port)` lists the open pages.
  - `start_cdp(...)` attaches a DevTools connection, meaning an object with
    `send(data)` and `receive()`.
  - `receive_protocol_data()` passes one message from the page to DevTools,
    and `receive_message_tool()` passes one message from DevTools to the page.
  - `set_protocol_debug(flag)` logs every message passed.

### Device support

`sibridge.support` provides the following:

- `unzip(zip_file, dest_dir, version)` and `download_zip(url, version, base_dir)`
  unpack developer disk images.
- `load_develop_image(version, base_dir)` tries each mirror listed in the
  `SIB_DISK_IMAGE_MIRRORS` environment variable, which is separated by commas
  or whitespace. It raises `BridgeError` when no mirror works.
- `check_mount(device, base_dir)` mounts the image when the device has none
  mounted.
- `get_device_version(device)` returns the major.minor product version.
- `get_application_pid(device, app_name)` returns the process id, or -1.
- `read_remote_info(path)` reads the saved remote devices. The default path is
  `.sib/connect.txt`.

## Example

```python
from sibridge.application import Application, AppList
from sibridge.formatting import format_result

apps = AppList([Application(name="Demo", bundle_id="com.example.demo",
                            version="1", short_version="1.0")])
print(format_result(apps, is_format=False, is_json=False))
# Demo com.example.demo 1 1.0
```

## What it does not do

- **No device transport.** The package does not find or connect to devices
  over USB or the network. Every function that needs a device expects the
  caller to pass an object with the methods named above.
- **No command-line program.** There is nothing to take screenshots, stream
  the syslog or run test bundles.
- **No HTTP or websocket server.** Nothing serves the DevTools page listing or
  accepts websocket connections. `WebkitDebugService` only relays messages
  over connection objects the caller supplies.
- **No Chrome DevTools protocol adaptation.** Messages pass through unchanged.
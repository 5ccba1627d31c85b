"""Developer disk images, device version queries and saved remote devices."""

from __future__ import annotations

import os
import posixpath
import re
import shutil
import urllib.request
import zipfile
from pathlib import Path
from typing import Any, Protocol

from sibridge.devices import RemoteInfo, parse_remote_info
from sibridge.errors import ERR_SEND_COMMAND, BridgeError, new_error

DOWNLOAD_TIMEOUT = 30.0
BASE_DIR = ".sib"
REMOTE_INFO_FILE = os.path.join(BASE_DIR, "connect.txt")
MIRRORS_ENV = "SIB_DISK_IMAGE_MIRRORS"
DISK_IMAGE = "DeveloperDiskImage.dmg"
DISK_IMAGE_SIGNATURE = DISK_IMAGE + ".signature"
VERSION_ALIASES = {"12.5": "12.4"}
_CHUNK = 32 * 1024


class SupportDevice(Protocol):
    """What the helpers here need from a connected device."""

    def get_value(self, domain: str, key: str) -> Any: ...

    def images(self) -> list[Any]: ...

    def mount_developer_disk_image(self, image: str, signature: str) -> None: ...

    def app_running_processes(self) -> list[Any]: ...


def unzip(zip_file: str | os.PathLike[str], dest_dir: str | os.PathLike[str], version: str) -> None:
    """Extract an image archive flat into dest_dir/version."""
    dest = Path(dest_dir)
    with zipfile.ZipFile(zip_file) as archive:
        for info in archive.infolist():
            if info.filename.startswith(version) and info.is_dir():
                target = dest / version
            else:
                target = dest / version / posixpath.basename(info.filename.rstrip("/"))
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as source, open(target, "wb") as out:
                shutil.copyfileobj(source, out)
            mode = (info.external_attr >> 16) & 0o777
            if mode:
                target.chmod(mode)


def download_zip(url: str, version: str, base_dir: str | os.PathLike[str] = BASE_DIR) -> Path:
    """Fetch and unpack the disk image for version from a mirror, unless already present.

    Returns the absolute base directory.
    """
    remote_version = VERSION_ALIASES.get(version, version)
    base = Path(base_dir)
    base.mkdir(parents=True, exist_ok=True)
    archive = base / f"{version}.zip"
    if not archive.exists():
        source = f"{url}/iOSDeviceSupport/raw/master/iOSDeviceSupport/{remote_version}.zip"
        try:
            with urllib.request.urlopen(source, timeout=DOWNLOAD_TIMEOUT) as response:
                with open(archive, "wb") as out:
                    shutil.copyfileobj(response, out, _CHUNK)
            unzip(archive, base, version)
        except BaseException:
            archive.unlink(missing_ok=True)
            raise
    return base.resolve()


def _mirror_list() -> list[str]:
    return [m for m in re.split(r"[,\s]+", os.environ.get(MIRRORS_ENV, "")) if m]


def load_develop_image(version: str, base_dir: str | os.PathLike[str] = BASE_DIR) -> Path:
    """Try each mirror named in SIB_DISK_IMAGE_MIRRORS in turn.

    Raises BridgeError when none of them yields the image.
    """
    for url in _mirror_list():
        try:
            return download_zip(url, version, base_dir)
        except (OSError, ValueError, zipfile.BadZipFile):
            continue
    raise BridgeError("download develop disk image fail")


def get_device_version(device: SupportDevice) -> str:
    """Major.minor product version of the device, or '' if it has no minor part."""
    try:
        value = device.get_value("", "ProductVersion")
    except Exception as exc:
        raise new_error(ERR_SEND_COMMAND, "get value", exc) from exc
    if not isinstance(value, str):
        raise new_error(ERR_SEND_COMMAND, "get value", TypeError("ProductVersion is not a string"))
    parts = value.split(".")
    return f"{parts[0]}.{parts[1]}" if len(parts) >= 2 else ""


def check_mount(device: SupportDevice, base_dir: str | os.PathLike[str] = BASE_DIR) -> bool:
    """Mount the developer disk image if none is mounted; True if it mounted one."""
    try:
        signatures = device.images()
    except Exception:
        signatures = None
    if signatures:
        return False
    print("try to mount developer disk image...")
    version = get_device_version(device)
    root = load_develop_image(version, base_dir)
    try:
        device.mount_developer_disk_image(
            f"{root}/{version}/{DISK_IMAGE}", f"{root}/{version}/{DISK_IMAGE_SIGNATURE}"
        )
    except Exception as exc:
        raise BridgeError(f"mount develop disk image fail: {exc}") from exc
    return True


def get_application_pid(device: SupportDevice, app_name: str) -> int:
    """Process id of the running application with this name, or -1."""
    for process in device.app_running_processes():
        if process.name == app_name:
            return process.pid
    return -1


def read_remote_info(path: str | os.PathLike[str] = REMOTE_INFO_FILE) -> dict[str, RemoteInfo]:
    """Read the saved remote device addresses."""
    return parse_remote_info(Path(path).read_bytes())
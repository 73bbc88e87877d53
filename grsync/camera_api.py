import logging
from typing import List, Optional

import requests

from grsync.config import DEVICE, GR_HOST, GR_PROPS, PHOTO_LIST_URI, SHUTDOWN_URI, GRSyncError

logger = logging.getLogger(__name__)


class CameraError(GRSyncError):
    pass


class CameraUnreachableError(CameraError):
    pass


class CameraResponseError(CameraError):
    """
    The camera answered, but with an application error code.
    """

    def __init__(self, code, message):
        self.code = code
        self.message = message
        super().__init__(f"Error code: {code}, Error message: {message}")


def _url(host: str, uri: str) -> str:
    return host.rstrip("/") + "/" + uri.lstrip("/")


def _check_err_code(data: dict):
    if data.get("errCode") != 200:
        raise CameraResponseError(data.get("errCode"), data.get("errMsg"))


def is_connected(host: str = GR_HOST) -> bool:
    """
    Lightweight status probe. Any network error means "not connected yet".
    """
    try:
        resp = requests.get(_url(host, GR_PROPS))
    except requests.RequestException as e:
        logger.debug("Status probe failed: %s", e)
        return False
    return resp.ok


def get_props(host: str = GR_HOST) -> dict:
    """
    Fetch the device props (battery level among others).
    """
    try:
        resp = requests.get(_url(host, GR_PROPS))
        props = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise CameraUnreachableError(f"Unable to fetch device props from {DEVICE}") from e
    _check_err_code(props)
    return props


def get_battery_level(host: str = GR_HOST) -> float:
    props = get_props(host)
    try:
        return float(props["battery"])
    except (KeyError, TypeError, ValueError) as e:
        raise CameraResponseError(props.get("errCode"), "missing battery level") from e


def list_photo_dirs(host: str = GR_HOST) -> List[dict]:
    """
    Fetch the photo tree: a list of {"name": <dir>, "files": [<file>, ...]}
    in the order the camera returns them.
    """
    try:
        resp = requests.get(_url(host, PHOTO_LIST_URI))
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise CameraUnreachableError(f"Unable to fetch photo list from {DEVICE}") from e
    _check_err_code(data)
    return data.get("dirs", [])


def fetch_photo(host: str, photo_uri: str) -> Optional[bytes]:
    """
    Download one photo ("dir/file"). Returns the raw bytes or None on error.
    """
    url = _url(host, PHOTO_LIST_URI) + "/" + photo_uri
    try:
        resp = requests.get(url)
    except requests.RequestException as e:
        logger.warning("Download failed for %s: %s", photo_uri, e)
        return None
    if resp.status_code != 200:
        logger.warning("Download failed for %s: HTTP %s", photo_uri, resp.status_code)
        return None
    return resp.content


def shutdown(host: str = GR_HOST) -> bool:
    """
    Ask the camera to end the WiFi session. Best effort.
    """
    try:
        resp = requests.post(_url(host, SHUTDOWN_URI), json={})
    except requests.RequestException as e:
        logger.warning("Failed to shutdown %s: %s", DEVICE, e)
        return False
    if not resp.ok:
        logger.warning("Failed to shutdown %s: HTTP %s", DEVICE, resp.status_code)
        return False
    return True

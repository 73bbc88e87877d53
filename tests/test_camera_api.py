"""Tests for the camera HTTP wrappers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from grsync import camera_api as api

HOST = "http://camera/"


def make_response(status_code: int = 200, json_data=None, content: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.content = content
    if json_data is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_data
    return resp


class TestIsConnected:
    """Tests for the status probe."""

    def test_ok(self) -> None:
        with patch("grsync.camera_api.requests.get", return_value=make_response(200)) as get:
            assert api.is_connected(HOST) is True
        get.assert_called_once_with("http://camera/v1/props")

    def test_http_error(self) -> None:
        with patch("grsync.camera_api.requests.get", return_value=make_response(503)):
            assert api.is_connected(HOST) is False

    def test_network_error_swallowed(self) -> None:
        """Network errors just mean "not connected yet"."""
        with patch("grsync.camera_api.requests.get", side_effect=requests.ConnectionError()):
            assert api.is_connected(HOST) is False


class TestProps:
    """Tests for props and battery level."""

    def test_battery_level(self) -> None:
        resp = make_response(json_data={"errCode": 200, "errMsg": "OK", "battery": 72})
        with patch("grsync.camera_api.requests.get", return_value=resp):
            assert api.get_battery_level(HOST) == 72

    def test_battery_level_as_decimal_string(self) -> None:
        resp = make_response(json_data={"errCode": 200, "errMsg": "OK", "battery": "15.0"})
        with patch("grsync.camera_api.requests.get", return_value=resp):
            assert api.get_battery_level(HOST) == 15.0

    def test_error_code(self) -> None:
        """Should raise with the camera's code and message."""
        resp = make_response(json_data={"errCode": 503, "errMsg": "Busy"})
        with patch("grsync.camera_api.requests.get", return_value=resp):
            with pytest.raises(api.CameraResponseError) as exc:
                api.get_props(HOST)
        assert exc.value.code == 503
        assert exc.value.message == "Busy"

    def test_unreachable(self) -> None:
        with patch("grsync.camera_api.requests.get", side_effect=requests.ConnectionError()):
            with pytest.raises(api.CameraUnreachableError):
                api.get_props(HOST)


class TestListPhotoDirs:
    """Tests for the photo tree listing."""

    def test_returns_dirs(self) -> None:
        dirs = [{"name": "100RICOH", "files": ["R0000001.JPG"]}]
        resp = make_response(json_data={"errCode": 200, "errMsg": "OK", "dirs": dirs})
        with patch("grsync.camera_api.requests.get", return_value=resp) as get:
            assert api.list_photo_dirs(HOST) == dirs
        get.assert_called_once_with("http://camera/v1/photos")

    def test_error_code_is_fatal(self) -> None:
        resp = make_response(json_data={"errCode": 404, "errMsg": "Not found"})
        with patch("grsync.camera_api.requests.get", return_value=resp):
            with pytest.raises(api.CameraResponseError):
                api.list_photo_dirs(HOST)

    def test_bad_json_is_fatal(self) -> None:
        with patch("grsync.camera_api.requests.get", return_value=make_response(200)):
            with pytest.raises(api.CameraUnreachableError):
                api.list_photo_dirs(HOST)


class TestFetchPhoto:
    """Tests for downloading a single photo."""

    def test_returns_bytes(self) -> None:
        resp = make_response(200, content=b"jpegdata")
        with patch("grsync.camera_api.requests.get", return_value=resp) as get:
            assert api.fetch_photo(HOST, "100RICOH/R0000001.JPG") == b"jpegdata"
        get.assert_called_once_with("http://camera/v1/photos/100RICOH/R0000001.JPG")

    def test_http_error_returns_none(self) -> None:
        with patch("grsync.camera_api.requests.get", return_value=make_response(404)):
            assert api.fetch_photo(HOST, "100RICOH/R0000001.JPG") is None

    def test_network_error_returns_none(self) -> None:
        with patch("grsync.camera_api.requests.get", side_effect=requests.Timeout()):
            assert api.fetch_photo(HOST, "100RICOH/R0000001.JPG") is None


class TestShutdown:
    """Tests for the best-effort session end."""

    def test_posts_empty_body(self) -> None:
        with patch("grsync.camera_api.requests.post", return_value=make_response(200)) as post:
            assert api.shutdown(HOST) is True
        post.assert_called_once_with("http://camera/v1/device/finish", json={})

    def test_failure_is_not_raised(self) -> None:
        with patch("grsync.camera_api.requests.post", side_effect=requests.ConnectionError()):
            assert api.shutdown(HOST) is False

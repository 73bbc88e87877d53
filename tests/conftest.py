"""Shared fixtures: an in-memory stand-in for the camera's HTTP API."""

from pathlib import Path

import pytest

from grsync import camera_api
from grsync.config import ConfigStore


class FakeCamera:
    """Records every call the sync makes against the camera."""

    def __init__(self):
        self.dirs = []
        self.battery = 80
        self.connected_after = 1
        self.fail = set()
        self.shutdown_ok = True
        self.interrupt = False
        self.calls = []
        self.fetched = []

    def add_photos(self, *uris: str):
        for uri in uris:
            dir_name, fname = uri.split("/")
            for d in self.dirs:
                if d["name"] == dir_name:
                    d["files"].append(fname)
                    break
            else:
                self.dirs.append({"name": dir_name, "files": [fname]})

    def is_connected(self, host):
        self.calls.append("status")
        if self.interrupt:
            raise KeyboardInterrupt
        return self.calls.count("status") >= self.connected_after

    def get_battery_level(self, host):
        self.calls.append("battery")
        return self.battery

    def list_photo_dirs(self, host):
        self.calls.append("list")
        return self.dirs

    def fetch_photo(self, host, photo_uri):
        self.calls.append("fetch")
        self.fetched.append(photo_uri)
        if photo_uri in self.fail:
            return None
        return b"jpeg:" + photo_uri.encode()

    def shutdown(self, host):
        self.calls.append("shutdown")
        return self.shutdown_ok


@pytest.fixture
def camera(monkeypatch) -> FakeCamera:
    fake = FakeCamera()
    for name in ("is_connected", "get_battery_level", "list_photo_dirs", "fetch_photo", "shutdown"):
        monkeypatch.setattr(camera_api, name, getattr(fake, name))
    return fake


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    path = tmp_path / "photos"
    path.mkdir()
    return path


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    return ConfigStore(tmp_path / ".grrc").load()

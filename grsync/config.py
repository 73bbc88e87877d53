from pathlib import Path
import json
import logging
import os

logger = logging.getLogger(__name__)

# === CAMERA CONFIGURATION ===
GR_HOST = "http://192.168.0.1/"
GR_PROPS = "v1/props"
PHOTO_LIST_URI = "v1/photos"
SHUTDOWN_URI = "v1/device/finish"

DEVICE = "Ricoh GR IIIx"

MIN_BATTERY_LEVEL = 15
POLL_INTERVAL = 1.0  # seconds between connectivity checks

# === PATH CONFIGURATION ===
CONFIG_FILE = Path.home() / ".grrc"

# === CLI ARGUMENT PATTERNS ===
DIR_PATTERN = r"^[1-9]\d\dRICOH$"
FILE_PATTERN = r"^R0\d{6}\.JPG$"


class GRSyncError(Exception):
    """Base class for errors that abort a sync run."""


class ConfigError(GRSyncError):
    pass


class ConfigStore:
    """
    Key-value view over the JSON config file.
    Every set() rewrites the whole file so the checkpoint is durable
    as soon as it is recorded.
    """

    DEST_DIR_KEY = "photoDestDir"
    CHECKPOINT_KEY = "lastImageCopied"

    def __init__(self, path: Path = CONFIG_FILE):
        self.path = Path(path)
        self.data: dict = {}

    def load(self) -> "ConfigStore":
        """
        Read the config file. Missing or corrupt files give an empty config.
        """
        if self.path.exists():
            try:
                with open(self.path, "r") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Cannot read config %s (%s), starting fresh.", self.path, e)
                data = {}
            self.data = data if isinstance(data, dict) else {}
        else:
            self.data = {}
        return self

    def save(self):
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(self.data, f, indent=2)
            os.replace(tmp_path, self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def get(self, key: str, default=None):
        return self.data.get(key, default)

    def set(self, key: str, value):
        self.data[key] = value
        self.save()

    @property
    def photo_dest_dir(self):
        return self.get(self.DEST_DIR_KEY)

    @photo_dest_dir.setter
    def photo_dest_dir(self, value: str):
        self.set(self.DEST_DIR_KEY, value)

    @property
    def last_image_copied(self):
        return self.get(self.CHECKPOINT_KEY)

    @last_image_copied.setter
    def last_image_copied(self, value: str):
        self.set(self.CHECKPOINT_KEY, value)


def ensure_dest_dir(store: ConfigStore, prompt=input) -> Path:
    """
    Return the photo destination directory, asking the user for it
    on first run and caching the answer in the config file.
    """
    dest = store.photo_dest_dir
    if not dest:
        try:
            answer = prompt("Enter the destination directory for photos: ").strip()
        except EOFError:
            raise ConfigError("No destination directory given.") from None
        if not answer:
            raise ConfigError("No destination directory given.")
        dest = str(Path(answer).expanduser().resolve())
        store.photo_dest_dir = dest
    return Path(dest)

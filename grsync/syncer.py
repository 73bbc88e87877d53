import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from grsync import camera_api as api
from grsync.config import DEVICE, GR_HOST, MIN_BATTERY_LEVEL, ConfigStore, GRSyncError
from grsync.local_store import ensure_local_dir, list_local_files, write_photo
from grsync.reconcile import StartMarker, build_worklist, flatten_photo_dirs
from grsync.retry import RetryPolicy, wait_for_camera

logger = logging.getLogger(__name__)


class LowBatteryError(GRSyncError):
    pass


@dataclass
class SyncResult:
    downloaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.downloaded) + len(self.skipped) + len(self.failed)


class PhotoSync:
    """
    Orchestrates one sync run against the camera:
     - wait for WiFi connectivity
     - battery check
     - list remote photos (creating local folders)
     - pick the worklist (full / checkpoint / start marker)
     - download what is missing, checkpointing after each file
     - tell the camera we're done
    """

    def __init__(self, config: ConfigStore, dest_dir: Path, host: str = GR_HOST,
                 show_progress: bool = True):
        self.config = config
        self.dest_dir = Path(dest_dir)
        self.host = host
        self.show_progress = show_progress

    # -----------------------------
    # 1) CAMERA SESSION
    # -----------------------------

    def wait_for_camera(self, policy: Optional[RetryPolicy] = None) -> int:
        print("Please connect to your camera's WiFi network.")
        print("Press Ctrl+C to cancel at any time.")
        attempts = wait_for_camera(lambda: api.is_connected(self.host), policy)
        print("Successfully connected to the camera!")
        return attempts

    def check_battery(self) -> float:
        level = api.get_battery_level(self.host)
        if level < MIN_BATTERY_LEVEL:
            raise LowBatteryError(
                f"Your battery level is less than {MIN_BATTERY_LEVEL}%, "
                "please charge it before sync operation!"
            )
        return level

    def shutdown_camera(self) -> bool:
        return api.shutdown(self.host)

    # -----------------------------
    # 2) REMOTE vs. LOCAL
    # -----------------------------

    def gather_photo_list(self) -> List[str]:
        """
        Fetch the camera's photo tree and mirror its directories locally.
        """
        print(f"Fetching photo list from {DEVICE} ...")
        photo_dirs = api.list_photo_dirs(self.host)
        for d in photo_dirs:
            ensure_local_dir(self.dest_dir, d["name"])
        return flatten_photo_dirs(photo_dirs)

    def download_photos(self, full: bool = False,
                        marker: Optional[StartMarker] = None) -> SyncResult:
        photo_list = self.gather_photo_list()
        local_files = list_local_files(self.dest_dir)

        worklist = build_worklist(
            photo_list,
            full=full,
            checkpoint=self.config.last_image_copied,
            marker=marker,
        )

        print("Start to download photos ...")
        result = SyncResult()
        with tqdm(total=len(worklist), desc="Downloading", unit="photo",
                  disable=not self.show_progress) as bar:
            for photo_uri in worklist:
                if self._sync_one(photo_uri, local_files, result):
                    bar.update(1)

        print("\nAll photos are downloaded.")
        print(f"Downloaded {len(result.downloaded)}, skipped {len(result.skipped)}, "
              f"failed {len(result.failed)}.")
        return result

    def _sync_one(self, photo_uri: str, local_files, result: SyncResult) -> bool:
        """
        Skip or fetch a single photo. Returns False only on failure.
        """
        if photo_uri in local_files:
            logger.debug("Skipping %s, already present locally", photo_uri)
            result.skipped.append(photo_uri)
            return True

        content = api.fetch_photo(self.host, photo_uri)
        if content is None:
            result.failed.append(photo_uri)
            return False

        try:
            write_photo(self.dest_dir, photo_uri, content)
        except OSError as e:
            logger.warning("Cannot write %s: %s", photo_uri, e)
            result.failed.append(photo_uri)
            return False

        # Only record the checkpoint once the bytes are on disk.
        self.config.last_image_copied = photo_uri
        logger.debug("Downloaded %s", photo_uri)
        result.downloaded.append(photo_uri)
        return True

    # -----------------------------
    # 3) FULL RUN
    # -----------------------------

    def run(self, full: bool = False, marker: Optional[StartMarker] = None,
            policy: Optional[RetryPolicy] = None) -> SyncResult:
        self.wait_for_camera(policy)
        self.check_battery()
        result = self.download_photos(full=full, marker=marker)
        self.shutdown_camera()
        return result

import logging
from dataclasses import dataclass
from typing import List, Optional

from grsync.config import DEVICE, GRSyncError

logger = logging.getLogger(__name__)


class StartMarkerNotFoundError(GRSyncError):
    pass


@dataclass(frozen=True)
class StartMarker:
    """
    Explicit first photo to sync, e.g. 100RICOH / R0000005.JPG.
    """

    directory: str
    filename: str

    @property
    def uri(self) -> str:
        return f"{self.directory}/{self.filename}"


def flatten_photo_dirs(photo_dirs: List[dict]) -> List[str]:
    """
    Turn the camera's [{"name", "files"}] tree into ordered "dir/file" ids.
    """
    photo_list = []
    for d in photo_dirs:
        for fname in d.get("files", []):
            photo_list.append(f"{d['name']}/{fname}")
    return photo_list


def select_start_index(
    photo_list: List[str],
    full: bool = False,
    checkpoint: Optional[str] = None,
    marker: Optional[StartMarker] = None,
) -> int:
    """
    Decide where in photo_list this run starts.

    Precedence:
     1) full sync => 0
     2) stored checkpoint => position after it (0 if the camera no longer has it)
     3) explicit start marker => its position (fatal if absent)
     4) nothing given => 0
    """
    if full:
        return 0

    if checkpoint:
        if marker is not None:
            logger.warning(
                "Stored checkpoint %s takes precedence over start marker %s", checkpoint, marker.uri
            )
        try:
            return photo_list.index(checkpoint) + 1
        except ValueError:
            logger.warning(
                "Last copied image %s not found. Starting from the beginning.", checkpoint
            )
            return 0

    if marker is not None:
        try:
            return photo_list.index(marker.uri)
        except ValueError:
            raise StartMarkerNotFoundError(f"Unable to find {marker.uri} on {DEVICE}") from None

    return 0


def build_worklist(
    photo_list: List[str],
    full: bool = False,
    checkpoint: Optional[str] = None,
    marker: Optional[StartMarker] = None,
) -> List[str]:
    start = select_start_index(photo_list, full=full, checkpoint=checkpoint, marker=marker)
    return photo_list[start:]

"""
Connectivity polling.

The camera only answers once the user has joined its WiFi network, so the
poller keeps probing the status endpoint at a fixed interval. By default it
never gives up; a bound and a cancellation event can be supplied.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from grsync.camera_api import CameraUnreachableError
from grsync.config import DEVICE, POLL_INTERVAL, GRSyncError

logger = logging.getLogger(__name__)


class PollCancelled(GRSyncError):
    pass


@dataclass
class RetryPolicy:
    interval: float = POLL_INTERVAL
    max_attempts: Optional[int] = None
    cancel_event: Optional[threading.Event] = None

    @classmethod
    def with_timeout(cls, seconds: Optional[float], interval: float = POLL_INTERVAL) -> "RetryPolicy":
        """
        Build a policy that gives up after roughly `seconds` of polling.
        """
        if seconds is None:
            return cls(interval=interval)
        return cls(interval=interval, max_attempts=max(1, math.ceil(seconds / interval)))

    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def pause(self, sleep: Callable[[float], None]):
        # An event wait returns early when cancelled.
        if self.cancel_event is not None:
            self.cancel_event.wait(self.interval)
        else:
            sleep(self.interval)


def wait_for_camera(
    check: Callable[[], bool],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Call `check` until it returns True. Returns the number of attempts made.
    """
    policy = policy or RetryPolicy()
    attempts = 0
    while True:
        if policy.cancelled():
            raise PollCancelled("Connection polling cancelled.")
        attempts += 1
        if check():
            logger.debug("Camera reachable after %d attempt(s)", attempts)
            return attempts
        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise CameraUnreachableError(
                f"{DEVICE} not reachable after {attempts} attempt(s)"
            )
        logger.debug("Camera not reachable yet (attempt %d)", attempts)
        policy.pause(sleep)

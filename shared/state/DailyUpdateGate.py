from datetime import datetime
from typing import Callable

from pytz import timezone

from shared.helper.HelperConfig import HelperConfig
from shared.state.StateStore import StateStore

LAST_STATUS_UPDATE_KEY = "lastStatusUpdateDate"


class DailyUpdateGate:
    """
    At-most-once-per-day gate for the automatic status refresh.

    The marker holds the local calendar day (ISO date in TIMEZONE) of the last trigger.
    Manual recomputes do not go through this gate.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        state_store: StateStore,
        now: Callable[[], datetime] | None = None,
    ):
        self.logging = helper_config.get_logger()
        self._state_store = state_store
        self._tz = timezone(helper_config.get_timezone_name())
        self._now = now or (lambda: datetime.now(self._tz))

    def get_today(self) -> str:
        """
        Returns today's date in the configured timezone, e.g. "2026-10-19".
        """
        now = self._now()
        if now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now.date().isoformat()

    def get_last_update(self) -> str | None:
        return self._state_store.get(LAST_STATUS_UPDATE_KEY)

    def should_update(self) -> bool:
        """
        Returns True once per calendar day and records today as the new marker.

        If the marker cannot be written the update is still due; the write is retried
        on the next call.

        Returns:
            bool: True if the marker was missing or from another day, False otherwise.
        """
        today = self.get_today()
        last_update = self.get_last_update()
        if last_update == today:
            return False

        try:
            self._state_store.set(LAST_STATUS_UPDATE_KEY, today)
        except OSError as e:
            self.logging.error("Could not persist daily status update marker: %s", e)
            return True
        self.logging.debug("Daily status update due (last: %s, today: %s)", last_update, today)
        return True

import logging
import threading

from core.compare_engine import compare_options
from core.errors import ComparisonInFlightError

logger = logging.getLogger(__name__)


class PreferenceState:
    """
    Editable working copy of the user's preferences.

    `committed` is the last set that produced a comparison. Edits never
    mutate either object; every update swaps in a new UserPreferences.
    """

    def __init__(self, committed):
        self.committed = committed
        self.working = committed
        self._in_flight = threading.Lock()

    @property
    def has_changes(self):
        return self.working.model_dump_json() != self.committed.model_dump_json()

    @property
    def is_refreshing(self):
        return self._in_flight.locked()

    @property
    def can_refresh(self):
        return self.has_changes and not self.is_refreshing

    def set_param(self, param_id, value):
        params = list(self.working.dynamic_params)
        for i, param in enumerate(params):
            if param.id == param_id:
                # re-validate so slider ranges and select options still hold
                params[i] = type(param).model_validate({**param.model_dump(), "value": value})
                break
        else:
            raise KeyError(param_id)

        self.working = self.working.model_copy(update={"dynamic_params": params})
        return self.working

    def set_priorities(self, priorities):
        self.working = self.working.model_copy(update={"priorities": list(priorities)})
        return self.working

    def discard_changes(self):
        self.working = self.committed
        return self.working

    def refresh(self, compare=compare_options):
        """Compare the working copy and commit it on success."""
        if not self._in_flight.acquire(blocking=False):
            raise ComparisonInFlightError("A comparison is already running")
        try:
            submitted = self.working
            logger.info("Refreshing comparison with %d parameters", len(submitted.dynamic_params))
            result = compare(submitted)
            self.committed = submitted
            return result
        finally:
            self._in_flight.release()

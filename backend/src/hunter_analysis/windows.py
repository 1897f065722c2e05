import logging
from collections import Counter
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from hunter_analysis.base import Window, calculate_uptime
from hunter_analysis.events import TargetKey

DEFAULT_PANDEMIC_FRACTION = 0.3


class OverlapPolicy(str, Enum):
    """What to do with an apply event for an effect we think is still active"""

    OVERWRITE = "overwrite"
    REFRESH = "refresh"
    IGNORE = "ignore"


class RefreshResult(NamedTuple):
    time_remaining: float
    new_duration: float
    is_early: bool


class EffectWindow:
    def __init__(self, effect_id, target: TargetKey, timestamp, base_duration):
        self.effect_id = effect_id
        self.target = target
        # Kept across refreshes, this is where the uptime window begins
        self.started_at = timestamp
        self.applied_at = timestamp
        self.base_duration = base_duration
        self.current_duration = base_duration

    @property
    def expires_at(self):
        return self.applied_at + self.current_duration

    def time_remaining(self, timestamp):
        return self.expires_at - timestamp

    def has_expired(self, timestamp):
        return timestamp - self.applied_at > self.current_duration

    def covered_window(self, end):
        return Window(self.started_at, max(self.started_at, min(end, self.expires_at)))

    def __repr__(self):
        return (
            f"<EffectWindow effect={self.effect_id} target={tuple(self.target)}"
            f" applied_at={self.applied_at} expires_at={self.expires_at}>"
        )


class EffectWindowTracker:
    """
    Tracks one timed effect (DoT, HoT or buff) across every target it's on.

    Expiry is lazy: there is no timer, windows whose duration ran out are
    reconciled the next time any event for this effect comes in.
    """

    def __init__(
        self,
        effect_id,
        pandemic_fraction=DEFAULT_PANDEMIC_FRACTION,
        overlap_policy=OverlapPolicy.OVERWRITE,
    ):
        self.effect_id = effect_id
        self.pandemic_fraction = pandemic_fraction
        self.overlap_policy = OverlapPolicy(overlap_policy)
        self._active: Dict[TargetKey, EffectWindow] = {}
        self._expired_targets = set()
        self._closed_windows: List[Window] = []
        self.times_refreshed = 0
        self.bad_refreshes = 0
        self.anomalies = Counter()
        self._num_timed_refreshes = 0
        self._accumulated_time_between_refresh = 0
        self._accumulated_percent_remaining = 0

    def _record_anomaly(self, kind, target, timestamp):
        self.anomalies[kind] += 1
        logging.debug(
            f"{kind} for effect {self.effect_id} on target {tuple(target)}"
            f" at {timestamp}"
        )

    def _open(self, target, timestamp, base_duration):
        window = EffectWindow(self.effect_id, target, timestamp, base_duration)
        self._active[target] = window
        self._expired_targets.discard(target)
        return window

    def _close(self, target, end):
        window = self._active.pop(target)
        self._closed_windows.append(window.covered_window(end))

    def _reconcile(self, timestamp):
        expired = [
            target
            for target, window in self._active.items()
            if window.has_expired(timestamp)
        ]
        for target in expired:
            self._close(target, timestamp)
            self._expired_targets.add(target)

    def apply(self, target: TargetKey, timestamp, base_duration) -> EffectWindow:
        self._reconcile(timestamp)

        if target in self._active:
            self._record_anomaly("apply_while_active", target, timestamp)

            if self.overlap_policy == OverlapPolicy.IGNORE:
                return self._active[target]
            if self.overlap_policy == OverlapPolicy.REFRESH:
                self.refresh(target, timestamp, base_duration)
                return self._active[target]
            self._close(target, timestamp)

        return self._open(target, timestamp, base_duration)

    def refresh(
        self, target: TargetKey, timestamp, base_duration, enhanced=False
    ) -> Optional[RefreshResult]:
        """
        Applies the pandemic rule: up to pandemic_fraction of the new duration
        carries over from the old one. Returns None if there was nothing live
        to refresh, in which case the refresh counts as a fresh application.
        """
        self._reconcile(timestamp)

        window = self._active.get(target)
        if window is None:
            # Lapsed a little before the game refreshed it, our duration drifted
            if target not in self._expired_targets:
                self._record_anomaly("refresh_without_window", target, timestamp)
            self._open(target, timestamp, base_duration)
            return None

        time_remaining = window.time_remaining(timestamp)
        pandemic_cap = base_duration * self.pandemic_fraction
        is_early = time_remaining > pandemic_cap and not enhanced
        new_duration = min(time_remaining, pandemic_cap) + base_duration

        self.times_refreshed += 1
        if is_early:
            self.bad_refreshes += 1

        # Enhanced refreshes are expected to happen early, don't let them skew timing
        if not enhanced and window.current_duration > 0:
            self._num_timed_refreshes += 1
            self._accumulated_time_between_refresh += (
                window.current_duration - time_remaining
            )
            self._accumulated_percent_remaining += (
                time_remaining / window.current_duration
            )

        window.applied_at = timestamp
        window.base_duration = base_duration
        window.current_duration = new_duration

        return RefreshResult(time_remaining, new_duration, is_early)

    def remove(self, target: TargetKey, timestamp):
        if target in self._active:
            self._close(target, timestamp)
        elif target in self._expired_targets:
            # Removal lagging behind a lazy expiry we've already processed
            self._expired_targets.discard(target)
        else:
            self._record_anomaly("remove_without_window", target, timestamp)

        # Sweep everything else that has run out by now
        expired = [
            other_target
            for other_target, window in self._active.items()
            if window.expires_at <= timestamp
        ]
        for other_target in expired:
            self._close(other_target, timestamp)
            self._expired_targets.add(other_target)

    def close_all(self, timestamp):
        """Closes every window still open, e.g. when the fight ends"""
        self._reconcile(timestamp)
        for target in list(self._active):
            self._close(target, timestamp)

    def is_active(self, target: TargetKey, timestamp):
        window = self._active.get(target)
        return (
            window is not None
            and window.started_at <= timestamp
            and not window.has_expired(timestamp)
        )

    def active_window(self, target: TargetKey) -> Optional[EffectWindow]:
        return self._active.get(target)

    @property
    def num_active(self):
        return len(self._active)

    def windows(self, end_time) -> List[Window]:
        # Anything still open is cut off at the end of the fight
        open_windows = [
            window.covered_window(end_time) for window in self._active.values()
        ]
        return self._closed_windows + open_windows

    def uptime(self, start_time, end_time):
        return calculate_uptime(self.windows(end_time), start_time, end_time)

    @property
    def average_time_between_refresh(self):
        if not self._num_timed_refreshes:
            return 0
        return self._accumulated_time_between_refresh / self._num_timed_refreshes

    @property
    def average_percent_remaining_on_refresh(self):
        if not self._num_timed_refreshes:
            return 0
        return self._accumulated_percent_remaining / self._num_timed_refreshes

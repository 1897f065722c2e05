from typing import Dict, Hashable, NamedTuple, Optional


class Match(NamedTuple):
    anchor_timestamp: int
    timestamp: int

    @property
    def delay(self):
        return self.timestamp - self.anchor_timestamp


class TimeWindowCorrelator:
    """
    Pairs an anchor event (e.g. a cast) with a later event (e.g. the damage
    it caused) if the second one happens within max_delay of the first.
    Only the latest anchor per key can be matched, and only once.
    """

    def __init__(self):
        self._anchors: Dict[Hashable, int] = {}
        self.superseded = 0
        self.matched = 0

    def record_anchor(self, key, timestamp) -> Optional[int]:
        """Returns the timestamp of the unmatched anchor this one replaces"""
        previous = self._anchors.get(key)
        if previous is not None:
            self.superseded += 1
        self._anchors[key] = timestamp
        return previous

    def has_anchor(self, key):
        return key in self._anchors

    def try_match(self, key, timestamp, max_delay) -> Optional[Match]:
        anchor = self._anchors.get(key)
        if anchor is None:
            return None

        if not 0 <= timestamp - anchor <= max_delay:
            return None

        del self._anchors[key]
        self.matched += 1
        return Match(anchor, timestamp)

    def discard(self, key):
        self._anchors.pop(key, None)


PROC_KEY = "proc"


class ProcWindow:
    def __init__(self, granted_at, expiry=None):
        self.granted_at = granted_at
        self.consumed = False
        self.consumed_at = None
        self.expires_at = granted_at + expiry if expiry is not None else None

    def has_expired(self, timestamp):
        return self.expires_at is not None and timestamp > self.expires_at

    def is_available(self, timestamp):
        return not self.consumed and not self.has_expired(timestamp)


class ProcTracker:
    """
    Tracks a proc buff waiting to be spent. Gaining a proc while holding an
    unspent one wastes the old one.
    """

    def __init__(self, expiry=None):
        self._expiry = expiry
        self._correlator = TimeWindowCorrelator()
        self._window: Optional[ProcWindow] = None
        self.procs = 0
        self.used = 0
        self.expired = 0
        self._accumulated_reaction_time = 0

    @property
    def wasted(self):
        return self._correlator.superseded

    def _reconcile(self, timestamp):
        if self._window and self._window.has_expired(timestamp):
            self.expired += 1
            self._correlator.discard(PROC_KEY)
            self._window = None

    def grant(self, timestamp) -> ProcWindow:
        self._reconcile(timestamp)
        self.procs += 1
        self._window = ProcWindow(timestamp, self._expiry)
        self._correlator.record_anchor(PROC_KEY, timestamp)
        return self._window

    def refresh(self, timestamp) -> ProcWindow:
        """Procced again while holding one, not counted as a new proc"""
        self._reconcile(timestamp)
        self._window = ProcWindow(timestamp, self._expiry)
        self._correlator.record_anchor(PROC_KEY, timestamp)
        return self._window

    def expire(self, timestamp):
        """The proc fell off without being used"""
        self._reconcile(timestamp)
        if self._window is None:
            return
        self.expired += 1
        self._correlator.discard(PROC_KEY)
        self._window = None

    def has_proc(self, timestamp):
        return self._window is not None and self._window.is_available(timestamp)

    def consume(self, timestamp, max_delay=None) -> Optional[int]:
        """Returns how long the proc was held, or None if there wasn't one"""
        self._reconcile(timestamp)
        if max_delay is None:
            max_delay = self._expiry if self._expiry is not None else float("inf")

        match = self._correlator.try_match(PROC_KEY, timestamp, max_delay)
        if match is None:
            return None

        self._window.consumed = True
        self._window.consumed_at = timestamp
        self._window = None
        self.used += 1
        self._accumulated_reaction_time += match.delay
        return match.delay

    @property
    def average_reaction_time(self):
        if not self.used:
            return 0
        return self._accumulated_reaction_time / self.used

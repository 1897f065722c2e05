from typing import Dict, List, Type

from hunter_analysis.thresholds import ThresholdBounds


def range_overlap(a, b):
    return a[0] <= b[1] and b[0] <= a[1]


def calculate_effective_damage(event, modifier):
    """The part of a hit that came from a (1 + modifier) damage increase"""
    raw = event.amount + event.absorbed
    return raw - raw / (1 + modifier)


class BaseAnalyzer:
    # attribute name -> analyzer class, injected by the AnalyzerRegistry
    DEPENDENCIES: Dict[str, Type["BaseAnalyzer"]] = {}
    # suggestion name -> bounds, checked by the AnalyzerRegistry before replay
    THRESHOLDS: Dict[str, ThresholdBounds] = {}

    def __init__(self, fight, **dependencies):
        self._fight = fight
        self.active = True

        for name, dependency in dependencies.items():
            setattr(self, name, dependency)

    @property
    def fight_duration(self):
        return self._fight.duration

    def on_fight_end(self, fight_end):
        pass

    def print(self):
        pass

    def report(self):
        return {}

    def threshold(self, name, actual):
        return self.THRESHOLDS[name].with_actual(actual)

    def suggestions(self):
        return []


class Window:
    start: int
    end: int

    def __init__(self, start, end=None):
        self.start = start
        self.end = end

    @property
    def duration(self):
        if self.end is None:
            return None
        return self.end - self.start

    def contains(self, timestamp):
        if self.end is None:
            return self.start <= timestamp
        return self.start <= timestamp <= self.end

    def copy(self):
        return Window(self.start, self.end)

    def __eq__(self, other):
        if not isinstance(other, Window):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __repr__(self):
        return f"<Window start={self.start} end={self.end}>"


def close_windows(windows, end_time):
    """Windows still open at the end of the fight end with it"""
    return [
        Window(window.start, end_time if window.end is None else window.end)
        for window in windows
    ]


def clamp_windows(windows, start_time, end_time) -> List[Window]:
    clamped_windows = []

    for window in windows:
        if not range_overlap((window.start, window.end), (start_time, end_time)):
            continue

        clamped_windows.append(
            Window(max(window.start, start_time), min(window.end, end_time))
        )

    return clamped_windows


def combine_windows(*windows_list):
    windows = [window for windows in windows_list for window in windows]

    if not windows:
        return []

    windows = sorted(windows, key=lambda window: window.start)

    combined_windows = [windows[0].copy()]
    for window in windows[1:]:
        if window.start <= combined_windows[-1].end:
            combined_windows[-1] = Window(
                combined_windows[-1].start, max(combined_windows[-1].end, window.end)
            )
        else:
            combined_windows.append(window.copy())

    return combined_windows


def calculate_uptime(windows, start_time, end_time):
    total_duration = end_time - start_time
    if total_duration <= 0:
        return 0

    windows = combine_windows(clamp_windows(windows, start_time, end_time))
    total_uptime = sum(window.duration for window in windows)

    return min(1, total_uptime / total_duration)

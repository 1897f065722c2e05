from collections import defaultdict

from hunter_analysis import spells
from hunter_analysis.base import (
    BaseAnalyzer,
    Window,
    calculate_uptime,
    close_windows,
    combine_windows,
)
from hunter_analysis.events import TargetKey


class BuffWindows:
    def __init__(self, buff_id):
        self.buff_id = buff_id
        self._windows = []

    @property
    def has_window(self):
        return len(self._windows) > 0

    @property
    def has_active_window(self):
        return self.has_window and self._windows[-1].end is None

    @property
    def active_window(self):
        if not self.has_window:
            return None
        return self._windows[-1]

    @property
    def windows(self):
        return self._windows

    @property
    def num_windows(self):
        return len(self._windows)

    def add_window(self, start, end=None):
        self._windows.append(Window(start, end))

    def contains(self, timestamp):
        return self.containing_window(timestamp) is not None

    def containing_window(self, timestamp):
        for window in self._windows:
            if window.contains(timestamp):
                return window
        return None


class BuffTracker(BaseAnalyzer):
    """Buffs on the tracked player, whoever cast them"""

    def __init__(self, fight):
        super().__init__(fight)
        self._buff_windows = {}
        self._add_starting_auras(fight.combatant.starting_auras)

    def _get_buff_windows(self, buff_id) -> BuffWindows:
        return self._buff_windows.setdefault(buff_id, BuffWindows(buff_id))

    def _add_starting_auras(self, starting_auras):
        for buff_id in starting_auras:
            windows = self._get_buff_windows(buff_id)
            if not windows.has_window:
                windows.add_window(0)

    def on_to_player_applybuff(self, event):
        windows = self._get_buff_windows(event.ability_id)
        if not windows.has_active_window:
            windows.add_window(event.timestamp)

    def on_to_player_refreshbuff(self, event):
        windows = self._get_buff_windows(event.ability_id)
        # If we don't have a window, assume it was a starting aura
        if not windows.has_window:
            windows.add_window(0)
        elif not windows.has_active_window:
            windows.add_window(event.timestamp)

    def on_to_player_removebuff(self, event):
        windows = self._get_buff_windows(event.ability_id)
        if windows.has_active_window:
            windows.active_window.end = event.timestamp
        elif not windows.has_window:  # assume it was a starting aura
            windows.add_window(0, event.timestamp)

    def has_buff(self, buff_id):
        """Whether the buff is up as of the event being processed"""
        if buff_id not in self._buff_windows:
            return False
        return self._buff_windows[buff_id].has_active_window

    def is_active(self, buff_id, timestamp):
        if buff_id not in self._buff_windows:
            return False
        return self._buff_windows[buff_id].contains(timestamp)

    def num_applications(self, buff_id):
        if buff_id not in self._buff_windows:
            return 0
        return self._buff_windows[buff_id].num_windows

    def get_windows(self, buff_id):
        if buff_id not in self._buff_windows:
            return []
        return close_windows(self._buff_windows[buff_id].windows, self._fight.end_time)

    def uptime(self, buff_id):
        return calculate_uptime(
            self.get_windows(buff_id), self._fight.start_time, self._fight.end_time
        )


class StatTracker(BaseAnalyzer):
    DEPENDENCIES = {"buff_tracker": BuffTracker}

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self._base_haste = fight.combatant.haste
        self._stat_buffs = {
            buff_id: {"haste": haste} for buff_id, haste in spells.HASTE_BUFFS.items()
        }

        for trait_id, (buff_id, stat) in spells.TRAIT_STAT_BUFFS.items():
            if fight.combatant.has_trait(trait_id):
                self.add(buff_id, {stat: sum(fight.combatant.trait_values(trait_id))})

    def add(self, buff_id, stats):
        self._stat_buffs[buff_id] = dict(stats)

    def get_buff_stats(self, buff_id):
        return dict(self._stat_buffs.get(buff_id, {}))

    def _active_stat_buffs(self, timestamp=None):
        for buff_id, stats in self._stat_buffs.items():
            if timestamp is None:
                is_active = self.buff_tracker.has_buff(buff_id)
            else:
                is_active = self.buff_tracker.is_active(buff_id, timestamp)
            if is_active:
                yield stats

    def haste_percentage(self, timestamp=None):
        # Haste buffs stack multiplicatively
        haste = 1 + self._base_haste
        for stats in self._active_stat_buffs(timestamp):
            haste *= 1 + stats.get("haste", 0)
        return haste - 1

    @property
    def current_haste_percentage(self):
        return self.haste_percentage()

    def current_stat(self, name):
        return sum(stats.get(name, 0) for stats in self._active_stat_buffs())


class GlobalCooldown(BaseAnalyzer):
    NO_GCD = {
        spells.COORDINATED_ASSAULT,
        spells.BESTIAL_WRATH,
    }

    DEPENDENCIES = {"stat_tracker": StatTracker}

    def get_global_cooldown_duration(self, ability_id=None):
        if ability_id in self.NO_GCD:
            return 0

        return max(
            spells.MIN_GCD,
            spells.BASE_GCD / (1 + self.stat_tracker.current_haste_percentage),
        )


class Enemies(BaseAnalyzer):
    """Debuffs the tracked player has put on each enemy"""

    def __init__(self, fight):
        super().__init__(fight)
        self._windows = defaultdict(lambda: defaultdict(list))

    def _get_windows(self, ability_id, target: TargetKey):
        return self._windows[ability_id][target]

    def _open_window(self, event):
        windows = self._get_windows(event.ability_id, event.target_key)
        if not windows or windows[-1].end is not None:
            windows.append(Window(event.timestamp))

    def on_by_player_applydebuff(self, event):
        self._open_window(event)

    def on_by_player_refreshdebuff(self, event):
        self._open_window(event)

    def on_by_player_removedebuff(self, event):
        windows = self._get_windows(event.ability_id, event.target_key)
        if windows and windows[-1].end is None:
            windows[-1].end = event.timestamp

    def has_debuff(self, target: TargetKey, ability_id, timestamp=None):
        if ability_id not in self._windows or target not in self._windows[ability_id]:
            return False

        windows = self._windows[ability_id][target]
        if timestamp is None:
            return bool(windows) and windows[-1].end is None
        return any(window.contains(timestamp) for window in windows)

    def get_debuff_windows(self, ability_id):
        if ability_id not in self._windows:
            return []

        return combine_windows(
            *(
                close_windows(windows, self._fight.end_time)
                for windows in self._windows[ability_id].values()
            )
        )

    def get_debuff_uptime(self, ability_id):
        return calculate_uptime(
            self.get_debuff_windows(ability_id),
            self._fight.start_time,
            self._fight.end_time,
        )


class CoreAnalysisConfig:
    def get_analyzer_classes(self):
        return [
            BuffTracker,
            StatTracker,
            GlobalCooldown,
            Enemies,
        ]

from hunter_analysis import spells
from hunter_analysis.base import BaseAnalyzer, calculate_effective_damage
from hunter_analysis.core_analysis import (
    BuffTracker,
    CoreAnalysisConfig,
    Enemies,
    GlobalCooldown,
    StatTracker,
)
from hunter_analysis.correlator import ProcTracker, TimeWindowCorrelator
from hunter_analysis.thresholds import Suggestion, ThresholdBounds, Unit
from hunter_analysis.windows import EffectWindowTracker
from console_table import console


class SerpentSting(BaseAnalyzer):
    """
    Fire a shot that poisons your target, dealing Nature damage instantly and
    more over 12 / (1 + haste) sec. Refreshing it carries over up to 30% of the
    new duration, refreshing with more than that left wastes the rest.
    """

    DEPENDENCIES = {
        "stat_tracker": StatTracker,
        "buff_tracker": BuffTracker,
    }

    THRESHOLDS = {
        "serpent_sting_refreshing": ThresholdBounds.greater_is_worse(1, 3, 5),
        "serpent_sting_uptime": ThresholdBounds.less_is_worse(0.95, 0.90, 0.85),
        "serpent_sting_uptime_birds_of_prey_vipers_venom": (
            ThresholdBounds.less_is_worse(0.65, 0.60, 0.55)
        ),
        "serpent_sting_uptime_birds_of_prey": ThresholdBounds.greater_is_worse(
            0.35, 0.425, 0.50, Unit.PERCENTAGE
        ),
    }

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self._has_bop = fight.combatant.has_talent(spells.BIRDS_OF_PREY_TALENT)
        self._has_vv = fight.combatant.has_talent(spells.VIPERS_VENOM_TALENT)
        self._tracker = EffectWindowTracker(
            spells.SERPENT_STING_SV, spells.SERPENT_STING_SV_PANDEMIC
        )
        # Set by a cast that consumed Viper's Venom, until the debuff lands
        self._vv_cast = False
        self.casts = 0
        self.bonus_damage = 0
        self.inefficient_casts = 0

    @property
    def _hasted_duration(self):
        return spells.SERPENT_STING_SV_BASE_DURATION / (
            1 + self.stat_tracker.current_haste_percentage
        )

    def on_by_player_cast(self, event):
        if event.ability_id != spells.SERPENT_STING_SV:
            return

        self.casts += 1
        if self.buff_tracker.has_buff(spells.VIPERS_VENOM_BUFF):
            self._vv_cast = True

        # With Birds of Prey, Coordinated Assault globals are better spent elsewhere
        if (
            self._has_bop
            and self.buff_tracker.has_buff(spells.COORDINATED_ASSAULT)
            and not self._vv_cast
        ):
            self.inefficient_casts += 1

    def on_by_player_damage(self, event):
        if event.ability_id != spells.SERPENT_STING_SV:
            return
        self.bonus_damage += event.total_damage

    def on_by_player_applydebuff(self, event):
        if event.ability_id != spells.SERPENT_STING_SV:
            return

        self._tracker.apply(event.target_key, event.timestamp, self._hasted_duration)
        self._vv_cast = False

    def on_by_player_refreshdebuff(self, event):
        if event.ability_id != spells.SERPENT_STING_SV:
            return

        self._tracker.refresh(
            event.target_key,
            event.timestamp,
            self._hasted_duration,
            enhanced=self._vv_cast,
        )
        self._vv_cast = False

    def on_by_player_removedebuff(self, event):
        if event.ability_id != spells.SERPENT_STING_SV:
            return
        self._tracker.remove(event.target_key, event.timestamp)

    @property
    def times_refreshed(self):
        return self._tracker.times_refreshed

    @property
    def bad_refreshes(self):
        return self._tracker.bad_refreshes

    @property
    def average_time_between_refresh(self):
        return self._tracker.average_time_between_refresh

    @property
    def average_percent_remaining_on_refresh(self):
        return self._tracker.average_percent_remaining_on_refresh

    @property
    def uptime(self):
        return self._tracker.uptime(self._fight.start_time, self._fight.end_time)

    @property
    def refreshing_threshold(self):
        return self.threshold("serpent_sting_refreshing", self.bad_refreshes)

    @property
    def uptime_threshold(self):
        # Birds of Prey without Viper's Venom wants Serpent Sting off during CA
        if self._has_bop and not self._has_vv:
            return self.threshold("serpent_sting_uptime_birds_of_prey", self.uptime)
        if self._has_bop and self._has_vv:
            return self.threshold(
                "serpent_sting_uptime_birds_of_prey_vipers_venom", self.uptime
            )
        return self.threshold("serpent_sting_uptime", self.uptime)

    def on_fight_end(self, fight_end):
        self._tracker.close_all(fight_end)

    def suggestions(self):
        return [
            Suggestion("serpent_sting_uptime", self.uptime_threshold),
            Suggestion("serpent_sting_refreshing", self.refreshing_threshold),
        ]

    def print(self):
        console.print(
            f"* You cast Serpent Sting {self.casts} times"
            f" and refreshed it {self.times_refreshed} times"
        )
        console.print(
            f"* You refreshed Serpent Sting too early {self.bad_refreshes} times"
        )
        console.print(f"* Serpent Sting uptime was {self.uptime:.2%}")

    def report(self):
        fight_duration = self.fight_duration
        return {
            "serpent_sting": {
                "casts": self.casts,
                "times_refreshed": self.times_refreshed,
                "bad_refreshes": self.bad_refreshes,
                "average_time_between_refresh": self.average_time_between_refresh,
                "average_percent_remaining_on_refresh": (
                    self.average_percent_remaining_on_refresh
                ),
                "uptime": self.uptime,
                "bonus_damage": self.bonus_damage,
                "dps": self.bonus_damage / fight_duration * 1000
                if fight_duration
                else 0,
                "inefficient_casts": self.inefficient_casts,
                "anomalies": dict(self._tracker.anomalies),
            }
        }


class VipersVenom(BaseAnalyzer):
    """
    Raptor Strike (or Mongoose Bite) has a chance to make your next Serpent
    Sting cost no Focus and deal an additional 250% initial damage.
    """

    DEPENDENCIES = {
        "global_cooldown": GlobalCooldown,
        "buff_tracker": BuffTracker,
    }

    THRESHOLDS = {
        "vipers_venom_raptor_with_buff": ThresholdBounds.greater_is_worse(1, 2, 3),
        "vipers_venom_wasted_procs": ThresholdBounds.greater_is_worse(0, 2, 4),
    }

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self.active = fight.combatant.has_talent(spells.VIPERS_VENOM_TALENT)
        self.spell_known = spells.RAPTOR_STRIKE
        if self.active and fight.combatant.has_talent(spells.MONGOOSE_BITE_TALENT):
            self.spell_known = spells.MONGOOSE_BITE_TALENT

        self._procs = ProcTracker()
        self._buffed_serpent_sting = False
        self._accumulated_time_from_buff_to_cast = 0
        self.bonus_damage = 0
        self.bad_raptors_or_mbs = 0

    def on_by_player_cast(self, event):
        if not self.buff_tracker.has_buff(spells.VIPERS_VENOM_BUFF):
            return

        if event.ability_id == spells.SERPENT_STING_SV:
            self._buffed_serpent_sting = True
            held_for = self._procs.consume(event.timestamp)
            if held_for is not None:
                # The proc comes from a GCD, the next one can't start any sooner
                gcd = self.global_cooldown.get_global_cooldown_duration(
                    event.ability_id
                )
                self._accumulated_time_from_buff_to_cast += max(0, held_for - gcd)
            return

        if event.ability_id in spells.RAPTOR_MONGOOSE_VARIANTS:
            self.bad_raptors_or_mbs += 1

    def on_by_player_damage(self, event):
        if (
            event.ability_id != spells.SERPENT_STING_SV
            or not self._buffed_serpent_sting
        ):
            return

        self.bonus_damage += calculate_effective_damage(
            event, spells.VIPERS_VENOM_DAMAGE_MODIFIER
        )
        self._buffed_serpent_sting = False

    def on_by_player_applybuff(self, event):
        if event.ability_id != spells.VIPERS_VENOM_BUFF:
            return
        self._procs.grant(event.timestamp)

    def on_by_player_refreshbuff(self, event):
        # Procced again while still holding one, the old one is wasted
        if event.ability_id != spells.VIPERS_VENOM_BUFF:
            return
        self._procs.refresh(event.timestamp)

    def on_by_player_removebuff(self, event):
        if event.ability_id != spells.VIPERS_VENOM_BUFF:
            return
        self._procs.expire(event.timestamp)

    @property
    def procs(self):
        return self._procs.procs

    @property
    def used_procs(self):
        return self._procs.used

    @property
    def wasted_procs(self):
        return self._procs.wasted

    @property
    def expired_procs(self):
        return self._procs.expired

    @property
    def average_time_between_buff_and_usage(self):
        if not self.used_procs:
            return 0
        return self._accumulated_time_from_buff_to_cast / self.used_procs

    @property
    def raptor_with_buff_threshold(self):
        return self.threshold("vipers_venom_raptor_with_buff", self.bad_raptors_or_mbs)

    @property
    def wasted_procs_threshold(self):
        return self.threshold("vipers_venom_wasted_procs", self.wasted_procs)

    def suggestions(self):
        return [
            Suggestion(
                "vipers_venom_raptor_with_buff", self.raptor_with_buff_threshold
            ),
            Suggestion("vipers_venom_wasted_procs", self.wasted_procs_threshold),
        ]

    def print(self):
        console.print(
            f"* You used {self.used_procs} of {self.procs} Viper's Venom procs"
        )
        console.print(
            "* Your average Viper's Venom usage delay was"
            f" {self.average_time_between_buff_and_usage:.2f} ms"
        )

    def report(self):
        return {
            "vipers_venom": {
                "procs": self.procs,
                "used_procs": self.used_procs,
                "wasted_procs": self.wasted_procs,
                "expired_procs": self.expired_procs,
                "bad_casts": self.bad_raptors_or_mbs,
                "spell_known": self.spell_known,
                "average_time_between_buff_and_usage": (
                    self.average_time_between_buff_and_usage
                ),
                "bonus_damage": self.bonus_damage,
            }
        }


class PheromoneBomb(BaseAnalyzer):
    """
    Wildfire Infusion sometimes turns Wildfire Bomb into Pheromone Bomb, Kill
    Command has a 100% chance to reset against targets coated with it.
    """

    DEPENDENCIES = {"enemies": Enemies}

    MS_BUFFER = 100

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self.active = fight.combatant.has_talent(spells.WILDFIRE_INFUSION_TALENT)
        self._kill_commands = TimeWindowCorrelator()
        self.damage = 0
        self.casts = 0
        self.resets = 0
        self.focus_gained = 0

    def on_by_player_pet_damage(self, event):
        if event.ability_id != spells.KILL_COMMAND_DAMAGE_SV:
            return

        if not self.enemies.has_debuff(event.target_key, spells.PHEROMONE_BOMB_WFI_DOT):
            return

        # Bloodseeker bleed ticks share the Kill Command damage id, only the
        # hit right after the cast counts
        match = self._kill_commands.try_match(
            spells.KILL_COMMAND_CAST_SV, event.timestamp, self.MS_BUFFER
        )
        if match:
            self.focus_gained += spells.KILL_COMMAND_FOCUS_GAIN
            self.resets += 1

    def on_by_player_damage(self, event):
        if event.ability_id not in (
            spells.PHEROMONE_BOMB_WFI_DOT,
            spells.PHEROMONE_BOMB_WFI_IMPACT,
        ):
            return
        self.damage += event.total_damage

    def on_by_player_cast(self, event):
        if event.ability_id == spells.PHEROMONE_BOMB_WFI:
            self.casts += 1
        elif event.ability_id == spells.KILL_COMMAND_CAST_SV:
            self._kill_commands.record_anchor(
                spells.KILL_COMMAND_CAST_SV, event.timestamp
            )

    @property
    def average_resets(self):
        return self.resets / self.casts if self.casts else 0

    def report(self):
        return {
            "pheromone_bomb": {
                "casts": self.casts,
                "damage": self.damage,
                "resets": self.resets,
                "average_resets": self.average_resets,
                "focus_gained": self.focus_gained,
            }
        }


class Chakrams(BaseAnalyzer):
    """
    Throw a pair of chakrams at your target, slicing all enemies in the
    chakrams' path. The chakrams will return to you, damaging enemies again.
    """

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self.active = fight.combatant.has_talent(spells.CHAKRAMS_TALENT)
        self.casts = 0
        self.targets_hit = 0
        self._unique_targets = set()

    def on_by_player_cast(self, event):
        if event.ability_id != spells.CHAKRAMS_TALENT:
            return
        self._unique_targets = set()
        self.casts += 1

    def on_by_player_damage(self, event):
        if event.ability_id not in spells.CHAKRAM_TYPES:
            return

        # Thrown before the pull
        if self.casts == 0:
            self.casts += 1

        if event.target_key not in self._unique_targets:
            self.targets_hit += 1
            self._unique_targets.add(event.target_key)

    @property
    def average_targets_hit(self):
        return self.targets_hit / self.casts if self.casts else 0

    def report(self):
        return {
            "chakrams": {
                "casts": self.casts,
                "targets_hit": self.targets_hit,
                "average_targets_hit": self.average_targets_hit,
            }
        }


class SurvivalAnalysisConfig(CoreAnalysisConfig):
    def get_analyzer_classes(self):
        return super().get_analyzer_classes() + [
            SerpentSting,
            VipersVenom,
            PheromoneBomb,
            Chakrams,
        ]

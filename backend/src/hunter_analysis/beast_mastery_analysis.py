from hunter_analysis import spells
from hunter_analysis.base import BaseAnalyzer
from hunter_analysis.core_analysis import BuffTracker, CoreAnalysisConfig, StatTracker
from console_table import console


class DanceOfDeath(BaseAnalyzer):
    """
    Barbed Shot has a chance equal to your critical strike chance to grant you
    agility for 8 sec.
    """

    DEPENDENCIES = {
        "stat_tracker": StatTracker,
        "buff_tracker": BuffTracker,
    }

    def __init__(self, fight, **dependencies):
        super().__init__(fight, **dependencies)
        self.active = fight.combatant.has_trait(spells.DANCE_OF_DEATH)
        self.agility = self.stat_tracker.get_buff_stats(
            spells.DANCE_OF_DEATH_BUFF
        ).get("agility", 0)

    @property
    def uptime(self):
        return self.buff_tracker.uptime(spells.DANCE_OF_DEATH_BUFF)

    @property
    def average_agility(self):
        return self.uptime * self.agility

    def print(self):
        console.print(
            f"* Dance of Death granted {self.agility:.0f} Agility"
            f" for {self.uptime:.2%} of the fight"
        )

    def report(self):
        return {
            "dance_of_death": {
                "agility": self.agility,
                "uptime": self.uptime,
                "average_agility": self.average_agility,
            }
        }


class BeastMasteryAnalysisConfig(CoreAnalysisConfig):
    def get_analyzer_classes(self):
        return super().get_analyzer_classes() + [DanceOfDeath]

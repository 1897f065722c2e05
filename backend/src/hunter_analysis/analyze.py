import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from hunter_analysis import spells
from hunter_analysis.beast_mastery_analysis import BeastMasteryAnalysisConfig
from hunter_analysis.core_analysis import CoreAnalysisConfig
from hunter_analysis.dispatcher import AnalyzerRegistry, EventDispatcher
from hunter_analysis.events import EventType
from hunter_analysis.survival_analysis import SurvivalAnalysisConfig
from console_table import EventsTable, SHOULD_PRINT, print_suggestions
from report import Fight


class Analyzer:
    SPEC_ANALYSIS_CONFIGS = {
        "Default": CoreAnalysisConfig,
        "Survival": SurvivalAnalysisConfig,
        "Beast Mastery": BeastMasteryAnalysisConfig,
    }

    def __init__(self, fight: Fight):
        self._fight = fight
        self.__spec = None
        self._analysis_config = self.SPEC_ANALYSIS_CONFIGS.get(
            self._detect_spec(),
            self.SPEC_ANALYSIS_CONFIGS["Default"],
        )()

    def _detect_spec(self):
        if not self.__spec:

            def detect():
                for event in self._fight.events:
                    if event.type != EventType.CAST or not event.by_player:
                        continue
                    if event.ability_id in spells.SURVIVAL_ABILITIES:
                        return "Survival"
                    if event.ability_id in spells.BEAST_MASTERY_ABILITIES:
                        return "Beast Mastery"
                return None

            self.__spec = detect()
        return self.__spec

    @property
    def displayable_events(self):
        """The tracked player's casts and debuff changes"""
        return [
            event
            for event in self._fight.events
            if event.by_player
            and event.type
            in (
                EventType.CAST,
                EventType.APPLY_DEBUFF,
                EventType.REFRESH_DEBUFF,
                EventType.REMOVE_DEBUFF,
            )
        ]

    def analyze(self):
        registry = AnalyzerRegistry(
            self._fight, self._analysis_config.get_analyzer_classes()
        )
        dispatcher = EventDispatcher(registry.analyzers)
        dispatcher.replay(self._fight.events, fight_end=self._fight.end_time)

        if dispatcher.handler_errors:
            logging.warning(
                f"Analyzer errors for {self._fight.source.name}:"
                f" {dict(dispatcher.handler_errors)}"
            )

        if SHOULD_PRINT:
            table = EventsTable()
            for event in self.displayable_events:
                table.add_event(event)
            table.print()

        analysis = {}
        suggestions = []

        for analyzer in dispatcher.analyzers:
            analyzer_suggestions = analyzer.suggestions()
            if SHOULD_PRINT:
                analyzer.print()
                print_suggestions(analyzer_suggestions)
            analysis.update(**analyzer.report())
            suggestions.extend(
                suggestion.to_dict() for suggestion in analyzer_suggestions
            )

        return {
            "fight_metadata": {
                "source": self._fight.source.name,
                "encounter": self._fight.encounter.name,
                "start_time": self._fight.start_time,
                "end_time": self._fight.end_time,
                "duration": self._fight.duration,
            },
            "analysis": analysis,
            "suggestions": suggestions,
            "spec": self._detect_spec(),
            "handler_errors": dict(dispatcher.handler_errors),
        }


def analyze(fight: Fight):
    analyzer = Analyzer(fight)
    return analyzer.analyze()


def analyze_fights(fights: List[Fight], max_workers=None):
    # Each fight gets its own analyzers, nothing is shared between workers
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(analyze, fights))

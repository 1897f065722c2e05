"""
Tests for running a whole fight through the analyzers for its specialization.
"""

from hunter_analysis import spells
from hunter_analysis.analyze import Analyzer, analyze, analyze_fights

from conftest import raw_event


def serpent_sting_events():
    return [
        raw_event("cast", 0, spells.SERPENT_STING_SV),
        raw_event("applydebuff", 0, spells.SERPENT_STING_SV),
        raw_event("cast", 10000, spells.SERPENT_STING_SV),
        raw_event("refreshdebuff", 10000, spells.SERPENT_STING_SV),
        raw_event("removedebuff", 24500, spells.SERPENT_STING_SV),
    ]


class TestAnalyze:
    def test_survival_fight(self, make_fight):
        result = analyze(make_fight(serpent_sting_events(), end_time=30000))

        assert set(result) == {
            "fight_metadata",
            "analysis",
            "suggestions",
            "spec",
            "handler_errors",
        }
        assert result["spec"] == "Survival"
        assert result["handler_errors"] == {}
        assert result["fight_metadata"]["duration"] == 30000
        assert result["analysis"]["serpent_sting"]["uptime"] == 0.8
        # Talent-gated analyzers stay out of the report
        assert "vipers_venom" not in result["analysis"]
        assert "chakrams" not in result["analysis"]

        suggestions = {s["name"]: s for s in result["suggestions"]}
        assert suggestions["serpent_sting_uptime"]["severity"] == "major"
        assert suggestions["serpent_sting_refreshing"]["severity"] == "none"

    def test_timestamps_relative_to_fight_start(self, make_fight):
        events = [
            {**event, "timestamp": event["timestamp"] + 50000}
            for event in serpent_sting_events()
        ]

        result = analyze(make_fight(events, start_time=50000, end_time=80000))

        assert result["fight_metadata"]["start_time"] == 0
        assert result["analysis"]["serpent_sting"]["uptime"] == 0.8

    def test_beast_mastery_fight(self, make_fight):
        fight = make_fight([raw_event("cast", 0, spells.BARBED_SHOT)])

        assert Analyzer(fight)._detect_spec() == "Beast Mastery"
        assert analyze(fight)["spec"] == "Beast Mastery"

    def test_empty_fight(self, make_fight):
        result = analyze(make_fight([]))

        assert result["spec"] is None
        assert result["suggestions"] == []
        assert result["analysis"] == {}

    def test_analyze_fights(self, make_fight):
        fights = [
            make_fight(serpent_sting_events(), end_time=30000),
            make_fight([raw_event("cast", 0, spells.COBRA_SHOT)]),
        ]

        results = analyze_fights(fights, max_workers=2)

        assert [result["spec"] for result in results] == ["Survival", "Beast Mastery"]
        assert results[0]["analysis"]["serpent_sting"]["uptime"] == 0.8

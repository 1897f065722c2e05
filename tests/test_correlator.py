"""
Tests for pairing anchor events with the events they cause.
"""

from hunter_analysis.correlator import ProcTracker, TimeWindowCorrelator


class TestTimeWindowCorrelator:
    def test_match_is_consumed(self):
        correlator = TimeWindowCorrelator()
        correlator.record_anchor("kill_command", 1000)

        match = correlator.try_match("kill_command", 1090, 100)

        assert match.delay == 90
        assert correlator.try_match("kill_command", 1200, 100) is None
        assert correlator.matched == 1

    def test_too_late(self):
        correlator = TimeWindowCorrelator()
        correlator.record_anchor("kill_command", 1000)

        assert correlator.try_match("kill_command", 1101, 100) is None
        assert correlator.has_anchor("kill_command")

    def test_before_anchor(self):
        correlator = TimeWindowCorrelator()
        correlator.record_anchor("kill_command", 1000)

        assert correlator.try_match("kill_command", 999, 100) is None

    def test_unknown_key(self):
        assert TimeWindowCorrelator().try_match("kill_command", 0, 100) is None

    def test_new_anchor_supersedes_unmatched_one(self):
        correlator = TimeWindowCorrelator()
        correlator.record_anchor("kill_command", 1000)

        assert correlator.record_anchor("kill_command", 2000) == 1000
        assert correlator.superseded == 1
        assert correlator.try_match("kill_command", 1050, 100) is None
        assert correlator.try_match("kill_command", 2050, 100).anchor_timestamp == 2000

    def test_keys_are_independent(self):
        correlator = TimeWindowCorrelator()
        correlator.record_anchor("a", 0)
        correlator.record_anchor("b", 10)

        correlator.discard("a")

        assert not correlator.has_anchor("a")
        assert correlator.try_match("b", 20, 100) is not None


class TestProcTracker:
    def test_consume_reports_reaction_time(self):
        procs = ProcTracker()
        procs.grant(1000)

        assert procs.has_proc(1200)
        assert procs.consume(1500) == 500
        assert not procs.has_proc(1600)
        assert procs.used == 1
        assert procs.average_reaction_time == 500

    def test_consume_without_proc(self):
        procs = ProcTracker()

        assert procs.consume(1000) is None
        assert procs.average_reaction_time == 0

    def test_proc_while_holding_one_is_wasted(self):
        procs = ProcTracker()
        procs.grant(0)
        procs.grant(1000)

        assert procs.procs == 2
        assert procs.wasted == 1
        assert procs.consume(1500) == 500

    def test_proc_runs_out(self):
        procs = ProcTracker(expiry=10000)
        procs.grant(0)

        assert procs.consume(10001) is None
        assert procs.expired == 1
        assert procs.wasted == 0

    def test_expire_drops_unused_proc(self):
        procs = ProcTracker()
        procs.grant(0)
        procs.expire(8000)
        procs.expire(9000)

        assert procs.expired == 1
        assert procs.consume(9500) is None

    def test_refresh_wastes_the_held_proc(self):
        procs = ProcTracker()
        procs.grant(0)
        procs.refresh(1000)

        assert procs.procs == 1
        assert procs.wasted == 1
        assert procs.consume(1200) == 200

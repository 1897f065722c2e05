import logging
from collections import Counter, defaultdict
from typing import Callable, Dict, List, Type, TypeVar

from hunter_analysis.base import BaseAnalyzer
from hunter_analysis.errors import AnalyzerConfigurationError
from hunter_analysis.events import EventType

R = TypeVar("R")

# Handlers are named on_<filter>_<event type>, e.g. on_by_player_applydebuff
EVENT_FILTERS = {
    "event": lambda event: True,
    "by_player": lambda event: event.by_player,
    "by_player_pet": lambda event: event.by_player_pet,
    "to_player": lambda event: event.to_player,
    "to_player_pet": lambda event: event.to_player_pet,
}


def resolve_order(nodes, get_dependencies: Callable, describe=repr):
    """
    Orders nodes so that every node comes after its dependencies, keeping the
    given order otherwise. Dependencies not in nodes are pulled in.
    """
    ordered = []
    done = set()
    visiting = []

    def visit(node):
        if node in done:
            return
        if node in visiting:
            cycle = visiting[visiting.index(node) :] + [node]  # noqa
            raise AnalyzerConfigurationError(
                "Cyclic analyzer dependencies: "
                + " -> ".join(describe(n) for n in cycle)
            )

        visiting.append(node)
        for dependency in get_dependencies(node):
            visit(dependency)
        visiting.pop()

        done.add(node)
        ordered.append(node)

    for node in nodes:
        visit(node)
    return ordered


class AnalyzerRegistry:
    """Builds one instance of each analyzer class for a fight"""

    def __init__(self, fight, analyzer_classes):
        self._fight = fight
        self._classes = resolve_order(
            analyzer_classes,
            lambda cls: cls.DEPENDENCIES.values(),
            lambda cls: cls.__name__,
        )
        self._analyzers: Dict[Type[BaseAnalyzer], BaseAnalyzer] = {}

        # Nothing gets built if any analyzer is misconfigured
        for cls in self._classes:
            for name, bounds in cls.THRESHOLDS.items():
                bounds.validate(f"{cls.__name__}.{name}")

        for cls in self._classes:
            dependencies = {
                name: self._analyzers[dependency_cls]
                for name, dependency_cls in cls.DEPENDENCIES.items()
            }
            self._analyzers[cls] = cls(fight, **dependencies)

    def get_analyzer(self, cls: Type[R]) -> R:
        return self._analyzers[cls]

    @property
    def analyzers(self) -> List[BaseAnalyzer]:
        return [self._analyzers[cls] for cls in self._classes]

    @property
    def active_analyzers(self) -> List[BaseAnalyzer]:
        return [analyzer for analyzer in self.analyzers if analyzer.active]


def _instance_dependencies(analyzer):
    return [
        getattr(analyzer, name)
        for name in analyzer.DEPENDENCIES
        if hasattr(analyzer, name)
    ]


class EventDispatcher:
    def __init__(self, analyzers):
        ordered = resolve_order(
            analyzers, _instance_dependencies, lambda a: type(a).__name__
        )
        # Inactive analyzers never see an event
        self._analyzers = [analyzer for analyzer in ordered if analyzer.active]
        self._subscriptions = defaultdict(list)
        self.handler_errors = Counter()

        for analyzer in self._analyzers:
            self._subscribe(analyzer)

    def _subscribe(self, analyzer):
        for attr in dir(type(analyzer)):
            if not attr.startswith("on_"):
                continue

            prefix, _, event_type = attr.rpartition("_")
            event_type = EventType.parse(event_type)
            if event_type is None:
                continue

            event_filter = prefix[len("on_") :]  # noqa
            if event_filter not in EVENT_FILTERS:
                raise AnalyzerConfigurationError(
                    f"{type(analyzer).__name__}.{attr} has an unknown event filter"
                    f" '{event_filter}'"
                )

            self._subscriptions[event_type].append(
                (analyzer, EVENT_FILTERS[event_filter], getattr(analyzer, attr))
            )

    @property
    def analyzers(self):
        return list(self._analyzers)

    def _invoke(self, analyzer, handler, *args):
        try:
            handler(*args)
        except Exception:
            analyzer_name = type(analyzer).__name__
            logging.exception(f"{analyzer_name}.{handler.__name__} failed")
            self.handler_errors[analyzer_name] += 1

    def dispatch(self, event):
        for analyzer, event_filter, handler in self._subscriptions[event.type]:
            if event_filter(event):
                self._invoke(analyzer, handler, event)

    def replay(self, events, fight_end=None):
        last_timestamp = None

        for event in events:
            if last_timestamp is not None and event.timestamp < last_timestamp:
                logging.warning(
                    f"Event at {event.timestamp} arrived after {last_timestamp}"
                )
            last_timestamp = event.timestamp
            self.dispatch(event)

        if fight_end is not None:
            for analyzer in self._analyzers:
                self._invoke(analyzer, analyzer.on_fight_end, fight_end)

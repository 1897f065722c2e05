from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum

from hunter_analysis.errors import ThresholdConfigurationError


class Direction(str, Enum):
    GREATER_IS_WORSE = "greater_is_worse"
    LESS_IS_WORSE = "less_is_worse"


class Unit(str, Enum):
    PERCENTAGE = "percentage"
    COUNT = "count"


class Severity(IntEnum):
    NONE = 0
    MINOR = 1
    AVERAGE = 2
    MAJOR = 3


def check_bounds(direction, minor, average, major, name=None):
    direction = Direction(direction)
    if direction == Direction.GREATER_IS_WORSE:
        ordered = minor <= average <= major
    else:
        ordered = minor >= average >= major

    if not ordered:
        prefix = f"{name}: b" if name else "B"
        raise ThresholdConfigurationError(
            f"{prefix}ounds for {direction.value} are out of order:"
            f" minor={minor} average={average} major={major}"
        )


@dataclass(frozen=True)
class ThresholdSpec:
    actual: float
    direction: Direction
    minor: float
    average: float
    major: float
    unit: Unit = Unit.COUNT

    def __post_init__(self):
        object.__setattr__(self, "direction", Direction(self.direction))
        object.__setattr__(self, "unit", Unit(self.unit))
        check_bounds(self.direction, self.minor, self.average, self.major)

    @classmethod
    def greater_is_worse(cls, actual, minor, average, major, unit=Unit.COUNT):
        return cls(actual, Direction.GREATER_IS_WORSE, minor, average, major, unit)

    @classmethod
    def less_is_worse(cls, actual, minor, average, major, unit=Unit.PERCENTAGE):
        return cls(actual, Direction.LESS_IS_WORSE, minor, average, major, unit)

    @property
    def bounds(self):
        return (
            (Severity.MINOR, self.minor),
            (Severity.AVERAGE, self.average),
            (Severity.MAJOR, self.major),
        )


@dataclass(frozen=True)
class ThresholdBounds:
    """
    Bounds an analyzer declares up front, checked when analyzers are wired
    together. Filled in with the measured value once the fight is replayed.
    """

    direction: Direction
    minor: float
    average: float
    major: float
    unit: Unit = Unit.COUNT

    @classmethod
    def greater_is_worse(cls, minor, average, major, unit=Unit.COUNT):
        return cls(Direction.GREATER_IS_WORSE, minor, average, major, unit)

    @classmethod
    def less_is_worse(cls, minor, average, major, unit=Unit.PERCENTAGE):
        return cls(Direction.LESS_IS_WORSE, minor, average, major, unit)

    def validate(self, name=None):
        check_bounds(self.direction, self.minor, self.average, self.major, name)

    def with_actual(self, actual) -> ThresholdSpec:
        return ThresholdSpec(
            actual, self.direction, self.minor, self.average, self.major, self.unit
        )


def _is_past(spec: ThresholdSpec, bound, inclusive=False):
    if spec.direction == Direction.GREATER_IS_WORSE:
        return spec.actual >= bound if inclusive else spec.actual > bound
    return spec.actual <= bound if inclusive else spec.actual < bound


def classify(spec: ThresholdSpec) -> Severity:
    """
    Grades spec.actual against its bounds.

    Sitting exactly on the minor bound is not an issue. Once strictly past a
    tier's bound, the next tier starts at its own bound, so with bounds of
    1/3/5 a value of 3 is AVERAGE and 5 is MAJOR.
    """
    severity = Severity.NONE
    previous_bound = None

    for tier, bound in spec.bounds:
        if previous_bound is None:
            reached = _is_past(spec, bound)
        else:
            reached = _is_past(spec, previous_bound) and _is_past(
                spec, bound, inclusive=True
            )

        if not reached:
            break
        severity = tier
        previous_bound = bound

    return severity


@dataclass(frozen=True)
class Suggestion:
    name: str
    threshold: ThresholdSpec
    severity: Severity = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "severity", classify(self.threshold))

    @property
    def is_triggered(self):
        return self.severity != Severity.NONE

    def to_dict(self):
        threshold = asdict(self.threshold)
        threshold["direction"] = self.threshold.direction.value
        threshold["unit"] = self.threshold.unit.value
        return {
            "name": self.name,
            **threshold,
            "severity": self.severity.name.lower(),
        }

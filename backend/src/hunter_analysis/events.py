from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Set


class EventType(str, Enum):
    CAST = "cast"
    DAMAGE = "damage"
    APPLY_BUFF = "applybuff"
    REFRESH_BUFF = "refreshbuff"
    REMOVE_BUFF = "removebuff"
    APPLY_DEBUFF = "applydebuff"
    REFRESH_DEBUFF = "refreshdebuff"
    REMOVE_DEBUFF = "removedebuff"

    @classmethod
    def parse(cls, value) -> Optional["EventType"]:
        try:
            return cls(value)
        except ValueError:
            return None


class TargetKey(NamedTuple):
    """Identifies one copy of a target, e.g. one of several identical adds"""

    target_id: int
    target_instance: int = 1


@dataclass(frozen=True)
class Event:
    type: EventType
    timestamp: int
    ability_id: int
    source_id: int = -1
    source_instance: int = 1
    target_id: int = -1
    target_instance: int = 1
    by_player: bool = False
    by_player_pet: bool = False
    to_player: bool = False
    to_player_pet: bool = False
    amount: int = 0
    absorbed: int = 0
    index: int = 0

    @property
    def target_key(self) -> TargetKey:
        return TargetKey(self.target_id, self.target_instance)

    @property
    def total_damage(self):
        return self.amount + self.absorbed

    @property
    def sort_key(self):
        return self.timestamp, self.index

    @classmethod
    def from_dict(
        cls,
        event,
        index: int,
        player_id: int,
        pet_ids: Set[int],
        timestamp_offset: int = 0,
    ) -> Optional["Event"]:
        """
        Build an Event from a raw log dict, returns None for event types
        we don't analyze. All defaults for missing fields are applied here.
        """
        event_type = EventType.parse(event.get("type"))
        if event_type is None:
            return None

        source_id = event.get("sourceID", -1)
        target_id = event.get("targetID", -1)
        is_damage = event_type == EventType.DAMAGE

        return cls(
            type=event_type,
            timestamp=max(0, event["timestamp"] - timestamp_offset),
            ability_id=event.get("abilityGameID", 0),
            source_id=source_id,
            source_instance=event.get("sourceInstance") or 1,
            target_id=target_id,
            target_instance=event.get("targetInstance") or 1,
            by_player=source_id == player_id,
            by_player_pet=source_id in pet_ids,
            to_player=target_id == player_id,
            to_player_pet=target_id in pet_ids,
            amount=event.get("amount", 0) if is_damage else 0,
            absorbed=event.get("absorbed", 0) if is_damage else 0,
            index=index,
        )


def sort_events(events):
    # sorted() is stable, ties keep their original stream order
    return sorted(events, key=lambda event: event.sort_key)

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from hunter_analysis import spells
from hunter_analysis.events import Event, sort_events


@dataclass
class Encounter:
    id: int
    name: str


@dataclass
class Source:
    id: int
    name: str
    pets: Set[int] = field(default_factory=lambda: set())


SPELL_TRANSLATIONS = {
    spells.SERPENT_STING_SV: "Serpent Sting",
    spells.VIPERS_VENOM_TALENT: "Viper's Venom",
    spells.VIPERS_VENOM_BUFF: "Viper's Venom",
    spells.COORDINATED_ASSAULT: "Coordinated Assault",
    spells.MONGOOSE_BITE_TALENT: "Mongoose Bite",
    spells.MONGOOSE_BITE_TALENT_AOTE: "Mongoose Bite",
    spells.RAPTOR_STRIKE: "Raptor Strike",
    spells.RAPTOR_STRIKE_AOTE: "Raptor Strike",
    spells.KILL_COMMAND_CAST_SV: "Kill Command",
    spells.KILL_COMMAND_DAMAGE_SV: "Kill Command",
    spells.WILDFIRE_BOMB: "Wildfire Bomb",
    spells.PHEROMONE_BOMB_WFI: "Pheromone Bomb",
    spells.PHEROMONE_BOMB_WFI_IMPACT: "Pheromone Bomb",
    spells.PHEROMONE_BOMB_WFI_DOT: "Pheromone Bomb",
    spells.CHAKRAMS_TALENT: "Chakrams",
    spells.CHAKRAMS_TO_MAINTARGET: "Chakrams",
    spells.CHAKRAMS_BACK_FROM_MAINTARGET: "Chakrams",
    spells.CHAKRAMS_NOT_MAINTARGET: "Chakrams",
    spells.BARBED_SHOT: "Barbed Shot",
    spells.COBRA_SHOT: "Cobra Shot",
    spells.BESTIAL_WRATH: "Bestial Wrath",
    spells.DANCE_OF_DEATH_BUFF: "Dance of Death",
    spells.BLOODLUST: "Bloodlust",
    spells.HEROISM: "Heroism",
    spells.TIME_WARP: "Time Warp",
    spells.PRIMAL_RAGE: "Primal Rage",
    spells.DRUMS_OF_FURY: "Drums of Fury",
}


def get_ability_name(ability_id: int):
    if ability_id in SPELL_TRANSLATIONS:
        return SPELL_TRANSLATIONS[ability_id]

    logging.warning(f"No ability name found for id: {ability_id}")
    return "Unknown"


@dataclass
class Combatant:
    """What we know about the tracked player before the pull"""

    talents: Set[int] = field(default_factory=set)
    # Trait spell id -> stat value granted by each equipped instance of it
    traits: Dict[int, List[float]] = field(default_factory=dict)
    haste: float = 0
    auras: List[int] = field(default_factory=list)

    @classmethod
    def from_combatant_info(cls, combatant_info):
        if not combatant_info:
            return cls()

        def _ids(values, key):
            return [
                value[key] if isinstance(value, dict) else value for value in values
            ]

        return cls(
            talents=set(_ids(combatant_info.get("talents", []), "id")),
            traits={
                int(spell_id): list(values)
                for spell_id, values in combatant_info.get("traits", {}).items()
            },
            haste=combatant_info.get("haste", 0),
            auras=_ids(combatant_info.get("auras", []), "ability"),
        )

    @property
    def starting_auras(self):
        return list(self.auras)

    def has_talent(self, spell_id):
        return spell_id in self.talents

    def has_trait(self, spell_id):
        return bool(self.traits.get(spell_id))

    def trait_values(self, spell_id):
        return list(self.traits.get(spell_id, []))


class Fight:
    def __init__(
        self,
        source: Source,
        encounter: Encounter,
        start_time: int,
        end_time: int,
        events,
        combatant_info=None,
    ):
        self.source = source
        self.encounter = encounter
        self._global_start_time = start_time
        self._global_end_time = end_time
        self.start_time = 0
        self.end_time = end_time - start_time
        self.duration = self.end_time - self.start_time
        self.combatant = Combatant.from_combatant_info(combatant_info)
        self.events = self._normalize_events(events)

    def _normalize_events(self, events):
        normalized_events = []

        for i, event in enumerate(events):
            normalized_event = Event.from_dict(
                event,
                index=i,
                player_id=self.source.id,
                pet_ids=self.source.pets,
                timestamp_offset=self._global_start_time,
            )
            if normalized_event is not None:
                normalized_events.append(normalized_event)

        return sort_events(normalized_events)

    @classmethod
    def from_dict(cls, data):
        source = data["source"]
        encounter = data.get("encounter") or {"id": 0, "name": "Unknown"}

        return cls(
            Source(source["id"], source["name"], set(source.get("pets", []))),
            Encounter(encounter["id"], encounter["name"]),
            data["start_time"],
            data["end_time"],
            data.get("events", []),
            data.get("combatant_info"),
        )

# Spell ids used by the hunter analyzers
SERPENT_STING_SV = 259491
VIPERS_VENOM_TALENT = 268501
VIPERS_VENOM_BUFF = 268552
BIRDS_OF_PREY_TALENT = 260331
COORDINATED_ASSAULT = 266779
MONGOOSE_BITE_TALENT = 259387
MONGOOSE_BITE_TALENT_AOTE = 265888
RAPTOR_STRIKE = 186270
RAPTOR_STRIKE_AOTE = 265189
KILL_COMMAND_CAST_SV = 259489
KILL_COMMAND_DAMAGE_SV = 259277
WILDFIRE_BOMB = 259495
WILDFIRE_INFUSION_TALENT = 271014
PHEROMONE_BOMB_WFI = 270323
PHEROMONE_BOMB_WFI_IMPACT = 270329
PHEROMONE_BOMB_WFI_DOT = 270332
CHAKRAMS_TALENT = 259391
CHAKRAMS_TO_MAINTARGET = 259398
CHAKRAMS_BACK_FROM_MAINTARGET = 267666
CHAKRAMS_NOT_MAINTARGET = 259396

BARBED_SHOT = 217200
COBRA_SHOT = 193455
BESTIAL_WRATH = 19574
DANCE_OF_DEATH = 274441
DANCE_OF_DEATH_BUFF = 274443

BLOODLUST = 2825
HEROISM = 32182
TIME_WARP = 80353
PRIMAL_RAGE = 264667
DRUMS_OF_FURY = 178207

RAPTOR_MONGOOSE_VARIANTS = {
    RAPTOR_STRIKE,
    RAPTOR_STRIKE_AOTE,
    MONGOOSE_BITE_TALENT,
    MONGOOSE_BITE_TALENT_AOTE,
}

CHAKRAM_TYPES = {
    CHAKRAMS_TO_MAINTARGET,
    CHAKRAMS_BACK_FROM_MAINTARGET,
    CHAKRAMS_NOT_MAINTARGET,
}

SURVIVAL_ABILITIES = {
    SERPENT_STING_SV,
    KILL_COMMAND_CAST_SV,
    WILDFIRE_BOMB,
    COORDINATED_ASSAULT,
} | RAPTOR_MONGOOSE_VARIANTS

BEAST_MASTERY_ABILITIES = {
    BARBED_SHOT,
    COBRA_SHOT,
    BESTIAL_WRATH,
}

# Haste granted while the buff is up
HASTE_BUFFS = {
    BLOODLUST: 0.3,
    HEROISM: 0.3,
    TIME_WARP: 0.3,
    PRIMAL_RAGE: 0.3,
    DRUMS_OF_FURY: 0.25,
}

# Azerite trait -> (buff it procs, stat the buff grants)
TRAIT_STAT_BUFFS = {
    DANCE_OF_DEATH: (DANCE_OF_DEATH_BUFF, "agility"),
}

SERPENT_STING_SV_BASE_DURATION = 12000
SERPENT_STING_SV_PANDEMIC = 0.3
VIPERS_VENOM_DAMAGE_MODIFIER = 2.5
KILL_COMMAND_FOCUS_GAIN = 15
BASE_GCD = 1500
MIN_GCD = 750

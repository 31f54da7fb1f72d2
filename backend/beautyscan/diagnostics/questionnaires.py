"""
Validated questionnaire answer sets. Invalid input fails with field-level
pydantic errors before any scoring happens.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Skin (letter-coded single/multi choice) ---
Letter = Literal["A", "B", "C", "D", "E"]
LetterAC = Literal["A", "B", "C"]
SensitivityLetter = Literal["A", "B", "C", "D"]


class SkinAnswers(BaseModel):
    q1: Letter
    q2: Letter
    q3: Letter
    q4: Letter
    q5: Letter
    q6: List[Letter] = Field(min_length=1)
    q7: LetterAC
    q8: List[SensitivityLetter] = Field(default_factory=list)
    q8_other: Optional[str] = None
    q9: LetterAC

    @field_validator("q8_other")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


# --- Hair ---
HairThickness = Literal["tres_fins", "fins", "normaux", "epais", "tres_epais"]
HairTexture = Literal["lisse", "ondule", "boucle", "crepu"]
Scalp = Literal["sec", "normal", "gras", "sensible", "pelliculaire"]
HairCondition = Literal["tres_secs", "legerement_secs", "normaux", "gras", "tres_gras"]
HairProblem = Literal[
    "casse", "frisottis", "manque_volume", "perte", "fourches",
    "pellicules", "irritation", "exces_sebum", "aucun",
]
WashFrequency = Literal["tous_jours", "2_jours", "3_jours", "semaine", "moins_semaine"]
HairTool = Literal[
    "lisseur", "fer_boucler", "seche_cheveux", "extensions",
    "decoloration", "coloration", "lissage_bresilien",
]
Climate = Literal["tres_humide", "humide", "sec", "tres_sec"]
HairGoal = Literal[
    "hydratation", "nutrition", "volume", "anti_casse", "lutte_chute",
    "lutte_pellicules", "reduction_sebum", "definition_boucles",
    "lissage_discipline", "brillance",
]


class HairAnswers(BaseModel):
    q1: HairThickness
    q2: HairTexture
    q3: Scalp
    q4: HairCondition
    q5: List[HairProblem] = Field(default_factory=list)
    q6: WashFrequency
    q7: List[HairTool] = Field(default_factory=list)
    q8: Climate
    q9: List[HairGoal] = Field(min_length=1)
    q10: Literal["non", "oui"]
    q10_other: Optional[str] = None


# --- Beauty (lifestyle + routine habits) ---
BeautyGoal = Literal[
    "Avoir une peau plus lumineuse",
    "Ralentir le vieillissement",
    "Diminuer le stress / améliorer le sommeil",
    "Avoir un joli teint naturel",
    "Routine minimaliste",
    "Routine efficace",
    "Améliorer régularité / motivation",
]


class BeautyAnswers(BaseModel):
    """Accepts the camelCase keys sent by the app as well as snake_case names."""
    model_config = ConfigDict(populate_by_name=True)

    sleep: Literal["<6h", "6-8h", "8h+"]
    hydration: Literal["<1L", "1-1.5L", "2L+"]
    stress: Literal["faible", "moyen", "eleve"]
    sun_exposure: Literal["tres-faible", "moderee", "elevee", "quotidienne-sans-protection"] = Field(alias="sunExposure")
    environment: Literal["ville", "campagne", "mer", "montagne"]
    routine_frequency: Literal["jamais", "occasionnellement", "regulierement", "tous-les-jours"] = Field(alias="routineFrequency")
    routine_steps: Literal["0", "1-2", "3-4", "5+"] = Field(alias="routineSteps")
    makeup_removal: Literal["jamais", "parfois", "tous-les-soirs"] = Field(alias="makeupRemoval")
    products_style: Literal["naturels", "conventionnels", "melange", "ne-sais-pas"] = Field(alias="productsStyle")
    spf_usage: Literal["non", "ete", "souvent", "tous-les-jours"] = Field(alias="spfUsage")
    goals: List[BeautyGoal] = Field(default_factory=list)
    knowledge_level: Literal["debutant", "intermediaire", "avance"] = Field(alias="knowledgeLevel")
    actives_comfort: Literal["pas-du-tout", "quelques-notions", "tres-a-laise"] = Field(alias="activesComfort")

"""
Hair diagnostic via the chat-completion gateway.
"""
import logging
from typing import Any, Dict

from beautyscan.diagnostics.generative import GenerativeClassifier, require_dict, require_str_list
from beautyscan.diagnostics.questionnaires import HairAnswers
from beautyscan.models.diagnostic import ClassificationError, DiagnosticResult, DiagnosticType, Routine

logger = logging.getLogger(__name__)

HAIR_GLOBAL_TYPES = (
    "cheveux gras",
    "cheveux secs",
    "cheveux normaux",
    "cheveux sensibles",
    "cheveux mixtes",
)

HEAT_TOOLS = {"lisseur", "fer_boucler", "seche_cheveux"}
CHEMICAL_TREATMENTS = {"decoloration", "coloration", "lissage_bresilien"}

SYSTEM_PROMPT = (
    "Tu es un expert en soins capillaires. Analyse les réponses du questionnaire "
    "et génère des recommandations personnalisées. Réponds UNIQUEMENT avec du JSON "
    "valide, sans markdown ni formatage supplémentaire."
)

RESPONSE_SCHEMA = """{
  "hair_type": {
    "thickness": "",
    "texture": "",
    "scalp": "",
    "global_type": ""
  },
  "current_condition": [],
  "habits": {
    "washing_frequency": "",
    "heat_tools": [],
    "chemical_treatments": [],
    "environment": ""
  },
  "goals": [],
  "sensitivities": [],
  "recommendations": {
    "ingredients_to_use": [],
    "ingredients_to_avoid": [],
    "routine": {
      "morning": [],
      "evening": [],
      "weekly": []
    }
  }
}"""


def build_hair_prompt(answers: HairAnswers) -> str:
    allergies = answers.q10
    if answers.q10_other:
        allergies += f" ({answers.q10_other})"
    return (
        "Voici les réponses d'un utilisateur au diagnostic cheveux:\n\n"
        f"1. Épaisseur: {answers.q1}\n"
        f"2. Texture: {answers.q2}\n"
        f"3. Cuir chevelu: {answers.q3}\n"
        f"4. État des cheveux: {answers.q4}\n"
        f"5. Problèmes observés: {', '.join(answers.q5) or 'Aucun'}\n"
        f"6. Fréquence de lavage: {answers.q6}\n"
        f"7. Outils/traitements utilisés: {', '.join(answers.q7) or 'Aucun'}\n"
        f"8. Environnement: {answers.q8}\n"
        f"9. Objectifs: {', '.join(answers.q9)}\n"
        f"10. Allergies: {allergies}\n\n"
        "Analyse ce profil et génère une réponse JSON strictement formatée "
        "(pas de markdown, juste du JSON pur) avec cette structure exacte:\n\n"
        f"{RESPONSE_SCHEMA}\n\n"
        "Remplis chaque champ avec des recommandations personnalisées basées sur le profil. "
        "Les tableaux doivent contenir des chaînes de caractères descriptives en français. "
        "Pour global_type, choisis parmi: "
        + ", ".join(f'"{t}"' for t in HAIR_GLOBAL_TYPES)
        + "."
    )


def _hair_result(payload: Dict[str, Any]) -> DiagnosticResult:
    recs = payload["recommendations"]
    return DiagnosticResult(
        diagnostic_type=DiagnosticType.HAIR,
        profile_label=payload["hair_type"]["global_type"],
        ingredients_to_use=list(recs["ingredients_to_use"]),
        ingredients_to_avoid=list(recs["ingredients_to_avoid"]),
        routine=Routine.from_dict(recs["routine"]),
        details=payload,
    )


class HairGenerativeClassifier(GenerativeClassifier[HairAnswers]):
    diagnostic_type = DiagnosticType.HAIR
    system_prompt = SYSTEM_PROMPT
    temperature = 0.7

    def build_prompt(self, answers: HairAnswers) -> str:
        return build_hair_prompt(answers)

    def parse_result(self, data: Dict[str, Any], answers: HairAnswers) -> DiagnosticResult:
        hair_type = require_dict(data, "hair_type")
        for key in ("thickness", "texture", "scalp", "global_type"):
            if not isinstance(hair_type.get(key), str):
                raise ClassificationError(f"Expected 'hair_type.{key}' to be a string")
        if hair_type["global_type"] not in HAIR_GLOBAL_TYPES:
            raise ClassificationError(f"Unknown global_type: {hair_type['global_type']!r}")

        require_str_list(data, "current_condition")
        habits = require_dict(data, "habits")
        require_str_list(habits, "heat_tools")
        require_str_list(habits, "chemical_treatments")
        require_str_list(data, "goals")
        require_str_list(data, "sensitivities")

        recs = require_dict(data, "recommendations")
        require_str_list(recs, "ingredients_to_use")
        require_str_list(recs, "ingredients_to_avoid")
        routine = require_dict(recs, "routine")
        for slot in ("morning", "evening", "weekly"):
            require_str_list(routine, slot)

        return _hair_result(data)

    def default_result(self, answers: HairAnswers) -> DiagnosticResult:
        sensitivities = []
        if answers.q10 == "oui" and answers.q10_other:
            sensitivities.append(answers.q10_other)
        payload = {
            "hair_type": {
                "thickness": answers.q1,
                "texture": answers.q2,
                "scalp": answers.q3,
                "global_type": "cheveux normaux",
            },
            "current_condition": [p for p in answers.q5 if p != "aucun"],
            "habits": {
                "washing_frequency": answers.q6,
                "heat_tools": [t for t in answers.q7 if t in HEAT_TOOLS],
                "chemical_treatments": [t for t in answers.q7 if t in CHEMICAL_TREATMENTS],
                "environment": answers.q8,
            },
            "goals": list(answers.q9),
            "sensitivities": sensitivities,
            "recommendations": {
                "ingredients_to_use": ["glycérine", "aloe vera", "protéines de blé"],
                "ingredients_to_avoid": ["sulfates agressifs", "silicones lourds"],
                "routine": {
                    "morning": ["démêler en douceur"],
                    "evening": ["brosser les longueurs"],
                    "weekly": ["shampooing doux", "masque hydratant"],
                },
            },
        }
        return _hair_result(payload)

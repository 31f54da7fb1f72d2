"""
Rule-based skin diagnostic. Pure lookup tables, no external calls.

Skin type: most frequent letter among q1..q3, ties broken by A,B,C,D,E order.
Skin state: q4. Goals: q6. Sensitivities: q8 (+ free-text q8_other).
"""
import logging
from collections import Counter
from typing import Dict, List

from beautyscan.diagnostics.classifier import DiagnosticClassifier
from beautyscan.diagnostics.questionnaires import SkinAnswers
from beautyscan.models.diagnostic import ClassificationOutcome, DiagnosticResult, DiagnosticType, Routine

logger = logging.getLogger(__name__)

LETTER_ORDER = ("A", "B", "C", "D", "E")

SKIN_TYPES: Dict[str, str] = {
    "A": "sèche",
    "B": "mixte",
    "C": "grasse",
    "D": "normale",
    "E": "sensible",
}

SKIN_STATES: Dict[str, str] = {
    "A": "déshydratée",
    "B": "terne",
    "C": "irritée",
    "D": "acnéique",
    "E": "mature",
}

SKIN_GOALS: Dict[str, str] = {
    "A": "hydratation",
    "B": "éclat",
    "C": "anti-âge",
    "D": "anti-taches",
    "E": "anti-acné",
}

SENSITIVITIES: Dict[str, str] = {
    "A": "parfum",
    "B": "huiles essentielles",
    "C": "alcool",
    "D": "aucune",
}

TYPE_ADVICE: Dict[str, List[str]] = {
    "sèche": [
        "Utilisez des produits riches en actifs hydratants comme l'acide hyaluronique",
        "Privilégiez les textures crémeuses et nourrissantes",
        "Évitez les nettoyants trop agressifs",
    ],
    "grasse": [
        "Optez pour des produits matifiants et purifiants",
        "Utilisez des textures légères et fluides",
        "Ne négligez pas l'hydratation avec des formules oil-free",
    ],
    "mixte": [
        "Adaptez votre routine selon les zones (zone T et joues)",
        "Privilégiez les produits équilibrants",
        "Hydratez sans alourdir",
    ],
    "sensible": [
        "Choisissez des produits hypoallergéniques",
        "Évitez les parfums et alcool",
        "Testez les nouveaux produits progressivement",
    ],
    "normale": [
        "Maintenez l'équilibre avec une routine simple",
        "Protégez votre peau avec un SPF quotidien",
    ],
}

STATE_ADVICE: Dict[str, List[str]] = {
    "déshydratée": [
        "Intégrez un sérum hydratant à base d'acide hyaluronique",
        "Buvez suffisamment d'eau",
    ],
    "terne": [
        "Utilisez des produits exfoliants doux (AHA/BHA)",
        "Intégrez de la vitamine C dans votre routine",
    ],
    "irritée": [
        "Apaisez avec des actifs comme le centella asiatica",
        "Simplifiez votre routine temporairement",
    ],
    "acnéique": [
        "Utilisez des actifs anti-imperfections (acide salicylique, niacinamide)",
        "Nettoyez votre peau matin et soir",
    ],
    "mature": [
        "Intégrez des actifs anti-âge (rétinol, peptides)",
        "N'oubliez jamais votre crème contour des yeux",
    ],
}

ANTI_SPOT_ADVICE = [
    "Utilisez un SPF 50 quotidiennement pour prévenir les taches",
    "Intégrez des actifs éclaircissants (vitamine C, arbutine)",
]

TYPE_ROUTINES: Dict[str, Routine] = {
    "sèche": Routine(
        morning=["nettoyant crème", "sérum acide hyaluronique", "crème riche", "SPF 30+"],
        evening=["démaquillant doux", "sérum hydratant", "crème nourrissante"],
        weekly=["masque nourrissant"],
    ),
    "mixte": Routine(
        morning=["gel nettoyant doux", "sérum niacinamide", "fluide hydratant", "SPF"],
        evening=["nettoyant doux", "crème équilibrante"],
        weekly=["masque purifiant zone T", "masque hydratant joues"],
    ),
    "grasse": Routine(
        morning=["gel nettoyant purifiant", "sérum niacinamide", "gel hydratant", "SPF matifiant"],
        evening=["double nettoyage", "soin à l'acide salicylique", "gel hydratant"],
        weekly=["masque argile", "gommage enzymatique"],
    ),
    "normale": Routine(
        morning=["nettoyant doux", "crème hydratante", "SPF"],
        evening=["nettoyant doux", "crème de nuit légère"],
        weekly=["masque hydratant"],
    ),
    "sensible": Routine(
        morning=["eau micellaire sans parfum", "sérum apaisant", "crème barrière", "SPF minéral"],
        evening=["nettoyant ultra doux", "crème réparatrice sans parfum"],
        weekly=["masque apaisant"],
    ),
}

STATE_INGREDIENTS: Dict[str, List[str]] = {
    "déshydratée": ["acide hyaluronique", "glycérine", "panthénol"],
    "terne": ["vitamine C", "acide lactique", "niacinamide"],
    "irritée": ["centella asiatica", "bisabolol", "panthénol"],
    "acnéique": ["acide salicylique", "niacinamide", "zinc PCA"],
    "mature": ["rétinol", "peptides", "vitamine C"],
}

STATE_AVOID: Dict[str, List[str]] = {
    "déshydratée": ["alcool dénaturé"],
    "terne": [],
    "irritée": ["acides exfoliants", "rétinol"],
    "acnéique": ["huiles lourdes", "beurres riches"],
    "mature": [],
}


def dominant_letter(letters: List[str]) -> str:
    """Most frequent letter; ties go to the earliest in A..E."""
    counts = Counter(letters)
    best = max(counts[letter] for letter in LETTER_ORDER)
    for letter in LETTER_ORDER:
        if counts[letter] == best:
            return letter
    return "D"


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def build_advice(skin_type: str, skin_state: str, goals: List[str]) -> List[str]:
    advice = list(TYPE_ADVICE.get(skin_type, [])) + list(STATE_ADVICE.get(skin_state, []))
    if "anti-taches" in goals:
        advice.extend(ANTI_SPOT_ADVICE)
    return advice


def score_skin(answers: SkinAnswers) -> DiagnosticResult:
    skin_type = SKIN_TYPES[dominant_letter([answers.q1, answers.q2, answers.q3])]
    skin_state = SKIN_STATES[answers.q4]
    goals = [SKIN_GOALS[g] for g in answers.q6]
    sensitivities = [SENSITIVITIES[s] for s in answers.q8]
    if answers.q8_other:
        sensitivities.append(answers.q8_other)

    routine_template = TYPE_ROUTINES[skin_type]
    avoid = [s for s in sensitivities if s != "aucune"] + STATE_AVOID.get(skin_state, [])

    details = {
        "type_peau": skin_type,
        "etat_peau": skin_state,
        "objectifs": goals,
        "sensibilites": sensitivities,
        "niveau_sensibilite": answers.q9,
        "budget": answers.q7,
        "reaction_produits": answers.q5,
        "conseils": build_advice(skin_type, skin_state, goals),
    }
    return DiagnosticResult(
        diagnostic_type=DiagnosticType.SKIN,
        profile_label=skin_type,
        ingredients_to_use=list(STATE_INGREDIENTS.get(skin_state, [])),
        ingredients_to_avoid=_dedupe(avoid),
        routine=Routine(
            morning=list(routine_template.morning),
            evening=list(routine_template.evening),
            weekly=list(routine_template.weekly),
        ),
        details=details,
    )


class SkinRuleClassifier(DiagnosticClassifier[SkinAnswers]):
    diagnostic_type = DiagnosticType.SKIN

    def classify(self, answers: SkinAnswers) -> ClassificationOutcome:
        result = score_skin(answers)
        logger.info("DIAGNOSTIC_SKIN type=%s state=%s", result.details["type_peau"], result.details["etat_peau"])
        return ClassificationOutcome.success(result)

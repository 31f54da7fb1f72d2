"""
Beauty (lifestyle) diagnostic. The model only picks a category and 1-3 profile
keys; the profile contents come from the static catalog below.
"""
import logging
from typing import Any, Dict, List

from beautyscan.diagnostics.generative import GenerativeClassifier
from beautyscan.diagnostics.questionnaires import BeautyAnswers
from beautyscan.models.diagnostic import ClassificationError, DiagnosticResult, DiagnosticType, Routine

logger = logging.getLogger(__name__)

MAX_PROFILES = 3
DEFAULT_CATEGORY = "Débutante"
DEFAULT_PROFILES = ["hydratation-intense"]

PROFILE_CATEGORIES = (
    "Minimaliste",
    "Débordée",
    "Avancée/passionnée",
    "Sensible/prudente",
    "Glow addict",
    "Anti-âge experte",
    "Naturelle/green",
    "Peu régulière/inconstante",
    "Stressée/fatiguée",
    "Exposée (soleil/pollution)",
)

BEAUTY_PROFILES: Dict[str, Dict[str, Any]] = {
    "anti-age": {
        "description": "Réduit l'apparence des rides, améliore la fermeté et la texture de la peau.",
        "recommended_ingredients": ["rétinol", "peptides", "bakuchiol", "vitamine C", "niacinamide", "acide hyaluronique", "acides aminés"],
        "ingredients_to_avoid": ["alcool dénaturé", "parfum", "gommages mécaniques agressifs"],
        "routine": {
            "morning": ["nettoyant doux", "vitamine C", "crème hydratante", "SPF 50"],
            "evening": ["double nettoyage", "rétinol (progressif)", "crème nourrissante"],
            "weekly": ["masque hydratant", "AHA doux"],
        },
    },
    "peau-sensible": {
        "description": "Apaise la peau et réduit les rougeurs et irritations.",
        "recommended_ingredients": ["panthénol", "bisabolol", "centella asiatica", "aloe vera", "avoine colloïdale", "céramides"],
        "ingredients_to_avoid": ["alcool", "parfum", "huiles essentielles", "AHA/BHA concentrés"],
        "routine": {
            "morning": ["nettoyant ultra doux", "sérum apaisant", "crème barrière", "SPF minéral"],
            "evening": ["nettoyant doux", "sérum céramides", "crème riche sans parfum"],
            "weekly": ["masque apaisant", "compresses d'avoine"],
        },
    },
    "anti-secheresse": {
        "description": "Répare et nourrit les peaux sèches ou déshydratées.",
        "recommended_ingredients": ["céramides", "acide hyaluronique", "squalane", "huile de jojoba", "glycérine", "beurre de karité"],
        "ingredients_to_avoid": ["alcool dénaturé", "gels nettoyants agressifs"],
        "routine": {
            "morning": ["nettoyant crème", "sérum HA", "crème riche", "SPF 30+"],
            "evening": ["double nettoyage doux", "huile nourrissante", "crème épaisse"],
            "weekly": ["bain d'hydratation", "masque nourrissant"],
        },
    },
    "hydratation-intense": {
        "description": "Redonne souplesse et hydratation à une peau déshydratée.",
        "recommended_ingredients": ["acide hyaluronique", "panthénol", "glycérine", "aloe vera", "acides aminés"],
        "ingredients_to_avoid": ["alcool", "acides exfoliants trop fréquents"],
        "routine": {
            "morning": ["brume hydratante", "sérum HA", "crème légère", "SPF"],
            "evening": ["nettoyant hydratant", "sérum panthénol", "crème réparatrice"],
            "weekly": ["masque hydratant", "sleeping mask"],
        },
    },
    "eclat": {
        "description": "Illumine le teint, améliore l'uniformité et donne du glow.",
        "recommended_ingredients": ["vitamine C", "niacinamide", "acide glycolique", "acide lactique", "acides de fruits AHA", "PHA"],
        "ingredients_to_avoid": ["huiles minérales", "soins occlusifs lourds"],
        "routine": {
            "morning": ["nettoyant doux", "vitamine C", "crème légère", "SPF"],
            "evening": ["nettoyant", "AHA léger 2–3x/semaine", "crème hydratante"],
            "weekly": ["masque illuminateur"],
        },
    },
    "anti-acne": {
        "description": "Purifie la peau, réduit les imperfections et régule le sébum.",
        "recommended_ingredients": ["acide salicylique", "niacinamide", "benzoyl peroxide", "zinc PCA", "acide azélaïque", "probiotiques"],
        "ingredients_to_avoid": ["huiles lourdes", "beurres riches", "silicones occlusifs"],
        "routine": {
            "morning": ["nettoyant purifiant", "niacinamide", "gel hydratant", "SPF matifiant"],
            "evening": ["double nettoyage", "acide salicylique", "azélaïque"],
            "weekly": ["masque purifiant", "gommage enzymatique"],
        },
    },
    "anti-taches": {
        "description": "Réduit l'hyperpigmentation et harmonise le teint.",
        "recommended_ingredients": ["vitamine C", "acide azélaïque", "niacinamide", "AHA", "arbutine", "retinol"],
        "ingredients_to_avoid": ["soleil sans SPF", "gommages agressifs"],
        "routine": {
            "morning": ["vitamine C", "niacinamide", "SPF 50"],
            "evening": ["nettoyant", "retinol ou azélaïque", "crème réparatrice"],
            "weekly": ["peeling doux AHA"],
        },
    },
    "texture-lissee": {
        "description": "Lisse la texture, resserre les pores et améliore la douceur.",
        "recommended_ingredients": ["niacinamide", "acide salicylique", "AHA", "PHA", "rétinol"],
        "ingredients_to_avoid": ["crèmes trop grasses", "huiles lourdes"],
        "routine": {
            "morning": ["nettoyant doux", "niacinamide", "SPF"],
            "evening": ["acide salicylique", "rétinol", "gel hydratant"],
            "weekly": ["exfoliation chimique douce"],
        },
    },
    "apaisement": {
        "description": "Réduit rougeurs, inconfort et irritations.",
        "recommended_ingredients": ["centella", "panthénol", "bisabolol", "céramides", "aloe vera"],
        "ingredients_to_avoid": ["acides exfoliants", "rétinol", "parfum", "huiles essentielles"],
        "routine": {
            "morning": ["nettoyant doux", "sérum apaisant centella", "crème barrière", "SPF"],
            "evening": ["nettoyage doux", "panthénol", "crème réparatrice"],
            "weekly": ["masque apaisant"],
        },
    },
    "uniformite-teint": {
        "description": "Lutte contre les zones ternes et irrégulières.",
        "recommended_ingredients": ["niacinamide", "vitamine C", "PHA", "AHA", "arbutine"],
        "ingredients_to_avoid": ["gommages physiques abrasifs"],
        "routine": {
            "morning": ["vitamine C", "hydratant", "SPF"],
            "evening": ["PHA ou AHA", "crème réparatrice"],
            "weekly": ["masque éclat"],
        },
    },
}

SYSTEM_PROMPT = "Tu es un expert en beauté et skincare. Tu réponds uniquement en JSON valide, sans markdown."


def build_beauty_prompt(answers: BeautyAnswers) -> str:
    return (
        "Tu es un expert en beauté et skincare. Analyse ce profil beauté et détermine "
        "quels profils beauté correspondent le mieux.\n\n"
        "Réponses du questionnaire :\n"
        f"- Sommeil : {answers.sleep}\n"
        f"- Hydratation : {answers.hydration}\n"
        f"- Stress : {answers.stress}\n"
        f"- Exposition soleil : {answers.sun_exposure}\n"
        f"- Environnement : {answers.environment}\n"
        f"- Fréquence routine : {answers.routine_frequency}\n"
        f"- Étapes routine : {answers.routine_steps}\n"
        f"- Démaquillage : {answers.makeup_removal}\n"
        f"- Style produits : {answers.products_style}\n"
        f"- Protection solaire : {answers.spf_usage}\n"
        f"- Objectifs : {', '.join(answers.goals)}\n"
        f"- Niveau connaissance : {answers.knowledge_level}\n"
        f"- Aisance actifs : {answers.actives_comfort}\n\n"
        "Règles de sélection :\n"
        '- "Ralentir le vieillissement" → anti-age\n'
        '- "Routine minimaliste" → routine simple (moins d\'étapes)\n'
        '- "Peau plus lumineuse" ou "joli teint naturel" → eclat\n'
        "- Stress élevé ou sommeil < 6h → apaisement\n"
        "- Hydratation faible → hydratation-intense ou anti-secheresse\n"
        "- Exposition soleil élevée sans protection → anti-taches + uniformite-teint\n"
        "- Débutant + routine 0-2 étapes → profils simples (minimaliste)\n"
        "- Avancé + 5+ étapes → profils complexes possibles\n\n"
        f"Détermine 1 à {MAX_PROFILES} profils les plus adaptés parmi : {', '.join(BEAUTY_PROFILES)}.\n\n"
        f"Détermine aussi une catégorie de profil parmi : {', '.join(PROFILE_CATEGORIES)}.\n\n"
        "Retourne un JSON avec cette structure exacte (sans markdown) :\n"
        "{\n"
        '  "profile_category": "catégorie choisie",\n'
        '  "selected_profiles": ["profil1", "profil2"]\n'
        "}"
    )


def resolve_profiles(keys: List[str]) -> List[Dict[str, Any]]:
    """Known keys only, in the order given, at most MAX_PROFILES."""
    profiles = []
    seen = set()
    for key in keys:
        if key not in BEAUTY_PROFILES:
            logger.info("DIAGNOSTIC_BEAUTY dropping unknown profile key=%s", key)
            continue
        if key in seen:
            continue
        seen.add(key)
        profiles.append({"profile": key, **BEAUTY_PROFILES[key]})
        if len(profiles) == MAX_PROFILES:
            break
    return profiles


def _merge(lists: List[List[str]]) -> List[str]:
    out: List[str] = []
    for items in lists:
        for item in items:
            if item not in out:
                out.append(item)
    return out


def build_beauty_result(answers: BeautyAnswers, category: str, profiles: List[Dict[str, Any]]) -> DiagnosticResult:
    beauty_profile = {
        "sleep": answers.sleep,
        "hydration": answers.hydration,
        "stress": answers.stress,
        "sun_exposure": answers.sun_exposure,
        "environment": answers.environment,
        "routine_frequency": answers.routine_frequency,
        "routine_steps": answers.routine_steps,
        "makeup_removal": answers.makeup_removal,
        "style": answers.products_style,
        "ingredients_preference": answers.products_style,
        "SPF_usage": answers.spf_usage,
        "goals": list(answers.goals),
        "knowledge_level": answers.knowledge_level,
        "actives_comfort": answers.actives_comfort,
        "profile_category": category,
    }
    return DiagnosticResult(
        diagnostic_type=DiagnosticType.BEAUTY,
        profile_label=category,
        ingredients_to_use=_merge([p["recommended_ingredients"] for p in profiles]),
        ingredients_to_avoid=_merge([p["ingredients_to_avoid"] for p in profiles]),
        routine=Routine(
            morning=_merge([p["routine"]["morning"] for p in profiles]),
            evening=_merge([p["routine"]["evening"] for p in profiles]),
            weekly=_merge([p["routine"]["weekly"] for p in profiles]),
        ),
        details={"beauty_profile": beauty_profile, "profiles": profiles},
    )


class BeautyGenerativeClassifier(GenerativeClassifier[BeautyAnswers]):
    diagnostic_type = DiagnosticType.BEAUTY
    system_prompt = SYSTEM_PROMPT

    def build_prompt(self, answers: BeautyAnswers) -> str:
        return build_beauty_prompt(answers)

    def parse_result(self, data: Dict[str, Any], answers: BeautyAnswers) -> DiagnosticResult:
        category = data.get("profile_category")
        keys = data.get("selected_profiles")
        if not isinstance(category, str) or not category.strip():
            raise ClassificationError("Expected 'profile_category' to be a non-empty string")
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ClassificationError("Expected 'selected_profiles' to be a list of strings")
        profiles = resolve_profiles(keys)
        if not profiles:
            raise ClassificationError(f"No known beauty profile in {keys!r}")
        return build_beauty_result(answers, category.strip(), profiles)

    def default_result(self, answers: BeautyAnswers) -> DiagnosticResult:
        return build_beauty_result(answers, DEFAULT_CATEGORY, resolve_profiles(DEFAULT_PROFILES))

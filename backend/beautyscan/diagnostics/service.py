"""
Run a diagnostic end to end: classify validated answers, then persist the
submission. Nothing is written when classification raises.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel

from beautyscan.diagnostics.classifier import DiagnosticClassifier
from beautyscan.diagnostics.questionnaires import BeautyAnswers, HairAnswers, SkinAnswers
from beautyscan.models.auth_context import AuthContext
from beautyscan.models.diagnostic import ClassificationOutcome, DiagnosticType
from beautyscan.storage.diagnostic_store import DiagnosticStore

logger = logging.getLogger(__name__)

ANSWER_MODELS: Dict[DiagnosticType, Type[BaseModel]] = {
    DiagnosticType.SKIN: SkinAnswers,
    DiagnosticType.HAIR: HairAnswers,
    DiagnosticType.BEAUTY: BeautyAnswers,
}


def validate_answers(diagnostic_type: DiagnosticType, raw: Mapping[str, Any]) -> BaseModel:
    """Raises pydantic.ValidationError on bad input."""
    return ANSWER_MODELS[diagnostic_type].model_validate(dict(raw))


class DiagnosticService:
    def __init__(
        self,
        classifiers: Mapping[DiagnosticType, DiagnosticClassifier],
        store: Optional[DiagnosticStore] = None,
    ):
        self._classifiers = dict(classifiers)
        self._store = store

    def classify(self, diagnostic_type: DiagnosticType, answers: BaseModel) -> ClassificationOutcome:
        classifier = self._classifiers.get(diagnostic_type)
        if classifier is None:
            raise ValueError(f"No classifier registered for {diagnostic_type.value}")
        return classifier.classify(answers)

    def run(self, ctx: AuthContext, diagnostic_type: DiagnosticType, answers: BaseModel) -> Dict[str, Any]:
        outcome = self.classify(diagnostic_type, answers)
        result = outcome.result.to_dict()
        if outcome.used_default:
            logger.warning(
                "DIAGNOSTIC default result used user_id=%s type=%s reason=%s",
                ctx.user_id, diagnostic_type.value, outcome.error,
            )
        row: Dict[str, Any] = {}
        if self._store is not None:
            # stored with snake_case keys
            row = self._store.insert(ctx.user_id, diagnostic_type, answers.model_dump(), result)
        return {
            "id": row.get("id"),
            "type": diagnostic_type.value,
            "result": result,
            "used_default": outcome.used_default,
        }

"""
DiagnosticClassifier: one interface for the rule-based and generative scorers.
"""
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from beautyscan.models.diagnostic import ClassificationOutcome, DiagnosticType

AnswersT = TypeVar("AnswersT", bound=BaseModel)


class DiagnosticClassifier(ABC, Generic[AnswersT]):
    diagnostic_type: DiagnosticType

    @abstractmethod
    def classify(self, answers: AnswersT) -> ClassificationOutcome:
        """
        Map validated answers to a result. Shape problems are reported through
        ClassificationOutcome.error; upstream failures raise GatewayError.
        """

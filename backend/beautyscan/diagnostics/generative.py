"""
Shared plumbing for the gateway-backed classifiers: prompt -> completion ->
JSON extraction -> shape check. Subclasses supply the prompt, the shape check
and the default result.
"""
import json
import logging
import re
from abc import abstractmethod
from typing import Any, Dict, Optional

from beautyscan.diagnostics.classifier import AnswersT, DiagnosticClassifier
from beautyscan.external_apis.llm_gateway import ChatCompletionClient
from beautyscan.models.diagnostic import ClassificationError, ClassificationOutcome, DiagnosticResult

logger = logging.getLogger(__name__)


def strip_code_fences(raw: str) -> str:
    """Remove ```json ... ``` wrappers some models add despite instructions."""
    cleaned = re.sub(r"```(?:json)?\s*", "", raw or "")
    return cleaned.strip().rstrip("`").strip()


def extract_json_object(raw: str) -> Dict[str, Any]:
    """
    Parse the first {...} block of a completion.
    Raises ClassificationError when nothing parseable is found.
    """
    cleaned = strip_code_fences(raw)
    match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    if not match:
        raise ClassificationError("No JSON object in model response", raw=raw)
    try:
        data = json.loads(match.group())
    except json.JSONDecodeError as e:
        raise ClassificationError(f"Malformed JSON in model response: {e}", raw=raw) from e
    if not isinstance(data, dict):
        raise ClassificationError("Model response is not a JSON object", raw=raw)
    return data


def require_str_list(data: Dict[str, Any], key: str) -> list:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ClassificationError(f"Expected '{key}' to be a list of strings")
    return value


def require_dict(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ClassificationError(f"Expected '{key}' to be an object")
    return value


class GenerativeClassifier(DiagnosticClassifier[AnswersT]):
    system_prompt: str = ""
    temperature: Optional[float] = None

    def __init__(self, client: Optional[ChatCompletionClient] = None):
        self._client = client if client is not None else ChatCompletionClient()

    @abstractmethod
    def build_prompt(self, answers: AnswersT) -> str:
        ...

    @abstractmethod
    def parse_result(self, data: Dict[str, Any], answers: AnswersT) -> DiagnosticResult:
        """Validate the model's JSON and build the result; raise ClassificationError on mismatch."""

    @abstractmethod
    def default_result(self, answers: AnswersT) -> DiagnosticResult:
        ...

    def classify(self, answers: AnswersT) -> ClassificationOutcome:
        # GatewayError propagates; only shape problems fall back to the default.
        raw = self._client.complete(self.system_prompt, self.build_prompt(answers), temperature=self.temperature)
        try:
            data = extract_json_object(raw)
            result = self.parse_result(data, answers)
        except ClassificationError as e:
            if e.raw is None:
                e.raw = raw
            logger.warning(
                "DIAGNOSTIC_%s shape mismatch, using default: %s raw=%s",
                self.diagnostic_type.name, e, (raw or "")[:200],
            )
            return ClassificationOutcome.fallback(self.default_result(answers), e)
        logger.info("DIAGNOSTIC_%s label=%s", self.diagnostic_type.name, result.profile_label)
        return ClassificationOutcome.success(result)

"""
Typed answers and immutable response snapshots.

Raw responses arrive as a loose JSON mapping (strings, lists, "Yes"/"No",
numbers). Before the engine touches them they are converted into one closed
set of answer variants, keyed by the declared kind of the question they
answer:

    ChoiceAnswer | MultiChoiceAnswer | BooleanAnswer | NumberAnswer | ScaleAnswer

A ResponseMap is the frozen result of that conversion. Every engine run works
on its own snapshot, and the snapshot's canonical hash is stamped on the
result so callers can tell which set of answers a recommendation belongs to.
"""

from typing import Dict, Any, Iterator, Mapping, Optional, Tuple, Union
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
import copy
import hashlib
import json
import logging

from questionnaire_models import AnswerKind, Questionnaire

logger = logging.getLogger(__name__)


# ==================== ANSWER VARIANTS ====================

@dataclass(frozen=True)
class ChoiceAnswer:
    value: str

    @property
    def answered(self) -> bool:
        return self.value != ""

    def text(self) -> Optional[str]:
        return self.value

    def display(self) -> str:
        return self.value

    def to_raw(self) -> Any:
        return self.value


@dataclass(frozen=True)
class MultiChoiceAnswer:
    values: Tuple[str, ...]

    @property
    def answered(self) -> bool:
        # An empty selection still counts; it contributes nothing through its length.
        return True

    @property
    def count(self) -> int:
        return len(self.values)

    def contains(self, value: str) -> bool:
        return value in self.values

    def text(self) -> Optional[str]:
        return None

    def display(self) -> str:
        return ", ".join(self.values)

    def to_raw(self) -> Any:
        return list(self.values)


@dataclass(frozen=True)
class BooleanAnswer:
    value: bool
    label: str  # the submitted text, normally "Yes" / "No"

    @property
    def answered(self) -> bool:
        return True

    def text(self) -> Optional[str]:
        return "Yes" if self.value else "No"

    def display(self) -> str:
        return self.label

    def to_raw(self) -> Any:
        return self.label


@dataclass(frozen=True)
class NumberAnswer:
    value: float

    @property
    def answered(self) -> bool:
        return self.value != 0

    def text(self) -> Optional[str]:
        return format_number(self.value)

    def display(self) -> str:
        return format_number(self.value)

    def to_raw(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ScaleAnswer:
    value: int  # 1-10

    @property
    def answered(self) -> bool:
        return True

    def text(self) -> Optional[str]:
        return str(self.value)

    def display(self) -> str:
        return str(self.value)

    def to_raw(self) -> Any:
        return self.value


Answer = Union[ChoiceAnswer, MultiChoiceAnswer, BooleanAnswer, NumberAnswer, ScaleAnswer]

_TRUE_WORDS = {"yes", "y", "true"}
_FALSE_WORDS = {"no", "n", "false"}


def format_number(value: Any) -> str:
    """9.0 -> "9", 12.5 -> "12.5"."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def to_answer(raw: Any, kind: Optional[AnswerKind] = None) -> Optional[Answer]:
    """
    Convert one raw response into its answer variant.

    The declared kind decides how a scalar is read; a list is always a
    multi-choice answer. Raw values that cannot be read as the declared kind
    fall back to their own shape. No range or option checks happen here:
    those belong to the response collector.
    """
    if raw is None:
        return None

    if isinstance(raw, (list, tuple)):
        return MultiChoiceAnswer(tuple(str(v) for v in raw))

    if isinstance(raw, bool):
        return BooleanAnswer(raw, "Yes" if raw else "No")

    if kind == AnswerKind.MULTI_CHOICE and isinstance(raw, str):
        return MultiChoiceAnswer((raw,)) if raw != "" else MultiChoiceAnswer(())

    if kind == AnswerKind.BOOLEAN and isinstance(raw, str):
        low = raw.strip().lower()
        if low in _TRUE_WORDS:
            return BooleanAnswer(True, raw)
        if low in _FALSE_WORDS:
            return BooleanAnswer(False, raw)
        return ChoiceAnswer(raw)

    if kind == AnswerKind.SCALE:
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return ChoiceAnswer(str(raw))
        if number.is_integer():
            return ScaleAnswer(int(number))
        return NumberAnswer(number)

    if kind == AnswerKind.NUMBER and isinstance(raw, str):
        try:
            return NumberAnswer(float(raw))
        except ValueError:
            return ChoiceAnswer(raw)

    if isinstance(raw, (int, float)):
        return NumberAnswer(float(raw))

    return ChoiceAnswer(str(raw))


def is_answered(answer: Optional[Answer]) -> bool:
    return answer is not None and answer.answered


# ==================== HASHING ====================

def canonicalize(obj: Any) -> str:
    """Deterministic JSON: sorted keys, compact separators, normalized floats."""
    def _clean(o: Any) -> Any:
        if isinstance(o, dict):
            return {str(k): _clean(v) for k, v in sorted(o.items())}
        if isinstance(o, (list, tuple)):
            return [_clean(i) for i in o]
        if isinstance(o, float):
            return round(o, 10)
        return o

    return json.dumps(_clean(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def canonical_hash(obj: Any) -> str:
    """Returns "sha256:<64-char-hex>"."""
    digest = hashlib.sha256(canonicalize(obj).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


# ==================== RESPONSE MAP ====================

class ResponseMap(MappingABC):
    """Read-only mapping of question id -> Answer for one response snapshot."""

    def __init__(self, answers: Mapping[str, Answer], raw: Mapping[str, Any]):
        self._answers = dict(answers)
        self._raw = copy.deepcopy(dict(raw))

    @classmethod
    def from_raw(cls, responses: Mapping[str, Any],
                 questionnaire: Optional[Questionnaire] = None) -> "ResponseMap":
        if isinstance(responses, ResponseMap):
            return responses

        answers: Dict[str, Answer] = {}
        for question_id, raw in responses.items():
            question = questionnaire.get_question(question_id) if questionnaire else None
            answer = to_answer(raw, question.type if question else None)
            if answer is not None:
                answers[question_id] = answer
        return cls(answers, responses)

    def __getitem__(self, question_id: str) -> Answer:
        return self._answers[question_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def __repr__(self) -> str:
        return f"ResponseMap({self._answers!r})"

    def answered(self, question_id: str) -> Optional[Answer]:
        """The answer for `question_id` if it counts as answered, else None."""
        answer = self._answers.get(question_id)
        return answer if is_answered(answer) else None

    def to_raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._raw)

    def fingerprint(self) -> str:
        return canonical_hash(self._raw)

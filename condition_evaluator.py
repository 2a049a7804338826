"""
Contraindication condition language.

Rules are short predicates over questionnaire answers:

    medical_conditions includes "Gastroparesis"
    skin_sensitivity equals "Extremely sensitive - react to most new products"
    gender equals "Female" AND medications includes "None of the above"

`includes` is membership in a multi-choice answer, `equals` is exact string
equality. Predicates combine with AND / OR; AND binds tighter than OR. There
are no parentheses and no negation.

Text is parsed once into a small tagged tree (Equals | Includes | And | Or).
Anything else raises UnsupportedConditionError from parse_condition();
evaluate_condition() treats such text as a non-matching rule and logs it.
"""

from typing import Any, Iterator, List, Mapping, Tuple, Union
from dataclasses import dataclass
from functools import lru_cache
import logging
import re

from questionnaire_models import UnsupportedConditionError
from responses import MultiChoiceAnswer, ResponseMap

logger = logging.getLogger(__name__)


# ==================== SYNTAX TREE ====================

@dataclass(frozen=True)
class Includes:
    field: str
    value: str


@dataclass(frozen=True)
class Equals:
    field: str
    value: str


@dataclass(frozen=True)
class And:
    operands: Tuple["Condition", ...]


@dataclass(frozen=True)
class Or:
    operands: Tuple["Condition", ...]


Condition = Union[Includes, Equals, And, Or]
Predicate = Union[Includes, Equals]

OPERATORS = {"includes": Includes, "equals": Equals}


# ==================== PARSER ====================

_TOKEN_RE = re.compile(r'\s*(?:"(?P<string>[^"]*)"|(?P<word>[A-Za-z_][\w\-]*))')


def _tokenize(text: str) -> List[Tuple[str, str]]:
    tokens = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise UnsupportedConditionError(
                f"Unexpected character at position {pos} in condition {text!r}"
            )
        if match.group("string") is not None:
            tokens.append(("string", match.group("string")))
        else:
            tokens.append(("word", match.group("word")))
        pos = match.end()
    return tokens


class _Parser:
    """
    condition := term ("OR" term)*
    term      := predicate ("AND" predicate)*
    predicate := FIELD ("includes" | "equals") STRING
    """

    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def parse(self) -> Condition:
        if not self.tokens:
            raise UnsupportedConditionError("Empty condition")
        node = self._condition()
        if self.pos != len(self.tokens):
            raise self._error(f"unexpected {self.tokens[self.pos][1]!r}")
        return node

    def _condition(self) -> Condition:
        terms = [self._term()]
        while self._accept_keyword("OR"):
            terms.append(self._term())
        return terms[0] if len(terms) == 1 else Or(tuple(terms))

    def _term(self) -> Condition:
        predicates = [self._predicate()]
        while self._accept_keyword("AND"):
            predicates.append(self._predicate())
        return predicates[0] if len(predicates) == 1 else And(tuple(predicates))

    def _predicate(self) -> Predicate:
        field = self._expect("word", "a question id")
        operator = self._expect("word", "'includes' or 'equals'")
        if operator not in OPERATORS:
            raise self._error(f"unknown operator {operator!r}")
        value = self._expect("string", "a quoted value")
        return OPERATORS[operator](field, value)

    def _accept_keyword(self, keyword: str) -> bool:
        if self.pos < len(self.tokens) and self.tokens[self.pos] == ("word", keyword):
            self.pos += 1
            return True
        return False

    def _expect(self, kind: str, description: str) -> str:
        if self.pos >= len(self.tokens):
            raise self._error(f"expected {description} at end of input")
        token_kind, value = self.tokens[self.pos]
        if token_kind != kind:
            raise self._error(f"expected {description}, got {value!r}")
        self.pos += 1
        return value

    def _error(self, detail: str) -> UnsupportedConditionError:
        return UnsupportedConditionError(f"Unsupported condition {self.text!r}: {detail}")


@lru_cache(maxsize=512)
def parse_condition(text: str) -> Condition:
    """Parse rule text; raises UnsupportedConditionError."""
    return _Parser(text).parse()


def iter_predicates(node: Condition) -> Iterator[Predicate]:
    if isinstance(node, (And, Or)):
        for operand in node.operands:
            yield from iter_predicates(operand)
    else:
        yield node


# ==================== EVALUATION ====================

def evaluate(node: Condition, responses: ResponseMap) -> bool:
    if isinstance(node, Includes):
        answer = responses.get(node.field)
        return isinstance(answer, MultiChoiceAnswer) and answer.contains(node.value)
    if isinstance(node, Equals):
        answer = responses.get(node.field)
        return answer is not None and answer.text() == node.value
    if isinstance(node, And):
        return all(evaluate(operand, responses) for operand in node.operands)
    if isinstance(node, Or):
        return any(evaluate(operand, responses) for operand in node.operands)
    raise TypeError(f"Not a condition node: {node!r}")


def evaluate_condition(condition: str, responses: Mapping[str, Any], strict: bool = False) -> bool:
    """
    True iff `condition` holds for `responses`.

    Unparseable text never matches. With strict=True it raises
    UnsupportedConditionError instead.
    """
    try:
        node = parse_condition(condition)
    except UnsupportedConditionError as e:
        if strict:
            raise
        logger.warning(f"⚠️  Skipping unparseable condition (treated as no match): {e}")
        return False

    return evaluate(node, ResponseMap.from_raw(responses))

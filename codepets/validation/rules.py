"""
Structural rules for code submissions

Each rule is one language construct (class header, field, method signature,
statement) compiled to a token pattern and searched for in the submission's
token stream. Pattern elements are either a literal token, a set of
alternative tokens, or the IDENT wildcard.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

from codepets.validation.tokenizer import tokenize

IDENT = "IDENT"

Element = Union[str, FrozenSet[str]]
Pattern = Tuple[Element, ...]


def _is_identifier(token: str) -> bool:
    return bool(token) and (token[0].isalpha() or token[0] in "_$")


def _element_matches(element: Element, token: str) -> bool:
    if isinstance(element, frozenset):
        return token in element
    if element == IDENT:
        return _is_identifier(token)
    return element == token


def find_pattern(pattern: Sequence[Element], tokens: Sequence[str]) -> bool:
    """True when `pattern` occurs as a contiguous run inside `tokens`"""
    size = len(pattern)
    if size == 0:
        return True
    for start in range(len(tokens) - size + 1):
        if all(_element_matches(pattern[i], tokens[start + i]) for i in range(size)):
            return True
    return False


def compile_snippet(snippet: str) -> Pattern:
    """Tokenize a Java snippet into a pattern; the word IDENT is a wildcard"""
    return tuple(tokenize(snippet))


# ==================== RULE VARIANTS ====================

@dataclass(frozen=True)
class Rule:
    rule_id: str

    def patterns(self) -> List[Pattern]:
        raise NotImplementedError

    def check(self, tokens: Sequence[str]) -> bool:
        return any(find_pattern(p, tokens) for p in self.patterns())


@dataclass(frozen=True)
class ClassHeader(Rule):
    name: str = ""
    extends: Optional[str] = None
    modifier: str = "public"

    def patterns(self) -> List[Pattern]:
        header = f"{self.modifier} class {self.name}"
        if self.extends:
            header += f" extends {self.extends}"
        return [compile_snippet(header) + ("{",)]


@dataclass(frozen=True)
class FieldDecl(Rule):
    type_name: str = ""
    name: str = ""
    modifier: str = "private"

    def patterns(self) -> List[Pattern]:
        base = compile_snippet(f"{self.modifier} {self.type_name} {self.name}")
        return [base + (frozenset({";", "="}),)]


@dataclass(frozen=True)
class MethodSignature(Rule):
    """Method or constructor header; returns=None means a constructor"""
    name: str = ""
    params: Tuple[str, ...] = ()
    returns: Optional[str] = None
    modifier: str = "public"

    def patterns(self) -> List[Pattern]:
        head = self.modifier
        if self.returns:
            head += f" {self.returns}"
        head += f" {self.name} ("
        params = ", ".join(f"{type_name} IDENT" for type_name in self.params)
        return [compile_snippet(f"{head} {params} )")]


@dataclass(frozen=True)
class Statement(Rule):
    """Any one of the given snippets must appear"""
    snippets: Tuple[str, ...] = ()

    def patterns(self) -> List[Pattern]:
        return [compile_snippet(snippet) for snippet in self.snippets]


# ==================== RULE SETS ====================

@dataclass
class ValidationResult:
    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.invalid


@dataclass(frozen=True)
class RuleSet:
    rules: Tuple[Rule, ...]

    def validate(self, code: str) -> ValidationResult:
        tokens = tokenize(code)
        result = ValidationResult()
        for rule in self.rules:
            if rule.check(tokens):
                result.valid.append(rule.rule_id)
            else:
                result.invalid.append(rule.rule_id)
        return result

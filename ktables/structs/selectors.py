"""
Label & field selectors as understood by K8s API.

Only the selectors' rendering is needed for the API calls. The parsing is
only needed for the callers' free-form selectors (e.g. from the query strings),
which are then combined with other requirements into a single selector.

.. seealso::
    https://kubernetes.io/docs/concepts/overview/working-with-objects/labels/
"""
import dataclasses
import enum
import re
from typing import Collection, Iterable, List, Mapping, Tuple


class InvalidSelectorError(ValueError):
    """ Raised when a free-form label selector cannot be parsed. """


class Operator(enum.Enum):
    EQUALS = '='
    NOT_EQUALS = '!='
    IN = 'in'
    NOT_IN = 'notin'
    EXISTS = 'exists'
    DOES_NOT_EXIST = '!'


# Label keys: an optional DNS prefix with a slash, then a name of alphanumerics & -_.
LABEL_KEY = re.compile(r'^([a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*/)?'
                       r'[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$')
LABEL_VALUE = re.compile(r'^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?)?$')


@dataclasses.dataclass(frozen=True)
class Requirement:
    key: str
    operator: Operator
    values: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not LABEL_KEY.match(self.key):
            raise InvalidSelectorError(f"Invalid label key: {self.key!r}")
        for value in self.values:
            if not LABEL_VALUE.match(value):
                raise InvalidSelectorError(f"Invalid label value for {self.key!r}: {value!r}")

        unary = self.operator in [Operator.EXISTS, Operator.DOES_NOT_EXIST]
        single = self.operator in [Operator.EQUALS, Operator.NOT_EQUALS]
        if unary and self.values:
            raise InvalidSelectorError(f"No values are allowed for {self.key!r} existence checks.")
        if single and len(self.values) != 1:
            raise InvalidSelectorError(f"Exactly one value is required for {self.key!r}.")
        if not unary and not single and not self.values:
            raise InvalidSelectorError(f"At least one value is required for {self.key!r}.")

    def __str__(self) -> str:
        if self.operator is Operator.EXISTS:
            return self.key
        elif self.operator is Operator.DOES_NOT_EXIST:
            return f'!{self.key}'
        elif self.operator in [Operator.EQUALS, Operator.NOT_EQUALS]:
            return f'{self.key}{self.operator.value}{self.values[0]}'
        else:
            # Sorted for the stable URLs (e.g. for caching & testing); the server does the same.
            return f'{self.key} {self.operator.value} ({",".join(sorted(self.values))})'

    @classmethod
    def equals(cls, key: str, value: str) -> "Requirement":
        return cls(key, Operator.EQUALS, (value,))

    @classmethod
    def is_in(cls, key: str, values: Iterable[str]) -> "Requirement":
        return cls(key, Operator.IN, tuple(values))

    @classmethod
    def exists(cls, key: str) -> "Requirement":
        return cls(key, Operator.EXISTS)


def render_label_selector(requirements: Collection[Requirement]) -> str:
    return ','.join(str(requirement) for requirement in requirements)


def render_field_selector(fields: Mapping[str, str]) -> str:
    return ','.join(f'{key}={val}' for key, val in sorted(fields.items()))


def match_nothing() -> List[Requirement]:
    """
    Requirements that no object can ever satisfy: the label both exists and not.

    Used when the caller restricts the listing to an empty set of values,
    where the empty ``in ()`` would be invalid, and omitting it would match all.
    """
    key = 'ktables.dev/match-nothing'
    return [Requirement(key, Operator.EXISTS), Requirement(key, Operator.DOES_NOT_EXIST)]


_SET_REQUIREMENT = re.compile(r'^(?P<key>\S+)\s+(?P<op>in|notin)\s*\((?P<values>[^()]*)\)$')
_VALUE_REQUIREMENT = re.compile(r'^(?P<key>[^=!\s]+)\s*(?P<op>==|=|!=)\s*(?P<value>\S*)$')


def parse_label_selector(text: str) -> List[Requirement]:
    """
    Parse a free-form label selector into the individual requirements.

    Supported are: ``k=v``, ``k==v``, ``k!=v``, ``k in (v1,v2)``,
    ``k notin (v1,v2)``, ``k`` (exists), ``!k`` (does not exist).
    The requirements are comma-separated; commas inside parentheses
    belong to the set-based requirements.
    """
    requirements: List[Requirement] = []
    for part in _split_outside_parentheses(text):
        part = part.strip()
        if not part:
            raise InvalidSelectorError(f"Empty requirement in the selector: {text!r}")
        set_match = _SET_REQUIREMENT.match(part)
        value_match = _VALUE_REQUIREMENT.match(part)
        if set_match:
            values = tuple(v.strip() for v in set_match.group('values').split(',') if v.strip())
            op = Operator.IN if set_match.group('op') == 'in' else Operator.NOT_IN
            requirements.append(Requirement(set_match.group('key'), op, values))
        elif value_match:
            op = Operator.NOT_EQUALS if value_match.group('op') == '!=' else Operator.EQUALS
            requirements.append(Requirement(value_match.group('key'), op, (value_match.group('value'),)))
        elif part.startswith('!'):
            requirements.append(Requirement(part[1:].strip(), Operator.DOES_NOT_EXIST))
        else:
            requirements.append(Requirement(part, Operator.EXISTS))
    return requirements


def _split_outside_parentheses(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    start = 0
    for idx, char in enumerate(text):
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth < 0:
                raise InvalidSelectorError(f"Unbalanced parentheses in the selector: {text!r}")
        elif char == ',' and depth == 0:
            parts.append(text[start:idx])
            start = idx + 1
    if depth != 0:
        raise InvalidSelectorError(f"Unbalanced parentheses in the selector: {text!r}")
    if text.strip():
        parts.append(text[start:])
    return parts

# -*- coding: utf-8 -*-
"""
Report expression interpreter.

Report columns computed by the bridge arrive as small JSON expression
trees evaluated against one family at a time. Only the node types below
exist; anything else (including plain strings of code) is rejected.

    {"op": "literal", "value": 3}
    {"op": "field", "of": "family" | "head" | "member", "name": "dob"}
    {"op": "count", "where": <predicate>}
    {"op": "exists", "where": <predicate>}
    {"op": "first", "where": <predicate>, "field": "name"}
    {"op": "age", "of": "member" | "head"}
    {"op": "eq" | "ne" | "lt" | "le" | "gt" | "ge", "args": [a, b]}
    {"op": "and" | "or", "args": [...]}
    {"op": "not", "arg": x}
    {"op": "contains", "args": [text, part]}
    {"op": "if", "cond": c, "then": a, "else": b}

"member" is the member a count/exists/first predicate is applied to.
"""

import operator
from typing import Any, Dict, List, Optional, Sequence

from models.family import Family
from models.individual import Individual
from services.exceptions import ReportExpressionError
from services.family_service import find_head_of_family
from services.translation_manager import tr
from utils.datetime_utils import calculate_age
from utils.logger import get_logger

logger = get_logger(__name__)

EMPTY_CELL = "-"

_COMPARISONS = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": operator.lt,
    "le": operator.le,
    "gt": operator.gt,
    "ge": operator.ge,
}

_SUBJECTS = ("family", "head", "member")


def render_value(value: Any) -> Any:
    """Cell value as shown in a report."""
    if isinstance(value, bool):
        return tr("common.yes") if value else tr("common.no")
    if value is None or value == "":
        return EMPTY_CELL
    return value


class ExpressionContext:
    """One family, its members and the member currently bound by a predicate."""

    def __init__(self, family: Family, members: Sequence[Individual],
                 member: Optional[Individual] = None):
        self.family = family
        self.members = list(members)
        self.member = member
        self._head = None
        self._head_known = False

    @property
    def head(self) -> Optional[Individual]:
        if not self._head_known:
            self._head = find_head_of_family(self.members)
            self._head_known = True
        return self._head

    def bind(self, member: Individual) -> 'ExpressionContext':
        bound = ExpressionContext(self.family, self.members, member)
        bound._head, bound._head_known = self._head, self._head_known
        return bound

    def subject(self, name: str, node: Any):
        if name not in _SUBJECTS:
            raise ReportExpressionError(f"Unknown subject {name!r}", node)
        if name == "member" and self.member is None:
            raise ReportExpressionError("'member' used outside a member predicate", node)
        return getattr(self, name)


def _read_field(obj: Any, name: str, node: Any) -> Any:
    if obj is None:
        return None
    if name not in obj.__dataclass_fields__:
        raise ReportExpressionError(f"Unknown field {name!r}", node)
    return getattr(obj, name)


def _comparable(left: Any, right: Any):
    """Case-insensitive for text, numeric when both sides read as numbers."""
    if isinstance(left, str) and isinstance(right, str):
        return left.strip().lower(), right.strip().lower()
    return left, right


class ExpressionEvaluator:
    """Evaluates expression trees."""

    def evaluate(self, node: Any, family: Family, members: Sequence[Individual]) -> Any:
        """
        Evaluate node for one family.

        Raises:
            ReportExpressionError: node is not a valid expression tree.
        """
        return self._eval(node, ExpressionContext(family, members))

    def validate(self, node: Any):
        """Structural check without data; raises ReportExpressionError."""
        if not isinstance(node, dict):
            raise ReportExpressionError("Expression must be an object", node)
        op = node.get("op")
        if op not in self._handlers():
            raise ReportExpressionError(f"Unknown operation {op!r}", node)
        for key in ("where", "arg", "cond", "then", "else"):
            if isinstance(node.get(key), dict):
                self.validate(node[key])
        for child in node.get("args") or []:
            self.validate(child)

    def _handlers(self) -> Dict[str, Any]:
        handlers = {
            "literal": self._literal,
            "field": self._field,
            "count": self._count,
            "exists": self._exists,
            "first": self._first,
            "age": self._age,
            "and": self._and,
            "or": self._or,
            "not": self._not,
            "contains": self._contains,
            "if": self._if,
        }
        for name in _COMPARISONS:
            handlers[name] = self._compare
        return handlers

    def _eval(self, node: Any, ctx: ExpressionContext) -> Any:
        if not isinstance(node, dict):
            raise ReportExpressionError("Expression must be an object", node)
        handler = self._handlers().get(node.get("op"))
        if handler is None:
            raise ReportExpressionError(f"Unknown operation {node.get('op')!r}", node)
        return handler(node, ctx)

    def _args(self, node: Dict[str, Any], count: int = None) -> List[Any]:
        args = node.get("args")
        if not isinstance(args, list) or (count is not None and len(args) != count):
            raise ReportExpressionError(f"'{node.get('op')}' needs {count or 'a list of'} args", node)
        return args

    def _matching(self, node, ctx) -> List[Individual]:
        where = node.get("where")
        if where is None:
            return list(ctx.members)
        return [m for m in ctx.members if self._eval(where, ctx.bind(m))]

    # ==================== Nodes ====================

    def _literal(self, node, ctx):
        value = node.get("value")
        if isinstance(value, (dict, list)):
            raise ReportExpressionError("Literal must be a scalar", node)
        return value

    def _field(self, node, ctx):
        subject = ctx.subject(node.get("of", "member"), node)
        return _read_field(subject, node.get("name"), node)

    def _count(self, node, ctx):
        return len(self._matching(node, ctx))

    def _exists(self, node, ctx):
        return bool(self._matching(node, ctx))

    def _first(self, node, ctx):
        found = self._matching(node, ctx)
        if not found:
            return None
        return _read_field(found[0], node.get("field", "name"), node)

    def _age(self, node, ctx):
        subject = ctx.subject(node.get("of", "member"), node)
        if subject is None:
            return None
        return calculate_age(_read_field(subject, "dob", node))

    def _compare(self, node, ctx):
        left, right = (self._eval(arg, ctx) for arg in self._args(node, 2))
        if left is None or right is None:
            if node["op"] == "eq":
                return left is right
            if node["op"] == "ne":
                return left is not right
            return False
        left, right = _comparable(left, right)
        try:
            return _COMPARISONS[node["op"]](left, right)
        except TypeError:
            raise ReportExpressionError(f"Cannot compare {left!r} and {right!r}", node)

    def _and(self, node, ctx):
        return all(self._eval(arg, ctx) for arg in self._args(node))

    def _or(self, node, ctx):
        return any(self._eval(arg, ctx) for arg in self._args(node))

    def _not(self, node, ctx):
        return not self._eval(node.get("arg"), ctx)

    def _contains(self, node, ctx):
        text, part = (self._eval(arg, ctx) for arg in self._args(node, 2))
        if text is None or part is None:
            return False
        return str(part).lower() in str(text).lower()

    def _if(self, node, ctx):
        branch = "then" if self._eval(node.get("cond"), ctx) else "else"
        if branch not in node:
            return None
        return self._eval(node[branch], ctx)

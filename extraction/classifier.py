"""
Classification of the declaration line that follows a documentation block.

Shape matchers are tried in a fixed priority order and the first one that
matches wins. The order is what disambiguates overlapping shapes: a
``name: function ()`` method must be seen before a plain ``name: value``
property, and a ``// <constructor>``-tagged function literal before a free
function.

Member and function shapes accept a leading ``//``: interface-like types
declare their constructor and members in commented-out form.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from extraction.config import (
    ANY_TYPE,
    CONSTRUCTOR_MARKER,
    FROZEN_OBJECT_CALL,
    PRIVATE_PREFIX,
    REQUIRED_MARKER,
)
from extraction.doc_fields import split_nullability
from extraction.models import (
    Constant,
    Function,
    Member,
    Method,
    Nullability,
    Property,
    Symbol,
)
from extraction.visibility import resolve_backing_field, resolve_getter

logger = logging.getLogger(__name__)


class DeclarationShape(str, Enum):
    """Declaration shapes, in matching priority order."""

    INSTANCE_METHOD = "instance_method"
    STATIC_MEMBER = "static_member"
    FUNCTION_VARIABLE = "function_variable"
    CLASS_DECLARATION = "class_declaration"
    NAMED_FUNCTION = "named_function"
    FROZEN_ENUM = "frozen_enum"
    TYPED_VARIABLE = "typed_variable"
    TYPED_PROPERTY = "typed_property"
    UNTYPED_VARIABLE = "untyped_variable"
    UNTYPED_PROPERTY = "untyped_property"
    GETTER = "getter"
    OPAQUE = "opaque"


class Placement(str, Enum):
    """Where the extractor files a classified member."""

    COMPONENT = "component"
    CONSTRUCTOR = "constructor"
    ENUM_FIELD = "enum_field"
    GLOBAL = "global"
    OUTLINE_ONLY = "outline_only"


@dataclass(frozen=True)
class DeclarationContext:
    """Inputs available to every shape builder.

    Attributes:
        line: The declaration line itself.
        following_text: Source text starting on the next line.
        private_prefix: Prefix marking private names.
    """

    line: str
    following_text: str = ""
    private_prefix: str = PRIVATE_PREFIX

    def is_private_name(self, name: str) -> bool:
        return bare_member_name(name).startswith(self.private_prefix)


@dataclass
class Classification:
    """Outcome of classifying one declaration line."""

    shape: DeclarationShape
    member: Member
    category: str
    placement: Placement


Builder = Callable[["re.Match[str]", DeclarationContext], Classification]


@dataclass(frozen=True)
class ShapeMatcher:
    """A declaration shape with the patterns that recognise it."""

    shape: DeclarationShape
    patterns: Tuple["re.Pattern[str]", ...]
    build: Builder

    def match(self, line: str) -> Optional["re.Match[str]"]:
        for pattern in self.patterns:
            found = pattern.search(line)
            if found:
                return found
        return None


# Pattern building blocks
_IDENT = r"[A-Za-z_$][\w$]*"
_REQUIRED = rf"(?P<required>{re.escape(REQUIRED_MARKER)}\s*)?"
_COMMENTED = r"(?://\s*)?"
_BINDING = r"(?:export\s+)?(?P<binding>var|let|const)\s+"
_EXPORT = r"(?:export\s+(?:default\s+)?)?"
_ASYNC = r"(?P<async>async\s+)?"
_FUNCTION_LITERAL = r"function\b[^(]*\(.*?\)"
_INLINE_TYPE = r"//\s*<(?P<type>.*)>"

_NOT_ACCESSOR = r"(?!(?:get|set|static)\s)"
_NOT_KEYWORD = r"(?!(?:function|if|for|while|switch|catch|return|new|typeof|class)\b)"

_INLINE_TYPE_RE = re.compile(_INLINE_TYPE)


def bare_member_name(name: str) -> str:
    """Drop the ``// `` prefix of a commented-out interface member."""
    if name.startswith("//"):
        return name[2:].strip()
    return name


def _category(base: str, is_private: bool = False, is_static: bool = False, is_async: bool = False) -> str:
    words = []
    if is_async:
        words.append("async")
    if is_private:
        words.append("private")
    if is_static:
        words.append("static")
    words.append(base)
    return " ".join(words)


def _group(match: "re.Match[str]", name: str) -> Optional[str]:
    return match.groupdict().get(name)


def _build_method(
    match: "re.Match[str]",
    ctx: DeclarationContext,
    shape: DeclarationShape,
    is_static: bool,
) -> Classification:
    name = match.group("name").strip()
    is_async = bool(_group(match, "async"))
    is_private = ctx.is_private_name(name)
    member = Method(
        name=name,
        is_private=is_private,
        is_static=is_static,
        is_async=is_async,
        optional=not _group(match, "required"),
    )
    category = _category("method", is_private, is_static, is_async)
    if not member.optional:
        category = "required " + category
    return Classification(shape, member, category, Placement.COMPONENT)


def _build_instance_method(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    return _build_method(match, ctx, DeclarationShape.INSTANCE_METHOD, is_static=False)


def _build_static_member(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    if "value" not in match.groupdict():
        return _build_method(match, ctx, DeclarationShape.STATIC_MEMBER, is_static=True)

    # Static data assignment: typed through an inline annotation when present.
    name = match.group("name").strip()
    annotation = _INLINE_TYPE_RE.search(ctx.line)
    data_type, nullability = split_nullability(annotation.group("type") if annotation else ANY_TYPE)
    is_private = ctx.is_private_name(name)
    member = Property(
        name=name,
        data_type=data_type,
        nullable=nullability is Nullability.NULLABLE,
        is_private=is_private,
        is_static=True,
    )
    return Classification(
        DeclarationShape.STATIC_MEMBER,
        member,
        _category("property", is_private, is_static=True),
        Placement.COMPONENT,
    )


def _build_function_binding(
    match: "re.Match[str]",
    ctx: DeclarationContext,
    shape: DeclarationShape,
) -> Classification:
    name = match.group("name").strip()
    is_private = ctx.is_private_name(name)

    if CONSTRUCTOR_MARKER in ctx.line:
        member = Method(name=name, is_private=is_private)
        return Classification(shape, member, _category("type", is_private), Placement.CONSTRUCTOR)

    is_async = bool(_group(match, "async"))
    member = Function(name=name, is_private=is_private, is_async=is_async)
    return Classification(
        shape,
        member,
        _category("function", is_private, is_async=is_async),
        Placement.GLOBAL,
    )


def _build_function_variable(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    return _build_function_binding(match, ctx, DeclarationShape.FUNCTION_VARIABLE)


def _build_named_function(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    return _build_function_binding(match, ctx, DeclarationShape.NAMED_FUNCTION)


def _build_class(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    name = match.group("name").strip()
    is_private = ctx.is_private_name(name)
    member = Method(name=name, is_private=is_private)
    return Classification(
        DeclarationShape.CLASS_DECLARATION,
        member,
        _category("type", is_private),
        Placement.CONSTRUCTOR,
    )


def _build_frozen_enum(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    name = match.group("name").strip()
    member = Constant(name=name, is_private=ctx.is_private_name(name))
    return Classification(DeclarationShape.FROZEN_ENUM, member, "enum", Placement.ENUM_FIELD)


def _build_variable(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    name = match.group("name").strip()
    raw_type = _group(match, "type")
    data_type, nullability = split_nullability(raw_type if raw_type is not None else ANY_TYPE)
    member = Symbol(
        name=name,
        data_type=data_type,
        nullable=nullability is Nullability.NULLABLE,
        is_private=ctx.is_private_name(name),
        is_readonly=_group(match, "binding") == "const",
    )
    shape = DeclarationShape.UNTYPED_VARIABLE if raw_type is None else DeclarationShape.TYPED_VARIABLE
    return Classification(shape, member, "symbol", Placement.GLOBAL)


def _build_property(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    declared_name = bare_member_name(match.group("name").strip())
    raw_type = _group(match, "type")
    data_type, nullability = split_nullability(raw_type if raw_type is not None else ANY_TYPE)

    resolution = resolve_backing_field(declared_name, ctx.following_text, ctx.private_prefix)
    member = Property(
        name=resolution.name,
        data_type=data_type,
        nullable=nullability is Nullability.NULLABLE,
        read=resolution.read,
        write=resolution.write,
        is_private=resolution.is_private,
    )
    shape = DeclarationShape.UNTYPED_PROPERTY if raw_type is None else DeclarationShape.TYPED_PROPERTY
    return Classification(shape, member, resolution.qualifier + "property", Placement.COMPONENT)


def _build_getter(match: "re.Match[str]", ctx: DeclarationContext) -> Classification:
    name = match.group("name").strip()
    raw_type = _group(match, "type")
    data_type, nullability = split_nullability(raw_type if raw_type is not None else ANY_TYPE)

    resolution = resolve_getter(name, ctx.line, ctx.following_text)
    is_static = bool(_group(match, "static"))
    is_private = ctx.is_private_name(name)
    member = Property(
        name=name,
        data_type=data_type,
        nullable=nullability is Nullability.NULLABLE,
        read=True,
        write=resolution.write,
        is_private=is_private,
        is_static=is_static,
    )
    category = _category("property", is_private, is_static)
    if not resolution.write:
        category = "readonly " + category
    return Classification(DeclarationShape.GETTER, member, category, Placement.COMPONENT)


def _compile(*parts: str) -> "re.Pattern[str]":
    return re.compile("".join(parts))


DECLARATION_MATCHERS: Tuple[ShapeMatcher, ...] = (
    ShapeMatcher(
        DeclarationShape.INSTANCE_METHOD,
        (
            # name: function (...)
            _compile(r"^\s*", _REQUIRED, r"(?P<name>", _COMMENTED, _IDENT, r")\s*:\s*", _ASYNC, _FUNCTION_LITERAL),
            # name(...) {
            _compile(
                r"^\s*", _REQUIRED, _ASYNC, r"(?:\*\s*)?", _NOT_ACCESSOR, _NOT_KEYWORD,
                r"(?P<name>", _IDENT, r")\s*\(.*?\)\s*\{",
            ),
            # Type.prototype.name = function (...)
            _compile(
                r"^\s*", _IDENT, r"(?:\.", _IDENT, r")*\.prototype\.(?P<name>", _IDENT, r")\s*=\s*",
                _ASYNC, _FUNCTION_LITERAL,
            ),
        ),
        _build_instance_method,
    ),
    ShapeMatcher(
        DeclarationShape.STATIC_MEMBER,
        (
            _compile(r"^\s*static\s+", _ASYNC, r"(?P<name>", _IDENT, r")\s*\(.*?\)\s*\{"),
            _compile(
                r"^\s*(?!this\.)", _IDENT, r"\.(?P<name>", _IDENT, r")\s*=\s*", _ASYNC, _FUNCTION_LITERAL,
            ),
            _compile(
                r"^\s*(?!this\.)", _IDENT, r"\.(?!prototype\b)(?P<name>", _IDENT, r")\s*=\s*(?P<value>[^;]+);",
            ),
            _compile(r"^\s*static\s+(?P<name>", _IDENT, r")\s*=\s*(?P<value>[^;]*)"),
        ),
        _build_static_member,
    ),
    ShapeMatcher(
        DeclarationShape.FUNCTION_VARIABLE,
        (_compile(r"^\s*", _COMMENTED, _BINDING, r"(?P<name>", _IDENT, r")\s*=\s*", _ASYNC, _FUNCTION_LITERAL),),
        _build_function_variable,
    ),
    ShapeMatcher(
        DeclarationShape.CLASS_DECLARATION,
        (_compile(r"^\s*", _EXPORT, r"class\s+(?P<name>", _IDENT, r")\s*(?P<heritage>extends\s+[^{]+?)?\s*\{"),),
        _build_class,
    ),
    ShapeMatcher(
        DeclarationShape.NAMED_FUNCTION,
        (_compile(r"^\s*", _COMMENTED, _EXPORT, _ASYNC, r"function\s*\*?\s*(?P<name>", _IDENT, r")\s*\(.*?\)"),),
        _build_named_function,
    ),
    ShapeMatcher(
        DeclarationShape.FROZEN_ENUM,
        (
            _compile(
                r"^\s*", _BINDING, r"(?P<name>", _IDENT, r")\s*=\s*", re.escape(FROZEN_OBJECT_CALL), r"\(\s*\{",
            ),
        ),
        _build_frozen_enum,
    ),
    ShapeMatcher(
        DeclarationShape.TYPED_VARIABLE,
        (_compile(r"^\s*", _BINDING, r"(?P<name>", _IDENT, r")\s*=.*?", _INLINE_TYPE),),
        _build_variable,
    ),
    ShapeMatcher(
        DeclarationShape.TYPED_PROPERTY,
        (_compile(r"^\s*", _REQUIRED, r"(?P<name>", _COMMENTED, _IDENT, r")\s*:.*?", _INLINE_TYPE),),
        _build_property,
    ),
    ShapeMatcher(
        DeclarationShape.UNTYPED_VARIABLE,
        (_compile(r"^\s*", _BINDING, r"(?P<name>", _IDENT, r")\s*(?:=|;|$)"),),
        _build_variable,
    ),
    ShapeMatcher(
        DeclarationShape.UNTYPED_PROPERTY,
        (_compile(r"^\s*", _REQUIRED, r"(?P<name>", _COMMENTED, _IDENT, r")\s*:"),),
        _build_property,
    ),
    ShapeMatcher(
        DeclarationShape.GETTER,
        (
            _compile(
                r"^\s*(?P<static>static\s+)?get\s+(?P<name>", _IDENT, r")\s*\(\s*\)\s*\{\s*", _INLINE_TYPE, r"\s*$",
            ),
            _compile(r"^\s*(?P<static>static\s+)?get\s+(?P<name>", _IDENT, r")\s*\(\s*\)\s*\{"),
        ),
        _build_getter,
    ),
)


def classify_declaration(
    line: str,
    following_text: str = "",
    private_prefix: str = PRIVATE_PREFIX,
) -> Classification:
    """Classify the declaration line following a documentation block.

    Args:
        line: The declaration line.
        following_text: Source text after the declaration line, used for
            accessor lookahead.
        private_prefix: Prefix marking private names.

    Returns:
        The classification of the first matching shape, or an opaque
        ``Symbol`` carrying the literal line when no shape matches.

    Example:
        >>> classify_declaration("isEqualToPoint: function (point) {").member.name
        'isEqualToPoint'
    """
    ctx = DeclarationContext(line=line, following_text=following_text, private_prefix=private_prefix)

    for matcher in DECLARATION_MATCHERS:
        match = matcher.match(line)
        if match is None:
            continue
        classification = matcher.build(match, ctx)
        logger.debug(
            "Classified %r as %s (%s)",
            classification.member.name,
            classification.shape.value,
            classification.category,
        )
        return classification

    logger.debug("No declaration shape matched %r", line.strip())
    return Classification(
        DeclarationShape.OPAQUE,
        Symbol(name=line.strip(), opaque=True),
        "symbol",
        Placement.OUTLINE_ONLY,
    )

"""
Data models for extracted declarations.

A run produces one ``TypeEntry`` per type section plus loose global
``Function`` and ``Symbol`` members, all keyed by name in an ordered
globals map.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from extraction.config import ANY_TYPE, ENUM_TYPE, INTERFACE_MARKER

logger = logging.getLogger(__name__)


class Nullability(str, Enum):
    """Nullability annotation attached to a type."""

    NONE = "none"
    NULLABLE = "nullable"
    NULL_RESETTABLE = "null resettable"


class EntryKind(str, Enum):
    """Kind of a type section, inferred from its first classified member."""

    UNTYPED = "untyped"
    CLASS = "class"
    ENUM = "enum"


@dataclass
class Param:
    """A positional or options-bag parameter."""

    name: str
    data_type: str
    nullable: bool = False
    description: str = ""


@dataclass
class ReturnValue:
    """Documented return value of a callable member."""

    data_type: str
    nullable: bool = False
    description: str = ""


@dataclass
class Member:
    """Base of every documented declaration.

    Attributes:
        name: Declared name (prefix-stripped for resolved public properties).
        doc: Re-flowed documentation block, ``/** ... */``.
        is_private: Whether the name starts with the private prefix.
    """

    kind: ClassVar[str] = "member"

    name: str
    doc: str = ""
    is_private: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert the member to a dictionary suitable for JSON serialization."""
        payload = asdict(self)
        payload["kind"] = self.kind
        return payload


@dataclass
class CallableMember(Member):
    """Shared shape of methods and free functions."""

    is_async: bool = False
    arguments: List[Param] = field(default_factory=list)
    arguments_object: List[Param] = field(default_factory=list)
    returns: Optional[ReturnValue] = None


@dataclass
class Method(CallableMember):
    """Instance or static method, or a section's constructor."""

    kind: ClassVar[str] = "method"

    is_static: bool = False
    optional: bool = True


@dataclass
class Function(CallableMember):
    """Free function registered in the globals map."""

    kind: ClassVar[str] = "function"


@dataclass
class Property(Member):
    """Data or accessor property of a class section."""

    kind: ClassVar[str] = "property"

    data_type: str = "any"
    nullable: bool = False
    read: bool = True
    write: bool = True
    is_static: bool = False


@dataclass
class Symbol(Member):
    """Global variable, or an opaque declaration the classifier could not shape."""

    kind: ClassVar[str] = "symbol"

    data_type: str = "any"
    nullable: bool = False
    is_readonly: bool = False
    opaque: bool = False


@dataclass
class Constant(Member):
    """Frozen enumeration object declared in an enum section."""

    kind: ClassVar[str] = "constant"


@dataclass
class TypeEntry:
    """Symbol-table entry collected for one named type section."""

    name: str
    kind: EntryKind = EntryKind.UNTYPED
    components: List[Member] = field(default_factory=list)
    constructor: Optional[Method] = None
    fields: List[Constant] = field(default_factory=list)
    is_private: bool = False
    _conflict_reported: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def is_interface(self) -> bool:
        return self.name.startswith(INTERFACE_MARKER)

    @property
    def display_name(self) -> str:
        """Name with the interface marker removed (heritage clauses kept)."""
        if self.is_interface:
            return self.name[len(INTERFACE_MARKER):].strip()
        return self.name.strip()

    @property
    def declared_name(self) -> str:
        """Bare type identifier, e.g. ``BMPoint`` for ``BMPoint implements BMAnimating``."""
        parts = self.display_name.split()
        return parts[0] if parts else ""

    def infer_kind(self, kind: EntryKind) -> None:
        """Record the kind implied by a newly classified member.

        The first classified member decides the kind; conflicting members
        afterwards are kept but do not change it. The conflict is logged once
        per section.
        """
        if self.kind is EntryKind.UNTYPED:
            self.kind = kind
        elif self.kind is not kind and not self._conflict_reported:
            self._conflict_reported = True
            logger.warning(
                "Section '%s' mixes %s and %s members; keeping %s",
                self.name,
                self.kind.value,
                kind.value,
                self.kind.value,
            )

    def add_component(self, member: Member) -> None:
        """Append a class component, inferring the section kind from it.

        Untyped instance properties of an enum section are its values.
        """
        if (
            self.kind is EntryKind.ENUM
            and isinstance(member, Property)
            and not member.is_static
            and member.data_type == ANY_TYPE
        ):
            member.data_type = ENUM_TYPE

        is_enum_value = isinstance(member, Property) and member.data_type == ENUM_TYPE
        if is_enum_value and self.kind is not EntryKind.CLASS:
            self.infer_kind(EntryKind.ENUM)
        else:
            self.infer_kind(EntryKind.CLASS)
        self.components.append(member)

    def set_constructor(self, member: Method) -> None:
        self.infer_kind(EntryKind.CLASS)
        self.constructor = member
        self.is_private = member.is_private

    def add_field(self, member: Constant) -> None:
        self.infer_kind(EntryKind.ENUM)
        self.fields.append(member)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "is_private": self.is_private,
            "constructor": self.constructor.to_dict() if self.constructor else None,
            "components": [c.to_dict() for c in self.components],
            "fields": [f.to_dict() for f in self.fields],
        }


GlobalEntry = Union[TypeEntry, Function, Symbol]


@dataclass(frozen=True)
class OutlineItem:
    """One documented declaration as listed in a section outline."""

    name: str
    category: str
    link_id: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

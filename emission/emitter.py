"""
Rendering of an extracted symbol table as a typed declaration file.

Every globals entry is emitted in encounter order after the prelude:
functions and symbols as top-level declarations, class sections as
classes (or interfaces, for sections named ``interface X``) and enum
sections as classes with one static member per value and a private
constructor.
"""

import logging
from typing import Iterable, List, Mapping, Optional

from core.structured_logging import phase_scope
from emission.config import (
    CONSTRUCTOR_NAME,
    DECLARE_PREFIX,
    DEFAULT_INDENT,
    EXPORT_PREFIX,
    INDEX_SIGNATURE,
    OPTIONAL_MARKER,
    PROMISE_TYPE,
    REST_ARGUMENT_NAME,
    REST_PARAMETER,
    VOID,
)
from emission.docs import indent_documentation, render_documentation
from emission.prelude import DEFAULT_PRELUDE, Prelude
from emission.type_grammar import expand_optional, translate
from extraction.classifier import bare_member_name
from extraction.config import DEFAULT_SETTINGS, ENUM_TYPE, ExtractionSettings
from extraction.extractor import extract_symbol_table
from extraction.models import (
    CallableMember,
    EntryKind,
    Function,
    GlobalEntry,
    Method,
    Param,
    Property,
    Symbol,
    TypeEntry,
)

logger = logging.getLogger(__name__)


def _optional_suffix(translated_type: str) -> str:
    return OPTIONAL_MARKER if translated_type.endswith(OPTIONAL_MARKER) else ""


def render_parameters(member: CallableMember) -> str:
    """Render the parameter list of a function or method.

    Positional parameters keep their optional marker only while every
    options-bag field is optional too; rest parameters are never optional.
    """
    bag = member.arguments_object
    bag_optional = all(param.nullable for param in bag)
    parts: List[str] = []

    for param in member.arguments:
        data_type = translate(param.data_type, param.nullable)
        name = param.name
        optional = _optional_suffix(data_type) if bag_optional else ""
        if name.startswith(REST_PARAMETER):
            if name == REST_PARAMETER:
                name = REST_ARGUMENT_NAME
            optional = ""
        parts.append(f"{name}{optional}: {expand_optional(data_type)}")

    if bag:
        parts.append(_render_arguments_object(bag, bag_optional))

    return ", ".join(parts)


def _render_arguments_object(bag: List[Param], bag_optional: bool) -> str:
    names = ", ".join(param.name for param in bag if param.name != REST_PARAMETER)

    fields = []
    for param in bag:
        data_type = translate(param.data_type, param.nullable)
        if param.name == REST_PARAMETER:
            name = INDEX_SIGNATURE
        else:
            name = param.name + _optional_suffix(data_type)
        fields.append(f"{name}: {expand_optional(data_type)}")

    optional = OPTIONAL_MARKER if bag_optional else ""
    return f"{{{names}}}{optional}: {{{', '.join(fields)}}}"


def render_return_type(member: CallableMember) -> str:
    """Render the return annotation, wrapping async results in a promise."""
    if member.returns is not None:
        data_type = translate(member.returns.data_type, member.returns.nullable)
    else:
        data_type = VOID

    if member.is_async and not data_type.startswith(PROMISE_TYPE + "<"):
        data_type = f"{PROMISE_TYPE}<{data_type}>"
    return expand_optional(data_type)


class DeclarationEmitter:
    """Render globals entries with a fixed visibility prefix and indentation.

    Args:
        emit_as_module: Use ``export`` instead of ``declare`` on top-level
            declarations.
        indent: Indentation of class and interface members.
    """

    def __init__(self, emit_as_module: bool = False, indent: str = DEFAULT_INDENT):
        self.emit_as_module = emit_as_module
        self.prefix = EXPORT_PREFIX if emit_as_module else DECLARE_PREFIX
        self.indent = indent

    def emit(self, entry: GlobalEntry) -> Optional[str]:
        """Render one globals entry, or None when it produces no declaration."""
        if isinstance(entry, TypeEntry):
            if entry.kind is EntryKind.ENUM:
                return self.emit_enum(entry)
            if entry.kind is EntryKind.CLASS:
                return self.emit_class(entry)
            logger.debug("Section '%s' has no classified members; skipping", entry.name)
            return None
        if isinstance(entry, Function):
            return self.emit_function(entry)
        if isinstance(entry, Symbol):
            return self.emit_symbol(entry)
        raise TypeError(f"Unsupported globals entry: {type(entry).__name__}")

    def _with_doc(self, doc: str, declaration: str) -> str:
        rendered = render_documentation(doc)
        return f"{rendered}\n{declaration}" if rendered else declaration

    def _member_lines(self, doc: str, declaration: str) -> List[str]:
        lines = [""]
        rendered = render_documentation(doc)
        if rendered:
            lines.append(indent_documentation(rendered, self.indent))
        lines.append(self.indent + declaration)
        return lines

    def emit_symbol(self, symbol: Symbol) -> Optional[str]:
        if symbol.opaque:
            return None
        keyword = "const" if symbol.is_readonly else "var"
        data_type = expand_optional(translate(symbol.data_type, symbol.nullable))
        return self._with_doc(symbol.doc, f"{self.prefix}{keyword} {symbol.name}: {data_type};")

    def emit_function(self, function: Function) -> str:
        declaration = (
            f"{self.prefix}function {function.name}"
            f"({render_parameters(function)}): {render_return_type(function)};"
        )
        return self._with_doc(function.doc, declaration)

    def emit_enum(self, entry: TypeEntry) -> str:
        doc = entry.fields[0].doc if entry.fields else ""
        lines = [self._with_doc(doc, f"{self.prefix}class {entry.display_name} {{")]

        for component in entry.components:
            if not (isinstance(component, Property) and component.data_type == ENUM_TYPE):
                logger.debug("Enum '%s' skips non-enum member '%s'", entry.name, component.name)
                continue
            lines.extend(self._member_lines(
                component.doc,
                f"static readonly {bare_member_name(component.name)}: {entry.declared_name};",
            ))

        lines.append("")
        lines.append(f"{self.indent}private constructor();")
        lines.append("}")
        return "\n".join(lines)

    def emit_class(self, entry: TypeEntry) -> str:
        keyword = "interface" if entry.is_interface else "class"
        doc = entry.constructor.doc if entry.constructor else ""
        lines = [self._with_doc(doc, f"{self.prefix}{keyword} {entry.display_name} {{")]

        for component in entry.components:
            if isinstance(component, Property):
                declaration = self.render_property(component)
            elif isinstance(component, Method):
                declaration = self.render_method(component, entry.is_interface)
            else:
                logger.debug("Skipping %s '%s' in '%s'", component.kind, component.name, entry.name)
                continue
            lines.extend(self._member_lines(component.doc, declaration))

        lines.append("}")
        return "\n".join(lines)

    def render_property(self, prop: Property) -> str:
        qualifiers = ""
        if prop.is_private:
            qualifiers += "private "
        if prop.is_static:
            qualifiers += "static "
        if not prop.write:
            qualifiers += "readonly "
        optional = OPTIONAL_MARKER if prop.nullable else ""
        data_type = expand_optional(translate(prop.data_type, prop.nullable))
        return f"{qualifiers}{bare_member_name(prop.name)}{optional}: {data_type};"

    def render_method(self, method: Method, in_interface: bool = False) -> str:
        qualifiers = ""
        if method.is_private:
            qualifiers += "private "
        if method.is_static:
            qualifiers += "static "
        name = bare_member_name(method.name)
        optional = OPTIONAL_MARKER if in_interface and method.optional else ""
        signature = f"{qualifiers}{name}{optional}({render_parameters(method)})"
        if name == CONSTRUCTOR_NAME:
            return signature + ";"
        return f"{signature}: {render_return_type(method)};"

    def emit_all(self, entries: Iterable[GlobalEntry]) -> List[str]:
        blocks = []
        for entry in entries:
            block = self.emit(entry)
            if block is not None:
                blocks.append(block)
        return blocks


def emit_declarations(
    globals_map: Mapping[str, GlobalEntry],
    emit_as_module: bool = False,
    prelude: Prelude = DEFAULT_PRELUDE,
    indent: str = DEFAULT_INDENT,
) -> str:
    """Render a symbol table as declaration-file text.

    Args:
        globals_map: Globals in encounter order.
        emit_as_module: Use ``export`` instead of ``declare``.
        prelude: Fixed declarations written first.
        indent: Member indentation.

    Returns:
        The declaration file contents.
    """
    emitter = DeclarationEmitter(emit_as_module=emit_as_module, indent=indent)
    blocks = [prelude.render(emit_as_module, indent).rstrip("\n")]
    blocks.extend(emitter.emit_all(globals_map.values()))
    logger.info("Emitted %d declarations", len(blocks) - 1)
    return "\n\n".join(blocks) + "\n"


def generate_declarations(
    source_text: str,
    emit_as_module: bool = False,
    settings: Optional[ExtractionSettings] = None,
    prelude: Optional[Prelude] = None,
    indent: str = DEFAULT_INDENT,
) -> str:
    """Extract and emit declarations for a complete source text in one call.

    Example:
        >>> text = generate_declarations(source, emit_as_module=True)
        >>> "export class BMPoint" in text
        True
    """
    with phase_scope("extract"):
        result = extract_symbol_table(source_text, settings or DEFAULT_SETTINGS)
    with phase_scope("emit"):
        return emit_declarations(
            result.globals,
            emit_as_module=emit_as_module,
            prelude=prelude or DEFAULT_PRELUDE,
            indent=indent,
        )

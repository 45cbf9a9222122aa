"""
Fixed declarations written ahead of the generated ones.

The prelude supplies aliases for the type names documentation uses but the
declaration grammar lacks, placeholder declarations for external libraries,
the ``YES``/``NO`` constants, the ``Dictionary<V>`` interface and the two
capability interfaces most primitive types implement.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from emission.config import DECLARE_PREFIX, DEFAULT_INDENT, EXPORT_PREFIX


def _default_type_aliases() -> Dict[str, str]:
    return {
        "Int": "number",
        "Integer": "number",
        "Float": "number",
        "Short": "number",
        "DOMNode": "HTMLElement",
        "$": "JQuery",
        "$event": "JQueryEventObject",
        "BMCollectionViewUpdate": "never",
        "TimeoutToken": "number",
    }


def _default_opaque_interfaces() -> List[str]:
    return ["JQuery", "JQueryEventObject", "iScroll", "Monaco", "CodeMirror"]


def _default_namespaces() -> Dict[str, List[str]]:
    return {"kiwi": ["Variable", "Expression", "Solver", "Constant", "Constraint"]}


def _default_constants() -> Dict[str, str]:
    return {"YES": "true", "NO": "false"}


_DICTIONARY_INTERFACE = """\
/**
 * An interface representing an object whose key values are constrained to a generic type.
 */
{prefix}interface Dictionary<V> {{
{indent}[key: string]: V;
}}"""

_COPYING_INTERFACE = """\
/**
 * An interface implemented by classes that support copying.
 * Most primitive types implement this interface.
 */
{prefix}interface BMCopying {{
{indent}/**
{indent} * Returns a copy of this object. Only the properties
{indent} * defined in the prototype will be present in the returned object,
{indent} * and no other properties that may have been added after the object was created.
{indent} * Additionally, properties that represent internal state will not be copied
{indent} * over to the new instance.
{indent} */
{indent}copy(): ThisType<BMCopying>;
}}"""

_ANIMATING_INTERFACE = """\
/**
 * An interface implemented by classes that support interpolation.
 * Most primitive types implement this interface.
 * Animatable types must also support copying.
 */
{prefix}interface BMAnimating extends BMCopying {{
{indent}/**
{indent} * Invoked by the animation engine to obtain an interpolated
{indent} * value between this object and the target object.
{indent} * @param fraction          The animation fraction.
{indent} * @param toValue           The object to which to interpolate. This must be of the same
{indent} *                          type as the caller.
{indent} */
{indent}interpolatedValueWithFraction(fraction: number, {{toValue}}: {{toValue: ThisType<BMAnimating>}}): ThisType<BMAnimating>;
}}"""


@dataclass
class Prelude:
    """Configurable content of the declaration-file prelude.

    Attributes:
        type_aliases: Alias name to aliased type, in output order.
        opaque_interfaces: Empty interfaces standing in for external libraries.
        namespaces: Namespace name to the empty interfaces it contains.
        constants: Constant name to literal value.
        capability_interfaces: Whether to emit ``Dictionary``, ``BMCopying``
            and ``BMAnimating``.
    """

    type_aliases: Dict[str, str] = field(default_factory=_default_type_aliases)
    opaque_interfaces: List[str] = field(default_factory=_default_opaque_interfaces)
    namespaces: Dict[str, List[str]] = field(default_factory=_default_namespaces)
    constants: Dict[str, str] = field(default_factory=_default_constants)
    capability_interfaces: bool = True

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Prelude":
        """Build a prelude from the ``prelude`` section of a config file.

        Keys that are present replace the corresponding default entirely.
        """
        prelude = cls()
        if "type_aliases" in payload:
            prelude.type_aliases = {str(k): str(v) for k, v in payload["type_aliases"].items()}
        if "opaque_interfaces" in payload:
            prelude.opaque_interfaces = [str(name) for name in payload["opaque_interfaces"]]
        if "namespaces" in payload:
            prelude.namespaces = {
                str(name): [str(member) for member in members or []]
                for name, members in payload["namespaces"].items()
            }
        if "constants" in payload:
            prelude.constants = {str(k): str(v).lower() if isinstance(v, bool) else str(v)
                                 for k, v in payload["constants"].items()}
        if "capability_interfaces" in payload:
            prelude.capability_interfaces = bool(payload["capability_interfaces"])
        return prelude

    def render(self, emit_as_module: bool = False, indent: str = DEFAULT_INDENT) -> str:
        """Render the prelude as declaration-file text."""
        prefix = EXPORT_PREFIX if emit_as_module else DECLARE_PREFIX
        alias_prefix = EXPORT_PREFIX if emit_as_module else ""
        blocks: List[str] = []

        if self.type_aliases:
            blocks.append("\n".join(
                f"{alias_prefix}type {name} = {target};"
                for name, target in self.type_aliases.items()
            ))

        if self.opaque_interfaces:
            blocks.append("\n".join(
                f"{prefix}interface {name} {{}}" for name in self.opaque_interfaces
            ))

        for name, members in self.namespaces.items():
            body = "".join(f"{indent}interface {member} {{}}\n" for member in members)
            blocks.append(f"{prefix}namespace {name} {{\n{body}}}")

        if self.constants:
            blocks.append("\n".join(
                f"{prefix}const {name} = {value};" for name, value in self.constants.items()
            ))

        if self.capability_interfaces:
            for template in (_DICTIONARY_INTERFACE, _COPYING_INTERFACE, _ANIMATING_INTERFACE):
                blocks.append(template.format(prefix=prefix, indent=indent))

        return "\n\n".join(blocks) + "\n"


DEFAULT_PRELUDE = Prelude()

"""
Layer 2: Declaration Emission

Renders an extracted symbol table as a typed declaration file.
"""

from emission.type_grammar import translate, expand_optional, split_top_level
from emission.docs import render_documentation
from emission.prelude import Prelude, DEFAULT_PRELUDE
from emission.emitter import (
    DeclarationEmitter,
    emit_declarations,
    generate_declarations,
    render_parameters,
    render_return_type,
)

__all__ = [
    # Type grammar
    "translate",
    "expand_optional",
    "split_top_level",
    # Documentation
    "render_documentation",
    # Prelude
    "Prelude",
    "DEFAULT_PRELUDE",
    # Emission
    "DeclarationEmitter",
    "emit_declarations",
    "generate_declarations",
    "render_parameters",
    "render_return_type",
]

"""
AST backend module.

Builds TypeScript declaration ASTs from the schema model and serializes
them to .d.ts text.
"""

from __future__ import annotations

from .class_emitter import ClassEmitter, DeclarationUnit
from .signature_renderer import SignatureRenderer, render_default
from .ts_ast_nodes import (
    MemberDeclaration,
    MemberKind,
    TsClass,
    TsConstant,
    TsEnumAlias,
    TsField,
    TsFile,
    TsImport,
    TsMethod,
    TsParameter,
    TsSignal,
)
from .ts_serializer import TsSerializer

__all__ = [
    "ClassEmitter",
    "DeclarationUnit",
    "MemberDeclaration",
    "MemberKind",
    "SignatureRenderer",
    "TsClass",
    "TsConstant",
    "TsEnumAlias",
    "TsField",
    "TsFile",
    "TsImport",
    "TsMethod",
    "TsParameter",
    "TsSerializer",
    "TsSignal",
    "render_default",
]

"""
Class emitter.

Builds the TypeScript AST of one class (imports, class body, enum
namespace) and serializes it into a DeclarationUnit.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...logging_config import get_logger
from ..analyzer.name_resolver import NameResolver
from ..analyzer.type_mapper import CORE_INT, TypeMapper, UnitContext
from ..schema_ast.nodes import ClassEntry
from .signature_renderer import SignatureRenderer
from .ts_ast_nodes import MemberDeclaration, TsClass, TsEnumAlias, TsFile, TsImport
from .ts_serializer import SECTION_ORDER, TsSerializer

logger = get_logger(__name__)

SINGLETON_TAG = "@singleton Exactly one live instance exists; obtain it from the engine's singleton accessor instead of constructing it."


@dataclass
class DeclarationUnit:
    """The rendered declaration file of one class.

    Attributes:
        class_name: Name of the class in the schema
        file_stem: Output file name without extension
        content: Declaration text
        imports: Names imported by the file
        base_class: Rendered base class, if any
        members: Rendered members (for the API name map)
    """

    class_name: str = ""
    file_stem: str = ""
    content: str = ""
    imports: list[str] = field(default_factory=list)
    base_class: str | None = None
    members: list[MemberDeclaration] = field(default_factory=list)


class ClassEmitter:
    """Emits one DeclarationUnit per schema class."""

    def __init__(
        self,
        type_mapper: TypeMapper,
        name_resolver: NameResolver,
        emit_docs: bool = True,
        sort_members: bool = False,
        generation_comment: str = "",
    ):
        """
        Initialize the emitter.

        Args:
            type_mapper: Type mapper shared by the whole run
            name_resolver: Identifier rules
            emit_docs: Whether documentation comments are written
            sort_members: Sort members by rendered name inside each section
            generation_comment: Header comment of every file
        """
        self.type_mapper = type_mapper
        self.name_resolver = name_resolver
        self.renderer = SignatureRenderer(type_mapper, name_resolver)
        self.serializer = TsSerializer(emit_docs=emit_docs)
        self.sort_members = sort_members
        self.generation_comment = generation_comment

    def emit_class(self, class_entry: ClassEntry) -> DeclarationUnit:
        """
        Emit the declaration file of a class.

        Args:
            class_entry: The class to emit

        Returns:
            The rendered DeclarationUnit
        """
        context = UnitContext(class_entry=class_entry)
        ts_class = self.build_class(class_entry, context)

        imports = context.sorted_imports()
        ts_file = TsFile(
            generation_comment=self.generation_comment,
            imports=[TsImport(names=imports)] if imports else [],
            cls=ts_class,
        )

        logger.debug(f"Emitted {class_entry.name}: {len(ts_class.members)} members, {len(imports)} imports")
        return DeclarationUnit(
            class_name=class_entry.name,
            file_stem=self.name_resolver.file_stem(class_entry.name),
            content=self.serializer.serialize(ts_file),
            imports=imports,
            base_class=ts_class.base_class,
            members=ts_class.members,
        )

    def build_class(self, class_entry: ClassEntry, context: UnitContext) -> TsClass:
        """Build the AST of a class, recording its imports in the context."""
        base_class = None
        if class_entry.base:
            base_class = self.type_mapper.map_class_name(class_entry.base, context)

        members = self.renderer.render_class_members(class_entry, context)
        if self.sort_members:
            members = self._sorted(members)

        enum_aliases = []
        for group in class_entry.enums:
            if not group.name:
                continue
            if group.is_bitfield:
                self.type_mapper.core_type(CORE_INT, context)
            enum_aliases.append(
                TsEnumAlias(
                    name=self.name_resolver.sanitize(group.name),
                    values=[c.value for c in group.constants],
                    is_bitfield=group.is_bitfield,
                )
            )

        doc_tags = []
        if class_entry.is_singleton:
            doc_tags.append(SINGLETON_TAG)
        if class_entry.deprecated is not None:
            doc_tags.append(f"@deprecated {class_entry.deprecated}".rstrip())

        return TsClass(
            name=class_entry.name,
            base_class=base_class,
            doc=class_entry.doc,
            doc_tags=doc_tags,
            members=members,
            enum_aliases=enum_aliases,
        )

    def _sorted(self, members: list[MemberDeclaration]) -> list[MemberDeclaration]:
        # Stable: overloads keep their relative order
        order = {kind: i for i, kind in enumerate(SECTION_ORDER)}
        return sorted(members, key=lambda m: (order[m.kind], m.name))


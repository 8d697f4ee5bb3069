"""
Reference resolver for class and enum names.

Resolves class-by-name and enum-by-name references against the whole
schema, validates the inheritance graph and computes dependency closures.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..errors import SchemaStructureError, UnresolvedReferenceError
from ..schema_ast.nodes import ClassEntry, EnumGroup, SchemaModel, TypeReference, TypeTag


@dataclass
class ResolvedEnum:
    """A resolved enum reference."""

    group: EnumGroup
    owner: ClassEntry | None = None  # None for global enum groups


def iter_references(type_ref: TypeReference) -> Iterator[TypeReference]:
    """Yield every CLASS and ENUM reference nested in a type reference."""
    if type_ref.tag in (TypeTag.CLASS, TypeTag.ENUM):
        yield type_ref
    for arg in type_ref.args:
        yield from iter_references(arg)


def iter_class_types(class_entry: ClassEntry) -> Iterator[TypeReference]:
    """Yield every type reference mentioned by a class's members."""
    for prop in class_entry.properties:
        yield prop.type
    for method in class_entry.methods:
        yield method.return_type
        for param in method.parameters:
            yield param.type
    for signal in class_entry.signals:
        for param in signal.parameters:
            yield param.type


class ReferenceResolver:
    """Resolves class and enum references of a schema model."""

    def __init__(self, model: SchemaModel):
        """
        Initialize the resolver.

        Args:
            model: The loaded schema model
        """
        self.model = model
        self._class_cache: dict[str, ClassEntry] = {}
        self._global_enum_cache: dict[str, EnumGroup] = {}
        self._build_cache()

    def _build_cache(self) -> None:
        """Build lookup tables of classes and global enums by name."""
        for class_entry in self.model.classes:
            if class_entry.name in self._class_cache:
                raise SchemaStructureError("duplicate class name", class_entry.name)
            self._class_cache[class_entry.name] = class_entry
        for group in self.model.global_enums:
            if group.name:
                self._global_enum_cache[group.name] = group

    def get_class(self, name: str) -> ClassEntry | None:
        """Get a class by name."""
        return self._class_cache.get(name)

    def resolve_class(self, name: str, class_name: str | None = None, member_name: str | None = None) -> ClassEntry:
        """
        Resolve a class-by-name reference.

        Raises:
            UnresolvedReferenceError: If no class of that name exists in the schema
        """
        class_entry = self._class_cache.get(name)
        if class_entry is None:
            raise UnresolvedReferenceError(name, class_name, member_name)
        return class_entry

    def resolve_enum(self, name: str, class_name: str | None = None, member_name: str | None = None) -> ResolvedEnum:
        """
        Resolve an enum-by-name reference.

        "Owner.Group" is looked up on the owning class and its ancestors
        first, then among global groups (which may themselves be dotted,
        e.g. "Variant.Type"). A bare "Group" names a global group.

        Raises:
            UnresolvedReferenceError: If no such enum group exists
        """
        if "." in name:
            owner_name, group_name = name.rsplit(".", 1)
            for owner in self.ancestors(owner_name, include_self=True):
                group = owner.find_enum(group_name)
                if group is not None:
                    return ResolvedEnum(group=group, owner=owner)

        group = self._global_enum_cache.get(name)
        if group is None:
            raise UnresolvedReferenceError(name, class_name, member_name)
        return ResolvedEnum(group=group)

    def ancestors(self, name: str, include_self: bool = False) -> list[ClassEntry]:
        """
        List the base chain of a class, nearest first.

        The walk is bounded by the number of classes, so it terminates
        even on a schema whose inheritance graph has not been validated yet.
        """
        chain: list[ClassEntry] = []
        current = self._class_cache.get(name)
        if current is not None and include_self:
            chain.append(current)
        steps = 0
        while current is not None and current.base and steps < len(self._class_cache):
            current = self._class_cache.get(current.base)
            if current is not None:
                chain.append(current)
            steps += 1
        return chain

    def validate_inheritance(self) -> None:
        """
        Check that every base resolves and that the class graph is acyclic.

        Raises:
            UnresolvedReferenceError: If a base class is missing
            SchemaStructureError: If the base graph contains a cycle
        """
        for class_entry in self.model.classes:
            if class_entry.base is not None and class_entry.base not in self._class_cache:
                raise UnresolvedReferenceError(class_entry.base, class_entry.name)

        # Each class is walked at most once thanks to the finished set
        finished: set[str] = set()
        for class_entry in self.model.classes:
            path: list[str] = []
            on_path: set[str] = set()
            current: str | None = class_entry.name
            while current is not None and current not in finished:
                if current in on_path:
                    cycle = path[path.index(current) :] + [current]
                    raise SchemaStructureError(f"inheritance cycle {' -> '.join(cycle)}", current)
                path.append(current)
                on_path.add(current)
                current = self._class_cache[current].base
            finished.update(path)

    def dependency_closure(self, names: list[str]) -> list[str]:
        """
        Expand a set of class names with every class they depend on.

        Dependencies are base classes, referenced classes and the owners of
        referenced enums. The result keeps schema order.

        Raises:
            UnresolvedReferenceError: If a requested or referenced name does not exist
        """
        pending = list(names)
        selected: set[str] = set()
        while pending:
            name = pending.pop()
            if name in selected:
                continue
            class_entry = self.resolve_class(name)
            selected.add(name)
            if class_entry.base:
                pending.append(class_entry.base)
            for type_ref in iter_class_types(class_entry):
                for ref in iter_references(type_ref):
                    if ref.tag == TypeTag.CLASS:
                        pending.append(ref.name)
                    else:
                        resolved = self.resolve_enum(ref.name, class_entry.name)
                        if resolved.owner is not None:
                            pending.append(resolved.owner.name)

        return [c.name for c in self.model.classes if c.name in selected]

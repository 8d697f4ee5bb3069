"""
Error taxonomy for the generator.

Every error is fatal for the run that raised it. Errors carry the identity
of the offending schema entry so it can be located in the source schema.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all generator errors.

    Attributes:
        class_name: Name of the class the error originates from, if any
        member_name: Name of the member (property, method, signal, ...) if any
    """

    def __init__(self, message: str, class_name: str | None = None, member_name: str | None = None):
        super().__init__(message)
        self.message = message
        self.class_name = class_name
        self.member_name = member_name

    @property
    def location(self) -> str:
        """Human readable location, e.g. "Node.get_child"."""
        if self.class_name and self.member_name:
            return f"{self.class_name}.{self.member_name}"
        return self.class_name or self.member_name or ""

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class SchemaStructureError(GenerationError):
    """The input cannot be parsed into a schema model.

    Raised for missing required fields, malformed type references,
    duplicate class names, multiple bases and inheritance cycles.
    """


class UnresolvedReferenceError(GenerationError):
    """A type reference names a class or enum absent from the schema."""

    def __init__(self, reference: str, class_name: str | None = None, member_name: str | None = None):
        super().__init__(f"unresolved reference '{reference}'", class_name, member_name)
        self.reference = reference


class UnmappedPrimitiveError(GenerationError):
    """A primitive tag has no entry in the primitive type table."""

    def __init__(self, tag: str, class_name: str | None = None, member_name: str | None = None):
        super().__init__(f"unmapped primitive '{tag}'", class_name, member_name)
        self.tag = tag


class SignatureInconsistencyError(GenerationError):
    """A member signature cannot be rendered faithfully.

    Raised when a required parameter follows an optional one, when two
    overloads render to identical signatures, or when an overload suffix
    collides with another member name.
    """


class OutputCollisionError(GenerationError):
    """Two classes render to the same output file name."""


class OutputExistsError(GenerationError):
    """The output directory already exists and the output mode forbids replacing it."""


class OutputValidationError(GenerationError):
    """A rendered declaration file failed the structural check before writing."""

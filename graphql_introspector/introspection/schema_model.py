# Copyright 2024-present Kensho Technologies, LLC.
"""Immutable in-memory representation of an introspected GraphQL schema.

The model mirrors the six named type kinds of the GraphQL type system. Each kind gets its own
declaration class, which only carries the members that are meaningful for that kind: objects and
interfaces have fields, input objects have input fields, enums have values, unions have possible
types, and scalars have nothing but a name.
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class NamedTypeRef:
    """A reference to a named type, e.g. String or User."""

    name: str


@dataclass(frozen=True)
class ListTypeRef:
    """A list modifier around another type reference, e.g. [String]."""

    of_type: "TypeRef"


@dataclass(frozen=True)
class NonNullTypeRef:
    """A non-null modifier around another type reference, e.g. String!."""

    of_type: "TypeRef"


TypeRef = Union[NamedTypeRef, ListTypeRef, NonNullTypeRef]


def get_named_type_name(type_ref: TypeRef) -> str:
    """Return the name of the named type at the end of the wrapper chain."""
    while not isinstance(type_ref, NamedTypeRef):
        type_ref = type_ref.of_type
    return type_ref.name


@dataclass(frozen=True)
class InputValueDefinition:
    """A field argument or an input object field."""

    name: str
    type_ref: TypeRef
    description: Optional[str] = None
    # GraphQL literal text as returned by introspection, e.g. '10' or '"abc"' or '[RED]'.
    default_value: Optional[str] = None


@dataclass(frozen=True)
class FieldDefinition:
    """A field of an object or interface type."""

    name: str
    type_ref: TypeRef
    description: Optional[str] = None
    arguments: Tuple[InputValueDefinition, ...] = ()
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None


@dataclass(frozen=True)
class EnumValueDefinition:
    """A single value of an enum type."""

    name: str
    description: Optional[str] = None
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None


@dataclass(frozen=True)
class ScalarTypeDefinition:
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ObjectTypeDefinition:
    name: str
    description: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    fields: Tuple[FieldDefinition, ...] = ()


@dataclass(frozen=True)
class InterfaceTypeDefinition:
    name: str
    description: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    fields: Tuple[FieldDefinition, ...] = ()


@dataclass(frozen=True)
class UnionTypeDefinition:
    name: str
    description: Optional[str] = None
    possible_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumTypeDefinition:
    name: str
    description: Optional[str] = None
    values: Tuple[EnumValueDefinition, ...] = ()


@dataclass(frozen=True)
class InputObjectTypeDefinition:
    name: str
    description: Optional[str] = None
    input_fields: Tuple[InputValueDefinition, ...] = ()


TypeDefinition = Union[
    ScalarTypeDefinition,
    ObjectTypeDefinition,
    InterfaceTypeDefinition,
    UnionTypeDefinition,
    EnumTypeDefinition,
    InputObjectTypeDefinition,
]


@dataclass(frozen=True)
class IntrospectedSchema:
    """All non-introspection type declarations of a schema, in introspection order."""

    types: Tuple[TypeDefinition, ...]
    query_type: Optional[str] = None
    mutation_type: Optional[str] = None
    subscription_type: Optional[str] = None

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def get_type(self, name: str) -> TypeDefinition:
        """Return the declaration with the given name, raising KeyError if there is none."""
        for type_definition in self.types:
            if type_definition.name == name:
                return type_definition
        raise KeyError(name)

# Copyright 2024-present Kensho Technologies, LLC.
from .introspector import INTROSPECTION_QUERY, GraphQLIntrospector  # noqa
from .schema_builder import MAX_TYPE_REF_DEPTH, build_schema_from_introspection  # noqa
from .schema_model import (  # noqa
    EnumTypeDefinition,
    EnumValueDefinition,
    FieldDefinition,
    InputObjectTypeDefinition,
    InputValueDefinition,
    InterfaceTypeDefinition,
    IntrospectedSchema,
    ListTypeRef,
    NamedTypeRef,
    NonNullTypeRef,
    ObjectTypeDefinition,
    ScalarTypeDefinition,
    TypeDefinition,
    TypeRef,
    UnionTypeDefinition,
)
from .sdl_printer import print_schema_sdl, print_type_ref  # noqa

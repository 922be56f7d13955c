# Copyright 2024-present Kensho Technologies, LLC.
"""Render an IntrospectedSchema as GraphQL Schema Definition Language text."""
from typing import List, Optional, Sequence

import funcy
from graphql import StringValueNode, print_ast
from graphql.language.block_string import print_block_string

from .schema_model import (
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


INDENT = "  "

# The reason GraphQL assumes when @deprecated is used without an explicit reason.
DEFAULT_DEPRECATION_REASON = "No longer supported"


def print_type_ref(type_ref: TypeRef) -> str:
    """Return the SDL form of a type reference, e.g. "[String!]!"."""
    if isinstance(type_ref, NonNullTypeRef):
        return "{}!".format(print_type_ref(type_ref.of_type))
    elif isinstance(type_ref, ListTypeRef):
        return "[{}]".format(print_type_ref(type_ref.of_type))
    elif isinstance(type_ref, NamedTypeRef):
        return type_ref.name
    else:
        raise AssertionError("Unreachable code reached: {}".format(type_ref))


def _print_description(description: Optional[str], indentation: str = "") -> List[str]:
    """Return the lines of the block string holding the description, if there is one."""
    if description is None:
        return []
    return [indentation + line for line in print_block_string(description).split("\n")]


def _print_deprecated(is_deprecated: bool, deprecation_reason: Optional[str]) -> str:
    if not is_deprecated:
        return ""
    if deprecation_reason is None or deprecation_reason == DEFAULT_DEPRECATION_REASON:
        return " @deprecated"
    return " @deprecated(reason: {})".format(print_ast(StringValueNode(value=deprecation_reason)))


def _print_input_value(input_value: InputValueDefinition) -> str:
    line = "{}: {}".format(input_value.name, print_type_ref(input_value.type_ref))
    if input_value.default_value is not None:
        line += " = {}".format(input_value.default_value)
    return line


def _print_arguments(arguments: Sequence[InputValueDefinition], indentation: str) -> str:
    if not arguments:
        return ""

    # Arguments go on one line, unless one of them has a description to print above it.
    if all(argument.description is None for argument in arguments):
        return "({})".format(", ".join(_print_input_value(argument) for argument in arguments))

    argument_indentation = indentation + INDENT
    lines = ["("]
    for argument in arguments:
        lines.extend(_print_description(argument.description, argument_indentation))
        lines.append(argument_indentation + _print_input_value(argument))
    lines.append(indentation + ")")
    return "\n".join(lines)


def _print_field(field: FieldDefinition) -> List[str]:
    lines = _print_description(field.description, INDENT)
    lines.append(
        "{}{}{}: {}{}".format(
            INDENT,
            field.name,
            _print_arguments(field.arguments, INDENT),
            print_type_ref(field.type_ref),
            _print_deprecated(field.is_deprecated, field.deprecation_reason),
        )
    )
    return lines


def _print_enum_value(enum_value: EnumValueDefinition) -> List[str]:
    lines = _print_description(enum_value.description, INDENT)
    lines.append(
        INDENT
        + enum_value.name
        + _print_deprecated(enum_value.is_deprecated, enum_value.deprecation_reason)
    )
    return lines


def _print_input_field(input_field: InputValueDefinition) -> List[str]:
    lines = _print_description(input_field.description, INDENT)
    lines.append(INDENT + _print_input_value(input_field))
    return lines


def _print_block(header: str, member_lines: List[str]) -> str:
    """Return a braced declaration, or just the header if there are no members to print."""
    if not member_lines:
        return header
    return "\n".join([header + " {"] + member_lines + ["}"])


def _print_implements(interfaces: Sequence[str]) -> str:
    if not interfaces:
        return ""
    return " implements " + " & ".join(interfaces)


def _print_type_definition(type_definition: TypeDefinition) -> str:
    """Return the SDL declaration of a single type, without a trailing newline."""
    if isinstance(type_definition, ScalarTypeDefinition):
        declaration = "scalar {}".format(type_definition.name)
    elif isinstance(type_definition, (ObjectTypeDefinition, InterfaceTypeDefinition)):
        keyword = "type" if isinstance(type_definition, ObjectTypeDefinition) else "interface"
        declaration = _print_block(
            "{} {}{}".format(
                keyword, type_definition.name, _print_implements(type_definition.interfaces)
            ),
            funcy.lmapcat(_print_field, type_definition.fields),
        )
    elif isinstance(type_definition, UnionTypeDefinition):
        declaration = "union {}".format(type_definition.name)
        if type_definition.possible_types:
            declaration += " = " + " | ".join(type_definition.possible_types)
    elif isinstance(type_definition, EnumTypeDefinition):
        declaration = _print_block(
            "enum {}".format(type_definition.name),
            funcy.lmapcat(_print_enum_value, type_definition.values),
        )
    elif isinstance(type_definition, InputObjectTypeDefinition):
        declaration = _print_block(
            "input {}".format(type_definition.name),
            funcy.lmapcat(_print_input_field, type_definition.input_fields),
        )
    else:
        raise AssertionError(
            "Unreachable code reached, unknown type definition: {}".format(type_definition)
        )

    return "\n".join(_print_description(type_definition.description) + [declaration])


def _has_conventional_root_type_names(schema: IntrospectedSchema) -> bool:
    """Return True if the root operation types can be left implicit in the SDL."""
    return (
        schema.query_type in (None, "Query")
        and schema.mutation_type in (None, "Mutation")
        and schema.subscription_type in (None, "Subscription")
    )


def _print_schema_definition(schema: IntrospectedSchema) -> str:
    operation_lines = []
    for operation, root_type_name in (
        ("query", schema.query_type),
        ("mutation", schema.mutation_type),
        ("subscription", schema.subscription_type),
    ):
        if root_type_name is not None:
            operation_lines.append("{}{}: {}".format(INDENT, operation, root_type_name))
    return _print_block("schema", operation_lines)


def print_schema_sdl(schema: IntrospectedSchema) -> str:
    """Return the SDL text of the schema.

    Declarations appear in the order of the schema's types, separated by a blank line. The text
    ends with a single newline, unless the schema has no declarations at all. The output only
    depends on the schema, so printing the same schema twice yields identical text.
    """
    blocks = []
    if not _has_conventional_root_type_names(schema):
        blocks.append(_print_schema_definition(schema))
    blocks.extend(_print_type_definition(type_definition) for type_definition in schema.types)
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"

# Copyright 2024-present Kensho Technologies, LLC.
"""Convert the JSON result of the standard introspection query into an IntrospectedSchema.

The input is the "data" member of the introspection response, i.e. a dict with a single
"__schema" key, as returned by graphql-core's introspection_from_schema() or by a server
answering get_introspection_query(). The full response (with the "data" member) is also
accepted for convenience.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from ..exceptions import SchemaBuildError
from ..helpers import get_optional_list, get_required_field
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
    get_named_type_name,
)


logger = logging.getLogger(__name__)

# The introspection query nests "ofType" this many levels deep, counting the outermost level.
# Deeper chains cannot come from a well-formed response.
MAX_TYPE_REF_DEPTH = 8

INTROSPECTION_TYPE_PREFIX = "__"

KIND_SCALAR = "SCALAR"
KIND_OBJECT = "OBJECT"
KIND_INTERFACE = "INTERFACE"
KIND_UNION = "UNION"
KIND_ENUM = "ENUM"
KIND_INPUT_OBJECT = "INPUT_OBJECT"
KIND_LIST = "LIST"
KIND_NON_NULL = "NON_NULL"

WRAPPER_KINDS = frozenset({KIND_LIST, KIND_NON_NULL})


def is_introspection_type_name(type_name: str) -> bool:
    """Return True if the name belongs to one of the built-in introspection meta-types."""
    return type_name.startswith(INTROSPECTION_TYPE_PREFIX)


def _build_type_ref(type_data: Optional[Mapping[str, Any]], context: str) -> TypeRef:
    """Build a TypeRef from a (possibly wrapped) introspection type reference."""
    wrapper_kinds: List[str] = []
    current = type_data
    named_type: Optional[NamedTypeRef] = None
    for _ in range(MAX_TYPE_REF_DEPTH):
        if current is None:
            raise SchemaBuildError(
                "Type reference of {} does not terminate in a named type.".format(context)
            )
        kind = get_required_field(current, "kind", context)
        if kind in WRAPPER_KINDS:
            if kind == KIND_NON_NULL and wrapper_kinds and wrapper_kinds[-1] == KIND_NON_NULL:
                raise SchemaBuildError(
                    "Type reference of {} wraps a non-null type in another non-null "
                    "modifier.".format(context)
                )
            wrapper_kinds.append(kind)
            current = current.get("ofType")
        else:
            named_type = NamedTypeRef(get_required_field(current, "name", context))
            break

    if named_type is None:
        raise SchemaBuildError(
            "Type reference of {} is nested more than {} levels deep.".format(
                context, MAX_TYPE_REF_DEPTH
            )
        )

    type_ref: TypeRef = named_type
    for kind in reversed(wrapper_kinds):
        if kind == KIND_NON_NULL:
            type_ref = NonNullTypeRef(type_ref)
        else:
            type_ref = ListTypeRef(type_ref)
    return type_ref


def _build_input_value(input_value_data: Mapping[str, Any], context: str) -> InputValueDefinition:
    """Build an argument or input field definition."""
    name = get_required_field(input_value_data, "name", context)
    member_context = "{}.{}".format(context, name)
    return InputValueDefinition(
        name=name,
        type_ref=_build_type_ref(input_value_data.get("type"), member_context),
        description=input_value_data.get("description"),
        default_value=input_value_data.get("defaultValue"),
    )


def _build_field(field_data: Mapping[str, Any], type_name: str) -> FieldDefinition:
    """Build a field definition of an object or interface type."""
    name = get_required_field(field_data, "name", 'a field of type "{}"'.format(type_name))
    context = "{}.{}".format(type_name, name)
    return FieldDefinition(
        name=name,
        type_ref=_build_type_ref(field_data.get("type"), context),
        description=field_data.get("description"),
        arguments=tuple(
            _build_input_value(argument_data, context)
            for argument_data in get_optional_list(field_data, "args")
        ),
        is_deprecated=bool(field_data.get("isDeprecated")),
        deprecation_reason=field_data.get("deprecationReason"),
    )


def _get_referenced_type_names(type_data: Mapping[str, Any], field_name: str) -> Tuple[str, ...]:
    """Return the names of the types listed under "interfaces" or "possibleTypes"."""
    type_name = type_data["name"]
    return tuple(
        get_required_field(referenced_type, "name", '{} of type "{}"'.format(field_name, type_name))
        for referenced_type in get_optional_list(type_data, field_name)
    )


def _build_scalar_type(type_data: Mapping[str, Any]) -> ScalarTypeDefinition:
    return ScalarTypeDefinition(name=type_data["name"], description=type_data.get("description"))


def _build_object_type(type_data: Mapping[str, Any]) -> ObjectTypeDefinition:
    name = type_data["name"]
    return ObjectTypeDefinition(
        name=name,
        description=type_data.get("description"),
        interfaces=_get_referenced_type_names(type_data, "interfaces"),
        fields=tuple(
            _build_field(field_data, name) for field_data in get_optional_list(type_data, "fields")
        ),
    )


def _build_interface_type(type_data: Mapping[str, Any]) -> InterfaceTypeDefinition:
    name = type_data["name"]
    return InterfaceTypeDefinition(
        name=name,
        description=type_data.get("description"),
        interfaces=_get_referenced_type_names(type_data, "interfaces"),
        fields=tuple(
            _build_field(field_data, name) for field_data in get_optional_list(type_data, "fields")
        ),
    )


def _build_union_type(type_data: Mapping[str, Any]) -> UnionTypeDefinition:
    return UnionTypeDefinition(
        name=type_data["name"],
        description=type_data.get("description"),
        possible_types=_get_referenced_type_names(type_data, "possibleTypes"),
    )


def _build_enum_type(type_data: Mapping[str, Any]) -> EnumTypeDefinition:
    name = type_data["name"]
    context = 'a value of enum "{}"'.format(name)
    return EnumTypeDefinition(
        name=name,
        description=type_data.get("description"),
        values=tuple(
            EnumValueDefinition(
                name=get_required_field(value_data, "name", context),
                description=value_data.get("description"),
                is_deprecated=bool(value_data.get("isDeprecated")),
                deprecation_reason=value_data.get("deprecationReason"),
            )
            for value_data in get_optional_list(type_data, "enumValues")
        ),
    )


def _build_input_object_type(type_data: Mapping[str, Any]) -> InputObjectTypeDefinition:
    name = type_data["name"]
    return InputObjectTypeDefinition(
        name=name,
        description=type_data.get("description"),
        input_fields=tuple(
            _build_input_value(input_field_data, name)
            for input_field_data in get_optional_list(type_data, "inputFields")
        ),
    )


_TYPE_BUILDERS: Dict[str, Callable[[Mapping[str, Any]], TypeDefinition]] = {
    KIND_SCALAR: _build_scalar_type,
    KIND_OBJECT: _build_object_type,
    KIND_INTERFACE: _build_interface_type,
    KIND_UNION: _build_union_type,
    KIND_ENUM: _build_enum_type,
    KIND_INPUT_OBJECT: _build_input_object_type,
}


def _get_referenced_type_names_from_definition(type_definition: TypeDefinition) -> Set[str]:
    """Return the names of all types referenced from within the given type definition."""
    referenced_names: Set[str] = set()
    if isinstance(type_definition, (ObjectTypeDefinition, InterfaceTypeDefinition)):
        referenced_names.update(type_definition.interfaces)
        for field in type_definition.fields:
            referenced_names.add(get_named_type_name(field.type_ref))
            referenced_names.update(
                get_named_type_name(argument.type_ref) for argument in field.arguments
            )
    elif isinstance(type_definition, InputObjectTypeDefinition):
        referenced_names.update(
            get_named_type_name(input_field.type_ref)
            for input_field in type_definition.input_fields
        )
    elif isinstance(type_definition, UnionTypeDefinition):
        referenced_names.update(type_definition.possible_types)
    return referenced_names


def _get_root_type_name(schema_data: Mapping[str, Any], field_name: str) -> Optional[str]:
    root_type_data = schema_data.get(field_name)
    if root_type_data is None:
        return None
    return get_required_field(root_type_data, "name", '"{}"'.format(field_name))


def _unwrap_schema_data(introspection_result: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the "__schema" object, accepting either the response "data" or the full response."""
    if not isinstance(introspection_result, Mapping):
        raise SchemaBuildError(
            "Expected the introspection result to be a JSON object, but got: {}".format(
                introspection_result
            )
        )
    if "__schema" not in introspection_result and isinstance(
        introspection_result.get("data"), Mapping
    ):
        introspection_result = introspection_result["data"]
    schema_data = get_required_field(introspection_result, "__schema", "the introspection result")
    if not isinstance(schema_data, Mapping):
        raise SchemaBuildError(
            'Expected "__schema" to be a JSON object, got: {}'.format(schema_data)
        )
    return schema_data


def build_schema_from_introspection(introspection_result: Mapping[str, Any]) -> IntrospectedSchema:
    """Build the schema model described by the result of the standard introspection query.

    Introspection meta-types (names starting with "__") are skipped. Every other type becomes
    exactly one declaration, in the order in which the types appear in the result.

    Args:
        introspection_result: dict, the "data" member of the introspection response, i.e.
                              a dict with a "__schema" key. The full response is also accepted.

    Returns:
        IntrospectedSchema describing all non-introspection types

    Raises:
        SchemaBuildError if the introspection result is malformed, for example if a type is
        missing its kind or name, has an unknown kind, has a type reference that is too deep or
        does not end in a named type, or references a type that is not part of the result
    """
    schema_data = _unwrap_schema_data(introspection_result)
    types_data = get_required_field(schema_data, "types", '"__schema"')
    if not isinstance(types_data, list):
        raise SchemaBuildError('Expected "__schema.types" to be a list, got: {}'.format(types_data))

    known_type_names: Set[str] = set()
    type_definitions: List[TypeDefinition] = []
    for type_data in types_data:
        kind = get_required_field(type_data, "kind", "a type of the schema")
        name = get_required_field(type_data, "name", 'a type of kind "{}"'.format(kind))
        if name in known_type_names:
            raise SchemaBuildError('Type "{}" appears more than once in the schema.'.format(name))
        known_type_names.add(name)

        if is_introspection_type_name(name):
            continue

        type_builder = _TYPE_BUILDERS.get(kind)
        if type_builder is None:
            raise SchemaBuildError('Type "{}" has unexpected kind "{}".'.format(name, kind))
        type_definitions.append(type_builder(type_data))

    query_type = _get_root_type_name(schema_data, "queryType")
    mutation_type = _get_root_type_name(schema_data, "mutationType")
    subscription_type = _get_root_type_name(schema_data, "subscriptionType")

    for type_definition in type_definitions:
        dangling_names = (
            _get_referenced_type_names_from_definition(type_definition) - known_type_names
        )
        if dangling_names:
            raise SchemaBuildError(
                'Type "{}" references types that are not part of the schema: {}'.format(
                    type_definition.name, sorted(dangling_names)
                )
            )
    for root_type_name in (query_type, mutation_type, subscription_type):
        if root_type_name is not None and root_type_name not in known_type_names:
            raise SchemaBuildError(
                'Root operation type "{}" is not part of the schema.'.format(root_type_name)
            )

    logger.info(
        "Built schema with %(num_types)d types out of %(num_introspected)d introspected types.",
        {"num_types": len(type_definitions), "num_introspected": len(types_data)},
    )
    return IntrospectedSchema(
        types=tuple(type_definitions),
        query_type=query_type,
        mutation_type=mutation_type,
        subscription_type=subscription_type,
    )

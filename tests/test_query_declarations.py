"""Tests for query-to-interface translation."""
import pytest

from querytypes.generators.typegen import (
    DefaultTypeMapping,
    RenderOptions,
    TypeAllocator,
    generate_interface,
    query_to_type_declarations,
)
from querytypes.generators.typegen.render import Field
from querytypes.generators.typegen.types import ParsedQuery, ProcessingMode, TypeSpec, parse_query_types

MODES = [ProcessingMode.SQL, ProcessingMode.TS]

EXPECTED_TYPES = """import { PreparedQuery } from '@pgtyped/query';

export type PayloadType = 'message' | 'dynamite';

export type Json = null | boolean | number | string | Json[] | { [key: string]: Json };
"""


def parsed_query(mode: ProcessingMode, name: str) -> ParsedQuery:
    # TS files declare queries as camelCase variables
    declared = name[0].lower() + name[1:] if mode is ProcessingMode.TS else name
    return ParsedQuery(mode=mode, name=declared, file_path="queries.sql")


def allocator() -> TypeAllocator:
    types = TypeAllocator(DefaultTypeMapping)
    # imports are rendered too
    types.use(TypeSpec("PreparedQuery", module="@pgtyped/query"))
    return types


@pytest.mark.parametrize("mode", MODES)
def test_type_mapping_and_declarations(mode, get_notifications):
    types = allocator()
    result = query_to_type_declarations(
        parsed_query(mode, "GetNotifications"),
        parse_query_types(get_notifications),
        types,
        RenderOptions(),
    )
    assert types.declaration() == EXPECTED_TYPES
    assert result == """/** 'GetNotifications' parameters type */
export interface IGetNotificationsParams {
  id: string | null | void;
}

/** 'GetNotifications' return type */
export interface IGetNotificationsResult {
  payload: Json;
  type: PayloadType;
}

/** 'GetNotifications' query type */
export interface IGetNotificationsQuery {
  params: IGetNotificationsParams;
  result: IGetNotificationsResult;
}

"""


@pytest.mark.parametrize("mode", MODES)
def test_camel_case_column_names(mode, get_notifications):
    data = dict(get_notifications)
    data["returnTypes"] = [
        dict(get_notifications["returnTypes"][0], returnName="payload_camel_case"),
        dict(get_notifications["returnTypes"][1], returnName="type_camel_case"),
    ]
    types = allocator()
    result = query_to_type_declarations(
        parsed_query(mode, "GetNotifications"),
        parse_query_types(data),
        types,
        RenderOptions(camel_case_column_names=True),
    )
    assert types.declaration() == EXPECTED_TYPES
    assert "  payloadCamelCase: Json;\n  typeCamelCase: PayloadType;\n" in result
    assert "  id: string | null | void;\n" in result

    unchanged = query_to_type_declarations(
        parsed_query(mode, "GetNotifications"), parse_query_types(data), allocator(), RenderOptions(),
    )
    assert "  payload_camel_case: Json;\n" in unchanged


@pytest.mark.parametrize("mode", MODES)
def test_insert_notification_query(mode):
    query_types = parse_query_types({
        "returnTypes": [],
        "paramMetadata": {
            "params": ["json", "uuid", "text"],
            "mapping": [{
                "name": "notification",
                "type": "pick",
                "dict": {
                    "payload": {"name": "payload", "assignedIndex": 1, "type": "scalar"},
                    "user_id": {"name": "user_id", "assignedIndex": 2, "type": "scalar"},
                    "type": {"name": "type", "assignedIndex": 3, "type": "scalar"},
                },
            }],
        },
    })
    result = query_to_type_declarations(
        parsed_query(mode, "InsertNotifications"), query_types, allocator(), RenderOptions(),
    )
    assert result == """/** 'InsertNotifications' parameters type */
export interface IInsertNotificationsParams {
  notification: {
    payload: Json | null | void,
    user_id: string | null | void,
    type: string | null | void
  };
}

/** 'InsertNotifications' return type */
export type IInsertNotificationsResult = void;

/** 'InsertNotifications' query type */
export interface IInsertNotificationsQuery {
  params: IInsertNotificationsParams;
  result: IInsertNotificationsResult;
}

"""


@pytest.mark.parametrize("mode", MODES)
def test_delete_users_by_uuid(mode):
    query_types = parse_query_types({
        "returnTypes": [
            {"returnName": "id", "columnName": "id", "type": "uuid", "nullable": False},
            {"returnName": "name", "columnName": "name", "type": "text", "nullable": False},
            {"returnName": "bote", "columnName": "note", "type": "text", "nullable": True},
        ],
        "paramMetadata": {
            "params": ["uuid", "text"],
            "mapping": [
                {"name": "id", "type": "scalar", "assignedIndex": 1},
                {"name": "userName", "type": "scalar", "assignedIndex": 2},
            ],
        },
    })
    result = query_to_type_declarations(
        parsed_query(mode, "DeleteUsers"), query_types, allocator(), RenderOptions(),
    )
    assert result == """/** 'DeleteUsers' parameters type */
export interface IDeleteUsersParams {
  id: string | null | void;
  userName: string | null | void;
}

/** 'DeleteUsers' return type */
export interface IDeleteUsersResult {
  id: string;
  name: string;
  bote: string | null;
}

/** 'DeleteUsers' query type */
export interface IDeleteUsersQuery {
  params: IDeleteUsersParams;
  result: IDeleteUsersResult;
}

"""


@pytest.mark.parametrize("mode", MODES)
def test_columns_without_nullable_info_are_nullable(mode, get_notifications):
    data = dict(get_notifications)
    data["returnTypes"] = [
        {"returnName": "payload", "columnName": "payload", "type": "json"},
        get_notifications["returnTypes"][1],
    ]
    explicit = dict(data)
    explicit["returnTypes"] = [dict(data["returnTypes"][0], nullable=True), data["returnTypes"][1]]

    types = allocator()
    result = query_to_type_declarations(
        parsed_query(mode, "GetNotifications"), parse_query_types(data), types, RenderOptions(),
    )
    assert types.declaration() == EXPECTED_TYPES
    assert "  payload: Json | null;\n  type: PayloadType;\n" in result

    explicit_result = query_to_type_declarations(
        parsed_query(mode, "GetNotifications"), parse_query_types(explicit), allocator(), RenderOptions(),
    )
    assert explicit_result == result


@pytest.mark.parametrize("mode", MODES)
def test_fixed_length_character_type(mode):
    query_types = parse_query_types({
        "returnTypes": [
            {"returnName": "iso", "columnName": "iso", "type": "character(3)", "nullable": False},
        ],
        "paramMetadata": {
            "params": ["uuid"],
            "mapping": [{"name": "id", "type": "scalar", "assignedIndex": 1}],
        },
    })
    result = query_to_type_declarations(
        parsed_query(mode, "GetCountry"), query_types, allocator(), RenderOptions(),
    )
    assert "export interface IGetCountryResult {\n  iso: string;\n}\n" in result


def test_query_without_params_renders_void_params():
    query_types = parse_query_types({
        "returnTypes": [{"returnName": "count", "columnName": "count", "type": "int8", "nullable": False}],
        "paramMetadata": {"params": [], "mapping": []},
    })
    result = query_to_type_declarations(
        parsed_query(ProcessingMode.SQL, "CountUsers"), query_types, allocator(), RenderOptions(),
    )
    assert result.startswith(
        "/** 'CountUsers' parameters type */\nexport type ICountUsersParams = void;\n\n"
    )


def test_unmapped_column_type_does_not_abort():
    query_types = parse_query_types({
        "returnTypes": [{"returnName": "span", "columnName": "span", "type": "tstzmultirange", "nullable": False}],
    })
    result = query_to_type_declarations(
        parsed_query(ProcessingMode.SQL, "GetSpan"), query_types, allocator(), RenderOptions(),
    )
    assert "  span: unknown;\n" in result


def test_interface_generation():
    expected = """export interface User {
  name: string;
  age: number;
}

"""
    fields = [Field("name", "string"), Field("age", "number")]
    assert generate_interface("User", fields) == expected

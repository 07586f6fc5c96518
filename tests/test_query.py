import json

import pytest

from faunaquery import (
    ClassParams,
    CreateClass,
    CreateDatabase,
    CreateIndex,
    Delete,
    Get,
    IndexParams,
    IndexPermission,
    IndexValue,
    Level,
    Ref,
    Term,
)
from faunaquery.expr import serialize


def _meows_params() -> IndexParams:
    params = IndexParams("meows", Ref.class_("cats"))
    params.permissions(IndexPermission().read(Level.public()))
    params.terms([Term.field(["data", "age"]), Term.binding("cats_name")])
    params.values([IndexValue.binding("cats_age").reverse(), IndexValue.field(["data", "name"])])
    return params


def test_create_index():
    query = CreateIndex(_meows_params())

    expected = {
        "create_index": {
            "object": {
                "active": False,
                "name": "meows",
                "permissions": {
                    "object": {
                        "read": "public",
                    }
                },
                "serialized": False,
                "source": {
                    "@ref": {
                        "class": {
                            "@ref": {
                                "id": "classes",
                            },
                        },
                        "id": "cats",
                    },
                },
                "terms": [
                    {"object": {"field": ["data", "age"]}},
                    {"object": {"binding": "cats_name"}},
                ],
                "unique": False,
                "values": [
                    {"object": {"binding": "cats_age", "reverse": True}},
                    {"object": {"field": ["data", "name"], "reverse": False}},
                ],
            }
        }
    }

    assert json.loads(serialize(query)) == expected


def test_serialization_is_deterministic():
    first = serialize(CreateIndex(_meows_params()))
    second = serialize(CreateIndex(_meows_params()))

    assert first == second


def test_index_params_key_order():
    params = IndexParams("cats", Ref.class_("cats")).partitions(8).data({"owner": "me"})
    body = json.loads(serialize(CreateIndex(params)))["create_index"]["object"]

    assert list(body) == [
        "name",
        "source",
        "active",
        "unique",
        "serialized",
        "partitions",
        "data",
    ]


def test_flags_default_false_and_can_be_set():
    params = IndexParams("cats", Ref.class_("cats"))
    body = params.to_expr().to_json()["object"]
    assert (body["active"], body["unique"], body["serialized"]) == (False, False, False)

    params.active().unique().serialized()
    body = params.to_expr().to_json()["object"]
    assert (body["active"], body["unique"], body["serialized"]) == (True, True, True)


def test_optional_fields_are_omitted():
    body = IndexParams("cats", Ref.class_("cats")).to_expr().to_json()["object"]

    for key in ("terms", "values", "partitions", "permissions", "data"):
        assert key not in body


def test_setters_overwrite():
    params = IndexParams("cats", Ref.class_("cats"))
    params.terms([Term.binding("a")]).terms([Term.binding("b")])
    params.partitions(2).partitions(4)

    body = params.to_expr().to_json()["object"]
    assert body["terms"] == [{"object": {"binding": "b"}}]
    assert body["partitions"] == 4


def test_query_snapshots_params():
    params = IndexParams("cats", Ref.class_("cats"))
    query = CreateIndex(params)
    params.unique()

    assert query.to_json()["create_index"]["object"]["unique"] is False


def test_term_has_exactly_one_of_field_or_binding():
    for term in (Term.field(["data", "age"]), Term.binding("age")):
        body = term.to_expr().to_json()["object"]
        assert len({"field", "binding"} & set(body)) == 1


def test_index_value_reverse_defaults_false():
    for value in (IndexValue.field(["data"]), IndexValue.binding("b")):
        body = value.to_expr().to_json()["object"]
        assert body["reverse"] is False
        assert len({"field", "binding"} & set(body)) == 1


def test_index_value_reverse_can_be_unset():
    value = IndexValue.binding("b").reverse().reverse(False)

    assert value.to_expr().to_json()["object"]["reverse"] is False


def test_empty_field_path_is_rejected():
    with pytest.raises(ValueError):
        Term.field([])
    with pytest.raises(ValueError):
        IndexValue.field([])


def test_string_field_path_is_rejected():
    with pytest.raises(TypeError):
        Term.field("data")
    with pytest.raises(TypeError):
        IndexValue.field("data")


@pytest.mark.parametrize("partitions", [0, -1, 65536])
def test_partitions_out_of_range(partitions):
    with pytest.raises(ValueError):
        IndexParams("cats", Ref.class_("cats")).partitions(partitions)


@pytest.mark.parametrize("partitions", [True, 2.5, "4"])
def test_partitions_must_be_an_integer(partitions):
    with pytest.raises(TypeError):
        IndexParams("cats", Ref.class_("cats")).partitions(partitions)


def test_create_class():
    params = ClassParams("cats").history_days(30).ttl_days(7).data({"kind": "pet"})

    assert CreateClass(params).to_json() == {
        "create_class": {
            "object": {
                "name": "cats",
                "history_days": 30,
                "ttl_days": 7,
                "data": {"object": {"kind": "pet"}},
            }
        }
    }


def test_create_database():
    query = CreateDatabase("prod", api_version="2.1")

    assert query.to_json() == {
        "create_database": {"object": {"name": "prod", "api_version": "2.1"}}
    }


def test_get_and_delete():
    ref = Ref.instance("42", "cats")

    assert Get(ref).to_json() == {"get": ref.to_json()}
    assert Delete(ref).to_json() == {"delete": ref.to_json()}


def test_constructs_compare_by_value():
    assert CreateIndex(_meows_params()) == CreateIndex(_meows_params())

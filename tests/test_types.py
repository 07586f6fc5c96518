import pytest

from faunaquery import FaunaErrors, Ref, Response


def test_response_projections():
    response = Response.from_response(
        {
            "resource": {
                "ref": Ref.index("meows").to_json(),
                "ts": 1520225686150,
                "data": {"owner": "me"},
            }
        }
    )

    assert response.ref == Ref.index("meows")
    assert response.ts == 1520225686150
    assert response.data == {"owner": "me"}


def test_response_without_ref():
    response = Response.from_response({"resource": [1, 2]})

    assert response.resource == [1, 2]
    assert response.ref is None
    assert response.data is None


def test_fauna_errors_from_response():
    errors = FaunaErrors.from_response(
        {
            "errors": [
                {"position": ["create_index"], "code": "validation failed", "description": "bad"},
                {"code": "invalid ref", "description": "missing"},
            ]
        }
    )

    assert len(errors) == 2
    assert errors.codes == ["validation failed", "invalid ref"]
    assert errors.errors[0].position == ["create_index"]
    assert errors.first_code == "validation failed"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"errors": "nope"},
        {"errors": [{"code": "x"}]},
        {"errors": ["x"]},
        {"errors": [{"code": "x", "description": "y", "position": 5}]},
        {"errors": [{"code": "x", "description": "y", "position": None}]},
        {"errors": [{"code": "x", "description": "y", "position": "create_index"}]},
        ["errors"],
    ],
)
def test_fauna_errors_rejects_malformed_bodies(body):
    with pytest.raises(ValueError):
        FaunaErrors.from_response(body)


"""Error taxonomy payloads."""

from batshit.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError


def test_validation_error_payload():
    err = ValidationError("rating", "Rating must be an integer between 1 and 10")
    assert err.status_code == 422
    assert err.to_content() == {
        "detail": "Validation error",
        "errors": [{"loc": ["rating"], "msg": "Rating must be an integer between 1 and 10", "type": "value_error"}],
    }
    assert isinstance(err, ValueError)


def test_status_codes():
    assert UnauthorizedError("x").status_code == 401
    assert NotFoundError("x").status_code == 404
    assert ConflictError("x").status_code == 409
    assert ConflictError("already").to_content() == {"detail": "already"}

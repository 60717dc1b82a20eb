# Test the result type and the response envelope

import pytest
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..', 'app'))
from results import ErrorKind, Result, unauthorized, forbidden, not_found, bad_request
from schemas import RsData

@pytest.mark.parametrize("kind, status", [
    (ErrorKind.UNAUTHORIZED, 401),
    (ErrorKind.FORBIDDEN, 403),
    (ErrorKind.NOT_FOUND, 404),
    (ErrorKind.BAD_REQUEST, 400),
])
def test_error_kind_codes(kind, status):
    assert kind.status_code == status
    assert kind.result_code == f"{status}-1"

def test_helpers_build_failures():
    assert unauthorized().error.kind == ErrorKind.UNAUTHORIZED
    assert unauthorized().error.message == "Please log in first."
    assert forbidden("no").error.kind == ErrorKind.FORBIDDEN
    assert not_found("gone").error.message == "gone"
    assert not bad_request("bad").ok

def test_success_and_map():
    result = Result.success(2)
    assert result.ok
    assert result.map(lambda v: v * 3).value == 6

    failure = not_found("gone")
    assert failure.map(lambda v: v * 3) is failure

def test_success_without_value():
    result = Result.success()
    assert result.ok
    assert result.value is None

def test_rsdata_from_success():
    rs = RsData.from_result(Result.success({"a": 1}), "201-1", "Created.")
    assert rs.status_code == 201
    assert rs.model_dump(by_alias=True) == {"resultCode": "201-1", "msg": "Created.", "data": {"a": 1}}

def test_rsdata_from_success_without_value_has_empty_data():
    rs = RsData.from_result(Result.success(None), "200-1", "Deleted.", serializer=lambda v: pytest.fail("not called"))
    assert rs.data == {}

def test_rsdata_from_failure_uses_error():
    rs = RsData.from_result(forbidden("Nope."), "200-1", "Loaded.", serializer=lambda v: pytest.fail("not called"))
    assert rs.result_code == "403-1"
    assert rs.msg == "Nope."
    assert rs.data == {}
    assert rs.status_code == 403

def test_rsdata_to_response():
    response = RsData(result_code="400-2", msg="Invalid date format: x").to_response()
    assert response.status_code == 400
    assert b'"resultCode":"400-2"' in response.body
    assert b'"data":{}' in response.body

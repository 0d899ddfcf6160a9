from __future__ import annotations

from core.domain.errors import BackendError
from core.services.errors import UNKNOWN_ERROR, normalize_error


def test_body_list_is_joined():
    assert normalize_error({"body": [{"message": "A"}, {"message": "B"}]}) == "A, B"


def test_body_message():
    assert normalize_error({"body": {"message": "C"}}) == "C"


def test_empty_and_missing_are_unknown():
    assert normalize_error({}) == UNKNOWN_ERROR
    assert normalize_error(None) == UNKNOWN_ERROR


def test_body_list_wins_over_message():
    err = BackendError("HTTP 400", status_code=400, body=[{"message": "Field required"}])
    assert normalize_error(err) == "Field required"


def test_backend_error_body_message_wins_over_message():
    err = BackendError("HTTP 500", status_code=500, body={"message": "Insert failed"})
    assert normalize_error(err) == "Insert failed"


def test_plain_exception_uses_its_text():
    assert normalize_error(RuntimeError("socket closed")) == "socket closed"


def test_text_body_falls_back_to_message():
    err = BackendError("HTTP 502 from GET /x", status_code=502, body="<html>Bad gateway</html>")
    assert normalize_error(err) == "HTTP 502 from GET /x"


def test_top_level_message_key():
    assert normalize_error({"message": "D", "code": 7}) == "D"


def test_structural_serialization():
    assert normalize_error({"code": 7}) == '{"code": 7}'


def test_unserializable_object_is_unknown():
    class Opaque:
        pass

    assert normalize_error(Opaque()) == UNKNOWN_ERROR


def test_sub_errors_without_message_do_not_raise():
    assert normalize_error({"body": [{"message": "A"}, {}, "x"]}) == "A, , "


def test_exception_without_text_is_serialized_or_unknown():
    assert normalize_error(ValueError()) == UNKNOWN_ERROR

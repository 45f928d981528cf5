import pytest

from webguards.http import HeaderMap, Request, Response, parse_header_name, parse_method


def test_header_map_is_case_insensitive():
    headers = HeaderMap({"Content-Type": "text/plain"})
    assert headers.get("content-type") == "text/plain"
    assert headers.get("CONTENT-TYPE") == "text/plain"
    assert "Content-TYPE" in headers


def test_header_names_are_lower_case():
    headers = HeaderMap([("Content-Type", "text/plain")])
    assert headers.names() == ["content-type"]
    assert headers.items() == [("content-type", "text/plain")]


def test_insert_replaces_value():
    headers = HeaderMap()
    headers.insert("Vary", "Accept")
    headers.insert("vary", "Origin")
    assert headers.get("Vary") == "Origin"
    assert len(headers) == 1


def test_remove_returns_value_and_deletes():
    headers = HeaderMap({"Origin": "https://www.example.com"})
    assert headers.remove("ORIGIN") == "https://www.example.com"
    assert headers.get("origin") is None
    assert headers.remove("origin") is None


def test_invalid_header_name_rejected():
    with pytest.raises(ValueError):
        HeaderMap({"bad name": "value"})


def test_control_characters_in_value_rejected():
    headers = HeaderMap()
    with pytest.raises(ValueError):
        headers.insert("x-test", "a\r\nb")


def test_parse_header_name_normalises_case():
    assert parse_header_name("Content-Type") == "content-type"
    assert parse_header_name("AUTHORIZATION") == "authorization"


@pytest.mark.parametrize("name", ["", "a b", "x:y", "é"])
def test_parse_header_name_rejects_invalid(name):
    with pytest.raises(ValueError):
        parse_header_name(name)


def test_parse_method_keeps_case():
    assert parse_method("GET") == "GET"
    assert parse_method("put") == "put"


@pytest.mark.parametrize("method", ["", "GET /", "PO,ST"])
def test_parse_method_rejects_invalid(method):
    with pytest.raises(ValueError):
        parse_method(method)


def test_request_cookie_lookup():
    request = Request(headers={"Cookie": "sid=token; theme=dark"})
    assert request.cookie("sid") == "token"
    assert request.cookie("theme") == "dark"
    assert request.cookie("missing") is None


def test_request_without_cookie_header():
    assert Request().cookie("sid") is None


def test_request_and_response_coerce_headers():
    request = Request(method="OPTIONS", headers={"Origin": "https://www.example.com"})
    response = Response(headers=[("Vary", "Accept")])
    assert request.headers.get("origin") == "https://www.example.com"
    assert response.headers.get("vary") == "Accept"
    assert response.status == 200
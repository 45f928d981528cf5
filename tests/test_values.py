import pytest

from webguards.cors.values import all_methods, intersperse_header_values


def test_single_value_has_no_separator():
    assert intersperse_header_values({"GET"}) == "GET"


def test_multiple_values_round_trip():
    values = {"authorization", "accept", "content-type"}
    joined = intersperse_header_values(values)
    assert {part.strip() for part in joined.split(",")} == values
    assert joined.count(", ") == len(values) - 1


def test_accepts_generators():
    joined = intersperse_header_values(name for name in ["a", "b"])
    assert sorted(joined.split(", ")) == ["a", "b"]


def test_empty_values_rejected():
    with pytest.raises(ValueError):
        intersperse_header_values(set())


def test_all_methods_contents():
    assert all_methods() == {
        "GET",
        "POST",
        "PUT",
        "DELETE",
        "HEAD",
        "OPTIONS",
        "CONNECT",
        "PATCH",
        "TRACE",
    }


def test_all_methods_returns_independent_copies():
    first = all_methods()
    first.discard("GET")
    assert "GET" in all_methods()
    assert len(all_methods()) == len(first) + 1
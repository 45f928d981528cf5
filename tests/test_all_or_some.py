from webguards.cors.all_or_some import AllOrSome


def test_all_variant():
    assert AllOrSome.any().is_all()
    assert not AllOrSome.any().is_some()


def test_some_variant():
    assert not AllOrSome.some(()).is_all()
    assert AllOrSome.some(()).is_some()


def test_default_is_all():
    assert AllOrSome() == AllOrSome.any()
    assert AllOrSome().is_all()


def test_some_keeps_items_and_compares_by_value():
    value = AllOrSome.some({"GET"})
    assert value.items == {"GET"}
    assert value == AllOrSome.some({"GET"})
    assert value != AllOrSome.any()
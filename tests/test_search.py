import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from carlot.services import Expense
from carlot.services.search import filter_vehicles, sort_expenses_newest_first

T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture()
def lot(make_vehicle):
    return [
        make_vehicle(make="Honda", model="Civic", year=2015, created_at=T0),
        make_vehicle(make="Toyota", model="Camry", year=2018, created_at=T0 + timedelta(days=2)),
        make_vehicle(make="Ford", model="F-150", year=2012, created_at=T0 + timedelta(days=1)),
        make_vehicle(make="Honda", model="Accord", year=2020, created_at=T0 + timedelta(days=3)),
    ]


def _models(vehicles):
    return [v.model for v in vehicles]


def test_blank_query_returns_everything_newest_first(lot):
    for query in ("", "   ", None):
        result = filter_vehicles(lot, query)
        assert _models(result) == ["Accord", "Camry", "F-150", "Civic"]


def test_match_is_case_insensitive_on_make(lot):
    assert _models(filter_vehicles(lot, "hONDa")) == ["Accord", "Civic"]


def test_match_on_model_substring(lot):
    assert _models(filter_vehicles(lot, "f-1")) == ["F-150"]


def test_match_on_year(lot):
    assert _models(filter_vehicles(lot, "2018")) == ["Camry"]
    assert _models(filter_vehicles(lot, "201")) == ["Camry", "F-150", "Civic"]


def test_query_is_trimmed(lot):
    assert _models(filter_vehicles(lot, "  camry  ")) == ["Camry"]


def test_no_match_gives_empty_list(lot):
    assert filter_vehicles(lot, "tesla") == []


def test_order_depends_only_on_created_at(lot):
    expected = _models(filter_vehicles(lot, ""))
    rng = random.Random(7)
    for _ in range(10):
        shuffled = lot[:]
        rng.shuffle(shuffled)
        assert _models(filter_vehicles(shuffled, "")) == expected


def test_ties_keep_input_order(make_vehicle):
    a = make_vehicle(model="A", created_at=T0)
    b = make_vehicle(model="B", created_at=T0)
    assert _models(filter_vehicles([a, b], "")) == ["A", "B"]
    assert _models(filter_vehicles([b, a], "")) == ["B", "A"]


def test_input_is_not_mutated(lot):
    before = list(lot)
    filter_vehicles(lot, "honda")
    assert lot == before


def test_expenses_sorted_newest_first():
    older = Expense(id="1", description="Tires", amount=Decimal("400"), date=date(2024, 1, 5))
    newer = Expense(id="2", description="Detail", amount=Decimal("150"), date=date(2024, 2, 1))
    same_day_later = Expense(
        id="3",
        description="Smog",
        amount=Decimal("50"),
        date=date(2024, 2, 1),
        created_at=datetime(2024, 2, 1, 18, tzinfo=timezone.utc),
    )
    assert [e.id for e in sort_expenses_newest_first([older, newer, same_day_later])] == ["3", "2", "1"]

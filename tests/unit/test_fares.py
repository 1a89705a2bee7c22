"""Tests for vehicle classification and fares."""

import pytest

from superferry.models import Vehicle
from superferry.services.fares import calculate_fare, vehicle_category


@pytest.mark.parametrize("height,length,fare", [
    (1.5, 4.0, 14.0),     # regular
    (2.0, 7.0, 14.0),     # regular at both limits
    (2.5, 5.0, 15.0),     # tall
    (3.0, 10.0, 30.0),    # tall and long, tall rate wins
    (1.8, 10.0, 20.0),    # long only
])
def test_calculate_fare(height, length, fare):
    assert calculate_fare(Vehicle("ABC123", "555", height, length)) == fare


def test_vehicle_category():
    assert vehicle_category(Vehicle("A", "1", 1.5, 4.0)) == "Regular"
    assert vehicle_category(Vehicle("A", "1", 1.5, 8.0)) == "Special"

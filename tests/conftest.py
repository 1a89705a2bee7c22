"""Shared fixtures: a started FerrySystem over a temporary data directory."""

import pytest

from superferry.system import FerrySystem


@pytest.fixture
def system(tmp_path):
    with FerrySystem(tmp_path / "data") as s:
        yield s


@pytest.fixture
def sailing(system):
    """One ferry (HCLL 10 m, LCLL 5 m) scheduled as ABC-01-08."""
    system.schedule.add_ferry("QUEEN OF SURREY", 10, 5)
    return system.schedule.add_sailing("ABC-01-08", "QUEEN OF SURREY")

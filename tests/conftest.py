from __future__ import annotations

import pytest

from linked_charts.core.datasets import Dataset, make_dataset
from linked_charts.utils import log

CARS = [
    {"car": "Mazda RX4", "mpg": 21.0, "hp": 110.0},
    {"car": "Datsun 710", "mpg": 22.8, "hp": 93.0},
    {"car": "Valiant", "mpg": 18.1, "hp": 105.0},
    {"car": "Duster 360", "mpg": 14.3, "hp": 245.0},
    {"car": "Fiat 128", "mpg": 32.4, "hp": 66.0},
]


class FakeClock:
    """Millisecond clock the tests advance by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def cars() -> Dataset:
    return make_dataset(CARS, id_attribute="car", attributes=["car", "mpg", "hp"])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    path = tmp_path / "linked_charts.log"
    monkeypatch.setattr(log, "DEFAULT_LOG_PATH", path)
    return path


@pytest.fixture
def row_named():
    def find(dataset: Dataset, name: str):
        for row in dataset:
            if row[dataset.id_attribute] == name:
                return row
        raise KeyError(name)

    return find

import random

import pytest

from undercover.models.player import Player
from undercover.services.catalog import PairCatalog
from undercover.services.preferences import Preferences


def make_catalog(size: int, categories=("animals", "food", "music")) -> PairCatalog:
    return PairCatalog.from_pairs(
        {
            "id": f"p{i}",
            "category": categories[i % len(categories)],
            "side_a": f"a{i}",
            "side_b": f"b{i}",
            "label_a": f"A{i}",
            "label_b": f"B{i}",
        }
        for i in range(size)
    )


def make_players(roles, eliminated=()):
    return [
        Player(
            id=f"id{i}",
            name=f"P{i}",
            role=role,
            content=None if role == "mrwhite" else "x",
            content_label=None if role == "mrwhite" else "X",
            icon="🐶",
            color="#000000",
            eliminated=i in eliminated,
        )
        for i, role in enumerate(roles)
    ]


@pytest.fixture
def catalog():
    return make_catalog(12)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def preferences(tmp_path):
    return Preferences(tmp_path / "prefs" / "preferences.json")

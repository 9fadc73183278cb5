import random

import pytest

from conftest import make_players
from undercover.services.catalog import CatalogError
from undercover.services.pair_selector import pick_pair
from undercover.services.player_builder import create_players
from undercover.services.speaking_order import build_speaking_order


# ---------------- pick_pair ----------------

def test_pick_pair_belongs_to_catalog(catalog):
    for _ in range(30):
        assert catalog.get(pick_pair(catalog=catalog).id) is not None


def test_pick_pair_respects_single_category(catalog):
    for _ in range(50):
        assert pick_pair(["food"], catalog=catalog).category == "food"


def test_pick_pair_skips_disabled(catalog):
    food_ids = [p.id for p in catalog.by_category("food")]
    for _ in range(50):
        assert pick_pair(["food"], food_ids[1:], catalog=catalog).id == food_ids[0]


def test_pick_pair_falls_back_when_category_fully_disabled(catalog):
    animal_ids = [p.id for p in catalog.by_category("animals")]
    for _ in range(30):
        pair = pick_pair(["animals"], animal_ids, catalog=catalog)
        assert pair.category == "animals"


def test_pick_pair_falls_back_when_everything_disabled(catalog):
    pair = pick_pair([], catalog.ids(), catalog=catalog)
    assert pair.id in catalog.ids()


def test_pick_pair_unknown_category_is_a_catalog_error(catalog):
    with pytest.raises(CatalogError):
        pick_pair(["spaceships"], catalog=catalog)


def test_pick_pair_is_uniform_enough(catalog):
    rng = random.Random(5)
    seen = {pick_pair(catalog=catalog, rng=rng).id for _ in range(300)}
    assert seen == set(catalog.ids())


# ---------------- create_players ----------------

NAMES = ["Alice", "Bob", "Charlie", "Dana", "Eve", "Fred"]
ICONS = ["🐶", "🐱", "🐸", "🐰", "🦊", "🐼"]
COLORS = ["#E17055", "#00B894", "#6C5CE7", "#FD79A8", "#FDCB6E", "#00CEC9"]


def test_create_players_content_follows_role(catalog):
    pair = catalog.pairs[0]
    players = create_players(NAMES, ICONS, COLORS, pair, 1, 1)

    assert [p.name for p in players] == NAMES
    assert [p.icon for p in players] == ICONS
    assert [p.color for p in players] == COLORS
    for p in players:
        assert p.eliminated is False
        if p.role == "civil":
            assert (p.content, p.content_label) == (pair.side_a, pair.label_a)
        elif p.role == "undercover":
            assert (p.content, p.content_label) == (pair.side_b, pair.label_b)
        else:
            assert p.content is None and p.content_label is None
    assert sorted(p.role for p in players) == ["civil"] * 4 + ["mrwhite", "undercover"]


def test_create_players_generates_unique_ids(catalog):
    players = create_players(NAMES, ICONS, COLORS, catalog.pairs[0], 2, 0)
    assert len({p.id for p in players}) == len(players)


def test_create_players_rejects_mismatched_inputs(catalog):
    with pytest.raises(ValueError):
        create_players(NAMES, ICONS[:2], COLORS, catalog.pairs[0], 1, 0)


def test_role_holder_varies_between_deals(catalog):
    holders = set()
    for _ in range(50):
        players = create_players(NAMES, ICONS, COLORS, catalog.pairs[0], 1, 0)
        holders.add(next(p.name for p in players if p.role == "undercover"))
    assert len(holders) >= 2


# ---------------- build_speaking_order ----------------

def test_speaking_order_is_a_permutation():
    players = make_players(["civil"] * 5 + ["undercover"])
    order = build_speaking_order(players, False)
    assert sorted(order) == list(range(6))


@pytest.mark.parametrize("roles", [
    ["mrwhite", "civil", "civil"],
    ["mrwhite", "mrwhite", "civil", "civil", "civil"],
    ["civil", "civil", "civil", "undercover", "mrwhite", "mrwhite"],
])
def test_mr_white_never_starts(roles):
    players = make_players(roles)
    rng = random.Random(11)
    for _ in range(200):
        order = build_speaking_order(players, True, rng)
        assert players[order[0]].role != "mrwhite"
        assert sorted(order) == list(range(len(players)))


def test_mr_white_may_start_when_rule_disabled():
    players = make_players(["mrwhite", "civil", "civil"])
    rng = random.Random(2)
    firsts = {players[build_speaking_order(players, False, rng)[0]].role for _ in range(100)}
    assert "mrwhite" in firsts


def test_all_mr_white_order_left_unchanged():
    players = make_players(["mrwhite", "mrwhite"])
    assert sorted(build_speaking_order(players, True)) == [0, 1]


def test_empty_table_has_empty_order():
    assert build_speaking_order([], True) == []

import random
from collections import Counter

import pytest

from wordgame.constants import BLANK_PLACEHOLDER, LETTER_SCORES, TOTAL_TILES
from wordgame.errors import InvalidPlacement
from wordgame.tiles import (assign_blank, draw, generate_initial_bag,
                            make_tile, reset_blank, restore, tile_score)


def _multiset(tiles):
    return Counter((t.letter, t.value, t.is_blank) for t in tiles)


def test_initial_bag_has_standard_distribution():
    bag = generate_initial_bag(random.Random(1))
    assert len(bag) == TOTAL_TILES == 100
    assert len({t.id for t in bag}) == 100
    letters = Counter(t.letter for t in bag if not t.is_blank)
    assert letters['E'] == 12 and letters['A'] == 9 and letters['Z'] == 1
    blanks = [t for t in bag if t.is_blank]
    assert len(blanks) == 2
    assert all(t.value == 0 and t.chosen_letter is None for t in blanks)
    assert all(t.value == LETTER_SCORES[t.letter] for t in bag if not t.is_blank)


def test_bag_is_shuffled():
    assert [t.id for t in generate_initial_bag(random.Random(1))] != \
        [t.id for t in generate_initial_bag(random.Random(2))]


def test_draw_takes_from_front_and_returns_fewer_when_short():
    bag = generate_initial_bag(random.Random(1))
    drawn, rest = draw(bag, 7)
    assert drawn == bag[:7] and rest == bag[7:]

    drawn, rest = draw(bag[:3], 7)
    assert len(drawn) == 3 and rest == []


def test_restore_reshuffles_whole_bag_and_keeps_multiset():
    bag = generate_initial_bag(random.Random(1))
    drawn, rest = draw(bag, 7)
    restored = restore(drawn, rest, random.Random(5))
    assert _multiset(restored) == _multiset(bag)
    assert [t.id for t in restored] != [t.id for t in rest + drawn]


def test_blank_assignment_and_reset_keep_identity():
    blank = make_tile("b1", '*')
    chosen = assign_blank(blank, 'q')
    assert chosen.id == blank.id
    assert chosen.letter == 'Q' and chosen.chosen_letter == 'Q' and chosen.value == 0
    assert tile_score(chosen) == 0

    reset = reset_blank(chosen)
    assert reset.id == blank.id
    assert reset.chosen_letter is None and reset.letter == BLANK_PLACEHOLDER


def test_restore_resets_blanks():
    blank = assign_blank(make_tile("b1", '*'), 'E')
    restored = restore([blank], [], random.Random(0))
    assert restored[0].chosen_letter is None


def test_assign_blank_rejects_regular_tiles_and_bad_letters():
    with pytest.raises(InvalidPlacement):
        assign_blank(make_tile("t1", 'A'), 'B')
    with pytest.raises(InvalidPlacement):
        assign_blank(make_tile("b1", '*'), '7')

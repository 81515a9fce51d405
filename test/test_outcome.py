"""
Outcome resolution: ranking, ties to the banker, and payout multipliers.
"""

from itertools import combinations_with_replacement

from chinchiro.engine.hands import classify, no_score_hand, off_table_hand
from chinchiro.engine.outcome import (
    BANKER,
    CHALLENGER,
    banker_wins,
    hand_rank,
    resolve,
    resolve_outcome,
)


def all_distinct_hands():
    """One hand per multiset of faces, plus the Off-Table override."""
    hands = [classify(list(faces)) for faces in combinations_with_replacement(range(1, 7), 3)]
    hands.append(off_table_hand())
    return hands


def test_tie_goes_to_banker():
    banker = classify([4, 2, 2])
    challenger = classify([4, 6, 6])
    assert banker.tie_break == challenger.tie_break == 4

    outcome = resolve_outcome(banker, challenger, 1000)
    assert outcome.winner == BANKER
    assert outcome.multiplier == 1
    assert outcome.amount == -1000


def test_triple_ones_banker_beats_point_six():
    assert resolve(classify([1, 1, 1]), classify([3, 3, 6]), 1000) == -5000


def test_no_score_banker_collects_double_from_hifumi():
    assert resolve(no_score_hand(), classify([1, 2, 3]), 2000) == -4000


def test_challenger_win_uses_banker_loss_multiplier():
    # Point beats Hifumi; Hifumi's loss multiplier doubles the payout
    outcome = resolve_outcome(classify([1, 2, 3]), classify([5, 5, 1]), 500)
    assert outcome.winner == CHALLENGER
    assert outcome.multiplier == 2
    assert outcome.amount == 1000


def test_challenger_high_straight_pays_double():
    assert resolve(classify([2, 2, 6]), classify([4, 5, 6]), 300) == 600


def test_higher_triple_beats_lower_triple():
    assert not banker_wins(classify([2, 2, 2]), classify([5, 5, 5]))
    assert resolve(classify([2, 2, 2]), classify([5, 5, 5]), 100) == 300


def test_rank_order_between_categories():
    ordered = [
        off_table_hand(),
        classify([1, 2, 3]),
        classify([1, 2, 4]),
        classify([1, 1, 2]),
        classify([6, 6, 5]),
        classify([4, 5, 6]),
        classify([2, 2, 2]),
        classify([6, 6, 6]),
        classify([1, 1, 1]),
    ]
    ranks = [hand_rank(h) for h in ordered]
    assert ranks == sorted(ranks)
    assert len(set(ranks)) == len(ranks)


def test_off_table_loses_to_everything_but_itself():
    for hand in all_distinct_hands():
        assert banker_wins(hand, off_table_hand())
    # Off-Table vs Off-Table is a tie, which the banker takes
    assert resolve(off_table_hand(), off_table_hand(), 100) == -100


def test_payout_magnitude_law():
    bet = 700
    hands = all_distinct_hands()
    for banker in hands:
        for challenger in hands:
            amount = resolve(banker, challenger, bet)
            if banker_wins(banker, challenger):
                expected = bet * max(banker.win_multiplier, challenger.loss_multiplier)
                assert amount == -expected
            else:
                expected = bet * max(challenger.win_multiplier, banker.loss_multiplier)
                assert amount == expected
            assert amount != 0


def test_resolve_is_pure():
    banker = classify([3, 3, 4])
    challenger = classify([5, 2, 2])
    results = {resolve(banker, challenger, 1200) for _ in range(20)}
    assert results == {1200}
    assert banker == classify([3, 3, 4])


def test_zero_bet_settles_to_zero():
    assert resolve(classify([1, 1, 1]), classify([1, 2, 3]), 0) == 0

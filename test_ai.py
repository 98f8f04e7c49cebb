"""
AI Policy Test Suite

Tests:
    1. Category choice — ratio ranking, tie-breaking, derived-row filtering
    2. Re-roll rule — threshold and remaining rolls
    3. Strategies — RatioStrategy and RandomStrategy decisions
    4. Turn state machine — step(), run_turn() termination and pacing
    5. Games — parametrized across strategies and dice counts
"""
import pytest
import random

from hypothesis import given, strategies as st

from game_engine import (
    DieState, GameState, categories_for, current_scorecard, roll_dice, total_rounds,
)
from ai import (
    AI_THRESHOLD, CategoryChoice, Commit, RerollAgain,
    RandomStrategy, RatioStrategy, TurnPhase, TurnState, YatzyStrategy,
    candidate_categories, choose_best_category, play_game, play_turn,
    run_turn, should_reroll, step,
)


# ── Helpers ─────────────────────────────────────────────────────────────────

def make_dice(*values, held=()):
    return tuple(DieState(value=v, held=i in held) for i, v in enumerate(values))


class AlwaysReroll(YatzyStrategy):
    """Asks for another roll every time; records how often it was asked."""

    def __init__(self, dice_count):
        super().__init__(dice_count)
        self.calls = 0

    def decide(self, values, available, rolls_used, max_rolls):
        self.calls += 1
        return RerollAgain(reason="never satisfied")


class Recorder:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def all_strategies(dice_count, rng):
    return [RatioStrategy(dice_count), RandomStrategy(dice_count, rng=rng)]


# ═══════════════════════════════════════════════════════════════════════════════
# 1. CATEGORY CHOICE
# ═══════════════════════════════════════════════════════════════════════════════

class TestChooseBestCategory:

    def test_empty_available(self):
        assert choose_best_category([1, 2, 3, 4, 5], [], 5) == CategoryChoice(None, 0.0)

    def test_perfect_number_row_found_first(self):
        choice = choose_best_category([6] * 5, categories_for(5), 5)
        assert choice == CategoryChoice("6's", 1.0)

    def test_ties_keep_first_seen(self):
        assert choose_best_category([6] * 5, ["Yatzy", "6's"], 5).category == "Yatzy"
        assert choose_best_category([6] * 5, ["6's", "Yatzy"], 5).category == "6's"

    def test_all_zero_returns_first_candidate(self):
        choice = choose_best_category([1, 2, 3, 4, 6], ["Yatzy", "Full house"], 5)
        assert choice == CategoryChoice("Yatzy", 0.0)

    def test_derived_rows_are_skipped(self):
        choice = choose_best_category([1, 2, 3, 4, 6], ["Bonus", "Yatzy"], 5)
        assert choice.category == "Yatzy"

    def test_only_derived_rows_left_falls_back(self):
        choice = choose_best_category([1, 2, 3, 4, 5], ["Total of numbers", "Bonus"], 5)
        assert choice.category == "Total of numbers"
        assert choice.ratio == pytest.approx(15 / 105)

    def test_standard_pairs_never_outrank(self):
        choice = choose_best_category([6, 6, 1, 2, 3], ["1 pair", "Chance"], 5)
        assert choice == CategoryChoice("Chance", pytest.approx(18 / 30))

    def test_extended_pairs_ratio_may_exceed_one(self):
        values = [6, 6, 6, 6, 1, 2, 3, 4, 5, 1, 2, 3]
        choice = choose_best_category(values, ["Chance", "2 pairs"], 12)
        assert choice.category == "2 pairs"
        assert choice.ratio == pytest.approx(24 / 22)

    def test_candidate_categories(self):
        assert candidate_categories(["Bonus", "Chance"]) == ["Chance"]
        assert candidate_categories(("Bonus",)) == ["Bonus"]
        assert candidate_categories([]) == []


# ═══════════════════════════════════════════════════════════════════════════════
# 2. RE-ROLL RULE
# ═══════════════════════════════════════════════════════════════════════════════

class TestShouldReroll:

    @pytest.mark.parametrize("rolls_used,max_rolls,ratio,expected", [
        (0, 3, 0.5, True),
        (1, 3, 0.5, True),
        (2, 3, 0.5, False),   # last roll
        (0, 3, 0.8, False),   # threshold reached
        (0, 3, 0.79, True),
        (0, 1, 0.0, False),
        (0, 3, 1.2, False),
    ])
    def test_rule(self, rolls_used, max_rolls, ratio, expected):
        assert should_reroll(rolls_used, max_rolls, ratio) is expected

    def test_default_threshold(self):
        assert AI_THRESHOLD == 0.8

    def test_custom_threshold(self):
        assert should_reroll(0, 3, 0.6, threshold=0.5) is False
        assert should_reroll(0, 3, 0.6, threshold=0.9) is True


# ═══════════════════════════════════════════════════════════════════════════════
# 3. STRATEGIES
# ═══════════════════════════════════════════════════════════════════════════════

class TestRatioStrategy:

    def test_commits_on_good_roll(self):
        decision = RatioStrategy(5).decide([6] * 5, categories_for(5), 0, 3)
        assert isinstance(decision, Commit)
        assert decision.category == "6's"
        assert decision.ratio == 1.0

    def test_rerolls_weak_first_roll(self):
        decision = RatioStrategy(5).decide([1, 2, 3, 4, 6], categories_for(5), 0, 3)
        assert isinstance(decision, RerollAgain)
        assert "Chance" in decision.reason

    def test_commits_weak_last_roll(self):
        decision = RatioStrategy(5).decide([1, 2, 3, 4, 6], categories_for(5), 2, 3)
        assert decision == Commit("Chance", ratio=pytest.approx(16 / 30), reason=decision.reason)

    def test_lower_threshold_accepts_more(self):
        decision = RatioStrategy(5, threshold=0.5).decide([1, 2, 3, 4, 6], categories_for(5), 0, 3)
        assert isinstance(decision, Commit)

    def test_no_categories_commits_to_none(self):
        decision = RatioStrategy(5).decide([1, 2, 3, 4, 6], [], 0, 3)
        assert decision == Commit(None, ratio=0.0, reason=decision.reason)


class TestRandomStrategy:

    def test_only_picks_scorable_categories(self):
        strategy = RandomStrategy(5, rng=random.Random(3))
        for _ in range(100):
            decision = strategy.decide([1, 2, 3, 4, 5], ["Bonus", "Chance", "Yatzy"], 2, 3)
            assert decision.category in ("Chance", "Yatzy")

    def test_commits_on_last_roll(self):
        strategy = RandomStrategy(6, rng=random.Random(0))
        for _ in range(50):
            assert isinstance(strategy.decide([1] * 6, categories_for(6), 2, 3), Commit)

    def test_sometimes_rerolls(self):
        strategy = RandomStrategy(6, rng=random.Random(0))
        kinds = {type(strategy.decide([1] * 6, categories_for(6), 0, 3)) for _ in range(50)}
        assert kinds == {Commit, RerollAgain}


# ═══════════════════════════════════════════════════════════════════════════════
# 4. TURN STATE MACHINE
# ═══════════════════════════════════════════════════════════════════════════════

class TestStep:

    def test_final_state_is_unchanged(self):
        state = TurnState(dice=make_dice(6, 6, 6, 6, 6), available=("Yatzy",),
                          phase=TurnPhase.FINAL)
        assert step(state, RatioStrategy(5)) == (state, None)

    def test_commit_makes_state_final(self):
        state = TurnState(dice=make_dice(6, 6, 6, 6, 6), available=tuple(categories_for(5)))
        new_state, action = step(state, RatioStrategy(5))
        assert new_state.phase is TurnPhase.FINAL
        assert action.category == "6's"
        assert new_state.dice == state.dice

    def test_reroll_counts_and_keeps_held_dice(self):
        dice = make_dice(6, 6, 1, 2, 3, held=(0, 1))
        state = TurnState(dice=dice, available=("Chance",))
        new_state, action = step(state, AlwaysReroll(5), random.Random(4))
        assert action is None
        assert new_state.rolls_used == 1
        assert new_state.phase is TurnPhase.DECIDING
        assert new_state.values[:2] == [6, 6]
        assert new_state.dice[0].held and new_state.dice[1].held

    def test_out_of_rolls_forces_commit(self):
        state = TurnState(dice=make_dice(1, 2, 3, 4, 5), available=("Yatzy", "Small straight"),
                          rolls_used=2)
        new_state, action = step(state, AlwaysReroll(5))
        assert new_state.phase is TurnPhase.FINAL
        assert action.category == "Small straight"
        assert action.ratio == 1.0


class TestRunTurn:

    def test_terminates_within_max_rolls(self):
        strategy = AlwaysReroll(6)
        state = TurnState(dice=make_dice(1, 1, 2, 2, 3, 4), available=tuple(categories_for(6)))
        final, action = run_turn(state, strategy, random.Random(0))
        assert final.phase is TurnPhase.FINAL
        assert final.rolls_used == 2
        assert strategy.calls == 3
        assert isinstance(action, Commit)

    def test_single_roll_turn(self):
        strategy = AlwaysReroll(5)
        state = TurnState(dice=make_dice(1, 2, 3, 4, 5), available=("Chance",), max_rolls=1)
        final, action = run_turn(state, strategy)
        assert final.rolls_used == 0
        assert action.category == "Chance"
        assert strategy.calls == 1

    def test_sleeps_between_rerolls(self):
        sleep = Recorder()
        state = TurnState(dice=make_dice(1, 1, 2, 2, 3), available=("Yatzy",))
        run_turn(state, AlwaysReroll(5), random.Random(0), delay=0.5, sleep=sleep)
        assert sleep.calls == [0.5, 0.5]

    def test_no_delay_never_sleeps(self):
        sleep = Recorder()
        state = TurnState(dice=make_dice(1, 1, 2, 2, 3), available=("Yatzy",))
        run_turn(state, AlwaysReroll(5), random.Random(0), sleep=sleep)
        assert sleep.calls == []

    def test_immediate_commit_never_sleeps(self):
        sleep = Recorder()
        state = TurnState(dice=make_dice(6, 6, 6, 6, 6), available=("Yatzy",))
        _, action = run_turn(state, RatioStrategy(5), delay=1.0, sleep=sleep)
        assert action.category == "Yatzy"
        assert sleep.calls == []

    def test_final_state_rejected(self):
        state = TurnState(dice=make_dice(6, 6, 6, 6, 6), available=("Yatzy",),
                          phase=TurnPhase.FINAL)
        with pytest.raises(ValueError):
            run_turn(state, RatioStrategy(5))


@given(st.integers(min_value=1, max_value=6),
       st.lists(st.integers(min_value=1, max_value=6), min_size=6, max_size=6),
       st.integers(min_value=0, max_value=2 ** 32 - 1))
def test_turn_commits_within_max_rolls(max_rolls, values, seed):
    stubborn = AlwaysReroll(6)
    for strategy in (stubborn, RatioStrategy(6)):
        state = TurnState(dice=make_dice(*values), available=tuple(categories_for(6)),
                          max_rolls=max_rolls)
        final, action = run_turn(state, strategy, random.Random(seed))
        assert isinstance(action, Commit)
        assert action.category in categories_for(6)
        assert final.phase is TurnPhase.FINAL
        assert final.rolls_used <= max_rolls - 1
    assert stubborn.calls == max_rolls


# ═══════════════════════════════════════════════════════════════════════════════
# 5. GAMES
# ═══════════════════════════════════════════════════════════════════════════════

class TestGames:

    @pytest.mark.parametrize("dice_count", [5, 6, 12])
    def test_play_turn_scores_one_category(self, dice_count):
        rng = random.Random(dice_count)
        state = GameState.create_initial(dice_count, ["A"], rng=rng)
        state = play_turn(state, RatioStrategy(dice_count), rng=rng)
        filled = [v for v in current_scorecard(state).scores.values() if v is not None]
        assert len(filled) == 1
        assert state.rolls_used == 0

    @pytest.mark.parametrize("dice_count", [5, 6, 12])
    @pytest.mark.parametrize("index", [0, 1], ids=["ratio", "random"])
    def test_completes_full_game(self, dice_count, index):
        rng = random.Random(42)
        strategy = all_strategies(dice_count, rng)[index]
        state = play_game(dice_count, [strategy], rng=rng)
        assert state.game_over
        card = state.scorecards[0]
        assert card.is_complete()
        filled = [label for label, v in card.scores.items() if v is not None]
        assert len(filled) == total_rounds(dice_count)

    def test_multiplayer_game(self):
        rng = random.Random(5)
        state = play_game(6, all_strategies(6, rng), rng=rng)
        assert state.game_over
        assert [p.name for p in state.players] == ["AI 1", "AI 2"]
        assert all(p.is_ai for p in state.players)
        assert all(card.is_complete() for card in state.scorecards)

    def test_seeded_games_are_reproducible(self):
        a = play_game(6, [RatioStrategy(6)], rng=random.Random(123))
        b = play_game(6, [RatioStrategy(6)], rng=random.Random(123))
        assert a.scorecards[0].scores == b.scorecards[0].scores

    def test_ratio_beats_random(self):
        ratio_total = random_total = 0
        for seed in range(20):
            rng = random.Random(seed)
            ratio_total += play_game(5, [RatioStrategy(5)], rng=rng).scorecards[0].get_total_points()
            rng = random.Random(seed)
            state = play_game(5, [RandomStrategy(5, rng=rng)], rng=rng)
            random_total += state.scorecards[0].get_total_points()
        assert ratio_total > random_total

    def test_one_roll_games(self):
        rng = random.Random(8)
        state = play_game(5, [RatioStrategy(5)], rng=rng, max_rolls=1)
        assert state.game_over

    def test_first_roll_is_mandatory(self):
        rng = random.Random(2)
        state = GameState.create_initial(5, ["A"], rng=rng)
        assert roll_dice(state, rng).rolls_used == 1

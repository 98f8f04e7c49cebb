"""
Yatzy AI — decision policy, turn state machine and strategy implementations.

Contains:
- Outcome types (Commit, RerollAgain)
- choose_best_category() and should_reroll(), the two halves of the policy
- TurnState and step(), a bounded state machine for one automated turn
- run_turn(), which drives step() with an injectable pacing delay
- YatzyStrategy abstract base class, RatioStrategy and RandomStrategy
- play_turn() and play_game() for headless all-AI games
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
import logging
import random
import time
from typing import NamedTuple, Optional, Tuple, Union

from game_engine import (
    DieState, GameState, Player,
    current_scorecard, dice_values, is_admin_category,
    roll_dice, select_category,
)
from score_engine import max_score, score

logger = logging.getLogger(__name__)

# A roll at least this good (score / max) is taken without re-rolling
AI_THRESHOLD = 0.8


# ── Outcome Types ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Commit:
    """Lock in a score for a category."""
    category: str
    ratio: float = 0.0
    reason: str = ""


@dataclass(frozen=True)
class RerollAgain:
    """Re-roll every die that is not held."""
    reason: str = ""


Decision = Union[Commit, RerollAgain]


class CategoryChoice(NamedTuple):
    category: Optional[str]
    ratio: float


# ── Category Choice ─────────────────────────────────────────────────────────

def candidate_categories(available):
    """Drop derived rows; fall back to the full list if nothing else is left."""
    available = list(available)
    filtered = [cat for cat in available if not is_admin_category(cat)]
    return filtered or available


def choose_best_category(values, available, dice_count) -> CategoryChoice:
    """Pick the open category whose score is the largest fraction of its maximum.

    Candidates are evaluated in the order given; only a strictly greater
    ratio replaces the current best, so the first candidate wins ties and
    is returned when every ratio is 0.

    Args:
        values: Face values of the current roll
        available: Category labels with no score yet
        dice_count: 5, 6 or 12

    Returns:
        CategoryChoice(category, ratio); category is None only when
        `available` is empty
    """
    candidates = candidate_categories(available)
    if not candidates:
        return CategoryChoice(None, 0.0)

    best_cat = candidates[0]
    best_ratio = 0.0
    for cat in candidates:
        maximum = max_score(cat, dice_count)
        ratio = score(values, cat, dice_count) / maximum if maximum > 0 else 0.0
        if ratio > best_ratio:
            best_ratio = ratio
            best_cat = cat
    return CategoryChoice(best_cat, best_ratio)


def should_reroll(rolls_used, max_rolls, best_ratio, threshold=AI_THRESHOLD):
    """Continue only while a roll remains and nothing good enough was found.

    Args:
        rolls_used: Rolls already spent before the current one (0 on the first roll)
        max_rolls: Rolls allowed per turn
        best_ratio: Best score / maximum ratio found for the current roll
        threshold: Ratio at which the policy stops looking
    """
    return rolls_used < max_rolls - 1 and best_ratio < threshold


# ── Strategy Interface ──────────────────────────────────────────────────────

class YatzyStrategy(ABC):
    """Abstract base class for Yatzy AI strategies."""

    def __init__(self, dice_count):
        self.dice_count = dice_count

    @abstractmethod
    def decide(self, values, available, rolls_used, max_rolls) -> Decision:
        """Given the current roll, decide: re-roll or commit.

        Args:
            values: Face values of the current roll
            available: Category labels with no score yet
            rolls_used: Rolls already spent before the current one
            max_rolls: Rolls allowed per turn

        Returns:
            RerollAgain, or Commit for one of the available categories.
            Must return Commit once rolls_used >= max_rolls - 1.
        """
        ...


class RatioStrategy(YatzyStrategy):
    """Greedy ratio policy: take the first roll that is good enough.

    Ranks open categories by score / theoretical maximum and commits to the
    best one when its ratio reaches the threshold or on the last allowed
    roll; otherwise re-rolls. No lookahead and no re-roll simulation.
    """

    def __init__(self, dice_count, threshold=AI_THRESHOLD):
        super().__init__(dice_count)
        self.threshold = threshold

    def decide(self, values, available, rolls_used, max_rolls) -> Decision:
        choice = choose_best_category(values, available, self.dice_count)
        if choice.category is not None and should_reroll(rolls_used, max_rolls, choice.ratio,
                                                         self.threshold):
            return RerollAgain(
                reason=f"Best is {choice.category} at {choice.ratio:.2f}, rolling again")
        return Commit(
            category=choice.category,
            ratio=choice.ratio,
            reason=f"Taking {choice.category} (ratio {choice.ratio:.2f})")


class RandomStrategy(YatzyStrategy):
    """Baseline strategy: coin-flip re-rolls, random category.

    50% chance to roll again while rolls remain, then a random open
    category that is not a derived row.
    """

    def __init__(self, dice_count, rng=None):
        super().__init__(dice_count)
        self.rng = rng or random

    def decide(self, values, available, rolls_used, max_rolls) -> Decision:
        candidates = candidate_categories(available)
        if candidates and rolls_used < max_rolls - 1 and self.rng.random() < 0.5:
            return RerollAgain(reason="Feeling lucky, re-rolling")
        cat = self.rng.choice(candidates) if candidates else None
        return Commit(category=cat, reason=f"Randomly picking {cat}")


# ── Turn State Machine ──────────────────────────────────────────────────────

class TurnPhase(Enum):
    DECIDING = "deciding"
    FINAL = "final"


@dataclass(frozen=True)
class TurnState:
    """One automated turn, after the mandatory first roll."""
    dice: Tuple[DieState, ...]
    available: Tuple[str, ...]
    rolls_used: int = 0  # rolls spent before the current one
    max_rolls: int = 3
    phase: TurnPhase = TurnPhase.DECIDING

    @property
    def values(self):
        return dice_values(self.dice)


def step(state: TurnState, strategy: YatzyStrategy, rng=None) -> Tuple[TurnState, Optional[Commit]]:
    """Advance one decision of a turn.

    Returns (new_state, Commit) when the strategy commits (the new state is
    FINAL) and (new_state, None) after a re-roll of every unheld die. A FINAL
    state is returned unchanged with no action.
    """
    if state.phase is TurnPhase.FINAL:
        return state, None

    decision = strategy.decide(state.values, state.available, state.rolls_used, state.max_rolls)
    if isinstance(decision, RerollAgain) and state.rolls_used < state.max_rolls - 1:
        logger.debug("roll %d: %s: %s", state.rolls_used + 1, state.values, decision.reason)
        new_dice = tuple(die.roll(rng) for die in state.dice)
        return replace(state, dice=new_dice, rolls_used=state.rolls_used + 1), None

    if isinstance(decision, RerollAgain):
        # Out of rolls: a strategy asking for more still has to commit
        choice = choose_best_category(state.values, state.available, strategy.dice_count)
        decision = Commit(category=choice.category, ratio=choice.ratio,
                          reason=f"Out of rolls, taking {choice.category}")

    logger.debug("roll %d: %s: %s", state.rolls_used + 1, state.values, decision.reason)
    return replace(state, phase=TurnPhase.FINAL), decision


def run_turn(state: TurnState, strategy: YatzyStrategy, rng=None,
             delay=0.0, sleep=time.sleep) -> Tuple[TurnState, Commit]:
    """Drive step() until the turn is FINAL.

    Args:
        state: Turn state after the first roll
        strategy: Strategy making each decision
        rng: Optional random.Random for re-rolls
        delay: Seconds to wait before each re-roll decision is acted on
        sleep: Callable used for the wait (tests pass a no-op)

    Returns:
        (final_state, Commit); reached within max_rolls steps
    """
    if state.phase is TurnPhase.FINAL:
        raise ValueError("turn is already final")
    while True:
        state, action = step(state, strategy, rng)
        if action is not None:
            return state, action
        if delay > 0:
            sleep(delay)


# ── Game Loop ───────────────────────────────────────────────────────────────

def play_turn(state: GameState, strategy: YatzyStrategy, rng=None,
              delay=0.0, sleep=time.sleep) -> GameState:
    """Play one turn for the current player: mandatory first roll, then
    strategy decisions until a category is scored.

    Args:
        state: Game state at the start of a turn (rolls_used == 0)
        strategy: The AI strategy for the current player

    Returns:
        Game state after the category is scored
    """
    state = roll_dice(state, rng)
    turn = TurnState(
        dice=state.dice,
        available=tuple(current_scorecard(state).open_categories()),
        max_rolls=state.max_rolls,
    )
    turn, action = run_turn(turn, strategy, rng=rng, delay=delay, sleep=sleep)
    state = replace(state, dice=turn.dice, rolls_used=turn.rolls_used + 1)
    return select_category(state, action.category)


def play_game(dice_count, strategies, rng=None, max_rolls=3) -> GameState:
    """Play a complete game where every seat is an AI.

    Args:
        dice_count: 5, 6 or 12
        strategies: One strategy per player, in seat order

    Returns:
        Final game state with game_over == True
    """
    players = [Player(name=f"AI {i + 1}", is_ai=True) for i in range(len(strategies))]
    state = GameState.create_initial(dice_count, players, max_rolls=max_rolls, rng=rng)
    while not state.game_over:
        state = play_turn(state, strategies[state.current_player_index], rng=rng)
    return state

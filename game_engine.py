"""
Yatzy Game Engine - Turn and scorecard state for 5, 6 and 12 dice games

This module holds the game state the turn loop owns: dice with their held
flags, one scorecard per player, roll counting and turn/round advancement.
It uses immutable data structures and pure functions; actions that are not
allowed return the state unchanged. All scoring is delegated to score_engine.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple
import random

from score_engine import normalize_label, score, upper_bonus

MAX_ROLLS = 3

# Board layouts, in display order
STANDARD_CATEGORIES = (
    "1's",
    "2's",
    "3's",
    "4's",
    "5's",
    "6's",
    "Total of numbers",
    "Bonus",
    "1 pair",
    "2 pairs",
    "3 pairs",
    "3 same",
    "4 same",
    "2 x 3 same",
    "Small straight",
    "Large straight",
    "Royal",
    "Full house",
    "Chance",
    "Yatzy",
)

EXTENDED_CATEGORIES = (
    "1's",
    "2's",
    "3's",
    "4's",
    "5's",
    "6's",
    "Total of numbers",
    "Bonus",
    "1 pair",
    "2 pairs",
    "3 pairs",
    "4 pairs",
    "5 pairs",
    "6 pairs",
    "3 same",
    "4 same",
    "5 same",
    "6 same",
    "7 same",
    "8 same",
    "9 same",
    "10 same",
    "11 same",
    "2x3 same",
    "2 x 4 same",
    "2 x 5 same",
    "2 x 6 same",
    "3 x 3 same",
    "3 x 4 same",
    "little straight (1-5)",
    "large straight (2-6)",
    "little clauss (1-6 + 2x6)",
    "large clauss (1-6 + 3x6)",
    "tuber (1-6 + 4x6)",
    "all (1-6 + 5x6)",
    "captain Vom (1-6 + 6x6)",
    "Little mom (2+3 of the same)",
    "the poet (2+4 of the same)",
    "the mom (2+5 of the same)",
    "skipper horror (2+6 of the same)",
    "the radisses (3+4 of the same)",
    "the pools (3+5 of the same)",
    "goldfinch (3+6 of the same)",
    "Karl with the cap (4+5 of the same)",
    "Klaus rags (4+6 of the same)",
    "lightning Jens (5+6 of the same)",
    "Chance",
    "Yatzy",
)

_NOT_IN_FIVE_DICE = ("3 pairs", "2 x 3 same", "Royal")

# Derived rows: shown on the board, never scored directly
ADMIN_CATEGORIES = frozenset({"total of numbers", "bonus", "total points"})

UPPER_CATEGORIES = ("1's", "2's", "3's", "4's", "5's", "6's")

VALID_DICE_COUNTS = (5, 6, 12)


def categories_for(dice_count):
    """Return the board labels used for a dice count (empty for unknown counts)."""
    if dice_count == 5:
        return tuple(cat for cat in STANDARD_CATEGORIES if cat not in _NOT_IN_FIVE_DICE)
    if dice_count == 6:
        return STANDARD_CATEGORIES
    if dice_count == 12:
        return EXTENDED_CATEGORIES
    return ()


def is_admin_category(label):
    """Check if a label is a derived row (total, bonus, total points)"""
    return normalize_label(label) in ADMIN_CATEGORIES


def total_rounds(dice_count):
    """Number of turns each player gets: one per scorable category."""
    return sum(1 for cat in categories_for(dice_count) if not is_admin_category(cat))


class Scorecard:
    """Manages one player's Yatzy scorecard"""

    def __init__(self, dice_count):
        """Initialize an empty scorecard for the board of a dice count"""
        self.dice_count = dice_count
        # Dictionary to store scores for each board label (None = not filled)
        self.scores = {label: None for label in categories_for(dice_count)}

    def board_label(self, label):
        """Board label that label names ("yatzy" -> "Yatzy"), None if not on this board"""
        if label in self.scores:
            return label
        key = normalize_label(label)
        for board in self.scores:
            if normalize_label(board) == key:
                return board
        return None

    def is_filled(self, label):
        """Check if a category has been filled"""
        board = self.board_label(label)
        return board is not None and self.scores[board] is not None

    def has_category(self, label):
        return self.board_label(label) is not None

    def set_score(self, label, value):
        """Set the score for a category"""
        board = self.board_label(label)
        if board is not None and self.scores[board] is None:
            self.scores[board] = value

    def open_categories(self):
        """Every label with no score yet, in board order (derived rows included)"""
        return [label for label, value in self.scores.items() if value is None]

    def scorable_categories(self):
        """Open labels a player may actually choose"""
        return [label for label in self.open_categories() if not is_admin_category(label)]

    def get_upper_section_total(self):
        """Calculate total for the upper section (1's through 6's)"""
        return sum(self.scores[cat] for cat in UPPER_CATEGORIES
                   if self.scores.get(cat) is not None)

    def get_upper_section_bonus(self):
        """Calculate the bonus for the upper section under this board's variant"""
        return upper_bonus(self.get_upper_section_total(), self.dice_count)

    def get_total_points(self):
        """Sum of every filled category plus the upper section bonus"""
        filled = sum(value for label, value in self.scores.items()
                     if value is not None and not is_admin_category(label))
        return filled + self.get_upper_section_bonus()

    def is_complete(self):
        """Check if every scorable category is filled"""
        return not self.scorable_categories()

    def copy(self):
        """Create a copy of the scorecard"""
        new_card = Scorecard(self.dice_count)
        new_card.scores = self.scores.copy()
        return new_card

    def with_score(self, label, value):
        """Return new Scorecard with score set for a category"""
        new_card = self.copy()
        new_card.set_score(label, value)
        return new_card


@dataclass(frozen=True)
class DieState:
    """Pure representation of a single die's state - immutable"""
    value: int  # 1-6
    held: bool = False

    def roll(self, rng=None) -> 'DieState':
        """Return new DieState with random value (if not held)"""
        if self.held:
            return self
        rng = rng or random
        return replace(self, value=rng.randint(1, 6))

    def toggle_held(self) -> 'DieState':
        """Return new DieState with held status toggled"""
        return replace(self, held=not self.held)


def dice_values(dice):
    """Face values of a dice tuple"""
    return [die.value for die in dice]


@dataclass(frozen=True)
class Player:
    name: str
    is_ai: bool = False


@dataclass(frozen=True)
class GameState:
    """Immutable game state - represents complete game state at a point in time"""
    dice_count: int
    players: Tuple[Player, ...]
    scorecards: Tuple[Scorecard, ...]  # one per player
    current_player_index: int
    dice: Tuple[DieState, ...]
    rolls_used: int  # rolls made this turn, 0..max_rolls
    current_round: int  # 1..total_rounds
    max_rolls: int = MAX_ROLLS
    game_over: bool = False

    @staticmethod
    def create_initial(dice_count, players, max_rolls=MAX_ROLLS, rng=None):
        """Create a fresh game state.

        Args:
            dice_count: 5, 6 or 12
            players: Sequence of Player (or plain names, which become human players)
            max_rolls: Rolls allowed per turn
            rng: Optional random.Random used for the initial dice

        Raises:
            ValueError: if dice_count is not a known variant, no players are
                given or max_rolls is below 1
        """
        if dice_count not in VALID_DICE_COUNTS:
            raise ValueError(f"dice_count must be one of {VALID_DICE_COUNTS}, got {dice_count}")
        if not players:
            raise ValueError("at least one player is required")
        if max_rolls < 1:
            raise ValueError(f"max_rolls must be at least 1, got {max_rolls}")
        rng = rng or random
        players = tuple(p if isinstance(p, Player) else Player(name=str(p)) for p in players)
        dice = tuple(DieState(value=rng.randint(1, 6)) for _ in range(dice_count))
        return GameState(
            dice_count=dice_count,
            players=players,
            scorecards=tuple(Scorecard(dice_count) for _ in players),
            current_player_index=0,
            dice=dice,
            rolls_used=0,
            current_round=1,
            max_rolls=max_rolls,
            game_over=False,
        )

    @property
    def num_players(self):
        return len(self.players)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]


# Game Action Functions

def current_scorecard(state: GameState) -> Scorecard:
    """Return the current player's scorecard."""
    return state.scorecards[state.current_player_index]


def can_roll(state: GameState) -> bool:
    """Player can roll if the game is not over and rolls remain this turn."""
    return not state.game_over and state.rolls_used < state.max_rolls


def roll_dice(state: GameState, rng=None) -> GameState:
    """
    Roll all unheld dice and increment roll counter.

    Returns state unchanged if no rolls remain or the game is over.
    """
    if not can_roll(state):
        return state
    new_dice = tuple(die.roll(rng) for die in state.dice)
    return replace(state, dice=new_dice, rolls_used=state.rolls_used + 1)


def toggle_die_hold(state: GameState, die_index: int) -> GameState:
    """
    Toggle hold status of a specific die.

    Returns state unchanged if the index is invalid, the game is over or
    the turn has not been rolled yet.
    """
    if not (0 <= die_index < len(state.dice)) or state.game_over or state.rolls_used == 0:
        return state
    dice_list = list(state.dice)
    dice_list[die_index] = dice_list[die_index].toggle_held()
    return replace(state, dice=tuple(dice_list))


def set_holds(state: GameState, hold_indices) -> GameState:
    """Hold exactly the dice in hold_indices and release the rest."""
    for i in range(len(state.dice)):
        if (i in hold_indices) != state.dice[i].held:
            state = toggle_die_hold(state, i)
    return state


def can_select_category(state: GameState, label) -> bool:
    """
    Check if a category is available to the current player.

    It must be on the board, unfilled and not a derived row, and the
    dice must have been rolled this turn.
    """
    if state.game_over or state.rolls_used == 0:
        return False
    card = current_scorecard(state)
    return card.has_category(label) and not card.is_filled(label) and not is_admin_category(label)


def select_category(state: GameState, label) -> GameState:
    """
    Lock in score for a category and advance to the next turn.

    Scores the dice for the current player, passes the turn on (a new round
    starts after the last player) and resets holds and rolls. Sets game_over
    once every scorecard is complete.
    """
    if not can_select_category(state, label):
        return state

    card = current_scorecard(state)
    points = score(dice_values(state.dice), label, state.dice_count)
    scorecards = list(state.scorecards)
    scorecards[state.current_player_index] = card.with_score(label, points)
    scorecards = tuple(scorecards)

    if all(sc.is_complete() for sc in scorecards):
        return replace(state, scorecards=scorecards, game_over=True)

    next_player = (state.current_player_index + 1) % state.num_players
    next_round = state.current_round + 1 if next_player == 0 else state.current_round
    new_dice = tuple(replace(die, held=False) for die in state.dice)
    return replace(state,
                   scorecards=scorecards,
                   current_player_index=next_player,
                   dice=new_dice,
                   rolls_used=0,
                   current_round=next_round)


def final_standings(state: GameState):
    """(name, total points) per player, highest total first; ties keep seat order."""
    totals = [(player.name, card.get_total_points())
              for player, card in zip(state.players, state.scorecards)]
    return sorted(totals, key=lambda entry: entry[1], reverse=True)


def winner(state: GameState) -> Optional[str]:
    """Name of the leading player, None before anyone has scored"""
    if not any(card.get_total_points() for card in state.scorecards):
        return None
    return final_standings(state)[0][0]

"""
GameCoordinator — headless turn orchestration for human and AI seats.

Owns the game state, the game log and AI pacing. A front end reads the
coordinator's properties and calls its action methods; AI turns are driven
step by step through ai.step() with an injected sleep between steps.
"""
from __future__ import annotations

from dataclasses import replace
import logging
import random
import time

from ai import (
    AI_THRESHOLD,
    Commit,
    RandomStrategy,
    RatioStrategy,
    TurnState,
    YatzyStrategy,
    step,
)
from game_engine import (
    MAX_ROLLS,
    GameState,
    Player,
    Scorecard,
    can_roll,
    can_select_category,
    current_scorecard,
    dice_values,
    final_standings,
    roll_dice,
    select_category,
    toggle_die_hold,
    total_rounds,
)
from game_log import GameLog
from score_engine import score
from settings import SPEEDS

logger = logging.getLogger(__name__)

# Seconds between AI steps
SPEED_PRESETS = {
    "slow": 2.0,
    "normal": 1.0,
    "fast": 0.25,
    "instant": 0.0,
}


class GameCoordinator:
    """Coordinates game state, AI decisions, and turn management.

    Players are (name, strategy_or_None) tuples; None marks a human seat.
    """

    def __init__(self, dice_count: int = 6, players: list | None = None, speed: str = "normal",
                 sleep=time.sleep, rng: random.Random | None = None,
                 max_rolls: int = MAX_ROLLS) -> None:
        """Initialize the coordinator.

        Args:
            dice_count: 5, 6 or 12.
            players: List of (name, strategy_or_None). None gives one human
                     against an AI opponent.
            speed: Speed preset name (see SPEED_PRESETS).
            sleep: Callable taking seconds, used for AI pacing.
            rng: Random source for all dice rolls.
            max_rolls: Rolls allowed per turn.
        """
        if players is None:
            players = [("Player 1", None), ("AI Opponent", RatioStrategy(dice_count))]
        if speed not in SPEED_PRESETS:
            raise ValueError(f"unknown speed {speed!r}, expected one of {SPEEDS}")
        self.dice_count = dice_count
        self.player_configs = list(players)
        self.max_rolls = max_rolls
        self.rng = rng or random.Random()
        self._sleep = sleep
        self.speed_name = speed
        self.ai_delay = SPEED_PRESETS[speed]
        self.state = self._new_state()
        self.game_log = GameLog()
        self.ai_reason = ""

    def _new_state(self) -> GameState:
        players = [Player(name=name, is_ai=strategy is not None)
                   for name, strategy in self.player_configs]
        return GameState.create_initial(self.dice_count, players,
                                        max_rolls=self.max_rolls, rng=self.rng)

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def dice(self):
        return self.state.dice

    @property
    def rolls_used(self) -> int:
        return self.state.rolls_used

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def current_round(self) -> int:
        return self.state.current_round

    @property
    def total_rounds(self) -> int:
        return total_rounds(self.dice_count)

    @property
    def scorecard(self) -> Scorecard:
        """Current player's scorecard."""
        return current_scorecard(self.state)

    @property
    def all_scorecards(self) -> tuple[Scorecard, ...]:
        return self.state.scorecards

    @property
    def current_player_index(self) -> int:
        return self.state.current_player_index

    @property
    def num_players(self) -> int:
        return self.state.num_players

    @property
    def current_strategy(self) -> YatzyStrategy | None:
        """Current player's AI strategy (or None if human)."""
        _, strategy = self.player_configs[self.state.current_player_index]
        return strategy

    @property
    def is_current_player_human(self) -> bool:
        return self.current_strategy is None

    # ── Human actions ─────────────────────────────────────────────────────

    def roll(self) -> bool:
        """Roll the unheld dice for a human player. Returns False if not allowed."""
        if not self.is_current_player_human or not can_roll(self.state):
            return False
        self.state = roll_dice(self.state, self.rng)
        self._log_roll()
        return True

    def toggle_hold(self, die_index: int) -> bool:
        """Toggle hold on a die for a human player."""
        if not self.is_current_player_human:
            return False
        new_state = toggle_die_hold(self.state, die_index)
        if new_state is self.state:
            return False
        self.state = new_state
        held = [i for i, die in enumerate(self.dice) if die.held]
        self.game_log.log_hold_change(self.current_round, self.current_player_index,
                                      held, dice_values(self.dice))
        return True

    def select_category(self, label: str) -> bool:
        """Score a category for a human player."""
        if not self.is_current_player_human or not can_select_category(self.state, label):
            return False
        self._commit(self.scorecard.board_label(label))
        return True

    # ── AI turns ──────────────────────────────────────────────────────────

    def play_ai_turn(self) -> Commit | None:
        """Play the current AI player's whole turn with pacing between steps.

        Returns the Commit that was scored, or None when the current seat is
        human or the game is over.
        """
        strategy = self.current_strategy
        if strategy is None or self.game_over:
            return None

        self._pause()
        self.state = roll_dice(self.state, self.rng)
        self._log_roll()
        turn = TurnState(
            dice=self.state.dice,
            available=tuple(self.scorecard.open_categories()),
            max_rolls=self.state.max_rolls,
        )
        while True:
            turn, action = step(turn, strategy, self.rng)
            if action is not None:
                break
            self._pause()
            self.state = replace(self.state, dice=turn.dice, rolls_used=self.state.rolls_used + 1)
            self._log_roll()

        if not can_select_category(self.state, action.category):
            logger.warning("%s chose unavailable category %r", self.player_configs[self.current_player_index][0],
                           action.category)
            return None
        self.ai_reason = action.reason
        self._pause()
        self._commit(action.category, reason=action.reason)
        return action

    def play_until_human(self) -> int:
        """Play AI turns until a human seat is up or the game ends. Returns turns played."""
        played = 0
        while not self.game_over and not self.is_current_player_human:
            if self.play_ai_turn() is None:
                break
            played += 1
        return played

    def play_game(self) -> GameState:
        """Play a game in which every seat is an AI.

        Raises:
            ValueError: if any seat is human
        """
        if any(strategy is None for _, strategy in self.player_configs):
            raise ValueError("play_game needs an AI strategy for every player")
        self.play_until_human()
        return self.state

    # ── Speed / reset ─────────────────────────────────────────────────────

    def change_speed(self, direction: int) -> bool:
        """Change AI speed. direction=+1 for faster, -1 for slower.

        Returns True if speed actually changed, False if already at limit.
        """
        idx = SPEEDS.index(self.speed_name)
        new_idx = idx + direction
        if 0 <= new_idx < len(SPEEDS):
            self.speed_name = SPEEDS[new_idx]
            self.ai_delay = SPEED_PRESETS[self.speed_name]
            return True
        return False

    def reset_game(self) -> None:
        """Start a new game with the same players and speed."""
        self.state = self._new_state()
        self.game_log.clear()
        self.ai_reason = ""

    # ── Summaries ─────────────────────────────────────────────────────────

    def last_turn_summary(self) -> tuple[str, str, int] | None:
        """Return (player_name, category, score) for the most recent scoring action, or None."""
        score_entries = [e for e in self.game_log.entries if e.event_type == "score"]
        if not score_entries:
            return None
        last = score_entries[-1]
        name = self.player_configs[last.player_index][0]
        return (name, last.category, last.score)

    def standings(self) -> list[tuple[str, int]]:
        """(name, total points) per player, leader first."""
        return final_standings(self.state)

    # ── Internal ──────────────────────────────────────────────────────────

    def _pause(self) -> None:
        if self.ai_delay > 0:
            self._sleep(self.ai_delay)

    def _log_roll(self) -> None:
        values = dice_values(self.dice)
        self.game_log.log_roll(
            turn=self.current_round,
            player_index=self.current_player_index,
            roll_number=self.rolls_used,
            dice_values=values,
        )
        logger.debug("%s roll %d: %s", self.player_configs[self.current_player_index][0],
                     self.rolls_used, values)

    def _commit(self, label: str, reason: str = "") -> None:
        values = dice_values(self.dice)
        points = score(values, label, self.dice_count)
        turn = self.current_round
        pidx = self.current_player_index
        self.state = select_category(self.state, label)
        self.game_log.log_score(turn, pidx, label, points, values, reason=reason)
        logger.info("Round %d: %s scores %d in %s with %s", turn,
                    self.player_configs[pidx][0], points, label, values)
        if self.game_over:
            logger.info("Game over: %s", ", ".join(f"{name} {total}" for name, total in self.standings()))


def make_strategy(token: str, dice_count: int, threshold: float = AI_THRESHOLD,
                  rng: random.Random | None = None) -> YatzyStrategy | None:
    """Create a strategy from a CLI token, or None for 'human'.

    Returns None for unrecognized tokens (treated as a human player).
    """
    if token == "ratio":
        return RatioStrategy(dice_count, threshold=threshold)
    elif token == "random":
        return RandomStrategy(dice_count, rng=rng)
    return None

"""Game log for Yatzy — records all actions for post-game replay.

Captures rolls, holds, and scoring decisions for each turn, for every
player at the table.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LogEntry:
    """A single logged game event."""
    turn: int                                   # round number
    player_index: int
    event_type: str                             # "roll", "hold", "score"
    dice_values: tuple[int, ...]
    held_indices: tuple[int, ...] | None = None
    category: str | None = None
    score: int | None = None
    roll_number: int = 0                        # 1..max_rolls for rolls
    reason: str = ""


class GameLog:
    """Accumulates LogEntry records during a game."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def log_roll(self, turn: int, player_index: int, roll_number: int, dice_values: list[int]) -> None:
        """Record a dice roll."""
        self.entries.append(LogEntry(
            turn=turn,
            player_index=player_index,
            event_type="roll",
            dice_values=tuple(dice_values),
            roll_number=roll_number,
        ))

    def log_hold_change(self, turn: int, player_index: int, held_indices: list[int], dice_values: list[int]) -> None:
        """Record a hold/unhold change."""
        self.entries.append(LogEntry(
            turn=turn,
            player_index=player_index,
            event_type="hold",
            dice_values=tuple(dice_values),
            held_indices=tuple(held_indices),
        ))

    def log_score(self, turn: int, player_index: int, category: str, score: int,
                  dice_values: list[int], reason: str = "") -> None:
        """Record a scoring decision."""
        self.entries.append(LogEntry(
            turn=turn,
            player_index=player_index,
            event_type="score",
            dice_values=tuple(dice_values),
            category=category,
            score=score,
            reason=reason,
        ))

    def get_turn_entries(self, turn: int, player_index: int = 0) -> list[LogEntry]:
        """Return all entries for a specific turn and player."""
        return [e for e in self.entries
                if e.turn == turn and e.player_index == player_index]

    def get_score_entries(self, player_index: int = 0) -> list[LogEntry]:
        """Return only scoring entries for a player."""
        return [e for e in self.entries
                if e.event_type == "score" and e.player_index == player_index]

    def clear(self) -> None:
        """Remove all entries."""
        self.entries = []


def describe(entry: LogEntry, player_names: list[str] | None = None) -> str:
    """One replay line for an entry, e.g. "R3 Anna roll 2: 1 4 4 6 6"."""
    who = f"P{entry.player_index + 1}"
    if player_names and 0 <= entry.player_index < len(player_names):
        who = player_names[entry.player_index]
    dice = " ".join(str(v) for v in entry.dice_values)
    if entry.event_type == "roll":
        return f"R{entry.turn} {who} roll {entry.roll_number}: {dice}"
    if entry.event_type == "hold":
        held = ", ".join(str(i + 1) for i in entry.held_indices or ())
        return f"R{entry.turn} {who} holds dice {held or 'none'}: {dice}"
    line = f"R{entry.turn} {who} scores {entry.score} in {entry.category}: {dice}"
    if entry.reason:
        line += f" ({entry.reason})"
    return line

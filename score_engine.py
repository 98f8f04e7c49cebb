"""
Yatzy Score Engine - Pure scoring rules for the 5, 6 and 12 dice variants

This module computes the actual score of a roll for a category and the
theoretical maximum of a category. It holds no state and does no I/O:
the same inputs always give the same result, and every call is total
(unknown or illegal categories score 0 instead of raising).

One rule table per variant drives both score() and max_score(). A category
without an entry in a variant's table is not legal there.
"""
from collections import Counter
from dataclasses import dataclass
from enum import Enum
import re
from typing import FrozenSet, Optional, Tuple

FACES = (1, 2, 3, 4, 5, 6)


class Variant(Enum):
    """Ruleset configuration, keyed by the number of dice thrown"""
    STANDARD_5 = 5
    STANDARD_6 = 6
    EXTENDED_12 = 12

    @property
    def dice_count(self):
        return self.value

    @property
    def is_extended(self):
        return self is Variant.EXTENDED_12

    @staticmethod
    def from_dice_count(dice_count):
        """Return the Variant for a dice count (or a Variant), None if unknown."""
        if isinstance(dice_count, Variant):
            return dice_count
        for variant in Variant:
            if variant.value == dice_count:
                return variant
        return None


class RuleFamily(Enum):
    NUMBER = "number"
    TOTAL = "total"
    BONUS = "bonus"
    STANDARD_PAIRS = "standard pairs"
    EXTENDED_PAIRS = "extended pairs"
    SAME_KIND = "same kind"
    MULTI_SAME = "multi same"
    STRAIGHT = "straight"
    FULL_HOUSE = "full house"
    TWO_GROUP = "two group"
    STRAIGHT_PLUS_SIXES = "straight plus sixes"
    CHANCE = "chance"
    YATZY = "yatzy"


class Category(Enum):
    """Yatzy score categories (value = canonical board label)"""
    ONES = "1's"
    TWOS = "2's"
    THREES = "3's"
    FOURS = "4's"
    FIVES = "5's"
    SIXES = "6's"
    TOTAL_OF_NUMBERS = "Total of numbers"
    BONUS = "Bonus"
    ONE_PAIR = "1 pair"
    TWO_PAIRS = "2 pairs"
    THREE_PAIRS = "3 pairs"
    FOUR_PAIRS = "4 pairs"
    FIVE_PAIRS = "5 pairs"
    SIX_PAIRS = "6 pairs"
    THREE_SAME = "3 same"
    FOUR_SAME = "4 same"
    FIVE_SAME = "5 same"
    SIX_SAME = "6 same"
    SEVEN_SAME = "7 same"
    EIGHT_SAME = "8 same"
    NINE_SAME = "9 same"
    TEN_SAME = "10 same"
    ELEVEN_SAME = "11 same"
    TWO_X_THREE_SAME = "2 x 3 same"
    TWO_X_FOUR_SAME = "2 x 4 same"
    TWO_X_FIVE_SAME = "2 x 5 same"
    TWO_X_SIX_SAME = "2 x 6 same"
    THREE_X_THREE_SAME = "3 x 3 same"
    THREE_X_FOUR_SAME = "3 x 4 same"
    SMALL_STRAIGHT = "Small straight"
    LARGE_STRAIGHT = "Large straight"
    ROYAL = "Royal"
    FULL_HOUSE = "Full house"
    LITTLE_MOM = "Little mom"
    THE_POET = "The poet"
    THE_MOM = "The mom"
    SKIPPER_HORROR = "Skipper horror"
    THE_RADISSES = "The radisses"
    THE_POOLS = "The pools"
    GOLDFINCH = "Goldfinch"
    KARL_WITH_THE_CAP = "Karl with the cap"
    KLAUS_RAGS = "Klaus rags"
    LIGHTNING_JENS = "Lightning Jens"
    LITTLE_CLAUSS = "Little clauss"
    LARGE_CLAUSS = "Large clauss"
    TUBER = "Tuber"
    ALL = "All"
    CAPTAIN_VOM = "Captain Vom"
    CHANCE = "Chance"
    YATZY = "Yatzy"
    TOTAL_POINTS = "Total points"


@dataclass(frozen=True)
class Rule:
    """Scoring rule for one category under one variant.

    Only the fields a family uses are set:
        face    -- NUMBER: the counted face
        size    -- group size (SAME_KIND, MULTI_SAME, TWO_GROUP first group)
                   or number of pairs (pair families)
        groups  -- MULTI_SAME: how many groups of `size` are needed
        second  -- TWO_GROUP: size of the group on the other face
        faces   -- STRAIGHT: faces that must all be present
        shape   -- FULL_HOUSE: sorted nonzero face counts required
        extra   -- STRAIGHT_PLUS_SIXES: sixes needed beyond the 1-6 run
        points  -- fixed award (straights, full house, bonus, yatzy, ...)
        threshold -- BONUS: upper total needed for the award
    """
    family: RuleFamily
    maximum: int
    face: int = 0
    size: int = 0
    groups: int = 1
    second: int = 0
    faces: FrozenSet[int] = frozenset()
    shape: Tuple[int, ...] = ()
    extra: int = 0
    points: int = 0
    threshold: int = 0


# ── Label normalization ─────────────────────────────────────────────────────

_MULTIPLIER = re.compile(r"(\d)\s*[x×]\s*(\d)")
_PARENTHETICAL = re.compile(r"\s*\(.*\)$")


def normalize_label(label):
    """Trim, lowercase and collapse whitespace; unify "2x3"/"2 × 3" as "2 x 3"."""
    key = " ".join(str(label).strip().lower().split())
    return _MULTIPLIER.sub(r"\1 x \2", key)


_SYNONYMS = {
    "ones": Category.ONES, "twos": Category.TWOS, "threes": Category.THREES,
    "fours": Category.FOURS, "fives": Category.FIVES, "sixes": Category.SIXES,
    "little straight": Category.SMALL_STRAIGHT,
    "small straight (1-5)": Category.SMALL_STRAIGHT,
    "large straight (2-6)": Category.LARGE_STRAIGHT,
}

_BY_KEY = {normalize_label(cat.value): cat for cat in Category}
_BY_KEY.update(_SYNONYMS)


def parse_category(label):
    """Resolve a human-readable label to a Category.

    Accepts the canonical label, the Extended board labels with their
    parenthetical description ("tuber (1-6 + 4x6)", "the poet (2+4 of the
    same)"), and a few synonyms. Returns None for anything else.
    """
    if isinstance(label, Category):
        return label
    if label is None:
        return None
    key = normalize_label(label)
    cat = _BY_KEY.get(key)
    if cat is None:
        cat = _BY_KEY.get(_PARENTHETICAL.sub("", key))
    return cat


# ── Rule tables ─────────────────────────────────────────────────────────────

_NUMBER_CATS = (Category.ONES, Category.TWOS, Category.THREES,
                Category.FOURS, Category.FIVES, Category.SIXES)

_SAME_CATS = {
    3: Category.THREE_SAME, 4: Category.FOUR_SAME, 5: Category.FIVE_SAME,
    6: Category.SIX_SAME, 7: Category.SEVEN_SAME, 8: Category.EIGHT_SAME,
    9: Category.NINE_SAME, 10: Category.TEN_SAME, 11: Category.ELEVEN_SAME,
}

_PAIR_CATS = (Category.ONE_PAIR, Category.TWO_PAIRS, Category.THREE_PAIRS,
              Category.FOUR_PAIRS, Category.FIVE_PAIRS, Category.SIX_PAIRS)

# (groups, size)
_MULTI_CATS = {
    Category.TWO_X_THREE_SAME: (2, 3),
    Category.TWO_X_FOUR_SAME: (2, 4),
    Category.TWO_X_FIVE_SAME: (2, 5),
    Category.TWO_X_SIX_SAME: (2, 6),
    Category.THREE_X_THREE_SAME: (3, 3),
    Category.THREE_X_FOUR_SAME: (3, 4),
}

# (first group size, second group size)
_TWO_GROUP_CATS = {
    Category.LITTLE_MOM: (2, 3),
    Category.THE_POET: (2, 4),
    Category.THE_MOM: (2, 5),
    Category.SKIPPER_HORROR: (2, 6),
    Category.THE_RADISSES: (3, 4),
    Category.THE_POOLS: (3, 5),
    Category.GOLDFINCH: (3, 6),
    Category.KARL_WITH_THE_CAP: (4, 5),
    Category.KLAUS_RAGS: (4, 6),
    Category.LIGHTNING_JENS: (5, 6),
}

# (sixes beyond the 1-6 run, fixed points)
_STRAIGHT_PLUS_SIXES_CATS = {
    Category.LITTLE_CLAUSS: (2, 100),
    Category.LARGE_CLAUSS: (3, 120),
    Category.TUBER: (4, 140),
    Category.ALL: (5, 160),
    Category.CAPTAIN_VOM: (6, 180),
}

_BONUS = {
    Variant.STANDARD_5: (63, 50),
    Variant.STANDARD_6: (84, 50),
    Variant.EXTENDED_12: (189, 200),
}

_FULL_HOUSE_SHAPES = {
    Variant.STANDARD_5: (2, 3),
    Variant.STANDARD_6: (1, 2, 3),
}

_SMALL_STRAIGHT_FACES = frozenset({1, 2, 3, 4, 5})
_LARGE_STRAIGHT_FACES = frozenset({2, 3, 4, 5, 6})
_ROYAL_FACES = frozenset(FACES)


def _build_rules(variant):
    """Build the Category -> Rule table for one variant."""
    n = variant.dice_count
    rules = {}

    for face, cat in zip(FACES, _NUMBER_CATS):
        rules[cat] = Rule(RuleFamily.NUMBER, maximum=n * face, face=face)
    rules[Category.TOTAL_OF_NUMBERS] = Rule(RuleFamily.TOTAL, maximum=n * sum(FACES))
    threshold, amount = _BONUS[variant]
    rules[Category.BONUS] = Rule(RuleFamily.BONUS, maximum=amount,
                                 points=amount, threshold=threshold)

    # "6 same" belongs to the 6 dice board only; 7..11 to Extended
    for size, cat in _SAME_CATS.items():
        if (size <= 5 or (size == 6 and variant is Variant.STANDARD_6)
                or (size >= 7 and variant.is_extended)):
            rules[cat] = Rule(RuleFamily.SAME_KIND, maximum=6 * size, size=size)

    rules[Category.SMALL_STRAIGHT] = Rule(RuleFamily.STRAIGHT, maximum=15,
                                          faces=_SMALL_STRAIGHT_FACES, points=15)
    rules[Category.LARGE_STRAIGHT] = Rule(RuleFamily.STRAIGHT, maximum=20,
                                          faces=_LARGE_STRAIGHT_FACES, points=20)
    rules[Category.CHANCE] = Rule(RuleFamily.CHANCE, maximum=n * 6)
    rules[Category.YATZY] = Rule(RuleFamily.YATZY, maximum=50, points=50)

    if variant.is_extended:
        # Best case takes one pair from each face, highest faces first
        for count, cat in enumerate(_PAIR_CATS, start=1):
            best = sum(face * 2 for face in FACES[::-1][:count])
            rules[cat] = Rule(RuleFamily.EXTENDED_PAIRS, maximum=best, size=count)
        for cat, (groups, size) in _MULTI_CATS.items():
            rules[cat] = Rule(RuleFamily.MULTI_SAME, maximum=6 * size * groups,
                              size=size, groups=groups)
        for cat, (extra, points) in _STRAIGHT_PLUS_SIXES_CATS.items():
            rules[cat] = Rule(RuleFamily.STRAIGHT_PLUS_SIXES, maximum=points,
                              faces=_ROYAL_FACES, extra=extra, points=points)
        return rules

    # Standard pairs report no ceiling of their own
    for count, cat in enumerate(_PAIR_CATS[:3], start=1):
        rules[cat] = Rule(RuleFamily.STANDARD_PAIRS, maximum=0, size=count)
    rules[Category.FULL_HOUSE] = Rule(RuleFamily.FULL_HOUSE, maximum=25,
                                      shape=_FULL_HOUSE_SHAPES[variant], points=25)
    for cat, (first, second) in _TWO_GROUP_CATS.items():
        rules[cat] = Rule(RuleFamily.TWO_GROUP, maximum=6 * (first + second),
                          size=first, second=second)
    if n >= 6:
        groups, size = _MULTI_CATS[Category.TWO_X_THREE_SAME]
        rules[Category.TWO_X_THREE_SAME] = Rule(RuleFamily.MULTI_SAME, maximum=6 * size * groups,
                                                size=size, groups=groups)
        rules[Category.ROYAL] = Rule(RuleFamily.STRAIGHT, maximum=21,
                                     faces=_ROYAL_FACES, points=21)
    return rules


RULES = {variant: _build_rules(variant) for variant in Variant}


def rule_for(category, dice_count):
    """Return the Rule for a category under a variant, or None if not legal there."""
    variant = Variant.from_dice_count(dice_count)
    cat = parse_category(category)
    if variant is None or cat is None:
        return None
    return RULES[variant].get(cat)


def legal_categories(dice_count):
    """Categories with a scoring rule under the variant, in enum order."""
    variant = Variant.from_dice_count(dice_count)
    if variant is None:
        return []
    return [cat for cat in Category if cat in RULES[variant]]


# ── Face counting ───────────────────────────────────────────────────────────

def face_counts(values):
    """Count occurrences of each face 1-6 in a roll.

    Args:
        values: Iterable of die values

    Returns:
        Counter with an entry for every face 1-6 (zero when absent)
    """
    counts = Counter({face: 0 for face in FACES})
    for value in values:
        if value in counts:
            counts[value] += 1
    return counts


def upper_total(values):
    """Sum of all number-category scores for a roll."""
    counts = face_counts(values)
    return sum(face * counts[face] for face in FACES)


def upper_bonus(total, dice_count):
    """Bonus awarded for an upper-section total under a variant (0 below threshold)."""
    variant = Variant.from_dice_count(dice_count)
    if variant is None:
        return 0
    threshold, amount = _BONUS[variant]
    return amount if total >= threshold else 0


# ── Family scorers ──────────────────────────────────────────────────────────

def _groups_of(counts, size):
    """face * size for every face with at least `size` dice, highest face first."""
    return [face * size for face in reversed(FACES) if counts[face] >= size]


def _score_number(counts, rule, variant):
    return rule.face * counts[rule.face]


def _score_total(counts, rule, variant):
    return sum(face * counts[face] for face in FACES)


def _score_bonus(counts, rule, variant):
    total = sum(face * counts[face] for face in FACES)
    return rule.points if total >= rule.threshold else 0


def _score_chance(counts, rule, variant):
    return sum(face * counts[face] for face in FACES)


def _score_standard_pairs(counts, rule, variant):
    # One pair slot per face, however many dice show it
    pairs = _groups_of(counts, 2)
    if len(pairs) >= rule.size:
        return sum(pairs[:rule.size])
    return 0


def _score_extended_pairs(counts, rule, variant):
    # Every disjoint pair counts, so four sixes give two pair units
    pairs = []
    for face in reversed(FACES):
        pairs.extend([face * 2] * (counts[face] // 2))
    if len(pairs) >= rule.size:
        return sum(pairs[:rule.size])
    return 0


def _score_same_kind(counts, rule, variant):
    for face in reversed(FACES):
        if counts[face] >= rule.size:
            return face * rule.size
    return 0


def _score_multi_same(counts, rule, variant):
    groups = _groups_of(counts, rule.size)
    if len(groups) >= rule.groups:
        return sum(groups[:rule.groups])
    return 0


def _score_straight(counts, rule, variant):
    if all(counts[face] >= 1 for face in rule.faces):
        return rule.points
    return 0


def _score_full_house(counts, rule, variant):
    shape = tuple(sorted(c for c in counts.values() if c > 0))
    return rule.points if shape == rule.shape else 0


def _score_two_group(counts, rule, variant):
    best = 0
    for first in FACES:
        if counts[first] < rule.size:
            continue
        for second in FACES:
            if second != first and counts[second] >= rule.second:
                best = max(best, first * rule.size + second * rule.second)
    return best


def _score_straight_plus_sixes(counts, rule, variant):
    if all(counts[face] >= 1 for face in rule.faces) and counts[6] >= 1 + rule.extra:
        return rule.points
    return 0


def _score_yatzy(counts, rule, variant):
    present = [face for face in FACES if counts[face] > 0]
    return rule.points if len(present) == 1 else 0


_SCORERS = {
    RuleFamily.NUMBER: _score_number,
    RuleFamily.TOTAL: _score_total,
    RuleFamily.BONUS: _score_bonus,
    RuleFamily.STANDARD_PAIRS: _score_standard_pairs,
    RuleFamily.EXTENDED_PAIRS: _score_extended_pairs,
    RuleFamily.SAME_KIND: _score_same_kind,
    RuleFamily.MULTI_SAME: _score_multi_same,
    RuleFamily.STRAIGHT: _score_straight,
    RuleFamily.FULL_HOUSE: _score_full_house,
    RuleFamily.TWO_GROUP: _score_two_group,
    RuleFamily.STRAIGHT_PLUS_SIXES: _score_straight_plus_sixes,
    RuleFamily.CHANCE: _score_chance,
    RuleFamily.YATZY: _score_yatzy,
}


# ── Public scoring API ──────────────────────────────────────────────────────

def score(values, category, dice_count):
    """
    Calculate the actual score of a roll for a category

    Args:
        values: Sequence of die values (1-6); order does not matter
        category: Category or any accepted label ("Little straight (1-5)")
        dice_count: 5, 6 or 12 (or a Variant)

    Returns:
        Integer score, 0 when the roll does not qualify or the category
        is unknown or not legal under the variant
    """
    rule = rule_for(category, dice_count)
    if rule is None:
        return 0
    return _SCORERS[rule.family](face_counts(values), rule, Variant.from_dice_count(dice_count))


def max_score(category, dice_count):
    """
    Theoretical best-case score of a category under a variant

    Used to turn a roll's score into a ratio. Standard pair categories
    report 0 (no independent ceiling); unknown or illegal categories
    also report 0.
    """
    rule = rule_for(category, dice_count)
    if rule is None:
        return 0
    return rule.maximum


def score_ratio(values, category, dice_count):
    """score / max_score, or 0.0 when the category has no ceiling."""
    maximum = max_score(category, dice_count)
    if maximum <= 0:
        return 0.0
    return score(values, category, dice_count) / maximum

"""
Zonk - Combination Catalog and Scorer

This module enumerates every scoring pattern present in a set of dice and
picks the cheapest one to bank. All methods are stateless class methods
that operate on immutable inputs.

Scoring Rules:
    - Single 1: 100 points, Single 5: 50 points
    - Pair: 100 points, whatever the face
    - Two Pair: 500, Three Pairs: 1,500
    - Three of X: X × 100, Four of X: X × 200
    - Full House: three-of-a-kind points + 50
    - Two Sets: sum of both three-of-a-kind scores (six dice only)
    - Runs of 3/4/5/6 consecutive faces: 250 / 500 / 1,000 / 1,500

A face may satisfy several rules at once (three 4s are also a pair of 4s).
Every such reading is reported as its own match; nothing is collapsed.
"""

import logging
from collections import Counter
from itertools import combinations, groupby
from typing import Sequence

from zonk.config.settings import Settings, get_settings
from zonk.engine.base import (
    BUST_MATCH,
    MAX_FACE,
    MIN_FACE,
    RULE_SPECS,
    BehaviorMode,
    CombinationMatch,
    DiceSet,
    Rule,
    StrategyCandidate,
)
from zonk.engine.validators import as_dice_set

logger = logging.getLogger(__name__)


class CombinationScorer:
    """
    Stateless catalog of scoring combinations.

    All methods are class methods operating on immutable data.
    """

    SINGLE_ONE_POINTS = 100
    FULL_HOUSE_BONUS = 50

    STRAIGHT_RULES: dict[int, Rule] = {
        6: Rule.MAX_STRAIGHT,
        5: Rule.STRAIGHT,
        4: Rule.MIDDLE_STRAIGHT,
        3: Rule.LOW_STRAIGHT,
    }

    SCORING_SINGLES = (1, 5)

    @classmethod
    def score_rule(cls, rule: Rule, *faces: int) -> int:
        """
        Points for a rule given the face(s) that form it.

        Args:
            rule: Rule to score
            faces: Face of an n-of-a-kind or single; triple face then pair
                face for a full house; both triple faces for two sets.
                Ignored by fixed-point rules.

        Returns:
            Points awarded
        """
        spec = RULE_SPECS[rule]

        if rule in (Rule.THREE_OF_KIND, Rule.FOUR_OF_KIND):
            return round(faces[0] * spec.base_points * spec.multiplier)

        if rule is Rule.SINGLE:
            base = cls.SINGLE_ONE_POINTS if faces[0] == 1 else spec.base_points
            return round(base * spec.multiplier)

        if rule is Rule.FULL_HOUSE:
            return round((faces[0] * spec.base_points + cls.FULL_HOUSE_BONUS) * spec.multiplier)

        if rule is Rule.TWO_SETS:
            return sum(round(face * spec.base_points * spec.multiplier) for face in faces[:2])

        # Pairs, two/three pairs and straights score a fixed amount
        return round(spec.base_points * spec.multiplier)

    @classmethod
    def find_all_combinations(
        cls,
        dice: Sequence[int] | DiceSet
    ) -> list[CombinationMatch]:
        """
        Enumerate every scoring combination in a roll.

        Matches are emitted in a fixed order (straights, sets, pairs,
        singles) so the same dice always produce the same list.

        Args:
            dice: Dice values to score (sequence or DiceSet)

        Returns:
            All matches; empty when the roll is a bust
        """
        values = as_dice_set(dice).values
        if not values:
            return []

        counts = Counter(values)
        matches: list[CombinationMatch] = []
        matches.extend(cls._check_straights(values, counts))
        matches.extend(cls._check_sets(values, counts))
        matches.extend(cls._check_pairs(values, counts))
        matches.extend(cls._check_singles(values, counts))
        return matches

    @classmethod
    def find_candidates(cls, dice: Sequence[int] | DiceSet) -> list[StrategyCandidate]:
        """All matches annotated with tier and strategic value."""
        return [StrategyCandidate.from_match(m) for m in cls.find_all_combinations(dice)]

    @classmethod
    def find_minimum_dice_combination(
        cls,
        dice: Sequence[int] | DiceSet,
        mode: BehaviorMode,
        config: Settings | None = None,
    ) -> CombinationMatch:
        """
        Pick the combination that banks points with the fewest dice.

        Returns:
            The chosen match, or BUST_MATCH when nothing scores
        """
        candidate = cls.select_minimum_dice(cls.find_candidates(dice), mode, config)
        if candidate is None:
            return BUST_MATCH
        return candidate.match

    @classmethod
    def select_minimum_dice(
        cls,
        candidates: Sequence[StrategyCandidate],
        mode: BehaviorMode,
        config: Settings | None = None,
    ) -> StrategyCandidate | None:
        """
        Minimum-dice algorithm over precomputed candidates.

        Candidates are grouped by dice used, smallest first. A group is
        skipped when none of its members reaches the mode's efficiency
        floor, unless it is the only group. The first usable group is
        ranked by mode. If every group is rejected, the most efficient
        candidate overall wins.
        """
        if not candidates:
            return None

        config = config or get_settings()
        floor = config.efficiency_floor_for(mode.is_aggressive)

        ordered = sorted(candidates, key=lambda c: c.dice_used)
        groups = [list(group) for _, group in groupby(ordered, key=lambda c: c.dice_used)]

        for group in groups:
            viable = [c for c in group if c.strategic_value >= floor]
            if viable:
                return cls.rank_within_group(viable, mode)
            if len(groups) == 1:
                return cls.rank_within_group(group, mode)
            logger.debug(
                "Rejected %d-dice group: best value %.1f below floor %.1f",
                group[0].dice_used,
                max(c.strategic_value for c in group),
                floor,
            )

        return max(ordered, key=lambda c: (c.strategic_value, c.points, -c.tier))

    @classmethod
    def rank_within_group(
        cls,
        candidates: Sequence[StrategyCandidate],
        mode: BehaviorMode,
    ) -> StrategyCandidate:
        """
        Aggressive: most points, then best efficiency.
        Passive: best efficiency, then most points.
        Tier and dice position break any remaining tie.
        """
        if mode.is_aggressive:
            return min(
                candidates,
                key=lambda c: (-c.points, -c.strategic_value, c.tier, c.match.indices),
            )
        return min(
            candidates,
            key=lambda c: (-c.strategic_value, -c.points, c.tier, c.match.indices),
        )

    @classmethod
    def has_any_combination(cls, dice: Sequence[int] | DiceSet) -> bool:
        """Fast bust check without building matches."""
        values = as_dice_set(dice).values
        counts = Counter(values)
        if any(counts[face] for face in cls.SCORING_SINGLES):
            return True
        if any(count >= 2 for count in counts.values()):
            return True
        return any(
            all(counts[face] for face in range(start, start + 3))
            for start in range(MIN_FACE, MAX_FACE - 1)
        )

    @classmethod
    def is_bust(cls, dice: Sequence[int] | DiceSet) -> bool:
        """
        Check if a roll is a bust (no scoring combination).

        Args:
            dice: Dice values to check

        Returns:
            True if nothing in the roll scores
        """
        return not cls.has_any_combination(dice)

    @classmethod
    def _check_straights(
        cls,
        values: tuple[int, ...],
        counts: Counter[int]
    ) -> list[CombinationMatch]:
        """
        Check for runs of consecutive faces.

        Every window of length 3-6 whose faces are all present is a match,
        longest runs first.
        """
        matches: list[CombinationMatch] = []

        for length in sorted(cls.STRAIGHT_RULES, reverse=True):
            rule = cls.STRAIGHT_RULES[length]
            for start in range(MIN_FACE, MAX_FACE - length + 2):
                faces = list(range(start, start + length))
                if not all(counts[face] for face in faces):
                    continue
                indices = cls._find_indices_for_values(values, faces)
                matches.append(cls._make_match(
                    rule,
                    cls.score_rule(rule),
                    values,
                    indices,
                    f"{RULE_SPECS[rule].label} ({'-'.join(map(str, faces))})",
                ))

        return matches

    @classmethod
    def _check_sets(
        cls,
        values: tuple[int, ...],
        counts: Counter[int]
    ) -> list[CombinationMatch]:
        """
        Check for three and four of a kind, full houses and two sets.

        A face showing four times yields both a four and a three of a kind.
        """
        matches: list[CombinationMatch] = []

        for face in range(MIN_FACE, MAX_FACE + 1):
            count = counts[face]
            if count >= 4:
                matches.append(cls._make_match(
                    Rule.FOUR_OF_KIND,
                    cls.score_rule(Rule.FOUR_OF_KIND, face),
                    values,
                    cls._find_indices_for_value(values, face, 4),
                    f"Four {face}s",
                ))
            if count >= 3:
                matches.append(cls._make_match(
                    Rule.THREE_OF_KIND,
                    cls.score_rule(Rule.THREE_OF_KIND, face),
                    values,
                    cls._find_indices_for_value(values, face, 3),
                    f"Three {face}s",
                ))

        # Two sets: exactly six dice, two faces, three each
        if len(values) == 6 and sorted(counts.values()) == [3, 3]:
            low, high = sorted(counts)
            indices = (
                cls._find_indices_for_value(values, low, 3)
                + cls._find_indices_for_value(values, high, 3)
            )
            matches.append(cls._make_match(
                Rule.TWO_SETS,
                cls.score_rule(Rule.TWO_SETS, low, high),
                values,
                indices,
                f"Two Sets ({low}s and {high}s)",
            ))

        # Full house: a triple plus a pair of another face
        for triple in range(MIN_FACE, MAX_FACE + 1):
            if counts[triple] < 3:
                continue
            for pair in range(MIN_FACE, MAX_FACE + 1):
                if pair == triple or counts[pair] < 2:
                    continue
                indices = (
                    cls._find_indices_for_value(values, triple, 3)
                    + cls._find_indices_for_value(values, pair, 2)
                )
                matches.append(cls._make_match(
                    Rule.FULL_HOUSE,
                    cls.score_rule(Rule.FULL_HOUSE, triple, pair),
                    values,
                    indices,
                    f"Full House ({triple}s over {pair}s)",
                ))

        return matches

    @classmethod
    def _check_pairs(
        cls,
        values: tuple[int, ...],
        counts: Counter[int]
    ) -> list[CombinationMatch]:
        """Check for three pairs, two pairs and single pairs."""
        matches: list[CombinationMatch] = []
        pair_faces = [face for face in range(MIN_FACE, MAX_FACE + 1) if counts[face] >= 2]

        for faces in combinations(pair_faces, 3):
            indices = sum((cls._find_indices_for_value(values, f, 2) for f in faces), ())
            matches.append(cls._make_match(
                Rule.THREE_PAIRS,
                cls.score_rule(Rule.THREE_PAIRS),
                values,
                indices,
                f"Three Pairs ({', '.join(f'{f}s' for f in faces)})",
            ))

        for first, second in combinations(pair_faces, 2):
            indices = (
                cls._find_indices_for_value(values, first, 2)
                + cls._find_indices_for_value(values, second, 2)
            )
            matches.append(cls._make_match(
                Rule.TWO_PAIR,
                cls.score_rule(Rule.TWO_PAIR),
                values,
                indices,
                f"Two Pair ({first}s and {second}s)",
            ))

        for face in pair_faces:
            matches.append(cls._make_match(
                Rule.PAIR,
                cls.score_rule(Rule.PAIR, face),
                values,
                cls._find_indices_for_value(values, face, 2),
                f"Pair of {face}s",
            ))

        return matches

    @classmethod
    def _check_singles(
        cls,
        values: tuple[int, ...],
        counts: Counter[int]
    ) -> list[CombinationMatch]:
        """
        Check for single 1s and 5s.

        Only 1s and 5s score alone. One match per face, on its first die.
        """
        matches: list[CombinationMatch] = []

        for face in cls.SCORING_SINGLES:
            if counts[face]:
                matches.append(cls._make_match(
                    Rule.SINGLE,
                    cls.score_rule(Rule.SINGLE, face),
                    values,
                    cls._find_indices_for_value(values, face, 1),
                    f"Single {face}",
                ))

        return matches

    @classmethod
    def _make_match(
        cls,
        rule: Rule,
        points: int,
        values: tuple[int, ...],
        indices: tuple[int, ...],
        description: str,
    ) -> CombinationMatch:
        ordered = tuple(sorted(indices))
        return CombinationMatch(
            rule=rule,
            points=points,
            indices=ordered,
            dice_values=tuple(values[i] for i in ordered),
            description=description,
        )

    @classmethod
    def _find_indices_for_values(
        cls,
        values: tuple[int, ...],
        target_values: list[int]
    ) -> tuple[int, ...]:
        """Find one index for each target value."""
        indices: list[int] = []
        targets_needed = list(target_values)

        for i, v in enumerate(values):
            if v in targets_needed:
                targets_needed.remove(v)
                indices.append(i)

        return tuple(indices)

    @classmethod
    def _find_indices_for_value(
        cls,
        values: tuple[int, ...],
        target: int,
        count: int
    ) -> tuple[int, ...]:
        """Find the first `count` indices holding the target value."""
        return tuple(i for i, v in enumerate(values) if v == target)[:count]

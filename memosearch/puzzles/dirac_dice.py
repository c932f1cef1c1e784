"""
Dirac dice: a two player board game, played first with a deterministic die, then
with a three-sided die that splits the universe on every roll.

Players move around a ring of 10 spaces, scoring the space they land on.
With the Dirac die every turn is three rolls, so each roll total (3..9) happens
in a fixed number of universes. Counting wins is a "sum" search with those
counts as edge multiplicities.
"""
from collections import Counter
from dataclasses import dataclass, field
from itertools import product

from frozendict import frozendict

from memosearch.search.dp_search import memoized_search_value
from memosearch.search.problem import TransitionProblem

# (mover position, mover score, other position, other score, player one moves)
GameState = tuple[int, int, int, int, bool]


def roll_total_universes(sides: int = 3, rolls: int = 3) -> frozendict[int, int]:
    """
    >>> pprint(dict(roll_total_universes()))
    {3: 1, 4: 3, 5: 6, 6: 7, 7: 6, 8: 3, 9: 1}
    """
    return frozendict(
        Counter(sum(faces) for faces in product(range(1, sides + 1), repeat=rolls))
    )


@dataclass(frozen=True)
class DiceRules:
    board_size: int = 10
    winning_score: int = 21
    roll_universes: frozendict[int, int] = field(default_factory=roll_total_universes)


def moved_position(position: int, distance: int, board_size: int) -> int:
    return (position - 1 + distance) % board_size + 1


def parse_starting_positions(text: str) -> tuple[int, int]:
    """
    >>> parse_starting_positions(
    ...     "Player 1 starting position: 4\\nPlayer 2 starting position: 8"
    ... )
    (4, 8)
    """
    positions = [int(line.rsplit(":", 1)[1]) for line in text.strip().splitlines()]
    if len(positions) != 2:
        raise ValueError(f"Expected two starting positions, got {len(positions)}.")
    return positions[0], positions[1]


def deterministic_game_result(
    player_one_start: int,
    player_two_start: int,
    winning_score: int = 1000,
    board_size: int = 10,
) -> int:
    """
    Losing score times number of rolls, with a die rolling 1, 2, ... 100, 1, ...

    >>> deterministic_game_result(4, 8)
    739785
    """
    positions = [player_one_start, player_two_start]
    scores = [0, 0]
    die_rolls = 0
    player = 0
    while True:
        distance = sum((die_rolls + roll) % 100 + 1 for roll in range(3))
        die_rolls += 3

        positions[player] = moved_position(positions[player], distance, board_size)
        scores[player] += positions[player]
        if scores[player] >= winning_score:
            return scores[1 - player] * die_rolls

        player = 1 - player


def dirac_transitions(
    state: GameState,
    rules: DiceRules,
) -> list[tuple[GameState, float]]:
    position, score, other_position, other_score, player_one_moves = state
    transitions: list[tuple[GameState, float]] = []
    for roll_total, universes in rules.roll_universes.items():
        next_position = moved_position(position, roll_total, rules.board_size)
        next_state = (
            other_position,
            other_score,
            next_position,
            score + next_position,
            not player_one_moves,
        )
        transitions.append((next_state, universes))
    return transitions


def universes_won(
    player_one_start: int,
    player_two_start: int,
    rules: DiceRules = DiceRules(),
) -> tuple[int, int]:
    """Universes won by player one and by player two."""

    def is_goal(state: GameState) -> bool:
        # The player who just moved is the "other" player.
        return state[3] >= rules.winning_score

    def player_won(player_one: bool):
        def goal_value(state: GameState) -> float:
            last_mover_was_player_one = not state[4]
            return 1 if last_mover_was_player_one == player_one else 0

        return goal_value

    initial_state: GameState = (player_one_start, 0, player_two_start, 0, True)
    # Each player's count is its own search with its own memo: goal values differ.
    player_one_wins, player_two_wins = (
        memoized_search_value(
            TransitionProblem(
                initial=initial_state,
                transition=dirac_transitions,
                context=rules,
                is_goal=is_goal,
                goal_value_func=player_won(player_one),
            ),
            combination="sum",
        )
        for player_one in (True, False)
    )
    return player_one_wins, player_two_wins

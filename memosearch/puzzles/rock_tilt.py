"""
Rock tilt: round rocks (O) roll across a platform until they hit a cube rock (#)
or the edge. A spin cycle tilts north, west, south, then east.

A billion spin cycles is only feasible because the platform starts repeating;
the cycle detector skips the repeated periods.
"""
from memosearch.search.cycles import state_after

Platform = tuple[str, ...]


def parse_platform(text: str) -> Platform:
    rows = tuple(line.strip() for line in text.strip().splitlines())
    if any(set(row) - set("O#.") for row in rows):
        raise ValueError("Platforms may only contain 'O', '#', and '.'.")
    return rows


def transposed(platform: Platform) -> Platform:
    return tuple("".join(column) for column in zip(*platform))


def _rolled_row(row: str, towards_start: bool) -> str:
    """
    >>> _rolled_row(".O.#..O", towards_start=True)
    'O..#O..'
    >>> _rolled_row(".O.#..O", towards_start=False)
    '..O#..O'
    """
    segments = []
    for segment in row.split("#"):
        rocks = "O" * segment.count("O")
        space = "." * (len(segment) - len(rocks))
        segments.append(rocks + space if towards_start else space + rocks)
    return "#".join(segments)


def tilted_west(platform: Platform) -> Platform:
    return tuple(_rolled_row(row, towards_start=True) for row in platform)


def tilted_east(platform: Platform) -> Platform:
    return tuple(_rolled_row(row, towards_start=False) for row in platform)


def tilted_north(platform: Platform) -> Platform:
    return transposed(tilted_west(transposed(platform)))


def tilted_south(platform: Platform) -> Platform:
    return transposed(tilted_east(transposed(platform)))


def spun(platform: Platform) -> Platform:
    return tilted_east(tilted_south(tilted_west(tilted_north(platform))))


def north_load(platform: Platform) -> int:
    """
    >>> north_load(("O.", ".O", "O#"))
    6
    """
    return sum(
        (len(platform) - row_index) * row.count("O")
        for row_index, row in enumerate(platform)
    )


def load_after_tilt(text: str) -> int:
    return north_load(tilted_north(parse_platform(text)))


def load_after_spins(text: str, spins: int = 1_000_000_000) -> int:
    return north_load(state_after(parse_platform(text), spun, spins))

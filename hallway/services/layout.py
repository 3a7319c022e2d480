from typing import Sequence, TypeVar

from hallway.schemas.hallway import canonical_orientation

T = TypeVar("T")

COLUMN_CAPACITY = {"landscape": 3, "portrait": 5}

# Hand-tuned column splits; index is the floor count.
LANDSCAPE_PLANS: dict[int, list[int]] = {
    1: [1],
    2: [2],
    3: [3],
    4: [2, 2],
    5: [2, 2, 1],
    6: [2, 2, 2],
    7: [3, 2, 2],
    8: [3, 3, 2],
    9: [3, 3, 3],
    10: [3, 3, 2, 2],
    11: [3, 3, 3, 2],
    12: [3, 3, 3, 3],
}

PORTRAIT_PLANS: dict[int, list[int]] = {
    1: [1],
    2: [2],
    3: [3],
    4: [4],
    5: [5],
    6: [3, 3],
    7: [4, 3],
    8: [4, 4],
    9: [5, 4],
    10: [5, 5],
    11: [4, 4, 3],
    12: [4, 4, 4],
    13: [5, 5, 3],
    14: [5, 5, 4],
    15: [5, 5, 5],
}


def plan_columns(count: int, orientation: str) -> list[int]:
    """
    Column sizes for `count` floors, left column first.

    Counts inside the tables return the tabulated split. Larger counts fill
    columns at the orientation's capacity and put the remainder in one last
    column, which is empty when the count divides evenly.
    """
    if count <= 0:
        return []
    orientation = canonical_orientation(orientation)
    table = PORTRAIT_PLANS if orientation == "portrait" else LANDSCAPE_PLANS
    if count in table:
        return list(table[count])
    capacity = COLUMN_CAPACITY[orientation]
    full = count // capacity
    return [capacity] * full + [count - capacity * full]


def assign_columns(items_ascending: Sequence[T], sizes: Sequence[int]) -> list[list[T]]:
    """Consume items in order per column; each column is flipped so its highest item is on top."""
    columns: list[list[T]] = []
    cursor = 0
    for size in sizes:
        chunk = list(items_ascending[cursor:cursor + size])
        chunk.reverse()
        columns.append(chunk)
        cursor += size
    return columns


def even_split(count: int, columns: int) -> list[int]:
    """Multi-column screen split: equal shares, the first columns take one extra each."""
    if count <= 0 or columns <= 0:
        return []
    base, extra = divmod(count, columns)
    return [base + (1 if index < extra else 0) for index in range(columns)]


def split_even(items_descending: Sequence[T], columns: int) -> list[list[T]]:
    output: list[list[T]] = []
    cursor = 0
    for size in even_split(len(items_descending), columns):
        output.append(list(items_descending[cursor:cursor + size]))
        cursor += size
    return output

"""
utils/reporter.py
-----------------
Prints query results to stdout: a label line, one line per row,
then a blank separator line.
"""

from typing import Iterable, TypeVar

T = TypeVar("T")


def log_results(label: str, rows: Iterable[T]) -> list[T]:
    """
    Print a labelled result set and hand the rows back to the caller.

    Args:
        label: Heading printed above the rows.
        rows: Any iterable of printable rows.

    Returns:
        The rows as a list.
    """
    result = list(rows)
    print(label)
    for row in result:
        print(row)
    print()
    return result


def log_message(*lines: str) -> None:
    """Print free-form lines followed by the blank separator."""
    for line in lines:
        print(line)
    print()

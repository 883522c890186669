"""Derived classifications (patterns) of the numbers drawn in a column."""

from typing import List, Sequence

from models.draws import GameConfig

PARITY_PATTERNS = ['even', 'odd']
MAGNITUDE_PATTERNS = ['low', 'high']
BAND_PATTERNS = ['low-even', 'low-odd', 'high-even', 'high-odd']
PRIME_PATTERNS = ['prime', 'non-prime']
NEIGHBOUR_PATTERNS = ['consecutive', 'non-consecutive']
LAST_DIGIT_PATTERNS = [f'last-digit-{digit}' for digit in range(10)]


def is_prime(number: int) -> bool:
    """Primality check for small non-negative integers."""
    if number <= 1:
        return False
    if number <= 3:
        return True
    if number % 2 == 0 or number % 3 == 0:
        return False
    i = 5
    while i * i <= number:
        if number % i == 0 or number % (i + 2) == 0:
            return False
        i += 6
    return True


def sum_of_digits(number: int) -> int:
    return sum(int(digit) for digit in str(abs(number)))


def pattern_labels(game: GameConfig, column: int) -> List[str]:
    """Every pattern label tracked for a column, in a stable order."""
    digit_sums = sorted({sum_of_digits(n) for n in game.number_range(column)})
    return (
        PARITY_PATTERNS
        + MAGNITUDE_PATTERNS
        + BAND_PATTERNS
        + PRIME_PATTERNS
        + NEIGHBOUR_PATTERNS
        + LAST_DIGIT_PATTERNS
        + [f'sum-digit-{total}' for total in digit_sums]
    )


def match_patterns(number: int, high_threshold: int, other_numbers: Sequence[int] = ()) -> List[str]:
    """Labels matched by ``number``.

    ``other_numbers`` are the remaining numbers of the same draw and only feed
    the consecutive/non-consecutive pair.
    """
    parity = 'even' if number % 2 == 0 else 'odd'
    magnitude = 'high' if number > high_threshold else 'low'

    labels = [parity, magnitude, f'{magnitude}-{parity}']
    labels.append('prime' if is_prime(number) else 'non-prime')
    has_neighbour = any(abs(other - number) == 1 for other in other_numbers)
    labels.append('consecutive' if has_neighbour else 'non-consecutive')
    labels.append(f'last-digit-{abs(number) % 10}')
    labels.append(f'sum-digit-{sum_of_digits(number)}')
    return labels

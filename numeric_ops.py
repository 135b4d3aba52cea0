"""Matrix, GCD and radix primitives used to compute expected results."""

import math

from models import Matrix

DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _shape(m: Matrix) -> tuple[int, int]:
    return len(m), len(m[0]) if m else 0


def matrix_add(a: Matrix, b: Matrix) -> Matrix:
    """Element-wise sum of two matrices of identical dimensions."""
    if _shape(a) != _shape(b):
        raise ValueError(
            f"Cannot add a {_shape(a)[0]}x{_shape(a)[1]} matrix "
            f"to a {_shape(b)[0]}x{_shape(b)[1]} matrix"
        )
    return [[val + b[i][j] for j, val in enumerate(row)] for i, row in enumerate(a)]


def matrix_multiply(a: Matrix, b: Matrix) -> Matrix:
    """
    Standard matrix product.

    Requires cols(a) == rows(b); the result is rows(a) x cols(b).
    """
    rows_a, cols_a = _shape(a)
    rows_b, cols_b = _shape(b)
    if cols_a != rows_b:
        raise ValueError(
            f"Cannot multiply {rows_a}x{cols_a} by {rows_b}x{cols_b}: "
            "inner dimensions differ"
        )

    result: Matrix = []
    for i in range(rows_a):
        row = []
        for j in range(cols_b):
            total = 0
            for k in range(cols_a):
                total += a[i][k] * b[k][j]
            row.append(total)
        result.append(row)
    return result


def determinant_2x2(m: Matrix) -> int:
    return m[0][0] * m[1][1] - m[0][1] * m[1][0]


def determinant_3x3(m: Matrix) -> int:
    """Cofactor expansion along the first row."""
    return (
        m[0][0] * determinant_2x2([[m[1][1], m[1][2]], [m[2][1], m[2][2]]])
        - m[0][1] * determinant_2x2([[m[1][0], m[1][2]], [m[2][0], m[2][2]]])
        + m[0][2] * determinant_2x2([[m[1][0], m[1][1]], [m[2][0], m[2][1]]])
    )


def determinant(m: Matrix) -> int:
    """Determinant of a 2x2 or 3x3 square matrix."""
    rows, cols = _shape(m)
    if rows != cols:
        raise ValueError(f"Determinant needs a square matrix, got {rows}x{cols}")
    if rows == 2:
        return determinant_2x2(m)
    if rows == 3:
        return determinant_3x3(m)
    raise ValueError(f"Determinant is only supported for 2x2 and 3x3, got {rows}x{rows}")


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor by the iterative Euclidean algorithm.

    Works on absolute values, so the result is never negative.
    gcd(a, 0) == |a| and gcd(0, 0) == 0.
    """
    a, b = abs(a), abs(b)
    while b != 0:
        a, b = b, a % b
    return a


def gcd_steps(a: int, b: int) -> list[str]:
    """Trace of the Euclidean divisions as "a = b × q + r" lines."""
    a, b = abs(a), abs(b)
    steps = []
    while b != 0:
        q, r = divmod(a, b)
        steps.append(f"{a} = {b} × {q} + {r}")
        a, b = b, r
    steps.append(f"PGCD = {a}")
    return steps


def _check_base(base: int) -> None:
    if not 2 <= base <= 16:
        raise ValueError(f"Base must be between 2 and 16, got {base}")


def convert_base(n: int, target_base: int) -> str:
    """
    Write an integer in the target radix (2-16), uppercase digits.

    Negative numbers keep a leading minus sign.
    """
    _check_base(target_base)
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    n = abs(n)
    digits = []
    while n > 0:
        n, remainder = divmod(n, target_base)
        digits.append(DIGITS[remainder])
    return sign + "".join(reversed(digits))


def parse_base(text: str, base: int) -> int:
    """Inverse of convert_base. Raises ValueError on a digit outside the base."""
    _check_base(base)
    return int(text.strip(), base)


def conversion_steps(n: float, target_base: int) -> list[str]:
    """
    Successive-division trace for converting n to target_base.

    Each line reads "dividend ÷ base = quotient reste digit"; the final line
    gives the assembled result. Negative or NaN input yields a single
    "Valeur invalide" entry and zero yields "0 = 0". The list is fully
    materialized so callers can iterate it as often as they like.
    """
    _check_base(target_base)
    if isinstance(n, float) and math.isnan(n):
        return ["Valeur invalide"]
    if n < 0:
        return ["Valeur invalide"]
    n = int(n)
    if n == 0:
        return ["0 = 0"]

    steps = []
    digits = []
    current = n
    while current > 0:
        quotient, remainder = divmod(current, target_base)
        digit = DIGITS[remainder]
        digits.insert(0, digit)
        steps.append(f"{current} ÷ {target_base} = {quotient} reste {digit}")
        current = quotient

    steps.append(f"Résultat : {''.join(digits)}")
    return steps

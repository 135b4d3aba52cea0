"""Configuration for exercise generation.

These models hold the per-difficulty policies (matrix sizes, value
ranges, moduli) and the fixed expression tables used by the boolean
generators. The defaults reproduce the course's standard exercises.
"""

from pydantic import BaseModel, Field


class MatrixConfig(BaseModel):
    """Matrix sizes are indexed by difficulty - 1."""

    multiplication_sizes: tuple[int, int, int] = (2, 2, 3)
    multiplication_max: int = Field(default=5, ge=1)
    addition_sizes: tuple[int, int, int] = (2, 3, 3)
    addition_max: int = Field(default=10, ge=1)
    determinant_sizes: tuple[int, int, int] = (2, 2, 3)
    determinant_max: int = Field(default=10, ge=1)
    # entry range used once the determinant grows to 3x3
    determinant_3x3_max: int = Field(default=5, ge=1)


class ArithmeticConfig(BaseModel):
    congruence_moduli: tuple[int, int, int] = (5, 7, 11)
    congruence_min: int = 10
    congruence_span: int = Field(default=100, ge=1)
    pgcd_max: tuple[int, int, int] = (50, 100, 200)
    pgcd_min: int = 10
    base_conversion_max: int = Field(default=255, ge=1)
    base_pairs: list[tuple[int, int]] = Field(
        default_factory=lambda: [(10, 2), (10, 16), (2, 10), (16, 10)]
    )


class BooleanConfig(BaseModel):
    """Fixed expression tables for the boolean exercises.

    Truth-table columns are stored literally, in MSB-first row order.
    """

    truth_tables: dict[str, str] = Field(
        default_factory=lambda: {
            "A AND B": "0,0,0,1",
            "A OR B": "0,1,1,1",
            "NOT A": "1,0",
            "A XOR B": "0,1,1,0",
        }
    )
    simplifications: list[tuple[str, str]] = Field(
        default_factory=lambda: [
            ("A + A.B", "A"),
            ("A.(A + B)", "A"),
            ("A + NOT(A)", "1"),
            ("A.NOT(A)", "0"),
        ]
    )


class ExerciseGeneratorConfig(BaseModel):
    """Master configuration for all exercise types."""

    matrix: MatrixConfig = Field(default_factory=MatrixConfig)
    arithmetic: ArithmeticConfig = Field(default_factory=ArithmeticConfig)
    boolean: BooleanConfig = Field(default_factory=BooleanConfig)
    # Difficulty climbs one tier every this many exercises in a batch.
    ramp_step: int = Field(default=3, ge=1)
    max_difficulty: int = Field(default=3, ge=1, le=3)

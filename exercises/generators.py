"""Exercise generators that draw random operands and compute expected results.

Each generator owns one exercise type. It picks operands from the
configured ranges for the requested difficulty, computes the ground-truth
answer with numeric_ops, and returns a frozen Exercise. All randomness goes
through an injectable RandomSource so tests can script exact operands.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Sequence

from models import (
    BaseConversionPayload,
    CongruencePayload,
    DeterminantPayload,
    Exercise,
    ExerciseType,
    Matrix,
    MatrixOperationPayload,
    PgcdPayload,
    PlaceholderPayload,
    SimplifyPayload,
    TruthTablePayload,
)
from numeric_ops import (
    convert_base,
    determinant_2x2,
    determinant_3x3,
    gcd,
    matrix_add,
    matrix_multiply,
)

from .catalog import PLACEHOLDER_INFO, SUPPORTED_TYPES, get_type_info, xp_for_difficulty
from .config import ExerciseGeneratorConfig
from .random_source import RandomSource, default_random_source, pick

logger = logging.getLogger(__name__)


def make_exercise_id(exercise_type: ExerciseType) -> str:
    """Generation timestamp plus a short random suffix."""
    return f"{exercise_type.value}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def random_matrix(rng: RandomSource, rows: int, cols: int, max_value: int) -> Matrix:
    """Integer entries in [-max_value // 2, max_value - 1 - max_value // 2]."""
    return [
        [rng.randint(0, max_value - 1) - max_value // 2 for _ in range(cols)]
        for _ in range(rows)
    ]


class ExerciseGenerator(ABC):
    """Abstract base class for per-type exercise generators."""

    exercise_type: ExerciseType

    def __init__(self, config: ExerciseGeneratorConfig, rng: RandomSource):
        self.config = config
        self.rng = rng

    @abstractmethod
    def build_payload(self, difficulty: int) -> tuple[Any, dict[str, Any]]:
        """Draw operands and compute the expected result.

        Returns:
            Tuple of (payload, title format arguments).
        """
        ...

    def generate(self, difficulty: int) -> Exercise:
        payload, title_args = self.build_payload(difficulty)
        info = get_type_info(self.exercise_type)
        return Exercise(
            id=make_exercise_id(self.exercise_type),
            type=self.exercise_type,
            subject=info.subject,
            chapter=info.chapter,
            title=info.title.format(**title_args),
            difficulty=difficulty,
            xp_reward=xp_for_difficulty(difficulty),
            data=payload,
        )


class MatrixMultiplicationGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.MATRIX_MULTIPLICATION

    def build_payload(self, difficulty: int):
        cfg = self.config.matrix
        size = cfg.multiplication_sizes[difficulty - 1]
        matrix_a = random_matrix(self.rng, size, size, cfg.multiplication_max)
        matrix_b = random_matrix(self.rng, size, size, cfg.multiplication_max)
        payload = MatrixOperationPayload(
            matrix_a=matrix_a,
            matrix_b=matrix_b,
            expected_result=matrix_multiply(matrix_a, matrix_b),
        )
        return payload, {}


class MatrixAdditionGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.MATRIX_ADDITION

    def build_payload(self, difficulty: int):
        cfg = self.config.matrix
        size = cfg.addition_sizes[difficulty - 1]
        matrix_a = random_matrix(self.rng, size, size, cfg.addition_max)
        matrix_b = random_matrix(self.rng, size, size, cfg.addition_max)
        payload = MatrixOperationPayload(
            matrix_a=matrix_a,
            matrix_b=matrix_b,
            expected_result=matrix_add(matrix_a, matrix_b),
        )
        return payload, {}


class MatrixDeterminantGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.MATRIX_DETERMINANT

    def build_payload(self, difficulty: int):
        cfg = self.config.matrix
        size = cfg.determinant_sizes[difficulty - 1]
        if size == 3:
            matrix_a = random_matrix(self.rng, 3, 3, cfg.determinant_3x3_max)
            expected = determinant_3x3(matrix_a)
        else:
            matrix_a = random_matrix(self.rng, 2, 2, cfg.determinant_max)
            expected = determinant_2x2(matrix_a)
        return DeterminantPayload(matrix_a=matrix_a, expected_result=expected), {}


class CongruenceGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.ARITHMETIC_CONGRUENCE

    def build_payload(self, difficulty: int):
        cfg = self.config.arithmetic
        modulo = cfg.congruence_moduli[difficulty - 1]
        n = self.rng.randint(cfg.congruence_min, cfg.congruence_min + cfg.congruence_span - 1)
        payload = CongruencePayload(numbers=[n], modulo=modulo, expected_result=n % modulo)
        return payload, {"n": n, "modulo": modulo}


class PgcdGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.ARITHMETIC_PGCD

    def build_payload(self, difficulty: int):
        cfg = self.config.arithmetic
        upper = cfg.pgcd_min + cfg.pgcd_max[difficulty - 1] - 1
        a = self.rng.randint(cfg.pgcd_min, upper)
        b = self.rng.randint(cfg.pgcd_min, upper)
        return PgcdPayload(numbers=[a, b], expected_result=gcd(a, b)), {"a": a, "b": b}


class BaseConversionGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.ARITHMETIC_BASE_CONVERSION

    def build_payload(self, difficulty: int):
        cfg = self.config.arithmetic
        n = self.rng.randint(1, cfg.base_conversion_max)
        base, target_base = pick(self.rng, cfg.base_pairs)
        payload = BaseConversionPayload(
            numbers=[n],
            base=base,
            target_base=target_base,
            display_value=convert_base(n, base),
            expected_result=convert_base(n, target_base),
        )
        return payload, {"base": base, "target_base": target_base}


class TruthTableGenerator(ExerciseGenerator):
    """Picks one of the fixed two-variable expressions.

    The expected column comes from the literal table in BooleanConfig rather
    than from boolean_eval; tests check the two agree.
    """

    exercise_type = ExerciseType.BOOLEAN_TRUTH_TABLE

    def build_payload(self, difficulty: int):
        tables = self.config.boolean.truth_tables
        expression = pick(self.rng, list(tables))
        variables = ["A", "B"] if "B" in expression else ["A"]
        payload = TruthTablePayload(
            expression=expression,
            variables=variables,
            expected_result=tables[expression],
        )
        return payload, {}


class SimplifyGenerator(ExerciseGenerator):
    exercise_type = ExerciseType.BOOLEAN_SIMPLIFY

    def build_payload(self, difficulty: int):
        expression, simplified = pick(self.rng, self.config.boolean.simplifications)
        return SimplifyPayload(expression=expression, expected_result=simplified), {}


# Registry of generator classes
EXERCISE_GENERATORS: dict[ExerciseType, type[ExerciseGenerator]] = {
    ExerciseType.MATRIX_MULTIPLICATION: MatrixMultiplicationGenerator,
    ExerciseType.MATRIX_ADDITION: MatrixAdditionGenerator,
    ExerciseType.MATRIX_DETERMINANT: MatrixDeterminantGenerator,
    ExerciseType.ARITHMETIC_CONGRUENCE: CongruenceGenerator,
    ExerciseType.ARITHMETIC_PGCD: PgcdGenerator,
    ExerciseType.ARITHMETIC_BASE_CONVERSION: BaseConversionGenerator,
    ExerciseType.BOOLEAN_TRUTH_TABLE: TruthTableGenerator,
    ExerciseType.BOOLEAN_SIMPLIFY: SimplifyGenerator,
}


def placeholder_exercise(exercise_type: ExerciseType, difficulty: int) -> Exercise:
    """Degenerate exercise for types without a generator (answer "0")."""
    return Exercise(
        id=make_exercise_id(exercise_type),
        type=exercise_type,
        subject=PLACEHOLDER_INFO.subject,
        chapter=PLACEHOLDER_INFO.chapter,
        title=PLACEHOLDER_INFO.title,
        difficulty=difficulty,
        xp_reward=xp_for_difficulty(difficulty),
        data=PlaceholderPayload(),
    )


def generate_exercise(
    exercise_type: ExerciseType | str,
    difficulty: int = 1,
    rng: RandomSource | None = None,
    config: ExerciseGeneratorConfig | None = None,
) -> Exercise:
    """Generate one exercise of the given type and difficulty.

    Args:
        exercise_type: Exercise kind (enum member or its string value).
        difficulty: Tier 1-3.
        rng: Random source; a fresh random.Random when omitted.
        config: Generation policies; defaults when omitted.

    Returns:
        A fully populated exercise. Types without a generator yield a
        placeholder exercise instead of failing.
    """
    exercise_type = ExerciseType(exercise_type)
    if difficulty not in (1, 2, 3):
        raise ValueError(f"Difficulty must be 1, 2 or 3, got {difficulty}")

    generator_class = EXERCISE_GENERATORS.get(exercise_type)
    if generator_class is None:
        logger.debug("No generator for %s, using placeholder", exercise_type.value)
        return placeholder_exercise(exercise_type, difficulty)

    generator = generator_class(
        config or ExerciseGeneratorConfig(), rng or default_random_source()
    )
    return generator.generate(difficulty)


def ramp_difficulty(index: int, config: ExerciseGeneratorConfig | None = None) -> int:
    """Difficulty for the exercise at this position: min(index // 3 + 1, 3)."""
    config = config or ExerciseGeneratorConfig()
    return min(index // config.ramp_step + 1, config.max_difficulty)


def generate_exercises(
    count: int,
    types: Sequence[ExerciseType | str] | None = None,
    rng: RandomSource | None = None,
    config: ExerciseGeneratorConfig | None = None,
) -> list[Exercise]:
    """Generate a batch of exercises with a rising difficulty ramp.

    Types are chosen uniformly from ``types`` (all supported types when
    omitted); difficulty climbs one tier every three exercises, capped at 3.
    """
    rng = rng or default_random_source()
    config = config or ExerciseGeneratorConfig()
    available = [ExerciseType(t) for t in types] if types else list(SUPPORTED_TYPES)

    exercises = []
    for i in range(count):
        exercise_type = pick(rng, available)
        exercises.append(
            generate_exercise(exercise_type, ramp_difficulty(i, config), rng, config)
        )
    return exercises

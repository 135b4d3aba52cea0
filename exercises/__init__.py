"""Exercise generation and grading for the BTS SIO math trainer.

Architecture:
- The catalog lists every exercise kind with its subject and chapter
- Generators draw operands from an injectable random source and compute
  the expected result up front
- The evaluator grades raw text answers against that expected result
- Handlers adapt exercises to the terminal front-end

Configuration:
- ExerciseGeneratorConfig: value ranges and sizes per difficulty tier
"""

from exercises.catalog import (
    CHAPTERS,
    EXERCISE_TYPES,
    SUPPORTED_TYPES,
    Chapter,
    ExerciseTypeInfo,
    chapter_for_type,
    get_chapter,
    get_type_info,
    types_for_subject,
    xp_for_difficulty,
)
from exercises.config import (
    ArithmeticConfig,
    BooleanConfig,
    ExerciseGeneratorConfig,
    MatrixConfig,
)
from exercises.evaluator import check_answer, normalize_answer
from exercises.generators import (
    EXERCISE_GENERATORS,
    ExerciseGenerator,
    generate_exercise,
    generate_exercises,
    placeholder_exercise,
    ramp_difficulty,
)
from exercises.handlers import ExerciseHandler, get_exercise_handler
from exercises.random_source import RandomSource, default_random_source, pick

__all__ = [
    # Catalog
    "CHAPTERS",
    "EXERCISE_TYPES",
    "SUPPORTED_TYPES",
    "Chapter",
    "ExerciseTypeInfo",
    "chapter_for_type",
    "get_chapter",
    "get_type_info",
    "types_for_subject",
    "xp_for_difficulty",
    # Config
    "ArithmeticConfig",
    "BooleanConfig",
    "ExerciseGeneratorConfig",
    "MatrixConfig",
    # Generation
    "EXERCISE_GENERATORS",
    "ExerciseGenerator",
    "generate_exercise",
    "generate_exercises",
    "placeholder_exercise",
    "ramp_difficulty",
    # Grading
    "check_answer",
    "normalize_answer",
    # Handlers
    "ExerciseHandler",
    "get_exercise_handler",
    # Randomness
    "RandomSource",
    "default_random_source",
    "pick",
]

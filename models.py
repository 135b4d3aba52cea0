from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Matrix = list[list[int]]
# Payload matrices are nested tuples so a generated exercise cannot be edited in place.
FrozenMatrix = tuple[tuple[int, ...], ...]


class ExerciseType(str, Enum):
    MATRIX_MULTIPLICATION = "matrix_multiplication"
    MATRIX_ADDITION = "matrix_addition"
    MATRIX_DETERMINANT = "matrix_determinant"
    MATRIX_INVERSE = "matrix_inverse"
    GRAPH_DIJKSTRA = "graph_dijkstra"
    GRAPH_COLORING = "graph_coloring"
    GRAPH_PATH = "graph_path"
    GRAPH_MPM = "graph_mpm"
    GRAPH_PERT = "graph_pert"
    BOOLEAN_TRUTH_TABLE = "boolean_truth_table"
    BOOLEAN_SIMPLIFY = "boolean_simplify"
    BOOLEAN_EXPRESSION = "boolean_expression"
    ARITHMETIC_CONGRUENCE = "arithmetic_congruence"
    ARITHMETIC_PGCD = "arithmetic_pgcd"
    ARITHMETIC_BASE_CONVERSION = "arithmetic_base_conversion"
    SET_OPERATIONS = "set_operations"
    SET_RELATIONS = "set_relations"
    ALGORITHM_SORT = "algorithm_sort"
    ALGORITHM_COMPLEXITY = "algorithm_complexity"
    ALGORITHM_TRACE = "algorithm_trace"


class Subject(str, Enum):
    MATRICES = "matrices"
    GRAPHES = "graphes"
    LOGIQUE = "logique"
    ARITHMETIQUE = "arithmetique"
    ENSEMBLES = "ensembles"
    ALGORITHMIQUE = "algorithmique"


def _validate_matrix(value: FrozenMatrix | None) -> FrozenMatrix | None:
    """Reject ragged or empty matrices."""
    if value is None:
        return value
    if not value or not value[0]:
        raise ValueError("matrix must be at least 1x1")
    width = len(value[0])
    if any(len(row) != width for row in value):
        raise ValueError("matrix rows must all have the same length")
    return value


# ============================================================================
# Exercise payloads (tagged by ``kind``)
# ============================================================================


class MatrixOperationPayload(BaseModel):
    """Addition or multiplication of two matrices."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["matrix_operation"] = "matrix_operation"
    matrix_a: FrozenMatrix
    matrix_b: FrozenMatrix
    expected_result: FrozenMatrix

    @field_validator("matrix_a", "matrix_b", "expected_result")
    @classmethod
    def check_rectangular(cls, value: FrozenMatrix) -> FrozenMatrix:
        return _validate_matrix(value)


class DeterminantPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["determinant"] = "determinant"
    matrix_a: FrozenMatrix
    expected_result: int

    @field_validator("matrix_a")
    @classmethod
    def check_rectangular(cls, value: FrozenMatrix) -> FrozenMatrix:
        return _validate_matrix(value)


class CongruencePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["congruence"] = "congruence"
    numbers: tuple[int, ...] = Field(min_length=1, max_length=1)
    modulo: int = Field(gt=0)
    expected_result: int


class PgcdPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pgcd"] = "pgcd"
    numbers: tuple[int, ...] = Field(min_length=2, max_length=2)
    expected_result: int = Field(ge=0)


class BaseConversionPayload(BaseModel):
    """Operand is stored in decimal; ``display_value`` is it written in ``base``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["base_conversion"] = "base_conversion"
    numbers: tuple[int, ...] = Field(min_length=1, max_length=1)
    base: int = Field(ge=2, le=16)
    target_base: int = Field(ge=2, le=16)
    display_value: str
    expected_result: str


class TruthTablePayload(BaseModel):
    """``expected_result`` is the 0/1 output column, MSB-first row order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["truth_table"] = "truth_table"
    expression: str
    variables: tuple[str, ...]
    expected_result: str


class SimplifyPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["simplify"] = "simplify"
    expression: str
    expected_result: str


class PlaceholderPayload(BaseModel):
    """Degenerate payload for exercise types without a generator."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["placeholder"] = "placeholder"
    expected_result: str = "0"


ExercisePayload = Annotated[
    Union[
        MatrixOperationPayload,
        DeterminantPayload,
        CongruencePayload,
        PgcdPayload,
        BaseConversionPayload,
        TruthTablePayload,
        SimplifyPayload,
        PlaceholderPayload,
    ],
    Field(discriminator="kind"),
]

PAYLOAD_KIND_BY_TYPE: dict[ExerciseType, str] = {
    ExerciseType.MATRIX_MULTIPLICATION: "matrix_operation",
    ExerciseType.MATRIX_ADDITION: "matrix_operation",
    ExerciseType.MATRIX_DETERMINANT: "determinant",
    ExerciseType.ARITHMETIC_CONGRUENCE: "congruence",
    ExerciseType.ARITHMETIC_PGCD: "pgcd",
    ExerciseType.ARITHMETIC_BASE_CONVERSION: "base_conversion",
    ExerciseType.BOOLEAN_TRUTH_TABLE: "truth_table",
    ExerciseType.BOOLEAN_SIMPLIFY: "simplify",
}


class Exercise(BaseModel):
    """A generated exercise. The expected result is fixed at creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ExerciseType
    subject: Subject
    chapter: str
    title: str
    difficulty: int = Field(ge=1, le=3)
    xp_reward: int
    data: ExercisePayload

    @model_validator(mode="after")
    def check_payload_kind(self) -> "Exercise":
        expected_kind = PAYLOAD_KIND_BY_TYPE.get(self.type, "placeholder")
        if self.data.kind != expected_kind:
            raise ValueError(
                f"{self.type.value} exercises need a {expected_kind} payload, "
                f"got {self.data.kind}"
            )
        return self

    @property
    def expected_result(self) -> int | str | FrozenMatrix:
        return self.data.expected_result


class AnswerResult(BaseModel):
    correct: bool
    correct_answer: str


# ============================================================================
# Users and game sessions
# ============================================================================


class User(BaseModel):
    id: int
    username: str
    xp: int = 0
    level: int = 1
    streak: int = 0
    last_activity: datetime | None = None
    created_at: datetime | None = None


class SessionStatus(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class SessionState(BaseModel):
    """Counters for one game session."""

    score: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    combo: int = Field(default=0, ge=0)
    max_combo: int = Field(default=0, ge=0)
    current_index: int = Field(default=0, ge=0)
    time_remaining: int | None = None
    xp_earned: int | None = None


class SessionSummary(BaseModel):
    """What a finished session reports to the result sink."""

    user_id: int
    mode: str
    score: int
    total_questions: int
    correct_answers: int
    errors: int
    max_combo: int
    xp_earned: int
    duration_seconds: int


class HighScore(BaseModel):
    mode: str
    score: int
    achieved_at: datetime | None = None


class UserStats(BaseModel):
    """Aggregates used to decide achievement unlocks."""

    total_xp: int = 0
    level: int = 1
    streak: int = 0
    max_streak: int = 0
    total_exercises: int = 0
    perfect_scores: int = 0
    total_games: int = 0
    total_play_time: int = 0  # minutes

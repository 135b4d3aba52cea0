"""Exercise handlers for presentation.

These handlers turn an Exercise into prompt text, matrices and a format
hint for the terminal UI. They do NOT generate or grade exercises - that's
done by the generators and the evaluator.
"""

from models import Exercise, FrozenMatrix


class ExerciseHandler:
    """Base handler: prompt text, matrices, hint and input prompt."""

    input_prompt = "Votre réponse : "

    def __init__(self, exercise: Exercise):
        self.exercise = exercise

    def get_prompt_text(self) -> str:
        """Return the main prompt text."""
        return self.exercise.title

    def get_matrices(self) -> list[tuple[str, FrozenMatrix]]:
        """Labelled matrices to display alongside the prompt."""
        return []

    def get_hint(self) -> str:
        """Return a short note on the expected answer format."""
        return ""

    def get_input_prompt(self) -> str:
        return self.input_prompt


class MatrixOperationHandler(ExerciseHandler):
    def get_matrices(self) -> list[tuple[str, FrozenMatrix]]:
        return [("A", self.exercise.data.matrix_a), ("B", self.exercise.data.matrix_b)]

    def get_hint(self) -> str:
        return "Format : [[1,2],[3,4]] ou 1,2,3,4 (ligne par ligne)"


class DeterminantHandler(ExerciseHandler):
    def get_matrices(self) -> list[tuple[str, FrozenMatrix]]:
        return [("A", self.exercise.data.matrix_a)]

    def get_hint(self) -> str:
        return "det(A) = ?"


class BaseConversionHandler(ExerciseHandler):
    def get_prompt_text(self) -> str:
        data = self.exercise.data
        return f"{self.exercise.title}\n\n  ({data.display_value})_{data.base} = ?"


class TruthTableHandler(ExerciseHandler):
    def get_prompt_text(self) -> str:
        data = self.exercise.data
        return f"{self.exercise.title}\n\n  {data.expression}"

    def get_hint(self) -> str:
        variables = " ".join(self.exercise.data.variables)
        rows = 2 ** len(self.exercise.data.variables)
        return f"{rows} valeurs 0/1 séparées par des virgules ({variables} = 0...0 d'abord)"


class SimplifyHandler(ExerciseHandler):
    def get_prompt_text(self) -> str:
        return f"{self.exercise.title}\n\n  {self.exercise.data.expression}"


EXERCISE_HANDLERS: dict[str, type[ExerciseHandler]] = {
    "matrix_operation": MatrixOperationHandler,
    "determinant": DeterminantHandler,
    "base_conversion": BaseConversionHandler,
    "truth_table": TruthTableHandler,
    "simplify": SimplifyHandler,
}


def get_exercise_handler(exercise: Exercise) -> ExerciseHandler:
    """Get an initialized handler for the exercise's payload kind."""
    handler_class = EXERCISE_HANDLERS.get(exercise.data.kind, ExerciseHandler)
    return handler_class(exercise)

"""Static registry of exercise types and course chapters."""

from pydantic import BaseModel

from models import ExerciseType, Subject


class ExerciseTypeInfo(BaseModel):
    """Display metadata for a generated exercise type."""

    type: ExerciseType
    subject: Subject
    chapter: str
    title: str


class Chapter(BaseModel):
    id: str
    subject: Subject
    name: str
    order: int
    exercise_types: list[ExerciseType]


# Types the generator knows how to build, in catalog order.
SUPPORTED_TYPES: tuple[ExerciseType, ...] = (
    ExerciseType.MATRIX_MULTIPLICATION,
    ExerciseType.MATRIX_ADDITION,
    ExerciseType.MATRIX_DETERMINANT,
    ExerciseType.ARITHMETIC_CONGRUENCE,
    ExerciseType.ARITHMETIC_PGCD,
    ExerciseType.ARITHMETIC_BASE_CONVERSION,
    ExerciseType.BOOLEAN_TRUTH_TABLE,
    ExerciseType.BOOLEAN_SIMPLIFY,
)

EXERCISE_TYPES: dict[ExerciseType, ExerciseTypeInfo] = {
    info.type: info
    for info in [
        ExerciseTypeInfo(
            type=ExerciseType.MATRIX_MULTIPLICATION,
            subject=Subject.MATRICES,
            chapter="Calcul matriciel",
            title="Multiplication de matrices",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.MATRIX_ADDITION,
            subject=Subject.MATRICES,
            chapter="Calcul matriciel",
            title="Addition de matrices",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.MATRIX_DETERMINANT,
            subject=Subject.MATRICES,
            chapter="Déterminants",
            title="Calculer le déterminant",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.ARITHMETIC_CONGRUENCE,
            subject=Subject.ARITHMETIQUE,
            chapter="Congruences",
            title="Calculer {n} mod {modulo}",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.ARITHMETIC_PGCD,
            subject=Subject.ARITHMETIQUE,
            chapter="PGCD et Euclide",
            title="Trouver le PGCD({a}, {b})",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.ARITHMETIC_BASE_CONVERSION,
            subject=Subject.ARITHMETIQUE,
            chapter="Conversions de bases",
            title="Convertir de base {base} en base {target_base}",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.BOOLEAN_TRUTH_TABLE,
            subject=Subject.LOGIQUE,
            chapter="Tables de vérité",
            title="Compléter la table de vérité",
        ),
        ExerciseTypeInfo(
            type=ExerciseType.BOOLEAN_SIMPLIFY,
            subject=Subject.LOGIQUE,
            chapter="Simplification booléenne",
            title="Simplifier l'expression",
        ),
    ]
}

# Used for types that have no generator yet.
PLACEHOLDER_INFO = ExerciseTypeInfo(
    type=ExerciseType.MATRIX_INVERSE,
    subject=Subject.MATRICES,
    chapter="Général",
    title="Exercice",
)

CHAPTERS: list[Chapter] = [
    Chapter(id="mat_calc", subject=Subject.MATRICES, name="Calcul matriciel", order=1,
            exercise_types=[ExerciseType.MATRIX_MULTIPLICATION, ExerciseType.MATRIX_ADDITION]),
    Chapter(id="mat_det", subject=Subject.MATRICES, name="Déterminants", order=2,
            exercise_types=[ExerciseType.MATRIX_DETERMINANT]),
    Chapter(id="mat_inv", subject=Subject.MATRICES, name="Matrices inverses", order=3,
            exercise_types=[ExerciseType.MATRIX_INVERSE]),
    Chapter(id="graph_base", subject=Subject.GRAPHES, name="Graphes finis simples", order=1,
            exercise_types=[ExerciseType.GRAPH_PATH, ExerciseType.GRAPH_COLORING]),
    Chapter(id="graph_dijkstra", subject=Subject.GRAPHES, name="Algorithme de Dijkstra", order=2,
            exercise_types=[ExerciseType.GRAPH_DIJKSTRA]),
    Chapter(id="graph_mpm", subject=Subject.GRAPHES, name="Méthode MPM", order=3,
            exercise_types=[ExerciseType.GRAPH_MPM]),
    Chapter(id="graph_pert", subject=Subject.GRAPHES, name="Méthode PERT", order=4,
            exercise_types=[ExerciseType.GRAPH_PERT]),
    Chapter(id="bool_table", subject=Subject.LOGIQUE, name="Tables de vérité", order=1,
            exercise_types=[ExerciseType.BOOLEAN_TRUTH_TABLE]),
    Chapter(id="bool_simplify", subject=Subject.LOGIQUE, name="Simplification booléenne", order=2,
            exercise_types=[ExerciseType.BOOLEAN_SIMPLIFY]),
    Chapter(id="bool_expr", subject=Subject.LOGIQUE, name="Expressions booléennes", order=3,
            exercise_types=[ExerciseType.BOOLEAN_EXPRESSION]),
    Chapter(id="arith_cong", subject=Subject.ARITHMETIQUE, name="Congruences", order=1,
            exercise_types=[ExerciseType.ARITHMETIC_CONGRUENCE]),
    Chapter(id="arith_pgcd", subject=Subject.ARITHMETIQUE, name="PGCD et Euclide", order=2,
            exercise_types=[ExerciseType.ARITHMETIC_PGCD]),
    Chapter(id="arith_base", subject=Subject.ARITHMETIQUE, name="Conversions de bases", order=3,
            exercise_types=[ExerciseType.ARITHMETIC_BASE_CONVERSION]),
    Chapter(id="ens_op", subject=Subject.ENSEMBLES, name="Opérations ensemblistes", order=1,
            exercise_types=[ExerciseType.SET_OPERATIONS]),
    Chapter(id="ens_rel", subject=Subject.ENSEMBLES, name="Relations binaires", order=2,
            exercise_types=[ExerciseType.SET_RELATIONS]),
    Chapter(id="algo_tri", subject=Subject.ALGORITHMIQUE, name="Algorithmes de tri", order=1,
            exercise_types=[ExerciseType.ALGORITHM_SORT]),
    Chapter(id="algo_complex", subject=Subject.ALGORITHMIQUE, name="Complexité", order=2,
            exercise_types=[ExerciseType.ALGORITHM_COMPLEXITY]),
    Chapter(id="algo_trace", subject=Subject.ALGORITHMIQUE, name="Interprétation", order=3,
            exercise_types=[ExerciseType.ALGORITHM_TRACE]),
]


def xp_for_difficulty(difficulty: int) -> int:
    """XP awarded for a correct answer at this difficulty tier."""
    return difficulty * 10


def get_type_info(exercise_type: ExerciseType) -> ExerciseTypeInfo:
    """Get metadata for a type, or the generic placeholder entry."""
    return EXERCISE_TYPES.get(exercise_type, PLACEHOLDER_INFO)


def get_chapter(chapter_id: str) -> Chapter | None:
    for chapter in CHAPTERS:
        if chapter.id == chapter_id:
            return chapter
    return None


def chapter_for_type(exercise_type: ExerciseType) -> Chapter | None:
    for chapter in CHAPTERS:
        if exercise_type in chapter.exercise_types:
            return chapter
    return None


def types_for_subject(subject: Subject) -> list[ExerciseType]:
    """Generated exercise types belonging to a subject, in catalog order."""
    return [t for t in SUPPORTED_TYPES if EXERCISE_TYPES[t].subject == subject]

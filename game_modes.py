"""Static game mode table.

Rules parameterize the session loop: optional time limit, question count
and error budget, plus the multiplier applied to the final score.
"""

from pydantic import BaseModel, Field

DEFAULT_QUESTION_COUNT = 10


class GameModeRules(BaseModel):
    time_limit: int | None = Field(default=None, gt=0)  # seconds
    question_count: int | None = Field(default=None, gt=0)
    max_errors: int | None = Field(default=None, gt=0)
    mix_subjects: bool
    difficulty_progression: bool
    show_timer: bool
    xp_multiplier: float = Field(default=1.0, ge=1.0)

    @property
    def effective_question_count(self) -> int:
        return self.question_count or DEFAULT_QUESTION_COUNT


class GameModeConfig(BaseModel):
    id: str
    name: str
    description: str
    rules: GameModeRules


GAME_MODES: list[GameModeConfig] = [
    GameModeConfig(
        id="training",
        name="Entraînement",
        description="Exercices libres par thème, sans pression",
        rules=GameModeRules(
            mix_subjects=False,
            difficulty_progression=False,
            show_timer=False,
            xp_multiplier=1,
        ),
    ),
    GameModeConfig(
        id="sprint",
        name="Sprint",
        description="10 exercices en 5 minutes, tous sujets",
        rules=GameModeRules(
            time_limit=300,
            question_count=10,
            mix_subjects=True,
            difficulty_progression=False,
            show_timer=True,
            xp_multiplier=1.5,
        ),
    ),
    GameModeConfig(
        id="survival",
        name="Survie",
        description="Enchaînez jusqu'à 3 erreurs",
        rules=GameModeRules(
            max_errors=3,
            mix_subjects=True,
            difficulty_progression=True,
            show_timer=False,
            xp_multiplier=2,
        ),
    ),
    GameModeConfig(
        id="duel",
        name="Duel",
        description="Battez le fantôme IA",
        rules=GameModeRules(
            question_count=10,
            mix_subjects=True,
            difficulty_progression=False,
            show_timer=True,
            xp_multiplier=1.75,
        ),
    ),
    GameModeConfig(
        id="boss",
        name="Boss",
        description="Un exercice complexe multi-notions",
        rules=GameModeRules(
            time_limit=600,
            question_count=1,
            mix_subjects=True,
            difficulty_progression=False,
            show_timer=True,
            xp_multiplier=3,
        ),
    ),
    GameModeConfig(
        id="express",
        name="Révision Express",
        description="5 questions sur vos points faibles",
        rules=GameModeRules(
            question_count=5,
            mix_subjects=True,
            difficulty_progression=False,
            show_timer=False,
            xp_multiplier=1.25,
        ),
    ),
    GameModeConfig(
        id="exam",
        name="Examen Blanc",
        description="Simulation d'épreuve complète",
        rules=GameModeRules(
            time_limit=3600,
            question_count=20,
            mix_subjects=True,
            difficulty_progression=False,
            show_timer=True,
            xp_multiplier=2.5,
        ),
    ),
]

_MODES_BY_ID = {mode.id: mode for mode in GAME_MODES}


def get_game_mode(mode_id: str) -> GameModeConfig:
    """Look up a mode by id. Raises KeyError for unknown ids."""
    try:
        return _MODES_BY_ID[mode_id]
    except KeyError:
        raise KeyError(
            f"Unknown game mode {mode_id!r}; expected one of {sorted(_MODES_BY_ID)}"
        ) from None

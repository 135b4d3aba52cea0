"""Terminal interface for the BTS SIO math trainer."""

from ui.app import GameUI
from ui.components import (
    AchievementList,
    ExercisePanel,
    FeedbackPanel,
    HighScoreTable,
    LeaderboardTable,
    ModeTable,
    SessionSummaryPanel,
    StatusBar,
    StepsPanel,
    TruthTablePanel,
)
from ui.styles import (
    ACCENT_INDIGO,
    ACCENT_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "GameUI",
    "AchievementList",
    "ExercisePanel",
    "FeedbackPanel",
    "HighScoreTable",
    "LeaderboardTable",
    "ModeTable",
    "SessionSummaryPanel",
    "StatusBar",
    "StepsPanel",
    "TruthTablePanel",
    "ACCENT_INDIGO",
    "ACCENT_GOLD",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]

from rich.theme import Theme
from rich.style import Style

ACCENT_INDIGO = "#6366F1"
ACCENT_GOLD = "#F59E0B"
SUCCESS_GREEN = "#10B981"
ERROR_RED = "#EF4444"
INFO_BLUE = "#3B82F6"
MUTED_GRAY = "#64748B"
TEXT_WHITE = "#FFFFFF"

MODE_COLORS = {
    "training": "#10B981",
    "sprint": "#F59E0B",
    "survival": "#EF4444",
    "duel": "#8B5CF6",
    "boss": "#EC4899",
    "express": "#06B6D4",
    "exam": "#6366F1",
}

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=ACCENT_INDIGO, bold=True),
        "secondary": Style(color=ACCENT_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "title": Style(color=ACCENT_INDIGO, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


def get_mode_color(mode_id: str) -> str:
    return MODE_COLORS.get(mode_id, MODE_COLORS["training"])


def get_timer_style(time_remaining: int, time_limit: int) -> Style:
    """Timer colour: green, then gold under half time, red under a tenth."""
    if time_remaining * 10 <= time_limit:
        return Style(color=ERROR_RED, bold=True)
    elif time_remaining * 2 <= time_limit:
        return Style(color=ACCENT_GOLD)
    else:
        return Style(color=SUCCESS_GREEN)


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    return f"{seconds // 60}:{seconds % 60:02d}"


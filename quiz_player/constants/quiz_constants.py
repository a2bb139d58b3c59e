"""Quiz-related constants shared across UI and core layers."""

RESTRICTED_ANSWER_LIMIT: int = 6
DEFAULT_ACCENT_COLOR: str = "#FFD166"

TIMER_TICK_SECONDS: float = 1.0
TIMER_CHECKPOINT_EVERY_TICKS: int = 5
PROGRESS_SAVE_DEBOUNCE_SECONDS: float = 1.0
ACHIEVEMENT_DISPLAY_SECONDS: float = 6.5

# Four rounds of six plus the single people's question.
STANDARD_QUIZ_QUESTION_COUNT: int = 25

STREAK_LENGTH: int = 5
SPEED_RUN_MAX_SECONDS: int = 120
TIME_TRAVELLER_MIN_WEEKS: int = 3

TIMER_KEY_TEMPLATE: str = "quiz-{slug}-timer"
PROGRESS_KEY_TEMPLATE: str = "quiz-progress-{slug}"
COMPLETION_KEY_TEMPLATE: str = "quiz-completion-{slug}"
SUBMITTED_KEY_TEMPLATE: str = "quiz-submitted-{slug}"

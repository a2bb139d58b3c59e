"""Static metadata describing QuizPlayer."""

APP_NAME = "QuizPlayer"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizPlayer runs weekly pub-style quizzes round by round. Reveal each answer, "
    "mark yourself right or wrong, unlock achievements, and have your completion "
    "recorded once you have answered every question."
)

HELP_TEXT = (
    "Quizzes can be loaded from a play-data JSON document or from a .txt file "
    "using the import format:\n\n"
    "TITLE: Weekly Quiz\nSLUG: weekly-quiz\nWEEK: 2024-05-06\n\n"
    "ROUND 1: Geography\nBLURB: Maps and capitals\n\n"
    "Q: What is the capital of Norway?\nA: Oslo\nBY: Ada Lovelace, Oslo Katedralskole\n\n"
    "ROUND 2: People's Question\nTYPE: finale\n\n"
    "Q: Who wrote *Peer Gynt*?\nA: Henrik Ibsen"
)

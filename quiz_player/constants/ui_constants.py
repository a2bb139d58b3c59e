"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizPlayer"

BUTTON_START_ROUND: str = "Start Round"
BUTTON_PREVIOUS: str = "Previous"
BUTTON_NEXT: str = "Next"
BUTTON_FINISH: str = "Finish Quiz"
BUTTON_REVEAL: str = "Reveal Answer"
BUTTON_HIDE: str = "Hide Answer"
BUTTON_MARK_CORRECT: str = "I got it right"
BUTTON_UNMARK_CORRECT: str = "Actually, I got it wrong"
BUTTON_DISMISS: str = "Dismiss"
BUTTON_RETRY_SUBMISSION: str = "Retry Saving Result"
BUTTON_RESET: str = "Restart Quiz"
BUTTON_PAUSE_TIMER: str = "Pause Timer"
BUTTON_RESUME_TIMER: str = "Resume Timer"
SHORTCUT_TOGGLE_TIMER: str = "T"

JUMP_LABEL: str = "Go to question"
TIMER_TEMPLATE: str = "Time {minutes:02d}:{seconds:02d}"
SCORE_TEMPLATE: str = "Score {score}/{total}"
ROUND_HEADING_TEMPLATE: str = "Round {number}"
QUESTION_HEADING_TEMPLATE: str = "Question {number} of {total}"

UPSELL_TITLE: str = "Enjoying the quiz?"
UPSELL_MESSAGE: str = (
    "Create a free account to keep playing, track your scores and unlock achievements."
)
DEMO_COMPLETE_TITLE: str = "Demo complete"
DEMO_COMPLETE_TEMPLATE: str = "You scored {score} out of {total} in the demo."
QUIZ_COMPLETE_TITLE: str = "Quiz complete"
QUIZ_COMPLETE_TEMPLATE: str = "You scored {score} out of {total}."
QUIZ_INCOMPLETE_TITLE: str = "Not quite finished"
QUIZ_INCOMPLETE_TEMPLATE: str = "You still have unanswered questions: {numbers}."
SUBMISSION_FAILED_TITLE: str = "Could not save your result"
SUBMISSION_FAILED_TEMPLATE: str = "{reason}\n\nYour local best score is kept. Try again?"
ACCESS_DENIED_TITLE: str = "Quiz unavailable"
LOAD_FAILED_TITLE: str = "Could not load quiz"
CONFIRM_RESET_TITLE: str = "Restart quiz"
CONFIRM_RESET_MESSAGE: str = "Restarting clears your progress and timer. Continue?"

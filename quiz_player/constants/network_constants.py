"""Network configuration constants for the quiz player."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
DEFAULT_SERVER_URL: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"

COMPLETION_ENDPOINT: str = "/api/quiz/completion"
PLAY_DATA_ENDPOINT_TEMPLATE: str = "/api/quizzes/{slug}/play-data"
REQUEST_TIMEOUT_SECONDS: float = 10.0

AUTH_HEADER: str = "Authorization"
USER_ID_HEADER: str = "X-User-Id"

"""Test package for QuizPlayer.

The tests drive the play engine headlessly with a manual scheduler and a fixed
clock, and exercise the completion server through FastAPI's TestClient. No Qt
display is needed. Run ``pytest`` from the project root.
"""

"""
Parent-facing camp quiz.

Responsibilities:
- Walk a parent through the quiz questions one at a time.
- Turn collected answers into engine preferences.
- Keep in-progress quiz state so a visitor can resume after a reload.
"""

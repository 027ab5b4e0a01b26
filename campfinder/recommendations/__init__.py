"""
Camp recommendation engine.

Responsibilities:
- Score each published camp against a parent's quiz answers, with reasons.
- Filter, order and truncate scored camps into a ranked, labelled list.
- Persist completed quizzes, captured emails and result clicks.
"""

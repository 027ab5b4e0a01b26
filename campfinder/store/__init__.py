"""
External store collaborators.

Responsibilities:
- Return the catalog of published camps for in-process scoring.
- Persist completed quiz responses and their ranked results.
- Patch captured emails and result clicks after the fact.
"""

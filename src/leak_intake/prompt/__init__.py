"""Prompt rendering for the generative analysis service.

Provides ``PromptManager``, a Jinja2-based template engine that renders the
relevance pre-check instruction and the report-generation instruction from
an ``AnswerSet``.
"""

from leak_intake.prompt.manager import PromptManager

__all__ = ["PromptManager"]

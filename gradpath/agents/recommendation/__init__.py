"""
Recommendation System - Web-Grounded LLM Architecture

This module contains the prompt templates for the Gemini-based
supervisor/program recommendation system.

Architecture:
- Pattern: Web-Grounded LLM (single API call with Google Search tool)
- Model: Gemini 2.5 Flash (with Google Search grounding)
- Temperature: 0.3
- Output: JSON object embedded in free text, extracted by the service layer

The service layer is in:
- gradpath/services/recommendation_service.py

Prompt templates are in:
- gradpath/agents/recommendation/prompts.py
"""

from gradpath.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_outreach_email_prompt,
    build_recommendation_user_prompt,
)

__all__ = [
    "RECOMMENDATION_SYSTEM_PROMPT",
    "build_outreach_email_prompt",
    "build_recommendation_user_prompt",
]

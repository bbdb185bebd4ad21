"""
AI Components for the GradPath backend.

1. Recommendation System (Web-Grounded LLM)
   - Uses Gemini with Google Search grounding to find supervisors and programs
   - NOT an ADK agent - uses the Google Gen AI SDK with the Google Search tool
   - Prompts: gradpath/agents/recommendation/prompts.py
   - Service: gradpath/services/recommendation_service.py

2. Outreach Email Drafter (plain LLM call, no tools)
   - Prompt lives next to the recommendation prompts
"""

from gradpath.agents.recommendation import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_outreach_email_prompt,
    build_recommendation_user_prompt,
)

__all__ = [
    "RECOMMENDATION_SYSTEM_PROMPT",
    "build_outreach_email_prompt",
    "build_recommendation_user_prompt",
]

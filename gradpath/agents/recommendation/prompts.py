"""
Recommendation System Prompt Templates

Contains the system prompt and the user prompt builders for the
recommendation service and the outreach-email drafter.

Architecture:
- Pattern: Grounded LLM (single API call with Google Search tool)
- Model: Gemini 2.5 Flash
- Web Search: Google Search grounding tool (real-time web data)
- Temperature: 0.3 (favours factual output)
- Output: JSON parsed from free text (the search tool does not support
  response_schema, so the shape is spelled out in the prompt)

Prompt Engineering Pattern:
- System prompt defines the role only
- User prompt contains the profile, the task, exclusions and the output schema
- Builders are pure functions so they can be tested without a client
"""

from typing import Optional, Sequence

from gradpath.schemas.profile import StudentProfile

SUPERVISOR_COUNT = 10
PROGRAM_COUNT = 10

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

RECOMMENDATION_SYSTEM_PROMPT = """You are a rigorous academic consultant helping prospective graduate students find research supervisors and graduate programs.

<role>
You are an expert at navigating university websites, faculty directories and lab pages. You use real-time Google Search to find REAL, currently active professors and currently offered programs. Never invent people, labs, programs or URLs.
</role>

<output_format>
Always return a single valid JSON object matching the schema given in the user prompt, inside a markdown code block tagged json.
</output_format>"""


# =============================================================================
# USER PROMPT BUILDERS
# =============================================================================

def _build_exclusion_section(
    exclude_supervisors: Sequence[str],
    exclude_programs: Sequence[str],
) -> str:
    """Render the exclusion constraints, or an empty string when there are none."""
    lines = []
    if exclude_supervisors:
        lines.append(
            "- Do NOT include these supervisors (you already found them): "
            f"{', '.join(exclude_supervisors)}. Find DIFFERENT ones."
        )
    if exclude_programs:
        lines.append(
            "- Do NOT include these programs (you already found them): "
            f"{', '.join(exclude_programs)}. Find DIFFERENT ones."
        )
    if not lines:
        return ""

    body = "\n".join(lines)
    return f"""
<exclusions>
{body}
</exclusions>
"""


def build_recommendation_user_prompt(
    profile: StudentProfile,
    exclude_supervisors: Optional[Sequence[str]] = None,
    exclude_programs: Optional[Sequence[str]] = None,
) -> str:
    """
    Build the user prompt for one recommendation search.

    The prompt includes:
    - Every profile field, verbatim
    - A request for exactly 10 supervisors and 10 programs
    - Exclusion instructions, only when exclusion lists are non-empty
    - The exact JSON shape expected back and the JSON formatting rules

    Args:
        profile: The student's profile
        exclude_supervisors: Supervisor names already shown to the user
        exclude_programs: Program names already shown to the user

    Returns:
        str: Formatted user prompt ready to be sent to Gemini
    """
    exclusion_section = _build_exclusion_section(
        exclude_supervisors or [],
        exclude_programs or [],
    )

    return f"""Find research supervisors and graduate programs for the following student.

<student_profile>
- Name: {profile.name}
- Target Degree: {profile.target_degree}
- Major/Background: {profile.major} ({profile.degree_level}) - GPA: {profile.gpa}
- Research Interests: {profile.research_interests}
- Experience: {profile.experience}
- Preferred Locations: {profile.target_locations}
</student_profile>

<instructions>
1. Search for {SUPERVISOR_COUNT} REAL, currently active professors/supervisors who match this student's research interests. Prioritize those with active labs.
2. Search for {PROGRAM_COUNT} suitable graduate or PhD PROGRAMS.
3. Calculate a "Match Score" (integer 0-100) for each based on keyword overlap and specialization fit.
4. Find the DIRECT URL for each professor's lab page or faculty profile (not just the university homepage).
5. Find the DIRECT URL for each specific program or department page.
6. Finish with one paragraph of strategic application advice.
</instructions>
{exclusion_section}
<json_rules>
1. Do NOT include any comments.
2. Escape all double quotes inside string values.
3. Do NOT use unescaped newlines inside string values.
4. Return exactly one JSON object, inside a markdown code block tagged json.
</json_rules>

<output_schema>
{{
  "supervisors": [
    {{
      "name": string,
      "university": string,
      "department": string,
      "researchArea": string,
      "matchReason": string,
      "matchScore": integer (0-100),
      "websiteUrl": string (absolute URL starting with https://),
      "recentPaper": string (optional)
    }}
  ],
  "programs": [
    {{
      "university": string,
      "programName": string,
      "degree": "{profile.target_degree}",
      "focus": string,
      "matchReason": string,
      "matchScore": integer (0-100),
      "websiteUrl": string (absolute URL starting with https://)
    }}
  ],
  "generalAdvice": string
}}
</output_schema>"""


def build_outreach_email_prompt(
    professor_name: str,
    university: str,
    topic: str,
    profile: StudentProfile,
) -> str:
    """Build the prompt for drafting a cold email to a potential supervisor."""
    return f"""Write a polite, professional cold email from a student to a potential supervisor.

Student: {profile.name}, {profile.major}
Professor: {professor_name}, {university}
Research Interest: {topic}

Goal: Inquire about {profile.target_degree} opportunities.
Tone: Academic, humble, concise, professional.
Length: Short (under 200 words).

Output only the email body text."""

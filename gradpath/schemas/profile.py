"""
Pydantic schema for the student profile.

The profile is the only input to a recommendation run. It is submitted by the
frontend form and passed unchanged through the prompt builder; nothing in the
backend mutates it.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TargetDegree = Literal["Masters", "PhD"]


class StudentProfile(BaseModel):
    """
    Self-reported academic profile of a prospective graduate student.

    Field names are snake_case in Python and camelCase on the wire
    (e.g. ``researchInterests``); both spellings are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    name: str = Field(
        ...,
        description="Student's full name (used to sign outreach emails)",
        examples=["Ada Lovelace"]
    )
    major: str = Field(
        ...,
        description="Current major or academic background",
        examples=["Computer Science", "Molecular Biology"]
    )
    degree_level: str = Field(
        ...,
        description="Highest degree completed or in progress",
        examples=["Bachelor's", "Master's"]
    )
    gpa: str = Field(
        ...,
        description="GPA together with its grading scale, free text",
        examples=["3.8/4.0", "1.3 (German scale)"]
    )
    research_interests: str = Field(
        ...,
        description="Free-text description of research interests",
        examples=["Graph neural networks for drug discovery"]
    )
    target_degree: TargetDegree = Field(
        ...,
        description="Degree the student is applying for",
        examples=["PhD"]
    )
    target_locations: str = Field(
        ...,
        description="Preferred countries, regions or cities, free text",
        examples=["USA, Canada", "Europe"]
    )
    experience: str = Field(
        ...,
        description="Research and work experience, free text",
        examples=["Two years as RA in a computational biology lab"]
    )

#!/usr/bin/env python3
"""
Recommendation Pipeline Manual Run Script

Runs one live recommendation search (and optionally one email draft) against
Gemini with Google Search grounding, without starting the API server.

Usage:
    python scripts/run_recommendations.py
    python scripts/run_recommendations.py --interests "robot learning" --degree PhD
    python scripts/run_recommendations.py --interests "NLP" --more --email
"""

import argparse
import asyncio
import logging
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from gradpath.schemas.profile import StudentProfile
from gradpath.schemas.recommendations import RecommendationBatch
from gradpath.services.exceptions import RecommendationError
from gradpath.services.recommendation_service import draft_outreach_email
from gradpath.services.session_service import RecommendationSession


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_batch(batch: RecommendationBatch):
    """Pretty print a recommendation batch."""
    print("\n" + "=" * 60)
    print(f"SUPERVISORS: {len(batch.supervisors)}  PROGRAMS: {len(batch.programs)}")
    print("=" * 60)

    for i, sup in enumerate(batch.supervisors, 1):
        print(f"--- Supervisor #{i} [{sup.match_score}] ---")
        print(f"  Name:      {sup.name}")
        print(f"  Where:     {sup.department}, {sup.university}")
        print(f"  Area:      {sup.research_area}")
        print(f"  URL:       {sup.website_url}")
        if sup.recent_paper:
            print(f"  Paper:     {sup.recent_paper}")
        print()

    for i, prog in enumerate(batch.programs, 1):
        print(f"--- Program #{i} [{prog.match_score}] ---")
        print(f"  Program:   {prog.program_name} ({prog.degree})")
        print(f"  Where:     {prog.university}")
        print(f"  Focus:     {prog.focus}")
        print(f"  URL:       {prog.website_url}")
        print()

    print(f"Advice: {batch.general_advice}\n")
    print(f"Sources ({len(batch.grounding_links)}):")
    for link in batch.grounding_links:
        print(f"  - {link.title}: {link.uri}")


async def run(profile: StudentProfile, load_more: bool, email: bool):
    """Run one search, optionally a second round and an email draft."""
    if not os.getenv("GOOGLE_API_KEY"):
        print("\n⚠️  ERROR: GOOGLE_API_KEY environment variable not set!")
        print("   Please set it in your .env file or export it:")
        print("   export GOOGLE_API_KEY=your-gemini-api-key")
        return

    session = RecommendationSession()
    print("\nCalling Gemini API (with Google Search grounding)...")

    try:
        await session.start(profile)
        print_batch(RecommendationBatch(
            supervisors=session.supervisors,
            programs=session.programs,
            general_advice=session.general_advice,
            grounding_links=session.grounding_links,
        ))

        if load_more:
            print("\nLoading more (excluding names already found)...")
            await session.load_more()
            print(f"Session now holds {len(session.supervisors)} supervisors, "
                  f"{len(session.programs)} programs, "
                  f"{len(session.grounding_links)} sources")
    except RecommendationError as e:
        print(f"\n❌ {type(e).__name__}: {e}\n")
        return

    if email and session.supervisors:
        top = session.supervisors[0]
        print(f"\nDrafting email to {top.name}...\n")
        draft = await draft_outreach_email(
            professor_name=top.name,
            university=top.university,
            topic=top.research_area,
            profile=profile,
        )
        print(draft)


def main():
    parser = argparse.ArgumentParser(
        description="Run the recommendation pipeline against live Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_recommendations.py --interests "protein design" --degree PhD
  python scripts/run_recommendations.py --major "Physics" --locations "Germany" --more
        """
    )
    parser.add_argument("--name", default="Alex Doe", help="Student name")
    parser.add_argument("--major", default="Computer Science", help="Major/background")
    parser.add_argument("--level", default="Bachelor's", help="Current degree level")
    parser.add_argument("--gpa", default="3.7/4.0", help="GPA with scale")
    parser.add_argument(
        "--interests", "-i",
        default="Machine learning for healthcare",
        help="Research interests"
    )
    parser.add_argument(
        "--degree", "-d",
        choices=["Masters", "PhD"],
        default="PhD",
        help="Target degree"
    )
    parser.add_argument("--locations", "-l", default="USA, Canada", help="Target locations")
    parser.add_argument(
        "--experience",
        default="One year of undergraduate research",
        help="Experience summary"
    )
    parser.add_argument("--more", action="store_true", help="Also run one 'load more' round")
    parser.add_argument("--email", action="store_true", help="Draft an email to the top supervisor")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    profile = StudentProfile(
        name=args.name,
        major=args.major,
        degree_level=args.level,
        gpa=args.gpa,
        research_interests=args.interests,
        target_degree=args.degree,
        target_locations=args.locations,
        experience=args.experience,
    )
    asyncio.run(run(profile, load_more=args.more, email=args.email))


if __name__ == "__main__":
    main()

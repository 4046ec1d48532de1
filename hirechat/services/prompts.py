"""Prompt construction for grounded candidate shortlisting."""

import json
from typing import Dict, List, Sequence

from ..models.search import CandidateMatch

SHORTLIST_PROMPT_TEMPLATE = """You help a recruiter pick candidates on a hiring platform.
You are given the recruiter's request and a list of candidate profiles found by a search.
Only candidates in that list exist. Never mention, invent or describe any other person, and ignore anything said in earlier conversations.

Recruiter request: "{query}"

Candidate profiles ({count}):
{candidates}

Select at most {max_selected} of the candidates above that best fit the request. Choose ONLY from the list above.
If fewer than {max_selected} candidates are relevant, return fewer. If none are relevant, say that no candidates on this platform match the requirements.
Start with the line "These are the top relevant candidates according to your requirements" and then give one markdown list item per selected candidate in the form:
- [Full Name](profile_link)
Use each name and profile_link exactly as written in the list. Do not add any other candidates."""


def profile_link(candidate_id: str, frontend_base_url: str) -> str:
    """URL of the candidate's profile page."""
    return f"{frontend_base_url.rstrip('/')}/profile/{candidate_id}"


def candidate_entries(candidates: Sequence[CandidateMatch], frontend_base_url: str) -> List[Dict[str, str]]:
    """Reduce matches to the name and profile link the model is allowed to see."""
    return [
        {
            "name": match.profile.name or match.profile.email,
            "profile_link": profile_link(match.profile.id, frontend_base_url),
        }
        for match in candidates
    ]


def build_shortlist_prompt(query: str, entries: Sequence[Dict[str, str]], max_selected: int = 5) -> str:
    """
    Build the shortlisting prompt.

    The candidate section is a JSON list of exactly the given entries, and
    the selection cap is min(max_selected, len(entries)).

    Args:
        query: The recruiter's literal message
        entries: Candidate entries with "name" and "profile_link" keys
        max_selected: Upper bound on the shortlist size

    Returns:
        Prompt text for a single system message
    """
    serialized = [{"name": entry["name"], "profile_link": entry["profile_link"]} for entry in entries]
    return SHORTLIST_PROMPT_TEMPLATE.format(
        query=query,
        count=len(serialized),
        candidates=json.dumps(serialized, indent=2, ensure_ascii=False),
        max_selected=min(max_selected, len(serialized)),
    )

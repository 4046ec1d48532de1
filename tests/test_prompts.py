"""Tests for shortlist prompt construction."""

import json
import re

from hirechat.models.search import CandidateMatch
from hirechat.models.user import Profile
from hirechat.services.prompts import build_shortlist_prompt, candidate_entries, profile_link


def _match(profile_id, name, similarity=0.8, email=None):
    profile = Profile(id=profile_id, name=name, email=email or f"{profile_id}@example.com")
    return CandidateMatch(profile=profile, similarity=similarity)


def _candidate_section(prompt):
    match = re.search(r"Candidate profiles \(\d+\):\n(\[.*?\n\])", prompt, re.DOTALL)
    assert match is not None
    return json.loads(match.group(1))


class TestShortlistPrompt:
    """Test cases for build_shortlist_prompt."""

    def test_contains_exactly_the_given_candidates(self):
        """Test the prompt lists exactly the supplied candidates."""
        entries = candidate_entries(
            [_match("c1", "Ada Lovelace"), _match("c2", "Grace Hopper"), _match("c3", "Alan Turing")],
            "https://app.example.com",
        )

        prompt = build_shortlist_prompt("senior backend engineer", entries)

        section = _candidate_section(prompt)
        assert [c["name"] for c in section] == ["Ada Lovelace", "Grace Hopper", "Alan Turing"]
        assert set(section[0]) == {"name", "profile_link"}
        assert "Candidate profiles (3)" in prompt

    def test_cap_is_min_of_limit_and_candidate_count(self):
        """Test the selection cap shrinks to the candidate count."""
        entries = candidate_entries([_match("c1", "Ada"), _match("c2", "Grace")], "https://app.example.com")

        prompt = build_shortlist_prompt("data scientist", entries, max_selected=5)

        assert "Select at most 2 of the candidates" in prompt
        assert "at most 5" not in prompt

    def test_cap_uses_limit_when_more_candidates(self):
        """Test the selection cap is the limit when candidates exceed it."""
        entries = candidate_entries([_match(f"c{i}", f"Person {i}") for i in range(8)], "https://app.example.com")

        prompt = build_shortlist_prompt("designer", entries, max_selected=5)

        assert "Select at most 5 of the candidates" in prompt
        assert len(_candidate_section(prompt)) == 8

    def test_embeds_literal_query(self):
        """Test the recruiter query appears verbatim."""
        prompt = build_shortlist_prompt('Go engineer {remote} "EU"', [{"name": "Ada", "profile_link": "x"}])

        assert 'Go engineer {remote} "EU"' in prompt

    def test_grounding_instructions(self):
        """Test the prompt forbids candidates outside the list."""
        prompt = build_shortlist_prompt("anything", [{"name": "Ada", "profile_link": "x"}])

        assert "Choose ONLY from the list above" in prompt
        assert "return fewer" in prompt


class TestCandidateEntries:
    """Test cases for candidate serialisation."""

    def test_profile_link_points_to_profile_page(self):
        """Test candidate links point to the profile page."""
        assert profile_link("abc", "https://app.example.com/") == "https://app.example.com/profile/abc"

    def test_name_falls_back_to_email(self):
        """Test a candidate without a name is listed by email."""
        entries = candidate_entries([_match("c1", "", email="anon@example.com")], "https://app.example.com")

        assert entries == [{"name": "anon@example.com", "profile_link": "https://app.example.com/profile/c1"}]

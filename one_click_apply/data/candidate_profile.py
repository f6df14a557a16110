"""Candidate profile - known facts about the applicant, fed into prompts"""

import json
import os

# Keys shown first in the prompt; everything else follows in file order
PRIORITY_KEYS = [
    'full_name',
    'email',
    'phone',
    'city',
    'linkedin_url',
    'github_url',
    'portfolio_url',
    'years_experience',
    'work_authorization',
    'requires_sponsorship',
    'education_level',
]


def load_profile(path):
    """
    Load the candidate profile JSON.

    A missing file yields an empty profile so the bot still runs; answers
    then rely on the job context alone and land in review more often.
    """
    if not path or not os.path.exists(path):
        print(f"⚠️ Candidate profile not found at {path} - continuing without it")
        return {}
    with open(path, "r", encoding="utf-8") as f:
        profile = json.load(f)
    if not isinstance(profile, dict):
        raise ValueError(f"Candidate profile {path} must be a JSON object")
    return profile


def _format_value(value):
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(_format_value(v) for v in value)
    return str(value)


def _flatten(profile, prefix=""):
    for key, value in profile.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _flatten(value, f"{name}.")
        elif value is not None and value != "":
            yield name, _format_value(value)


def profile_to_text(profile):
    """Render the profile as "key: value" lines, priority keys first"""
    pairs = list(_flatten(profile or {}))
    ranked = sorted(
        pairs,
        key=lambda pair: PRIORITY_KEYS.index(pair[0]) if pair[0] in PRIORITY_KEYS else len(PRIORITY_KEYS),
    )
    return "\n".join(f"{key.replace('_', ' ')}: {value}" for key, value in ranked)

"""Shared application fixtures."""

import copy

import pytest

ANSWERS = {
    "q1": (
        "First, I gently explain the idea to the student with a simple picture. "
        "Then they practice two examples while I check their work. "
        "I understand it can feel difficult at first."
    ),
    "q2": (
        "Next, I ask the learner what they already know and patiently review the steps together. "
        "Finally we try a new problem, and I remind them that a struggle is normal."
    ),
    "q3": (
        "First I show a worked example so the child can follow along. "
        "Then I kindly encourage them to explain it back to me. "
        "Taking time is okay, and I support every question."
    ),
}

COMPLETE_APPLICATION = {
    "profile": {
        "name": "Priya",
        "country": "India",
        "timezone": "Asia/Kolkata",
        "languages": ["English", "Hindi"],
        "subjects": ["Mathematics", "Physics", "Chemistry"],
        "grades_supported": ["6", "7", "8"],
        "experience_level": "3-5 years",
        "teaching_style_tags": ["visual", "patient"],
        "availability": {
            "days": ["mon", "tue", "wed", "thu", "fri"],
            "slots": ["morning", "afternoon", "evening"],
        },
        "bio": "I have tutored maths for years and love helping students grow in confidence.",
    },
    "skill_check": {"micro_teaching_answers": ANSWERS},
}


@pytest.fixture
def complete_application() -> dict:
    return copy.deepcopy(COMPLETE_APPLICATION)

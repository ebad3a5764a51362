# tests/conftest.py
import copy
import os
import sys

import pytest

# Ensure repository root is on PYTHONPATH for tests
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

# Keep test runs independent of a developer's local override file
os.environ.pop("SUBSTITUTION_TABLES_FILE", None)

from models import PoemAnalysis  # noqa: E402

SAMPLE_ANALYSIS = {
    "meta": {"title": "Night Song", "lineCount": 3, "stanzaCount": 2},
    "structure": {
        "stanzas": [
            {
                "lines": [
                    {
                        "text": "The strength of night",
                        "words": [
                            {"text": "The"},
                            {"text": "strength"},
                            {"text": "of"},
                            {"text": "night"},
                        ],
                        "stressPattern": "0101",
                        "syllableCount": 4,
                        "singability": {
                            "syllableScores": [0.9, 0.3, 0.9, 0.8],
                            "lineScore": 0.6,
                            "problemSpots": [
                                {
                                    "position": 1,
                                    "issue": "consonant cluster on a stressed beat",
                                    "severity": "high",
                                }
                            ],
                        },
                    },
                    {
                        "text": "I remember the day",
                        "words": [
                            {"text": "I"},
                            {"text": "remember"},
                            {"text": "the"},
                            {"text": "day"},
                        ],
                        "stressPattern": "101001",
                        "syllableCount": 6,
                        "singability": {
                            "lineScore": 0.8,
                            "problemSpots": [
                                {"position": 2, "issue": "weak vowel", "severity": "low"}
                            ],
                        },
                    },
                ]
            },
            {
                "lines": [
                    {
                        "text": "Through the light of night",
                        "words": [
                            {"text": "Through"},
                            {"text": "the"},
                            {"text": "light"},
                            {"text": "of"},
                            {"text": "night"},
                        ],
                        "stressPattern": "10101",
                        "syllableCount": 5,
                        "singability": {"lineScore": 0.7},
                    }
                ]
            },
        ]
    },
    "prosody": {
        "meter": {"pattern": "0101", "detectedMeter": "iambic trimeter", "confidence": 0.6},
        "rhyme": {"scheme": "ABA"},
        "regularity": 0.7,
    },
    "emotion": {
        "overallSentiment": 0.25,
        "arousal": 0.4,
        "dominantEmotions": ["longing", "hope"],
        "emotionalArc": [
            {"stanza": 0, "sentiment": 0.5, "keywords": ["night"]},
            {"stanza": 1, "sentiment": -0.4, "keywords": []},
        ],
    },
    "problems": [
        {
            "line": 3,
            "position": 4,
            "type": "rhyme_break",
            "severity": "low",
            "description": "",
        },
        {
            "line": 2,
            "position": 1,
            "type": "stress_mismatch",
            "severity": "medium",
        },
        {
            "line": 1,
            "position": 1,
            "type": "singability",
            "severity": "high",
            "description": "Consonant cluster 'str' is hard to sustain",
            "suggestedFix": "power",
        },
        {
            "line": 2,
            "position": 3,
            "type": "syllable_variance",
            "severity": "low",
            "description": "Line is longer than its neighbours",
        },
    ],
}


@pytest.fixture
def analysis_data() -> dict:
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def poem_analysis(analysis_data) -> PoemAnalysis:
    return PoemAnalysis.model_validate(analysis_data)

"""Unit tests for the technical job title classifier."""

import pytest

from src.keywords import TECH_KEYWORDS, is_technical_job


class TestIsTechnicalJob:
    @pytest.mark.parametrize(
        "title",
        [
            "Senior Software Engineer",
            "Ingénieur Cloud",
            "Développeur Full Stack",
            "Softwareontwikkelaar Java",
            "Beveiligingsingenieur",
            "DevOps Specialist",
            "Data Scientist - NLP",
            "Python Backend Developer",
            "Kubernetes Platform Lead",
        ],
    )
    def test_technical_titles(self, title):
        assert is_technical_job(title) is True

    @pytest.mark.parametrize(
        "title",
        [
            "Administrative Assistant",
            "Account Manager",
            "Receptionist",
            "Financial Controller",
        ],
    )
    def test_non_technical_titles(self, title):
        assert is_technical_job(title) is False

    def test_case_insensitive(self):
        assert is_technical_job("CLOUD ARCHITECT") is True

    def test_empty_or_missing_title(self):
        assert is_technical_job("") is False
        assert is_technical_job(None) is False

    def test_every_keyword_matches_itself(self):
        for keyword in TECH_KEYWORDS:
            assert is_technical_job(f"Senior {keyword.upper()} lead")

"""Classify job titles as technical using a multilingual keyword list.

Titles come from Belgian and Dutch postings, so the vocabulary covers English,
French and Dutch spellings.  Matching is a plain substring test on the
lowercased title.
"""

from __future__ import annotations

from typing import Optional

TECH_KEYWORDS: tuple[str, ...] = (
    "engineer",
    "ingénieur",
    "developer",
    "développeur",
    "architect",
    "architecte",
    "machine learning",
    "apprentissage automatique",
    "kunstmatige intelligentie",
    "intelligence artificielle",
    "backend",
    "back end",
    "arrière-plan",
    "front end",
    "frontend",
    "interface utilisateur",
    "full stack",
    "fullstack",
    "pile complète",
    "software",
    "logiciel",
    "softwareontwikkelaar",
    "développeur de logiciels",
    "data scientist",
    "scientifique des données",
    "datawetenschapper",
    "ml",
    "ai engineer",
    "ingénieur en intelligence artificielle",
    "artificial intelligence",
    "cloud",
    "nuage",
    "informatique en nuage",
    "devops",
    "security engineer",
    "ingénieur en sécurité",
    "beveiligingsingenieur",
    "embedded",
    "embarqué",
    "systems engineer",
    "ingénieur en systèmes",
    "systeemingenieur",
    "ingénieur système",
    "robotics",
    "robotique",
    "robotica",
    "computer vision",
    "vision par ordinateur",
    "computervisie",
    "aws",
    "amazon web services",
    "azure",
    "gcp",
    "google cloud",
    "cloud architect",
    "architecte cloud",
    "cloud ingenieur",
    "ingénieur cloud",
    "cloud engineer",
    "cloud security",
    "sécurité du cloud",
    "cloudbeveiliging",
    "kubernetes",
    "docker",
    "serverless",
    "sans serveur",
    "python",
)


def is_technical_job(title: Optional[str]) -> bool:
    """Return ``True`` if *title* contains any technical keyword."""
    if not title:
        return False
    lowered = title.lower()
    return any(keyword in lowered for keyword in TECH_KEYWORDS)

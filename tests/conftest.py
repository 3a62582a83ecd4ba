"""Shared fixtures for lead scoring tests."""

import os

import pytest

# Never reach a real provider from tests
os.environ.setdefault("AI_PROVIDER", "mock")
os.environ.setdefault("REQUEST_DELAY_SECONDS", "0")

from ai import IntentClassifier  # noqa: E402
from models import Lead, Offer  # noqa: E402
from scoring import FixedDelayPacer, ScoringPipeline  # noqa: E402
from storage import InMemoryStore  # noqa: E402


class FakeProvider:
    """Replies per prospect name; names in ``fail_for`` raise instead."""

    name = "fake"

    def __init__(self, replies=None, default="Medium: some overlap with the offer.", fail_for=()):
        self.replies = replies or {}
        self.default = default
        self.fail_for = set(fail_for)
        self.prompts = []

    def _prospect(self, prompt):
        for line in (l.strip() for l in prompt.splitlines()):
            if line.startswith("PROSPECT: "):
                return line[len("PROSPECT: "):].split(",")[0]
        return ""

    async def complete(self, prompt):
        self.prompts.append(prompt)
        name = self._prospect(prompt)
        if name in self.fail_for:
            raise RuntimeError(f"provider timed out for {name}")
        return self.replies.get(name, self.default)


@pytest.fixture
def offer():
    return Offer(
        name="AI Outreach Automation",
        value_props=["24/7 outreach", "6x more meetings"],
        ideal_use_cases=["B2B SaaS mid-market"],
    )


@pytest.fixture
def ava():
    return Lead(
        name="Ava Patel",
        role="Head of Growth",
        company="FlowMetrics",
        industry="B2B SaaS",
        location="Pune",
        linkedin_bio="Growth leader scaling outbound teams",
    )


@pytest.fixture
def bob():
    return Lead(
        name="Bob Stone",
        role="Intern",
        company="Acme Steel",
        industry="Manufacturing",
        location="",
        linkedin_bio="",
    )


@pytest.fixture
def cara():
    return Lead(
        name="Cara Jones",
        role="Marketing Manager",
        company="Northwind",
        industry="Enterprise Software",
        location="Austin",
        linkedin_bio="Runs demand generation",
    )


@pytest.fixture
def make_pipeline():
    def _make(provider, pacer=None):
        return ScoringPipeline(IntentClassifier(provider), pacer=pacer or FixedDelayPacer(0))
    return _make


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def fake_provider():
    return FakeProvider(
        replies={
            "Ava Patel": "High - strong fit for automated outreach.",
            "Bob Stone": "Low: poor fit, no buying signal.",
        }
    )


@pytest.fixture
def client(fake_provider, make_pipeline):
    """FastAPI test client with a fresh store and a fake AI provider."""
    from fastapi.testclient import TestClient
    from main import app, get_pipeline

    pipeline = make_pipeline(fake_provider)
    app.state.store = InMemoryStore()
    app.state.pipeline = None
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.pipeline = None


@pytest.fixture
def provider_cls():
    return FakeProvider

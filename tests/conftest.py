"""
Pytest configuration and shared fixtures.

Besides fixtures, this records every test outcome and writes a
timestamped report grouped by test module to test_results/.
"""

import pytest
import sys
from collections import Counter, defaultdict
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_config import (
    CONFIG, EXPECTED, TEST_DATA, MESSAGES, TEST_CATEGORIES,
    get_sample_idea, get_all_sample_ideas, get_sample_group
)

RESULTS_DIR = PROJECT_ROOT / CONFIG["test_output_dir"]
MARKS = {"passed": "✓", "failed": "✗", "skipped": "○"}


# =============================================================================
# RESULT REPORT
# =============================================================================

class ResultLog:
    """Outcomes of the `call` phase of each test, grouped by module."""

    def __init__(self):
        self.by_module = defaultdict(list)
        self.started = None

    def record(self, report):
        module = Path(report.nodeid.split("::")[0]).stem.removeprefix("test_")
        name = report.nodeid.split("::")[-1].removeprefix("test_").replace("_", " ")
        message = str(report.longrepr) if report.longrepr else ""
        self.by_module[module].append((name, report.outcome, report.duration, message))

    def counts(self) -> Counter:
        return Counter(outcome for rows in self.by_module.values() for _, outcome, _, _ in rows)

    def render(self) -> str:
        counts = self.counts()
        total = sum(counts.values())
        lines = [
            "=" * 80,
            "IDEA HUB - TEST RESULTS REPORT",
            "=" * 80,
            f"Run date:  {self.started:%Y-%m-%d %H:%M:%S}",
            f"Duration:  {(datetime.now() - self.started).total_seconds():.2f}s",
            f"Total: {total}  passed: {counts['passed']}  failed: {counts['failed']}  "
            f"skipped: {counts['skipped']}",
        ]

        for module, rows in sorted(self.by_module.items()):
            info = TEST_CATEGORIES.get(module, {})
            lines += ["", "-" * 80, f"{info.get('name', module)}: {info.get('description', '')}"]
            for risk in info.get("protects_against", []):
                lines.append(f"  guards: {risk}")
            for name, outcome, duration, message in rows:
                lines.append(f"  {MARKS.get(outcome, '?')} {name:<60} {duration * 1000:>6.0f}ms")
                if outcome == "failed":
                    lines += [f"      {line[:72]}" for line in message.splitlines()[:5] if line.strip()]

        lines += ["", "=" * 80]
        return "\n".join(lines)


_results = ResultLog()


def pytest_runtest_logreport(report):
    if report.when == "call":
        _results.record(report)


def pytest_sessionfinish(session, exitstatus):
    if _results.started is None:
        return
    RESULTS_DIR.mkdir(exist_ok=True)
    path = RESULTS_DIR / f"test_results_{datetime.now():%Y%m%d_%H%M%S}.txt"
    path.write_text(_results.render(), encoding="utf-8")

    counts = _results.counts()
    print(f"\n📄 Test results saved to: {path}")
    print(f"Passed: {counts['passed']} | Failed: {counts['failed']} | Skipped: {counts['skipped']}")


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def sample_idea():
    """Provide a single sample idea draft dict."""
    return get_sample_idea(0)


@pytest.fixture
def sample_ideas():
    """Provide all sample idea draft dicts (oldest first)."""
    return get_all_sample_ideas()


@pytest.fixture
def sample_group():
    return get_sample_group(0)


@pytest.fixture
def test_config():
    """Provide access to test configuration."""
    return CONFIG


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


@pytest.fixture
def test_data():
    """Provide access to test data."""
    return TEST_DATA


@pytest.fixture
def messages():
    return MESSAGES


@pytest.fixture
def storage():
    """Fresh in-memory backend."""
    from ideahub.storage.supabase import MockSupabaseStorage
    return MockSupabaseStorage()


@pytest.fixture
def user():
    from ideahub.models import User
    return User(**TEST_DATA["users"][0])


@pytest.fixture
def auth_session(user):
    """A signed-in session for the first test user."""
    from ideahub.auth import AuthSession
    return AuthSession(
        user=user,
        access_token=CONFIG["access_token"],
        refresh_token="refresh-token-xyz",
    )


@pytest.fixture
def sessions(auth_session):
    """Session provider for a signed-in user; the auth client is a mock."""
    from unittest.mock import Mock
    from ideahub.auth import SessionProvider, SupabaseAuth
    return SessionProvider(Mock(spec=SupabaseAuth), auth_session)


@pytest.fixture
def signed_out_sessions():
    from unittest.mock import Mock
    from ideahub.auth import SessionProvider, SupabaseAuth
    return SessionProvider(Mock(spec=SupabaseAuth))


@pytest.fixture
def notifier():
    from ideahub.notifications import Notifier
    return Notifier()


@pytest.fixture
def idea_repo(storage, sessions, notifier):
    from ideahub.repositories import IdeaRepository
    return IdeaRepository(storage, sessions, notifier)


@pytest.fixture
def seeded_repo(idea_repo, sample_ideas, notifier):
    """Idea repository holding all sample ideas, newest first."""
    for draft in sample_ideas:
        idea_repo.add(draft)
    notifier.drain()
    return idea_repo


@pytest.fixture
def guard():
    """A private in-flight guard so tests never share running actions."""
    from ideahub.actions import InFlightGuard
    return InFlightGuard()


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers and start the result collector."""
    config.addinivalue_line(
        "markers", "storage: Backend adapter tests"
    )
    config.addinivalue_line(
        "markers", "services: Third-party API client tests"
    )
    config.addinivalue_line(
        "markers", "web: Flask route tests"
    )
    config.addinivalue_line(
        "markers", "config_validation: Environment configuration checks"
    )

    _results.started = datetime.now()

"""Pytest configuration and fixtures for casedown tests."""

import pytest

from casedown import Compiler, PatternMatchingRewriter, RecordingHooks


@pytest.fixture
def rewriter():
    """Create a rewriter with default configuration."""
    return PatternMatchingRewriter()


@pytest.fixture
def hooks():
    """Create hooks that record rewriter notifications."""
    return RecordingHooks()


@pytest.fixture
def tracked_rewriter(hooks):
    """Create a rewriter reporting to the recording hooks."""
    return PatternMatchingRewriter(hooks=hooks)


@pytest.fixture
def compiler():
    """Create a compiler for evaluating rewritten trees."""
    return Compiler()

"""Pytest configuration and shared fixtures for blockpress tests."""

import os
import tempfile

import pytest

# Keep test runs from writing into the project's logs/ directory.
os.environ.setdefault("BLOCKPRESS_LOG_DIR", tempfile.mkdtemp(prefix="blockpress-logs-"))

from blockpress.common.utils.config import get_config, set_config  # noqa: E402


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def override_config():
    """Swap in a modified configuration for one test, restoring it afterwards.

    Usage:
        override_config(max_depth=2, detect_callouts=True)
    """
    original = get_config()

    def apply(**changes):
        updated = original.model_copy(update=changes)
        set_config(updated)
        return updated

    yield apply
    set_config(original)


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_markdown():
    return "# Title\n\nSome *italic* and **bold** text.\n- item one\n- item two\n"


@pytest.fixture
def flat_blocks():
    """Flat block list linked by parent pointers."""
    return [
        {"id": "a", "type": "toggle", "toggle": {"rich_text": [{"plain_text": "Parent"}]}},
        {"id": "b", "parentId": "a", "type": "paragraph", "paragraph": {"rich_text": [{"plain_text": "Child"}]}},
        {"id": "c", "type": "paragraph", "paragraph": {"rich_text": [{"plain_text": "Sibling"}]}},
    ]

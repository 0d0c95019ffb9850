"""Pytest fixtures shared by all tests."""

import pytest

from archive_maildir.storage.maildir import Maildir
from tests.helpers import make_message


@pytest.fixture
def source(tmp_path):
    """An empty source Maildir."""
    maildir = Maildir(tmp_path / "in")
    maildir.create_directories()
    return maildir


@pytest.fixture
def output_dir(tmp_path):
    """Output root for archived Maildirs (not created)."""
    return tmp_path / "out"


@pytest.fixture
def old_message():
    """Email received on 2020-01-01."""
    return make_message("Wed, 01 Jan 2020 10:00:00 +0000", subject="old")


@pytest.fixture
def recent_message():
    """Email received on 2023-06-01."""
    return make_message("Thu, 01 Jun 2023 10:00:00 +0000", subject="recent")

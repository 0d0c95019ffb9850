"""Tests for the Maildir access layer."""

import os

import pytest

from archive_maildir.models.mail_entry import MailEntry
from archive_maildir.storage.maildir import (
    Maildir,
    MaildirEnumerationError,
    MaildirError,
    MaildirStoreConflict,
    join_filename,
    split_filename,
)
from tests.helpers import add_message, cur_names, make_message


class TestFilenames:
    """Test Maildir file name encoding."""

    def test_split_filename_with_flags(self):
        """Id and flags are split at ':2,'."""
        message_id, flags = split_filename("1463868505.38518452d49213cb409aa1db32f53184:2,RS")

        assert message_id == "1463868505.38518452d49213cb409aa1db32f53184"
        assert flags == frozenset({"R", "S"})

    def test_split_filename_without_info(self):
        """A name without info has no flags."""
        assert split_filename("1463868505.abc") == ("1463868505.abc", frozenset())

    def test_split_filename_empty_flags(self):
        """An empty info section means no flags."""
        assert split_filename("abc:2,") == ("abc", frozenset())

    @pytest.mark.parametrize("name", [":2,S", "abc:1,xyz", "abc:2,S1", "a:b:2,S"])
    def test_split_filename_invalid(self, name):
        """Malformed names raise ValueError."""
        with pytest.raises(ValueError):
            split_filename(name)

    def test_join_filename_sorts_flags(self):
        """Flags are written in sorted order."""
        assert join_filename("abc", {"S", "F", "R"}) == "abc:2,FRS"


class TestMaildirDirectories:
    """Test directory creation and counting."""

    def test_create_directories(self, tmp_path):
        """cur/, new/ and tmp/ are created."""
        maildir = Maildir(tmp_path / "box")

        maildir.create_directories()

        for sub in ("cur", "new", "tmp"):
            assert (tmp_path / "box" / sub).is_dir()

    def test_create_directories_is_idempotent(self, tmp_path):
        """Creating again keeps existing messages."""
        maildir = Maildir(tmp_path / "box")
        maildir.create_directories()
        add_message(maildir, "m1", b"x")

        maildir.create_directories()

        assert maildir.count_current() == 1

    def test_count_current_missing_maildir(self, tmp_path):
        """A missing Maildir counts zero."""
        assert Maildir(tmp_path / "nowhere").count_current() == 0

    def test_count_current_ignores_new_and_hidden(self, source):
        """Only visible files in cur/ are counted."""
        add_message(source, "m1", b"x")
        (source.root / "new" / "m2").write_bytes(b"y")
        (source.cur / ".hidden").write_bytes(b"z")

        assert source.count_current() == 1


class TestListCurrent:
    """Test enumeration of the cur/ area."""

    def test_list_current(self, source):
        """Entries come back sorted with id, flags and path."""
        add_message(source, "b", b"second", flags="S")
        add_message(source, "a", b"first", flags="RS")

        entries = list(source.list_current())

        assert [e.id for e in entries] == ["a", "b"]
        assert entries[0].flags == frozenset({"R", "S"})
        assert entries[0].path == source.cur / "a:2,RS"
        assert entries[1].read_bytes() == b"second"

    def test_list_current_reports_corrupt_entries(self, source):
        """Undecodable entries are yielded as errors."""
        add_message(source, "good", b"x")
        (source.cur / "subdir").mkdir()
        (source.cur / "bad:2,S1").write_bytes(b"y")

        items = list(source.list_current())

        errors = [i for i in items if isinstance(i, MaildirEnumerationError)]
        entries = [i for i in items if isinstance(i, MailEntry)]
        assert len(errors) == 2
        assert {e.path.name for e in errors} == {"subdir", "bad:2,S1"}
        assert [e.id for e in entries] == ["good"]

    def test_list_current_is_restartable(self, source):
        """Each call starts a new scan."""
        add_message(source, "m1", b"x")

        assert len(list(source.list_current())) == 1
        assert len(list(source.list_current())) == 1

    def test_list_current_missing_cur(self, tmp_path):
        """A missing cur/ raises MaildirError."""
        with pytest.raises(MaildirError):
            list(Maildir(tmp_path / "nowhere").list_current())


class TestStoreWithFlags:
    """Test atomic delivery into cur/."""

    @pytest.fixture
    def dest(self, tmp_path):
        maildir = Maildir(tmp_path / "dest")
        maildir.create_directories()
        return maildir

    def test_store_reuses_id_and_flags(self, dest):
        """Delivery keeps the given id and flags."""
        stored = dest.store_with_flags(b"content", {"S", "R"}, message_id="abc")

        assert stored == "abc"
        assert cur_names(dest) == ["abc:2,RS"]
        assert (dest.cur / "abc:2,RS").read_bytes() == b"content"

    def test_store_leaves_tmp_empty(self, dest):
        """No file is left behind in tmp/."""
        dest.store_with_flags(b"content", set(), message_id="abc")

        assert list((dest.root / "tmp").iterdir()) == []

    def test_store_generates_unique_ids(self, dest):
        """Without an id each delivery gets a new one."""
        first = dest.store_with_flags(b"one", {"S"})
        second = dest.store_with_flags(b"two", {"S"})

        assert first != second
        assert dest.count_current() == 2

    def test_store_identical_duplicate_is_idempotent(self, dest):
        """Same id and content only updates the flags."""
        dest.store_with_flags(b"content", {"S"}, message_id="abc")

        dest.store_with_flags(b"content", {"S", "F"}, message_id="abc")

        assert cur_names(dest) == ["abc:2,FS"]

    def test_store_conflicting_duplicate(self, dest):
        """Same id with other content raises and keeps the original."""
        dest.store_with_flags(b"content", {"S"}, message_id="abc")

        with pytest.raises(MaildirStoreConflict):
            dest.store_with_flags(b"other content", {"S"}, message_id="abc")

        assert cur_names(dest) == ["abc:2,S"]
        assert (dest.cur / "abc:2,S").read_bytes() == b"content"

    def test_store_without_directories(self, tmp_path):
        """Delivery into a missing Maildir raises OSError."""
        with pytest.raises(OSError):
            Maildir(tmp_path / "missing").store_with_flags(b"x", set(), message_id="abc")

    def test_store_ignores_stale_tmp_file(self, dest):
        """A leftover file in tmp/ from an earlier process does not block delivery."""
        stale = dest.root / "tmp" / f"abc.{os.getpid()}"
        stale.write_bytes(b"half written")

        dest.store_with_flags(b"content", {"S"}, message_id="abc")

        assert cur_names(dest) == ["abc:2,S"]
        assert stale.read_bytes() == b"half written"

    def test_store_scans_cur_once(self, dest, monkeypatch):
        """Repeated deliveries list cur/ a single time."""
        add_message(dest, "existing", b"x", flags="S")
        scans = []
        scan_ids = dest._scan_ids

        def counting_scan():
            scans.append(1)
            return scan_ids()

        monkeypatch.setattr(dest, "_scan_ids", counting_scan)

        for n in range(5):
            dest.store_with_flags(f"body {n}".encode(), {"S"}, message_id=f"m{n}")
        dest.store_with_flags(b"body 0", {"S", "R"}, message_id="m0")

        assert len(scans) == 1
        assert dest.count_current() == 6
        assert dest.find("m0") == dest.cur / "m0:2,RS"
        assert dest.find("existing") == dest.cur / "existing:2,S"

    def test_find_after_delete(self, dest):
        """Deleted ids are no longer found."""
        dest.store_with_flags(b"content", {"S"}, message_id="abc")

        dest.delete("abc")

        assert dest.find("abc") is None
        dest.store_with_flags(b"new content", {"S"}, message_id="abc")
        assert (dest.cur / "abc:2,S").read_bytes() == b"new content"


class TestDelete:
    """Test message deletion."""

    def test_delete(self, source):
        """Delete removes only the given id."""
        add_message(source, "m1", make_message(None), flags="S")
        add_message(source, "m2", make_message(None), flags="S")

        source.delete("m1")

        assert cur_names(source) == ["m2:2,S"]

    def test_delete_missing(self, source):
        """Deleting an unknown id raises MaildirError."""
        with pytest.raises(MaildirError):
            source.delete("nope")

    def test_delete_not_a_maildir(self, tmp_path):
        """Deleting from a missing Maildir raises MaildirError."""
        with pytest.raises(MaildirError):
            Maildir(tmp_path / "nowhere").delete("m1")


class TestCreateInExistingRoot:
    """Test creating Maildir areas under existing or missing parents."""

    def test_missing_parents_are_created(self, tmp_path):
        """Parent directories of the root are created."""
        maildir = Maildir(tmp_path / "a" / "b" / "box")

        maildir.create_directories()

        assert maildir.exists()

    def test_existing_root_without_areas(self, tmp_path):
        """Areas are added under an existing bare root."""
        (tmp_path / "box").mkdir()
        maildir = Maildir(tmp_path / "box")

        maildir.create_directories()

        assert maildir.exists()

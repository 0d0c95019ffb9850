"""Maildir access layer: enumeration, atomic delivery and deletion."""

import itertools
import mailbox
import os
import socket
import time
from email.parser import BytesHeaderParser
from email.policy import compat32
from email.utils import parsedate_to_datetime
from datetime import timezone
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple, Union

from archive_maildir.models.mail_entry import MailEntry

INFO_SEPARATOR = mailbox.Maildir.colon + "2,"
AREAS = ("cur", "new", "tmp")

_delivery_counter = itertools.count()


class MaildirError(Exception):
    """Base exception for Maildir access errors."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MaildirEnumerationError(MaildirError):
    """Raised (or yielded) for a ``cur/`` entry that is not a readable message."""

    pass


class MaildirStoreConflict(MaildirError):
    """Raised when an id is already delivered with different content."""

    pass


class DateUnavailable(MaildirError):
    """Raised when the received date of a message cannot be determined."""

    pass


def split_filename(name: str) -> Tuple[str, FrozenSet[str]]:
    """
    Split a Maildir file name into its id and flag set.

    Args:
        name: Base name of a file in ``cur/``

    Returns:
        Tuple of (id, flags)

    Raises:
        ValueError: If the name has no id or carries invalid flags

    Examples:
        >>> split_filename("1463868505.38518452d49213cb409aa1db32f53184:2,S")
        ('1463868505.38518452d49213cb409aa1db32f53184', frozenset({'S'}))
    """
    if INFO_SEPARATOR in name:
        message_id, info = name.split(INFO_SEPARATOR, 1)
    elif mailbox.Maildir.colon in name:
        raise ValueError(f"Unsupported info section in {name!r}")
    else:
        message_id, info = name, ""

    if not message_id:
        raise ValueError(f"Missing id in {name!r}")
    if mailbox.Maildir.colon in message_id:
        raise ValueError(f"Unsupported id in {name!r}")
    if not all(flag.isascii() and flag.isalpha() for flag in info):
        raise ValueError(f"Invalid flags {info!r} in {name!r}")

    return message_id, frozenset(info)


def join_filename(message_id: str, flags: Iterable[str]) -> str:
    """Build a ``cur/`` file name from an id and a flag set."""
    return f"{message_id}{INFO_SEPARATOR}{''.join(sorted(set(flags)))}"


def parse_received_timestamp(path: Path) -> int:
    """
    Parse the delivery timestamp from the first ``Received`` header.

    The date is the part after the last ``;`` of the header value.

    Args:
        path: Path to the raw message file

    Returns:
        Seconds since epoch, UTC

    Raises:
        DateUnavailable: If the header is missing or its date is malformed
        OSError: If the file cannot be read
    """
    with open(path, "rb") as f:
        headers = BytesHeaderParser(policy=compat32).parse(f)

    received = headers.get("Received")
    if received is None:
        raise DateUnavailable("Received header is missing", path)

    received = " ".join(str(received).split())
    if ";" not in received:
        raise DateUnavailable(f"Received header has no date: {received!r}", path)

    date_text = received.rsplit(";", 1)[1].strip()
    try:
        received_at = parsedate_to_datetime(date_text)
    except (TypeError, ValueError, IndexError) as e:
        raise DateUnavailable(f"Invalid date {date_text!r} in Received header: {e}", path)
    if received_at is None:
        raise DateUnavailable(f"Invalid date {date_text!r} in Received header", path)

    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=timezone.utc)

    return int(received_at.timestamp())


class Maildir:
    """
    A directory-backed mailbox with ``cur/``, ``new/`` and ``tmp/`` areas.

    Only the ``cur/`` area is enumerated. Deliveries always land in ``cur/``
    with an explicit flag set.
    """

    def __init__(self, root: Union[str, Path]):
        """
        Initialize a Maildir handle. Nothing is created on disk.

        Args:
            root: Mailbox root directory
        """
        self.root = Path(root)
        # id -> cur/ file name, built on the first lookup
        self._index: Optional[Dict[str, str]] = None

    def __repr__(self) -> str:
        return f"Maildir({str(self.root)!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Maildir) and self.root == other.root

    def __hash__(self) -> int:
        return hash(self.root)

    @property
    def cur(self) -> Path:
        return self.root / "cur"

    def exists(self) -> bool:
        """Return True if the ``cur/`` area exists."""
        return self.cur.is_dir()

    def create_directories(self) -> None:
        """
        Create the mailbox root and its ``cur/``, ``new/``, ``tmp/`` areas.

        Idempotent.

        Raises:
            OSError: If the directories cannot be created
        """
        for area in AREAS:
            (self.root / area).mkdir(mode=0o700, parents=True, exist_ok=True)

    def list_current(self) -> Iterator[Union[MailEntry, MaildirEnumerationError]]:
        """
        Enumerate the ``cur/`` area.

        Yields:
            MailEntry for each message file, or MaildirEnumerationError for
            an entry that cannot be decoded. Each call starts a fresh scan.

        Raises:
            MaildirError: If ``cur/`` cannot be listed at all
        """
        try:
            names = sorted(os.listdir(self.cur))
        except OSError as e:
            raise MaildirError(f"Cannot list {self.cur}: {e}", self.root)

        for name in names:
            if name.startswith("."):
                continue

            path = self.cur / name
            if not path.is_file():
                yield MaildirEnumerationError(f"Not a message file: {path}", path)
                continue

            try:
                message_id, flags = split_filename(name)
            except ValueError as e:
                yield MaildirEnumerationError(str(e), path)
                continue

            yield MailEntry(id=message_id, flags=flags, path=path)

    def count_current(self) -> int:
        """Count message files in ``cur/``; 0 if the area does not exist."""
        if not self.exists():
            return 0
        return sum(
            1
            for name in os.listdir(self.cur)
            if not name.startswith(".") and (self.cur / name).is_file()
        )

    def find(self, message_id: str) -> Optional[Path]:
        """
        Return the ``cur/`` path holding ``message_id``, or None.

        ``cur/`` is scanned once per Maildir object; later deliveries and
        deletions through the same object keep the index current.
        """
        if self._index is None:
            if not self.exists():
                return None
            self._index = self._scan_ids()
        name = self._index.get(message_id)
        return self.cur / name if name is not None else None

    def store_with_flags(
        self,
        data: bytes,
        flags: Iterable[str],
        message_id: Optional[str] = None,
    ) -> str:
        """
        Atomically deliver a message into ``cur/`` with exactly ``flags``.

        The content is written to ``tmp/``, synced, then linked into
        ``cur/``, so a partially written file is never visible there.

        Args:
            data: Raw message content
            flags: Flag set to encode in the file name
            message_id: Id to reuse as the file basename; a new unique id
                is generated when omitted

        Returns:
            The id the message is stored under

        Raises:
            MaildirStoreConflict: If ``message_id`` is already stored with
                different content
            OSError: If the write fails
        """
        flags = frozenset(flags)
        if message_id is None:
            message_id = self._generate_id()

        existing = self.find(message_id)
        if existing is not None:
            return self._redeliver(existing, data, flags, message_id)

        target = self.cur / join_filename(message_id, flags)
        tmp_path = self.root / "tmp" / f"{message_id}.{os.getpid()}_{next(_delivery_counter)}.{time.time_ns()}"

        tmp_file = open(tmp_path, "xb")
        try:
            with tmp_file:
                tmp_file.write(data)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            try:
                os.link(tmp_path, target)
                os.unlink(tmp_path)
            except PermissionError:
                # no hard links on this filesystem
                if target.exists():
                    raise FileExistsError(f"{target} already exists")
                os.rename(tmp_path, target)
        except OSError:
            if tmp_path.exists():
                os.unlink(tmp_path)
            raise

        self._remember(message_id, target.name)
        return message_id

    def delete(self, message_id: str) -> None:
        """
        Remove a message by id.

        Raises:
            MaildirError: If no message with that id exists
            OSError: If the file cannot be removed
        """
        try:
            mailbox.Maildir(str(self.root), factory=None, create=False).remove(message_id)
        except KeyError:
            raise MaildirError(f"No message {message_id} in {self.root}", self.root)
        except mailbox.NoSuchMailboxError:
            raise MaildirError(f"Not a Maildir: {self.root}", self.root)
        if self._index is not None:
            self._index.pop(message_id, None)

    def _redeliver(self, existing: Path, data: bytes, flags: FrozenSet[str], message_id: str) -> str:
        """Handle delivery of an id that is already present in ``cur/``."""
        if existing.read_bytes() != data:
            raise MaildirStoreConflict(
                f"Message {message_id} already exists in {self.root} with different content",
                existing,
            )

        target = self.cur / join_filename(message_id, flags)
        if existing != target:
            os.rename(existing, target)
            self._remember(message_id, target.name)
        return message_id

    def _scan_ids(self) -> Dict[str, str]:
        index = {}
        for name in os.listdir(self.cur):
            try:
                found_id, _ = split_filename(name)
            except ValueError:
                continue
            index[found_id] = name
        return index

    def _remember(self, message_id: str, name: str) -> None:
        if self._index is not None:
            self._index[message_id] = name
        else:
            self._index = self._scan_ids()

    def _generate_id(self) -> str:
        """Generate a unique id in the conventional time.pid_counter.host form."""
        hostname = socket.gethostname().replace("/", r"\057").replace(":", r"\072")
        return f"{int(time.time())}.{os.getpid()}_{next(_delivery_counter)}.{hostname}"

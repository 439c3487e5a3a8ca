"""
Local state kept between runs.

Two files live in the configured state directory:

- "<prefix>.lastip" holds the last IP address successfully pushed to Linode.
- "<prefix>.log" is the result journal, one line per run.

Both are best-effort: a failure to read or write them never changes the
outcome of a run. No locking is done; the NAS runs the script serially.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Final

    from ddns_linode.models import UpdateResult


JOURNAL_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M %Z"


logger = logging.getLogger(__name__)


class LastIpStore:
    """
    The last known IP address record.

    Parameters
    ----------
    path : Path
        Location of the record file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> str | None:
        """
        Read the last known IP address.

        A missing or unreadable file is treated as "no prior record".

        Returns
        -------
        str | None
            The stored IP address, or None.
        """
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("[state] No last known IP in %s: %s", self.path, e)
            return None
        return value or None

    def matches(self, ip: str) -> bool:
        """Whether `ip` equals the stored IP address."""
        return self.read() == ip

    def write(self, ip: str) -> bool:
        """
        Overwrite the record with a new IP address.

        Parameters
        ----------
        ip : str
            The IP address to store.

        Returns
        -------
        bool
            True if the record was written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(ip, encoding="utf-8")
        except OSError as e:
            logger.warning("[state] Failed to store last known IP in %s: %s", self.path, e)
            return False
        return True


class ResultJournal:
    """
    Append-only log of run outcomes.

    Each line reads "<local-timestamp> : <result-code> : <message>".

    Parameters
    ----------
    path : Path
        Location of the journal file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @staticmethod
    def format_line(result: UpdateResult, when: datetime | None = None) -> str:
        """
        Format a journal line.

        Parameters
        ----------
        result : UpdateResult
            The outcome to record.
        when : datetime | None, optional
            Timestamp of the entry, defaults to the current local time.

        Returns
        -------
        str
            The line, including the trailing newline.
        """
        when = when or datetime.now().astimezone()
        return f"{when.strftime(JOURNAL_DATE_FORMAT)} : {result.code} : {result.message}\n"

    def append(self, result: UpdateResult) -> bool:
        """
        Append an outcome to the journal.

        Parameters
        ----------
        result : UpdateResult
            The outcome to record.

        Returns
        -------
        bool
            True if the line was written.
        """
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(self.format_line(result))
        except OSError as e:
            logger.warning("[state] Failed to append to %s: %s", self.path, e)
            return False
        return True

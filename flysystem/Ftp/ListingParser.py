from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Optional

from ..StorageAttributes import DirectoryAttributes, FileAttributes, StorageAttributes
from ..UnixVisibility import VisibilityConverter
from .Exceptions import InvalidListResponseReceived

SYSTEM_TYPE_WINDOWS = 'windows'
SYSTEM_TYPE_UNIX = 'unix'

MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

PERMISSION_VALUES = {'r': 4, 'w': 2, 'x': 1}

WINDOWS_DATE_PATTERN = re.compile(r'^[0-9]{2,4}-[0-9]{2}-[0-9]{2}')
SKIPPED_LINE_PATTERN = re.compile(r'.* \.(\.)?$|^total')
DIRECTORY_HEADER_PATTERN = re.compile(r'^.*:$')
DIRECTORY_HEADER_STRIP_PATTERN = re.compile(r'^\./*|:$')
LEADING_DIGITS_PATTERN = re.compile(r'\d+')

# Tried in order when the structured Windows date formats do not match.
GENERIC_DATE_FORMATS: List[str] = [
    '%m-%d-%y %I:%M%p',
    '%m-%d-%Y %I:%M%p',
    '%m-%d-%y %H:%M',
    '%m-%d-%Y %H:%M',
    '%Y-%m-%d %I:%M%p',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d %H:%M:%S',
    '%d-%m-%Y %H:%M',
]


class ListingParser:
    """Turns raw ``LIST -aln`` / ``LIST -alnR`` output into storage attributes.

    Both Unix (``ls -l`` style) and Windows/IIS (``MM-DD-YY HH:MMAM``) listings
    are understood. The dialect is taken from ``system_type`` when given,
    otherwise it is detected from the first entry and kept for the lifetime of
    the parser.
    """

    def __init__(
        self,
        visibility_converter: VisibilityConverter,
        timestamps_on_unix_listings_enabled: bool = False,
        system_type: Optional[str] = None,
    ) -> None:
        self.visibility_converter = visibility_converter
        self.timestamps_on_unix_listings_enabled = timestamps_on_unix_listings_enabled
        self.system_type = system_type

    def parse(self, listing: Iterable[str], prefix: str = '', root: str = '') -> Iterator[StorageAttributes]:
        """Lazily yield one attributes record per listing entry, in listing order.

        ``prefix`` is the logical directory that was listed. Recursive listings
        announce each directory with a ``path:`` header; when a server reports
        those headers as absolute paths, ``root`` (the prefixed root) is
        stripped from them.
        """
        base = prefix

        for item in listing:
            if item.strip() == '' or SKIPPED_LINE_PATTERN.search(item):
                continue

            if DIRECTORY_HEADER_PATTERN.match(item):
                base = self._header_base(item, root)
                continue

            yield self.parse_item(item, base)

    @staticmethod
    def _header_base(item: str, root: str) -> str:
        base = DIRECTORY_HEADER_STRIP_PATTERN.sub('', item)

        if root and base == root.rstrip('/'):
            base = ''
        elif root and base.startswith(root):
            base = base[len(root):]

        return base.strip('/')

    def parse_item(self, item: str, base: str = '') -> StorageAttributes:
        """Parse a single listing line."""
        if self.system_type is None:
            self.system_type = self.detect_system_type(item)

        if self.system_type == SYSTEM_TYPE_UNIX:
            return self._parse_unix_item(item, base)

        return self._parse_windows_item(item, base)

    @staticmethod
    def detect_system_type(item: str) -> str:
        return SYSTEM_TYPE_WINDOWS if WINDOWS_DATE_PATTERN.match(item) else SYSTEM_TYPE_UNIX

    def _parse_windows_item(self, item: str, base: str) -> StorageAttributes:
        parts = re.split(r'\s+', item.strip(), maxsplit=3)

        if len(parts) != 4:
            raise InvalidListResponseReceived(f"Metadata can't be parsed from item '{item}' , not enough parts.")

        date, time, size, name = parts
        path = self._join(base, name)

        if size == '<DIR>':
            return DirectoryAttributes(path)

        return FileAttributes(path, self._to_int(size), None, self._windows_timestamp(date, time))

    def _windows_timestamp(self, date: str, time: str) -> Optional[int]:
        date_format = '%m-%d-%y%I:%M%p' if len(date) == 8 else '%Y-%m-%d%H:%M'

        try:
            parsed: Optional[datetime] = datetime.strptime(date + time, date_format)
        except ValueError:
            parsed = self._parse_generic_date(f"{date} {time}")

        if parsed is None:
            return None

        return int(parsed.replace(tzinfo=timezone.utc).timestamp())

    @staticmethod
    def _parse_generic_date(value: str) -> Optional[datetime]:
        for date_format in GENERIC_DATE_FORMATS:
            try:
                return datetime.strptime(value, date_format)
            except ValueError:
                continue
        return None

    def _parse_unix_item(self, item: str, base: str) -> StorageAttributes:
        parts = re.split(r'\s+', item.strip(), maxsplit=8)

        if len(parts) != 9:
            raise InvalidListResponseReceived(f"Metadata can't be parsed from item '{item}' , not enough parts.")

        permissions, _links, _owner, _group, size, month, day, time_or_year, name = parts
        is_directory = permissions.startswith('d')
        mode = self.normalize_permissions(permissions)
        path = self._join(base, name)

        if is_directory:
            return DirectoryAttributes(path, self.visibility_converter.inverse_for_directory(mode))

        visibility = self.visibility_converter.inverse_for_file(mode)
        last_modified = None

        if self.timestamps_on_unix_listings_enabled:
            last_modified = self.normalize_unix_timestamp(month, day, time_or_year)

        return FileAttributes(path, self._to_int(size), visibility, last_modified)

    @staticmethod
    def normalize_permissions(permissions: str) -> int:
        """Convert an ``ls -l`` permission string such as ``-rw-r--r--`` to a mode."""
        mode = 0

        # Skip the type identifier, then walk the owner/group/other rwx triplets.
        for position, char in enumerate(permissions[1:10]):
            shift = 3 * (2 - position // 3)
            mode += PERMISSION_VALUES.get(char, 0) << shift

        return mode

    @staticmethod
    def normalize_unix_timestamp(month: str, day: str, time_or_year: str) -> int:
        """Build a UTC timestamp from the month/day/time-or-year listing columns.

        Entries without a year are assumed to belong to the current year.
        """
        try:
            if time_or_year.isdigit():
                year, hour, minute = int(time_or_year), 0, 0
            else:
                year = datetime.now(timezone.utc).year
                hour_part, minute_part = time_or_year.split(':')
                hour, minute = int(hour_part), int(minute_part)

            month_number = MONTHS[month[:3].lower()]
            moment = datetime(year, month_number, int(day), hour, minute, 0, tzinfo=timezone.utc)
        except (KeyError, ValueError) as e:
            raise InvalidListResponseReceived(
                f"Timestamp can't be parsed from '{month} {day} {time_or_year}'."
            ) from e

        return int(moment.timestamp())

    @staticmethod
    def _to_int(value: str) -> int:
        # Device entries (`4,`) and vendor suffixes keep their leading digits.
        match = LEADING_DIGITS_PATTERN.match(value)
        return int(match.group()) if match else 0

    @staticmethod
    def _join(base: str, name: str) -> str:
        return name if base == '' else base.rstrip('/') + '/' + name

"""
Regex pattern registry for CI log extraction.

Every pattern here is compiled once at import time and only ever read,
so the parser can be called from any number of threads at once.

To support a new CI system:
  - Add a member to LogFormat
  - Add its patterns below
  - Register a strategy for it in strategies.STRATEGIES
"""

import re
from enum import Enum


class LogFormat(Enum):
    GITHUB_ACTIONS = "github-actions"
    JENKINS = "jenkins"
    TEAMCITY = "teamcity"
    GENERIC = "generic"

    @classmethod
    def from_key(cls, key: str | None) -> "LogFormat":
        """Resolve a user-supplied format key. Anything unrecognized is GENERIC."""
        if not isinstance(key, str):
            return cls.GENERIC
        try:
            return cls(key.lower())
        except ValueError:
            return cls.GENERIC


# Lines end at \r\n, \n or a bare \r. str.splitlines() would also break on
# form feeds, vertical tabs and unicode separators, which shifts line numbers.
LINE_BREAK = re.compile(r"\r\n|\n|\r")


# ---------------------------------------------------------------------------
# GitHub Actions workflow commands
# ---------------------------------------------------------------------------

GHA_GROUP = re.compile(r"##\[group\](.+?)$")
GHA_ERROR = re.compile(r"##\[error\](.+?)$")
GHA_WARNING = re.compile(r"##\[warning\](.+?)$")

# Lines (group line included) scanned for an error after a group opens
GHA_LOOKAHEAD = 10


# ---------------------------------------------------------------------------
# Jenkins pipeline console output
# ---------------------------------------------------------------------------

JENKINS_STEP = re.compile(r"\[Pipeline\] (?:stage|step)\s*\{?\s*(.+)")
JENKINS_ERROR = re.compile(r"ERROR:\s*(.+)")


# ---------------------------------------------------------------------------
# TeamCity service messages
# ---------------------------------------------------------------------------

TEAMCITY_BLOCK_OPENED = re.compile(r"##teamcity\[blockOpened name='(.+?)'\]")
TEAMCITY_ERROR = re.compile(r"##teamcity\[message text='(.+?)' status='ERROR'\]")


# ---------------------------------------------------------------------------
# Generic: labeled "keyword: message" lines
# ---------------------------------------------------------------------------

GENERIC_ERROR = re.compile(r"(error|exception|failed|failure):\s*(.+)", re.I)
GENERIC_WARNING = re.compile(r"(warning|warn):\s*(.+)", re.I)

GENERIC_STEP_KEYWORDS = ("step", "stage")
GENERIC_STEP_PREFIXES = ("===", "---")

FALLBACK_STEP_NAME = "Build Process"


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}", re.ASCII)

# strptime layouts, tried in order before the ISO-8601 fallback in
# timestamps.parse_timestamp
MILLIS_UTC_LAYOUT = "%Y-%m-%dT%H:%M:%S.%fZ"
SPACE_LAYOUT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_LAYOUTS = (MILLIS_UTC_LAYOUT, SPACE_LAYOUT)

# Space-separated dates whose day overflows the month (2024-02-30) resolve
# to the month's last day. The T-separated ISO form stays strict.
SPACE_DATE_TIME = re.compile(r"(\d{4})-(\d{2})-(\d{2}) \d{2}:\d{2}:\d{2}", re.ASCII)

"""Plotwatch constants."""

from __future__ import annotations

# Host addressing
DEFAULT_PORT = 8484
HOSTS_ENV_VAR = "PLOTWATCH_HOSTS"

# Polling
REQUEST_TIMEOUT_S = 10
POLL_INTERVAL_S = 30
FETCH_CHUNK_SIZE = 64 * 1024

# Job phases: 5 timestamps bound 4 phases
PHASE_COUNT = 4
PHASE_TIMESTAMP_COUNT = PHASE_COUNT + 1
# Latest representable phase timestamp (9999-12-31 23:59:59 UTC)
MAX_PHASE_TIMESTAMP = 253_402_300_799

# Directory stats
DIR_KEY_SEP = "\0"  # never valid inside a filesystem path
UNADVERTISED_BYTES = 2**64 - 1

# Display
SHORT_ID_MIN_LEN = 20
SHORT_ID_PART_LEN = 10
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_HOST_ROWS = 4
CURSES_TICK_MS = 200

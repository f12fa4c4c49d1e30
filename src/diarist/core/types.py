"""Shared type aliases used across diarist."""

import datetime as dt
from pathlib import Path

# Path types
PathLike = str | Path

# Anything that names a calendar day: an ISO "YYYY-MM-DD" string or a date
DateLike = str | dt.date

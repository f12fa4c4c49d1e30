"""diarist: a local-first personal journal.

Entry storage, search and analytics for dated, tagged, mood-annotated
journal entries.
"""

__version__ = "0.1.0"

"""Small helpers shared by the core and journal packages."""

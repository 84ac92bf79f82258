"""Tools exposed to generation agents."""

"""Interactive query console for the Duka engine."""

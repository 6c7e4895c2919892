"""CSV export of rolled-up company scores."""

"""Input loading for audit score exports."""

"""Feature packages for the DAM bulk-action console."""

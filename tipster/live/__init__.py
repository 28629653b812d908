"""Change notifications and live recomputed views."""

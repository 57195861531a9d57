"""Domain models for IntervalPro CLI."""

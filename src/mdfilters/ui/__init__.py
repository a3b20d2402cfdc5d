"""User-facing interfaces built on top of the filter pipeline."""

"""Entry points that run folder diffs against configured drives."""

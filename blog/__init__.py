"""Blog post persistence and search layer."""

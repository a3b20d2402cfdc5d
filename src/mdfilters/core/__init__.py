"""Core building blocks shared by every document filter."""

"""
Core engine for turning round requests into tables or saved files.

The resolver validates requests locally; the `RoundManager` then runs the
login, download, extraction and reading steps for a single call.
"""

"""Command-line orchestration for lyricsmith."""

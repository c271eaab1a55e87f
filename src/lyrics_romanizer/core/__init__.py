"""Core romanization and song lookup components."""

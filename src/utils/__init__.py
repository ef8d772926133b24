"""
Utility modules for StoryPulse.

Cross-cutting concerns:
- Text: Answer cleaning, canonical normalization, rounding
- Storage: File I/O helpers for data persistence
"""

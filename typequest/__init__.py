"""
TypeQuest Engine.

Pure, platform-independent typing-performance and progression core:
- analytics: WPM/accuracy metrics and per-key statistics
- session: single-exercise state machine driven by keystroke/tick events
- lesson: lesson sequencing, pass/fail verdicts and remediation
- curriculum: drill synthesis and the built-in lesson catalog
- progression: XP/level, streaks, weak keys and review scheduling
"""

__version__ = "1.0.0"

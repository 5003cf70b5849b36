"""
Developer CLI for the TypeQuest engine.
"""

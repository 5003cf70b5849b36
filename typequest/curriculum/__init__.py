"""
Curriculum: drill generation, practice corpora and the built-in lesson catalog.
"""

from typequest.curriculum.catalog import CurriculumContentStore, build_catalog
from typequest.curriculum.corpus import KeyColumn, find_words, sentences_for
from typequest.curriculum.exercise_generator import ContextLevel, ExerciseGenerator

__all__ = [
    "CurriculumContentStore",
    "build_catalog",
    "ContextLevel",
    "ExerciseGenerator",
    "KeyColumn",
    "find_words",
    "sentences_for",
]

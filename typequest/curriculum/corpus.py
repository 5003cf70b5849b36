"""
Practice corpora: n-grams, word frequencies, sentences and finger columns.

Static reference data used by the exercise generator and the built-in
curriculum content store.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

# Most frequent English bigrams, in frequency order
COMMON_NGRAMS = ["th", "he", "in", "er", "an", "re", "on", "at", "en", "nd"]

FALLBACK_NGRAM_CONTENT = "th he in er"
FALLBACK_WORDS = ["the", "and", "for"]

WORD_FREQUENCIES: dict[str, int] = {
    "the": 1000000, "be": 800000, "to": 700000, "of": 600000, "and": 500000,
    "that": 400000, "have": 300000, "i": 200000, "it": 150000, "for": 140000,
    "not": 130000, "on": 120000, "with": 110000, "he": 100000, "as": 90000,
    "you": 80000, "do": 75000, "at": 70000, "this": 65000, "but": 60000,
    "his": 55000, "by": 50000, "from": 45000, "they": 40000, "we": 35000,
    "say": 30000, "her": 25000, "she": 20000, "or": 18000, "will": 16000,
    "an": 15000, "my": 14000, "one": 13000, "all": 12000, "would": 11000,
    "there": 10000, "their": 9000, "what": 8000, "so": 7000, "up": 6000,
    "out": 5500, "if": 5000, "about": 4500, "who": 4000, "get": 3500,
    "which": 3000, "go": 2500, "me": 2000, "when": 1500, "make": 1000,
    "can": 900, "like": 800, "time": 750, "no": 700, "just": 650,
    "him": 600, "know": 550, "take": 500, "people": 450, "into": 400,
    "year": 350, "your": 300, "good": 250, "some": 200, "could": 150,
    "them": 100, "see": 90, "other": 80, "than": 70, "then": 60,
    "now": 50, "look": 40, "only": 30, "come": 20, "its": 10,
}

# Home-row friendly words so early lessons have real vocabulary
BEGINNER_WORDS = [
    "as", "dad", "sad", "lad", "lass", "fall", "all", "ask", "add", "has", "had",
    "glass", "flag", "flash", "half", "hall", "slash", "gash", "jag", "salad",
    "fads", "lads", "dads",
]

PRACTICE_SENTENCES: dict[str, list[str]] = {
    "en": [
        "The quick brown fox jumps over the lazy dog.",
        "Pack my box with five dozen liquor jugs.",
        "How vexingly quick daft zebras jump!",
        "The five boxing wizards jump quickly.",
        "Sphinx of black quartz, judge my vow.",
        "Just keep examining every low bid quoted for zinc etchings.",
        "A wizard's job is to vex chumps quickly in fog.",
        "By Jove, my quick study of lexicography won a prize!",
        "Sympathizing would fix Quaker objectives.",
    ],
    "de": [
        "Victor jagt zwölf Boxkämpfer quer über den großen Sylter Deich.",
        "Falsches Üben von Xylophonmusik quält jeden größeren Zwerg.",
        "Die heiße Zypernsonne quälte Max und Victoria ja böse.",
        "Jeder wackere Bayer vertilgt bequem zwo Pfund Kalbshaxen.",
        "Franz jagt im komplett verwahrlosten Taxi quer durch Bayern.",
    ],
    "fr": [
        "Portez ce vieux whisky au juge blond qui fume.",
        "Le vif zéphyr jubile sur les kumquats du clown gracieux.",
        "Voyez le brick géant que j'examine près du wharf.",
        "Buvez de ce whisky que le patron veut sans glaçons.",
    ],
    "es": [
        "Quiere la boca exhausta vid, kiwi, piña y fugaz jamón.",
        "Fabio me exige, sin tapujos, que añada cerveza al whisky.",
        "Un juguetón watussi arrastró mi feliz banco por el campo.",
    ],
    "it": [
        "Pranzo d'acqua fa volti sghembi.",
        "Quel fez sghembo copre davanti.",
        "Ma la volpe, col suo balzo, ha raggiunto il quieto Fido.",
        "Non dire gatto se non ce l'hai nel sacco.",
    ],
}


class KeyColumn(str, Enum):
    """Finger column on a QWERTY keyboard."""

    LEFT_PINKY = "left_pinky"
    LEFT_RING = "left_ring"
    LEFT_MIDDLE = "left_middle"
    LEFT_INDEX = "left_index"
    RIGHT_INDEX = "right_index"
    RIGHT_MIDDLE = "right_middle"
    RIGHT_RING = "right_ring"
    RIGHT_PINKY = "right_pinky"

    @property
    def keys(self) -> list[str]:
        return list(COLUMN_KEYS[self])


COLUMN_KEYS: dict[KeyColumn, str] = {
    KeyColumn.LEFT_PINKY: "qaz1",
    KeyColumn.LEFT_RING: "wsx2",
    KeyColumn.LEFT_MIDDLE: "edc3",
    KeyColumn.LEFT_INDEX: "rfvtgb45",
    KeyColumn.RIGHT_INDEX: "yhnujm67",
    KeyColumn.RIGHT_MIDDLE: "ik,8",
    KeyColumn.RIGHT_RING: "ol.9",
    KeyColumn.RIGHT_PINKY: "p;/0",
}


def sentences_for(language_code: str) -> list[str]:
    """Practice sentences for a language, English when unsupported."""
    return list(PRACTICE_SENTENCES.get(language_code.lower(), PRACTICE_SENTENCES["en"]))


def find_words(containing: str, min_frequency: int = 0, limit: int = 10) -> list[str]:
    """Most frequent words containing an n-gram."""
    needle = containing.lower()
    matches = [
        (word, freq)
        for word, freq in WORD_FREQUENCIES.items()
        if needle in word and freq >= min_frequency
    ]
    matches.sort(key=lambda item: item[1], reverse=True)
    return [word for word, _ in matches[:limit]]


def writable_words(allowed_chars: Iterable[str]) -> list[str]:
    """
    Words made only of the allowed characters.

    Beginner words come first, then frequency-ordered vocabulary.
    """
    allowed = {c.lower() for c in allowed_chars}
    seen: set[str] = set()
    words: list[str] = []
    for word in [*BEGINNER_WORDS, *sorted(WORD_FREQUENCIES, key=WORD_FREQUENCIES.get, reverse=True)]:
        if word in seen:
            continue
        seen.add(word)
        if word and all(char in allowed for char in word):
            words.append(word)
    return words


def columns_for_keys(keys: Iterable[str]) -> list[KeyColumn]:
    """Finger columns touched by the given keys, in keyboard order."""
    wanted = {k.lower() for k in keys}
    return [column for column, chars in COLUMN_KEYS.items() if wanted.intersection(chars)]

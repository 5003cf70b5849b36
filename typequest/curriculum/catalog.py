"""
Built-in curriculum content store.

Six stages of lessons, from the home row through numbers and symbols.
Each stage ends in a gatekeeper lesson that must be passed before the
next stage unlocks; inside a stage lessons unlock one after another.

CurriculumContentStore satisfies the ContentStore protocol, so a
LessonRunner can use it directly in place of an external store.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from loguru import logger

from typequest.config import Settings, get_settings
from typequest.core.errors import UnknownLessonError
from typequest.core.models import (
    Exercise,
    ExerciseType,
    Lesson,
    LessonDifficulty,
    Metric,
    MetricTarget,
    PassingRequirements,
    UserContext,
)
from typequest.curriculum import corpus
from typequest.curriculum.exercise_generator import ContextLevel, ExerciseGenerator

# (module_id, lesson name, content); lesson order follows list position per module
STAGE_LESSONS: dict[int, list[tuple[str, str, str]]] = {
    1: [
        ("1.1", "A & S Keys", "aaa sss aaa sss as sa as sa"),
        ("1.1", "D & F Keys", "ddd fff ddd fff df fd df fd"),
        ("1.1", "Left Hand Practice", "asdf asdf fdsa fdsa sad fad"),
        ("1.2", "J & K Keys", "jjj kkk jjj kkk jk kj jk kj"),
        ("1.2", "L & ; Keys", "lll ;;; lll ;;; l; ;l l; ;l"),
        ("1.2", "Right Hand Practice", "jkl; jkl; ;lkj ;lkj"),
        ("1.3", "Full Home Row", "asdf jkl; asdf jkl; sad dad lad ask"),
        ("1.3", "Home Row Speed", "all fall flask salad jaffa"),
    ],
    2: [
        ("2.1", "Q & W Keys", "qqq www qqq www qw wq quick wake"),
        ("2.1", "E & R Keys", "eee rrr eee rrr er re were eer"),
        ("2.1", "T Key", "ttt ttt the that tree treat"),
        ("2.2", "Y & U Keys", "yyy uuu yyy uuu yu uy you your"),
        ("2.2", "I & O Keys", "iii ooo iii ooo io oi into oil"),
        ("2.2", "P Key", "ppp ppp pip poppur pipe paper"),
        ("2.3", "Full Top Row", "qwerty uiop qwertyuiop typewriter"),
        ("2.3", "Home + Top Flow", "quiet power write proper tower"),
    ],
    3: [
        ("3.1", "Z & X Keys", "zzz xxx zzz xxx zx xz zero fox"),
        ("3.1", "C & V Keys", "ccc vvv ccc vvv cv vc cave vice"),
        ("3.1", "B Key", "bbb bbb bob big bag ball basic"),
        ("3.2", "N & M Keys", "nnn mmm nnn mmm nm mn name main"),
        ("3.2", "Comma & Period", ",,, ... ,,, ... ,. ., one, two."),
        ("3.2", "Slash Key", "/// /// and/or yes/no on/off"),
        ("3.3", "Common Pairs: th, he", "th th th the that this then he he he"),
        ("3.3", "Common Pairs: in, er", "in in in re re re inner error"),
        ("3.3", "Common Pairs: an, on", "an an an on on on and one can"),
        ("3.3", "Common Pairs: at, en", "at at at en en en eaten attend"),
        ("3.3", "N-Gram Review", "the and for are but not you all"),
    ],
    4: [
        ("4.1", "High Frequency Set 1", "the and for are but not you all"),
        ("4.1", "High Frequency Set 2", "can had her was one our out day"),
        ("4.1", "High Frequency Set 3", "get has him his how its may new"),
        ("4.1", "High Frequency Set 4", "now old see two way who boy did"),
        ("4.1", "High Frequency Set 5", "let put say she too use man own"),
        ("4.2", "5-Letter Words Set 1", "about after again being below could"),
        ("4.2", "5-Letter Words Set 2", "first found great house large learn"),
        ("4.2", "5-Letter Words Set 3", "never other place right small sound"),
        ("4.2", "5-Letter Words Set 4", "still study their there these thing"),
        ("4.2", "5-Letter Words Set 5", "think three water where which while"),
        ("4.3", "30-Second Sprint", "the and for are but not you all can had her was one our out day"),
        ("4.3", "60-Second Challenge", "the quick brown fox jumps over the lazy dog pack my box with five dozen"),
    ],
    5: [
        ("5.1", "Basic Statements", "The cat sat on the mat. I like to read books."),
        ("5.1", "Questions", "How are you today? What time is it now?"),
        ("5.1", "Commands", "Please close the door. Turn on the light."),
        ("5.2", "Conjunctions", "I went to the store, and I bought some bread."),
        ("5.2", "Complex Ideas", "Although it was raining, we decided to go outside."),
        ("5.3", "Short Paragraphs", "The sun was setting over the horizon. Birds flew home to their nests."),
        ("5.3", "Professional Writing", "Please find attached the quarterly report. Let me know if you have questions."),
    ],
    6: [
        ("6.1", "1 & 2 Keys", "111 222 111 222 12 21 12 21"),
        ("6.1", "3 & 4 Keys", "333 444 333 444 34 43 34 43"),
        ("6.1", "5 & 6 Keys", "555 666 555 666 56 65 56 65"),
        ("6.1", "7 & 8 Keys", "777 888 777 888 78 87 78 87"),
        ("6.1", "9 & 0 Keys", "999 000 999 000 90 09 90 09"),
        ("6.2", "! @ # $", "!!! @@@ ### $$$ !@#$ $#@!"),
        ("6.2", "% ^ & *", "%%% ^^^ &&& *** %^&* *&^%"),
        ("6.2", "( ) - =", "((( ))) --- === (test) a-b c=d"),
        ("6.2", "_ + [ ]", "___ +++ [[[ ]]] _test_ [item]"),
        ("6.3", "Numbers & Letters", "abc123 def456 ghi789 jkl0"),
        ("6.3", "Full Keyboard", "The quick brown fox jumps over 1,234 lazy dogs!"),
    ],
}

STAGE_NAMES = {
    1: "Home Row Foundation",
    2: "Top Row Expansion",
    3: "Bottom Row & N-Grams",
    4: "Word Building",
    5: "Sentence Flow",
    6: "Numbers & Symbols",
}

STAGE_DIFFICULTY = {
    1: LessonDifficulty.BEGINNER,
    2: LessonDifficulty.ELEMENTARY,
    3: LessonDifficulty.INTERMEDIATE,
    4: LessonDifficulty.INTERMEDIATE,
    5: LessonDifficulty.ADVANCED,
    6: LessonDifficulty.ADVANCED,
}

MAIN_ANCHOR_SECONDS = 180
MAX_WARMUP_COLUMNS = 2
WARMUP_DIFFICULTY = 0.7
COLUMN_WARMUP_DIFFICULTY = 0.8

_TYPEABLE_KEYS = set("".join(corpus.COLUMN_KEYS.values()))


def _deduce_keys(name: str, content: str) -> list[str]:
    """Keys a lesson drills: single characters named in the title, else its content."""
    parts = name.replace("&", " ").split()
    keys = [p.lower() for p in parts if len(p) == 1 and p.lower() in _TYPEABLE_KEYS]
    if not keys:
        keys = [c for c in content.lower() if c in _TYPEABLE_KEYS]
    return list(dict.fromkeys(keys))


def build_lesson(stage_id: int, module_id: str, name: str, order: int, content: str) -> Lesson:
    """Create a catalog lesson with requirements scaled by stage."""
    tokens = content.split(" ")
    return Lesson(
        id=f"{module_id}.{order}",
        name=name,
        description=f"Practice {name.lower()}",
        stage_id=stage_id,
        module_id=module_id,
        order=order,
        difficulty=STAGE_DIFFICULTY.get(stage_id, LessonDifficulty.BEGINNER),
        content_pattern=content,
        passing_requirements=PassingRequirements(
            min_accuracy=85 + stage_id * 2,
            min_wpm=10 + stage_id * 3,
        ),
        required_keys=_deduce_keys(name, content) or None,
        target_ngrams=[t for t in tokens if 2 <= len(t) <= 3],
        target_words=[t for t in tokens if len(t) > 3],
    )


def build_catalog() -> list[Lesson]:
    """All built-in lessons in curriculum order; the last lesson of each stage is its gatekeeper."""
    lessons: list[Lesson] = []
    for stage_id, entries in STAGE_LESSONS.items():
        orders: dict[str, int] = {}
        stage_lessons = []
        for module_id, name, content in entries:
            orders[module_id] = orders.get(module_id, 0) + 1
            stage_lessons.append(build_lesson(stage_id, module_id, name, orders[module_id], content))

        pool = [lesson.content_pattern for lesson in stage_lessons]
        stage_lessons[-1] = stage_lessons[-1].model_copy(
            update={"is_gatekeeper": True, "content_pool": pool}
        )
        lessons.extend(stage_lessons)
    return lessons


def _lesson_sort_key(lesson: Lesson) -> tuple[int, tuple[int, ...], int]:
    module = tuple(int(part) for part in lesson.module_id.split(".") if part.isdigit())
    return (lesson.stage_id, module, lesson.order)


class CurriculumContentStore:
    """
    ContentStore over the built-in catalog.

    Exercise sets are warmup + main + cooldown:
    - warmup: anchor review of the lesson keys, plus up to two finger column
      drills once past stage 1
    - main: chosen by stage (anchors, columns, n-grams, words, sentences),
      falling back to the lesson's static pattern when a stage yields nothing
    - cooldown: a word drill over the lesson's words/keys
    """

    def __init__(
        self,
        generator: ExerciseGenerator | None = None,
        lessons: Iterable[Lesson] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.generator = generator or ExerciseGenerator(settings=self.settings)
        catalog = list(lessons) if lessons is not None else build_catalog()
        self._lessons: dict[str, Lesson] = {lesson.id: lesson for lesson in catalog}

    # ------------------------------------------------------------------
    # ContentStore protocol
    # ------------------------------------------------------------------

    def get_lesson(self, lesson_id: str) -> Lesson:
        lesson = self._lessons.get(lesson_id)
        if lesson is None:
            raise UnknownLessonError(lesson_id)
        return lesson

    def sentences(self, language_code: str) -> list[str]:
        return corpus.sentences_for(language_code)

    def generate_exercises(self, lesson: Lesson, user_context: UserContext) -> list[Exercise]:
        exercises = [
            *self._warmup(lesson),
            *self._main(lesson, user_context),
            *self._cooldown(lesson),
        ]
        logger.debug(f"Generated {len(exercises)} exercises for lesson {lesson.id}")
        return exercises

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def lessons(self, stage_id: int | None = None) -> list[Lesson]:
        """Lessons in curriculum order, optionally for one stage."""
        ordered = sorted(self._lessons.values(), key=_lesson_sort_key)
        if stage_id is None:
            return ordered
        return [lesson for lesson in ordered if lesson.stage_id == stage_id]

    def stage_ids(self) -> list[int]:
        return sorted({lesson.stage_id for lesson in self._lessons.values()})

    def gatekeeper(self, stage_id: int) -> Lesson | None:
        return next((lesson for lesson in self.lessons(stage_id) if lesson.is_gatekeeper), None)

    def add_lesson(self, lesson: Lesson) -> None:
        """Register an extra lesson, e.g. a generated adaptive lesson."""
        self._lessons[lesson.id] = lesson

    def is_lesson_unlocked(self, lesson: Lesson, completed: set[str] | frozenset[str]) -> bool:
        """
        Check whether a lesson can be started.

        The very first lesson is always open. A lesson in stage N > 1 needs
        stage N-1's gatekeeper passed; inside a stage, the lesson before it
        must be completed.
        """
        if lesson.stage_id == 1 and lesson.order == 1 and lesson.module_id == "1.1":
            return True

        if lesson.stage_id > 1:
            gate = self.gatekeeper(lesson.stage_id - 1)
            if gate is not None and gate.id not in completed:
                return False

        stage_lessons = self.lessons(lesson.stage_id)
        ids = [candidate.id for candidate in stage_lessons]
        if lesson.id in ids:
            index = ids.index(lesson.id)
            if index > 0:
                return ids[index - 1] in completed
        return True

    def next_lesson(self, completed: set[str] | frozenset[str]) -> Lesson | None:
        """First unlocked lesson not yet completed, in curriculum order."""
        for lesson in self.lessons():
            if lesson.id not in completed and self.is_lesson_unlocked(lesson, completed):
                return lesson
        return None

    # ------------------------------------------------------------------
    # Exercise phases
    # ------------------------------------------------------------------

    def _columns(self, keys: Sequence[str]) -> list[corpus.KeyColumn]:
        return corpus.columns_for_keys(keys)

    def _warmup(self, lesson: Lesson) -> list[Exercise]:
        if not lesson.has_required_keys:
            return []

        multiplier = lesson.difficulty.xp_multiplier
        keys = lesson.required_keys or []
        warmups = [
            self.generator.anchor_drill(
                keys,
                difficulty=multiplier * WARMUP_DIFFICULTY,
                duration=self.settings.anchor_drill_seconds,
            )
        ]
        if lesson.stage_id > 1:
            for column in self._columns(keys)[:MAX_WARMUP_COLUMNS]:
                warmups.append(
                    self.generator.column_drill(column, multiplier * COLUMN_WARMUP_DIFFICULTY)
                )
        return warmups

    def _main(self, lesson: Lesson, user_context: UserContext) -> list[Exercise]:
        multiplier = lesson.difficulty.xp_multiplier
        keys = lesson.required_keys or []
        main: list[Exercise] = []

        if lesson.stage_id == 1:
            main.append(self.generator.anchor_drill(keys, multiplier, MAIN_ANCHOR_SECONDS))
        elif lesson.stage_id == 2:
            for column in self._columns(keys):
                main.append(self.generator.column_drill(column, multiplier))
        elif lesson.stage_id == 3:
            for level in ContextLevel:
                main.append(self.generator.ngram_drill(lesson.target_ngrams, level, multiplier))
        elif lesson.stage_id == 4:
            main.append(self.generator.word_drill(lesson.target_words, allowed_keys=keys))
        elif lesson.stage_id in (5, 6):
            language = user_context.language or self.settings.default_language
            main.append(self.generator.sentence_drill(self.sentences(language)))

        if not main and lesson.content_pattern:
            content = lesson.content_pattern
            if lesson.is_gatekeeper and lesson.content_pool:
                content = self.generator.rng.choice(lesson.content_pool)
            main.append(
                Exercise(
                    type=ExerciseType.SENTENCE,
                    content=content,
                    target_metric=MetricTarget(
                        Metric.ACCURACY, lesson.passing_requirements.min_accuracy
                    ),
                    repetitions=1,
                )
            )
        return main

    def _cooldown(self, lesson: Lesson) -> list[Exercise]:
        return [
            self.generator.word_drill(
                lesson.target_words,
                allowed_keys=lesson.required_keys,
            )
        ]

"""Quiz engine: adaptive question generation and answer checking."""
import random
from typing import Optional

from loguru import logger

from vocab_drill.models import (
    Choice, ChoiceQuestion, Difficulty, DragDropQuestion, DragWord, DropTarget,
    Grade, ItemProgress, LearningStatus, QuizType, TypeDistribution,
    TypeInQuestion, VocabularyItem,
)
from vocab_drill.progress import lookup_progress
from vocab_drill.selector import select_for_session
from vocab_drill.settings import (
    CHOICE_OPTIONS, DEFAULT_TYPE_DISTRIBUTION, DRAG_DROP_ITEMS, SCORE_CORRECT,
    SCORE_INCORRECT, TIME_BONUS, TIME_BONUS_THRESHOLD,
)
from vocab_drill.sm2 import now_ms, round_half_up


# --- Difficulty ---


def type_in_difficulty(progress: ItemProgress) -> Difficulty:
    if progress.status == LearningStatus.NEW or progress.correct_count == 0:
        return Difficulty.EASY
    elif progress.incorrect_count > progress.correct_count / 2:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def choice_difficulty(progress: ItemProgress) -> Difficulty:
    if progress.status == LearningStatus.NEW or progress.correct_count < 2:
        return Difficulty.EASY
    elif progress.incorrect_count > progress.correct_count / 2:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def drag_drop_difficulty(progress: ItemProgress) -> Difficulty:
    if progress.status == LearningStatus.NEW or progress.correct_count < 3:
        return Difficulty.EASY
    elif progress.incorrect_count > 0:
        return Difficulty.MEDIUM
    return Difficulty.HARD


# --- Builders ---


def make_hint(word: str, difficulty: Difficulty) -> Optional[str]:
    if difficulty == Difficulty.EASY:
        return word[:1] + "_" * max(len(word) - 1, 0)
    elif difficulty == Difficulty.MEDIUM:
        return word[:1]
    return None


def build_type_in(item: VocabularyItem, difficulty: Difficulty) -> TypeInQuestion:
    return TypeInQuestion(
        id=f"typein-{item.id}",
        word_id=item.id,
        prompt=item.definition,
        answer=item.word,
        difficulty=difficulty,
        hint=make_hint(item.word, difficulty),
    )


def _is_related(item: VocabularyItem, other: VocabularyItem) -> bool:
    item_syns = {s.lower() for s in item.synonyms}
    other_syns = {s.lower() for s in other.synonyms}
    if other.word.lower() in item_syns or item.word.lower() in other_syns:
        return True
    return _same_pos(item, other)


def _same_pos(item: VocabularyItem, other: VocabularyItem) -> bool:
    return item.part_of_speech is not None and item.part_of_speech == other.part_of_speech


def pick_distractors(
    item: VocabularyItem,
    pool: list[VocabularyItem],
    difficulty: Difficulty,
    wanted: int,
    rng: random.Random,
) -> list[VocabularyItem]:
    """Pick up to ``wanted`` wrong options for a choice question.

    EASY draws at random. MEDIUM prefers the same part of speech and HARD
    prefers synonyms or the same part of speech; both fill as many slots as
    they can from those and backfill the rest at random.
    """
    others = [v for v in pool if v.id != item.id]
    wanted = max(0, min(wanted, len(others)))
    if difficulty == Difficulty.EASY:
        return rng.sample(others, wanted)

    match = _same_pos if difficulty == Difficulty.MEDIUM else _is_related
    preferred = [v for v in others if match(item, v)]
    taken = rng.sample(preferred, min(len(preferred), wanted))
    taken_ids = {v.id for v in taken}
    rest = [v for v in others if v.id not in taken_ids]
    return taken + rng.sample(rest, wanted - len(taken))


def build_choice(
    item: VocabularyItem,
    pool: list[VocabularyItem],
    difficulty: Difficulty,
    rng: random.Random,
) -> ChoiceQuestion:
    option_count = CHOICE_OPTIONS[difficulty]
    distractors = pick_distractors(item, pool, difficulty, option_count - 1, rng)
    choices = [Choice(id=item.id, content=item.word, is_correct=True)]
    choices += [Choice(id=v.id, content=v.word, is_correct=False) for v in distractors]
    rng.shuffle(choices)
    return ChoiceQuestion(
        id=f"choice-{item.id}",
        word_id=item.id,
        prompt=item.definition,
        answer=item.word,
        difficulty=difficulty,
        choices=tuple(choices),
    )


def build_drag_drop(
    item: VocabularyItem,
    pool: list[VocabularyItem],
    difficulty: Difficulty,
    rng: random.Random,
) -> DragDropQuestion:
    item_count = DRAG_DROP_ITEMS[difficulty]
    others = [v for v in pool if v.id != item.id]
    decoys = rng.sample(others, min(item_count - 1, len(others)))
    members = [item] + decoys
    words = [DragWord(id=v.id, content=v.word) for v in members]
    targets = [DropTarget(id=f"target-{v.id}", definition=v.definition, answer_id=v.id) for v in members]
    rng.shuffle(words)
    rng.shuffle(targets)
    return DragDropQuestion(
        id=f"dragdrop-{item.id}",
        word_id=item.id,
        difficulty=difficulty,
        words=tuple(words),
        targets=tuple(targets),
    )


# --- Generation ---


def split_counts(total: int, distribution: TypeDistribution) -> tuple[int, int, int]:
    """Question counts per type; rounding never exceeds ``total``."""
    type_in = min(total, max(0, round_half_up(total * distribution.type_in)))
    choice = min(total - type_in, max(0, round_half_up(total * distribution.choice)))
    return type_in, choice, total - type_in - choice


def generate_quiz(
    pool: list[VocabularyItem],
    progress,
    count: int,
    distribution: Optional[TypeDistribution] = None,
    rng: Optional[random.Random] = None,
) -> list:
    """Build a shuffled, mixed-type quiz of ``min(count, len(pool))`` questions.

    Candidates come from the priority selector; each type's slice of them
    gets a difficulty from the item's progress.
    """
    if not pool or count <= 0:
        return []
    rng = rng or random.Random()
    distribution = distribution or DEFAULT_TYPE_DISTRIBUTION
    actual = min(count, len(pool))
    selected = select_for_session(pool, progress, actual)
    type_in_count, choice_count, drag_drop_count = split_counts(actual, distribution)
    now = now_ms()

    questions = []
    for i, item in enumerate(selected):
        state = lookup_progress(progress, item.id, now)
        if i < type_in_count:
            questions.append(build_type_in(item, type_in_difficulty(state)))
        elif i < type_in_count + choice_count:
            questions.append(build_choice(item, pool, choice_difficulty(state), rng))
        else:
            questions.append(build_drag_drop(item, pool, drag_drop_difficulty(state), rng))

    logger.info(
        f"Quiz built: {type_in_count} type-in + {choice_count} choice + "
        f"{drag_drop_count} drag-drop from a pool of {len(pool)}"
    )
    rng.shuffle(questions)
    return questions


# --- Answers ---


def _normalize(text: str) -> str:
    return text.strip().lower()


def score_drag_drop(question: DragDropQuestion, mapping: dict) -> tuple[int, int]:
    """Count targets matched to the right word. ``mapping`` is target id -> word id."""
    correct = sum(1 for t in question.targets if mapping.get(t.id) == t.answer_id)
    return correct, len(question.targets)


def check_answer(question, response) -> bool:
    if question.type == QuizType.TYPE_IN:
        return _normalize(str(response)) == _normalize(question.answer)
    elif question.type == QuizType.CHOICE:
        for choice in question.choices:
            if response == choice.id or _normalize(str(response)) == _normalize(choice.content):
                return choice.is_correct
        return False
    elif question.type == QuizType.DRAG_DROP:
        correct, total = score_drag_drop(question, response or {})
        return correct == total
    raise ValueError(f"Unknown question type: {question.type}")


def score_answer(is_correct: bool, seconds: Optional[float] = None) -> int:
    if not is_correct:
        return SCORE_INCORRECT
    if seconds is not None and seconds <= TIME_BONUS_THRESHOLD:
        return SCORE_CORRECT + TIME_BONUS
    return SCORE_CORRECT


def grade_for_answer(is_correct: bool, difficulty: Difficulty) -> Grade:
    """Map a quiz outcome onto the SM-2 grade scale.

    A right answer to a harder question counts as an easier recall.
    """
    if not is_correct:
        return Grade.FORGOT
    return {
        Difficulty.EASY: Grade.HARD,
        Difficulty.MEDIUM: Grade.GOOD,
        Difficulty.HARD: Grade.EASY,
    }[difficulty]


def quiz_accuracy(results: list[bool]) -> int:
    if not results:
        return 0
    return round_half_up(sum(1 for r in results if r) / len(results) * 100)

"""Data classes for the vocabulary learning domain model."""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Union


class LearningStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"


class Grade(IntEnum):
    FORGOT = 0
    HARD = 1
    GOOD = 2
    EASY = 3


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizType(str, Enum):
    TYPE_IN = "type-in"
    CHOICE = "choice"
    DRAG_DROP = "drag-drop"


@dataclass(frozen=True)
class VocabularyItem:
    id: str
    word: str
    definition: str
    part_of_speech: Optional[str] = None
    example: Optional[str] = None
    synonyms: tuple = ()


@dataclass(frozen=True)
class ItemProgress:
    status: LearningStatus = LearningStatus.NEW
    correct_count: int = 0
    incorrect_count: int = 0
    ease_factor: float = 2.5
    interval: int = 0
    repetition: int = 0
    last_reviewed: int = 0  # ms, 0 = never
    next_review: int = 0  # ms

    @property
    def review_count(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def error_rate(self) -> float:
        return self.incorrect_count / (self.review_count or 1)

    @property
    def familiarity(self) -> int:
        """Share of correct answers as a 0-100 percentage."""
        return min(100, int(100 * self.correct_count / max(self.review_count, 1) + 0.5))


@dataclass(frozen=True)
class SessionRecord:
    date: str  # YYYY-MM-DD
    accuracy: int
    words_studied: int


@dataclass(frozen=True)
class TypeDistribution:
    type_in: float = 0.5
    choice: float = 0.3
    drag_drop: float = 0.2


@dataclass(frozen=True)
class Choice:
    id: str
    content: str
    is_correct: bool


@dataclass(frozen=True)
class DragWord:
    id: str
    content: str


@dataclass(frozen=True)
class DropTarget:
    id: str
    definition: str
    answer_id: str


@dataclass(frozen=True)
class TypeInQuestion:
    id: str
    word_id: str
    prompt: str
    answer: str
    difficulty: Difficulty
    hint: Optional[str] = None
    type: QuizType = field(default=QuizType.TYPE_IN, init=False)


@dataclass(frozen=True)
class ChoiceQuestion:
    id: str
    word_id: str
    prompt: str
    answer: str
    difficulty: Difficulty
    choices: tuple = ()
    type: QuizType = field(default=QuizType.CHOICE, init=False)


@dataclass(frozen=True)
class DragDropQuestion:
    id: str
    word_id: str
    difficulty: Difficulty
    words: tuple = ()
    targets: tuple = ()
    type: QuizType = field(default=QuizType.DRAG_DROP, init=False)


QuizQuestion = Union[TypeInQuestion, ChoiceQuestion, DragDropQuestion]

import random

import pytest

from vocab_drill.models import VocabularyItem


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_vocab.db")
    return db_path


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def pool():
    return [
        VocabularyItem(id="w1", word="apple", definition="a round fruit", part_of_speech="n"),
        VocabularyItem(id="w2", word="run", definition="move fast on foot", part_of_speech="v"),
        VocabularyItem(id="w3", word="happy", definition="feeling joy", part_of_speech="adj",
                       synonyms=("glad",)),
        VocabularyItem(id="w4", word="glad", definition="pleased", part_of_speech="adj"),
        VocabularyItem(id="w5", word="table", definition="furniture with a flat top", part_of_speech="n"),
        VocabularyItem(id="w6", word="swim", definition="move through water", part_of_speech="v"),
        VocabularyItem(id="w7", word="quickly", definition="at a fast speed", part_of_speech="adv"),
        VocabularyItem(id="w8", word="river", definition="a large natural stream", part_of_speech="n"),
    ]

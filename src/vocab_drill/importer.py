"""Bulk vocabulary import from pasted text and files."""
import json
import re
import uuid
from pathlib import Path

import yaml
from loguru import logger

from vocab_drill.db import save_vocabulary
from vocab_drill.models import VocabularyItem

DASHES = "-—–－⸺⸻⹀"
DASH_SPLIT = re.compile(f"[{DASHES}]")
MIN_VALID_RATIO = 0.7

POS_PATTERNS = [
    re.compile(r"\(([nv]|adj|adv|prep|conj|pron|interj)\.\)", re.IGNORECASE),
    re.compile(r"^([nv]|adj|adv|prep|conj|pron|interj)\.\s+", re.IGNORECASE),
]


class VocabularyParseError(ValueError):
    """Raised when input text yields no usable vocabulary entries."""


def validate_input(text: str) -> tuple[bool, str]:
    if not text or not text.strip():
        return False, "No vocabulary entered"
    lines = text.strip().split("\n")
    valid = [line for line in lines if DASH_SPLIT.search(line)]
    if not valid:
        return False, "No entries found; separate word and definition with a dash"
    if len(valid) / len(lines) < MIN_VALID_RATIO:
        return False, f"Only {len(valid)}/{len(lines)} lines look valid, check the format"
    return True, f"Found {len(valid)} entries"


def extract_part_of_speech(text: str) -> tuple[str | None, str]:
    """Pull a ``(n.)`` or leading ``adj.`` marker off a word. Returns (pos, word)."""
    for pattern in POS_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).lower(), text.replace(match.group(0), "", 1).strip()
    return None, text.strip()


def parse_vocabulary(text: str, id_factory=None) -> list[VocabularyItem]:
    """Parse ``word - definition - example`` lines into vocabulary items."""
    id_factory = id_factory or (lambda: str(uuid.uuid4()))
    items = []
    skipped = 0
    for line in text.strip().split("\n"):
        line = line.strip()
        if not line:
            skipped += 1
            continue
        parts = [p.strip() for p in DASH_SPLIT.split(line)]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            skipped += 1
            continue
        pos, word = extract_part_of_speech(parts[0])
        if not word:
            skipped += 1
            continue
        example = parts[2] if len(parts) > 2 and parts[2] else None
        items.append(VocabularyItem(
            id=id_factory(),
            word=word,
            definition=parts[1],
            part_of_speech=pos,
            example=example,
        ))
    logger.info(f"Parsed {len(items)} entries ({skipped} lines skipped)")
    if not items:
        raise VocabularyParseError("No valid vocabulary entries could be parsed")
    return items


def parse_entries(entries: list, id_factory=None) -> list[VocabularyItem]:
    """Build items from structured ``{word, definition, ...}`` mappings."""
    id_factory = id_factory or (lambda: str(uuid.uuid4()))
    items = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("word") or not entry.get("definition"):
            continue
        items.append(VocabularyItem(
            id=str(entry.get("id") or id_factory()),
            word=str(entry["word"]).strip(),
            definition=str(entry["definition"]).strip(),
            part_of_speech=entry.get("part_of_speech"),
            example=entry.get("example"),
            synonyms=tuple(entry.get("synonyms") or ()),
        ))
    logger.info(f"Loaded {len(items)} of {len(entries)} structured entries")
    if not items:
        raise VocabularyParseError("No valid vocabulary entries could be parsed")
    return items


def read_file_content(file_path: str):
    """Read a vocabulary file.

    Returns the raw text for text files, or the decoded list of entries for
    ``.json`` and ``.yaml`` files.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".txt", ".md"):
        return path.read_text()
    elif suffix == ".json":
        return json.loads(path.read_text())
    elif suffix in (".yaml", ".yml"):
        return yaml.safe_load(path.read_text())
    else:
        # Try reading as plain text
        return path.read_text()


def import_file(db_path: str, file_path: str) -> dict:
    """Parse a file and add its entries to the vocabulary pool."""
    content = read_file_content(file_path)
    if isinstance(content, str):
        items = parse_vocabulary(content)
    else:
        items = parse_entries(content or [])
    added = save_vocabulary(db_path, items)
    return {"filename": Path(file_path).name, "parsed": len(items), "added": added}


def import_text(db_path: str, text: str) -> dict:
    items = parse_vocabulary(text)
    added = save_vocabulary(db_path, items)
    return {"parsed": len(items), "added": added}

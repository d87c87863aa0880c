# save_parser.py
# -*- coding: utf-8 -*-
"""
Pulls the player data JSON object out of a raw save file.

Save files can hold several brace-delimited chunks (engine metadata,
partial or broken blocks) next to the player data. Extraction runs in two
phases: iter_candidate_blocks() slices out every top-level {...} span
without assuming the text is valid JSON, then extract_player_data() parses
each span on its own and keeps the first object that carries at least one
editable key.
"""
import json
import logging
from typing import Iterable, Iterator, NamedTuple, Optional

import config
from errors import NoPlayerDataFound


class CandidateBlock(NamedTuple):
    start: int
    end: int # exclusive
    text: str


class ExtractedBlock(NamedTuple):
    record: dict
    start: int
    end: int


def read_save_text(path: str) -> str:
    """Reads the save file as text. Undecodable bytes are kept as surrogates
    so they can be written back unchanged."""
    with open(path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
        return f.read()


def _find_block_end(text: str, start: int) -> Optional[int]:
    """Index just past the brace closing the one at `start`, or None."""
    depth = 0
    in_str = False
    esc = False
    for j in range(start, len(text)):
        ch = text[j]
        if in_str:
            if esc:
                esc = False
            elif ch == '\\':
                esc = True
            elif ch == '"':
                in_str = False
        elif ch == '"':
            in_str = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return j + 1
    return None


def iter_candidate_blocks(text: str, start: int = 0) -> Iterator[CandidateBlock]:
    """Yields every top-level brace-balanced span of `text` from `start` on,
    in document order.

    Braces inside string literals are ignored. A span that never closes is
    dropped and the scan resumes right after its opening brace. Each resume
    rescans to the end of the text, so brace-heavy garbage costs quadratic
    time; save files are small enough for that.
    """
    i = text.find('{', start)
    while i != -1:
        end = _find_block_end(text, i)
        if end is None:
            logging.debug(f"Unterminated block at offset {i}, resuming scan at {i + 1}")
            i = text.find('{', i + 1)
            continue
        yield CandidateBlock(i, end, text[i:end])
        i = text.find('{', end)


def extract_player_data(text: str, field_keys: Optional[Iterable[str]] = None) -> ExtractedBlock:
    """Returns the first parseable JSON object whose top-level keys intersect
    `field_keys` (the editable fields by default).

    A span that does not parse may have swallowed the next object (an odd
    quote flips string tracking), so the scan restarts right after its
    opening brace rather than after its end.

    Raises NoPlayerDataFound when no candidate qualifies.
    """
    keys = set(field_keys if field_keys is not None else config.EDITABLE_FIELDS)
    seen = 0
    position = 0

    while True:
        block = next(iter_candidate_blocks(text, position), None)
        if block is None:
            break
        seen += 1
        try:
            data = json.loads(block.text)
        except ValueError as e:
            logging.debug(f"Skipping block at {block.start}-{block.end}: {e}")
            position = block.start + 1
            continue
        position = block.end
        if not isinstance(data, dict):
            continue
        if keys.intersection(data):
            logging.info(f"Player data found at offset {block.start}-{block.end} (block {seen}).")
            return ExtractedBlock(data, block.start, block.end)
        logging.debug(f"Block at {block.start}-{block.end} has no editable keys, skipped.")

    if seen == 0:
        logging.error("No JSON data found in save file.")
        raise NoPlayerDataFound("No JSON data found in save file")
    logging.error(f"None of the {seen} JSON block(s) contains player data.")
    raise NoPlayerDataFound("No valid player data found in save file")

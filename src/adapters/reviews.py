"""Review sources producing the list of review texts"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List

from config import logger
from src.core import EmptyReviewSourceError, InvalidInputError

TEXT_COLUMN = "text"
MIN_LINE_LENGTH = 5

def _parse_lines(raw: str) -> List[str]:
    """Headerless mode: one review per line, '#' comments and very short lines dropped"""
    reviews = []
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or len(line) <= MIN_LINE_LENGTH:
            continue
        reviews.append(line)
    return reviews

def _parse_tsv(raw: str) -> List[str]:
    reader = csv.DictReader(raw.splitlines(), delimiter="\t")
    reviews = []
    for row in reader:
        text = (row.get(TEXT_COLUMN) or "").strip()
        if text:
            reviews.append(text)
    return reviews

def parse_reviews(raw: str) -> List[str]:
    """
    Extract review texts from TSV content

    Uses the 'text' column when the header has one, otherwise treats every
    line as a review.
    """
    first_line = next((line for line in raw.splitlines() if line.strip()), "")
    header = [column.strip().lower() for column in first_line.split("\t")]
    if TEXT_COLUMN in header:
        return _parse_tsv(raw)
    return _parse_lines(raw)

class TsvReviewSource:
    """Reads reviews from a TSV file on every load"""

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def load(self) -> List[str]:
        """
        Load the reviews

        Returns:
            Non-empty list of review strings

        Raises:
            InvalidInputError: If the file cannot be read
            EmptyReviewSourceError: If the file contains no reviews
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidInputError(
                message=f"Cannot read reviews file: {self.path}"
            ) from e

        reviews = parse_reviews(raw)
        if not reviews:
            raise EmptyReviewSourceError(
                message=f"No valid reviews found in {self.path}"
            )
        logger.info(f"Loaded {len(reviews)} reviews from {self.path}")
        return reviews

class StaticReviewSource:
    """In-memory review list"""

    def __init__(self, reviews: Iterable[str]) -> None:
        self.reviews = [r for r in reviews if isinstance(r, str) and r.strip()]

    def load(self) -> List[str]:
        if not self.reviews:
            raise EmptyReviewSourceError()
        return list(self.reviews)

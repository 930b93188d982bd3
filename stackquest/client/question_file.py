"""
STACK question file loading.

A question file is Moodle quiz XML holding one or more <question> elements.
The STACK API takes a single question wrapped in <quiz>, plus a seed picked
from the question's deployed variants.
"""

import logging
import random
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from stackquest.schemas import QuestionFile

logger = logging.getLogger(__name__)

MISSING_QUESTION_XML = "<quiz>\nnull\n</quiz>"


def wrap_question(question_xml: str) -> str:
    return f"<quiz>\n{question_xml}\n</quiz>"


def _question_name(question: ET.Element) -> Optional[str]:
    text = question.find("name/text")
    return text.text if text is not None else None


def load_question_from_file(
    file_contents: str,
    question_name: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> QuestionFile:
    """
    Extract a STACK question from quiz XML.

    Args:
        file_contents: Quiz XML text
        question_name: <name><text> of the wanted question; first STACK
            question when empty
        rng: Random source for seed selection

    Returns:
        QuestionFile with the wrapped question and a deployed seed (or None
        when the question has none). found is False when nothing matched.

    Raises:
        xml.etree.ElementTree.ParseError: If the XML is malformed
    """
    rng = rng or random.Random()
    root = ET.fromstring(file_contents)

    for question in root.iter("question"):
        if (question.get("type") or "").lower() != "stack":
            continue
        if question_name and _question_name(question) != question_name:
            continue

        seeds = [
            int(seed.text) for seed in question.iter("deployedseed")
            if seed.text and seed.text.strip()
        ]
        seed = rng.choice(seeds) if seeds else None

        question.tail = None
        question_xml = ET.tostring(question, encoding="unicode")
        return QuestionFile(question_xml=wrap_question(question_xml), seed=seed)

    logger.warning(f"No STACK question named {question_name!r} found")
    return QuestionFile(question_xml=MISSING_QUESTION_XML, seed=None, found=False)


def read_question_file(
    path: str | Path,
    question_name: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> QuestionFile:
    """Read quiz XML from disk and extract a question from it."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Question file not found: {file_path}")
    return load_question_from_file(file_path.read_text(encoding="utf-8"), question_name, rng)

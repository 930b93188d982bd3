"""
QuestionSequence - Ordered, read-only list of question descriptors.

The sequence is built once at startup, either from the built-in
DEFAULT_QUESTIONS list or from a YAML file of descriptor mappings:

    - title: Simple question
      file_reference: questions/Partial fraction decomposition.xml
      topic: algebra
      difficulty: basic
"""

from pathlib import Path
from typing import Iterator, Optional

import yaml

from stackquest.schemas import QuestionDescriptor, DEFAULT_QUESTIONS

from .errors import IndexOutOfRange


class QuestionSequence:
    """Static ordered list of questions. Read-only after initialization."""

    def __init__(self, descriptors: list[QuestionDescriptor]):
        if not descriptors:
            raise ValueError("Question sequence must contain at least one question")
        self._descriptors = tuple(descriptors)

    @classmethod
    def from_config(cls, entries: list[dict]) -> "QuestionSequence":
        """Build a sequence from a list of descriptor mappings."""
        return cls([QuestionDescriptor(**entry) for entry in entries])

    @classmethod
    def from_yaml(cls, path: str | Path) -> "QuestionSequence":
        """
        Load a sequence from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file isn't a non-empty list of mappings
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Question sequence not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            entries = yaml.safe_load(f)

        if not isinstance(entries, list):
            raise ValueError(f"Question sequence must be a YAML list: {file_path}")
        return cls.from_config(entries)

    @classmethod
    def default(cls) -> "QuestionSequence":
        return cls.from_config(DEFAULT_QUESTIONS)

    def length(self) -> int:
        return len(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[QuestionDescriptor]:
        return iter(self._descriptors)

    def contains(self, index: int) -> bool:
        return 0 <= index < len(self._descriptors)

    def get(self, index: int) -> QuestionDescriptor:
        """Get descriptor at index; raises IndexOutOfRange outside [0, length)."""
        if not self.contains(index):
            raise IndexOutOfRange(index, len(self._descriptors))
        return self._descriptors[index]

    def title_at(self, index: int) -> Optional[str]:
        """Title at index, or None when there is no such question."""
        if not self.contains(index):
            return None
        return self._descriptors[index].title

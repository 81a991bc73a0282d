"""Interface for presenting results to the user.

Defines the contract for displaying information, errors, warnings and parse
results, allowing different UI implementations (e.g., console, JSON output).
"""

import abc
from typing import Any, Dict, Sequence

from talentmatch.domain.models.common import AnnotatedResult
from talentmatch.domain.models.resume import BatchItemResult, ResumeParsingResult


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_parse_result(
        self,
        result: AnnotatedResult[ResumeParsingResult],
        skill_categories: Dict[str, Sequence[str]],
    ) -> None:
        """Displays a parsed resume, the provider that served it and its skill breakdown.

        Args:
            result: The provider-annotated parsing result.
            skill_categories: Skills grouped by category.
        """
        pass

    @abc.abstractmethod
    def display_batch_summary(self, results: Sequence[BatchItemResult]) -> None:
        """Displays one row per batch document with its outcome."""
        pass

#!/usr/bin/env python3
"""
Base Checker Contract v1.0.0
============================
Defines the interface all document checkers implement.

A checker receives a document as (index, text) paragraph tuples and
returns a list of issue dicts.
"""

from typing import List, Dict, Any, Tuple

__version__ = "1.0.0"


class BaseChecker:
    """
    Base class for all document checkers.

    All checkers must implement:
    - check() method that returns a list of issue dicts
    - CHECKER_NAME and CHECKER_VERSION class attributes
    """

    CHECKER_NAME = "Base"
    CHECKER_VERSION = "1.0.0"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._errors: List[str] = []

    def check(
        self,
        paragraphs: List[Tuple[int, str]],
        **kwargs
    ) -> List[Dict[str, Any]]:
        """
        Run the check on document content.

        Args:
            paragraphs: List of (index, text) tuples

        Returns:
            List of issue dicts
        """
        raise NotImplementedError("Subclasses must implement check()")

    def safe_check(self, *args, **kwargs) -> List[Dict[str, Any]]:
        """Run check, recording any failure instead of raising it."""
        try:
            return self.check(*args, **kwargs)
        except Exception as e:
            self._errors.append(f"{self.CHECKER_NAME} error: {e}")
            return []

    def create_issue(
        self,
        severity: str,
        message: str,
        context: str = "",
        paragraph_index: int = 0,
        suggestion: str = "",
        rule_id: str = "",
        **kwargs
    ) -> Dict[str, Any]:
        """
        Create a standardized issue dictionary.

        Args:
            severity: Issue severity (Critical, High, Medium, Low, Info)
            message: Human-readable issue description
            context: Surrounding text context
            paragraph_index: Index of paragraph in document
            suggestion: Recommended fix
            rule_id: Unique rule identifier
            **kwargs: Additional fields including:
                - flagged_text: Text that triggered the issue
                - start_offset: Character offset in paragraph
                - end_offset: End character offset
        """
        issue = {
            'category': self.CHECKER_NAME,
            'severity': severity,
            'message': message,
            'context': context,
            'paragraph_index': paragraph_index,
            'suggestion': suggestion,
            'rule_id': rule_id,
            'flagged_text': kwargs.get('flagged_text', context),
        }

        if kwargs.get('start_offset', -1) >= 0:
            issue['source'] = {
                'paragraph_index': paragraph_index,
                'start_offset': kwargs['start_offset'],
                'end_offset': kwargs.get('end_offset', -1),
                'original_text': kwargs.get('flagged_text', context),
            }

        return issue

    def clear_errors(self):
        """Clear accumulated errors."""
        self._errors = []

    def get_errors(self) -> List[str]:
        """Get accumulated errors."""
        return self._errors.copy()

"""Invoice number template parsing and rendering.

Supported tokens:
    {SEQ:N}      sequence number zero-padded to N digits (never truncated)
    {YYYY}       four-digit year
    {YY}         two-digit year
    {MM}         two-digit month
    {M}          month without leading zero
    {DEPT}       department code, uppercased
    {DEPT_NAME}  department code, uppercased

Any other ``{...}`` sequence is copied to the output unchanged.
"""

import re
from datetime import date
from typing import Optional

from invoice_numbering.config import settings
from invoice_numbering.core.exceptions import InvalidTemplateError

TOKEN_PATTERN = re.compile(r"\{([A-Z_]+)(?::([^{}]*))?\}")

# A department token together with one separator before it, or failing
# that, one separator after it.
DEPARTMENT_PATTERN = re.compile(r"[-/]\{(?:DEPT_NAME|DEPT)\}|\{(?:DEPT_NAME|DEPT)\}[-/]?")

_INTEGER = re.compile(r"-?[0-9]+")

SEQUENCE_TOKEN = "SEQ"
DEPARTMENT_TOKENS = frozenset({"DEPT", "DEPT_NAME"})
MAX_SEQUENCE_PADDING = 10

PREVIEW_SEQUENCE = 1
PREVIEW_DATE = date(2026, 2, 1)


def _sequence_padding(argument: Optional[str]) -> int:
    if argument is None or not _INTEGER.fullmatch(argument.strip()):
        raise InvalidTemplateError(
            "Sequence token needs a digit count, e.g. {SEQ:4}"
        )
    padding = int(argument)
    if padding < 1:
        raise InvalidTemplateError(
            f"Sequence padding must be a positive number, got {padding}"
        )
    if padding > MAX_SEQUENCE_PADDING:
        raise InvalidTemplateError(
            f"Sequence padding must be between 1 and {MAX_SEQUENCE_PADDING}"
        )
    return padding


class TemplateParser:
    """Validates numbering templates and renders invoice numbers from them."""

    def render(
        self,
        template: str,
        sequence_value: int,
        issue_date: date,
        department_code: Optional[str] = None,
    ) -> str:
        """
        Render an invoice number.

        Without a department code the department tokens are dropped along
        with one adjacent "-" or "/", so "{DEPT}-{SEQ:4}" renders "0007".

        Args:
            template: Template string
            sequence_value: Sequence number, 1 or greater
            issue_date: Invoice issue date, source of year and month tokens
            department_code: Optional department code

        Returns:
            Rendered invoice number

        Raises:
            InvalidTemplateError: If a {SEQ:N} token has no digit count between
                1 and MAX_SEQUENCE_PADDING
            ValueError: If the sequence value or date is invalid
        """
        if template is None:
            raise InvalidTemplateError("Template is required")
        if isinstance(sequence_value, bool) or not isinstance(sequence_value, int):
            raise ValueError("Sequence value must be an integer")
        if sequence_value < 1:
            raise ValueError(f"Sequence value must be positive, got {sequence_value}")
        if not isinstance(issue_date, date):
            raise ValueError("Issue date is required")

        department = (department_code or "").strip().upper() or None
        if department is None:
            template = DEPARTMENT_PATTERN.sub("", template)

        year = issue_date.year
        month = issue_date.month

        def replace(match: re.Match) -> str:
            name, argument = match.group(1), match.group(2)
            if name == SEQUENCE_TOKEN:
                padding = _sequence_padding(argument)
                return str(sequence_value).zfill(padding)
            if argument is not None:
                return match.group(0)
            if name == "YYYY":
                return f"{year:04d}"
            if name == "YY":
                return f"{year % 100:02d}"
            if name == "MM":
                return f"{month:02d}"
            if name == "M":
                return str(month)
            if name in DEPARTMENT_TOKENS and department is not None:
                return department
            return match.group(0)

        return TOKEN_PATTERN.sub(replace, template)

    def validate(self, template: Optional[str]) -> str:
        """
        Check a template before it is saved on a scheme.

        Templates without a {SEQ:N} token and unknown tokens are accepted.

        Returns:
            The template, stripped of surrounding whitespace

        Raises:
            InvalidTemplateError: If the template is blank, too long, or
                has a malformed sequence token
        """
        if template is None or not template.strip():
            raise InvalidTemplateError("Template cannot be blank")
        template = template.strip()

        max_length = settings.template_max_length
        if len(template) > max_length:
            raise InvalidTemplateError(
                f"Template too long (max {max_length} characters)"
            )

        for match in TOKEN_PATTERN.finditer(template):
            if match.group(1) != SEQUENCE_TOKEN:
                continue
            _sequence_padding(match.group(2))
        return template

    def has_sequence_token(self, template: str) -> bool:
        return any(
            match.group(1) == SEQUENCE_TOKEN
            for match in TOKEN_PATTERN.finditer(template or "")
        )

    def preview(self, template: str) -> str:
        """Render a template with example values (sequence 1, February 2026, no department)."""
        template = self.validate(template)
        return self.render(template, PREVIEW_SEQUENCE, PREVIEW_DATE)


# Singleton instance
template_parser = TemplateParser()

"""
Date normalization.

Dates are resolved by an ordered cascade:

1. strptime patterns (ISO, year-first, US, European; US before European
   unless ``day_first``)
2. month names ("Feb 28, 2025", "28Feb2025", "2025 February 28") through
   pandas, whose English month names do not follow the process locale
3. the same two steps again after collapsing odd separators to spaces
4. a numeric extraction heuristic that always produces some date

Only steps 1-3 are "confident". Step 4 results are flagged so the caller can
report the original text as a guessed date.
"""

import calendar
import re
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

import pandas as pd

from .models import DateParseResult

_SEPARATOR_NOISE = re.compile(r"[^0-9A-Za-z\-/]+")
_INTEGER_RUN = re.compile(r"\d+")

# A month name or abbreviation not glued to other letters ("28Feb2025" counts).
_MONTH_TOKEN = re.compile(
    r"(?<![a-z])(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)"
    r"(?:uary|ruary|ch|il|e|y|ust|t|tember|ober|ember)?(?![a-z])",
    re.IGNORECASE,
)


def has_month_name(text: str) -> bool:
    return bool(_MONTH_TOKEN.search(text))


def expand_year(year: int) -> int:
    return year + 2000 if year < 100 else year


class DateNormalizer:
    """
    Locale-independent date parser with a best-effort fallback.

    Args:
        day_first: Try European dd/MM patterns before US MM/dd patterns.
        today: Fixed "today" for the fallback path (defaults to date.today()).
    """

    ISO_FORMATS = [
        "%Y-%m-%d",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M",
        "%Y-%m-%d %H:%M:%S %z",
        "%Y-%m-%d %H:%M:%S%z",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%S%z",
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%dT%H:%M:%S.%f%z",
        "%Y%m%d",
    ]

    YEAR_FIRST_FORMATS = [
        "%Y/%m/%d",
        "%Y/%m/%d %H:%M:%S",
        "%Y/%m/%d %H:%M:%S %z",
        "%Y.%m.%d",
        "%Y %m %d",
    ]

    US_FORMATS = [
        "%m/%d/%Y",
        "%m/%d/%y",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%m-%d-%Y",
        "%m-%d-%y",
        "%m %d %Y",
    ]

    EUROPEAN_FORMATS = [
        "%d/%m/%Y",
        "%d/%m/%y",
        "%d/%m/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M",
        "%d-%m-%Y",
        "%d-%m-%y",
        "%d.%m.%Y",
        "%d.%m.%y",
        "%d %m %Y",
    ]

    def __init__(
        self,
        day_first: bool = False,
        today: Optional[date] = None,
    ):
        self.day_first = day_first
        self._fixed_today = today
        self._precise_strategies: List[Callable[[str], Optional[DateParseResult]]] = [
            self._try_formats,
            self._try_named_month,
        ]

    @property
    def formats(self) -> Sequence[str]:
        regional = (
            self.EUROPEAN_FORMATS + self.US_FORMATS
            if self.day_first
            else self.US_FORMATS + self.EUROPEAN_FORMATS
        )
        return self.ISO_FORMATS + self.YEAR_FIRST_FORMATS + regional

    def today(self) -> date:
        return self._fixed_today or date.today()

    def parse(self, raw: Optional[str]) -> DateParseResult:
        """Resolve ``raw`` to a date. Never raises."""
        text = "" if raw is None else str(raw).strip()

        if text:
            result = self._try_precise(text)
            if result is not None:
                return result

            normalized = _SEPARATOR_NOISE.sub(" ", text).strip()
            if normalized and normalized != text:
                result = self._try_precise(normalized)
                if result is not None:
                    return DateParseResult(
                        value=result.value,
                        confident=True,
                        strategy=f"normalized:{result.strategy}",
                    )

        return self.guess(text)

    def _try_precise(self, text: str) -> Optional[DateParseResult]:
        for strategy in self._precise_strategies:
            result = strategy(text)
            if result is not None:
                return result
        return None

    def _try_formats(self, text: str) -> Optional[DateParseResult]:
        for fmt in self.formats:
            try:
                parsed = datetime.strptime(text, fmt)
            except ValueError:
                continue
            # Keep the wall-clock time as written; records are calendar dates.
            return DateParseResult(
                value=parsed.replace(tzinfo=None),
                confident=True,
                strategy=f"pattern:{fmt}",
            )
        return None

    def _try_named_month(self, text: str) -> Optional[DateParseResult]:
        if not has_month_name(text):
            return None

        try:
            parsed = pd.to_datetime(text, format="mixed", dayfirst=self.day_first)
        except (ValueError, OverflowError, TypeError):
            return None
        if pd.isna(parsed):
            return None

        return DateParseResult(
            value=parsed.to_pydatetime().replace(tzinfo=None),
            confident=True,
            strategy="named_month",
        )

    def guess(self, text: str) -> DateParseResult:
        """
        Numeric extraction heuristic. Always returns a date.

        A number in [1900, 2100] is the year. Otherwise, with at least three
        numbers, the largest of the first three is the year (+2000 when two
        digits). Of what remains the first value in [1, 12] is the month and
        the next value in [1, 31] is the day. Unknown parts default to the
        current year, January and the 1st. Text with no digits at all maps to
        the first day of the current month.
        """
        today = self.today()
        numbers = [int(run) for run in _INTEGER_RUN.findall(text or "")]

        if not numbers:
            return DateParseResult(
                value=datetime(today.year, today.month, 1),
                confident=False,
                strategy="default",
            )

        year: Optional[int] = None
        remaining: List[int] = list(numbers)

        for number in numbers:
            if 1900 <= number <= 2100:
                year = number
                remaining.remove(number)
                break

        if year is None and len(numbers) >= 3:
            first_three = numbers[:3]
            largest = max(first_three)
            year = expand_year(largest)
            remaining = list(first_three)
            remaining.remove(largest)

        month: Optional[int] = None
        day: Optional[int] = None
        for number in remaining:
            if month is None and 1 <= number <= 12:
                month = number
                continue
            if day is None and 1 <= number <= 31:
                day = number

        if year is None or not 1 <= year <= 9999:
            year = today.year
        month = month or 1
        day = min(day or 1, calendar.monthrange(year, month)[1])

        return DateParseResult(
            value=datetime(year, month, day),
            confident=False,
            strategy="numeric_extraction",
        )


def parse_date(
    raw: Optional[str], day_first: bool = False, today: Optional[date] = None
) -> DateParseResult:
    """Convenience wrapper around DateNormalizer.parse."""
    return DateNormalizer(day_first=day_first, today=today).parse(raw)

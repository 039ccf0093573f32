"""
Error Types

Every domain error is a ValueError so callers that only care about bad input
can catch that, while callers that care about the reason can catch the
specific class.
"""


class HureCoreError(ValueError):
    """Base class for all hurecore input and state errors"""


class InvalidConfiguration(HureCoreError):
    """Statutory rules that cannot be evaluated (no bands, unordered limits, bad rates)"""


class InvalidIncome(HureCoreError):
    """Negative or non-finite income passed to a calculator"""


class InvalidDate(HureCoreError):
    """A date or timestamp that cannot be parsed"""


class InvalidRange(HureCoreError):
    """End date earlier than start date"""


class InvalidWeekdaySelection(HureCoreError):
    """Empty weekday selection or an index outside 0-6"""


class EmptyInput(HureCoreError):
    """Nothing to export"""

    def __init__(self, message: str = "No data to export"):
        super().__init__(message)


class PeriodFinalized(HureCoreError):
    """Attempt to regenerate entries for, or re-finalize, a finalized payroll period"""


class PeriodNotFinalized(HureCoreError):
    """Attempt to archive a payroll period that has not been finalized"""


class NoActiveRules(HureCoreError):
    """No active statutory rules version to update"""


class PhoneValidationError(HureCoreError):
    """Base class for phone validation failures"""

    code = "invalid"


class PhoneRequired(PhoneValidationError):
    code = "required"

    def __init__(self, message: str = "Phone number is required"):
        super().__init__(message)


class InvalidLength(PhoneValidationError):
    code = "length"

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Invalid phone number length. Expected 9 digits after country code, got {length}"
        )


class InvalidPrefix(PhoneValidationError):
    code = "prefix"

    def __init__(self, message: str = "Invalid Kenyan phone number. Must start with 7, 1, or 2 after country code"):
        super().__init__(message)

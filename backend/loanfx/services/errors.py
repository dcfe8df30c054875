from __future__ import annotations


class EvolutionError(ValueError):
    code = "evolution_error"


class InvalidDate(EvolutionError):
    code = "invalid_date"

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field}: unparsable date {value!r}")


class InvalidNumeric(EvolutionError):
    code = "invalid_numeric"

    def __init__(self, field: str, value, reason: str = "must be a finite number"):
        self.field = field
        self.value = value
        super().__init__(f"{field}: {reason} (got {value!r})")


class RangeTooLong(EvolutionError):
    code = "range_too_long"

    def __init__(self, days: int, limit: int):
        self.days = days
        self.limit = limit
        super().__init__(f"evolution spans {days} days, limit is {limit}")


class InvalidField(EvolutionError):
    code = "invalid_field"

    def __init__(self, field: str, value, allowed: tuple[str, ...]):
        self.field = field
        self.value = value
        super().__init__(f"{field}: {value!r} is not one of {', '.join(allowed)}")

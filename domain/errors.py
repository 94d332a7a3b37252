class DomainError(Exception):
    code = "E_DOMAIN"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(DomainError):
    code = "E_INVALID_INPUT"


class UnknownFormulaError(InvalidInputError):
    code = "E_UNKNOWN_FORMULA"


class UnknownMetricError(DomainError):
    code = "E_UNKNOWN_METRIC"


class UnsupportedFormulaApplication(DomainError):
    """Formula requested for a gender or age outside its declared range."""

    code = "E_UNSUPPORTED_FORMULA"

    def __init__(self, message: str = "", *, reason: str = "gender") -> None:
        super().__init__(message)
        self.reason = reason  # gender|age


class NotComputable(DomainError):
    """A single derived metric lacks the inputs it needs."""

    code = "E_NOT_COMPUTABLE"

    def __init__(self, metric: str, message: str = "") -> None:
        super().__init__(message or f"{metric} is not computable")
        self.metric = metric

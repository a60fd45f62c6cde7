from sklearn.exceptions import NotFittedError

__all__ = ["ConfigurationError", "NotFittedError", "SchemaMismatchError"]


class ConfigurationError(ValueError):
    """Raised when the forest hyperparameters cannot be applied to the data or config."""


class SchemaMismatchError(ValueError):
    """Raised when a prediction grid lacks attributes the fitted trees were trained on."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Data grid is missing attributes required by the fitted trees: {self.missing}")

class PredictorError(Exception):
    """Per-request failure with a stable machine-readable code."""

    code = "predictor_error"


class ConfigurationAbsent(PredictorError):
    """A descriptor candidate could not be fetched or parsed. Never leaves the resolver."""

    code = "configuration_absent"


class ShapeMismatch(PredictorError):
    code = "shape_mismatch"


class EmptyInput(PredictorError):
    code = "empty_input"


class MissingOutput(PredictorError):
    code = "missing_output"


class InvalidInput(PredictorError):
    code = "invalid_input"

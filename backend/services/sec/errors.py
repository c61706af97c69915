"""Input-domain errors raised by the SEC engine."""


class SecError(ValueError):
    """Base class for SEC input-domain violations."""

    code = "SEC_ERROR"


class InvalidDistance(SecError):
    code = "BAD_DISTANCE"


class InvalidClickValue(SecError):
    code = "BAD_CLICK"


class InvalidScale(SecError):
    code = "BAD_SCALE"


class InvalidMoaStandard(SecError):
    code = "BAD_MOA_STANDARD"


class EmptySample(SecError):
    code = "EMPTY_SAMPLE"

# vsm_engine/application/services/errors.py


class VSMError(Exception):
    """Base class for errors raised by the vector space model engine."""


class NormalizationError(VSMError):
    """The normalizer could not turn a sentence into tokenizable text.

    The original exception (if any) is chained as ``__cause__``.
    """

    def __init__(self, sentence: str, reason: str = ""):
        self.sentence = sentence
        msg = f"could not normalize sentence {sentence[:80]!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class CancellationError(VSMError):
    """The streaming training pipeline was cancelled."""

    def __init__(self, msg: str = "training stream cancelled"):
        super().__init__(msg)

"""
Sampler error taxonomy. Every condition propagates to the caller; nothing is
recovered inside the sampler.
"""


class SamplerError(Exception):
    """Base class for all decay_sampler errors."""


class InvalidConfiguration(SamplerError, ValueError):
    """Reservoir parameters or config sections that cannot be used (e.g. size 0)."""


class InvalidArgument(SamplerError, ValueError):
    """A query argument outside its domain, e.g. a quantile not in [0, 1]."""


class ClockOrderingViolation(SamplerError):
    """A timestamp earlier than one already observed, raised in strict clock mode."""

    def __init__(self, timestamp: float, last_timestamp: float):
        self.timestamp = float(timestamp)
        self.last_timestamp = float(last_timestamp)
        super().__init__(
            f"timestamp {self.timestamp:.6f} is earlier than last observed {self.last_timestamp:.6f}"
        )

"""
Forward exponential decay (Cormode et al. 2009, "Forward Decay")
- weight(elapsed) = exp(alpha * elapsed): grows with time since the epoch, so later
  items carry more weight than earlier ones
- scale(elapsed) = exp(-alpha * elapsed): factor that re-anchors stored weights to a
  new epoch without changing their relative order
- elapsed is measured in whole seconds (fractions truncated)
- Exponents are capped at MAX_EXPONENT, so weights and factors are always finite.
  The reservoir rescales before alpha * elapsed reaches the cap (see exceeds()); the
  cap itself only bites on the growth factor of a negative alpha after a long gap.
"""

import math
import sys

DEFAULT_ALPHA = 0.015  # heavily biases towards roughly the last 5 minutes

# half of log(max float): a capped weight times 1/u, summed over any realistic
# reservoir size, is still far from overflow
MAX_EXPONENT = math.log(sys.float_info.max) / 2.0


def seconds_between(start: float, end: float) -> int:
    return int(end - start)


def _exp(x: float) -> float:
    # underflow goes to 0.0; overflow is impossible below the cap
    return math.exp(min(x, MAX_EXPONENT))


class ExponentialDecay:
    def __init__(self, alpha: float = DEFAULT_ALPHA):
        self.alpha = float(alpha)

    def weight(self, elapsed: float) -> float:
        return _exp(self.alpha * elapsed)

    def scale(self, elapsed: float) -> float:
        return _exp(-self.alpha * elapsed)

    def exceeds(self, elapsed: float) -> bool:
        """True when alpha * elapsed leaves [-MAX_EXPONENT, MAX_EXPONENT]."""
        return abs(self.alpha * elapsed) > MAX_EXPONENT

    def __repr__(self) -> str:
        return f"ExponentialDecay(alpha={self.alpha})"

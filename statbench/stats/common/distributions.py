"""
statbench.stats.common.distributions
====================================

Special functions and the distributions built on them.

Everything the test layer needs to turn a statistic into a p-value lives here:
the error function, the normal CDF and quantile, log-gamma, the regularized
incomplete gamma and beta functions, and the t, F and chi-squared CDFs and
quantiles derived from them.

The functions are pure and deterministic. For finite arguments they return a
value in the function's natural range; degenerate arguments (a statistic of
zero, an infinite statistic, x outside the support) map to boundary values.
Only quantile functions raise, with `ValueError`, when the probability lies
outside (0, 1).

Examples
--------
>>> from statbench.stats.common.distributions import (
...     erf, normal_cdf, normal_quantile, t_cdf, t_quantile, incomplete_beta)
>>> erf(0.0)
0.0
>>> normal_cdf(0.0)
0.5
>>> round(normal_quantile(0.975), 4)
1.96
>>> t_cdf(0.0, 7)
0.5
>>> round(t_quantile(1, 0.975), 4)
12.7062
>>> incomplete_beta(2.0, 3.0, 1.0)
1.0
"""

from __future__ import annotations
import math
from typing import Callable

# Relative tolerance and iteration cap shared by the iterative expansions
EPSILON = 1e-10
MAX_ITERATIONS = 200
# Smallest magnitude allowed in a Lentz denominator
_FPMIN = 1e-300
# Largest argument math.exp accepts without overflowing
_LOG_MAX = 709.78

# Abramowitz & Stegun 7.1.26
_ERF_P = 0.3275911
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)

# Beasley-Springer central region
_BSM_A = (2.50662823884, -18.61500062529, 41.39119773534, -25.44106049637)
_BSM_B = (-8.47351093090, 23.08336743743, -21.06224101826, 3.13082909833)
# Moro tail region
_MORO_C = (
    0.3374754822726147,
    0.9761690190917186,
    0.1607979714918209,
    0.0276438810333863,
    0.0038405729373609,
    0.0003951896511919,
    0.0000321767881768,
    0.0000002888167364,
    0.0000003960315187,
)

# Lanczos approximation, g = 7
_LANCZOS_G = 7
_LANCZOS_COEF = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

# Degrees of freedom above which t quantiles use the normal expansion
T_NORMAL_APPROX_DF = 30


def _check_probability(p: float) -> None:
    if not 0.0 < p < 1.0:
        raise ValueError(f"Probability must be in (0, 1), got {p}")


def _horner(coefficients, x: float) -> float:
    """Evaluate sum(c_i * x**i) for coefficients in ascending order."""
    result = 0.0
    for c in reversed(coefficients):
        result = result * x + c
    return result


# --------------------------------------------------------------------------
# Error function and the normal distribution
# --------------------------------------------------------------------------


def erf(x: float) -> float:
    """
    Error function (Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7).

    Computed on |x| with the sign applied afterwards, so ``erf(-x) == -erf(x)``.
    """
    if x == 0:
        return 0.0
    sign = 1.0 if x > 0 else -1.0
    x = abs(x)
    t = 1.0 / (1.0 + _ERF_P * x)
    poly = _horner(_ERF_A, t) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def normal_cdf(z: float, mu: float = 0.0, sigma: float = 1.0) -> float:
    """Cumulative distribution function of N(mu, sigma^2)."""
    if math.isinf(z):
        return 1.0 if z > 0 else 0.0
    return 0.5 * (1.0 + erf((z - mu) / (sigma * math.sqrt(2.0))))


def normal_sf(z: float) -> float:
    """Upper tail ``1 - normal_cdf(z)`` of the standard normal."""
    return normal_cdf(-z)


def normal_quantile(p: float) -> float:
    """
    Inverse of the standard normal CDF (Beasley-Springer-Moro).

    Uses the Beasley-Springer rational approximation for ``|p - 0.5| < 0.42``
    and Moro's log-log polynomial in the tails.

    Raises
    ------
    ValueError
        If p is not strictly between 0 and 1.
    """
    _check_probability(p)
    y = p - 0.5
    if abs(y) < 0.42:
        r = y * y
        return y * _horner(_BSM_A, r) / (1.0 + r * _horner(_BSM_B, r))

    r = 1.0 - p if y > 0 else p
    s = math.log(-math.log(r))
    x = _horner(_MORO_C, s)
    return x if y > 0 else -x


# --------------------------------------------------------------------------
# Gamma and beta functions
# --------------------------------------------------------------------------


def log_gamma(x: float) -> float:
    """
    Natural log of |Gamma(x)| by the Lanczos approximation (g=7, 9 terms).

    The series is only evaluated for x >= 0.5; smaller arguments go through the
    reflection formula. Poles (zero and negative integers) return ``inf``.
    """
    if x <= 0 and x == math.floor(x):
        return math.inf
    if x < 0.5:
        s = math.sin(math.pi * x)
        return math.log(math.pi) - math.log(abs(s)) - log_gamma(1.0 - x)

    x -= 1.0
    a = _LANCZOS_COEF[0]
    t = x + _LANCZOS_G + 0.5
    for i in range(1, len(_LANCZOS_COEF)):
        a += _LANCZOS_COEF[i] / (x + i)
    return 0.5 * math.log(2 * math.pi) + (x + 0.5) * math.log(t) - t + math.log(a)


def gamma_function(x: float) -> float:
    """
    Gamma function via `log_gamma`, with the sign restored for x < 0.

    Values beyond the float range come back as ``inf`` (x > 171.6) or a signed
    zero (large negative x) instead of raising.

    >>> gamma_function(200.0)
    inf
    """
    if x > 0:
        lg = log_gamma(x)
        return math.inf if lg > _LOG_MAX else math.exp(lg)
    if x == math.floor(x):
        return math.inf
    s = math.sin(math.pi * x)
    lg = log_gamma(1.0 - x)
    if lg > _LOG_MAX:
        return math.copysign(0.0, s)
    # reflection: Gamma(x) Gamma(1 - x) = pi / sin(pi x)
    return math.pi / (s * math.exp(lg))


def log_beta(a: float, b: float) -> float:
    return log_gamma(a) + log_gamma(b) - log_gamma(a + b)


def beta_function(a: float, b: float) -> float:
    """Complete beta function B(a, b) for a, b > 0; ``inf`` past the float range."""
    lb = log_beta(a, b)
    return math.inf if lb > _LOG_MAX else math.exp(lb)


def _iteration_cap(*shapes: float) -> int:
    """Term budget for the expansions; they need about sqrt(shape) terms."""
    return max(MAX_ITERATIONS, int(20 * math.sqrt(max(shapes))) + 50)


# --------------------------------------------------------------------------
# Regularized incomplete gamma
# --------------------------------------------------------------------------


def _gamma_series(a: float, x: float) -> float:
    """Lower regularized gamma P(a, x) by its power series (x < a + 1)."""
    ap = a
    term = 1.0 / a
    total = term
    for _ in range(_iteration_cap(a)):
        ap += 1.0
        term *= x / ap
        total += term
        if abs(term) < abs(total) * EPSILON:
            break
    return total * math.exp(-x + a * math.log(x) - log_gamma(a))


def _gamma_continued_fraction(a: float, x: float) -> float:
    """Upper regularized gamma Q(a, x) by Lentz's continued fraction (x >= a + 1)."""
    b = x + 1.0 - a
    c = 1.0 / _FPMIN
    d = 1.0 / b
    h = d
    for i in range(1, _iteration_cap(a) + 1):
        an = -i * (i - a)
        b += 2.0
        d = an * d + b
        if abs(d) < _FPMIN:
            d = _FPMIN
        c = b + an / c
        if abs(c) < _FPMIN:
            c = _FPMIN
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < EPSILON:
            break
    return math.exp(-x + a * math.log(x) - log_gamma(a)) * h


def incomplete_gamma_p(a: float, x: float) -> float:
    """
    Regularized lower incomplete gamma function P(a, x).

    Series expansion for ``x < a + 1``, continued fraction for the complement
    otherwise. Both stop at a relative tolerance of 1e-10; the term budget grows with
    sqrt(a) so large shapes are not cut short.
    """
    if x <= 0:
        return 0.0
    if math.isinf(x):
        return 1.0
    if x < a + 1.0:
        value = _gamma_series(a, x)
    else:
        value = 1.0 - _gamma_continued_fraction(a, x)
    return min(1.0, max(0.0, value))


def incomplete_gamma_q(a: float, x: float) -> float:
    """Regularized upper incomplete gamma function Q(a, x) = 1 - P(a, x)."""
    if x <= 0:
        return 1.0
    if math.isinf(x):
        return 0.0
    if x < a + 1.0:
        value = 1.0 - _gamma_series(a, x)
    else:
        value = _gamma_continued_fraction(a, x)
    return min(1.0, max(0.0, value))


# --------------------------------------------------------------------------
# Regularized incomplete beta
# --------------------------------------------------------------------------


def _beta_continued_fraction(a: float, b: float, x: float) -> float:
    """Continued fraction for I_x(a, b) evaluated with the modified Lentz method."""
    qab = a + b
    qap = a + 1.0
    qam = a - 1.0
    c = 1.0
    d = 1.0 - qab * x / qap
    if abs(d) < _FPMIN:
        d = _FPMIN
    d = 1.0 / d
    h = d
    for m in range(1, _iteration_cap(a, b) + 1):
        m2 = 2 * m
        # even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1.0 + aa * d
        if abs(d) < _FPMIN:
            d = _FPMIN
        c = 1.0 + aa / c
        if abs(c) < _FPMIN:
            c = _FPMIN
        d = 1.0 / d
        h *= d * c
        # odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1.0 + aa * d
        if abs(d) < _FPMIN:
            d = _FPMIN
        c = 1.0 + aa / c
        if abs(c) < _FPMIN:
            c = _FPMIN
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < EPSILON:
            break
    return h


def incomplete_beta(a: float, b: float, x: float) -> float:
    """
    Regularized incomplete beta function I_x(a, b) for a, b > 0.

    The continued fraction is scaled by ``x^a (1-x)^b / (a B(a, b))``. Past the
    mean-like point ``(a + 1) / (a + b + 2)`` the symmetry
    ``I_x(a, b) = 1 - I_{1-x}(b, a)`` is used so the fraction converges quickly.
    """
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    log_front = a * math.log(x) + b * math.log1p(-x) - log_beta(a, b)
    front = math.exp(log_front)
    if x < (a + 1.0) / (a + b + 2.0):
        value = front * _beta_continued_fraction(a, b, x) / a
    else:
        value = 1.0 - front * _beta_continued_fraction(b, a, 1.0 - x) / b
    return min(1.0, max(0.0, value))


# --------------------------------------------------------------------------
# Student's t
# --------------------------------------------------------------------------


def t_cdf(t: float, df: float) -> float:
    """
    CDF of Student's t with `df` degrees of freedom.

    ``t_cdf(0, df)`` is exactly 0.5 and infinite statistics map to 0 or 1.
    """
    if t == 0:
        return 0.5
    if math.isinf(t):
        return 1.0 if t > 0 else 0.0
    x = df / (df + t * t)
    tail = 0.5 * incomplete_beta(df / 2.0, 0.5, x)
    return 1.0 - tail if t > 0 else tail


def t_sf(t: float, df: float) -> float:
    """Upper tail ``1 - t_cdf(t, df)``, computed without cancellation."""
    return t_cdf(-t, df)


def t_pdf(t: float, df: float) -> float:
    """Density of Student's t."""
    log_density = (
        -0.5 * math.log(df)
        - log_beta(df / 2.0, 0.5)
        - 0.5 * (df + 1.0) * math.log1p(t * t / df)
    )
    return math.exp(log_density)


def _refine_t_quantile(t: float, df: float, tail: float) -> float:
    """
    Newton steps on the upper tail from a starting point t > 0.

    Solves ``t_sf(t, df) = tail``; a step that leaves the bracket known to hold
    the root is replaced by bisection.
    """
    lo, hi = 0.0, math.inf
    for _ in range(MAX_ITERATIONS):
        diff = t_sf(t, df) - tail
        if diff == 0:
            return t
        if diff > 0:
            lo = max(lo, t)
        else:
            hi = min(hi, t)
        density = t_pdf(t, df)
        candidate = t + diff / density if density > 0 else math.inf
        if not lo < candidate < hi:
            candidate = 0.5 * (lo + hi) if math.isfinite(hi) else 2.0 * t
        if abs(candidate - t) <= EPSILON * t:
            return candidate
        t = candidate
    return t


def _hill_upper_quantile(df: float, two_tailed: float) -> float:
    """
    Hill (1970), algorithm 396: t > 0 with P(|T| > t) = two_tailed.

    Exact for df = 1 and df = 2.
    """
    P = two_tailed
    if df == 1:
        half = P * math.pi / 2.0
        return math.cos(half) / math.sin(half)
    if df == 2:
        return math.sqrt(2.0 / (P * (2.0 - P)) - 2.0)

    a = 1.0 / (df - 0.5)
    b = 48.0 / (a * a)
    c = ((20700.0 * a / b - 98.0) * a - 16.0) * a + 96.36
    d = ((94.5 / (b + c) - 3.0) / b + 1.0) * math.sqrt(a * math.pi / 2.0) * df
    y = (d * P) ** (2.0 / df)

    if y > 0.05 + a:
        # asymptotic inverse expansion about the normal quantile
        x = normal_quantile(P * 0.5)
        y = x * x
        if df < 5:
            c += 0.3 * (df - 4.5) * (x + 0.6)
        c = (((0.05 * d * x - 5.0) * x - 7.0) * x - 2.0) * x + b + c
        y = (((((0.4 * y + 6.3) * y + 36.0) * y + 94.5) / c - y - 3.0) / b + 1.0) * x
        y = math.expm1(a * y * y)
    else:
        y = (
            (1.0 / (((df + 6.0) / (df * y) - 0.089 * d - 0.822) * (df + 2.0) * 3.0)
             + 0.5 / (df + 4.0)) * y - 1.0
        ) * (df + 1.0) / (df + 2.0) + 1.0 / y
    return math.sqrt(df * y)


def _bisect(cdf: Callable[[float], float], p: float, lo: float, hi: float) -> float:
    """Solve cdf(x) = p on [lo, hi] by bisection."""
    for _ in range(MAX_ITERATIONS):
        mid = 0.5 * (lo + hi)
        if cdf(mid) < p:
            lo = mid
        else:
            hi = mid
        if hi - lo <= EPSILON * max(1.0, abs(mid)):
            break
    return 0.5 * (lo + hi)


def t_quantile(df: float, p: float) -> float:
    """
    Inverse CDF of Student's t.

    For df > 30 the normal quantile is corrected with the first two
    Cornish-Fisher terms in 1/df. Otherwise Hill's algorithm 396 is applied to
    the two-tailed probability ``2 min(p, 1-p)``, polished with Newton steps on
    the tail, and the sign restored.

    Raises
    ------
    ValueError
        If p is not in (0, 1) or df is not positive.
    """
    _check_probability(p)
    if not df > 0:
        raise ValueError(f"Degrees of freedom must be positive, got {df}")
    if p == 0.5:
        return 0.0

    if df > T_NORMAL_APPROX_DF:
        z = normal_quantile(p)
        g1 = (z**3 + z) / 4.0
        g2 = (5 * z**5 + 16 * z**3 + 3 * z) / 96.0
        return z + g1 / df + g2 / (df * df)

    sign = -1.0 if p < 0.5 else 1.0
    upper = max(p, 1.0 - p)
    if df < 1:
        # Hill's expansion is not valid below one degree of freedom
        hi = 1.0
        while t_cdf(hi, df) < upper:
            hi *= 2.0
        return sign * _bisect(lambda t: t_cdf(t, df), upper, 0.0, hi)
    tail = 1.0 - upper
    start = _hill_upper_quantile(df, 2.0 * tail)
    return sign * _refine_t_quantile(start, df, tail)


# --------------------------------------------------------------------------
# F and chi-squared
# --------------------------------------------------------------------------


def f_cdf(f: float, df1: float, df2: float) -> float:
    """CDF of the F distribution with (df1, df2) degrees of freedom."""
    if f <= 0:
        return 0.0
    if math.isinf(f):
        return 1.0
    x = df1 * f / (df1 * f + df2)
    return incomplete_beta(df1 / 2.0, df2 / 2.0, x)


def f_sf(f: float, df1: float, df2: float) -> float:
    """Upper tail of the F distribution, evaluated on the complementary beta."""
    if f <= 0:
        return 1.0
    if math.isinf(f):
        return 0.0
    x = df2 / (df2 + df1 * f)
    return incomplete_beta(df2 / 2.0, df1 / 2.0, x)


def chi_squared_cdf(x: float, df: float) -> float:
    """CDF of the chi-squared distribution."""
    if x <= 0:
        return 0.0
    return incomplete_gamma_p(df / 2.0, x / 2.0)


def chi_squared_sf(x: float, df: float) -> float:
    """Upper tail of the chi-squared distribution."""
    if x <= 0:
        return 1.0
    return incomplete_gamma_q(df / 2.0, x / 2.0)


def chi_squared_pdf(x: float, df: float) -> float:
    if x <= 0:
        return 0.0
    k = df / 2.0
    return math.exp((k - 1.0) * math.log(x) - x / 2.0 - k * math.log(2.0) - log_gamma(k))


def chi_squared_quantile(df: float, p: float) -> float:
    """
    Inverse CDF of the chi-squared distribution.

    Starts from the Wilson-Hilferty cube-root approximation and refines it with
    Newton steps on `chi_squared_cdf`, falling back to bisection whenever a
    step leaves the current bracket.

    Raises
    ------
    ValueError
        If p is not in (0, 1) or df is not positive.
    """
    _check_probability(p)
    if not df > 0:
        raise ValueError(f"Degrees of freedom must be positive, got {df}")

    z = normal_quantile(p)
    h = 2.0 / (9.0 * df)
    x = df * (1.0 - h + z * math.sqrt(h)) ** 3
    if x <= 0:
        x = df * 1e-3

    lo, hi = 0.0, max(2.0 * x, df + 10.0 * math.sqrt(2.0 * df) + 10.0)
    while chi_squared_cdf(hi, df) < p:
        lo, hi = hi, 2.0 * hi

    for _ in range(MAX_ITERATIONS):
        diff = chi_squared_cdf(x, df) - p
        if diff < 0:
            lo = max(lo, x)
        else:
            hi = min(hi, x)
        density = chi_squared_pdf(x, df)
        step = diff / density if density > 0 else math.inf
        candidate = x - step
        if not lo < candidate < hi:
            candidate = 0.5 * (lo + hi)
        if abs(candidate - x) <= EPSILON * x + _FPMIN:
            return candidate
        x = candidate
    return x

import math

SHORT_SUFFIXES = {1: "K", 2: "M", 3: "B"}


def _alpha_suffix(index: int) -> str:
    # 0 -> "aa", 1 -> "ab", ..., 26 -> "ba"
    chars = []
    n = index
    while True:
        chars.append(chr(ord("a") + n % 26))
        n //= 26
        if n == 0:
            break
    suffix = "".join(reversed(chars))
    return suffix.rjust(2, "a")


def _trim(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_number(value: float, decimals: int = 2) -> str:
    """Short display form: 999.50, 1.5K, 2.3M, 4B, then 1aa, 1ab, ..."""
    magnitude = abs(value)
    if round(magnitude, decimals) < 1000 or not math.isfinite(value):
        return f"{value:.{decimals}f}"
    tier = int(math.floor(math.log10(magnitude) / 3))
    scaled = value / 1000 ** tier
    if round(abs(scaled), decimals) >= 1000:
        tier += 1
        scaled /= 1000
    suffix = SHORT_SUFFIXES.get(tier) or _alpha_suffix(tier - 4)
    return _trim(scaled, decimals) + suffix


def format_multiplier(value: float) -> str:
    return "x" + _trim(value, 2)

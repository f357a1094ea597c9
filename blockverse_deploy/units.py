ETHER_DECIMALS = 18


def format_ether(wei: int, decimals: int = ETHER_DECIMALS) -> str:
    """Render an integer amount of the smallest unit as a decimal string

    Trailing zeros of the fraction are dropped but one digit is always
    kept, so 10**18 wei renders as "1.0".
    """
    wei = int(wei)
    sign = "-" if wei < 0 else ""
    whole, fraction = divmod(abs(wei), 10 ** decimals)
    fraction_digits = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_digits}"

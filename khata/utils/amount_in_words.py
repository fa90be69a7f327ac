# khata/utils/amount_in_words.py
from decimal import Decimal, ROUND_HALF_UP

from khata.utils.decimal_utils import to_decimal

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
         "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# Indian numbering groups, largest first
SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]


def _below_thousand(num: int) -> list:
    words = []
    if num >= 100:
        words += [ONES[num // 100], "Hundred"]
        num %= 100
    if 10 <= num < 20:
        words.append(TEENS[num - 10])
    else:
        if num >= 20:
            words.append(TENS[num // 10])
            num %= 10
        if num:
            words.append(ONES[num])
    return words


def _integer_words(num: int) -> list:
    words = []
    for size, label in SCALES:
        if num >= size:
            # crores above 999 still read as "<n> Crore"
            words += _integer_words(num // size) if size == 10_000_000 else _below_thousand(num // size)
            words.append(label)
            num %= size
    words += _below_thousand(num)
    return words


def amount_in_words(amount) -> str:
    """
    Spell an amount the way it is printed on bills, e.g.
    ``1234.50 -> "One Thousand Two Hundred Thirty Four Rupees and Fifty Paise"``.
    """
    value = to_decimal(amount)
    if value == 0:
        return "Zero Rupees"
    if value < 0:
        return "Minus " + amount_in_words(-value)

    rupees = int(value)
    paise = int(((value - rupees) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    result = " ".join(_integer_words(rupees)) or "Zero"
    result += " Rupees"
    if paise:
        result += " and " + " ".join(_below_thousand(paise)) + " Paise"
    return result

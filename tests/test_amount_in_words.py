from decimal import Decimal

import pytest

from khata.utils.amount_in_words import amount_in_words


@pytest.mark.parametrize("amount, words", [
    (0, "Zero Rupees"),
    (1, "One Rupees"),
    (15, "Fifteen Rupees"),
    (250, "Two Hundred Fifty Rupees"),
    (1234.50, "One Thousand Two Hundred Thirty Four Rupees and Fifty Paise"),
    (150000, "One Lakh Fifty Thousand Rupees"),
    (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees"),
    (Decimal("0.05"), "Zero Rupees and Five Paise"),
])
def test_amount_in_words(amount, words):
    assert amount_in_words(amount) == words


def test_negative_amount():
    assert amount_in_words(-20) == "Minus Twenty Rupees"

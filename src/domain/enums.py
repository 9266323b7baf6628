"""Domain enumerations."""

import enum


class BookingStatus(str, enum.Enum):
    PENDING = "pending"


class PaymentMode(str, enum.Enum):
    CASH = "Cash"
    MOBILE_MONEY = "MobileMoney"
    CARD = "Card"

    @classmethod
    def _missing_(cls, value):
        # Labels the booking form has historically sent
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
            return _PAYMENT_ALIASES.get(key)
        return None


_PAYMENT_ALIASES: dict[str, PaymentMode] = {
    "m-pesa": PaymentMode.MOBILE_MONEY,
    "mpesa": PaymentMode.MOBILE_MONEY,
    "mobile money": PaymentMode.MOBILE_MONEY,
    "credit/debit card": PaymentMode.CARD,
}

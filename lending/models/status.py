from enum import IntEnum


class TransactionStatus(IntEnum):
    BORROWED = 1
    RETURNED = 2
    LOST = 3

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]

    def can_become(self, target: "TransactionStatus") -> bool:
        return target in TRANSITIONS[self]

    @classmethod
    def parse(cls, value):
        """
        Accepts 1/2/3, "1", or a name such as "borrowed".
        Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"unknown transaction status: {value}") from None
        return cls(value)


# BORROWED -> BORROWED (extend) changes the due date only and is not a status transition.
TRANSITIONS = {
    TransactionStatus.BORROWED: (TransactionStatus.RETURNED, TransactionStatus.LOST),
    TransactionStatus.RETURNED: (),
    TransactionStatus.LOST: (),
}


class AuditAction(IntEnum):
    BORROW = 1
    RETURN = 2
    LOST = 3
    EXTEND = 4

class LedgerError(Exception):
    """Base class for errors raised by the split/balance engine.

    ``code`` is stable and safe to hand back to API clients.
    """

    code = "ledger_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(LedgerError):
    code = "invalid_amount"


class EmptyMembership(LedgerError):
    code = "empty_membership"


class UnknownMember(LedgerError):
    code = "unknown_member"

    def __init__(self, member_ids: list[str]):
        super().__init__(f"Not household members: {', '.join(member_ids)}")
        self.member_ids = member_ids


class SplitMismatch(LedgerError):
    code = "split_mismatch"

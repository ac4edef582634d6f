"""
Rejections raised by the match coordinator.

Every failed precondition maps to one subclass so callers can tell the kinds
apart. No operation mutates the round before raising.
"""


class RoundError(Exception):
    """Base class for all rejected coordinator calls"""
    kind = "RoundError"


# ============ commit ============

class SlotsFull(RoundError):
    """Both slots of the round are already taken"""
    kind = "SlotsFull"

    def __init__(self):
        super().__init__("Both player slots are filled")


class FeeMismatch(RoundError):
    """Paid amount differs from the required fee"""
    kind = "FeeMismatch"

    def __init__(self, paid, required):
        self.paid = paid
        self.required = required
        super().__init__(f"Fee must be exactly {required}, got {paid}")


class AlreadyCommitted(RoundError):
    """Caller already holds a slot in this round"""
    kind = "AlreadyCommitted"

    def __init__(self, caller):
        self.caller = caller
        super().__init__(f"{caller} already committed in this round")


class MalformedCommitment(RoundError):
    """Digest is not a 32-byte SHA-256 value"""
    kind = "MalformedCommitment"

    def __init__(self, length):
        self.length = length
        super().__init__(f"Commitment must be 32 bytes, got {length}")


# ============ reveal / outcome ============

class NotYetRevealable(RoundError):
    """Reveal attempted before both slots are filled"""
    kind = "NotYetRevealable"

    def __init__(self):
        super().__init__("Both players must commit before revealing")


class NotAParticipant(RoundError):
    kind = "NotAParticipant"

    def __init__(self, caller):
        self.caller = caller
        super().__init__(f"{caller} is not playing in the current round")


class AlreadyRevealed(RoundError):
    kind = "AlreadyRevealed"

    def __init__(self, caller):
        self.caller = caller
        super().__init__(f"{caller} already revealed")


class InvalidChoice(RoundError):
    """Revealed choice is not Rock, Paper or Scissors"""
    kind = "InvalidChoice"

    def __init__(self, choice):
        self.choice = choice
        super().__init__("Invalid Choice")


class CommitmentMismatch(RoundError):
    """Recomputed digest differs from the stored commitment"""
    kind = "CommitmentMismatch"

    def __init__(self, caller):
        self.caller = caller
        super().__init__(f"Reveal does not match the commitment of {caller}")


class IncompleteReveal(RoundError):
    kind = "IncompleteReveal"

    def __init__(self):
        super().__init__("Both players must reveal before the outcome is known")

"""
Match coordinator: the commit-reveal state machine, off-chain.

The round is an immutable value. Each operation takes the current round and
the caller identity and returns a new round (or raises a RoundError with the
round untouched), so replaying the same ordered calls always yields the same
state. MatchCoordinator owns the current round the way the app owns its
global state. The first outcome call after both reveals settles the pot
and resets the round; the finished round stays readable for its two players
until the next round finishes.

Note: reveals are public as soon as they are submitted, so the second player
to reveal can copy the first one and force a draw. Nothing here prevents that.
"""

import logging
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from contracts import config
from contracts.commitment import DIGEST_SIZE, compute_commitment
from contracts.errors import (
    AlreadyCommitted,
    AlreadyRevealed,
    CommitmentMismatch,
    FeeMismatch,
    IncompleteReveal,
    InvalidChoice,
    MalformedCommitment,
    NotAParticipant,
    NotYetRevealable,
    RoundError,
    SlotsFull,
)

logger = logging.getLogger(__name__)

PLAYER_FEE = config.PLAYER_FEE


class Choice(IntEnum):
    ROCK = 1
    PAPER = 2
    SCISSORS = 3


VALID_CHOICES = frozenset(int(c) for c in Choice)


class Outcome(str, Enum):
    """Result of a round as seen by one participant."""
    WIN = "You win"
    LOSE = "You lose"
    DRAW = "It is a draw"


class PayoutPolicy(str, Enum):
    """What happens to the pot once a round is settled."""
    WINNER_TAKES_POT = "winner"  # winner gets the pot, even split on a draw
    HOLD = "hold"                # coordinator keeps the pot


# ============ State ============

class Reveal(BaseModel):
    model_config = ConfigDict(frozen=True)

    choice: Choice
    nonce: int


class Round(BaseModel):
    """One round of play. Empty slots are None."""
    model_config = ConfigDict(frozen=True)

    player1: Optional[str] = None
    player2: Optional[str] = None
    commitment1: Optional[bytes] = None
    commitment2: Optional[bytes] = None
    reveal1: Optional[Reveal] = None
    reveal2: Optional[Reveal] = None
    pot: int = 0

    @property
    def revealed1(self) -> bool:
        return self.reveal1 is not None

    @property
    def revealed2(self) -> bool:
        return self.reveal2 is not None

    @property
    def slots(self) -> Dict[str, int]:
        """Identity -> slot index (1 or 2) for every filled slot."""
        filled = {}
        if self.player1 is not None:
            filled[self.player1] = 1
        if self.player2 is not None:
            filled[self.player2] = 2
        return filled

    @property
    def is_full(self) -> bool:
        return self.player2 is not None

    @property
    def is_empty(self) -> bool:
        return self.player1 is None


class Payout(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipient: str
    amount: int


# ============ Pure operations ============

def commit(round_: Round, caller: str, digest: bytes, fee_paid: int,
           required_fee: int = PLAYER_FEE) -> Round:
    """Accept a commitment into the first open slot and credit the fee to the pot."""
    if round_.is_full:
        raise SlotsFull()
    if fee_paid != required_fee:
        raise FeeMismatch(fee_paid, required_fee)
    if len(digest) != DIGEST_SIZE:
        raise MalformedCommitment(len(digest))
    if caller in round_.slots:
        raise AlreadyCommitted(caller)

    if round_.is_empty:
        filled = {"player1": caller, "commitment1": digest}
    else:
        filled = {"player2": caller, "commitment2": digest}
    return round_.model_copy(update={**filled, "pot": round_.pot + fee_paid})


def reveal(round_: Round, caller: str, choice: int, nonce: int) -> Round:
    """
    Disclose (choice, nonce) for the caller's slot.

    The choice is checked before the digest: an out-of-range choice is
    InvalidChoice even when it matches the stored commitment.
    """
    if not round_.is_full:
        raise NotYetRevealable()
    slot = round_.slots.get(caller)
    if slot is None:
        raise NotAParticipant(caller)
    if (round_.revealed1 if slot == 1 else round_.revealed2):
        raise AlreadyRevealed(caller)
    if choice not in VALID_CHOICES:
        raise InvalidChoice(choice)
    stored = round_.commitment1 if slot == 1 else round_.commitment2
    try:
        recomputed = compute_commitment(choice, nonce)
    except ValueError:
        raise CommitmentMismatch(caller) from None
    if recomputed != stored:
        raise CommitmentMismatch(caller)

    disclosed = Reveal(choice=Choice(choice), nonce=nonce)
    return round_.model_copy(update={f"reveal{slot}": disclosed})


def verdict(first: Choice, second: Choice) -> int:
    """0 draw, 1 first wins, 2 second wins."""
    return (int(first) + 3 - int(second)) % 3


def beats(a: Choice, b: Choice) -> bool:
    return verdict(a, b) == 1


def outcome(round_: Round, caller: str) -> Outcome:
    """Caller's result. Read-only."""
    slot = round_.slots.get(caller)
    if slot is None:
        raise NotAParticipant(caller)
    if not (round_.revealed1 and round_.revealed2):
        raise IncompleteReveal()

    mine, theirs = round_.reveal1.choice, round_.reveal2.choice
    if slot == 2:
        mine, theirs = theirs, mine
    if mine == theirs:
        return Outcome.DRAW
    return Outcome.WIN if beats(mine, theirs) else Outcome.LOSE


def settle(round_: Round, policy: PayoutPolicy) -> Tuple[List[Payout], int]:
    """
    Split the pot of a fully revealed round.

    Returns (payouts, retained) where retained is what stays with the
    coordinator: the whole pot under HOLD, nothing otherwise. The pot is
    always two equal fees, so a draw splits it exactly.
    """
    if not (round_.revealed1 and round_.revealed2):
        raise IncompleteReveal()
    if policy is PayoutPolicy.HOLD:
        return [], round_.pot

    result = verdict(round_.reveal1.choice, round_.reveal2.choice)
    if result == 1:
        return [Payout(recipient=round_.player1, amount=round_.pot)], 0
    if result == 2:
        return [Payout(recipient=round_.player2, amount=round_.pot)], 0
    half = round_.pot // 2
    return [
        Payout(recipient=round_.player1, amount=half),
        Payout(recipient=round_.player2, amount=half),
    ], 0


# ============ Coordinator ============

class MatchCoordinator:
    """Owns the active round, the fee pot and everything paid out so far."""

    PLAYER_FEE = PLAYER_FEE

    def __init__(self, player_fee: int = PLAYER_FEE,
                 payout_policy: PayoutPolicy = PayoutPolicy(config.PAYOUT_POLICY)):
        if player_fee <= 0:
            raise ValueError(f"player_fee must be positive, got {player_fee}")
        self.player_fee = player_fee
        self.payout_policy = payout_policy
        self.round = Round()
        self.last_round: Optional[Round] = None
        self.retained = 0
        self.payouts: List[Payout] = []
        self.rounds_played = 0

    @staticmethod
    def compute_commitment(choice: int, nonce: int) -> bytes:
        return compute_commitment(choice, nonce)

    def commit(self, caller: str, digest: bytes, fee_paid: int) -> None:
        try:
            self.round = commit(self.round, caller, digest, fee_paid, self.player_fee)
        except RoundError as e:
            logger.debug("commit rejected (%s): %s", e.kind, e)
            raise
        logger.info("commit accepted: %s -> slot %d, pot=%d",
                    caller, self.round.slots[caller], self.round.pot)

    def reveal(self, caller: str, choice: int, nonce: int) -> None:
        try:
            self.round = reveal(self.round, caller, choice, nonce)
        except RoundError as e:
            logger.debug("reveal rejected (%s): %s", e.kind, e)
            raise
        logger.info("reveal accepted: %s (slot %d)", caller, self.round.slots[caller])

    def outcome(self, caller: str) -> Outcome:
        """
        Caller's result. The first call after both reveals settles the pot
        per payout_policy and resets the round so a new pair can commit; the
        other player can still read the result of that finished round.
        """
        if caller not in self.round.slots and self.last_round is not None \
                and caller in self.last_round.slots:
            return outcome(self.last_round, caller)
        try:
            result = outcome(self.round, caller)
        except RoundError as e:
            logger.debug("outcome rejected (%s): %s", e.kind, e)
            raise
        logger.info("outcome for %s: %s", caller, result.value)
        self._settle_and_reset()
        return result

    def _settle_and_reset(self) -> None:
        payouts, retained = settle(self.round, self.payout_policy)
        self.payouts.extend(payouts)
        self.retained += retained
        for payout in payouts:
            logger.info("paid %d to %s", payout.amount, payout.recipient)
        if retained:
            logger.info("retained %d from pot", retained)
        self.last_round = self.round
        self.round = Round()
        self.rounds_played += 1
        logger.info("round reset (%d played)", self.rounds_played)

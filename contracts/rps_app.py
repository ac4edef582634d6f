# contracts/rps_app.py
# Rock-Paper-Scissors commit-reveal app: commit (+fee payment), reveal, outcome, commitment helper
from pyteal import *

from contracts.config import PAYOUT_POLICY, PLAYER_FEE, TEAL_VERSION
from contracts.coordinator import Choice, Outcome, PayoutPolicy

# -------- Global keys --------
FEE_KEY = Bytes("fee")        # uint: required per-player fee (microAlgos)
PAYOUT_KEY = Bytes("payout")  # uint: 1=winner takes pot, 0=hold
POT_KEY = Bytes("pot")        # uint: fees of the active round
HELD_KEY = Bytes("held")      # uint: pot amounts retained by the app
P1_KEY = Bytes("p1")          # bytes: slot 1 address ("" = empty)
P2_KEY = Bytes("p2")          # bytes: slot 2 address ("" = empty)
C1_KEY = Bytes("c1")          # bytes: slot 1 commitment (32-byte sha256)
C2_KEY = Bytes("c2")          # bytes: slot 2 commitment
CH1_KEY = Bytes("ch1")        # uint: slot 1 revealed choice (0 = not revealed)
CH2_KEY = Bytes("ch2")        # uint: slot 2 revealed choice
N1_KEY = Bytes("n1")          # uint: slot 1 revealed nonce
N2_KEY = Bytes("n2")          # uint: slot 2 revealed nonce
LP1_KEY = Bytes("lp1")        # bytes: slot 1 address of the last finished round
LP2_KEY = Bytes("lp2")        # bytes: slot 2 address of the last finished round
LV_KEY = Bytes("lv")          # uint: verdict of the last finished round

GLOBAL_UINTS = 9
GLOBAL_BYTES = 6

EMPTY = Bytes("")
SEPARATOR = Bytes("|")


def commitment_expr(choice: Expr, nonce: Expr) -> Expr:
    """sha256(choice | "|" | nonce) over the raw 8-byte args, as commitment.compute_commitment."""
    return Sha256(Concat(choice, SEPARATOR, nonce))


def reset_round() -> Expr:
    return Seq(
        App.globalPut(P1_KEY, EMPTY),
        App.globalPut(P2_KEY, EMPTY),
        App.globalPut(C1_KEY, EMPTY),
        App.globalPut(C2_KEY, EMPTY),
        App.globalPut(CH1_KEY, Int(0)),
        App.globalPut(CH2_KEY, Int(0)),
        App.globalPut(N1_KEY, Int(0)),
        App.globalPut(N2_KEY, Int(0)),
        App.globalPut(POT_KEY, Int(0)),
    )


def pay(receiver: Expr, amount: Expr) -> Expr:
    # fee pooled from the outer outcome() call
    return Seq(
        InnerTxnBuilder.Begin(),
        InnerTxnBuilder.SetFields({
            TxnField.type_enum: TxnType.Payment,
            TxnField.receiver: receiver,
            TxnField.amount: amount,
            TxnField.fee: Int(0),
        }),
        InnerTxnBuilder.Submit(),
    )


def settle(verdict: Expr, payout_policy: PayoutPolicy) -> Expr:
    """verdict: 0 draw, 1 slot 1 wins, 2 slot 2 wins."""
    pot = App.globalGet(POT_KEY)
    if payout_policy is PayoutPolicy.HOLD:
        return App.globalPut(HELD_KEY, App.globalGet(HELD_KEY) + pot)
    half = pot / Int(2)
    return If(verdict == Int(1)).Then(
        pay(App.globalGet(P1_KEY), pot)
    ).ElseIf(verdict == Int(2)).Then(
        pay(App.globalGet(P2_KEY), pot)
    ).Else(Seq(
        pay(App.globalGet(P1_KEY), half),
        pay(App.globalGet(P2_KEY), half),
    ))


def approval_program(fee: int = PLAYER_FEE, payout_policy: PayoutPolicy = PayoutPolicy(PAYOUT_POLICY)) -> Expr:
    is_creator = Txn.sender() == Global.creator_address()
    p1 = App.globalGet(P1_KEY)
    p2 = App.globalGet(P2_KEY)
    is_p1 = Txn.sender() == p1
    is_p2 = Txn.sender() == p2

    on_create = Seq(
        App.globalPut(FEE_KEY, Int(fee)),
        App.globalPut(PAYOUT_KEY, Int(1 if payout_policy is PayoutPolicy.WINNER_TAKES_POT else 0)),
        App.globalPut(HELD_KEY, Int(0)),
        App.globalPut(LP1_KEY, EMPTY),
        App.globalPut(LP2_KEY, EMPTY),
        App.globalPut(LV_KEY, Int(0)),
        reset_round(),
        Approve(),
    )

    # ---- Methods ----

    # commit(digest32)  [grouped after a payment of exactly `fee` to the app]
    digest_arg = Txn.application_args[1]
    fee_payment = Gtxn[Txn.group_index() - Int(1)]
    do_commit = Seq(
        Assert(Txn.application_args.length() == Int(2)),
        Assert(p2 == EMPTY, comment="SlotsFull"),
        Assert(Txn.group_index() > Int(0), comment="FeeMismatch"),
        Assert(fee_payment.type_enum() == TxnType.Payment, comment="FeeMismatch"),
        Assert(fee_payment.sender() == Txn.sender(), comment="FeeMismatch"),
        Assert(fee_payment.receiver() == Global.current_application_address(), comment="FeeMismatch"),
        Assert(fee_payment.amount() == App.globalGet(FEE_KEY), comment="FeeMismatch"),
        Assert(Len(digest_arg) == Int(32), comment="MalformedCommitment"),
        Assert(Not(is_p1), comment="AlreadyCommitted"),
        If(p1 == EMPTY).Then(Seq(
            App.globalPut(P1_KEY, Txn.sender()),
            App.globalPut(C1_KEY, digest_arg),
        )).Else(Seq(
            App.globalPut(P2_KEY, Txn.sender()),
            App.globalPut(C2_KEY, digest_arg),
        )),
        App.globalPut(POT_KEY, App.globalGet(POT_KEY) + fee_payment.amount()),
        Log(Bytes("commit")),
        Approve(),
    )

    # reveal(choice8, nonce8)  [both slots filled, caller holds one]
    choice_arg = Txn.application_args[1]
    nonce_arg = Txn.application_args[2]
    choice = Btoi(choice_arg)

    def reveal_slot(commit_key, choice_key, nonce_key) -> Expr:
        return Seq(
            Assert(App.globalGet(choice_key) == Int(0), comment="AlreadyRevealed"),
            Assert(Len(choice_arg) == Int(8), comment="InvalidChoice"),
            Assert(choice >= Int(int(Choice.ROCK)), comment="InvalidChoice"),
            Assert(choice <= Int(int(Choice.SCISSORS)), comment="InvalidChoice"),
            Assert(Len(nonce_arg) == Int(8), comment="CommitmentMismatch"),
            Assert(commitment_expr(choice_arg, nonce_arg) == App.globalGet(commit_key), comment="CommitmentMismatch"),
            App.globalPut(choice_key, choice),
            App.globalPut(nonce_key, Btoi(nonce_arg)),
        )

    do_reveal = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        Assert(p2 != EMPTY, comment="NotYetRevealable"),
        Assert(Or(is_p1, is_p2), comment="NotAParticipant"),
        If(is_p1).Then(
            reveal_slot(C1_KEY, CH1_KEY, N1_KEY)
        ).Else(
            reveal_slot(C2_KEY, CH2_KEY, N2_KEY)
        ),
        Log(Bytes("reveal")),
        Approve(),
    )

    # outcome()  [logs the caller's result; the first call after both reveals settles and resets,
    #             after which the last round's players can still read their result]
    def log_result(verdict: Expr, as_p1: Expr, as_p2: Expr) -> Expr:
        caller_wins = Or(
            And(as_p1, verdict == Int(1)),
            And(as_p2, verdict == Int(2)),
        )
        return If(verdict == Int(0)).Then(
            Log(Bytes(Outcome.DRAW.value))
        ).ElseIf(caller_wins).Then(
            Log(Bytes(Outcome.WIN.value))
        ).Else(
            Log(Bytes(Outcome.LOSE.value))
        )

    verdict = ScratchVar(TealType.uint64)
    was_p1 = Txn.sender() == App.globalGet(LP1_KEY)
    was_p2 = Txn.sender() == App.globalGet(LP2_KEY)
    do_outcome = Seq(
        If(Or(is_p1, is_p2)).Then(Seq(
            Assert(App.globalGet(CH1_KEY) > Int(0), comment="IncompleteReveal"),
            Assert(App.globalGet(CH2_KEY) > Int(0), comment="IncompleteReveal"),
            verdict.store((App.globalGet(CH1_KEY) + Int(3) - App.globalGet(CH2_KEY)) % Int(3)),
            log_result(verdict.load(), is_p1, is_p2),
            settle(verdict.load(), payout_policy),
            App.globalPut(LP1_KEY, p1),
            App.globalPut(LP2_KEY, p2),
            App.globalPut(LV_KEY, verdict.load()),
            reset_round(),
        )).Else(Seq(
            Assert(Or(was_p1, was_p2), comment="NotAParticipant"),
            log_result(App.globalGet(LV_KEY), was_p1, was_p2),
        )),
        Approve(),
    )

    # commitment(choice8, nonce8)  [anyone; logs the digest]
    do_commitment = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        Log(commitment_expr(Txn.application_args[1], Txn.application_args[2])),
        Approve(),
    )

    on_noop = Cond(
        [Txn.application_args[0] == Bytes("commit"), do_commit],
        [Txn.application_args[0] == Bytes("reveal"), do_reveal],
        [Txn.application_args[0] == Bytes("outcome"), do_outcome],
        [Txn.application_args[0] == Bytes("commitment"), do_commitment],
    )

    program = Cond(
        [Txn.application_id() == Int(0), on_create],
        # program is immutable; delete only once no funds or round remain
        [Txn.on_completion() == OnComplete.UpdateApplication, Reject()],
        [Txn.on_completion() == OnComplete.DeleteApplication, Seq(
            Assert(is_creator),
            Assert(p1 == EMPTY),
            Assert(App.globalGet(POT_KEY) == Int(0)),
            Assert(App.globalGet(HELD_KEY) == Int(0)),
            Approve(),
        )],
        [Txn.on_completion() == OnComplete.NoOp, on_noop],
        [Int(1), Reject()],
    )
    return program


def clear_state_program() -> Expr:
    return Approve()


if __name__ == "__main__":
    print(compileTeal(approval_program(), mode=Mode.Application, version=TEAL_VERSION))

"""
Chart data for the H17 basic strategy and index plays.

Transcribed from the Blackjack Apprenticeship H17 deviation chart (2019).
Rows are raw chart codes; columns follow DEALER_UPCARD_ORDER. The base tables
assume H17 with double after split; the override maps patch single cells for
S17 and no-DAS games.
"""

from dataclasses import dataclass
from enum import Enum


class RawAction(Enum):
    """Chart codes, some conditional on what the hand may do."""

    H = "H"  # Hit
    S = "S"  # Stand
    D = "D"  # Double if allowed, else hit
    DS = "Ds"  # Double if allowed, else stand
    P = "P"  # Split
    PH = "Ph"  # Split if allowed, else hit
    RH = "Rh"  # Surrender if allowed, else hit
    RS = "Rs"  # Surrender if allowed, else stand
    RP = "Rp"  # Surrender if allowed, else split


@dataclass(frozen=True)
class ChartSource:
    """Provenance of the chart data."""

    id: str
    provider: str
    chart_name: str
    source_url: str
    pdf_md5: str
    retrieved_at: str
    notes: tuple[str, ...] = ()


BJA_H17_2019 = ChartSource(
    id="bja-h17-2019",
    provider="Blackjack Apprenticeship",
    chart_name="H17 Deviation Chart",
    source_url="https://www.blackjackapprenticeship.com/wp-content/uploads/2019/07/BJA_H17.pdf",
    pdf_md5="de7471c5d1e232bf85e790b8a83ff9e9",
    retrieved_at="2026-02-25",
    notes=(
        "Basic-strategy base actions for H17 multi-deck with DAS.",
        "Illustrious 18 (without insurance) and Fab 4 index plays.",
    ),
)

DEALER_UPCARD_ORDER = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "A")

H = RawAction.H
S = RawAction.S
D = RawAction.D
Ds = RawAction.DS
P = RawAction.P
Ph = RawAction.PH
Rh = RawAction.RH
Rs = RawAction.RS
Rp = RawAction.RP

# Hard totals 5-21, row index = total - 5
HARD_H17: tuple[tuple[RawAction, ...], ...] = (
    (H, H, H, H, H, H, H, H, H, H),  # 5
    (H, H, H, H, H, H, H, H, H, H),  # 6
    (H, H, H, H, H, H, H, H, H, H),  # 7
    (H, H, H, H, H, H, H, H, H, H),  # 8
    (H, D, D, D, D, H, H, H, H, H),  # 9
    (D, D, D, D, D, D, D, D, H, H),  # 10
    (D, D, D, D, D, D, D, D, D, D),  # 11
    (H, H, S, S, S, H, H, H, H, H),  # 12
    (S, S, S, S, S, H, H, H, H, H),  # 13
    (S, S, S, S, S, H, H, H, H, H),  # 14
    (S, S, S, S, S, H, H, H, Rh, Rh),  # 15
    (S, S, S, S, S, H, H, Rh, Rh, Rh),  # 16
    (S, S, S, S, S, S, S, S, S, Rs),  # 17
    (S, S, S, S, S, S, S, S, S, S),  # 18
    (S, S, S, S, S, S, S, S, S, S),  # 19
    (S, S, S, S, S, S, S, S, S, S),  # 20
    (S, S, S, S, S, S, S, S, S, S),  # 21
)

# Keyed "total-upcard"
HARD_S17_OVERRIDES: dict[str, RawAction] = {
    "11-A": D,
    "15-A": H,
    "17-A": S,
}

# Soft totals 13-21, row index = total - 13
SOFT_H17: tuple[tuple[RawAction, ...], ...] = (
    (H, H, H, D, D, H, H, H, H, H),  # A,2
    (H, H, H, D, D, H, H, H, H, H),  # A,3
    (H, H, D, D, D, H, H, H, H, H),  # A,4
    (H, H, D, D, D, H, H, H, H, H),  # A,5
    (H, D, D, D, D, H, H, H, H, H),  # A,6
    (Ds, Ds, Ds, Ds, Ds, S, S, H, H, H),  # A,7
    (S, S, S, S, Ds, S, S, S, S, S),  # A,8
    (S, S, S, S, S, S, S, S, S, S),  # A,9
    (S, S, S, S, S, S, S, S, S, S),  # A,10
)

SOFT_S17_OVERRIDES: dict[str, RawAction] = {
    "18-A": S,
    "19-6": S,
}

# Pairs, row index = card value - 2 (aces last)
PAIRS_H17_DAS: tuple[tuple[RawAction, ...], ...] = (
    (Ph, Ph, P, P, P, P, H, H, H, H),  # 2,2
    (Ph, Ph, P, P, P, P, H, H, H, H),  # 3,3
    (H, H, H, Ph, Ph, H, H, H, H, H),  # 4,4
    (D, D, D, D, D, D, D, D, H, H),  # 5,5
    (Ph, P, P, P, P, H, H, H, H, H),  # 6,6
    (P, P, P, P, P, P, H, H, H, H),  # 7,7
    (P, P, P, P, P, P, P, P, P, Rp),  # 8,8
    (P, P, P, P, P, S, P, P, S, S),  # 9,9
    (S, S, S, S, S, S, S, S, S, S),  # T,T
    (P, P, P, P, P, P, P, P, P, P),  # A,A
)

# Keyed "pair_index-dealer_index"
PAIRS_NO_DAS_OVERRIDES: dict[str, RawAction] = {
    "0-0": H,
    "0-1": H,
    "1-0": H,
    "1-1": H,
    "2-0": H,
    "2-1": H,
    "2-2": H,
    "2-3": H,
    "2-4": H,
    "4-0": H,
}

PAIRS_S17_OVERRIDES: dict[str, RawAction] = {
    "6-9": P,
}

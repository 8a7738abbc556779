# board_analyzer.py
from collections import Counter
from dataclasses import dataclass

VERY_DRY = 'very-dry'
DRY = 'dry'
WET = 'wet'
VERY_WET = 'very-wet'


@dataclass(frozen=True)
class BoardTexture:
    type: str
    score: int
    has_flush_draw: bool
    has_flush: bool
    has_straight_draw: bool
    has_straight: bool
    high_card_rank: int

    @property
    def is_wet(self):
        return self.type in (WET, VERY_WET)


EMPTY_BOARD = BoardTexture(VERY_DRY, 0, False, False, False, False, 0)


def analyze_board(community_cards):
    """
    Score how much the board favours draws, from 0 (bone dry) to 100.

    The score adds a suit component, a connectivity component, a small
    bonus per broadway card and a bonus for a paired board, then maps onto
    very-dry / dry / wet / very-wet.
    """
    if not community_cards:
        return EMPTY_BOARD

    ranks = sorted(card.value for card in community_cards)
    high_card_rank = ranks[-1]

    max_suits = max(Counter(card.suit for card in community_cards).values())
    has_flush = max_suits >= 5
    has_flush_draw = max_suits >= 3

    # Connectivity: longest run of consecutive ranks, pairs skipped,
    # plus 5 points for every one-card gap
    gap_score = 0
    connected = 1
    max_connected = 1
    for low, high in zip(ranks, ranks[1:]):
        diff = high - low
        if diff == 0:
            continue
        if diff == 1:
            connected += 1
            max_connected = max(max_connected, connected)
        elif diff == 2:
            gap_score += 5
            connected = 1
        else:
            connected = 1

    has_straight = max_connected >= 5
    has_straight_draw = max_connected >= 3 or (max_connected >= 2 and gap_score >= 5)

    score = 0
    if has_flush:
        score += 60
    elif has_flush_draw:
        score += 30
    elif max_suits == 2:
        score += 5

    if has_straight:
        score += 50
    elif has_straight_draw:
        score += 25
    elif gap_score > 0:
        score += 10

    score += 3 * sum(1 for r in ranks if r >= 10)

    if len(set(ranks)) < len(ranks):
        score += 10

    score = min(score, 100)

    if score < 20:
        texture_type = VERY_DRY
    elif score < 45:
        texture_type = DRY
    elif score < 75:
        texture_type = WET
    else:
        texture_type = VERY_WET

    return BoardTexture(
        type=texture_type,
        score=score,
        has_flush_draw=has_flush_draw,
        has_flush=has_flush,
        has_straight_draw=has_straight_draw,
        has_straight=has_straight,
        high_card_rank=high_card_rank,
    )

# hand_evaluator.py
from collections import defaultdict
from enum import IntEnum

from holdem.card import Card


class HandRank(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


# Each rank owns a band of RANK_BASE values; kickers never spill into the next band.
RANK_BASE = 1000000


class HandResult:
    def __init__(self, rank, cards, value, description=None):
        self.rank = rank
        self.cards = cards
        self.value = value
        self.description = description or get_hand_rank_name(rank)

    def __repr__(self):
        return f"{self.description} ({', '.join(map(str, self.cards))}) value={self.value}"


def evaluate_hand(hand_cards, community_cards):
    """
    Evaluate the best poker hand given a player's hole cards and the board.

    Works on anything from 2 to 7 cards; fewer than five cards are ranked on
    whatever is available.

    Returns:
        HandResult with the rank, the (up to) five cards forming it and a
        numeric value where every hand of a higher rank is worth more than
        every hand of a lower rank, and kickers break ties within a rank.
    """
    cards = sorted(list(hand_cards) + list(community_cards), key=lambda c: c.value, reverse=True)
    if not cards:
        return HandResult(HandRank.HIGH_CARD, [], 0)

    flush = get_flush(cards)
    straight = get_straight(cards)

    if flush and straight:
        flush_suit = flush[0].suit
        straight_flush = get_straight([c for c in cards if c.suit == flush_suit])
        if straight_flush:
            if straight_flush[0].value == 14:
                return HandResult(HandRank.ROYAL_FLUSH, straight_flush, 9 * RANK_BASE)
            return HandResult(HandRank.STRAIGHT_FLUSH, straight_flush,
                              8 * RANK_BASE + straight_flush[0].value)

    groups = group_by_rank(cards)
    quads = [g for g in groups if len(g) == 4]
    trips = [g for g in groups if len(g) == 3]
    pairs = [g for g in groups if len(g) == 2]

    if quads:
        kicker = [c for c in cards if c.rank != quads[0][0].rank][:1]
        value = 7 * RANK_BASE + quads[0][0].value * 100 + (kicker[0].value if kicker else 0)
        return HandResult(HandRank.FOUR_OF_A_KIND, quads[0] + kicker, value)

    if trips and (len(trips) >= 2 or pairs):
        # With seven cards a second set of trips can supply the pair
        pair_candidates = [g[:2] for g in trips[1:]] + pairs
        pair = max(pair_candidates, key=lambda g: g[0].value)
        value = 6 * RANK_BASE + trips[0][0].value * 100 + pair[0].value
        return HandResult(HandRank.FULL_HOUSE, trips[0] + pair, value)

    if flush:
        return HandResult(HandRank.FLUSH, flush, 5 * RANK_BASE + kicker_value(flush, 5))

    if straight:
        return HandResult(HandRank.STRAIGHT, straight, 4 * RANK_BASE + straight[0].value)

    if trips:
        kickers = [c for c in cards if c.rank != trips[0][0].rank][:2]
        value = 3 * RANK_BASE + trips[0][0].value * 1000 + kicker_value(kickers, 2)
        return HandResult(HandRank.THREE_OF_A_KIND, trips[0] + kickers, value)

    if len(pairs) >= 2:
        high, low = pairs[0], pairs[1]
        kicker = [c for c in cards if c.rank != high[0].rank and c.rank != low[0].rank][:1]
        value = (2 * RANK_BASE + high[0].value * 1000 + low[0].value * 15
                 + (kicker[0].value if kicker else 0))
        return HandResult(HandRank.TWO_PAIR, high + low + kicker, value)

    if pairs:
        kickers = [c for c in cards if c.rank != pairs[0][0].rank][:3]
        value = 1 * RANK_BASE + pairs[0][0].value * 10000 + kicker_value(kickers, 3)
        return HandResult(HandRank.PAIR, pairs[0] + kickers, value)

    high_cards = cards[:5]
    return HandResult(HandRank.HIGH_CARD, high_cards, kicker_value(high_cards, 5))


def kicker_value(cards, slots):
    """Base-15 positional sum: the first card is the most significant slot."""
    value = 0
    for i, card in enumerate(cards[:slots]):
        value += card.value * 15 ** (slots - 1 - i)
    return value


def get_flush(cards):
    """Top five cards of any suit holding five or more; cards must be sorted high to low."""
    by_suit = defaultdict(list)
    for card in cards:
        by_suit[card.suit].append(card)
    for suit in Card.SUITS:
        if len(by_suit[suit]) >= 5:
            return by_suit[suit][:5]
    return None


def get_straight(cards):
    """Highest five-card straight in ``cards`` (sorted high to low), wheel included."""
    unique = []
    seen = set()
    for card in cards:
        if card.value not in seen:
            seen.add(card.value)
            unique.append(card)

    for i in range(len(unique) - 4):
        window = unique[i:i + 5]
        if window[0].value - window[4].value == 4:
            return window

    # Wheel: the Ace plays low, 5-4-3-2-A
    if 14 in seen and {5, 4, 3, 2}.issubset(seen):
        lows = [c for c in unique if c.value in (5, 4, 3, 2)]
        ace = unique[0]
        return lows + [ace]
    return None


def group_by_rank(cards):
    """Cards grouped by rank, largest groups first, then by rank high to low."""
    groups = defaultdict(list)
    for card in cards:
        groups[card.value].append(card)
    return sorted(groups.values(), key=lambda g: (len(g), g[0].value), reverse=True)


def get_hand_rank_name(rank):
    rank_names = {
        HandRank.ROYAL_FLUSH: 'Royal Flush',
        HandRank.STRAIGHT_FLUSH: 'Straight Flush',
        HandRank.FOUR_OF_A_KIND: 'Four of a Kind',
        HandRank.FULL_HOUSE: 'Full House',
        HandRank.FLUSH: 'Flush',
        HandRank.STRAIGHT: 'Straight',
        HandRank.THREE_OF_A_KIND: 'Three of a Kind',
        HandRank.TWO_PAIR: 'Two Pair',
        HandRank.PAIR: 'Pair',
        HandRank.HIGH_CARD: 'High Card',
    }
    return rank_names.get(rank, 'Unknown Hand')

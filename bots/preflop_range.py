# preflop_range.py
"""
Preflop hand grading shared by every bot tier.

A grade is a coarse 1-12 label (12 = AA/KK), not an equity number. The
13x13 chart helpers lay the grades out the usual way: pairs on the
diagonal, suited hands above it, offsuit hands below.
"""

import numpy as np

from holdem.card import Card

# Descending order for the chart axes: Ace first
RANK_ORDER = list(reversed(Card.RANKS))

PREMIUM = 10
STRONG = 7
PLAYABLE = 5
SPECULATIVE = 3


def evaluate_pre_flop(cards):
    """Grade two hole cards from 1 (trash) to 12 (AA, KK); 0 if not exactly two cards."""
    if len(cards) != 2:
        return 0

    v1, v2 = cards[0].value, cards[1].value
    suited = cards[0].suit == cards[1].suit

    if v1 == v2:
        if v1 >= 13:
            return 12  # AA, KK
        if v1 >= 12:
            return 10  # QQ
        if v1 >= 10:
            return 8   # JJ, TT
        if v1 >= 7:
            return 5   # 77-99
        return 3       # 22-66

    return grade_unpaired(max(v1, v2), min(v1, v2), suited)


def grade_unpaired(high, low, suited):
    gap = high - low
    connected = gap == 1

    if high == 14:
        if low == 13:
            return 11 if suited else 10  # AK
        if low == 12:
            return 9 if suited else 7    # AQ
        if low == 11:
            return 8 if suited else 6    # AJ
        if low == 10:
            return 7 if suited else 5    # AT
        return 4 if suited else 2

    if high == 13:
        if low >= 11:
            return 7 if suited else 5
        if low == 10:
            return 6 if suited else 4
        return 3 if suited else 1

    if high >= 10 and low >= 10:
        return 6 if suited else 4
    if suited and connected and high >= 5:
        return 4
    if suited and gap <= 2 and high >= 6:
        return 3
    if suited:
        return 2
    if connected and high >= 6:
        return 2
    return 1


def is_pocket_pair(cards):
    return len(cards) == 2 and cards[0].rank == cards[1].rank


def is_suited_wheel_ace(cards):
    """A2s-A5s, the usual 3-bet bluff candidates."""
    if len(cards) != 2 or cards[0].suit != cards[1].suit:
        return False
    values = {cards[0].value, cards[1].value}
    return 14 in values and any(2 <= v <= 5 for v in values)


def get_hand_type(cards):
    """
    Returns a string representing the hand type.
      - For pairs: e.g., "AA"
      - For non-pairs: higher card first with a suffix 's' if suited or 'o' if offsuit,
        e.g. "AKs" or "AKo".
    """
    c1, c2 = cards
    if c1.value == c2.value:
        return c1.rank + c2.rank
    high, low = (c1, c2) if c1.value > c2.value else (c2, c1)
    suited_flag = 's' if high.suit == low.suit else 'o'
    return high.rank + low.rank + suited_flag


def build_grade_matrix():
    """
    Grade of every starting hand class as a 13x13 chart.

    Returns:
        matrix: 13x13 numpy array of grades.
        annotations: 13x13 list with hand labels.
        rank_labels: Rank labels (descending order) for axis ticks.
    """
    matrix = np.zeros((13, 13), dtype=int)
    annotations = [['' for _ in range(13)] for _ in range(13)]

    for i, r1 in enumerate(RANK_ORDER):
        for j, r2 in enumerate(RANK_ORDER):
            if i == j:
                cards = [Card(r1, 'h'), Card(r2, 's')]
            elif i < j:
                # Upper triangle: suited hands
                cards = [Card(r1, 'h'), Card(r2, 'h')]
            else:
                # Lower triangle: offsuit hands
                cards = [Card(r2, 'h'), Card(r1, 's')]
            matrix[i, j] = evaluate_pre_flop(cards)
            annotations[i][j] = get_hand_type(cards)

    return matrix, annotations, list(RANK_ORDER)


def plot_grade_chart(title="Preflop Hand Grades", path=None, show=False):
    """
    Plot the grade chart with annotations.

    Returns:
        fig, ax: Matplotlib figure and axes objects.
    """
    import matplotlib.pyplot as plt

    matrix, annotations, rank_labels = build_grade_matrix()

    fig, ax = plt.subplots(figsize=(10, 10))
    im = ax.imshow(matrix, cmap='viridis', vmin=0, vmax=12)

    ax.set_xticks(np.arange(len(rank_labels)))
    ax.set_yticks(np.arange(len(rank_labels)))
    ax.set_xticklabels(rank_labels)
    ax.set_yticklabels(rank_labels)
    ax.set_title(title)

    for i in range(len(rank_labels)):
        for j in range(len(rank_labels)):
            ax.text(j, i, f"{annotations[i][j]}\n{matrix[i, j]}", ha="center", va="center", color="w", fontsize=8)

    fig.colorbar(im, ax=ax)
    plt.tight_layout()
    if path:
        fig.savefig(path)
    if show:
        plt.show()
    return fig, ax

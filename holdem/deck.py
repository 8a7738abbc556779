import numpy as np
from holdem.card import Card

class Deck:
    def __init__(self, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards = None
        self.reset()
        self.shuffle()

    def reset(self):
        self.cards = np.array([Card(rank, suit) for suit in Card.SUITS for rank in Card.RANKS], dtype=object)

    def shuffle(self):
        self.rng.shuffle(self.cards)

    def deal(self):
        if len(self.cards) == 0:
            return None
        card = self.cards[-1]
        self.cards = np.delete(self.cards, -1)
        return card

    def __len__(self):
        return len(self.cards)

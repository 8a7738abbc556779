# card.py

class Card:
    RANKS = ['2', '3', '4', '5', '6', '7', '8', '9', 'T', 'J', 'Q', 'K', 'A']
    SUITS = ['h', 'd', 'c', 's']
    RANK_VALUES = {rank: value for value, rank in enumerate(RANKS, start=2)}

    __slots__ = ('_rank', '_suit')

    def __init__(self, rank, suit):
        if rank not in Card.RANK_VALUES:
            raise ValueError(f"Invalid rank: {rank}")
        if suit not in Card.SUITS:
            raise ValueError(f"Invalid suit: {suit}")
        object.__setattr__(self, '_rank', rank)
        object.__setattr__(self, '_suit', suit)

    @property
    def rank(self):
        return self._rank

    @property
    def suit(self):
        return self._suit

    @property
    def value(self):
        """Numeric rank, 2..14 with the Ace high."""
        return Card.RANK_VALUES[self._rank]

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self._rank == other._rank and self._suit == other._suit

    def __hash__(self):
        return hash((self._rank, self._suit))

    def __repr__(self):
        return f"{self._rank}{self._suit}"

    @staticmethod
    def from_string(card_str):
        """Parse a two-character card such as 'Ah', 'Td' or '10s'."""
        card_str = card_str.strip()
        rank_char = card_str[:-1]
        suit_char = card_str[-1:]
        if rank_char == '10':
            rank_char = 'T'
        rank = rank_char.upper()
        suit = suit_char.lower()
        if rank and suit:
            return Card(rank, suit)
        else:
            raise ValueError(f"Invalid card string: {card_str}")


def cards_from_string(text):
    """'Ah Kd 7s' -> [Ah, Kd, 7s]"""
    return [Card.from_string(token) for token in text.split()]


def format_cards(cards):
    return ''.join(str(card) for card in cards)

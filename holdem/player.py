# player.py
import logging

logger = logging.getLogger(__name__)

# Seat status
ACTIVE = 'active'
FOLDED = 'folded'
ALL_IN = 'all-in'
SITTING_OUT = 'sitting-out'
ELIMINATED = 'eliminated'

# Blind roles
ROLE_NONE = 'none'
SMALL_BLIND = 'small-blind'
BIG_BLIND = 'big-blind'

DIFFICULTIES = ('beginner', 'intermediate', 'advanced', 'pro')


class PlayerStats:
    """
    Session counters for one seat.

    ``vpip``, ``pfr`` and ``af`` are derived from the counters on every read,
    so they can never drift from them.
    """

    def __init__(self):
        self.hands_played = 0
        self.hands_won = 0
        self.vpip_count = 0
        self.pfr_count = 0
        self.three_bet_count = 0
        self.three_bet_opportunity = 0
        self.aggressions_count = 0
        self.calls_count = 0
        self.showdowns_reached = 0
        self.showdowns_won = 0
        self.session_pnl = 0

    @property
    def vpip(self):
        if self.hands_played == 0:
            return 0.0
        return self.vpip_count / self.hands_played * 100

    @property
    def pfr(self):
        if self.hands_played == 0:
            return 0.0
        return self.pfr_count / self.hands_played * 100

    @property
    def af(self):
        # Never called: the raw aggression count stands in for "infinite"
        if self.calls_count > 0:
            return self.aggressions_count / self.calls_count
        return float(self.aggressions_count)

    @property
    def three_bet(self):
        if self.three_bet_opportunity == 0:
            return 0.0
        return self.three_bet_count / self.three_bet_opportunity * 100

    def record_hand(self, put_money_in_pot, raised_pre_flop):
        self.hands_played += 1
        if put_money_in_pot:
            self.vpip_count += 1
        if raised_pre_flop:
            self.pfr_count += 1

    def record_postflop_action(self, action):
        if action in ('bet', 'raise'):
            self.aggressions_count += 1
        elif action == 'call':
            self.calls_count += 1

    def record_three_bet(self, is_three_bet, is_opportunity):
        if is_opportunity:
            self.three_bet_opportunity += 1
        if is_three_bet:
            self.three_bet_count += 1

    def __repr__(self):
        return (f"hands={self.hands_played} vpip={self.vpip:.1f} pfr={self.pfr:.1f} "
                f"af={self.af:.2f} pnl={self.session_pnl}")


class Player:
    def __init__(self, player_id, name, chips, is_human=False, difficulty=None):
        self.id = player_id
        self.name = name
        self.is_human = is_human
        self.difficulty = None if is_human else (difficulty or 'advanced')

        self.chips = chips
        self.initial_chips = chips
        self.total_buy_in = chips

        # Per hand
        self.cards = []
        self.current_bet = 0
        self.hand_contribution = 0
        self.status = ACTIVE if chips > 0 else ELIMINATED
        self.has_vpip_in_hand = False
        self.has_pfr_in_hand = False

        # Per betting round
        self.role = ROLE_NONE
        self.position = None
        self.has_acted = False
        self.last_action = None

        self.stats = PlayerStats()

    def bet(self, amount):
        """Move up to ``amount`` chips from the stack into this street's bet."""
        if amount > self.chips:
            logger.debug(f"{self.name} cannot cover {amount}, betting all in for {self.chips}.")
        actual_bet = max(0, min(self.chips, amount))
        self.chips -= actual_bet
        self.current_bet += actual_bet
        if self.chips == 0 and self.status == ACTIVE:
            self.status = ALL_IN
        return actual_bet

    def reset_for_hand(self):
        self.cards = []
        self.current_bet = 0
        self.role = ROLE_NONE
        self.has_acted = False
        self.last_action = None
        self.has_vpip_in_hand = False
        self.has_pfr_in_hand = False
        self.hand_contribution = 0

    def reset_bet(self):
        self.current_bet = 0
        self.has_acted = False
        self.last_action = None

    @property
    def total_stack(self):
        """Chips behind plus chips already in front of the player this street."""
        return self.chips + self.current_bet

    def __repr__(self):
        return f"{self.name} with stack {self.chips}"

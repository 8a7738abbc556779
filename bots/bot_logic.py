# bot_logic.py
"""
Rule-based 6-max No-Limit Hold'em bots.

Four tiers share one entry point, :meth:`BotLogic.decide`:

- beginner: loose-passive, "fit or fold" after the flop
- intermediate: tight and straightforward, position-aware opens
- advanced: position/stack-aware ranges, geometric 3/4/5-bet sizing,
  texture-driven c-betting and opponent-profile exploits
- pro: the advanced bot played looser and more aggressively (LAG)

Mixed strategies draw from ``self.rng`` (anything with ``random()``
returning a float in [0, 1)), so tests can script every branch.
"""

import logging
import math
from collections import Counter, namedtuple

import numpy as np

from holdem import opponent_profiler
from holdem.board_analyzer import analyze_board
from holdem.game import PRE_FLOP, FLOP, RIVER
from holdem.hand_evaluator import HandRank, evaluate_hand
from holdem.player import ACTIVE, ALL_IN, FOLDED, BIG_BLIND
from bots.preflop_range import (
    evaluate_pre_flop, is_pocket_pair, is_suited_wheel_ace, get_hand_type,
    PREMIUM, STRONG, PLAYABLE, SPECULATIVE,
)

logger = logging.getLogger(__name__)

Decision = namedtuple('Decision', ['action', 'amount'], defaults=[None])

LATE_POSITIONS = ('BTN', 'CO')
BLINDS = ('SB', 'BB')

SHORT_STACK_BBS = 20
# Committing more than this share of the stack means shoving instead
COMMIT_THRESHOLD = 0.4

# Advanced postflop frequencies and sizings (fraction of pot), keyed by the
# coarse dry/wet read of the board
DRY = 'dry'
WET = 'wet'
CBET_FREQUENCY = {DRY: 0.8, WET: 0.6}
CBET_SIZE = {DRY: 0.33, WET: 0.66}
MONSTER_BET_SIZE = {DRY: 0.33, WET: 0.75}
VALUE_BET_SIZE = {DRY: 0.4, WET: 0.66}
BLUFF_SIZE = 0.33

THREE_BET_BLUFF_FREQ = 0.3
PRO_THREE_BET_BLUFF_FREQ = 0.4
PRO_RIVER_SHOVE_FREQ = 0.15
PRO_FLOAT_FREQ = 0.2


class DecisionContext:
    """Everything a strategy needs to know about the spot, computed once per decision."""

    def __init__(self, game, bot):
        state = game.state
        self.game = game
        self.bot = bot
        self.state = state
        self.phase = state.phase
        self.pot = state.pot
        self.bb = state.big_blind_amount
        self.current_bet = state.current_bet
        self.min_raise = state.min_raise
        self.call_cost = max(0, state.current_bet - bot.current_bet)
        self.can_check = self.call_cost == 0
        self.total_stack = bot.chips + bot.current_bet

        stack_in_bbs = bot.chips / self.bb if self.bb else float('inf')
        self.is_short_stack = stack_in_bbs < SHORT_STACK_BBS

        self.position = bot.position or 'UTG'
        self.is_late_position = self.position in LATE_POSITIONS

        self.opponents = [p for p in state.players if p.id != bot.id and p.status in (ACTIVE, ALL_IN)]
        self.villain_type = self._villain_type()
        self.fish_limped = any(
            p.current_bet == self.bb and p.role != BIG_BLIND
            and opponent_profiler.classify(p) == opponent_profiler.FISH
            for p in self.opponents
        )

    def _villain_type(self):
        """Profile of the player we are up against: the bettor, or the lone opponent."""
        if self.call_cost > 0:
            bettors = [p for p in self.opponents if p.current_bet == self.current_bet]
            if bettors:
                return opponent_profiler.classify(bettors[0])
        if len(self.opponents) == 1:
            return opponent_profiler.classify(self.opponents[0])
        return opponent_profiler.UNKNOWN

    def safe_raise(self, amount):
        return min(max(int(amount), self.min_raise), self.total_stack)

    def bet_pot(self, fraction):
        return self.safe_raise(math.floor(self.pot * fraction))


class BotLogic:
    def __init__(self, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def decide(self, game, bot):
        ctx = DecisionContext(game, bot)
        difficulty = bot.difficulty or 'advanced'

        if ctx.phase == PRE_FLOP:
            strategies = {
                'beginner': self.beginner_preflop,
                'intermediate': self.intermediate_preflop,
                'advanced': self.advanced_preflop,
                'pro': self.pro_preflop,
            }
        else:
            strategies = {
                'beginner': self.beginner_postflop,
                'intermediate': self.intermediate_postflop,
                'advanced': self.advanced_postflop,
                'pro': self.pro_postflop,
            }
        strategy = strategies.get(difficulty, strategies['advanced'])
        decision = strategy(ctx)

        if decision.action == 'call' and ctx.call_cost == 0:
            decision = Decision('check')

        logger.debug(f"{bot.name} ({difficulty}, {ctx.position}) {ctx.phase}: {decision}")
        return decision

    def chance(self, probability):
        return self.rng.random() < probability

    def get_raise_to_amount(self, current_bet, min_raise, bot_stack):
        """Raise to 2.2x-2.5x the current bet, or shove if that commits over 40% of the stack."""
        multiplier = 2.2 + self.rng.random() * 0.3
        target_amount = math.floor(current_bet * multiplier)

        if target_amount > bot_stack * COMMIT_THRESHOLD:
            return bot_stack

        return min(max(target_amount, min_raise), bot_stack)

    # ==========================================
    # BEGINNER: passive, plays too many hands, calls too much
    # ==========================================

    def beginner_preflop(self, ctx):
        grade = evaluate_pre_flop(ctx.bot.cards)
        bb = ctx.bb

        # Only raises absolute premiums
        if grade >= PREMIUM and ctx.call_cost < bb * 4:
            return Decision('raise', min(max(bb * 3, ctx.min_raise), ctx.total_stack))

        if grade >= SPECULATIVE:
            if ctx.call_cost > bb * 5:
                return Decision('fold')
            return Decision('call')

        return Decision('check') if ctx.can_check else Decision('fold')

    def beginner_postflop(self, ctx):
        rank = evaluate_hand(ctx.bot.cards, ctx.state.community_cards).rank
        bb = ctx.bb

        # Fit or fold
        if rank >= HandRank.PAIR:
            if rank >= HandRank.TWO_PAIR and ctx.can_check and self.chance(0.5):
                return Decision('raise', min(ctx.min_raise, ctx.total_stack))
            if ctx.call_cost > bb * 10 and rank < HandRank.TWO_PAIR:
                return Decision('fold')
            return Decision('call')

        # Chases draws passively
        if self.coarse_texture(ctx.state.community_cards) == WET and ctx.call_cost < bb * 4:
            return Decision('call')

        return Decision('check') if ctx.can_check else Decision('fold')

    # ==========================================
    # INTERMEDIATE: tight preflop, straightforward postflop
    # ==========================================

    def intermediate_preflop(self, ctx):
        grade = evaluate_pre_flop(ctx.bot.cards)
        bb = ctx.bb

        threshold = 7 if ctx.position in ('UTG', 'HJ') else 5

        if grade >= threshold:
            if ctx.call_cost > bb * 5 and grade < PREMIUM:
                return Decision('fold')
            if ctx.current_bet > bb:
                return Decision('call')
            return Decision('raise', min(ctx.min_raise + bb, ctx.total_stack))

        # Set mining, pairs only
        if SPECULATIVE <= grade <= PLAYABLE and ctx.call_cost < bb * 3 and is_pocket_pair(ctx.bot.cards):
            return Decision('call')

        return Decision('check') if ctx.can_check else Decision('fold')

    def intermediate_postflop(self, ctx):
        rank = evaluate_hand(ctx.bot.cards, ctx.state.community_cards).rank

        if rank >= HandRank.TWO_PAIR:
            return Decision('raise', ctx.safe_raise(math.floor(ctx.pot * 0.75)))

        if rank == HandRank.PAIR:
            if ctx.call_cost > ctx.pot * 0.7:
                return Decision('fold')
            if ctx.can_check:
                return Decision('check')
            return Decision('call')

        # Occasional c-bet on dry boards
        if ctx.can_check and self.coarse_texture(ctx.state.community_cards) == DRY and self.chance(0.6):
            return Decision('raise', ctx.safe_raise(math.floor(ctx.pot * 0.5)))

        return Decision('check') if ctx.can_check else Decision('fold')

    # ==========================================
    # ADVANCED
    # ==========================================

    def three_bet_size(self, ctx, raise_to):
        # 3x in position, 4x out of position
        return math.floor(raise_to * (3 if ctx.is_late_position else 4))

    def four_bet_size(self, ctx, raise_to):
        return math.floor(raise_to * (2.2 if ctx.is_late_position else 2.5))

    def five_bet_size(self, ctx, raise_to):
        calculated = math.floor(raise_to * 2.2)
        return ctx.total_stack if calculated > ctx.total_stack * COMMIT_THRESHOLD else calculated

    def advanced_preflop(self, ctx, grade_boost=0, late_open_threshold=4, bluff_freq=THREE_BET_BLUFF_FREQ):
        bb = ctx.bb
        current_bet = ctx.current_bet
        grade = evaluate_pre_flop(ctx.bot.cards) + grade_boost
        villain = ctx.villain_type

        facing_raise = current_bet > bb
        facing_3bet = bb * 6 < current_bet <= bb * 15
        facing_4bet = current_bet > bb * 15

        players_in_pot = sum(1 for p in ctx.state.players if p.current_bet > 0 and p.status != FOLDED)
        multiway = players_in_pot >= 3

        is_blind = ctx.position in BLINDS
        open_size = math.floor(bb * 3) if is_blind else math.floor(bb * 2.5)
        open_raise = Decision('raise', ctx.safe_raise(open_size + current_bet))
        fold_or_check = Decision('check') if ctx.can_check else Decision('fold')

        # Push/fold when short
        if ctx.is_short_stack:
            if grade >= 8:
                return Decision('raise', ctx.total_stack)
            if grade >= 5 and ctx.is_late_position:
                return Decision('raise', ctx.total_stack)
            return fold_or_check

        # Nits only 3-bet the top of their range
        if villain == opponent_profiler.NIT and (facing_3bet or facing_4bet) and grade < PREMIUM:
            return Decision('fold')

        # Premium: AA, KK, QQ, AKs
        if grade >= PREMIUM:
            if facing_4bet:
                return Decision('raise', ctx.safe_raise(self.five_bet_size(ctx, current_bet)))
            if facing_3bet:
                return Decision('raise', ctx.safe_raise(self.four_bet_size(ctx, current_bet)))
            if facing_raise:
                return Decision('raise', ctx.safe_raise(self.three_bet_size(ctx, current_bet)))
            return open_raise

        # Strong: JJ, TT, AK, AQs
        if grade >= STRONG:
            if facing_4bet:
                return Decision('call') if grade >= 9 else Decision('fold')
            if facing_3bet:
                if multiway and villain != opponent_profiler.LAG:
                    return Decision('fold')
                return Decision('call')
            if facing_raise:
                if villain == opponent_profiler.FISH or self.chance(0.5):
                    return Decision('raise', ctx.safe_raise(self.three_bet_size(ctx, current_bet)))
                return Decision('call')
            return open_raise

        # Playable: 99-66, AJ, KQ, suited broadways
        threshold = 6 if ctx.position == 'UTG' else PLAYABLE
        if grade >= threshold:
            if facing_3bet or facing_4bet:
                return Decision('fold')
            if facing_raise:
                if villain == opponent_profiler.FISH:
                    # Isolate the fish
                    return Decision('raise', ctx.safe_raise(self.three_bet_size(ctx, current_bet)))
                if villain == opponent_profiler.LAG and ctx.call_cost < bb * 6:
                    return Decision('call')
                if (ctx.is_late_position or ctx.position == 'BB') and ctx.call_cost < bb * 4:
                    return Decision('call')
                return Decision('fold')
            if ctx.fish_limped:
                return Decision('raise', ctx.safe_raise(open_size + current_bet + bb))
            return open_raise

        # Speculative and bluffs: small pairs, connectors, A2s-A5s
        spec_threshold = late_open_threshold if ctx.is_late_position else PLAYABLE
        if villain == opponent_profiler.NIT and not facing_raise:
            spec_threshold -= 1

        if is_suited_wheel_ace(ctx.bot.cards) and facing_raise and not facing_3bet and not facing_4bet:
            if villain != opponent_profiler.FISH:
                freq = bluff_freq + 0.2 if villain == opponent_profiler.NIT else bluff_freq
                if ctx.is_late_position and self.chance(freq):
                    return Decision('raise', ctx.safe_raise(self.three_bet_size(ctx, current_bet)))

        if grade >= spec_threshold:
            if facing_raise:
                if ctx.position == 'BB' and ctx.call_cost < bb * 3:
                    return Decision('call')
                if villain == opponent_profiler.LAG and ctx.call_cost < bb * 3:
                    return Decision('call')
                # Set mine when deep
                if SPECULATIVE <= grade <= PLAYABLE and ctx.call_cost < bb * 3 and ctx.bot.chips > bb * 50:
                    return Decision('call')
                return Decision('fold')
            if ctx.is_late_position:
                return open_raise
            return fold_or_check

        return fold_or_check

    def advanced_postflop(self, ctx):
        rank = evaluate_hand(ctx.bot.cards, ctx.state.community_cards).rank
        texture = self.coarse_texture(ctx.state.community_cards)
        board = analyze_board(ctx.state.community_cards)
        logger.debug(f"{ctx.bot.name} reads the board as {texture}: {board.type}, score {board.score}")
        villain = ctx.villain_type
        vs_fish = villain == opponent_profiler.FISH

        facing_bet = ctx.call_cost > 0
        big_bet = ctx.call_cost > ctx.pot * 0.6
        small_bet = ctx.call_cost < ctx.pot * 0.35
        in_position = ctx.is_late_position

        def raise_amount():
            return Decision('raise', self.get_raise_to_amount(ctx.current_bet, ctx.min_raise, ctx.total_stack))

        # Monster: straight or better
        if rank >= HandRank.STRAIGHT:
            if facing_bet:
                if ctx.phase == RIVER and self.chance(0.2):
                    return Decision('call')  # trap
                return raise_amount()
            return Decision('raise', ctx.bet_pot(MONSTER_BET_SIZE[texture]))

        # Strong: two pair, trips
        if rank >= HandRank.TWO_PAIR:
            if facing_bet:
                if big_bet and texture == WET and not vs_fish:
                    return Decision('call') if self.chance(0.6) else raise_amount()
                return raise_amount()
            size = VALUE_BET_SIZE[texture]
            if vs_fish:
                size = max(size, 0.75)
            return Decision('raise', ctx.bet_pot(size))

        # Medium: one pair
        if rank == HandRank.PAIR:
            if facing_bet:
                if big_bet:
                    if villain == opponent_profiler.LAG:
                        return Decision('call')
                    if texture == WET or villain == opponent_profiler.NIT:
                        return Decision('fold')
                    return Decision('call') if self.chance(0.4) else Decision('fold')
                return Decision('call')

            if vs_fish:
                return Decision('raise', ctx.bet_pot(0.66))

            if ctx.phase == FLOP:
                if self.chance(CBET_FREQUENCY[texture]):
                    return Decision('raise', ctx.bet_pot(CBET_SIZE[texture]))
                return Decision('check')

            if self.chance(0.5):
                return Decision('raise', ctx.bet_pot(0.5))
            return Decision('check')

        # Weak: high card, draws
        if ctx.can_check:
            if vs_fish:
                return Decision('check')
            bluff_freq = 0.35 if in_position else 0.20
            if villain == opponent_profiler.NIT:
                bluff_freq += 0.15
            if self.chance(bluff_freq) and texture == DRY:
                return Decision('raise', ctx.bet_pot(BLUFF_SIZE))
            return Decision('check')

        # Float
        if small_bet and in_position and self.chance(0.25):
            return Decision('call')

        # Semi-bluff raise
        if ctx.phase != RIVER and small_bet and self.chance(0.2):
            if vs_fish:
                return Decision('call')
            return raise_amount()

        return Decision('fold')

    # ==========================================
    # PRO: advanced, played loose-aggressive
    # ==========================================

    def pro_preflop(self, ctx):
        boost = 1 if ctx.is_late_position else 0
        decision = self.advanced_preflop(ctx, grade_boost=boost, late_open_threshold=SPECULATIVE)
        if decision.action != 'fold':
            return decision

        grade = evaluate_pre_flop(ctx.bot.cards) + boost
        facing_raise = ctx.current_bet > ctx.bb
        facing_4bet = ctx.current_bet > ctx.bb * 15
        if grade >= PLAYABLE and facing_raise and not facing_4bet and self.chance(PRO_THREE_BET_BLUFF_FREQ):
            logger.debug(f"{ctx.bot.name} 3-bet bluffs {get_hand_type(ctx.bot.cards)}")
            return Decision('raise', ctx.safe_raise(self.three_bet_size(ctx, ctx.current_bet)))
        return decision

    def pro_postflop(self, ctx):
        if ctx.phase == RIVER:
            rank = evaluate_hand(ctx.bot.cards, ctx.state.community_cards).rank
            if rank == HandRank.HIGH_CARD and self.chance(PRO_RIVER_SHOVE_FREQ):
                return Decision('raise', ctx.total_stack)

        decision = self.advanced_postflop(ctx)

        if ctx.phase == FLOP and decision.action == 'fold' and self.chance(PRO_FLOAT_FREQ):
            return Decision('call')
        return decision

    @staticmethod
    def coarse_texture(community_cards):
        """
        'wet' when three board cards share a suit or two neighbouring ranks are
        at most two apart (paired boards included), else 'dry'.
        """
        if len(community_cards) < 3:
            return DRY

        suit_counts = Counter(card.suit for card in community_cards)
        if max(suit_counts.values()) >= 3:
            return WET

        ranks = sorted(card.value for card in community_cards)
        if any(high - low <= 2 for low, high in zip(ranks, ranks[1:])):
            return WET
        return DRY

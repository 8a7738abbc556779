# game.py

import logging
import uuid

import numpy as np

from holdem.card import format_cards
from holdem.deck import Deck
from holdem.hand_evaluator import evaluate_hand
from holdem import opponent_profiler
from holdem.player import (
    ACTIVE, ALL_IN, FOLDED, ELIMINATED, SMALL_BLIND, BIG_BLIND,
)

logger = logging.getLogger(__name__)

PRE_FLOP = 'pre-flop'
FLOP = 'flop'
TURN = 'turn'
RIVER = 'river'
SHOWDOWN = 'showdown'

ACTIONS = ('fold', 'check', 'call', 'raise')

# Dealer seat is BTN, then SB, BB, UTG ... around this fixed rotation.
POSITIONS_6MAX = ['UTG', 'HJ', 'CO', 'BTN', 'SB', 'BB']
BUTTON_OFFSET = POSITIONS_6MAX.index('BTN')


class WinnerInfo:
    def __init__(self, player_ids, hand_description, pot_won, winning_cards=None, odd_chips=0):
        self.player_ids = player_ids
        self.hand_description = hand_description
        self.pot_won = pot_won
        self.winning_cards = winning_cards or []
        # Chips left over by an uneven split; nobody receives them
        self.odd_chips = odd_chips

    def __repr__(self):
        return f"WinnerInfo({self.player_ids}, {self.hand_description!r}, pot={self.pot_won})"


class HandHistory:
    """One resolved hand, as the session analytics consume it."""

    def __init__(self, hand_number, final_pot, is_showdown, winner_ids, community_cards,
                 action_log, player_net, hero=None, hero_won=0):
        self.hand_number = hand_number
        self.final_pot = final_pot
        self.is_showdown = is_showdown
        self.winner_ids = winner_ids
        self.community_cards = community_cards
        self.action_log = action_log
        self.player_net = player_net

        if hero is not None:
            self.hero_net_won = hero_won - hero.hand_contribution
            self.hero_cards = list(hero.cards)
            self.hero_position = hero.position
        else:
            self.hero_net_won = 0
            self.hero_cards = []
            self.hero_position = None
        self.hero_showdown_won = self.hero_net_won if is_showdown else 0
        self.hero_non_showdown_won = 0 if is_showdown else self.hero_net_won
        self.hero_all_in_ev = 0

    def __repr__(self):
        return f"Hand #{self.hand_number}: pot {self.final_pot}, winners {self.winner_ids}"


class GameState:
    """Everything a table observer needs; owned and mutated only by PokerGame."""

    def __init__(self, players, small_blind, big_blind):
        self.id = str(uuid.uuid4())
        self.phase = PRE_FLOP
        self.pot = 0
        self.current_bet = 0
        self.min_raise = big_blind * 2
        self.community_cards = []
        self.players = players
        self.active_player_id = players[0].id if players else ''
        self.dealer_index = -1  # first start_new_hand moves it to seat 0
        self.small_blind_amount = small_blind
        self.big_blind_amount = big_blind
        self.winners = []
        self.winner_info = None
        self.eliminated_player_ids = []
        self.is_game_over = False
        self.hand_number = 0
        self.session_hands = []
        self.current_hand_log = []


class PokerGame:
    def __init__(self, players, small_blind=1, big_blind=2, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.deck = Deck(self.rng)
        self.state = GameState(list(players), small_blind, big_blind)

    @classmethod
    def from_config(cls, players, config, rng=None):
        table = config['table']
        return cls(players, small_blind=table['small_blind'], big_blind=table['big_blind'], rng=rng)

    # ------------------------------------------------------------------
    # Hand lifecycle
    # ------------------------------------------------------------------

    def start_new_hand(self):
        state = self.state
        players = state.players
        n = len(players)

        if len(self.get_players_with_chips()) < 2:
            state.is_game_over = True
            logger.info("Fewer than two players with chips, game over.")
            return

        self.deck.reset()
        self.deck.shuffle()
        state.pot = 0
        state.community_cards = []
        state.phase = PRE_FLOP
        state.current_bet = state.big_blind_amount
        state.min_raise = state.big_blind_amount * 2
        state.winners = []
        state.winner_info = None
        state.hand_number += 1
        state.current_hand_log = []

        # Rotate the button past busted seats
        dealer = (state.dealer_index + 1) % n
        attempts = 0
        while players[dealer].chips <= 0 and attempts < n:
            dealer = (dealer + 1) % n
            attempts += 1
        state.dealer_index = dealer

        for idx, player in enumerate(players):
            player.reset_for_hand()
            if player.chips > 0:
                player.status = ACTIVE
            else:
                player.status = ELIMINATED
                if player.id not in state.eliminated_player_ids:
                    state.eliminated_player_ids.append(player.id)
            offset = (idx - dealer) % n
            player.position = POSITIONS_6MAX[(BUTTON_OFFSET + offset) % len(POSITIONS_6MAX)]

        sb_idx = self._next_seat(dealer, ACTIVE)
        bb_idx = self._next_seat(sb_idx, ACTIVE) if sb_idx is not None else None
        if sb_idx is None or bb_idx is None or sb_idx == bb_idx:
            state.is_game_over = True
            logger.info("Fewer than two active seats, game over.")
            return

        self.post_blind(sb_idx, state.small_blind_amount, SMALL_BLIND)
        self.post_blind(bb_idx, state.big_blind_amount, BIG_BLIND)

        self.deal_hole_cards()

        utg_idx = self._next_seat(bb_idx, ACTIVE)
        state.active_player_id = players[utg_idx if utg_idx is not None else bb_idx].id

        logger.info(f"Hand #{state.hand_number} started. Dealer: {players[dealer].name}")

        # Both blinds all-in with nobody else to act: nothing to wait for
        if not self._with_status(ACTIVE):
            self.next_turn()

    def post_blind(self, player_idx, amount, role):
        player = self.state.players[player_idx]
        if player.status != ACTIVE:
            return
        posted = player.bet(amount)
        player.role = role
        self.state.current_hand_log.append(f"{player.name} posts {role} ${posted}")
        if player.status == ALL_IN:
            logger.debug(f"{player.name} is all-in posting the {role}.")

    def deal_hole_cards(self):
        dealt_to = [p for p in self.state.players if p.status in (ACTIVE, ALL_IN)]
        for _ in range(2):
            for player in dealt_to:
                card = self.deck.deal()
                if card is not None:
                    player.cards.append(card)

    def deal_community_cards(self, number):
        for _ in range(number):
            card = self.deck.deal()
            if card is not None:
                self.state.community_cards.append(card)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def handle_action(self, player_id, action, amount=None):
        """
        Apply one action for the player whose turn it is.

        Returns True if the action changed the game, False if it was ignored
        (not this player's turn) or rejected (illegal check, raise without an
        amount, unknown action). Out-of-range raise amounts are clamped, never
        rejected.
        """
        state = self.state
        player = self.get_player(player_id)
        if player is None or player.id != state.active_player_id or state.phase == SHOWDOWN:
            return False

        if action not in ACTIONS:
            logger.warning(f"Unknown action {action!r} from {player.name}")
            return False
        if action == 'check' and state.current_bet > player.current_bet:
            logger.warning(f"{player.name} cannot check facing a bet of {state.current_bet}, must call or fold")
            return False
        if action == 'raise' and not amount:
            logger.warning(f"{player.name} tried to raise without an amount")
            return False

        raise_to = None
        if action == 'raise':
            raise_to = self.legal_raise_amount(player, amount)
            if raise_to <= state.current_bet:
                action = 'call'
        if action == 'call' and state.current_bet <= player.current_bet:
            action = 'check'

        is_bet = action == 'raise' and state.current_bet == 0 and state.phase != PRE_FLOP
        display_action = 'bet' if is_bet else action

        shown_amount = f" ${raise_to}" if raise_to is not None and action == 'raise' else ''
        state.current_hand_log.append(f"{player.name} {display_action}s{shown_amount} ({format_cards(player.cards)})")
        logger.debug(f"{player.name} action: {display_action}{shown_amount}")

        self._track_stats(player, action, display_action)

        player.last_action = display_action
        player.has_acted = True

        if action == 'fold':
            player.status = FOLDED
            remaining = [p for p in state.players if p.status in (ACTIVE, ALL_IN)]
            if len(remaining) == 1:
                self.collect_bets()
                state.phase = SHOWDOWN
                self.resolve_showdown()
                return True
        elif action == 'call':
            player.bet(state.current_bet - player.current_bet)
        elif action == 'raise':
            self._apply_raise(player, raise_to)

        self.next_turn()
        return True

    def legal_raise_amount(self, player, amount):
        """Clamp a raise-to amount into [min_raise, player's whole stack]."""
        stack = player.total_stack
        valid_amount = min(amount, stack)
        if valid_amount < self.state.min_raise and valid_amount < stack:
            valid_amount = min(self.state.min_raise, stack)
        return valid_amount

    def _apply_raise(self, player, raise_to):
        state = self.state
        previous_bet = state.current_bet
        min_raise = state.min_raise

        player.bet(raise_to - player.current_bet)
        raise_size = player.current_bet - previous_bet
        state.current_bet = player.current_bet

        if player.current_bet >= min_raise:
            # Full raise: action re-opens for everyone still able to act
            for p in state.players:
                if p.id != player.id and p.status == ACTIVE:
                    p.has_acted = False
            state.min_raise = state.current_bet + max(raise_size, state.big_blind_amount)
        else:
            # Short all-in: only seats that now owe chips get to act again
            for p in state.players:
                if p.id != player.id and p.status == ACTIVE and p.current_bet < player.current_bet:
                    p.has_acted = False

    def _track_stats(self, player, action, display_action):
        state = self.state
        if state.phase == PRE_FLOP:
            if action in ('call', 'raise'):
                player.has_vpip_in_hand = True
            if action == 'raise':
                player.has_pfr_in_hand = True
            if state.current_bet > state.big_blind_amount:
                opponent_profiler.update_three_bet_stats(player, action == 'raise', True)
        elif display_action in ('bet', 'raise', 'call'):
            opponent_profiler.update_postflop_action(player, display_action)

    # ------------------------------------------------------------------
    # Turn and street progression
    # ------------------------------------------------------------------

    def next_turn(self):
        state = self.state
        active = self._with_status(ACTIVE)
        all_in = self._with_status(ALL_IN)

        logger.debug(f"[next_turn] phase={state.phase} active={len(active)} all_in={len(all_in)}")

        if not active and len(all_in) > 1:
            # Everyone is all-in: run the board out
            if self.is_round_complete():
                self.collect_bets()
                self.next_phase()
            return

        if not active or (len(active) == 1 and not all_in):
            if state.phase != SHOWDOWN:
                self.collect_bets()
                state.phase = SHOWDOWN
                self.resolve_showdown()
            return

        if self.is_round_complete():
            self.collect_bets()
            self.next_phase()
            return

        idx = self._seat_index(state.active_player_id)
        next_idx = self._next_seat(idx, ACTIVE)
        if next_idx is not None:
            state.active_player_id = state.players[next_idx].id

    def is_round_complete(self):
        active = self._with_status(ACTIVE)
        all_in = self._with_status(ALL_IN)

        if not active:
            return True

        if len(active) == 1 and all_in:
            lone = active[0]
            return lone.current_bet >= self.state.current_bet and lone.has_acted

        bets_match = all(p.current_bet == self.state.current_bet for p in active)
        all_acted = all(p.has_acted for p in active)
        return bets_match and all_acted

    def collect_bets(self):
        for player in self.state.players:
            if player.current_bet > 0:
                self.state.pot += player.current_bet
                player.hand_contribution += player.current_bet
                player.current_bet = 0

    def next_phase(self):
        state = self.state
        for player in state.players:
            player.reset_bet()
        state.current_bet = 0
        state.min_raise = state.big_blind_amount

        active = self._with_status(ACTIVE)
        needs_runout = len(active) <= 1 and len(self._with_status(ALL_IN)) > 0

        if state.phase == PRE_FLOP:
            state.phase = FLOP
            state.current_hand_log.append("--- FLOP ---")
            self.deal_community_cards(3)
        elif state.phase == FLOP:
            state.phase = TURN
            state.current_hand_log.append("--- TURN ---")
            self.deal_community_cards(1)
        elif state.phase == TURN:
            state.phase = RIVER
            state.current_hand_log.append("--- RIVER ---")
            self.deal_community_cards(1)
        elif state.phase == RIVER:
            state.phase = SHOWDOWN
            self.resolve_showdown()
            return
        else:
            return

        logger.debug(f"{state.phase}: {format_cards(state.community_cards)}")

        if needs_runout:
            self.next_phase()
            return

        if active:
            first = self._next_seat(state.dealer_index, ACTIVE)
            if first is not None:
                state.active_player_id = state.players[first].id

    # ------------------------------------------------------------------
    # Showdown
    # ------------------------------------------------------------------

    def resolve_showdown(self):
        state = self.state
        contestants = [p for p in state.players if p.status in (ACTIVE, ALL_IN)]
        if not contestants:
            return

        pot = state.pot
        if len(contestants) == 1:
            winner = contestants[0]
            winner.chips += pot
            winner.stats.hands_won += 1
            payouts = {winner.id: pot}
            state.winners = [winner.id]
            state.winner_info = WinnerInfo([winner.id], 'Everyone else folded', pot)
            logger.info(f"Winner by fold: {winner.name} wins ${pot}")
            self._finish_hand(payouts, is_showdown=False)
            return

        results = [(p, evaluate_hand(p.cards, state.community_cards)) for p in contestants]
        for player in contestants:
            player.stats.showdowns_reached += 1

        results.sort(key=lambda r: r[1].value, reverse=True)
        best_value = results[0][1].value
        winners = [p for p, hand in results if hand.value == best_value]

        split_pot = pot // len(winners)
        odd_chips = pot - split_pot * len(winners)
        if odd_chips:
            logger.warning(f"Split pot of ${pot} leaves {odd_chips} odd chip(s) unawarded")

        payouts = {}
        for winner in winners:
            winner.chips += split_pot
            winner.stats.hands_won += 1
            winner.stats.showdowns_won += 1
            payouts[winner.id] = split_pot

        best_hand = results[0][1]
        state.winners = [w.id for w in winners]
        state.winner_info = WinnerInfo(state.winners, best_hand.description, pot,
                                       best_hand.cards, odd_chips)
        logger.info(f"Showdown! {', '.join(w.name for w in winners)} wins ${split_pot} with {best_hand.description}")
        self._finish_hand(payouts, is_showdown=True)

    def _finish_hand(self, payouts, is_showdown):
        state = self.state

        player_net = {}
        for player in state.players:
            if player.hand_contribution > 0:
                net = payouts.get(player.id, 0) - player.hand_contribution
                player.stats.session_pnl += net
                player_net[player.id] = net

        hero = next((p for p in state.players if p.is_human), None)
        state.session_hands.append(HandHistory(
            hand_number=state.hand_number,
            final_pot=state.pot,
            is_showdown=is_showdown,
            winner_ids=list(state.winners),
            community_cards=list(state.community_cards),
            action_log=list(state.current_hand_log),
            player_net=player_net,
            hero=hero,
            hero_won=payouts.get(hero.id, 0) if hero is not None else 0,
        ))

        for player in state.players:
            if player.status != ELIMINATED:
                opponent_profiler.update_hand_stats(player, player.has_vpip_in_hand, player.has_pfr_in_hand)

    # ------------------------------------------------------------------
    # Table management and queries
    # ------------------------------------------------------------------

    def buy_in(self, player_id, amount):
        player = self.get_player(player_id)
        if player is None:
            return

        player.total_buy_in += amount
        player.chips = amount
        if player.id in self.state.eliminated_player_ids:
            self.state.eliminated_player_ids.remove(player.id)
        logger.info(f"{player.name} buys in for ${amount}")

        if self.state.is_game_over and len(self.get_players_with_chips()) >= 2:
            self.state.is_game_over = False

    def is_game_over(self):
        return len(self.get_players_with_chips()) <= 1

    def get_active_players(self):
        return [p for p in self.state.players if p.status in (ACTIVE, ALL_IN)]

    def get_players_with_chips(self):
        return [p for p in self.state.players if p.chips > 0]

    def get_player_position(self, player_id):
        player = self.get_player(player_id)
        return player.position if player is not None else None

    def get_player(self, player_id):
        return next((p for p in self.state.players if p.id == player_id), None)

    def get_active_player(self):
        return self.get_player(self.state.active_player_id)

    def _with_status(self, status):
        return [p for p in self.state.players if p.status == status]

    def _seat_index(self, player_id):
        for idx, player in enumerate(self.state.players):
            if player.id == player_id:
                return idx
        return -1

    def _next_seat(self, start_idx, status):
        """First seat clockwise after ``start_idx`` with the given status."""
        n = len(self.state.players)
        for step in range(1, n + 1):
            idx = (start_idx + step) % n
            if self.state.players[idx].status == status:
                return idx
        return None

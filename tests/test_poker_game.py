import unittest

import numpy as np

from holdem.card import cards_from_string
from holdem.config import load_config
from holdem.game import PokerGame, PRE_FLOP, FLOP, SHOWDOWN
from holdem.player import Player, ACTIVE, ALL_IN, FOLDED, ELIMINATED, SMALL_BLIND, BIG_BLIND


def make_game(*stacks, human=False):
    players = [Player(f'p{i + 1}', f'Player {i + 1}', chips, is_human=human and i == 0)
               for i, chips in enumerate(stacks)]
    return PokerGame(players, small_blind=1, big_blind=2, rng=np.random.default_rng(42))


def rig(game, board, **hole_cards):
    """Fix the remaining board and the players' hole cards after the deal."""
    game.deck.cards = np.array(list(reversed(cards_from_string(board))), dtype=object)
    for player_id, cards in hole_cards.items():
        game.get_player(player_id).cards = cards_from_string(cards)


class TestHandStart(unittest.TestCase):
    def test_blinds_and_first_to_act(self):
        game = make_game(200, 200, 200)
        game.start_new_hand()
        state = game.state
        p1, p2, p3 = state.players

        self.assertEqual(state.phase, PRE_FLOP)
        self.assertEqual(state.hand_number, 1)
        self.assertEqual(state.dealer_index, 0)
        self.assertEqual((p2.role, p2.current_bet), (SMALL_BLIND, 1))
        self.assertEqual((p3.role, p3.current_bet), (BIG_BLIND, 2))
        self.assertEqual(state.current_bet, 2)
        self.assertEqual(state.min_raise, 4)
        self.assertEqual(state.active_player_id, 'p1')
        self.assertTrue(all(len(p.cards) == 2 for p in state.players))
        self.assertEqual(len(game.deck), 46)

    def test_positions_follow_the_button(self):
        game = make_game(*[200] * 6)
        game.start_new_hand()
        positions = [p.position for p in game.state.players]
        self.assertEqual(positions, ['BTN', 'SB', 'BB', 'UTG', 'HJ', 'CO'])

        for _ in range(5):
            game.handle_action(game.state.active_player_id, 'fold')
        game.start_new_hand()
        self.assertEqual(game.state.dealer_index, 1)
        self.assertEqual(game.get_player_position('p2'), 'BTN')
        self.assertEqual(game.get_player_position('p1'), 'CO')

    def test_button_skips_busted_seats(self):
        game = make_game(200, 0, 200, 200)
        game.state.dealer_index = 0
        game.start_new_hand()
        self.assertEqual(game.state.dealer_index, 2)
        self.assertEqual(game.get_player('p2').status, ELIMINATED)
        self.assertIn('p2', game.state.eliminated_player_ids)
        self.assertEqual(game.get_player('p2').cards, [])

    def test_short_stacked_blind_goes_all_in(self):
        game = make_game(200, 200, 1)
        game.start_new_hand()
        bb = game.get_player('p3')
        self.assertEqual(bb.current_bet, 1)
        self.assertEqual(bb.status, ALL_IN)
        self.assertEqual(game.state.current_bet, 2)

    def test_game_over_with_one_stack(self):
        game = make_game(200, 0)
        game.start_new_hand()
        self.assertTrue(game.state.is_game_over)
        self.assertTrue(game.is_game_over())

    def test_buy_in_reopens_game(self):
        game = make_game(200, 0)
        game.start_new_hand()
        game.buy_in('p2', 150)
        player = game.get_player('p2')
        self.assertEqual(player.chips, 150)
        self.assertEqual(player.total_buy_in, 150)
        self.assertFalse(game.state.is_game_over)

        game.start_new_hand()
        self.assertEqual(game.state.phase, PRE_FLOP)
        self.assertNotIn('p2', game.state.eliminated_player_ids)

    def test_from_config(self):
        config = load_config()
        config['table']['big_blind'] = 10
        config['table']['small_blind'] = 5
        game = PokerGame.from_config([Player('p1', 'A', 500), Player('p2', 'B', 500)], config)
        self.assertEqual(game.state.big_blind_amount, 10)
        self.assertEqual(game.state.small_blind_amount, 5)


class TestActions(unittest.TestCase):
    def setUp(self):
        self.game = make_game(200, 200, 200)
        self.game.start_new_hand()
        self.state = self.game.state

    def test_out_of_turn_action_is_ignored(self):
        self.assertFalse(self.game.handle_action('p2', 'call'))
        self.assertEqual(self.game.get_player('p2').current_bet, 1)
        self.assertEqual(self.state.active_player_id, 'p1')

    def test_check_facing_a_bet_is_rejected(self):
        self.assertFalse(self.game.handle_action('p1', 'check'))
        self.assertEqual(self.state.active_player_id, 'p1')
        self.assertFalse(self.game.get_player('p1').has_acted)

    def test_raise_without_amount_is_rejected(self):
        self.assertFalse(self.game.handle_action('p1', 'raise'))
        self.assertFalse(self.game.handle_action('p1', 'shove', 50))
        self.assertEqual(self.state.current_bet, 2)

    def test_small_raise_is_lifted_to_minimum(self):
        self.assertTrue(self.game.handle_action('p1', 'raise', 3))
        self.assertEqual(self.game.get_player('p1').current_bet, 4)
        self.assertEqual(self.state.current_bet, 4)

    def test_oversized_raise_is_capped_at_stack(self):
        self.game.handle_action('p1', 'raise', 5000)
        p1 = self.game.get_player('p1')
        self.assertEqual(p1.current_bet, 200)
        self.assertEqual(p1.status, ALL_IN)

    def test_round_completes_after_big_blind_checks(self):
        self.game.handle_action('p1', 'call')
        self.game.handle_action('p2', 'call')
        self.assertEqual(self.state.phase, PRE_FLOP)
        self.assertEqual(self.state.active_player_id, 'p3')

        self.game.handle_action('p3', 'check')
        self.assertEqual(self.state.phase, FLOP)
        self.assertEqual(self.state.pot, 6)
        self.assertEqual(len(self.state.community_cards), 3)
        self.assertEqual(self.state.current_bet, 0)
        self.assertEqual(self.state.min_raise, 2)
        self.assertEqual(self.state.active_player_id, 'p2')

    def test_full_raise_reopens_action(self):
        self.game.handle_action('p1', 'raise', 6)
        self.assertEqual(self.state.min_raise, 10)

        self.game.handle_action('p2', 'raise', 20)
        self.assertEqual(self.state.current_bet, 20)
        self.assertEqual(self.state.min_raise, 34)
        self.assertFalse(self.game.get_player('p1').has_acted)
        self.assertFalse(self.game.get_player('p3').has_acted)
        self.assertEqual(self.state.active_player_id, 'p3')

    def test_raise_below_current_bet_becomes_call(self):
        self.game.handle_action('p1', 'raise', 20)
        p2 = self.game.get_player('p2')
        p2.chips = 5  # 6 in total with the small blind
        self.game.handle_action('p2', 'raise', 6)
        self.assertEqual(p2.last_action, 'call')
        self.assertEqual(p2.status, ALL_IN)
        self.assertEqual(self.state.current_bet, 20)

    def test_postflop_opening_raise_is_a_bet(self):
        self.game.handle_action('p1', 'call')
        self.game.handle_action('p2', 'call')
        self.game.handle_action('p3', 'check')
        self.game.handle_action('p2', 'raise', 4)

        p2 = self.game.get_player('p2')
        self.assertEqual(p2.last_action, 'bet')
        self.assertEqual(p2.stats.aggressions_count, 1)
        self.assertTrue(any('bets $4' in line for line in self.state.current_hand_log))

    def test_call_with_nothing_owed_is_a_check(self):
        self.game.handle_action('p1', 'call')
        self.game.handle_action('p2', 'call')
        self.assertTrue(self.game.handle_action('p3', 'call'))
        self.assertTrue(any('Player 3 checks' in line for line in self.state.current_hand_log))
        self.assertEqual(self.state.pot, 6)


class TestShortAllIn(unittest.TestCase):
    def test_short_all_in_does_not_raise_min_raise(self):
        game = make_game(200, 200, 14)
        game.start_new_hand()
        state = game.state

        game.handle_action('p1', 'raise', 10)
        game.handle_action('p2', 'call')
        self.assertEqual(state.min_raise, 18)

        game.handle_action('p3', 'raise', 14)
        p3 = game.get_player('p3')
        self.assertEqual(p3.status, ALL_IN)
        self.assertEqual(state.current_bet, 14)
        self.assertEqual(state.min_raise, 18)
        self.assertFalse(game.get_player('p1').has_acted)
        self.assertFalse(game.get_player('p2').has_acted)
        self.assertEqual(state.active_player_id, 'p1')

        game.handle_action('p1', 'call')
        game.handle_action('p2', 'call')
        self.assertEqual(state.phase, FLOP)
        self.assertEqual(state.pot, 42)

    def test_heads_up_all_in_runs_out_the_board(self):
        game = make_game(50, 50)
        game.start_new_hand()
        state = game.state
        # Heads-up the button posts the big blind and the other seat acts first
        self.assertEqual(state.active_player_id, 'p2')

        game.handle_action('p2', 'raise', 50)
        game.handle_action('p1', 'call')

        self.assertEqual(state.phase, SHOWDOWN)
        self.assertEqual(len(state.community_cards), 5)
        self.assertEqual(sum(p.chips for p in state.players), 100 - state.winner_info.odd_chips)
        self.assertEqual(len(state.session_hands), 1)
        self.assertTrue(state.session_hands[0].is_showdown)


class TestShowdown(unittest.TestCase):
    def test_fold_win_awards_the_pot(self):
        game = make_game(200, 200, 200, human=True)
        game.start_new_hand()
        state = game.state

        game.handle_action('p1', 'call')
        game.handle_action('p2', 'fold')
        game.handle_action('p3', 'raise', 10)
        game.handle_action('p1', 'fold')

        self.assertEqual(state.phase, SHOWDOWN)
        self.assertEqual(state.winners, ['p3'])
        self.assertEqual(state.winner_info.hand_description, 'Everyone else folded')
        self.assertEqual(state.winner_info.pot_won, 13)
        self.assertEqual(game.get_player('p3').chips, 203)
        self.assertEqual(game.get_player('p3').stats.hands_won, 1)

        history = state.session_hands[-1]
        self.assertFalse(history.is_showdown)
        self.assertEqual(history.player_net, {'p1': -2, 'p2': -1, 'p3': 3})
        self.assertEqual(history.hero_net_won, -2)
        self.assertEqual(history.hero_non_showdown_won, -2)
        self.assertEqual(history.hero_showdown_won, 0)
        self.assertEqual(history.hero_position, 'BTN')
        self.assertEqual(game.get_player('p1').stats.session_pnl, -2)

    def test_hand_stats_recorded_for_every_seat(self):
        game = make_game(200, 200, 200)
        game.start_new_hand()
        game.handle_action('p1', 'raise', 6)
        game.handle_action('p2', 'fold')
        game.handle_action('p3', 'fold')

        p1, p2, p3 = game.state.players
        self.assertEqual([p.stats.hands_played for p in (p1, p2, p3)], [1, 1, 1])
        self.assertEqual(p1.stats.vpip_count, 1)
        self.assertEqual(p1.stats.pfr_count, 1)
        self.assertEqual(p2.stats.vpip_count, 0)
        # Folding to a raise is a missed 3-bet opportunity
        self.assertEqual(p2.stats.three_bet_opportunity, 1)

    def test_split_pot_drops_odd_chip(self):
        game = make_game(200, 200, 200)
        game.start_new_hand()
        state = game.state
        rig(game, "Ah Kh Qh Jh Th", p1="2c 3c", p2="4d 5d", p3="2d 3d")

        game.handle_action('p1', 'call')
        game.handle_action('p2', 'fold')
        game.handle_action('p3', 'check')
        while state.phase != SHOWDOWN:
            game.handle_action(state.active_player_id, 'check')

        self.assertEqual(sorted(state.winners), ['p1', 'p3'])
        self.assertEqual(state.winner_info.hand_description, 'Royal Flush')
        self.assertEqual(state.winner_info.pot_won, 5)
        self.assertEqual(state.winner_info.odd_chips, 1)
        self.assertEqual(game.get_player('p1').chips, 200)
        self.assertEqual(game.get_player('p3').chips, 200)
        self.assertEqual(game.get_player('p2').chips, 199)

        history = state.session_hands[-1]
        self.assertTrue(history.is_showdown)
        self.assertEqual(history.player_net, {'p1': 0, 'p2': -1, 'p3': 0})
        self.assertEqual(game.get_player('p1').stats.showdowns_reached, 1)
        self.assertEqual(game.get_player('p1').stats.showdowns_won, 1)

    def test_split_of_101(self):
        game = make_game(200, 200, 200)
        game.start_new_hand()
        state = game.state
        rig(game, "", p1="2c 3c", p2="4d 5d", p3="9s 9c")
        state.community_cards = cards_from_string("Ah Kh Qh Jh Th")
        game.get_player('p3').status = FOLDED
        state.pot = 101

        game.resolve_showdown()
        self.assertEqual(state.winner_info.odd_chips, 1)
        self.assertEqual(game.get_player('p1').chips, 250)
        self.assertEqual(game.get_player('p2').chips, 249)

    def test_best_hand_wins_at_showdown(self):
        game = make_game(200, 200, 200)
        game.start_new_hand()
        state = game.state
        rig(game, "Ks 7d 2c 9h 4s", p1="Ah Ad", p2="Kh Qd", p3="3c 3d")

        game.handle_action('p1', 'call')
        game.handle_action('p2', 'call')
        game.handle_action('p3', 'check')
        while state.phase != SHOWDOWN:
            game.handle_action(state.active_player_id, 'check')

        self.assertEqual(state.winners, ['p1'])
        self.assertEqual(game.get_player('p1').chips, 204)
        self.assertEqual(game.get_player('p2').stats.showdowns_reached, 1)
        self.assertEqual(game.get_player('p2').stats.showdowns_won, 0)


if __name__ == '__main__':
    unittest.main()

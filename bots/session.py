# session.py
"""
Headless table driver: seats a hero and bots, plays hands to completion and
summarises the session.
"""

import argparse
import logging
import time

import numpy as np

from holdem import opponent_profiler
from holdem.config import load_config
from holdem.debug_utils import setup_logger
from holdem.game import PokerGame, SHOWDOWN
from holdem.player import Player, DIFFICULTIES
from bots.bot_logic import BotLogic

logger = logging.getLogger(__name__)

MIXED_TABLE = ('beginner', 'intermediate', 'advanced', 'pro')
SUMMARY_POSITIONS = ['SB', 'BB', 'UTG', 'HJ', 'CO', 'BTN']

# A hand that takes more actions than this is stuck
MAX_ACTIONS_PER_HAND = 500


def create_players(table_type="mixed", starting_chips=200, seats=6, hero_name="Hero", with_hero=True):
    players = []
    if with_hero:
        players.append(Player('p1', hero_name, starting_chips, is_human=True))

    for i in range(seats - len(players)):
        if table_type == 'mixed':
            difficulty = MIXED_TABLE[i] if i < len(MIXED_TABLE) else 'advanced'
        else:
            difficulty = table_type
        players.append(Player(f'p{len(players) + 1}', f'Bot {i + 1}', starting_chips, difficulty=difficulty))
    return players


def play_hand(game, bot_logic, human_policy=None, action_delay=0.0):
    """
    Play one hand from the deal to its resolution.

    ``human_policy(game, player)`` returns an ``(action, amount)`` pair for
    human seats; without one the hero is put on autopilot as an advanced bot.

    Returns:
        The hand's HandHistory, or None if no hand could be dealt.
    """
    state = game.state
    history_len = len(state.session_hands)

    game.start_new_hand()
    if state.is_game_over:
        return None

    actions = 0
    while state.phase != SHOWDOWN:
        if actions >= MAX_ACTIONS_PER_HAND:
            logger.error(f"Hand #{state.hand_number} did not finish after {actions} actions, abandoning it")
            break

        player = game.get_active_player()
        if player is None:
            logger.error(f"Hand #{state.hand_number} has no player to act")
            break

        if player.is_human and human_policy is not None:
            action, amount = human_policy(game, player)
        else:
            action, amount = bot_logic.decide(game, player)

        if not game.handle_action(player.id, action, amount):
            # Rejected decisions fall back to the one action that is always legal
            logger.warning(f"{player.name}: {action} {amount} rejected, folding instead")
            game.handle_action(player.id, 'fold')

        actions += 1
        if action_delay > 0:
            time.sleep(action_delay)

    if len(state.session_hands) > history_len:
        return state.session_hands[-1]
    return None


def run_session(game, hands, bot_logic, human_policy=None, rebuy=False, action_delay=0.0):
    """Play up to ``hands`` hands; returns the session's hand histories."""
    for _ in range(hands):
        if rebuy:
            for player in game.state.players:
                if player.chips <= 0:
                    game.buy_in(player.id, player.initial_chips)

        if game.is_game_over():
            logger.info("Only one player has chips left, ending the session")
            break

        play_hand(game, bot_logic, human_policy, action_delay)

    return game.state.session_hands


def positional_summary(session_hands):
    summary = {pos: {'hands': 0, 'profit': 0, 'average': 0.0} for pos in SUMMARY_POSITIONS}
    for hand in session_hands:
        row = summary.get(hand.hero_position)
        if row is None:
            continue
        row['hands'] += 1
        row['profit'] += hand.hero_net_won

    for row in summary.values():
        if row['hands']:
            row['average'] = row['profit'] / row['hands']
    return summary


def player_summary(game):
    rows = []
    for player in game.state.players:
        stats = player.stats
        rows.append({
            'id': player.id,
            'name': player.name,
            'difficulty': player.difficulty or 'human',
            'chips': player.chips,
            'net': player.chips - player.total_buy_in,
            'hands_played': stats.hands_played,
            'hands_won': stats.hands_won,
            'vpip': stats.vpip,
            'pfr': stats.pfr,
            'af': stats.af,
            'showdowns_reached': stats.showdowns_reached,
            'showdowns_won': stats.showdowns_won,
            'type': opponent_profiler.classify(player),
        })
    return rows


def plot_session(session_hands, path=None, show=False):
    """
    Plot the hero's cumulative winnings, split into showdown and
    non-showdown lines.

    Returns:
        fig, ax: Matplotlib figure and axes objects.
    """
    import matplotlib.pyplot as plt

    hand_numbers = np.arange(1, len(session_hands) + 1)
    net = np.cumsum([h.hero_net_won for h in session_hands])
    showdown = np.cumsum([h.hero_showdown_won for h in session_hands])
    non_showdown = np.cumsum([h.hero_non_showdown_won for h in session_hands])

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(hand_numbers, net, color='green', label='Net won')
    ax.plot(hand_numbers, showdown, color='blue', label='Showdown')
    ax.plot(hand_numbers, non_showdown, color='red', label='Non-showdown')
    ax.axhline(0, color='grey', linewidth=0.5)
    ax.set_xlabel('Hands')
    ax.set_ylabel('Chips')
    ax.set_title('Session results')
    ax.legend()
    plt.tight_layout()
    if path:
        fig.savefig(path)
    if show:
        plt.show()
    return fig, ax


def print_report(game):
    state = game.state
    print(f"Played {len(state.session_hands)} hands")
    print()
    print(f"{'Player':<10} {'Level':<13} {'Chips':>7} {'Net':>7} {'VPIP':>6} {'PFR':>6} {'AF':>5}  Type")
    for row in player_summary(game):
        print(f"{row['name']:<10} {row['difficulty']:<13} {row['chips']:>7} {row['net']:>7} "
              f"{row['vpip']:>6.1f} {row['pfr']:>6.1f} {row['af']:>5.2f}  {row['type']}")

    if any(p.is_human for p in state.players):
        print()
        print(f"{'Position':<9} {'Hands':>6} {'Profit':>8} {'Avg':>8}")
        for pos, row in positional_summary(state.session_hands).items():
            print(f"{pos:<9} {row['hands']:>6} {row['profit']:>8} {row['average']:>8.2f}")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Headless 6-max No-Limit Hold'em session against bots")
    ap.add_argument("--config", help="YAML file overriding the default table/session settings")
    ap.add_argument("--hands", type=int, help="Number of hands to play")
    ap.add_argument("--seed", type=int, help="Seed for the deck and the bots")
    ap.add_argument("--table-type", choices=('mixed',) + DIFFICULTIES, help="Bot difficulty at the table")
    ap.add_argument("--no-hero", action="store_true", help="Seat bots only")
    ap.add_argument("--plot", metavar="PATH", help="Save the hero's cumulative results chart to PATH")
    ap.add_argument("--plot-range", metavar="PATH", help="Save the preflop grade chart to PATH")
    ap.add_argument("--verbose", action="store_true", help="Log every action")
    args = ap.parse_args(argv)

    config = load_config(args.config)
    table, session = config['table'], config['session']
    if args.hands is not None:
        session['hands'] = args.hands
    if args.seed is not None:
        session['seed'] = args.seed
    if args.table_type:
        table['type'] = args.table_type

    level = 'DEBUG' if args.verbose else config['logging']['level']
    for name in ('holdem', 'bots'):
        setup_logger(name, level, config['logging']['file'])

    game_seed, bot_seed = np.random.SeedSequence(session['seed']).spawn(2)
    players = create_players(table['type'], table['starting_chips'], table['seats'], with_hero=not args.no_hero)
    game = PokerGame.from_config(players, config, rng=np.random.default_rng(game_seed))
    bot_logic = BotLogic(np.random.default_rng(bot_seed))

    run_session(game, session['hands'], bot_logic, rebuy=session['rebuy'], action_delay=session['action_delay'])

    print_report(game)

    if args.plot:
        plot_session(game.state.session_hands, path=args.plot)
        print(f"Saved results chart to {args.plot}")
    if args.plot_range:
        from bots.preflop_range import plot_grade_chart
        plot_grade_chart(path=args.plot_range)
        print(f"Saved preflop chart to {args.plot_range}")


if __name__ == "__main__":
    main()

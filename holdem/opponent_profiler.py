# opponent_profiler.py
"""
Bookkeeping for the per-player statistics the bots read, and the archetype
classification built on top of them. The counters live on
``Player.stats``; these functions are the only places the engine updates
them from.
"""

NIT = 'Nit'
TAG = 'TAG'
LAG = 'LAG'
FISH = 'Fish'
UNKNOWN = 'Unknown'

MIN_HANDS_FOR_CLASSIFICATION = 50


def update_hand_stats(player, put_money_in_pot, raised_pre_flop):
    """Once per player per completed hand, folded or not."""
    player.stats.record_hand(put_money_in_pot, raised_pre_flop)


def update_postflop_action(player, action):
    """Bets and raises count as aggression, calls as passivity; checks are ignored."""
    player.stats.record_postflop_action(action)


def update_three_bet_stats(player, is_three_bet, is_opportunity):
    player.stats.record_three_bet(is_three_bet, is_opportunity)


def classify(player):
    stats = player.stats
    if stats is None or stats.hands_played < MIN_HANDS_FOR_CLASSIFICATION:
        return UNKNOWN

    vpip, pfr = stats.vpip, stats.pfr

    # Nit and Fish first: their ranges overlap TAG/LAG at the edges
    if vpip < 18 and pfr < 14:
        return NIT
    if vpip > 30 and pfr < 15:
        return FISH
    if 18 <= vpip <= 28 and pfr >= 15:
        return TAG
    if vpip > 28 and pfr > 20:
        return LAG
    return UNKNOWN

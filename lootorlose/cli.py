"""
Loot or Lose - Command Line Interface

Usage:
    lootorlose run --seed LOOT4EVER --character warrior --biome crypt
    lootorlose run --daily --policy greedy --json
    lootorlose odds --biome volcano --zone Danger
    lootorlose batch --runs 200 --policy greedy
    lootorlose score --rounds 20 --bosses 1 --items excalibur royal_shield --streak 3
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional

from .analysis.batch import simulate_runs, summarize_runs
from .analysis.drop_odds import drop_probabilities, rarity_distribution
from .calc.score import calculate_run_score
from .calc.synergy import check_synergies
from .config import load_config
from .content.catalog import CatalogError, load_catalog
from .game import GamePhase, GameRunner, RoundKind, RoundResult, apply_policy
from .generation.items import DungeonZone
from .policies import POLICIES
from .state.rng import daily_seed


logger = logging.getLogger(__name__)


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_round(result: RoundResult) -> str:
    """One line per round."""
    head = f"R{result.round:>3} [{result.zone.value:<8}]"
    if result.kind == RoundKind.BOSS:
        outcome = "won" if result.combat.player_won else "lost"
        text = f"BOSS {result.boss_id}: {outcome}, dealt {result.combat.damage_dealt}, took {result.combat.damage_taken}"
    elif result.kind == RoundKind.EVENT:
        text = f"EVENT {result.event_id}: {result.event.message_key}"
    elif result.kind == RoundKind.ITEM:
        item = result.item
        text = f"ITEM {item!r} ({item.rarity.value} {item.category.value}, atk {item.attack} def {item.defense})"
    else:
        text = "nothing found"
    if result.hp_change:
        text += f" hp {result.hp_change:+d}"
    return f"{head} {text}"


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_run(args, config, catalog) -> int:
    """Play one run with a policy and print its log."""
    policy = POLICIES[args.policy]
    seed = daily_seed(date.today()) if args.daily else args.seed

    runner = GameRunner(
        seed=seed,
        character=args.character,
        biome=args.biome,
        catalog=catalog,
        config=config,
        streak_days=args.streak,
        is_daily_run=args.daily,
    )

    lines = []
    while not runner.game_over and runner.run_state.round < args.max_rounds:
        round_result = runner.next_round()
        lines.append(format_round(round_result))
        if runner.phase != GamePhase.AWAITING_DECISION:
            continue

        decision_result = apply_policy(runner, policy)
        lines.append(f"      -> {decision_result.decision.value}"
                     + (f", dropped {decision_result.discarded_ids}" if decision_result.discarded_ids else ""))

    result = runner.end_run()

    if args.json:
        data = result.to_dict()
        data["statistics"] = runner.get_run_statistics()
        _print_json(data)
        return 0

    print(f"Seed: {result.seed_string} (numeric: {result.seed})")
    print(f"Character: {result.character}  Biome: {result.biome}")
    print("=" * 60)
    for line in lines:
        print(line)
    print("=" * 60)
    print(f"End: {result.death_cause or 'survived'} at round {result.rounds_completed}")
    print(f"Inventory: {', '.join(result.final_inventory) or '(empty)'}")
    breakdown = result.score
    print(f"Score: {breakdown.round_points} rounds + {breakdown.boss_points} bosses + "
          f"{breakdown.synergy_points} synergies + {breakdown.rarity_points} rarity "
          f"x{breakdown.streak_multiplier} = {breakdown.total_score}")
    return 0


def cmd_odds(args, config, catalog) -> int:
    """Show drop probabilities for a biome."""
    catalog.get_biome(args.biome)
    zones = [DungeonZone(args.zone)] if args.zone else list(DungeonZone)
    pool = catalog.item_pool

    if args.json:
        _print_json({
            zone.value: {
                "items": drop_probabilities(pool, args.biome, zone),
                "rarities": {r.value: p for r, p in rarity_distribution(pool, args.biome, zone).items()},
            }
            for zone in zones
        })
        return 0

    for zone in zones:
        odds = drop_probabilities(pool, args.biome, zone)
        print(f"{zone.value} zone ({args.biome}):")
        for rarity, p in rarity_distribution(pool, args.biome, zone).items():
            print(f"  {rarity.value:<10} {p:6.1%}")
        for item_id, p in sorted(odds.items(), key=lambda kv: -kv[1])[:args.top]:
            print(f"    {item_id:<22} {p:6.2%}")
        print()
    return 0


def cmd_batch(args, config, catalog) -> int:
    """Simulate many runs and summarize them."""
    seeds = [args.start_seed + i for i in range(args.runs)]
    results = simulate_runs(
        seeds, POLICIES[args.policy],
        character=args.character, biome=args.biome,
        catalog=catalog, config=config, max_rounds=args.max_rounds,
    )
    summary = summarize_runs(results)

    if args.json:
        _print_json(summary.to_dict())
        return 0

    print(f"{summary.runs} runs, policy {args.policy}")
    print(f"  score   mean {summary.mean_score:.1f}  median {summary.median_score:.1f}  "
          f"p90 {summary.p90_score:.1f}  max {summary.max_score}")
    print(f"  rounds  mean {summary.mean_rounds:.2f}  max {summary.max_rounds}")
    print(f"  bosses  mean {summary.mean_bosses:.2f}")
    print(f"  survival {summary.survival_rate:.1%}")
    for cause, count in sorted(summary.death_causes.items()):
        print(f"  {cause:<20} {count}")
    return 0


def cmd_score(args, config, catalog) -> int:
    """Score a hypothetical end of run."""
    inventory = [catalog.get_item(item_id).instantiate() for item_id in args.items]
    synergies = check_synergies(inventory)
    breakdown = calculate_run_score(args.rounds, args.bosses, inventory, synergies, args.streak)

    if args.json:
        data = breakdown.to_dict()
        data["synergies"] = [s.synergy_type.value for s in synergies]
        _print_json(data)
        return 0

    for synergy in synergies:
        print(f"Synergy: {synergy.synergy_type.value} ({', '.join(synergy.item_ids)})")
    for key, value in breakdown.to_dict().items():
        print(f"{key:<18} {value}")
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lootorlose",
        description="Loot or Lose - run simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run --seed LOOT4EVER
  %(prog)s run --daily --policy greedy
  %(prog)s odds --biome crypt --zone Tutorial
  %(prog)s batch --runs 100 --policy greedy --json
  %(prog)s score --rounds 20 --bosses 1 --items excalibur royal_shield
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--env-file", help="Path to a .env file with LOOTORLOSE_* settings")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Play one run with a policy")
    run_parser.add_argument("--seed", "-s", help="Run seed (e.g., LOOT4EVER); random if omitted")
    run_parser.add_argument("--daily", action="store_true", help="Use today's daily seed")
    run_parser.add_argument("--character", "-c", help="Character id")
    run_parser.add_argument("--biome", "-b", help="Biome id")
    run_parser.add_argument("--policy", "-p", default="greedy", choices=sorted(POLICIES), help="Decision policy")
    run_parser.add_argument("--streak", type=int, default=0, help="Daily streak for the score multiplier")
    run_parser.add_argument("--max-rounds", type=int, default=1000, help="End the run after this many rounds")
    run_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Odds command
    odds_parser = subparsers.add_parser("odds", help="Show item drop probabilities")
    odds_parser.add_argument("--biome", "-b", default="crypt", help="Biome id")
    odds_parser.add_argument("--zone", "-z", choices=[z.value for z in DungeonZone], help="Single zone")
    odds_parser.add_argument("--top", type=int, default=10, help="Items to list per zone")
    odds_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Simulate many runs and summarize")
    batch_parser.add_argument("--runs", "-n", type=int, default=100, help="Number of runs")
    batch_parser.add_argument("--start-seed", type=int, default=1, help="First numeric seed")
    batch_parser.add_argument("--character", "-c", help="Character id")
    batch_parser.add_argument("--biome", "-b", help="Biome id")
    batch_parser.add_argument("--policy", "-p", default="greedy", choices=sorted(POLICIES), help="Decision policy")
    batch_parser.add_argument("--max-rounds", type=int, default=1000, help="Round limit per run")
    batch_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Score command
    score_parser = subparsers.add_parser("score", help="Score an end-of-run position")
    score_parser.add_argument("--rounds", type=int, required=True, help="Rounds completed")
    score_parser.add_argument("--bosses", type=int, default=0, help="Bosses defeated")
    score_parser.add_argument("--items", nargs="*", default=[], help="Final inventory item ids")
    score_parser.add_argument("--streak", type=int, default=0, help="Daily streak")
    score_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "run": cmd_run,
        "odds": cmd_odds,
        "batch": cmd_batch,
        "score": cmd_score,
    }

    try:
        config = load_config(args.env_file)
        catalog = load_catalog(config.data_dir)
        return commands[args.command](args, config, catalog)
    except (CatalogError, ValueError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())

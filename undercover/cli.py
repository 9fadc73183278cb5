"""
cli.py
======
Point d'entrée terminal : partie complète sur un seul écran, codes de partage, répartition.

Usage:
    undercover play Alice Bob Charlie Dana
    undercover roles --players 7 --intrus 3 --mr-white
    undercover code
    undercover import-code FFFFFFFFFFFFFFFFFF80
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from undercover.config.settings import settings
from undercover.models.actions import EliminatePlayer, NextReveal, StartGame
from undercover.models.game import IntrusConfig
from undercover.services.deterrent import TimedDeterrent
from undercover.services.preferences import Preferences
from undercover.services.roles_engine import clamp_intrus_counts, get_role_distribution
from undercover.services.session_engine import SessionError
from undercover.services.session_store import GameStore

logger = logging.getLogger("undercover.cli")

DEFAULT_ICONS = ["🐶", "🐱", "🐸", "🐰", "🦊", "🐼", "🦁", "🐧", "🐯", "🐮", "🐷", "🐵", "🦄", "🐲", "🦋", "🐢"]
DEFAULT_COLORS = [
    "#E17055", "#00B894", "#6C5CE7", "#FD79A8", "#FDCB6E", "#00CEC9", "#E84393", "#55A3E7",
    "#A29BFE", "#FF7675", "#74B9FF", "#81ECEC", "#FAB1A0", "#DFE6E9", "#B2BEC3", "#636E72",
]

ROLE_LABELS = {"civil": "Civil", "undercover": "Undercover", "mrwhite": "Mr. White"}


def _cmd_play(store: GameStore, names: List[str]) -> int:
    icons = [DEFAULT_ICONS[i % len(DEFAULT_ICONS)] for i in range(len(names))]
    colors = [DEFAULT_COLORS[i % len(DEFAULT_COLORS)] for i in range(len(names))]
    state = store.dispatch(StartGame(names=names, icons=icons, colors=colors))

    while state.phase == "reveal":
        player = state.players[state.current_player_index]
        input(f"\n{player.icon} {player.name}, appuie sur Entrée pour voir ta carte…")
        print(f"  → {player.content_label or 'Tu es Mr. White : bluffe !'}")
        input("Entrée pour cacher et passer au suivant…")
        print("\n" * 40)
        state = store.dispatch(NextReveal())

    print("Ordre de parole :")
    for rank, idx in enumerate(state.speaking_order, 1):
        print(f"  {rank}. {state.players[idx].name}")

    while state.phase == "discussion":
        alive = [(i, p) for i, p in enumerate(state.players) if not p.eliminated]
        print("\nQui est éliminé ? " + ", ".join(f"[{i}] {p.name}" for i, p in alive))
        raw = input("> ").strip()
        try:
            state = store.dispatch(EliminatePlayer(index=int(raw)))
        except (ValueError, SessionError) as exc:
            print(f"Choix invalide : {exc}")
            continue
        eliminated = state.players[int(raw)]
        print(f"{eliminated.name} était {ROLE_LABELS[eliminated.role]}.")

    winner = "Les civils" if state.winner == "civil" else "Les intrus"
    print(f"\n{winner} gagnent ! Paire : {state.current_pair.label_a} / {state.current_pair.label_b}")
    return 0


def _cmd_roles(args: argparse.Namespace) -> int:
    intrus = clamp_intrus_counts(args.players, IntrusConfig(
        intrus_count=args.intrus,
        undercover_enabled=not args.no_undercover,
        mr_white_enabled=args.mr_white,
        undercover_count=args.intrus - (1 if args.mr_white else 0),
        mr_white_count=1 if args.mr_white else 0,
    ))
    dist = get_role_distribution(args.players, intrus.undercover_count, intrus.mr_white_count)
    print(f"civils={dist.civil} undercover={dist.undercover} mr_white={dist.mr_white}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="undercover", description=settings.APP_NAME)
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Play a full round in the terminal")
    play.add_argument("names", nargs="+", help="Player names, in seating order")

    roles = sub.add_parser("roles", help="Show the role distribution for a table")
    roles.add_argument("--players", type=int, required=True)
    roles.add_argument("--intrus", type=int, default=1)
    roles.add_argument("--mr-white", action="store_true", help="Enable Mr. White")
    roles.add_argument("--no-undercover", action="store_true", help="Disable the undercover role")

    sub.add_parser("code", help="Print the share code of the disabled pairs")

    imp = sub.add_parser("import-code", help="Apply a share code received from another device")
    imp.add_argument("code")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)

    if args.command == "roles":
        return _cmd_roles(args)

    store = GameStore.from_preferences(Preferences(), deterrent=TimedDeterrent())
    if args.command == "play":
        try:
            return _cmd_play(store, args.names)
        except SessionError as exc:
            print(str(exc), file=sys.stderr)
            return 2
    if args.command == "code":
        print(store.export_pair_code())
        return 0
    if not store.import_pair_code(args.code):
        print("Code invalide.", file=sys.stderr)
        return 1
    print(f"{len(store.state.disabled_pair_ids)} paire(s) désactivée(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())

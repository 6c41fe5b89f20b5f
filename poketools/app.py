"""Front end de texto: el equipo se mantiene entre ejecuciones en el estado local."""
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from . import config
from .controllers.lookup_controller import LookupController, LookupResult
from .controllers.team_builder_controller import TeamBuilderController
from .db.accounts import DatabaseAuthBackend
from .db.base import SessionLocal
from .db.repository import init_db
from .errors import PokeToolsError
from .models.team import TEAM_SIZE
from .services.auth import AuthSession
from .services.coverage import display_reasons
from .services.generation import to_roman
from .services.pokeapi_client import PokeApiClient
from .utils.local_state import LocalStateStore
from .utils.logging_setup import setup_logging
from .utils.names import capitalize_first, format_move_name, format_pokemon_name, format_slug

log = logging.getLogger(__name__)


def _types_text(types: List[str]) -> str:
    return "/".join(capitalize_first(t) for t in types) or "-"


def print_team(ctrl: TeamBuilderController) -> None:
    print(f"Generation {to_roman(ctrl.generation)}")
    for i, p in enumerate(ctrl.team.slots):
        if p is None:
            print(f"  {i + 1}. (empty)")
        else:
            print(f"  {i + 1}. {format_pokemon_name(p.name)} [{_types_text(p.types)}]")


def print_coverage(ctrl: TeamBuilderController) -> None:
    if ctrl.team.is_empty:
        print("Add Pokemon to your team to see type coverage.")
        return
    for type_name, entry in ctrl.coverage().items():
        print(f"{capitalize_first(type_name):<10} {entry.label}")
        for member in entry.members:
            reasons = "; ".join(display_reasons(member))
            print(f"    {format_pokemon_name(member.pokemon.name)}: {reasons}")


def print_matchup(ctrl: TeamBuilderController, opponent: str) -> int:
    ranked = ctrl.select_opponent(opponent)
    if ctrl.opponent is None:
        print(f"No data for {opponent}.")
        return 1
    print(f"Vs {format_pokemon_name(ctrl.opponent.name)} [{_types_text(ctrl.opponent.types)}]")
    if not ranked:
        print("Add Pokemon to your team to get recommendations.")
        return 0
    for rank, r in enumerate(ranked, start=1):
        print(f"  #{rank} {format_pokemon_name(r.pokemon.name)} ({r.score:+d}, {r.rating})")
        for reason in r.reasons:
            print(f"      - {reason}")
    return 0


def print_lookup(res: LookupResult) -> None:
    sp = res.species
    print(f"#{sp.id} {format_pokemon_name(sp.name)} [{_types_text(res.types)}] - Generation {to_roman(res.generation)}")
    if res.abilities:
        print("Abilities:")
        for a in res.abilities:
            hidden = " (Hidden)" if a.is_hidden else ""
            print(f"  {format_slug(a.name)}{hidden}: {a.effect}")
    if res.forms:
        print("Forms: " + ", ".join(f"{f.label}*" if f.is_current else f.label for f in res.forms))

    print("Defense:")
    for group, items in res.defensive.items():
        if items:
            print(f"  {format_slug(group)}: " + ", ".join(f"{capitalize_first(i.type)} {i.text}" for i in items))
    print("Offense:")
    for own, groups in res.offensive.items():
        for group, items in groups.items():
            if items and group != "normal":
                print(f"  {capitalize_first(own)} {format_slug(group.replace('_', '-'))}: "
                      + ", ".join(capitalize_first(i.type) for i in items))

    print(f"Stats (total {res.base_stat_total}):")
    for key, (lo, hi) in res.stat_ranges.items():
        print(f"  {key:<4} {sp.stats.get(key, 0):>3}  Lv100 {lo}-{hi}")

    if res.level_up_moves:
        print("Level-up moves:")
        for lm in res.level_up_moves:
            print(f"  Lv.{lm.level:<3} {format_move_name(lm.move.name)} ({capitalize_first(lm.move.type)})")
    if res.machine_moves:
        print("TM/HM moves: " + ", ".join(format_move_name(lm.move.name) for lm in res.machine_moves))

    if res.evolution is not None:
        print("Evolution:")
        for node in res.evolution.walk():
            marker = "*" if node.is_current else " "
            req = f" ({node.requirements})" if node.requirements else ""
            print(f"  {marker} {format_pokemon_name(node.species_name)}{req}")

    if res.locations:
        print("Locations:")
        for game, groups in res.locations.items():
            print(f"  {game}")
            for g in groups:
                print(f"    {format_slug(g.location_name)}: " + "; ".join(g.lines()))
    else:
        print("Not found in the wild in this generation.")


def print_saved_teams(teams: List[dict]) -> None:
    if not teams:
        print("No saved teams yet.")
        return
    for snap in teams:
        names = [format_pokemon_name(p["name"]) for p in snap["pokemon"] if p]
        created = snap["createdAt"].strftime("%Y-%m-%d %H:%M") if snap["createdAt"] else "-"
        print(f"  {snap['teamId']}  Gen {to_roman(snap['generation'])}  {created}  " + (", ".join(names) or "(empty)"))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="poketools", description="Team coverage and matchup helper")
    p.add_argument("--debug", action="store_true", help="verbose logging")
    p.add_argument("--log-file", action="store_true", help="also log to logs/poketools.log")
    p.add_argument("--state", default=config.STATE_PATH, help="local state file")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="search species by name")
    s.add_argument("query")
    a = sub.add_parser("add", help="add a Pokemon to the first empty slot")
    a.add_argument("names", nargs="+")
    r = sub.add_parser("remove", help="empty a team slot (1-6)")
    r.add_argument("slot", type=int, choices=range(1, TEAM_SIZE + 1), metavar="SLOT")
    sub.add_parser("team", help="show the current team")
    g = sub.add_parser("generation", help="switch generation (1-9)")
    g.add_argument("value", type=int)
    sub.add_parser("reset", help="empty the team and go back to the default generation")
    sub.add_parser("coverage", help="team coverage per type")
    m = sub.add_parser("matchup", help="rank the team against an opponent")
    m.add_argument("opponent")
    lk = sub.add_parser("lookup", help="details of a single Pokemon")
    lk.add_argument("name")

    for cmd, text in (("signup", "create an account"), ("signin", "sign in with email and password")):
        acc = sub.add_parser(cmd, help=text)
        acc.add_argument("email")
        acc.add_argument("--password", help="prompted for when omitted")
    sub.add_parser("signout", help="end the saved session")
    sub.add_parser("whoami", help="show the signed-in account")
    t = sub.add_parser("teams", help="teams saved to your account")
    t.add_argument("action", choices=["save", "list", "load", "delete"])
    t.add_argument("team_id", nargs="?")
    sub.add_parser("delete-account", help="delete your account and every saved team")
    return p


def _password(args) -> str:
    return args.password if args.password is not None else getpass.getpass("Password: ")


def _teams_command(ctrl: TeamBuilderController, action: str, team_id: Optional[str]) -> int:
    if action == "save":
        print(f"Team saved: {ctrl.save_team()}")
        return 0
    if action == "list":
        print_saved_teams(ctrl.saved_teams())
        return 0
    if not team_id:
        print(f"Error: 'teams {action}' needs a team id", file=sys.stderr)
        return 2
    if action == "load":
        if not ctrl.load_team(team_id):
            print(f"No saved team {team_id}.")
            return 1
        print_team(ctrl)
        return 0
    if not ctrl.delete_team(team_id):
        print(f"No saved team {team_id}.")
        return 1
    print(f"Team {team_id} deleted.")
    return 0


def main(argv: Optional[List[str]] = None, client=None, session_factory=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.WARNING, log_to_file=args.log_file)
    if session_factory is None:
        init_db()
        session_factory = SessionLocal

    own_client = client is None
    client = client or PokeApiClient()
    store = LocalStateStore(args.state)
    auth = AuthSession(DatabaseAuthBackend(session_factory))
    uid = store.remembered_user()
    if uid:
        auth.restore(uid)
    # la sesión se recuerda entre ejecuciones
    auth.on_auth_state_change(lambda user: store.remember_user(user.uid) if user else store.forget_user())

    ctrl = TeamBuilderController(client, state_store=store, auth=auth, session_factory=session_factory)
    ctrl.restore_local()

    try:
        if args.command == "search":
            for name in ctrl.search(args.query):
                print(format_pokemon_name(name))
        elif args.command == "add":
            for name in args.names:
                if ctrl.add_pokemon(name) is None:
                    print(f"No data for {name}.")
            print_team(ctrl)
        elif args.command == "remove":
            ctrl.remove_pokemon(args.slot - 1)
            print_team(ctrl)
        elif args.command == "team":
            print_team(ctrl)
        elif args.command == "generation":
            ctrl.set_generation(args.value)
            print_team(ctrl)
        elif args.command == "reset":
            ctrl.reset()
            print_team(ctrl)
        elif args.command == "coverage":
            print_coverage(ctrl)
        elif args.command == "matchup":
            return print_matchup(ctrl, args.opponent)
        elif args.command == "lookup":
            res = LookupController(client, generation=ctrl.generation).lookup(args.name)
            if res is None:
                print(f"No data for {args.name}.")
                return 1
            print_lookup(res)
        elif args.command == "signup":
            user = auth.sign_up(args.email, _password(args))
            print(f"Signed in as {user.email}")
        elif args.command == "signin":
            user = auth.sign_in(email=args.email, password=_password(args))
            print(f"Signed in as {user.email}")
        elif args.command == "signout":
            auth.sign_out()
            print("Signed out.")
        elif args.command == "whoami":
            user = auth.current_user()
            print(f"Signed in as {user.email}" if user else "Not signed in.")
        elif args.command == "teams":
            return _teams_command(ctrl, args.action, args.team_id)
        elif args.command == "delete-account":
            ctrl.delete_account_data()
            print("Account and saved teams deleted.")
    except (PokeToolsError, ValueError, IndexError) as exc:
        log.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if own_client:
            client.cache.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())

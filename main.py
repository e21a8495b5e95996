#!/usr/bin/env python3
"""
The Last Lighthouse - Entry Point
═══════════════════════════════════════════════════════════════════════════

Tekstowa sesja gry na silniku symulacji (bez grafiki).

Użycie:
    python main.py                        # Gra interaktywna
    python main.py --auto                 # Demo: gra prowadzona automatycznie
    python main.py --save-dir saves/      # Zapisy w plikach JSON
    python main.py --verbose              # Logi DEBUG

Komendy w grze:
    move Q R     ruch na sąsiednie pole
    path Q R     najkrótsza ścieżka do pola
    end          zakończ dzień
    light/dark   wybór przy zmierzchu
    wait         czekaj na świt
    map, status, moves, events
    save [SLOT], load [SLOT], continue, new, quit
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from lighthouse.core.config_loader import ConfigLoader
from lighthouse.core.hex_coord import HexCoord
from lighthouse.events.event_bus import EventType, GameEvent
from lighthouse.game import LighthouseGame
from lighthouse.persistence.save_manager import FileStorage, MemoryStorage
from lighthouse.systems.phase_cycle import Awaiting


PRINTED_EVENTS = {
    EventType.PHASE_TRANSITION,
    EventType.DAY_STARTED,
    EventType.DUSK_CHOICE,
    EventType.NIGHT_VIGIL,
    EventType.NOTIFICATION,
    EventType.TILE_EVENTS,
    EventType.NPC_ENCOUNTER,
    EventType.GAME_OVER,
}


def print_event(event: GameEvent) -> None:
    """Wypisuje zdarzenie silnika na konsolę."""
    data = event.data
    if event.event_type == EventType.PHASE_TRANSITION:
        print()
        print("=" * 60)
        print(f"  {data['title'].upper()}")
        if data.get("subtitle"):
            print(f"  {data['subtitle']}")
        print("=" * 60)
    elif event.event_type == EventType.DAY_STARTED:
        print(f"You have {data['moves']} moves today.")
    elif event.event_type == EventType.DUSK_CHOICE:
        print(f"The lamp needs {data['oil_cost']} oil tonight. You have {data['oil_available']}.")
        if data["can_light"]:
            print("  light - light the lighthouse")
        else:
            print("  (not enough oil to light the lighthouse)")
        print("  dark  - leave it dark")
    elif event.event_type == EventType.NIGHT_VIGIL:
        if data["lit"]:
            print("The beam sweeps the darkness. The night passes slowly.")
        else:
            print("Without the light the island sinks into absolute black.")
        print("  wait - wait for dawn")
    elif event.event_type == EventType.NOTIFICATION:
        print(f"[{data.get('level', 'info')}] {data['message']}")
    elif event.event_type == EventType.TILE_EVENTS:
        print(f"Something happens here: {', '.join(data['event_ids'])}")
    elif event.event_type == EventType.NPC_ENCOUNTER:
        print(f"You meet someone: {data['npc_id']}")
    elif event.event_type == EventType.GAME_OVER:
        print()
        print("*" * 60)
        print(f"  GAME OVER ({data['reason']})")
        print(f"  {data['message']}")
        print("*" * 60)


def attach_printer(game: LighthouseGame) -> None:
    """Wypisuje historię i subskrybuje nowe zdarzenia."""
    for event in game.bus.events:
        if event.event_type in PRINTED_EVENTS:
            print_event(event)
    for event_type in PRINTED_EVENTS:
        game.bus.subscribe(print_event, event_type)


def print_status(game: LighthouseGame) -> None:
    summary = game.summary()
    position = summary["position"]
    tile = game.get_tile(HexCoord(position["q"], position["r"]))
    print(f"Act {summary['act']} | {summary['phase']} | moves {summary['moves_remaining']}")
    print(f"Position: ({position['q']}, {position['r']}) {tile.name if tile else ''}")
    print(
        f"Sanity {summary['sanity']} | oil {summary['resources']['oil']} "
        f"| food {summary['resources']['food']}"
    )
    print(f"Tonight: {summary['night_costs']['oil']} oil, {summary['night_costs']['food']} food")
    for warning in summary["warnings"]:
        print(f"  ! {warning['message']}")


def print_moves(game: LighthouseGame) -> None:
    for coord in game.valid_moves():
        tile = game.get_tile(coord)
        print(f"  {coord.q} {coord.r}  {tile.name}")


# ─────────────────────────────────────────────────────────────────────────────
# TRYB INTERAKTYWNY
# ─────────────────────────────────────────────────────────────────────────────

def parse_coord(args):
    if len(args) != 2:
        return None
    try:
        return HexCoord(int(args[0]), int(args[1]))
    except ValueError:
        return None


def run_interactive(game: LighthouseGame) -> None:
    attach_printer(game)
    game.fast_forward()
    print_status(game)

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        command, *args = line.split()
        command = command.lower()

        if command in ("quit", "exit", "q"):
            break
        elif command == "move":
            coord = parse_coord(args)
            if coord is None:
                print("Usage: move Q R")
                continue
            result = game.try_move(coord)
            if result.ok:
                print(f"{result.tile.name}: {result.tile.description}")
            else:
                print(result.message or result.outcome.value)
        elif command == "path":
            coord = parse_coord(args)
            if coord is None:
                print("Usage: path Q R")
                continue
            path = game.shortest_path(game.state.player.position, coord)
            if path is None:
                print("No path.")
            else:
                print(" -> ".join(str(c) for c in path))
        elif command == "end":
            if not game.end_day():
                print("It is not daytime.")
        elif command in ("light", "dark"):
            if not game.choose(command == "light"):
                print("That choice is not available.")
        elif command == "wait":
            if not game.acknowledge():
                print("Nothing to wait for.")
        elif command == "map":
            print(game.board.debug_print(game.state.player.position))
        elif command == "status":
            print_status(game)
        elif command == "moves":
            print_moves(game)
        elif command == "events":
            for event in game.bus.events[-20:]:
                if event.event_type != EventType.STATE_CHANGED:
                    print(f"  {event.event_type.name} {event.data}")
        elif command == "save":
            slot = args[0] if args else None
            print("Saved." if game.save(slot) else "Save failed.")
        elif command == "load":
            slot = args[0] if args else game.config.persistence.manual_slots[0]
            print("Loaded." if game.load(slot) else "No save to load.")
        elif command == "continue":
            print("Loaded." if game.continue_game() else "No save to continue.")
        elif command == "new":
            game.new_game()
            attach_printer(game)
        else:
            print(f"Unknown command: {command}")
            continue

        # Pauzy narracyjne mijają od razu w trybie tekstowym
        game.fast_forward()


# ─────────────────────────────────────────────────────────────────────────────
# DEMO
# ─────────────────────────────────────────────────────────────────────────────

def choose_move(game: LighthouseGame):
    """Łup > nieodwiedzone pole > pierwsze dostępne."""
    moves = game.valid_moves()
    if not moves:
        return None
    looted = game.state.board.looted
    for coord in moves:
        tile = game.get_tile(coord)
        if tile.loot is not None and tile.key not in looted:
            return coord
    for coord in moves:
        if not game.get_tile(coord).visited:
            return coord
    return moves[0]


def run_auto(game: LighthouseGame, max_steps: int = 500) -> None:
    attach_printer(game)
    for _ in range(max_steps):
        game.fast_forward()
        state = game.state
        if state.game_over:
            break

        if game.cycle.awaiting == Awaiting.DUSK_CHOICE:
            game.choose(game.economy.can_light_beacon())
        elif game.cycle.awaiting == Awaiting.NIGHT_ACK:
            game.acknowledge()
        elif state.moves_remaining > 0:
            coord = choose_move(game)
            if coord is None:
                game.end_day()
            else:
                result = game.try_move(coord)
                print(f"-> {coord} {result.tile.name if result.tile else ''} [{result.outcome.value}]")
        else:
            game.end_day()

    print()
    print_status(game)
    lit = game.state.lighthouse_lit
    print(f"Nights lit: {sum(lit)}/{len(lit)}")


def main():
    """Główna funkcja."""
    parser = argparse.ArgumentParser(
        description="The Last Lighthouse",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Rozegraj partię automatycznie"
    )
    parser.add_argument(
        "--data",
        default=None,
        help="Folder z plikami YAML (domyślnie: lighthouse/data)"
    )
    parser.add_argument(
        "--save-dir",
        default=None,
        help="Folder zapisów (domyślnie: tylko w pamięci)"
    )
    parser.add_argument(
        "--continue",
        dest="resume",
        action="store_true",
        help="Wczytaj autosave na starcie"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Logi DEBUG"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    storage = FileStorage(args.save_dir) if args.save_dir else MemoryStorage()
    game = LighthouseGame(storage=storage, loader=ConfigLoader(args.data))

    print("=" * 60)
    print("THE LAST LIGHTHOUSE")
    print("=" * 60)

    if args.resume and not game.continue_game():
        print("No save found, starting a new game.")

    if args.auto:
        run_auto(game)
    else:
        run_interactive(game)


if __name__ == "__main__":
    main()

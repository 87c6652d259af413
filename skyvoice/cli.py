"""CLI entry point for the skyvoice weather client."""

import argparse
import asyncio
import logging

from skyvoice.app import build_resolver, build_session
from skyvoice.config.defaults import DEFAULT_CONFIG_PATH, DEFAULT_DB_PATH
from skyvoice.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from skyvoice.config.schema import AppConfig
from skyvoice.location.errors import LocationError
from skyvoice.models.common import MetricId, Timeframe
from skyvoice.personality.catalog import (
    MODE_LABELS,
    get_personality_prompt,
    is_known_mode,
    list_modes,
)
from skyvoice.reporting.formatters import (
    format_locations,
    format_search_results,
    format_view_json,
    format_view_text,
)
from skyvoice.scheduling.scheduler import TaskScheduler
from skyvoice.storage.database import open_database
from skyvoice.storage.preferences import PreferencesStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyvoice",
        description="Weather forecasts with personality",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    parser.add_argument("--db", default=DEFAULT_DB_PATH, help="SQLite DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # show
    show_p = sub.add_parser("show", help="Show the forecast for a location")
    where = show_p.add_mutually_exclusive_group()
    where.add_argument("--location", help="Saved location id")
    where.add_argument("--search", help="Geocode text and add it as a location")
    where.add_argument("--current", action="store_true", help="Use the device location")
    show_p.add_argument("--timeframe", choices=[t.value for t in Timeframe])
    show_p.add_argument("--personality", choices=list_modes())
    show_p.add_argument("--metric", choices=[m.value for m in MetricId])
    show_p.add_argument("--refresh", action="store_true", help="Force a forecast refetch")
    show_p.add_argument("--format", choices=["text", "json"], default="text")

    # locations list / add / remove
    loc_p = sub.add_parser("locations", help="Manage saved locations")
    loc_sub = loc_p.add_subparsers(dest="locations_command")
    loc_sub.add_parser("list", help="List saved locations")
    add_p = loc_sub.add_parser("add", help="Add a location by city, state or zipcode")
    add_p.add_argument("query")
    rm_p = loc_sub.add_parser("remove", help="Delete a saved location")
    rm_p.add_argument("location_id")

    # search
    search_p = sub.add_parser("search", help="Search for locations")
    search_p.add_argument("query")

    # personality list / show / set
    pers_p = sub.add_parser("personality", help="Personality operations")
    pers_sub = pers_p.add_subparsers(dest="personality_command")
    pers_sub.add_parser("list", help="List personality modes")
    pers_sub.add_parser("show", help="Show the selected personality")
    pset_p = pers_sub.add_parser("set", help="Select a personality")
    pset_p.add_argument("mode")

    # config show / set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    # storage info / clear
    storage_p = sub.add_parser("storage", help="Stored preference operations")
    storage_sub = storage_p.add_subparsers(dest="storage_command")
    storage_sub.add_parser("info", help="Show stored preferences")
    storage_sub.add_parser("clear", help="Delete all stored preferences")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "show":
        return asyncio.run(_cmd_show(config, args))
    elif args.command == "locations":
        return _cmd_locations(config, args)
    elif args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "personality":
        return _cmd_personality(args)
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "storage":
        return _cmd_storage(args)
    else:
        parser.print_help()
        return 1


def _open_store(args) -> PreferencesStore:
    return PreferencesStore(open_database(args.db))


async def _cmd_show(config: AppConfig, args) -> int:
    store = _open_store(args)
    session = build_session(config, store.conn)
    try:
        last = session.load_preferences()
        if args.location:
            match = next((s for s in session.saved_locations if s.id == args.location), None)
            if match is None:
                print(f"Unknown location id: {args.location}")
                return 1
            await session.select_location(match)
        elif args.search:
            try:
                await session.add_location(args.search)
            except LocationError as e:
                print(f"{e.title}: {e.user_message}")
                return 1
        elif args.current:
            await session.refresh_current_location()
        else:
            await session.select_initial_location(last)

        if args.personality:
            session.set_personality(args.personality)
        if args.timeframe:
            session.set_timeframe(Timeframe(args.timeframe))
        if args.metric:
            session.set_metric(MetricId(args.metric))
        if args.refresh:
            await session.refresh_forecast(force=True)

        await session.wait_until_idle()
        view = session.view()
        if args.format == "json":
            print(format_view_json(view))
        else:
            print(format_view_text(view))
        return 0 if view.error is None and view.selected_location is not None else 1
    finally:
        session.close()
        store.conn.close()


def _cmd_locations(config: AppConfig, args) -> int:
    store = _open_store(args)
    try:
        if args.locations_command == "list":
            last = store.load_last_selected()
            print(format_locations(store.load_locations(), last.id if last else None))
            return 0
        elif args.locations_command == "add":
            return asyncio.run(_add_location(config, store, args.query))
        elif args.locations_command == "remove":
            return _remove_location(store, args.location_id)
        else:
            print("Use: locations list | add QUERY | remove ID")
            return 1
    finally:
        store.conn.close()


async def _add_location(config: AppConfig, store: PreferencesStore, query: str) -> int:
    scheduler = TaskScheduler()
    try:
        location = await build_resolver(config, scheduler).add_manual(query)
    except LocationError as e:
        print(f"{e.title}: {e.user_message}")
        return 1
    finally:
        scheduler.close()
    store.save_locations([*store.load_locations(), location])
    store.save_last_selected(location)
    print(f"Added {location.name} ({location.id})")
    return 0


def _remove_location(store: PreferencesStore, location_id: str) -> int:
    saved = store.load_locations()
    remaining = [loc for loc in saved if loc.id != location_id]
    if len(remaining) == len(saved):
        print(f"Unknown location id: {location_id}")
        return 1
    store.save_locations(remaining)
    last = store.load_last_selected()
    if last is not None and last.id == location_id:
        store.save_last_selected(None)
    print(f"Removed {location_id}")
    return 0


async def _cmd_search(config: AppConfig, args) -> int:
    scheduler = TaskScheduler()
    try:
        results = await build_resolver(config, scheduler).search(args.query)
    finally:
        scheduler.close()
    print(format_search_results(results))
    return 0


def _cmd_personality(args) -> int:
    if args.personality_command == "list":
        for mode in list_modes():
            print(f"{mode:10} {MODE_LABELS.get(mode, mode)}")
        return 0
    store = _open_store(args)
    try:
        if args.personality_command == "show":
            mode = store.load_personality()
            print(f"Personality: {mode}")
            prompt = get_personality_prompt(mode)
            if prompt:
                print(prompt)
            return 0
        elif args.personality_command == "set":
            if not is_known_mode(args.mode):
                print(f"Unknown personality: {args.mode}")
                return 1
            store.save_personality(args.mode)
            print(f"Personality: {args.mode}")
            return 0
        else:
            print("Use: personality list | show | set MODE")
            return 1
    finally:
        store.conn.close()


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_storage(args) -> int:
    store = _open_store(args)
    try:
        if args.storage_command == "info":
            info = store.storage_info()
            last = info.last_selected_location
            print(f"Saved locations: {info.total_locations}")
            print(f"Personality: {info.selected_personality}")
            print(f"Last selected: {last.name if last else 'none'}")
            return 0
        elif args.storage_command == "clear":
            store.clear_all()
            print("All stored data cleared")
            return 0
        else:
            print("Use: storage info | clear")
            return 1
    finally:
        store.conn.close()

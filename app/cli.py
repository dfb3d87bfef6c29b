"""Command-line interface for the workout log.

Typed transcripts and microphone input share one path: parse the transcript,
show the candidate, log it once exercise, sets and reps are present.
Everything else is a thin wrapper around storage and catalog operations.
"""
from __future__ import annotations

import argparse
import threading
from datetime import date
from typing import Callable, Dict, List

from loguru import logger

from app.application import Application
from app.use_cases import aliases_from_text
from config.config import ConfigLoader
from parser.transcript_parser import ParsedWorkout
from speech.base_capture import NO_SPEECH, NOT_SUPPORTED
from storage.workout_logger import WorkoutEntry

ERROR_MESSAGES = {
    NOT_SUPPORTED: "Voice input is not available. Install a Vosk model or type the workout instead.",
    NO_SPEECH: "No speech was detected. Please try again.",
}


def build_parser() -> argparse.ArgumentParser:
    parser = ConfigLoader.build_arg_parser()
    parser.prog = "workout-log"
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Parse a transcript without logging it")
    p.add_argument("text", nargs="+", help='e.g. "3 sets of 10 reps bench press at 135 pounds"')

    p = sub.add_parser("log", help="Log a workout from a transcript and/or explicit fields")
    p.add_argument("text", nargs="*", help="Transcript to parse first")
    p.add_argument("--exercise", help="Exercise name (overrides the transcript)")
    p.add_argument("--sets", help="Number of sets")
    p.add_argument("--reps", help="Reps per set")
    p.add_argument("--weight", help="Weight")
    p.add_argument("--notes", default="", help="Free-text notes")
    p.add_argument("--date", help="ISO date/time of the workout (defaults to now)")

    p = sub.add_parser("listen", help="Capture one spoken workout from the microphone")
    p.add_argument("--log", action="store_true", help="Log the result when it is complete")
    p.add_argument("--notes", default="", help="Notes to store with the logged workout")

    p = sub.add_parser("history", help="Show logged workouts")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--date", help="Only this day (YYYY-MM-DD)")
    group.add_argument("--exercise", help="Only this exercise, oldest first")
    group.add_argument("--today", action="store_true", help="Only today's workouts")

    sub.add_parser("cancel", help="Remove the most recently logged workout")

    p = sub.add_parser("stats", help="Show workout statistics")
    p.add_argument("--exercise", help="Also show daily max weight for this exercise")

    p = sub.add_parser("exercises", help="Manage the exercise catalog")
    ex_sub = p.add_subparsers(dest="exercise_command", required=True)
    q = ex_sub.add_parser("list", help="List exercises")
    q.add_argument("--custom", action="store_true", help="Only custom exercises")
    q = ex_sub.add_parser("add", help="Add a custom exercise")
    q.add_argument("name")
    q.add_argument("--aliases", default="", help="Comma separated aliases")
    q = ex_sub.add_parser("update", help="Replace the aliases of an exercise")
    q.add_argument("name")
    q.add_argument("--aliases", default="", help="Comma separated aliases")
    q = ex_sub.add_parser("delete", help="Delete a custom exercise")
    q.add_argument("name")
    q = ex_sub.add_parser("suggest", help="Suggest exercise names for partial input")
    q.add_argument("text", nargs="+")
    q.add_argument("--limit", type=int, default=5)

    p = sub.add_parser("export", help="Write a JSON backup")
    p.add_argument("path")

    p = sub.add_parser("import", help="Restore a JSON backup")
    p.add_argument("path")

    return parser


def _format_parsed(parsed: ParsedWorkout) -> str:
    def show(value) -> str:
        return "-" if value is None or value == "" else str(value)

    lines = [
        f"Exercise: {show(parsed.exercise)}",
        f"Sets:     {show(parsed.sets)}",
        f"Reps:     {show(parsed.reps)}",
        f"Weight:   {show(parsed.weight)}",
    ]
    if parsed.missing_fields:
        lines.append(f"Missing:  {', '.join(parsed.missing_fields)}")
    return "\n".join(lines)


def _format_entry(entry: WorkoutEntry) -> str:
    line = f"#{entry.id:<4} {entry.exercise}  {entry.sets}x{entry.reps}"
    if entry.weight is not None:
        line += f" @ {entry.weight:g}"
    if entry.notes:
        line += f"  ({entry.notes})"
    return line


def cmd_parse(app: Application, args) -> int:
    result = app.get("parse_transcript").execute(" ".join(args.text))
    if result.is_failure():
        print(result.message)
        return 1
    print(_format_parsed(result.value))
    return 0


def cmd_log(app: Application, args) -> int:
    fields: Dict[str, object] = {"exercise": None, "sets": None, "reps": None, "weight": None}
    if args.text:
        parsed = app.get("parse_transcript").execute(" ".join(args.text))
        if parsed.is_failure():
            print(parsed.message)
            return 1
        fields.update(parsed.value.to_dict())
    for key in ("exercise", "sets", "reps", "weight"):
        override = getattr(args, key)
        if override is not None:
            fields[key] = override

    result = app.get("log_workout").execute(
        fields["exercise"], fields["sets"], fields["reps"], fields["weight"],
        notes=args.notes, date=args.date,
    )
    if result.is_failure():
        print(result.message)
        return 1
    print(f"Logged {_format_entry(result.value)}")
    return 0


def cmd_listen(app: Application, args) -> int:
    capture = app.get("speech_capture")
    done = threading.Event()
    outcome: Dict[str, str] = {}

    def on_result(transcript: str) -> None:
        outcome["transcript"] = transcript
        done.set()

    def on_error(code: str) -> None:
        outcome["error"] = code
        done.set()

    if capture.start(on_result, on_error):
        print("Listening... (Ctrl+C to cancel)")
        try:
            done.wait()
        except KeyboardInterrupt:
            capture.stop()
            print("Cancelled")
            return 130

    if "error" in outcome:
        code = outcome["error"]
        print(ERROR_MESSAGES.get(code, f"Speech recognition error: {code}"))
        return 1

    transcript = outcome.get("transcript", "")
    print(f'Heard: "{transcript}"')
    parsed = app.get("parse_transcript").execute(transcript)
    if parsed.is_failure():
        print(parsed.message)
        return 1
    print(_format_parsed(parsed.value))

    if args.log:
        if not parsed.value.is_complete:
            print("Not logged: please fill in the missing fields with `workout-log log`.")
            return 1
        logged = app.get("log_workout").execute_parsed(parsed.value, notes=args.notes)
        if logged.is_failure():
            print(logged.message)
            return 1
        print(f"Logged {_format_entry(logged.value)}")
    return 0


def cmd_history(app: Application, args) -> int:
    workout_logger = app.get("workout_logger")
    if args.exercise:
        workouts = workout_logger.get_workouts_by_exercise(args.exercise)
        for entry in workouts:
            print(f"{entry.day}  {_format_entry(entry)}")
    else:
        if args.date:
            grouped = {args.date: workout_logger.get_workouts_by_date(args.date)}
        elif args.today:
            grouped = {date.today().isoformat(): workout_logger.get_todays_workouts()}
        else:
            grouped = workout_logger.get_workouts_by_day()
        workouts = [entry for entries in grouped.values() for entry in entries]
        for day, entries in grouped.items():
            if not entries:
                continue
            print(day)
            for entry in entries:
                print(f"  {_format_entry(entry)}")

    if not workouts:
        print("No workouts logged yet.")
    return 0


def cmd_cancel(app: Application, args) -> int:
    result = app.get("cancel_last").execute()
    if result.is_failure():
        print(result.message)
        return 1
    print("Removed the last workout." if result.value else "Nothing to remove.")
    return 0


def cmd_stats(app: Application, args) -> int:
    analytics = app.analytics()
    summary = analytics.summary()
    print(f"Workouts:          {summary['total_workouts']}")
    print(f"Total sets:        {summary['total_sets']}")
    print(f"Total volume:      {summary['total_volume']}")
    print(f"Favorite exercise: {summary['favorite_exercise']}")
    if summary["weekly_volume"]:
        print("Weekly volume:")
        for week, volume in summary["weekly_volume"].items():
            print(f"  {week}  {round(volume)}")

    if args.exercise:
        progress = analytics.exercise_progress(args.exercise)
        print(f"{args.exercise} - Max Weight:")
        if not progress:
            print("  no data")
        for point in progress:
            print(f"  {point['date']}  {point['max_weight']:g}")
    return 0


def cmd_exercises(app: Application, args) -> int:
    command = args.exercise_command
    if command == "list":
        resolver = app.get("resolver")
        for entry in resolver.entries():
            if args.custom and not resolver.is_custom(entry.canonical_name):
                continue
            marker = " [custom]" if not entry.is_builtin else ""
            aliases = f" ({', '.join(entry.aliases)})" if entry.aliases else ""
            print(f"{entry.canonical_name}{aliases}{marker}")
        return 0

    if command == "suggest":
        suggestions = app.get("resolver").suggest(" ".join(args.text), limit=args.limit)
        if not suggestions:
            print("No suggestions.")
        for name, score in suggestions:
            print(f"{name}  {score:.2f}")
        return 0

    if command == "add":
        result = app.get("add_exercise").execute(args.name, aliases_from_text(args.aliases))
        done = "Added"
    elif command == "update":
        result = app.get("update_exercise").execute(args.name, aliases_from_text(args.aliases))
        done = "Updated"
    else:
        result = app.get("delete_exercise").execute(args.name)
        if result.is_success() and not result.value:
            print(f"'{args.name}' is not a custom exercise; builtin exercises cannot be deleted.")
            return 1
        done = "Deleted"

    if result.is_failure():
        print(result.message)
        return 1
    name = result.value if isinstance(result.value, str) else args.name
    print(f"{done} {name}")
    return 0


def cmd_export(app: Application, args) -> int:
    path = app.get("exporter").write(args.path)
    print(f"Exported to {path}")
    return 0


def cmd_import(app: Application, args) -> int:
    count = app.get("exporter").read(args.path)
    print(f"Imported {count} workouts")
    return 0


COMMANDS: Dict[str, Callable[[Application, argparse.Namespace], int]] = {
    "parse": cmd_parse,
    "log": cmd_log,
    "listen": cmd_listen,
    "history": cmd_history,
    "cancel": cmd_cancel,
    "stats": cmd_stats,
    "exercises": cmd_exercises,
    "export": cmd_export,
    "import": cmd_import,
}


def dispatch(app: Application, args: argparse.Namespace) -> int:
    logger.debug(f"Running command: {args.command}")
    return COMMANDS[args.command](app, args)


def main(argv: List[str] = None) -> int:
    """Console script entry point."""
    from app.startup import run_application

    return run_application(argv)

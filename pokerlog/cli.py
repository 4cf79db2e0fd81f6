"""
pokerlog command line.

Usage:
    pokerlog record [--hero POS] [--stack BB] [--history PATH]
    pokerlog history list|show|delete|favorite|memo|clear|export ...

`record` reads one command per line from stdin:

    UTG raise 3            action (size in bb; 999 means all-in)
    BB call type=Fish style=Loose-Passive
    BTN raise 9 me         'me' marks the acting seat as the hero
    hero BTN               designate the hero seat
    hand AhKd              hero hole cards
    board As Kd 2h         next street's cards
    villain Fish           default opponent type
    style Tight-Aggressive default opponent style
    result BTN 12.5        winner and hero's net result in bb
    state | log | save | reset | help | quit
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional, TextIO

from pokerlog.config import Settings, LOG_FORMAT
from pokerlog.core.card import parse_cards
from pokerlog.core.rules import Position, ActionType, OpponentType, OpponentStyle
from pokerlog.history.storage import HandHistoryStore, HandNotFoundError, HistoryStoreError
from pokerlog.history.schemas import SavedHand
from pokerlog.session import HandSession


logger = logging.getLogger(__name__)

PROMPT = "> "


class QuitRecording(Exception):
    """Raised by the 'quit' command to end a recording loop."""


def _parse_enum(enum_cls, value: str):
    for member in enum_cls:
        if member.value.lower() == value.lower() or member.name.lower() == value.lower():
            return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Invalid {enum_cls.__name__}: {value} (choose from {choices})")


def describe_status(session: HandSession) -> str:
    """One line telling the user what the hand needs next."""
    engine = session.engine
    if engine.is_complete:
        completion = engine.get_completion_type().value
        if engine.hand_result is None:
            return f"Hand complete ({completion}), pot {engine.pot:.1f}bb. Enter: result WINNER NET"
        return f"Hand complete ({completion}), result recorded. Enter: save"
    if engine.waiting_for_board:
        street = session.board.next_street
        name = street.value if street is not None else engine.phase.value
        return f"Waiting for {name} board, pot {engine.pot:.1f}bb. Enter: board CARDS"
    actions = "/".join(a.value for a in session.available_actions())
    return (
        f"[{engine.phase.value}] {engine.current_actor.name} to act ({actions}), "
        f"pot {engine.pot:.1f}bb, {engine.get_raise_label()}"
    )


def describe_state(session: HandSession) -> str:
    engine = session.engine
    details = engine.get_pot_details()
    lines = [
        f"Phase: {engine.phase.value}   Board: {session.board}",
        f"Pot: {details.total_pot:.1f}bb (start {details.starting_pot:.1f}bb, "
        f"+{details.added_this_street:.1f}bb this street)",
    ]
    for player in engine.players:
        lines.append(f"  {player}  in: {player.contributed:.1f}bb")
    lines.append(describe_status(session))
    return "\n".join(lines)


def execute(session: HandSession, store: HandHistoryStore, line: str) -> str:
    """
    Run one recorder command.

    Returns:
        Text to show the user

    Raises:
        QuitRecording: On 'quit'.
        ValueError: On any rejected input (the session is left unchanged).
    """
    tokens = line.split()
    if not tokens:
        return ""
    command, args = tokens[0].lower(), tokens[1:]

    if command in ("quit", "exit", "q"):
        raise QuitRecording()
    if command == "help":
        return __doc__.split("`record` reads one command per line from stdin:")[1].rstrip()
    if command == "state":
        return describe_state(session)
    if command == "log":
        return "\n".join(a.describe() for a in session.engine.actions) or "(no actions)"
    if command == "reset":
        session.reset()
        return "New hand.\n" + describe_status(session)
    if command == "hero":
        if len(args) != 1:
            raise ValueError("Usage: hero POS")
        session.engine.designate_hero(Position.parse(args[0]))
        return f"Hero is {args[0].upper()}"
    if command == "hand":
        session.set_hero_hand(parse_cards(" ".join(args)))
        return "Hero hand: " + " ".join(str(c) for c in session.hero_hand)
    if command == "board":
        session.deal(parse_cards(" ".join(args)))
        return f"Board: {session.board}\n" + describe_status(session)
    if command == "villain":
        if len(args) != 1:
            raise ValueError("Usage: villain Regular|Fish")
        session.opponent_type = _parse_enum(OpponentType, args[0])
        return f"Opponent type: {session.opponent_type.value}"
    if command == "style":
        if len(args) != 1:
            raise ValueError("Usage: style STYLE")
        session.opponent_style = _parse_enum(OpponentStyle, args[0])
        return f"Opponent style: {session.opponent_style.value}"
    if command == "result":
        if len(args) != 2:
            raise ValueError("Usage: result WINNER NET_BB")
        result = session.record_result(Position.parse(args[0]), float(args[1]))
        outcome = "won" if result.hero_won else "lost"
        return f"Result: {result.winner.name} wins, hero {outcome} {result.pot_awarded:+.1f}bb"
    if command == "save":
        saved = session.save(store)
        return f"Saved hand {saved.id}"

    return _execute_action(session, tokens)


def _execute_action(session: HandSession, tokens: List[str]) -> str:
    """Handle 'POS ACTION [SIZE] [type=..] [style=..] [me]'."""
    if len(tokens) < 2:
        raise ValueError(f"Unknown command: {tokens[0]} (try 'help')")

    position = Position.parse(tokens[0])
    action_type = ActionType.parse(tokens[1])
    bet_size = None
    opponent_type = None
    opponent_style = None
    is_hero = False

    for token in tokens[2:]:
        key, _, value = token.partition("=")
        if token.lower() in ("me", "hero"):
            is_hero = True
        elif key.lower() == "type" and value:
            opponent_type = _parse_enum(OpponentType, value)
        elif key.lower() == "style" and value:
            opponent_style = _parse_enum(OpponentStyle, value)
        elif bet_size is None:
            try:
                bet_size = float(token.lower().removesuffix("bb"))
            except ValueError:
                raise ValueError(f"Invalid bet size: {token}") from None
        else:
            raise ValueError(f"Unexpected argument: {token}")

    session.add_action(
        position, action_type, bet_size,
        opponent_type=opponent_type,
        opponent_style=opponent_style,
        is_hero=is_hero,
    )
    return describe_status(session)


def run_recorder(
    session: HandSession,
    store: HandHistoryStore,
    stdin: TextIO,
    stdout: TextIO,
) -> None:
    """Read commands until EOF or 'quit', reporting rejected input and carrying on."""
    interactive = stdin.isatty()
    print(describe_status(session), file=stdout)
    while True:
        if interactive:
            print(PROMPT, end="", file=stdout, flush=True)
        line = stdin.readline()
        if not line:
            break
        try:
            output = execute(session, store, line)
        except QuitRecording:
            break
        except (ValueError, KeyError) as e:
            print(f"Error: {e}", file=stdout)
            continue
        if output:
            print(output, file=stdout)


def _resolve_hand(store: HandHistoryStore, prefix: str) -> SavedHand:
    matches = [h for h in store.all() if h.id.startswith(prefix)]
    if not matches:
        raise HandNotFoundError(prefix)
    if len(matches) > 1:
        raise ValueError(f"Ambiguous id prefix: {prefix}")
    return matches[0]


def format_saved_hand(hand: SavedHand, verbose: bool = False) -> str:
    star = "*" if hand.is_favorite else " "
    when = hand.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
    board = " ".join(hand.board) or "-"
    summary = (
        f"{star} {hand.id[:8]}  {when}  hero={hand.hero_position or '-'}  "
        f"vs {hand.villain_type}  board={board}  pot={hand.final_pot:.1f}bb"
    )
    if not verbose:
        return summary
    lines = [summary]
    if hand.hero_hand:
        lines.append(f"  Hero hand: {' '.join(hand.hero_hand)}")
    lines.extend(f"  {action}" for action in hand.actions)
    if hand.location_memo:
        lines.append(f"  Location: {hand.location_memo}")
    if hand.other_memo:
        lines.append(f"  Memo: {hand.other_memo}")
    return "\n".join(lines)


def _history_command(args: argparse.Namespace, store: HandHistoryStore, stdout: TextIO) -> int:
    action = args.history_command
    if action == "list":
        hands = store.all()
        if args.favorites:
            hands = [h for h in hands if h.is_favorite]
        for hand in hands:
            print(format_saved_hand(hand), file=stdout)
        if not hands:
            print("No saved hands.", file=stdout)
    elif action == "show":
        print(format_saved_hand(_resolve_hand(store, args.id), verbose=True), file=stdout)
    elif action == "delete":
        hand = _resolve_hand(store, args.id)
        store.delete(hand.id)
        print(f"Deleted {hand.id}", file=stdout)
    elif action == "favorite":
        hand = store.toggle_favorite(_resolve_hand(store, args.id).id)
        print(f"{hand.id} favorite={hand.is_favorite}", file=stdout)
    elif action == "memo":
        hand = store.update(
            _resolve_hand(store, args.id).id,
            location_memo=args.location,
            other_memo=args.other,
        )
        print(format_saved_hand(hand, verbose=True), file=stdout)
    elif action == "clear":
        if not args.yes:
            print("Refusing to clear history without --yes", file=stdout)
            return 1
        store.clear()
        print("History cleared.", file=stdout)
    elif action == "export":
        print(store.export_json(), file=stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pokerlog", description="Live poker hand logger")
    parser.add_argument("--history", help="Hand history file (default: $POKERLOG_HISTORY)")
    parser.add_argument("--log-level", help="Logging level (default: $POKERLOG_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="Record a hand from stdin")
    record.add_argument("--hero", type=Position.parse, help="Hero seat (SB, BB, UTG, HJ, CO, BTN)")
    record.add_argument("--stack", type=float, help="Starting stack in bb")

    history = sub.add_parser("history", help="Manage saved hands")
    hsub = history.add_subparsers(dest="history_command", required=True)
    listing = hsub.add_parser("list", help="List saved hands, newest first")
    listing.add_argument("--favorites", action="store_true", help="Only favorites")
    for name, text in (("show", "Show one hand"), ("delete", "Delete a hand"),
                       ("favorite", "Toggle favorite")):
        p = hsub.add_parser(name, help=text)
        p.add_argument("id", help="Hand id or unique prefix")
    memo = hsub.add_parser("memo", help="Edit memos")
    memo.add_argument("id", help="Hand id or unique prefix")
    memo.add_argument("--location", help="Where the hand was played")
    memo.add_argument("--other", help="Free-text note")
    clear = hsub.add_parser("clear", help="Delete all saved hands")
    clear.add_argument("--yes", action="store_true", help="Confirm")
    hsub.add_parser("export", help="Print history as JSON")

    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )

    store = HandHistoryStore(args.history or settings.history_path)

    try:
        if args.command == "record":
            session = HandSession(args.hero, args.stack or settings.stack_size)
            run_recorder(session, store, stdin, stdout)
            return 0
        return _history_command(args, store, stdout)
    except HandNotFoundError as e:
        print(f"No saved hand matches {e.args[0]}", file=stdout)
        return 1
    except (HistoryStoreError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=stdout)
        return 1


if __name__ == "__main__":
    sys.exit(main())

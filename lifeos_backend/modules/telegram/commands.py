"""Bot command parsing and argument validation.

Capture commands write data and carry arguments; view commands only ask
for information and take none.
"""

import math
import re
from typing import Any

from ...core.exceptions import ValidationError
from .schemas import Message, ParsedCommand

CAPTURE_COMMANDS = {
    "task": "/task <text> - Aufgabe in die Inbox",
    "note": "/note <text> - Notiz festhalten",
    "expense": "/expense <betrag> <kategorie> - Ausgabe erfassen",
    "weight": "/weight <kg> - Gewicht eintragen",
    "mood": "/mood <1-10> - Stimmung eintragen",
    "water": "/water <ml> - Wasser eintragen",
    "habit": "/habit <name> - Habit abhaken",
    "sup": "/sup <name> - Supplement-Einnahme",
}

VIEW_COMMANDS = {
    "today": "/today - Tagesüberblick",
    "inbox": "/inbox - Offene Inbox-Einträge",
    "balance": "/balance - Kontostände",
    "networth": "/networth - Aktuelles Vermögen",
    "habits": "/habits - Habits von heute",
    "workout": "/workout - Training von heute",
    "energy": "/energy - Garmin-Werte",
    "goals": "/goals - Zielfortschritt",
}

LOCAL_COMMANDS = ("start", "help")

TEXT_COMMANDS = ("task", "note", "habit", "sup")

MIN_WEIGHT_KG = 20
MAX_WEIGHT_KG = 300
MAX_WATER_ML = 10000
DEFAULT_EXPENSE_CATEGORY = "sonstiges"

_COMMAND_PATTERN = re.compile(r"^/([A-Za-z0-9_]+)(?:@\S+)?(?:\s+(.*))?$", re.DOTALL)


def help_text() -> str:
    lines = ["Verfügbare Befehle:", ""]
    lines.extend(CAPTURE_COMMANDS.values())
    lines.append("")
    lines.extend(VIEW_COMMANDS.values())
    return "\n".join(lines)


def _split_command(token: str) -> str:
    return token.lstrip("/").split("@", 1)[0].lower()


def parse_command(message: Message) -> ParsedCommand | None:
    """Extract a leading bot command and its argument string.

    Telegram marks commands with a ``bot_command`` entity at offset 0;
    messages without entities fall back to a ``/word`` prefix match.
    """
    text = message.text or ""
    for entity in message.entities or []:
        if entity.type == "bot_command" and entity.offset == 0:
            token = text[: entity.length]
            return ParsedCommand(
                command=_split_command(token), args=text[entity.length :].strip()
            )

    match = _COMMAND_PATTERN.match(text.strip())
    if not match:
        return None
    return ParsedCommand(command=match.group(1).lower(), args=(match.group(2) or "").strip())


def parse_number(raw: str) -> float:
    """Parse ``12,50``, ``€12.50`` or ``12.50€`` as a finite float."""
    cleaned = raw.strip().strip("€").strip().replace(",", ".")
    value = float(cleaned)
    if not math.isfinite(value):
        raise ValueError(raw)
    return value


def _require_text(command: str, args: str) -> dict[str, Any]:
    if not args:
        raise ValidationError(f"Bitte gib einen Text an: {CAPTURE_COMMANDS[command]}")
    return {"text": args}


def _expense(args: str) -> dict[str, Any]:
    parts = args.split(maxsplit=1)
    if not parts:
        raise ValidationError(f"Betrag fehlt: {CAPTURE_COMMANDS['expense']}")
    try:
        amount = parse_number(parts[0])
    except ValueError:
        raise ValidationError(
            f"Ungültiger Betrag '{parts[0]}'. Beispiel: /expense 12,50 essen"
        ) from None
    if amount <= 0:
        raise ValidationError("Betrag muss größer als 0 sein.")
    category = parts[1].strip() if len(parts) > 1 else DEFAULT_EXPENSE_CATEGORY
    return {"amount": round(amount, 2), "category": category}


def _weight(args: str) -> dict[str, Any]:
    try:
        weight = parse_number(args.lower().removesuffix("kg"))
    except ValueError:
        raise ValidationError(f"Ungültiges Gewicht. {CAPTURE_COMMANDS['weight']}") from None
    if not MIN_WEIGHT_KG <= weight <= MAX_WEIGHT_KG:
        raise ValidationError(
            f"Gewicht muss zwischen {MIN_WEIGHT_KG} und {MAX_WEIGHT_KG} kg liegen."
        )
    return {"weight": weight}


def _mood(args: str) -> dict[str, Any]:
    try:
        mood = int(args)
    except ValueError:
        mood = None
    if mood is None or not 1 <= mood <= 10:
        raise ValidationError("Stimmung muss eine ganze Zahl von 1 bis 10 sein.")
    return {"mood": mood}


def _water(args: str) -> dict[str, Any]:
    try:
        water_ml = int(args)
    except ValueError:
        water_ml = None
    if water_ml is None or not 0 < water_ml <= MAX_WATER_ML:
        raise ValidationError(
            f"Wassermenge muss eine positive ganze Zahl bis {MAX_WATER_ML} ml sein."
        )
    return {"water_ml": water_ml}


def validate_arguments(command: str, args: str) -> dict[str, Any]:
    """Validate and normalize command arguments.

    Raises:
        ValidationError: with a user-facing message for the reply
    """
    args = args.strip()
    if command in VIEW_COMMANDS or command in LOCAL_COMMANDS:
        if args:
            raise ValidationError(f"/{command} erwartet keine Argumente.")
        return {}
    if command in TEXT_COMMANDS:
        return _require_text(command, args)
    if command == "expense":
        return _expense(args)
    if command == "weight":
        return _weight(args)
    if command == "mood":
        return _mood(args)
    if command == "water":
        return _water(args)
    raise ValidationError(f"Unbekannter Befehl: /{command}. /help zeigt alle Befehle.")

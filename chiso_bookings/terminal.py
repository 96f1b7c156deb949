"""
Terminal booking client.

A shell-flavoured prompt for browsing the menu and walking through a booking
step by step. Talks to the booking API over HTTP.

Usage:
    chiso-terminal
    python -m chiso_bookings.terminal
"""
from datetime import date as date_type, datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

from chiso_bookings.core.config import settings
from chiso_bookings.models.booking import EMAIL_RE, normalize_time, parse_booking_date

Output = Tuple[str, str]

MEAL_DIRS = ("breakfast", "lunch", "dinner")
COMMANDS = ("help", "ls", "dir", "cd", "pwd", "clear", "menu", "history", "book", "exit", "quit")

HELP_TEXT = """
Available commands:
  cd [dir]     - Change directory (breakfast/lunch/dinner)
  ls, dir      - List available directories
  pwd          - Print working directory
  clear        - Clear the terminal
  menu         - Show the menu for the current directory
  history      - Show command history
  help         - Show this help message
  book         - Start booking process
  exit, quit   - Leave the terminal"""

STEPS: List[Dict[str, Any]] = [
    {"field": "name", "prompt": "Please enter your name:", "error": "Name must be at least 2 characters long"},
    {"field": "email", "prompt": "Please enter your email:", "error": "Please enter a valid email address"},
    {"field": "date", "prompt": "Enter the date (YYYY-MM-DD):", "error": "Please enter a valid date (YYYY-MM-DD)"},
    {"field": "time", "prompt": "Enter the time (HH:MM):", "error": "Please enter a valid time (HH:MM)"},
    {"field": "partySize", "prompt": "Enter party size:", "error": "Please enter a valid party size (1-10)"},
    {
        "field": "pancakeType",
        "prompt": "Select pancake type (enter the number):\n1. Classic Buttermilk ($12.99)\n2. Chocolate Chip ($14.99)\n3. Blueberry ($14.99)",
        "error": "Please select a valid option (1-3)",
        "options": {"1": "buttermilk", "2": "chocolate", "3": "blueberry"},
    },
    {
        "field": "eggStyle",
        "prompt": "How would you like your eggs? (enter the number):\n1. Scrambled\n2. Sunny-side-up\n3. Over-easy\n4. No eggs",
        "error": "Please select a valid option (1-4)",
        "options": {"1": "scrambled", "2": "sunny-side-up", "3": "over-easy", "4": "none"},
    },
    {
        "field": "meat",
        "prompt": "Select meat (enter the number):\n1. Bacon ($4.99)\n2. Sausage ($4.99)\n3. Ham ($4.99)\n4. No meat",
        "error": "Please select a valid option (1-4)",
        "options": {"1": "bacon", "2": "sausage", "3": "ham", "4": "none"},
    },
    {"field": "confirmation", "prompt": "Would you like to confirm your order? (yes/no):", "error": "Please enter yes or no"},
]


class BookingClient:
    """Thin requests wrapper around the booking API."""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        self.base_url = (base_url or settings.BOOKING_API_URL).rstrip("/")
        self.timeout = timeout

    def fetch_menu(self, meal_type: str) -> Dict[str, List[dict]]:
        response = requests.get(f"{self.base_url}/api/menu", params={"type": meal_type}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def available_slots(self, day: str) -> List[str]:
        response = requests.get(f"{self.base_url}/availability", params={"date": day}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()["data"]["availableSlots"]

    def submit(self, booking: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        response = requests.post(f"{self.base_url}/api/book", json=booking, timeout=self.timeout)
        return response.status_code, response.json()


def validate_step(field: str, value: str, today: Optional[date_type] = None) -> bool:
    value = value.strip()
    if field == "name":
        return len(value) >= 2
    if field == "email":
        return bool(EMAIL_RE.match(value))
    if field == "date":
        try:
            return parse_booking_date(value) >= (today or date_type.today())
        except ValueError:
            return False
    if field == "time":
        try:
            normalize_time(value)
            return True
        except ValueError:
            return False
    if field == "partySize":
        return value.isdecimal() and 1 <= int(value) <= 10
    if field == "confirmation":
        return value.lower() in ("yes", "no")
    return True


def empty_booking() -> Dict[str, Any]:
    return {
        "name": "",
        "email": "",
        "date": "",
        "time": "",
        "partySize": "",
        "preferences": {"pancakeType": "", "eggStyle": "", "meat": "", "sides": [], "additions": []},
    }


def format_menu(meal_type: str, menu: Dict[str, List[dict]]) -> str:
    lines = [f"\n=== {meal_type.upper()} MENU ==="]
    for category, items in menu.items():
        lines.append(f"\n{category}:")
        for item in items:
            lines.append(f"  {item['name']:<24} ${item['price']}")
            lines.append(f"    {item['description']}")
    return "\n".join(lines)


class BookingTerminal:
    """
    Wizard and command state for one terminal session.

    `handle(line)` consumes one line of input and returns (kind, message) pairs,
    kind being one of info/error/success/system/prompt/menu.
    """

    def __init__(self, client: Optional[BookingClient] = None):
        self.client = client or BookingClient()
        self.current_path = "breakfast"
        self.history: List[str] = []
        self.step: Optional[int] = None
        self.awaiting_restart = False
        self.booking = empty_booking()
        self.running = True

    @property
    def in_wizard(self) -> bool:
        return self.step is not None

    def banner(self) -> List[Output]:
        return [
            ("system", "Welcome to Eat with Chiso Terminal Booking System v1.0.0"),
            ("info", "Type 'help' for available commands or 'book' to make a booking."),
        ]

    def prompt_label(self) -> str:
        return f"chiso ➜ ~/{self.current_path} $ "

    def complete(self, text: str) -> List[str]:
        """Tab completion for commands and for `cd` targets."""
        parts = text.split(" ", 1)
        if len(parts) == 2 and parts[0] == "cd":
            return [f"cd {d}" for d in MEAL_DIRS if d.startswith(parts[1])]
        return [c for c in COMMANDS if c.startswith(text)]

    def handle(self, line: str) -> List[Output]:
        value = line.strip()
        if self.awaiting_restart:
            return self._handle_restart(value)
        if self.in_wizard:
            return self._handle_step(value)
        return self._handle_command(value)

    # --- commands ---

    def _handle_command(self, command: str) -> List[Output]:
        if not command:
            return []
        self.history.append(command)
        name, _, arg = command.lower().partition(" ")
        arg = arg.strip()

        if name == "help":
            return [("info", HELP_TEXT)]
        if name in ("ls", "dir"):
            return [("info", "  ".join(MEAL_DIRS))]
        if name == "pwd":
            return [("info", f"~/{self.current_path}")]
        if name == "cd":
            return self._change_dir(arg)
        if name == "clear":
            return [("system", "clear")]
        if name == "menu":
            return self._show_menu()
        if name == "history":
            return [("info", "\nCommand history:")] + [
                ("system", f"{i}  {cmd}") for i, cmd in enumerate(self.history, start=1)
            ]
        if name == "book":
            return self._start_booking()
        if name in ("exit", "quit"):
            self.running = False
            return [("system", "Goodbye!")]
        return [("error", f"Command not found: {command}. Type 'help' for available commands.")]

    def _change_dir(self, target: str) -> List[Output]:
        if target in ("", "~", ".."):
            self.current_path = "breakfast"
            return []
        if target not in MEAL_DIRS:
            return [("error", f"cd: no such directory: {target}")]
        self.current_path = target
        return self._show_menu()

    def _show_menu(self) -> List[Output]:
        try:
            menu = self.client.fetch_menu(self.current_path)
        except requests.RequestException as e:
            return [("error", f"Failed to fetch menu. Please try again. ({e})")]
        return [("menu", format_menu(self.current_path, menu))]

    # --- wizard ---

    def _start_booking(self) -> List[Output]:
        self.booking = empty_booking()
        self.step = 0
        return [("system", "Starting booking process..."), ("prompt", STEPS[0]["prompt"])]

    def _handle_step(self, value: str) -> List[Output]:
        step = STEPS[self.step]
        field = step["field"]
        options = step.get("options")

        valid = value in options if options else validate_step(field, value)
        if not valid:
            return [("error", step["error"]), ("prompt", step["prompt"])]

        out: List[Output] = []
        if field == "confirmation":
            if value.lower() == "no":
                self.step = None
                return [("info", "Booking cancelled. Type 'book' to start again.")]
            self.step = None
            return self._submit()

        if options:
            self.booking["preferences"][field] = options[value]
        elif field == "time":
            self.booking["time"] = normalize_time(value)
        elif field == "partySize":
            self.booking["partySize"] = int(value)
        else:
            self.booking[field] = value

        if field == "date":
            out.extend(self._show_availability(value))

        self.step += 1
        out.append(("prompt", STEPS[self.step]["prompt"]))
        return out

    def _show_availability(self, day: str) -> List[Output]:
        try:
            slots = self.client.available_slots(day)
        except requests.RequestException:
            return [("info", "Could not check availability right now.")]
        if not slots:
            return [("error", "No time slots are left on that date.")]
        return [("info", f"Available times: {', '.join(slots)}")]

    def _submit(self) -> List[Output]:
        out: List[Output] = [("system", "Processing your booking...")]
        try:
            status, data = self.client.submit(self.booking)
        except requests.RequestException as e:
            status, data = 0, {"error": str(e)}

        if status not in (200, 201) or not data.get("success"):
            out.append(("error", f"Failed to process booking: {data.get('error') or 'Failed to process booking'}"))
            out.append(("prompt", "Would you like to try again? (yes/no):"))
            self.awaiting_restart = True
            return out

        out.append(("success", self._confirmation_text(data)))
        out.append(("prompt", "Would you like to make another booking? (yes/no):"))
        self.booking = empty_booking()
        self.awaiting_restart = True
        return out

    def _confirmation_text(self, data: Dict[str, Any]) -> str:
        record = data.get("data") or {}
        prefs = record.get("preferences") or {}
        email_note = "" if data.get("emailSent") else (
            f"However, we couldn't send the confirmation email: {data.get('emailError')}"
        )
        try:
            long_date = datetime.strptime(record.get("date", ""), "%Y-%m-%d")
            shown_date = f"{long_date:%A, %B} {long_date.day}, {long_date.year}"
        except ValueError:
            shown_date = record.get("date", "")

        lines = [
            f"Booking confirmed! {email_note}".rstrip(),
            "",
            "Booking Details:",
            f"Date: {shown_date}",
            f"Time: {record.get('time', '')}",
            f"Party Size: {record.get('partySize', '')}",
            "",
            "Menu Selections:",
            f"- Pancakes: {prefs.get('pancakeType', '')}",
        ]
        if prefs.get("eggStyle") not in (None, "", "none"):
            lines.append(f"- Eggs: {prefs['eggStyle']}")
        if prefs.get("meat") not in (None, "", "none"):
            lines.append(f"- Meat: {prefs['meat']}")
        lines += ["", f"Confirmation ID: {data.get('confirmationId')}", "Please save this confirmation ID for your records."]
        return "\n".join(lines)

    def _handle_restart(self, value: str) -> List[Output]:
        answer = value.lower()
        if answer not in ("yes", "no"):
            return [("error", "Please enter yes or no")]
        self.awaiting_restart = False
        if answer == "yes":
            return self._start_booking()
        return [("info", "Thank you! Type 'help' to see available commands.")]


def _render(outputs: List[Output]) -> None:
    for kind, message in outputs:
        if kind == "system" and message == "clear":
            print("\033[2J\033[H", end="")
        elif kind == "error":
            print(f"✗ {message}")
        elif kind == "success":
            print(f"✓ {message}")
        else:
            print(message)


def _enable_tab_completion(terminal: BookingTerminal) -> None:
    try:
        import readline
    except ImportError:
        return

    def completer(text, state):
        matches = terminal.complete(readline.get_line_buffer())
        return matches[state].split(" ")[-1] if state < len(matches) else None

    readline.set_completer(completer)
    readline.parse_and_bind("tab: complete")


def main() -> None:
    terminal = BookingTerminal()
    _enable_tab_completion(terminal)
    _render(terminal.banner())
    while terminal.running:
        try:
            line = input("> " if terminal.in_wizard or terminal.awaiting_restart else terminal.prompt_label())
        except (EOFError, KeyboardInterrupt):
            print()
            break
        _render(terminal.handle(line))


if __name__ == "__main__":
    main()

"""
Offline console demo: walks through a booking with the real engine.

Uses the real selection transitions, state machine, availability checker,
and pricing against an in-memory appointment store. No network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario visit
    python console_demo.py --scenario full-day
"""

import argparse
from datetime import date, datetime, timedelta
from typing import Optional

from petshop_booking.config import settings
from petshop_booking.conversation.booking_flow import BookingSession
from petshop_booking.schemas.booking_schema import Appointment, NotificationRecord
from petshop_booking.schemas.catalog_schema import PetWeight, ServiceType
from petshop_booking.tools.booking import InMemoryAppointmentStore, build_appointment
from petshop_booking.tools.services import SERVICE_CATALOG, WEIGHT_LABELS, get_addon

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


def next_weekday(start: date) -> date:
    day = start + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def _seed_appointments(day: date, hours: list[int]) -> list[Appointment]:
    return [
        build_appointment(
            ServiceType.BATH, day, hour, f"Pet {i}", f"Owner {i}", "(11) 90000-0000",
            booking_id=f"SEED-{i}",
        )
        for i, hour in enumerate(hours)
    ]


class ConsoleSession:
    """Plays a scripted booking against the engine and prints each step."""

    SCENARIOS: dict[str, dict] = {
        "grooming": {
            "contact": ("Thor", "Ana Souza", "(11) 98765-4321"),
            "service": ServiceType.BATH_AND_GROOMING,
            "weight": PetWeight.UP_TO_5,
            "addons": ["tosa_tesoura", "patacure1", "patacure2"],
            "busy_hours": [9, 9, 14],
            "hour": 11,
        },
        "visit": {
            "contact": ("Luna", "Carlos Lima", "(11) 91234-5678"),
            "service": ServiceType.VISIT_DAYCARE,
            "weight": None,
            "addons": ["botinhas"],
            "busy_hours": [],
            "hour": 12,
        },
        "full-day": {
            "contact": ("Rex", "Bia Costa", "(11) 95555-1234"),
            "service": ServiceType.BATH,
            "weight": PetWeight.KG_20,
            "addons": ["hidratacao"],
            "busy_hours": [
                h for h in settings.schedule.working_hours
                for _ in range(settings.schedule.max_capacity_per_slot)
            ],
            "hour": 9,
        },
    }

    def __init__(self, day: Optional[date] = None) -> None:
        self.day = day or next_weekday(date.today())
        self.store = InMemoryAppointmentStore()
        self.sent: list[NotificationRecord] = []
        self.session = BookingSession(self.store, notifiers=[self.sent.append])

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def run_scenario(self, scenario: str) -> bool:
        """Auto-play a pre-scripted scenario. Returns True if a booking was made."""
        script = self.SCENARIOS.get(scenario)
        if not script:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return False

        for appointment in _seed_appointments(self.day, script["busy_hours"]):
            self.store.insert(appointment)

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  PET SHOP BOOKING - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Business: {settings.business.name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        s = self.session
        pet_name, owner_name, whatsapp = script["contact"]
        s.update_contact(pet_name, owner_name, whatsapp)
        s.advance()
        self.system_log(f"State: {s.state.value}")

        service = SERVICE_CATALOG[script["service"]]
        s.choose_service(service.id)
        self.say(f"Service: {service.label} ({service.duration}h)")
        if script["weight"] is not None:
            s.choose_weight(script["weight"])
            self.say(f"Weight: {WEIGHT_LABELS[script['weight']]}")

        for addon_id in script["addons"]:
            before = s.selection.addons
            s.toggle_addon(addon_id)
            addon = get_addon(addon_id)
            label = addon.label if addon else addon_id
            if s.selection.addons == before:
                self.say(f"{YELLOW}Add-on not available: {label}{RESET}")
            else:
                self.say(f"Add-on toggled: {label}")
        self.say(f"Price: {settings.business.currency} {s.price()}")
        s.advance()
        self.system_log(f"State: {s.state.value}")

        s.choose_date(self.day)
        hours = s.bookable_hours()
        listing = ", ".join(f"{h:02d}:00" for h in hours) or "none"
        self.say(f"Open slots on {self.day.isoformat()}: {listing}")

        if not s.choose_time(script["hour"]):
            self.say(f"{YELLOW}{script['hour']:02d}:00 cannot be booked.{RESET}")
            self._summary(scenario)
            return False
        s.advance()
        self.system_log(f"State: {s.state.value}")

        booked = s.submit()
        if booked and s.last_record is not None:
            record = s.last_record
            self.say(
                f"Booked {record.id}: {record.service} for {record.pet_name} at "
                f"{datetime.fromisoformat(record.start_time):%H:%M}, "
                f"{settings.business.currency} {record.price}"
            )
        else:
            self.say(f"{RED}Booking could not be completed.{RESET}")
        self._summary(scenario)
        return booked

    def _summary(self, scenario: str) -> None:
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{DIM}  State trace: {' -> '.join(self.session.state_machine.get_state_trace())}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default="grooming",
        help="Pre-scripted booking to play",
    )
    args = parser.parse_args()

    ConsoleSession().run_scenario(args.scenario)


if __name__ == "__main__":
    main()

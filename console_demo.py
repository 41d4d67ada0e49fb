"""
Offline console demo: drives the barbershop core from the terminal.

Uses the real BarberShop, scheduling engine and booking flow with an
in-memory (or JSON file) store. No API keys are required: without
LLM_API_KEY the style advisor runs on a small keyword matcher.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario recommend --store json
"""

import argparse
import json
import uuid
from datetime import date as date_cls
from datetime import timedelta
from typing import Optional

from barbershop.agents.stylist import StyleAdvisor
from barbershop.agents.text_generation import HttpTextGenerator
from barbershop.config import settings
from barbershop.conversation.modals import (
    NO_MODAL,
    AgendaModal,
    ConfirmCancelModal,
    EditAppointmentModal,
    EditItemModal,
    LoadingModal,
    MessageModal,
    Modal,
    ProviderProfileModal,
    describe_modal,
)
from barbershop.errors import BarbershopError, BookingValidationError
from barbershop.logging_context import new_session_id, set_session_id
from barbershop.notifications import LogNotifier
from barbershop.prompts.prompt_templates import build_alternative_times_message, build_booking_summary
from barbershop.schemas.provider_schema import GeoPoint, ProviderFilter, Review
from barbershop.shop import BarberShop
from barbershop.storage import InMemoryStore, JsonFileStore, KeyValueStore
from barbershop.tools.providers import provider_distance_km

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class KeywordGenerator:
    """Offline stand-in for the text-generation service."""

    KEYWORDS: dict[str, list[str]] = {
        "barba": ["s3"],
        "beard": ["s3"],
        "tijera": ["s2"],
        "scissor": ["s2"],
        "facial": ["s5"],
        "afeitado": ["s4"],
    }

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        lower = user_prompt.lower()
        if "sales description" in lower:
            return "Calidad profesional para tu rutina diaria. Resultados visibles desde el primer uso."
        ids: list[str] = []
        for word, service_ids in self.KEYWORDS.items():
            if word in lower.split("available services")[0]:
                ids.extend(s for s in service_ids if s not in ids)
        return json.dumps({
            "recommendedServices": ids or ["s1"],
            "barberTypeRequired": "Maestro Barbero",
            "explanation": "Matched from the keywords in your description.",
        })


def _build_advisor() -> StyleAdvisor:
    if settings.model.llm_api_key:
        return StyleAdvisor(HttpTextGenerator())
    return StyleAdvisor(KeywordGenerator())


class ConsoleSession:
    """Runs one client's session against the shop in the terminal."""

    MAX_INPUT_LENGTH = 500

    # Pre-scripted scenarios for --scenario flag; "+N" means N days from today
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "menu",
            "select s1",
            "select s4",
            "barbers",
            "profile b1",
            "pick b1",
            "slots +1",
            "book +1 10:00",
            "select s3",
            "pick b1",
            "book +1 09:30",
            "book +1 11:00",
            "upcoming",
            "cancel last",
            "yes",
            "history",
        ],
        "recommend": [
            "style degradado bajo con la barba bien perfilada",
            "near 6.2442 -75.5812 300",
            "barbers",
            "pick b2",
            "book +2 16:00",
            "edit last +3 08:00",
            "upcoming",
        ],
        "admin": [
            "admin on",
            "online b3",
            "price s1 30000",
            "describe Cera Mate | cera para peinar de acabado mate",
            "review b3 5 Excelente limpieza facial",
            "profile b3",
            "admin off",
            "menu",
        ],
    }

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self.shop = BarberShop(store=store or InMemoryStore(), notifier=LogNotifier())
        self.advisor = _build_advisor()
        self.modal: Modal = NO_MODAL
        self.criteria = ProviderFilter(available_only=True)
        self.last_appointment_id: Optional[str] = None
        self.session_id = new_session_id()
        set_session_id(self.session_id)

    def shop_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.business.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show(self, modal: Modal) -> None:
        self.modal = modal
        text = describe_modal(modal)
        if text:
            print(f"{YELLOW}{text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BARBERSHOP CORE - {title}{RESET}")
        print(f"{BOLD}  Business: {settings.business.name} ({self.session_id}){RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _footer(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  Flow trace: {' -> '.join(self.shop.flow.get_state_trace())}{RESET}")
        print(f"{DIM}  Rejected attempts: {self.shop.flow.rejection_count}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Client] {RESET}{step}")
            self.process_input(step)
            self.system_log(f"Flow: {self.shop.flow.current_state.value}")
        self._footer()

    def run(self) -> None:
        self._banner("Console Demo (type 'help', 'quit' to exit)")
        while True:
            user_input = input(f"\n{BLUE}[Client] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.shop_say("That was quite long. Could you keep it brief?")
                continue
            self.process_input(user_input)
            self.system_log(f"Flow: {self.shop.flow.current_state.value}")
        self._footer()

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def process_input(self, text: str) -> None:
        command, _, rest = text.strip().partition(" ")
        command = command.lower()
        args = rest.split()

        if isinstance(self.modal, ConfirmCancelModal) and command in ("yes", "no"):
            self._answer_cancel(command == "yes")
            return
        self.modal = NO_MODAL

        try:
            if command == "help":
                self.shop_say("Commands: " + ", ".join(sorted(self.HANDLERS)))
            elif command in self.HANDLERS:
                getattr(self, self.HANDLERS[command])(args, rest)
            else:
                self.shop_say("Sorry, I didn't catch that. Type 'help' for commands.")
        except IndexError:
            self.shop_say(f"'{command}' needs more arguments. Type 'help' for commands.")
        except (BarbershopError, ValueError, PermissionError) as exc:
            self.show(MessageModal("Error", str(exc)))

    HANDLERS: dict[str, str] = {
        "menu": "_cmd_menu",
        "select": "_cmd_select",
        "style": "_cmd_style",
        "near": "_cmd_near",
        "barbers": "_cmd_barbers",
        "profile": "_cmd_profile",
        "pick": "_cmd_pick",
        "slots": "_cmd_slots",
        "book": "_cmd_book",
        "upcoming": "_cmd_upcoming",
        "history": "_cmd_history",
        "cancel": "_cmd_cancel",
        "edit": "_cmd_edit",
        "review": "_cmd_review",
        "admin": "_cmd_admin",
        "online": "_cmd_online",
        "offline": "_cmd_offline",
        "price": "_cmd_price",
        "describe": "_cmd_describe",
        "save": "_cmd_save",
    }

    def _resolve_date(self, token: str) -> str:
        if token == "today":
            return self.shop.today()
        if token.startswith("+"):
            base = date_cls.fromisoformat(self.shop.today())
            return (base + timedelta(days=int(token[1:]))).isoformat()
        return token

    def _resolve_appointment(self, token: str) -> str:
        if token == "last":
            if self.last_appointment_id is None:
                raise ValueError("No appointment booked in this session yet.")
            return self.last_appointment_id
        return token

    # ------------------------------------------------------------------ #
    # Services
    # ------------------------------------------------------------------ #

    def _cmd_menu(self, args: list[str], rest: str) -> None:
        currency = settings.business.currency
        for service in self.shop.catalog.all():
            mark = "x" if service.id in self.shop.selection else " "
            print(f"  [{mark}] {service.id} {service.name} - {service.price:,} {currency}"
                  f" ({service.duration} min)")
        self._show_selection()

    def _show_selection(self) -> None:
        selection = self.shop.selection
        if selection.is_empty:
            self.shop_say("Nothing selected yet.")
            return
        names = ", ".join(s.name for s in selection.services)
        self.shop_say(
            f"Selected: {names}. Total {selection.total_price():,} "
            f"{settings.business.currency}, {selection.total_duration()} min."
        )

    def _cmd_select(self, args: list[str], rest: str) -> None:
        for service_id in args:
            selected = self.shop.toggle_service(service_id)
            self.system_log(f"{service_id} {'selected' if selected else 'removed'}")
        self._show_selection()

    def _cmd_style(self, args: list[str], rest: str) -> None:
        self.show(LoadingModal("Analizando estilo", rest))
        recommendation = self.advisor.recommend(rest, self.shop.catalog.all())
        self.modal = NO_MODAL
        if recommendation.is_fallback:
            self.shop_say(f"{recommendation.explanation} ({recommendation.notice})")
            return
        applied = self.shop.apply_recommendation(recommendation)
        self.shop_say(
            f"{recommendation.explanation} Look for a {recommendation.required_level}."
        )
        self.system_log(f"Recommended: {[s.id for s in applied]}")
        self._show_selection()

    # ------------------------------------------------------------------ #
    # Providers
    # ------------------------------------------------------------------ #

    def _cmd_near(self, args: list[str], rest: str) -> None:
        lat, lng = float(args[0]), float(args[1])
        radius = float(args[2]) if len(args) > 2 else None
        self.criteria = ProviderFilter(
            available_only=True, origin=GeoPoint(lat=lat, lng=lng), max_distance_km=radius,
        )
        self.system_log(f"Origin set to {lat}, {lng} (radius {radius or 'any'} km)")

    def _cmd_barbers(self, args: list[str], rest: str) -> None:
        providers = self.shop.find_providers(self.criteria)
        if not providers:
            self.shop_say("No barbers match those filters.")
            return
        for provider in providers:
            distance = ""
            if self.criteria.origin is not None:
                distance = f" - {provider_distance_km(provider, self.criteria.origin):.1f} km"
            print(f"  {provider.id} {provider.name} [{provider.profession_level.value}]"
                  f" {provider.rating:.1f}/5{distance}")

    def _cmd_profile(self, args: list[str], rest: str) -> None:
        self.show(ProviderProfileModal(self.shop.providers.get(args[0])))

    def _cmd_pick(self, args: list[str], rest: str) -> None:
        provider = self.shop.select_provider(args[0])
        self.show(AgendaModal(provider, self.shop.today()))

    def _cmd_slots(self, args: list[str], rest: str) -> None:
        provider = self.shop.selected_provider
        if provider is None:
            raise ValueError("Pick a barber first.")
        day = self._resolve_date(args[0] if args else "today")
        result = self.shop.open_slots(provider.id, day)
        if result.available:
            times = ", ".join(slot.time for slot in result.slots)
            self.shop_say(f"{provider.name} is free on {day} at {times}.")
        else:
            self.shop_say(f"{result.message} Next opening: {result.next_available or 'none soon'}.")
        busy = self.shop.provider_calendar(provider.id, day)
        self.system_log(f"Busy: {busy}")

    def _cmd_book(self, args: list[str], rest: str) -> None:
        provider = self.shop.selected_provider
        day, time = self._resolve_date(args[0]), args[1]
        try:
            appointment = self.shop.book(day, time)
        except BookingValidationError as exc:
            self.show(MessageModal("No se pudo agendar", exc.message))
            if provider is not None:
                alternatives = self.shop.open_slots(provider.id, day).slots
                self.shop_say(build_alternative_times_message(day, time, alternatives))
            return
        self.last_appointment_id = appointment.id
        self.shop_say("Booking confirmed!")
        print(build_booking_summary(appointment, settings.business.currency))

    # ------------------------------------------------------------------ #
    # Agenda
    # ------------------------------------------------------------------ #

    def _cmd_upcoming(self, args: list[str], rest: str) -> None:
        upcoming = self.shop.upcoming()
        if not upcoming:
            self.shop_say("No upcoming appointments.")
            return
        for app in upcoming:
            print(f"  {app.date} {app.time}-{app.end_time} {app.provider_name} ({app.id})")

    def _cmd_history(self, args: list[str], rest: str) -> None:
        history = self.shop.history()
        if not history:
            self.shop_say("No history yet.")
            return
        currency = settings.business.currency
        for day, group in history.items():
            print(f"  {day}: {len(group.appointments)} appointment(s), {group.total:,} {currency}")
            for app in group.appointments:
                print(f"    {app.time} {app.provider_name} [{app.status.value}]")

    def _cmd_cancel(self, args: list[str], rest: str) -> None:
        appointment = self.shop.appointments.get(self._resolve_appointment(args[0]))
        self.show(ConfirmCancelModal(appointment))

    def _answer_cancel(self, confirmed: bool) -> None:
        modal = self.modal
        self.modal = NO_MODAL
        if not confirmed or not isinstance(modal, ConfirmCancelModal):
            self.shop_say("Kept the appointment.")
            return
        self.shop.cancel_appointment(modal.appointment.id)
        self.shop_say(f"Appointment {modal.appointment.id} cancelled.")

    def _cmd_edit(self, args: list[str], rest: str) -> None:
        appointment_id = self._resolve_appointment(args[0])
        current = self.shop.appointments.get(appointment_id)
        self.show(EditAppointmentModal(current, self.shop.providers.get(current.provider_id)))
        day, time = self._resolve_date(args[1]), args[2]
        try:
            moved = self.shop.edit_appointment(appointment_id, day, time)
        except BookingValidationError as exc:
            self.show(MessageModal("No se pudo reprogramar", exc.message))
            return
        self.shop_say(f"Moved to {moved.date} {moved.time}-{moved.end_time}.")

    def _cmd_review(self, args: list[str], rest: str) -> None:
        review = Review(
            id=f"r-{uuid.uuid4().hex[:6]}",
            user_name=self.shop.client_id,
            rating=int(args[1]),
            comment=" ".join(args[2:]),
            date=self.shop.today(),
        )
        provider = self.shop.add_review(args[0], review)
        self.shop_say(f"Thanks! {provider.name} now rates {provider.rating:.2f}/5.")

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #

    def _cmd_admin(self, args: list[str], rest: str) -> None:
        self.shop.set_admin_mode(bool(args) and args[0] == "on")
        self.system_log(f"Admin mode: {self.shop.admin_mode}")

    def _cmd_online(self, args: list[str], rest: str) -> None:
        provider = self.shop.set_provider_availability(args[0], True)
        self.show(EditItemModal("Barbero actualizado", provider))

    def _cmd_offline(self, args: list[str], rest: str) -> None:
        provider = self.shop.set_provider_availability(args[0], False)
        self.show(EditItemModal("Barbero actualizado", provider))

    def _cmd_price(self, args: list[str], rest: str) -> None:
        service = self.shop.update_service(args[0], price=int(args[1]))
        self.show(EditItemModal("Servicio actualizado", service))

    def _cmd_describe(self, args: list[str], rest: str) -> None:
        name, _, rough = rest.partition("|")
        result = self.advisor.describe_product(name.strip(), rough.strip())
        self.shop_say(result.text)
        if result.notice:
            self.system_log(result.notice)

    def _cmd_save(self, args: list[str], rest: str) -> None:
        self.shop.save_all()
        self.shop_say("Backup saved.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline barbershop console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--store",
        choices=["memory", "json"],
        default="memory",
        help="Keep data in memory or in JSON files under BARBERSHOP_DATA_DIR",
    )
    args = parser.parse_args()

    store = JsonFileStore() if args.store == "json" else InMemoryStore()
    session = ConsoleSession(store=store)
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()

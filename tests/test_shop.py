"""End-to-end tests for the BarberShop core."""

import pytest

from barbershop.conversation.booking_flow import FlowState
from barbershop.errors import BookingRejection, BookingValidationError
from barbershop.schemas.booking_schema import AppointmentStatus
from barbershop.schemas.catalog_schema import ServiceOffering
from barbershop.schemas.provider_schema import GeoPoint, ProviderFilter, Review
from barbershop.schemas.recommendation_schema import StyleRecommendation
from barbershop.shop import BarberShop
from barbershop.storage import StorageKey
from tests.conftest import TODAY, fixed_clock


def _book(shop, services=("s1",), provider_id="b1", date="2025-03-12", time="09:00"):
    for service_id in services:
        shop.toggle_service(service_id)
    shop.select_provider(provider_id)
    return shop.book(date, time)


class TestStartup:
    def test_seeds_when_store_is_empty(self, shop):
        assert len(shop.providers) == 3
        assert len(shop.catalog) == 5
        assert shop.appointments.all() == []
        assert shop.admin_mode is False

    def test_unreadable_collection_falls_back_to_seed(self, store, notifier):
        store.save(StorageKey.PROVIDERS, [{"id": "broken"}])
        shop = BarberShop(store=store, notifier=notifier, clock=fixed_clock)
        assert len(shop.providers) == 3

    def test_reloads_saved_state(self, shop, store, notifier):
        app = _book(shop)
        reopened = BarberShop(store=store, notifier=notifier, clock=fixed_clock)
        assert reopened.appointments.get(app.id).end_time == "09:30"

    def test_today_uses_clock(self, shop):
        assert shop.today() == TODAY


class TestBookingFlow:
    def test_book_selection(self, shop, notifier, store):
        app = _book(shop, services=("s1", "s4"))
        assert app.time == "09:00"
        assert app.end_time == "10:00"
        assert app.total == 45000
        assert app.client_id == "Usuario Demo"
        assert shop.flow.current_state == FlowState.CONFIRMED
        assert shop.selection.is_empty
        assert shop.selected_provider is None
        assert [n.title for n in notifier.sent] == ["Cita Confirmada"]
        assert store.load(StorageKey.APPOINTMENTS, [])[0]["id"] == app.id

    def test_rejection_keeps_selection(self, shop, notifier):
        _book(shop, time="10:00")
        shop.toggle_service("s3")
        shop.select_provider("b1")
        with pytest.raises(BookingValidationError) as exc_info:
            shop.book("2025-03-12", "09:30")
        assert exc_info.value.reason == BookingRejection.CONFLICT
        assert shop.flow.current_state == FlowState.SCHEDULING
        assert shop.flow.rejection_count == 1
        assert "s3" in shop.selection
        assert len(notifier.sent) == 1

    def test_book_without_provider(self, shop):
        shop.toggle_service("s1")
        with pytest.raises(ValueError):
            shop.book("2025-03-12", "09:00")

    def test_provider_needs_selection(self, shop):
        with pytest.raises(ValueError):
            shop.select_provider("b1")

    def test_offline_provider_not_selectable(self, shop):
        shop.toggle_service("s5")
        with pytest.raises(ValueError):
            shop.select_provider("b3")

    def test_admin_can_pick_offline_provider(self, shop):
        shop.set_admin_mode(True)
        shop.toggle_service("s5")
        assert shop.select_provider("b3").id == "b3"

    def test_switch_provider(self, shop):
        shop.toggle_service("s1")
        shop.select_provider("b1")
        shop.select_provider("b2")
        assert shop.selected_provider.id == "b2"
        assert shop.flow.current_state == FlowState.SCHEDULING

    def test_deselecting_everything_returns_to_services(self, shop):
        shop.toggle_service("s1")
        shop.select_provider("b1")
        shop.toggle_service("s1")
        assert shop.flow.current_state == FlowState.SERVICE_SELECTION
        assert shop.selected_provider is None

    def test_next_booking_after_confirmation(self, shop):
        _book(shop)
        shop.toggle_service("s2")
        assert shop.flow.current_state == FlowState.PROVIDER_SELECTION

    def test_apply_recommendation(self, shop):
        rec = StyleRecommendation(recommended_service_ids=["s3", "s99"])
        applied = shop.apply_recommendation(rec)
        assert [s.id for s in applied] == ["s3"]
        assert shop.selection.total_duration() == 60

    def test_reset_selection(self, shop):
        shop.toggle_service("s1")
        shop.select_provider("b1")
        shop.reset_selection()
        assert shop.selection.is_empty
        assert shop.flow.current_state == FlowState.SERVICE_SELECTION


class TestAvailabilityQueries:
    def test_open_slots_for_selection(self, shop):
        shop.toggle_service("s3")
        result = shop.open_slots("b1", "2025-03-12")
        assert result.available
        assert result.slots[0].time == "08:00"
        assert result.slots[0].end_time == "09:00"

    def test_open_slots_needs_duration(self, shop):
        with pytest.raises(ValueError):
            shop.open_slots("b1", "2025-03-12")

    def test_provider_calendar(self, shop):
        _book(shop, services=("s3",), time="11:00")
        assert shop.provider_calendar("b1", "2025-03-12") == [("11:00", "12:00")]
        assert shop.provider_calendar("b2", "2025-03-12") == []

    def test_find_providers_nearest_first(self, shop):
        medellin = GeoPoint(lat=6.2442, lng=-75.5812)
        found = shop.find_providers(ProviderFilter(available_only=True, origin=medellin))
        assert [p.id for p in found] == ["b2", "b1"]


class TestLifecycle:
    def test_cancel_notifies_once(self, shop, notifier):
        app = _book(shop)
        shop.cancel_appointment(app.id)
        shop.cancel_appointment(app.id)
        assert [n.title for n in notifier.sent] == ["Cita Confirmada", "Cita Cancelada"]
        assert shop.appointments.get(app.id).status == AppointmentStatus.CANCELLED

    def test_cancelled_moves_to_history(self, shop):
        app = _book(shop)
        shop.cancel_appointment(app.id)
        assert shop.upcoming() == []
        assert shop.history()["2025-03-12"].appointments[0].id == app.id

    def test_edit(self, shop, notifier, store):
        app = _book(shop)
        moved = shop.edit_appointment(app.id, "2025-03-13", "16:00")
        assert moved.end_time == "16:30"
        assert notifier.sent[-1].title == "Cita Reprogramada"
        assert store.load(StorageKey.APPOINTMENTS, [])[0]["date"] == "2025-03-13"

    def test_catalog_change_does_not_touch_booking(self, shop):
        app = _book(shop)
        shop.set_admin_mode(True)
        shop.update_service("s1", price=99000)
        assert shop.appointments.get(app.id).total == 25000

    def test_add_review(self, shop, store):
        shop.add_review("b1", Review(id="r9", user_name="Ana", rating=5, date=TODAY))
        saved = {p["id"]: p for p in store.load(StorageKey.PROVIDERS, [])}
        assert saved["b1"]["review_count"] == 125


class TestAdmin:
    def test_admin_required(self, shop):
        with pytest.raises(PermissionError):
            shop.set_provider_availability("b3", True)
        with pytest.raises(PermissionError):
            shop.remove_service("s1")

    def test_admin_mode_persists(self, shop, store):
        shop.set_admin_mode(True)
        assert store.load(StorageKey.ADMIN_MODE, False) is True

    def test_add_service(self, shop, store):
        shop.set_admin_mode(True)
        shop.add_service(ServiceOffering(id="s6", name="Tinte", price=35000, duration=40))
        assert "s6" in shop.catalog
        assert len(store.load(StorageKey.SERVICES, [])) == 6

    def test_remove_selected_service(self, shop):
        shop.set_admin_mode(True)
        shop.toggle_service("s1")
        shop.remove_service("s1")
        assert shop.selection.is_empty
        assert shop.flow.current_state == FlowState.SERVICE_SELECTION

    def test_set_provider_availability(self, shop):
        shop.set_admin_mode(True)
        shop.set_provider_availability("b3", True)
        shop.toggle_service("s5")
        shop.set_admin_mode(False)
        assert shop.select_provider("b3").is_available

    def test_save_all(self, shop, store):
        shop.save_all()
        assert len(store.load(StorageKey.PROVIDERS, [])) == 3
        assert store.load(StorageKey.APPOINTMENTS, None) == []

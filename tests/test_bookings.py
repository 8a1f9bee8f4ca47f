"""
Tests for bookings: creation with availability checks, forward-only status
transitions, cancellation refunds and the scheduled status refresh.
"""
from datetime import timedelta
from decimal import Decimal

import pytest

from models import BookingStatus, Notification, Payment, PaymentType, RentalRequestStatus
from schemas.booking import BookingCreate, BookingUpdate
from services.booking_service import BookingService
from services.exceptions import InvalidStateError, RentalValidationError, UnauthorizedError
from tests.conftest import NOW, TODAY, as_current, make_booking, make_rental_request


def _book(db, prop, user, start_offset=10, nights=5, guests=2, **kwargs):
    data = BookingCreate(
        property_id=prop.id,
        start_date=TODAY + timedelta(days=start_offset),
        end_date=TODAY + timedelta(days=start_offset + nights),
        number_of_guests=guests,
        **kwargs,
    )
    return BookingService.create(db, data, as_current(user), today=TODAY)


class TestCreateBooking:
    def test_daily_booking_priced_per_night(self, db, daily_prop, tenant_user, landlord):
        booking = _book(db, daily_prop, tenant_user)

        assert booking.status == BookingStatus.UPCOMING
        assert booking.payment_status == "Pending"
        assert booking.total_price == Decimal("500.00")
        notification = db.query(Notification).filter(Notification.user_id == landlord.id).one()
        assert notification.type == "booking_created"

    def test_supplied_price_is_kept(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user, total_price=Decimal("450.00"))

        assert booking.total_price == Decimal("450.00")

    def test_overlapping_booking_is_refused(self, db, daily_prop, tenant_user, other_user):
        _book(db, daily_prop, tenant_user)

        with pytest.raises(InvalidStateError, match="not available"):
            _book(db, daily_prop, other_user, start_offset=12)

    def test_back_to_back_bookings_are_allowed(self, db, daily_prop, tenant_user, other_user):
        first = _book(db, daily_prop, tenant_user)
        second = _book(db, daily_prop, other_user, start_offset=15)

        assert second.start_date == first.end_date

    def test_approved_lease_blocks_booking(self, db, prop, tenant_user, other_user):
        make_rental_request(db, prop, other_user, TODAY + timedelta(days=5), status=RentalRequestStatus.APPROVED)

        with pytest.raises(InvalidStateError):
            _book(db, prop, tenant_user)

    def test_invalid_booking_reports_every_error(self, db, daily_prop, tenant_user):
        with pytest.raises(RentalValidationError) as exc_info:
            _book(db, daily_prop, tenant_user, start_offset=-2, guests=9)

        assert exc_info.value.errors == [
            "Start date cannot be in the past",
            "Property accommodates maximum 4 guests based on 2 bedrooms",
        ]
        assert exc_info.value.message.startswith("Invalid booking: ")


class TestUpdateBooking:
    def test_forward_transition(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        updated = BookingService.update(
            db, booking.id, BookingUpdate(status=BookingStatus.ACTIVE), as_current(tenant_user)
        )

        assert updated.status == BookingStatus.ACTIVE

    def test_skipping_a_state_is_refused(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(InvalidStateError, match="Cannot change booking status"):
            BookingService.update(
                db, booking.id, BookingUpdate(status=BookingStatus.COMPLETED), as_current(tenant_user)
            )

    def test_cancel_through_update_is_refused(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(InvalidStateError, match="cancellation endpoint"):
            BookingService.update(
                db, booking.id, BookingUpdate(status=BookingStatus.CANCELLED), as_current(tenant_user)
            )

    def test_terminal_booking_cannot_be_modified(self, db, daily_prop, tenant_user):
        booking = make_booking(
            db, daily_prop, tenant_user, TODAY, TODAY + timedelta(days=2), status=BookingStatus.COMPLETED
        )

        with pytest.raises(InvalidStateError):
            BookingService.update(db, booking.id, BookingUpdate(number_of_guests=1), as_current(tenant_user))

    def test_moving_dates_checks_other_bookings(self, db, daily_prop, tenant_user, other_user):
        booking = _book(db, daily_prop, tenant_user)
        _book(db, daily_prop, other_user, start_offset=20)

        moved = BookingService.update(
            db,
            booking.id,
            BookingUpdate(start_date=TODAY + timedelta(days=12), end_date=TODAY + timedelta(days=18)),
            as_current(tenant_user),
            today=TODAY,
        )
        assert moved.end_date == TODAY + timedelta(days=18)

        with pytest.raises(InvalidStateError):
            BookingService.update(
                db,
                booking.id,
                BookingUpdate(end_date=TODAY + timedelta(days=22)),
                as_current(tenant_user),
                today=TODAY,
            )

    def test_moving_dates_reprices(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        moved = BookingService.update(
            db, booking.id, BookingUpdate(end_date=TODAY + timedelta(days=18)), as_current(tenant_user), today=TODAY
        )

        assert moved.total_price == Decimal("800.00")

    def test_supplied_price_wins_over_repricing(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        moved = BookingService.update(
            db,
            booking.id,
            BookingUpdate(end_date=TODAY + timedelta(days=18), total_price=Decimal("650.00")),
            as_current(tenant_user),
            today=TODAY,
        )

        assert moved.total_price == Decimal("650.00")

    def test_guest_count_is_capped_by_bedrooms(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(RentalValidationError) as exc_info:
            BookingService.update(
                db, booking.id, BookingUpdate(number_of_guests=40), as_current(tenant_user), today=TODAY
            )

        assert exc_info.value.errors == ["Property accommodates maximum 4 guests based on 2 bedrooms"]
        assert booking.number_of_guests == 2

    def test_cannot_move_start_into_the_past(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(RentalValidationError) as exc_info:
            BookingService.update(
                db,
                booking.id,
                BookingUpdate(start_date=TODAY - timedelta(days=30)),
                as_current(tenant_user),
                today=TODAY,
            )

        assert exc_info.value.errors == ["Start date cannot be in the past"]
        assert booking.start_date == TODAY + timedelta(days=10)
        assert booking.total_price == Decimal("500.00")

    def test_active_stay_can_be_extended(self, db, daily_prop, tenant_user):
        booking = make_booking(
            db, daily_prop, tenant_user, TODAY - timedelta(days=2), TODAY + timedelta(days=1),
            status=BookingStatus.ACTIVE
        )

        extended = BookingService.update(
            db, booking.id, BookingUpdate(end_date=TODAY + timedelta(days=3)), as_current(tenant_user), today=TODAY
        )

        assert extended.end_date == TODAY + timedelta(days=3)
        assert extended.total_price == Decimal("500.00")

    def test_inverted_dates_are_refused(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(RentalValidationError) as exc_info:
            BookingService.update(
                db, booking.id, BookingUpdate(end_date=TODAY + timedelta(days=8)), as_current(tenant_user), today=TODAY
            )

        assert exc_info.value.errors == ["End date must be after start date"]

    def test_stranger_cannot_update(self, db, daily_prop, tenant_user, other_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(UnauthorizedError):
            BookingService.update(db, booking.id, BookingUpdate(number_of_guests=1), as_current(other_user))


class TestCancelBooking:
    def test_full_refund_well_ahead(self, db, daily_prop, tenant_user, landlord):
        booking = _book(db, daily_prop, tenant_user, total_price=Decimal("1000.00"))

        cancelled, refund = BookingService.cancel(
            db, booking.id, as_current(tenant_user), "Change of plans", now=NOW
        )

        assert refund == Decimal("1000.00")
        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.payment_status == "Refunded"
        assert "Cancelled: Change of plans" in cancelled.special_requests
        payment = db.query(Payment).filter(Payment.booking_id == booking.id).one()
        assert payment.payment_type == PaymentType.REFUND
        assert payment.amount == Decimal("1000.00")
        assert db.query(Notification).filter(
            Notification.user_id == landlord.id, Notification.type == "booking_cancelled"
        ).count() == 1

    def test_half_refund_three_days_out(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user, start_offset=3, total_price=Decimal("1000.00"))

        _, refund = BookingService.cancel(
            db, booking.id, as_current(tenant_user), "Ill", now=NOW - timedelta(hours=9)
        )

        assert refund == Decimal("500.00")

    def test_no_refund_on_start_day(self, db, daily_prop, tenant_user):
        booking = make_booking(db, daily_prop, tenant_user, TODAY, TODAY + timedelta(days=3))

        cancelled, refund = BookingService.cancel(db, booking.id, as_current(tenant_user), "No show", now=NOW)

        assert refund == Decimal("0.00")
        assert cancelled.payment_status == "Cancelled"
        assert db.query(Payment).count() == 0

    def test_owner_cancelling_notifies_guest(self, db, daily_prop, tenant_user, landlord):
        booking = _book(db, daily_prop, tenant_user)

        BookingService.cancel(db, booking.id, as_current(landlord), "Maintenance", now=NOW)

        assert db.query(Notification).filter(
            Notification.user_id == tenant_user.id, Notification.type == "booking_cancelled"
        ).count() == 1

    def test_cancelled_booking_frees_the_dates(self, db, daily_prop, tenant_user, other_user):
        booking = _book(db, daily_prop, tenant_user)
        BookingService.cancel(db, booking.id, as_current(tenant_user), "Change of plans", now=NOW)

        assert _book(db, daily_prop, other_user).status == BookingStatus.UPCOMING

    def test_cannot_cancel_twice(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)
        BookingService.cancel(db, booking.id, as_current(tenant_user), "Change of plans", now=NOW)

        with pytest.raises(InvalidStateError):
            BookingService.cancel(db, booking.id, as_current(tenant_user), "Again", now=NOW)

    def test_refund_quote_does_not_cancel(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user, total_price=Decimal("800.00"))

        refund = BookingService.calculate_refund(db, booking.id, as_current(tenant_user), NOW)

        assert refund == Decimal("800.00")
        assert booking.status == BookingStatus.UPCOMING


class TestDeleteAndQueries:
    def test_only_terminal_bookings_can_be_deleted(self, db, daily_prop, tenant_user):
        booking = _book(db, daily_prop, tenant_user)

        with pytest.raises(InvalidStateError):
            BookingService.delete(db, booking.id, as_current(tenant_user))

        BookingService.cancel(db, booking.id, as_current(tenant_user), "Change of plans", now=NOW)
        BookingService.delete(db, booking.id, as_current(tenant_user))

        assert BookingService.list_bookings(db, as_current(tenant_user))[1] == 0

    def test_listing_is_scoped(self, db, daily_prop, tenant_user, other_user, landlord, admin):
        _book(db, daily_prop, tenant_user)
        _book(db, daily_prop, other_user, start_offset=20)

        assert BookingService.list_bookings(db, as_current(tenant_user))[1] == 1
        assert BookingService.list_bookings(db, as_current(landlord))[1] == 2
        assert BookingService.list_bookings(db, as_current(admin))[1] == 2

    def test_current_and_upcoming_stays(self, db, daily_prop, tenant_user):
        current = make_booking(
            db, daily_prop, tenant_user, TODAY - timedelta(days=1), TODAY + timedelta(days=2),
            status=BookingStatus.ACTIVE
        )
        upcoming = _book(db, daily_prop, tenant_user)
        make_booking(
            db, daily_prop, tenant_user, TODAY - timedelta(days=4), TODAY,
            status=BookingStatus.ACTIVE
        )

        assert BookingService.current_stays(db, as_current(tenant_user), today=TODAY) == [current]
        assert BookingService.upcoming_stays(db, as_current(tenant_user), today=TODAY) == [upcoming]

    def test_refresh_statuses(self, db, daily_prop, tenant_user):
        starting = make_booking(db, daily_prop, tenant_user, TODAY, TODAY + timedelta(days=3))
        finishing = make_booking(
            db, daily_prop, tenant_user, TODAY - timedelta(days=5), TODAY, status=BookingStatus.ACTIVE
        )
        later = make_booking(db, daily_prop, tenant_user, TODAY + timedelta(days=10), TODAY + timedelta(days=12))

        result = BookingService.refresh_statuses(db, today=TODAY)

        assert result == {"activated": 1, "completed": 1}
        assert starting.status == BookingStatus.ACTIVE
        assert finishing.status == BookingStatus.COMPLETED
        assert later.status == BookingStatus.UPCOMING

""" 🧪 test_print_state_machine.py — unit-тести для PrintStateMachine.

Перевіряє:
- лише кроки вперед та guard-и (модель, конфігурація, ціна)
- котирування і перекотирування з історією статусів
- `paid` ставить paidAt та дедлайн конфігурації (+7 днів)
- скасування з будь-якого нетермінального статусу
- єдиний предикат допуску до checkout
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from storefront.domain.custom_print import (
    DeliveryOffer,
    PrintStateMachine,
    PrintStatus,
    blocking_request_ids,
    is_checkout_eligible,
)
from storefront.errors import InvalidTransitionError, ValidationError


@pytest.fixture
def machine():
    return PrintStateMachine(config_deadline_days=7)


def test_happy_path_to_delivered(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.QUOTED)

    for _ in range(6):
        request = machine.advance(request, at=fixed_now)

    assert request.status is PrintStatus.DELIVERED
    assert [h.status for h in request.status_history] == [
        PrintStatus.PAYMENT_PENDING,
        PrintStatus.PAID,
        PrintStatus.PRINTING,
        PrintStatus.PRINTED,
        PrintStatus.SHIPPED,
        PrintStatus.DELIVERED,
    ]


def test_skipping_or_going_back_is_rejected(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.QUOTED)

    with pytest.raises(InvalidTransitionError):
        machine.transition(request, PrintStatus.PAID, at=fixed_now)
    with pytest.raises(InvalidTransitionError):
        machine.transition(request, "configured", at=fixed_now)
    assert machine.transition(request, PrintStatus.PAYMENT_PENDING, at=fixed_now).status is PrintStatus.PAYMENT_PENDING


def test_upload_and_config_guards(machine, print_request_factory, fixed_now):
    no_model = print_request_factory(status=PrintStatus.PENDING_UPLOAD, model_file=None)
    not_configured = print_request_factory(status=PrintStatus.PENDING_CONFIG, print_configuration=None)

    with pytest.raises(InvalidTransitionError):
        machine.advance(no_model, at=fixed_now)
    with pytest.raises(InvalidTransitionError):
        machine.advance(not_configured, at=fixed_now)


def test_paid_sets_deadline(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.PAYMENT_PENDING)

    paid = machine.transition(request, PrintStatus.PAID, at=fixed_now, note="captured")

    assert paid.paid_at == fixed_now
    assert paid.config_deadline == fixed_now + timedelta(days=7)
    assert paid.status_history[-1].note == "captured"


def test_quote_from_configured(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.CONFIGURED, print_fee=None, delivery_types=())

    quoted = machine.quote(
        request,
        print_fee=Decimal("12.50"),
        delivery_types=[DeliveryOffer("printDelivery", Decimal("6"))],
        at=fixed_now,
        note="PLA, 0.2mm",
    )

    assert quoted.status is PrintStatus.QUOTED
    assert quoted.total_price == Decimal("32.50")
    assert quoted.staff_note == "PLA, 0.2mm"
    assert quoted.status_history[-1].status is PrintStatus.QUOTED


def test_requote_keeps_status_and_appends_history(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.QUOTED)

    requoted = machine.quote(
        request,
        print_fee=Decimal("40"),
        delivery_types=[DeliveryOffer("standard", Decimal("5"))],
        at=fixed_now,
    )

    assert requoted.status is PrintStatus.QUOTED
    assert requoted.offered_delivery_types == ("standard",)
    assert len(requoted.status_history) == len(request.status_history) + 1


def test_quote_requires_delivery_and_valid_fee(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.CONFIGURED, print_fee=None)

    with pytest.raises(InvalidTransitionError):
        machine.quote(request, print_fee=Decimal("10"), delivery_types=[], at=fixed_now)
    with pytest.raises(ValidationError):
        machine.quote(request, print_fee=Decimal("-1"), delivery_types=[DeliveryOffer("standard", Decimal("5"))], at=fixed_now)
    with pytest.raises(ValidationError):
        machine.quote(
            request,
            print_fee=Decimal("10"),
            delivery_types=[DeliveryOffer("standard", Decimal("5")), DeliveryOffer("standard", Decimal("7"))],
            at=fixed_now,
        )


def test_quote_not_allowed_after_payment(machine, print_request_factory, fixed_now):
    request = print_request_factory(status=PrintStatus.PAID)

    with pytest.raises(InvalidTransitionError):
        machine.quote(request, print_fee=Decimal("1"), delivery_types=[DeliveryOffer("standard", Decimal("5"))], at=fixed_now)


@pytest.mark.parametrize("status", [PrintStatus.PENDING_UPLOAD, PrintStatus.QUOTED, PrintStatus.PRINTING])
def test_cancel_from_non_terminal(machine, print_request_factory, fixed_now, status):
    cancelled = machine.cancel(print_request_factory(status=status), at=fixed_now)

    assert cancelled.status is PrintStatus.CANCELLED


@pytest.mark.parametrize("status", [PrintStatus.DELIVERED, PrintStatus.CANCELLED])
def test_terminal_statuses_are_final(machine, print_request_factory, fixed_now, status):
    request = print_request_factory(status=status)

    with pytest.raises(InvalidTransitionError):
        machine.cancel(request, at=fixed_now)
    with pytest.raises(InvalidTransitionError):
        machine.advance(request, at=fixed_now)


def test_checkout_eligibility(print_request_factory):
    eligible = [s for s in PrintStatus if is_checkout_eligible(print_request_factory(status=s))]

    assert eligible == [
        PrintStatus.QUOTED,
        PrintStatus.PAYMENT_PENDING,
        PrintStatus.PAID,
        PrintStatus.PRINTING,
        PrintStatus.PRINTED,
        PrintStatus.SHIPPED,
        PrintStatus.DELIVERED,
    ]
    requests = [
        print_request_factory("a", status=PrintStatus.CONFIGURED),
        print_request_factory("b", status=PrintStatus.QUOTED),
        print_request_factory("c", status=PrintStatus.PENDING_UPLOAD),
    ]
    assert blocking_request_ids(requests) == ["a", "c"]

"""
Тесты сервиса периодических статей.
"""
from datetime import date
from decimal import Decimal
import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError

from budget_planner.models.enums import ItemKind, OccurrenceStatus, RecordStatus
from budget_planner.models.models import RecurringItemCreate
from budget_planner.services.recurring_item_service import (
    create_recurring_item,
    get_recurring_item,
    get_recurring_items,
    update_recurring_item,
    obsolete_recurring_item,
    has_confirmed_occurrences,
)
from budget_planner.services.category_service import obsolete_category
from budget_planner.utils.exceptions import BusinessLogicError, NotFoundError


def _income(**overrides):
    data = dict(
        kind=ItemKind.INCOME,
        name="Зарплата",
        amount=Decimal("50000.00"),
        start_date=date(2024, 1, 15),
        recurrence_code=2,
    )
    data.update(overrides)
    return RecurringItemCreate(**data)


def _expense(**overrides):
    data = dict(
        kind=ItemKind.EXPENSE,
        name="Аренда",
        amount=Decimal("30000.00"),
        start_date=date(2024, 1, 5),
        recurrence_code=1,
    )
    data.update(overrides)
    return RecurringItemCreate(**data)


class TestCreateRecurringItem:

    def test_create_income_with_person(self, db_session, person):
        item = create_recurring_item(db_session, _income(person_id=person.id))

        assert item.id is not None
        assert item.status == RecordStatus.ACTIVE
        assert item.person_id == person.id
        assert item.occurrences == []

    def test_create_expense_with_category(self, db_session, category):
        item = create_recurring_item(db_session, _expense(category_id=category.id))
        assert item.category.name == "Коммунальные услуги"

    def test_category_on_income_rejected(self, db_session, category):
        with pytest.raises(ValueError):
            create_recurring_item(db_session, _income(category_id=category.id))

    def test_person_on_expense_rejected(self, db_session, person):
        with pytest.raises(ValueError):
            create_recurring_item(db_session, _expense(person_id=person.id))

    def test_missing_category(self, db_session):
        with pytest.raises(NotFoundError):
            create_recurring_item(db_session, _expense(category_id=str(uuid.uuid4())))

    def test_obsolete_category_rejected(self, db_session, category):
        obsolete_category(db_session, category.id)

        with pytest.raises(BusinessLogicError):
            create_recurring_item(db_session, _expense(category_id=category.id))


class TestRecurringItemValidation:

    def test_code_must_match_kind(self):
        with pytest.raises(PydanticValidationError):
            _income(recurrence_code=5)
        assert _expense(recurrence_code=5).recurrence_code == 5

    def test_end_before_start(self):
        with pytest.raises(PydanticValidationError):
            _income(end_date=date(2023, 12, 31))

    def test_end_equal_to_start_allowed(self):
        assert _income(end_date=date(2024, 1, 15)).end_date == date(2024, 1, 15)

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1.00")])
    def test_amount_positive(self, amount):
        with pytest.raises(PydanticValidationError):
            _income(amount=amount)

    def test_name_stripped(self):
        assert _income(name="  Премия ").name == "Премия"


class TestUpdateRecurringItem:

    def test_update_schedule_without_confirmed_occurrences(self, db_session):
        item = create_recurring_item(db_session, _income())

        updated = update_recurring_item(db_session, item.id, _income(amount=Decimal("55000.00")))

        assert updated.amount == Decimal("55000.00")

    def test_schedule_locked_after_confirmation(self, db_session, make_occurrence):
        item = create_recurring_item(db_session, _income())
        make_occurrence(item, date(2024, 1, 15), status=OccurrenceStatus.CONFIRMED)

        assert has_confirmed_occurrences(db_session, item.id)
        with pytest.raises(BusinessLogicError):
            update_recurring_item(db_session, item.id, _income(amount=Decimal("55000.00")))

    def test_descriptive_fields_editable_after_confirmation(self, db_session, make_occurrence):
        item = create_recurring_item(db_session, _income())
        make_occurrence(item, date(2024, 1, 15), status=OccurrenceStatus.CONFIRMED)

        updated = update_recurring_item(db_session, item.id, _income(name="Оклад", note="после повышения"))

        assert updated.name == "Оклад"
        assert updated.note == "после повышения"

    def test_kind_cannot_change(self, db_session):
        item = create_recurring_item(db_session, _income())

        with pytest.raises(BusinessLogicError):
            update_recurring_item(db_session, item.id, _expense())

    def test_obsolete_item_cannot_change(self, db_session):
        item = create_recurring_item(db_session, _income())
        obsolete_recurring_item(db_session, item.id)

        with pytest.raises(BusinessLogicError):
            update_recurring_item(db_session, item.id, _income(name="Другое"))


class TestObsoleteAndList:

    def test_obsolete_keeps_history(self, db_session, make_occurrence):
        item = create_recurring_item(db_session, _income())
        make_occurrence(item, date(2024, 1, 15), status=OccurrenceStatus.CONFIRMED)

        assert obsolete_recurring_item(db_session, item.id) is True

        stored = get_recurring_item(db_session, item.id)
        assert stored.status == RecordStatus.OBSOLETE
        assert len(stored.occurrences) == 1

    def test_list_filters(self, db_session):
        salary = create_recurring_item(db_session, _income())
        rent = create_recurring_item(db_session, _expense())
        old = create_recurring_item(db_session, _expense(name="Старый кредит"))
        obsolete_recurring_item(db_session, old.id)

        assert {i.id for i in get_recurring_items(db_session)} == {salary.id, rent.id}
        assert [i.id for i in get_recurring_items(db_session, kind=ItemKind.EXPENSE)] == [rent.id]
        assert len(get_recurring_items(db_session, active_only=False)) == 3

    def test_get_unknown_item(self, db_session):
        with pytest.raises(NotFoundError):
            get_recurring_item(db_session, str(uuid.uuid4()))

    def test_get_invalid_id(self, db_session):
        with pytest.raises(ValueError):
            get_recurring_item(db_session, "not-a-uuid")

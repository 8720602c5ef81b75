"""
Тесты справочников: категории расходов и люди.
"""
import uuid

import pytest

from budget_planner.models.enums import RecordStatus
from budget_planner.models.models import ExpenseCategoryCreate, PersonCreate
from budget_planner.services.category_service import (
    DEFAULT_EXPENSE_CATEGORIES,
    init_default_categories,
    get_all_categories,
    get_category,
    create_category,
    rename_category,
    obsolete_category,
)
from budget_planner.services.person_service import get_all_people, get_person, create_person
from budget_planner.utils.exceptions import NotFoundError


class TestCategories:

    def test_init_defaults_once(self, db_session):
        init_default_categories(db_session)
        init_default_categories(db_session)

        assert len(get_all_categories(db_session)) == len(DEFAULT_EXPENSE_CATEGORIES)

    def test_create_duplicate_rejected(self, db_session):
        create_category(db_session, ExpenseCategoryCreate(name="Хобби"))

        with pytest.raises(ValueError):
            create_category(db_session, ExpenseCategoryCreate(name="Хобби"))

    def test_rename(self, db_session, category):
        renamed = rename_category(db_session, category.id, ExpenseCategoryCreate(name="ЖКХ"))
        assert renamed.name == "ЖКХ"

    def test_rename_to_taken_name_rejected(self, db_session, category):
        create_category(db_session, ExpenseCategoryCreate(name="Хобби"))

        with pytest.raises(ValueError):
            rename_category(db_session, category.id, ExpenseCategoryCreate(name="Хобби"))

    def test_obsolete_hidden_from_active_list(self, db_session, category):
        obsolete_category(db_session, category.id)

        assert get_all_categories(db_session) == []
        assert get_all_categories(db_session, active_only=False)[0].status == RecordStatus.OBSOLETE

    def test_get_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            get_category(db_session, str(uuid.uuid4()))


class TestPeople:

    def test_create_and_list_sorted(self, db_session):
        create_person(db_session, PersonCreate(name="Олег"))
        create_person(db_session, PersonCreate(name="Анна"))

        assert [p.name for p in get_all_people(db_session)] == ["Анна", "Олег"]

    def test_duplicate_name_rejected(self, db_session, person):
        with pytest.raises(ValueError):
            create_person(db_session, PersonCreate(name="Анна"))

    def test_get(self, db_session, person):
        assert get_person(db_session, person.id).name == "Анна"
        with pytest.raises(NotFoundError):
            get_person(db_session, str(uuid.uuid4()))

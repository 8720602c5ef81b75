"""
Конфигурация pytest для тестов budget_planner.
"""
import pytest
from unittest.mock import Mock, MagicMock
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from datetime import date
from decimal import Decimal
import flet as ft

from budget_planner.models import Base
from budget_planner.models.models import (
    RecurringItemDB,
    OccurrenceDB,
    PersonDB,
    ExpenseCategoryDB,
)
from budget_planner.models.enums import ItemKind, OccurrenceStatus, RecordStatus


def _enable_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db_session():
    """
    Временная БД в памяти и сессия к ней.
    Автоматически закрывает соединение после теста.
    """
    engine = create_engine("sqlite:///:memory:")
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def mock_page():
    """
    Мок Flet Page с современным API (page.open / page.close).
    """
    page = MagicMock(spec=ft.Page)
    page.overlay = []
    page.update = MagicMock()
    page.open = MagicMock()
    page.close = MagicMock()
    page.width = 1200
    page.height = 800
    return page


@pytest.fixture
def mock_session():
    """Мок SQLAlchemy Session."""
    session = Mock()
    session.commit = Mock()
    session.rollback = Mock()
    session.close = Mock()
    session.query = Mock()
    session.add = Mock()
    session.delete = Mock()
    return session


@pytest.fixture
def person(db_session):
    person = PersonDB(name="Анна")
    db_session.add(person)
    db_session.commit()
    return person


@pytest.fixture
def category(db_session):
    category = ExpenseCategoryDB(name="Коммунальные услуги")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_item(db_session):
    """
    Фабрика периодических статей в тестовой БД.

    Example:
        salary = make_item(ItemKind.INCOME, date(2024, 1, 15), code=1)
    """
    def _make(
        kind=ItemKind.INCOME,
        start_date=date(2024, 1, 15),
        code=1,
        amount=Decimal("1000.00"),
        end_date=None,
        name="Статья",
        status=RecordStatus.ACTIVE,
    ):
        item = RecurringItemDB(
            kind=kind,
            name=name,
            amount=amount,
            start_date=start_date,
            end_date=end_date,
            recurrence_code=code,
            status=status,
        )
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture
def make_occurrence(db_session):
    """Фабрика вхождений в тестовой БД."""
    def _make(item, occurrence_date, amount=None, status=OccurrenceStatus.UNCONFIRMED):
        occurrence = OccurrenceDB(
            item_id=item.id,
            occurrence_date=occurrence_date,
            amount=amount if amount is not None else item.amount,
            status=status,
        )
        db_session.add(occurrence)
        db_session.commit()
        return occurrence

    return _make

"""
Тесты сервиса целей на год.
"""
from decimal import Decimal
import uuid

import pytest

from budget_planner.models.models import ResolutionCreate, ResolutionDB
from budget_planner.services.resolution_service import (
    create_resolution,
    set_resolution_completed,
    delete_resolution,
    get_resolutions_by_year,
    get_resolution_stats,
)
from budget_planner.utils.exceptions import NotFoundError


def test_create_shared_and_personal(db_session, person):
    shared = create_resolution(db_session, ResolutionCreate(title="Отпуск у моря", year=2024))
    personal = create_resolution(db_session, ResolutionCreate(title="Курсы", year=2024, person_id=person.id))

    assert shared.person_id is None
    assert personal.person.name == "Анна"
    assert not personal.is_completed


def test_create_with_unknown_person(db_session):
    with pytest.raises(NotFoundError):
        create_resolution(db_session, ResolutionCreate(title="Курсы", year=2024, person_id=str(uuid.uuid4())))


def test_blank_title_rejected():
    with pytest.raises(ValueError):
        ResolutionCreate(title="   ", year=2024)


def test_toggle_and_delete(db_session):
    resolution = create_resolution(db_session, ResolutionCreate(title="Без долгов", year=2024))

    assert set_resolution_completed(db_session, resolution.id, True).is_completed
    assert not set_resolution_completed(db_session, resolution.id, False).is_completed

    assert delete_resolution(db_session, resolution.id) is True
    assert db_session.query(ResolutionDB).count() == 0


def test_list_by_year(db_session):
    create_resolution(db_session, ResolutionCreate(title="Старое", year=2023))
    current = create_resolution(db_session, ResolutionCreate(title="Новое", year=2024))

    assert [r.id for r in get_resolutions_by_year(db_session, 2024)] == [current.id]


def test_stats(db_session, person):
    done = create_resolution(db_session, ResolutionCreate(title="Бег", year=2024, person_id=person.id))
    create_resolution(db_session, ResolutionCreate(title="Книги", year=2024, person_id=person.id))
    create_resolution(db_session, ResolutionCreate(title="Ремонт", year=2024))
    set_resolution_completed(db_session, done.id, True)

    stats = get_resolution_stats(db_session, 2024)

    assert stats.total == 3
    assert stats.completed == 1
    assert stats.completion_rate == Decimal("33.3")
    assert len(stats.by_person[person.id]) == 2
    assert [r.title for r in stats.by_person[None]] == ["Ремонт"]


def test_stats_for_empty_year(db_session):
    stats = get_resolution_stats(db_session, 2024)

    assert stats.total == 0
    assert stats.completion_rate == 0
    assert stats.by_person == {}

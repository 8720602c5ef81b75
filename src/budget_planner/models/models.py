"""
Модуль моделей данных для Budget Planner.

Содержит определения моделей:
- SQLAlchemy модели для хранения в базе данных (суффикс DB)
- Pydantic модели для валидации ввода (суффикс Create/Update)
- Pydantic записи для передачи данных между генератором расписания
  и CRUD слоем (RecurringItem, Occurrence и т.д.)
"""

from datetime import datetime
from datetime import date as date_type
from typing import Optional
from decimal import Decimal
import logging
import uuid

from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime, Enum as SQLEnum,
    Boolean, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship, DeclarativeBase
from pydantic import BaseModel, field_validator, model_validator, Field, ConfigDict

from .enums import (
    ItemKind, RecurrenceRule, OccurrenceStatus, RecordStatus,
    RECURRENCE_CODES_BY_KIND, resolve_recurrence_rule
)
from budget_planner.utils.validation import parse_iso_date

logger = logging.getLogger(__name__)


# Декларативная база для SQLAlchemy моделей
class Base(DeclarativeBase):
    """Базовый класс для всех SQLAlchemy моделей."""
    pass


class PersonDB(Base):
    """
    Член семьи, которому принадлежат доходы и цели на год.

    Attributes:
        id: Уникальный идентификатор (UUID)
        name: Имя (уникальное)
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "people"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    name = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Связи
    incomes = relationship("RecurringItemDB", back_populates="person")
    resolutions = relationship("ResolutionDB", back_populates="person")


class ExpenseCategoryDB(Base):
    """
    Справочник категорий расходов.

    Attributes:
        id: Уникальный идентификатор категории (UUID)
        name: Название категории (уникальное)
        status: Статус записи (ACTIVE или OBSOLETE)
        created_at: Дата создания категории
        updated_at: Дата последнего обновления
    """
    __tablename__ = "expense_categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    name = Column(String, nullable=False, unique=True)
    status = Column(SQLEnum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Связи
    expenses = relationship("RecurringItemDB", back_populates="category")


class RecurringItemDB(Base):
    """
    Периодическая статья дохода или расхода.

    Шаблон, по которому генератор расписания создаёт вхождения
    (OccurrenceDB) на выбранный год.

    Attributes:
        id: Уникальный идентификатор (UUID)
        kind: Вид статьи (доход или расход)
        name: Название статьи
        amount: Сумма одного вхождения
        start_date: Дата начала
        end_date: Дата окончания включительно (None = бессрочно)
        recurrence_code: Код правила повторения (таблица зависит от kind)
        description: Описание (опционально)
        note: Примечание (опционально)
        category_id: Категория расхода (только для расходов)
        person_id: Получатель дохода (только для доходов)
        status: Статус записи (ACTIVE или OBSOLETE)
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "recurring_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    kind = Column(SQLEnum(ItemKind), nullable=False, index=True)
    name = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)
    recurrence_code = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    note = Column(String, nullable=True)
    category_id = Column(String(36), ForeignKey("expense_categories.id"), nullable=True)
    person_id = Column(String(36), ForeignKey("people.id"), nullable=True)
    status = Column(SQLEnum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Связи
    category = relationship("ExpenseCategoryDB", back_populates="expenses")
    person = relationship("PersonDB", back_populates="incomes")
    occurrences = relationship("OccurrenceDB", back_populates="item")

    __table_args__ = (
        Index('ix_recurring_items_kind_status', 'kind', 'status'),
    )

    @property
    def recurrence_rule(self) -> Optional[RecurrenceRule]:
        """Правило повторения по коду, None для неизвестного кода."""
        return resolve_recurrence_rule(self.kind, self.recurrence_code)


class OccurrenceDB(Base):
    """
    Конкретное вхождение (экземпляр) периодической статьи на дату.

    Генерируется синхронизатором расписания. Неподтверждённые вхождения
    пересоздаются при каждой генерации года, подтверждённые (получено или
    оплачено) остаются навсегда.

    Attributes:
        id: Уникальный идентификатор вхождения (UUID)
        item_id: Ссылка на периодическую статью (UUID)
        occurrence_date: Дата вхождения
        amount: Сумма вхождения (по умолчанию = сумма статьи)
        status: Статус (UNCONFIRMED или CONFIRMED)
        confirmed_date: Дата подтверждения
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "occurrences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    item_id = Column(String(36), ForeignKey("recurring_items.id"), nullable=False)
    occurrence_date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(SQLEnum(OccurrenceStatus), nullable=False, default=OccurrenceStatus.UNCONFIRMED, index=True)
    confirmed_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Связи
    item = relationship("RecurringItemDB", back_populates="occurrences")

    # Не более одного вхождения на пару (статья, дата)
    __table_args__ = (
        UniqueConstraint('item_id', 'occurrence_date', name='uq_occurrences_item_id_occurrence_date'),
        Index('ix_occurrences_status_occurrence_date', 'status', 'occurrence_date'),
    )

    @property
    def confirmed(self) -> bool:
        """Признак подтверждённого вхождения."""
        return self.status == OccurrenceStatus.CONFIRMED


class SavingDB(Base):
    """
    Ежемесячный взнос в накопления.

    Attributes:
        id: Уникальный идентификатор (UUID)
        year: Год
        month: Месяц (1-12)
        amount: Сумма взноса
        is_paid: Признак внесённого взноса
        borrowed_amount: Сколько занято из этого взноса
        borrowed_amount_paid: Сколько из занятого возвращено
        status: Статус записи (ACTIVE или OBSOLETE)
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "savings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    borrowed_amount = Column(Numeric(12, 2), nullable=True)
    borrowed_amount_paid = Column(Numeric(12, 2), nullable=True)
    status = Column(SQLEnum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index('ix_savings_year_month', 'year', 'month'),
    )


class ResolutionDB(Base):
    """
    Цель (обещание) на год, общая или для конкретного человека.

    Attributes:
        id: Уникальный идентификатор (UUID)
        year: Год
        title: Формулировка цели
        person_id: Владелец цели (None = общая)
        is_completed: Признак выполнения
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "resolutions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    year = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=False)
    person_id = Column(String(36), ForeignKey("people.id"), nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Связи
    person = relationship("PersonDB", back_populates="resolutions")


# =============================================================================
# Pydantic модели для валидации и передачи данных
# =============================================================================

def _check_optional_uuid(v: Optional[str]) -> Optional[str]:
    """Валидация формата UUID для необязательных ссылок."""
    if v is not None:
        try:
            uuid.UUID(v)
        except ValueError:
            raise ValueError(f'Невалидный UUID: {v}')
    return v


def _check_name(v: str) -> str:
    """Название не может быть пустым, пробелы по краям обрезаются."""
    if not v or not v.strip():
        raise ValueError('Название не может быть пустым или состоять только из пробелов')
    return v.strip()


class RecurringItemCreate(BaseModel):
    """
    Pydantic модель для создания или обновления периодической статьи.

    Обеспечивает валидацию:
    - Сумма положительная
    - Название не пустое
    - Дата окончания не раньше даты начала (включительно)
    - Код повторения есть в таблице кодов для данного вида статьи

    Attributes:
        kind: Вид статьи (доход или расход)
        name: Название
        amount: Сумма одного вхождения (> 0)
        start_date: Дата начала
        end_date: Дата окончания (опционально)
        recurrence_code: Код правила повторения
        description: Описание (опционально)
        note: Примечание (опционально)
        category_id: ID категории расхода (UUID, опционально)
        person_id: ID получателя дохода (UUID, опционально)
    """
    kind: ItemKind
    name: str = Field(description="Название статьи")
    amount: Decimal = Field(gt=Decimal('0'), description="Сумма должна быть положительной")
    start_date: date_type
    end_date: Optional[date_type] = None
    recurrence_code: int
    description: Optional[str] = None
    note: Optional[str] = None
    category_id: Optional[str] = None
    person_id: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _check_name(v)

    @field_validator('category_id', 'person_id')
    @classmethod
    def validate_uuid(cls, v: Optional[str]) -> Optional[str]:
        """Валидация формата UUID."""
        return _check_optional_uuid(v)

    @model_validator(mode='after')
    def check_dates_and_code(self) -> "RecurringItemCreate":
        """Проверка дат и кода повторения для вида статьи."""
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('Дата окончания не может быть раньше даты начала')
        if self.recurrence_code not in RECURRENCE_CODES_BY_KIND[self.kind]:
            raise ValueError(
                f'Неизвестный код повторения {self.recurrence_code} для вида {self.kind.value}'
            )
        return self


class RecurringItem(BaseModel):
    """
    Запись периодической статьи на границе генератора расписания.

    Даты принимаются как date или ISO строки. Неразбираемая строка
    превращается в None: для даты начала это означает пропуск статьи
    при генерации, для даты окончания - отсутствие ограничения.
    """
    id: str
    kind: ItemKind
    name: str = ""
    amount: Decimal
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    recurrence_code: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_date(cls, v, info):
        parsed = parse_iso_date(v)
        if parsed is None and v not in (None, ""):
            logger.warning(f"Неразбираемое значение {info.field_name}: {v!r}")
        return parsed

    @property
    def recurrence_rule(self) -> Optional[RecurrenceRule]:
        """Правило повторения по коду, None для неизвестного кода."""
        return resolve_recurrence_rule(self.kind, self.recurrence_code)


class OccurrenceCreate(BaseModel):
    """
    Строка вхождения для вставки синхронизатором расписания.
    """
    item_id: str
    occurrence_date: date_type
    amount: Decimal
    status: OccurrenceStatus = OccurrenceStatus.UNCONFIRMED


class Occurrence(OccurrenceCreate):
    """
    Pydantic модель для чтения вхождения из БД.
    """
    id: str
    confirmed_date: Optional[date_type] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def confirmed(self) -> bool:
        return self.status == OccurrenceStatus.CONFIRMED


class OccurrenceUpdate(BaseModel):
    """
    Pydantic модель для редактирования вхождения.

    Все поля опциональные - обновляются только указанные.
    """
    amount: Optional[Decimal] = Field(None, gt=Decimal('0'))
    confirmed: Optional[bool] = None


class SavingCreate(BaseModel):
    """
    Pydantic модель для создания ежемесячного взноса в накопления.

    Attributes:
        year: Год
        month: Месяц (1-12)
        amount: Сумма взноса (> 0)
        is_paid: Признак внесённого взноса
    """
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    amount: Decimal = Field(gt=Decimal('0'))
    is_paid: bool = False


class Saving(SavingCreate):
    """
    Pydantic модель для чтения взноса из БД.
    """
    id: str
    borrowed_amount: Optional[Decimal] = None
    borrowed_amount_paid: Optional[Decimal] = None
    status: RecordStatus

    model_config = ConfigDict(from_attributes=True)


class ResolutionCreate(BaseModel):
    """
    Pydantic модель для создания цели на год.
    """
    title: str
    year: int = Field(ge=1900, le=9999)
    person_id: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return _check_name(v)

    @field_validator('person_id')
    @classmethod
    def validate_uuid(cls, v: Optional[str]) -> Optional[str]:
        return _check_optional_uuid(v)


class Resolution(ResolutionCreate):
    """
    Pydantic модель для чтения цели из БД.
    """
    id: str
    is_completed: bool

    model_config = ConfigDict(from_attributes=True)


class PersonCreate(BaseModel):
    """Pydantic модель для создания человека."""
    name: str

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _check_name(v)


class Person(PersonCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class ExpenseCategoryCreate(BaseModel):
    """
    Pydantic модель для создания категории расходов.

    Example:
        >>> ExpenseCategoryCreate(name="  Коммунальные  ")
        ExpenseCategoryCreate(name='Коммунальные')
    """
    name: str

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _check_name(v)


class ExpenseCategory(ExpenseCategoryCreate):
    id: str
    status: RecordStatus

    model_config = ConfigDict(from_attributes=True)

"""
calendar_view.py
================

Модель представления календаря записей.

Что делает:
- по ширине экрана определяет класс ширины и число видимых дней
  (одна таблица брейкпоинтов в настройках, без ветвлений по компонентам);
- вычисляет видимые дни для режимов `day`, `week`, `fullWeek`
  и навигацию «вперёд/назад»;
- раскладывает записи по дням и по часам;
- назначает порядок наложения карточек в общем часе (z-index, смещение, метка).

Страницы узкого недельного вида:
    Дни режутся на страницы по N дней от якоря (понедельник недели,
    в которой пользователь открыл календарь). Первая страница — первые
    N дней недели, следующие идут подряд и переходят через границу недели.
    Поэтому «вперёд» с неполной недели попадает в нужное место следующей
    недели, а «вперёд» + «назад» всегда возвращает тот же набор дней.

Функции чистые; состояние экрана (выбранная дата, кэш записей,
токен обновления) живёт в `CalendarSession`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date as date_cls, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from django.conf import settings

from .domain import Appointment, slot_hour
from .exceptions import StoreUnavailableError
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

VIEW_DAY = "day"
VIEW_WEEK = "week"
VIEW_FULL_WEEK = "fullWeek"
VIEW_MODES = (VIEW_DAY, VIEW_WEEK, VIEW_FULL_WEEK)

WIDTH_WIDE = "wide"

NEXT = "next"
PREVIOUS = "previous"

DAYS_IN_WEEK = 7

SHARED_DAY_MARKER = "Compartido"


# ---------------------------------------------------------------------------
# Брейкпоинты
# ---------------------------------------------------------------------------

def width_class_for(
    width_px: int,
    breakpoints: Optional[Sequence[Tuple[int, str]]] = None,
) -> str:
    """
    Класс ширины по ширине экрана в px.

    :param width_px: ширина вьюпорта
    :param breakpoints: [(макс. ширина, класс), ...]; по умолчанию из настроек
    :return: класс ширины ("very-narrow", "narrow", "medium" или "wide")
    """
    table = settings.WASHAPP_BREAKPOINTS if breakpoints is None else breakpoints
    for max_width, width_class in sorted(table):
        if width_px <= max_width:
            return width_class
    return WIDTH_WIDE


def days_to_show(width_class: str, table: Optional[Mapping[str, int]] = None) -> int:
    """Сколько дней показывает недельный вид для данного класса ширины (1..7)."""
    table = settings.WASHAPP_DAYS_PER_WIDTH if table is None else table
    days = table.get(width_class, table.get(WIDTH_WIDE, DAYS_IN_WEEK))
    return max(1, min(DAYS_IN_WEEK, int(days)))


# ---------------------------------------------------------------------------
# Видимые дни и навигация
# ---------------------------------------------------------------------------

def week_start(day: date_cls) -> date_cls:
    """Понедельник недели (ISO)."""
    return day - timedelta(days=day.weekday())


def _check_view_mode(view_mode: str) -> None:
    if view_mode not in VIEW_MODES:
        raise ValueError(f"unknown view mode: {view_mode!r}")


def page_size(view_mode: str, width_class: str) -> int:
    _check_view_mode(view_mode)
    if view_mode == VIEW_DAY:
        return 1
    if view_mode == VIEW_FULL_WEEK:
        return DAYS_IN_WEEK
    return days_to_show(width_class)


def page_start(
    selected_date: date_cls,
    view_mode: str,
    width_class: str,
    anchor: Optional[date_cls] = None,
) -> date_cls:
    """
    Первый видимый день страницы, в которую попадает selected_date.

    :param anchor: начало нумерации страниц узкого вида (приводится к понедельнику);
                   None — понедельник недели selected_date
    """
    size = page_size(view_mode, width_class)
    if view_mode == VIEW_DAY:
        return selected_date
    if size == DAYS_IN_WEEK:
        return week_start(selected_date)

    base = week_start(anchor or selected_date)
    offset = (selected_date - base).days
    return base + timedelta(days=(offset // size) * size)


def visible_days(
    selected_date: date_cls,
    view_mode: str,
    width_class: str = WIDTH_WIDE,
    anchor: Optional[date_cls] = None,
) -> List[date_cls]:
    """
    Упорядоченный список видимых дат.

    - day      -> [selected_date]
    - fullWeek -> 7 дней с понедельника, при любой ширине
    - week     -> 7 дней с понедельника на широком экране,
                  N дней текущей страницы на узком

    Страницы узкого week отсчитываются от `anchor`. Закон «вперёд, потом
    назад = те же дни» выполняется, только если при листании передаётся
    один и тот же `anchor`. Без него страницы выравниваются по неделе
    выбранной даты, и с воскресной страницы [11, 12, 13] шаг назад
    приведёт на [8, 9, 10].
    """
    start = page_start(selected_date, view_mode, width_class, anchor)
    size = page_size(view_mode, width_class)
    return [start + timedelta(days=i) for i in range(size)]


def navigate(
    selected_date: date_cls,
    view_mode: str,
    width_class: str,
    direction: str,
    anchor: Optional[date_cls] = None,
) -> date_cls:
    """
    Новая выбранная дата после «вперёд»/«назад».

    Шаг: 1 день в day, 7 дней в fullWeek и широком week,
    N дней (размер страницы) в узком week.
    В узком week передавайте тот же `anchor`, что и в `visible_days`.
    """
    if direction not in (NEXT, PREVIOUS):
        raise ValueError(f"unknown direction: {direction!r}")
    start = page_start(selected_date, view_mode, width_class, anchor)
    step = timedelta(days=page_size(view_mode, width_class))
    return start + step if direction == NEXT else start - step


# ---------------------------------------------------------------------------
# Раскладка записей
# ---------------------------------------------------------------------------

def _safe_items(items: Any) -> List[Any]:
    """Отсутствующий или битый список записей считается пустым."""
    if items is None:
        return []
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
        logger.warning("CALENDAR: appointments is not a list (%s), rendering nothing",
                       type(items).__name__)
        return []
    return list(items)


def _appointment_date(appt: Any) -> Optional[date_cls]:
    value = getattr(appt, "date", None)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_cls):
        return value
    return None


def bucket_by_day(
    appointments: Any,
    days: Sequence[date_cls],
) -> Dict[date_cls, List[Appointment]]:
    """
    Разложить записи по видимым дням.

    Сравнивается только календарная дата. Каждый видимый день есть в ответе
    (возможно, с пустым списком); записи вне видимых дней отбрасываются.
    Порядок внутри дня — порядок исходного списка.
    """
    buckets: Dict[date_cls, List[Appointment]] = {day: [] for day in days}
    for appt in _safe_items(appointments):
        appt_date = _appointment_date(appt)
        if appt_date in buckets:
            buckets[appt_date].append(appt)
    return buckets


def bucket_by_hour(day_appointments: Any) -> Dict[int, List[Appointment]]:
    """
    Разложить записи одного дня по часам (ключ — час из "HH:MM").

    Внутри часа порядок исходный, по минутам не пересортировывается.
    Ключи идут по возрастанию.
    """
    grouped: Dict[int, List[Appointment]] = {}
    for appt in _safe_items(day_appointments):
        try:
            hour = slot_hour(appt.time)
        except (AttributeError, TypeError, ValueError):
            logger.warning("CALENDAR: skip appointment with bad time %r", getattr(appt, "time", None))
            continue
        grouped.setdefault(hour, []).append(appt)
    return {hour: grouped[hour] for hour in sorted(grouped)}


@dataclass(frozen=True)
class StackedEntry:
    """Карточка записи внутри часа с параметрами наложения."""

    appointment: Appointment
    index: int
    z_index: int
    offset_x: int
    offset_y: int
    marker: Optional[str]


def stack_layout(
    bucket: Sequence[Appointment],
    view_mode: str = VIEW_WEEK,
    offset: Optional[Tuple[int, int]] = None,
) -> List[StackedEntry]:
    """
    Порядок наложения карточек одного часа.

    Первая карточка: z_index=1, без смещения и метки.
    Следующие: растущий z_index, смещение index * (dx, dy) и метка
    ("+N" в недельном виде, "Compartido" в дневном).
    dx > 0, поэтому у каждой карточки остаётся видимая кликабельная полоса.
    """
    kind = "day" if view_mode == VIEW_DAY else "week"
    dx, dy = offset if offset is not None else settings.WASHAPP_STACK_OFFSET[kind]
    if dx <= 0:
        raise ValueError("horizontal stack offset must be positive")

    entries: List[StackedEntry] = []
    for index, appt in enumerate(bucket):
        if index == 0:
            marker = None
        elif view_mode == VIEW_DAY:
            marker = SHARED_DAY_MARKER
        else:
            marker = f"+{index}"
        entries.append(
            StackedEntry(
                appointment=appt,
                index=index,
                z_index=index + 1,
                offset_x=index * dx,
                offset_y=index * dy,
                marker=marker,
            )
        )
    return entries


# ---------------------------------------------------------------------------
# Сетка календаря
# ---------------------------------------------------------------------------

@dataclass
class HourRow:
    hour: int
    entries: List[StackedEntry] = field(default_factory=list)


@dataclass
class DayColumn:
    date: date_cls
    hours: List[HourRow] = field(default_factory=list)

    @property
    def appointment_count(self) -> int:
        return sum(len(row.entries) for row in self.hours)


@dataclass
class CalendarGrid:
    view_mode: str
    width_class: str
    selected_date: date_cls
    anchor: date_cls
    days: List[DayColumn]
    previous_date: date_cls
    next_date: date_cls


def build_calendar(
    appointments: Any,
    selected_date: date_cls,
    view_mode: str = VIEW_WEEK,
    width_class: str = WIDTH_WIDE,
    anchor: Optional[date_cls] = None,
) -> CalendarGrid:
    """
    Собрать сетку: видимые дни -> часы -> карточки с наложением.

    Дневной вид всегда содержит рабочие часы из настроек
    (плюс любые часы, где есть записи); недельный — только занятые часы.
    """
    anchor = week_start(anchor or selected_date)
    days = visible_days(selected_date, view_mode, width_class, anchor)
    by_day = bucket_by_day(appointments, days)

    columns: List[DayColumn] = []
    for day in days:
        by_hour = bucket_by_hour(by_day[day])
        if view_mode == VIEW_DAY:
            hours = sorted(set(settings.WASHAPP_DAY_HOURS) | set(by_hour))
        else:
            hours = list(by_hour)
        columns.append(
            DayColumn(
                date=day,
                hours=[HourRow(hour, stack_layout(by_hour.get(hour, []), view_mode)) for hour in hours],
            )
        )

    return CalendarGrid(
        view_mode=view_mode,
        width_class=width_class,
        selected_date=selected_date,
        anchor=anchor,
        days=columns,
        previous_date=navigate(selected_date, view_mode, width_class, PREVIOUS, anchor),
        next_date=navigate(selected_date, view_mode, width_class, NEXT, anchor),
    )


# ---------------------------------------------------------------------------
# Состояние экрана календаря
# ---------------------------------------------------------------------------

class CalendarSession:
    """
    Состояние экрана календаря у одного клиента.

    - Список записей кэшируется целиком и целиком же перечитывается
      после любого изменения (refresh), без частичных патчей.
    - Каждое обновление получает токен поколения. Результат применяется,
      только если за время запроса не начиналось новое обновление и
      не менялись дата/режим/ширина; иначе он отбрасывается.
    """

    def __init__(
        self,
        selected_date: Optional[date_cls] = None,
        view_mode: str = VIEW_WEEK,
        width_class: str = WIDTH_WIDE,
    ) -> None:
        _check_view_mode(view_mode)
        self.selected_date: date_cls = selected_date or date_cls.today()
        self.view_mode = view_mode
        self.width_class = width_class
        self.anchor: date_cls = week_start(self.selected_date)
        self.appointments: List[Appointment] = []
        self.is_loading = False
        self.last_error: Optional[str] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _invalidate(self) -> None:
        """Сделать устаревшими все запросы в полёте."""
        self._generation += 1
        self.is_loading = False

    # --- обновление данных -------------------------------------------------

    def begin_refresh(self) -> int:
        self._generation += 1
        self.is_loading = True
        return self._generation

    def apply_refresh(self, token: int, appointments: Any) -> bool:
        if token != self._generation:
            logger.debug("CALENDAR: drop stale refresh token=%s current=%s", token, self._generation)
            return False
        self.appointments = _safe_items(appointments)
        self.is_loading = False
        self.last_error = None
        return True

    def fail_refresh(self, token: int, error: Any) -> bool:
        """Ошибка загрузки: кэш не трогаем, только запоминаем сообщение."""
        if token != self._generation:
            return False
        self.is_loading = False
        self.last_error = str(error)
        return True

    def refresh(self, repository: AppointmentRepository) -> bool:
        token = self.begin_refresh()
        try:
            items = repository.list()
        except StoreUnavailableError as exc:
            logger.warning("CALENDAR: refresh failed: %s", exc)
            self.fail_refresh(token, exc)
            return False
        return self.apply_refresh(token, items)

    # --- навигация ---------------------------------------------------------

    def go_to(self, day: date_cls) -> None:
        self.selected_date = day
        self.anchor = week_start(day)
        self._invalidate()

    def today(self) -> None:
        self.go_to(date_cls.today())

    def next(self) -> None:
        self.selected_date = navigate(
            self.selected_date, self.view_mode, self.width_class, NEXT, self.anchor
        )
        self._invalidate()

    def previous(self) -> None:
        self.selected_date = navigate(
            self.selected_date, self.view_mode, self.width_class, PREVIOUS, self.anchor
        )
        self._invalidate()

    def set_view_mode(self, view_mode: str) -> None:
        _check_view_mode(view_mode)
        self.view_mode = view_mode
        self.anchor = week_start(self.selected_date)
        self._invalidate()

    def set_viewport_width(self, width_px: int) -> None:
        width_class = width_class_for(width_px)
        if width_class == self.width_class:
            return
        self.width_class = width_class
        self.anchor = week_start(self.selected_date)
        self._invalidate()

    # --- представление -----------------------------------------------------

    def visible_days(self) -> List[date_cls]:
        return visible_days(self.selected_date, self.view_mode, self.width_class, self.anchor)

    def grid(self) -> CalendarGrid:
        return build_calendar(
            self.appointments, self.selected_date, self.view_mode, self.width_class, self.anchor
        )

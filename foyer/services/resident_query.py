"""
Traducción de los filtros del listado de stagiaires a una cláusula SQLAlchemy.
AND entre categorías, OR dentro de una categoría.
"""
from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import and_, or_, select, true, asc, desc
from sqlalchemy.sql.elements import ColumnElement

from foyer.models import Resident, Room
from foyer.schemas.filters import ResidentFilters

TERM_COLUMNS = {
    1: Resident.lodging_term1_price,
    2: Resident.lodging_term2_price,
    3: Resident.lodging_term3_price,
}

SEARCH_COLUMNS = (
    Resident.first_name,
    Resident.last_name,
    Resident.email,
    Resident.identifier,
    Resident.company,
)


def _search_clause(term: str) -> ColumnElement[bool]:
    # autoescape: '%' y '_' del término se buscan literalmente
    return or_(*(column.icontains(term, autoescape=True) for column in SEARCH_COLUMNS))


def _stay_clause(status: str, today: date) -> ColumnElement[bool]:
    if status == "active":
        # sin fecha de salida no hay estancia en curso
        return and_(Resident.arrival_date <= today, Resident.departure_date >= today)
    return or_(Resident.arrival_date > today, Resident.departure_date < today)


def _room_clause(room: str, specific_room: str | None) -> ColumnElement[bool]:
    if room == "withoutRoom":
        return Resident.room_id.is_(None)
    if specific_room:
        matching = select(Room.id).where(Room.number.icontains(specific_room, autoescape=True))
        return Resident.room_id.in_(matching)
    return Resident.room_id.is_not(None)


def _payment_clause(status: str, enabled, payment_status, prices) -> ColumnElement[bool]:
    if status == "paid":
        return and_(enabled.is_(True), payment_status == "paid", *(price > 0 for price in prices))
    if status == "unpaid":
        return or_(enabled.is_(False), *(price == 0 for price in prices))
    return payment_status == "exempt"


def build_resident_predicate(filters: ResidentFilters, today: date) -> ColumnElement[bool]:
    """Una sola expresión booleana; sin filtros aplicados devuelve TRUE."""
    clauses: List[ColumnElement[bool]] = []

    if filters.search:
        clauses.append(_search_clause(filters.search))
    if filters.status:
        clauses.append(_stay_clause(filters.status, today))
    if filters.room:
        clauses.append(_room_clause(filters.room, filters.specific_room))
    if filters.gender:
        clauses.append(Resident.gender == filters.gender)
    if filters.type:
        clauses.append(Resident.type == filters.type)
    if filters.cycle:
        clauses.append(Resident.cycle == filters.cycle)
    if filters.year:
        clauses.append(Resident.session_year == filters.year)
    if filters.start_date:
        clauses.append(Resident.arrival_date >= filters.start_date)
    if filters.end_date:
        clauses.append(Resident.arrival_date <= filters.end_date)
    if filters.lodging_status:
        clauses.append(_payment_clause(
            filters.lodging_status,
            Resident.lodging_enabled,
            Resident.lodging_status,
            [TERM_COLUMNS[term] for term in filters.selected_terms],
        ))
    if filters.registration_status:
        clauses.append(_payment_clause(
            filters.registration_status,
            Resident.registration_enabled,
            Resident.registration_status,
            [Resident.registration_price],
        ))

    return and_(*clauses) if clauses else true()


def resident_order_by(filters: ResidentFilters) -> list:
    column = getattr(Resident, filters.sort_by)
    direction = desc if filters.sort_order == "desc" else asc
    # id como desempate para un orden estable
    return [direction(column), asc(Resident.id)]

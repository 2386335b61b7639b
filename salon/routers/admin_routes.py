# salon/routers/admin_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from salon import moderation, reports
from salon.auth import get_current_admin
from salon.data import SalonConfig
from salon.db import get_session
from salon.deps import get_config, get_notifiers
from salon.notifications import Notifiers
from salon.schemas import (
    ActionRequest,
    ActionResult,
    AppointmentPublic,
    BlockedPhonePublic,
    ChartData,
    ClientSummary,
    EditClientRequest,
    EditNameRequest,
    PhoneRequest,
    Stats,
)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.post("/action", response_model=ActionResult)
def moderate(
    req: ActionRequest,
    session: Session = Depends(get_session),
    notifiers: Notifiers = Depends(get_notifiers),
):
    return moderation.act(session, notifiers, req.id, req.action)


@router.post("/edit")
def edit_appointment_name(req: EditNameRequest, session: Session = Depends(get_session)):
    return moderation.edit_name(session, req.id, req.client_name)


@router.post("/edit-client")
def edit_client_name(req: EditClientRequest, session: Session = Depends(get_session)):
    return moderation.edit_client(session, req.phone, req.client_name)


@router.get("/appointments", response_model=List[AppointmentPublic])
def list_appointments(search: Optional[str] = None, session: Session = Depends(get_session)):
    return reports.list_appointments(session, search)


@router.get("/stats", response_model=Stats)
def stats(session: Session = Depends(get_session)):
    return reports.stats(session)


@router.get("/notifications", response_model=List[AppointmentPublic])
def pending_requests(session: Session = Depends(get_session)):
    return reports.pending_feed(session)


@router.get("/clients", response_model=List[ClientSummary])
def clients(
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return reports.clients(session, config)


@router.get("/schedule", response_model=List[AppointmentPublic])
def schedule(date: Optional[str] = None, session: Session = Depends(get_session)):
    return reports.schedule(session, date)


@router.get("/chart-data", response_model=ChartData)
def chart_data(session: Session = Depends(get_session)):
    return reports.chart_data(session)


@router.post("/block-phone")
def block_phone(
    req: PhoneRequest,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return moderation.block_phone(session, config, req.phone, req.reason)


@router.post("/unblock-phone")
def unblock_phone(
    req: PhoneRequest,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return moderation.unblock_phone(session, config, req.phone)


@router.get("/blocked-phones", response_model=List[BlockedPhonePublic])
def blocked_phones(session: Session = Depends(get_session)):
    return moderation.list_blocked(session)

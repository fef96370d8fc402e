"""Admin routes: keep-alive control and sales dashboard."""

from fastapi import APIRouter

from beatstore.api.deps import AdminUser, Scheduler
from beatstore.schemas.admin import KeepAliveStatusResponse, SalesSummaryResponse
from beatstore.services.sales_service import SalesService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/keep-alive",
    response_model=KeepAliveStatusResponse,
    summary="Keep-alive status",
    description="Ping counters, budget and activation of the database keep-alive.",
)
async def keep_alive_status(admin: AdminUser, scheduler: Scheduler) -> KeepAliveStatusResponse:
    """Return the keep-alive scheduler snapshot."""
    return KeepAliveStatusResponse(**scheduler.snapshot())


@router.post(
    "/keep-alive/pause",
    response_model=KeepAliveStatusResponse,
    summary="Pause keep-alive",
)
async def pause_keep_alive(admin: AdminUser, scheduler: Scheduler) -> KeepAliveStatusResponse:
    """Stop pinging until resumed."""
    await scheduler.pause()
    return KeepAliveStatusResponse(**scheduler.snapshot())


@router.post(
    "/keep-alive/resume",
    response_model=KeepAliveStatusResponse,
    summary="Resume keep-alive",
    description="Resumes pinging. Resuming past the ping limit overrides it until the month ends.",
)
async def resume_keep_alive(admin: AdminUser, scheduler: Scheduler) -> KeepAliveStatusResponse:
    """Resume pinging."""
    await scheduler.resume()
    return KeepAliveStatusResponse(**scheduler.snapshot())


@router.get(
    "/ventas",
    response_model=SalesSummaryResponse,
    summary="Sales dashboard",
    description="Revenue and order counts over the most recent orders.",
)
async def sales_summary(admin: AdminUser) -> SalesSummaryResponse:
    """Return the sales summary."""
    service = SalesService()
    summary = await service.get_summary()
    return SalesSummaryResponse(**summary)

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from app.dependencies.services import get_report_service
from app.schemas.report import BillingReport, BillingReportRequest
from app.services import BillingReportService

router = APIRouter()


@router.post("/billing", response_model=BillingReport)
async def billing_report(
    req: BillingReportRequest,
    service: BillingReportService = Depends(get_report_service),
):
    return await service.generate(req)


@router.post("/billing/csv")
async def billing_report_csv(
    req: BillingReportRequest,
    service: BillingReportService = Depends(get_report_service),
) -> Response:
    report = await service.generate(req)
    filename = service.csv_filename(report)
    return Response(
        content=service.to_csv(report),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/billing/print", response_class=HTMLResponse)
async def billing_report_print(
    req: BillingReportRequest,
    service: BillingReportService = Depends(get_report_service),
) -> HTMLResponse:
    report = await service.generate(req)
    return HTMLResponse(content=service.to_html(report))

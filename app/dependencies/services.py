from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.clients.pos import PosApiClient
from app.config import Settings, get_settings
from app.schemas.report import BusinessInfo
from app.services import BillingReportService, BillingService, MenuService


@lru_cache(maxsize=1)
def get_pos_client_cached() -> PosApiClient:
    settings = get_settings()
    return PosApiClient(
        settings.pos_api_base_url,
        timeout=settings.pos_api_timeout,
        use_mock_data=settings.use_mock_data,
        token=settings.pos_api_token,
    )


def get_pos_client(settings: Settings = Depends(get_settings)) -> PosApiClient:
    return get_pos_client_cached()


def get_billing_service(
    client: PosApiClient = Depends(get_pos_client),
) -> BillingService:
    return BillingService(client)


def get_menu_service(
    client: PosApiClient = Depends(get_pos_client),
) -> MenuService:
    return MenuService(client)


def build_report_service(settings: Settings, bills: BillingService) -> BillingReportService:
    return BillingReportService(
        bills,
        business=BusinessInfo(name=settings.business_name, gstin=settings.business_gstin),
        brand=settings.report_brand,
        all_bills_limit=settings.all_bills_limit,
    )


def get_report_service(
    bills: BillingService = Depends(get_billing_service),
    settings: Settings = Depends(get_settings),
) -> BillingReportService:
    return build_report_service(settings, bills)

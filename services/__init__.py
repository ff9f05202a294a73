"""
Business logic services.

Each service handles one domain area.
"""

from services.customer_service import CustomerService, get_customer_service
from services.sales_service import SalesService, get_sales_service
from services.template_service import TemplateService, get_template_service
from services.customer_resolver import CustomerResolver, ResolvedCustomer
from services.import_service import ImportService, get_import_service

__all__ = [
    "CustomerService",
    "get_customer_service",
    "SalesService",
    "get_sales_service",
    "TemplateService",
    "get_template_service",
    "CustomerResolver",
    "ResolvedCustomer",
    "ImportService",
    "get_import_service",
]

"""Project and partner models for construction finance."""

from dataclasses import dataclass
from datetime import date

from buildledger.models.finance.enums import PartnerType, ProjectStatus


@dataclass
class Project:
    """Construction project (công trình)."""

    project_id: str
    code: str
    name: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    customer_name: str = ""
    contract_total_value: int | None = None
    manager_id: str | None = None
    address: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class Partner:
    """Customer, supplier or labor team."""

    partner_id: str
    code: str
    name: str
    partner_type: PartnerType
    tax_code: str | None = None
    phone: str | None = None
    status: str = "ACTIVE"

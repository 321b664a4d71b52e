"""Project and partner generators for construction finance."""

import random
from datetime import date, timedelta

from buildledger.generators.base import BaseGenerator
from buildledger.generators.pool import FakerPool
from buildledger.models.finance import Partner, PartnerType, Project, ProjectStatus


class ProjectGenerator(BaseGenerator):
    """Generate construction projects (công trình).

    Contract values are drawn between 500 million and 20 billion VND,
    rounded to the million.
    """

    PROJECT_KINDS = ["Nhà phố", "Biệt thự", "Nhà xưởng", "Văn phòng", "Cải tạo căn hộ"]

    STATUSES = list(ProjectStatus)
    STATUS_WEIGHTS = [0.70, 0.20, 0.05, 0.05]

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)
        self._counter = 0

    def generate(self, status: ProjectStatus | None = None) -> Project:
        """Generate a single project."""
        self._counter += 1
        customer = self.pool.name()
        kind = random.choice(self.PROJECT_KINDS)
        start = date.today() - timedelta(days=random.randint(30, 540))
        value = random.randint(500, 20_000) * 1_000_000

        return Project(
            project_id=self.pool.uuid(),
            code=f"CT{start:%y}-{self._counter:03d}",
            name=f"{kind} {customer}",
            status=status or random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0],
            customer_name=customer,
            contract_total_value=value,
            address=self.pool.address(),
            start_date=start,
            end_date=start + timedelta(days=random.randint(90, 720)),
        )


class PartnerGenerator(BaseGenerator):
    """Generate customers, suppliers and labor teams."""

    CODE_PREFIXES = {
        PartnerType.CUSTOMER: "KH",
        PartnerType.SUPPLIER: "NCC",
        PartnerType.LABOR: "DT",
        PartnerType.BOTH: "DT",
    }

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)
        self._counter = 0

    def generate(self, partner_type: PartnerType | None = None) -> Partner:
        """Generate a single partner of the given (or a random) type."""
        self._counter += 1
        partner_type = partner_type or random.choice(list(PartnerType))

        if partner_type == PartnerType.CUSTOMER:
            name = self.pool.name()
        elif partner_type == PartnerType.LABOR:
            name = f"Tổ đội {self.pool.name()}"
        else:
            name = self.pool.company()

        return Partner(
            partner_id=self.pool.uuid(),
            code=f"{self.CODE_PREFIXES[partner_type]}{self._counter:04d}",
            name=name,
            partner_type=partner_type,
            tax_code=self.pool.tax_code() if partner_type != PartnerType.LABOR else None,
            phone=self.pool.phone(),
        )

"""Contract generator for construction finance."""

import random
from datetime import timedelta
from typing import Iterator, Sequence

from buildledger.generators.base import BaseGenerator
from buildledger.generators.pool import FakerPool
from buildledger.models.finance import (
    Contract,
    ContractStatus,
    ContractType,
    Partner,
    PartnerType,
    Project,
)


class ContractGenerator(BaseGenerator):
    """Generate contracts around a project.

    Every project gets one REVENUE contract with the owner and a few
    expense contracts whose values are shares of the revenue value.
    """

    # Share of revenue value per expense contract type (min, max)
    VALUE_SHARES = {
        ContractType.SUPPLIER_MATERIAL: (0.15, 0.40),
        ContractType.LABOR: (0.10, 0.25),
        ContractType.SUB_CONTRACT: (0.05, 0.20),
    }

    PARTNER_TYPES = {
        ContractType.SUPPLIER_MATERIAL: (PartnerType.SUPPLIER, PartnerType.BOTH),
        ContractType.LABOR: (PartnerType.LABOR,),
        ContractType.SUB_CONTRACT: (PartnerType.SUPPLIER, PartnerType.BOTH),
    }

    NAME_PREFIXES = {
        ContractType.REVENUE: "HĐ thi công",
        ContractType.SUPPLIER_MATERIAL: "HĐ cung cấp vật tư",
        ContractType.LABOR: "HĐ nhân công",
        ContractType.SUB_CONTRACT: "HĐ thầu phụ",
    }

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)
        self._counter = 0

    def generate(
        self,
        project: Project,
        partner: Partner,
        contract_type: ContractType,
        value: int | None = None,
    ) -> Contract:
        """Generate a single contract between ``project`` and ``partner``."""
        self._counter += 1
        base_value = project.contract_total_value or 1_000_000_000
        if value is None:
            if contract_type == ContractType.REVENUE:
                value = base_value
            else:
                low, high = self.VALUE_SHARES[contract_type]
                value = round(base_value * random.uniform(low, high), -6)

        signed = project.start_date + timedelta(days=random.randint(0, 30)) if project.start_date else None
        return Contract(
            contract_id=self.pool.uuid(),
            contract_type=contract_type,
            value=int(value),
            status=random.choices(
                [ContractStatus.SIGNED, ContractStatus.COMPLETED, ContractStatus.DRAFT],
                weights=[0.75, 0.15, 0.10],
                k=1,
            )[0],
            project_id=project.project_id,
            partner_id=partner.partner_id,
            code=f"HD-{project.code}-{self._counter:03d}",
            name=f"{self.NAME_PREFIXES[contract_type]} {project.name}",
            signed_date=signed,
        )

    def generate_for_project(
        self,
        project: Project,
        customer: Partner,
        partners: Sequence[Partner],
    ) -> Iterator[Contract]:
        """Revenue contract with ``customer`` plus 1-3 expense contracts."""
        yield self.generate(project, customer, ContractType.REVENUE)

        num_expense = random.choices([1, 2, 3], weights=[0.3, 0.4, 0.3], k=1)[0]
        expense_types = random.sample(list(self.VALUE_SHARES), k=num_expense)
        for contract_type in expense_types:
            candidates = [p for p in partners if p.partner_type in self.PARTNER_TYPES[contract_type]]
            if not candidates:
                continue
            yield self.generate(project, random.choice(candidates), contract_type)

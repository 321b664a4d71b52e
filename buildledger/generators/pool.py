"""Pre-generated Faker values shared by the finance generators.

Faker calls are slow compared to ``random.choice``; a demo portfolio
needs thousands of partner names, addresses and phone numbers but only a
few hundred distinct ones. Pools are filled once and sampled afterwards.

Identifiers come from the seeded ``random`` module, so a seeded scenario
produces the same ids on every run.
"""

from __future__ import annotations

import random
import uuid as _uuid

from faker import Faker


def _generate_tax_code() -> str:
    """10-digit enterprise tax code (mã số thuế)."""
    return f"0{random.randint(100000000, 999999999)}"


class FakerPool:
    """Sampled pools of names, companies, addresses, phones and tax codes.

    Parameters
    ----------
    locale : str
        Faker locale (default ``vi_VN``).
    seed : int | None
        Seeds both Faker and the ``random`` module.
    pool_sizes : dict[str, int] | None
        Override default pool sizes per field.
    """

    DEFAULT_SIZES: dict[str, int] = {
        "name": 1000,
        "company": 300,
        "street": 500,
        "city": 100,
        "phone": 500,
        "tax_code": 500,
    }

    def __init__(
        self,
        locale: str = "vi_VN",
        seed: int | None = None,
        pool_sizes: dict[str, int] | None = None,
    ) -> None:
        sizes = {**self.DEFAULT_SIZES, **(pool_sizes or {})}
        fake = Faker(locale)
        if seed is not None:
            fake.seed_instance(seed)
            random.seed(seed)

        self._pools: dict[str, list[str]] = {
            "name": [fake.name() for _ in range(sizes["name"])],
            "company": [fake.company() for _ in range(sizes["company"])],
            "street": [fake.street_name() for _ in range(sizes["street"])],
            "city": [fake.city() for _ in range(sizes["city"])],
            "phone": [fake.phone_number() for _ in range(sizes["phone"])],
            "tax_code": [_generate_tax_code() for _ in range(sizes["tax_code"])],
        }
        self._issued: set[str] = set()

    def uuid(self) -> str:
        """Unique UUID4 hex drawn from the seeded ``random`` module."""
        while True:
            value = _uuid.UUID(int=random.getrandbits(128), version=4).hex
            if value not in self._issued:
                self._issued.add(value)
                return value

    def name(self) -> str:
        return random.choice(self._pools["name"])

    def company(self) -> str:
        return random.choice(self._pools["company"])

    def city(self) -> str:
        return random.choice(self._pools["city"])

    def street(self) -> str:
        return random.choice(self._pools["street"])

    def address(self) -> str:
        """``<số nhà> <đường>, <thành phố>``."""
        return f"{random.randint(1, 300)} {self.street()}, {self.city()}"

    def phone(self) -> str:
        return random.choice(self._pools["phone"])

    def tax_code(self) -> str:
        return random.choice(self._pools["tax_code"])

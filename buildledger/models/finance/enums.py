"""Enumeration types for construction finance entities."""

from enum import Enum


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    PAID = "PAID"
    REJECTED = "REJECTED"


class TransactionScope(str, Enum):
    PROJECT = "PROJECT"
    COMPANY_FIXED = "COMPANY_FIXED"
    COMMERCIAL = "COMMERCIAL"
    MARKETING = "MARKETING"
    OTHER = "OTHER"


class CostCenterType(str, Enum):
    PROJECT = "PROJECT"
    OFFICE = "OFFICE"
    STORE = "STORE"


class AccountType(str, Enum):
    CASH = "CASH"
    BANK = "BANK"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AccountOwner(str, Enum):
    COMPANY = "COMPANY"
    INDIVIDUAL = "INDIVIDUAL"


class ContractType(str, Enum):
    REVENUE = "REVENUE"
    SUPPLIER_MATERIAL = "SUPPLIER_MATERIAL"
    LABOR = "LABOR"
    SUB_CONTRACT = "SUB_CONTRACT"


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    SIGNED = "SIGNED"
    COMPLETED = "COMPLETED"


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"


class PartnerType(str, Enum):
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"
    LABOR = "LABOR"
    BOTH = "BOTH"


class MappingKey(str, Enum):
    MATERIAL = "MATERIAL"
    LABOR = "LABOR"
    MARKETING = "MARKETING"
    OFFICE = "OFFICE"
    OTHER = "OTHER"


class ObligationStatus(str, Enum):
    FULFILLED = "FULFILLED"
    PARTIAL = "PARTIAL"
    MISSING = "MISSING"


class ObligationSource(str, Enum):
    CONTRACT = "CONTRACT"
    ORPHAN_EXPENSE = "ORPHAN_EXPENSE"


class Permission(str, Enum):
    SYS_ADMIN = "SYS_ADMIN"
    SYS_CONFIG_EDIT = "SYS_CONFIG_EDIT"
    PROJECT_VIEW_ALL = "PROJECT_VIEW_ALL"
    PROJECT_VIEW_OWN = "PROJECT_VIEW_OWN"
    PROJECT_CREATE = "PROJECT_CREATE"
    PROJECT_EDIT = "PROJECT_EDIT"
    TRANS_CREATE = "TRANS_CREATE"
    TRANS_APPROVE = "TRANS_APPROVE"
    TRANS_PAY = "TRANS_PAY"
    TRANS_VIEW_ALL = "TRANS_VIEW_ALL"
    HR_VIEW_ALL = "HR_VIEW_ALL"
    HR_MANAGE = "HR_MANAGE"
    SALARY_VIEW_SELF = "SALARY_VIEW_SELF"
    SALARY_MANAGE = "SALARY_MANAGE"
    EMPLOYEE_MANAGE = "EMPLOYEE_MANAGE"
    OFFICE_VIEW = "OFFICE_VIEW"
    OFFICE_MANAGE = "OFFICE_MANAGE"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    PAY = "PAY"
    CONFIRM_INCOME = "CONFIRM_INCOME"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

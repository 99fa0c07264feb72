import enum


class Role(str, enum.Enum):
    APPLICANT = "APPLICANT"
    RECRUITER = "RECRUITER"


class JobRole(str, enum.Enum):
    FRONTEND_DEVELOPER = "FRONTEND_DEVELOPER"
    BACKEND_DEVELOPER = "BACKEND_DEVELOPER"
    FULLSTACK_DEVELOPER = "FULLSTACK_DEVELOPER"
    MOBILE_DEVELOPER = "MOBILE_DEVELOPER"
    DEVOPS_ENGINEER = "DEVOPS_ENGINEER"
    DATA_SCIENTIST = "DATA_SCIENTIST"
    PRODUCT_MANAGER = "PRODUCT_MANAGER"
    DESIGNER = "DESIGNER"


class Department(str, enum.Enum):
    ENGINEERING = "ENGINEERING"
    PRODUCT = "PRODUCT"
    DESIGN = "DESIGN"
    MARKETING = "MARKETING"
    SALES = "SALES"
    OPERATIONS = "OPERATIONS"


class CTCType(str, enum.Enum):
    RANGE = "RANGE"
    COMPETITIVE = "COMPETITIVE"
    UNDISCLOSED = "UNDISCLOSED"


class Currency(str, enum.Enum):
    INR = "INR"
    USD = "USD"
    EUR = "EUR"


class EmploymentType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERN = "INTERN"


class WorkMode(str, enum.Enum):
    ONSITE = "ONSITE"
    REMOTE = "REMOTE"
    HYBRID = "HYBRID"


class NoticePeriod(str, enum.Enum):
    IMMEDIATE = "IMMEDIATE"
    WITHIN_15_DAYS = "WITHIN_15_DAYS"
    WITHIN_30_DAYS = "WITHIN_30_DAYS"
    FLEXIBLE = "FLEXIBLE"


class CompanyType(str, enum.Enum):
    EARLY_STAGE_STARTUP = "EARLY_STAGE_STARTUP"
    GROWTH_STAGE_STARTUP = "GROWTH_STAGE_STARTUP"
    UNICORN = "UNICORN"
    PUBLIC = "PUBLIC"
    MNC = "MNC"
    NON_PROFIT = "NON_PROFIT"


class CompanySize(str, enum.Enum):
    SELF_EMPLOYED = "SELF_EMPLOYED"
    SIZE_2_10 = "SIZE_2_10"
    SIZE_11_50 = "SIZE_11_50"
    SIZE_51_200 = "SIZE_51_200"
    SIZE_201_500 = "SIZE_201_500"
    SIZE_501_1000 = "SIZE_501_1000"
    SIZE_1001_5000 = "SIZE_1001_5000"
    SIZE_5001_10000 = "SIZE_5001_10000"
    SIZE_10000_PLUS = "SIZE_10000_PLUS"


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"

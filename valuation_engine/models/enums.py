from enum import Enum


class RevenueSizeCategory(str, Enum):
    UNDER_500K = "UNDER_500K"
    FROM_500K_TO_1M = "FROM_500K_TO_1M"
    FROM_1M_TO_3M = "FROM_1M_TO_3M"
    FROM_3M_TO_10M = "FROM_3M_TO_10M"
    FROM_10M_TO_25M = "FROM_10M_TO_25M"
    OVER_25M = "OVER_25M"


class RevenueModel(str, Enum):
    PROJECT_BASED = "PROJECT_BASED"
    TRANSACTIONAL = "TRANSACTIONAL"
    RECURRING_CONTRACTS = "RECURRING_CONTRACTS"
    SUBSCRIPTION_SAAS = "SUBSCRIPTION_SAAS"


class GrossMarginProxy(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    GOOD = "GOOD"
    EXCELLENT = "EXCELLENT"


class LaborIntensity(str, Enum):
    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


class AssetIntensity(str, Enum):
    ASSET_HEAVY = "ASSET_HEAVY"
    MODERATE = "MODERATE"
    ASSET_LIGHT = "ASSET_LIGHT"


class OwnerInvolvement(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"
    MINIMAL = "MINIMAL"


class BriCategory(str, Enum):
    FINANCIAL = "FINANCIAL"
    TRANSFERABILITY = "TRANSFERABILITY"
    OPERATIONAL = "OPERATIONAL"
    MARKET = "MARKET"
    LEGAL_TAX = "LEGAL_TAX"
    PERSONAL = "PERSONAL"


class AdjustmentCategory(str, Enum):
    SIZE = "size"
    GROWTH = "growth"
    PROFITABILITY = "profitability"
    RISK = "risk"
    QUALITY = "quality"


class EbitdaAdjustmentType(str, Enum):
    ADD_BACK = "ADD_BACK"
    DEDUCTION = "DEDUCTION"


# Canonical category order used for scoring, reporting, and weight tables.
BRI_CATEGORIES: tuple[BriCategory, ...] = tuple(BriCategory)

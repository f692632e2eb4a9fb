"""
Storage slot keys and pricing constants.

Slot names match the keys the calculator has always written, so stores
created by earlier versions load unchanged.
"""


class StorageKeys:
    """Key-value slot names, one slot per logical record."""

    STARTING_FEE = "startingFee"
    PRICE_PER_CUBIC_FOOT = "pricePerCubicFoot"
    TAX_RATE = "taxRate"
    SHOW_TAX = "showTaxCalculator"
    SHOW_DISCOUNT = "showDiscount"
    DEFAULT_DISCOUNT_PERCENT = "defaultDiscountPercent"
    QUOTE_HISTORY = "quoteHistory"
    HAS_COMPLETED_ONBOARDING = "hasCompletedOnboarding"


class PricingConstants:
    """Constants used by the pricing engine."""

    # 4π truncated to two decimals. Saved quotes were priced with this value,
    # so it must not be replaced by math.pi.
    VOLUME_DIVISOR = 12.56

    # Defaults for a store with no prior state
    DEFAULT_STARTING_FEE = 0.0
    DEFAULT_PRICE_PER_CUBIC_FOOT = 10.0
    DEFAULT_TAX_RATE = 0.0
    DEFAULT_SHOW_TAX = False
    DEFAULT_SHOW_DISCOUNT = False
    DEFAULT_DISCOUNT_PERCENT = 0.0

    # Display precision
    MONEY_DECIMALS = 2
    VOLUME_DECIMALS = 2
